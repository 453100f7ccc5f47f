"""
服务层辅助工具方法
统一存储失败、校验失败的日志与错误构建
"""
import logging

from healthlog.domain.errors import Err, StorageError, ValidationError

logger = logging.getLogger(__name__)


def storage_failure(action: str, owner_key: str, exc: BaseException) -> Err:
    """
    记录存储失败日志并构建 Err(StorageError)

    Args:
        action: 操作描述（用于日志）
        owner_key: 用户 owner key
        exc: 原始异常

    Returns:
        Err: 携带 StorageError 的失败结果
    """
    logger.error(f"{action}失败（存储错误）: owner={owner_key}, error={exc}", exc_info=True)
    return Err(StorageError(f"{action}失败，存储服务暂不可用"))


def validation_failure(action: str, owner_key: str, error: ValidationError) -> Err:
    """
    记录校验失败日志并构建 Err(ValidationError)

    Args:
        action: 操作描述（用于日志）
        owner_key: 用户 owner key
        error: 校验错误

    Returns:
        Err: 携带 ValidationError 的失败结果
    """
    logger.warning(f"{action}校验失败: owner={owner_key}, fields={error.fields}")
    return Err(error)
