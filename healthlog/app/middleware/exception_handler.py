"""
异常处理中间件

领域错误按类型显式映射状态码：
- ValidationError -> 400
- AuthorizationError -> 401
- StorageError -> 503（COLLAPSE_STORAGE_ERRORS 开启时为 401）
各类错误分别以不同级别记录日志，便于区分"未登录"与"存储故障"。
"""
import logging
from typing import Dict, Type
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from healthlog.domain.errors import (
    AuthorizationError,
    HealthLogError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: Dict[Type[HealthLogError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthorizationError: status.HTTP_401_UNAUTHORIZED,
    StorageError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for_error(exc: HealthLogError, collapse_storage_errors: bool = False) -> int:
    """
    获取领域错误对应的 HTTP 状态码

    Args:
        exc: 领域错误
        collapse_storage_errors: 是否将存储错误映射为 401

    Returns:
        HTTP 状态码
    """
    if isinstance(exc, StorageError) and collapse_storage_errors:
        return status.HTTP_401_UNAUTHORIZED
    for error_type, code in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def domain_exception_handler(request: Request, exc: HealthLogError):
    """
    领域错误处理器

    Args:
        request: FastAPI 请求对象
        exc: 领域错误

    Returns:
        JSON 响应
    """
    collapse = getattr(request.app.state, "collapse_storage_errors", False)
    status_code = status_for_error(exc, collapse)

    if isinstance(exc, StorageError):
        logger.error(f"[存储错误] {request.method} {request.url.path} - {exc.message} -> {status_code}")
    elif isinstance(exc, AuthorizationError):
        logger.warning(f"[身份校验失败] {request.method} {request.url.path} - {exc.message}")
    else:
        logger.info(f"[请求数据无效] {request.method} {request.url.path} - {exc.to_dict()}")

    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def exception_handler(request: Request, exc: Exception):
    """
    全局异常处理器

    Args:
        request: FastAPI 请求对象
        exc: 异常对象

    Returns:
        JSON 响应
    """
    logger.error(f"未处理的异常: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "Internal server error"
        }
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    请求解析异常处理器

    请求体格式错误、字段类型错误统一按校验失败返回 400。

    Args:
        request: FastAPI 请求对象
        exc: 验证异常对象

    Returns:
        JSON 响应
    """
    errors = exc.errors()
    logger.warning(f"请求验证失败: {request.method} {request.url.path} - {errors}")

    fields = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        fields.append(".".join(loc) or "body")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": ValidationError.kind,
            "detail": "Invalid request",
            "fields": fields
        }
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    HTTP 异常处理器

    Args:
        request: FastAPI 请求对象
        exc: HTTP 异常对象

    Returns:
        JSON 响应
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail
        }
    )
