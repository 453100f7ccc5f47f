"""
管理路由
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from healthlog.app.api.dependencies import ServiceContainer, get_services
from healthlog.app.api.schemas.common import OkResponse
from healthlog.domain.errors import StorageError
from healthlog.infrastructure.database.schema import init_schema

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin")


@router.post("/init", response_model=OkResponse)
async def init_database(services: ServiceContainer = Depends(get_services)):
    """
    初始化数据表（幂等，可重复调用）

    Returns:
        {"ok": true}
    """
    try:
        await init_schema(services.engine)
    except SQLAlchemyError as e:
        logger.error(f"初始化数据表失败: {e}", exc_info=True)
        raise StorageError("初始化数据表失败") from e
    return OkResponse()
