"""
数据库表结构初始化
"""
import logging
from sqlalchemy.ext.asyncio import AsyncEngine

from healthlog.infrastructure.database.base import Base
from healthlog.infrastructure.database import models  # noqa: F401  注册所有模型

logger = logging.getLogger(__name__)


async def init_schema(engine: AsyncEngine) -> None:
    """
    创建所有数据表（幂等，已存在的表会跳过）

    Args:
        engine: 异步数据库引擎
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    logger.info(f"数据表初始化完成: {sorted(Base.metadata.tables.keys())}")
