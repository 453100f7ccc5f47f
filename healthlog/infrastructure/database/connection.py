"""
数据库连接和会话管理
"""
import logging
from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)
from typing import AsyncIterator, Optional

from healthlog.app.config import settings

logger = logging.getLogger(__name__)

# 全局变量
_async_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def build_async_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    根据连接URL创建异步引擎

    SQLite（aiosqlite）不支持连接池大小参数，仅 PostgreSQL 使用连接池配置。

    Args:
        database_url: 数据库连接URL
        echo: 是否输出SQL日志

    Returns:
        AsyncEngine: SQLAlchemy 异步引擎
    """
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=echo)
    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,  # 连接前检查连接是否有效
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
    )


def get_async_engine() -> AsyncEngine:
    """
    获取异步数据库引擎（单例模式）

    Returns:
        AsyncEngine: SQLAlchemy 异步引擎
    """
    global _async_engine
    if _async_engine is None:
        _async_engine = build_async_engine(settings.ASYNC_DB_URI, echo=settings.DB_ECHO)
    return _async_engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    获取异步会话工厂（单例模式）

    Returns:
        async_sessionmaker: 异步会话工厂
    """
    global _session_factory
    if _session_factory is None:
        engine = get_async_engine()
        _session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """
    事务作用域

    正常退出时提交，任何异常都回滚后重新抛出。

    Args:
        session_factory: 异步会话工厂

    Yields:
        AsyncSession: 处于事务中的会话
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except BaseException:
            await session.rollback()
            raise


async def dispose_engine() -> None:
    """关闭全局引擎并清空单例"""
    global _async_engine, _session_factory
    if _async_engine is not None:
        await _async_engine.dispose()
        logger.info("数据库引擎已关闭")
    _async_engine = None
    _session_factory = None
