"""
数据库模块
"""
from healthlog.infrastructure.database.base import Base, TABLE_PREFIX, generate_ulid
from healthlog.infrastructure.database.connection import (
    build_async_engine,
    get_async_engine,
    get_session_factory,
    session_scope,
    dispose_engine,
)
from healthlog.infrastructure.database.schema import init_schema
from healthlog.infrastructure.database import models  # 导入所有模型

__all__ = [
    "Base",
    "TABLE_PREFIX",
    "generate_ulid",
    "build_async_engine",
    "get_async_engine",
    "get_session_factory",
    "session_scope",
    "dispose_engine",
    "init_schema",
]
