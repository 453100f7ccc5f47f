"""
数据库仓储模块
"""
from healthlog.infrastructure.database.repository.base import BaseRepository
from healthlog.infrastructure.database.repository.owned_record_repository import OwnedRecordRepository
from healthlog.infrastructure.database.repository.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "OwnedRecordRepository",
    "UserRepository",
]
