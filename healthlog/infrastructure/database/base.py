"""
SQLAlchemy Base 定义
"""
from datetime import datetime, timezone

from ulid import ULID
from sqlalchemy.orm import declarative_base

from healthlog.app.config import settings

Base = declarative_base()

# 数据表名前缀（来自配置，默认为空）
TABLE_PREFIX = settings.TABLE_PREFIX


def generate_ulid() -> str:
    """
    生成 ULID（Universally Unique Lexicographically Sortable Identifier）

    ULID 具有以下特性：
    - 26个字符（Base32编码）
    - 48位时间戳（毫秒） + 80位随机数
    - 按字典序排序即按时间排序
    - 全局唯一性

    Returns:
        str: ULID 字符串（26个字符）
    """
    return str(ULID())


def utcnow() -> datetime:
    """
    获取当前 UTC 时间（微秒精度）

    created_at 的应用侧默认值，保证同一秒内插入的记录也能按创建顺序排序。

    Returns:
        datetime: 带时区的当前时间
    """
    return datetime.now(timezone.utc)
