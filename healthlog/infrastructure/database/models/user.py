"""
用户模型
"""
from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.sql import func as sql_func

from healthlog.infrastructure.database.base import Base, TABLE_PREFIX, generate_ulid, utcnow


class User(Base):
    """用户模型（其他表仅按 email 值引用，不建立外键）"""

    __tablename__ = f"{TABLE_PREFIX}users"

    id = Column(
        String(50),
        primary_key=True,
        index=True,
        default=generate_ulid,
        comment="用户ID（ULID）"
    )
    email = Column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="用户邮箱（owner key，唯一）"
    )
    name = Column(
        Text,
        nullable=True,
        comment="显示名"
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=sql_func.now(),
        default=utcnow,
        comment="创建时间（自动生成）"
    )

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
