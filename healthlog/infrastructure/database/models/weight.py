"""
体重记录模型
"""
from sqlalchemy import Column, Numeric, String, Date, DateTime, Text
from sqlalchemy.sql import func as sql_func

from healthlog.infrastructure.database.base import Base, TABLE_PREFIX, generate_ulid, utcnow


class WeightRecord(Base):
    """体重记录模型"""

    __tablename__ = f"{TABLE_PREFIX}weight_entries"

    id = Column(String(50), primary_key=True, index=True, default=generate_ulid, comment="记录ID（ULID）")
    user_email = Column(String(255), nullable=False, index=True, comment="所属用户（owner key）")
    entry_date = Column(Date, nullable=False, index=True, comment="测量日期")
    weight = Column(
        Numeric(6, 2, asdecimal=True),
        nullable=False,
        comment="体重（kg，最多4位整数+2位小数）"
    )
    notes = Column(Text, nullable=True, comment="备注（可选）")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=sql_func.now(),
        default=utcnow,
        comment="创建时间（自动生成）"
    )

    def __repr__(self):
        return f"<WeightRecord(id={self.id}, user_email={self.user_email}, weight={self.weight})>"
