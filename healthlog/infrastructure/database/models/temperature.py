"""
体温记录模型
"""
from sqlalchemy import Column, Numeric, String, Date, DateTime, Text
from sqlalchemy.sql import func as sql_func

from healthlog.infrastructure.database.base import Base, TABLE_PREFIX, generate_ulid, utcnow


class TemperatureRecord(Base):
    """体温记录模型"""

    __tablename__ = f"{TABLE_PREFIX}temperature_entries"

    id = Column(String(50), primary_key=True, index=True, default=generate_ulid, comment="记录ID（ULID）")
    user_email = Column(String(255), nullable=False, index=True, comment="所属用户（owner key）")
    entry_date = Column(Date, nullable=False, index=True, comment="测量日期")
    temperature = Column(
        Numeric(4, 1, asdecimal=True),
        nullable=False,
        comment="体温（℃，最多3位整数+1位小数）"
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
        return f"<TemperatureRecord(id={self.id}, user_email={self.user_email}, temperature={self.temperature})>"
