"""
血压记录模型
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, Text
from sqlalchemy.sql import func as sql_func

from healthlog.infrastructure.database.base import Base, TABLE_PREFIX, generate_ulid, utcnow


class BloodPressureRecord(Base):
    """血压记录模型"""

    __tablename__ = f"{TABLE_PREFIX}blood_pressure"

    id = Column(
        String(50),
        primary_key=True,
        index=True,
        default=generate_ulid,
        comment="记录ID（ULID）"
    )
    user_email = Column(
        String(255),
        nullable=False,
        index=True,
        comment="所属用户（owner key），不设外键"
    )
    entry_date = Column(
        Date,
        nullable=False,
        index=True,
        comment="测量日期"
    )
    systolic = Column(
        Integer,
        nullable=False,
        comment="收缩压（高压，单位：mmHg）"
    )
    diastolic = Column(
        Integer,
        nullable=False,
        comment="舒张压（低压，单位：mmHg）"
    )
    notes = Column(
        Text,
        nullable=True,
        comment="备注（可选）"
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=sql_func.now(),
        default=utcnow,
        comment="创建时间（自动生成）"
    )

    def __repr__(self):
        return (
            f"<BloodPressureRecord(id={self.id}, user_email={self.user_email}, "
            f"systolic={self.systolic}, diastolic={self.diastolic})>"
        )
