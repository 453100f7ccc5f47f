"""
文档记录模型
"""
from sqlalchemy import Column, String, Date, DateTime, Text
from sqlalchemy.sql import func as sql_func

from healthlog.infrastructure.database.base import Base, TABLE_PREFIX, generate_ulid, utcnow


class DocumentRecord(Base):
    """文档记录模型（文件内容保存在 BlobStore，表中只保存URL句柄）"""

    __tablename__ = f"{TABLE_PREFIX}documents"

    id = Column(String(50), primary_key=True, index=True, default=generate_ulid, comment="记录ID（ULID）")
    user_email = Column(String(255), nullable=False, index=True, comment="所属用户（owner key）")
    entry_date = Column(Date, nullable=False, index=True, comment="文档日期")
    doc_type = Column(Text, nullable=False, comment="文档类型（自由文本）")
    file_name = Column(Text, nullable=False, comment="原始文件名")
    file_url = Column(Text, nullable=False, comment="文件URL句柄")
    file_size = Column(Text, nullable=False, comment="文件字节数（文本）")
    notes = Column(Text, nullable=True, comment="备注（可选）")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=sql_func.now(),
        default=utcnow,
        comment="创建时间（自动生成）"
    )

    def __repr__(self):
        return (
            f"<DocumentRecord(id={self.id}, user_email={self.user_email}, "
            f"doc_type={self.doc_type}, file_name={self.file_name})>"
        )
