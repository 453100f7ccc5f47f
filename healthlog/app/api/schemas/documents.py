"""
文档相关Schema
"""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class DocumentRecordResponse(BaseModel):
    """文档记录响应"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    entry_date: date
    doc_type: str
    file_name: str
    file_url: str
    file_size: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
