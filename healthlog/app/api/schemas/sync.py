"""
汇总、导出、同步相关Schema
"""
from typing import Dict, List
from pydantic import BaseModel

from healthlog.app.api.schemas.documents import DocumentRecordResponse
from healthlog.app.api.schemas.records import (
    BloodPressureRecordResponse,
    TemperatureRecordResponse,
    WeightRecordResponse,
)


class SummaryData(BaseModel):
    """各类型记录数"""
    bp: int
    weight: int
    temp: int
    docs: int


class ExportData(BaseModel):
    """全部记录导出"""
    bp: List[BloodPressureRecordResponse]
    weight: List[WeightRecordResponse]
    temp: List[TemperatureRecordResponse]
    docs: List[DocumentRecordResponse]


class SkippedItemResponse(BaseModel):
    """同步时被跳过的条目"""
    kind: str
    index: int
    fields: List[str]


class SyncResponse(BaseModel):
    """同步结果"""
    ok: bool = True
    inserted: Dict[str, int]
    skipped: List[SkippedItemResponse]
