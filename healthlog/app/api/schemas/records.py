"""
血压、体重、体温记录相关Schema

请求字段全部可选：缺失字段由服务层统一校验并返回 400，而不是在解析阶段返回 422。
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple, Type
from pydantic import BaseModel, ConfigDict, Field


class BloodPressureRecordCreate(BaseModel):
    """创建血压记录请求"""
    entry_date: Optional[str] = Field(None, description="测量日期（YYYY-MM-DD、YYYY/MM/DD 等常见格式）")
    systolic: Optional[int] = Field(None, description="收缩压（mmHg，必须大于0）")
    diastolic: Optional[int] = Field(None, description="舒张压（mmHg，必须大于0）")
    notes: Optional[str] = Field(None, description="备注")


class BloodPressureRecordResponse(BaseModel):
    """血压记录响应"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    entry_date: date
    systolic: int
    diastolic: int
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class WeightRecordCreate(BaseModel):
    """创建体重记录请求"""
    entry_date: Optional[str] = Field(None, description="测量日期（YYYY-MM-DD、YYYY/MM/DD 等常见格式）")
    weight: Optional[Decimal] = Field(None, description="体重（kg，必须大于0）")
    notes: Optional[str] = Field(None, description="备注")


class WeightRecordResponse(BaseModel):
    """体重记录响应（weight 以字符串形式返回，保留存储精度）"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    entry_date: date
    weight: Decimal
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class TemperatureRecordCreate(BaseModel):
    """创建体温记录请求"""
    entry_date: Optional[str] = Field(None, description="测量日期（YYYY-MM-DD、YYYY/MM/DD 等常见格式）")
    temperature: Optional[Decimal] = Field(None, description="体温（℃，必须大于0）")
    notes: Optional[str] = Field(None, description="备注")


class TemperatureRecordResponse(BaseModel):
    """体温记录响应"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    entry_date: date
    temperature: Decimal
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class RecordStatsResponse(BaseModel):
    """记录统计概览"""
    count: int
    latest: str
    average: Dict[str, str]
    delta: Dict[str, str]
    status: Optional[str] = None
    level: Optional[str] = None
    weekly: Optional[Dict[str, str]] = None
    monthly: Optional[Dict[str, str]] = None


# 类型键 -> (创建请求Schema, 响应Schema)
RECORD_SCHEMAS: Dict[str, Tuple[Type[BaseModel], Type[BaseModel]]] = {
    "bp": (BloodPressureRecordCreate, BloodPressureRecordResponse),
    "weight": (WeightRecordCreate, WeightRecordResponse),
    "temp": (TemperatureRecordCreate, TemperatureRecordResponse),
}
