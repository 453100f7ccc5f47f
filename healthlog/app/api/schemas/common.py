"""
通用响应Schema
"""
from typing import Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """数据响应包装：{"data": ...}"""
    data: T


class OkResponse(BaseModel):
    """操作确认响应：{"ok": true}"""
    ok: bool = True
