"""
血压、体重、体温记录路由
三类记录的路由由同一个工厂函数按描述符生成
"""
import logging
from datetime import date
from typing import List, Optional, Type

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from healthlog.app.api.dependencies import ServiceContainer, get_current_caller, get_services
from healthlog.app.api.schemas.common import DataResponse, OkResponse
from healthlog.app.api.schemas.records import RECORD_SCHEMAS, RecordStatsResponse
from healthlog.domain.context import CallerIdentity
from healthlog.domain.descriptors import NUMERIC_DESCRIPTORS, RecordDescriptor

logger = logging.getLogger(__name__)


def build_record_router(
    descriptor: RecordDescriptor,
    create_schema: Type[BaseModel],
    response_schema: Type[BaseModel],
) -> APIRouter:
    """
    为一种记录类型生成 list / create / delete / stats 路由

    Args:
        descriptor: 记录类型描述符
        create_schema: 创建请求Schema
        response_schema: 响应Schema

    Returns:
        APIRouter: 挂载在 /records/<path> 下的路由
    """
    router = APIRouter(prefix=f"/records/{descriptor.path}")

    @router.get(
        "",
        response_model=DataResponse[List[response_schema]],
        name=f"list_{descriptor.key}_records",
    )
    async def list_records(
        caller: CallerIdentity = Depends(get_current_caller),
        services: ServiceContainer = Depends(get_services),
    ):
        """查询当前用户的记录列表（entry_date 倒序）"""
        result = await services.records[descriptor.key].list(caller.owner_key)
        return {"data": result.unwrap()}

    @router.post(
        "",
        response_model=DataResponse[response_schema],
        status_code=status.HTTP_201_CREATED,
        name=f"create_{descriptor.key}_record",
    )
    async def create_record(
        data: create_schema,
        caller: CallerIdentity = Depends(get_current_caller),
        services: ServiceContainer = Depends(get_services),
    ):
        """创建记录，缺少必填字段返回 400"""
        result = await services.records[descriptor.key].create(
            caller.owner_key,
            data.model_dump(),
            display_name=caller.display_name,
        )
        return {"data": result.unwrap()}

    @router.get(
        "/stats",
        response_model=DataResponse[RecordStatsResponse],
        name=f"{descriptor.key}_record_stats",
    )
    async def record_stats(
        today: Optional[date] = Query(None, description="统计基准日期（默认当天）"),
        caller: CallerIdentity = Depends(get_current_caller),
        services: ServiceContainer = Depends(get_services),
    ):
        """统计概览：最新值、平均值、差值、分级、近7天/30天平均"""
        result = await services.records[descriptor.key].stats(caller.owner_key, today=today)
        return {"data": result.unwrap()}

    @router.delete("/{id}", response_model=OkResponse, name=f"delete_{descriptor.key}_record")
    async def delete_record(
        id: str,
        caller: CallerIdentity = Depends(get_current_caller),
        services: ServiceContainer = Depends(get_services),
    ):
        """删除记录；记录不存在或不属于当前用户时同样返回 ok"""
        result = await services.records[descriptor.key].delete(caller.owner_key, id)
        result.unwrap()
        return OkResponse()

    return router


router = APIRouter()
for _descriptor in NUMERIC_DESCRIPTORS:
    _create_schema, _response_schema = RECORD_SCHEMAS[_descriptor.key]
    router.include_router(build_record_router(_descriptor, _create_schema, _response_schema))
