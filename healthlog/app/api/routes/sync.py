"""
汇总、导出、批量同步路由
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from healthlog.app.api.dependencies import ServiceContainer, get_current_caller, get_services
from healthlog.app.api.schemas.common import DataResponse
from healthlog.app.api.schemas.sync import ExportData, SummaryData, SyncResponse
from healthlog.domain.context import CallerIdentity

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/summary", response_model=DataResponse[SummaryData])
async def get_summary(
    caller: CallerIdentity = Depends(get_current_caller),
    services: ServiceContainer = Depends(get_services),
):
    """各类型记录数"""
    result = await services.sync.summary(caller.owner_key)
    return {"data": result.unwrap()}


@router.get("/export", response_model=DataResponse[ExportData])
async def export_records(
    caller: CallerIdentity = Depends(get_current_caller),
    services: ServiceContainer = Depends(get_services),
):
    """导出全部记录（不分页）"""
    result = await services.sync.export_all(caller.owner_key)
    return {"data": result.unwrap()}


@router.post("/sync", response_model=SyncResponse)
async def sync_records(
    payload: Dict[str, Any] = Body(...),
    caller: CallerIdentity = Depends(get_current_caller),
    services: ServiceContainer = Depends(get_services),
):
    """
    全量替换血压、体重、体温记录

    请求体：{"bp": [...], "weight": [...], "temp": [...]}。
    提交的快照会覆盖现有数据，缺少必填字段的条目被跳过并在 skipped 中返回。
    """
    result = await services.sync.replace_all(
        caller.owner_key,
        payload,
        display_name=caller.display_name,
    )
    report = result.unwrap()
    return SyncResponse(**report.to_dict())
