"""
API路由模块
聚合所有子路由
"""
from fastapi import APIRouter

from healthlog.app.api.routes.records import router as records_router
from healthlog.app.api.routes.documents import router as documents_router
from healthlog.app.api.routes.sync import router as sync_router
from healthlog.app.api.routes.admin import router as admin_router

# 创建主路由
router = APIRouter()

# 注册子路由
router.include_router(records_router, tags=["健康记录"])
router.include_router(documents_router, tags=["文档"])
router.include_router(sync_router, tags=["汇总与同步"])
router.include_router(admin_router, tags=["管理"])

__all__ = ["router"]
