"""
API 依赖注入
"""
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from healthlog.domain.context import CallerIdentity
from healthlog.domain.descriptors import NUMERIC_DESCRIPTORS
from healthlog.domain.services import DocumentService, RecordService, SyncService
from healthlog.infrastructure.storage import BlobStore


@dataclass
class ServiceContainer:
    """应用级服务集合，保存在 app.state.services"""
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    records: Dict[str, RecordService]
    documents: DocumentService
    sync: SyncService


def build_services(
    engine: AsyncEngine,
    session_factory: async_sessionmaker[AsyncSession],
    blob_store: BlobStore,
    max_upload_bytes: Optional[int] = None,
) -> ServiceContainer:
    """
    创建全部服务

    Args:
        engine: 异步数据库引擎
        session_factory: 异步会话工厂
        blob_store: 文件存储
        max_upload_bytes: 上传文件大小上限

    Returns:
        ServiceContainer: 服务集合
    """
    return ServiceContainer(
        engine=engine,
        session_factory=session_factory,
        records={
            descriptor.key: RecordService(session_factory, descriptor)
            for descriptor in NUMERIC_DESCRIPTORS
        },
        documents=DocumentService(session_factory, blob_store, max_upload_bytes),
        sync=SyncService(session_factory),
    )


def get_services(request: Request) -> ServiceContainer:
    """获取服务集合（依赖注入）"""
    return request.app.state.services


async def get_current_caller(request: Request) -> CallerIdentity:
    """
    解析当前调用方身份（依赖注入）

    Raises:
        AuthorizationError: 身份无法解析
    """
    return await request.app.state.session_resolver.resolve(request)
