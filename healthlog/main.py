"""
FastAPI 应用入口

运行方式：
    方式1（推荐）：直接运行
        python -m healthlog.main

    方式2：使用 uvicorn 命令
        uvicorn healthlog.main:app --reload --host 0.0.0.0 --port 8000
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from healthlog.app.config import Settings, settings as default_settings

# 配置日志系统
logging.basicConfig(
    level=getattr(logging, default_settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from healthlog import __version__
from healthlog.app.api.dependencies import build_services
from healthlog.app.api.routes import router
from healthlog.app.api.session import SessionResolver, build_session_resolver
from healthlog.app.middleware.exception_handler import (
    domain_exception_handler,
    exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from healthlog.app.middleware.logging import LoggingMiddleware
from healthlog.domain.errors import HealthLogError
from healthlog.infrastructure.database.connection import (
    dispose_engine,
    get_async_engine,
    get_session_factory,
)
from healthlog.infrastructure.database.schema import init_schema
from healthlog.infrastructure.storage import BlobStore, LocalBlobStore

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[AsyncEngine] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    blob_store: Optional[BlobStore] = None,
    session_resolver: Optional[SessionResolver] = None,
) -> FastAPI:
    """
    创建 FastAPI 应用

    未传入的协作者按配置创建：全局数据库引擎、本地文件存储、按 AUTH_MODE 选择的身份解析器。

    Args:
        settings: 应用配置
        engine: 异步数据库引擎
        session_factory: 异步会话工厂（与 engine 一起传入）
        blob_store: 文件存储
        session_resolver: 身份解析器

    Returns:
        FastAPI: 应用实例
    """
    settings = settings or default_settings
    owns_engine = engine is None
    if engine is None:
        engine = get_async_engine()
        session_factory = get_session_factory()
    elif session_factory is None:
        session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    local_blob_dir = None
    if blob_store is None:
        local_blob_dir = settings.blob_storage_path
        blob_store = LocalBlobStore(local_blob_dir, settings.BLOB_BASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """应用生命周期管理"""
        logger.info("正在启动应用...")
        if settings.INIT_SCHEMA_ON_STARTUP:
            await init_schema(engine)
        logger.info(f"应用启动完成（身份解析: {settings.AUTH_MODE}）")

        yield

        logger.info("正在关闭应用...")
        if owns_engine:
            await dispose_engine()
        logger.info("应用已关闭")

    app = FastAPI(
        title="HealthLog",
        description="个人健康指标记录服务：血压、体重、体温、文档",
        version=__version__,
        lifespan=lifespan
    )

    app.state.services = build_services(
        engine,
        session_factory,
        blob_store,
        max_upload_bytes=settings.MAX_UPLOAD_BYTES,
    )
    app.state.session_resolver = session_resolver or build_session_resolver(settings)
    app.state.collapse_storage_errors = settings.COLLAPSE_STORAGE_ERRORS

    # 配置 CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 添加日志中间件
    app.add_middleware(LoggingMiddleware)

    # 注册异常处理器
    app.add_exception_handler(HealthLogError, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    # 注册路由
    app.include_router(router)

    # 本地存储的文件通过 URL 句柄直接访问
    if local_blob_dir is not None and settings.BLOB_BASE_URL.startswith("/"):
        app.mount(
            settings.BLOB_BASE_URL,
            StaticFiles(directory=str(local_blob_dir), check_dir=False),
            name="blobs"
        )

    @app.get("/health")
    async def health_check():
        """
        健康检查接口

        Returns:
            健康状态信息
        """
        return {"status": "ok", "version": __version__}

    return app


app = create_app()


def run_server() -> None:
    """
    通过 uvicorn 启动服务，端口与主机从 .env 读取
    """
    uvicorn.run(
        "healthlog.main:app",
        host=default_settings.APP_HOST,
        port=default_settings.APP_PORT,
        reload=default_settings.DEBUG,
        log_level=default_settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run_server()
