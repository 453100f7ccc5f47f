"""
测试配置和共享 Fixtures

数据库使用内存 SQLite（aiosqlite + StaticPool），每个测试函数一个独立的库；
文件存储使用 pytest 提供的临时目录。
"""
import sys
from datetime import date
from pathlib import Path

# 将项目根目录添加到 Python 路径
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from healthlog.app.api.session import HeaderSessionResolver
from healthlog.app.config import Settings
from healthlog.infrastructure.database.schema import init_schema
from healthlog.infrastructure.storage import LocalBlobStore
from healthlog.main import create_app

TEST_DATABASE_URL = "sqlite+aiosqlite://"

# 固定统计基准日期，避免测试结果随运行日期变化
TODAY = date(2024, 3, 20)


@pytest.fixture
def today():
    """统计基准日期"""
    return TODAY


@pytest_asyncio.fixture(scope="function")
async def test_db_engine():
    """创建内存数据库引擎并建表"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_schema(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_db_engine):
    """异步会话工厂"""
    return async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_db_session(session_factory):
    """单个数据库会话（仓储测试使用，测试结束后回滚）"""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def blob_root(tmp_path):
    """本地文件存储根目录"""
    return tmp_path / "blobs"


@pytest.fixture
def blob_store(blob_root):
    """本地文件存储"""
    return LocalBlobStore(blob_root, "/blobs")


@pytest.fixture
def test_settings():
    """header 模式的应用配置"""
    return Settings(
        AUTH_MODE="header",
        MAX_UPLOAD_BYTES=1024,
        COLLAPSE_STORAGE_ERRORS=False,
        INIT_SCHEMA_ON_STARTUP=False,
    )


@pytest.fixture
def test_app(test_settings, test_db_engine, session_factory, blob_store):
    """绑定测试数据库和临时文件存储的应用"""
    return create_app(
        settings=test_settings,
        engine=test_db_engine,
        session_factory=session_factory,
        blob_store=blob_store,
        session_resolver=HeaderSessionResolver("X-Owner-Key", "X-Owner-Name"),
    )


@pytest_asyncio.fixture
async def client(test_app):
    """HTTP 测试客户端"""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
def owner_headers():
    """构建携带 owner key 的请求头"""
    def _build(owner_key: str, name: str = None) -> dict:
        headers = {"X-Owner-Key": owner_key}
        if name:
            headers["X-Owner-Name"] = name
        return headers
    return _build
