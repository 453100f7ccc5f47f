#!/usr/bin/env python
"""
数据库初始化脚本

功能：
- PostgreSQL：自动创建数据库（如果不存在）
- 验证数据库连接
- 创建血压、体重、体温、文档、用户五张表（已存在的表不受影响）

使用方式：
    python scripts/init_db.py
    python scripts/init_db.py --skip-tables
"""

import argparse
import sys
import os
from urllib.parse import urlparse, urlunparse

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import OperationalError, ProgrammingError, SQLAlchemyError

# 添加项目根目录到 Python 路径
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from healthlog.app.config import settings
from healthlog.infrastructure.database.base import Base
from healthlog.infrastructure.database import models  # noqa: F401


def ensure_psycopg3_sync_url(database_url: str) -> str:
    """
    确保 PostgreSQL URL 使用 psycopg3 驱动（同步模式）

    Args:
        database_url: 原始数据库 URL

    Returns:
        str: postgresql+psycopg:// 格式的 URL；非 PostgreSQL URL 原样返回
    """
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+psycopg://", 1)
    scheme, _, rest = database_url.partition("://")
    if scheme.startswith("postgresql+") and scheme != "postgresql+psycopg":
        return f"postgresql+psycopg://{rest}"
    return database_url


def is_postgresql(database_url: str) -> bool:
    """判断是否为 PostgreSQL 数据库"""
    return urlparse(database_url).scheme.startswith("postgresql")


def is_sqlite(database_url: str) -> bool:
    """判断是否为 SQLite 数据库"""
    return urlparse(database_url).scheme.startswith("sqlite")


def get_database_name(database_url: str) -> str:
    """
    从数据库 URL 中提取数据库名（SQLite 为文件路径）

    Args:
        database_url: 完整的数据库连接 URL

    Returns:
        数据库名
    """
    db_name = urlparse(database_url).path.lstrip("/")
    if not db_name:
        raise ValueError("数据库 URL 中未指定数据库名")
    return db_name


def create_database(database_url: str) -> bool:
    """
    创建 PostgreSQL 数据库（如果不存在）

    SQLite 数据库文件在首次连接时自动创建，无需处理。

    Args:
        database_url: 完整的数据库连接 URL

    Returns:
        bool: 成功返回 True，失败返回 False
    """
    if is_sqlite(database_url):
        print("✓ SQLite 数据库文件将在首次连接时创建")
        return True
    if not is_postgresql(database_url):
        print("✗ 不支持的数据库类型")
        return False

    db_name = get_database_name(database_url)
    parsed = urlparse(ensure_psycopg3_sync_url(database_url))
    server_url = urlunparse(parsed._replace(path="/postgres"))
    print(f"目标数据库: {db_name}")

    try:
        engine = create_engine(server_url, isolation_level="AUTOCOMMIT")
        with engine.connect() as conn:
            exists = conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :db_name"),
                {"db_name": db_name}
            ).fetchone() is not None

            if exists:
                print(f"✓ 数据库 '{db_name}' 已存在")
            else:
                print(f"正在创建数据库 '{db_name}'...")
                conn.execute(text(f'CREATE DATABASE "{db_name}"'))
                print(f"✓ 数据库 '{db_name}' 创建成功")
        engine.dispose()
        return True

    except OperationalError as e:
        print(f"✗ 数据库连接失败: {e}")
        print("  请检查：")
        print("  1. 数据库服务器是否已启动")
        print("  2. DATABASE_URL 中的用户名、密码、主机、端口是否正确")
        print("  3. 用户是否有创建数据库的权限")
        return False
    except ProgrammingError as e:
        print(f"✗ 创建数据库失败: {e}")
        return False


def check_database_connection(database_url: str) -> bool:
    """
    验证数据库连接

    Args:
        database_url: 完整的数据库连接 URL

    Returns:
        bool: 连接成功返回 True，否则返回 False
    """
    print("正在验证数据库连接...")
    try:
        engine = create_engine(ensure_psycopg3_sync_url(database_url))
        with engine.connect() as conn:
            ok = conn.execute(text("SELECT 1")).scalar() == 1
        engine.dispose()
    except SQLAlchemyError as e:
        print(f"✗ 数据库连接失败: {e}")
        print("  请检查 DATABASE_URL 配置是否正确")
        return False

    print("✓ 数据库连接验证成功" if ok else "✗ 数据库连接验证失败")
    return ok


def create_tables(database_url: str) -> bool:
    """
    创建全部数据表（已存在的表跳过）

    Args:
        database_url: 完整的数据库连接 URL

    Returns:
        bool: 成功返回 True，否则返回 False
    """
    try:
        engine = create_engine(ensure_psycopg3_sync_url(database_url))
        Base.metadata.create_all(engine, checkfirst=True)
        tables = inspect(engine).get_table_names()
        engine.dispose()
    except SQLAlchemyError as e:
        print(f"✗ 创建数据表失败: {e}")
        return False

    for name in sorted(Base.metadata.tables):
        mark = "✓" if name in tables else "✗"
        print(f"  {mark} {name}")
    return True


def main():
    """主函数"""
    parser = argparse.ArgumentParser(
        description="数据库初始化脚本",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例：
  # 创建数据库与数据表
  python scripts/init_db.py

  # 仅创建数据库（数据表交给 alembic upgrade head）
  python scripts/init_db.py --skip-tables
        """
    )
    parser.add_argument(
        "--skip-tables",
        action="store_true",
        help="不创建数据表，只创建数据库并验证连接"
    )

    args = parser.parse_args()

    print("=" * 60)
    print("数据库初始化脚本")
    print("=" * 60)
    print()

    database_url = settings.DB_URI
    if not database_url:
        print("✗ DATABASE_URL 配置为空")
        sys.exit(1)

    print(f"数据库类型: {'PostgreSQL' if is_postgresql(database_url) else 'SQLite' if is_sqlite(database_url) else '未知'}")
    print()

    print("步骤 1: 创建数据库")
    print("-" * 60)
    if not create_database(database_url):
        print()
        print("数据库初始化失败，请检查错误信息并重试。")
        sys.exit(1)
    print()

    print("步骤 2: 验证数据库连接")
    print("-" * 60)
    if not check_database_connection(database_url):
        print()
        print("数据库连接验证失败，请检查错误信息并重试。")
        sys.exit(1)
    print()

    if not args.skip_tables:
        print("步骤 3: 创建数据表")
        print("-" * 60)
        if not create_tables(database_url):
            print()
            print("数据表创建失败，请检查错误信息并重试。")
            sys.exit(1)
        print()

    print("=" * 60)
    print("✓ 数据库初始化完成！")
    print("=" * 60)
    print()
    print("下一步：")
    print("  启动应用: uvicorn healthlog.main:app --reload")


if __name__ == "__main__":
    main()
