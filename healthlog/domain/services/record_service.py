"""
通用记录服务
血压、体重、体温共用同一实现，差异只体现在 RecordDescriptor 中
"""
import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from healthlog.domain import metrics
from healthlog.domain.descriptors import RecordDescriptor, clean_payload
from healthlog.domain.errors import Ok, Result, ValidationError
from healthlog.domain.services.helpers import storage_failure, validation_failure
from healthlog.infrastructure.database.connection import session_scope
from healthlog.infrastructure.database.repository import OwnedRecordRepository, UserRepository

logger = logging.getLogger(__name__)


class RecordService:
    """按用户归属的记录 CRUD 服务"""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        descriptor: RecordDescriptor,
    ):
        """
        初始化记录服务

        Args:
            session_factory: 异步会话工厂
            descriptor: 记录类型描述符
        """
        self.session_factory = session_factory
        self.descriptor = descriptor

    def _repository(self, session: AsyncSession) -> OwnedRecordRepository:
        return OwnedRecordRepository(session, self.descriptor.model)

    async def list(self, owner_key: str) -> Result[List[Any]]:
        """
        查询用户的全部记录

        Args:
            owner_key: 用户 owner key

        Returns:
            Ok(记录列表，entry_date 倒序) 或 Err(StorageError)
        """
        try:
            async with session_scope(self.session_factory) as session:
                records = await self._repository(session).list_by_owner(owner_key)
        except SQLAlchemyError as e:
            return storage_failure(f"查询{self.descriptor.label}记录", owner_key, e)
        return Ok(records)

    async def create(
        self,
        owner_key: str,
        payload: Mapping[str, Any],
        display_name: Optional[str] = None,
    ) -> Result[Any]:
        """
        创建记录

        先做字段校验，校验失败不会触发任何存储调用。

        Args:
            owner_key: 用户 owner key
            payload: 请求数据（entry_date、数值字段、notes）
            display_name: 调用方显示名，首次写入时登记到用户表

        Returns:
            Ok(持久化后的记录) 或 Err(ValidationError / StorageError)
        """
        action = f"创建{self.descriptor.label}记录"
        try:
            values = clean_payload(self.descriptor, payload)
        except ValidationError as e:
            return validation_failure(action, owner_key, e)

        try:
            async with session_scope(self.session_factory) as session:
                await UserRepository(session).ensure(owner_key, display_name)
                record = await self._repository(session).create_for_owner(owner_key, **values)
        except SQLAlchemyError as e:
            return storage_failure(action, owner_key, e)

        logger.info(f"{action}成功: owner={owner_key}, record_id={record.id}")
        return Ok(record)

    async def delete(self, owner_key: str, id: str) -> Result[bool]:
        """
        按 (id, owner key) 删除记录

        记录不存在或不属于该用户时不做任何修改，同样返回成功。

        Args:
            owner_key: 用户 owner key
            id: 记录ID

        Returns:
            Ok(是否实际删除了记录) 或 Err(StorageError)
        """
        action = f"删除{self.descriptor.label}记录"
        try:
            async with session_scope(self.session_factory) as session:
                deleted = await self._repository(session).delete_owned(id, owner_key)
        except SQLAlchemyError as e:
            return storage_failure(action, owner_key, e)

        if deleted:
            logger.info(f"{action}成功: owner={owner_key}, record_id={id}")
        else:
            logger.info(f"{action}未命中（不存在或不属于该用户）: owner={owner_key}, record_id={id}")
        return Ok(deleted > 0)

    async def stats(self, owner_key: str, today: Optional[date] = None) -> Result[Dict[str, Any]]:
        """
        统计概览：最新值、平均值、首尾差值、分级、近7天/30天平均

        Args:
            owner_key: 用户 owner key
            today: 基准日期（默认当天）

        Returns:
            Ok(统计字典) 或 Err(StorageError)
        """
        result = await self.list(owner_key)
        if not result.ok:
            return result
        records = result.value
        latest = metrics.latest_of(records)
        status = metrics.classify(self.descriptor, latest)

        return Ok({
            "count": len(records),
            "latest": metrics.format_trend_value(self.descriptor, latest),
            "average": {
                name: metrics.average(getattr(record, name) for record in records)
                for name in self.descriptor.metric_fields
            },
            "delta": {
                name: metrics.delta([getattr(record, name) for record in records])
                for name in self.descriptor.metric_fields
            },
            "status": status,
            "level": metrics.STATUS_LEVELS.get(status) if status else None,
            "weekly": metrics.range_average(records, 7, self.descriptor, today=today),
            "monthly": metrics.range_average(records, 30, self.descriptor, today=today),
        })
