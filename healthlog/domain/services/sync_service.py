"""
批量同步与导出服务
"""
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from healthlog.domain.descriptors import (
    DOCUMENT,
    NUMERIC_DESCRIPTORS,
    TEMPERATURE,
    RecordDescriptor,
    clean_payload,
)
from healthlog.domain.errors import Ok, Result, ValidationError
from healthlog.domain.services.helpers import storage_failure, validation_failure
from healthlog.infrastructure.database.connection import session_scope
from healthlog.infrastructure.database.repository import OwnedRecordRepository, UserRepository

logger = logging.getLogger(__name__)

# 同步数据中各分组可接受的键名
SECTION_ALIASES: Dict[str, tuple] = {
    TEMPERATURE.key: (TEMPERATURE.key, "temperature"),
}


@dataclass
class SkippedItem:
    """同步时被跳过的条目"""
    kind: str
    index: int
    fields: List[str]


@dataclass
class SyncReport:
    """同步结果"""
    inserted: Dict[str, int] = field(default_factory=dict)
    skipped: List[SkippedItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inserted": dict(self.inserted),
            "skipped": [asdict(item) for item in self.skipped],
        }


def _section(payload: Mapping[str, Any], descriptor: RecordDescriptor) -> List[Any]:
    for name in SECTION_ALIASES.get(descriptor.key, (descriptor.key,)):
        value = payload.get(name)
        if value is not None:
            return value if isinstance(value, list) else []
    return []


class SyncService:
    """全量替换同步、导出、计数汇总"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """
        初始化同步服务

        Args:
            session_factory: 异步会话工厂
        """
        self.session_factory = session_factory

    async def replace_all(
        self,
        owner_key: str,
        payload: Mapping[str, Any],
        display_name: Optional[str] = None,
    ) -> Result[SyncReport]:
        """
        全量替换用户的血压、体重、体温记录

        这是覆盖而不是合并：提交的快照中没有的记录会被永久删除。
        每个条目都会重新生成 id；缺少必填字段的条目被跳过并在结果中列出。
        三种类型的删除与重新插入在同一个事务中完成，任一步失败全部回滚。

        Args:
            owner_key: 用户 owner key
            payload: {"bp": [...], "weight": [...], "temp": [...]}
            display_name: 调用方显示名

        Returns:
            Ok(SyncReport) 或 Err(ValidationError / StorageError)
        """
        action = "批量同步"
        if not isinstance(payload, Mapping):
            return validation_failure(
                action, owner_key, ValidationError("Sync payload must be an object", ["payload"])
            )

        report = SyncReport()
        batches: Dict[str, List[Dict[str, Any]]] = {}
        for descriptor in NUMERIC_DESCRIPTORS:
            cleaned = []
            for index, item in enumerate(_section(payload, descriptor)):
                try:
                    cleaned.append(clean_payload(descriptor, item))
                except ValidationError as e:
                    report.skipped.append(SkippedItem(kind=descriptor.key, index=index, fields=e.fields))
            batches[descriptor.key] = cleaned

        try:
            async with session_scope(self.session_factory) as session:
                await UserRepository(session).ensure(owner_key, display_name)
                for descriptor in NUMERIC_DESCRIPTORS:
                    repo = OwnedRecordRepository(session, descriptor.model)
                    removed = await repo.delete_all_by_owner(owner_key)
                    for values in batches[descriptor.key]:
                        await repo.create_for_owner(owner_key, **values)
                    report.inserted[descriptor.key] = len(batches[descriptor.key])
                    logger.debug(
                        f"{action}[{descriptor.key}]: owner={owner_key}, "
                        f"removed={removed}, inserted={report.inserted[descriptor.key]}"
                    )
        except SQLAlchemyError as e:
            return storage_failure(action, owner_key, e)

        if report.skipped:
            logger.warning(f"{action}跳过了 {len(report.skipped)} 条不完整记录: owner={owner_key}")
        logger.info(f"{action}成功: owner={owner_key}, inserted={report.inserted}")
        return Ok(report)

    async def export_all(self, owner_key: str) -> Result[Dict[str, List[Any]]]:
        """
        导出用户的全部记录（不分页）

        Args:
            owner_key: 用户 owner key

        Returns:
            Ok({"bp": [...], "weight": [...], "temp": [...], "docs": [...]}) 或 Err(StorageError)
        """
        try:
            async with session_scope(self.session_factory) as session:
                data = {}
                for descriptor in NUMERIC_DESCRIPTORS + (DOCUMENT,):
                    repo = OwnedRecordRepository(session, descriptor.model)
                    data[descriptor.key] = await repo.list_by_owner(owner_key)
        except SQLAlchemyError as e:
            return storage_failure("导出记录", owner_key, e)
        return Ok(data)

    async def summary(self, owner_key: str) -> Result[Dict[str, int]]:
        """
        各类型记录数汇总

        Args:
            owner_key: 用户 owner key

        Returns:
            Ok({"bp": n, "weight": n, "temp": n, "docs": n}) 或 Err(StorageError)
        """
        try:
            async with session_scope(self.session_factory) as session:
                counts = {}
                for descriptor in NUMERIC_DESCRIPTORS + (DOCUMENT,):
                    repo = OwnedRecordRepository(session, descriptor.model)
                    counts[descriptor.key] = await repo.count_by_owner(owner_key)
        except SQLAlchemyError as e:
            return storage_failure("查询汇总", owner_key, e)
        return Ok(counts)
