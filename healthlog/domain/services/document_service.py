"""
文档服务
文件内容先写入 BlobStore，再写入数据库行；删除时先删文件再删行
"""
import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from healthlog.domain.descriptors import DOCUMENT, clean_payload
from healthlog.domain.errors import Err, Ok, Result, StorageError, ValidationError
from healthlog.domain.services.helpers import storage_failure, validation_failure
from healthlog.infrastructure.database.connection import session_scope
from healthlog.infrastructure.database.models import DocumentRecord
from healthlog.infrastructure.database.repository import OwnedRecordRepository, UserRepository
from healthlog.infrastructure.storage import BlobNotFoundError, BlobStore

logger = logging.getLogger(__name__)


class DocumentService:
    """文档上传、查询、删除服务"""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        blob_store: BlobStore,
        max_upload_bytes: Optional[int] = None,
    ):
        """
        初始化文档服务

        Args:
            session_factory: 异步会话工厂
            blob_store: 文件存储
            max_upload_bytes: 单个文件大小上限（None 表示不限制）
        """
        self.session_factory = session_factory
        self.blob_store = blob_store
        self.max_upload_bytes = max_upload_bytes
        self.descriptor = DOCUMENT

    async def list(self, owner_key: str) -> Result[List[DocumentRecord]]:
        """
        查询用户的全部文档

        Args:
            owner_key: 用户 owner key

        Returns:
            Ok(文档列表，entry_date 倒序) 或 Err(StorageError)
        """
        try:
            async with session_scope(self.session_factory) as session:
                records = await OwnedRecordRepository(session, DocumentRecord).list_by_owner(owner_key)
        except SQLAlchemyError as e:
            return storage_failure("查询文档记录", owner_key, e)
        return Ok(records)

    def _validate(
        self,
        payload: Mapping[str, Any],
        file_name: Optional[str],
        data: Optional[bytes],
    ) -> dict:
        missing: List[str] = []
        try:
            values = clean_payload(self.descriptor, payload)
        except ValidationError as e:
            values = {}
            missing.extend(e.fields)
        if not file_name or not data:
            missing.append("file")
        if missing:
            raise ValidationError("Missing required fields", missing)
        if self.max_upload_bytes is not None and len(data) > self.max_upload_bytes:
            raise ValidationError(
                f"File too large: {len(data)} bytes (limit {self.max_upload_bytes})",
                ["file"],
            )
        return values

    async def create(
        self,
        owner_key: str,
        payload: Mapping[str, Any],
        file_name: Optional[str],
        data: Optional[bytes],
        content_type: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> Result[DocumentRecord]:
        """
        上传文档

        顺序：校验 -> 写入文件 -> 写入数据库行。
        行写入失败时已写入的文件不会自动回收，日志中记录其URL以便人工清理。

        Args:
            owner_key: 用户 owner key
            payload: 表单字段（entry_date、doc_type、notes）
            file_name: 上传文件名
            data: 文件内容
            content_type: MIME 类型
            display_name: 调用方显示名

        Returns:
            Ok(文档记录) 或 Err(ValidationError / StorageError)
        """
        action = "上传文档"
        try:
            values = self._validate(payload, file_name, data)
        except ValidationError as e:
            return validation_failure(action, owner_key, e)

        try:
            blob = await self.blob_store.put(file_name, data, content_type)
        except OSError as e:
            return storage_failure(f"{action}（写入文件）", owner_key, e)

        try:
            async with session_scope(self.session_factory) as session:
                await UserRepository(session).ensure(owner_key, display_name)
                record = await OwnedRecordRepository(session, DocumentRecord).create_for_owner(
                    owner_key,
                    file_name=file_name,
                    file_url=blob.url,
                    file_size=str(blob.size),
                    **values,
                )
        except SQLAlchemyError as e:
            logger.warning(f"文档行写入失败，文件已成为孤儿文件: url={blob.url}")
            return storage_failure(f"{action}（写入记录）", owner_key, e)

        logger.info(f"{action}成功: owner={owner_key}, record_id={record.id}, size={blob.size}")
        return Ok(record)

    async def delete(self, owner_key: str, id: str) -> Result[bool]:
        """
        删除文档

        先按 (id, owner key) 查出文件句柄并删除文件，再删除数据库行。
        - 记录不存在或不属于该用户：不访问文件存储，直接返回成功
        - 文件已不存在：视为已删除，继续删除行
        - 文件删除失败：返回 StorageError，数据库行保留

        Args:
            owner_key: 用户 owner key
            id: 记录ID

        Returns:
            Ok(是否实际删除了记录) 或 Err(StorageError)
        """
        action = "删除文档"
        try:
            async with session_scope(self.session_factory) as session:
                repo = OwnedRecordRepository(session, DocumentRecord)
                record = await repo.get_owned(id, owner_key)
                if record is None:
                    logger.info(f"{action}未命中（不存在或不属于该用户）: owner={owner_key}, record_id={id}")
                    return Ok(False)

                try:
                    await self.blob_store.delete(record.file_url)
                except BlobNotFoundError:
                    logger.warning(f"文件已不存在，继续删除记录: url={record.file_url}")

                deleted = await repo.delete_owned(id, owner_key)
        except OSError as e:
            logger.error(f"{action}失败（删除文件）: owner={owner_key}, record_id={id}, error={e}", exc_info=True)
            return Err(StorageError(f"{action}失败，文件删除未完成，记录已保留"))
        except SQLAlchemyError as e:
            return storage_failure(action, owner_key, e)

        logger.info(f"{action}成功: owner={owner_key}, record_id={id}")
        return Ok(deleted > 0)
