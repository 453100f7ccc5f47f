"""
按用户归属的记录仓储实现
血压、体重、体温、文档四张表共用同一套按 owner key 限定的查询
"""
from typing import List, Optional, Type
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func, and_, desc

from healthlog.infrastructure.database.repository.base import BaseRepository, ModelType


class OwnedRecordRepository(BaseRepository[ModelType]):
    """
    按 owner key（user_email）限定的记录仓储

    所有读写都带 user_email 条件，跨用户的 id 永远不会被读到或删掉。
    """

    def __init__(self, session: AsyncSession, model: Type[ModelType]):
        super().__init__(session, model)

    def _ordering(self):
        return (
            desc(self.model.entry_date),
            desc(self.model.created_at),
            desc(self.model.id),
        )

    async def list_by_owner(self, owner_key: str) -> List[ModelType]:
        """
        查询用户的全部记录

        Args:
            owner_key: 用户 owner key

        Returns:
            记录列表（entry_date 倒序，同日按 created_at 倒序）
        """
        result = await self.session.execute(
            select(self.model)
            .where(self.model.user_email == owner_key)
            .order_by(*self._ordering())
        )
        return list(result.scalars().all())

    async def count_by_owner(self, owner_key: str) -> int:
        """
        统计用户的记录数

        Args:
            owner_key: 用户 owner key

        Returns:
            记录数
        """
        result = await self.session.execute(
            select(func.count())
            .select_from(self.model)
            .where(self.model.user_email == owner_key)
        )
        return int(result.scalar_one())

    async def get_owned(self, id: str, owner_key: str) -> Optional[ModelType]:
        """
        按 (id, owner key) 查询单条记录

        Args:
            id: 记录ID
            owner_key: 用户 owner key

        Returns:
            记录或None（不存在或不属于该用户）
        """
        result = await self.session.execute(
            select(self.model).where(
                and_(
                    self.model.id == id,
                    self.model.user_email == owner_key
                )
            )
        )
        return result.scalar_one_or_none()

    async def create_for_owner(self, owner_key: str, **values) -> ModelType:
        """
        为指定用户创建记录

        Args:
            owner_key: 用户 owner key
            **values: 已校验的字段值

        Returns:
            持久化后的记录（含生成的 id）
        """
        return await self.create(user_email=owner_key, **values)

    async def delete_owned(self, id: str, owner_key: str) -> int:
        """
        按 (id, owner key) 删除记录

        Args:
            id: 记录ID
            owner_key: 用户 owner key

        Returns:
            实际删除的行数（0 或 1），0 不视为错误
        """
        result = await self.session.execute(
            delete(self.model).where(
                and_(
                    self.model.id == id,
                    self.model.user_email == owner_key
                )
            )
        )
        return result.rowcount or 0

    async def delete_all_by_owner(self, owner_key: str) -> int:
        """
        删除用户的全部记录

        Args:
            owner_key: 用户 owner key

        Returns:
            删除的行数
        """
        result = await self.session.execute(
            delete(self.model).where(self.model.user_email == owner_key)
        )
        return result.rowcount or 0
