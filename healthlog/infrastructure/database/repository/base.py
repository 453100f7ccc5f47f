"""
基础仓储类
封装通用的数据库操作
"""
from typing import Generic, TypeVar, Type
from sqlalchemy.ext.asyncio import AsyncSession

from healthlog.infrastructure.database.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """基础仓储类"""

    def __init__(self, session: AsyncSession, model: Type[ModelType]):
        """
        初始化仓储

        Args:
            session: 数据库会话
            model: ORM 模型类
        """
        self.session = session
        self.model = model

    async def create(self, **kwargs) -> ModelType:
        """
        创建记录

        flush 后刷新实例，使服务端生成的字段（id、created_at）可直接读取。

        Args:
            **kwargs: 模型字段键值对

        Returns:
            创建的模型实例
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance
