"""
用户仓储实现
"""
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError

from healthlog.infrastructure.database.base import generate_ulid, utcnow
from healthlog.infrastructure.database.repository.base import BaseRepository
from healthlog.infrastructure.database.models.user import User

logger = logging.getLogger(__name__)

UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class UserRepository(BaseRepository[User]):
    """用户仓储类"""

    def __init__(self, session: AsyncSession):
        """
        初始化用户仓储

        Args:
            session: 数据库会话
        """
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        根据邮箱查询用户

        Args:
            email: 用户邮箱（owner key）

        Returns:
            用户对象或None
        """
        result = await self.session.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def _insert_if_absent(self, email: str, name: Optional[str]) -> bool:
        """
        插入用户，email 已存在时什么也不做

        同一用户的并发首次写入会同时走到这里，
        只有一个请求真正插入，其余请求不报错。

        Returns:
            是否插入了新行
        """
        dialect = self.session.get_bind().dialect.name
        insert = UPSERT_INSERTS.get(dialect)
        if insert is not None:
            statement = (
                insert(User)
                .values(id=generate_ulid(), email=email, name=name, created_at=utcnow())
                .on_conflict_do_nothing(index_elements=["email"])
            )
            result = await self.session.execute(statement)
            return result.rowcount == 1

        try:
            async with self.session.begin_nested():
                self.session.add(User(email=email, name=name))
        except IntegrityError:
            logger.debug(f"用户已由其他请求创建: email={email}")
            return False
        return True

    async def ensure(self, email: str, name: Optional[str] = None) -> User:
        """
        获取用户，如果不存在则创建

        Args:
            email: 用户邮箱（owner key）
            name: 显示名（可选）

        Returns:
            User: 现有的或新创建的用户对象
        """
        user = await self.get_by_email(email)
        if user is None:
            if await self._insert_if_absent(email, name):
                logger.info(f"创建用户身份: email={email}")
            user = await self.get_by_email(email)
        if name and not user.name:
            user.name = name
            await self.session.flush()
        return user
