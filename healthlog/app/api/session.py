"""
调用方身份解析
每个请求通过注入的 SessionResolver 解析出 CallerIdentity，服务层只接收 owner key
"""
import logging
from typing import Protocol

from fastapi import Request

from healthlog.app.config import Settings
from healthlog.domain.context import CallerIdentity
from healthlog.domain.errors import AuthorizationError

logger = logging.getLogger(__name__)


class SessionResolver(Protocol):
    """身份解析接口：成功返回 CallerIdentity，失败抛出 AuthorizationError"""

    async def resolve(self, request: Request) -> CallerIdentity:
        ...


class DemoSessionResolver:
    """固定演示用户（单用户部署）"""

    def __init__(self, email: str, name: str):
        self.identity = CallerIdentity(owner_key=email, display_name=name)

    async def resolve(self, request: Request) -> CallerIdentity:
        return self.identity


class HeaderSessionResolver:
    """
    从请求头读取 owner key

    由前置网关完成真实认证后，将用户邮箱写入请求头（默认 X-Owner-Key）。
    """

    def __init__(self, owner_header: str = "X-Owner-Key", name_header: str = "X-Owner-Name"):
        self.owner_header = owner_header
        self.name_header = name_header

    async def resolve(self, request: Request) -> CallerIdentity:
        owner_key = (request.headers.get(self.owner_header) or "").strip()
        if not owner_key:
            logger.warning(f"无法解析调用方身份：请求头 {self.owner_header} 缺失")
            raise AuthorizationError("Unauthorized")
        display_name = request.headers.get(self.name_header) or None
        return CallerIdentity(owner_key=owner_key, display_name=display_name)


def build_session_resolver(settings: Settings) -> SessionResolver:
    """
    根据配置创建身份解析器

    Args:
        settings: 应用配置

    Returns:
        SessionResolver: demo 模式返回固定用户解析器，header 模式返回请求头解析器
    """
    if settings.AUTH_MODE == "header":
        return HeaderSessionResolver(settings.OWNER_HEADER, settings.OWNER_NAME_HEADER)
    return DemoSessionResolver(settings.DEMO_USER_EMAIL, settings.DEMO_USER_NAME)
