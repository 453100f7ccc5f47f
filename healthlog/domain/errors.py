"""
领域错误分类与结果类型

服务层不直接抛出 HTTP 异常，而是返回 Ok / Err，由接口层统一映射状态码：
- ValidationError：必填字段缺失或非法，在任何存储调用之前产生
- AuthorizationError：调用方身份无法解析
- StorageError：数据库或文件存储失败
"""
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

T = TypeVar("T")


class HealthLogError(Exception):
    """领域错误基类"""

    kind: str = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "detail": self.message}


class ValidationError(HealthLogError):
    """请求数据校验失败"""

    kind = "validation_error"

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.fields = list(fields or [])

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["fields"] = self.fields
        return data


class AuthorizationError(HealthLogError):
    """调用方身份缺失或无效"""

    kind = "unauthorized"


class StorageError(HealthLogError):
    """数据库或文件存储失败"""

    kind = "storage_error"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """成功结果"""
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """失败结果，携带领域错误"""
    error: HealthLogError

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self):
        raise self.error


Result = Union[Ok[T], Err]
