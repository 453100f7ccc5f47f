"""
调用方身份
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CallerIdentity:
    """
    已解析的调用方身份

    Attributes:
        owner_key: 数据归属键（邮箱），所有记录按此值限定
        display_name: 显示名（可选）
    """
    owner_key: str
    display_name: Optional[str] = None
