"""
上下文模块
"""
from healthlog.domain.context.caller import CallerIdentity

__all__ = ["CallerIdentity"]
