"""
healthlog - 个人健康指标记录服务
"""
__version__ = "1.0.0"
