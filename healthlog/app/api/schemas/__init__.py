"""
API Schema 模块
"""
