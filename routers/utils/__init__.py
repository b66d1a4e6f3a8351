"""
Utils layer
路由层工具函数
"""

from .error_handler import to_http_exception, register_exception_handlers

__all__ = ["to_http_exception", "register_exception_handlers"]
