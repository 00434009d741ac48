"""Web 模块 - HTTP 客户端和异常"""

from .exceptions import *
from .request import Request

__all__ = ['Request', 'SourceError', 'NetworkError', 'ConfigError', 'AuthError',
           'AuthErrorKind', 'WebsiteError', 'error_message']
