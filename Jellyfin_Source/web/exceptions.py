"""
内容源相关的异常
沿用双语消息结构：message_zh 用于日志，message_en 直接展示给宿主用户
"""

from enum import Enum
from typing import Optional

__all__ = ['SourceError', 'NetworkError', 'ConfigError', 'AuthError', 'AuthErrorKind',
           'WebsiteError', 'error_message']


class SourceError(Exception):
    """所有内容源相关异常的基类（支持双语消息）"""

    def __init__(self, message_zh: str, message_en: str = None, *args):
        """
        初始化异常

        Args:
            message_zh: 中文错误消息
            message_en: 英文错误消息（可选，默认使用中文消息）
            *args: 其他参数
        """
        self.message_zh = message_zh
        self.message_en = message_en or message_zh
        super().__init__(message_zh, *args)

    def get_message(self, locale: str = 'en') -> str:
        """
        获取指定语言的消息

        Args:
            locale: 语言代码（'zh' 或 'en'）

        Returns:
            对应语言的错误消息
        """
        return self.message_zh if locale == 'zh' else self.message_en


class NetworkError(SourceError):
    """网络连接错误（连接失败、超时、DNS 等传输层故障）"""

    def __init__(self, message_zh: str, message_en: str = None, *args):
        if message_en is None:
            message_en = message_zh.replace('请求超时', 'Request timeout') \
                                   .replace('连接错误', 'Connection error') \
                                   .replace('请求失败', 'Request failed')
        super().__init__(message_zh, message_en, *args)


class ConfigError(SourceError):
    """插件设置缺失或无效（服务器地址、API 密钥）"""


class AuthErrorKind(Enum):
    """认证失败的具体类型"""
    INVALID_KEY = "invalid_key"
    INSUFFICIENT_SCOPE = "insufficient_scope"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    CONNECTION = "connection"
    NO_USERS = "no_users"
    USERS_FAILED = "users_failed"
    UNKNOWN = "unknown"


class AuthError(SourceError):
    """API 密钥校验或用户解析失败"""

    def __init__(self, kind: AuthErrorKind, message_zh: str, message_en: str = None,
                 http_status: Optional[int] = None, *args):
        """
        Args:
            kind: 认证失败类型
            message_zh: 中文错误消息
            message_en: 英文错误消息
            http_status: HTTP 状态码（传输层故障时为 None）
        """
        super().__init__(message_zh, message_en, *args)
        self.kind = kind
        self.http_status = http_status


class WebsiteError(SourceError):
    """非预期的状态码等服务器故障"""

    def __init__(self, message_zh: str = "服务器故障", message_en: str = "Server error",
                 http_status: Optional[int] = None, *args):
        super().__init__(message_zh, message_en, *args)
        self.http_status = http_status


def error_message(error: Exception, locale: str = 'en') -> str:
    """面向用户的错误文本：SourceError 按语言取消息，其他异常取 str()"""
    if isinstance(error, SourceError):
        return error.get_message(locale)
    return str(error) or error.__class__.__name__
