"""
错误处理核心模块
提供错误分类、双语消息生成和建议生成，供宿主协议层输出结构化错误
"""

import logging
from typing import Dict, List, Optional, Any, Tuple
from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime

from ..web.exceptions import (
    SourceError, NetworkError, ConfigError, AuthError, AuthErrorKind, WebsiteError
)


logger = logging.getLogger(__name__)


class ErrorCategory(Enum):
    """错误分类枚举"""
    CONFIG_ERROR = "config_error"
    CREDENTIAL_ERROR = "credential_error"
    PERMISSION_ERROR = "permission_error"
    NOT_FOUND = "not_found"
    NETWORK_ERROR = "network_error"
    SITE_ERROR = "site_error"
    INVALID_INPUT = "invalid_input"
    UNKNOWN = "unknown"


_AUTH_KIND_CATEGORIES = {
    AuthErrorKind.INVALID_KEY: ErrorCategory.CREDENTIAL_ERROR,
    AuthErrorKind.INSUFFICIENT_SCOPE: ErrorCategory.PERMISSION_ERROR,
    AuthErrorKind.NOT_FOUND: ErrorCategory.NOT_FOUND,
    AuthErrorKind.SERVER_ERROR: ErrorCategory.SITE_ERROR,
    AuthErrorKind.CONNECTION: ErrorCategory.NETWORK_ERROR,
    AuthErrorKind.NO_USERS: ErrorCategory.PERMISSION_ERROR,
    AuthErrorKind.USERS_FAILED: ErrorCategory.SITE_ERROR,
}


@dataclass
class StructuredError:
    """结构化错误对象（用于 JSON 序列化）"""
    category: ErrorCategory
    source: str
    operation: str
    message_zh: str
    message_en: str
    suggestions_zh: List[str] = field(default_factory=list)
    suggestions_en: List[str] = field(default_factory=list)
    http_status: Optional[int] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典（用于 JSON 序列化）"""
        return {
            'category': self.category.value,
            'source': self.source,
            'operation': self.operation,
            'message': {
                'zh': self.message_zh,
                'en': self.message_en
            },
            'suggestions': {
                'zh': self.suggestions_zh,
                'en': self.suggestions_en
            },
            'http_status': self.http_status,
            'timestamp': self.timestamp.isoformat()
        }


class ErrorHandler:
    """错误处理器 - 负责错误分类、消息生成和建议生成"""

    def __init__(self, config: Dict[str, Any], logger: logging.Logger = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def handle_exception(
        self,
        exception: Exception,
        source: str,
        operation: str,
        http_status: Optional[int] = None
    ) -> StructuredError:
        """
        处理异常，生成结构化错误

        Args:
            exception: 捕获的异常
            source: 内容源名称
            operation: 宿主请求的动作（popular / chapters ...）
            http_status: HTTP 状态码（可选，异常自带时以异常为准）

        Returns:
            StructuredError 对象
        """
        http_status = getattr(exception, 'http_status', None) or http_status

        category = self._categorize_error(exception, http_status)

        if isinstance(exception, SourceError):
            message_zh = exception.message_zh
            message_en = exception.message_en
        else:
            message_zh = str(exception)
            message_en = str(exception)

        suggestions_zh, suggestions_en = self._generate_suggestions(category, source)

        self._log_error(exception, source, operation, category, http_status)

        return StructuredError(
            category=category,
            source=source,
            operation=operation,
            message_zh=message_zh,
            message_en=message_en,
            suggestions_zh=suggestions_zh,
            suggestions_en=suggestions_en,
            http_status=http_status
        )

    def _categorize_error(
        self,
        exception: Exception,
        http_status: Optional[int] = None
    ) -> ErrorCategory:
        """
        错误分类逻辑：先按异常类型，再按 HTTP 状态码
        """
        if isinstance(exception, ConfigError):
            return ErrorCategory.CONFIG_ERROR
        elif isinstance(exception, AuthError):
            return _AUTH_KIND_CATEGORIES.get(exception.kind, ErrorCategory.UNKNOWN)
        elif isinstance(exception, NetworkError):
            return ErrorCategory.NETWORK_ERROR
        elif isinstance(exception, (ValueError, KeyError)):
            return ErrorCategory.INVALID_INPUT

        if http_status:
            if http_status in (401, 407):
                return ErrorCategory.CREDENTIAL_ERROR
            elif http_status == 403:
                return ErrorCategory.PERMISSION_ERROR
            elif http_status == 404:
                return ErrorCategory.NOT_FOUND
            elif http_status >= 500:
                return ErrorCategory.SITE_ERROR

        if isinstance(exception, WebsiteError):
            return ErrorCategory.SITE_ERROR

        return ErrorCategory.UNKNOWN

    def _generate_suggestions(
        self,
        category: ErrorCategory,
        source: str
    ) -> Tuple[List[str], List[str]]:
        """
        生成可操作的建议（简洁、友好的前端提示）

        Returns:
            (中文建议列表, 英文建议列表)
        """
        network_config = self.config.get('network', {})
        proxy_server = network_config.get('proxy_server')

        if category == ErrorCategory.CONFIG_ERROR:
            return (
                ['⚙️ 请在设置中填写服务器地址和 API 密钥'],
                ['⚙️ Configure server URL and API key in settings']
            )

        elif category == ErrorCategory.CREDENTIAL_ERROR:
            return (
                ['🔐 在 Jellyfin 控制台 → API 密钥 中重新生成密钥', '⚙️ 然后在设置中更新'],
                ['🔐 Generate a new key in Jellyfin Dashboard → API Keys', '⚙️ Then update it in settings']
            )

        elif category == ErrorCategory.PERMISSION_ERROR:
            return (
                [f'🚫 {source} 拒绝了当前密钥的访问', '🔑 请使用管理员创建的 API 密钥'],
                [f'🚫 {source} rejected the current key', '🔑 Use an API key created by an administrator']
            )

        elif category == ErrorCategory.NOT_FOUND:
            return (
                ['🔍 确认服务器地址是否正确（包括端口）'],
                ['🔍 Verify the server URL (including the port)']
            )

        elif category == ErrorCategory.NETWORK_ERROR:
            if proxy_server:
                return (
                    [f'🔧 当前代理: {proxy_server}', '✅ 确认代理正常运行'],
                    [f'🔧 Current proxy: {proxy_server}', '✅ Ensure proxy is running']
                )
            return (
                ['🔌 检查网络连接和服务器地址', '🔄 稍后重试'],
                ['🔌 Check network connection and server URL', '🔄 Try again later']
            )

        elif category == ErrorCategory.SITE_ERROR:
            return (
                [f'⚠️ {source} 服务器错误', '🔄 稍后重试'],
                [f'⚠️ {source} server error', '🔄 Try again later']
            )

        elif category == ErrorCategory.INVALID_INPUT:
            return (
                ['📋 检查请求参数'],
                ['📋 Check request parameters']
            )

        else:  # UNKNOWN
            return (
                ['❓ 未知错误', '📋 查看日志了解详情'],
                ['❓ Unknown error', '📋 Check logs for details']
            )

    def _log_error(
        self,
        exception: Exception,
        source: str,
        operation: str,
        category: ErrorCategory,
        http_status: Optional[int] = None
    ):
        log_msg = f"[{category.value}] {source}: {operation} - {exception}"
        if http_status:
            log_msg += f" (HTTP {http_status})"

        self.logger.error(log_msg)

        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("Exception details:", exc_info=exception)
