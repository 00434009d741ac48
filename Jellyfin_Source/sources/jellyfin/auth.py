"""
认证解析
把保存的服务器地址 + API 密钥转换为可用的用户 ID
"""

import logging

from ...core.models import RemoteUser
from ...core.session import Session
from ...web.exceptions import AuthError, AuthErrorKind, ConfigError, NetworkError
from .api import JellyfinApi


logger = logging.getLogger(__name__)

_BODY_EXCERPT = 200


class AuthResolver:
    """
    流程：
    1. 已缓存 api_key 和 user_id 时直接使用（不发请求，不检查过期）
    2. 用 /System/Info 校验密钥，按状态码映射错误类型
    3. 取 /Users 返回的第一个用户作为会话用户
    """

    def __init__(self, api: JellyfinApi, session: Session):
        self.api = api
        self.session = session

    def ensure_session(self) -> str:
        """
        确保会话可用

        Returns:
            用户 ID

        Raises:
            ConfigError: 未配置服务器地址或 API 密钥
            AuthError: 密钥校验或用户解析失败
        """
        if self.session.is_resolved:
            logger.debug("Using existing API key and user ID")
            return self.session.user_id

        server_url = self.session.server_url
        if not server_url:
            logger.error("Server URL is empty")
            raise ConfigError(
                "请在设置中配置 Jellyfin 服务器地址",
                "Please configure Jellyfin server URL in settings"
            )

        if not self.session.api_key:
            logger.error("API key is empty")
            raise ConfigError(
                "请在设置中配置 API 密钥",
                "Please configure API key in settings"
            )

        logger.debug(f"Testing API key with server: {server_url}")

        try:
            response = self.api.get('/System/Info')
        except NetworkError as e:
            raise self._connection_error(e) from e

        logger.debug(f"System info response code: {response.status_code}")

        if not response.ok:
            raise self._status_error(response.status_code, response.text)

        return self._resolve_user()

    def _resolve_user(self) -> str:
        try:
            response = self.api.get('/Users')
        except NetworkError as e:
            raise self._connection_error(e) from e

        logger.debug(f"Users response code: {response.status_code}")

        if not response.ok:
            body = response.text[:_BODY_EXCERPT]
            raise AuthError(
                AuthErrorKind.USERS_FAILED,
                f"获取用户列表失败: HTTP {response.status_code} - {body}",
                f"Failed to get users: HTTP {response.status_code} - {body}",
                http_status=response.status_code
            )

        try:
            users = [RemoteUser.from_dict(u) for u in response.json()]
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Failed to parse users: {e}")
            raise AuthError(
                AuthErrorKind.USERS_FAILED,
                f"获取用户信息失败: {e}",
                f"Failed to get user information: {e}"
            ) from e

        if not users:
            raise AuthError(
                AuthErrorKind.NO_USERS,
                "Jellyfin 服务器上没有用户",
                "No users found on Jellyfin server"
            )

        user = users[0]
        self.session.set_user_id(user.id)
        logger.info(f"User ID saved: {user.id} ({user.name})")
        return user.id

    @staticmethod
    def _connection_error(error: NetworkError) -> AuthError:
        logger.error(f"Connection failed during API key validation: {error.message_en}")
        return AuthError(
            AuthErrorKind.CONNECTION,
            f"连接失败: {error.message_zh}。请检查服务器地址和网络连接",
            f"Connection failed: {error.message_en}. Check server URL and network connection"
        )

    @staticmethod
    def _status_error(status: int, body: str) -> AuthError:
        if status == 401:
            return AuthError(AuthErrorKind.INVALID_KEY, "API 密钥无效", "Invalid API key",
                             http_status=status)
        elif status == 403:
            return AuthError(AuthErrorKind.INSUFFICIENT_SCOPE, "API 密钥权限不足",
                             "API key has insufficient permissions", http_status=status)
        elif status == 404:
            return AuthError(AuthErrorKind.NOT_FOUND, "未找到 Jellyfin 服务器，请检查服务器地址",
                             "Jellyfin server not found. Check server URL", http_status=status)
        elif status >= 500:
            return AuthError(AuthErrorKind.SERVER_ERROR, "Jellyfin 服务器错误",
                             "Jellyfin server error", http_status=status)

        excerpt = (body or "")[:_BODY_EXCERPT]
        return AuthError(
            AuthErrorKind.UNKNOWN,
            f"API 密钥校验失败: HTTP {status} - {excerpt}",
            f"API key validation failed: HTTP {status} - {excerpt}",
            http_status=status
        )
