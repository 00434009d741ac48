"""
会话状态
服务器地址、API 密钥和解析出的用户 ID，以及它们的失效规则：
- 修改 server_url 或 api_key 时清除 user_id
- 任何 401 响应清除 api_key 和 user_id
"""

import logging

from .preferences import PreferenceStore


logger = logging.getLogger(__name__)

KEY_SERVER_URL = 'server_url'
KEY_API_KEY = 'api_key'
KEY_USER_ID = 'user_id'


def normalize_server_url(url: str) -> str:
    """
    规范化服务器地址：补全 http:// 协议头，去掉末尾斜杠

    Args:
        url: 用户输入的地址（如 192.168.1.100:8096）

    Returns:
        规范化后的地址；空输入返回空字符串
    """
    normalized = (url or "").strip()
    if not normalized:
        return ""

    if not normalized.startswith("http://") and not normalized.startswith("https://"):
        normalized = f"http://{normalized}"

    normalized = normalized.rstrip("/")

    logger.debug(f"Normalized server URL: {normalized}")
    return normalized


class Session:
    """绑定到一个偏好存储的会话视图"""

    def __init__(self, store: PreferenceStore):
        self.store = store

    @property
    def server_url(self) -> str:
        return normalize_server_url(self.store.get(KEY_SERVER_URL))

    @property
    def api_key(self) -> str:
        return self.store.get(KEY_API_KEY)

    @property
    def user_id(self) -> str:
        return self.store.get(KEY_USER_ID)

    @property
    def is_resolved(self) -> bool:
        """user_id 只有在 api_key 非空时才可信"""
        return bool(self.api_key) and bool(self.user_id)

    def auth_headers(self) -> dict:
        api_key = self.api_key
        return {'X-Emby-Token': api_key} if api_key else {}

    def set_server_url(self, url: str):
        self.store.edit(**{KEY_SERVER_URL: normalize_server_url(url), KEY_USER_ID: ""})

    def set_api_key(self, api_key: str):
        self.store.edit(**{KEY_API_KEY: (api_key or "").strip(), KEY_USER_ID: ""})

    def set_user_id(self, user_id: str):
        self.store.edit(**{KEY_USER_ID: user_id})

    def invalidate(self):
        """401 之后调用：清除密钥和用户 ID"""
        logger.warning("Clearing API key and user ID after 401 response")
        self.store.edit(**{KEY_API_KEY: "", KEY_USER_ID: ""})
