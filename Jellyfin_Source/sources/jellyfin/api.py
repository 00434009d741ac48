"""
Jellyfin REST API 的薄封装
拼接服务器地址、附带 X-Emby-Token，并在任何 401 响应后清除会话
"""

import logging
from typing import Dict, Any, Optional
from urllib.parse import urlencode

from requests.models import Response

from ...core.session import Session
from ...web.exceptions import AuthError, AuthErrorKind, NetworkError, WebsiteError
from ...web.request import Request


logger = logging.getLogger(__name__)


def item_id_from_ref(ref: str) -> str:
    """
    从引用路径中取出条目 ID

    "/Items/abc" -> "abc"，"/Items/abc/Download" -> "abc"

    Raises:
        ValueError: 引用为空
    """
    parts = [p for p in (ref or "").split('?')[0].split('/') if p]
    if not parts:
        raise ValueError(f"无效的引用: {ref!r}")
    if 'Items' in parts:
        index = parts.index('Items')
        if index + 1 < len(parts):
            return parts[index + 1]
    return parts[-1]


class JellyfinApi:
    """绑定会话的 API 客户端"""

    def __init__(self, request: Request, session: Session):
        self.request = request
        self.session = session

    def url(self, path: str, params: Optional[Dict[str, Any]] = None,
            authenticated: bool = False) -> str:
        """
        构造完整 URL

        Args:
            path: 以 / 开头的 API 路径
            params: 查询参数
            authenticated: 是否把 api_key 放入查询参数（供宿主直接下载）
        """
        query = dict(params or {})
        if authenticated and self.session.api_key:
            query['api_key'] = self.session.api_key
        url = f"{self.session.server_url}{path}"
        if query:
            url = f"{url}?{urlencode(query)}"
        return url

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Response:
        """
        发送 GET 请求，不检查状态码（401 除外：清除会话后原样返回）

        Raises:
            NetworkError: 传输层故障
        """
        url = self.url(path)
        logger.debug(f"GET {url} params={params}")
        response = self.request.get(url, params=params, delay_raise=True,
                                    headers=self.session.auth_headers())
        logger.debug(f"GET {path} -> HTTP {response.status_code}")
        if response.status_code == 401:
            self.session.invalidate()
        return response

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        发送 GET 请求并解析 JSON

        Raises:
            AuthError: HTTP 401（会话已被清除）
            WebsiteError: 其他非 2xx 状态码
            NetworkError: 传输层故障
            ValueError: 响应不是合法 JSON
        """
        response = self.get(path, params)
        if response.status_code == 401:
            raise AuthError(
                AuthErrorKind.INVALID_KEY,
                "API 密钥已过期或无效，请重新配置",
                "API key expired or invalid. Please reconfigure",
                http_status=401
            )
        if not response.ok:
            raise WebsiteError(
                f"服务器错误: HTTP {response.status_code}",
                f"Server error: HTTP {response.status_code}",
                http_status=response.status_code
            )
        return response.json()

    def exists(self, path: str) -> bool:
        """HEAD 探测资源是否存在；传输层故障视为不存在"""
        try:
            response = self.request.head(self.url(path), delay_raise=True,
                                         headers=self.session.auth_headers())
        except NetworkError as e:
            logger.debug(f"HEAD {path} failed: {e.message_en}")
            return False
        if response.status_code == 401:
            self.session.invalidate()
        return response.ok
