"""
HTTP 请求封装

"""

import logging
import requests
import cloudscraper
from typing import Dict, Any, Optional
from requests.models import Response

from .exceptions import NetworkError

logger = logging.getLogger(__name__)


class Request:
    """
    HTTP 请求封装类
    支持自定义 headers、代理
    支持 CloudFlare 绕过（服务器位于 CloudFlare 反向代理之后时）
    """

    DEFAULT_HEADERS = {
        'User-Agent': 'Jellyfin-Source-Plugin/1.0.0',
        'Accept': 'application/json',
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None, use_scraper: bool = False):
        """
        初始化 Request 对象

        Args:
            config: 配置字典，包含 network 配置
            use_scraper: 是否使用 cloudscraper（用于绕过 CloudFlare）
        """
        self.config = config or {}
        network_config = self.config.get('network', {})

        self.headers = self.DEFAULT_HEADERS.copy()

        proxy_server = network_config.get('proxy_server')
        if proxy_server:
            self.proxies = {'http': proxy_server, 'https': proxy_server}
            logger.info(f"使用代理: {proxy_server}")
        else:
            self.proxies = {}

        # 未配置时使用 requests 默认行为（不设超时）
        self.timeout = network_config.get('timeout')

        if use_scraper:
            self.scraper = cloudscraper.create_scraper()
            self.session = None
            self._get = self._scraper_monitor(self.scraper.get)
            self._head = self._scraper_monitor(self.scraper.head)
        else:
            self.scraper = None
            self.session = requests.Session()
            self._get = self.session.get
            self._head = self.session.head

    def _scraper_monitor(self, func):
        """
        监控 cloudscraper 的工作状态
        遇到不支持的 Challenge 时尝试退回常规的 requests 请求
        """
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except requests.exceptions.RequestException:
                raise
            except Exception as e:
                logger.debug(f"无法通过 CloudFlare 检测: '{e}', 尝试退回常规的 requests 请求")
                if func == self.scraper.head:
                    return requests.head(*args, **kwargs)
                return requests.get(*args, **kwargs)
        return wrapper

    def _merge_headers(self, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        merged = self.headers.copy()
        if headers:
            merged.update(headers)
        return merged

    def _send(self, method, url: str, delay_raise: bool, headers: Optional[Dict[str, str]],
              **kwargs) -> Response:
        try:
            r = method(
                url,
                headers=self._merge_headers(headers),
                proxies=self.proxies,
                timeout=self.timeout,
                **kwargs
            )

            if not delay_raise:
                r.raise_for_status()

            return r

        except requests.exceptions.Timeout as e:
            raise NetworkError(
                f"请求超时: {url}",
                f"Request timeout: {url}"
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise NetworkError(
                f"连接错误: {url}",
                f"Connection error: {url}"
            ) from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(
                f"请求失败: {url}",
                f"Request failed: {url}"
            ) from e

    def get(self, url: str, params: Optional[Dict[str, Any]] = None, delay_raise: bool = False,
            headers: Optional[Dict[str, str]] = None, **kwargs) -> Response:
        """
        发送 GET 请求

        Args:
            url: 请求 URL
            params: 查询参数
            delay_raise: 是否延迟抛出异常（为 True 时由调用方检查状态码）
            headers: 附加请求头（合并到默认 headers）
            **kwargs: 其他 requests 参数

        Returns:
            Response 对象

        Raises:
            NetworkError: 网络错误
        """
        return self._send(self._get, url, delay_raise, headers, params=params, **kwargs)

    def head(self, url: str, delay_raise: bool = False,
             headers: Optional[Dict[str, str]] = None, **kwargs) -> Response:
        """
        发送 HEAD 请求（只检查资源是否存在，不下载内容）

        Raises:
            NetworkError: 网络错误
        """
        kwargs.setdefault('allow_redirects', True)
        return self._send(self._head, url, delay_raise, headers, **kwargs)
