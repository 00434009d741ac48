"""Jellyfin Source Plugin - 把 Jellyfin 书籍库作为漫画内容源"""

__version__ = "1.0.0"
__author__ = "Media Manager"
__description__ = "Jellyfin 内容源插件：浏览系列、章节并读取页面"

from .core import load_config, normalize_server_url
from .sources import BaseSource, JellyfinSource
from .web import Request

__all__ = [
    # 核心模块
    'load_config',
    'normalize_server_url',
    # 内容源
    'BaseSource',
    'JellyfinSource',
    # HTTP 客户端
    'Request',
]
