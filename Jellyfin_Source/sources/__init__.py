"""内容源模块"""

from .base_source import BaseSource
from .jellyfin import JellyfinSource

__all__ = [
    'BaseSource',
    'JellyfinSource',
]
