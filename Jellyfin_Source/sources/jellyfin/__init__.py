"""Jellyfin 内容源"""

from .api import JellyfinApi, item_id_from_ref
from .auth import AuthResolver
from .listing import ListingTranslator
from .pages import PageResolver
from .source import JellyfinSource

__all__ = [
    'JellyfinApi',
    'item_id_from_ref',
    'AuthResolver',
    'ListingTranslator',
    'PageResolver',
    'JellyfinSource',
]
