"""
Jellyfin 内容源
把 Jellyfin 媒体服务器的书籍库作为漫画内容源提供给宿主
"""

import logging
from typing import Optional, Dict, Any, List

from ...core.models import SeriesPage, SeriesSummary, ChapterSummary, PageRef
from ...core.preferences import PreferenceStore
from ...core.session import KEY_SERVER_URL, KEY_API_KEY
from ..base_source import BaseSource
from .api import JellyfinApi
from .auth import AuthResolver
from .listing import ListingTranslator
from .pages import PageResolver


logger = logging.getLogger(__name__)


class JellyfinSource(BaseSource):
    """Jellyfin 内容源"""

    name = 'jellyfin'
    lang = 'all'
    supports_latest = True

    def __init__(self, config: Dict[str, Any], store: Optional[PreferenceStore] = None):
        super().__init__(config, store)
        self.display_name = config.get('source', {}).get('name', 'Jellyfin')
        self.api = JellyfinApi(self.request, self.session)
        self.auth = AuthResolver(self.api, self.session)
        self.listing = ListingTranslator(self.api, config, self.locale)
        self.page_resolver = PageResolver(self.api, config)

    def ensure_session(self) -> str:
        return self.auth.ensure_session()

    def popular(self, page: int) -> SeriesPage:
        user_id = self.ensure_session()
        return self.listing.list_series(user_id, page)

    def search(self, page: int, query: str) -> SeriesPage:
        user_id = self.ensure_session()
        return self.listing.list_series(user_id, page, query or "")

    def details(self, series_ref: str) -> SeriesSummary:
        self.ensure_session()
        return self.listing.series_details(series_ref)

    def chapters(self, series_ref: str) -> List[ChapterSummary]:
        user_id = self.ensure_session()
        return self.listing.list_chapters(user_id, series_ref)

    def pages(self, chapter_ref: str) -> List[PageRef]:
        self.ensure_session()
        return self.page_resolver.list_pages(chapter_ref)

    def image_headers(self) -> Dict[str, str]:
        """宿主获取图片时应附带的请求头"""
        headers = dict(self.request.headers)
        headers.update(self.session.auth_headers())
        return headers

    def preference_schema(self) -> List[Dict[str, Any]]:
        return [
            {
                'key': KEY_SERVER_URL,
                'title': 'Jellyfin Server URL',
                'summary': 'Examples: http://192.168.1.100:8096 or https://jellyfin.mydomain.com',
                'dialog_title': 'Jellyfin Server URL',
                'dialog_message': 'Enter your Jellyfin server URL (with http:// or https://)',
                'value': self.session.server_url,
            },
            {
                'key': KEY_API_KEY,
                'title': 'Jellyfin API Key',
                'summary': 'Generate in Jellyfin Dashboard → API Keys',
                'dialog_title': 'Jellyfin API Key',
                'dialog_message': 'Enter your Jellyfin API key (create one in Dashboard → API Keys)',
                'value': self.session.api_key,
            },
        ]

    def set_preference(self, key: str, value: Any):
        """
        修改设置；服务器地址或密钥变化时清除已解析的用户 ID

        Raises:
            ValueError: 不可编辑的设置项
        """
        if key == KEY_SERVER_URL:
            self.session.set_server_url(str(value or ""))
        elif key == KEY_API_KEY:
            self.session.set_api_key(str(value or ""))
        else:
            raise ValueError(f"Unknown preference: {key}")
        self.logger.info(f"Preference updated: {key}")

    def info(self) -> Dict[str, Any]:
        return {
            'id': self.source_id,
            'name': self.display_name,
            'lang': self.lang,
            'supports_latest': self.supports_latest,
            'preferences': [p['key'] for p in self.preference_schema()],
        }
