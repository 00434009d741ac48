"""
列表转换
把 /Users/{userId}/Items 的响应转换为宿主的系列列表和章节列表
"""

import logging
import time
from typing import Dict, Any, List, Optional

from ...core.models import (
    ItemsResponse, RemoteItem, SeriesPage, SeriesSummary, ChapterSummary, STATUS_ONGOING
)
from ...core.naming import (
    CHAPTER_LABEL_RULES, CHAPTER_DEFAULT, UNTYPED_LABEL_RULES, UNTYPED_DEFAULT,
    BOOK_LABEL_RULES, BOOK_DEFAULT, decorate_name
)
from ...web.exceptions import SourceError, error_message
from .api import JellyfinApi, item_id_from_ref


logger = logging.getLogger(__name__)

CONTAINER_TYPES = ("CollectionFolder", "Folder")
BOOK_TYPE = "Book"

# 章节和备用媒体库查询中，这些异常退化为占位条目或空列表
_LOOKUP_ERRORS = (SourceError, ValueError, KeyError, TypeError, AttributeError)

_SORT_PARAMS = {
    'SortBy': 'SortName',
    'SortOrder': 'Ascending',
}


def _now_millis() -> int:
    return int(time.time() * 1000)


class ListingTranslator:
    """系列/章节列表"""

    def __init__(self, api: JellyfinApi, config: Dict[str, Any], locale: str = 'en'):
        self.api = api
        listing_config = config.get('listing', {})
        self.page_size = int(listing_config.get('page_size', 20))
        self.fallback_library_name = listing_config.get('fallback_library_name') or ""
        self.locale = locale

    def thumbnail_url(self, item_id: str) -> str:
        return self.api.url(f"/Items/{item_id}/Images/Primary",
                            {'maxWidth': 300, 'maxHeight': 450})

    # 系列

    def list_series(self, user_id: str, page: int, query: Optional[str] = None) -> SeriesPage:
        """
        获取一页系列

        Args:
            user_id: 会话用户 ID
            page: 页码（从 1 开始）
            query: 搜索词（为 None 时为浏览）

        Returns:
            SeriesPage；has_more 仅当本页恰好装满时为 True。
            第 1 页（浏览或搜索）为空时改用备用媒体库中的文件夹

        Raises:
            AuthError: HTTP 401
            WebsiteError: 其他非 2xx 状态码
        """
        params = {
            'IncludeItemTypes': 'Folder',
            'Recursive': 'true' if query is not None else 'false',
            **_SORT_PARAMS,
            'StartIndex': (page - 1) * self.page_size,
            'Limit': self.page_size,
            'Fields': 'Overview,ChildCount',
        }
        if query is not None:
            params['SearchTerm'] = query

        result = ItemsResponse.from_dict(self.api.get_json(f"/Users/{user_id}/Items", params))
        logger.debug(f"Series page {page}: {len(result.items)} items")

        if result.items:
            series = [self._to_series(item) for item in result.items]
        elif page == 1:
            series = self._series_from_fallback_library(user_id)
        else:
            series = []

        return SeriesPage(items=series, has_more=len(result.items) == self.page_size)

    def _series_from_fallback_library(self, user_id: str) -> List[SeriesSummary]:
        """直接列表为空时，从名为 Books 的媒体库中取文件夹；失败返回空列表"""
        if not self.fallback_library_name:
            return []

        logger.debug(f"Getting folders from {self.fallback_library_name} library")
        try:
            views = ItemsResponse.from_dict(self.api.get_json(f"/Users/{user_id}/Views"))
            library = next(
                (v for v in views.items if v.name.lower() == self.fallback_library_name.lower()),
                None
            )
            if library is None:
                return []

            logger.debug(f"Found {library.name} library with ID: {library.id}")
            params = {
                'ParentID': library.id,
                'IncludeItemTypes': 'Folder',
                'Recursive': 'false',
                **_SORT_PARAMS,
                'Fields': 'Overview,ChildCount',
            }
            result = ItemsResponse.from_dict(self.api.get_json(f"/Users/{user_id}/Items", params))
        except _LOOKUP_ERRORS as e:
            logger.error(f"Error getting {self.fallback_library_name} library: {e}")
            return []

        logger.debug(f"Found {len(result.items)} series folders")
        return [self._to_series(item) for item in result.items]

    def _to_series(self, item: RemoteItem) -> SeriesSummary:
        description = ""
        if item.overview:
            description += f"{item.overview}\n\n"
        description += "📁 Manga Series"
        if item.child_count is not None:
            description += f" ({item.child_count} chapters)"
        description += f"\n🆔 ID: {item.id}"
        description += f"\n📱 Type: {item.type or 'Folder'}"

        return SeriesSummary(
            title=item.name,
            url=f"/Items/{item.id}",
            thumbnail_url=self.thumbnail_url(item.id),
            description=description,
            author="Unknown",
            genre="Manga",
            status=STATUS_ONGOING,
            initialized=True,
        )

    def series_details(self, series_ref: str) -> SeriesSummary:
        """
        系列详情

        Raises:
            AuthError / WebsiteError: 请求失败
        """
        item_id = item_id_from_ref(series_ref)
        item = RemoteItem.from_dict(self.api.get_json(f"/Items/{item_id}"))

        description = ""
        if item.overview:
            description += f"{item.overview}\n\n"
        description += f"🆔 ID: {item.id}"
        description += f"\n📱 Type: {item.type or 'Unknown'}"
        if item.genres:
            description += f"\n🏷️ Genres: {', '.join(item.genres)}"

        author = next((p.name for p in item.people or [] if p.type == "Author"), "Unknown")

        return SeriesSummary(
            title=item.name,
            url=f"/Items/{item.id}",
            thumbnail_url=self.thumbnail_url(item.id),
            description=description,
            author=author,
            genre=", ".join(item.genres or []),
            status=STATUS_ONGOING,
            initialized=True,
        )

    # 章节

    def list_chapters(self, user_id: str, series_ref: str) -> List[ChapterSummary]:
        """
        获取章节列表；任何失败都退化为一个占位章节，不会抛出异常

        Returns:
            至少包含一个条目的章节列表
        """
        try:
            item_id = item_id_from_ref(series_ref)
        except ValueError as e:
            return [self._placeholder(f"📚 Read Book ({error_message(e, self.locale)})", "unknown")]

        try:
            item = RemoteItem.from_dict(self.api.get_json(f"/Items/{item_id}"))
        except _LOOKUP_ERRORS as e:
            logger.error(f"Error parsing chapter list: {e}")
            return [self._placeholder(f"📚 Read Book ({error_message(e, self.locale)})", item_id)]

        if item.type in CONTAINER_TYPES:
            return self._child_chapters(user_id, item.id)

        if item.type == BOOK_TYPE:
            name = decorate_name(item, BOOK_LABEL_RULES, BOOK_DEFAULT)
            return [self._chapter(name, item.id, 1)]

        children = self._child_chapters(user_id, item.id, placeholders=False)
        if children:
            return children
        return [self._chapter(f"📚 {item.name}", item.id, 1)]

    def _child_chapters(self, user_id: str, parent_id: str,
                        placeholders: bool = True) -> List[ChapterSummary]:
        """按 Book 类型列出子条目；为空或失败时改用不带类型过滤的列表"""
        logger.debug(f"Getting chapters for series ID: {parent_id}")
        params = {
            'ParentID': parent_id,
            'IncludeItemTypes': BOOK_TYPE,
            'Recursive': 'false',
            **_SORT_PARAMS,
            'Fields': 'Overview,Path',
            'EnableImages': 'true',
        }
        try:
            result = ItemsResponse.from_dict(self.api.get_json(f"/Users/{user_id}/Items", params))
        except _LOOKUP_ERRORS as e:
            logger.error(f"Error getting chapters: {e}")
        else:
            logger.debug(f"Found {len(result.items)} chapters in series")
            if result.items:
                return [
                    self._chapter(decorate_name(child, CHAPTER_LABEL_RULES, CHAPTER_DEFAULT),
                                  child.id, index + 1)
                    for index, child in enumerate(result.items)
                ]
            logger.debug("No chapters found, trying without IncludeItemTypes filter")

        return self._untyped_child_chapters(user_id, parent_id, placeholders)

    def _untyped_child_chapters(self, user_id: str, parent_id: str,
                                placeholders: bool) -> List[ChapterSummary]:
        params = {
            'ParentID': parent_id,
            'Recursive': 'false',
            **_SORT_PARAMS,
            'Fields': 'Overview,Path,MediaType',
            'EnableImages': 'true',
        }
        try:
            response = self.api.get(f"/Users/{user_id}/Items", params)
            if not response.ok:
                logger.error(f"Failed to get unfiltered chapters: HTTP {response.status_code}")
                if not placeholders:
                    return []
                return [self._placeholder(
                    f"📚 HTTP Error {response.status_code}: {response.text[:50]}", parent_id)]

            result = ItemsResponse.from_dict(response.json())
        except _LOOKUP_ERRORS as e:
            logger.error(f"Error in unfiltered chapters approach: {e}")
            if not placeholders:
                return []
            return [self._placeholder(f"📚 Exception: {error_message(e, self.locale)[:50]}", parent_id)]

        logger.debug(f"Found {len(result.items)} items total in series")
        if result.items:
            return [
                self._chapter(decorate_name(child, UNTYPED_LABEL_RULES, UNTYPED_DEFAULT),
                              child.id, index + 1)
                for index, child in enumerate(result.items)
            ]
        if not placeholders:
            return []
        return [self._placeholder("📚 No chapters found in this series", parent_id)]

    def _chapter(self, name: str, item_id: str, number: int) -> ChapterSummary:
        return ChapterSummary(
            name=name,
            url=f"/Items/{item_id}/Download",
            chapter_number=float(number),
            date_upload=_now_millis(),
        )

    def _placeholder(self, name: str, item_id: str) -> ChapterSummary:
        return self._chapter(name, item_id, 1)
