"""
页面解析
决定章节是作为一个整体下载，还是拆分为逐页图片
"""

import logging
from typing import Dict, Any, List

from ...core.models import Attachment, PageRef, RemoteItem
from ...web.exceptions import SourceError
from .api import JellyfinApi, item_id_from_ref


logger = logging.getLogger(__name__)


class PageResolver:
    """
    漫画归档按以下顺序尝试：
    1. 声明的附件中的图片文件（按附件序号排序）
    2. 逐页探测 /Images/Page/{n}，遇到第一个缺失的序号即停止
    3. 整体下载
    非漫画条目直接整体下载。任何失败都退化为整体下载，不会抛出异常
    """

    def __init__(self, api: JellyfinApi, config: Dict[str, Any]):
        self.api = api
        pages_config = config.get('pages', {})
        self.probe_limit = int(pages_config.get('probe_limit', 100))
        self.image_extensions = tuple(
            ext.lower() for ext in pages_config.get(
                'image_extensions', ['.jpg', '.jpeg', '.png', '.gif', '.webp', '.bmp', '.avif'])
        )
        self.comic_markers = tuple(
            marker.lower() for marker in pages_config.get(
                'comic_markers', ['.cbz', '.cbr', '.cb7', '.cbt'])
        )

    def download_url(self, item_id: str) -> str:
        return self.api.url(f"/Items/{item_id}/Download", authenticated=True)

    def is_comic(self, item: RemoteItem) -> bool:
        """按类型标签或名称判断是否为漫画归档"""
        if item.type and 'comic' in item.type.lower():
            return True
        name = item.name.lower()
        return any(marker in name for marker in self.comic_markers)

    def list_pages(self, chapter_ref: str) -> List[PageRef]:
        """
        获取章节的页面列表

        Args:
            chapter_ref: 章节引用（/Items/{id}/Download）

        Returns:
            至少包含一页的页面列表
        """
        item_id = item_id_from_ref(chapter_ref)
        whole_file = [PageRef(index=0, url="", image_url=self.download_url(item_id))]

        try:
            item = RemoteItem.from_dict(self.api.get_json(f"/Items/{item_id}"))
        except (SourceError, ValueError) as e:
            logger.error(f"Error getting chapter item {item_id}: {e}")
            return whole_file

        if not self.is_comic(item):
            logger.debug(f"{item.name} is not a comic archive, using download URL")
            return whole_file

        pages = self._pages_from_attachments(item.id)
        if pages:
            logger.debug(f"Found {len(pages)} image attachments for {item.name}")
            return pages

        pages = self._pages_from_probe(item.id)
        if pages:
            logger.debug(f"Probed {len(pages)} page images for {item.name}")
            return pages

        logger.debug(f"No page images for {item.name}, using download URL")
        return whole_file

    def _pages_from_attachments(self, item_id: str) -> List[PageRef]:
        try:
            data = self.api.get_json(f"/Items/{item_id}/Attachments")
            if isinstance(data, dict):
                data = data.get('Items') or []
            attachments = [Attachment.from_dict(a) for a in data]
        except (SourceError, ValueError, KeyError, TypeError) as e:
            logger.debug(f"Attachments unavailable for {item_id}: {e}")
            return []

        images = sorted(
            (a for a in attachments if a.filename.lower().endswith(self.image_extensions)),
            key=lambda a: a.index
        )
        return [
            PageRef(
                index=position,
                url="",
                image_url=self.api.url(f"/Items/{item_id}/Attachments/{attachment.index}",
                                       authenticated=True)
            )
            for position, attachment in enumerate(images)
        ]

    def _pages_from_probe(self, item_id: str) -> List[PageRef]:
        pages = []
        for index in range(self.probe_limit):
            path = f"/Items/{item_id}/Images/Page/{index}"
            if not self.api.exists(path):
                break
            pages.append(PageRef(index=index, url="",
                                 image_url=self.api.url(path, authenticated=True)))
        return pages
