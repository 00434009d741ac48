"""
基础内容源类
所有内容源的基类：持有配置、HTTP 客户端、会话和统一错误处理
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Dict, Any, List

from ..core.error_handler import ErrorHandler
from ..core.models import SeriesPage, SeriesSummary, ChapterSummary, PageRef
from ..core.preferences import PreferenceStore, get_store
from ..core.session import Session
from ..web.request import Request


logger = logging.getLogger(__name__)


class BaseSource(ABC):
    """内容源基类"""

    # 内容源名称（子类必须设置）
    name: str = 'base'

    # 语言
    lang: str = 'all'

    # 是否支持"最新"列表
    supports_latest: bool = False

    def __init__(self, config: Dict[str, Any], store: Optional[PreferenceStore] = None):
        """
        初始化内容源

        Args:
            config: 配置字典
            store: 偏好存储（可选，默认按 source.id 取进程内共享存储）
        """
        self.config = config
        source_config = config.get('source', {})
        self.source_id = source_config.get('id', self.name)
        self.locale = source_config.get('locale', 'en')

        use_scraper = config.get('network', {}).get('use_cloudscraper', False)
        self.request = Request(config, use_scraper=use_scraper)
        self.logger = logging.getLogger(f"{__name__}.{self.name}")
        self.error_handler = ErrorHandler(config, self.logger)

        if store is None:
            store = get_store(self.source_id, self._preferences_dir())
        self.store = store
        self.session = Session(store)

    def _preferences_dir(self) -> Optional[Path]:
        directory = self.config.get('preferences', {}).get('directory')
        if not directory:
            return None
        path = Path(directory)
        if not path.is_absolute():
            path = Path(__file__).parent.parent / path
        return path

    # 宿主接口

    @abstractmethod
    def popular(self, page: int) -> SeriesPage:
        pass

    def latest(self, page: int) -> SeriesPage:
        return self.popular(page)

    @abstractmethod
    def search(self, page: int, query: str) -> SeriesPage:
        pass

    @abstractmethod
    def details(self, series_ref: str) -> SeriesSummary:
        pass

    @abstractmethod
    def chapters(self, series_ref: str) -> List[ChapterSummary]:
        pass

    @abstractmethod
    def pages(self, chapter_ref: str) -> List[PageRef]:
        pass

    def image_url(self, page: PageRef) -> Optional[str]:
        return page.image_url

    def preference_schema(self) -> List[Dict[str, Any]]:
        return []

    def set_preference(self, key: str, value: Any):
        self.store.edit(**{key: value})
