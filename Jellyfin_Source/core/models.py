"""
核心数据模型
远程（Jellyfin JSON）模型和宿主侧（系列/章节/页面）模型
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, Any, Optional, List


# 宿主的连载状态常量
STATUS_UNKNOWN = 0
STATUS_ONGOING = 1
STATUS_COMPLETED = 2


@dataclass
class RemotePerson:
    """条目关联人员（作者、插画等）"""
    name: str
    type: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RemotePerson':
        """
        Raises:
            ValueError: 条目不是 JSON 对象
        """
        if not isinstance(data, dict):
            raise ValueError(f"人员条目格式错误: {data!r}")
        return cls(name=data.get('Name', ''), type=data.get('Type', ''))


@dataclass
class RemoteItem:
    """
    远程目录节点（媒体库、文件夹/系列、或书籍文件）

    没有固定的类型判别字段：
        id: 条目 ID（必需）
        name: 名称（缺失时为空字符串）
        type: 条目类型（Folder / CollectionFolder / Book ...，可能缺失）
        overview: 简介
        genres: 类型标签
        people: 关联人员
        child_count: 子条目数量
    """
    id: str
    name: str = ""
    type: Optional[str] = None
    overview: Optional[str] = None
    genres: Optional[List[str]] = None
    people: Optional[List[RemotePerson]] = None
    child_count: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RemoteItem':
        """
        从 Jellyfin JSON 构造条目

        Raises:
            ValueError: 缺少 Id 字段，或人员条目不是 JSON 对象
        """
        if not isinstance(data, dict) or not data.get('Id'):
            raise ValueError(f"条目缺少 Id 字段: {data!r}")

        people = data.get('People')
        return cls(
            id=str(data['Id']),
            name=str(data.get('Name') or ""),
            type=data.get('Type'),
            overview=data.get('Overview'),
            genres=data.get('Genres'),
            people=[RemotePerson.from_dict(p) for p in people] if people is not None else None,
            child_count=data.get('ChildCount'),
        )


@dataclass
class ItemsResponse:
    """/Users/{userId}/Items 与 /Users/{userId}/Views 的分页响应"""
    items: List[RemoteItem] = field(default_factory=list)
    total_record_count: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ItemsResponse':
        if not isinstance(data, dict):
            raise ValueError(f"列表响应格式错误: {type(data).__name__}")
        return cls(
            items=[RemoteItem.from_dict(item) for item in data.get('Items') or []],
            total_record_count=data.get('TotalRecordCount'),
        )


@dataclass
class RemoteUser:
    id: str
    name: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RemoteUser':
        return cls(id=str(data['Id']), name=data.get('Name') or "")


@dataclass
class Attachment:
    """条目声明的附件（漫画归档中的图片等）"""
    index: int
    filename: str
    mime_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Attachment':
        return cls(
            index=int(data['Index']),
            filename=data.get('Filename') or "",
            mime_type=data.get('MimeType'),
        )


@dataclass
class SeriesSummary:
    """宿主侧的系列记录"""
    title: str
    url: str
    thumbnail_url: Optional[str] = None
    description: str = ""
    author: str = "Unknown"
    genre: str = ""
    status: int = STATUS_ONGOING
    initialized: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ChapterSummary:
    """宿主侧的章节记录（url 中编码了远程条目 ID）"""
    name: str
    url: str
    chapter_number: float = 1.0
    date_upload: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SeriesPage:
    """一页系列列表；has_more 表示宿主是否可以请求下一页"""
    items: List[SeriesSummary] = field(default_factory=list)
    has_more: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'items': [item.to_dict() for item in self.items],
            'has_more': self.has_more,
        }


@dataclass
class PageRef:
    """
    章节中的一页

    index: 页序号（从 0 开始）
    url: 页面地址（本插件不使用，保持为空）
    image_url: 可直接获取的图片或下载地址
    """
    index: int
    url: str = ""
    image_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
