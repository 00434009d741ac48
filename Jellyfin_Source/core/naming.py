"""
章节/书籍名称装饰规则
按固定顺序匹配名称（或类型），第一个命中的规则决定前缀图标
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .models import RemoteItem


@dataclass(frozen=True)
class LabelRule:
    """一条名称规则：matches(item) 为真时使用 label 作为前缀"""
    description: str
    matches: Callable[[RemoteItem], bool]
    label: str


def name_contains(marker: str, label: str) -> LabelRule:
    marker_lower = marker.lower()
    return LabelRule(
        f"contains {marker}",
        lambda item: marker_lower in item.name.lower(),
        label,
    )


def name_endswith(suffix: str, label: str) -> LabelRule:
    suffix_lower = suffix.lower()
    return LabelRule(
        f"endswith {suffix}",
        lambda item: item.name.lower().endswith(suffix_lower),
        label,
    )


def type_is(item_type: str, label: str) -> LabelRule:
    return LabelRule(
        f"type {item_type}",
        lambda item: item.type == item_type,
        label,
    )


# 系列中的子条目：先章节/卷标记，再文件扩展名
CHAPTER_LABEL_RULES = (
    name_contains("Ch.", "📖"),
    name_contains("Chapter", "📖"),
    name_contains("Vol.", "📚"),
    name_contains("Volume", "📚"),
    name_endswith(".pdf", "📄"),
    name_endswith(".epub", "📖"),
    name_endswith(".cbz", "📚"),
    name_endswith(".cbr", "📚"),
)
CHAPTER_DEFAULT = "📖 {name}"

# 不带类型过滤的子条目列表：额外按条目类型判断
UNTYPED_LABEL_RULES = CHAPTER_LABEL_RULES + (
    type_is("Book", "📚"),
)
UNTYPED_DEFAULT = "📄 {name} ({type})"

# 单本书籍作为唯一章节
BOOK_LABEL_RULES = (
    name_endswith(".pdf", "📄"),
    name_endswith(".epub", "📖"),
    name_endswith(".mobi", "📱"),
)
BOOK_DEFAULT = "📚 {name}"


def match_rule(item: RemoteItem, rules: Sequence[LabelRule]) -> Optional[LabelRule]:
    """返回第一个命中的规则，都不命中返回 None"""
    for rule in rules:
        if rule.matches(item):
            return rule
    return None


def decorate_name(item: RemoteItem, rules: Sequence[LabelRule], default: str) -> str:
    """
    生成展示名称

    Args:
        item: 远程条目
        rules: 有序规则表
        default: 无规则命中时使用的模板（可用 {name}、{type}）

    Returns:
        "<图标> <名称>" 形式的名称
    """
    rule = match_rule(item, rules)
    if rule is not None:
        return f"{rule.label} {item.name}"
    return default.format(name=item.name, type=item.type or "Unknown")
