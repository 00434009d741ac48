"""
偏好设置存储
按内容源 ID 划分的键值存储，持久化为 JSON 文件（source_{id}_preferences.json）
"""

import json
import logging
import threading
from pathlib import Path
from typing import Dict, Any, Optional


logger = logging.getLogger(__name__)

_stores: Dict[str, 'PreferenceStore'] = {}
_stores_lock = threading.Lock()


class PreferenceStore:
    """键值偏好存储；path 为 None 时只保存在内存中"""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else None
        self._lock = threading.Lock()
        self._values: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"偏好设置读取失败 {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self):
        if self.path is None:
            return
        # 目录不可写时（如只读安装目录）仍保留内存中的值
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(self._values, f, ensure_ascii=False, indent=2)
        except OSError as e:
            logger.error(f"偏好设置保存失败 {self.path}: {e}")

    def get(self, key: str, default: str = "") -> str:
        with self._lock:
            value = self._values.get(key)
        return default if value is None else value

    def edit(self, **values: Any):
        """一次写入多个键（原子地更新并保存）"""
        with self._lock:
            self._values.update(values)
            self._save()

    def as_dict(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._values)


def get_store(source_id: str, directory: Optional[Path] = None) -> PreferenceStore:
    """
    获取内容源的偏好存储（同一进程内同一 source_id 只创建一次）

    Args:
        source_id: 内容源 ID
        directory: 存储目录；为 None 时只保存在内存中

    Returns:
        PreferenceStore 对象
    """
    with _stores_lock:
        store = _stores.get(source_id)
        if store is None:
            path = Path(directory) / f"source_{source_id}_preferences.json" if directory else None
            store = PreferenceStore(path)
            _stores[source_id] = store
        return store


def reset_stores():
    """清空进程内的存储注册表（测试用）"""
    with _stores_lock:
        _stores.clear()
