"""
配置加载器
从 config.yml 加载插件配置
"""

import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional


def load_config(config_file: str = "config/config.yml") -> Dict[str, Any]:
    """
    加载配置文件

    Args:
        config_file: 配置文件路径（相对于插件根目录，也可以是绝对路径）

    Returns:
        配置字典（用户配置覆盖默认配置）
    """
    plugin_root = Path(__file__).parent.parent
    config_path = Path(config_file)
    if not config_path.is_absolute():
        config_path = plugin_root / config_file

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        return _get_default_config()
    except Exception as e:
        raise RuntimeError(f"配置文件加载失败: {e}")

    return _merge(_get_default_config(), config or {})


def _merge(base: Dict[str, Any], override: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """递归合并两个配置字典，override 中的值优先"""
    result = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def _get_default_config() -> Dict[str, Any]:
    """返回默认配置"""
    return {
        'source': {
            'id': 'jellyfin',
            'name': 'Jellyfin',
            'lang': 'all',
            'locale': 'en'
        },
        'network': {
            'proxy_server': None,
            'timeout': None,
            'use_cloudscraper': False
        },
        'listing': {
            'page_size': 20,
            'fallback_library_name': 'Books'
        },
        'pages': {
            'probe_limit': 100,
            'image_extensions': ['.jpg', '.jpeg', '.png', '.gif', '.webp', '.bmp', '.avif'],
            'comic_markers': ['.cbz', '.cbr', '.cb7', '.cbt']
        },
        'preferences': {
            'directory': 'preferences'
        },
        'logging': {
            'level': 'INFO',
            'log_file': 'jellyfin_source.log',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        }
    }
