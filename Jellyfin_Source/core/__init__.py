"""
核心模块
"""

from .config_loader import load_config
from .error_handler import ErrorHandler, ErrorCategory, StructuredError
from .preferences import PreferenceStore, get_store
from .session import Session, normalize_server_url

__all__ = [
    'load_config',
    'ErrorHandler',
    'ErrorCategory',
    'StructuredError',
    'PreferenceStore',
    'get_store',
    'Session',
    'normalize_server_url',
]
