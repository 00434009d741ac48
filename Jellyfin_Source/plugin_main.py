#!/usr/bin/env python3
"""
Jellyfin Source Plugin - 主入口
通过 stdin/stdout 与宿主通信（每行一个 JSON 请求/响应）
"""

import io
import sys
import json
import logging
from typing import Dict, Any, Optional, TextIO

from .core.config_loader import load_config
from .core.models import PageRef
from .sources.jellyfin import JellyfinSource
from .web.exceptions import SourceError


class PluginMain:
    """插件主入口"""

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 source: Optional[JellyfinSource] = None,
                 stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        """
        初始化插件

        Args:
            config: 配置字典（默认从 config/config.yml 加载）
            source: 内容源（默认按配置创建）
            stdin: 请求输入流
            stdout: 响应输出流
        """
        self.config = config if config is not None else load_config()
        self.logger = logging.getLogger(__name__)
        self.source = source or JellyfinSource(self.config)
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout

        self.handlers = {
            'info': self._handle_info,
            'popular': self._handle_popular,
            'latest': self._handle_latest,
            'search': self._handle_search,
            'details': self._handle_details,
            'chapters': self._handle_chapters,
            'pages': self._handle_pages,
            'image_url': self._handle_image_url,
            'preferences': self._handle_preferences,
            'set_preference': self._handle_set_preference,
        }

        self.logger.info("Plugin initialized")

    def _write(self, response: Dict[str, Any]):
        print(json.dumps(response, ensure_ascii=False), file=self.stdout)
        self.stdout.flush()

    def run(self):
        """运行插件主循环"""
        self.logger.info("Plugin started")

        try:
            for line in self.stdin:
                line = line.strip()
                if not line:
                    continue

                try:
                    request = json.loads(line)
                except json.JSONDecodeError as e:
                    self.logger.error(f"JSON decode error: {e}")
                    self._write({
                        'success': False,
                        'error': f'Invalid JSON: {str(e)}'
                    })
                    continue

                self.logger.debug(f"Received request: {request}")
                self._write(self.handle_request(request))

        except KeyboardInterrupt:
            self.logger.info("Plugin interrupted by user")

        finally:
            self.logger.info("Plugin stopped")

    def handle_request(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        处理请求

        Args:
            request: 请求字典，包含 action 字段

        Returns:
            响应字典：{'success': True, 'data': ...} 或 {'success': False, 'error': {...}}
        """
        action = request.get('action') if isinstance(request, dict) else None
        handler = self.handlers.get(action)
        if handler is None:
            return {
                'success': False,
                'error': f'Unknown action: {action}'
            }

        try:
            return {'success': True, 'data': handler(request)}
        except (SourceError, ValueError, KeyError) as e:
            error = self.source.error_handler.handle_exception(e, self.source.name, action)
            return {'success': False, 'error': error.to_dict()}
        except Exception as e:
            self.logger.exception(f"Unexpected error in {action}: {e}")
            error = self.source.error_handler.handle_exception(e, self.source.name, action)
            return {'success': False, 'error': error.to_dict()}

    @staticmethod
    def _page_number(request: Dict[str, Any]) -> int:
        page = int(request.get('page', 1))
        if page < 1:
            raise ValueError(f"Invalid page number: {page}")
        return page

    @staticmethod
    def _ref(request: Dict[str, Any]) -> str:
        ref = request.get('url')
        if not ref:
            raise ValueError("Missing url parameter")
        return ref

    def _handle_info(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return self.source.info()

    def _handle_popular(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return self.source.popular(self._page_number(request)).to_dict()

    def _handle_latest(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return self.source.latest(self._page_number(request)).to_dict()

    def _handle_search(self, request: Dict[str, Any]) -> Dict[str, Any]:
        query = request.get('query') or ""
        return self.source.search(self._page_number(request), query).to_dict()

    def _handle_details(self, request: Dict[str, Any]) -> Dict[str, Any]:
        return self.source.details(self._ref(request)).to_dict()

    def _handle_chapters(self, request: Dict[str, Any]):
        return [chapter.to_dict() for chapter in self.source.chapters(self._ref(request))]

    def _handle_pages(self, request: Dict[str, Any]):
        return [page.to_dict() for page in self.source.pages(self._ref(request))]

    def _handle_image_url(self, request: Dict[str, Any]) -> Dict[str, Any]:
        page_data = request.get('page') or {}
        page = PageRef(
            index=int(page_data.get('index', 0)),
            url=page_data.get('url') or "",
            image_url=page_data.get('image_url'),
        )
        return {
            'url': self.source.image_url(page),
            'headers': self.source.image_headers(),
        }

    def _handle_preferences(self, request: Dict[str, Any]):
        return self.source.preference_schema()

    def _handle_set_preference(self, request: Dict[str, Any]):
        self.source.set_preference(request['key'], request.get('value'))
        return self.source.preference_schema()


def setup_logging(config: Dict[str, Any]):
    """设置日志（写入文件，避免干扰 stdout）"""
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO')
    log_file = log_config.get('log_file', 'jellyfin_source.log')
    log_format = log_config.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    logging.basicConfig(
        level=getattr(logging, log_level),
        format=log_format,
        filename=log_file,
        filemode='a',
        encoding='utf-8'
    )


def main():
    """主函数"""
    sys.stdin = io.TextIOWrapper(sys.stdin.buffer, encoding='utf-8')
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', line_buffering=True)

    config = load_config()
    setup_logging(config)
    plugin = PluginMain(config)
    plugin.run()


if __name__ == '__main__':
    main()
