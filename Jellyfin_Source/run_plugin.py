#!/usr/bin/env python3
"""
Jellyfin Source Plugin Entry Point
插件入口文件，用于启动插件主程序
"""

import sys
from pathlib import Path

# 添加包的上级目录到 Python 路径（直接运行本文件时包尚未安装）
package_parent = Path(__file__).resolve().parent.parent
if str(package_parent) not in sys.path:
    sys.path.insert(0, str(package_parent))

# 导入并运行插件主程序
from Jellyfin_Source.plugin_main import main

if __name__ == '__main__':
    main()
