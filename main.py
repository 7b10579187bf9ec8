#!/usr/bin/env python3
"""
locally - 主入口点

为 .local 域名管理 /etc/hosts 记录和本地受信任的 HTTPS 证书。
"""

import sys
from pathlib import Path

# 将当前目录添加到路径以导入 locally 模块
sys.path.insert(0, str(Path(__file__).parent))

from locally.cli import main


if __name__ == '__main__':
    main()
