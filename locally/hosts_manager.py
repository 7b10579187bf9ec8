"""
Hosts 文件读写模块，支持原子性更新
"""

import logging
import os
import tempfile
from pathlib import Path

from locally.models import END_MARKER, START_MARKER
from locally.region import has_region


class HostsFileStore:
    """
    读写真实的 hosts 文件

    每次修改都是 读取全文 -> 转换 -> 整体写回。
    目录可写时使用 临时文件 + 重命名 的原子性替换，否则直接覆盖原文件
    （权限管理器只授予文件本身的写权限，/etc 目录通常不可写）。
    """

    def __init__(self, hosts_path: str, logger: logging.Logger):
        """
        初始化 hosts 文件存储

        参数:
            hosts_path: hosts 文件路径
            logger: 日志记录器实例
        """
        self.hosts_path = Path(hosts_path)
        self.logger = logger

    def __str__(self) -> str:
        return str(self.hosts_path)

    def read(self) -> str:
        """
        读取 hosts 文件全文

        异常:
            FileNotFoundError: hosts 文件不存在
            PermissionError: 没有读取权限
        """
        try:
            with open(self.hosts_path, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except FileNotFoundError:
            self.logger.error(f"Hosts 文件不存在: {self.hosts_path}")
            raise
        except PermissionError:
            self.logger.error(f"读取 hosts 文件权限被拒绝: {self.hosts_path}")
            raise

    def write(self, text: str) -> None:
        """
        整体写回 hosts 文件

        参数:
            text: 新的文件全文

        异常:
            PermissionError: 如果没有写入 hosts 文件的权限
            OSError: 如果文件系统操作失败
        """
        try:
            if os.access(self.hosts_path.parent, os.W_OK):
                self._write_atomic(text)
            else:
                self._write_in_place(text)
            self.logger.debug(f"已写入 hosts 文件: {self.hosts_path}")
        except PermissionError:
            self.logger.error(
                f"写入 hosts 文件权限被拒绝: {self.hosts_path}. "
                "请确认已获得写权限。"
            )
            raise
        except Exception as e:
            self.logger.error(f"更新 hosts 文件失败: {e}")
            raise

    def _write_in_place(self, text: str) -> None:
        with open(self.hosts_path, 'w', encoding='utf-8', newline='') as f:
            f.write(text)

    def _write_atomic(self, text: str) -> None:
        mode = self.hosts_path.stat().st_mode if self.hosts_path.exists() else 0o644

        # 写入临时文件（同一目录）
        temp_fd, temp_path = tempfile.mkstemp(
            dir=self.hosts_path.parent,
            prefix='.hosts.tmp.',
            text=True
        )

        try:
            with os.fdopen(temp_fd, 'w', encoding='utf-8', newline='') as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())

            os.chmod(temp_path, mode & 0o7777)
            # 原子性替换（同一文件系统内有效）
            os.replace(temp_path, self.hosts_path)

        except Exception:
            # 出错时清理临时文件
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise


class MemoryHostsStore:
    """内存中的 hosts 文本，用于测试和演练"""

    def __init__(self, text: str = ""):
        self.text = text
        self.writes = 0

    def __str__(self) -> str:
        return "<memory>"

    def read(self) -> str:
        return self.text

    def write(self, text: str) -> None:
        self.text = text
        self.writes += 1


def initialize_region(store, logger: logging.Logger) -> bool:
    """
    在 hosts 文件末尾追加空的配置区域

    参数:
        store: HostsFileStore 或 MemoryHostsStore
        logger: 日志记录器实例

    返回:
        新建区域返回 True，区域已存在返回 False

    异常:
        RegionMalformed: 区域标记存在但不一致
    """
    text = store.read()
    if has_region(text):
        logger.info(f"locallyCLI 配置区域已存在于 {store}")
        return False

    store.write(text + "\n\n" + START_MARKER + "\n" + END_MARKER + "\n")
    logger.info(f"已在 {store} 中写入 locallyCLI 配置区域")
    return True
