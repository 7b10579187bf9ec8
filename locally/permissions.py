"""
hosts 文件写权限管理模块
"""

import logging
import os
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

from locally.errors import PermissionManagerError

WRITABLE_MODE = "666"
RESTRICTED_MODE = "644"


class HostsPermissionManager:
    """
    在修改前临时放开 hosts 文件写权限，修改后恢复为 644

    文件本身已可写时不做任何事。
    """

    def __init__(self, hosts_path: str, logger: logging.Logger, use_sudo: bool = True):
        self.hosts_path = Path(hosts_path)
        self.logger = logger
        self.use_sudo = use_sudo

    def _chmod(self, mode: str) -> None:
        cmd: List[str] = ["chmod", mode, str(self.hosts_path)]
        if self.use_sudo:
            cmd.insert(0, "sudo")

        self.logger.debug(f"执行: {' '.join(cmd)}")
        try:
            subprocess.run(cmd, check=True, text=True)
        except (subprocess.CalledProcessError, OSError) as e:
            raise PermissionManagerError(
                f"无法修改 {self.hosts_path} 的权限为 {mode}: {e}"
            ) from e

    def is_writable(self) -> bool:
        return os.access(self.hosts_path, os.W_OK)

    def enable_write_access(self) -> None:
        self.logger.info(f"正在获取 {self.hosts_path} 的写权限...")
        if self.use_sudo:
            self.logger.info("需要 sudo 权限，请输入密码。")
        self._chmod(WRITABLE_MODE)

    def disable_write_access(self) -> None:
        self.logger.info(f"正在恢复 {self.hosts_path} 的权限为 {RESTRICTED_MODE}...")
        self._chmod(RESTRICTED_MODE)

    @contextmanager
    def writable(self) -> Iterator[None]:
        """
        在 with 块内保证 hosts 文件可写

        异常:
            PermissionManagerError: chmod 失败
        """
        if self.is_writable():
            yield
            return

        self.enable_write_access()
        try:
            yield
        finally:
            self.disable_write_access()
