"""
证书工具模块，封装 mkcert 命令行
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from locally.errors import CertificateError
from locally.models import CertificatePair

CERT_FILE_MODE = 0o644


class CertificateTool:
    """
    调用 mkcert 生成本地受信任证书

    只负责生成和删除证书文件，不检查证书内容。
    """

    def __init__(self, logger: logging.Logger, mkcert_path: str = "mkcert"):
        """
        初始化证书工具

        参数:
            logger: 日志记录器实例
            mkcert_path: mkcert 可执行文件名或路径
        """
        self.logger = logger
        self.mkcert_path = mkcert_path

    @staticmethod
    def paths_for(hostname: str, cert_dir: str) -> CertificatePair:
        directory = Path(cert_dir)
        return CertificatePair(
            cert_file=directory / f"{hostname}.pem",
            key_file=directory / f"{hostname}-key.pem"
        )

    def _run(self, args: List[str]) -> str:
        cmd = [self.mkcert_path] + args
        self.logger.debug(f"执行: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, check=True, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise CertificateError(f"找不到 mkcert: {self.mkcert_path}") from e
        except subprocess.CalledProcessError as e:
            self.logger.error(f"mkcert 执行失败 (exit={e.returncode}): {e.stderr}")
            raise CertificateError(f"mkcert {' '.join(args)} 执行失败") from e
        return result.stdout.strip()

    def location(self) -> Optional[str]:
        return shutil.which(self.mkcert_path)

    def is_available(self) -> bool:
        return self.location() is not None

    def version(self) -> str:
        return self._run(["-version"])

    def install_ca(self) -> None:
        """把 mkcert 本地 CA 安装到系统信任库"""
        self.logger.info("正在安装 mkcert 本地 CA...")
        self._run(["-install"])

    def issue(self, hostname: str, cert_dir: str) -> CertificatePair:
        """
        为 hostname 生成证书

        参数:
            hostname: 完整主机名
            cert_dir: 证书输出目录

        返回:
            CertificatePair

        异常:
            CertificateError: mkcert 不存在或执行失败
        """
        pair = self.paths_for(hostname, cert_dir)
        Path(cert_dir).mkdir(parents=True, exist_ok=True)

        self.logger.info(f"正在为 {hostname} 生成证书...")
        self._run([
            "-cert-file", str(pair.cert_file),
            "-key-file", str(pair.key_file),
            hostname
        ])

        # 证书需要对所有用户可读（开发服务器不一定以当前用户运行）
        for path in pair.files():
            os.chmod(path, CERT_FILE_MODE)

        self.logger.info(f"证书已生成: {pair.cert_file}, {pair.key_file}")
        return pair

    def delete(self, hostname: str, cert_dir: str) -> None:
        """
        删除 hostname 的证书文件，目录变空时一并删除

        异常:
            CertificateError: 文件删除失败
        """
        pair = self.paths_for(hostname, cert_dir)
        for path in pair.files():
            try:
                path.unlink()
                self.logger.info(f"已删除证书文件: {path}")
            except FileNotFoundError:
                self.logger.warning(f"证书文件不存在，跳过: {path}")
            except OSError as e:
                raise CertificateError(f"无法删除证书文件 {path}: {e}") from e

        directory = Path(cert_dir)
        if directory.is_dir() and not any(directory.iterdir()):
            directory.rmdir()
            self.logger.info(f"已删除空的证书目录: {directory}")
