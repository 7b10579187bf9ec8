"""
locally 主应用模块
"""

import logging
import sys
from pathlib import Path
from typing import Iterator, List, Optional

from locally.certs import CertificateTool
from locally.config import Config
from locally.errors import CertificateError
from locally.hosts_manager import HostsFileStore, initialize_region
from locally.models import DomainRecord
from locally.permissions import HostsPermissionManager
from locally.registry import DomainRegistry


class LocallyApp:
    """
    主应用控制器，协调所有组件

    - 初始化 hosts 文件中的配置区域并安装 mkcert CA
    - 添加域名：生成证书后写入 hosts 记录
    - 移除域名：删除证书后移除 hosts 记录
    - 修改 hosts 文件前后管理写权限
    """

    def __init__(
        self,
        config: Config,
        store=None,
        certs: Optional[CertificateTool] = None,
        permissions: Optional[HostsPermissionManager] = None
    ):
        """
        初始化 locally 应用

        参数:
            config: 应用配置
            store: hosts 文件存储（默认使用 config.hosts_file_path）
            certs: 证书工具（默认调用 config.mkcert_path）
            permissions: 权限管理器

        异常:
            ValueError: 如果配置无效
        """
        self.config = config
        self.config.validate()

        self.logger = self._setup_logging()

        self.store = store or HostsFileStore(config.hosts_file_path, self.logger)
        self.registry = DomainRegistry(
            self.logger,
            tld=config.tld,
            match_mode=config.mode
        )
        self.certs = certs or CertificateTool(self.logger, config.mkcert_path)
        self.permissions = permissions or HostsPermissionManager(
            config.hosts_file_path,
            self.logger,
            use_sudo=config.use_sudo
        )

    def _setup_logging(self) -> logging.Logger:
        """
        配置日志系统

        返回:
            配置好的日志记录器实例
        """
        logger = logging.getLogger('locally')
        logger.setLevel(self.config.log_level)

        # 避免重复的处理器
        if logger.handlers:
            return logger

        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(self.config.log_level)

        # 格式: 时间戳 - 名称 - 级别 - 消息
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)

        logger.addHandler(handler)
        return logger

    def default_cert_dir(self, project_root: str) -> str:
        return str(Path(project_root).resolve() / self.config.cert_dir_name)

    def initialize(self, install_ca: bool = True) -> bool:
        """
        初始化：安装 mkcert CA 并在 hosts 文件中写入配置区域

        参数:
            install_ca: 是否执行 mkcert -install

        返回:
            新建了配置区域返回 True，区域已存在返回 False

        异常:
            CertificateError: mkcert 不可用或安装 CA 失败
            RegionMalformed: 已有区域标记不一致
        """
        self.logger.info("=" * 60)
        self.logger.info("locally 初始化中...")
        self.logger.info(f"Hosts 文件: {self.config.hosts_file_path}")
        self.logger.info("=" * 60)

        if install_ca:
            if not self.certs.is_available():
                raise CertificateError(
                    f"未找到 mkcert ({self.config.mkcert_path})，请先安装 mkcert"
                )
            self.logger.info(f"mkcert 位置: {self.certs.location()}")
            self.logger.info(f"mkcert 版本: {self.certs.version()}")
            self.certs.install_ca()

        with self.permissions.writable():
            created = initialize_region(self.store, self.logger)

        return created

    def list_domains(self) -> List[DomainRecord]:
        return self.registry.list_domains(self.store)

    def display_lines(self) -> Iterator[str]:
        return self.registry.display_lines(self.store)

    def add_domain(self, name: str, project_root: str) -> DomainRecord:
        """
        添加 .local 域名并生成证书

        参数:
            name: 域名（可省略 .local 后缀）
            project_root: 项目根目录，证书保存在其下的证书目录中

        返回:
            新添加的 DomainRecord
        """
        hostname = self.registry.qualify(name)

        # 先检查所有前置条件，再生成证书和修改文件
        self.registry.check_can_add(self.store, hostname)

        cert_dir = self.default_cert_dir(project_root)
        self.certs.issue(hostname, cert_dir)

        try:
            with self.permissions.writable():
                record = self.registry.add(self.store, hostname, cert_dir)
        except Exception as e:
            self.logger.error(f"添加 {hostname} 失败，正在删除已生成的证书: {e}")
            try:
                self.certs.delete(hostname, cert_dir)
            except CertificateError as cleanup_error:
                self.logger.error(f"删除已生成的证书失败: {cleanup_error}")
            raise

        self.logger.info(f"[SUCCESS] 域名 {hostname} 已安装")
        return record

    def remove_domain(self, name: str, project_root: str) -> str:
        """
        移除域名及其证书

        参数:
            name: 域名（可省略 .local 后缀）
            project_root: 记录中没有证书目录时使用的项目根目录

        返回:
            被移除的完整主机名
        """
        hostname = self.registry.qualify(name)
        self.registry.check_can_remove(self.store, hostname)

        record = self.registry.get(self.store, hostname)
        if record is not None:
            cert_dir = record.cert_dir
        else:
            cert_dir = self.default_cert_dir(project_root)
            self.logger.warning(
                f"{hostname} 没有证书目录注释，使用默认目录 {cert_dir}"
            )

        # 先拿到写权限，再删除证书和记录
        with self.permissions.writable():
            self.certs.delete(hostname, cert_dir)
            self.registry.remove(self.store, hostname)

        self.logger.info(f"域名 {hostname} 已成功移除")
        return hostname
