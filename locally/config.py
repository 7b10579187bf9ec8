"""
配置管理模块，支持环境变量
"""

import os
from dataclasses import dataclass

from locally.mutation import MatchMode


@dataclass
class Config:
    """应用配置类，从环境变量加载配置"""

    hosts_file_path: str = "/etc/hosts"
    cert_dir_name: str = "_localcerts"
    tld: str = ".local"
    match_mode: str = "exact"
    use_sudo: bool = True
    mkcert_path: str = "mkcert"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """
        从环境变量加载配置

        环境变量说明:
            HOSTS_FILE: hosts 文件路径 (默认: /etc/hosts)
            CERT_DIR_NAME: 项目根目录下的证书目录名 (默认: _localcerts)
            TLD: 保留的顶级域名后缀 (默认: .local)
            MATCH_MODE: 主机名匹配方式 exact/substring (默认: exact)
            USE_SUDO: 修改 hosts 文件权限时使用 sudo (默认: true)
            MKCERT_PATH: mkcert 可执行文件 (默认: mkcert)
            LOG_LEVEL: 日志级别 (默认: INFO)
        """
        return cls(
            hosts_file_path=os.getenv("HOSTS_FILE", "/etc/hosts"),
            cert_dir_name=os.getenv("CERT_DIR_NAME", "_localcerts"),
            tld=os.getenv("TLD", ".local"),
            match_mode=os.getenv("MATCH_MODE", "exact").lower(),
            use_sudo=os.getenv("USE_SUDO", "true").lower() == "true",
            mkcert_path=os.getenv("MKCERT_PATH", "mkcert"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper()
        )

    @property
    def mode(self) -> MatchMode:
        return MatchMode(self.match_mode)

    def validate(self) -> None:
        """验证配置是否有效"""
        valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.log_level not in valid_log_levels:
            raise ValueError(
                f"无效的 LOG_LEVEL: {self.log_level}. "
                f"必须是以下之一: {', '.join(sorted(valid_log_levels))}"
            )

        valid_modes = {mode.value for mode in MatchMode}
        if self.match_mode not in valid_modes:
            raise ValueError(
                f"无效的 MATCH_MODE: {self.match_mode}. "
                f"必须是以下之一: {', '.join(sorted(valid_modes))}"
            )

        if not self.tld.startswith(".") or len(self.tld) < 2:
            raise ValueError(f"无效的 TLD: {self.tld}. 必须以 . 开头")

        if not self.cert_dir_name:
            raise ValueError("CERT_DIR_NAME 不能为空")
