"""
locally - 为 .local 域名管理 hosts 记录和本地受信任的 HTTPS 证书
"""

__version__ = "0.1.0"
__author__ = "locallyCLI Project"

from locally.app import LocallyApp
from locally.config import Config
from locally.models import DomainRecord
from locally.registry import DomainRegistry

__all__ = ["LocallyApp", "Config", "DomainRecord", "DomainRegistry"]
