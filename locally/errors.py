"""
locally 异常定义

所有异常都继承自 LocallyError，CLI 层据此给出针对性的提示。
"""

from typing import Optional


class LocallyError(Exception):
    """locally 所有错误的基类"""


class RegionNotFound(LocallyError):
    """hosts 文件中不存在 locallyCLI 配置区域（尚未执行 init）"""

    def __init__(self, hosts_path: Optional[str] = None):
        self.hosts_path = hosts_path
        where = f" ({hosts_path})" if hosts_path else ""
        super().__init__(f"hosts 文件中没有 locallyCLI 配置区域{where}")


# 对调用方而言，区域缺失就是"未初始化"
NotInitialized = RegionNotFound


class RegionMalformed(LocallyError):
    """区域标记存在但不一致，无法安全修改"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"locallyCLI 配置区域格式错误: {reason}")


class InvalidHostname(LocallyError):
    """主机名不合法"""

    def __init__(self, hostname: str, reason: str):
        self.hostname = hostname
        self.reason = reason
        super().__init__(f"无效的主机名 {hostname!r}: {reason}")


class DuplicateDomain(LocallyError):
    """域名已存在于配置区域中"""

    def __init__(self, hostname: str):
        self.hostname = hostname
        super().__init__(f"{hostname} 已存在于 hosts 文件中")


class DomainNotFound(LocallyError):
    """域名不在配置区域中"""

    def __init__(self, hostname: str):
        self.hostname = hostname
        super().__init__(f"{hostname} 不存在于 hosts 文件中")


class WriteVerificationFailed(LocallyError):
    """写入后重新读取的结果与预期不符"""

    def __init__(self, hostname: str, expected_present: bool):
        self.hostname = hostname
        self.expected_present = expected_present
        action = "添加" if expected_present else "移除"
        super().__init__(
            f"写入后校验失败: {hostname} 未能从 hosts 文件中{action}"
        )


class CertificateError(LocallyError):
    """证书工具执行失败"""


class PermissionManagerError(LocallyError):
    """无法获取或恢复 hosts 文件的写权限"""
