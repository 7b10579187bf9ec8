"""
locally 数据模型与记录编解码

每个受管域名在 hosts 文件中占三行:

    #--- app.local: certdir(/proj/_localcerts) ---#
    ::1 app.local
    127.0.0.1 app.local
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

START_MARKER = "## START: locallyCLI configurations ##"
END_MARKER = "## END: locallyCLI configurations ##"

IPV6_LOOPBACK = "::1"
IPV4_LOOPBACK = "127.0.0.1"
LOOPBACK_ADDRESSES = (IPV6_LOOPBACK, IPV4_LOOPBACK)

ANNOTATION_TEMPLATE = "#--- {hostname}: certdir({cert_dir}) ---#"
_ANNOTATION_RE = re.compile(r"^#--- (?P<hostname>\S+): certdir\((?P<cert_dir>.*)\) ---#$")


@dataclass(frozen=True)
class DomainRecord:
    """
    代表配置区域中的一个受管域名

    属性:
        hostname: 完整主机名，例如 app.local
        cert_dir: 证书文件所在目录的绝对路径
    """

    hostname: str
    cert_dir: str

    def annotation_line(self) -> str:
        return ANNOTATION_TEMPLATE.format(hostname=self.hostname, cert_dir=self.cert_dir)

    def loopback_lines(self) -> List[str]:
        return [f"{address} {self.hostname}" for address in LOOPBACK_ADDRESSES]

    def to_hosts_lines(self) -> List[str]:
        """
        转换为 hosts 文件中的三行

        返回:
            [注释行, IPv6 回环行, IPv4 回环行]
        """
        return [self.annotation_line()] + self.loopback_lines()

    def __str__(self) -> str:
        return f"{self.hostname} (certdir: {self.cert_dir})"


@dataclass(frozen=True)
class Region:
    """
    hosts 文件中 START/END 标记之间的区域

    属性:
        lines: 两个标记之间的行（不含标记本身）
        start: START 标记的行索引
        end: END 标记的行索引
    """

    lines: List[str]
    start: int
    end: int

    def contains_index(self, index: int) -> bool:
        return self.start < index < self.end


@dataclass(frozen=True)
class CertificatePair:
    """证书工具生成的证书与私钥文件"""

    cert_file: Path
    key_file: Path

    def files(self) -> List[Path]:
        return [self.cert_file, self.key_file]


def encode_record(record: DomainRecord) -> List[str]:
    """把记录编码为 hosts 文件中的三行"""
    return record.to_hosts_lines()


def parse_annotation(line: str) -> Optional[DomainRecord]:
    """
    解析注释行

    参数:
        line: hosts 文件中的任意一行

    返回:
        匹配时返回 DomainRecord，否则返回 None（不抛异常）
    """
    match = _ANNOTATION_RE.match(line)
    if match is None:
        return None
    return DomainRecord(hostname=match.group("hostname"), cert_dir=match.group("cert_dir"))


def decode_annotation(line: str) -> Optional[str]:
    """从注释行中取出证书目录，不是注释行时返回 None"""
    record = parse_annotation(line)
    return record.cert_dir if record else None


def loopback_hostnames(line: str) -> List[str]:
    """
    返回回环映射行中的主机名字段

    非回环行（包括注释、空行、其他 IP）返回空列表。
    """
    fields = line.split("#", 1)[0].split()
    if len(fields) < 2 or fields[0] not in LOOPBACK_ADDRESSES:
        return []
    return fields[1:]
