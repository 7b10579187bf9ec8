"""
域名注册表模块

在配置区域之上提供 list / exists / add / remove。
所有操作都显式接收 store，每次都从文件重新计算，不做缓存。
"""

import logging
import os
from typing import Iterator, List, Optional

from locally.errors import (
    DomainNotFound,
    DuplicateDomain,
    InvalidHostname,
    NotInitialized,
    RegionNotFound,
    WriteVerificationFailed,
)
from locally.models import DomainRecord, Region, encode_record, parse_annotation
from locally.mutation import (
    MatchMode,
    delete_lines_matching,
    insert_record_lines,
    mentions_hostname,
    record_lines_for,
)
from locally.region import parse_region


class DomainRegistry:
    """
    受管域名的门面

    前置条件全部通过后才会写文件，写入后重新读取校验结果。
    """

    def __init__(
        self,
        logger: logging.Logger,
        tld: str = ".local",
        match_mode: MatchMode = MatchMode.EXACT
    ):
        """
        初始化域名注册表

        参数:
            logger: 日志记录器实例
            tld: 保留的顶级域名后缀
            match_mode: 存在性检查与删除使用的匹配方式
        """
        self.logger = logger
        self.tld = tld
        self.match_mode = match_mode

    def qualify(self, name: str) -> str:
        """把 app 补全为 app.local，已带后缀的名字原样返回"""
        name = name.strip()
        if name.endswith(self.tld):
            return name
        return name + self.tld

    def validate_hostname(self, hostname: str) -> None:
        """
        校验完整主机名

        异常:
            InvalidHostname: 为空、含空白字符或不以保留后缀结尾
        """
        if not hostname:
            raise InvalidHostname(hostname, "主机名不能为空")
        if any(ch.isspace() for ch in hostname):
            raise InvalidHostname(hostname, "主机名不能包含空白字符")
        if hostname.startswith("#"):
            raise InvalidHostname(hostname, "主机名不能以 # 开头")
        if not hostname.endswith(self.tld) or hostname == self.tld:
            raise InvalidHostname(hostname, f"主机名必须以 {self.tld} 结尾")

    def _region(self, store) -> Region:
        try:
            return parse_region(store.read())
        except RegionNotFound:
            raise NotInitialized(str(store))

    def list_domains(self, store) -> List[DomainRecord]:
        """
        列出配置区域中的全部记录

        返回:
            每条注释行对应一个 DomainRecord

        异常:
            NotInitialized: 配置区域不存在
        """
        records = []
        for line in self._region(store).lines:
            record = parse_annotation(line)
            if record is not None:
                records.append(record)
        return records

    def display_lines(self, store) -> Iterator[str]:
        """逐行返回配置区域中包含保留后缀的原始行"""
        for line in self._region(store).lines:
            if self.tld in line:
                yield line

    def get(self, store, hostname: str) -> Optional[DomainRecord]:
        """按主机名查找记录，找不到返回 None"""
        for record in self.list_domains(store):
            if record.hostname == hostname:
                return record
        return None

    def exists(self, store, hostname: str) -> bool:
        """
        检查主机名是否已在配置区域中

        未初始化的文件返回 False。
        """
        try:
            region = self._region(store)
        except NotInitialized:
            self.logger.debug(f"{store} 中没有配置区域，{hostname} 视为不存在")
            return False

        return self._mentions(region.lines, hostname)

    def _mentions(self, lines: List[str], hostname: str) -> bool:
        predicate = mentions_hostname(hostname, self.match_mode)
        return any(predicate(line) for line in lines)

    def _without_record(self, text: str, hostname: str, log_deletions: bool = True) -> str:
        """
        返回删除 hostname 记录行后的全文

        异常:
            WriteVerificationFailed: 删除后区域内仍有行指向 hostname（文件未修改）
        """
        updated = delete_lines_matching(
            text,
            record_lines_for(hostname, self.match_mode),
            self.logger if log_deletions else None
        )
        if self._mentions(parse_region(updated).lines, hostname):
            self.logger.error(f"无法完整删除 {hostname}，配置区域中仍有指向它的行")
            raise WriteVerificationFailed(hostname, expected_present=False)
        return updated

    def check_can_add(self, store, hostname: str) -> None:
        """
        add 的前置检查，不修改文件

        异常:
            InvalidHostname, NotInitialized, RegionMalformed, DuplicateDomain
        """
        self.validate_hostname(hostname)
        self._region(store)
        if self.exists(store, hostname):
            raise DuplicateDomain(hostname)

    def check_can_remove(self, store, hostname: str) -> None:
        """
        remove 的前置检查，不修改文件

        异常:
            NotInitialized, RegionMalformed, DomainNotFound,
            WriteVerificationFailed（记录中有无法删除的行）
        """
        self._region(store)
        if not self.exists(store, hostname):
            raise DomainNotFound(hostname)
        self._without_record(store.read(), hostname, log_deletions=False)

    def add(self, store, hostname: str, cert_dir: str) -> DomainRecord:
        """
        添加域名记录

        参数:
            store: hosts 文件存储
            hostname: 完整主机名
            cert_dir: 证书目录的绝对路径

        返回:
            新添加的 DomainRecord

        异常:
            InvalidHostname: 主机名或证书目录不合法
            NotInitialized: 配置区域不存在
            DuplicateDomain: 域名已存在
            WriteVerificationFailed: 写入后未能读到新记录
        """
        self.check_can_add(store, hostname)
        if not os.path.isabs(cert_dir) or "\n" in cert_dir:
            raise InvalidHostname(hostname, f"证书目录必须是单行绝对路径: {cert_dir!r}")

        record = DomainRecord(hostname=hostname, cert_dir=cert_dir)
        store.write(insert_record_lines(store.read(), encode_record(record)))

        if not self.exists(store, hostname):
            self.logger.error(f"写入后未在 {store} 中找到 {hostname}")
            raise WriteVerificationFailed(hostname, expected_present=True)

        self.logger.info(f"已添加域名记录: {record}")
        return record

    def remove(self, store, hostname: str) -> Optional[DomainRecord]:
        """
        移除域名记录

        参数:
            store: hosts 文件存储
            hostname: 完整主机名

        返回:
            被移除的记录；注释行无法解析时返回 None

        异常:
            NotInitialized: 配置区域不存在
            DomainNotFound: 域名不存在
            WriteVerificationFailed: 写入后记录仍然存在
        """
        self.check_can_remove(store, hostname)
        record = self.get(store, hostname)

        store.write(self._without_record(store.read(), hostname))

        if self.exists(store, hostname):
            self.logger.error(f"写入后 {hostname} 仍存在于 {store}")
            raise WriteVerificationFailed(hostname, expected_present=False)

        self.logger.info(f"已移除域名记录: {hostname}")
        return record
