"""
hosts 文本修改模块

所有操作都是 文本 -> 新文本 的纯函数，读取和写回由 HostsFileStore 负责。
"""

import enum
import logging
from typing import Callable, List, Optional

from locally.errors import RegionMalformed, RegionNotFound
from locally.models import LOOPBACK_ADDRESSES, loopback_hostnames, parse_annotation
from locally.region import find_region, join_lines, split_lines

LinePredicate = Callable[[str], bool]


class MatchMode(enum.Enum):
    """
    行匹配方式

    EXACT: 按字段比较主机名，app.local 不会匹配 myapp.local
    SUBSTRING: 只要行中包含该文本即匹配（旧版行为）
    """

    EXACT = "exact"
    SUBSTRING = "substring"


def line_equals(text: str) -> LinePredicate:
    return lambda line: line == text


def line_contains(text: str) -> LinePredicate:
    return lambda line: text in line


def annotation_for(hostname: str) -> LinePredicate:
    """匹配 hostname 的注释行"""
    def predicate(line: str) -> bool:
        record = parse_annotation(line)
        return record is not None and record.hostname == hostname
    return predicate


def loopback_for(hostname: str) -> LinePredicate:
    """匹配主机名字段中包含 hostname 的回环映射行"""
    return lambda line: hostname in loopback_hostnames(line)


def loopback_only_for(hostname: str) -> LinePredicate:
    """匹配只映射 hostname 一个主机名的回环行，字段之间的空白不限"""
    return lambda line: loopback_hostnames(line) == [hostname]


def any_of(*predicates: LinePredicate) -> LinePredicate:
    return lambda line: any(predicate(line) for predicate in predicates)


def mentions_hostname(hostname: str, mode: MatchMode) -> LinePredicate:
    """
    判断一行是否属于 hostname（用于存在性检查）

    参数:
        hostname: 完整主机名
        mode: 匹配方式
    """
    if mode is MatchMode.SUBSTRING:
        return line_contains(hostname)
    return any_of(annotation_for(hostname), loopback_for(hostname))


def record_lines_for(hostname: str, mode: MatchMode) -> LinePredicate:
    """
    匹配一条记录的三行（用于删除）

    SUBSTRING: 注释行按前缀匹配，回环行按 "<地址> <主机名>" 整行匹配。
    EXACT: 注释行按注释格式匹配，回环行要求主机名字段恰好为 hostname。
    """
    if mode is MatchMode.SUBSTRING:
        return any_of(
            line_contains(f"#--- {hostname}: certdir"),
            *(line_equals(f"{address} {hostname}") for address in LOOPBACK_ADDRESSES)
        )
    return any_of(annotation_for(hostname), loopback_only_for(hostname))


def insert_record_lines(text: str, new_lines: List[str]) -> str:
    """
    把新行插入到 END 标记之前

    参数:
        text: hosts 文件全文
        new_lines: 要插入的行

    返回:
        新的 hosts 文件全文

    异常:
        RegionNotFound: 文件中没有配置区域
        RegionMalformed: 区域标记不一致
    """
    lines = split_lines(text)
    region = find_region(lines)
    updated = lines[:region.end] + list(new_lines) + lines[region.end:]
    return join_lines(updated)


def delete_lines_matching(
    text: str,
    predicate: LinePredicate,
    logger: Optional[logging.Logger] = None
) -> str:
    """
    删除全文中所有满足 predicate 的行

    扫描范围是整个文件而不只是配置区域，区域外的残留重复行也会被清理。
    区域外被删除的行会以 warning 级别记录。

    参数:
        text: hosts 文件全文
        predicate: 行匹配函数
        logger: 可选的日志记录器

    返回:
        新的 hosts 文件全文（没有匹配行时与输入相同）
    """
    lines = split_lines(text)

    try:
        region = find_region(lines)
    except (RegionNotFound, RegionMalformed):
        region = None

    kept: List[str] = []
    for index, line in enumerate(lines):
        if not predicate(line):
            kept.append(line)
            continue
        if logger is None:
            continue
        if region is not None and region.contains_index(index):
            logger.debug(f"删除第 {index + 1} 行: {line}")
        else:
            logger.warning(f"删除配置区域外的第 {index + 1} 行: {line}")

    return join_lines(kept)
