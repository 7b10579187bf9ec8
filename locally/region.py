"""
配置区域解析模块

按行定位 START/END 标记，行内容不做任何修剪，保证写回时逐字节一致。
"""

from typing import List

from locally.errors import RegionMalformed, RegionNotFound
from locally.models import END_MARKER, START_MARKER, Region


def split_lines(text: str) -> List[str]:
    # 末尾换行会产生一个空的最后一行，join_lines 据此还原
    return text.split("\n")


def join_lines(lines: List[str]) -> str:
    return "\n".join(lines)


def _indices_of(lines: List[str], marker: str) -> List[int]:
    return [index for index, line in enumerate(lines) if line == marker]


def find_region(lines: List[str]) -> Region:
    """
    在已拆分的行中定位配置区域

    参数:
        lines: hosts 文件的全部行

    返回:
        Region 对象

    异常:
        RegionNotFound: 两个标记都不存在
        RegionMalformed: 标记缺失一个、顺序颠倒或重复出现
    """
    starts = _indices_of(lines, START_MARKER)
    ends = _indices_of(lines, END_MARKER)

    if not starts and not ends:
        raise RegionNotFound()
    if len(starts) > 1 or len(ends) > 1:
        raise RegionMalformed(
            f"标记重复出现 (START {len(starts)} 次, END {len(ends)} 次)"
        )
    if not starts:
        raise RegionMalformed("存在 END 标记但没有 START 标记")
    if not ends:
        raise RegionMalformed("存在 START 标记但没有 END 标记")

    start, end = starts[0], ends[0]
    if end < start:
        raise RegionMalformed("END 标记出现在 START 标记之前")

    return Region(lines=lines[start + 1:end], start=start, end=end)


def parse_region(text: str) -> Region:
    """解析 hosts 文件文本并返回配置区域"""
    return find_region(split_lines(text))


def has_region(text: str) -> bool:
    """区域存在且格式正确时返回 True；格式错误会继续抛出"""
    try:
        parse_region(text)
    except RegionNotFound:
        return False
    return True
