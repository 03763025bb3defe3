"""
Go 风格时长解析（如 10s、1m30s、500ms）
统一使用整数纳秒表示，与 Go time.Duration 一致
"""
import re
from datetime import timedelta
from decimal import Decimal
from typing import Union

_DURATION_PART = re.compile(r'(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)')

# 每个单位对应的纳秒数
_UNIT_NANOSECONDS = {
    'ns': 1,
    'us': 1_000,
    'µs': 1_000,
    'ms': 1_000_000,
    's': 1_000_000_000,
    'm': 60_000_000_000,
    'h': 3_600_000_000_000,
}


def timedelta_to_nanoseconds(duration: timedelta) -> int:
    """timedelta 转换为整数纳秒"""
    return ((duration.days * 86400 + duration.seconds) * 1_000_000
            + duration.microseconds) * 1000


def parse_duration(value: Union[str, int, timedelta]) -> int:
    """
    解析时长

    Args:
        value: timedelta、Go 风格字符串，或整数纳秒（Go time.Duration 的 JSON 形式）

    Returns:
        整数纳秒
    """
    if isinstance(value, timedelta):
        nanoseconds = timedelta_to_nanoseconds(value)
        if nanoseconds < 0:
            raise ValueError(f"时长不能为负数: {value}")
        return nanoseconds
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"非法时长: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"时长不能为负数: {value}")
        return value

    text = value.strip()
    if text in ('0', ''):
        return 0
    if text.startswith('-'):
        raise ValueError(f"时长不能为负数: {value}")
    text = text.lstrip('+')

    total = Decimal(0)
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            raise ValueError(f"非法时长: {value!r}")
        total += Decimal(match.group(1)) * _UNIT_NANOSECONDS[match.group(2)]
        pos = match.end()
    if pos != len(text) or pos == 0:
        raise ValueError(f"非法时长: {value!r}")
    # 不足 1ns 的部分截断
    return int(total)
