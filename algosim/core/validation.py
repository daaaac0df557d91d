# -*- coding: utf-8 -*-
"""
操作系统算法模拟器 - 输入校验模块
在任何算法运行之前拒绝非法输入：负数、空字段、非数字、非正的容量或运行时间
"""

from typing import Any, List, Optional

from .arbiter import ArbiterPolicy
from .errors import InvalidInput, InvariantViolation
from .scheduler import Process


def _to_int(value: Any, field: str) -> int:
    """把单个原始值转换为整数"""
    if isinstance(value, bool):
        raise InvalidInput(f'{field} 必须是整数: {value!r}', field, value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
    raise InvalidInput(f'{field} 必须是整数: {value!r}', field, value)


def parse_int(value: Any, field: str) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidInput(f'{field} 不能为空', field, value)
    return _to_int(value, field)


def parse_non_negative_int(value: Any, field: str) -> int:
    number = parse_int(value, field)
    if number < 0:
        raise InvalidInput(f'{field} 不能为负数: {number}', field, value)
    return number


def parse_positive_int(value: Any, field: str) -> int:
    number = parse_int(value, field)
    if number <= 0:
        raise InvalidInput(f'{field} 必须为正整数: {number}', field, value)
    return number


def parse_int_list(raw: Any, field: str, allow_empty: bool = False) -> List[int]:
    """
    解析非负整数列表

    Args:
        raw: 逗号分隔的字符串（如 "82, 170,43"）或整数列表
        field: 字段名，用于错误提示
        allow_empty: 是否允许空列表

    Returns:
        整数列表
    """
    if raw is None:
        items = []
    elif isinstance(raw, str):
        items = [token for token in (t.strip() for t in raw.split(',')) if token]
        if raw.strip() and len(items) != len(raw.split(',')):
            raise InvalidInput(f'{field} 格式错误，请使用逗号分隔的数字', field, raw)
    elif isinstance(raw, (list, tuple)):
        items = list(raw)
    else:
        raise InvalidInput(f'{field} 格式错误，请使用逗号分隔的数字', field, raw)

    if not items and not allow_empty:
        raise InvalidInput(f'{field} 不能为空', field, raw)

    return [parse_non_negative_int(item, field) for item in items]


def parse_processes(items: Any, field: str = 'processes') -> List[Process]:
    """
    解析进程表
    每项需要 id（非空字符串）、arrival_time（>=0）、burst_time（>0）、priority（>=0）
    """
    if not isinstance(items, (list, tuple)) or not items:
        raise InvalidInput('进程列表不能为空', field, items)

    processes: List[Process] = []
    seen = set()
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise InvalidInput(f'第 {index + 1} 个进程格式错误', field, item)

        pid = item.get('id')
        if not isinstance(pid, str) or not pid.strip():
            raise InvalidInput(f'第 {index + 1} 个进程缺少进程ID', f'id_{index}', pid)
        pid = pid.strip()
        if pid in seen:
            raise InvariantViolation(f'进程ID重复: {pid}', f'id_{index}', pid)
        seen.add(pid)

        processes.append(Process(
            id=pid,
            arrival_time=parse_non_negative_int(_first(item, 'arrival_time', 'arrivalTime'), f'arrival_time_{index}'),
            burst_time=parse_positive_int(_first(item, 'burst_time', 'burstTime'), f'burst_time_{index}'),
            priority=parse_non_negative_int(item.get('priority'), f'priority_{index}'),
        ))
    return processes


def _first(item: dict, *keys: str) -> Optional[Any]:
    """兼容下划线和驼峰两种字段名"""
    for key in keys:
        if key in item:
            return item[key]
    return None


def parse_policy(raw: Any, field: str = 'policy') -> ArbiterPolicy:
    """解析读者-写者排队策略，缺省为读者优先"""
    if raw is None or raw == '':
        return ArbiterPolicy.READER_PREFERENCE
    if isinstance(raw, str):
        try:
            return ArbiterPolicy(raw.strip().lower())
        except ValueError:
            pass
    choices = ', '.join(p.value for p in ArbiterPolicy)
    raise InvalidInput(f'{field} 取值无效: {raw!r}（可选: {choices}）', field, raw)


def parse_interval(raw: Any, default: float, field: str = 'interval') -> float:
    """解析回放间隔（秒），允许为0"""
    if raw is None:
        return default
    if isinstance(raw, bool) or not isinstance(raw, (int, float)) or raw < 0:
        raise InvalidInput(f'{field} 必须是非负数: {raw!r}', field, raw)
    return float(raw)
