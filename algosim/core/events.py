# -*- coding: utf-8 -*-
"""
操作系统算法模拟器 - 读者-写者事件源
仲裁器只关心按时间排序的请求/释放事件，事件可以随机生成，也可以由脚本给出
"""

import random
from typing import Any, List, Optional, Sequence

from ..config import (
    DEFAULT_READER_COUNT, DEFAULT_WRITER_COUNT, MAX_PARTICIPANTS,
    REQUEST_PROBABILITY, EVENT_SPACING, EVENT_JITTER, EVENTS_PER_PARTICIPANT,
)
from .arbiter import AccessEvent, Action, Role
from .errors import InvalidInput, InvariantViolation
from .validation import parse_positive_int


class RandomEventSource:
    """
    随机事件生成器
    生成 EVENTS_PER_PARTICIPANT * (读者数 + 写者数) 个事件，
    角色按读者占比抽取，动作以 REQUEST_PROBABILITY 的概率为请求
    """

    def __init__(self, num_readers: int = DEFAULT_READER_COUNT,
                 num_writers: int = DEFAULT_WRITER_COUNT,
                 seed: Optional[int] = None,
                 request_probability: float = REQUEST_PROBABILITY,
                 rng: Optional[random.Random] = None):
        for field, value in (('readers', num_readers), ('writers', num_writers)):
            if value <= 0 or value > MAX_PARTICIPANTS:
                raise InvalidInput(f'{field} 必须在 1 到 {MAX_PARTICIPANTS} 之间: {value}', field, value)
        if not 0.0 <= request_probability <= 1.0:
            raise InvalidInput(f'请求概率必须在 0 到 1 之间: {request_probability}',
                               'request_probability', request_probability)

        self.num_readers = num_readers
        self.num_writers = num_writers
        self.request_probability = request_probability
        self.rng = rng or random.Random(seed)

    def generate(self) -> List[AccessEvent]:
        total = self.num_readers + self.num_writers
        events = []
        for i in range(total * EVENTS_PER_PARTICIPANT):
            is_reader = self.rng.random() < self.num_readers / total
            if is_reader:
                pid = f'R{self.rng.randint(1, self.num_readers)}'
            else:
                pid = f'W{self.rng.randint(1, self.num_writers)}'
            kind = Action.REQUEST if self.rng.random() < self.request_probability else Action.RELEASE
            timestamp = i * EVENT_SPACING + self.rng.random() * EVENT_JITTER
            events.append(AccessEvent(pid, Role.READER if is_reader else Role.WRITER, kind, timestamp))

        return sorted(events, key=lambda e: e.timestamp)


class ScriptedEventSource:
    """固定事件列表，要求已按时间戳排序"""

    def __init__(self, events: Sequence[AccessEvent]):
        for prev, curr in zip(events, events[1:]):
            if curr.timestamp < prev.timestamp:
                raise InvariantViolation(
                    f'事件时间戳乱序: {curr.timestamp} < {prev.timestamp}',
                    'timestamp', curr.timestamp,
                )
        self.events = list(events)

    def generate(self) -> List[AccessEvent]:
        return list(self.events)


def parse_events(items: Any, field: str = 'events') -> List[AccessEvent]:
    """
    解析事件列表
    每项形如 {"process_id": "R1", "action": "request", "time": 0}；
    未给出 role 时按进程ID前缀 R/W 推断，未给出 time 时使用序号
    """
    if not isinstance(items, (list, tuple)) or not items:
        raise InvalidInput('事件列表不能为空', field, items)

    events = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise InvalidInput(f'第 {index + 1} 个事件格式错误', field, item)

        pid = item.get('process_id', item.get('processId'))
        if not isinstance(pid, str) or not pid.strip():
            raise InvalidInput(f'第 {index + 1} 个事件缺少进程ID', f'process_id_{index}', pid)
        pid = pid.strip()

        role_raw = item.get('role', item.get('type'))
        if role_raw is None:
            prefix = pid[0].upper()
            if prefix not in ('R', 'W'):
                raise InvalidInput(f'无法从进程ID推断角色: {pid}', f'role_{index}', pid)
            role = Role.READER if prefix == 'R' else Role.WRITER
        else:
            role = _enum_value(Role, role_raw, f'role_{index}')

        kind = _enum_value(Action, item.get('action', item.get('kind')), f'action_{index}')

        timestamp = item.get('time', item.get('timestamp', index))
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise InvalidInput(f'事件时间戳必须是数字: {timestamp!r}', f'time_{index}', timestamp)

        events.append(AccessEvent(pid, role, kind, timestamp))

    return ScriptedEventSource(events).generate()


def source_from_params(params: dict):
    """根据请求参数构造事件源：给出 events 时用脚本，否则随机生成"""
    if params.get('events') is not None:
        return ScriptedEventSource(parse_events(params['events']))

    seed = params.get('seed')
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise InvalidInput(f'seed 必须是整数: {seed!r}', 'seed', seed)
    return RandomEventSource(
        num_readers=parse_positive_int(params.get('readers', DEFAULT_READER_COUNT), 'readers'),
        num_writers=parse_positive_int(params.get('writers', DEFAULT_WRITER_COUNT), 'writers'),
        seed=seed,
    )


def _enum_value(enum_cls, raw: Any, field: str):
    if isinstance(raw, enum_cls):
        return raw
    if isinstance(raw, str):
        try:
            return enum_cls(raw.strip().lower())
        except ValueError:
            pass
    choices = ', '.join(member.value for member in enum_cls)
    raise InvalidInput(f'{field} 取值无效: {raw!r}（可选: {choices}）', field, raw)
