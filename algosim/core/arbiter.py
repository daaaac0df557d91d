# -*- coding: utf-8 -*-
"""
操作系统算法模拟器 - 读者-写者同步模块

状态是一个不可变的值（ArbiterState），每个事件经 transition() 产生新的状态，
AccessArbiter 负责把状态依次串过事件流并保留每一步的快照。

互斥不变式：有写者活动时没有活动读者，且最多一个活动写者。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .errors import InvariantViolation


class Role(Enum):
    READER = 'reader'
    WRITER = 'writer'


class Action(Enum):
    REQUEST = 'request'
    RELEASE = 'release'


class ArbiterPolicy(Enum):
    """
    排队策略
    READER_PREFERENCE：写者释放时一次性放行所有等待读者，写者可能被饿死
    FIFO：读者和写者按到达顺序共用一条等待队列
    """
    READER_PREFERENCE = 'reader_preference'
    FIFO = 'fifo'


@dataclass(frozen=True)
class AccessEvent:
    process_id: str
    role: Role
    kind: Action
    timestamp: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'process_id': self.process_id,
            'role': self.role.value,
            'action': self.kind.value,
            'time': self.timestamp,
        }


@dataclass(frozen=True)
class ArbiterState:
    active_readers: Tuple[str, ...] = ()
    active_writer: Optional[str] = None
    waiting_readers: Tuple[str, ...] = ()
    waiting_writers: Tuple[str, ...] = ()
    # 仅 FIFO 策略使用：读者写者混合的到达顺序
    wait_line: Tuple[Tuple[Role, str], ...] = ()

    def __post_init__(self):
        if self.active_writer is not None and self.active_readers:
            raise InvariantViolation(
                f'写者 {self.active_writer} 活动时存在活动读者 {list(self.active_readers)}',
                'active_readers', list(self.active_readers),
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'active_readers': list(self.active_readers),
            'active_writer': self.active_writer,
            'waiting_readers': list(self.waiting_readers),
            'waiting_writers': list(self.waiting_writers),
        }


def _add(items: Tuple[str, ...], pid: str) -> Tuple[str, ...]:
    return items if pid in items else items + (pid,)


def _drop(items: Tuple[str, ...], pid: str) -> Tuple[str, ...]:
    return tuple(x for x in items if x != pid)


def transition(state: ArbiterState, event: AccessEvent,
               policy: ArbiterPolicy = ArbiterPolicy.READER_PREFERENCE) -> ArbiterState:
    """根据策略计算事件发生后的新状态（不修改旧状态）"""
    if policy is ArbiterPolicy.FIFO:
        return _fifo_transition(state, event)
    return _reader_preference_transition(state, event)


def _reader_preference_transition(state: ArbiterState, event: AccessEvent) -> ArbiterState:
    pid = event.process_id

    if event.role is Role.READER:
        if event.kind is Action.REQUEST:
            if state.active_writer is None:
                return ArbiterState(
                    active_readers=_add(state.active_readers, pid),
                    active_writer=None,
                    waiting_readers=_drop(state.waiting_readers, pid),
                    waiting_writers=state.waiting_writers,
                )
            return ArbiterState(
                active_readers=state.active_readers,
                active_writer=state.active_writer,
                waiting_readers=_add(state.waiting_readers, pid),
                waiting_writers=state.waiting_writers,
            )
        return ArbiterState(
            active_readers=_drop(state.active_readers, pid),
            active_writer=state.active_writer,
            waiting_readers=state.waiting_readers,
            waiting_writers=state.waiting_writers,
        )

    if event.kind is Action.REQUEST:
        if not state.active_readers and state.active_writer is None:
            return ArbiterState(
                active_readers=(),
                active_writer=pid,
                waiting_readers=state.waiting_readers,
                waiting_writers=_drop(state.waiting_writers, pid),
            )
        return ArbiterState(
            active_readers=state.active_readers,
            active_writer=state.active_writer,
            waiting_readers=state.waiting_readers,
            waiting_writers=_add(state.waiting_writers, pid),
        )

    if state.active_writer != pid:
        return state

    # 写者释放：所有等待读者一并放行，等待写者继续等待
    readers = state.active_readers
    for reader in state.waiting_readers:
        readers = _add(readers, reader)
    return ArbiterState(
        active_readers=readers,
        active_writer=None,
        waiting_readers=(),
        waiting_writers=state.waiting_writers,
    )


def _fifo_transition(state: ArbiterState, event: AccessEvent) -> ArbiterState:
    pid = event.process_id
    key = (event.role, pid)
    active_readers = state.active_readers
    active_writer = state.active_writer
    line = state.wait_line

    if event.kind is Action.REQUEST:
        if pid in active_readers and event.role is Role.READER:
            return state
        if pid == active_writer and event.role is Role.WRITER:
            return state
        if key in line:
            return state
        line = line + (key,)
    elif event.role is Role.READER:
        if pid not in active_readers:
            return state
        active_readers = _drop(active_readers, pid)
    else:
        if active_writer != pid:
            return state
        active_writer = None

    # 从队首依次放行：连续的读者一起进入，写者单独进入
    while line:
        role, head = line[0]
        if role is Role.READER and active_writer is None:
            active_readers = _add(active_readers, head)
        elif role is Role.WRITER and active_writer is None and not active_readers:
            active_writer = head
        else:
            break
        line = line[1:]

    return ArbiterState(
        active_readers=active_readers,
        active_writer=active_writer,
        waiting_readers=tuple(p for r, p in line if r is Role.READER),
        waiting_writers=tuple(p for r, p in line if r is Role.WRITER),
        wait_line=line,
    )


class AccessArbiter:
    """
    读者-写者仲裁器
    一个实例对应一条事件时间线，调用方需保证 apply() 串行调用
    """

    def __init__(self, policy: ArbiterPolicy = ArbiterPolicy.READER_PREFERENCE):
        self.policy = policy
        self.state = ArbiterState()
        self.history: List[ArbiterState] = []
        self.last_timestamp: Optional[float] = None

    def apply(self, event: AccessEvent) -> ArbiterState:
        """
        应用一个事件并返回事件之后的状态快照

        Raises:
            InvariantViolation: 事件时间戳早于上一个事件
        """
        if self.last_timestamp is not None and event.timestamp < self.last_timestamp:
            raise InvariantViolation(
                f'事件时间戳乱序: {event.timestamp} < {self.last_timestamp}',
                'timestamp', event.timestamp,
            )
        self.state = transition(self.state, event, self.policy)
        self.last_timestamp = event.timestamp
        self.history.append(self.state)
        return self.state

    def reset(self):
        self.state = ArbiterState()
        self.history = []
        self.last_timestamp = None


def replay(events: Iterable[AccessEvent],
           policy: ArbiterPolicy = ArbiterPolicy.READER_PREFERENCE) -> List[ArbiterState]:
    """依次应用事件流，返回每个事件之后的状态快照"""
    arbiter = AccessArbiter(policy)
    return [arbiter.apply(event) for event in events]
