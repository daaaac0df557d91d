# -*- coding: utf-8 -*-
"""
操作系统算法模拟器 - 进程调度模块（非抢占式优先级）

要点：
1) 离散事件模拟：时钟单调递增，只有已到达的进程才能参与选择；
2) 非抢占：进程一旦开始运行就执行到结束，期间到达的更高优先级进程不会打断它；
3) CPU 空闲时直接跳到下一个到达时刻，甘特图中不记录空闲段。
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Sequence, Tuple

from .rounding import round_half_up
from .errors import InvalidInput, InvariantViolation


@dataclass(frozen=True)
class Process:
    """进程描述：priority 数值越小越紧急"""
    id: str
    arrival_time: int
    burst_time: int
    priority: int


@dataclass(frozen=True)
class ScheduleEntry:
    id: str
    arrival_time: int
    burst_time: int
    priority: int
    completion_time: int
    turnaround_time: int
    waiting_time: int


@dataclass(frozen=True)
class GanttSlice:
    id: str
    start_time: int
    end_time: int


@dataclass(frozen=True)
class ScheduleResult:
    entries: Tuple[ScheduleEntry, ...]          # 按完成顺序
    gantt_chart: Tuple[GanttSlice, ...]
    avg_turnaround_time: float
    avg_waiting_time: float

    @property
    def execution_order(self) -> List[str]:
        return [entry.id for entry in self.entries]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'processes': [asdict(entry) for entry in self.entries],
            'gantt_chart': [asdict(piece) for piece in self.gantt_chart],
            'execution_order': self.execution_order,
            'avg_turnaround_time': self.avg_turnaround_time,
            'avg_waiting_time': self.avg_waiting_time,
        }


def schedule_priority(processes: Sequence[Process]) -> ScheduleResult:
    """
    非抢占式优先级调度

    Args:
        processes: 进程列表，进程ID必须唯一

    Returns:
        ScheduleResult

    Raises:
        InvalidInput: 进程列表为空
        InvariantViolation: 进程ID重复
    """
    if not processes:
        raise InvalidInput('进程列表不能为空', 'processes', list(processes))
    _check_unique_ids(processes)

    # 初始顺序只用于稳定的平局裁决：先到达者优先，其次保持原始顺序
    remaining = sorted(processes, key=lambda p: (p.arrival_time, p.priority))
    current_time = 0
    entries: List[ScheduleEntry] = []
    gantt: List[GanttSlice] = []

    while remaining:
        eligible = [p for p in remaining if p.arrival_time <= current_time]
        if not eligible:
            current_time = min(p.arrival_time for p in remaining)
            continue

        selected = min(eligible, key=lambda p: p.priority)
        start_time = current_time
        end_time = start_time + selected.burst_time
        gantt.append(GanttSlice(selected.id, start_time, end_time))

        turnaround = end_time - selected.arrival_time
        entries.append(ScheduleEntry(
            id=selected.id,
            arrival_time=selected.arrival_time,
            burst_time=selected.burst_time,
            priority=selected.priority,
            completion_time=end_time,
            turnaround_time=turnaround,
            waiting_time=turnaround - selected.burst_time,
        ))

        remaining.remove(selected)
        current_time = end_time

    count = len(entries)
    return ScheduleResult(
        entries=tuple(entries),
        gantt_chart=tuple(gantt),
        avg_turnaround_time=round_half_up(sum(e.turnaround_time for e in entries) / count),
        avg_waiting_time=round_half_up(sum(e.waiting_time for e in entries) / count),
    )


def _check_unique_ids(processes: Sequence[Process]):
    seen = set()
    for proc in processes:
        if proc.id in seen:
            raise InvariantViolation(f'进程ID重复: {proc.id}', 'id', proc.id)
        seen.add(proc.id)
