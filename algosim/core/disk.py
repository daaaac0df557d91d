# -*- coding: utf-8 -*-
"""
操作系统算法模拟器 - 磁盘调度模块
实现先来先服务（FCFS）磁头调度，记录磁头轨迹和移动量
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from .rounding import round_half_up


@dataclass(frozen=True)
class DiskTrace:
    """
    磁头轨迹
    sequence 以初始磁头位置开头，随后依次为被服务的请求
    """
    initial_head: int
    requests: Tuple[int, ...]
    sequence: Tuple[int, ...]
    per_step_movement: Tuple[int, ...]
    total_movement: int

    @property
    def average_movement(self) -> float:
        """平均寻道长度"""
        if not self.requests:
            return 0.0
        return self.total_movement / len(self.requests)

    def steps(self) -> List[Dict[str, int]]:
        """逐步移动表：第几步、起点、终点、移动量"""
        return [
            {
                'step': i + 1,
                'from': self.sequence[i],
                'to': self.sequence[i + 1],
                'movement': self.per_step_movement[i],
            }
            for i in range(len(self.requests))
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'initial_head': self.initial_head,
            'requests': list(self.requests),
            'sequence': list(self.sequence),
            'movements': list(self.per_step_movement),
            'total_movement': self.total_movement,
            'average_movement': round_half_up(self.average_movement),
            'steps': self.steps(),
        }


def schedule_fcfs(initial_head: int, requests: Sequence[int]) -> DiskTrace:
    """
    FCFS磁盘调度
    严格按请求到达顺序服务，不做任何重排

    Args:
        initial_head: 磁头初始位置
        requests: 请求的柱面号序列

    Returns:
        DiskTrace
    """
    current = initial_head
    sequence = [initial_head]
    movements = []

    for request in requests:
        movements.append(abs(current - request))
        current = request
        sequence.append(current)

    return DiskTrace(
        initial_head=initial_head,
        requests=tuple(requests),
        sequence=tuple(sequence),
        per_step_movement=tuple(movements),
        total_movement=sum(movements),
    )
