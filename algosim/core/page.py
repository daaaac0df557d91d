# -*- coding: utf-8 -*-
"""
操作系统算法模拟器 - 页面置换模块
实现最近最少使用（LRU）页面置换，逐步记录命中/缺页和页框内容
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .rounding import round_half_up
from .errors import InvalidInput


class PageOutcome(Enum):
    """访问结果"""
    HIT = 'hit'       # 命中
    FAULT = 'fault'   # 缺页


@dataclass(frozen=True)
class PageStep:
    """
    单步置换记录
    页框按最近使用顺序排列：下标0为最久未使用，末尾为最近使用
    """
    request: int
    frames_before: Tuple[int, ...]
    frames_after: Tuple[int, ...]
    outcome: PageOutcome
    evicted: Optional[int] = None   # 被置换出的页号（仅页框已满时的缺页）

    @property
    def is_hit(self) -> bool:
        return self.outcome is PageOutcome.HIT

    def to_dict(self) -> Dict[str, Any]:
        return {
            'request': self.request,
            'frames_before': list(self.frames_before),
            'frames_after': list(self.frames_after),
            'outcome': self.outcome.value,
            'is_hit': self.is_hit,
            'evicted': self.evicted,
        }


@dataclass(frozen=True)
class PageReplacementResult:
    capacity: int
    steps: Tuple[PageStep, ...]
    total_faults: int
    hit_ratio: float

    @property
    def total_references(self) -> int:
        return len(self.steps)

    @property
    def total_hits(self) -> int:
        return self.total_references - self.total_faults

    @property
    def final_frames(self) -> Tuple[int, ...]:
        return self.steps[-1].frames_after

    @property
    def hit_ratio_percent(self) -> float:
        return round_half_up(self.hit_ratio * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'capacity': self.capacity,
            'steps': [step.to_dict() for step in self.steps],
            'total_references': self.total_references,
            'total_faults': self.total_faults,
            'total_hits': self.total_hits,
            'hit_ratio': self.hit_ratio,
            'hit_ratio_percent': self.hit_ratio_percent,
            'final_frames': list(self.final_frames),
        }


def replace_lru(references: Sequence[int], capacity: int) -> PageReplacementResult:
    """
    LRU页面置换

    Args:
        references: 页面访问序列
        capacity: 页框数量

    Returns:
        PageReplacementResult

    Raises:
        InvalidInput: 页框数量不为正或访问序列为空
    """
    if capacity <= 0:
        raise InvalidInput(f'页框数量必须为正整数: {capacity}', 'frames', capacity)
    if not references:
        raise InvalidInput('页面访问序列不能为空', 'references', list(references))

    frames: List[int] = []
    steps: List[PageStep] = []
    faults = 0

    for page in references:
        before = tuple(frames)
        evicted = None

        if page in frames:
            # 命中：移到末尾，标记为最近使用
            frames.remove(page)
            frames.append(page)
            outcome = PageOutcome.HIT
        else:
            faults += 1
            if len(frames) >= capacity:
                evicted = frames.pop(0)
            frames.append(page)
            outcome = PageOutcome.FAULT

        steps.append(PageStep(page, before, tuple(frames), outcome, evicted))

    total = len(steps)
    return PageReplacementResult(
        capacity=capacity,
        steps=tuple(steps),
        total_faults=faults,
        hit_ratio=(total - faults) / total,
    )
