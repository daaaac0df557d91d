# -*- coding: utf-8 -*-
"""
操作系统算法模拟器 - 核心模块
"""

from .disk import DiskTrace, schedule_fcfs
from .scheduler import Process, ScheduleEntry, GanttSlice, ScheduleResult, schedule_priority
from .page import PageOutcome, PageStep, PageReplacementResult, replace_lru
from .arbiter import (
    AccessArbiter, AccessEvent, Action, ArbiterPolicy, ArbiterState, Role,
    replay, transition,
)
from .events import RandomEventSource, ScriptedEventSource, parse_events
from .session import ReaderWriterSession, SessionState
from .errors import SimulationError, InvalidInput, InvariantViolation

__all__ = [
    'DiskTrace', 'schedule_fcfs',
    'Process', 'ScheduleEntry', 'GanttSlice', 'ScheduleResult', 'schedule_priority',
    'PageOutcome', 'PageStep', 'PageReplacementResult', 'replace_lru',
    'AccessArbiter', 'AccessEvent', 'Action', 'ArbiterPolicy', 'ArbiterState', 'Role',
    'replay', 'transition',
    'RandomEventSource', 'ScriptedEventSource', 'parse_events',
    'ReaderWriterSession', 'SessionState',
    'SimulationError', 'InvalidInput', 'InvariantViolation',
]
