# -*- coding: utf-8 -*-
"""
操作系统算法模拟器 - 读者-写者回放会话

要点：
1) 后台线程按固定间隔逐个应用事件，支持开始、暂停、继续、停止和单步；
2) 每应用一个事件就记录日志并通过事件推送回调通知前端；
3) 仲裁器本身保持确定性，随机性只存在于事件源中。
"""

import threading
from enum import Enum
from typing import Optional, Dict, List, Any, Callable, Sequence

from ..config import PLAYBACK_INTERVAL, MAX_EVENTS
from .arbiter import AccessArbiter, AccessEvent, ArbiterPolicy, ArbiterState


class SessionState(Enum):
    IDLE = 0
    RUNNING = 1
    PAUSED = 2
    FINISHED = 3
    STOPPED = 4


class ReaderWriterSession:
    """读者-写者回放会话（一个会话对应一条事件时间线）"""

    def __init__(self, policy: ArbiterPolicy = ArbiterPolicy.READER_PREFERENCE,
                 interval: float = PLAYBACK_INTERVAL):
        self.policy = policy
        self.interval = interval

        self.lock = threading.RLock()
        self.condition = threading.Condition(self.lock)

        self.arbiter = AccessArbiter(policy)
        self.events: List[AccessEvent] = []
        self.current_step = 0

        self.state = SessionState.IDLE
        self.playback_thread: Optional[threading.Thread] = None

        self.log: List[Dict[str, Any]] = []
        self.max_events = MAX_EVENTS

        self.event_emitter: Optional[Callable[[Dict[str, Any]], None]] = None

    # ------------------------- 外部接口 -------------------------
    def set_event_emitter(self, emitter: Callable[[Dict[str, Any]], None]):
        self.event_emitter = emitter

    def load(self, events: Sequence[AccessEvent]):
        """载入新的事件序列并回到初始状态"""
        self.stop()
        with self.condition:
            self.events = list(events)
            self._reset_locked()

    def reset(self):
        self.stop()
        with self.condition:
            self._reset_locked()

    def step(self) -> Optional[Dict[str, Any]]:
        """手动应用下一个事件，没有剩余事件时返回 None"""
        with self.condition:
            if self.state == SessionState.RUNNING:
                self.state = SessionState.PAUSED
            entry = self._apply_next()
        self._publish(entry)
        return entry

    def start(self):
        with self.lock:
            if self.state == SessionState.RUNNING:
                return
            if self.state == SessionState.PAUSED:
                self.resume()
                return
            if self.current_step >= len(self.events):
                self.state = SessionState.FINISHED
                return
            self.state = SessionState.RUNNING
            self.playback_thread = threading.Thread(
                target=self._playback_loop,
                name="ReaderWriterPlayback",
                daemon=True,
            )
            self.playback_thread.start()

    def pause(self):
        with self.lock:
            if self.state == SessionState.RUNNING:
                self.state = SessionState.PAUSED

    def resume(self):
        with self.condition:
            if self.state != SessionState.PAUSED:
                return
            self.state = SessionState.RUNNING
            self.condition.notify_all()

    def stop(self):
        with self.condition:
            if self.state in (SessionState.RUNNING, SessionState.PAUSED):
                self.state = SessionState.STOPPED
            self.condition.notify_all()
        thread = self.playback_thread
        if thread and thread is not threading.current_thread():
            thread.join(timeout=2.0)
        self.playback_thread = None

    def wait_finished(self, timeout: Optional[float] = None) -> bool:
        """阻塞直到全部事件回放完毕"""
        with self.condition:
            return self.condition.wait_for(
                lambda: self.state == SessionState.FINISHED, timeout=timeout
            )

    def get_state(self) -> ArbiterState:
        with self.lock:
            return self.arbiter.state

    def get_events(self, count: int = 20) -> List[Dict[str, Any]]:
        with self.lock:
            return [dict(entry) for entry in self.log[-count:]]

    def get_status(self) -> Dict[str, Any]:
        with self.lock:
            return {
                'state': self.state.name,
                'policy': self.policy.value,
                'interval': self.interval,
                'current_step': self.current_step,
                'total_steps': len(self.events),
                'events': [event.to_dict() for event in self.events],
                'snapshot': self.arbiter.state.to_dict(),
                'log': self.get_events(),
            }

    # ------------------------- 内部逻辑 -------------------------
    def _playback_loop(self):
        while True:
            with self.condition:
                while self.state == SessionState.PAUSED:
                    self.condition.wait()
                if self.state != SessionState.RUNNING:
                    return
                entry = self._apply_next()

            self._publish(entry)

            with self.condition:
                if self.state == SessionState.RUNNING:
                    # 等待一个回放间隔，期间可被暂停/停止唤醒
                    self.condition.wait(self.interval)

    def _apply_next(self) -> Optional[Dict[str, Any]]:
        """应用下一个事件并记录日志（调用方持有锁）"""
        if self.current_step >= len(self.events):
            self._finish()
            return None

        event = self.events[self.current_step]
        snapshot = self.arbiter.apply(event)
        self.current_step += 1

        entry = {
            'step': self.current_step,
            'event': event.to_dict(),
            'snapshot': snapshot.to_dict(),
        }
        self.log.append(entry)
        if len(self.log) > self.max_events:
            self.log = self.log[-self.max_events:]
        return entry

    def _publish(self, entry: Optional[Dict[str, Any]]):
        """在锁外推送事件，推送完成后再判断是否回放结束"""
        if entry is None:
            return
        if self.event_emitter:
            try:
                self.event_emitter(dict(entry))
            except Exception:
                pass

        with self.condition:
            if self.current_step >= len(self.events):
                self._finish()

    def _finish(self):
        self.state = SessionState.FINISHED
        self.condition.notify_all()

    def _reset_locked(self):
        self.arbiter = AccessArbiter(self.policy)
        self.current_step = 0
        self.log = []
        self.state = SessionState.IDLE
