# -*- coding: utf-8 -*-
"""
操作系统算法模拟器 - 异常定义
InvalidInput：边界处检测到的非法输入
InvariantViolation：绕过校验后前置条件被破坏
"""

from typing import Any, Dict, Optional


class SimulationError(Exception):
    """模拟异常基类，记录出错的字段和取值"""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value

    def to_dict(self) -> Dict[str, Any]:
        result = {'success': False, 'error': self.message}
        if self.field is not None:
            result['field'] = self.field
        return result


class InvalidInput(SimulationError, ValueError):
    """输入格式错误或超出范围"""


class InvariantViolation(SimulationError, RuntimeError):
    """前置条件被破坏（如进程ID重复、事件时间戳乱序）"""
