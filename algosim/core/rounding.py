# -*- coding: utf-8 -*-
"""
操作系统算法模拟器 - 结果取整
统计值按四舍五入保留小数（0.125 -> 0.13），不使用银行家舍入
"""

from decimal import Decimal, ROUND_HALF_UP

from ..config import RESULT_DECIMALS


def round_half_up(value: float, digits: int = RESULT_DECIMALS) -> float:
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
