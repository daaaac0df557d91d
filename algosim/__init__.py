# -*- coding: utf-8 -*-
"""
操作系统算法模拟器
FCFS磁盘调度、非抢占式优先级调度、LRU页面置换、读者-写者同步
"""

__version__ = '1.0.0'
