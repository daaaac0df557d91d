# -*- coding: utf-8 -*-
"""
操作系统算法模拟器 - 配置文件
四个算法模拟的全局默认参数
"""

import os

# ==================== 磁盘调度配置 ====================
DEFAULT_INITIAL_HEAD = 50                       # 示例磁头初始位置
DEFAULT_DISK_REQUESTS = [82, 170, 43, 140, 24, 16, 190]  # 示例请求队列

# ==================== 进程调度配置 ====================
DEFAULT_PROCESS = {'id': 'P1', 'arrival_time': 0, 'burst_time': 10, 'priority': 3}
RESULT_DECIMALS = 2      # 平均周转/等待时间保留的小数位

# ==================== 页面置换配置 ====================
DEFAULT_PAGE_REFERENCES = [7, 0, 1, 2, 0, 3, 0, 4]
DEFAULT_FRAME_COUNT = 3

# ==================== 读者-写者配置 ====================
DEFAULT_READER_COUNT = 3         # 读者数量
DEFAULT_WRITER_COUNT = 2         # 写者数量
MAX_PARTICIPANTS = 10            # 读者/写者数量上限
REQUEST_PROBABILITY = 0.6        # 随机事件为请求的概率（否则为释放）
EVENT_SPACING = 1000             # 相邻事件的基准时间间隔
EVENT_JITTER = 500               # 事件时间戳的随机抖动上限
EVENTS_PER_PARTICIPANT = 2       # 每个参与者平均生成的事件数

# ==================== 可视化配置 ====================
PLAYBACK_INTERVAL = 1.5          # 回放时每个事件的间隔（秒）
MAX_EVENTS = 200                 # 事件日志保留条数

# ==================== 服务配置 ====================
API_HOST = os.environ.get('ALGOSIM_HOST', '0.0.0.0')
API_PORT = int(os.environ.get('ALGOSIM_PORT', '3456'))
SECRET_KEY = os.environ.get('ALGOSIM_SECRET_KEY', 'os_algorithms_2025')
