# -*- coding: utf-8 -*-
"""
操作系统算法模拟器 - Flask后端应用
提供RESTful API接口和WebSocket实时通信
"""

import threading
from flask import Flask, request, jsonify
from flask_cors import CORS
from flask_socketio import SocketIO, emit

from .config import *
from .core.disk import schedule_fcfs
from .core.scheduler import schedule_priority
from .core.page import replace_lru
from .core.arbiter import replay
from .core.events import source_from_params
from .core.session import ReaderWriterSession
from .core.errors import InvalidInput, InvariantViolation
from .core.validation import (
    parse_non_negative_int, parse_positive_int, parse_int_list,
    parse_processes, parse_policy, parse_interval,
)


# 创建Flask应用 (纯API模式，前后端分离)
app = Flask(__name__)
app.config['SECRET_KEY'] = SECRET_KEY
CORS(app, resources={r"/api/*": {"origins": "*"}})
socketio = SocketIO(app, cors_allowed_origins="*", async_mode='threading')

# 读者-写者回放会话（同一时刻只有一条时间线）
rw_session = ReaderWriterSession()
session_lock = threading.RLock()


# 将回放事件推送给前端
def _emit_rw_event(evt: dict):
    try:
        socketio.emit('rw_event', evt)
    except Exception:
        pass


rw_session.set_event_emitter(_emit_rw_event)


ALGORITHMS = [
    {
        'key': 'fcfs',
        'title': 'FCFS Disk Scheduling',
        'description': 'First Come First Serve disk scheduling algorithm simulation',
        'endpoint': '/api/disk/fcfs',
        'example': {'initial_head': DEFAULT_INITIAL_HEAD, 'requests': DEFAULT_DISK_REQUESTS},
    },
    {
        'key': 'priority',
        'title': 'Priority Scheduling',
        'description': 'Non-preemptive priority scheduling algorithm simulation',
        'endpoint': '/api/scheduler/priority',
        'example': {'processes': [DEFAULT_PROCESS]},
    },
    {
        'key': 'lru',
        'title': 'LRU Page Replacement',
        'description': 'Least Recently Used page replacement algorithm simulation',
        'endpoint': '/api/page/lru',
        'example': {'references': DEFAULT_PAGE_REFERENCES, 'frames': DEFAULT_FRAME_COUNT},
    },
    {
        'key': 'reader-writer',
        'title': 'Reader-Writer Problem',
        'description': 'Synchronization visualization for reader-writer problem',
        'endpoint': '/api/rw/session',
        'example': {'readers': DEFAULT_READER_COUNT, 'writers': DEFAULT_WRITER_COUNT},
    },
]


# ==================== 错误处理 ====================
@app.errorhandler(InvalidInput)
def handle_invalid_input(error):
    """非法输入：返回被拒绝的字段和原因"""
    return jsonify(error.to_dict()), 400


@app.errorhandler(InvariantViolation)
def handle_invariant_violation(error):
    """前置条件被破坏"""
    return jsonify(error.to_dict()), 422


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInput('请求体必须是JSON对象', 'body', data)
    return data


# ==================== 算法目录API ====================
@app.route('/api/algorithms', methods=['GET'])
def list_algorithms():
    """获取算法列表"""
    return jsonify({'success': True, 'algorithms': ALGORITHMS})


# ==================== 磁盘调度API ====================
@app.route('/api/disk/fcfs', methods=['POST'])
def disk_fcfs():
    """FCFS磁盘调度"""
    data = _json_body()
    head = parse_non_negative_int(data.get('initial_head'), 'initial_head')
    requests = parse_int_list(data.get('requests'), 'requests')

    trace = schedule_fcfs(head, requests)
    return jsonify({'success': True, **trace.to_dict()})


# ==================== 进程调度API ====================
@app.route('/api/scheduler/priority', methods=['POST'])
def scheduler_priority():
    """非抢占式优先级调度"""
    data = _json_body()
    processes = parse_processes(data.get('processes'))

    result = schedule_priority(processes)
    return jsonify({'success': True, **result.to_dict()})


# ==================== 页面置换API ====================
@app.route('/api/page/lru', methods=['POST'])
def page_lru():
    """LRU页面置换"""
    data = _json_body()
    references = parse_int_list(data.get('references'), 'references')
    frames = parse_positive_int(data.get('frames'), 'frames')

    result = replace_lru(references, frames)
    return jsonify({'success': True, **result.to_dict()})


# ==================== 读者-写者API ====================
@app.route('/api/rw/events', methods=['POST'])
def rw_generate_events():
    """生成（或校验）一条事件序列"""
    data = _json_body()
    events = source_from_params(data).generate()
    return jsonify({'success': True, 'events': [e.to_dict() for e in events]})


@app.route('/api/rw/replay', methods=['POST'])
def rw_replay():
    """一次性回放整条事件序列，返回每个事件之后的状态"""
    data = _json_body()
    policy = parse_policy(data.get('policy'))
    events = source_from_params(data).generate()

    snapshots = replay(events, policy)
    steps = [
        {'step': i + 1, 'event': event.to_dict(), 'snapshot': state.to_dict()}
        for i, (event, state) in enumerate(zip(events, snapshots))
    ]
    return jsonify({'success': True, 'policy': policy.value, 'steps': steps})


@app.route('/api/rw/session', methods=['GET'])
def rw_session_status():
    """获取回放会话状态"""
    with session_lock:
        return jsonify({'success': True, **rw_session.get_status()})


@app.route('/api/rw/session', methods=['POST'])
def rw_session_load():
    """载入新的回放会话"""
    global rw_session
    data = _json_body()
    policy = parse_policy(data.get('policy'))
    interval = parse_interval(data.get('interval'), PLAYBACK_INTERVAL)
    events = source_from_params(data).generate()

    with session_lock:
        rw_session.stop()
        rw_session = ReaderWriterSession(policy, interval)
        rw_session.set_event_emitter(_emit_rw_event)
        rw_session.load(events)
        if data.get('autostart'):
            rw_session.start()
        return jsonify({'success': True, **rw_session.get_status()})


@app.route('/api/rw/session/<action>', methods=['POST'])
def rw_session_control(action):
    """回放控制：start / pause / resume / stop / step / reset"""
    with session_lock:
        if action == 'step':
            entry = rw_session.step()
            return jsonify({'success': True, 'applied': entry, **rw_session.get_status()})

        handlers = {
            'start': rw_session.start,
            'pause': rw_session.pause,
            'resume': rw_session.resume,
            'stop': rw_session.stop,
            'reset': rw_session.reset,
        }
        handler = handlers.get(action)
        if handler is None:
            return jsonify({'success': False, 'error': f'未知操作: {action}'}), 404
        handler()
        return jsonify({'success': True, **rw_session.get_status()})


# ==================== WebSocket事件 ====================
@socketio.on('connect')
def handle_connect():
    """客户端连接"""
    emit('connected', {'message': '连接成功'})


@socketio.on('get_rw_status')
def handle_get_rw_status():
    """获取回放会话状态"""
    with session_lock:
        emit('rw_status', rw_session.get_status())


@socketio.on('rw_step')
def handle_rw_step():
    """单步回放"""
    with session_lock:
        rw_session.step()
        emit('rw_status', rw_session.get_status())


def main():
    print("=" * 50)
    print("操作系统算法模拟器 API 服务")
    print("=" * 50)
    print("FCFS磁盘调度 / 非抢占式优先级调度 / LRU页面置换 / 读者-写者问题")
    print(f"回放间隔: {PLAYBACK_INTERVAL} 秒")
    print("=" * 50)
    print(f"API/SocketIO: http://{API_HOST}:{API_PORT} (前后端分离模式)")
    print("=" * 50)

    socketio.run(app, host=API_HOST, port=API_PORT, debug=False, allow_unsafe_werkzeug=True)


# ==================== 主程序入口 ====================
if __name__ == '__main__':
    main()
