import threading

from algosim.core.arbiter import AccessEvent, Action, ArbiterPolicy, Role
from algosim.core.session import ReaderWriterSession, SessionState


EVENTS = [
    AccessEvent('W1', Role.WRITER, Action.REQUEST, 0),
    AccessEvent('R1', Role.READER, Action.REQUEST, 1),
    AccessEvent('W1', Role.WRITER, Action.RELEASE, 2),
]


def test_manual_stepping():
    session = ReaderWriterSession(interval=0)
    session.load(EVENTS)
    assert session.state == SessionState.IDLE

    first = session.step()
    assert first['step'] == 1
    assert first['snapshot']['active_writer'] == 'W1'

    session.step()
    last = session.step()
    assert last['snapshot'] == {
        'active_readers': ['R1'],
        'active_writer': None,
        'waiting_readers': [],
        'waiting_writers': [],
    }
    assert session.state == SessionState.FINISHED
    assert session.step() is None


def test_emitter_receives_every_event():
    received = []
    session = ReaderWriterSession(interval=0)
    session.set_event_emitter(received.append)
    session.load(EVENTS)
    for _ in EVENTS:
        session.step()
    assert [entry['step'] for entry in received] == [1, 2, 3]


def test_emitter_failure_does_not_stop_playback():
    def broken(_):
        raise RuntimeError('socket closed')

    session = ReaderWriterSession(interval=0)
    session.set_event_emitter(broken)
    session.load(EVENTS)
    assert session.step() is not None
    assert session.current_step == 1


def test_background_playback_runs_to_completion():
    session = ReaderWriterSession(interval=0)
    session.load(EVENTS)
    session.start()
    assert session.wait_finished(timeout=5)
    assert session.current_step == 3
    assert session.get_state().active_readers == ('R1',)
    assert len(session.get_events()) == 3


def test_pause_stop_and_reset():
    session = ReaderWriterSession(interval=10)
    session.load(EVENTS)
    session.start()
    session.pause()
    assert session.state == SessionState.PAUSED
    session.stop()
    assert session.state == SessionState.STOPPED
    assert session.current_step <= 1

    session.reset()
    assert session.state == SessionState.IDLE
    assert session.current_step == 0
    assert session.get_events() == []


def test_pause_then_resume_finishes():
    session = ReaderWriterSession(interval=10)
    session.load(EVENTS)
    session.start()
    session.pause()
    session.interval = 0
    session.resume()
    assert session.wait_finished(timeout=5)
    assert session.current_step == 3


def test_step_pauses_running_playback():
    session = ReaderWriterSession(interval=10)
    session.load(EVENTS)
    session.start()
    session.step()
    assert session.state == SessionState.PAUSED
    session.stop()
    assert session.current_step >= 1


def test_start_with_no_events_finishes_immediately():
    session = ReaderWriterSession()
    session.start()
    assert session.state == SessionState.FINISHED


def test_status_reports_policy_and_events():
    session = ReaderWriterSession(ArbiterPolicy.FIFO, interval=0)
    session.load(EVENTS)
    status = session.get_status()
    assert status['policy'] == 'fifo'
    assert status['total_steps'] == 3
    assert status['events'][0] == {'process_id': 'W1', 'role': 'writer', 'action': 'request', 'time': 0}
    assert status['snapshot']['active_writer'] is None


def test_emitter_runs_without_holding_session_lock():
    session = ReaderWriterSession(interval=0)
    finished = []

    def slow_client(_):
        # 推送期间其他线程应能读取状态
        reader = threading.Thread(target=lambda: finished.append(session.get_status()))
        reader.start()
        reader.join(timeout=2)
        finished.append(not reader.is_alive())

    session.set_event_emitter(slow_client)
    session.load(EVENTS)
    session.step()
    assert finished[-1] is True
    assert finished[0]['current_step'] == 1


def test_finished_only_after_last_event_pushed():
    pushed = []
    session = ReaderWriterSession(interval=0)
    session.set_event_emitter(lambda entry: pushed.append(session.state))
    session.load(EVENTS)
    session.start()
    assert session.wait_finished(timeout=5)
    assert len(pushed) == 3
    assert SessionState.FINISHED not in pushed
