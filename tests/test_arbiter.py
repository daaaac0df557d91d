import random

import pytest

from algosim.core.arbiter import (
    AccessArbiter, AccessEvent, Action, ArbiterPolicy, ArbiterState, Role,
    replay, transition,
)
from algosim.core.errors import InvariantViolation


def req(pid, t=0):
    return AccessEvent(pid, Role.READER if pid.startswith('R') else Role.WRITER, Action.REQUEST, t)


def rel(pid, t=0):
    return AccessEvent(pid, Role.READER if pid.startswith('R') else Role.WRITER, Action.RELEASE, t)


def test_writer_release_promotes_waiting_reader():
    states = replay([req('W1', 0), req('R1', 1), rel('W1', 2)])
    assert states[0].active_writer == 'W1'
    assert states[1].waiting_readers == ('R1',)
    assert states[1].active_readers == ()
    assert states[2] == ArbiterState(active_readers=('R1',))


def test_readers_share_access_and_writer_waits():
    states = replay([req('R1'), req('R2'), req('W1')])
    assert states[-1].active_readers == ('R1', 'R2')
    assert states[-1].active_writer is None
    assert states[-1].waiting_writers == ('W1',)


def test_writer_queued_behind_other_writer():
    state = replay([req('W1'), req('W2'), req('W2')])[-1]
    assert state.active_writer == 'W1'
    assert state.waiting_writers == ('W2',)


def test_waiting_writer_not_promoted_on_release():
    states = replay([req('W1'), req('W2'), req('R1'), rel('W1')])
    final = states[-1]
    assert final.active_writer is None
    assert final.active_readers == ('R1',)
    assert final.waiting_writers == ('W2',)


def test_waiting_writer_stays_queued_even_without_readers():
    final = replay([req('W1'), req('W2'), rel('W1')])[-1]
    assert final.active_writer is None
    assert final.waiting_writers == ('W2',)
    # 再次请求时才能进入
    assert transition(final, req('W2')).active_writer == 'W2'
    assert transition(final, req('W2')).waiting_writers == ()


def test_release_by_non_active_process_is_noop():
    state = replay([req('W1'), req('R1')])[-1]
    assert transition(state, rel('W2')) == state
    assert transition(state, rel('R9')) == state
    assert transition(ArbiterState(), rel('W1')) == ArbiterState()


def test_duplicate_requests_do_not_duplicate():
    state = replay([req('R1'), req('R1')])[-1]
    assert state.active_readers == ('R1',)
    state = replay([req('W1'), req('R1'), req('R1')])[-1]
    assert state.waiting_readers == ('R1',)
    state = replay([req('W1'), req('W2'), req('W2')])[-1]
    assert state.waiting_writers == ('W2',)


def test_active_writer_request_again_is_queued():
    state = replay([req('W1', 0), req('W1', 1)])[-1]
    assert state.active_writer == 'W1'
    assert state.active_readers == ()
    assert state.waiting_writers == ('W1',)
    # 释放后仍在等待队列中，不会自动进入
    released = transition(state, rel('W1', 2))
    assert released.active_writer is None
    assert released.waiting_writers == ('W1',)


def test_transition_does_not_mutate_input_state():
    before = ArbiterState()
    after = transition(before, req('R1'))
    assert before == ArbiterState()
    assert after.active_readers == ('R1',)


def test_state_rejects_reader_alongside_writer():
    with pytest.raises(InvariantViolation):
        ArbiterState(active_readers=('R1',), active_writer='W1')


def test_arbiter_keeps_history_and_resets():
    arbiter = AccessArbiter()
    arbiter.apply(req('R1', 1))
    arbiter.apply(rel('R1', 2))
    assert len(arbiter.history) == 2
    assert arbiter.state == ArbiterState()
    arbiter.reset()
    assert arbiter.history == []
    assert arbiter.last_timestamp is None


def test_out_of_order_timestamp_rejected():
    arbiter = AccessArbiter()
    arbiter.apply(req('R1', 5))
    with pytest.raises(InvariantViolation):
        arbiter.apply(req('R2', 4))


@pytest.mark.parametrize('policy', list(ArbiterPolicy))
def test_exclusion_holds_for_random_interleavings(policy):
    rng = random.Random(1234)
    ids = ['R1', 'R2', 'R3', 'W1', 'W2']
    for _ in range(200):
        arbiter = AccessArbiter(policy)
        for t in range(30):
            pid = rng.choice(ids)
            event = req(pid, t) if rng.random() < 0.6 else rel(pid, t)
            state = arbiter.apply(event)
            assert not (state.active_writer is not None and state.active_readers)
            assert len(set(state.active_readers)) == len(state.active_readers)
            assert len(set(state.waiting_readers)) == len(state.waiting_readers)
            assert len(set(state.waiting_writers)) == len(state.waiting_writers)


def test_fifo_matches_reader_preference_on_simple_trace():
    states = replay([req('W1'), req('R1'), rel('W1')], ArbiterPolicy.FIFO)
    assert states[-1].active_readers == ('R1',)
    assert states[-1].waiting_readers == ()


def test_fifo_reader_does_not_overtake_waiting_writer():
    states = replay([req('R1'), req('W1'), req('R2')], ArbiterPolicy.FIFO)
    assert states[-1].active_readers == ('R1',)
    assert states[-1].waiting_writers == ('W1',)
    assert states[-1].waiting_readers == ('R2',)


def test_fifo_promotes_writer_when_last_reader_leaves():
    states = replay([req('R1'), req('W1'), req('R2'), rel('R1')], ArbiterPolicy.FIFO)
    final = states[-1]
    assert final.active_writer == 'W1'
    assert final.active_readers == ()
    assert final.waiting_readers == ('R2',)


def test_fifo_writer_release_serves_line_in_order():
    events = [req('W1'), req('R1'), req('W2'), req('R2'), rel('W1')]
    final = replay(events, ArbiterPolicy.FIFO)[-1]
    # R1 在 W2 之前，先进入；W2 仍需等待 R1 释放
    assert final.active_readers == ('R1',)
    assert final.waiting_writers == ('W2',)
    assert final.waiting_readers == ('R2',)
