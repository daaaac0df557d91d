import pytest

from algosim.config import EVENTS_PER_PARTICIPANT
from algosim.core.arbiter import AccessEvent, Action, Role
from algosim.core.errors import InvalidInput, InvariantViolation
from algosim.core.events import (
    RandomEventSource, ScriptedEventSource, parse_events, source_from_params,
)


def test_random_source_shape():
    events = RandomEventSource(3, 2, seed=7).generate()
    assert len(events) == 5 * EVENTS_PER_PARTICIPANT
    assert [e.timestamp for e in events] == sorted(e.timestamp for e in events)
    for event in events:
        if event.role is Role.READER:
            assert event.process_id in {'R1', 'R2', 'R3'}
        else:
            assert event.process_id in {'W1', 'W2'}


def test_random_source_is_reproducible_with_seed():
    assert RandomEventSource(3, 2, seed=42).generate() == RandomEventSource(3, 2, seed=42).generate()


def test_request_probability_extremes():
    events = RandomEventSource(2, 2, seed=1, request_probability=1.0).generate()
    assert all(e.kind is Action.REQUEST for e in events)
    events = RandomEventSource(2, 2, seed=1, request_probability=0.0).generate()
    assert all(e.kind is Action.RELEASE for e in events)


@pytest.mark.parametrize('readers, writers', [(0, 2), (2, 0), (11, 1)])
def test_random_source_rejects_bad_counts(readers, writers):
    with pytest.raises(InvalidInput):
        RandomEventSource(readers, writers)


def test_scripted_source_rejects_unsorted():
    events = [
        AccessEvent('R1', Role.READER, Action.REQUEST, 2),
        AccessEvent('R1', Role.READER, Action.RELEASE, 1),
    ]
    with pytest.raises(InvariantViolation):
        ScriptedEventSource(events)


def test_parse_events_infers_role_and_time():
    events = parse_events([
        {'process_id': 'W1', 'action': 'request'},
        {'processId': 'R2', 'action': 'RELEASE', 'time': 5},
        {'process_id': 'x', 'role': 'reader', 'action': 'request', 'time': 9.5},
    ])
    assert events[0] == AccessEvent('W1', Role.WRITER, Action.REQUEST, 0)
    assert events[1] == AccessEvent('R2', Role.READER, Action.RELEASE, 5)
    assert events[2].role is Role.READER


@pytest.mark.parametrize('items', [
    [],
    None,
    [{'action': 'request'}],
    [{'process_id': 'X1', 'action': 'request'}],
    [{'process_id': 'R1', 'action': 'grab'}],
    [{'process_id': 'R1', 'action': 'request', 'time': 'soon'}],
])
def test_parse_events_rejects_bad_items(items):
    with pytest.raises(InvalidInput):
        parse_events(items)


def test_source_from_params():
    scripted = source_from_params({'events': [{'process_id': 'R1', 'action': 'request'}]})
    assert isinstance(scripted, ScriptedEventSource)
    generated = source_from_params({'readers': '2', 'writers': 1, 'seed': 3})
    assert isinstance(generated, RandomEventSource)
    assert generated.num_readers == 2
    with pytest.raises(InvalidInput):
        source_from_params({'seed': 'abc'})
