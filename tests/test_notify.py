
import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import votetally.notify
from votetally.notify import CandidateRegistered, ElectionEnded, VoteCast


def test_event_log():
    log = votetally.notify.EventLog()
    events = [
        CandidateRegistered(0, 'A'),
        CandidateRegistered(1, 'B'),
        VoteCast('U1', 1),
        ElectionEnded(),
    ]
    for event in events:
        log.notify(event)
    assert list(log) == events
    assert len(log) == 4
    assert log.of_type(CandidateRegistered) == events[:2]
    assert log.of_type(VoteCast) == [VoteCast('U1', 1)]


def test_callback_sink():
    received = []
    sink = votetally.notify.CallbackSink(received.append)
    sink.notify(ElectionEnded())
    assert received == [ElectionEnded()]


def test_fan_out():
    first = votetally.notify.EventLog()
    second = votetally.notify.EventLog()
    fan = votetally.notify.FanOut([first, second])
    fan.notify(VoteCast('U1', 0))
    assert first.events == second.events == [VoteCast('U1', 0)]


def test_fan_out_failure_reaches_all():
    def explode(event):
        raise RuntimeError('down')

    log = votetally.notify.EventLog()
    fan = votetally.notify.FanOut([
        votetally.notify.CallbackSink(explode), log
    ])
    with pytest.raises(RuntimeError):
        fan.notify(ElectionEnded())
    assert log.events == [ElectionEnded()]


def test_abstract_sink():
    with pytest.raises(TypeError):
        votetally.notify.EventSink()


@pytest.mark.parametrize(('event', 'expected'), [
    (CandidateRegistered(0, 'A'), {
        'class': 'votetally.notify.CandidateRegistered',
        'index': 0,
        'name': 'A',
    }),
    (VoteCast('U1', 2), {
        'class': 'votetally.notify.VoteCast',
        'voter': 'U1',
        'candidate_index': 2,
    }),
    (ElectionEnded(), {'class': 'votetally.notify.ElectionEnded'}),
])
def test_event_to_dict(event, expected):
    assert event.to_dict() == expected
