
import sys
import os
import io
import json

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import votetally.io
import votetally.notify
from votetally.election import Election
from votetally.lifecycle import Phase
from votetally.notify import VoteCast


def make_election():
    election = Election('admin')
    election.register('admin', 'Příliš žluťoučký kůň')
    election.register('admin', 'Candidate 2')
    election.start('admin')
    election.cast_vote('U1', 0)
    return election


def test_dumps_loads():
    election = make_election()
    text = votetally.io.dumps(election)
    assert json.loads(text)['class'] == 'votetally.election.Election'
    assert 'Příliš žluťoučký kůň' in text
    restored = votetally.io.loads(text)
    assert restored.to_dict() == election.to_dict()


def test_dump_load_file():
    election = make_election()
    buffer = io.StringIO()
    votetally.io.dump(election, buffer)
    buffer.seek(0)
    log = votetally.notify.EventLog()
    restored = votetally.io.load(buffer, sink=log)
    restored.cast_vote('U2', 1)
    assert log.events == [VoteCast('U2', 1)]


def test_dump_load_path(tmp_path):
    path = tmp_path / 'election.json'
    election = make_election()
    votetally.io.dump_path(election, path)
    assert not (tmp_path / 'election.json.tmp').exists()
    restored = votetally.io.load_path(path)
    assert restored.phase is Phase.ACTIVE
    assert restored.has_voted('U1')
    restored.end('admin')
    votetally.io.dump_path(restored, path)
    assert votetally.io.load_path(path).phase is Phase.ENDED


@pytest.mark.parametrize('text', [
    'not json',
    '[]',
    '{}',
    '{"class": "votetally.candidate.Candidate", "index": 0}',
    '{"class": "os.path"}',
    '{"class": "votetally.election.Election", "admin": "a"}',
    '{"class": "votetally.nosuch.Election"}',
    '{"class": "votetally.io.Election.nosuch"}',
])
def test_invalid_state(text):
    with pytest.raises(votetally.io.StateFileError):
        votetally.io.loads(text)


def test_state_cannot_call_functions(tmp_path):
    target = tmp_path / 'written.json'
    state = make_election().to_dict()
    state['admin'] = {
        'class': 'votetally.io.dump_path',
        'election': make_election().to_dict(),
        'path': str(target),
    }
    with pytest.raises(votetally.io.StateFileError):
        votetally.io.loads(json.dumps(state))
    assert not target.exists()


@pytest.mark.parametrize('voter', [
    {'class': 'votetally.io.os', 'path': 'x'},
    {'class': 'votetally.election.threading'},
    {'type': 'votetally.io.json', 'value': '{}'},
    {'class': 'votetally.notify.EventLog'},
])
def test_state_cannot_name_non_serializable(voter):
    state = make_election().to_dict()
    state['voters'] = [voter]
    with pytest.raises(votetally.io.StateFileError):
        votetally.io.loads(json.dumps(state))


def test_failed_dump_leaves_no_temp_file(tmp_path):
    path = tmp_path / 'election.json'
    election = make_election()
    votetally.io.dump_path(election, path)
    before = path.read_text(encoding='utf8')
    election.cast_vote(object(), 1)
    with pytest.raises(ValueError):
        votetally.io.dump_path(election, path)
    assert not (tmp_path / 'election.json.tmp').exists()
    assert path.read_text(encoding='utf8') == before
