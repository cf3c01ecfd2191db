
import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import votetally.candidate
import votetally.errors


def test_registry_indices_dense():
    registry = votetally.candidate.CandidateRegistry()
    names = ['Candidate 1', 'Candidate 2', 'Candidate 3']
    added = [registry.add(name) for name in names]
    assert [cand.index for cand in added] == [0, 1, 2]
    assert [cand.name for cand in registry] == names
    assert all(cand.votes == 0 for cand in registry)
    assert registry.count() == len(registry) == 3


@pytest.mark.parametrize('name', ['', None, 42, b'Candidate'])
def test_registry_invalid_name(name):
    registry = votetally.candidate.CandidateRegistry()
    registry.add('Candidate 1')
    with pytest.raises(votetally.errors.InvalidInput):
        registry.add(name)
    assert registry.count() == 1


def test_registry_whitespace_name():
    registry = votetally.candidate.CandidateRegistry()
    assert registry.add(' ').name == ' '


@pytest.mark.parametrize(('index', 'is_valid'), [
    (0, True),
    (1, True),
    (2, False),
    (-1, False),
    (True, False),
    ('0', False),
    (1.0, False),
    (None, False),
])
def test_registry_get(index, is_valid):
    registry = votetally.candidate.CandidateRegistry()
    registry.add('A')
    registry.add('B')
    if is_valid:
        assert registry.get(index).index == index
    else:
        with pytest.raises(votetally.errors.InvalidCandidate):
            registry.get(index)


def test_registry_get_empty():
    registry = votetally.candidate.CandidateRegistry()
    with pytest.raises(votetally.errors.InvalidCandidate) as excinfo:
        registry.get(0)
    assert 'no candidates' in str(excinfo.value)


def test_registry_total_votes():
    registry = votetally.candidate.CandidateRegistry()
    registry.add('A').votes = 3
    registry.add('B').votes = 2
    assert registry.total_votes() == 5


def test_candidate_to_dict():
    cand = votetally.candidate.Candidate(1, 'Barack Obama', 5)
    assert cand.to_dict() == {
        'class': 'votetally.candidate.Candidate',
        'index': 1,
        'name': 'Barack Obama',
        'votes': 5,
    }


def test_from_candidates():
    cands = [
        votetally.candidate.Candidate(0, 'A', 2),
        votetally.candidate.Candidate(1, 'B', 0),
    ]
    registry = votetally.candidate.CandidateRegistry.from_candidates(cands)
    assert list(registry) == cands
    assert registry.add('C').index == 2


@pytest.mark.parametrize('cands', [
    [votetally.candidate.Candidate(1, 'A')],
    [votetally.candidate.Candidate(0, 'A'), votetally.candidate.Candidate(0, 'B')],
    [votetally.candidate.Candidate(0, 'A', -1)],
    [votetally.candidate.Candidate(0, '')],
])
def test_from_candidates_invalid(cands):
    with pytest.raises(ValueError):
        votetally.candidate.CandidateRegistry.from_candidates(cands)
