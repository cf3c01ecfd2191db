'''Registered candidates and their registry.

Candidates are identified by their index, the ordinal position in which they
were registered. Indices are dense and start at zero; a candidate is never
removed, renamed or moved, so an index keeps pointing at the same candidate
for the whole life of the election.
'''

from typing import Any, Iterator, List

from votetally.errors import InvalidCandidate, InvalidInput
from votetally.persist import simple_serialization


@simple_serialization
class Candidate:
    '''A candidate registered for the election.

    :param index: Position of the candidate in the registration order.
    :param name: Name of the candidate, in any customary text format.
    :param votes: Number of votes the candidate received so far.
    '''
    def __init__(self, index: int, name: str, votes: int = 0):
        self.index = index
        self.name = name
        self.votes = votes

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Candidate):
            return NotImplemented
        return (
            (self.index, self.name, self.votes)
            == (other.index, other.name, other.votes)
        )

    def __repr__(self) -> str:
        return f'<Candidate({self.index},{self.name},{self.votes})>'


def validate_name(name: Any) -> None:
    '''Check that a candidate name is a non-empty string.

    :raises InvalidInput: If it is not.
    '''
    if not isinstance(name, str) or not name:
        raise InvalidInput(name, 'a non-empty candidate name')


def is_valid_index(index: Any, count: int) -> bool:
    # bool is an int subclass but never a meaningful index
    return (
        isinstance(index, int)
        and not isinstance(index, bool)
        and 0 <= index < count
    )


class CandidateRegistry:
    '''An append-only, index-ordered collection of candidates.

    Performs no access or phase checks; these are the business of the
    election that owns the registry.
    '''
    def __init__(self):
        self._candidates: List[Candidate] = []

    def add(self, name: str) -> Candidate:
        '''Register a new candidate with zero votes.

        :param name: Name of the candidate.
        :returns: The new candidate, carrying the next free index.
        :raises InvalidInput: If the name is empty or not a string.
        '''
        validate_name(name)
        candidate = Candidate(len(self._candidates), name)
        self._candidates.append(candidate)
        return candidate

    def get(self, index: int) -> Candidate:
        '''Return the candidate registered under the given index.

        :raises InvalidCandidate: If no candidate has the index.
        '''
        if not is_valid_index(index, len(self._candidates)):
            raise InvalidCandidate(index, len(self._candidates))
        return self._candidates[index]

    def count(self) -> int:
        return len(self._candidates)

    def total_votes(self) -> int:
        return sum(cand.votes for cand in self._candidates)

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._candidates)

    @classmethod
    def from_candidates(cls, candidates: List[Candidate]) -> 'CandidateRegistry':
        '''Rebuild a registry from stored candidates.

        :raises ValueError: If the indices are not dense and ordered from
            zero, or a vote count or name is invalid.
        '''
        registry = cls()
        for position, cand in enumerate(candidates):
            if cand.index != position:
                raise ValueError(
                    f'candidate {cand!r} stored at position {position}'
                )
            if not isinstance(cand.votes, int) or cand.votes < 0:
                raise ValueError(f'invalid vote count for {cand!r}')
            try:
                validate_name(cand.name)
            except InvalidInput as e:
                raise ValueError(f'invalid stored candidate: {e}') from e
            registry._candidates.append(cand)
        return registry
