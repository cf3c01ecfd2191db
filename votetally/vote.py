'''Record of who has voted.

Only the fact that an identity voted is kept; the choice itself goes
straight into the candidate's counter when the vote is cast. Identities are
opaque hashable values; two identities are the same only if they are equal
and of the same type, so `1`, `1.0` and `True` are three different voters.
'''

from typing import Any, Dict, Iterable, Iterator, Tuple

from votetally.errors import DuplicateVote, InvalidInput


def validate_voter(voter: Any) -> None:
    '''Check that a value can serve as a voter identity.

    :raises InvalidInput: If it is None or unhashable.
    '''
    if voter is None:
        raise InvalidInput(voter, 'a voter identity')
    try:
        hash(voter)
    except TypeError as e:
        raise InvalidInput(voter, 'a hashable voter identity') from e


def same_identity(first: Any, second: Any) -> bool:
    return type(first) is type(second) and first == second


def identity_key(voter: Any) -> Tuple[type, Any]:
    return (type(voter), voter)


class BallotRecord:
    '''An append-only set of identities that have voted.

    Keeps the order in which the identities voted.

    :param voters: Identities that have already voted; used when restoring
        a stored election.
    :raises ValueError: If an identity is listed twice.
    '''
    def __init__(self, voters: Iterable[Any] = ()):
        self._voters: Dict[Tuple[type, Any], Any] = {}
        for voter in voters:
            if identity_key(voter) in self._voters:
                raise ValueError(f'voter {voter!r} recorded twice')
            self._voters[identity_key(voter)] = voter

    def has_voted(self, voter: Any) -> bool:
        try:
            return identity_key(voter) in self._voters
        except TypeError:
            # unhashable identities cannot have voted
            return False

    def check(self, voter: Any) -> None:
        '''Check that the identity may still vote.

        :raises InvalidInput: If the value cannot be an identity.
        :raises DuplicateVote: If the identity has already voted.
        '''
        validate_voter(voter)
        if self.has_voted(voter):
            raise DuplicateVote(voter)

    def mark(self, voter: Any) -> None:
        '''Mark the identity as having voted.

        :raises DuplicateVote: If the identity has already voted.
        '''
        self.check(voter)
        self._voters[identity_key(voter)] = voter

    def __len__(self) -> int:
        return len(self._voters)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._voters.values())
