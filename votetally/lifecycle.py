'''Election phases and the transitions between them.

An election moves from :attr:`Phase.NOT_STARTED` through
:attr:`Phase.ACTIVE` to :attr:`Phase.ENDED` and never back. Candidates are
registered before the start; votes are accepted only while active.
'''

import enum
from typing import List

from votetally.errors import InsufficientCandidates, InvalidPhase


class Phase(enum.Enum):
    '''The lifecycle phase of an election.'''
    NOT_STARTED = 'not_started'
    ACTIVE = 'active'
    ENDED = 'ended'


PHASE_ORDER: List[Phase] = [Phase.NOT_STARTED, Phase.ACTIVE, Phase.ENDED]


class Lifecycle:
    '''Track the phase of an election and guard its transitions.

    :param min_candidates: Number of registered candidates needed to start.
    :param end_policy: How to treat ending an election:

        -   `'idempotent'` (default) accepts ending in any phase, even when
            already ended; every call counts as a (re)assertion of the end,
        -   `'strict'` accepts ending only an active election.

    :param phase: Phase to begin in; used when restoring a stored election.
    '''

    END_POLICIES: List[str] = ['idempotent', 'strict']

    def __init__(self,
                 min_candidates: int = 2,
                 end_policy: str = 'idempotent',
                 phase: Phase = Phase.NOT_STARTED,
                 ):
        if end_policy not in self.END_POLICIES:
            raise ValueError(
                f'invalid end policy: {end_policy},'
                f' allowed {self.END_POLICIES}'
            )
        if (not isinstance(min_candidates, int)
                or isinstance(min_candidates, bool)
                or min_candidates < 1):
            raise ValueError(
                f'invalid minimum candidate count: {min_candidates!r}'
            )
        if not isinstance(phase, Phase):
            raise ValueError(f'invalid phase: {phase!r}')
        self.min_candidates = min_candidates
        self.end_policy = end_policy
        self.phase = phase

    def is_active(self) -> bool:
        return self.phase is Phase.ACTIVE

    def require(self, expected: Phase, operation: str) -> None:
        '''Check that the election is in the expected phase.

        :raises InvalidPhase: If it is not.
        '''
        if self.phase is not expected:
            raise InvalidPhase(self.phase, expected, operation)

    def check_start(self, n_candidates: int) -> None:
        '''Check whether voting can start with the given candidate count.

        :raises InvalidPhase: If the election is not in the initial phase.
        :raises InsufficientCandidates: If too few candidates are registered.
        '''
        self.require(Phase.NOT_STARTED, 'start voting')
        if n_candidates < self.min_candidates:
            raise InsufficientCandidates(n_candidates, self.min_candidates)

    def check_end(self) -> None:
        if self.end_policy == 'strict':
            self.require(Phase.ACTIVE, 'end voting')

    def start(self, n_candidates: int) -> None:
        self.check_start(n_candidates)
        self.phase = Phase.ACTIVE

    def end(self) -> None:
        self.check_end()
        self.phase = Phase.ENDED
