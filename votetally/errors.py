'''Errors raised by the election state machine.

All of them derive from :class:`ElectionError`. They signal a violation by
the caller (lacking authority, wrong phase, invalid argument) and are raised
before any state is changed, so the election is left as it was.
'''

from typing import Any, Optional


class ElectionError(Exception):
    '''An election operation was refused.'''
    pass


class Unauthorized(ElectionError):
    '''The caller is not the administrator of the election.

    :param caller: Identity that attempted the operation.
    :param operation: Name of the refused operation.
    '''
    def __init__(self, caller: Any, operation: str):
        self.caller = caller
        self.operation = operation
        super().__init__(
            f'{operation} is restricted to the administrator, not {caller!r}'
        )


class InvalidPhase(ElectionError):
    '''The operation is not allowed in the current phase of the election.

    :param phase: Phase the election is in.
    :param expected: Phase the operation requires.
    :param operation: Name of the refused operation.
    '''
    def __init__(self, phase: Any, expected: Any, operation: str):
        self.phase = phase
        self.expected = expected
        self.operation = operation
        super().__init__(
            f'cannot {operation} in phase {phase.value},'
            f' must be {expected.value}'
        )


class InvalidInput(ElectionError):
    '''A malformed argument, such as an empty candidate name.'''
    def __init__(self, value: Any, expected: str):
        self.value = value
        self.expected = expected
        super().__init__(f'invalid input {value!r}, must be {expected}')


class InsufficientCandidates(ElectionError):
    '''Voting cannot start with so few candidates registered.

    :param count: Number of candidates registered.
    :param minimum: Number of candidates required.
    '''
    def __init__(self, count: int, minimum: int):
        self.count = count
        self.minimum = minimum
        super().__init__(
            f'need at least {minimum} candidates to start, have {count}'
        )


class InvalidCandidate(ElectionError):
    '''A candidate index outside the registered range.

    :param index: The offending index.
    :param count: Number of candidates registered.
    '''
    def __init__(self, index: Any, count: Optional[int] = None):
        self.index = index
        self.count = count
        message = f'invalid candidate index: {index!r}'
        if count:
            message += f', must be in range 0..{count - 1}'
        elif count == 0:
            message += ', no candidates registered'
        super().__init__(message)


class DuplicateVote(ElectionError):
    '''The identity has already voted in this election.'''
    def __init__(self, voter: Any):
        self.voter = voter
        super().__init__(f'{voter!r} has already voted')


class NoVotesCast(ElectionError):
    '''A winner was requested before any vote was cast.'''
    def __init__(self):
        super().__init__('no votes cast yet')
