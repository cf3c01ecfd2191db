'''The election state machine.

An :class:`Election` owns all election data: the registered candidates,
the record of who voted and the lifecycle phase. The administrator given at
creation registers candidates, starts and ends voting; anybody may vote once
while voting is active and query the results at any time.

Every mutating operation takes the identity of its caller as the first
argument. Operations either succeed in full or raise a subclass of
:class:`votetally.errors.ElectionError` without changing anything.

A single re-entrant lock guards the whole state, so an election can be
shared between threads: mutations are applied atomically in one global
order and queries always see a consistent state.
'''

import logging
import threading
from typing import Any, Dict, List, Optional

import votetally.tally
from votetally.candidate import Candidate, CandidateRegistry
from votetally.errors import InvalidInput, Unauthorized
from votetally.lifecycle import Lifecycle, Phase
from votetally.notify import (
    CandidateRegistered, ElectionEnded, EventSink, VoteCast
)
from votetally.persist import (
    deserialize_value, scoped_class_name, serialize_value
)
from votetally.tally import CandidateStats, Winner
from votetally.vote import BallotRecord, same_identity, validate_voter


class Election:
    '''A single election with one administrator.

    :param admin: Identity of the administrator; fixed for the life of the
        election.
    :param sink: Receiver of notifications about accepted changes. If None,
        notifications are only logged.
    :param min_candidates: Number of candidates needed to start voting.
    :param end_policy: Whether ending voting is `'idempotent'` (accepted in
        any phase, repeatedly) or `'strict'` (only while voting is active).
        See :class:`votetally.lifecycle.Lifecycle`.
    '''
    def __init__(self,
                 admin: Any,
                 sink: Optional[EventSink] = None,
                 min_candidates: int = 2,
                 end_policy: str = 'idempotent',
                 ):
        try:
            validate_voter(admin)
        except InvalidInput as e:
            raise ValueError(f'invalid administrator: {admin!r}') from e
        self._admin = admin
        self.sink = sink
        self._lifecycle = Lifecycle(min_candidates, end_policy)
        self._candidates = CandidateRegistry()
        self._ballots = BallotRecord()
        self._lock = threading.RLock()

    @property
    def admin(self) -> Any:
        return self._admin

    @property
    def min_candidates(self) -> int:
        return self._lifecycle.min_candidates

    @property
    def end_policy(self) -> str:
        return self._lifecycle.end_policy

    @property
    def phase(self) -> Phase:
        with self._lock:
            return self._lifecycle.phase

    def _require_admin(self, caller: Any, operation: str) -> None:
        if not same_identity(caller, self._admin):
            raise Unauthorized(caller, operation)

    def _emit(self, event: Any) -> None:
        logging.info('%s', event)
        if self.sink is None:
            return
        try:
            self.sink.notify(event)
        except Exception:
            logging.warning('notification of %s failed', event, exc_info=True)

    def register(self, caller: Any, name: str) -> int:
        '''Register a new candidate.

        :param caller: Identity of the caller; must be the administrator.
        :param name: Name of the candidate; a non-empty string.
        :returns: Index of the new candidate.
        :raises Unauthorized: If the caller is not the administrator.
        :raises InvalidPhase: If voting has already started.
        :raises InvalidInput: If the name is empty.
        '''
        with self._lock:
            self._require_admin(caller, 'register candidate')
            self._lifecycle.require(Phase.NOT_STARTED, 'register candidate')
            candidate = self._candidates.add(name)
            self._emit(CandidateRegistered(candidate.index, candidate.name))
            return candidate.index

    def start(self, caller: Any) -> None:
        '''Open voting.

        :raises Unauthorized: If the caller is not the administrator.
        :raises InvalidPhase: If voting was already started or ended.
        :raises InsufficientCandidates: If fewer than
            :attr:`min_candidates` candidates are registered.
        '''
        with self._lock:
            self._require_admin(caller, 'start voting')
            self._lifecycle.start(self._candidates.count())
            logging.info('voting started with %d candidates',
                         self._candidates.count())

    def end(self, caller: Any) -> None:
        '''Close voting.

        Under the default idempotent policy, this can be called in any phase
        and again after voting has ended; each call emits the notification.

        :raises Unauthorized: If the caller is not the administrator.
        :raises InvalidPhase: Under the strict policy, if voting is not
            active.
        '''
        with self._lock:
            self._require_admin(caller, 'end voting')
            if self._lifecycle.phase is Phase.ENDED:
                logging.debug('voting already ended, reasserting')
            self._lifecycle.end()
            self._emit(ElectionEnded())

    def cast_vote(self, caller: Any, candidate_index: int) -> None:
        '''Cast the caller's vote for a candidate.

        Votes are final; there is no way to withdraw or change one.

        :param caller: Identity of the voter.
        :param candidate_index: Index of the chosen candidate.
        :raises InvalidPhase: If voting is not active.
        :raises InvalidCandidate: If the index is out of range.
        :raises DuplicateVote: If the caller has already voted.
        :raises InvalidInput: If the caller is not a usable identity.
        '''
        with self._lock:
            self._lifecycle.require(Phase.ACTIVE, 'cast vote')
            candidate = self._candidates.get(candidate_index)
            self._ballots.mark(caller)
            candidate.votes += 1
            self._emit(VoteCast(caller, candidate.index))

    def is_active(self) -> bool:
        with self._lock:
            return self._lifecycle.is_active()

    def candidate_count(self) -> int:
        with self._lock:
            return self._candidates.count()

    def candidate_name(self, index: int) -> str:
        with self._lock:
            return self._candidates.get(index).name

    def candidates(self) -> List[Candidate]:
        '''Return copies of all candidates in index order.'''
        with self._lock:
            return [
                Candidate(cand.index, cand.name, cand.votes)
                for cand in self._candidates
            ]

    def has_voted(self, identity: Any) -> bool:
        with self._lock:
            return self._ballots.has_voted(identity)

    def voter_count(self) -> int:
        with self._lock:
            return len(self._ballots)

    def total_votes(self) -> int:
        with self._lock:
            return self._candidates.total_votes()

    def candidate_stats(self, index: int) -> CandidateStats:
        '''Return the name, vote count and whole percentage of a candidate.

        The percentage is zero while no votes are cast.

        :raises InvalidCandidate: If the index is out of range.
        '''
        with self._lock:
            candidate = self._candidates.get(index)
            total = self._candidates.total_votes()
            logging.debug('stats for %r out of %d votes', candidate, total)
            return votetally.tally.candidate_stats(candidate, total)

    def results(self) -> List[CandidateStats]:
        '''Return the statistics of all candidates in index order.'''
        with self._lock:
            return votetally.tally.results(self._candidates)

    def current_winner(self) -> Winner:
        '''Return the index, name and vote count of the leading candidate.

        Ties go to the candidate registered first.

        :raises NoVotesCast: If no votes were cast yet.
        '''
        with self._lock:
            return votetally.tally.current_winner(self._candidates)

    def to_dict(self) -> Dict[str, Any]:
        '''Serialize the state of the election (without the sink).'''
        with self._lock:
            return {
                'class': scoped_class_name(self),
                'admin': serialize_value(self._admin),
                'min_candidates': self._lifecycle.min_candidates,
                'end_policy': self._lifecycle.end_policy,
                'phase': serialize_value(self._lifecycle.phase),
                'candidates': [cand.to_dict() for cand in self._candidates],
                'voters': [serialize_value(v) for v in self._ballots],
            }

    @classmethod
    def from_dict(cls,
                  params: Dict[str, Any],
                  sink: Optional[EventSink] = None,
                  ) -> 'Election':
        '''Restore an election serialized by :meth:`to_dict`.

        :param params: The serialized state, with or without the class key.
        :param sink: Receiver of notifications for the restored election.
        :raises ValueError: If the state is incomplete or breaks any of the
            election invariants.
        '''
        try:
            admin = deserialize_value(params['admin'])
            phase = deserialize_value(params['phase'])
            candidates = [
                deserialize_value(cand) for cand in params['candidates']
            ]
            voters = [deserialize_value(v) for v in params['voters']]
            election = cls(
                admin,
                sink=sink,
                min_candidates=params.get('min_candidates', 2),
                end_policy=params.get('end_policy', 'idempotent'),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f'invalid election state: {e!r}') from e
        if not isinstance(phase, Phase):
            raise ValueError(f'invalid election phase: {phase!r}')
        if not all(isinstance(cand, Candidate) for cand in candidates):
            raise ValueError('invalid candidate in election state')
        election._lifecycle.phase = phase
        election._candidates = CandidateRegistry.from_candidates(candidates)
        try:
            election._ballots = BallotRecord(voters)
        except TypeError as e:
            raise ValueError(f'unhashable voter in election state: {e}') from e
        n_votes = election._candidates.total_votes()
        if n_votes != len(election._ballots):
            raise ValueError(
                f'{n_votes} votes recorded for {len(election._ballots)} voters'
            )
        if phase is Phase.NOT_STARTED and n_votes:
            raise ValueError('votes recorded before voting started')
        return election

    def __repr__(self) -> str:
        return (
            f'<Election({self._admin!r},{self.phase.value},'
            f'{self.candidate_count()} candidates)>'
        )
