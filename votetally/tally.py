"""Tally the votes: per-candidate statistics and the current winner.

All functions here are pure; they read the candidates and never change
them, so they can be used in any phase of the election.

Percentages are whole numbers obtained by floor division, so the
percentages of all candidates may add up to less than 100. Three candidates
with one vote each get 33 % apiece.

The winner is the candidate with the most votes. Ties go to the candidate
registered first: the candidates are scanned in index order and a later one
replaces the leader only with strictly more votes.
"""

from typing import Iterable, List, NamedTuple

from votetally.candidate import Candidate
from votetally.errors import NoVotesCast


class CandidateStats(NamedTuple):
    '''Votes received by a single candidate.'''
    name: str
    votes: int
    percentage: int


class Winner(NamedTuple):
    '''The candidate currently leading the election.'''
    index: int
    name: str
    votes: int


def total_votes(candidates: Iterable[Candidate]) -> int:
    return sum(cand.votes for cand in candidates)


def percentage(votes: int, total: int) -> int:
    """Compute the share of votes as a whole percentage, rounded down.

    :param votes: Votes for the candidate.
    :param total: Votes cast in total. If zero, the share is zero.
    """
    if total == 0:
        return 0
    return votes * 100 // total


def candidate_stats(candidate: Candidate, total: int) -> CandidateStats:
    """Summarize the votes of a candidate.

    :param candidate: The candidate to summarize.
    :param total: Votes cast in total in the election.
    """
    return CandidateStats(
        candidate.name,
        candidate.votes,
        percentage(candidate.votes, total),
    )


def results(candidates: Iterable[Candidate]) -> List[CandidateStats]:
    """Summarize the votes of all candidates, in index order."""
    candidates = list(candidates)
    total = total_votes(candidates)
    return [candidate_stats(cand, total) for cand in candidates]


def current_winner(candidates: Iterable[Candidate]) -> Winner:
    """Determine the candidate with the most votes.

    :param candidates: Candidates in index order.
    :raises NoVotesCast: If no candidate has any votes.
    """
    best = None
    for cand in candidates:
        if best is None or cand.votes > best.votes:
            best = cand
    if best is None or best.votes == 0:
        raise NoVotesCast()
    return Winner(best.index, best.name, best.votes)
