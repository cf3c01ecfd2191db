"""A commandline tool to run an election kept in a JSON state file.

Create the state file with the init command, then register candidates,
start voting, cast votes and end voting, each as a separate call naming the
caller. The state is saved back after every accepted change. Refused
operations are reported and exit with a nonzero status.
"""

import argparse
import logging
import os
import sys
from typing import Any, Callable, Dict, Optional

import votetally.io
from votetally.election import Election
from votetally.errors import ElectionError
from votetally.lifecycle import Lifecycle
from votetally.notify import CallbackSink

argparser = argparse.ArgumentParser(
    prog='votetally',
    description=__doc__,
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
argparser.add_argument(
    'state_file',
    help='JSON file holding the election state',
)
argparser.add_argument(
    '-c', '--caller',
    help='identity of the caller of the operation',
)
argparser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='show all log messages',
)
argparser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='show only warnings and errors',
)
subparsers = argparser.add_subparsers(dest='command', metavar='command')

init_parser = subparsers.add_parser('init', help='create a new election')
init_parser.add_argument('admin', help='identity of the administrator')
init_parser.add_argument(
    '--min-candidates',
    type=int,
    default=2,
    help='number of candidates needed to start voting',
)
init_parser.add_argument(
    '--end-policy',
    choices=Lifecycle.END_POLICIES,
    default='idempotent',
    help='whether voting can be ended repeatedly and before it starts',
)
register_parser = subparsers.add_parser(
    'register', help='register a candidate (administrator only)'
)
register_parser.add_argument('name', help='name of the candidate')
subparsers.add_parser('start', help='start voting (administrator only)')
subparsers.add_parser('end', help='end voting (administrator only)')
vote_parser = subparsers.add_parser('vote', help='cast a vote as the caller')
vote_parser.add_argument('index', type=int, help='index of the candidate')
subparsers.add_parser('count', help='show the number of candidates')
has_voted_parser = subparsers.add_parser(
    'has-voted', help='show whether an identity has voted'
)
has_voted_parser.add_argument('identity', help='identity to check')
stats_parser = subparsers.add_parser(
    'stats', help='show statistics of one or all candidates'
)
stats_parser.add_argument(
    'index', type=int, nargs='?', help='index of the candidate'
)
subparsers.add_parser('winner', help='show the current winner')
subparsers.add_parser('status', help='show the phase and the tally')

MUTATING_COMMANDS = {'register', 'start', 'end', 'vote'}


def main(state_file: str,
         command: str,
         caller: Optional[str] = None,
         verbose: bool = False,
         quiet: bool = False,
         **kwargs,
         ) -> int:
    logging.basicConfig(
        level=(
            logging.DEBUG if verbose
            else (logging.WARNING if quiet else logging.INFO)
        ),
        format='%(levelname)-10s %(message)s'
    )
    if command == 'init':
        if os.path.exists(state_file):
            logging.error('%s already exists, not overwriting', state_file)
            return 2
        try:
            election = Election(
                kwargs['admin'],
                min_candidates=kwargs.get('min_candidates', 2),
                end_policy=kwargs.get('end_policy', 'idempotent'),
            )
        except ValueError as e:
            logging.error('cannot create election: %s', e)
            return 2
        votetally.io.dump_path(election, state_file)
        logging.info('created election administered by %s', election.admin)
        return 0
    if command in MUTATING_COMMANDS and caller is None:
        logging.error('%s needs the caller identity (-c)', command)
        return 2
    sink = CallbackSink(lambda event: logging.info('notification: %s', event))
    try:
        election = votetally.io.load_path(state_file, sink=sink)
    except (OSError, votetally.io.StateFileError) as e:
        logging.error('cannot load election from %s: %s', state_file, e)
        return 2
    try:
        COMMANDS[command](election, caller, **kwargs)
    except ElectionError as e:
        logging.error('%s refused: %s', command, e)
        return 1
    if command in MUTATING_COMMANDS:
        votetally.io.dump_path(election, state_file)
    return 0


def run_register(election: Election, caller: str, name: str) -> None:
    index = election.register(caller, name)
    print(f'Registered {name} as candidate {index}')


def run_start(election: Election, caller: str) -> None:
    election.start(caller)
    print('Voting started')


def run_end(election: Election, caller: str) -> None:
    election.end(caller)
    print('Voting ended')


def run_vote(election: Election, caller: str, index: int) -> None:
    election.cast_vote(caller, index)
    print(f'Vote cast for {election.candidate_name(index)}')


def show_count(election: Election, caller: Any) -> None:
    print(election.candidate_count())


def show_has_voted(election: Election, caller: Any, identity: str) -> None:
    print('yes' if election.has_voted(identity) else 'no')


def show_stats(election: Election,
               caller: Any,
               index: Optional[int] = None,
               ) -> None:
    if index is None:
        show_results(election)
    else:
        name, n_votes, pct = election.candidate_stats(index)
        print(f'{name}: {n_votes} votes ({pct} %)')


def show_winner(election: Election, caller: Any) -> None:
    index, name, n_votes = election.current_winner()
    print(f'Winner: {name} (candidate {index}) with {n_votes} votes')


def show_status(election: Election, caller: Any) -> None:
    print(f'Phase: {election.phase.value}')
    print(f'Administrator: {election.admin}')
    print(f'{election.voter_count()} votes cast'
          f' for {election.candidate_count()} candidates')
    show_results(election)


def show_results(election: Election) -> None:
    """Show a table of all candidates and their votes."""
    results = election.results()
    if not results:
        print('No candidates registered')
        return
    left_col = [str(i) for i in range(len(results))]
    n_just_chars = len(max(left_col, key=len))
    name_chars = max(len(stats.name) for stats in results)
    for left, stats in zip(left_col, results):
        print(
            left.rjust(n_just_chars), ' ',
            stats.name.ljust(name_chars), ' ',
            str(stats.votes).rjust(6), ' ',
            f'{stats.percentage:>3} %',
        )


COMMANDS: Dict[str, Callable[..., None]] = {
    'register': run_register,
    'start': run_start,
    'end': run_end,
    'vote': run_vote,
    'count': show_count,
    'has-voted': show_has_voted,
    'stats': show_stats,
    'winner': show_winner,
    'status': show_status,
}


if __name__ == '__main__':
    args = argparser.parse_args()
    if not args.command:
        argparser.print_usage()
    else:
        sys.exit(main(**vars(args)))
