"""Store and load elections as JSON state files.

The state file holds the dictionary produced by
:meth:`votetally.election.Election.to_dict`. Notification sinks are not
stored; pass one to :func:`load` to get notifications from the restored
election.
"""

import json
import os
from typing import Optional, TextIO, Union

from votetally.election import Election
from votetally.notify import EventSink
from votetally.persist import get_object, is_scoped_identifier


class StateFileError(ValueError):
    """The contents of a state file do not describe an election."""
    pass


def dumps(election: Election) -> str:
    return json.dumps(election.to_dict(), indent=2, ensure_ascii=False)


def dump(election: Election, file: TextIO) -> None:
    file.write(dumps(election))
    file.write('\n')


def loads(text: str, sink: Optional[EventSink] = None) -> Election:
    """Restore an election from JSON text.

    :param text: The state, as produced by :func:`dumps`.
    :param sink: Receiver of notifications for the restored election.
    :raises StateFileError: If the text is not a valid election state.
    """
    try:
        state = json.loads(text)
    except json.JSONDecodeError as e:
        raise StateFileError(f'state is not valid JSON: {e}') from e
    if not isinstance(state, dict):
        raise StateFileError('state must be a JSON object')
    class_name = state.get('class')
    try:
        if not is_scoped_identifier(class_name):
            raise ValueError(f'invalid class def: {class_name!r}')
        cls = get_object(class_name)
        if not (isinstance(cls, type) and issubclass(cls, Election)):
            raise ValueError(f'{class_name} is not an election')
        return cls.from_dict(state, sink=sink)
    except ValueError as e:
        raise StateFileError(str(e)) from e


def load(file: TextIO, sink: Optional[EventSink] = None) -> Election:
    return loads(file.read(), sink=sink)


def dump_path(election: Election, path: Union[str, os.PathLike]) -> None:
    """Write the state of the election to the given path.

    The state is written to a temporary file next to the target first and
    then moved over it, so an interrupted write leaves the old state intact.
    """
    text = dumps(election)
    tmp_path = f'{os.fspath(path)}.tmp'
    with open(tmp_path, 'w', encoding='utf8') as outfile:
        outfile.write(text)
        outfile.write('\n')
    os.replace(tmp_path, path)


def load_path(path: Union[str, os.PathLike],
              sink: Optional[EventSink] = None,
              ) -> Election:
    with open(path, encoding='utf8') as infile:
        return load(infile, sink=sink)
