"""Votetally - a vote-tallying state machine for a single election.

An administrator registers candidates, opens voting, and closes it; every
participant identity can vote once while voting is open. The tally reports
per-candidate statistics and the current winner at any time.

The :class:`Election` object from the :mod:`election` module holds the
whole state. The building blocks it uses live in their own modules:

-   :mod:`candidate` for the registry of candidates,
-   :mod:`lifecycle` for the election phases,
-   :mod:`vote` for the record of who has voted,
-   :mod:`tally` for the statistics and the winner,
-   :mod:`notify` for the notifications emitted on changes,
-   :mod:`persist` and :mod:`io` for storing the state.

All refused operations raise subclasses of
:class:`errors.ElectionError`.
"""

from votetally.election import Election    # noqa: F401
from votetally.lifecycle import Phase    # noqa: F401
