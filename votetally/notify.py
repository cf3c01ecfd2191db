'''Notifications emitted by the election and sinks that receive them.

The election reports every accepted change through a sink: a registered
candidate, a cast vote, the end of voting. Sinks are called synchronously,
after the change has been made, in the order of the operations. A sink that
fails does not affect the election.

Plug an :class:`EventLog` in to keep an audit trail, or wrap any callable in
a :class:`CallbackSink`; :class:`FanOut` sends the notifications to more
sinks at once.
'''

import abc
import dataclasses
from typing import Any, Callable, Iterator, List, Optional, Type

from votetally.persist import simple_serialization


@simple_serialization
@dataclasses.dataclass(frozen=True)
class CandidateRegistered:
    '''A candidate was registered under the given index.'''
    index: int
    name: str


@simple_serialization
@dataclasses.dataclass(frozen=True)
class VoteCast:
    '''The voter cast a vote for the candidate with the given index.'''
    voter: Any
    candidate_index: int


@simple_serialization
@dataclasses.dataclass(frozen=True)
class ElectionEnded:
    '''Voting was ended (or its end reasserted).'''


class EventSink(metaclass=abc.ABCMeta):
    '''An abstract receiver of election notifications.'''
    @abc.abstractmethod
    def notify(self, event: Any) -> None:
        '''Receive a notification.

        :raises NotImplementedError:
        '''
        raise NotImplementedError


class EventLog(EventSink):
    '''Record notifications in the order received.

    :param events: Notifications recorded previously, if any.
    '''
    def __init__(self, events: Optional[List[Any]] = None):
        self.events = list(events) if events else []

    def notify(self, event: Any) -> None:
        self.events.append(event)

    def of_type(self, event_type: Type) -> List[Any]:
        '''Return the recorded notifications of the given type.'''
        return [event for event in self.events
                if isinstance(event, event_type)]

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.events)


class CallbackSink(EventSink):
    '''Pass notifications to a plain callable.

    :param callback: Called with each notification as its only argument.
    '''
    def __init__(self, callback: Callable[[Any], Any]):
        self.callback = callback

    def notify(self, event: Any) -> None:
        self.callback(event)


class FanOut(EventSink):
    '''Pass notifications to several sinks in turn.

    Like the election itself, a failing sink does not stop the remaining
    ones from receiving the notification; the first failure is re-raised
    once all sinks were called.

    :param sinks: Sinks to notify, in order.
    '''
    def __init__(self, sinks: List[EventSink]):
        self.sinks = sinks

    def notify(self, event: Any) -> None:
        error = None
        for sink in self.sinks:
            try:
                sink.notify(event)
            except Exception as e:
                if error is None:
                    error = e
        if error is not None:
            raise error
