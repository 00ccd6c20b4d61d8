from collections import defaultdict
from typing import Any, Callable, Dict, List, Type

from .events import Event

Handler = Callable[[Any], None]


class MessageBus:
    """
    Dispatches runtime events to subscribers.

    A handler subscribed to an event class receives instances of its
    subclasses too, so subscribing to `TaskEvent` covers every task event
    and subscribing to `Event` covers everything. The most specific
    subscriptions are called first.
    """

    def __init__(self):
        self._subscribers: Dict[Type[Event], List[Handler]] = defaultdict(list)

    def subscribe(self, event_type: Type[Event], handler: Handler) -> Callable[[], None]:
        """Registers `handler` and returns a callable that removes it again."""
        self._subscribers[event_type].append(handler)

        def unsubscribe():
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def publish(self, event: Event):
        for event_type in type(event).__mro__:
            for handler in list(self._subscribers.get(event_type, ())):
                handler(event)
            if event_type is Event:
                break
