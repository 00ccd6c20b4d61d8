from tasklane.runtime.bus import MessageBus
from tasklane.runtime.events import Event


class SpySubscriber:
    """Collects every event published on a bus, for assertions in tests."""

    def __init__(self, bus: MessageBus):
        self.events = []
        bus.subscribe(Event, self.collect)

    def collect(self, event: Event):
        self.events.append(event)

    def events_of_type(self, event_type):
        return [e for e in self.events if isinstance(e, event_type)]


class SpyRenderer:
    """Records (msg_id, level, data) for every message sent to the messaging bus."""

    def __init__(self):
        self.messages = []

    def render(self, msg_id: str, level: str, **kwargs):
        self.messages.append((msg_id, level, kwargs))

    def ids(self, level: str = None):
        return [m for m, lvl, _ in self.messages if level is None or lvl == level]
