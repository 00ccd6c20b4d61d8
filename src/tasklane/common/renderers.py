import json
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO

from rich.console import Console
from rich.theme import Theme

from tasklane.common.messaging import MessageStore, protocols

LOG_LEVELS = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
}

custom_theme = Theme(
    {
        "debug": "dim",
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
    }
)


class _LeveledRenderer(protocols.Renderer):
    def __init__(self, min_level: str = "INFO", stream: Optional[TextIO] = None):
        self._min_level_val = LOG_LEVELS.get(min_level.upper(), 20)
        self._explicit_stream = stream

    @property
    def stream(self) -> TextIO:
        # Looked up on every write so a swapped sys.stderr is honoured.
        return self._explicit_stream if self._explicit_stream is not None else sys.stderr

    def enabled(self, level: str) -> bool:
        return LOG_LEVELS.get(level.upper(), 20) >= self._min_level_val


class CliRenderer(_LeveledRenderer):
    def __init__(
        self,
        store: MessageStore,
        stream: Optional[TextIO] = None,
        min_level: str = "INFO",
    ):
        super().__init__(min_level, stream)
        self._store = store

    def render(self, msg_id: str, level: str, **kwargs):
        if self.enabled(level):
            print(self._store.get(msg_id, **kwargs), file=self.stream)


class JsonRenderer(_LeveledRenderer):
    """One JSON object per line, with the rendered text when a store is given."""

    def __init__(
        self,
        store: Optional[MessageStore] = None,
        stream: Optional[TextIO] = None,
        min_level: str = "INFO",
    ):
        super().__init__(min_level, stream)
        self._store = store

    def render(self, msg_id: str, level: str, **kwargs):
        if not self.enabled(level):
            return

        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level.upper(),
            "event_id": msg_id,
            "data": kwargs,
        }
        if self._store is not None:
            record["message"] = self._store.get(msg_id, **kwargs)

        # Exceptions and other rich values in `data` are written as their repr.
        print(json.dumps(record, default=repr), file=self.stream)


class RichCliRenderer(_LeveledRenderer):
    """Colorized output, styled by message level."""

    def __init__(
        self,
        store: MessageStore,
        min_level: str = "INFO",
        console: Optional[Console] = None,
    ):
        super().__init__(min_level)
        self._store = store
        self._console = console or Console(theme=custom_theme, stderr=True)

    def render(self, msg_id: str, level: str, **kwargs):
        if not self.enabled(level):
            return

        message = self._store.get(msg_id, **kwargs)
        style = custom_theme.styles.get(level.lower(), "")
        # Messages carry user data, never interpret it as console markup.
        self._console.print(message, style=style, markup=False, highlight=False)


def create_renderer(store: MessageStore, log_format: str = "human", min_level: str = "INFO"):
    if log_format == "json":
        return JsonRenderer(store=store, min_level=min_level)
    if log_format == "plain":
        return CliRenderer(store=store, min_level=min_level)
    return RichCliRenderer(store=store, min_level=min_level)
