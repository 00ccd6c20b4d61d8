import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .protocols import Renderer

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).parent.parent / "locales"


def load_templates(locale_dir: Path) -> Dict[str, str]:
    """Merges every `*.json` file of one locale directory, in name order."""
    templates: Dict[str, str] = {}
    if not locale_dir.is_dir():
        logger.warning("No message templates in %s", locale_dir)
        return templates

    for message_file in sorted(locale_dir.glob("*.json")):
        try:
            templates.update(json.loads(message_file.read_text(encoding="utf-8")))
        except (OSError, ValueError) as e:
            logger.error("Skipping message file %s: %s", message_file, e)
    return templates


class MessageStore:
    """Message templates by id. Unknown ids render as `<id>`."""

    def __init__(self, locale: str = "en", locales_dir: Path = LOCALES_DIR):
        self.locale = locale
        self.templates = load_templates(locales_dir / locale)

    def get(self, msg_id: str, default: str = "", **kwargs) -> str:
        template = self.templates.get(msg_id) or default or f"<{msg_id}>"
        try:
            return template.format(**kwargs)
        except (KeyError, IndexError) as e:
            return f"<{msg_id}: missing key {e}>"


class MessageBus:
    """
    Semantic, user-facing messages. Callers name a message and its data;
    the renderer decides how (and whether) it is shown.
    """

    def __init__(self, store: MessageStore):
        self.store = store
        self._renderer: Optional[Renderer] = None

    def set_renderer(self, renderer: Optional[Renderer]):
        self._renderer = renderer

    def emit(self, level: str, msg_id: str, **kwargs: Any) -> None:
        if self._renderer is not None:
            self._renderer.render(msg_id, level, **kwargs)

    def debug(self, msg_id: str, **kwargs: Any) -> None:
        self.emit("debug", msg_id, **kwargs)

    def info(self, msg_id: str, **kwargs: Any) -> None:
        self.emit("info", msg_id, **kwargs)

    def warning(self, msg_id: str, **kwargs: Any) -> None:
        self.emit("warning", msg_id, **kwargs)

    def error(self, msg_id: str, **kwargs: Any) -> None:
        self.emit("error", msg_id, **kwargs)


bus = MessageBus(store=MessageStore())

__all__ = ["MessageStore", "MessageBus", "Renderer", "bus", "load_templates"]
