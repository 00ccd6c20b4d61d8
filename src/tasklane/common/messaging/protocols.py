from typing import Any, Protocol


class Renderer(Protocol):
    """
    Presents one semantic message. `level` is one of "debug", "info",
    "warning" or "error"; `kwargs` are the data the message template names.
    """

    def render(self, msg_id: str, level: str, **kwargs: Any) -> None: ...
