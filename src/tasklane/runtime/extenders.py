from typing import Any, Callable, List

EnvironmentExtender = Callable[[Any], None]


class ExtenderManager:
    """Keeps environment extenders in the order they were registered."""

    def __init__(self):
        self._extenders: List[EnvironmentExtender] = []

    def add(self, extender: EnvironmentExtender):
        self._extenders.append(extender)

    def get_extenders(self) -> List[EnvironmentExtender]:
        return list(self._extenders)

    def __len__(self):
        return len(self._extenders)
