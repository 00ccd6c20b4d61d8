"""
The shared namespace a running task's environment is published to.

Task actions always receive the Environment explicitly; `shared` exists for
scripts and helpers that cannot be handed it, e.g.

    from tasklane import shared

    async def deploy():
        provider = shared.network.provider

Every publication records the prior state of the keys it touches and is
undone in strict reverse order.
"""
from contextlib import contextmanager
from types import SimpleNamespace
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Tuple

_ABSENT = object()

shared = SimpleNamespace()


def publish(values: Mapping[str, Any], target: Any = None) -> Callable[[], None]:
    """
    Sets every key of `values` on `target` and returns a callable restoring
    the keys to what they were before, deleting those that were absent.
    """
    if target is None:
        target = shared

    previous: List[Tuple[str, Any]] = []
    for key, value in values.items():
        previous.append((key, getattr(target, key, _ABSENT)))
        setattr(target, key, value)

    def restore() -> None:
        for key, prior in reversed(previous):
            if prior is _ABSENT:
                if hasattr(target, key):
                    delattr(target, key)
            else:
                setattr(target, key, prior)

    return restore


@contextmanager
def scoped(values: Mapping[str, Any], target: Any = None) -> Iterator[None]:
    restore = publish(values, target)
    try:
        yield
    finally:
        restore()


def clear(keys: Iterable[str], target: Any = None) -> None:
    if target is None:
        target = shared
    for key in keys:
        if hasattr(target, key):
            delattr(target, key)
