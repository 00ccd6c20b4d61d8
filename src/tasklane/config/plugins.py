import importlib
import importlib.metadata
import logging
from types import ModuleType
from typing import Any, Optional

from tasklane.runtime.exceptions import PluginNotFoundError

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "tasklane.plugins"


def use_plugin(ctx, name: str) -> None:
    """
    Loads a plugin into `ctx`, at most once per context.

    `name` is looked up first among the `tasklane.plugins` entry points and
    then imported as a module. A callable entry point, or the `register`
    function of a plugin module, is called with the context.
    """
    if name in ctx.loaded_plugins:
        logger.debug("Plugin %s already loaded", name)
        return

    target = _load_entry_point(name)
    if target is None:
        target = _import_module(name)

    ctx.loaded_plugins.append(name)
    logger.debug("Loading plugin %s", name)

    if callable(target) and not isinstance(target, ModuleType):
        target(ctx)
        return

    register = getattr(target, "register", None)
    if callable(register):
        register(ctx)


def _load_entry_point(name: str) -> Optional[Any]:
    for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
        if ep.name == name:
            return ep.load()
    return None


def _import_module(name: str) -> ModuleType:
    try:
        return importlib.import_module(name)
    except ModuleNotFoundError as e:
        # Only a missing plugin is reported as such, not a missing dependency of it.
        if e.name == name or name.startswith(f"{e.name}."):
            raise PluginNotFoundError(name, "Is it installed?") from e
        raise
