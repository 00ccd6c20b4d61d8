"""
Tears the process context down so a later run starts clean.

Loaded plugins are not unloaded; their `register` hooks run again for the
next context.
"""
import logging
from typing import Any

from tasklane.config.loader import unload_config
from tasklane.config.project import get_user_config_path
from tasklane.runtime import publication
from tasklane.runtime.context import Context
from tasklane.runtime.exceptions import ConfigNotFoundError

logger = logging.getLogger(__name__)


def reset_context(namespace: Any = None) -> None:
    if not Context.is_created():
        return

    ctx = Context.get()
    if ctx.environment is not None:
        environment = ctx.environment
        keys = [*environment.published_members(), "run_super"]
        publication.clear(
            keys, namespace if namespace is not None else environment.namespace
        )

        config_file = environment.config.paths.config_file or ctx.config_path
        if config_file is not None:
            unload_config(config_file)
    else:
        # Loading the config may itself have failed, unload whatever got cached.
        config_path = ctx.config_path
        if config_path is None:
            try:
                config_path = get_user_config_path()
            except ConfigNotFoundError:
                logger.debug("Not inside a tasklane project, no config to unload")

        if config_path is not None:
            unload_config(config_path)

    logger.debug("Deleting context")
    Context.delete()
