from typing import Any, Optional

from .spec import types
from .spec.dsl import TasksDSL
from .spec.task import OverriddenTaskDefinition, TaskDefinition
from .config.dsl import extend_config, extend_environment, internal_task, task, use_plugin
from .config.model import CliArguments, ResolvedConfig
from .runtime.context import Context
from .runtime.environment import Environment, Network, RunSuper
from .runtime.publication import shared
from .runtime.reset import reset_context
from .runtime.exceptions import TasklaneError

__all__ = [
    "task",
    "internal_task",
    "extend_environment",
    "extend_config",
    "use_plugin",
    "types",
    "run",
    "shared",
    "Context",
    "Environment",
    "Network",
    "RunSuper",
    "TasksDSL",
    "TaskDefinition",
    "OverriddenTaskDefinition",
    "CliArguments",
    "ResolvedConfig",
    "reset_context",
    "TasklaneError",
]


def run(
    task_name: str,
    task_arguments: Optional[dict] = None,
    network: Optional[str] = None,
    config: Optional[str] = None,
) -> Any:
    """
    Runs a task of the project in the current directory (or of `config`)
    and returns its result.

    This is the programmatic counterpart of `tasklane <task>`. It creates
    and resets its own context, so it cannot be called from within a task.
    """
    from .runner import run_task

    return run_task(
        task_name,
        task_arguments,
        CliArguments(network=network, config=config),
    )
