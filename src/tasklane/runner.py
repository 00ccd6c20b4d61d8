import asyncio
from typing import Any, Optional, Sequence

from tasklane.cli.arguments import parse_task_arguments
from tasklane.config.loader import load_config_and_tasks
from tasklane.config.model import CliArguments
from tasklane.runtime.bus import MessageBus
from tasklane.runtime.context import Context
from tasklane.runtime.environment import Environment
from tasklane.runtime.exceptions import UnrecognizedTaskError
from tasklane.runtime.reset import reset_context
from tasklane.runtime.subscribers import HumanReadableLogSubscriber
from tasklane.spec.task import TaskArguments


def run_task(
    task_name: str,
    task_arguments: Optional[TaskArguments] = None,
    cli_arguments: Optional[CliArguments] = None,
    raw_arguments: Optional[Sequence[str]] = None,
    bus: Optional[MessageBus] = None,
) -> Any:
    """
    Loads the project, builds its environment and runs one task, then tears
    the context down again whatever the outcome.

    `raw_arguments` are command-line words; when given they are parsed for
    the task and take precedence over `task_arguments`.
    """
    if cli_arguments is None:
        cli_arguments = CliArguments()

    ctx = Context.create()
    try:
        config = load_config_and_tasks(ctx, cli_arguments.config)

        if bus is None:
            bus = MessageBus()
            HumanReadableLogSubscriber(bus)
        environment = ctx.build_environment(config, cli_arguments, bus=bus)

        arguments = dict(task_arguments or {})
        if raw_arguments is not None:
            task_definition = environment.tasks.get(task_name)
            if task_definition is None:
                raise UnrecognizedTaskError(task_name)
            arguments.update(parse_task_arguments(task_definition, raw_arguments))

        return asyncio.run(_run_and_close(environment, task_name, arguments))
    finally:
        reset_context()


async def _run_and_close(
    environment: Environment, task_name: str, task_arguments: TaskArguments
) -> Any:
    try:
        return await environment.run(task_name, task_arguments)
    finally:
        await environment.network.close()
