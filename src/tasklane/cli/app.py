import logging
from pathlib import Path
from typing import Optional

import typer

from tasklane.builtin_tasks.task_names import TASK_HELP
from tasklane.common.messaging import bus
from tasklane.common.renderers import LOG_LEVELS, create_renderer
from tasklane.config.model import CliArguments
from tasklane.runner import run_task
from tasklane.runtime.exceptions import TasklaneError

app = typer.Typer(
    help="Runs the tasks defined by a tasklane project.",
    add_completion=False,
)


@app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True}
)
def cli(
    ctx: typer.Context,
    task: str = typer.Argument(TASK_HELP, help="The task to run."),
    network: Optional[str] = typer.Option(
        None, "--network", help="The network to connect to."
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="A tasklane config file. Found automatically if omitted."
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Minimum level of diagnostic logging."
    ),
    log_format: str = typer.Option(
        "human", "--log-format", help="Output format: human, plain or json."
    ),
    show_stack_traces: bool = typer.Option(
        False, "--show-stack-traces", help="Show stack traces instead of error messages."
    ),
):
    """
    Run TASK. The task's own options and arguments follow its name.
    """
    min_level = (log_level or "INFO").upper()
    if min_level not in LOG_LEVELS:
        min_level = "INFO"
    bus.set_renderer(create_renderer(bus.store, log_format, min_level))

    cli_arguments = CliArguments(
        network=network,
        log_level=log_level,
        log_format=log_format,
        config=str(config) if config is not None else None,
        show_stack_traces=show_stack_traces,
    )

    try:
        result = run_task(task, cli_arguments=cli_arguments, raw_arguments=list(ctx.args))
    except TasklaneError as e:
        if show_stack_traces:
            raise
        bus.error("cli.error", error=e)
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        raise typer.Exit(code=130)
    except Exception as e:
        if show_stack_traces:
            raise
        bus.error("cli.unexpected_error", error=e)
        raise typer.Exit(code=1)

    if result is not None:
        bus.info("cli.result", result=result)


def main():
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    app()


if __name__ == "__main__":
    main()
