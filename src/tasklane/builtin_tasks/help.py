import importlib.metadata
from typing import Optional

from rich.console import Console
from rich.table import Table

from tasklane.runtime.exceptions import UnrecognizedTaskError
from tasklane.spec.dsl import TasksDSL, TasksMap
from tasklane.spec.params import type_name
from tasklane.spec.task import TaskDefinition

from .task_names import TASK_HELP

EXECUTABLE_NAME = "tasklane"

GLOBAL_OPTIONS = [
    ("--network", "The network to connect to"),
    ("--config", "A tasklane config file"),
    ("--log-level", "Minimum level of diagnostic logging"),
    ("--log-format", "Output format: human, plain or json"),
    ("--show-stack-traces", "Show stack traces instead of error messages"),
]


def get_version() -> str:
    try:
        return importlib.metadata.version("tasklane")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


class HelpPrinter:
    def __init__(
        self,
        executable_name: str,
        version: str,
        tasks: TasksMap,
        console: Optional[Console] = None,
    ):
        self._executable_name = executable_name
        self._version = version
        self._tasks = tasks
        self._console = console or Console()

    def print_global_help(self, include_internal: bool = False):
        self._console.print(f"{self._executable_name} version {self._version}\n")
        self._console.print(
            f"Usage: {self._executable_name} [GLOBAL OPTIONS] <TASK> [TASK OPTIONS]\n"
        )

        options = Table(title="Global options", show_header=False, box=None)
        for flag, description in GLOBAL_OPTIONS:
            options.add_row(flag, description)
        self._console.print(options)

        tasks = Table(title="Available tasks", show_header=False, box=None)
        for name in sorted(self._tasks):
            definition = self._tasks[name]
            if definition.is_internal and not include_internal:
                continue
            tasks.add_row(name, definition.description or "")
        self._console.print(tasks)

        self._console.print(
            f"\nTo get help for a specific task run: "
            f"{self._executable_name} help [task]"
        )

    def print_task_help(self, task_name: str):
        definition = self._tasks.get(task_name)
        if definition is None:
            raise UnrecognizedTaskError(task_name)

        self._console.print(f"{self._executable_name} version {self._version}\n")
        self._console.print(f"Usage: {self._usage(definition)}\n")

        params = Table(title="Options", show_header=False, box=None)
        for param in definition.param_definitions.values():
            params.add_row(
                f"--{param.name.replace('_', '-')}",
                param.description,
                self._param_details(param),
            )
        for param in definition.positional_param_definitions:
            params.add_row(param.name, param.description, self._param_details(param))
        if params.row_count:
            self._console.print(params)

        self._console.print(f"\n{definition.name}: {definition.description or ''}")

    def _usage(self, definition: TaskDefinition) -> str:
        parts = [self._executable_name, "[GLOBAL OPTIONS]", definition.name]
        for param in definition.param_definitions.values():
            flag = f"--{param.name.replace('_', '-')}"
            text = flag if param.is_flag else f"{flag} <{param.name.upper()}>"
            parts.append(f"[{text}]" if param.is_optional else text)
        for param in definition.positional_param_definitions:
            text = f"...{param.name}" if param.is_variadic else param.name
            parts.append(f"[{text}]" if param.is_optional else text)
        return " ".join(parts)

    def _param_details(self, param) -> str:
        details = [type_name(param.type)]
        if param.is_optional and not param.is_flag and param.default_value is not None:
            details.append(f"default: {param.default_value!r}")
        return ", ".join(details)


async def print_help(args, env, run_super):
    printer = HelpPrinter(EXECUTABLE_NAME, get_version(), env.tasks)
    task_name = args.get("task")
    if task_name is not None:
        printer.print_task_help(task_name)
        return
    printer.print_global_help()


def register(dsl: TasksDSL) -> None:
    dsl.define_task(TASK_HELP, "Prints this message", print_help).add_optional_positional_param(
        "task", "An optional task to print more info about"
    )
