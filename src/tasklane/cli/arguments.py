"""
Turns the raw words following a task name into that task's arguments.

    tasklane greet --greeting Hi Alice      -> {"greeting": "Hi", "name": "Alice"}
    tasklane deploy --dry-run a b c         -> {"dry_run": True, "contracts": [...]}

Named params are spelled in kebab case. Values are parsed with each param's
type; anything not given is left out so the runtime applies defaults.
"""
from typing import Any, Dict, List, Sequence

from tasklane.runtime.exceptions import (
    MissingArgumentError,
    UnrecognizedParamNameError,
    UnrecognizedPositionalArgumentError,
)
from tasklane.spec.params import ParamDefinition
from tasklane.spec.task import TaskArguments, TaskDefinition


def param_name_to_cli(name: str) -> str:
    return "--" + name.replace("_", "-")


def cli_to_param_name(option: str) -> str:
    return option[2:].replace("-", "_")


def parse_task_arguments(
    task_definition: TaskDefinition, raw_arguments: Sequence[str]
) -> TaskArguments:
    named = task_definition.param_definitions
    arguments: Dict[str, Any] = {}
    positionals: List[str] = []

    words = list(raw_arguments)
    index = 0
    while index < len(words):
        word = words[index]
        index += 1

        if word == "--":
            positionals.extend(words[index:])
            break

        if not word.startswith("--"):
            positionals.append(word)
            continue

        option, has_value, inline_value = word.partition("=")
        name = cli_to_param_name(option)
        param = named.get(name)
        if param is None:
            raise UnrecognizedParamNameError(option, task_definition.name)

        if param.is_flag and not has_value:
            arguments[name] = True
            continue

        if has_value:
            raw = inline_value
        elif index < len(words):
            raw = words[index]
            index += 1
        else:
            raise MissingArgumentError(name)

        arguments[name] = _parse_value(param, raw)

    arguments.update(
        _parse_positionals(
            task_definition, task_definition.positional_param_definitions, positionals
        )
    )
    return arguments


def _parse_positionals(
    task_definition: TaskDefinition,
    params: Sequence[ParamDefinition],
    words: Sequence[str],
) -> TaskArguments:
    arguments: Dict[str, Any] = {}
    remaining = list(words)

    for param in params:
        if not remaining:
            break
        if param.is_variadic:
            arguments[param.name] = [_parse_value(param, w) for w in remaining]
            remaining = []
            break
        arguments[param.name] = _parse_value(param, remaining.pop(0))

    if remaining:
        raise UnrecognizedPositionalArgumentError(remaining[0], task_definition.name)

    return arguments


def _parse_value(param: ParamDefinition, raw: str) -> Any:
    # Custom types may only know how to validate, they then receive the text.
    parse = getattr(param.type, "parse", None)
    if parse is None:
        return raw
    return parse(param.name, raw)
