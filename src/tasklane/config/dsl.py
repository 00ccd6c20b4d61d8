"""
Functions a config file or plugin module calls while a project is loaded.

    import tasklane as tl

    tl.task("greet", "Greets someone") \
        .add_positional_param("name", type=tl.types.string) \
        .set_action(greet)
"""
from typing import Optional, Union

from tasklane.config import plugins
from tasklane.runtime.context import ConfigExtender, Context
from tasklane.runtime.extenders import EnvironmentExtender
from tasklane.spec import types
from tasklane.spec.task import ActionType, TaskDefinition


def task(
    name: str,
    description_or_action: Optional[Union[str, ActionType]] = None,
    action: Optional[ActionType] = None,
) -> TaskDefinition:
    dsl = Context.get().tasks_dsl
    if callable(description_or_action):
        return dsl.define_task(name, action=description_or_action)
    return dsl.define_task(name, description_or_action, action)


def internal_task(
    name: str,
    description_or_action: Optional[Union[str, ActionType]] = None,
    action: Optional[ActionType] = None,
) -> TaskDefinition:
    dsl = Context.get().tasks_dsl
    if callable(description_or_action):
        return dsl.define_internal_task(name, action=description_or_action)
    return dsl.define_internal_task(name, description_or_action, action)


def extend_environment(extender: EnvironmentExtender) -> None:
    """
    Registers a function that receives the Environment while it is being
    constructed, after every previously registered extender.
    """
    Context.get().extenders_manager.add(extender)


def extend_config(extender: ConfigExtender) -> None:
    Context.get().config_extenders.append(extender)


def use_plugin(name: str) -> None:
    plugins.use_plugin(Context.get(), name)


__all__ = [
    "task",
    "internal_task",
    "extend_environment",
    "extend_config",
    "use_plugin",
    "types",
]
