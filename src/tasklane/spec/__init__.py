from .params import ParamDefinition, ParamType, resolve_argument
from .task import (
    ActionType,
    OverriddenTaskDefinition,
    TaskArguments,
    TaskDefinition,
)
from .dsl import TasksDSL, TasksMap

__all__ = [
    "ParamDefinition",
    "ParamType",
    "resolve_argument",
    "ActionType",
    "OverriddenTaskDefinition",
    "TaskArguments",
    "TaskDefinition",
    "TasksDSL",
    "TasksMap",
]
