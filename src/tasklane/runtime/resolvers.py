from typing import Any, Dict, List, Optional

from tasklane.runtime.exceptions import TasklaneError
from tasklane.spec.params import resolve_argument
from tasklane.spec.task import TaskArguments, TaskDefinition


class ArgumentResolver:
    """
    Reconciles the arguments supplied to `run` with a task's param definitions.
    Mandatory params must be present, optional ones get their defaults and
    every present value is type-checked.
    """

    def resolve(
        self, task_definition: TaskDefinition, task_arguments: Optional[TaskArguments]
    ) -> TaskArguments:
        supplied = task_arguments or {}

        all_param_definitions = [
            *task_definition.param_definitions.values(),
            *task_definition.positional_param_definitions,
        ]

        errors: List[TasklaneError] = []
        values: Dict[str, Any] = {}

        for param in all_param_definitions:
            try:
                resolved = resolve_argument(param, supplied.get(param.name))
            except TasklaneError as e:
                errors.append(e)
                continue
            if resolved is not None:
                values[param.name] = resolved

        # Every failure is collected but only the first one is reported.
        if errors:
            raise errors[0]

        # Keys no param knows about are passed through untouched.
        return {**supplied, **values}
