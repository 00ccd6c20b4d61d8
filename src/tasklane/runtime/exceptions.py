from typing import Any, Optional


class TasklaneError(Exception):
    """Base class for all errors raised by tasklane."""

    pass


# --- Arguments ---


class ArgumentsError(TasklaneError):
    """Base class for errors in the arguments supplied to a task."""

    pass


class MissingArgumentError(ArgumentsError):
    """Raised when a mandatory parameter has no value after resolution."""

    def __init__(self, param: str):
        self.param = param
        super().__init__(f"Missing task argument '{param}'.")


class TypeValidationError(ArgumentsError):
    """
    Raised when a supplied value is not valid for its parameter's type.
    When a custom validator fails with an arbitrary exception, that exception
    is kept as `__cause__`.
    """

    def __init__(self, param: str, value: Any, type_name: str, reason: str = ""):
        self.param = param
        self.value = value
        self.type_name = type_name
        message = f"Invalid value {value!r} for argument '{param}' of type {type_name}."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)


class UnrecognizedTaskError(ArgumentsError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unrecognized task '{name}'.")


class UnrecognizedParamNameError(ArgumentsError):
    def __init__(self, param: str, task_name: str):
        self.param = param
        self.task_name = task_name
        super().__init__(f"Unrecognized param '{param}' for task '{task_name}'.")


class UnrecognizedPositionalArgumentError(ArgumentsError):
    def __init__(self, argument: str, task_name: str):
        self.argument = argument
        self.task_name = task_name
        super().__init__(
            f"Unrecognized positional argument '{argument}' for task '{task_name}'."
        )


# --- Task definitions ---


class TaskDefinitionError(TasklaneError):
    """Base class for errors made while defining or overriding a task."""

    pass


class RunSuperNotAvailableError(TaskDefinitionError):
    def __init__(self, task_name: str):
        self.task_name = task_name
        super().__init__(
            f"Tried to call run_super from a non-overridden definition of task '{task_name}'."
        )


class ActionNotSetError(TaskDefinitionError):
    def __init__(self, task_name: str):
        self.task_name = task_name
        super().__init__(f"No action set for task '{task_name}'.")


class ParamNameClashError(TaskDefinitionError):
    def __init__(self, param: str, task_name: str, reason: str = "already defined"):
        self.param = param
        self.task_name = task_name
        super().__init__(
            f"Could not add param '{param}' to task '{task_name}': {reason}."
        )


class DefaultValueInMandatoryParamError(TaskDefinitionError):
    def __init__(self, param: str, task_name: str):
        self.param = param
        self.task_name = task_name
        super().__init__(
            f"Mandatory param '{param}' of task '{task_name}' cannot have a default value."
        )


class InvalidDefaultValueError(TaskDefinitionError):
    def __init__(self, param: str, task_name: str, reason: str):
        self.param = param
        self.task_name = task_name
        super().__init__(
            f"Default value for param '{param}' of task '{task_name}' is invalid: {reason}"
        )


class MandatoryParamAfterOptionalError(TaskDefinitionError):
    def __init__(self, param: str, task_name: str):
        self.param = param
        self.task_name = task_name
        super().__init__(
            f"Mandatory positional param '{param}' of task '{task_name}' "
            "cannot follow an optional one."
        )


class ParamAfterVariadicError(TaskDefinitionError):
    def __init__(self, param: str, task_name: str):
        self.param = param
        self.task_name = task_name
        super().__init__(
            f"Positional param '{param}' of task '{task_name}' cannot follow a variadic one."
        )


class OverridePositionalParamError(TaskDefinitionError):
    def __init__(self, param: str, task_name: str):
        self.param = param
        self.task_name = task_name
        super().__init__(
            f"Override of task '{task_name}' cannot add positional param '{param}'. "
            "Only named params can be added by an override."
        )


# --- Context ---


class ContextError(TasklaneError):
    pass


class ContextAlreadyCreatedError(ContextError):
    def __init__(self):
        super().__init__("A tasklane context is already created.")


class ContextNotCreatedError(ContextError):
    def __init__(self):
        super().__init__(
            "No tasklane context is active. Task definitions can only be made "
            "while a project is being loaded."
        )


class EnvironmentAlreadyDefinedError(ContextError):
    def __init__(self):
        super().__init__("The runtime environment of this context is already defined.")


# --- Config & plugins ---


class ConfigError(TasklaneError):
    pass


class ConfigNotFoundError(ConfigError):
    def __init__(self, start_dir: str):
        self.start_dir = start_dir
        super().__init__(
            f"No tasklane config file found in '{start_dir}' or any parent directory."
        )


class InvalidConfigError(ConfigError):
    def __init__(self, problems: list):
        self.problems = list(problems)
        details = "\n".join(f"  * {p}" for p in self.problems)
        super().__init__(f"Invalid tasklane config:\n{details}")


class PluginNotFoundError(ConfigError):
    def __init__(self, plugin: str, reason: Optional[str] = None):
        self.plugin = plugin
        message = f"Plugin '{plugin}' could not be loaded."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)


# --- Network ---


class NetworkError(TasklaneError):
    pass


class NetworkConfigNotFoundError(NetworkError):
    def __init__(self, network: str):
        self.network = network
        super().__init__(f"Network '{network}' is not defined in the config.")


class UnsupportedEndpointError(NetworkError):
    def __init__(self, network: str, endpoint: str):
        self.network = network
        self.endpoint = endpoint
        super().__init__(
            f"Endpoint '{endpoint}' of network '{network}' uses an unsupported scheme."
        )


class ProviderRequestError(NetworkError):
    def __init__(self, method: str, error: Any):
        self.method = method
        self.error = error
        super().__init__(f"RPC call '{method}' failed: {error}")


# --- Toolchain ---


class ExternalCommandFailedError(TasklaneError):
    """Raised when an external toolchain command exits non-zero or its output is unusable."""

    def __init__(self, command: str, detail: str = ""):
        self.command = command
        self.detail = detail
        message = f"$ `{command}` has failed"
        if detail:
            message = f"{message}:\n{detail}"
        super().__init__(message)
