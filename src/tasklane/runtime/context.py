import logging
from pathlib import Path
from typing import Any, Callable, List, Optional

from tasklane.config.model import CliArguments, ResolvedConfig
from tasklane.runtime.bus import MessageBus
from tasklane.runtime.environment import Environment, ProviderFactory
from tasklane.runtime.exceptions import (
    ContextAlreadyCreatedError,
    ContextNotCreatedError,
    EnvironmentAlreadyDefinedError,
)
from tasklane.runtime.extenders import ExtenderManager
from tasklane.spec.dsl import TasksDSL

logger = logging.getLogger(__name__)

# (resolved_config, user_config) -> None
ConfigExtender = Callable[[ResolvedConfig, dict], None]


class Context:
    """
    Everything a run accumulates before and after its Environment exists:
    the task registry, extenders, config extenders and loaded plugins.

    The CLI creates one Context and passes it along explicitly. The
    class-level slot only serves code that runs as an imported module
    (config files, plugins) and has no other way to reach it.
    """

    _instance: Optional["Context"] = None

    def __init__(self):
        self.tasks_dsl = TasksDSL()
        self.extenders_manager = ExtenderManager()
        self.config_extenders: List[ConfigExtender] = []
        self.loaded_plugins: List[str] = []
        self.config_path: Optional[Path] = None
        self.environment: Optional[Environment] = None

    @classmethod
    def create(cls) -> "Context":
        if cls._instance is not None:
            raise ContextAlreadyCreatedError()
        logger.debug("Creating context")
        cls._instance = cls()
        return cls._instance

    @classmethod
    def is_created(cls) -> bool:
        return cls._instance is not None

    @classmethod
    def get(cls) -> "Context":
        if cls._instance is None:
            raise ContextNotCreatedError()
        return cls._instance

    @classmethod
    def delete(cls) -> None:
        cls._instance = None

    def set_environment(self, environment: Environment) -> None:
        if self.environment is not None:
            raise EnvironmentAlreadyDefinedError()
        self.environment = environment

    def build_environment(
        self,
        config: ResolvedConfig,
        cli_arguments: Optional[CliArguments] = None,
        provider_factory: Optional[ProviderFactory] = None,
        bus: Optional[MessageBus] = None,
        namespace: Any = None,
    ) -> Environment:
        environment = Environment(
            config,
            cli_arguments if cli_arguments is not None else CliArguments(),
            self.tasks_dsl.get_task_definitions(),
            self.extenders_manager.get_extenders(),
            provider_factory=provider_factory,
            bus=bus,
            namespace=namespace,
        )
        self.set_environment(environment)
        return environment
