import inspect
import logging
import time
from functools import cached_property
from typing import Any, Callable, Dict, FrozenSet, Iterable, Optional, Union

from tasklane.config.model import CliArguments, NetworkConfig, ResolvedConfig
from tasklane.providers import create_provider
from tasklane.runtime import publication
from tasklane.runtime.bus import MessageBus
from tasklane.runtime.events import (
    EnvironmentCreated,
    ExtenderApplied,
    ProviderCreated,
    RunSuperInvoked,
    TaskExecutionFinished,
    TaskExecutionStarted,
)
from tasklane.runtime.exceptions import (
    NetworkConfigNotFoundError,
    RunSuperNotAvailableError,
    UnrecognizedTaskError,
)
from tasklane.runtime.extenders import EnvironmentExtender
from tasklane.runtime.resolvers import ArgumentResolver
from tasklane.spec.dsl import TasksMap
from tasklane.spec.task import OverriddenTaskDefinition, TaskArguments, TaskDefinition

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[str, NetworkConfig], Any]


class Network:
    """
    The network a run is bound to. The provider is only created the first
    time it is accessed and is then reused for the lifetime of the run.
    """

    def __init__(
        self,
        name: str,
        config: NetworkConfig,
        provider_factory: ProviderFactory,
        bus: Optional[MessageBus] = None,
    ):
        self.name = name
        self.config = config
        self._provider_factory = provider_factory
        self._bus = bus

    @cached_property
    def provider(self) -> Any:
        logger.debug("Creating provider for network %s", self.name)
        provider = self._provider_factory(self.name, self.config)
        if self._bus is not None:
            self._bus.publish(ProviderCreated(network_name=self.name))
        return provider

    @property
    def is_provider_created(self) -> bool:
        return "provider" in self.__dict__

    async def close(self) -> None:
        if not self.is_provider_created:
            return
        close = getattr(self.provider, "close", None)
        if close is None:
            return
        result = close()
        if inspect.isawaitable(result):
            await result

    def __repr__(self):
        return f"<Network {self.name}>"


class RunSuper:
    """
    Bound to one step of a dispatch. Calling it runs the parent definition of
    an overridden task, with the current step's arguments unless new ones
    are given.
    """

    def __init__(
        self,
        environment: "Environment",
        task_definition: TaskDefinition,
        task_arguments: TaskArguments,
        depth: int = 0,
    ):
        self._environment = environment
        self._task_definition = task_definition
        self._task_arguments = task_arguments
        self._depth = depth
        self.is_defined = isinstance(task_definition, OverriddenTaskDefinition)

    async def __call__(self, task_arguments: Optional[TaskArguments] = None) -> Any:
        if not self.is_defined:
            raise RunSuperNotAvailableError(self._task_definition.name)

        if task_arguments is None:
            task_arguments = self._task_arguments

        logger.debug("Running %s's super", self._task_definition.name)
        self._environment._bus.publish(
            RunSuperInvoked(task_name=self._task_definition.name, depth=self._depth)
        )
        return await self._environment._run_task_definition(
            self._task_definition.parent_task_definition,
            task_arguments,
            depth=self._depth + 1,
        )

    def __repr__(self):
        return f"<RunSuper {self._task_definition.name} defined={self.is_defined}>"


class Environment:
    """
    The per-run context handed to every task action and extender.

    Extenders are applied once, in registration order, while the instance is
    being constructed. They may attach new members to it; those members are
    published along with the built-in ones while a task runs.
    """

    _EXCLUDED_MEMBERS: FrozenSet[str] = frozenset(
        {"inject_to_global", "_run_task_definition"}
    )

    def __init__(
        self,
        config: ResolvedConfig,
        cli_arguments: CliArguments,
        tasks: TasksMap,
        extenders: Iterable[EnvironmentExtender] = (),
        provider_factory: Optional[ProviderFactory] = None,
        bus: Optional[MessageBus] = None,
        namespace: Any = None,
    ):
        logger.debug("Creating runtime environment")

        self._bus = bus if bus is not None else MessageBus()
        self._resolver = ArgumentResolver()
        self._namespace = namespace if namespace is not None else publication.shared

        self.config = config
        self.cli_arguments = cli_arguments
        self.tasks = tasks

        _apply_log_level(cli_arguments.log_level)

        network_name = (
            cli_arguments.network
            if cli_arguments.network is not None
            else config.default_network
        )
        network_config = config.networks.get(network_name)
        if network_config is None:
            raise NetworkConfigNotFoundError(network_name)

        if provider_factory is None:
            provider_factory = create_provider

        self.network = Network(network_name, network_config, provider_factory, self._bus)

        self._extenders = list(extenders)
        for position, extender in enumerate(self._extenders):
            extender(self)
            self._bus.publish(
                ExtenderApplied(
                    extender_name=getattr(extender, "__name__", repr(extender)),
                    position=position,
                )
            )

        self._bus.publish(
            EnvironmentCreated(network_name=network_name, task_count=len(tasks))
        )

    async def run(self, name: str, task_arguments: Optional[TaskArguments] = None) -> Any:
        """
        Runs the task with the given name.

        Raises UnrecognizedTaskError if no such task is defined, and any
        argument error found while resolving `task_arguments`.
        """
        task_definition = self.tasks.get(name)

        logger.debug("Running task %s", name)

        if task_definition is None:
            raise UnrecognizedTaskError(name)

        resolved_arguments = self._resolver.resolve(task_definition, task_arguments)

        return await self._run_task_definition(task_definition, resolved_arguments)

    def inject_to_global(
        self, exclude: Optional[Iterable[str]] = None, target: Any = None
    ) -> Callable[[], None]:
        """
        Publishes the members of this environment into the shared namespace.

        Returns a callable restoring the namespace to its previous state.
        """
        excluded = self._EXCLUDED_MEMBERS if exclude is None else frozenset(exclude)
        members = {
            key: value
            for key, value in self.published_members().items()
            if key not in excluded
        }
        return publication.publish(
            members, target if target is not None else self._namespace
        )

    @property
    def namespace(self) -> Any:
        return self._namespace

    def published_members(self) -> Dict[str, Any]:
        members = {
            key: value for key, value in vars(self).items() if not key.startswith("_")
        }
        members["run"] = self.run
        return members

    async def _run_task_definition(
        self,
        task_definition: TaskDefinition,
        task_arguments: TaskArguments,
        depth: int = 0,
    ) -> Any:
        run_super = RunSuper(self, task_definition, task_arguments, depth)

        self._bus.publish(
            TaskExecutionStarted(
                task_name=task_definition.name,
                depth=depth,
                arguments=dict(task_arguments),
            )
        )
        start_time = time.time()

        with publication.scoped({"run_super": run_super}, self._namespace):
            uninject_from_global = self.inject_to_global()
            try:
                result = task_definition.action(task_arguments, self, run_super)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as e:
                self._bus.publish(
                    TaskExecutionFinished(
                        task_name=task_definition.name,
                        depth=depth,
                        status="Failed",
                        duration=time.time() - start_time,
                        error=f"{type(e).__name__}: {e}",
                    )
                )
                raise
            finally:
                uninject_from_global()

        self._bus.publish(
            TaskExecutionFinished(
                task_name=task_definition.name,
                depth=depth,
                status="Succeeded",
                duration=time.time() - start_time,
            )
        )
        return result

    def __repr__(self):
        return f"<Environment network={self.network.name} tasks={len(self.tasks)}>"


def _apply_log_level(level: Optional[Union[str, int]]) -> None:
    if level is None:
        return
    if isinstance(level, str):
        level = int(level) if level.isdigit() else level.upper()
    try:
        logging.getLogger("tasklane").setLevel(level)
    except (TypeError, ValueError):
        logger.warning("Ignoring unknown log level %r", level)
