from tasklane.common.messaging import MessageBus as MessagingBus
from tasklane.common.messaging import bus as default_messaging_bus

from .bus import MessageBus
from .events import (
    EnvironmentCreated,
    ProviderCreated,
    TaskExecutionFinished,
    TaskExecutionStarted,
)


class HumanReadableLogSubscriber:
    """
    Listens to runtime events and translates them into semantic messages
    on the messaging bus.
    """

    def __init__(self, event_bus: MessageBus, messaging_bus: MessagingBus = None):
        self._messages = messaging_bus or default_messaging_bus

        event_bus.subscribe(EnvironmentCreated, self.on_environment_created)
        event_bus.subscribe(ProviderCreated, self.on_provider_created)
        event_bus.subscribe(TaskExecutionStarted, self.on_task_started)
        event_bus.subscribe(TaskExecutionFinished, self.on_task_finished)

    def on_environment_created(self, event: EnvironmentCreated):
        self._messages.debug(
            "environment.created",
            network_name=event.network_name,
            task_count=event.task_count,
        )

    def on_provider_created(self, event: ProviderCreated):
        self._messages.info("provider.created", network_name=event.network_name)

    def on_task_started(self, event: TaskExecutionStarted):
        if event.depth == 0:
            self._messages.info("task.started", task_name=event.task_name)
        else:
            self._messages.debug(
                "task.super_started", task_name=event.task_name, depth=event.depth
            )

    def on_task_finished(self, event: TaskExecutionFinished):
        # Only the outermost step reports, run_super steps are part of it.
        if event.depth != 0:
            return
        if event.status == "Succeeded":
            self._messages.info(
                "task.finished_success",
                task_name=event.task_name,
                duration=event.duration,
            )
        else:
            self._messages.error(
                "task.finished_failure",
                task_name=event.task_name,
                duration=event.duration,
                error=event.error,
            )
