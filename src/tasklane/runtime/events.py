from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import itertools
import time

_event_id_gen = itertools.count()


@dataclass(frozen=True)
class Event:
    event_id: str = field(default_factory=lambda: str(next(_event_id_gen)))
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class EnvironmentCreated(Event):
    network_name: str = ""
    task_count: int = 0


@dataclass(frozen=True)
class ExtenderApplied(Event):
    extender_name: str = ""
    position: int = 0


@dataclass(frozen=True)
class ProviderCreated(Event):
    network_name: str = ""


@dataclass(frozen=True)
class TaskEvent(Event):
    task_name: str = ""
    # 0 for the definition `run` was called on, +1 per run_super descent.
    depth: int = 0


@dataclass(frozen=True)
class TaskExecutionStarted(TaskEvent):
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TaskExecutionFinished(TaskEvent):
    status: str = "Unknown"  # "Succeeded", "Failed"
    duration: float = 0.0
    error: Optional[str] = None


@dataclass(frozen=True)
class RunSuperInvoked(TaskEvent):
    pass
