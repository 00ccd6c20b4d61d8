from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union


@dataclass
class NetworkConfig:
    endpoint: str
    types: Dict[str, Any] = field(default_factory=dict)
    explorer_url: Optional[str] = None
    timeout: float = 60.0
    # Anything else declared for the network, kept for plugins.
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ProjectPaths:
    root: Path
    config_file: Optional[Path] = None
    sources: Optional[Path] = None
    artifacts: Optional[Path] = None
    tests: Optional[Path] = None
    cache: Optional[Path] = None


@dataclass
class ResolvedConfig:
    default_network: str
    networks: Dict[str, NetworkConfig]
    paths: ProjectPaths
    toolchain: Dict[str, Any] = field(default_factory=dict)
    # Tool- and plugin-specific settings that have no dedicated field.
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CliArguments:
    """The global arguments parsed by the CLI before any task runs."""

    network: Optional[str] = None
    log_level: Optional[Union[str, int]] = None
    log_format: str = "human"
    config: Optional[str] = None
    show_stack_traces: bool = False
