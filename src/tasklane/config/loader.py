import copy
import hashlib
import importlib.util
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from tasklane import builtin_tasks
from tasklane.config.defaults import DEFAULT_CONFIG, DEFAULT_TIMEOUT
from tasklane.config.model import NetworkConfig, ProjectPaths, ResolvedConfig
from tasklane.config.project import get_user_config_path
from tasklane.runtime.exceptions import ConfigNotFoundError, InvalidConfigError

logger = logging.getLogger(__name__)

_KNOWN_KEYS = frozenset({"default_network", "networks", "paths", "toolchain"})
_NETWORK_KEYS = frozenset({"endpoint", "types", "explorer_url", "timeout"})

# YAML configs parsed so far, keyed by resolved path.
_yaml_cache: Dict[Path, Dict[str, Any]] = {}


def load_config_and_tasks(ctx, config_path: Optional[Union[str, Path]] = None) -> ResolvedConfig:
    """
    Registers the built-in tasks, executes the project's config file (which
    may define tasks, extenders and plugins on `ctx`) and resolves the config.

    `ctx` must be the active Context, since config files reach it through
    the config DSL.
    """
    if config_path is not None:
        path = Path(config_path).resolve()
        if not path.is_file():
            raise ConfigNotFoundError(str(path))
    else:
        path = get_user_config_path()

    ctx.config_path = path
    builtin_tasks.register(ctx.tasks_dsl)

    logger.debug("Loading config file %s", path)
    user_config = load_user_config(path)
    return resolve_config(user_config, path, ctx.config_extenders)


def load_user_config(path: Path) -> Dict[str, Any]:
    if path.suffix in (".yaml", ".yml"):
        return _load_yaml_config(path)
    return _load_python_config(path)


def unload_config(path: Union[str, Path]) -> None:
    """Forgets the cached module or parsed YAML of a config file."""
    path = Path(path)
    sys.modules.pop(_module_name(path), None)
    _yaml_cache.pop(path.resolve(), None)


def resolve_config(
    user_config: Dict[str, Any],
    config_path: Optional[Path] = None,
    config_extenders: Iterable = (),
) -> ResolvedConfig:
    merged = deep_merge(copy.deepcopy(DEFAULT_CONFIG), user_config)

    problems = validate_config(merged)
    if problems:
        raise InvalidConfigError(problems)

    root = config_path.parent if config_path is not None else Path.cwd()
    paths = ProjectPaths(
        root=root,
        config_file=config_path,
        **{name: _resolve_path(root, value) for name, value in merged["paths"].items()},
    )

    resolved = ResolvedConfig(
        default_network=merged["default_network"],
        networks={
            name: _build_network_config(raw) for name, raw in merged["networks"].items()
        },
        paths=paths,
        toolchain=dict(merged["toolchain"]),
        extra={k: v for k, v in merged.items() if k not in _KNOWN_KEYS},
    )

    for extender in config_extenders:
        extender(resolved, user_config)

    return resolved


def validate_config(config: Dict[str, Any]) -> List[str]:
    problems = []

    if not isinstance(config.get("default_network"), str):
        problems.append("'default_network' must be a string")

    networks = config.get("networks")
    if not isinstance(networks, dict):
        problems.append("'networks' must be a mapping of network names to configs")
        networks = {}

    for name, network in networks.items():
        if not isinstance(network, dict):
            problems.append(f"network '{name}' must be a mapping")
            continue
        if not isinstance(network.get("endpoint"), str):
            problems.append(f"network '{name}' needs a string 'endpoint'")
        if "types" in network and not isinstance(network["types"], dict):
            problems.append(f"'types' of network '{name}' must be a mapping")
        timeout = network.get("timeout")
        if timeout is not None and (
            isinstance(timeout, bool) or not isinstance(timeout, (int, float))
        ):
            problems.append(f"'timeout' of network '{name}' must be a number")

    paths = config.get("paths")
    if not isinstance(paths, dict):
        problems.append("'paths' must be a mapping")
    else:
        for key, value in paths.items():
            if key not in ("sources", "artifacts", "tests", "cache"):
                problems.append(f"unknown path '{key}'")
            elif not isinstance(value, str):
                problems.append(f"path '{key}' must be a string")

    if not isinstance(config.get("toolchain"), dict):
        problems.append("'toolchain' must be a mapping")

    return problems


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _build_network_config(raw: Dict[str, Any]) -> NetworkConfig:
    return NetworkConfig(
        endpoint=raw["endpoint"],
        types=dict(raw.get("types") or {}),
        explorer_url=raw.get("explorer_url"),
        timeout=float(raw.get("timeout", DEFAULT_TIMEOUT)),
        extra={k: v for k, v in raw.items() if k not in _NETWORK_KEYS},
    )


def _resolve_path(root: Path, value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else root / path


def _module_name(path: Path) -> str:
    digest = hashlib.sha1(str(path.resolve()).encode("utf-8")).hexdigest()[:12]
    return f"tasklane_user_config_{digest}"


def _load_python_config(path: Path) -> Dict[str, Any]:
    name = _module_name(path)
    module = sys.modules.get(name)

    if module is None:
        spec = importlib.util.spec_from_file_location(name, path)
        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(name, None)
            raise

    user_config = getattr(module, "config", None)
    if user_config is None:
        return {}
    if not isinstance(user_config, dict):
        raise InvalidConfigError([f"'config' in {path.name} must be a dict"])
    return user_config


def _load_yaml_config(path: Path) -> Dict[str, Any]:
    key = path.resolve()
    cached = _yaml_cache.get(key)

    if cached is None:
        with open(path, "r", encoding="utf-8") as f:
            cached = yaml.safe_load(f) or {}
        if not isinstance(cached, dict):
            raise InvalidConfigError([f"{path.name} must contain a mapping"])
        _yaml_cache[key] = cached

    return copy.deepcopy(cached)
