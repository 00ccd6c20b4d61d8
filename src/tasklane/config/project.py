from pathlib import Path
from typing import Optional, Union

from tasklane.runtime.exceptions import ConfigNotFoundError

CONFIG_FILENAMES = (
    "tasklane.config.py",
    "tasklane.config.yaml",
    "tasklane.config.yml",
)


def find_config_path(start: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """Walks up from `start` (the working directory by default) to the first config file."""
    directory = Path(start).resolve() if start is not None else Path.cwd()

    for candidate_dir in (directory, *directory.parents):
        for filename in CONFIG_FILENAMES:
            candidate = candidate_dir / filename
            if candidate.is_file():
                return candidate
    return None


def get_user_config_path(start: Optional[Union[str, Path]] = None) -> Path:
    path = find_config_path(start)
    if path is None:
        raise ConfigNotFoundError(str(start if start is not None else Path.cwd()))
    return path


def is_inside_project(start: Optional[Union[str, Path]] = None) -> bool:
    return find_config_path(start) is not None
