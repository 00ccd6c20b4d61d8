import asyncio
import json
import logging
import shlex
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from tasklane.runtime.exceptions import ExternalCommandFailedError

logger = logging.getLogger(__name__)

METADATA_COMMAND = ("cargo", "metadata", "--no-deps", "--format-version", "1")
DEFAULT_MARKER_DEPENDENCY = "ink_lang"


@dataclass(frozen=True)
class CargoDependency:
    name: str
    req: str = "*"
    kind: Optional[str] = None
    optional: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CargoDependency":
        return cls(
            name=data["name"],
            req=data.get("req", "*"),
            kind=data.get("kind"),
            optional=bool(data.get("optional", False)),
        )


@dataclass(frozen=True)
class CargoPackage:
    id: str
    name: str
    version: str
    manifest_path: str
    dependencies: List[CargoDependency] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CargoPackage":
        return cls(
            id=data["id"],
            name=data["name"],
            version=data.get("version", ""),
            manifest_path=data.get("manifest_path", ""),
            dependencies=[
                CargoDependency.from_dict(d) for d in data.get("dependencies") or []
            ],
        )

    def depends_on(self, name: str) -> bool:
        return any(d.name == name for d in self.dependencies)


@dataclass(frozen=True)
class CargoMetadata:
    packages: List[CargoPackage]
    workspace_members: List[str]
    workspace_root: str = ""
    target_directory: str = ""
    version: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CargoMetadata":
        return cls(
            packages=[CargoPackage.from_dict(p) for p in data.get("packages") or []],
            workspace_members=list(data.get("workspace_members") or []),
            workspace_root=data.get("workspace_root", ""),
            target_directory=data.get("target_directory", ""),
            version=data.get("version", 1),
        )


async def get_resolved_workspace(
    find_dir: Optional[Union[str, Path]] = None,
) -> CargoMetadata:
    """
    Runs `cargo metadata` in the first of the working directory or `find_dir`
    that holds a Cargo.toml.

    Raises ExternalCommandFailedError when cargo cannot be run, exits
    non-zero, or prints something that is not valid metadata.
    """
    command = " ".join(shlex.quote(part) for part in METADATA_COMMAND)
    candidates = [Path(".")]
    if find_dir is not None:
        candidates.append(Path(find_dir))
    cwd = next((d for d in candidates if (d / "Cargo.toml").is_file()), None)

    logger.debug("Running `%s` in %s", command, cwd or Path.cwd())
    try:
        proc = await asyncio.create_subprocess_exec(
            *METADATA_COMMAND,
            cwd=str(cwd) if cwd is not None else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise ExternalCommandFailedError(command, str(e)) from e

    stdout, stderr = await proc.communicate()

    if proc.returncode != 0:
        raise ExternalCommandFailedError(
            command,
            f"exit code {proc.returncode}\n{stderr.decode(errors='replace').strip()}",
        )

    try:
        return CargoMetadata.from_dict(json.loads(stdout.decode()))
    except (ValueError, KeyError, TypeError) as e:
        raise ExternalCommandFailedError(command, f"unreadable output: {e}") from e


def filter_contract_packages(
    metadata: CargoMetadata, marker: str = DEFAULT_MARKER_DEPENDENCY
) -> CargoMetadata:
    """Keeps only the workspace members that depend on the `marker` crate."""
    members = set(metadata.workspace_members)
    contracts = [
        package
        for package in metadata.packages
        if package.id in members and package.depends_on(marker)
    ]
    return replace(metadata, packages=contracts)
