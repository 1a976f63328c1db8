"""Workspace detection and paths.

The workspace is the root of the marketplace repository. It is identified
by the presence of a `marketplace.json` file. In CI the checkout directory
is exported as $GITHUB_WORKSPACE and is used directly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .config import CONFIG_FILE_NAME
from .result import Err, Ok, Result

__all__ = [
    "Workspace",
    "WorkspaceError",
    "detect_workspace",
    "find_workspace_upward",
    "is_workspace_root",
]

WORKSPACE_ENV_VARS = ("MKT_WORKSPACE", "GITHUB_WORKSPACE")


@dataclass(frozen=True)
class WorkspaceError:
    """Error when workspace cannot be detected."""

    message: str
    searched_from: Path | None = None


@dataclass(frozen=True, slots=True)
class Workspace:
    """A detected marketplace workspace.

    The workspace root contains:
    - marketplace.json (required)
    - the bundles and packages directories named in marketplace.json
    - .mkt/ generated artifacts (gitignored)
    """

    root: Path

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILE_NAME

    @property
    def state_dir(self) -> Path:
        """Path to generated state (.mkt/)."""
        return self.root / ".mkt"

    @property
    def dist_dir(self) -> Path:
        """Default output directory for staged artifacts and archives."""
        return self.state_dir / "dist"

    @property
    def index_path(self) -> Path:
        return self.dist_dir / "index.json"

    def __str__(self) -> str:
        return str(self.root)


def is_workspace_root(path: Path) -> bool:
    return (path / CONFIG_FILE_NAME).is_file()


def find_workspace_upward(start: Path) -> Path | None:
    """Search upward from start for a directory holding marketplace.json."""
    for parent in (start, *start.parents):
        if is_workspace_root(parent):
            return parent
    return None


def detect_workspace(
    *,
    start_dir: Path | None = None,
    env_vars: tuple[str, ...] = WORKSPACE_ENV_VARS,
) -> Result[Workspace, WorkspaceError]:
    """Detect the workspace root directory.

    Detection order:
    1. The first of env_vars that is set ($MKT_WORKSPACE, $GITHUB_WORKSPACE)
    2. Search upward from start_dir (or cwd) for marketplace.json
    """
    for env_var in env_vars:
        env_value = os.environ.get(env_var)
        if not env_value:
            continue
        env_path = Path(env_value).expanduser().resolve()
        if env_path.is_dir() and is_workspace_root(env_path):
            return Ok(Workspace(root=env_path))
        return Err(
            WorkspaceError(
                message=f"${env_var} is set to '{env_value}' but it has no {CONFIG_FILE_NAME}",
                searched_from=env_path if env_path.is_dir() else None,
            )
        )

    search_start = (start_dir or Path.cwd()).resolve()
    found = find_workspace_upward(search_start)
    if found:
        return Ok(Workspace(root=found))

    return Err(
        WorkspaceError(
            message=f"Could not find workspace ({CONFIG_FILE_NAME} not found)",
            searched_from=search_start,
        )
    )
