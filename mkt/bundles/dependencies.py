"""Merging sibling bundles into a staged bundle copy.

A bundle may declare dependencies on other bundles in the same parent
directory. For the "with dependencies" artifact, the bundle is first copied
to a staging directory, then each dependency's metadata folders are merged
into that copy. The checked-out tree is never modified.

Only direct dependencies are merged. A dependency's own dependencies are
not followed.
"""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from mkt.core.result import Err, Ok, Result

from .constants import IGNORED_NAMES
from .scan import subdirectories

__all__ = [
    "ConflictPolicy",
    "DependencyError",
    "MergeReport",
    "resolve_dependencies",
    "stage_bundle",
]

ConflictPolicy = Literal["warn", "fail"]
DependencyErrorKind = Literal["missing_dependency", "conflict", "io"]


@dataclass(frozen=True, slots=True)
class DependencyError:
    kind: DependencyErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


@dataclass(frozen=True, slots=True)
class MergeReport:
    """What a dependency merge did.

    Attributes:
        dependencies: Dependency names merged, in declaration order.
        copied: Copied files, relative to the staged bundle.
        skipped: Files left untouched because the target already existed.
    """

    dependencies: tuple[str, ...]
    copied: tuple[str, ...]
    skipped: tuple[str, ...]


def stage_bundle(
    bundle_dir: Path,
    target: Path,
    ignored_names: frozenset[str] = IGNORED_NAMES,
) -> Result[Path, DependencyError]:
    """Copy a bundle's metadata folders into target.

    Root-level files (info.json, README.md) are not deployable metadata and
    are not staged.
    """
    ignore = shutil.ignore_patterns(*sorted(ignored_names))
    try:
        target.mkdir(parents=True, exist_ok=True)
        for folder in subdirectories(bundle_dir, ignored_names):
            shutil.copytree(folder, target / folder.name, ignore=ignore)
    except OSError as e:
        return Err(DependencyError(kind="io", message=f"cannot stage {bundle_dir.name}: {e}"))
    return Ok(target)


def _files_under(directory: Path, ignored_names: frozenset[str]) -> list[Path]:
    out: list[Path] = []
    for path in sorted(directory.rglob("*")):
        rel_parts = path.relative_to(directory).parts
        if any(part in ignored_names for part in rel_parts):
            continue
        if path.is_file():
            out.append(path)
    return out


def _is_sibling_name(name: str) -> bool:
    """True for a bare folder name; anything path-like is not a sibling."""
    return name not in {"", ".", ".."} and "\\" not in name and Path(name).name == name


def resolve_dependencies(
    bundle_dir: Path,
    dependencies: Sequence[str],
    target: Path,
    *,
    policy: ConflictPolicy = "warn",
    ignored_names: frozenset[str] = IGNORED_NAMES,
) -> Result[MergeReport, DependencyError]:
    """Merge each sibling dependency's metadata folders into target.

    Args:
        bundle_dir: The dependent bundle (its parent holds the siblings).
        dependencies: Declared sibling folder names.
        target: Staged copy of the bundle to merge into.
        policy: "warn" skips existing files and reports them, "fail" stops
            at the first existing file.

    Returns:
        Ok(MergeReport), or Err when a dependency folder does not exist,
        a conflict occurs under the "fail" policy, or copying fails.
    """
    parent = bundle_dir.parent
    copied: list[str] = []
    skipped: list[str] = []

    for name in dependencies:
        dependency_dir = parent / name
        if not _is_sibling_name(name) or not dependency_dir.is_dir():
            return Err(
                DependencyError(
                    kind="missing_dependency",
                    message=f"{bundle_dir.name}: dependency '{name}' not found",
                    hint=f"expected a sibling folder {dependency_dir}",
                )
            )

        try:
            for folder in subdirectories(dependency_dir, ignored_names):
                destination_root = target / folder.name
                destination_root.mkdir(parents=True, exist_ok=True)
                for source in _files_under(folder, ignored_names):
                    destination = destination_root / source.relative_to(folder)
                    rel = destination.relative_to(target).as_posix()
                    if destination.exists():
                        if policy == "fail":
                            return Err(
                                DependencyError(
                                    kind="conflict",
                                    message=f"{bundle_dir.name}: '{rel}' from '{name}' already exists",
                                    hint="rename the component or drop the dependency",
                                )
                            )
                        skipped.append(rel)
                        continue
                    destination.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copy2(source, destination)
                    copied.append(rel)
        except OSError as e:
            return Err(
                DependencyError(
                    kind="io",
                    message=f"{bundle_dir.name}: cannot merge '{name}': {e}",
                )
            )

    return Ok(
        MergeReport(
            dependencies=tuple(dependencies),
            copied=tuple(copied),
            skipped=tuple(skipped),
        )
    )
