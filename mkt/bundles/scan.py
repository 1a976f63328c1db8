"""Directory scanning for bundle folders."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .constants import IGNORED_NAMES


def _walk(directory: Path, ignored_names: frozenset[str]) -> list[Path]:
    out: list[Path] = []
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.name in ignored_names:
            continue
        out.append(entry)
        # Symlinked directories are listed, never entered.
        if entry.is_dir() and not entry.is_symlink():
            out.extend(_walk(entry, ignored_names))
    return out


def subdirectories(directory: Path, ignored_names: frozenset[str] = IGNORED_NAMES) -> list[Path]:
    """Immediate subdirectories, sorted by name, ignored names excluded."""
    return [
        entry
        for entry in sorted(directory.iterdir(), key=lambda p: p.name)
        if entry.is_dir() and entry.name not in ignored_names
    ]


def group_paths(
    bundle_root: Path,
    ignored_names: frozenset[str] = IGNORED_NAMES,
) -> dict[str, list[str]]:
    """Group every path under bundle_root by its top-level folder.

    Both files and directories are listed as absolute POSIX strings under
    the resolved bundle_root. Entries are joined, not resolved, so a symlink
    pointing outside the bundle keeps its in-bundle path. Files directly in
    bundle_root are not metadata and are left out.

    Raises:
        OSError: bundle_root cannot be read.
    """
    root = bundle_root.resolve()
    grouped: dict[str, list[str]] = {}
    for folder in subdirectories(bundle_root, ignored_names):
        grouped[folder.name] = [
            (root / p.relative_to(bundle_root)).as_posix() for p in _walk(folder, ignored_names)
        ]
    return grouped


def relative_files(bundle_root: Path, paths: Iterable[str]) -> list[str]:
    """Convert absolute paths to POSIX paths relative to bundle_root."""
    root = bundle_root.resolve()
    return [Path(p).relative_to(root).as_posix() for p in paths]
