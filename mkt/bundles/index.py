"""Assembly of index.json.

Bundles are listed in directory order of the bundles root; packages in
depth-first walk order of the packages root. Nothing is re-sorted after
discovery so the output is reproducible from the tree alone.
"""

from __future__ import annotations

import json
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from mkt.core.config import MarketplaceConfig
from mkt.core.result import Err, Ok, Result
from mkt.platform.files import atomic_write_text

from .constants import DECLARATION_FILE, IGNORED_FILE_MARKERS, IGNORED_NAMES
from .declaration import (
    DeclarationError,
    load_bundle_declaration,
    load_package_descriptors,
    read_documentation,
)
from .folder_parser import FolderStructureBuilder
from .model import BundleDeclaration, BundleEntry, IndexDocument, PackageEntry
from .scan import group_paths, relative_files

__all__ = [
    "IndexAssembly",
    "assemble_index",
    "build_bundle_entry",
    "bundle_files",
    "collect_packages",
    "list_bundle_dirs",
    "new_index",
    "write_index",
]


def list_bundle_dirs(bundles_root: Path) -> list[Path]:
    """Bundle folders under bundles_root, in directory-listing order."""
    return [
        entry
        for entry in sorted(bundles_root.iterdir(), key=lambda p: p.name)
        if entry.is_dir() and not entry.name.startswith(".") and entry.name not in IGNORED_NAMES
    ]


def bundle_files(
    bundle_dir: Path,
    ignored_markers: Sequence[str] = IGNORED_FILE_MARKERS,
) -> Result[tuple[str, ...], DeclarationError]:
    """Filtered file list of a bundle, relative to the bundle folder.

    Strategies see bundle-relative paths, so markers and folder names in the
    directories above the bundle never affect the result.
    """
    try:
        grouped = group_paths(bundle_dir)
    except OSError as e:
        return Err(DeclarationError(kind="unreadable", message=f"cannot scan: {e}", path=bundle_dir))

    relative = {folder: relative_files(bundle_dir, paths) for folder, paths in grouped.items()}
    return Ok(tuple(FolderStructureBuilder(relative, list(ignored_markers)).build()))


def build_bundle_entry(
    bundle_dir: Path,
    declaration: BundleDeclaration,
    *,
    version: str,
) -> Result[BundleEntry, DeclarationError]:
    """Index entry for a bundle; the run-wide version replaces the declared one."""
    files = bundle_files(bundle_dir)
    if isinstance(files, Err):
        return files

    return Ok(
        BundleEntry.from_declaration(
            declaration,
            version=version,
            files=files.value,
            documentation=read_documentation(bundle_dir),
        )
    )


def collect_packages(
    packages_root: Path,
) -> list[Result[list[PackageEntry], DeclarationError]]:
    """Load every package descriptor under packages_root, depth-first.

    One result per descriptor file so a broken descriptor does not hide the
    others.
    """
    results: list[Result[list[PackageEntry], DeclarationError]] = []
    if not packages_root.is_dir():
        return results

    for dirpath, dirnames, filenames in os.walk(packages_root):
        dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_NAMES)
        if DECLARATION_FILE in filenames:
            results.append(load_package_descriptors(Path(dirpath) / DECLARATION_FILE))
    return results


def new_index(config: MarketplaceConfig) -> IndexDocument:
    return IndexDocument(title=config.title, description=config.description)


def write_index(document: IndexDocument, path: Path) -> Path:
    atomic_write_text(path, json.dumps(document.to_dict(), indent=2) + "\n")
    return path


@dataclass
class IndexAssembly:
    """An index plus the per-unit errors hit while building it."""

    document: IndexDocument
    errors: list[str] = field(default_factory=list)


def assemble_index(
    *,
    workspace_root: Path,
    config: MarketplaceConfig,
    version: str,
) -> IndexAssembly:
    """Build the index without packaging anything."""
    assembly = IndexAssembly(document=new_index(config))

    bundles_root = config.bundles_dir(workspace_root)
    try:
        bundle_dirs = list_bundle_dirs(bundles_root)
    except OSError as e:
        assembly.errors.append(f"bundles: cannot list {bundles_root}: {e}")
        bundle_dirs = []

    for bundle_dir in bundle_dirs:
        declaration = load_bundle_declaration(bundle_dir)
        if isinstance(declaration, Err):
            assembly.errors.append(f"{bundle_dir.name}: {declaration.error.pretty()}")
            continue
        entry = build_bundle_entry(bundle_dir, declaration.value, version=version)
        if isinstance(entry, Err):
            assembly.errors.append(f"{bundle_dir.name}: {entry.error.pretty()}")
            continue
        assembly.document.bundles.append(entry.value)

    for result in collect_packages(config.packages_dir(workspace_root)):
        if isinstance(result, Ok):
            assembly.document.packages.extend(result.value)
        else:
            assembly.errors.append(f"packages: {result.error.pretty()}")

    return assembly
