"""File list filtering for bundle folders.

A bundle's raw file listing is grouped by metadata-type folder ("classes",
"objects", ...). Each group is filtered by the strategy registered for its
folder name, falling back to DefaultFolderParserStrategy.

Usage:
    builder = FolderStructureBuilder(
        {"classes": [".../classes/Foo.cls", ".../classes/Foo.cls-meta.xml"]},
        ignored=["info.json"],
    )
    builder.build()  # [".../classes/Foo.cls"]

New folder behaviours are added with register_strategy(); existing
strategies are never special-cased by folder name.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Protocol

__all__ = [
    "DefaultFolderParserStrategy",
    "FOLDER_PARSER_STRATEGIES",
    "FolderParserStrategy",
    "FolderStructureBuilder",
    "ObjectsFolderParserStrategy",
    "register_strategy",
    "strategy_for",
]

_META_SUFFIX = "-meta.xml"


def _basename(path: str) -> str:
    return path.rstrip("/").rsplit("/", 1)[-1]


class FolderParserStrategy(Protocol):
    def parse_files(
        self, file_paths: Sequence[str], ignored: Sequence[str] | None = None
    ) -> list[str]: ...


class DefaultFolderParserStrategy:
    """Keep content files; drop directories, ignored paths and -meta.xml companions."""

    _filename_with_extension = re.compile(r"\.[^/]+$")

    def parse_files(
        self, file_paths: Sequence[str], ignored: Sequence[str] | None = None
    ) -> list[str]:
        markers = tuple(ignored or ())
        out: list[str] = []
        for file_path in file_paths:
            name = _basename(file_path)
            if not self._filename_with_extension.search(name):
                continue
            if any(marker in file_path for marker in markers):
                continue
            if name.endswith(_META_SUFFIX):
                continue
            out.append(file_path)
        return out


class ObjectsFolderParserStrategy:
    """Keep only `.../objects/<Name>` directory entries.

    Custom objects are directories of XML files; the index lists the object
    directory as one unit.
    """

    _object_segment = re.compile(r"(?:^|/)objects/([^/]+)")

    def _object_name(self, file_path: str) -> str | None:
        # The innermost "objects" segment belongs to the bundle; outer ones
        # are directories the checkout happens to live under.
        names = self._object_segment.findall(file_path)
        return names[-1] if names else None

    def parse_files(
        self, file_paths: Sequence[str], ignored: Sequence[str] | None = None
    ) -> list[str]:
        seen: set[str] = set()
        out: list[str] = []
        for file_path in file_paths:
            name = self._object_name(file_path)
            if name is None or file_path in seen:
                continue
            if file_path.rsplit("/", 2)[-2:] != ["objects", name]:
                continue
            seen.add(file_path)
            out.append(file_path)
        return out


FOLDER_PARSER_STRATEGIES: dict[str, FolderParserStrategy] = {
    "objects": ObjectsFolderParserStrategy(),
}

_DEFAULT_STRATEGY = DefaultFolderParserStrategy()


def register_strategy(folder_name: str, strategy: FolderParserStrategy) -> None:
    """Register (or replace) the strategy for a metadata-type folder."""
    FOLDER_PARSER_STRATEGIES[folder_name] = strategy


def strategy_for(folder_name: str) -> FolderParserStrategy:
    """Strategy for folder_name (exact, case-sensitive) or the default."""
    return FOLDER_PARSER_STRATEGIES.get(folder_name, _DEFAULT_STRATEGY)


class FolderStructureBuilder:
    """Builds the flat, filtered file list for one bundle.

    The builder is a pure projection of its inputs: nothing is cached and
    build() re-runs every strategy on each call.
    """

    def __init__(
        self,
        file_paths_by_folder: Mapping[str, Sequence[str]],
        ignored: Sequence[str] | None = None,
    ) -> None:
        self._file_paths_by_folder = file_paths_by_folder
        self._ignored = ignored

    def build(self) -> list[str]:
        """Filtered paths for every folder group, in group insertion order."""
        out: list[str] = []
        for folder_name, file_paths in self._file_paths_by_folder.items():
            parser = strategy_for(folder_name)
            out.extend(parser.parse_files(list(file_paths), self._ignored))
        return out
