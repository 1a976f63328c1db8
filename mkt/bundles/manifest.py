"""package.xml / destructiveChanges.xml documents.

The install manifest of a bundle is produced by the packaging step. The
uninstall artifact is derived from it by splitting the document in two:

- package.xml keeps everything except the `types` nodes (only `version`)
- destructiveChanges.xml holds the removed `types` nodes in a fresh root

Re-merging the types of both halves gives back the install manifest's
types exactly; no component is lost or invented by the split.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from mkt.core.result import Err, Ok, Result

from .constants import IGNORED_NAMES, METADATA_NAMESPACE
from .metadata_types import member_name, metadata_type_for

__all__ = [
    "ManifestDocument",
    "ManifestError",
    "ManifestType",
    "UninstallDescriptors",
    "load_manifest",
    "manifest_from_directory",
    "merge_types",
    "parse_manifest",
    "render_manifest",
    "synthesize_uninstall",
]

_XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
_STANDALONE_ATTR = re.compile(r"""\s+standalone=["'](?:yes|no)["']""")


@dataclass(frozen=True, slots=True)
class ManifestError:
    message: str
    path: Path | None = None

    def pretty(self) -> str:
        if self.path is not None:
            return f"{self.message} ({self.path})"
        return self.message


@dataclass(frozen=True, slots=True)
class ManifestType:
    """One `types` node: a metadata type and its member names."""

    name: str
    members: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ManifestDocument:
    """A parsed Package document."""

    types: tuple[ManifestType, ...] = field(default_factory=tuple)
    version: str | None = None

    def type_map(self) -> dict[str, frozenset[str]]:
        return merge_types(self)

    def without_types(self) -> ManifestDocument:
        return ManifestDocument(types=(), version=self.version)

    def types_only(self) -> ManifestDocument:
        return ManifestDocument(types=self.types, version=None)


@dataclass(frozen=True, slots=True)
class UninstallDescriptors:
    """The two documents of an uninstall artifact."""

    package: ManifestDocument
    destructive_changes: ManifestDocument

    def render_package(self) -> str:
        return render_manifest(self.package)

    def render_destructive_changes(self) -> str:
        return render_manifest(self.destructive_changes)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_manifest(text: str) -> Result[ManifestDocument, ManifestError]:
    """Parse a Package document (namespaced or not)."""
    try:
        root = ET.fromstring(_STANDALONE_ATTR.sub("", text, count=1))
    except ET.ParseError as e:
        return Err(ManifestError(f"malformed manifest XML: {e}"))

    if _local_name(root.tag) != "Package":
        return Err(ManifestError(f"unexpected manifest root element: {_local_name(root.tag)}"))

    types: list[ManifestType] = []
    version: str | None = None
    for child in root:
        local = _local_name(child.tag)
        if local == "version":
            version = (child.text or "").strip() or None
        elif local == "types":
            name: str | None = None
            members: list[str] = []
            for node in child:
                node_name = _local_name(node.tag)
                value = (node.text or "").strip()
                if node_name == "name" and value:
                    name = value
                elif node_name == "members" and value:
                    members.append(value)
            if name is None:
                return Err(ManifestError("manifest types node without a name"))
            types.append(ManifestType(name=name, members=tuple(members)))

    return Ok(ManifestDocument(types=tuple(types), version=version))


def load_manifest(path: Path) -> Result[ManifestDocument, ManifestError]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(ManifestError(f"cannot read manifest: {e.strerror or e}", path=path))

    result = parse_manifest(text)
    if isinstance(result, Err):
        return Err(ManifestError(result.error.message, path=path))
    return result


def render_manifest(document: ManifestDocument) -> str:
    """Serialize a document as Salesforce expects it."""
    root = ET.Element("Package", xmlns=METADATA_NAMESPACE)
    for manifest_type in document.types:
        node = ET.SubElement(root, "types")
        for member in manifest_type.members:
            ET.SubElement(node, "members").text = member
        ET.SubElement(node, "name").text = manifest_type.name
    if document.version is not None:
        ET.SubElement(root, "version").text = document.version

    ET.indent(root, space="    ")
    body = ET.tostring(root, encoding="unicode", short_empty_elements=False)
    return f"{_XML_DECLARATION}\n{body}\n"


def synthesize_uninstall(install: ManifestDocument) -> UninstallDescriptors:
    """Split an install manifest into the uninstall package.xml and destructiveChanges.xml."""
    return UninstallDescriptors(
        package=install.without_types(),
        destructive_changes=install.types_only(),
    )


def merge_types(*documents: ManifestDocument) -> dict[str, frozenset[str]]:
    """Union of type -> members across documents."""
    merged: dict[str, set[str]] = {}
    for document in documents:
        for manifest_type in document.types:
            merged.setdefault(manifest_type.name, set()).update(manifest_type.members)
    return {name: frozenset(members) for name, members in merged.items()}


def _unique(names: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(n for n in names if n))


def manifest_from_directory(
    source_dir: Path,
    version: str,
    ignored_names: frozenset[str] = IGNORED_NAMES,
) -> ManifestDocument:
    """Build an install manifest from a bundle's metadata folders.

    Folders without a known metadata type are skipped.

    Raises:
        OSError: source_dir cannot be read.
    """
    types: list[ManifestType] = []
    for folder in sorted(source_dir.iterdir(), key=lambda p: p.name):
        if not folder.is_dir() or folder.name in ignored_names:
            continue
        type_name = metadata_type_for(folder.name)
        if type_name is None:
            continue
        entries = sorted(
            entry.name for entry in folder.iterdir() if entry.name not in ignored_names
        )
        members = _unique(member_name(entry) for entry in entries)
        if members:
            types.append(ManifestType(name=type_name, members=members))
    return ManifestDocument(types=tuple(types), version=version)
