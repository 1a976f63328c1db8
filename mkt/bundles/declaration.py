"""Reading bundle declarations and package descriptors.

Bundle declaration (bundles/<id>/info.json):

    {
      "name": "Case Escalation",
      "description": "Escalates stale cases",
      "dependencies": ["core-utils"],
      "packageDependencies": ["04t000000000001"],
      "availability": "public",
      "tags": ["service"],
      "iconUrl": "https://example.com/icon.png"
    }

`label` is accepted in place of `name`.

Package descriptor (anywhere under the packages root, info.json): one
object or an array of objects with name, namespace, packageId, versionId,
description and version.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from mkt.core.result import Err, Ok, Result
from mkt.core.structured import StrDict, as_obj_list, as_str_dict, get_str, get_str_list

from .constants import DECLARATION_FILE, DOCUMENTATION_FILE
from .model import AVAILABILITIES, DEFAULT_AVAILABILITY, Availability, BundleDeclaration, PackageEntry

__all__ = [
    "DeclarationError",
    "find_documentation",
    "load_bundle_declaration",
    "load_package_descriptors",
    "read_documentation",
]

DeclarationErrorKind = Literal["missing", "unreadable", "invalid"]

_PACKAGE_FIELDS = ("name", "namespace", "packageId", "versionId", "description", "version")


@dataclass(frozen=True, slots=True)
class DeclarationError:
    kind: DeclarationErrorKind
    message: str
    path: Path

    def pretty(self) -> str:
        return f"{self.message} ({self.path})"


def _read_json(path: Path) -> Result[object, DeclarationError]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(DeclarationError(kind="missing", message="file not found", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(DeclarationError(kind="unreadable", message=f"cannot read: {e}", path=path))

    try:
        return Ok(json.loads(text))
    except json.JSONDecodeError as e:
        return Err(DeclarationError(kind="invalid", message=f"invalid JSON: {e}", path=path))


def find_documentation(directory: Path) -> Path | None:
    """The README.md in directory, matched case-insensitively."""
    wanted = DOCUMENTATION_FILE.lower()
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError:
        return None
    for entry in entries:
        if entry.name.lower() == wanted and entry.is_file():
            return entry
    return None


def read_documentation(directory: Path) -> str | None:
    path = find_documentation(directory)
    if path is None:
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def _parse_availability(data: StrDict, path: Path) -> Result[Availability, DeclarationError]:
    raw = get_str(data, "availability")
    if raw is None:
        return Ok(DEFAULT_AVAILABILITY)
    for availability in AVAILABILITIES:
        if raw == availability:
            return Ok(availability)
    return Err(
        DeclarationError(
            kind="invalid",
            message=f"availability must be one of {', '.join(AVAILABILITIES)}, got '{raw}'",
            path=path,
        )
    )


def load_bundle_declaration(bundle_dir: Path) -> Result[BundleDeclaration, DeclarationError]:
    """Load bundle_dir/info.json."""
    path = bundle_dir / DECLARATION_FILE
    raw = _read_json(path)
    if isinstance(raw, Err):
        return raw

    data = as_str_dict(raw.value)
    if data is None:
        return Err(DeclarationError(kind="invalid", message="expected a JSON object", path=path))

    name = get_str(data, "name") or get_str(data, "label")
    if name is None:
        return Err(DeclarationError(kind="invalid", message="missing 'name'", path=path))

    description = get_str(data, "description")
    if description is None:
        return Err(DeclarationError(kind="invalid", message="missing 'description'", path=path))

    availability = _parse_availability(data, path)
    if isinstance(availability, Err):
        return availability

    return Ok(
        BundleDeclaration(
            id=bundle_dir.name,
            name=name,
            description=description,
            version=get_str(data, "version"),
            dependencies=get_str_list(data, "dependencies"),
            package_dependencies=get_str_list(data, "packageDependencies"),
            availability=availability.value,
            tags=get_str_list(data, "tags"),
            icon_url=get_str(data, "iconUrl"),
        )
    )


def _package_entry(
    data: StrDict, *, path: Path, documentation: str | None
) -> Result[PackageEntry, DeclarationError]:
    values: dict[str, str] = {}
    for key in _PACKAGE_FIELDS:
        value = get_str(data, key)
        if value is None:
            return Err(DeclarationError(kind="invalid", message=f"package missing '{key}'", path=path))
        values[key] = value

    return Ok(
        PackageEntry(
            name=values["name"],
            namespace=values["namespace"],
            package_id=values["packageId"],
            version_id=values["versionId"],
            description=values["description"],
            version=values["version"],
            documentation=documentation,
        )
    )


def load_package_descriptors(path: Path) -> Result[list[PackageEntry], DeclarationError]:
    """Load one descriptor file holding a package object or an array of them.

    The README.md next to the descriptor, if any, is attached to every entry.
    """
    raw = _read_json(path)
    if isinstance(raw, Err):
        return raw

    items: list[object]
    as_list = as_obj_list(raw.value)
    if as_list is not None:
        items = as_list
    else:
        items = [raw.value]

    documentation = read_documentation(path.parent)
    entries: list[PackageEntry] = []
    for item in items:
        data = as_str_dict(item)
        if data is None:
            return Err(
                DeclarationError(kind="invalid", message="package entry must be an object", path=path)
            )
        entry = _package_entry(data, path=path, documentation=documentation)
        if isinstance(entry, Err):
            return entry
        entries.append(entry.value)
    return Ok(entries)
