from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Availability = Literal["public", "dependency"]

AVAILABILITIES: tuple[Availability, ...] = ("public", "dependency")
DEFAULT_AVAILABILITY: Availability = "public"


@dataclass(frozen=True, slots=True)
class BundleDeclaration:
    """Contents of a bundle's info.json."""

    id: str  # folder name
    name: str
    description: str
    version: str | None = None
    dependencies: tuple[str, ...] = ()
    package_dependencies: tuple[str, ...] = ()
    availability: Availability = DEFAULT_AVAILABILITY
    tags: tuple[str, ...] = ()
    icon_url: str | None = None

    @property
    def has_dependencies(self) -> bool:
        return bool(self.dependencies)


@dataclass(frozen=True, slots=True)
class PackageEntry:
    """A registry entry for an externally published package."""

    name: str
    namespace: str
    package_id: str
    version_id: str
    description: str
    version: str
    documentation: str | None = None

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {
            "name": self.name,
            "namespace": self.namespace,
            "packageId": self.package_id,
            "versionId": self.version_id,
            "description": self.description,
            "version": self.version,
        }
        if self.documentation is not None:
            out["documentation"] = self.documentation
        return out


@dataclass(frozen=True, slots=True)
class BundleEntry:
    """A bundle as published in the index."""

    id: str
    name: str
    description: str
    version: str
    files: tuple[str, ...]
    dependencies: tuple[str, ...] = ()
    package_dependencies: tuple[str, ...] = ()
    availability: Availability = DEFAULT_AVAILABILITY
    tags: tuple[str, ...] = ()
    documentation: str | None = None
    icon_url: str | None = None

    @classmethod
    def from_declaration(
        cls,
        declaration: BundleDeclaration,
        *,
        version: str,
        files: tuple[str, ...],
        documentation: str | None = None,
    ) -> BundleEntry:
        return cls(
            id=declaration.id,
            name=declaration.name,
            description=declaration.description,
            version=version,
            files=files,
            dependencies=declaration.dependencies,
            package_dependencies=declaration.package_dependencies,
            availability=declaration.availability,
            tags=declaration.tags,
            documentation=documentation,
            icon_url=declaration.icon_url,
        )

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "files": list(self.files),
        }
        if self.documentation is not None:
            out["documentation"] = self.documentation
        if self.icon_url is not None:
            out["iconUrl"] = self.icon_url
        out["dependencies"] = list(self.dependencies)
        out["packageDependencies"] = list(self.package_dependencies)
        out["availability"] = self.availability
        out["tags"] = list(self.tags)
        return out


def _empty_bundles() -> list[BundleEntry]:
    return []


def _empty_packages() -> list[PackageEntry]:
    return []


@dataclass
class IndexDocument:
    """The published index.json, in discovery order."""

    title: str | None = None
    description: str | None = None
    bundles: list[BundleEntry] = field(default_factory=_empty_bundles)
    packages: list[PackageEntry] = field(default_factory=_empty_packages)

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {}
        if self.title is not None:
            out["title"] = self.title
        if self.description is not None:
            out["description"] = self.description
        out["bundles"] = [b.to_dict() for b in self.bundles]
        out["packages"] = [p.to_dict() for p in self.packages]
        return out
