"""Install / uninstall artifact generation for one bundle.

Artifact layout under an artifact root (one per bundle and variant):

    <root>/sfdx-project.json    project descriptor for the sf CLI
    <root>/install/             staged metadata folders + package.xml
    <root>/uninstall/           package.xml (version only) + destructiveChanges.xml

Each artifact root carries its own sfdx-project.json so packaging never
touches the project descriptor of the checked-out repository.
"""

from __future__ import annotations

import json
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from mkt.bundles.constants import DESTRUCTIVE_CHANGES_XML, PACKAGE_XML
from mkt.bundles.manifest import (
    ManifestError,
    load_manifest,
    manifest_from_directory,
    render_manifest,
    synthesize_uninstall,
)
from mkt.core.result import Err, Ok, Result
from mkt.output.console import ConsoleProtocol, Style
from mkt.platform.files import atomic_write_text
from mkt.platform.process import run as run_process
from mkt.services.errors import ReleaseError
from mkt.services.timeouts import PACKAGING_TIMEOUT_SECONDS

__all__ = [
    "ArtifactLayout",
    "PackagingBackend",
    "generate_install_manifest",
    "generate_uninstall",
    "prepare_artifact_root",
]

PackagingBackend = Literal["sf", "builtin"]

PROJECT_FILE = "sfdx-project.json"
_SF_MANIFEST_NAME = "package"


@dataclass(frozen=True, slots=True)
class ArtifactLayout:
    root: Path

    @property
    def install_dir(self) -> Path:
        return self.root / "install"

    @property
    def uninstall_dir(self) -> Path:
        return self.root / "uninstall"

    @property
    def project_file(self) -> Path:
        return self.root / PROJECT_FILE

    @property
    def install_manifest(self) -> Path:
        return self.install_dir / PACKAGE_XML


def prepare_artifact_root(root: Path) -> Result[ArtifactLayout, ReleaseError]:
    """Start an artifact root from scratch so reruns do not see stale output."""
    try:
        if root.exists():
            shutil.rmtree(root)
        root.mkdir(parents=True)
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"cannot prepare {root}: {e}"))
    return Ok(ArtifactLayout(root=root))


def _write_project_file(layout: ArtifactLayout, api_version: str) -> None:
    project = {
        "packageDirectories": [{"path": layout.install_dir.name, "default": True}],
        "sourceApiVersion": api_version,
    }
    atomic_write_text(layout.project_file, json.dumps(project, indent=2) + "\n")


def _generate_with_sf(
    layout: ArtifactLayout,
    *,
    api_version: str,
    console: ConsoleProtocol,
) -> Result[Path, ReleaseError]:
    if shutil.which("sf") is None:
        return Err(
            ReleaseError(
                kind="tool_missing",
                message="sf: missing",
                hint="Install the Salesforce CLI or use --backend builtin",
            )
        )

    try:
        _write_project_file(layout, api_version)
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"cannot write {PROJECT_FILE}: {e}"))

    cmd = [
        "sf",
        "project",
        "generate",
        "manifest",
        "--source-dir",
        layout.install_dir.name,
        "--output-dir",
        layout.install_dir.name,
        "--name",
        _SF_MANIFEST_NAME,
        "--api-version",
        api_version,
    ]
    console.print(" ".join(cmd), Style.DIM)
    result = run_process(cmd, cwd=layout.root, timeout=PACKAGING_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="packaging_failed",
                message=f"sf project generate manifest failed (exit {result.error.returncode})",
                hint=result.error.detail(),
            )
        )

    if not layout.install_manifest.is_file():
        return Err(
            ReleaseError(
                kind="packaging_failed",
                message=f"sf did not produce {layout.install_manifest}",
            )
        )
    return Ok(layout.install_manifest)


def _generate_builtin(layout: ArtifactLayout, *, api_version: str) -> Result[Path, ReleaseError]:
    try:
        document = manifest_from_directory(layout.install_dir, api_version)
        atomic_write_text(layout.install_manifest, render_manifest(document))
    except OSError as e:
        return Err(ReleaseError(kind="packaging_failed", message=f"cannot write {PACKAGE_XML}: {e}"))
    return Ok(layout.install_manifest)


def generate_install_manifest(
    layout: ArtifactLayout,
    *,
    api_version: str,
    backend: PackagingBackend,
    console: ConsoleProtocol,
) -> Result[Path, ReleaseError]:
    """Write install/package.xml for the staged metadata in layout.install_dir."""
    if backend == "sf":
        return _generate_with_sf(layout, api_version=api_version, console=console)
    return _generate_builtin(layout, api_version=api_version)


def generate_uninstall(layout: ArtifactLayout) -> Result[Path, ManifestError]:
    """Derive the uninstall artifact from the install manifest.

    Returns the uninstall directory.
    """
    install = load_manifest(layout.install_manifest)
    if isinstance(install, Err):
        return install

    descriptors = synthesize_uninstall(install.value)
    try:
        atomic_write_text(layout.uninstall_dir / PACKAGE_XML, descriptors.render_package())
        atomic_write_text(
            layout.uninstall_dir / DESTRUCTIVE_CHANGES_XML,
            descriptors.render_destructive_changes(),
        )
    except OSError as e:
        return Err(ManifestError(f"cannot write uninstall descriptors: {e}", path=layout.uninstall_dir))
    return Ok(layout.uninstall_dir)
