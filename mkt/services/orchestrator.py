"""End-to-end release run over every bundle of a marketplace repository.

Per bundle, in directory order:

    declaration -> file list -> install -> uninstall
      -> (with-dependencies install -> uninstall) -> archives -> index entry

then: index.json -> release -> asset upload -> working-tree restore.

Every unit of work returns a Result. Failures are recorded in a RunReport
and the run moves on to the next unit; the caller decides at the end
whether the run failed.

Output layout (``settings.out_dir``, default ``<workspace>/.mkt/dist``):

    <out>/<id>/install/ ...                       plain variant
    <out>/<id>/uninstall/ ...
    <out>/<id>/with-dependencies/install/ ...     only when dependencies exist
    <out>/<id>/with-dependencies/uninstall/ ...
    <out>/<id>.zip, <id>-uninstall.zip,
    <out>/<id>-with-dependencies.zip, <id>-with-dependencies-uninstall.zip
    <out>/index.json
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from mkt.bundles.constants import DEFAULT_API_VERSION
from mkt.bundles.declaration import load_bundle_declaration
from mkt.bundles.dependencies import ConflictPolicy, resolve_dependencies, stage_bundle
from mkt.bundles.index import (
    build_bundle_entry,
    collect_packages,
    list_bundle_dirs,
    new_index,
    write_index,
)
from mkt.bundles.model import BundleDeclaration, IndexDocument
from mkt.core.config import MarketplaceConfig
from mkt.core.result import Err, Ok, Result
from mkt.git.repository import Repository
from mkt.output.console import ConsoleProtocol, Style
from mkt.services.archive import zip_directory
from mkt.services.github import (
    create_release,
    ensure_gh_auth,
    ensure_gh_available,
    upload_assets,
)
from mkt.services.packaging import (
    ArtifactLayout,
    PackagingBackend,
    generate_install_manifest,
    generate_uninstall,
    prepare_artifact_root,
)

__all__ = [
    "INDEX_FILE",
    "ReleaseSettings",
    "RunReport",
    "WITH_DEPENDENCIES",
    "release_bundles",
]

INDEX_FILE = "index.json"
WITH_DEPENDENCIES = "with-dependencies"

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ReleaseSettings:
    """Inputs of one release run.

    Attributes:
        workspace_root: Repository root holding marketplace.json.
        config: Parsed marketplace configuration.
        version: Release version, written to every bundle entry.
        tag: Release tag; defaults to ``v<version>``.
        api_version: API version written into generated manifests.
        out_dir: Where artifacts, archives and index.json go.
        backend: "sf" runs the Salesforce CLI, "builtin" maps folders itself.
        conflict_policy: What to do when a dependency file already exists.
        repo: GitHub repository slug (owner/name) for publishing.
        publish: Create the release and upload assets.
        dry_run: Build everything, publish nothing.
        discard_changes: Restore the working tree at the end of the run.
    """

    workspace_root: Path
    config: MarketplaceConfig
    version: str
    tag: str | None = None
    api_version: str = DEFAULT_API_VERSION
    out_dir: Path | None = None
    backend: PackagingBackend = "sf"
    conflict_policy: ConflictPolicy = "warn"
    repo: str | None = None
    publish: bool = True
    dry_run: bool = False
    discard_changes: bool = False

    @property
    def release_tag(self) -> str:
        return self.tag or f"v{self.version}"

    @property
    def output_dir(self) -> Path:
        return self.out_dir or self.workspace_root / ".mkt" / "dist"

    @property
    def repository(self) -> str | None:
        return self.repo or os.environ.get("GITHUB_REPOSITORY") or None


@dataclass
class RunReport:
    """Errors, warnings and outputs collected over a run."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    archives: list[Path] = field(default_factory=list)
    index: IndexDocument | None = None
    index_path: Path | None = None
    uploaded: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def error(self, message: str, console: ConsoleProtocol | None = None) -> None:
        self.errors.append(message)
        if console is not None:
            console.error(message)

    def warn(self, message: str, console: ConsoleProtocol | None = None) -> None:
        self.warnings.append(message)
        if console is not None:
            console.warning(message)

    def record(
        self,
        result: Result[T, object],
        prefix: str,
        console: ConsoleProtocol | None = None,
    ) -> T | None:
        """Return the value of an Ok, or record an Err as "prefix: message"."""
        if isinstance(result, Ok):
            return result.value
        self.error(f"{prefix}: {_describe(result.error)}", console)
        return None

    def failure_message(self) -> str:
        return "\n".join(self.errors)


def _describe(error: object) -> str:
    pretty = getattr(error, "pretty", None)
    if callable(pretty):
        return str(pretty())
    message = getattr(error, "message", None)
    if isinstance(message, str):
        return message
    return str(error)


def _package_variant(
    *,
    layout: ArtifactLayout,
    settings: ReleaseSettings,
    report: RunReport,
    console: ConsoleProtocol,
    label: str,
) -> bool:
    """Install manifest then uninstall descriptors; False if install failed."""
    install = report.record(
        generate_install_manifest(
            layout,
            api_version=settings.api_version,
            backend=settings.backend,
            console=console,
        ),
        f"{label}: install",
        console,
    )
    if install is None:
        return False

    report.record(generate_uninstall(layout), f"{label}: uninstall", console)
    return True


def _archive_variant(
    *,
    layout: ArtifactLayout,
    out_dir: Path,
    stem: str,
    report: RunReport,
    console: ConsoleProtocol,
) -> None:
    for source, name in (
        (layout.install_dir, f"{stem}.zip"),
        (layout.uninstall_dir, f"{stem}-uninstall.zip"),
    ):
        if not source.is_dir():
            continue
        archive = report.record(zip_directory(source, out_dir / name), f"{stem}: archive", console)
        if archive is not None:
            report.archives.append(archive)
            console.print(f"  {archive.name}", Style.DIM)


def _release_bundle(
    bundle_dir: Path,
    declaration: BundleDeclaration,
    *,
    settings: ReleaseSettings,
    report: RunReport,
    console: ConsoleProtocol,
) -> None:
    bundle_id = declaration.id
    bundle_out = settings.output_dir / bundle_id

    layout = report.record(prepare_artifact_root(bundle_out), bundle_id, console)
    if layout is None:
        return
    if report.record(stage_bundle(bundle_dir, layout.install_dir), bundle_id, console) is None:
        return
    if _package_variant(
        layout=layout,
        settings=settings,
        report=report,
        console=console,
        label=bundle_id,
    ):
        _archive_variant(
            layout=layout,
            out_dir=settings.output_dir,
            stem=bundle_id,
            report=report,
            console=console,
        )

    if not declaration.has_dependencies:
        return

    label = f"{bundle_id} ({WITH_DEPENDENCIES})"
    deps_layout = report.record(
        prepare_artifact_root(bundle_out / WITH_DEPENDENCIES), label, console
    )
    if deps_layout is None:
        return
    if report.record(stage_bundle(bundle_dir, deps_layout.install_dir), label, console) is None:
        return

    merge = report.record(
        resolve_dependencies(
            bundle_dir,
            declaration.dependencies,
            deps_layout.install_dir,
            policy=settings.conflict_policy,
        ),
        label,
        console,
    )
    if merge is None:
        return
    for rel in merge.skipped:
        report.warn(f"{label}: kept existing {rel}", console)

    if _package_variant(
        layout=deps_layout,
        settings=settings,
        report=report,
        console=console,
        label=label,
    ):
        _archive_variant(
            layout=deps_layout,
            out_dir=settings.output_dir,
            stem=f"{bundle_id}-{WITH_DEPENDENCIES}",
            report=report,
            console=console,
        )


def _build_bundles(
    settings: ReleaseSettings,
    document: IndexDocument,
    report: RunReport,
    console: ConsoleProtocol,
) -> None:
    bundles_root = settings.config.bundles_dir(settings.workspace_root)
    try:
        bundle_dirs = list_bundle_dirs(bundles_root)
    except OSError as e:
        report.error(f"bundles: cannot list {bundles_root}: {e}", console)
        return

    for bundle_dir in bundle_dirs:
        console.header(bundle_dir.name)
        declaration = report.record(load_bundle_declaration(bundle_dir), bundle_dir.name, console)
        if declaration is None:
            continue

        entry = report.record(
            build_bundle_entry(bundle_dir, declaration, version=settings.version),
            bundle_dir.name,
            console,
        )

        _release_bundle(
            bundle_dir,
            declaration,
            settings=settings,
            report=report,
            console=console,
        )

        if entry is not None:
            document.bundles.append(entry)


def _collect_packages(
    settings: ReleaseSettings,
    document: IndexDocument,
    report: RunReport,
    console: ConsoleProtocol,
) -> None:
    for result in collect_packages(settings.config.packages_dir(settings.workspace_root)):
        packages = report.record(result, "packages", console)
        if packages is not None:
            document.packages.extend(packages)


def _publish(settings: ReleaseSettings, report: RunReport, console: ConsoleProtocol) -> None:
    repo = settings.repository
    if repo is None:
        report.error("publish: no repository (pass --repo or set GITHUB_REPOSITORY)", console)
        return

    root = settings.workspace_root
    available = ensure_gh_available()
    if isinstance(available, Err):
        report.record(available, "publish", console)
        return
    auth = ensure_gh_auth(workspace_root=root)
    if isinstance(auth, Err):
        report.record(auth, "publish", console)
        return

    tag = report.record(
        create_release(
            workspace_root=root,
            repo=repo,
            tag=settings.release_tag,
            title=settings.config.title or settings.release_tag,
            notes=f"Release {settings.version}",
            console=console,
        ),
        "release",
        console,
    )
    if tag is None:
        return

    assets = list(report.archives)
    if report.index_path is not None:
        assets.append(report.index_path)
    for path, result in zip(
        assets,
        upload_assets(workspace_root=root, repo=repo, tag=tag, paths=assets, console=console),
        strict=True,
    ):
        name = report.record(result, f"upload {path.name}", console)
        if name is not None:
            report.uploaded.append(name)


def _restore_worktree(settings: ReleaseSettings, report: RunReport, console: ConsoleProtocol) -> None:
    repo = Repository(settings.workspace_root)
    if not repo.exists():
        console.print("not a git checkout; nothing to restore", Style.DIM)
        return

    status = report.record(repo.status(), "git status", console)
    if status is None or status.is_clean:
        return

    console.print(f"discarding {len(status.entries)} local change(s)", Style.DIM)
    report.record(repo.discard_changes(), "git restore", console)


def release_bundles(settings: ReleaseSettings, console: ConsoleProtocol) -> RunReport:
    """Package, index and publish every bundle; never raises for unit failures."""
    report = RunReport()
    document = new_index(settings.config)

    _build_bundles(settings, document, report, console)
    _collect_packages(settings, document, report, console)

    report.index = document
    index_path = settings.output_dir / INDEX_FILE
    try:
        report.index_path = write_index(document, index_path)
        console.success(f"index: {index_path}")
    except OSError as e:
        report.error(f"index: cannot write {index_path}: {e}", console)

    if settings.publish and not settings.dry_run:
        console.header("publish")
        _publish(settings, report, console)
    elif settings.publish:
        console.print("dry-run: skipping release and upload", Style.DIM)

    if settings.discard_changes and not settings.dry_run:
        _restore_worktree(settings, report, console)

    return report
