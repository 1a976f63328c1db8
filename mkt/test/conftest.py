from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

BundleFactory = Callable[..., Path]


def write_json(path: Path, data: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def write_text(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("MKT_WORKSPACE", "GITHUB_WORKSPACE", "GITHUB_REPOSITORY", "CI"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def marketplace(tmp_path: Path) -> Path:
    """Workspace with two bundles (beta depends on alpha) and one package.

    bundles/alpha: classes/AlphaService.cls, objects/Alpha__c/...
    bundles/beta:  classes/BetaService.cls, depends on alpha
    packages/core: one package descriptor + README
    """
    root = tmp_path / "ws"
    write_json(
        root / "marketplace.json",
        {
            "title": "Test Marketplace",
            "description": "Bundles for tests",
            "paths": {"bundles": "bundles", "packages": "packages"},
        },
    )

    alpha = root / "bundles" / "alpha"
    write_json(alpha / "info.json", {"name": "Alpha", "description": "First bundle"})
    write_text(alpha / "README.md", "# Alpha\n")
    write_text(alpha / "classes" / "AlphaService.cls", "public class AlphaService {}")
    write_text(alpha / "classes" / "AlphaService.cls-meta.xml", "<ApexClass/>")
    write_text(alpha / "objects" / "Alpha__c" / "Alpha__c.object-meta.xml", "<CustomObject/>")
    write_text(
        alpha / "objects" / "Alpha__c" / "fields" / "Score__c.field-meta.xml", "<CustomField/>"
    )

    beta = root / "bundles" / "beta"
    write_json(
        beta / "info.json",
        {
            "label": "Beta",
            "description": "Second bundle",
            "dependencies": ["alpha"],
            "tags": ["sales"],
            "iconUrl": "https://example.com/beta.png",
        },
    )
    write_text(beta / "classes" / "BetaService.cls", "public class BetaService {}")
    write_text(beta / "classes" / "BetaService.cls-meta.xml", "<ApexClass/>")

    write_json(
        root / "packages" / "core" / "info.json",
        {
            "name": "Core",
            "namespace": "core",
            "packageId": "0Ho000000000001",
            "versionId": "04t000000000001",
            "description": "Core package",
            "version": "1.2.0",
        },
    )
    write_text(root / "packages" / "core" / "README.md", "# Core\n")
    return root


@pytest.fixture
def make_bundle(tmp_path: Path) -> BundleFactory:
    """Factory: make_bundle("name", info={...}, files={"classes/A.cls": "..."})."""

    def _make(
        name: str,
        *,
        info: Mapping[str, object] | None = None,
        files: Mapping[str, str] | None = None,
        root: Path | None = None,
    ) -> Path:
        bundle_dir = (root or tmp_path / "bundles") / name
        bundle_dir.mkdir(parents=True, exist_ok=True)
        if info is not None:
            write_json(bundle_dir / "info.json", dict(info))
        for rel, content in (files or {}).items():
            write_text(bundle_dir / rel, content)
        return bundle_dir

    return _make
