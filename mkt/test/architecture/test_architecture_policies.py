"""Import and subprocess policies for the mkt package."""

from __future__ import annotations

import ast
from pathlib import Path

import pytest


def _mkt_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _source_files() -> list[Path]:
    root = _mkt_root()
    files: list[Path] = []
    for path in sorted(root.rglob("*.py")):
        rel = path.relative_to(root)
        if rel.parts[0] == "test" or "__pycache__" in rel.parts:
            continue
        files.append(path)
    return files


def _imports(path: Path) -> list[tuple[str, int]]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    out: list[tuple[str, int]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            out.extend((alias.name, node.lineno) for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
            out.append((node.module, node.lineno))
    return out


def _matches(module: str, prefix: str) -> bool:
    return module == prefix or module.startswith(prefix + ".")


def _rel(path: Path) -> str:
    return path.relative_to(_mkt_root()).as_posix()


def test_source_tree_is_not_empty() -> None:
    assert len(_source_files()) > 10


def test_subprocess_only_in_process_module() -> None:
    offenders = [
        f"{_rel(path)}:{line}"
        for path in _source_files()
        if _rel(path) != "platform/process.py"
        for module, line in _imports(path)
        if _matches(module, "subprocess")
    ]
    assert not offenders, "subprocess imported outside platform/process.py:\n" + "\n".join(offenders)


def test_rich_only_in_console_module() -> None:
    offenders = [
        f"{_rel(path)}:{line}"
        for path in _source_files()
        if _rel(path) != "output/console.py"
        for module, line in _imports(path)
        if _matches(module, "rich")
    ]
    assert not offenders, "rich imported outside output/console.py:\n" + "\n".join(offenders)


@pytest.mark.parametrize(
    ("layer", "forbidden"),
    [
        ("core", ("mkt.bundles", "mkt.services", "mkt.cli", "mkt.git", "mkt.output")),
        ("platform", ("mkt.bundles", "mkt.services", "mkt.cli", "mkt.git")),
        ("bundles", ("mkt.services", "mkt.cli", "mkt.git", "mkt.output")),
        ("git", ("mkt.services", "mkt.cli", "mkt.bundles")),
        ("services", ("mkt.cli",)),
    ],
)
def test_layers_do_not_import_upwards(layer: str, forbidden: tuple[str, ...]) -> None:
    offenders = [
        f"{_rel(path)}:{line}: {module}"
        for path in sorted((_mkt_root() / layer).rglob("*.py"))
        for module, line in _imports(path)
        if any(_matches(module, prefix) for prefix in forbidden)
    ]
    assert not offenders, f"{layer} imports a higher layer:\n" + "\n".join(offenders)
