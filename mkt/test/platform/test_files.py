from __future__ import annotations

import os
from pathlib import Path

import pytest

from mkt.platform.files import atomic_write_text


def test_creates_parent_dirs(tmp_path: Path) -> None:
    path = tmp_path / ".mkt" / "dist" / "index.json"
    atomic_write_text(path, '{"bundles": []}\n')

    assert path.read_text(encoding="utf-8") == '{"bundles": []}\n'


def test_replaces_existing_content(tmp_path: Path) -> None:
    path = tmp_path / "package.xml"
    path.write_text("old", encoding="utf-8")

    atomic_write_text(path, "new")

    assert path.read_text(encoding="utf-8") == "new"


def test_leaves_no_temp_file_when_replace_fails(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    path = tmp_path / "package.xml"

    def fail_replace(_src: Path, _dst: Path) -> None:
        raise OSError("replace failed")

    monkeypatch.setattr(os, "replace", fail_replace)

    with pytest.raises(OSError, match="replace failed"):
        atomic_write_text(path, "payload")

    assert list(tmp_path.iterdir()) == []
