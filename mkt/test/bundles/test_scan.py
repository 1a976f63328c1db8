from __future__ import annotations

from pathlib import Path

import pytest

from mkt.bundles.scan import group_paths, relative_files, subdirectories


def _touch(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("x", encoding="utf-8")


def _symlink(link: Path, target: Path) -> None:
    link.parent.mkdir(parents=True, exist_ok=True)
    try:
        link.symlink_to(target, target_is_directory=target.is_dir())
    except OSError as e:
        pytest.skip(f"symlinks unavailable: {e}")


def test_group_paths_by_top_level_folder(tmp_path: Path) -> None:
    _touch(tmp_path / "info.json")
    _touch(tmp_path / "README.md")
    _touch(tmp_path / "classes" / "B.cls")
    _touch(tmp_path / "classes" / "A.cls")
    _touch(tmp_path / "objects" / "Account" / "fields" / "X.field-meta.xml")

    grouped = group_paths(tmp_path)

    root = tmp_path.resolve().as_posix()
    assert list(grouped) == ["classes", "objects"]
    assert grouped["classes"] == [f"{root}/classes/A.cls", f"{root}/classes/B.cls"]
    assert grouped["objects"] == [
        f"{root}/objects/Account",
        f"{root}/objects/Account/fields",
        f"{root}/objects/Account/fields/X.field-meta.xml",
    ]


def test_group_paths_skips_ignored_names(tmp_path: Path) -> None:
    _touch(tmp_path / "dist" / "old.zip")
    _touch(tmp_path / "classes" / ".DS_Store")
    _touch(tmp_path / "classes" / "A.cls")

    grouped = group_paths(tmp_path)

    assert list(grouped) == ["classes"]
    assert [Path(p).name for p in grouped["classes"]] == ["A.cls"]


def test_subdirectories_sorted(tmp_path: Path) -> None:
    (tmp_path / "triggers").mkdir()
    (tmp_path / "classes").mkdir()
    _touch(tmp_path / "info.json")

    assert [p.name for p in subdirectories(tmp_path)] == ["classes", "triggers"]


def test_relative_files(tmp_path: Path) -> None:
    root = tmp_path.resolve().as_posix()
    assert relative_files(tmp_path, [f"{root}/classes/A.cls", f"{root}/objects/Account"]) == [
        "classes/A.cls",
        "objects/Account",
    ]


def test_symlink_outside_bundle_keeps_in_bundle_path(tmp_path: Path) -> None:
    bundle = tmp_path / "bundles" / "beta"
    shared = tmp_path / "shared" / "Util.cls"
    _touch(shared)
    _symlink(bundle / "classes" / "Util.cls", shared)

    grouped = group_paths(bundle)

    root = bundle.resolve().as_posix()
    assert grouped["classes"] == [f"{root}/classes/Util.cls"]
    assert relative_files(bundle, grouped["classes"]) == ["classes/Util.cls"]


def test_symlinked_directory_is_not_entered(tmp_path: Path) -> None:
    _touch(tmp_path / "classes" / "A.cls")
    _symlink(tmp_path / "classes" / "loop", tmp_path / "classes")

    grouped = group_paths(tmp_path)

    assert relative_files(tmp_path, grouped["classes"]) == ["classes/A.cls", "classes/loop"]
