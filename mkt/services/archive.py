"""Zip archives of artifact directories.

Archive entries are relative to the archived directory, sorted, and written
without strict timestamp checks (checked-out files may carry mtime=0).
"""

from __future__ import annotations

from collections.abc import Sequence
from fnmatch import fnmatch
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile

from mkt.core.result import Err, Ok, Result
from mkt.services.errors import ReleaseError

__all__ = ["DEFAULT_IGNORE_GLOBS", "collect_files", "zip_directory"]

DEFAULT_IGNORE_GLOBS: tuple[str, ...] = ("dist/**", "**/.DS_Store", ".DS_Store")

_COMPRESS_LEVEL = 9


def _is_ignored(rel: str, ignore_globs: Sequence[str]) -> bool:
    for pattern in ignore_globs:
        if fnmatch(rel, pattern):
            return True
        # "dist/**" also covers the directory entry itself.
        if pattern.endswith("/**") and rel == pattern[:-3]:
            return True
    return False


def collect_files(
    base_dir: Path,
    *,
    ignore_globs: Sequence[str] = DEFAULT_IGNORE_GLOBS,
) -> list[tuple[Path, str]]:
    """(source, arcname) pairs for every file under base_dir, sorted."""
    out: list[tuple[Path, str]] = []
    for p in sorted(base_dir.rglob("*")):
        if p.is_dir():
            continue
        rel = p.relative_to(base_dir).as_posix()
        if _is_ignored(rel, ignore_globs):
            continue
        out.append((p, rel))
    return out


def zip_directory(
    source_dir: Path,
    zip_path: Path,
    *,
    ignore_globs: Sequence[str] = DEFAULT_IGNORE_GLOBS,
) -> Result[Path, ReleaseError]:
    """Compress source_dir into zip_path."""
    if not source_dir.is_dir():
        return Err(ReleaseError(kind="archive_failed", message=f"nothing to archive: {source_dir}"))

    try:
        files = collect_files(source_dir, ignore_globs=ignore_globs)
        zip_path.parent.mkdir(parents=True, exist_ok=True)
        with ZipFile(
            zip_path,
            "w",
            compression=ZIP_DEFLATED,
            compresslevel=_COMPRESS_LEVEL,
            strict_timestamps=False,
        ) as zf:
            for src, arc in files:
                zf.write(src, arcname=arc)
    except OSError as e:
        return Err(ReleaseError(kind="archive_failed", message=f"cannot write {zip_path.name}: {e}"))

    return Ok(zip_path)
