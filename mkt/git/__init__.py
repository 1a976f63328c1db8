"""Git operations.

Usage:
    from mkt.git import Repository

    repo = Repository(Path("/path/to/repo"))
    match repo.status():
        case Ok(status) if not status.is_clean:
            repo.discard_changes()
"""

from mkt.git.repository import (
    GitError,
    GitStatus,
    Repository,
    StatusEntry,
)

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
]
