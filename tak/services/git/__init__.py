"""Git-related services for tak."""

from .worktrees import WorktreeService

__all__ = [
    "WorktreeService",
]
