"""Core worktree logic for tak."""

from .registry import WorktreeRegistry
from .manager import WorktreeManager
from .doctor import Doctor

__all__ = ["WorktreeRegistry", "WorktreeManager", "Doctor"]
