"""Data models for tak."""

from .worktree import WorktreeInfo, WorktreeSlot

__all__ = ["WorktreeInfo", "WorktreeSlot"]
