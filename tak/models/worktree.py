"""Worktree data models."""

from dataclasses import dataclass
from typing import Optional

from tak.constants import SlotStatus, UNKNOWN_BRANCH


@dataclass
class WorktreeInfo:
    """One entry of `git worktree list --porcelain`."""

    path: str
    branch_name: str  # Empty for a detached HEAD
    commit_sha: str
    is_main: bool  # Is this the main working tree?

    def __str__(self) -> str:
        """String representation of worktree."""
        main_marker = " (main)" if self.is_main else ""
        return f"{self.branch_name or 'detached'} @ {self.path}{main_marker}"


@dataclass
class WorktreeSlot:
    """State of one named worktree, computed fresh on every command."""

    name: str
    path: str
    port: Optional[int]
    branch: str = UNKNOWN_BRANCH
    database: str = ""
    running: bool = False
    pid: Optional[int] = None

    @property
    def status(self) -> str:
        """RUNNING, STOPPED, or UNKNOWN when no port could be resolved."""
        if self.port is None:
            return SlotStatus.UNKNOWN
        return SlotStatus.RUNNING if self.running else SlotStatus.STOPPED

    @property
    def url(self) -> Optional[str]:
        """Local URL of the running server."""
        if self.port is None or not self.running:
            return None
        return f"http://localhost:{self.port}"
