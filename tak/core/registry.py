"""Name, port and state resolution for worktree slots."""

import os
from pathlib import Path
from typing import List, Optional

from tak.config import Config
from tak.constants import UNKNOWN_BRANCH
from tak.exceptions import (
    AllSlotsOccupiedError,
    InvalidNameError,
    SlotOccupiedError,
    WorktreeNotFoundError,
)
from tak.models.worktree import WorktreeSlot
from tak.services import project_files
from tak.services.command_runner import CommandRunner
from tak.services.git.worktrees import WorktreeService
from tak.services.port_service import PortService
from tak.utils.logging import get_logger

logger = get_logger(__name__)


class WorktreeRegistry:
    """Resolves configured names to ports, databases and on-disk state.

    Nothing is cached: every query reads the filesystem, git and the OS
    afresh, so results always reflect the current state.
    """

    def __init__(
        self,
        repo_path: str,
        config: Config,
        runner: Optional[CommandRunner] = None,
        worktree_service: Optional[WorktreeService] = None,
    ):
        """Initialize the registry.

        Args:
            repo_path: Path to the main repository root
            config: Validated Config object
            runner: Command runner for lsof; a real one by default
            worktree_service: Git worktree service; one for repo_path by default
        """
        self.repo_path = repo_path
        self.config = config
        self.runner = runner or CommandRunner()
        self.worktree_service = worktree_service or WorktreeService(repo_path)
        self.port_service = PortService(self.runner)

    @property
    def trees_path(self) -> Path:
        return Path(self.repo_path) / self.config.trees_dir

    def resolve_port(self, name: str) -> Optional[int]:
        """Calculate the port for a given worktree name.

        Returns:
            base_port + (position + 1) * 10, or None for an unconfigured name
        """
        try:
            index = self.config.names.index(name)
        except ValueError:
            return None
        return self.config.base_port + (index + 1) * 10

    def database_for(self, name: str) -> str:
        """Returns the database name for a given worktree."""
        return f"{self.config.app_name}_dev_{name}"

    def slot_path(self, name: str) -> Path:
        return self.trees_path / name

    def display_path(self, name: str) -> str:
        """Slot path relative to the repository, as shown to the user."""
        return os.path.join(self.config.trees_dir, name)

    def is_occupied(self, name: str) -> bool:
        return self.slot_path(name).is_dir()

    def occupied_slots(self) -> List[str]:
        """Names of all directories in the trees directory, sorted."""
        if not self.trees_path.is_dir():
            return []
        return sorted(entry.name for entry in self.trees_path.iterdir() if entry.is_dir())

    def pick_free_slot(self) -> str:
        """Pick the first configured name without a worktree directory.

        Raises:
            AllSlotsOccupiedError: If every name is in use
        """
        for name in self.config.names:
            if not self.is_occupied(name):
                logger.debug(f"Picked free slot {name}")
                return name
        raise AllSlotsOccupiedError(self.config.names)

    def validate_new_slot(self, name: str) -> None:
        """Check a name can be used for a new worktree.

        Raises:
            InvalidNameError: If the name is not configured
            SlotOccupiedError: If its directory already exists
        """
        if name not in self.config.names:
            raise InvalidNameError(name, self.config.names)
        if self.is_occupied(name):
            raise SlotOccupiedError(name, self.display_path(name))

    def validate_existing_slot(self, name: str) -> None:
        """Check a name refers to a worktree directory that can be removed.

        The name must be a single directory entry directly inside the trees
        directory; "." and ".." and anything resolving elsewhere are rejected.

        Raises:
            InvalidNameError: If the name is not a plain entry of the trees directory
            WorktreeNotFoundError: If the directory does not exist
        """
        separators = [sep for sep in (os.sep, os.altsep) if sep]
        if (
            name in (".", "..")
            or any(sep in name for sep in separators)
            or self.slot_path(name).resolve().parent != self.trees_path.resolve()
        ):
            raise InvalidNameError(name, self.occupied_slots())
        if not self.is_occupied(name):
            raise WorktreeNotFoundError(self.display_path(name), self.occupied_slots())

    def read_port_from_worktree(self, path) -> Optional[int]:
        return project_files.read_port_from_worktree(str(path))

    def read_branch_from_worktree(self, path) -> str:
        """Branch checked out in the worktree, or "unknown"."""
        return self.worktree_service.get_worktree_branch(str(path)) or UNKNOWN_BRANCH

    def has_database_config(self, path) -> bool:
        return project_files.has_database_config(str(path))

    def port_in_use(self, port: int) -> bool:
        return self.port_service.port_in_use(port)

    def pid_on_port(self, port: int) -> Optional[int]:
        return self.port_service.pid_on_port(port)

    def kill_port(self, port: int) -> bool:
        return self.port_service.kill_port(port)

    def inspect_slot(self, name: str) -> WorktreeSlot:
        """Collect the current state of one occupied slot.

        Each field degrades independently: an unresolvable branch becomes
        "unknown" and a missing port leaves the slot UNKNOWN.
        """
        path = self.slot_path(name)
        port = self.read_port_from_worktree(path)
        running = port is not None and self.port_in_use(port)

        return WorktreeSlot(
            name=name,
            path=self.display_path(name),
            port=port,
            branch=self.read_branch_from_worktree(path),
            database=self.database_for(name),
            running=running,
            pid=self.pid_on_port(port) if running else None,
        )
