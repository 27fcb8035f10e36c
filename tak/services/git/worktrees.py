"""Worktree operations service for tak."""

import os
from typing import Optional

import git

from tak.constants import HEADS_PREFIX
from tak.exceptions import GitOperationError
from tak.models.worktree import WorktreeInfo
from tak.utils.logging import get_logger

logger = get_logger(__name__)


def _describe_git_error(operation: str, e: Exception) -> str:
    """Build a readable message from a git failure."""
    if not isinstance(e, git.exc.GitCommandError):
        return f"git {operation} failed: {type(e).__name__}: {e}"

    stderr = (e.stderr if hasattr(e, "stderr") and e.stderr else str(e)).strip()
    status = e.status if hasattr(e, "status") else "unknown"

    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:"):].strip().strip("'").strip()

    if stderr:
        return f"git {operation} failed (exit {status}): {stderr}"
    return f"git {operation} failed with exit code {status}"


def parse_worktree_porcelain(output: str) -> list[WorktreeInfo]:
    """Parse `git worktree list --porcelain` output.

    Format, one block per worktree separated by a blank line:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name   (or "detached")
    """
    worktrees = []
    for block in output.split("\n\n"):
        fields = {}
        for line in block.splitlines():
            key, _, value = line.strip().partition(" ")
            if key:
                fields[key] = value

        path = fields.get("worktree")
        if not path:
            continue

        branch_name = ""
        branch_ref = fields.get("branch", "")
        if branch_ref.startswith(HEADS_PREFIX):
            branch_name = branch_ref[len(HEADS_PREFIX):]

        worktrees.append(
            WorktreeInfo(
                path=path,
                branch_name=branch_name,
                commit_sha=fields.get("HEAD", ""),
                # First worktree in list is always the main one
                is_main=not worktrees,
            )
        )
    return worktrees


class WorktreeService:
    """Service for managing git worktrees and their branches."""

    def __init__(self, repo_path: str):
        """Initialize the worktree service.

        Args:
            repo_path: Path to the main git repository
        """
        self.repo_path = repo_path

    def _get_repo(self):
        """Get a git.Repo instance for the main repository."""
        return git.Repo(self.repo_path)

    def list_worktrees(self) -> list[WorktreeInfo]:
        """Get information about all worktrees.

        Returns:
            List of WorktreeInfo objects; empty if git cannot list them
        """
        try:
            repo = self._get_repo()
            output = repo.git.worktree("list", "--porcelain")
        except (git.exc.GitError, OSError) as e:
            logger.debug(f"Could not list worktrees: {e}")
            return []

        worktrees = parse_worktree_porcelain(output)
        logger.debug(f"Found {len(worktrees)} worktrees")
        for wt in worktrees:
            logger.debug(f"  {wt}")
        return worktrees

    def get_worktree_branch(self, worktree_path: str) -> Optional[str]:
        """Get the branch checked out in the worktree at the given path.

        git reports canonical absolute paths, so the path is resolved
        before comparing.

        Returns:
            Branch name, or None if the worktree is unknown or detached
        """
        target = os.path.realpath(worktree_path)
        for wt in self.list_worktrees():
            if os.path.realpath(wt.path) == target:
                return wt.branch_name or None
        return None

    def get_current_branch(self) -> Optional[str]:
        """Get the branch checked out in the main repository."""
        try:
            repo = self._get_repo()
            branch = repo.git.branch("--show-current").strip()
        except (git.exc.GitError, OSError) as e:
            logger.debug(f"Could not get current branch: {e}")
            return None
        return branch or None

    def branch_exists(self, branch_name: str) -> bool:
        """Check if a local branch exists."""
        try:
            repo = self._get_repo()
            repo.git.show_ref("--verify", "--quiet", f"refs/heads/{branch_name}")
            return True
        except git.exc.GitCommandError:
            return False

    def add_worktree(self, path: str, branch_name: str) -> bool:
        """Create a worktree at path for the branch.

        An existing local branch is checked out; otherwise a new branch is
        created from the current HEAD.

        Returns:
            True if a new branch was created

        Raises:
            GitOperationError: If git refuses to create the worktree
        """
        create_branch = not self.branch_exists(branch_name)
        if create_branch:
            args = ["add", "-b", branch_name, path]
        else:
            args = ["add", path, branch_name]

        try:
            repo = self._get_repo()
            repo.git.worktree(*args)
        except git.exc.GitCommandError as e:
            error_msg = _describe_git_error("worktree add", e)
            logger.error(f"Failed to add worktree at {path}: {error_msg}")
            raise GitOperationError("worktree add", error_msg) from e

        logger.info(f"Added worktree at {path} for branch {branch_name}")
        return create_branch

    def remove_worktree(self, path: str, force: bool = False) -> tuple[bool, Optional[str]]:
        """Remove a worktree at the specified path.

        Args:
            path: Path to the worktree directory
            force: Force removal even if working tree is dirty or locked

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        args = ["remove", path]
        if force:
            args.append("--force")

        try:
            repo = self._get_repo()
            repo.git.worktree(*args)
        except (git.exc.GitError, OSError) as e:
            error_msg = _describe_git_error("worktree remove", e)
            logger.info(f"Failed to remove worktree at {path}: {error_msg}")
            return False, error_msg

        logger.info(f"Removed worktree at {path}")
        return True, None

    def prune_worktrees(self) -> tuple[bool, Optional[str]]:
        """Prune orphaned worktree metadata.

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            repo = self._get_repo()
            repo.git.worktree("prune")
        except (git.exc.GitError, OSError) as e:
            error_msg = _describe_git_error("worktree prune", e)
            logger.info(f"Failed to prune worktrees: {error_msg}")
            return False, error_msg

        logger.info("Pruned orphaned worktree metadata")
        return True, None

    def delete_branch(self, branch_name: str, force: bool = False) -> tuple[bool, Optional[str]]:
        """Delete a local branch.

        Without force git refuses to delete unmerged branches.

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            repo = self._get_repo()
            repo.git.branch("-D" if force else "-d", branch_name)
        except (git.exc.GitError, OSError) as e:
            error_msg = _describe_git_error("branch delete", e)
            logger.info(f"Branch {branch_name} not deleted: {error_msg}")
            return False, error_msg

        logger.info(f"Deleted branch {branch_name}")
        return True, None
