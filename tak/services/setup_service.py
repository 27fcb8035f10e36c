"""Project setup inside a freshly created worktree."""

from typing import List

from tak.exceptions import SetupError
from tak.services.command_runner import CommandRunner
from tak.utils.logging import get_logger

logger = get_logger(__name__)

DEPS_COMMAND = ["mix", "deps.get"]
DATABASE_COMMAND = ["mix", "ecto.setup"]
SETUP_ENV = {"MIX_ENV": "dev"}


class SetupService:
    """Runs the host project's setup tasks and optional mise integration."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def mise_available(self) -> bool:
        """Check if mise is available on the system."""
        return self.runner.which("mise") is not None

    def trust_mise_config(self, mise_path: str) -> bool:
        """Mark a mise config as trusted so it loads without prompting."""
        result = self.runner.run(["mise", "trust", mise_path])
        if not result.ok:
            logger.warning(f"mise trust failed for {mise_path}: {result.output}")
        return result.ok

    def run_in_worktree(self, worktree_path: str, args: List[str]) -> None:
        """Run a setup command in the worktree, raising SetupError on failure."""
        result = self.runner.run(args, cwd=worktree_path, env=SETUP_ENV)
        if not result.ok:
            raise SetupError(" ".join(args), worktree_path, result.output or None)

    def fetch_dependencies(self, worktree_path: str) -> None:
        self.run_in_worktree(worktree_path, DEPS_COMMAND)

    def setup_database(self, worktree_path: str) -> None:
        self.run_in_worktree(worktree_path, DATABASE_COMMAND)
