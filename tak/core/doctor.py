"""Configuration health check for a host project."""

import os
from typing import Optional

from tak.config import Config
from tak.constants import DEV_CONFIG, DEV_LOCAL_CONFIG, GITIGNORE
from tak.services.command_runner import CommandRunner
from tak.services.display_service import DisplayService
from tak.utils.logging import get_logger

logger = get_logger(__name__)

DEV_LOCAL_IMPORT_FIX = """
Add to the end of config/dev.exs:

    import_config "dev.local.exs"

Then create an empty config/dev.local.exs:

    import Config
"""


class Doctor:
    """Checks that the project and machine are set up for tak.

    Each check reports on its own; a failing check never stops the others.
    Missing optional tools are warnings and count as passed.
    """

    def __init__(
        self,
        repo_path: str,
        config: Config,
        runner: Optional[CommandRunner] = None,
        display: Optional[DisplayService] = None,
    ):
        self.repo_path = repo_path
        self.config = config
        self.runner = runner or CommandRunner()
        self.display = display or DisplayService()

    def run(self) -> tuple[int, int]:
        """Run all checks.

        Returns:
            Tuple of (passed, failed)
        """
        self.display.doctor_header()

        trees_dir = self.config.trees_dir.rstrip("/")
        checks = [
            self.check_dev_local_import(),
            self.check_gitignore("dev.local.exs", DEV_LOCAL_CONFIG),
            self.check_gitignore(trees_dir, f"{trees_dir}/"),
            self.check_tool("git", required=True),
            self.check_tool("mise", reason="Not found (optional, for port config)"),
            self.check_tool("dropdb", reason="Not found (needed for tak remove)"),
        ]

        passed = sum(1 for ok in checks if ok)
        failed = len(checks) - passed
        self.display.doctor_summary(passed, failed)
        return passed, failed

    def _read(self, relative_path: str) -> Optional[str]:
        try:
            with open(os.path.join(self.repo_path, relative_path), encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            logger.debug(f"Could not read {relative_path}: {e}")
            return None

    def check_dev_local_import(self) -> bool:
        """config/dev.exs must import dev.local.exs for the worktree config to apply."""
        content = self._read(DEV_CONFIG)
        if content is None:
            self.display.check("error", f"{DEV_CONFIG} exists", "File not found")
            return False

        if "dev.local.exs" in content:
            self.display.check("ok", f"{DEV_CONFIG} imports dev.local.exs")
            return True

        self.display.check("error", f"{DEV_CONFIG} imports dev.local.exs", "Missing import")
        self.display.fix(DEV_LOCAL_IMPORT_FIX)
        return False

    def check_gitignore(self, pattern: str, display: str) -> bool:
        """Check that a path is covered by a .gitignore entry."""
        content = self._read(GITIGNORE)
        if content is None:
            self.display.check("error", f"{display} in .gitignore", ".gitignore not found")
            return False

        if is_ignored(content, pattern):
            self.display.check("ok", f"{display} in .gitignore")
            return True

        self.display.check("error", f"{display} in .gitignore", "Not ignored")
        self.display.fix(f"Add to .gitignore:\n\n    {display}")
        return False

    def check_tool(self, program: str, required: bool = False, reason: str = "Not found") -> bool:
        """Check that an external tool is on PATH."""
        if self.runner.which(program):
            self.display.check("ok", f"{program} available")
            return True

        if required:
            self.display.check("error", f"{program} available", reason)
            return False

        self.display.check("warn", f"{program} available", reason)
        return True


def is_ignored(gitignore: str, pattern: str) -> bool:
    """Check whether any non-comment .gitignore line mentions the pattern."""
    for line in gitignore.split("\n"):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if pattern in line:
            return True
    return False
