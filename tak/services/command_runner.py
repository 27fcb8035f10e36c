"""Subprocess wrapper for the external tools tak drives."""

import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional

from tak.utils.logging import get_logger

logger = get_logger(__name__)

# Exit status reported when the program itself cannot be started
COMMAND_NOT_FOUND = 127


@dataclass
class CommandResult:
    """Captured outcome of one external command."""

    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, stripped."""
        return "\n".join(part.strip() for part in (self.stdout, self.stderr) if part.strip())


class CommandRunner:
    """Runs programs and captures their output.

    Every non-git tool (lsof, dropdb, mise, mix) goes through this class so
    tests can swap in a fake.
    """

    def run(
        self,
        args: List[str],
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> CommandResult:
        """Run a command to completion.

        Args:
            args: Program and arguments
            cwd: Working directory for the command
            env: Extra environment variables, merged over the current environment

        Returns:
            CommandResult; a missing program yields exit status 127 instead of raising
        """
        logger.debug(f"Running: {' '.join(args)}" + (f" (in {cwd})" if cwd else ""))

        full_env = None
        if env:
            full_env = {**os.environ, **env}

        try:
            completed = subprocess.run(
                args,
                cwd=cwd,
                env=full_env,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            logger.debug(f"Command not found: {args[0]}")
            return CommandResult(args, COMMAND_NOT_FOUND, "", str(e))

        result = CommandResult(args, completed.returncode, completed.stdout, completed.stderr)
        if not result.ok:
            logger.debug(f"Command exited {result.returncode}: {result.output}")
        return result

    def which(self, program: str) -> Optional[str]:
        """Return the path of program if it is on PATH."""
        return shutil.which(program)
