"""Development database cleanup."""

from typing import Optional

from tak.services.command_runner import CommandRunner
from tak.utils.logging import get_logger

logger = get_logger(__name__)


class DatabaseService:
    """Service for dropping worktree databases with the PostgreSQL CLI."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def drop_database(self, database: str) -> tuple[bool, Optional[str]]:
        """Drop a database.

        Args:
            database: Name of the database to drop

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        result = self.runner.run(["dropdb", database])
        if result.ok:
            logger.info(f"Dropped database {database}")
            return True, None

        error_msg = result.output or f"dropdb exited with code {result.returncode}"
        logger.info(f"Database {database} not dropped: {error_msg}")
        return False, error_msg
