"""Create, list and remove worktrees."""

import shutil
from typing import List, Optional

from tak.config import Config
from tak.constants import UNKNOWN_BRANCH
from tak.core.registry import WorktreeRegistry
from tak.exceptions import UsageError, WorktreeRemovalError
from tak.models.worktree import WorktreeSlot
from tak.services import project_files
from tak.services.command_runner import CommandRunner
from tak.services.database_service import DatabaseService
from tak.services.display_service import DisplayService
from tak.services.git.worktrees import WorktreeService
from tak.services.setup_service import SetupService
from tak.utils.logging import get_logger

logger = get_logger(__name__)

CREATE_USAGE = "tak create <branch-name> [name] [--db | --no-db]"
REMOVE_USAGE = "tak remove <name> [--force]"


class WorktreeManager:
    """Runs the create, list and remove commands."""

    def __init__(
        self,
        repo_path: str,
        config: Config,
        runner: Optional[CommandRunner] = None,
        display: Optional[DisplayService] = None,
    ):
        """Initialize the manager.

        Args:
            repo_path: Path to the main repository root
            config: Validated Config object
            runner: Command runner for non-git tools
            display: Output renderer
        """
        self.repo_path = repo_path
        self.config = config
        self.runner = runner or CommandRunner()
        self.display = display or DisplayService()

        self.worktree_service = WorktreeService(repo_path)
        self.registry = WorktreeRegistry(repo_path, config, self.runner, self.worktree_service)
        self.database_service = DatabaseService(self.runner)
        self.setup_service = SetupService(self.runner)

    def create(
        self,
        branch: Optional[str],
        name: Optional[str] = None,
        create_database: Optional[bool] = None,
    ) -> WorktreeSlot:
        """Create a worktree with its own port and database.

        All validation happens before anything is written.

        Args:
            branch: Branch to check out, created from HEAD if it does not exist
            name: Slot name; the first free configured name when omitted
            create_database: Overrides config.create_database when not None

        Returns:
            The new slot
        """
        if not branch:
            raise UsageError(CREATE_USAGE, hint=f"Available names: {', '.join(self.config.names)}")

        name = name or self.registry.pick_free_slot()
        self.registry.validate_new_slot(name)

        port = self.registry.resolve_port(name)
        if self.registry.port_in_use(port):
            self.display.warn(f"Port {port} is already in use")

        use_database = self.config.create_database if create_database is None else create_database
        database = self.registry.database_for(name) if use_database else None

        worktree_path = self.registry.slot_path(name)
        location = self.registry.display_path(name)
        worktree_path.parent.mkdir(parents=True, exist_ok=True)

        self.display.step(f"Creating worktree '{name}' for branch '{branch}'...")
        self.worktree_service.add_worktree(str(worktree_path), branch)

        if project_files.copy_env_file(self.repo_path, str(worktree_path)):
            self.display.step("Copied .env")

        block = project_files.render_managed_block(
            self.config.app_name, self.config.module_name, name, port, database
        )
        project_files.write_dev_local_config(self.repo_path, str(worktree_path), block)

        if self.setup_service.mise_available():
            mise_path = project_files.write_mise_config(str(worktree_path), port)
            self.setup_service.trust_mise_config(str(mise_path))

        self.display.step("Fetching dependencies...")
        self.setup_service.fetch_dependencies(str(worktree_path))

        if use_database:
            self.display.step("Setting up database...")
            self.setup_service.setup_database(str(worktree_path))

        self.display.created(name, branch, port, database, location)
        logger.info(f"Created worktree {name} on port {port}")

        return WorktreeSlot(
            name=name,
            path=location,
            port=port,
            branch=branch,
            database=database or "",
        )

    def list_worktrees(self) -> List[WorktreeSlot]:
        """Show the main repository and every worktree with its status.

        Returns:
            The inspected slots, excluding the main repository
        """
        main_branch = self.worktree_service.get_current_branch() or UNKNOWN_BRANCH
        main_running = self.registry.port_in_use(self.config.base_port)

        slots = [self.registry.inspect_slot(name) for name in self.registry.occupied_slots()]

        self.display.worktree_list(
            main_branch, self.config.base_port, main_running, slots, self.config.trees_dir
        )
        return slots

    def remove(self, name: Optional[str], force: bool = False) -> bool:
        """Remove a worktree and clean up its port, branch and database.

        Only the worktree removal itself can fail the command; every later
        step is best effort and only reported.

        Args:
            name: Name of the worktree directory
            force: Remove despite uncommitted changes and delete unmerged branches

        Returns:
            True if the database was dropped
        """
        if not name:
            available = self.registry.occupied_slots()
            hint = f"Available: {', '.join(available)}" if available else None
            raise UsageError(REMOVE_USAGE, hint=hint)

        self.registry.validate_existing_slot(name)
        worktree_path = self.registry.slot_path(name)
        location = self.registry.display_path(name)

        # Gather everything needed for cleanup and reporting before removal
        branch = self.registry.read_branch_from_worktree(worktree_path)
        port = self.registry.read_port_from_worktree(worktree_path)
        database = self.registry.database_for(name)
        manages_database = self.registry.has_database_config(worktree_path)

        if port is not None:
            self.display.step(f"Stopping services on port {port}...")
            self.registry.kill_port(port)

        self.display.step("Removing worktree...")
        removed, error_msg = self.worktree_service.remove_worktree(str(worktree_path), force=force)
        if not removed:
            if not force:
                raise WorktreeRemovalError(location, error_msg)
            logger.warning(f"Forced removal reported an error, continuing: {error_msg}")

        # Clean up any orphaned files
        if worktree_path.exists():
            shutil.rmtree(worktree_path, ignore_errors=True)
        self.worktree_service.prune_worktrees()

        if branch != UNKNOWN_BRANCH:
            self.display.step(f"Deleting branch {branch}...")
            deleted, _ = self.worktree_service.delete_branch(branch, force=force)
            if not deleted:
                self.display.info("Branch not deleted (unmerged changes or doesn't exist)")

        dropped = False
        if manages_database:
            self.display.step(f"Dropping database {database}...")
            dropped, _ = self.database_service.drop_database(database)
            if not dropped:
                self.display.info("Database not dropped (may not exist)")
        else:
            logger.info(f"No tak database config in {location}, not dropping {database}")

        self.display.removed(
            name, branch if branch != UNKNOWN_BRANCH else None, database, dropped
        )
        return dropped
