"""Entry point for the tak command."""

import os
import sys

from rich.console import Console

from tak.cli.args import parse_args
from tak.config import load_config
from tak.core.doctor import Doctor
from tak.core.manager import WorktreeManager
from tak.exceptions import TakError, UsageError
from tak.services.display_service import DisplayService
from tak.utils.logging import get_logger, setup_logging

console = Console()
logger = get_logger(__name__)


def main(argv=None) -> int:
    """Main entry point for the application."""
    debug = False
    display = DisplayService()
    try:
        parsed_args = parse_args(argv)
        debug = parsed_args.debug

        log_file = setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        repo_path = os.getcwd()
        config = load_config(
            repo_path, {"verbose": parsed_args.verbose, "debug": parsed_args.debug}
        )

        if parsed_args.debug:
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")
            console.print(f"[yellow]Debug log:[/yellow] {log_file}")

        if parsed_args.command == "doctor":
            Doctor(repo_path, config, display=display).run()
            return 0

        manager = WorktreeManager(repo_path, config, display=display)
        if parsed_args.command == "create":
            manager.create(parsed_args.branch, parsed_args.name, create_database=parsed_args.db)
        elif parsed_args.command == "list":
            manager.list_worktrees()
        elif parsed_args.command == "remove":
            manager.remove(parsed_args.name, force=parsed_args.force)

        return 0
    except UsageError as e:
        display.usage(e.usage, e.hint)
        return 1
    except TakError as e:
        display.error(str(e), e.hint)
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        display.error(str(e))
        if debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
