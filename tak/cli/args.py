"""Command-line argument parsing for tak."""

import argparse
import sys

from tak.__version__ import __version__


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors exit with status 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> ArgumentParser:
    """Build the tak argument parser with its subcommands."""
    parser = ArgumentParser(
        prog="tak",
        description="Git worktrees with isolated ports and databases for parallel Phoenix development",
        epilog="Configure names, base_port, trees_dir and create_database in tak.json "
        "at the repository root.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"tak {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    create = subparsers.add_parser(
        "create",
        help="Create a new worktree with its own port and database",
        description="Create a git worktree in trees/<name>/ with config/dev.local.exs "
        "setting an isolated port and database, then fetch dependencies and set up the database.",
    )
    create.add_argument("branch", nargs="?", help="Branch to check out (created if missing)")
    create.add_argument("name", nargs="?", help="Worktree name (default: first free name)")
    create.add_argument(
        "--db",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Create an isolated database (default: create_database from tak.json, true)",
    )

    subparsers.add_parser(
        "list",
        help="List all worktrees and their status",
        description="Show branch, port, database and running status for each worktree.",
    )

    remove = subparsers.add_parser(
        "remove",
        help="Remove a worktree and clean up its resources",
        description="Stop the server on the worktree's port, remove the worktree, "
        "delete its branch and drop its database.",
    )
    remove.add_argument("name", nargs="?", help="Worktree name to remove")
    remove.add_argument(
        "--force",
        action="store_true",
        help="Remove even with uncommitted changes and delete unmerged branches",
    )

    subparsers.add_parser(
        "doctor",
        help="Check if the project is configured for tak",
        description="Verify dev.local.exs is imported and ignored, trees/ is ignored, "
        "and git, mise and dropdb are available.",
    )

    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
