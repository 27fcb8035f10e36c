"""Shared constants for tak."""

from typing import List


DEFAULT_NAMES: List[str] = ["armstrong", "hickey", "mccarthy", "lovelace", "kay", "valim"]
DEFAULT_BASE_PORT = 4000
DEFAULT_TREES_DIR = "trees"
CONFIG_FILE = "tak.json"

# Files tak writes into each worktree
DEV_LOCAL_CONFIG = "config/dev.local.exs"
DEV_CONFIG = "config/dev.exs"
MISE_CONFIG = "mise.local.toml"
ENV_FILE = ".env"
GITIGNORE = ".gitignore"
MIX_PROJECT = "mix.exs"

# Markers used to recognise the block tak appends to dev.local.exs
MANAGED_MARKER = "# Tak worktree config"
REPO_MARKER = "Repo"
DATABASE_MARKER = "database:"

HEADS_PREFIX = "refs/heads/"
UNKNOWN_BRANCH = "unknown"


class SlotStatus:
    """Runtime status of a worktree's server."""

    RUNNING = "RUNNING"
    STOPPED = "STOPPED"
    UNKNOWN = "UNKNOWN"


# CLI colors (Rich color names)
STATUS_COLORS = {
    SlotStatus.RUNNING: "green",
    SlotStatus.STOPPED: "red",
    SlotStatus.UNKNOWN: "yellow",
}

# Symbol constants for doctor output
SYMBOL_OK = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARN = "!"
