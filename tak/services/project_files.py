"""Reading and writing the small config files tak manages in each worktree.

Three files can carry a worktree's port, checked in this order:

- config/dev.local.exs: ``http: [port: 4010]``, possibly spread over lines
- mise.local.toml: ``PORT = "4010"``
- .env: ``PORT=4010`` at the start of a line

These are first-match text extractions over files tak wrote itself, not
config parsers. A missing, unreadable or malformed file just yields None.
In dev.local.exs only the text from the last managed block marker on is
searched; the main repository config copied above it is ignored.
"""

import os
import re
import shutil
from pathlib import Path
from typing import Callable, List, Optional

from tak.constants import (
    DATABASE_MARKER,
    DEV_LOCAL_CONFIG,
    ENV_FILE,
    MANAGED_MARKER,
    MISE_CONFIG,
    REPO_MARKER,
)
from tak.utils.logging import get_logger

logger = get_logger(__name__)

PortParser = Callable[[str], Optional[int]]

_HTTP_PORT_PATTERN = re.compile(r"http:\s*\[[^\]]*?\bport:\s*(\d+)", re.DOTALL)
_MISE_PORT_PATTERN = re.compile(r'PORT\s*=\s*"?(\d+)"?')
_ENV_PORT_PATTERN = re.compile(r"^PORT=(\d+)", re.MULTILINE)


def _read_text(path: str) -> Optional[str]:
    """Read a file, returning None when it is missing or unreadable."""
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Could not read {path}: {e}")
        return None


def _managed_section(content: str) -> str:
    """Text from the last managed block marker on, or all of it without one."""
    start = content.rfind(MANAGED_MARKER)
    return content if start == -1 else content[start:]


def _port_parser(
    relative_path: str,
    pattern: re.Pattern,
    section: Optional[Callable[[str], str]] = None,
) -> PortParser:
    def parse(worktree_path: str) -> Optional[int]:
        content = _read_text(os.path.join(worktree_path, relative_path))
        if content is None:
            return None
        if section:
            content = section(content)
        match = pattern.search(content)
        return int(match.group(1)) if match else None

    parse.__name__ = f"parse_port_{os.path.basename(relative_path)}"
    return parse


PORT_PARSERS: List[PortParser] = [
    _port_parser(DEV_LOCAL_CONFIG, _HTTP_PORT_PATTERN, _managed_section),
    _port_parser(MISE_CONFIG, _MISE_PORT_PATTERN),
    _port_parser(ENV_FILE, _ENV_PORT_PATTERN),
]


def read_port_from_worktree(worktree_path: str) -> Optional[int]:
    """Return the first port found in the worktree's config files."""
    for parse in PORT_PARSERS:
        port = parse(worktree_path)
        if port is not None:
            logger.debug(f"{parse.__name__}: port {port} in {worktree_path}")
            return port
    return None


def has_database_config(worktree_path: str) -> bool:
    """Check whether tak appended a Repo database block to dev.local.exs."""
    content = _read_text(os.path.join(worktree_path, DEV_LOCAL_CONFIG))
    if content is None:
        return False
    return MANAGED_MARKER in content and REPO_MARKER in content and DATABASE_MARKER in content


def render_managed_block(
    app_name: str,
    module_name: str,
    name: str,
    port: int,
    database: Optional[str] = None,
) -> str:
    """Render the config block tak appends to dev.local.exs.

    The Repo section is only emitted when a database is given.
    """
    block = (
        "\n"
        f"{MANAGED_MARKER} ({name})\n"
        "# These values override any earlier config above\n"
        f"config :{app_name}, {module_name}Web.Endpoint,\n"
        f"  http: [port: {port}]\n"
    )
    if database:
        block += (
            "\n"
            f"config :{app_name}, {module_name}.Repo,\n"
            f'  database: "{database}"\n'
        )
    return block


def write_dev_local_config(repo_path: str, worktree_path: str, block: str) -> Path:
    """Write config/dev.local.exs into the worktree.

    The main repository's dev.local.exs is copied when it exists so local
    settings carry over; the managed block is appended after it.
    """
    source_path = os.path.join(repo_path, DEV_LOCAL_CONFIG)
    dest_path = Path(worktree_path) / DEV_LOCAL_CONFIG
    dest_path.parent.mkdir(parents=True, exist_ok=True)

    existing = _read_text(source_path)
    if existing is None:
        existing = "import Config\n"
    elif not existing.endswith("\n"):
        existing += "\n"

    dest_path.write_text(existing + block, encoding="utf-8")
    logger.debug(f"Wrote {dest_path}")
    return dest_path


def write_mise_config(worktree_path: str, port: int) -> Path:
    """Write mise.local.toml so PORT overrides any inherited value."""
    mise_path = Path(worktree_path) / MISE_CONFIG
    mise_path.write_text(f'[env]\nPORT = "{port}"\n', encoding="utf-8")
    logger.debug(f"Wrote {mise_path}")
    return mise_path


def copy_env_file(repo_path: str, worktree_path: str) -> Optional[Path]:
    """Copy the main repository's .env into the worktree, if there is one."""
    source = Path(repo_path) / ENV_FILE
    if not source.is_file():
        return None

    dest = Path(worktree_path) / ENV_FILE
    shutil.copyfile(source, dest)
    logger.debug(f"Copied {source} to {dest}")
    return dest
