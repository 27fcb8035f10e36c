"""Configuration handling for tak"""

import json
import os
import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

from tak.constants import (
    CONFIG_FILE,
    DEFAULT_BASE_PORT,
    DEFAULT_NAMES,
    DEFAULT_TREES_DIR,
    MIX_PROJECT,
)
from tak.exceptions import ConfigError
from tak.utils.logging import get_logger

logger = get_logger(__name__)

_MIX_APP_PATTERN = re.compile(r"\bapp:\s*:(\w+)")


@dataclass
class Config:
    """Configuration for tak with validation."""

    # Worktree slots
    names: List[str] = field(default_factory=lambda: list(DEFAULT_NAMES))
    base_port: int = DEFAULT_BASE_PORT
    trees_dir: str = DEFAULT_TREES_DIR

    # Database handling
    create_database: bool = True

    # Host project; None means detect from mix.exs
    app_name: Optional[str] = None

    # Execution modes
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_names()
        self._validate_base_port()
        self._validate_trees_dir()
        self._validate_create_database()

    def _validate_names(self):
        """Validate names is a non-empty list of unique, path-safe strings."""
        if not isinstance(self.names, list) or not self.names:
            raise ConfigError("names must be a non-empty list")
        for name in self.names:
            if not isinstance(name, str) or not name.strip():
                raise ConfigError(f"names must be non-empty strings, got {name!r}")
            if "/" in name or name in (".", ".."):
                raise ConfigError(f"name '{name}' is not a valid directory name")
        if len(set(self.names)) != len(self.names):
            raise ConfigError("names must be unique")

    def _validate_base_port(self):
        """Validate every slot port fits in the TCP port range."""
        if isinstance(self.base_port, bool) or not isinstance(self.base_port, int):
            raise ConfigError(f"base_port must be an integer, got {self.base_port!r}")
        highest = self.base_port + len(self.names) * 10
        if self.base_port < 1 or highest > 65535:
            raise ConfigError(
                f"base_port {self.base_port} gives ports outside 1-65535 for {len(self.names)} names"
            )

    def _validate_trees_dir(self):
        """Validate trees_dir is not empty."""
        if not isinstance(self.trees_dir, str) or not self.trees_dir.strip():
            raise ConfigError("trees_dir cannot be empty")
        self.trees_dir = self.trees_dir.strip()

    def _validate_create_database(self):
        """Validate create_database is a boolean."""
        if not isinstance(self.create_database, bool):
            raise ConfigError(f"create_database must be true or false, got {self.create_database!r}")

    @property
    def module_name(self) -> str:
        """Camelized module name for the app, e.g. my_app -> MyApp."""
        return camelize(self.app_name or "")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)


def camelize(name: str) -> str:
    """Convert an underscored app name to its module form."""
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


def detect_app_name(repo_path: str) -> str:
    """Read the OTP app name from mix.exs, falling back to the directory name."""
    mix_path = os.path.join(repo_path, MIX_PROJECT)
    try:
        with open(mix_path, encoding="utf-8") as f:
            match = _MIX_APP_PATTERN.search(f.read())
        if match:
            return match.group(1)
    except OSError as e:
        logger.debug(f"Could not read {mix_path}: {e}")

    dirname = os.path.basename(os.path.abspath(repo_path))
    return re.sub(r"\W", "_", dirname).lower()


def read_config_file(repo_path: str) -> Dict[str, Any]:
    """Read tak.json from the repository root, if present."""
    config_path = os.path.join(repo_path, CONFIG_FILE)
    if not os.path.exists(config_path):
        return {}

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(str(e), source=CONFIG_FILE) from e

    if not isinstance(data, dict):
        raise ConfigError("top level must be an object", source=CONFIG_FILE)

    logger.debug(f"Loaded configuration from {config_path}")
    return data


def load_config(repo_path: str, overrides: Optional[Dict[str, Any]] = None) -> Config:
    """Build the Config for a repository.

    Values come from tak.json in the repository root, then from overrides
    (command-line flags), then defaults. The app name is detected when not set.

    Args:
        repo_path: Path to the host project's repository root
        overrides: Values that take precedence over the config file

    Returns:
        Validated Config object
    """
    values = read_config_file(repo_path)
    if overrides:
        values.update({k: v for k, v in overrides.items() if v is not None})

    config = Config.from_dict(values)
    if not config.app_name:
        config.app_name = detect_app_name(repo_path)
    return config
