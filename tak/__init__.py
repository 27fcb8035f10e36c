"""
tak - git worktrees with isolated ports and databases for parallel development
"""

from .__version__ import __version__
from .config import Config
from .core.registry import WorktreeRegistry
from .core.manager import WorktreeManager

__all__ = ["Config", "WorktreeRegistry", "WorktreeManager", "__version__"]
