"""Services used by tak commands."""

from .command_runner import CommandResult, CommandRunner
from .database_service import DatabaseService
from .port_service import PortService
from .setup_service import SetupService

__all__ = [
    "CommandResult",
    "CommandRunner",
    "DatabaseService",
    "PortService",
    "SetupService",
]
