"""Custom exceptions for tak"""

from typing import List, Optional


class TakError(Exception):
    """Base exception for all tak errors."""

    hint: Optional[str] = None


class UsageError(TakError):
    """Exception raised when a command is missing a required argument."""

    def __init__(self, usage: str, hint: Optional[str] = None):
        self.usage = usage
        self.hint = hint
        super().__init__(f"Usage: {usage}")


class ConfigError(TakError):
    """Exception raised for invalid configuration."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        error_msg = "Invalid configuration"
        if source:
            error_msg += f" in {source}"
        super().__init__(f"{error_msg}: {message}")


class ValidationError(TakError):
    """Exception raised when input is rejected before any change is made."""
    pass


class InvalidNameError(ValidationError):
    """Exception raised when a worktree name is not configured."""

    def __init__(self, name: str, names: List[str]):
        self.name = name
        self.names = names
        super().__init__(f"Invalid name '{name}'. Choose from: {', '.join(names)}")


class SlotOccupiedError(ValidationError):
    """Exception raised when a worktree directory already exists."""

    def __init__(self, name: str, path: str):
        self.name = name
        self.path = path
        super().__init__(f"Worktree {path} already exists")


class AllSlotsOccupiedError(ValidationError):
    """Exception raised when every configured name has a worktree."""

    def __init__(self, names: List[str]):
        self.names = names
        super().__init__(f"All worktree names are in use ({', '.join(names)})")


class WorktreeNotFoundError(ValidationError):
    """Exception raised when removing a worktree that does not exist."""

    def __init__(self, path: str, available: List[str]):
        self.path = path
        self.available = available
        self.hint = f"Available: {', '.join(available)}" if available else None
        super().__init__(f"Worktree {path} does not exist")


class GitOperationError(TakError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class WorktreeRemovalError(GitOperationError):
    """Exception raised when git refuses to remove a worktree."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__("worktree remove", message)
        self.hint = "Use --force to force removal"

        error_msg = f"Failed to remove worktree {path} (uncommitted changes?)"
        if message:
            error_msg += f"\n{message}"
        self.args = (error_msg,)


class SetupError(TakError):
    """Exception raised when project setup fails inside a new worktree."""

    def __init__(self, command: str, path: str, output: Optional[str] = None):
        self.command = command
        self.path = path
        self.output = output

        error_msg = f"{command} failed in {path}"
        if output:
            error_msg += f":\n{output}"

        super().__init__(error_msg)
