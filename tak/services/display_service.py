"""Display and formatting service for worktree information"""
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from tak.constants import SlotStatus
from tak.formatters import format_check, format_status, format_summary
from tak.models.worktree import WorktreeSlot

console = Console()
err_console = Console(stderr=True)


class DisplayService:
    """Renders command output to the terminal."""

    def __init__(self, out: Optional[Console] = None, err: Optional[Console] = None):
        self.console = out or console
        self.err_console = err or err_console

    def info(self, message: str) -> None:
        self.console.print(escape(message))

    def step(self, message: str) -> None:
        """Print a progress message."""
        self.console.print(f"[dim]→[/dim] {escape(message)}")

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def error(self, message: str, hint: Optional[str] = None) -> None:
        self.err_console.print(f"[bold red]Error:[/bold red] {escape(message)}")
        if hint:
            self.console.print(escape(hint))

    def usage(self, usage: str, hint: Optional[str] = None) -> None:
        self.err_console.print(f"Usage: {escape(usage)}")
        if hint:
            self.console.print(escape(hint))

    def created(
        self,
        name: str,
        branch: str,
        port: int,
        database: Optional[str],
        location: str,
    ) -> None:
        """Display the summary after a worktree is created."""
        self.console.print()
        self.console.print("[green]Worktree created successfully![/green]")
        self.console.print()
        self.console.print(f"[bold]{escape(name)}[/bold] [dim]({escape(branch)})[/dim]")
        self.console.print(f"  Port:     {port}")
        self.console.print(f"  Database: {escape(database) if database else '[dim]skipped[/dim]'}")
        self.console.print(f"  Location: {escape(location)}")
        self.console.print()
        self.console.print("[dim]To start the server:[/dim]")
        self.console.print(f"[bold]  cd {escape(location)} && iex -S mix phx.server[/bold]")
        self.console.print()

    def worktree_list(
        self,
        main_branch: str,
        main_port: int,
        main_running: bool,
        slots: List[WorktreeSlot],
        trees_dir: str,
    ) -> None:
        """Display the main repository followed by every worktree."""
        self.console.print()
        self.console.print("[bold]Git Worktrees[/bold]")
        self.console.print()

        main_status = SlotStatus.RUNNING if main_running else SlotStatus.STOPPED
        self.console.print("[bold]main[/bold] [dim](main repository)[/dim]")
        self.console.print(f"  Branch: {escape(main_branch)}")
        self.console.print(f"  Port:   {main_port}")
        self.console.print(f"  Status: {format_status(main_status)}")
        self.console.print()

        if not slots:
            self.console.print(f"[dim]No worktrees found in {escape(trees_dir)}/[/dim]")
            self.console.print()
            self.console.print("Create one with: [bold]tak create <branch-name>[/bold]")
            return

        running = 1 if main_running else 0
        stopped = 0 if main_running else 1

        for slot in slots:
            self.console.print(f"[bold]{escape(slot.name)}[/bold] [dim]({escape(slot.branch)})[/dim]")
            if slot.port is not None:
                self.console.print(f"  Port:     {slot.port}")
            self.console.print(f"  Database: {escape(slot.database)}")
            self.console.print(f"  Status:   {format_status(slot.status, slot.pid)}")
            if slot.url:
                self.console.print(f"  URL:      {slot.url}")
            self.console.print()

            if slot.status == SlotStatus.RUNNING:
                running += 1
            elif slot.status == SlotStatus.STOPPED:
                stopped += 1

        self.console.print(format_summary(running, stopped))
        self.console.print()

    def removed(self, name: str, branch: Optional[str], database: str, dropped: bool) -> None:
        """Display the summary after a worktree is removed."""
        self.console.print()
        self.console.print("[green]Worktree removed successfully![/green]")
        self.console.print()
        self.console.print(f"  Name:     {escape(name)}")
        if branch:
            self.console.print(f"  Branch:   {escape(branch)}")
        db_note = "" if dropped else " [dim](not dropped)[/dim]"
        self.console.print(f"  Database: {escape(database)}{db_note}")

    def check(self, level: str, message: str, reason: Optional[str] = None) -> None:
        """Display one doctor check."""
        self.console.print(format_check(level, message, reason))

    def fix(self, message: str) -> None:
        """Display a suggested fix below a failed check."""
        self.console.print("[dim]  Fix:[/dim]")
        for line in message.strip().split("\n"):
            self.console.print(f"[dim]  {escape(line)}[/dim]")
        self.console.print()

    def doctor_header(self) -> None:
        self.console.print()
        self.console.print("[bold]Tak Doctor[/bold]")
        self.console.print()

    def doctor_summary(self, passed: int, failed: int) -> None:
        self.console.print()
        if failed == 0:
            self.console.print("[green]All checks passed![/green]")
        else:
            self.console.print(f"[yellow]{passed} passed, {failed} failed[/yellow]")
        self.console.print()
