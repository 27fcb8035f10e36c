"""Status formatting utilities."""

from typing import Optional

from rich.markup import escape

from tak.constants import STATUS_COLORS, SYMBOL_ERROR, SYMBOL_OK, SYMBOL_WARN


def format_status(status: str, pid: Optional[int] = None) -> str:
    """
    Format a slot status as Rich markup.

    Args:
        status: SlotStatus value
        pid: PID of the running server, shown after the status

    Returns:
        Markup such as "[green]RUNNING[/green] [dim](PID: 123)[/dim]"
    """
    color = STATUS_COLORS.get(status, "yellow")
    text = f"[{color}]{status}[/{color}]"
    if pid is not None:
        text += f" [dim](PID: {pid})[/dim]"
    return text


_CHECK_SYMBOLS = {
    "ok": ("green", SYMBOL_OK),
    "error": ("red", SYMBOL_ERROR),
    "warn": ("yellow", SYMBOL_WARN),
}


def format_check(level: str, message: str, reason: Optional[str] = None) -> str:
    """
    Format one doctor check line.

    Args:
        level: "ok", "error" or "warn"
        message: What was checked
        reason: Why it did not pass

    Returns:
        Markup line with a colored symbol
    """
    color, symbol = _CHECK_SYMBOLS[level]
    line = f"[{color}]{symbol}[/{color}] {escape(message)}"
    if reason:
        line += f"[dim] - {escape(reason)}[/dim]"
    return line


def format_summary(running: int, stopped: int) -> str:
    """Format the running/stopped count shown after list."""
    return f"[dim]Summary:[/dim] [green]{running} running[/green][dim],[/dim] [red]{stopped} stopped[/red]"
