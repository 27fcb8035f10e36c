"""Formatting utilities for tak console output."""

from .status import format_status, format_check, format_summary

__all__ = [
    "format_status",
    "format_check",
    "format_summary",
]
