"""Coloured status lines for the terminal."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape

_MARKERS = {
    "info": ("INFO", "bold blue"),
    "success": ("SUCCESS", "bold green"),
    "warning": ("WARNING", "bold yellow"),
    "error": ("ERROR", "bold red"),
}


class Reporter:
    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(highlight=False)

    def info(self, message: str) -> None:
        self._line("info", message)

    def success(self, message: str) -> None:
        self._line("success", message)

    def warning(self, message: str) -> None:
        self._line("warning", message)

    def error(self, message: str) -> None:
        self._line("error", message)

    def rule(self) -> None:
        self.console.rule(style="dim")

    def _line(self, level: str, message: str) -> None:
        label, style = _MARKERS[level]
        self.console.print(f"[{style}]\\[{label}][/{style}] {escape(message)}")
