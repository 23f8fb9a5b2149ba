"""External collaborators of the calculator.

The calculator reports to a Renderer, persists through a HistoryStore and
announces finished calculations to a CalculationLogger. The base classes do
nothing, so any of them can be left out.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .formatting import number_to_string

if TYPE_CHECKING:
    from .history import HistoryEntry


class Renderer:
    """Receives the visible state after every change."""

    def render(self, display: str, history_label: str, memory_indicator: str) -> None:
        pass

    def show_error(self, message: str) -> None:
        pass

    def clear_error(self) -> None:
        pass


class HistoryStore:
    """Best-effort persistence of the history list."""

    def save(self, entries: List["HistoryEntry"]) -> None:
        pass

    def load(self) -> List["HistoryEntry"]:
        return []


class CalculationLogger:
    """Best-effort record of each completed calculation."""

    def log(self, expression: str, result: float) -> None:
        pass


class LoggingCalculationLogger(CalculationLogger):
    """Writes completed calculations to the standard logging system."""

    def __init__(self, logger_name: str = "deskcalc.calculations"):
        self.logger = logging.getLogger(logger_name)

    def log(self, expression: str, result: float) -> None:
        self.logger.info("calculation: %s (result %s)", expression, number_to_string(result))


class ConsoleRenderer(Renderer):
    """Renders the calculator screen to a rich console.

    render() only records the latest frame; show() prints it. Errors are
    printed as soon as they happen.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.display = "0"
        self.history_label = ""
        self.memory_indicator = ""

    def render(self, display: str, history_label: str, memory_indicator: str) -> None:
        self.display = display
        self.history_label = history_label
        self.memory_indicator = memory_indicator

    def show_error(self, message: str) -> None:
        self.console.print(f"[red]Error: {message}[/red]")

    def show(self) -> None:
        """Print the latest frame."""
        self.console.print(
            Panel(
                Text(self.display, justify="right", style="bold"),
                title=self.memory_indicator or None,
                title_align="left",
                subtitle=self.history_label or None,
                subtitle_align="right",
                width=32,
            )
        )
