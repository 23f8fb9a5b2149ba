"""Calculator session for deskcalc.

Owns one engine state, the memory register and the history, and connects
them to the external collaborators:
- Catches engine errors so a failed operation leaves state untouched
- Keeps the transient error message and its expiry
- Dispatches key presses and named actions
- Loads, saves and logs history without letting collaborator failures leak
"""

import logging
import time
from typing import Callable, Dict, Optional

from . import engine
from .collaborators import CalculationLogger, HistoryStore, LoggingCalculationLogger, Renderer
from .config import CalculatorConfig, load_config, resolve_config_dir
from .engine import CalculatorError, EngineState, Operator
from .formatting import format_display, parse_operand
from .history import CalculationHistory, HistoryEntry, JsonHistoryStore
from .memory import MemoryRegister


logger = logging.getLogger(__name__)


class Calculator:
    """An interactive calculator session."""

    KEY_ACTIONS = {
        "=": "equals",
        "Enter": "equals",
        "Escape": "clear-all",
        "Backspace": "backspace",
        ".": "decimal",
        "%": "percentage",
        # Button shorthands
        "C": "clear-all",
        "CE": "clear-entry",
        "MC": "memory-clear",
        "MR": "memory-recall",
        "M+": "memory-add",
        "M-": "memory-subtract",
    }

    def __init__(
        self,
        config: Optional[CalculatorConfig] = None,
        renderer: Optional[Renderer] = None,
        history_store: Optional[HistoryStore] = None,
        calculation_logger: Optional[CalculationLogger] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or CalculatorConfig()
        self.renderer = renderer or Renderer()
        self.history_store = history_store or HistoryStore()
        self.calculation_logger = calculation_logger or CalculationLogger()
        self._clock = clock

        self.state = EngineState()
        self.memory = MemoryRegister()
        self.history = CalculationHistory(self.config.max_history_items)

        self._error_message = ""
        self._error_expires_at = 0.0

        self._actions: Dict[str, Callable[[], object]] = {
            "equals": self.calculate_result,
            "clear-all": self.clear_all,
            "clear-entry": self.clear_entry,
            "backspace": self.backspace,
            "decimal": self.input_decimal_point,
            "percentage": self.percentage,
            "memory-clear": self.memory_clear,
            "memory-recall": self.memory_recall,
            "memory-add": self.memory_add,
            "memory-subtract": self.memory_subtract,
        }

        self._load_history()
        self._render()

    @classmethod
    def from_config(
        cls, config_dir: Optional[str] = None, renderer: Optional[Renderer] = None
    ) -> "Calculator":
        """Build a session with file-backed history and logging."""
        config_path = resolve_config_dir(config_dir)
        config = load_config(config_path)
        return cls(
            config=config,
            renderer=renderer,
            history_store=JsonHistoryStore(config.history_path(config_path)),
            calculation_logger=LoggingCalculationLogger(),
        )

    # --- Visible state ---

    @property
    def display(self) -> str:
        return format_display(self.state.current_value, self.config.max_input_length)

    @property
    def history_label(self) -> str:
        return self.state.pending_label

    @property
    def memory_indicator(self) -> str:
        return self.memory.indicator

    @property
    def error_message(self) -> str:
        """Current error message; empty once it has expired."""
        if self._error_message and self._clock() >= self._error_expires_at:
            self.clear_error()
        return self._error_message

    # --- Engine operations ---

    def input_digit(self, digit: str) -> bool:
        return self._apply(engine.input_digit, digit, self.config.max_input_length)

    def input_decimal_point(self) -> bool:
        return self._apply(engine.input_decimal_point)

    def input_operator(self, op: Operator) -> bool:
        return self._apply(engine.input_operator, op)

    def calculate_result(self) -> Optional[HistoryEntry]:
        """Complete the pending operation ("=").

        Returns:
            The new history entry, or None if nothing was pending or the
            calculation failed.
        """
        try:
            state, calculation = engine.calculate_result(self.state)
        except CalculatorError as e:
            self._show_error(e.message)
            return None

        if calculation is None:
            return None

        self.state = state
        entry = self.history.add(calculation.expression, calculation.result)
        self._save_history()
        self._render()
        self._log_calculation(calculation.expression, calculation.result)
        return entry

    def clear_all(self) -> bool:
        return self._apply(engine.clear_all)

    def clear_entry(self) -> bool:
        return self._apply(engine.clear_entry)

    def backspace(self) -> bool:
        return self._apply(engine.backspace)

    def percentage(self) -> bool:
        return self._apply(engine.percentage)

    # --- Memory ---

    def memory_clear(self) -> None:
        self.memory.clear()
        self._render()

    def memory_recall(self) -> None:
        self.state = engine.recall_value(self.state, self.memory.recall())
        self._render()

    def memory_add(self) -> None:
        self.memory.add(parse_operand(self.state.current_value))
        self._render()

    def memory_subtract(self) -> None:
        self.memory.subtract(parse_operand(self.state.current_value))
        self._render()

    # --- History ---

    def load_from_history(self, index: int) -> bool:
        """Show the result of a history entry as the current value."""
        entry = self.history.get_by_index(index)
        if entry is None:
            return False
        self.state = engine.recall_value(self.state, entry.result)
        self._render()
        return True

    def clear_history(self) -> None:
        self.history.clear()
        self._save_history()
        self._render()

    # --- Dispatch ---

    def handle_action(self, action: str) -> bool:
        """Run a named action such as "equals" or "memory-add".

        Returns:
            True if the action name is known.
        """
        handler = self._actions.get(action)
        if handler is None:
            logger.debug("Ignoring unknown action: %s", action)
            return False
        handler()
        return True

    def action_for_key(self, key: str) -> Optional[str]:
        return self.KEY_ACTIONS.get(key) or self.KEY_ACTIONS.get(key.upper())

    def is_known_key(self, key: str) -> bool:
        if len(key) == 1 and key in engine.DIGITS:
            return True
        if key in {op.value for op in Operator}:
            return True
        return self.action_for_key(key) is not None

    def press(self, key: str) -> bool:
        """Handle a key press the way the keyboard does.

        Any shown error is cleared first.

        Returns:
            True if the key is known.
        """
        self.clear_error()

        if len(key) == 1 and key in engine.DIGITS:
            self.input_digit(key)
            return True
        if key in {op.value for op in Operator}:
            self.input_operator(Operator(key))
            return True

        action = self.action_for_key(key)
        if action is None:
            logger.debug("Ignoring unknown key: %s", key)
            return False
        return self.handle_action(action)

    # --- Errors ---

    def clear_error(self) -> None:
        if not self._error_message:
            return
        self._error_message = ""
        try:
            self.renderer.clear_error()
        except Exception as e:
            logger.warning("Renderer failed to clear error: %s", e)

    def _show_error(self, message: str) -> None:
        logger.warning("Calculation failed: %s", message)
        self._error_message = message
        self._error_expires_at = self._clock() + self.config.error_display_seconds
        try:
            self.renderer.show_error(message)
        except Exception as e:
            logger.warning("Renderer failed to show error: %s", e)
        self._render()

    # --- Internals ---

    def _apply(self, transition: Callable[..., EngineState], *args) -> bool:
        try:
            self.state = transition(self.state, *args)
        except CalculatorError as e:
            self._show_error(e.message)
            return False
        self._render()
        return True

    def _render(self) -> None:
        try:
            self.renderer.render(self.display, self.history_label, self.memory_indicator)
        except Exception as e:
            logger.warning("Renderer failed: %s", e)

    def _load_history(self) -> None:
        try:
            entries = self.history_store.load()
        except Exception as e:
            logger.warning("Could not load history: %s", e)
            return
        self.history.replace(entries)

    def _save_history(self) -> None:
        try:
            self.history_store.save(self.history.entries)
        except Exception as e:
            logger.warning("Could not save history: %s", e)

    def _log_calculation(self, expression: str, result: float) -> None:
        try:
            self.calculation_logger.log(expression, result)
        except Exception as e:
            logger.warning("Could not log calculation: %s", e)


def get_calculator(
    config_dir: Optional[str] = None, renderer: Optional[Renderer] = None
) -> Calculator:
    """Get a calculator session.

    Args:
        config_dir: Config directory; see resolve_config_dir().
        renderer: Renderer to report to.

    Returns:
        Calculator instance.
    """
    return Calculator.from_config(config_dir, renderer=renderer)
