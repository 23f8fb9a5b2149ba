"""deskcalc - a desk calculator engine with memory and history.

- Pure calculation engine over decimal-string input (engine)
- Memory register and capped, persistent history
- Session object with pluggable renderer, history store and logger
- Command line front-end
"""

__version__ = "1.0.0"

from .engine import (
    CalculationOverflowError,
    CalculatorError,
    DivideByZeroError,
    EngineState,
    Operator,
    evaluate,
)
from .history import (
    CalculationHistory,
    HistoryEntry,
    JsonHistoryStore,
)
from .calculator import (
    Calculator,
    get_calculator,
)

__all__ = [
    # Engine
    "EngineState",
    "Operator",
    "evaluate",
    "CalculatorError",
    "DivideByZeroError",
    "CalculationOverflowError",
    # History
    "CalculationHistory",
    "HistoryEntry",
    "JsonHistoryStore",
    # Session
    "Calculator",
    "get_calculator",
]
