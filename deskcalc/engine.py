"""Calculation engine for deskcalc.

A finite-state accumulator over decimal-string input. The state is an
immutable EngineState; every operation is a plain function that takes a state
and returns a new one:
- input_digit / input_decimal_point: build the current operand
- input_operator: stash or chain a pending operation
- calculate_result: complete the pending operation ("=")
- clear_all / clear_entry / backspace / percentage / recall_value

Arithmetic goes through evaluate(), which rounds to 8 decimal places and
raises a CalculatorError on division by zero or overflow. Nothing here
mutates state when an error is raised.
"""

import math
import sys
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from .formatting import number_to_string, parse_operand


EPSILON = sys.float_info.epsilon
ROUNDING_SCALE = 1e8  # 8 decimal places
MAX_INPUT_LENGTH = 12

DIGITS = "0123456789"


class CalculatorError(Exception):
    """A calculation that cannot be committed to state."""

    message = "Calculation error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class DivideByZeroError(CalculatorError):
    message = "Cannot divide by zero"


class CalculationOverflowError(CalculatorError):
    message = "Result too large"


class Operator(Enum):
    """Binary operators, keyed by the character that selects them."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    @property
    def symbol(self) -> str:
        """Symbol used in expressions and labels."""
        return _SYMBOLS[self]


_SYMBOLS = {
    Operator.ADD: "+",
    Operator.SUBTRACT: "-",
    Operator.MULTIPLY: "×",
    Operator.DIVIDE: "÷",
}


@dataclass(frozen=True)
class EngineState:
    """Calculator state between two events."""

    current_value: str = "0"
    previous_value: Optional[float] = None
    operator: Optional[Operator] = None
    waiting_for_operand: bool = False

    @property
    def pending_label(self) -> str:
        """Left operand and operator of the pending operation, if any."""
        if self.previous_value is None or self.operator is None:
            return ""
        return f"{number_to_string(self.previous_value)} {self.operator.symbol}"


@dataclass(frozen=True)
class Calculation:
    """A completed "=" calculation."""

    expression: str
    result: float


def round_result(value: float) -> float:
    """Round to 8 decimal places, nudged by machine epsilon.

    Non-finite input (or input whose scaled form overflows) comes back
    non-finite.
    """
    scaled = (value + EPSILON) * ROUNDING_SCALE
    if not math.isfinite(scaled):
        return scaled
    whole = math.floor(scaled)
    if scaled - whole >= 0.5:
        whole += 1
    return whole / ROUNDING_SCALE


def evaluate(a: float, b: float, op: Operator) -> float:
    """Apply op to a and b.

    Raises:
        DivideByZeroError: If op is division and b is zero.
        CalculationOverflowError: If the rounded result is not finite.
    """
    try:
        if op is Operator.ADD:
            result = a + b
        elif op is Operator.SUBTRACT:
            result = a - b
        elif op is Operator.MULTIPLY:
            result = a * b
        elif op is Operator.DIVIDE:
            if b == 0:
                raise DivideByZeroError()
            result = a / b
        else:
            raise ValueError(f"Unknown operator: {op!r}")
    except OverflowError:
        raise CalculationOverflowError() from None

    result = round_result(result)
    if not math.isfinite(result):
        raise CalculationOverflowError()
    return result


def input_digit(
    state: EngineState, digit: str, max_length: int = MAX_INPUT_LENGTH
) -> EngineState:
    """Type one digit into the current operand."""
    if len(digit) != 1 or digit not in DIGITS:
        raise ValueError(f"Not a digit: {digit!r}")

    if state.waiting_for_operand or state.current_value == "0":
        value = digit
    else:
        value = state.current_value + digit

    return replace(state, current_value=value[:max_length], waiting_for_operand=False)


def input_decimal_point(state: EngineState) -> EngineState:
    """Type a decimal point; a second one in the same operand is ignored."""
    if state.waiting_for_operand:
        return replace(state, current_value="0.", waiting_for_operand=False)
    if "." in state.current_value:
        return state
    return replace(state, current_value=state.current_value + ".")


def input_operator(state: EngineState, op: Operator) -> EngineState:
    """Choose the next operator.

    With an operation already pending, it is evaluated first and its result
    becomes both the current and the previous value, so "2 + 3 *" shows 5.

    Raises:
        CalculatorError: If the pending operation fails.
    """
    input_value = parse_operand(state.current_value)

    if state.previous_value is None:
        state = replace(state, previous_value=input_value)
    elif state.operator is not None:
        result = evaluate(state.previous_value, input_value, state.operator)
        state = replace(
            state, current_value=number_to_string(result), previous_value=result
        )

    return replace(state, waiting_for_operand=True, operator=op)


def calculate_result(state: EngineState) -> Tuple[EngineState, Optional[Calculation]]:
    """Complete the pending operation.

    Returns:
        The new state and the completed calculation, or the unchanged state
        and None when nothing is pending.

    Raises:
        CalculatorError: If the operation fails.
    """
    if state.previous_value is None or state.operator is None:
        return state, None

    input_value = parse_operand(state.current_value)
    result = evaluate(state.previous_value, input_value, state.operator)

    expression = "{} {} {} = {}".format(
        number_to_string(state.previous_value),
        state.operator.symbol,
        number_to_string(input_value),
        number_to_string(result),
    )
    new_state = EngineState(current_value=number_to_string(result), waiting_for_operand=True)
    return new_state, Calculation(expression=expression, result=result)


def clear_all(state: EngineState) -> EngineState:
    return EngineState()


def clear_entry(state: EngineState) -> EngineState:
    return replace(state, current_value="0")


def backspace(state: EngineState) -> EngineState:
    """Drop the last typed character; ignored while waiting for an operand."""
    if state.waiting_for_operand:
        return state

    value = state.current_value[:-1]
    if value in ("", "-"):
        value = "0"
    return replace(state, current_value=value)


def percentage(state: EngineState) -> EngineState:
    value = parse_operand(state.current_value)
    return replace(state, current_value=number_to_string(value / 100))


def recall_value(state: EngineState, value: float) -> EngineState:
    """Show a stored value (memory or history) as a finished operand."""
    return replace(state, current_value=number_to_string(value), waiting_for_operand=True)
