"""Tests for engine.py - Pure calculation engine."""

import pytest

from deskcalc.engine import (
    CalculationOverflowError,
    CalculatorError,
    DivideByZeroError,
    EngineState,
    Operator,
    backspace,
    calculate_result,
    clear_all,
    clear_entry,
    evaluate,
    input_decimal_point,
    input_digit,
    input_operator,
    percentage,
    recall_value,
    round_result,
)


def type_number(state: EngineState, text: str) -> EngineState:
    """Type text one key at a time."""
    for ch in text:
        if ch == ".":
            state = input_decimal_point(state)
        else:
            state = input_digit(state, ch)
    return state


class TestOperator:
    """Tests for Operator enum."""

    def test_values_are_keys(self):
        assert Operator("+") is Operator.ADD
        assert Operator("/") is Operator.DIVIDE

    def test_symbols(self):
        assert Operator.ADD.symbol == "+"
        assert Operator.SUBTRACT.symbol == "-"
        assert Operator.MULTIPLY.symbol == "×"
        assert Operator.DIVIDE.symbol == "÷"


class TestErrors:
    """Tests for calculator error types."""

    def test_default_messages(self):
        assert DivideByZeroError().message == "Cannot divide by zero"
        assert CalculationOverflowError().message == "Result too large"

    def test_subclass_of_calculator_error(self):
        assert issubclass(DivideByZeroError, CalculatorError)
        assert issubclass(CalculationOverflowError, CalculatorError)

    def test_custom_message(self):
        error = CalculatorError("Bad input")
        assert error.message == "Bad input"
        assert str(error) == "Bad input"


class TestEvaluate:
    """Tests for evaluate function."""

    def test_basic_operations(self):
        assert evaluate(7, 3, Operator.ADD) == 10
        assert evaluate(7, 3, Operator.SUBTRACT) == 4
        assert evaluate(7, 3, Operator.MULTIPLY) == 21
        assert evaluate(7, 2, Operator.DIVIDE) == 3.5

    def test_suppresses_float_noise(self):
        assert evaluate(0.1, 0.2, Operator.ADD) == 0.3

    def test_rounds_to_eight_places(self):
        assert evaluate(1, 3, Operator.DIVIDE) == 0.33333333
        assert evaluate(2, 3, Operator.DIVIDE) == 0.66666667

    def test_divide_by_zero(self):
        with pytest.raises(DivideByZeroError):
            evaluate(8, 0, Operator.DIVIDE)

    def test_divide_by_negative_zero(self):
        with pytest.raises(DivideByZeroError):
            evaluate(8, -0.0, Operator.DIVIDE)

    def test_zero_divided(self):
        assert evaluate(0, 8, Operator.DIVIDE) == 0

    def test_overflow(self):
        with pytest.raises(CalculationOverflowError):
            evaluate(1e200, 1e200, Operator.MULTIPLY)

    def test_infinite_operand_overflows(self):
        with pytest.raises(CalculationOverflowError):
            evaluate(float("inf"), 1, Operator.ADD)

    @pytest.mark.parametrize("a,b", [(7, 3), (0.1, 0.2), (-2.5, 4.125), (1e6, 3.3)])
    def test_addition_commutes(self, a, b):
        assert evaluate(a, b, Operator.ADD) == evaluate(b, a, Operator.ADD)

    @pytest.mark.parametrize("a,b", [(7, 3), (0.1, 0.2), (-2.5, 4.125), (1e6, 3.3)])
    def test_multiplication_commutes(self, a, b):
        assert evaluate(a, b, Operator.MULTIPLY) == evaluate(b, a, Operator.MULTIPLY)


class TestRoundResult:
    """Tests for round_result function."""

    @pytest.mark.parametrize("value", [0.30000000000000004, 1 / 3, 2.675, 123.456789012, -7.125])
    def test_idempotent(self, value):
        rounded = round_result(value)
        assert round_result(rounded) == rounded

    def test_operating_on_rounded_operands_is_stable(self):
        a = round_result(1 / 3)
        b = round_result(2 / 7)
        result = evaluate(a, b, Operator.ADD)
        assert round_result(result) == result

    @pytest.mark.parametrize("value", [45035996.27370497, 45035996.27370499])
    def test_exact_eight_place_values_unchanged(self, value):
        """Large 8-decimal values are not nudged to the next step."""
        assert round_result(value) == value
        assert evaluate(value, 0, Operator.ADD) == value

    def test_halves_round_up(self):
        assert round_result(0.000000015) == 0.00000002
        assert round_result(-0.000000025) == -0.00000002

    def test_non_finite_passes_through(self):
        assert round_result(float("inf")) == float("inf")


class TestInputDigit:
    """Tests for input_digit function."""

    def test_typing_keeps_every_digit(self):
        assert type_number(EngineState(), "123.45").current_value == "123.45"
        assert type_number(EngineState(), "0.007").current_value == "0.007"

    def test_leading_zero_replaced(self):
        assert input_digit(EngineState(), "5").current_value == "5"
        assert input_digit(EngineState(), "0").current_value == "0"

    def test_truncated_to_twelve_characters(self):
        state = type_number(EngineState(), "1234567890123")
        assert state.current_value == "123456789012"

    def test_custom_max_length(self):
        state = EngineState(current_value="123")
        assert input_digit(state, "4", max_length=3).current_value == "123"

    def test_waiting_starts_fresh(self):
        state = EngineState(current_value="10", waiting_for_operand=True)
        state = input_digit(state, "4")
        assert state.current_value == "4"
        assert state.waiting_for_operand is False

    def test_does_not_mutate(self):
        state = EngineState()
        input_digit(state, "9")
        assert state.current_value == "0"

    def test_rejects_non_digit(self):
        with pytest.raises(ValueError):
            input_digit(EngineState(), "x")


class TestInputDecimalPoint:
    """Tests for input_decimal_point function."""

    def test_appends_point(self):
        assert input_decimal_point(EngineState(current_value="3")).current_value == "3."

    def test_second_point_ignored(self):
        state = type_number(EngineState(), "1.2")
        assert input_decimal_point(state) == state

    def test_waiting_starts_zero_point(self):
        state = EngineState(current_value="10", waiting_for_operand=True)
        state = input_decimal_point(state)
        assert state.current_value == "0."
        assert state.waiting_for_operand is False


class TestInputOperator:
    """Tests for input_operator function."""

    def test_stashes_first_operand(self):
        state = input_operator(EngineState(current_value="7"), Operator.ADD)
        assert state.previous_value == 7.0
        assert state.operator is Operator.ADD
        assert state.waiting_for_operand is True
        assert state.current_value == "7"
        assert state.pending_label == "7 +"

    def test_chaining_evaluates_pending(self):
        state = type_number(EngineState(), "2")
        state = input_operator(state, Operator.ADD)
        state = type_number(state, "3")
        state = input_operator(state, Operator.MULTIPLY)
        assert state.current_value == "5"
        assert state.previous_value == 5.0
        assert state.operator is Operator.MULTIPLY
        assert state.pending_label == "5 ×"

    def test_chaining_failure_raises(self):
        state = input_operator(EngineState(current_value="8"), Operator.DIVIDE)
        state = input_digit(state, "0")
        with pytest.raises(DivideByZeroError):
            input_operator(state, Operator.ADD)


class TestCalculateResult:
    """Tests for calculate_result function."""

    def test_simple_addition(self):
        state = input_operator(EngineState(current_value="7"), Operator.ADD)
        state = input_digit(state, "3")
        state, calculation = calculate_result(state)
        assert state.current_value == "10"
        assert state.previous_value is None
        assert state.operator is None
        assert state.waiting_for_operand is True
        assert calculation.expression == "7 + 3 = 10"
        assert calculation.result == 10.0

    def test_chained_expression(self):
        state = type_number(EngineState(), "2")
        state = input_operator(state, Operator.ADD)
        state = type_number(state, "3")
        state = input_operator(state, Operator.MULTIPLY)
        state = type_number(state, "4")
        state, calculation = calculate_result(state)
        assert state.current_value == "20"
        assert calculation.expression == "5 × 4 = 20"

    def test_division_symbol_in_expression(self):
        state = input_operator(EngineState(current_value="1"), Operator.DIVIDE)
        state = input_digit(state, "4")
        _, calculation = calculate_result(state)
        assert calculation.expression == "1 ÷ 4 = 0.25"

    def test_nothing_pending_is_noop(self):
        state = EngineState(current_value="5")
        new_state, calculation = calculate_result(state)
        assert new_state == state
        assert calculation is None

    def test_divide_by_zero_raises(self):
        state = input_operator(EngineState(current_value="8"), Operator.DIVIDE)
        state = input_digit(state, "0")
        with pytest.raises(DivideByZeroError):
            calculate_result(state)


class TestEditing:
    """Tests for clear, backspace, percentage and recall."""

    def test_clear_all(self):
        state = input_operator(EngineState(current_value="7"), Operator.ADD)
        assert clear_all(state) == EngineState()

    def test_clear_entry_keeps_pending(self):
        state = input_operator(EngineState(current_value="7"), Operator.ADD)
        state = input_digit(state, "3")
        state = clear_entry(state)
        assert state.current_value == "0"
        assert state.operator is Operator.ADD
        assert state.previous_value == 7.0

    def test_backspace_single_digit(self):
        assert backspace(EngineState(current_value="5")).current_value == "0"

    def test_backspace_two_digits(self):
        assert backspace(EngineState(current_value="12")).current_value == "1"

    def test_backspace_negative_single_digit(self):
        assert backspace(EngineState(current_value="-5")).current_value == "0"

    def test_backspace_ignored_while_waiting(self):
        state = EngineState(current_value="10", waiting_for_operand=True)
        assert backspace(state) == state

    def test_percentage(self):
        assert percentage(EngineState(current_value="50")).current_value == "0.5"
        assert percentage(EngineState(current_value="7")).current_value == "0.07"

    def test_recall_value(self):
        state = recall_value(EngineState(current_value="3"), 2.5)
        assert state.current_value == "2.5"
        assert state.waiting_for_operand is True
