from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Sequence

from string_calculator.core.exceptions import AppError


class CalculatorError(AppError):
    status_code = 400
    error_type = "CALCULATOR_ERROR"

    @classmethod
    def from_details(cls, details: Mapping[str, Any]) -> "CalculatorError":
        """Rebuild the error from the ``details`` of a serialized error payload."""

        return cls()


class InvalidExpressionError(CalculatorError):
    error_type = "INVALID_EXPRESSION"

    def __init__(self, expression: str) -> None:
        super().__init__("Invalid expression", details={"expression": expression})
        self.expression = expression

    @classmethod
    def from_details(cls, details: Mapping[str, Any]) -> "InvalidExpressionError":
        return cls(str(details.get("expression", "")))


class NegativeOperandsError(CalculatorError):
    error_type = "NEGATIVE_OPERANDS"

    def __init__(self, values: Sequence[Decimal]) -> None:
        self.values = tuple(values)
        super().__init__("Negative operands are not allowed", details={"values": list(self.values)})

    @classmethod
    def from_details(cls, details: Mapping[str, Any]) -> "NegativeOperandsError":
        return cls([Decimal(str(value)) for value in details.get("values", [])])


class DivideByZeroError(CalculatorError):
    error_type = "DIVIDE_BY_ZERO"

    def __init__(self) -> None:
        super().__init__("Attempted to divide by zero")


class ArithmeticOverflowError(CalculatorError):
    error_type = "ARITHMETIC_OVERFLOW"

    def __init__(self) -> None:
        super().__init__("Result is outside the supported numeric range")


class UnsupportedOperatorError(CalculatorError):
    error_type = "UNSUPPORTED_OPERATOR"

    def __init__(self, operator: str) -> None:
        super().__init__("Unsupported operator", details={"operator": operator})
        self.operator = operator

    @classmethod
    def from_details(cls, details: Mapping[str, Any]) -> "UnsupportedOperatorError":
        return cls(str(details.get("operator", "")))


class TooManyOperandsError(CalculatorError):
    error_type = "TOO_MANY_OPERANDS"

    def __init__(self, max_operands: int) -> None:
        super().__init__("Expression contains too many operands", details={"max_operands": max_operands})
        self.max_operands = max_operands

    @classmethod
    def from_details(cls, details: Mapping[str, Any]) -> "TooManyOperandsError":
        return cls(int(details.get("max_operands", 0)))


ERRORS_BY_TYPE: dict[str, type[CalculatorError]] = {
    error.error_type: error
    for error in (
        InvalidExpressionError,
        NegativeOperandsError,
        DivideByZeroError,
        ArithmeticOverflowError,
        UnsupportedOperatorError,
        TooManyOperandsError,
    )
}
