from __future__ import annotations

import operator as op
from decimal import Decimal
from functools import reduce
from typing import Callable, Sequence

from string_calculator.models.calculator import CalculatorOperator, format_decimal
from string_calculator.services.calculator_errors import (
    ArithmeticOverflowError,
    DivideByZeroError,
    NegativeOperandsError,
    UnsupportedOperatorError,
)
from string_calculator.services.operands import ZERO

Reduction = Callable[[Sequence[Decimal]], Decimal]


def render_formula(operands: Sequence[Decimal], operator: CalculatorOperator) -> str:
    return operator.symbol.join(format_decimal(value) for value in operands)


def _fold(operands: Sequence[Decimal], step: Callable[[Decimal, Decimal], Decimal]) -> Decimal:
    if not operands:
        return ZERO
    return reduce(step, operands[1:], operands[0])


def _sum(operands: Sequence[Decimal]) -> Decimal:
    return sum(operands, ZERO)


def _difference(operands: Sequence[Decimal]) -> Decimal:
    return _fold(operands, op.sub)


def _product(operands: Sequence[Decimal]) -> Decimal:
    if any(value == 0 for value in operands):
        return ZERO
    return _fold(operands, op.mul)


def _quotient(operands: Sequence[Decimal]) -> Decimal:
    if not operands or operands[0] == 0:
        return ZERO
    if any(value == 0 for value in operands[1:]):
        raise DivideByZeroError()
    return _fold(operands, op.truediv)


_REDUCTIONS: dict[CalculatorOperator, Reduction] = {
    CalculatorOperator.add: _sum,
    CalculatorOperator.subtract: _difference,
    CalculatorOperator.multiply: _product,
    CalculatorOperator.divide: _quotient,
}


def reduce_operands(
    operands: Sequence[Decimal],
    operator: CalculatorOperator,
    *,
    reject_negatives: bool = True,
) -> tuple[Decimal, str]:
    """Apply ``operator`` left to right across ``operands``.

    Returns the result together with the rendered formula. Unless
    ``reject_negatives`` is off, negative operands fail before any arithmetic
    for every operator.
    """

    if reject_negatives:
        negatives = [value for value in operands if value < 0]
        if negatives:
            raise NegativeOperandsError(negatives)

    reduction = _REDUCTIONS.get(operator)
    if reduction is None:
        raise UnsupportedOperatorError(str(getattr(operator, "value", operator)))

    try:
        result = reduction(operands)
    except ArithmeticError as exc:
        raise ArithmeticOverflowError() from exc
    return result, render_formula(operands, operator)
