from __future__ import annotations

import argparse
import logging
from typing import Callable, List, Sequence

from string_calculator.models.calculator import CalculatorOperator, format_decimal
from string_calculator.services.calculator import CalculatorEngine
from string_calculator.services.calculator_errors import (
    CalculatorError,
    InvalidExpressionError,
    NegativeOperandsError,
    TooManyOperandsError,
    UnsupportedOperatorError,
)
from string_calculator.services.calculator_policy import POLICIES

logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(message)s")
logger = logging.getLogger("string_calculator.cli")

EXPRESSION_PROMPT = "Enter expression: "


def describe_error(exc: CalculatorError) -> List[str]:
    if isinstance(exc, UnsupportedOperatorError):
        return [exc.message, f"Operator: {exc.operator}"]
    if isinstance(exc, TooManyOperandsError):
        return [exc.message, f"Maximum allowed: {exc.max_operands}"]
    if isinstance(exc, NegativeOperandsError):
        values = ",".join(format_decimal(value) for value in exc.values)
        return [exc.message, f"Negative operands found: {values}"]
    if isinstance(exc, InvalidExpressionError):
        return [f"{exc.message}: {exc.expression}"]
    return [exc.message]


class CalculatorRepl:
    def __init__(
        self,
        engine: CalculatorEngine,
        *,
        read: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ) -> None:
        self.engine = engine
        self._read = read
        self._write = write

    @property
    def operator_prompt(self) -> str:
        choices = ", ".join(
            f"{index}={operator.label}" for index, operator in enumerate(self.engine.policy.operators)
        )
        return f"Enter operator ({choices}): "

    def run(self) -> None:
        try:
            while self.step():
                pass
        except KeyboardInterrupt:
            self._write("\nCalculator canceled.")

    def step(self) -> bool:
        """Handle one expression. Returns False once input is exhausted."""

        try:
            expression = self._read(EXPRESSION_PROMPT)
        except EOFError:
            return False

        operators = self.engine.policy.operators
        if not expression.strip() or not operators:
            self._write("0")
            return True

        try:
            operator = self._select_operator(operators)
        except EOFError:
            return False
        except UnsupportedOperatorError as exc:
            self._write_error(exc)
            return True

        try:
            outcome = self.engine.evaluate(expression.strip(), operator)
        except Exception as exc:
            logger.error("Failed to evaluate %r: %s", expression, exc)
            self._write(str(exc) or type(exc).__name__)
            return True

        if outcome.error is not None:
            self._write_error(outcome.error)
        else:
            self._write(f"{outcome.formula} = {format_decimal(outcome.value)}")
        return True

    def _select_operator(self, operators: Sequence[CalculatorOperator]) -> CalculatorOperator:
        if len(operators) == 1:
            return operators[0]
        return self.engine.policy.parse_operator(self._read(self.operator_prompt))

    def _write_error(self, exc: CalculatorError) -> None:
        logger.debug("Rejected input: %s", exc.error_type)
        for line in describe_error(exc):
            self._write(line)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive calculator for delimiter-separated expressions.")
    parser.add_argument(
        "--policy",
        choices=sorted(POLICIES),
        default="full",
        help="Calculator rules to apply (default: full).",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    CalculatorRepl(CalculatorEngine(POLICIES[args.policy])).run()


if __name__ == "__main__":
    main()
