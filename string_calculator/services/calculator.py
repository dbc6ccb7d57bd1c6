from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from functools import cached_property

from langchain_core.tools import tool

from string_calculator.core.config import get_settings
from string_calculator.models.calculator import CalculatorOperator, CalculatorResult
from string_calculator.services.arithmetic import reduce_operands
from string_calculator.services.calculator_errors import (
    CalculatorError,
    TooManyOperandsError,
    UnsupportedOperatorError,
)
from string_calculator.services.calculator_policy import (
    FULL_POLICY,
    CalculatorPolicy,
    policy_from_settings,
)
from string_calculator.services.delimiters import ResolvedExpression, resolve_delimiters
from string_calculator.services.operands import ZERO, tokenize_and_evaluate

logger = logging.getLogger("string_calculator.calculator")


@dataclass(frozen=True)
class Evaluation:
    """Outcome of one evaluation: either ``value`` and ``formula``, or ``error``."""

    expression: str
    operator: CalculatorOperator
    value: Decimal | None = None
    formula: str | None = None
    error: CalculatorError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> tuple[Decimal, str]:
        if self.error is not None:
            raise self.error
        return self.value, self.formula


class CalculatorEngine:
    def __init__(self, policy: CalculatorPolicy = FULL_POLICY) -> None:
        self.policy = policy

    def evaluate(
        self,
        expression: str | None,
        operator: CalculatorOperator = CalculatorOperator.add,
    ) -> Evaluation:
        text = expression or ""
        try:
            value, formula = self._evaluate(text, operator)
        except CalculatorError as exc:
            return Evaluation(expression=text, operator=operator, error=exc)
        return Evaluation(expression=text, operator=operator, value=value, formula=formula)

    def _evaluate(self, expression: str, operator: CalculatorOperator) -> tuple[Decimal, str]:
        if not expression.strip():
            return ZERO, ""
        if not self.policy.supports(operator):
            raise UnsupportedOperatorError(str(getattr(operator, "value", operator)))

        resolved = self._resolve(expression)
        operands = tokenize_and_evaluate(
            resolved.payload,
            resolved.delimiters,
            self.policy.max_operand_value,
        )
        max_operands = self.policy.max_operands
        if max_operands is not None and len(operands) > max_operands:
            raise TooManyOperandsError(max_operands)

        return reduce_operands(operands, operator, reject_negatives=self.policy.reject_negatives)

    def _resolve(self, expression: str) -> ResolvedExpression:
        if not self.policy.allow_custom_delimiters:
            return ResolvedExpression(delimiters=self.policy.delimiters, payload=expression)
        return resolve_delimiters(
            expression,
            self.policy.delimiters,
            timeout=self.policy.pattern_timeout_sec,
        )


class CalculatorService:
    def __init__(self, engine: CalculatorEngine | None = None) -> None:
        self.engine = engine or CalculatorEngine()

    @classmethod
    def from_settings(cls) -> "CalculatorService":
        return cls(CalculatorEngine(policy_from_settings(get_settings())))

    @property
    def policy(self) -> CalculatorPolicy:
        return self.engine.policy

    def evaluate(
        self,
        expression: str | None,
        operator: CalculatorOperator = CalculatorOperator.add,
    ) -> CalculatorResult:
        outcome = self.engine.evaluate(expression, operator)
        extra = {"operator": operator.value, "policy": self.policy.name}
        if outcome.error is not None:
            logger.info("calculator.rejected", extra={**extra, "error_type": outcome.error.error_type})
            raise outcome.error

        logger.info("calculator.evaluated", extra=extra)
        return CalculatorResult(
            expression=outcome.expression,
            operator=operator,
            result=outcome.value,
            formula=outcome.formula,
        )

    def evaluate_token(self, expression: str | None, operator_token: str | None) -> CalculatorResult:
        return self.evaluate(expression, self.policy.parse_operator(operator_token))

    @cached_property
    def langchain_tool(self):
        service = self

        @tool("calculator", return_direct=True)
        def _calculator(expression: str, operator: str = "add") -> str:
            """Evaluate delimiter-separated numbers (e.g. "1,2,3") with add, subtract, multiply or divide."""
            return service.evaluate_token(expression, operator).as_text()

        return _calculator
