from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from decimal import Decimal
from typing import FrozenSet

from string_calculator.core.config import AppSettings
from string_calculator.models.calculator import OPERATOR_SYMBOLS, CalculatorOperator
from string_calculator.services.calculator_errors import UnsupportedOperatorError
from string_calculator.services.delimiters import DEFAULT_DELIMITERS, DEFAULT_PATTERN_TIMEOUT_SEC

MAX_OPERAND_VALUE = Decimal(1000)


@dataclass(frozen=True)
class CalculatorPolicy:
    """Rules an engine evaluates with: delimiters, operand limits and operators."""

    name: str
    delimiters: tuple[str, ...] = DEFAULT_DELIMITERS
    allow_custom_delimiters: bool = True
    max_operand_value: Decimal | None = MAX_OPERAND_VALUE
    reject_negatives: bool = True
    max_operands: int | None = None
    supported_operators: FrozenSet[CalculatorOperator] = frozenset(CalculatorOperator)
    pattern_timeout_sec: float = DEFAULT_PATTERN_TIMEOUT_SEC

    @property
    def operators(self) -> list[CalculatorOperator]:
        return [operator for operator in CalculatorOperator if operator in self.supported_operators]

    def supports(self, operator: object) -> bool:
        return operator in self.supported_operators

    def parse_operator(self, token: str | None) -> CalculatorOperator:
        """Map user input (menu index, name or symbol) to a supported operator."""

        raw = token or ""
        cleaned = raw.strip().lower()
        operators = self.operators
        for index, operator in enumerate(operators):
            if cleaned in (str(index), operator.value, OPERATOR_SYMBOLS[operator]):
                return operator
        raise UnsupportedOperatorError(raw)


FULL_POLICY = CalculatorPolicy(name="full")

SUM_POLICY = CalculatorPolicy(
    name="sum",
    allow_custom_delimiters=False,
    max_operand_value=None,
    reject_negatives=False,
    supported_operators=frozenset({CalculatorOperator.add}),
)

SUM_TWO_POLICY = dataclasses.replace(
    SUM_POLICY,
    name="sum_two",
    delimiters=(",",),
    max_operands=2,
)

POLICIES: dict[str, CalculatorPolicy] = {
    policy.name: policy for policy in (FULL_POLICY, SUM_POLICY, SUM_TWO_POLICY)
}


def policy_from_settings(settings: AppSettings) -> CalculatorPolicy:
    base = POLICIES[settings.calc_policy]
    overrides: dict[str, object] = {"pattern_timeout_sec": settings.calc_pattern_timeout_sec}
    if base.max_operand_value is not None:
        overrides["max_operand_value"] = Decimal(settings.calc_max_operand_value)
    if base.max_operands is not None:
        overrides["max_operands"] = settings.calc_max_operands
    return dataclasses.replace(base, **overrides)
