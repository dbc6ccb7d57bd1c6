from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_serializer


class CalculatorOperator(str, Enum):
    add = "add"
    subtract = "subtract"
    multiply = "multiply"
    divide = "divide"

    @property
    def symbol(self) -> str:
        return OPERATOR_SYMBOLS[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


OPERATOR_SYMBOLS: dict[CalculatorOperator, str] = {
    CalculatorOperator.add: "+",
    CalculatorOperator.subtract: "-",
    CalculatorOperator.multiply: "*",
    CalculatorOperator.divide: "/",
}


def format_decimal(value: Decimal) -> str:
    """Render a decimal in positional notation, keeping the scale it was written with."""

    if value == 0:
        value = value.copy_abs()
    return format(value, "f")


class CalculatorResult(BaseModel):
    expression: str = Field(..., description="The expression that was evaluated.")
    operator: CalculatorOperator = Field(..., description="Operator applied to the operands.")
    result: Decimal = Field(..., description="The evaluated numerical result.")
    formula: str = Field(..., description="Resolved operands joined by the operator symbol.")

    @field_serializer("result")
    def _serialize_result(self, value: Decimal) -> int | float:
        if value == value.to_integral_value():
            return int(value)
        return float(value)

    def as_text(self) -> str:
        if not self.formula:
            return format_decimal(self.result)
        return f"{self.formula} = {format_decimal(self.result)}"


class OperatorInfo(BaseModel):
    index: int = Field(..., description="Menu position used by the console prompt.")
    name: CalculatorOperator
    label: str
    symbol: str


class SupportedOperatorsResponse(BaseModel):
    policy: str = Field(..., description="Name of the active calculator policy.")
    operators: List[OperatorInfo] = Field(default_factory=list)
