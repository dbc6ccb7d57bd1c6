from fastapi import APIRouter, Depends, Query

from string_calculator.models.calculator import (
    CalculatorResult,
    OperatorInfo,
    SupportedOperatorsResponse,
)
from string_calculator.services.calculator import CalculatorService

router = APIRouter(prefix="/calc", tags=["calculator"])


def get_calculator_service() -> CalculatorService:
    return CalculatorService.from_settings()


@router.get("", response_model=CalculatorResult)
async def evaluate_calculator_expression(
    query: str = Query(..., description="Delimiter-separated operands, optionally led by a //delimiter directive."),
    operator: str = Query("add", description="Operator name, symbol or menu index."),
    service: CalculatorService = Depends(get_calculator_service),
) -> CalculatorResult:
    return service.evaluate_token(query, operator)


@router.get("/operators", response_model=SupportedOperatorsResponse)
async def list_supported_operators(
    service: CalculatorService = Depends(get_calculator_service),
) -> SupportedOperatorsResponse:
    operators = [
        OperatorInfo(index=index, name=operator, label=operator.label, symbol=operator.symbol)
        for index, operator in enumerate(service.policy.operators)
    ]
    return SupportedOperatorsResponse(policy=service.policy.name, operators=operators)
