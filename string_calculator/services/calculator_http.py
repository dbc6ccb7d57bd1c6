from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import httpx

from string_calculator.core.config import get_settings
from string_calculator.models.calculator import CalculatorOperator, CalculatorResult
from string_calculator.services.calculator_errors import ERRORS_BY_TYPE, CalculatorError


class CalculatorHttpServiceError(CalculatorError):
    status_code = 502
    error_type = "CALCULATOR_HTTP_ERROR"


def _rebuild_error(error: dict[str, Any]) -> CalculatorError | None:
    error_class = ERRORS_BY_TYPE.get(error.get("type"))
    if error_class is None:
        return None
    return error_class.from_details(error.get("details") or {})


@dataclass
class CalculatorHttpService:
    base_url: str
    timeout: float = 5.0

    @classmethod
    def from_settings(cls) -> "CalculatorHttpService":
        settings = get_settings()
        if not settings.calc_http_base_url:
            raise CalculatorHttpServiceError("CALC_HTTP_BASE_URL is not configured.")
        return cls(
            base_url=settings.calc_http_base_url.rstrip("/"),
            timeout=float(settings.calc_http_timeout_sec),
        )

    def evaluate(
        self,
        expression: str | None,
        operator: CalculatorOperator = CalculatorOperator.add,
    ) -> CalculatorResult:
        query = expression or ""
        if not query.strip():
            return CalculatorResult(expression=query, operator=operator, result=Decimal(0), formula="")

        url = f"{self.base_url}/calc"
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(url, params={"query": query, "operator": operator.value})
        except httpx.RequestError as exc:
            raise CalculatorHttpServiceError("Calculator service is unavailable.") from exc

        if response.status_code != 200:
            message = "Calculator request failed."
            try:
                payload = response.json()
            except ValueError:
                payload = None
            error = payload.get("error") if isinstance(payload, dict) else None
            if isinstance(error, dict):
                if response.status_code == 400:
                    rebuilt = _rebuild_error(error)
                    if rebuilt is not None:
                        raise rebuilt
                message = error.get("message", message)
            raise CalculatorHttpServiceError(message)

        try:
            payload = response.json()
        except ValueError as exc:
            raise CalculatorHttpServiceError("Calculator response was not valid JSON.") from exc

        return CalculatorResult.model_validate(payload)
