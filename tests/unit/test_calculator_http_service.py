from __future__ import annotations

from decimal import Decimal

import httpx
import pytest
import respx
from httpx import Response

from string_calculator.core.config import AppSettings
from string_calculator.models.calculator import CalculatorOperator
from string_calculator.services.calculator_errors import (
    ERRORS_BY_TYPE,
    ArithmeticOverflowError,
    DivideByZeroError,
    InvalidExpressionError,
    NegativeOperandsError,
    TooManyOperandsError,
    UnsupportedOperatorError,
)
from string_calculator.services.calculator_http import CalculatorHttpService, CalculatorHttpServiceError

BASE_URL = "http://calculator.local"


def error_response(error_type: str, message: str, details: dict | None = None, status: int = 400) -> Response:
    error: dict = {"type": error_type, "message": message}
    if details is not None:
        error["details"] = details
    return Response(status, json={"error": error})


@respx.mock
def test_evaluate_returns_result(respx_mock):
    service = CalculatorHttpService(base_url=BASE_URL, timeout=1.5)
    route = respx_mock.get(f"{BASE_URL}/calc").mock(
        return_value=Response(
            200,
            json={"expression": "6,3", "operator": "multiply", "result": 18, "formula": "6*3"},
        )
    )

    result = service.evaluate("6,3", CalculatorOperator.multiply)

    assert result.result == Decimal(18)
    assert result.formula == "6*3"
    request = route.calls.last.request
    assert request.url.params["query"] == "6,3"
    assert request.url.params["operator"] == "multiply"


@respx.mock
def test_evaluate_rebuilds_negative_operands(respx_mock):
    service = CalculatorHttpService(base_url=BASE_URL)
    respx_mock.get(f"{BASE_URL}/calc").mock(
        return_value=error_response(
            "NEGATIVE_OPERANDS", "Negative operands are not allowed", {"values": ["-1", "-2.5"]}
        )
    )

    with pytest.raises(NegativeOperandsError) as exc_info:
        service.evaluate("-1,-2.5")

    assert exc_info.value.values == (Decimal(-1), Decimal("-2.5"))


@pytest.mark.parametrize(
    ("error_type", "details", "expected"),
    [
        ("INVALID_EXPRESSION", {"expression": "//**\\n1"}, InvalidExpressionError),
        ("DIVIDE_BY_ZERO", None, DivideByZeroError),
        ("TOO_MANY_OPERANDS", {"max_operands": 2}, TooManyOperandsError),
        ("ARITHMETIC_OVERFLOW", None, ArithmeticOverflowError),
        ("UNSUPPORTED_OPERATOR", {"operator": "modulo"}, UnsupportedOperatorError),
    ],
)
def test_evaluate_rebuilds_typed_errors(respx_mock, error_type, details, expected):
    service = CalculatorHttpService(base_url=BASE_URL)
    respx_mock.get(f"{BASE_URL}/calc").mock(return_value=error_response(error_type, "rejected", details))

    with pytest.raises(expected):
        service.evaluate("1,2,3")



def test_rebuilt_error_keeps_details(respx_mock):
    service = CalculatorHttpService(base_url=BASE_URL)
    respx_mock.get(f"{BASE_URL}/calc").mock(
        return_value=error_response("UNSUPPORTED_OPERATOR", "Unsupported operator", {"operator": "modulo"})
    )

    with pytest.raises(UnsupportedOperatorError) as exc_info:
        service.evaluate("1,2")

    assert exc_info.value.operator == "modulo"
    assert exc_info.value.details == {"operator": "modulo"}


def test_unknown_error_type_is_not_rebuilt(respx_mock):
    service = CalculatorHttpService(base_url=BASE_URL)
    respx_mock.get(f"{BASE_URL}/calc").mock(return_value=error_response("VALIDATION_ERROR", "Bad query"))

    with pytest.raises(CalculatorHttpServiceError) as exc_info:
        service.evaluate("1,2")

    assert exc_info.value.message == "Bad query"


def test_errors_by_type_covers_every_calculator_error():
    assert set(ERRORS_BY_TYPE) == {
        "INVALID_EXPRESSION",
        "NEGATIVE_OPERANDS",
        "DIVIDE_BY_ZERO",
        "ARITHMETIC_OVERFLOW",
        "UNSUPPORTED_OPERATOR",
        "TOO_MANY_OPERANDS",
    }
    assert all(ERRORS_BY_TYPE[error_type].error_type == error_type for error_type in ERRORS_BY_TYPE)

@respx.mock
def test_evaluate_raises_on_http_error(respx_mock):
    service = CalculatorHttpService(base_url=BASE_URL)
    respx_mock.get(f"{BASE_URL}/calc").mock(
        return_value=error_response("APP_ERROR", "fail", status=500)
    )

    with pytest.raises(CalculatorHttpServiceError) as exc_info:
        service.evaluate("5,5")

    assert exc_info.value.message == "fail"


@respx.mock
def test_evaluate_raises_on_invalid_json(respx_mock):
    service = CalculatorHttpService(base_url=BASE_URL)
    respx_mock.get(f"{BASE_URL}/calc").mock(return_value=Response(200, text="not json"))

    with pytest.raises(CalculatorHttpServiceError):
        service.evaluate("5,5")


@respx.mock
def test_blank_expression_skips_request(respx_mock):
    service = CalculatorHttpService(base_url=BASE_URL)

    result = service.evaluate("   ", CalculatorOperator.divide)

    assert result.result == 0
    assert result.formula == ""
    assert not respx_mock.calls


def test_evaluate_handles_network_error(monkeypatch):
    service = CalculatorHttpService(base_url=BASE_URL)

    def fail_request(*args, **kwargs):
        raise httpx.ConnectError("unreachable")

    monkeypatch.setattr(httpx, "Client", lambda *args, **kwargs: DummyClient(fail_request))

    with pytest.raises(CalculatorHttpServiceError):
        service.evaluate("2,2")


class DummyClient:
    def __init__(self, callback):
        self._callback = callback

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False

    def get(self, *args, **kwargs):
        return self._callback(*args, **kwargs)


def test_from_settings_requires_base_url(monkeypatch):
    monkeypatch.setattr(
        "string_calculator.services.calculator_http.get_settings",
        lambda: AppSettings(_env_file=None, calc_http_base_url=None),
    )

    with pytest.raises(CalculatorHttpServiceError):
        CalculatorHttpService.from_settings()


def test_from_settings_uses_timeout(monkeypatch):
    settings = AppSettings(_env_file=None, calc_http_base_url="http://calculator.local/", calc_http_timeout_sec=7.5)
    monkeypatch.setattr("string_calculator.services.calculator_http.get_settings", lambda: settings)

    service = CalculatorHttpService.from_settings()

    assert service.base_url == "http://calculator.local"
    assert service.timeout == 7.5
