from __future__ import annotations

from decimal import Decimal
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from string_calculator.core.context import get_request_id


class AppError(Exception):
    status_code: int = 500
    error_type: str = "APP_ERROR"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


def error_payload(exc: AppError) -> dict[str, Any]:
    body: dict[str, Any] = {
        "type": exc.error_type,
        "message": exc.message,
    }
    if exc.details:
        body["details"] = jsonable_encoder(exc.details, custom_encoder={Decimal: str})
    trace_id = get_request_id()
    if trace_id:
        body["traceId"] = trace_id
    return {"error": body}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=error_payload(exc))
