from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from string_calculator.api.routes import calculator
from string_calculator.core.config import get_settings
from string_calculator.core.exceptions import register_exception_handlers
from string_calculator.core.logging import configure_logging
from string_calculator.core.middleware import RequestContextMiddleware


def create_app() -> FastAPI:
    """
    Application factory for the string calculator service.
    """

    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.api_title,
        description="Evaluates delimiter-separated arithmetic expressions.",
        version=settings.api_version,
    )

    cors_origins = settings.resolved_cors_origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["GET"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(calculator.router)

    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
