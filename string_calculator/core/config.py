from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PolicyName = Literal["full", "sum", "sum_two"]


class AppSettings(BaseSettings):
    api_title: str = "String Calculator API"
    api_version: str = "0.1.0"
    log_level: str = "INFO"

    calc_policy: PolicyName = "full"
    calc_max_operand_value: int = Field(1000, ge=0)
    calc_max_operands: int = Field(2, ge=1)  # sum_two only
    calc_pattern_timeout_sec: float = Field(5.0, gt=0)
    calc_http_base_url: str | None = None
    calc_http_timeout_sec: float = 5.0

    cors_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    )
    frontend_origin: str | None = Field(default=None, alias="FRONTEND_ORIGIN")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def resolved_cors_origins(self) -> List[str]:
        """
        Returns the configured CORS origins plus the optional frontend origin, deduped.
        """
        normalized: list[str] = []
        for origin in [*self.cors_origins, self.frontend_origin]:
            if not origin:
                continue
            cleaned = origin.rstrip("/")
            if cleaned not in normalized:
                normalized.append(cleaned)
        return normalized


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
