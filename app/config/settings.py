import os
from functools import lru_cache

from pydantic import BaseModel, Field, field_validator

from app.integrations.yahoo_chart import DEFAULT_URL_TEMPLATES


class Settings(BaseModel):
    QUOTE_CACHE_TTL_SEC: float = Field(default=30.0, gt=0)
    QUOTE_UPSTREAM_TIMEOUT_SEC: float = Field(default=8.0, gt=0)
    QUOTE_UPSTREAM_ENDPOINTS: list[str] = Field(default_factory=lambda: list(DEFAULT_URL_TEMPLATES))

    @field_validator("QUOTE_UPSTREAM_ENDPOINTS")
    @classmethod
    def check_url_templates(cls, value: list[str]) -> list[str]:
        for template in value:
            try:
                template.format(symbol="TEST")
            except (KeyError, IndexError, ValueError) as exc:
                raise ValueError(f"invalid upstream URL template {template!r}: only {{symbol}} is allowed") from exc
        return value

    @classmethod
    def from_env(cls) -> "Settings":
        values: dict = {}
        if os.getenv("QUOTE_CACHE_TTL_SEC"):
            values["QUOTE_CACHE_TTL_SEC"] = os.getenv("QUOTE_CACHE_TTL_SEC")
        if os.getenv("QUOTE_UPSTREAM_TIMEOUT_SEC"):
            values["QUOTE_UPSTREAM_TIMEOUT_SEC"] = os.getenv("QUOTE_UPSTREAM_TIMEOUT_SEC")

        raw_endpoints = os.getenv("QUOTE_UPSTREAM_ENDPOINTS", "")
        endpoints = [e.strip() for e in raw_endpoints.split(",") if e.strip()]
        if endpoints:
            values["QUOTE_UPSTREAM_ENDPOINTS"] = endpoints

        return cls.model_validate(values)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
