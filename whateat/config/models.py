"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator, model_validator


class SortOrder(str, Enum):
    """Sort orders accepted by the local search endpoint."""

    COMMENT = "comment"  # most reviewed first
    RANDOM = "random"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class SearchConfig(BaseModel):
    """Nearby search behaviour."""

    page_size: int = Field(
        5, ge=1, le=5, description="Items requested per call (the provider caps display at 5)"
    )
    max_results: int = Field(
        10, ge=1, le=10, description="Hard cap on restaurants returned per search"
    )
    sort: SortOrder = Field(SortOrder.COMMENT, description="Provider sort order")
    query_suffix: str = Field(
        "맛집", min_length=1, description="Term appended to every query to bias toward food venues"
    )
    all_categories_label: str = Field(
        "전체", min_length=1, description="Category label reported when no category was requested"
    )

    @field_validator("query_suffix", "all_categories_label")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    model_config = {"use_enum_values": True, "validate_default": True}


class HttpConfig(BaseModel):
    """Outbound HTTP settings for the local search adapter."""

    base_url: str = Field(
        "https://openapi.naver.com/v1/search/local.json",
        description="Local search endpoint",
    )
    request_timeout: int = Field(10, ge=1, le=120, description="Request timeout (seconds)")
    user_agent: str = Field(
        "WhatEatToday/1.0", min_length=1, description="User-Agent header for outbound requests"
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class ServerConfig(BaseModel):
    """HTTP server settings."""

    host: str = Field("0.0.0.0", min_length=1, description="Bind address")
    port: int = Field(3001, ge=1, le=65535, description="Listen port")
    cors_origins: List[str] = Field(
        default_factory=lambda: ["*"], description="Allowed CORS origins"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True, "validate_default": True}


class AppConfig(BaseModel):
    """Root configuration object for What-Eat-Today."""

    search: SearchConfig = Field(default_factory=SearchConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def validate_cors_origins(self):
        """Reject empty origin entries left behind by YAML list edits."""
        origins = [origin.strip() for origin in self.server.cors_origins]
        if any(not origin for origin in origins):
            raise ValueError("server.cors_origins cannot contain empty entries")
        self.server.cors_origins = origins
        return self
