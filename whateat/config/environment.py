"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

DEFAULT_DATABASE_URL = "sqlite:///./data/whateat.db"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EnvironmentConfig:
    """Secrets and deployment settings read from the environment."""

    def __init__(
        self,
        naver_client_id: Optional[str] = None,
        naver_client_secret: Optional[str] = None,
        database_url: Optional[str] = None,
        log_level: Optional[str] = None,
        port: Optional[int] = None,
        environment: Optional[str] = None,
    ):
        self.naver_client_id = naver_client_id
        self.naver_client_secret = naver_client_secret
        self.database_url = database_url or DEFAULT_DATABASE_URL
        self.log_level = log_level
        self.port = port
        self.environment = environment or "local"

    @property
    def has_search_credentials(self) -> bool:
        """Whether both local search API keys are present."""
        return bool(self.naver_client_id and self.naver_client_secret)


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional so the service can start (and serve stored
    restaurants and reviews) without search credentials; nearby search
    then answers 503 until both keys are configured.

    - NAVER_CLIENT_ID / NAVER_CLIENT_SECRET: local search API keys
    - DATABASE_URL: SQLAlchemy URL (default: sqlite:///./data/whateat.db)
    - LOG_LEVEL: Override log level
    - PORT: Override the configured listen port
    - ENVIRONMENT: Environment label attached to logs (default: local)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If a variable is present but invalid
    """
    errors = []

    client_id = (os.getenv("NAVER_CLIENT_ID") or "").strip() or None
    client_secret = (os.getenv("NAVER_CLIENT_SECRET") or "").strip() or None
    database_url = (os.getenv("DATABASE_URL") or "").strip() or None
    log_level = os.getenv("LOG_LEVEL")
    port_str = os.getenv("PORT")
    environment = os.getenv("ENVIRONMENT")

    if bool(client_id) != bool(client_secret):
        missing = "NAVER_CLIENT_SECRET" if client_id else "NAVER_CLIENT_ID"
        errors.append(
            f"{missing} is not set. NAVER_CLIENT_ID and NAVER_CLIENT_SECRET must be set together."
        )

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    port = None
    if port_str:
        try:
            port = int(port_str)
            if port < 1 or port > 65535:
                errors.append(f"Invalid PORT: {port}. Must be between 1 and 65535.")
        except ValueError:
            errors.append(f"Invalid PORT: '{port_str}'. Must be a valid integer.")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your credentials",
                "Register an application at developers.naver.com to obtain search API keys",
            ],
        )

    return EnvironmentConfig(
        naver_client_id=client_id,
        naver_client_secret=client_secret,
        database_url=database_url,
        log_level=log_level.upper() if log_level else None,
        port=port,
        environment=environment,
    )
