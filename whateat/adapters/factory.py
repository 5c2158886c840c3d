"""Factory for the configured local search adapter."""

from whateat.config.environment import EnvironmentConfig
from whateat.config.models import HttpConfig
from whateat.logging import get_logger

from .naver import NaverLocalSearchAdapter

logger = get_logger(__name__, component="adapter")


def get_search_adapter(http_config: HttpConfig, env_config: EnvironmentConfig) -> NaverLocalSearchAdapter:
    """Build the local search adapter from configuration.

    Missing credentials do not fail here: the adapter raises
    UpstreamAuthError on first use so the rest of the API keeps working.

    Example:
        >>> adapter = get_search_adapter(HttpConfig(), load_environment_config())
        >>> page = adapter.search_local("강남역 맛집", display=5, start=1, sort="comment")
    """
    if not env_config.has_search_credentials:
        logger.warning(
            "Local search credentials are not configured; nearby search will be unavailable",
            extra={"event": "adapter.credentials.missing"},
        )

    return NaverLocalSearchAdapter(
        client_id=env_config.naver_client_id,
        client_secret=env_config.naver_client_secret,
        base_url=http_config.base_url,
        timeout=http_config.request_timeout,
        user_agent=http_config.user_agent,
    )
