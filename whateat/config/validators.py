"""Non-fatal configuration checks."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any], environment: str = "local") -> List[str]:
    """
    Check raw configuration for settings that are legal but probably unintended.

    Args:
        config_dict: Raw configuration dictionary
        environment: Deployment environment label

    Returns:
        List of warning messages
    """
    warning_messages = []

    search = config_dict.get("search") or {}
    if isinstance(search, dict):
        page_size = search.get("page_size")
        max_results = search.get("max_results")
        if isinstance(page_size, int) and isinstance(max_results, int) and 0 < page_size < max_results:
            calls = -(-max_results // page_size)
            if calls > 2:
                warning_messages.append(
                    f"search.page_size={page_size} needs {calls} provider calls per search; "
                    "the daily quota is shared by every call"
                )

        if search.get("sort") == "random":
            warning_messages.append(
                "search.sort=random ignores review counts; well-reviewed venues will not be ranked first"
            )

    server = config_dict.get("server") or {}
    if isinstance(server, dict) and environment == "production":
        origins = server.get("cors_origins", ["*"])
        if isinstance(origins, list) and "*" in origins:
            warning_messages.append("server.cors_origins allows every origin in production")

    http = config_dict.get("http") or {}
    if isinstance(http, dict):
        timeout = http.get("request_timeout")
        if isinstance(timeout, int) and timeout > 30:
            warning_messages.append(
                f"http.request_timeout={timeout}s holds API requests open for a long time"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
