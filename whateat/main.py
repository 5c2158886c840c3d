"""Main entry point for the What-Eat-Today service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Optional, Tuple

import uvicorn

from whateat.adapters.exceptions import AdapterError, UpstreamAuthError
from whateat.adapters.factory import get_search_adapter
from whateat.config.environment import EnvironmentConfig
from whateat.config.exceptions import ConfigurationError
from whateat.config.loader import load_config
from whateat.config.models import AppConfig
from whateat.logging import get_logger
from whateat.logging.config import configure_logging
from whateat.persistence.database import close_database, init_database
from whateat.search.exceptions import InvalidInputError
from whateat.search.service import NearbySearchService

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="What-Eat-Today - nearby restaurant search and picker API"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml, then config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--search",
        metavar="LOCATION",
        default=None,
        help="Run one nearby search, print the JSON result and exit",
    )
    parser.add_argument("--category", default="", help="Food category for --search, e.g. 한식")
    parser.add_argument(
        "--count", type=int, default=10, help="Number of restaurants for --search (1-10)"
    )
    return parser


def run_search(
    app_config: AppConfig, env_config: EnvironmentConfig, location: str, category: str, count: int
) -> int:
    """One-shot search printed as the API's JSON envelope. Returns an exit code."""
    adapter = get_search_adapter(app_config.http, env_config)
    service = NearbySearchService(adapter, app_config.search)

    try:
        result = service.search(location, category, count)
    except InvalidInputError as e:
        print(f"Invalid search: {e}", file=sys.stderr)
        return 2
    except UpstreamAuthError as e:
        print(f"Search provider unavailable: {e}", file=sys.stderr)
        return 1
    except AdapterError as e:
        print(f"Search provider call failed: {e}", file=sys.stderr)
        return 1
    finally:
        adapter.close()

    payload = result.to_payload()
    envelope = {
        "success": True,
        "data": payload["restaurants"],
        "meta": {
            "total": payload["total"],
            "location": payload["location"],
            "category": payload["category"],
            "source": "naver_local_search",
        },
    }
    print(json.dumps(envelope, ensure_ascii=False, indent=2))
    return 0


def serve(app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    """Initialize the database and run the API until interrupted."""
    from whateat.api import create_app

    init_database(env_config.database_url)
    app = create_app(app_config, env_config)

    logger.info(
        f"Serving API on {app_config.server.host}:{app_config.server.port}",
        extra={
            "event": "service.serving",
            "host": app_config.server.host,
            "port": app_config.server.port,
        },
    )
    try:
        # log_config=None keeps the handlers installed by configure_logging
        uvicorn.run(
            app,
            host=app_config.server.host,
            port=app_config.server.port,
            log_config=None,
        )
    finally:
        close_database()
    return 0


def main(argv=None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.info(
            "What-Eat-Today starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "mode": "search" if args.search is not None else "serve",
                "search_configured": env_config.has_search_credentials,
            },
        )

        if args.search is not None:
            exit_code = run_search(app_config, env_config, args.search, args.category, args.count)
        else:
            exit_code = serve(app_config, env_config)

        logger.info(
            "What-Eat-Today stopped",
            extra={
                "event": "service.stopping",
                "uptime_seconds": round(time.time() - start_time, 2),
            },
        )
        return exit_code

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during startup",
            extra={
                "event": "service.startup.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
