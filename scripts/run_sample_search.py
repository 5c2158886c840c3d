#!/usr/bin/env python3
"""Sample search harness for end-to-end validation.

Runs one nearby search and one gacha spin over the results without
starting the API. It can operate in two modes:

1. Fixture mode (default): Replays recorded provider pages from YAML
2. Real endpoint mode: Calls the live local search API (requires credentials)

Usage:
    # Run with fixtures (no network required)
    python scripts/run_sample_search.py

    # Run with the real provider (NAVER_CLIENT_ID/SECRET must be set)
    SAMPLE_SEARCH_REAL_RUN=1 python scripts/run_sample_search.py --location 홍대입구역 --category 일식

    # Custom fixtures file
    python scripts/run_sample_search.py --fixtures tests/fixtures/search/gangnam_hansik.yaml
"""

import argparse
import asyncio
import os
import sys
from datetime import datetime
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from whateat.adapters.exceptions import AdapterError
from whateat.adapters.factory import get_search_adapter
from whateat.config.loader import load_config
from whateat.gacha import GachaMachine, GachaSession, PhaseDurations
from whateat.logging.config import configure_logging
from whateat.search import NearbySearchService
from tests.helpers.fixture_adapter import FixtureSearchAdapter


def print_header(title: str):
    """Print a formatted section header."""
    width = 80
    print("\n" + "=" * width)
    print(f" {title}")
    print("=" * width + "\n")


def print_summary_table(result):
    """Print a formatted summary table of search results."""
    print_header("Search Summary")

    stats = result.stats
    metrics = [
        ("Query", stats.query),
        ("Pages Requested", stats.pages_requested),
        ("Pages Fetched", stats.pages_fetched),
        ("Raw Items", stats.raw_count),
        ("Duplicates Dropped", stats.duplicates_dropped),
        ("Restaurants Returned", stats.returned_count),
        ("Partial", "Yes" if stats.partial else "No"),
        ("Duration (seconds)", f"{stats.duration_seconds:.2f}"),
    ]

    max_label_width = max(len(label) for label, _ in metrics)

    print("┌" + "─" * (max_label_width + 2) + "┬" + "─" * 32 + "┐")
    print(f"│ {'Metric':<{max_label_width}} │ {'Value':<30} │")
    print("├" + "─" * (max_label_width + 2) + "┼" + "─" * 32 + "┤")
    for label, value in metrics:
        print(f"│ {label:<{max_label_width}} │ {str(value):<30} │")
    print("└" + "─" * (max_label_width + 2) + "┴" + "─" * 32 + "┘")

    if stats.error_message:
        print(f"\nPage failure: {stats.error_message}")

    print("\n" + "-" * 80)
    print(" Restaurants")
    print("-" * 80 + "\n")
    for index, restaurant in enumerate(result.restaurants, start=1):
        coordinates = restaurant.coordinates
        where = "no coordinates"
        if coordinates is not None and coordinates.latitude is not None:
            where = f"{coordinates.latitude}, {coordinates.longitude}"
        print(f"{index:>2}. {restaurant.name} [{restaurant.category.raw or '-'}]")
        print(f"    {restaurant.road_address or restaurant.address} ({where})")


def main():
    """Main entry point for sample search harness."""
    parser = argparse.ArgumentParser(
        description="Run a sample nearby search and gacha spin",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to configuration file")
    parser.add_argument("--location", default="강남역", help="Location to search (default: 강남역)")
    parser.add_argument("--category", default="한식", help="Food category (default: 한식)")
    parser.add_argument("--count", type=int, default=10, help="Restaurants wanted (default: 10)")
    parser.add_argument(
        "--fixtures",
        type=Path,
        default=Path("tests/fixtures/search/gangnam_hansik.yaml"),
        help="Path to fixtures YAML file (default: tests/fixtures/search/gangnam_hansik.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: INFO)",
    )

    args = parser.parse_args()

    load_dotenv()

    use_real_endpoints = os.environ.get("SAMPLE_SEARCH_REAL_RUN", "0") == "1"

    print_header("What-Eat-Today - Sample Search Harness")
    print(f"Location: {args.location}")
    print(f"Category: {args.category or '(none)'}")

    if use_real_endpoints:
        print("\n⚠️  REAL ENDPOINT MODE ENABLED")
        print("   The search will make actual HTTP requests and consume API quota.")
    else:
        print(f"Fixture mode: {args.fixtures}")
        if not args.fixtures.exists():
            print(f"\n❌ Error: Fixture file not found: {args.fixtures}")
            print("   Run with SAMPLE_SEARCH_REAL_RUN=1 to use the real provider instead.")
            return 1

    try:
        app_config, env_config = load_config(args.config)
        configure_logging(
            level=args.log_level,
            format_type=app_config.logging.format,
            environment="validation",
        )

        if use_real_endpoints:
            adapter = get_search_adapter(app_config.http, env_config)
        else:
            adapter = FixtureSearchAdapter(args.fixtures)

        service = NearbySearchService(adapter, app_config.search)

        print(f"\n🚀 Searching... started at {datetime.now().strftime('%H:%M:%S')}")
        try:
            result = service.search(args.location, args.category, args.count)
        finally:
            adapter.close()

        print_summary_table(result)

        print_header("Gacha")
        session = GachaSession(machine=GachaMachine(PhaseDurations(0.1, 0.5, 0.2)))
        if result.restaurants:
            session.use_search_results(result.restaurants)
        else:
            print("No search results; spinning the built-in pool instead.")
        outcome = asyncio.run(session.spin())
        if outcome.revealed:
            session.select()
            print(session.selection_message())
        else:
            print(outcome.message)

        return 0

    except AdapterError as e:
        print(f"\n❌ Search failed: {e}")
        return 1
    except Exception as e:
        print(f"\n❌ Fatal error: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
