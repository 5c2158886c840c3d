"""Shared pytest fixtures."""

from pathlib import Path

import pytest

from whateat.config.models import SearchConfig
from whateat.logging.context import clear_log_context
from whateat.persistence.database import close_database, init_database
from whateat.search.service import NearbySearchService
from tests.helpers import FixtureSearchAdapter

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SEARCH_FIXTURE = FIXTURES_DIR / "search" / "gangnam_hansik.yaml"


@pytest.fixture(autouse=True)
def reset_log_context():
    """Keep log context fields from leaking between tests."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every environment variable the service reads."""
    for name in (
        "NAVER_CLIENT_ID",
        "NAVER_CLIENT_SECRET",
        "DATABASE_URL",
        "LOG_LEVEL",
        "PORT",
        "ENVIRONMENT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def initialized_db():
    """Fresh in-memory database for one test."""
    init_database("sqlite:///:memory:")
    yield
    close_database()


@pytest.fixture
def fixture_adapter():
    """Adapter replaying the recorded 강남역 한식 pages."""
    return FixtureSearchAdapter(SEARCH_FIXTURE)


@pytest.fixture
def search_service(fixture_adapter):
    """Search service wired to the fixture adapter, sorted by review count."""
    return NearbySearchService(fixture_adapter, SearchConfig())
