"""Test helper utilities for What-Eat-Today tests."""

from .fixture_adapter import FixtureSearchAdapter, load_fixture_queries

__all__ = ["FixtureSearchAdapter", "load_fixture_queries"]
