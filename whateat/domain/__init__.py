"""Domain models shared across the search pipeline, persistence and API."""
