"""Usage statistics and review summaries."""

from .service import PERIODS, compute_usage_stats, period_start, summarize_reviews

__all__ = ["PERIODS", "compute_usage_stats", "period_start", "summarize_reviews"]
