"""
Trends module.

Public API:
- DailyTrendService: Once-a-day trending filter generation
"""

from .service import LAST_TREND_CHECK_KEY, DailyTrendService

__all__ = [
    "DailyTrendService",
    "LAST_TREND_CHECK_KEY",
]
