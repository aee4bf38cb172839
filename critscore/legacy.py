"""Limits and helpers shared by the signals that mirror the original scoring data."""

from __future__ import annotations

import math
from datetime import datetime, timedelta

SINCE_DURATION = timedelta(days=30)
ISSUE_LOOKBACK = timedelta(days=90 * 24)

MAX_CONTRIBUTOR_LIMIT = 5000
MAX_ISSUES_LIMIT = 5000
MAX_TOP_CONTRIBUTORS = 15

TOO_MANY_CONTRIBUTORS_ORG_COUNT = 10
TOO_MANY_COMMENTS_FREQUENCY = 2.0

RELEASES_PER_PAGE = 100


class TooManyResultsError(Exception):
    """An exact count could not be returned because there are too many results."""

    def __init__(self, message: str = "too many results") -> None:
        super().__init__(message)


def time_delta(a: datetime, b: datetime, unit: timedelta) -> int:
    """Return the whole number of units between a and b, in either order."""
    difference = abs(a - b)
    return difference // unit


def _round_half_away_from_zero(value: float) -> float:
    truncated = math.trunc(value)
    if abs(value - truncated) >= 0.5:
        truncated += math.copysign(1, value)
    return float(truncated)


def round_to(value: float, places: int) -> float:
    """Return value rounded to places decimal places, halves away from zero."""
    if math.isnan(value) or math.isinf(value):
        return value
    multiplier = 10.0 ** places
    return _round_half_away_from_zero(value * multiplier) / multiplier