"""
Promotion Evaluator - derives promotion eligibility from time in rank.

Eligibility is never stored; every read recomputes it from the record's
current rank and rank-change timestamp.
"""

from datetime import datetime, timedelta
from typing import Optional

from unitportal.engines.promotion.rank_ladder import required_days
from unitportal.kernel.models.base import as_utc

_ONE_DAY = timedelta(days=1)


def elapsed_days(since: datetime, now: datetime) -> int:
    """Whole days between two instants, rounded down."""
    return (as_utc(now) - as_utc(since)) // _ONE_DAY


def is_promotion_due(rank: int, last_rank_change: datetime, now: datetime) -> bool:
    """
    Check whether a member is due for promotion.

    Args:
        rank: Current ladder index (0-14)
        last_rank_change: When the current rank was assigned
        now: Evaluation time

    Returns:
        True if the member has held the rank at least as long as its band requires.
        Always False for ranks that are not evaluated automatically.
    """
    days = required_days(rank)
    if days is None:
        return False
    return elapsed_days(last_rank_change, now) >= days


def days_until_due(rank: int, last_rank_change: datetime, now: datetime) -> Optional[int]:
    """Days left until promotion is due; 0 when already due, None if never automatic."""
    days = required_days(rank)
    if days is None:
        return None
    return max(0, days - elapsed_days(last_rank_change, now))
