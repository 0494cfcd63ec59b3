"""
Promotion Engine - rank ladder and time-in-rank promotion eligibility.

Bands (ladder index -> days in rank):
- 0-1: 2 days
- 2-3: 3 days
- 4-6: 7 days
- 7-9: 10 days
- 10-14: command decision only
"""

from unitportal.engines.promotion.rank_ladder import (
    Rank,
    RANK_LABELS,
    is_valid_rank,
    rank_index,
    rank_label,
    required_days,
    to_rank,
)
from unitportal.engines.promotion.evaluator import (
    days_until_due,
    elapsed_days,
    is_promotion_due,
)

__all__ = [
    "Rank",
    "RANK_LABELS",
    "is_valid_rank",
    "rank_index",
    "rank_label",
    "required_days",
    "to_rank",
    "days_until_due",
    "elapsed_days",
    "is_promotion_due",
]
