"""
Rank Ladder - the fixed 15-step seniority ladder and its promotion intervals.
"""

from enum import IntEnum
from typing import Dict, Optional, Tuple

from unitportal.kernel.errors import InvalidInput


class Rank(IntEnum):
    """Ranks by seniority; the value is the ladder index."""
    PRIVATE = 0
    LANCE_CORPORAL = 1
    JUNIOR_SERGEANT = 2
    SERGEANT = 3
    SENIOR_SERGEANT = 4
    SERGEANT_MAJOR = 5
    WARRANT_OFFICER = 6
    JUNIOR_LIEUTENANT = 7
    LIEUTENANT = 8
    SENIOR_LIEUTENANT = 9
    CAPTAIN = 10
    MAJOR = 11
    LIEUTENANT_COLONEL = 12
    COLONEL = 13
    GENERAL = 14


RANK_LABELS: Dict[Rank, str] = {
    Rank.PRIVATE: "Рядовой",
    Rank.LANCE_CORPORAL: "Ефрейтор",
    Rank.JUNIOR_SERGEANT: "Младший сержант",
    Rank.SERGEANT: "Сержант",
    Rank.SENIOR_SERGEANT: "Старший сержант",
    Rank.SERGEANT_MAJOR: "Старшина",
    Rank.WARRANT_OFFICER: "Прапорщик",
    Rank.JUNIOR_LIEUTENANT: "Младший лейтенант",
    Rank.LIEUTENANT: "Лейтенант",
    Rank.SENIOR_LIEUTENANT: "Старший лейтенант",
    Rank.CAPTAIN: "Капитан",
    Rank.MAJOR: "Майор",
    Rank.LIEUTENANT_COLONEL: "Подполковник",
    Rank.COLONEL: "Полковник",
    Rank.GENERAL: "Генерал",
}

# (highest index in band, required days since last rank change).
# Ranks above the last band are promoted by command decision only.
PROMOTION_BANDS: Tuple[Tuple[int, int], ...] = (
    (Rank.LANCE_CORPORAL, 2),
    (Rank.SERGEANT, 3),
    (Rank.WARRANT_OFFICER, 7),
    (Rank.SENIOR_LIEUTENANT, 10),
)

LOWEST_RANK = min(Rank)
HIGHEST_RANK = max(Rank)


def is_valid_rank(index: int) -> bool:
    """Check whether an index falls on the ladder."""
    if isinstance(index, bool) or not isinstance(index, int):
        return False
    return LOWEST_RANK <= index <= HIGHEST_RANK


def to_rank(index: int) -> Rank:
    """Convert a ladder index to a Rank, raising InvalidInput off the ladder."""
    if not is_valid_rank(index):
        raise InvalidInput(
            f"Rank index must be between {int(LOWEST_RANK)} and {int(HIGHEST_RANK)}",
            field="rank",
        )
    return Rank(index)


def rank_label(index: int) -> str:
    """Display name of a rank."""
    return RANK_LABELS[to_rank(index)]


def rank_index(label: str) -> Optional[Rank]:
    """Look up a rank by its display name (case-insensitive)."""
    wanted = label.strip().casefold()
    for rank, name in RANK_LABELS.items():
        if name.casefold() == wanted:
            return rank
    return None


def required_days(index: int) -> Optional[int]:
    """
    Days a member must hold a rank before promotion is due.

    Returns None for ranks that are never evaluated automatically.
    """
    rank = to_rank(index)
    for band_top, days in PROMOTION_BANDS:
        if rank <= band_top:
            return days
    return None
