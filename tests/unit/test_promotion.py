"""Unit tests for the rank ladder and promotion evaluator."""

from datetime import datetime, timedelta, timezone

import pytest

from unitportal.engines.promotion import (
    RANK_LABELS,
    Rank,
    days_until_due,
    elapsed_days,
    is_promotion_due,
    is_valid_rank,
    rank_index,
    rank_label,
    required_days,
    to_rank,
)
from unitportal.kernel.errors import InvalidInput

NOW = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)


def days_ago(days: float) -> datetime:
    return NOW - timedelta(days=days)


class TestRankLadder:
    """Tests for the fixed 15-step ladder."""

    def test_ladder_has_fifteen_ranks_in_order(self):
        assert len(RANK_LABELS) == 15
        assert rank_label(0) == "Рядовой"
        assert rank_label(4) == "Старший сержант"
        assert rank_label(14) == "Генерал"
        assert Rank.PRIVATE < Rank.GENERAL

    def test_rank_index_is_case_insensitive(self):
        assert rank_index("старший СЕРЖАНТ") == Rank(4)
        assert rank_index("Генерал") == Rank.GENERAL
        assert rank_index("Адмирал") is None

    def test_off_ladder_index_is_invalid(self):
        assert is_valid_rank(0)
        assert is_valid_rank(14)
        assert not is_valid_rank(-1)
        assert not is_valid_rank(15)
        with pytest.raises(InvalidInput) as exc:
            to_rank(15)
        assert exc.value.field == "rank"

    def test_booleans_are_not_ranks(self):
        assert not is_valid_rank(True)
        assert not is_valid_rank(False)
        with pytest.raises(InvalidInput):
            to_rank(True)


class TestRequiredDays:
    """Band lookup per ladder index."""

    @pytest.mark.parametrize(
        "rank, days",
        [(0, 2), (1, 2), (2, 3), (3, 3), (4, 7), (6, 7), (7, 10), (9, 10)],
    )
    def test_bands(self, rank, days):
        assert required_days(rank) == days

    @pytest.mark.parametrize("rank", range(10, 15))
    def test_senior_ranks_are_never_automatic(self, rank):
        assert required_days(rank) is None


class TestIsPromotionDue:
    """Time-in-rank eligibility."""

    def test_private_due_after_two_days(self):
        assert is_promotion_due(0, days_ago(2), NOW) is True

    def test_private_not_due_one_second_short(self):
        last = NOW - timedelta(days=2) + timedelta(seconds=1)
        assert is_promotion_due(0, last, NOW) is False

    def test_partial_days_round_down(self):
        assert elapsed_days(days_ago(2.9), NOW) == 2
        assert is_promotion_due(2, days_ago(2.9), NOW) is False
        assert is_promotion_due(2, days_ago(3), NOW) is True

    def test_staff_sergeant_needs_seven_days(self):
        assert is_promotion_due(4, days_ago(6), NOW) is False
        assert is_promotion_due(4, days_ago(7), NOW) is True

    def test_junior_officer_needs_ten_days(self):
        assert is_promotion_due(7, days_ago(9), NOW) is False
        assert is_promotion_due(9, days_ago(10), NOW) is True

    def test_captain_and_above_never_due(self):
        for rank in range(10, 15):
            assert is_promotion_due(rank, days_ago(1000), NOW) is False

    def test_rank_change_in_the_future_is_not_due(self):
        assert is_promotion_due(0, NOW + timedelta(days=1), NOW) is False

    def test_naive_datetimes_are_read_as_utc(self):
        naive_last = (NOW - timedelta(days=2)).replace(tzinfo=None)
        assert is_promotion_due(0, naive_last, NOW) is True

    def test_off_ladder_rank_is_rejected(self):
        with pytest.raises(InvalidInput):
            is_promotion_due(15, days_ago(100), NOW)

    def test_days_until_due(self):
        assert days_until_due(4, days_ago(3), NOW) == 4
        assert days_until_due(4, days_ago(30), NOW) == 0
        assert days_until_due(12, days_ago(3), NOW) is None
