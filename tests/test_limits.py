from datetime import date, datetime

import pytest

from cardwise.domain.models import (
    LimitStatus,
    PointType,
    QuarterlyBonus,
    ResetCycle,
    SpendingCategory,
    SpendingLimit,
)
from cardwise.engine.limits import LimitTracker, next_reset_date, quarter_of

GROCERIES = SpendingCategory.GROCERIES


@pytest.mark.parametrize(
    ("spent", "status"),
    [
        (0, LimitStatus.AVAILABLE),
        (849.99, LimitStatus.AVAILABLE),
        (850, LimitStatus.WARNING),
        (999.99, LimitStatus.WARNING),
        (1000, LimitStatus.REACHED),
        (1500, LimitStatus.REACHED),
    ],
)
def test_status_boundaries(card_factory, as_of, spent: float, status: LimitStatus) -> None:
    card = card_factory(limit=1000, spent=spent)

    assert LimitTracker().status(card, GROCERIES, as_of) == status


def test_missing_or_zero_limit_is_available(card_factory, as_of) -> None:
    tracker = LimitTracker()

    assert tracker.status(card_factory(), GROCERIES, as_of) == LimitStatus.AVAILABLE
    assert tracker.status(card_factory(limit=0, spent=50), GROCERIES, as_of) == LimitStatus.AVAILABLE
    assert tracker.usage_ratio(card_factory(limit=0, spent=50), GROCERIES, as_of) == 0.0


def test_custom_threshold(card_factory, as_of) -> None:
    card = card_factory(limit=1000, spent=500)

    assert LimitTracker().status(card, GROCERIES, as_of, threshold=0.5) == LimitStatus.WARNING
    assert LimitTracker(threshold=0.6).status(card, GROCERIES, as_of) == LimitStatus.AVAILABLE


def test_quarterly_bonus_counts_only_in_its_quarter(card_factory) -> None:
    bonus = QuarterlyBonus(
        category=GROCERIES,
        multiplier=5.0,
        point_type=PointType.ULTIMATE_REWARDS,
        limit=1500,
        current_spending=1350,
        quarter=4,
        year=2026,
    )
    card = card_factory(bonus=bonus)
    tracker = LimitTracker()

    assert tracker.status(card, GROCERIES, datetime(2026, 11, 2)) == LimitStatus.WARNING
    assert tracker.remaining(card, GROCERIES, datetime(2026, 11, 2)) == 150
    assert tracker.status(card, GROCERIES, datetime(2027, 1, 2)) == LimitStatus.AVAILABLE


def test_remaining_never_negative(card_factory, as_of) -> None:
    card = card_factory(limit=1000, spent=1200)

    assert LimitTracker().remaining(card, GROCERIES, as_of) == 0.0


@pytest.mark.parametrize(
    ("cycle", "start", "expected"),
    [
        (ResetCycle.MONTHLY, date(2026, 1, 31), date(2026, 2, 28)),
        (ResetCycle.MONTHLY, date(2026, 12, 15), date(2027, 1, 15)),
        (ResetCycle.QUARTERLY, date(2026, 2, 10), date(2026, 4, 1)),
        (ResetCycle.QUARTERLY, date(2026, 11, 15), date(2027, 1, 1)),
        (ResetCycle.ANNUALLY, date(2024, 2, 29), date(2025, 2, 28)),
        (ResetCycle.ANNUALLY, date(2026, 6, 1), date(2027, 6, 1)),
        (ResetCycle.NEVER, date(2026, 6, 1), date(2026, 6, 1)),
    ],
)
def test_next_reset_date(cycle: ResetCycle, start: date, expected: date) -> None:
    assert next_reset_date(cycle, start) == expected


def test_next_reset_date_accepts_datetimes() -> None:
    assert next_reset_date(ResetCycle.QUARTERLY, datetime(2026, 10, 18, 9, 30)) == date(2027, 1, 1)


def test_quarter_of() -> None:
    assert [quarter_of(date(2026, month, 1)) for month in (1, 3, 4, 6, 7, 9, 10, 12)] == [1, 1, 2, 2, 3, 3, 4, 4]


def test_rolled_over_returns_new_limit() -> None:
    limit = SpendingLimit(
        category=GROCERIES,
        limit=1000,
        current_spending=700,
        reset_date=date(2026, 9, 1),
        reset_cycle=ResetCycle.MONTHLY,
    )

    rolled = LimitTracker().rolled_over(limit, date(2026, 10, 18))

    assert rolled.current_spending == 0.0
    assert rolled.reset_date == date(2026, 11, 1)
    assert limit.current_spending == 700
    assert limit.reset_date == date(2026, 9, 1)


def test_rolled_over_leaves_pending_and_never_limits() -> None:
    tracker = LimitTracker()
    pending = SpendingLimit(category=GROCERIES, limit=1000, current_spending=10, reset_date=date(2027, 1, 1))
    never = SpendingLimit(
        category=GROCERIES,
        limit=1000,
        current_spending=10,
        reset_date=date(2020, 1, 1),
        reset_cycle=ResetCycle.NEVER,
    )

    assert tracker.rolled_over(pending, date(2026, 10, 18)) is pending
    assert tracker.rolled_over(never, date(2026, 10, 18)) is never


def test_rolled_over_month_end_does_not_drift() -> None:
    limit = SpendingLimit(
        category=GROCERIES,
        limit=1000,
        current_spending=400,
        reset_date=date(2026, 1, 31),
        reset_cycle=ResetCycle.MONTHLY,
    )

    assert LimitTracker().rolled_over(limit, date(2026, 3, 1)).reset_date == date(2026, 3, 31)
    assert LimitTracker().rolled_over(limit, date(2026, 4, 2)).reset_date == date(2026, 4, 30)


def test_next_reset_date_counts_periods_from_anchor() -> None:
    assert next_reset_date(ResetCycle.MONTHLY, date(2026, 1, 31), periods=2) == date(2026, 3, 31)
    assert next_reset_date(ResetCycle.ANNUALLY, date(2024, 2, 29), periods=4) == date(2028, 2, 29)
    assert next_reset_date(ResetCycle.QUARTERLY, date(2026, 11, 15), periods=2) == date(2027, 4, 1)
