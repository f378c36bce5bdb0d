import calendar
from datetime import date, datetime

from cardwise.domain.models import (
    Card,
    LimitStatus,
    QuarterlyBonus,
    ResetCycle,
    SpendingCategory,
    SpendingLimit,
)

DEFAULT_WARNING_THRESHOLD = 0.85


def as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def quarter_of(value: date | datetime) -> int:
    return (value.month - 1) // 3 + 1


def _add_months(value: date, months: int) -> date:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def next_reset_date(cycle: ResetCycle, from_date: date | datetime, periods: int = 1) -> date:
    """Reset date ``periods`` cycles after ``from_date``, always counted from that anchor."""
    start = as_date(from_date)
    if cycle is ResetCycle.MONTHLY:
        return _add_months(start, periods)
    if cycle is ResetCycle.QUARTERLY:
        first_month_of_quarter = (quarter_of(start) - 1) * 3 + 1
        return _add_months(date(start.year, first_month_of_quarter, 1), 3 * periods)
    if cycle is ResetCycle.ANNUALLY:
        return _add_months(start, 12 * periods)
    return start


def classify(ratio: float, threshold: float = DEFAULT_WARNING_THRESHOLD) -> LimitStatus:
    if ratio >= 1.0:
        return LimitStatus.REACHED
    if ratio >= threshold:
        return LimitStatus.WARNING
    return LimitStatus.AVAILABLE


def find_limit(card: Card, category: SpendingCategory) -> SpendingLimit | None:
    return next((item for item in card.spending_limits if item.category == category), None)


def active_bonus(card: Card, category: SpendingCategory, as_of: date | datetime) -> QuarterlyBonus | None:
    bonus = card.quarterly_bonus
    if bonus is None or bonus.category != category:
        return None
    if bonus.quarter != quarter_of(as_of) or bonus.year != as_of.year:
        return None
    return bonus


class LimitTracker:
    """Read-only view over a card's spending limits and quarterly bonus.

    The tracker never changes ``current_spending``; ``rolled_over`` returns a
    new limit and leaves persisting it to the caller.
    """

    def __init__(self, threshold: float = DEFAULT_WARNING_THRESHOLD):
        self.threshold = threshold

    def tracked(
        self, card: Card, category: SpendingCategory, as_of: date | datetime
    ) -> SpendingLimit | QuarterlyBonus | None:
        limit = find_limit(card, category)
        if limit is not None:
            return limit
        return active_bonus(card, category, as_of)

    def usage_ratio(self, card: Card, category: SpendingCategory, as_of: date | datetime) -> float:
        entry = self.tracked(card, category, as_of)
        if entry is None:
            return 0.0
        return entry.usage_ratio

    def remaining(self, card: Card, category: SpendingCategory, as_of: date | datetime) -> float | None:
        entry = self.tracked(card, category, as_of)
        if entry is None:
            return None
        return entry.remaining_amount

    def status(
        self,
        card: Card,
        category: SpendingCategory,
        as_of: date | datetime,
        threshold: float | None = None,
    ) -> LimitStatus:
        ratio = self.usage_ratio(card, category, as_of)
        return classify(ratio, self.threshold if threshold is None else threshold)

    @staticmethod
    def next_reset_date(cycle: ResetCycle, from_date: date | datetime, periods: int = 1) -> date:
        return next_reset_date(cycle, from_date, periods)

    @staticmethod
    def is_reset_due(limit: SpendingLimit, as_of: date | datetime) -> bool:
        if limit.reset_cycle is ResetCycle.NEVER:
            return False
        return as_date(as_of) >= limit.reset_date

    def rolled_over(self, limit: SpendingLimit, as_of: date | datetime) -> SpendingLimit:
        if not self.is_reset_due(limit, as_of):
            return limit
        today = as_date(as_of)
        periods = 1
        reset_date = next_reset_date(limit.reset_cycle, limit.reset_date)
        while reset_date <= today:
            periods += 1
            reset_date = next_reset_date(limit.reset_cycle, limit.reset_date, periods)
        return limit.model_copy(update={"current_spending": 0.0, "reset_date": reset_date})
