from datetime import date, datetime

import pytest

from cardwise.domain.models import (
    Card,
    PointType,
    QuarterlyBonus,
    ResetCycle,
    RewardCategory,
    SpendingCategory,
    SpendingLimit,
    UserPreferences,
)

AS_OF = datetime(2026, 10, 18, 12, 0)


def build_card(
    name: str = "Amex Gold",
    card_id: str | None = None,
    multiplier: float = 4.0,
    category: SpendingCategory = SpendingCategory.GROCERIES,
    point_type: PointType = PointType.MEMBERSHIP_REWARDS,
    limit: float | None = None,
    spent: float = 0.0,
    bonus: QuarterlyBonus | None = None,
    is_active: bool = True,
) -> Card:
    limits = []
    if limit is not None:
        limits.append(
            SpendingLimit(
                category=category,
                limit=limit,
                current_spending=spent,
                reset_date=date(2027, 1, 1),
                reset_cycle=ResetCycle.ANNUALLY,
            )
        )
    return Card(
        id=card_id or name.lower().replace(" ", "-"),
        name=name,
        is_active=is_active,
        reward_categories=[
            RewardCategory(category=category, multiplier=multiplier, point_type=point_type)
        ],
        spending_limits=limits,
        quarterly_bonus=bonus,
        created_at=datetime(2026, 1, 1),
        updated_at=datetime(2026, 1, 1),
    )


@pytest.fixture
def as_of() -> datetime:
    return AS_OF


@pytest.fixture
def preferences() -> UserPreferences:
    return UserPreferences()


@pytest.fixture
def card_factory():
    return build_card
