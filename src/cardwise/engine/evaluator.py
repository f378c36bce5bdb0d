import logging
from datetime import date, datetime

from cardwise.domain.events import CardScored, log_event
from cardwise.domain.models import (
    Card,
    CardScore,
    LimitStatus,
    PointType,
    SpendingCategory,
    UserPreferences,
)
from cardwise.engine.limits import LimitTracker, active_bonus

logger = logging.getLogger(__name__)

BASE_WEIGHT = 0.1
CATEGORY_WEIGHT = 0.6
PREFERENCE_WEIGHT = 0.2
LIMIT_WEIGHT = 0.1

BASE_SCORE = 1.0
DEFAULT_MULTIPLIER = 1.0
PREFERRED_POINTS_SCORE = 1.2

LIMIT_SCORES: dict[LimitStatus, float] = {
    LimitStatus.REACHED: 0.0,
    LimitStatus.WARNING: 0.5,
    LimitStatus.AVAILABLE: 1.0,
}


def weighted_total(base: float, category: float, preference: float, limit: float) -> float:
    return (
        base * BASE_WEIGHT
        + category * CATEGORY_WEIGHT
        + preference * PREFERENCE_WEIGHT
        + limit * LIMIT_WEIGHT
    )


def _category_rate(
    card: Card, category: SpendingCategory, as_of: date | datetime
) -> tuple[float, PointType, str]:
    reward = next(
        (item for item in card.reward_categories if item.category == category and item.is_active),
        None,
    )
    if reward is None:
        return DEFAULT_MULTIPLIER, _fallback_point_type(card), "base rate"

    bonus = active_bonus(card, category, as_of)
    if bonus is not None and bonus.multiplier > reward.multiplier:
        return bonus.multiplier, bonus.point_type, f"Q{bonus.quarter} {bonus.year} bonus"
    return reward.multiplier, reward.point_type, "category reward"


def _fallback_point_type(card: Card) -> PointType:
    for reward in card.reward_categories:
        if reward.is_active:
            return reward.point_type
    return PointType.MEMBERSHIP_REWARDS


def _preference_score(card: Card, preferences: UserPreferences) -> float:
    earns_preferred = any(
        reward.is_active and reward.point_type == preferences.preferred_point_system
        for reward in card.reward_categories
    )
    return PREFERRED_POINTS_SCORE if earns_preferred else 1.0


class ScoringEngine:
    def __init__(self, tracker: LimitTracker | None = None):
        self.tracker = tracker or LimitTracker()

    def resolve_point_type(self, card: Card, category: SpendingCategory, as_of: date | datetime) -> PointType:
        return _category_rate(card, category, as_of)[1]

    def reasoning(
        self,
        card: Card,
        category: SpendingCategory,
        as_of: date | datetime,
        status: LimitStatus,
    ) -> str:
        multiplier, point_type, source = _category_rate(card, category, as_of)
        label = category.value.lower()
        if source == "base rate":
            text = f"{card.name} earns the base {multiplier:.1f}x {point_type.value} points on {label}."
        else:
            text = f"{card.name} offers {multiplier:.1f}x {point_type.value} points on {label}."
            if source != "category reward":
                text += f" This includes the {source}."

        remaining = self.tracker.remaining(card, category, as_of)
        if remaining is not None:
            text += f" You have ${remaining:,.0f} remaining in your limit."

        if status is LimitStatus.REACHED:
            text += " Limit reached - consider using another card."
        elif status is LimitStatus.WARNING:
            text += " Limit almost reached."
        return text

    def score(
        self,
        card: Card,
        category: SpendingCategory,
        preferences: UserPreferences,
        as_of: date | datetime,
    ) -> CardScore:
        category_score, _, _ = _category_rate(card, category, as_of)
        preference_score = _preference_score(card, preferences)
        status = self.tracker.status(card, category, as_of, threshold=preferences.alert_threshold)
        limit_score = LIMIT_SCORES[status]

        total = weighted_total(BASE_SCORE, category_score, preference_score, limit_score)
        card_score = CardScore(
            card=card,
            category=category,
            base_score=BASE_SCORE,
            category_score=category_score,
            preference_score=preference_score,
            limit_score=limit_score,
            limit_status=status,
            total_score=total,
            reasoning=self.reasoning(card, category, as_of, status),
        )
        log_event(
            logger,
            CardScored(card_id=card.id, category=category, total_score=total, limit_status=status),
            level=logging.DEBUG,
        )
        return card_score

    def score_cards(
        self,
        cards: list[Card],
        category: SpendingCategory,
        preferences: UserPreferences,
        as_of: date | datetime,
    ) -> list[CardScore]:
        return [self.score(card, category, preferences, as_of) for card in cards if card.is_active]
