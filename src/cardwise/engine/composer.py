import logging
from collections import Counter
from datetime import date, datetime

from cardwise.domain.events import RecommendationComposed, log_event
from cardwise.domain.models import (
    CardRecommendation,
    CardScore,
    LimitStatus,
    RecommendationResponse,
    SpendingCategory,
    UserPreferences,
)
from cardwise.engine.evaluator import ScoringEngine
from cardwise.engine.selectors import all_exhausted, eligible, rank_scores

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 2
LOW_SCORE_THRESHOLD = 2.0

NO_CARD_REASONING = "no suitable card found for this category"
NO_CARD_WARNING = "all cards have reached their limits for this category"
NO_CARD_SUGGESTION = "consider a card with general rewards"


class RecommendationComposer:
    def __init__(self, scoring: ScoringEngine | None = None):
        self.scoring = scoring or ScoringEngine()

    def to_recommendation(self, score: CardScore, rank: int, as_of: date | datetime) -> CardRecommendation:
        tracked = self.scoring.tracker.tracked(score.card, score.category, as_of)
        return CardRecommendation(
            card_id=score.card.id,
            card_name=score.card.name,
            category=score.category,
            multiplier=score.category_score,
            point_type=self.scoring.resolve_point_type(score.card, score.category, as_of),
            reasoning=score.reasoning,
            current_spending=tracked.current_spending if tracked is not None else 0.0,
            limit=tracked.limit if tracked is not None else 0.0,
            remaining=tracked.remaining_amount if tracked is not None else None,
            limit_status=score.limit_status,
            is_limit_reached=score.limit_status is LimitStatus.REACHED,
            rank=rank,
            total_score=score.total_score,
        )

    def warnings(self, ranked: list[CardScore]) -> list[str]:
        messages: list[str] = []
        for score in ranked:
            if score.limit_status is LimitStatus.REACHED:
                messages.append(f"{score.card.name} has reached its limit for this category.")
            elif score.limit_status is LimitStatus.WARNING:
                messages.append(f"{score.card.name} is approaching its limit.")
        return messages

    def suggestions(
        self,
        ranked: list[CardScore],
        category: SpendingCategory,
        preferences: UserPreferences,
        as_of: date | datetime,
    ) -> list[str]:
        messages: list[str] = []
        if all(score.total_score < LOW_SCORE_THRESHOLD for score in ranked):
            messages.append(
                f"Consider adding a card that offers better rewards for {category.value.lower()}."
            )

        point_types = Counter(
            self.scoring.resolve_point_type(score.card, score.category, as_of) for score in ranked
        )
        preferred = preferences.preferred_point_system
        if point_types and point_types[preferred] < max(point_types.values()):
            messages.append(
                f"You might want to prioritize cards that earn {preferred.value} points."
            )
        return messages

    def compose(
        self,
        scores: list[CardScore],
        category: SpendingCategory,
        preferences: UserPreferences,
        as_of: date | datetime,
        confidence: float = 1.0,
    ) -> RecommendationResponse:
        survivors = eligible(rank_scores(scores))
        ranked = survivors[:MAX_RECOMMENDATIONS]

        if not survivors or all_exhausted(survivors):
            response = RecommendationResponse(
                reasoning=NO_CARD_REASONING,
                warnings=[NO_CARD_WARNING],
                suggestions=[NO_CARD_SUGGESTION],
                category=category,
                confidence=confidence,
            )
            log_event(
                logger,
                RecommendationComposed(
                    category=category, primary_card_id=None, secondary_card_id=None, warning_count=1
                ),
            )
            return response

        primary = ranked[0]
        secondary = ranked[1] if len(ranked) > 1 else None

        reasoning = (
            f"Based on your {category.value.lower()} purchase, I recommend using your "
            f"{primary.card.name}. {primary.reasoning}"
        )
        if secondary is not None:
            reasoning += (
                f"\n\nAs a backup option, {secondary.card.name} offers "
                f"{secondary.category_score:.1f}x points."
            )

        response = RecommendationResponse(
            primary=self.to_recommendation(primary, 1, as_of),
            secondary=self.to_recommendation(secondary, 2, as_of) if secondary is not None else None,
            reasoning=reasoning,
            warnings=self.warnings(ranked),
            suggestions=self.suggestions(ranked, category, preferences, as_of),
            category=category,
            confidence=confidence,
        )
        log_event(
            logger,
            RecommendationComposed(
                category=category,
                primary_card_id=primary.card.id,
                secondary_card_id=secondary.card.id if secondary is not None else None,
                warning_count=len(response.warnings),
            ),
        )
        return response
