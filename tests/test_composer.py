from cardwise.domain.models import CardScore, LimitStatus, PointType, SpendingCategory, UserPreferences
from cardwise.engine.composer import (
    NO_CARD_REASONING,
    NO_CARD_SUGGESTION,
    NO_CARD_WARNING,
    RecommendationComposer,
)
from cardwise.engine.evaluator import ScoringEngine
from cardwise.engine.selectors import all_exhausted, eligible, rank_scores

GROCERIES = SpendingCategory.GROCERIES


def compose(cards, preferences, as_of):
    scoring = ScoringEngine()
    scores = scoring.score_cards(cards, GROCERIES, preferences, as_of)
    return RecommendationComposer(scoring).compose(scores, GROCERIES, preferences, as_of)


def test_primary_and_secondary(card_factory, preferences, as_of) -> None:
    cards = [
        card_factory("Card Low", multiplier=2.0),
        card_factory("Card High", multiplier=4.0, limit=1000, spent=800),
        card_factory("Card Mid", multiplier=3.0),
    ]

    response = compose(cards, preferences, as_of)

    assert response.primary.card_name == "Card High"
    assert response.primary.rank == 1
    assert response.primary.remaining == 200
    assert response.primary.limit == 1000
    assert response.secondary.card_name == "Card Mid"
    assert response.secondary.rank == 2
    assert response.category == GROCERIES
    assert response.reasoning.startswith(
        "Based on your groceries purchase, I recommend using your Card High."
    )
    assert response.reasoning.endswith("As a backup option, Card Mid offers 3.0x points.")


def test_equal_scores_keep_input_order(card_factory, preferences, as_of) -> None:
    first = card_factory("Card A", multiplier=3.0)
    second = card_factory("Card B", multiplier=3.0)

    assert compose([first, second], preferences, as_of).primary.card_name == "Card A"
    assert compose([second, first], preferences, as_of).primary.card_name == "Card B"


def test_warning_card_is_flagged(card_factory, preferences, as_of) -> None:
    response = compose([card_factory(limit=1000, spent=900)], preferences, as_of)

    assert response.primary.limit_status == LimitStatus.WARNING
    assert response.warnings == ["Amex Gold is approaching its limit."]


def test_exhausted_cards_produce_no_primary(card_factory, preferences, as_of) -> None:
    cards = [
        card_factory("Card A", limit=1000, spent=1000),
        card_factory("Card B", multiplier=3.0, limit=500, spent=700),
    ]

    response = compose(cards, preferences, as_of)

    assert response.primary is None
    assert response.secondary is None
    assert response.reasoning == NO_CARD_REASONING
    assert response.warnings == [NO_CARD_WARNING]
    assert response.suggestions == [NO_CARD_SUGGESTION]


def test_reached_card_with_available_backup(card_factory, preferences, as_of) -> None:
    cards = [
        card_factory("Card A", limit=1000, spent=1000),
        card_factory("Card B", category=SpendingCategory.DINING),
    ]

    response = compose(cards, preferences, as_of)

    assert response.primary.card_name == "Card A"
    assert response.primary.is_limit_reached is True
    assert response.secondary.card_name == "Card B"
    assert response.warnings == ["Card A has reached its limit for this category."]


def test_low_scores_suggest_a_better_card(card_factory, preferences, as_of) -> None:
    response = compose([card_factory(category=SpendingCategory.DINING)], preferences, as_of)

    assert "Consider adding a card that offers better rewards for groceries." in response.suggestions


def test_preferred_point_system_suggestion(card_factory, as_of) -> None:
    preferences = UserPreferences(preferred_point_system=PointType.ULTIMATE_REWARDS)
    cards = [card_factory("Card A"), card_factory("Card B", multiplier=3.0)]

    response = compose(cards, preferences, as_of)

    assert response.suggestions == ["You might want to prioritize cards that earn UR points."]


def test_no_suggestions_for_strong_preferred_cards(card_factory, preferences, as_of) -> None:
    assert compose([card_factory()], preferences, as_of).suggestions == []


def test_selectors(card_factory) -> None:
    card = card_factory()

    def score(total: float, status: LimitStatus = LimitStatus.AVAILABLE) -> CardScore:
        return CardScore(
            card=card,
            category=GROCERIES,
            base_score=1.0,
            category_score=1.0,
            preference_score=1.0,
            limit_score=1.0,
            limit_status=status,
            total_score=total,
            reasoning="",
        )

    low, high, zero = score(1.0), score(2.0), score(0.0)

    assert rank_scores([low, high, zero]) == [high, low, zero]
    assert eligible([low, zero]) == [low]
    assert all_exhausted([score(1.0, LimitStatus.REACHED)]) is True
    assert all_exhausted([score(1.0, LimitStatus.REACHED), low]) is False
    assert all_exhausted([]) is False


def test_available_card_outside_top_two_keeps_a_primary(card_factory, preferences, as_of) -> None:
    cards = [
        card_factory("Card A", limit=1000, spent=1000),
        card_factory("Card B", multiplier=3.0, limit=1000, spent=1000),
        card_factory("Card C", category=SpendingCategory.DINING),
    ]

    response = compose(cards, preferences, as_of)

    assert response.primary.card_name == "Card A"
    assert response.secondary.card_name == "Card B"
    assert response.warnings == [
        "Card A has reached its limit for this category.",
        "Card B has reached its limit for this category.",
    ]
