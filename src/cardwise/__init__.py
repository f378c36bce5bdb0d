from cardwise.agents.orchestrator import AugmentedRecommendation, RecommendationOrchestrator
from cardwise.domain.errors import (
    CategoryNotRecognized,
    InvalidQuery,
    NoCardsAvailable,
    ProcessingError,
    RecommendationError,
)
from cardwise.domain.models import (
    Card,
    CardScore,
    LimitStatus,
    ParsedQuery,
    QuarterlyBonus,
    RecommendationResponse,
    RewardCategory,
    SpendingCategory,
    SpendingLimit,
    UserPreferences,
)
from cardwise.engine.cache import RecommendationCache, make_cache_key
from cardwise.engine.composer import RecommendationComposer
from cardwise.engine.evaluator import ScoringEngine
from cardwise.engine.limits import LimitTracker, next_reset_date
from cardwise.nlp.parser import QueryInterpreter, parse_query
from cardwise.repository.card_store import CardStore

__all__ = [
    "AugmentedRecommendation",
    "Card",
    "CardScore",
    "CardStore",
    "CategoryNotRecognized",
    "InvalidQuery",
    "LimitStatus",
    "LimitTracker",
    "NoCardsAvailable",
    "ParsedQuery",
    "ProcessingError",
    "QuarterlyBonus",
    "QueryInterpreter",
    "RecommendationCache",
    "RecommendationComposer",
    "RecommendationError",
    "RecommendationOrchestrator",
    "RecommendationResponse",
    "RewardCategory",
    "ScoringEngine",
    "SpendingCategory",
    "SpendingLimit",
    "UserPreferences",
    "make_cache_key",
    "next_reset_date",
    "parse_query",
]
