import hashlib
import logging
from datetime import date, datetime

from pydantic import BaseModel

from cardwise.domain.errors import (
    CategoryNotRecognized,
    InvalidQuery,
    NoCardsAvailable,
    ProcessingError,
    RecommendationError,
)
from cardwise.domain.events import AugmentationFellBack, CategoryFallback, log_event
from cardwise.domain.models import (
    Card,
    CardRecommendation,
    LimitStatus,
    ParsedQuery,
    RecommendationResponse,
    SpendingCategory,
    UserPreferences,
)
from cardwise.engine.cache import RecommendationCache, make_cache_key
from cardwise.engine.composer import RecommendationComposer
from cardwise.engine.evaluator import ScoringEngine
from cardwise.engine.limits import active_bonus, as_date
from cardwise.engine.selectors import eligible, rank_scores
from cardwise.nlp.parser import QueryInterpreter
from cardwise.rag.augmenter import Augmenter
from cardwise.rag.retriever import ContextBuilder

logger = logging.getLogger(__name__)


class AugmentedRecommendation(BaseModel):
    text: str
    augmented: bool
    response: RecommendationResponse | None = None


class RecommendationOrchestrator:
    """Entry point that wires the interpreter, scoring, composer and cache together.

    Every collaborator is passed in; nothing here is a module-level singleton.
    """

    def __init__(
        self,
        cache: RecommendationCache | None = None,
        scoring: ScoringEngine | None = None,
        interpreter: QueryInterpreter | None = None,
        augmenter: Augmenter | None = None,
        context_builder: ContextBuilder | None = None,
    ):
        self.cache = cache if cache is not None else RecommendationCache()
        self.scoring = scoring or ScoringEngine()
        self.composer = RecommendationComposer(self.scoring)
        self.interpreter = interpreter or QueryInterpreter()
        self.augmenter = augmenter
        self.context_builder = context_builder or ContextBuilder(tracker=self.scoring.tracker)

    def parse(self, text: str) -> ParsedQuery:
        return self.interpreter.parse(text)

    def limit_status(
        self,
        card: Card,
        category: SpendingCategory,
        as_of: date | datetime,
        preferences: UserPreferences | None = None,
    ) -> LimitStatus:
        threshold = preferences.alert_threshold if preferences is not None else None
        return self.scoring.tracker.status(card, category, as_of, threshold=threshold)

    def resolve_category(self, parsed: ParsedQuery, strict: bool = False) -> SpendingCategory:
        if parsed.category is not None:
            return parsed.category
        if strict:
            raise CategoryNotRecognized(parsed.original_text)
        log_event(logger, CategoryFallback(query=parsed.original_text))
        return SpendingCategory.GENERAL

    def _check_inputs(self, query: str, cards: list[Card]) -> None:
        reason = self.interpreter.validate(query)
        if reason is not None:
            raise InvalidQuery(reason)
        if not cards:
            raise NoCardsAvailable()

    def _cache_scope(self, preferences: UserPreferences, as_of: date | datetime) -> str:
        digest = hashlib.sha256(preferences.model_dump_json().encode("utf-8")).hexdigest()[:16]
        return f"{digest}:{as_date(as_of).isoformat()}"

    def recommend(
        self,
        query: str,
        cards: list[Card],
        preferences: UserPreferences | None = None,
        as_of: date | datetime | None = None,
    ) -> RecommendationResponse:
        self._check_inputs(query, cards)
        preferences = preferences or UserPreferences()
        as_of = as_of or datetime.now()

        key = make_cache_key(query, cards, scope=self._cache_scope(preferences, as_of))
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            parsed = self.interpreter.parse(query)
            category = self.resolve_category(parsed)
            scores = self.scoring.score_cards(cards, category, preferences, as_of)
            response = self.composer.compose(
                scores, category, preferences, as_of, confidence=parsed.confidence
            )
        except RecommendationError:
            raise
        except Exception as exc:
            logger.exception("Unexpected failure while building a recommendation")
            raise ProcessingError(str(exc)) from exc

        self.cache.put(key, response)
        return response

    def recommend_augmented(
        self,
        query: str,
        cards: list[Card],
        preferences: UserPreferences | None = None,
        as_of: date | datetime | None = None,
    ) -> AugmentedRecommendation:
        """Ask the augmenter first; any augmenter failure falls back to ``recommend`` once."""
        self._check_inputs(query, cards)
        preferences = preferences or UserPreferences()
        as_of = as_of or datetime.now()

        if self.augmenter is not None:
            category = self.resolve_category(self.interpreter.parse(query))
            context = self.context_builder.build(query, cards, preferences, category, as_of)
            try:
                text = self.augmenter.augment(query, context)
            except Exception as exc:
                log_event(logger, AugmentationFellBack(reason=str(exc)), level=logging.WARNING)
            else:
                return AugmentedRecommendation(text=text, augmented=True)

        response = self.recommend(query, cards, preferences, as_of)
        return AugmentedRecommendation(text=response.reasoning, augmented=False, response=response)

    def best_cards(
        self,
        cards: list[Card],
        category: SpendingCategory,
        preferences: UserPreferences | None = None,
        as_of: date | datetime | None = None,
        top: int = 2,
    ) -> list[CardRecommendation]:
        preferences = preferences or UserPreferences()
        as_of = as_of or datetime.now()
        scores = self.scoring.score_cards(cards, category, preferences, as_of)
        ranked = eligible(rank_scores(scores))[:top]
        return [
            self.composer.to_recommendation(score, rank, as_of)
            for rank, score in enumerate(ranked, start=1)
        ]

    @staticmethod
    def seasonal_bonus(card: Card, category: SpendingCategory, as_of: date | datetime) -> float:
        bonus = active_bonus(card, category, as_of)
        return bonus.multiplier if bonus is not None else 0.0
