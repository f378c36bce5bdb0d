"""
Structured engine events.

Each event is a tagged pydantic model; ``log_event`` writes it to a module
logger as ``<kind> <json payload>``.
"""

import logging
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from cardwise.domain.models import LimitStatus, QueryIntent, SpendingCategory


class QueryParsed(BaseModel):
    kind: Literal["query_parsed"] = "query_parsed"
    category: SpendingCategory | None
    merchant: str | None
    amount: float | None
    intent: QueryIntent
    confidence: float


class CategoryFallback(BaseModel):
    kind: Literal["category_fallback"] = "category_fallback"
    query: str
    fallback: SpendingCategory = SpendingCategory.GENERAL


class CardScored(BaseModel):
    kind: Literal["card_scored"] = "card_scored"
    card_id: str
    category: SpendingCategory
    total_score: float
    limit_status: LimitStatus


class RecommendationComposed(BaseModel):
    kind: Literal["recommendation_composed"] = "recommendation_composed"
    category: SpendingCategory
    primary_card_id: str | None
    secondary_card_id: str | None
    warning_count: int


class CacheHit(BaseModel):
    kind: Literal["cache_hit"] = "cache_hit"
    key: str


class CacheEvicted(BaseModel):
    kind: Literal["cache_evicted"] = "cache_evicted"
    keys: list[str]


class AugmentationFellBack(BaseModel):
    kind: Literal["augmentation_fell_back"] = "augmentation_fell_back"
    reason: str


class LimitAlertRaised(BaseModel):
    kind: Literal["limit_alert_raised"] = "limit_alert_raised"
    card_id: str
    category: SpendingCategory
    status: LimitStatus
    usage_ratio: float


EngineEvent = Annotated[
    Union[
        QueryParsed,
        CategoryFallback,
        CardScored,
        RecommendationComposed,
        CacheHit,
        CacheEvicted,
        AugmentationFellBack,
        LimitAlertRaised,
    ],
    Field(discriminator="kind"),
]

event_adapter: TypeAdapter[EngineEvent] = TypeAdapter(EngineEvent)


def log_event(logger: logging.Logger, event: EngineEvent, level: int = logging.INFO) -> None:
    if not logger.isEnabledFor(level):
        return
    payload = event.model_dump_json(exclude={"kind"})
    logger.log(level, f"{event.kind} {payload}")
