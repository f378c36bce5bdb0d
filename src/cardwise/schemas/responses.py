from datetime import date

from pydantic import BaseModel, Field

from cardwise.domain.models import Card, LimitStatus, RecommendationResponse, SpendingCategory
from cardwise.integrations.notifier import LimitAlert


class RecommendResponse(BaseModel):
    text: str
    augmented: bool = False
    recommendation: RecommendationResponse | None = None


class LimitStatusResponse(BaseModel):
    card_id: str
    category: SpendingCategory
    status: LimitStatus
    usage_ratio: float
    remaining: float | None = None
    next_reset_date: date | None = None


class SpendingUpdateResponse(BaseModel):
    card: Card
    alerts: list[LimitAlert] = Field(default_factory=list)
