from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from cardwise.domain.models import SpendingCategory


class RecommendRequest(BaseModel):
    message: str
    augment: bool = False
    as_of: datetime | None = None


class ParseRequest(BaseModel):
    message: str


class SpendingUpdateRequest(BaseModel):
    card_id: str
    category: SpendingCategory
    amount: float = Field(ge=0)
    mode: Literal["add", "set"] = "add"
    as_of: datetime | None = None
