from datetime import date, datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SpendingCategory(str, Enum):
    GROCERIES = "Groceries"
    DINING = "Dining"
    TRAVEL = "Travel"
    GAS = "Gas"
    ONLINE = "Online Shopping"
    DRUGSTORES = "Drugstores"
    STREAMING = "Streaming"
    TRANSIT = "Transit"
    OFFICE = "Office Supply"
    PHONE = "Phone Services"
    GENERAL = "General Purchases"

    # merchant-specific
    COSTCO = "Costco"
    AMAZON = "Amazon"
    WHOLE_FOODS = "Whole Foods"
    TARGET = "Target"
    WALMART = "Walmart"

    # subcategories
    AIRFARE = "Airfare"
    HOTELS = "Hotels"
    RESTAURANTS = "Restaurants"
    FAST_FOOD = "Fast Food"
    COFFEE = "Coffee Shops"


class PointType(str, Enum):
    MEMBERSHIP_REWARDS = "MR"
    ULTIMATE_REWARDS = "UR"
    THANK_YOU_POINTS = "TYP"
    CASH_BACK = "Cash Back"
    CAPITAL_ONE_MILES = "Capital One Miles"
    DISCOVER_CASH_BACK = "Discover Cash Back"


class ResetCycle(str, Enum):
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    ANNUALLY = "Annually"
    NEVER = "Never"


class Language(str, Enum):
    ENGLISH = "English"
    CHINESE = "Chinese"
    BILINGUAL = "Bilingual"


class QueryIntent(str, Enum):
    CARD_RECOMMENDATION = "cardRecommendation"
    SPENDING_UPDATE = "spendingUpdate"
    LIMIT_CHECK = "limitCheck"
    GENERAL_QUESTION = "generalQuestion"


class LimitStatus(str, Enum):
    AVAILABLE = "available"
    WARNING = "warning"
    REACHED = "reached"


class RewardCategory(BaseModel):
    category: SpendingCategory
    multiplier: float = Field(ge=0)
    point_type: PointType
    is_active: bool = True


class CardFamily(str, Enum):
    AMEX_GOLD = "Amex Gold"
    AMEX_PLATINUM = "Amex Platinum"
    CHASE_FREEDOM = "Chase Freedom"
    CHASE_SAPPHIRE_PREFERRED = "Chase Sapphire Preferred"
    CHASE_SAPPHIRE_RESERVE = "Chase Sapphire Reserve"
    CITI_DOUBLE_CASH = "Citi Double Cash"
    CUSTOM = "Custom"

    def default_rewards(self) -> list[RewardCategory]:
        return [
            RewardCategory(category=category, multiplier=multiplier, point_type=point_type)
            for category, multiplier, point_type in _FAMILY_REWARDS.get(self, [])
        ]


_MR = PointType.MEMBERSHIP_REWARDS
_UR = PointType.ULTIMATE_REWARDS

_FAMILY_REWARDS: dict[CardFamily, list[tuple[SpendingCategory, float, PointType]]] = {
    CardFamily.AMEX_GOLD: [
        (SpendingCategory.GROCERIES, 4.0, _MR),
        (SpendingCategory.DINING, 4.0, _MR),
        (SpendingCategory.TRAVEL, 3.0, _MR),
        (SpendingCategory.GENERAL, 1.0, _MR),
    ],
    CardFamily.AMEX_PLATINUM: [
        (SpendingCategory.TRAVEL, 5.0, _MR),
        (SpendingCategory.DINING, 1.0, _MR),
        (SpendingCategory.GENERAL, 1.0, _MR),
    ],
    CardFamily.CHASE_FREEDOM: [
        (SpendingCategory.GENERAL, 1.0, _UR),
    ],
    CardFamily.CHASE_SAPPHIRE_PREFERRED: [
        (SpendingCategory.TRAVEL, 2.0, _UR),
        (SpendingCategory.DINING, 3.0, _UR),
        (SpendingCategory.GENERAL, 1.0, _UR),
    ],
    CardFamily.CHASE_SAPPHIRE_RESERVE: [
        (SpendingCategory.TRAVEL, 3.0, _UR),
        (SpendingCategory.DINING, 3.0, _UR),
        (SpendingCategory.GENERAL, 1.0, _UR),
    ],
    CardFamily.CITI_DOUBLE_CASH: [
        (SpendingCategory.GENERAL, 2.0, PointType.THANK_YOU_POINTS),
    ],
}


class SpendingLimit(BaseModel):
    category: SpendingCategory
    limit: float = Field(ge=0)
    current_spending: float = Field(default=0.0, ge=0)
    reset_date: date = Field(default_factory=date.today)
    reset_cycle: ResetCycle = ResetCycle.ANNUALLY

    @property
    def usage_ratio(self) -> float:
        if self.limit <= 0:
            return 0.0
        return self.current_spending / self.limit

    @property
    def remaining_amount(self) -> float:
        return max(0.0, self.limit - self.current_spending)


class QuarterlyBonus(BaseModel):
    category: SpendingCategory
    multiplier: float = Field(ge=0)
    point_type: PointType
    limit: float = Field(ge=0)
    current_spending: float = Field(default=0.0, ge=0)
    quarter: int = Field(ge=1, le=4)
    year: int

    @property
    def usage_ratio(self) -> float:
        if self.limit <= 0:
            return 0.0
        return self.current_spending / self.limit

    @property
    def remaining_amount(self) -> float:
        return max(0.0, self.limit - self.current_spending)


class Card(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    family: CardFamily = CardFamily.CUSTOM
    is_active: bool = True
    reward_categories: list[RewardCategory] = Field(default_factory=list)
    spending_limits: list[SpendingLimit] = Field(default_factory=list)
    quarterly_bonus: QuarterlyBonus | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="after")
    def _apply_family_defaults(self) -> "Card":
        if not self.reward_categories:
            self.reward_categories = self.family.default_rewards()
        return self


class UserPreferences(BaseModel):
    preferred_point_system: PointType = PointType.MEMBERSHIP_REWARDS
    alert_threshold: float = Field(default=0.85, gt=0, le=1)
    language: Language = Language.ENGLISH
    notifications_enabled: bool = True
    auto_update_spending: bool = False


class ParsedQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    original_text: str
    category: SpendingCategory | None = None
    merchant: str | None = None
    amount: float | None = None
    intent: QueryIntent = QueryIntent.CARD_RECOMMENDATION
    confidence: float = Field(default=0.0, ge=0, le=1)


class CardScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    card: Card
    category: SpendingCategory
    base_score: float
    category_score: float
    preference_score: float
    limit_score: float
    limit_status: LimitStatus
    total_score: float
    reasoning: str


class CardRecommendation(BaseModel):
    card_id: str
    card_name: str
    category: SpendingCategory
    multiplier: float
    point_type: PointType
    reasoning: str
    current_spending: float = 0.0
    limit: float = 0.0
    remaining: float | None = None
    limit_status: LimitStatus = LimitStatus.AVAILABLE
    is_limit_reached: bool = False
    rank: int = 1
    total_score: float


class RecommendationResponse(BaseModel):
    primary: CardRecommendation | None = None
    secondary: CardRecommendation | None = None
    reasoning: str = ""
    warnings: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    category: SpendingCategory = SpendingCategory.GENERAL
    confidence: float = 1.0
