from cardwise.domain.models import QueryIntent, SpendingCategory

# Checked in this order; the first category with a matching keyword wins.
CATEGORY_KEYWORDS: dict[SpendingCategory, tuple[str, ...]] = {
    SpendingCategory.GROCERIES: (
        "grocery", "groceries", "food", "supermarket", "market", "produce", "vegetables", "fruits",
    ),
    SpendingCategory.DINING: (
        "dining", "restaurant", "dinner", "lunch", "breakfast", "eat", "meal", "out to eat", "eating out",
    ),
    SpendingCategory.TRAVEL: (
        "travel", "flight", "hotel", "vacation", "trip", "airline", "booking", "reservation",
    ),
    SpendingCategory.GAS: (
        "gas", "fuel", "gasoline", "petrol", "filling up", "gas station", "fuel station",
    ),
    SpendingCategory.ONLINE: (
        "online", "internet", "web", "ecommerce", "online shopping", "web purchase",
    ),
    SpendingCategory.DRUGSTORES: (
        "drugstore", "pharmacy", "medicine", "drug", "cvs", "walgreens", "rite aid",
    ),
    SpendingCategory.STREAMING: (
        "streaming", "netflix", "spotify", "hulu", "disney", "apple tv", "youtube",
    ),
    SpendingCategory.TRANSIT: (
        "transit", "transportation", "uber", "lyft", "taxi", "ride", "public transport",
    ),
    SpendingCategory.OFFICE: (
        "office", "supply", "staples", "office depot", "work supplies",
    ),
    SpendingCategory.PHONE: (
        "phone", "mobile", "cell", "telephone", "wireless", "mobile service",
    ),
    SpendingCategory.COSTCO: ("costco", "wholesale"),
    SpendingCategory.AMAZON: ("amazon", "amzn"),
    SpendingCategory.WHOLE_FOODS: ("whole foods", "wholefoods", "organic"),
    SpendingCategory.TARGET: ("target", "tar-zhay"),
    SpendingCategory.WALMART: ("walmart", "wal-mart"),
    SpendingCategory.AIRFARE: ("airfare", "airline ticket", "plane ticket", "flight ticket"),
    SpendingCategory.HOTELS: ("hotel", "lodging", "accommodation", "stay"),
    SpendingCategory.RESTAURANTS: ("restaurant", "dining", "fine dining"),
    SpendingCategory.FAST_FOOD: ("fast food", "quick service", "drive thru", "drive-through"),
    SpendingCategory.COFFEE: ("coffee", "starbucks", "dunkin", "coffee shop", "cafe"),
}

# Scanned in this order; the first merchant found in the text wins.
MERCHANT_CATEGORIES: dict[str, SpendingCategory] = {
    "costco": SpendingCategory.COSTCO,
    "whole foods": SpendingCategory.WHOLE_FOODS,
    "wholefoods": SpendingCategory.WHOLE_FOODS,
    "amazon": SpendingCategory.AMAZON,
    "target": SpendingCategory.TARGET,
    "walmart": SpendingCategory.WALMART,
    "starbucks": SpendingCategory.COFFEE,
    "mcdonalds": SpendingCategory.FAST_FOOD,
    "mcdonald's": SpendingCategory.FAST_FOOD,
    "uber": SpendingCategory.TRANSIT,
    "lyft": SpendingCategory.TRANSIT,
    "netflix": SpendingCategory.STREAMING,
    "spotify": SpendingCategory.STREAMING,
    "cvs": SpendingCategory.DRUGSTORES,
    "walgreens": SpendingCategory.DRUGSTORES,
    "shell": SpendingCategory.GAS,
    "exxon": SpendingCategory.GAS,
    "chevron": SpendingCategory.GAS,
    "bp": SpendingCategory.GAS,
    "mobil": SpendingCategory.GAS,
}

CATEGORY_SYNONYMS: dict[str, SpendingCategory] = {
    "grocery": SpendingCategory.GROCERIES,
    "food": SpendingCategory.GROCERIES,
    "supermarket": SpendingCategory.GROCERIES,
    "market": SpendingCategory.GROCERIES,
    "restaurant": SpendingCategory.DINING,
    "dining out": SpendingCategory.DINING,
    "eating out": SpendingCategory.DINING,
    "meal": SpendingCategory.DINING,
    "airline": SpendingCategory.TRAVEL,
    "flight": SpendingCategory.TRAVEL,
    "hotel": SpendingCategory.TRAVEL,
    "accommodation": SpendingCategory.TRAVEL,
    "fuel": SpendingCategory.GAS,
    "gasoline": SpendingCategory.GAS,
    "petrol": SpendingCategory.GAS,
    "shopping": SpendingCategory.ONLINE,
    "ecommerce": SpendingCategory.ONLINE,
    "pharmacy": SpendingCategory.DRUGSTORES,
    "medicine": SpendingCategory.DRUGSTORES,
    "entertainment": SpendingCategory.STREAMING,
    "transport": SpendingCategory.TRANSIT,
    "transportation": SpendingCategory.TRANSIT,
    "ride": SpendingCategory.TRANSIT,
    "supplies": SpendingCategory.OFFICE,
    "work": SpendingCategory.OFFICE,
    "mobile": SpendingCategory.PHONE,
    "wireless": SpendingCategory.PHONE,
    "telephone": SpendingCategory.PHONE,
    "wholesale": SpendingCategory.COSTCO,
    "organic": SpendingCategory.WHOLE_FOODS,
    "plane ticket": SpendingCategory.AIRFARE,
    "airline ticket": SpendingCategory.AIRFARE,
    "lodging": SpendingCategory.HOTELS,
    "stay": SpendingCategory.HOTELS,
    "fine dining": SpendingCategory.RESTAURANTS,
    "quick service": SpendingCategory.FAST_FOOD,
    "drive thru": SpendingCategory.FAST_FOOD,
    "cafe": SpendingCategory.COFFEE,
    "coffee shop": SpendingCategory.COFFEE,
}

# Checked in this order; unmatched text is a card recommendation request.
INTENT_KEYWORDS: dict[QueryIntent, tuple[str, ...]] = {
    QueryIntent.SPENDING_UPDATE: ("spent", "spending", "update", "track"),
    QueryIntent.LIMIT_CHECK: ("limit", "remaining", "how much", "progress"),
    QueryIntent.CARD_RECOMMENDATION: (
        "which card", "what card", "best card", "should i use", "recommend", "buying", "purchase",
    ),
    QueryIntent.GENERAL_QUESTION: (
        "what is", "what are", "how does", "how do", "explain", "tell me about", "difference between",
    ),
}

INTENT_CONFIDENCE: dict[QueryIntent, float] = {
    QueryIntent.CARD_RECOMMENDATION: 0.1,
    QueryIntent.SPENDING_UPDATE: 0.05,
    QueryIntent.LIMIT_CHECK: 0.05,
    QueryIntent.GENERAL_QUESTION: 0.0,
}

BLOCKED_WORDS: tuple[str, ...] = ("fuck", "shit", "ass", "bitch", "damn")

# Ordinary words that happen to contain a blocked string; tokens starting with
# one of these stems are not rejected.
BLOCKED_EXEMPT_STEMS: tuple[str, ...] = (
    "class", "glass", "grass", "brass", "bass", "mass", "pass", "compass", "bypass",
    "assist", "asset", "assort", "assembl", "associat", "assur", "assess", "assign",
    "ambassad", "embass", "cassette", "casserole",
)

COMMON_QUERIES: tuple[str, ...] = (
    "What card should I use for groceries?",
    "Which card is best for dining out?",
    "I'm buying gas, which card?",
    "Shopping at Amazon, what card?",
    "Going to Costco, best card?",
    "Dining at a restaurant tonight",
    "Booking a flight to Europe",
    "Filling up at the gas station",
    "Buying groceries at Whole Foods",
    "Shopping online at Target",
)
