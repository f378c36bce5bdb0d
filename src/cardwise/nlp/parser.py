import logging
import re

from cardwise.domain.errors import InvalidQuery
from cardwise.domain.events import QueryParsed, log_event
from cardwise.domain.models import ParsedQuery, QueryIntent, SpendingCategory
from cardwise.nlp.lexicon import (
    BLOCKED_EXEMPT_STEMS,
    BLOCKED_WORDS,
    CATEGORY_KEYWORDS,
    CATEGORY_SYNONYMS,
    INTENT_CONFIDENCE,
    INTENT_KEYWORDS,
    MERCHANT_CATEGORIES,
)

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3
MAX_QUERY_LENGTH = 500

_AMOUNT_PATTERN = re.compile(
    r"\$\s*(\d[\d,]*(?:\.\d+)?)|(\d[\d,]*(?:\.\d+)?)\s*(?:dollars?|bucks|usd)\b",
    re.IGNORECASE,
)
_WORD_PATTERN = re.compile(r"[a-z']+")
_PURCHASE_VERBS = ("buy", "purchase", "spend")


def _is_blocked(token: str) -> bool:
    if token.startswith(BLOCKED_EXEMPT_STEMS):
        return False
    return any(word in token for word in BLOCKED_WORDS)


def validate_query(text: str) -> str | None:
    """Return the reason the text is rejected, or None when it is acceptable."""
    trimmed = text.strip()
    if not trimmed:
        return "Query cannot be empty"
    if len(trimmed) < MIN_QUERY_LENGTH:
        return "Query is too short"
    if len(trimmed) > MAX_QUERY_LENGTH:
        return "Query is too long"
    if any(_is_blocked(token) for token in _WORD_PATTERN.findall(trimmed.lower())):
        return "Query contains inappropriate content"
    return None


def extract_category(text: str) -> SpendingCategory | None:
    lowered = text.lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return category
    return None


def extract_merchant(text: str) -> str | None:
    lowered = text.lower()
    for merchant in MERCHANT_CATEGORIES:
        if merchant in lowered:
            return merchant
    return None


def extract_amount(text: str) -> float | None:
    match = _AMOUNT_PATTERN.search(text)
    if match is None:
        return None
    raw = (match.group(1) or match.group(2)).replace(",", "")
    try:
        return float(raw)
    except ValueError:
        return None


def detect_intent(text: str) -> QueryIntent:
    lowered = text.lower()
    for intent, keywords in INTENT_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return intent
    return QueryIntent.CARD_RECOMMENDATION


def calculate_confidence(
    category: SpendingCategory | None,
    merchant: str | None,
    amount: float | None,
    intent: QueryIntent,
) -> float:
    confidence = 0.0
    if category is not None:
        confidence += 0.4
    if merchant is not None:
        confidence += 0.3
    if amount is not None:
        confidence += 0.2
    confidence += INTENT_CONFIDENCE[intent]
    return round(min(confidence, 1.0), 4)


def map_category_name(name: str) -> SpendingCategory | None:
    """Resolve a display name or a loose synonym ("fuel", "cafe") to a category."""
    cleaned = name.strip()
    try:
        return SpendingCategory(cleaned)
    except ValueError:
        pass
    lowered = cleaned.lower()
    for category in SpendingCategory:
        if category.value.lower() == lowered:
            return category
    return CATEGORY_SYNONYMS.get(lowered)


def enhance_query(text: str) -> str:
    lowered = text.lower()
    if any(verb in lowered for verb in _PURCHASE_VERBS):
        return text
    return f"buying {text}"


def parse_query(text: str) -> ParsedQuery:
    reason = validate_query(text)
    if reason is not None:
        raise InvalidQuery(reason)

    lowered = text.strip().lower()
    category = extract_category(lowered)
    merchant = extract_merchant(lowered)
    if category is None and merchant is not None:
        category = MERCHANT_CATEGORIES[merchant]
    amount = extract_amount(lowered)
    intent = detect_intent(lowered)

    parsed = ParsedQuery(
        original_text=text,
        category=category,
        merchant=merchant,
        amount=amount,
        intent=intent,
        confidence=calculate_confidence(category, merchant, amount, intent),
    )
    log_event(
        logger,
        QueryParsed(
            category=parsed.category,
            merchant=parsed.merchant,
            amount=parsed.amount,
            intent=parsed.intent,
            confidence=parsed.confidence,
        ),
        level=logging.DEBUG,
    )
    return parsed


class QueryInterpreter:
    """Turns free text into a ParsedQuery. Stateless; safe to share."""

    def validate(self, text: str) -> str | None:
        return validate_query(text)

    def parse(self, text: str) -> ParsedQuery:
        return parse_query(text)
