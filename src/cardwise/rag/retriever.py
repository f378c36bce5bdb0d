import hashlib
import threading
import time
from collections.abc import Callable
from datetime import date, datetime

from cardwise.domain.models import Card, LimitStatus, SpendingCategory, UserPreferences
from cardwise.engine.limits import LimitTracker, classify

DEFAULT_CONTEXT_TTL_SECONDS = 300.0

_STATUS_LABELS = {
    LimitStatus.AVAILABLE: "OK",
    LimitStatus.WARNING: "NEAR LIMIT",
    LimitStatus.REACHED: "LIMIT REACHED",
}


def retrieve_card_evidence(card: Card, category: SpendingCategory) -> list[str]:
    snippets: list[str] = []

    for reward in card.reward_categories:
        if reward.category == category and reward.is_active:
            snippets.append(f"{card.name}: {reward.category.value} earns {reward.multiplier:.1f}x {reward.point_type.value}")

    for limit in card.spending_limits:
        if limit.category == category:
            snippets.append(
                f"{card.name}: {limit.category.value} limit ${limit.current_spending:,.0f}/${limit.limit:,.0f} "
                f"({limit.reset_cycle.value.lower()} reset)"
            )

    bonus = card.quarterly_bonus
    if bonus is not None and bonus.category == category:
        snippets.append(
            f"{card.name}: Q{bonus.quarter} {bonus.year} bonus {bonus.multiplier:.1f}x {bonus.point_type.value}"
        )

    return snippets[:3]


def build_card_context(card: Card, threshold: float = 0.85) -> str:
    lines = [
        f"Card: {card.name} ({card.family.value})",
        f"Status: {'Active' if card.is_active else 'Inactive'}",
    ]

    if card.reward_categories:
        lines.append("Rewards:")
        for reward in card.reward_categories:
            lines.append(f"- {reward.category.value}: {reward.multiplier:.1f}x {reward.point_type.value}")

    bonus = card.quarterly_bonus
    if bonus is not None:
        lines.append(f"Q{bonus.quarter} {bonus.year} Bonus:")
        lines.append(f"- Category: {bonus.category.value}")
        lines.append(f"- Multiplier: {bonus.multiplier:.1f}x {bonus.point_type.value}")
        lines.append(
            f"- Progress: ${bonus.current_spending:,.0f}/${bonus.limit:,.0f} ({bonus.usage_ratio:.0%})"
        )

    if card.spending_limits:
        lines.append("Spending Limits:")
        for limit in card.spending_limits:
            status = _STATUS_LABELS[classify(limit.usage_ratio, threshold)]
            lines.append(
                f"- {limit.category.value}: ${limit.current_spending:,.0f}/${limit.limit:,.0f} "
                f"({limit.usage_ratio:.0%}) - {status}"
            )

    return "\n".join(lines)


def build_preferences_context(preferences: UserPreferences) -> str:
    return "\n".join(
        [
            "User Preferences:",
            f"- Preferred Point System: {preferences.preferred_point_system.value}",
            f"- Alert Threshold: {preferences.alert_threshold:.0%}",
            f"- Language: {preferences.language.value}",
            f"- Notifications: {'Enabled' if preferences.notifications_enabled else 'Disabled'}",
        ]
    )


class ContextCache:
    """Per-card context text that expires ``ttl_seconds`` after it was stored."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CONTEXT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, str]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return value

    def put(self, key: str, value: str) -> None:
        with self._lock:
            now = self._clock()
            expired = [
                old_key
                for old_key, (stored_at, _) in self._entries.items()
                if now - stored_at >= self.ttl_seconds
            ]
            for old_key in expired:
                del self._entries[old_key]
            self._entries[key] = (now, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def _context_key(card: Card, threshold: float) -> str:
    snapshot = hashlib.sha256(card.model_dump_json().encode("utf-8")).hexdigest()[:16]
    return f"{card.id}:{threshold}:{snapshot}"


class ContextBuilder:
    def __init__(self, cache: ContextCache | None = None, tracker: LimitTracker | None = None):
        self.cache = cache or ContextCache()
        self.tracker = tracker or LimitTracker()

    def card_context(self, card: Card, threshold: float) -> str:
        key = _context_key(card, threshold)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        context = build_card_context(card, threshold)
        self.cache.put(key, context)
        return context

    def build(
        self,
        query: str,
        cards: list[Card],
        preferences: UserPreferences,
        category: SpendingCategory,
        as_of: date | datetime,
    ) -> str:
        active = [card for card in cards if card.is_active]
        sections = [f"Query: {query.strip()}", f"Category: {category.value}"]
        sections.extend(self.card_context(card, preferences.alert_threshold) for card in active)
        sections.append(build_preferences_context(preferences))

        evidence = [line for card in active for line in retrieve_card_evidence(card, category)]
        if evidence:
            sections.append("Evidence:\n" + "\n".join(f"- {line}" for line in evidence))

        statuses = [
            f"- {card.name}: {self.tracker.status(card, category, as_of, preferences.alert_threshold).value}"
            for card in active
        ]
        if statuses:
            sections.append("Limit Status:\n" + "\n".join(statuses))
        return "\n\n".join(sections)
