import logging
from datetime import date, datetime
from typing import Protocol

from pydantic import BaseModel

from cardwise.domain.events import LimitAlertRaised, log_event
from cardwise.domain.models import Card, LimitStatus, SpendingCategory, UserPreferences
from cardwise.engine.limits import LimitTracker

logger = logging.getLogger(__name__)


class LimitAlert(BaseModel):
    card_id: str
    card_name: str
    category: SpendingCategory
    status: LimitStatus
    usage_ratio: float
    message: str


def _message(card: Card, category: SpendingCategory, status: LimitStatus, ratio: float) -> str:
    if status is LimitStatus.REACHED:
        return f"{card.name} has reached its {category.value} limit. Consider using another card."
    return f"{card.name} is at {ratio:.0%} of its {category.value} limit."


def collect_limit_alerts(
    cards: list[Card],
    preferences: UserPreferences,
    as_of: date | datetime,
    tracker: LimitTracker | None = None,
) -> list[LimitAlert]:
    if not preferences.notifications_enabled:
        return []

    tracker = tracker or LimitTracker()
    alerts: list[LimitAlert] = []
    for card in cards:
        if not card.is_active:
            continue
        categories = [item.category for item in card.spending_limits]
        if card.quarterly_bonus is not None and card.quarterly_bonus.category not in categories:
            categories.append(card.quarterly_bonus.category)
        for category in categories:
            status = tracker.status(card, category, as_of, threshold=preferences.alert_threshold)
            if status is LimitStatus.AVAILABLE:
                continue
            ratio = tracker.usage_ratio(card, category, as_of)
            alerts.append(
                LimitAlert(
                    card_id=card.id,
                    card_name=card.name,
                    category=category,
                    status=status,
                    usage_ratio=ratio,
                    message=_message(card, category, status, ratio),
                )
            )
    return alerts


class Notifier(Protocol):
    def send(self, alert: LimitAlert) -> None:
        """Deliver one alert."""


class LoggingNotifier:
    def send(self, alert: LimitAlert) -> None:
        log_event(
            logger,
            LimitAlertRaised(
                card_id=alert.card_id,
                category=alert.category,
                status=alert.status,
                usage_ratio=alert.usage_ratio,
            ),
            level=logging.WARNING,
        )


def dispatch_alerts(alerts: list[LimitAlert], notifier: Notifier) -> int:
    for alert in alerts:
        notifier.send(alert)
    return len(alerts)
