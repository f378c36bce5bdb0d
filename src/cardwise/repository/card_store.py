import json
import logging
import threading
from datetime import date, datetime
from pathlib import Path

from cardwise.domain.errors import CardNotFound
from cardwise.domain.models import Card, SpendingCategory, UserPreferences
from cardwise.engine.limits import LimitTracker, active_bonus, find_limit

logger = logging.getLogger(__name__)


class CardStore:
    """JSON-file persistence for card snapshots and preferences.

    The file holds ``{"cards": [...], "preferences": {...}}``; a bare list of
    cards is also accepted. All spending changes go through this class.
    """

    def __init__(self, data_file: str | Path, tracker: LimitTracker | None = None):
        self.data_file = Path(data_file)
        self.tracker = tracker or LimitTracker()
        self._lock = threading.Lock()

    def _read(self) -> dict:
        if not self.data_file.exists():
            raise FileNotFoundError(f"Card data file not found: {self.data_file}")

        with self.data_file.open("r", encoding="utf-8") as fh:
            data = json.load(fh)

        if isinstance(data, list):
            return {"cards": data, "preferences": {}}
        return data

    def _write(self, cards: list[Card], preferences: UserPreferences) -> None:
        payload = {
            "cards": [card.model_dump(mode="json") for card in cards],
            "preferences": preferences.model_dump(mode="json"),
        }
        self.data_file.parent.mkdir(parents=True, exist_ok=True)
        tmp_file = self.data_file.with_suffix(self.data_file.suffix + ".tmp")
        with tmp_file.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, ensure_ascii=False, indent=2)
        tmp_file.replace(self.data_file)

    def load_cards(self) -> list[Card]:
        return [Card.model_validate(item) for item in self._read().get("cards", [])]

    def load_preferences(self) -> UserPreferences:
        return UserPreferences.model_validate(self._read().get("preferences") or {})

    def get_card(self, card_id: str) -> Card:
        for card in self.load_cards():
            if card.id == card_id:
                return card
        raise CardNotFound(card_id)

    def save_cards(self, cards: list[Card]) -> None:
        with self._lock:
            preferences = self.load_preferences() if self.data_file.exists() else UserPreferences()
            self._write(cards, preferences)

    def save_preferences(self, preferences: UserPreferences) -> None:
        with self._lock:
            self._write(self.load_cards(), preferences)

    def _replace_card(self, card_id: str, update) -> Card:
        with self._lock:
            cards = self.load_cards()
            preferences = self.load_preferences()
            for index, card in enumerate(cards):
                if card.id == card_id:
                    updated = update(card).model_copy(update={"updated_at": datetime.now()})
                    cards[index] = updated
                    self._write(cards, preferences)
                    return updated
            raise CardNotFound(card_id)

    def update_spending(self, card_id: str, category: SpendingCategory, amount: float) -> Card:
        """Set the current spending of the card's limit for ``category``."""
        if amount < 0:
            raise ValueError("Spending amount cannot be negative.")

        def apply(card: Card) -> Card:
            limits = [
                item.model_copy(update={"current_spending": amount}) if item.category == category else item
                for item in card.spending_limits
            ]
            return card.model_copy(update={"spending_limits": limits})

        card = self._replace_card(card_id, apply)
        logger.info(f"Set {category.value} spending on {card.name} to {amount:.2f}")
        return card

    def add_spending(
        self,
        card_id: str,
        category: SpendingCategory,
        amount: float,
        as_of: date | datetime | None = None,
    ) -> Card:
        """Add a purchase to the matching limit and to a current-quarter bonus."""
        if amount < 0:
            raise ValueError("Spending amount cannot be negative.")
        as_of = as_of or datetime.now()

        def apply(card: Card) -> Card:
            update: dict = {}
            limit = find_limit(card, category)
            if limit is not None:
                update["spending_limits"] = [
                    item.model_copy(update={"current_spending": item.current_spending + amount})
                    if item is limit
                    else item
                    for item in card.spending_limits
                ]
            bonus = active_bonus(card, category, as_of)
            if bonus is not None:
                update["quarterly_bonus"] = bonus.model_copy(
                    update={"current_spending": bonus.current_spending + amount}
                )
            return card.model_copy(update=update)

        card = self._replace_card(card_id, apply)
        logger.info(f"Recorded {amount:.2f} of {category.value} spending on {card.name}")
        return card

    def reset_due_limits(self, as_of: date | datetime | None = None) -> list[Card]:
        as_of = as_of or datetime.now()
        with self._lock:
            cards = self.load_cards()
            preferences = self.load_preferences()
            changed = False
            updated_cards: list[Card] = []
            for card in cards:
                limits = [self.tracker.rolled_over(item, as_of) for item in card.spending_limits]
                if any(new is not old for new, old in zip(limits, card.spending_limits)):
                    changed = True
                    card = card.model_copy(update={"spending_limits": limits, "updated_at": datetime.now()})
                    logger.info(f"Reset spending limits on {card.name}")
                updated_cards.append(card)
            if changed:
                self._write(updated_cards, preferences)
            return updated_cards
