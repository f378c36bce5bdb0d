import hashlib
import logging
import threading
from collections.abc import Iterable

from cardwise.domain.events import CacheEvicted, CacheHit, log_event
from cardwise.domain.models import Card, RecommendationResponse

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100


def normalize_query(query: str) -> str:
    return " ".join(query.lower().split())


def card_set_fingerprint(cards: Iterable[Card]) -> str:
    """Digest of the card snapshot that does not depend on card order."""
    entries = sorted(
        (card.id, hashlib.sha256(card.model_dump_json().encode("utf-8")).hexdigest())
        for card in cards
    )
    digest = hashlib.sha256()
    for card_id, snapshot in entries:
        digest.update(f"{card_id}:{snapshot};".encode("utf-8"))
    return digest.hexdigest()


def make_cache_key(query: str, cards: Iterable[Card], scope: str = "") -> str:
    key = f"{normalize_query(query)}|{card_set_fingerprint(cards)}"
    if scope:
        key = f"{key}|{scope}"
    return key


class RecommendationCache:
    """Bounded memo of composed responses.

    Eviction follows insertion order: once the cache holds more than
    ``capacity`` entries the oldest inserted keys go first. ``get`` does not
    move a key, and putting an existing key keeps its original slot. Entries are
    copied on the way in and out, so callers never share a cached instance.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries: dict[str, RecommendationResponse] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> RecommendationResponse | None:
        with self._lock:
            response = self._entries.get(key)
            if response is None:
                self._misses += 1
                return None
            self._hits += 1
        log_event(logger, CacheHit(key=key), level=logging.DEBUG)
        return response.model_copy(deep=True)

    def put(self, key: str, response: RecommendationResponse) -> None:
        with self._lock:
            self._entries[key] = response.model_copy(deep=True)
            overflow = len(self._entries) - self.capacity
            evicted = list(self._entries)[:overflow] if overflow > 0 else []
            for old_key in evicted:
                del self._entries[old_key]
        if evicted:
            log_event(logger, CacheEvicted(keys=evicted), level=logging.DEBUG)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "cached": len(self._entries),
                "capacity": self.capacity,
                "hits": self._hits,
                "misses": self._misses,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
