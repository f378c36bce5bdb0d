import pytest

from cardwise.domain.errors import AugmentationFailure
from cardwise.domain.models import SpendingCategory
from cardwise.rag.augmenter import OpenAIAugmenter, TemplateAugmenter, build_augmenter
from cardwise.rag.retriever import (
    ContextBuilder,
    ContextCache,
    build_card_context,
    retrieve_card_evidence,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_context_cache_expires_entries() -> None:
    clock = FakeClock()
    cache = ContextCache(ttl_seconds=300, clock=clock)
    cache.put("amex-gold", "context")

    clock.now = 299.0
    assert cache.get("amex-gold") == "context"

    clock.now = 300.0
    assert cache.get("amex-gold") is None
    assert len(cache) == 0


def test_retrieve_card_evidence(card_factory) -> None:
    card = card_factory(limit=1000, spent=250)

    evidence = retrieve_card_evidence(card, SpendingCategory.GROCERIES)

    assert evidence == [
        "Amex Gold: Groceries earns 4.0x MR",
        "Amex Gold: Groceries limit $250/$1,000 (annually reset)",
    ]
    assert retrieve_card_evidence(card, SpendingCategory.TRAVEL) == []


def test_build_card_context_marks_limits(card_factory) -> None:
    context = build_card_context(card_factory(limit=1000, spent=900))

    assert "Card: Amex Gold (Custom)" in context
    assert "- Groceries: $900/$1,000 (90%) - NEAR LIMIT" in context


def test_context_builder_sections(card_factory, preferences, as_of) -> None:
    builder = ContextBuilder()
    cards = [card_factory(limit=1000, spent=1000), card_factory("Old Card", is_active=False)]

    context = builder.build("buying groceries", cards, preferences, SpendingCategory.GROCERIES, as_of)

    assert context.startswith("Query: buying groceries\n\nCategory: Groceries")
    assert "Old Card" not in context
    assert "Limit Status:\n- Amex Gold: reached" in context
    assert len(builder.cache) == 1


def test_template_augmenter_restates_evidence() -> None:
    context = "Query: gas\n\nEvidence:\n- Card: Gas earns 3.0x UR\n\nLimit Status:\n- Card: available"

    text = TemplateAugmenter().augment("gas", context)

    assert text.splitlines() == [
        "Here is what I found for: gas",
        "Relevant rewards:",
        "- Card: Gas earns 3.0x UR",
        "Limit status:",
        "- Card: available",
    ]


def test_template_augmenter_rejects_empty_context() -> None:
    with pytest.raises(AugmentationFailure):
        TemplateAugmenter().augment("gas", "  ")


def test_openai_augmenter_without_key_fails(monkeypatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(AugmentationFailure):
        OpenAIAugmenter(api_key="").augment("gas", "Query: gas")


def test_build_augmenter() -> None:
    assert isinstance(build_augmenter("template"), TemplateAugmenter)
    assert isinstance(build_augmenter("openai", api_key="sk-test"), OpenAIAugmenter)
    with pytest.raises(ValueError):
        build_augmenter("crystal-ball")


def test_context_cache_put_drops_expired_entries() -> None:
    clock = FakeClock()
    cache = ContextCache(ttl_seconds=300, clock=clock)
    cache.put("old", "stale")

    clock.now = 301.0
    cache.put("new", "fresh")

    assert len(cache) == 1


def test_card_context_follows_card_updates(card_factory) -> None:
    builder = ContextBuilder()
    before = card_factory(limit=1000, spent=100)
    after = before.model_copy(
        update={"spending_limits": [before.spending_limits[0].model_copy(update={"current_spending": 900})]}
    )

    assert "$100/$1,000 (10%) - OK" in builder.card_context(before, 0.85)
    assert "$900/$1,000 (90%) - NEAR LIMIT" in builder.card_context(after, 0.85)
    assert "$900/$1,000 (90%) - OK" in builder.card_context(after, 0.95)
