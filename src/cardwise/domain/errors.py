class RecommendationError(Exception):
    """Base class for failures surfaced by the recommendation core."""


class InvalidQuery(RecommendationError, ValueError):
    def __init__(self, reason: str):
        super().__init__(f"Invalid query: {reason}")
        self.reason = reason


class NoCardsAvailable(RecommendationError):
    def __init__(self) -> None:
        super().__init__("Please add your credit cards first to get personalized recommendations.")


class CategoryNotRecognized(RecommendationError):
    """Soft condition: the engine falls back to General Purchases instead of raising this."""

    def __init__(self, query: str):
        super().__init__(f"No spending category recognized in {query!r}")
        self.query = query


class ProcessingError(RecommendationError):
    def __init__(self, detail: str = ""):
        message = "Sorry, I encountered an error processing your request. Please try again."
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.detail = detail


class CardNotFound(LookupError):
    def __init__(self, card_id: str):
        super().__init__(f"Card not found: {card_id}")
        self.card_id = card_id


class AugmentationFailure(RuntimeError):
    """Raised by an augmenter when it cannot produce text for a query."""
