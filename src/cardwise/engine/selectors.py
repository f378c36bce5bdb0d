from cardwise.domain.models import CardScore, LimitStatus


def rank_scores(scores: list[CardScore]) -> list[CardScore]:
    """Highest total first; equal totals keep their input order."""
    indexed = sorted(enumerate(scores), key=lambda item: (-item[1].total_score, item[0]))
    return [score for _, score in indexed]


def eligible(scores: list[CardScore]) -> list[CardScore]:
    return [score for score in scores if score.total_score > 0]


def all_exhausted(scores: list[CardScore]) -> bool:
    return bool(scores) and all(score.limit_status is LimitStatus.REACHED for score in scores)
