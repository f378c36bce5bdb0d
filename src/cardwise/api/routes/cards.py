from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from cardwise.agents.orchestrator import RecommendationOrchestrator
from cardwise.api.dependencies import get_notifier, get_orchestrator, get_store
from cardwise.domain.errors import CardNotFound
from cardwise.domain.models import Card, ResetCycle
from cardwise.engine.limits import find_limit
from cardwise.integrations.notifier import Notifier, collect_limit_alerts, dispatch_alerts
from cardwise.nlp.parser import map_category_name
from cardwise.repository.card_store import CardStore
from cardwise.schemas.requests import SpendingUpdateRequest
from cardwise.schemas.responses import LimitStatusResponse, SpendingUpdateResponse

router = APIRouter(tags=["cards"])


@router.get("/cards", response_model=list[Card])
def list_cards(store: CardStore = Depends(get_store)) -> list[Card]:
    return store.load_cards()


@router.get("/cards/{card_id}/limits", response_model=LimitStatusResponse)
def card_limit_status(
    card_id: str,
    category: str,
    as_of: datetime | None = None,
    orchestrator: RecommendationOrchestrator = Depends(get_orchestrator),
    store: CardStore = Depends(get_store),
) -> LimitStatusResponse:
    resolved = map_category_name(category)
    if resolved is None:
        raise HTTPException(status_code=400, detail=f"Unknown category: {category}")
    try:
        card = store.get_card(card_id)
    except CardNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    as_of = as_of or datetime.now()
    tracker = orchestrator.scoring.tracker
    preferences = store.load_preferences()

    next_reset = None
    limit = find_limit(card, resolved)
    if limit is not None and limit.reset_cycle is not ResetCycle.NEVER:
        next_reset = tracker.rolled_over(limit, as_of).reset_date

    return LimitStatusResponse(
        card_id=card.id,
        category=resolved,
        status=orchestrator.limit_status(card, resolved, as_of, preferences),
        usage_ratio=tracker.usage_ratio(card, resolved, as_of),
        remaining=tracker.remaining(card, resolved, as_of),
        next_reset_date=next_reset,
    )


@router.post("/spending", response_model=SpendingUpdateResponse)
def update_spending(
    request: SpendingUpdateRequest,
    store: CardStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier),
) -> SpendingUpdateResponse:
    as_of = request.as_of or datetime.now()
    try:
        if request.mode == "set":
            card = store.update_spending(request.card_id, request.category, request.amount)
        else:
            card = store.add_spending(request.card_id, request.category, request.amount, as_of)
    except CardNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    alerts = collect_limit_alerts([card], store.load_preferences(), as_of)
    dispatch_alerts(alerts, notifier)
    return SpendingUpdateResponse(card=card, alerts=alerts)
