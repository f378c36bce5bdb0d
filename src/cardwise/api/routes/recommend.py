from fastapi import APIRouter, Depends, HTTPException

from cardwise.agents.orchestrator import RecommendationOrchestrator
from cardwise.api.dependencies import get_orchestrator, get_store
from cardwise.domain.errors import InvalidQuery, NoCardsAvailable, ProcessingError
from cardwise.domain.models import ParsedQuery
from cardwise.repository.card_store import CardStore
from cardwise.schemas.requests import ParseRequest, RecommendRequest
from cardwise.schemas.responses import RecommendResponse

router = APIRouter(tags=["recommend"])


@router.post("/recommend", response_model=RecommendResponse)
def recommend(
    request: RecommendRequest,
    orchestrator: RecommendationOrchestrator = Depends(get_orchestrator),
    store: CardStore = Depends(get_store),
) -> RecommendResponse:
    cards = store.load_cards()
    preferences = store.load_preferences()
    try:
        if request.augment:
            result = orchestrator.recommend_augmented(request.message, cards, preferences, request.as_of)
            return RecommendResponse(
                text=result.text, augmented=result.augmented, recommendation=result.response
            )
        response = orchestrator.recommend(request.message, cards, preferences, request.as_of)
    except InvalidQuery as exc:
        raise HTTPException(status_code=400, detail=exc.reason) from exc
    except NoCardsAvailable as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ProcessingError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return RecommendResponse(text=response.reasoning, recommendation=response)


@router.post("/parse", response_model=ParsedQuery)
def parse(
    request: ParseRequest,
    orchestrator: RecommendationOrchestrator = Depends(get_orchestrator),
) -> ParsedQuery:
    try:
        return orchestrator.parse(request.message)
    except InvalidQuery as exc:
        raise HTTPException(status_code=400, detail=exc.reason) from exc
