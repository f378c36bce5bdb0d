from fastapi import APIRouter, Depends

from cardwise.agents.orchestrator import RecommendationOrchestrator
from cardwise.api.dependencies import get_orchestrator

router = APIRouter(tags=["health"])


@router.get("/health")
def health(orchestrator: RecommendationOrchestrator = Depends(get_orchestrator)) -> dict:
    return {"status": "healthy", "cache": orchestrator.cache.stats()}
