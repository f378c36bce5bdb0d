from fastapi import Request

from cardwise.agents.orchestrator import RecommendationOrchestrator
from cardwise.integrations.notifier import Notifier
from cardwise.repository.card_store import CardStore


def get_store(request: Request) -> CardStore:
    return request.app.state.store


def get_orchestrator(request: Request) -> RecommendationOrchestrator:
    return request.app.state.orchestrator


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier
