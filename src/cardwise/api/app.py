import uvicorn
from fastapi import FastAPI

from cardwise.agents.orchestrator import RecommendationOrchestrator
from cardwise.api.routes.cards import router as cards_router
from cardwise.api.routes.health import router as health_router
from cardwise.api.routes.recommend import router as recommend_router
from cardwise.config import Settings, configure_logging, settings
from cardwise.engine.cache import RecommendationCache
from cardwise.integrations.notifier import LoggingNotifier, Notifier
from cardwise.rag.augmenter import build_augmenter
from cardwise.rag.retriever import ContextBuilder, ContextCache
from cardwise.repository.card_store import CardStore


def build_orchestrator(config: Settings) -> RecommendationOrchestrator:
    return RecommendationOrchestrator(
        cache=RecommendationCache(config.cache_capacity),
        augmenter=build_augmenter(config.augmenter, config.openai_api_key, config.openai_model),
        context_builder=ContextBuilder(ContextCache(config.context_ttl_seconds)),
    )


def create_app(
    config: Settings | None = None,
    store: CardStore | None = None,
    orchestrator: RecommendationOrchestrator | None = None,
    notifier: Notifier | None = None,
) -> FastAPI:
    config = config or settings
    application = FastAPI(title="Cardwise API", version="0.1.0")
    application.state.store = store or CardStore(config.card_data_file)
    application.state.orchestrator = orchestrator or build_orchestrator(config)
    application.state.notifier = notifier or LoggingNotifier()

    application.include_router(health_router)
    application.include_router(recommend_router)
    application.include_router(cards_router)
    return application


app = create_app()


def run() -> None:
    configure_logging(settings.log_level)
    uvicorn.run("cardwise.api.app:app", host=settings.app_host, port=settings.app_port, reload=False)
