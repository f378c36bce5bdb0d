import asyncio
import logging

from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from cardwise.agents.orchestrator import RecommendationOrchestrator
from cardwise.api.app import build_orchestrator
from cardwise.config import configure_logging, settings
from cardwise.domain.errors import RecommendationError
from cardwise.domain.models import RecommendationResponse
from cardwise.nlp.lexicon import COMMON_QUERIES
from cardwise.repository.card_store import CardStore

logger = logging.getLogger(__name__)


def format_reply(response: RecommendationResponse) -> str:
    lines: list[str] = []
    primary = response.primary
    if primary is None:
        lines.append(response.reasoning)
    else:
        lines.append(f"Use: {primary.card_name} ({primary.multiplier:.1f}x {primary.point_type.value})")
        if response.secondary is not None:
            secondary = response.secondary
            lines.append(f"Backup: {secondary.card_name} ({secondary.multiplier:.1f}x {secondary.point_type.value})")
        lines.append(primary.reasoning)
    if response.warnings:
        lines.append("Warnings:")
        lines.extend([f"- {item}" for item in response.warnings])
    if response.suggestions:
        lines.append("Suggestions:")
        lines.extend([f"- {item}" for item in response.suggestions])
    return "\n".join(lines)


class RecommendationBot:
    def __init__(self, orchestrator: RecommendationOrchestrator, store: CardStore):
        self.orchestrator = orchestrator
        self.store = store

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        examples = "\n".join(f"- {query}" for query in COMMON_QUERIES[:3])
        await update.message.reply_text(f"Tell me what you are buying, for example:\n{examples}")

    async def handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        text = update.message.text or ""
        try:
            response = self.orchestrator.recommend(
                text, self.store.load_cards(), self.store.load_preferences()
            )
        except RecommendationError as exc:
            await update.message.reply_text(str(exc))
            return
        await update.message.reply_text(format_reply(response))


def main() -> None:
    if not settings.telegram_bot_token:
        raise ValueError("TELEGRAM_BOT_TOKEN is required.")

    configure_logging(settings.log_level)
    bot = RecommendationBot(build_orchestrator(settings), CardStore(settings.card_data_file))

    app = Application.builder().token(settings.telegram_bot_token).build()
    app.add_handler(CommandHandler("start", bot.start))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, bot.handle_message))

    logger.info("Telegram bot polling")
    app.run_polling()


if __name__ == "__main__":
    asyncio.run(asyncio.to_thread(main))
