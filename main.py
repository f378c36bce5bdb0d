import argparse
import json

from dotenv import load_dotenv

from cardwise.api.app import build_orchestrator, run as run_api
from cardwise.config import configure_logging, settings
from cardwise.integrations.telegram_bot import main as run_bot
from cardwise.repository.card_store import CardStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Cardwise unified entrypoint")
    parser.add_argument(
        "mode",
        nargs="?",
        choices=["api", "bot", "recommend"],
        default="api",
        help="Run mode: api (default), bot, recommend",
    )
    parser.add_argument("--query", help="Purchase description for recommend mode")
    parser.add_argument("--data-file", default=settings.card_data_file)
    parser.add_argument("--augment", action="store_true", help="Ask the configured augmenter first")
    return parser


def run_recommend(args: argparse.Namespace) -> None:
    if not args.query:
        raise SystemExit("--query is required in recommend mode")

    configure_logging(settings.log_level)
    store = CardStore(args.data_file)
    orchestrator = build_orchestrator(settings)
    cards = store.load_cards()
    preferences = store.load_preferences()

    if args.augment:
        result = orchestrator.recommend_augmented(args.query, cards, preferences)
        print(result.text)
        return

    response = orchestrator.recommend(args.query, cards, preferences)
    print(json.dumps(response.model_dump(mode="json"), indent=2))


def main() -> None:
    load_dotenv()
    args = build_parser().parse_args()

    if args.mode == "api":
        run_api()
        return

    if args.mode == "bot":
        run_bot()
        return

    run_recommend(args)


if __name__ == "__main__":
    main()
