import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    card_data_file: str = "data/cards/sample_cards.json"

    cache_capacity: int = 100
    context_ttl_seconds: float = 300.0
    augmenter: str = "template"

    telegram_bot_token: str = ""
    openai_api_key: str = ""
    openai_model: str = "gpt-4.1-mini"

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def configure_logging(level: str | int = "INFO") -> None:
    logging.basicConfig(
        level=level if isinstance(level, int) else level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = Settings()
