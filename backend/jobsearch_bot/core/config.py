"""Application configuration loaded from environment variables.

Settings for the Telegram transport, the companion backend, the hh.ru catalog
and result delivery pacing. Uses pydantic-settings for validation and .env file
support.
"""

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Telegram transport
    telegram_bot_token: SecretStr = SecretStr("")
    telegram_api_url: str = "https://api.telegram.org"
    # Compared against X-Telegram-Bot-Api-Secret-Token; empty disables the check
    telegram_webhook_secret: SecretStr = SecretStr("")

    # Companion backend (OAuth with hh.ru, resumes, vacancy search)
    backend_url: str = "http://localhost:3000"

    # hh.ru public catalog
    catalog_api_url: str = "https://api.hh.ru"
    # hh.ru rejects requests without a descriptive User-Agent
    catalog_user_agent: str = "jobsearch-bot/1.0"

    # Outbound HTTP timeout in seconds, shared by all adapters
    http_timeout: float = 10.0

    # Result delivery
    result_limit: int = 10
    result_send_delay_ms: int = 300

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def result_send_delay(self) -> float:
        """Pause between consecutive result messages, in seconds."""
        return self.result_send_delay_ms / 1000

    @model_validator(mode="after")
    def check_settings(self) -> "Settings":
        """Validate delivery limits and production requirements.

        Checks:
        - Result limit must be positive (all environments)
        - Send delay cannot be negative (all environments)
        - Bot token must be set in production
        """
        if self.result_limit <= 0:
            msg = f"RESULT_LIMIT must be positive. Got: {self.result_limit}"
            raise ValueError(msg)
        if self.result_send_delay_ms < 0:
            msg = (
                "RESULT_SEND_DELAY_MS cannot be negative. "
                f"Got: {self.result_send_delay_ms}"
            )
            raise ValueError(msg)

        if (
            self.environment == "production"
            and not self.telegram_bot_token.get_secret_value()
        ):
            msg = "TELEGRAM_BOT_TOKEN must be set in production."
            raise ValueError(msg)

        return self


settings = Settings()
