"""All settings, loaded from the environment and the .env file."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

APP_VERSION = "1.0.0"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    app_url: str = "http://localhost:8000"
    env: str = "DEV"  # DEV | TEST | PROD
    secret_key: str = "change-me"
    database_url: str = "sqlite:///./alfred.db"
    log_level: str = "INFO"

    # Session (minutes)
    session_timeout: int = 24 * 60

    # Slack OAuth
    slack_client_id: str = ""
    slack_client_secret: str = ""
    slack_oauth_scope: str = "client"

    # Join flow — admin token used to invite new members
    slack_invite_token: str = ""
    slack_invite_channel: str = ""

    # reCAPTCHA
    recaptcha_secret: str = ""

    # Configuration change queue
    redis_url: str = ""
    conf_queue_key: str = "alfred:conf"

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_default: str = "120/minute"
    rate_limit_join: str = "10/minute"

    @property
    def secure_cookies(self) -> bool:
        return self.env.upper() in ("PROD", "TEST")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
