from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    telegram_bot_token: str = ""
    sheet_id: str = ""
    google_credentials_path: str = "credentials.json"
    sheet_name: str = "Expenses"
    command_prefix: str = "!expense"
    # IANA zone for the default expense date; server-local when unset
    timezone: str | None = None
    port: int = 3000
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
