from __future__ import annotations

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="PAGE_MODEL_")

    active_profile: str = "python-webdriver"
    root_selector: str = "body"
    max_name_length: int = 20
    profiles_path: str | None = None
    headless: bool = True
    navigation_timeout_ms: int = 30000
    settle_ms: int = 1000
    log_level: str = "INFO"

def get_settings() -> Settings:
    return Settings()


settings = get_settings()
