"""Application configuration from environment."""
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "HuntHub"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./hunthub.db"

    # Creator bearer tokens
    secret_key: str = "change-me-in-production-use-env"
    auth_token_max_age: int = 60 * 60 * 24 * 14  # 14 days

    # Publishing
    max_published_versions: int = 10

    # Play
    max_hints_per_step: int = 1
    fuzzy_match_threshold: float = 0.8
    default_location_radius_m: float = 50.0
    anonymous_session_ttl_days: int = 7
    player_base_url: str = "http://localhost:5173"

    # AI validation
    ai_provider: str = "disabled"
    ai_validation_timeout_ms: int = 15000

    # Player uploads
    storage_root: str = "./data/storage"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()


# Base path for storage (parent of hunthub/)
BASE_DIR = Path(__file__).resolve().parent.parent.parent
