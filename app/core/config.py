from functools import lru_cache
from typing import Literal
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["development", "production"]

def _env_file_for(app_env: EnvName) -> str:
    return ".env.development" if app_env == "development" else ".env.production"

class Settings(BaseSettings):

    # Core
    APP_ENV: EnvName = "development"
    APP_NAME: str = "MarketplaceRecommendations"
    DEBUG: bool = False
    GIT_SHA: str = "unknown"

    # Redis (empty = interaction log kept in memory only)
    REDIS_URL: str = ""

    # Catalog (marketplace backend)
    CATALOG_URL: str = "http://localhost:5000/api/retailer-products/browse"
    catalog_timeout_s: float = 10.0
    catalog_fetch_limit: int = 1000            # sent as ?limit= so one page holds the whole catalog

    # Interaction log
    interaction_log_key: str = "ai_user_interactions"
    interaction_log_capacity: int = 100

    # Recommendations
    trending_window_days: int = 7

    # pydantic-settings config will be set dynamically in the factory below
    model_config = SettingsConfigDict(env_file=None, case_sensitive=True)

@lru_cache
def get_settings() -> Settings:
    """
    Factory that chooses the right .env file based on APP_ENV.
    Cache makes it cheap to inject via FastAPI dependencies.
    """
    app_env: EnvName = os.getenv("APP_ENV", "development")  # earliest switch
    env_file = _env_file_for(app_env)
    return Settings(
                _env_file=env_file,  # load .env.development or .env.production
                _env_file_encoding="utf-8"
    )
