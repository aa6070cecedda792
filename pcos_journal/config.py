"""Application configuration loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file)."""

    # --- App ---
    app_name: str = "PCOS Journal"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"  # development | staging | production

    # --- CORS ---
    cors_origins: list[str] = ["http://localhost:3000"]

    # --- Engine ---
    # Override for the bundled engine_config.yaml (phase boundaries, thresholds)
    engine_config_path: str = ""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "PCOS_"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
