"""
Centralised application settings loaded from environment / .env file.
"""
from __future__ import annotations

from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings
from dotenv import load_dotenv

_ROOT = Path(__file__).resolve().parents[2]

# Load .env from project root (two levels up from this file)
load_dotenv(_ROOT / ".env")


class Settings(BaseSettings):
    # ── Query engine ─────────────────────────────────────
    default_page_size: int = 10
    max_page_size: int = 10_000
    default_window_days: int = 30

    # ── Mock store ───────────────────────────────────────
    mock_data_path: Path = _ROOT / "mock_data" / "google_ads.yml"

    # ── App ──────────────────────────────────────────────
    api_version: str = "v21"
    log_level: str = "INFO"
    environment: str = "development"

    # ── Middleware ───────────────────────────────────────
    enable_request_logging: bool = False
    simulate_rate_limiting: bool = False
    rate_limit_probability: float = 0.1

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
