"""
Application configuration using Pydantic Settings.
All environment-specific values are centralized here.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "TLA+ Requirements Analyzer"
    app_version: str = "1.4.0"
    debug: bool = False

    # ── Temporal rewrite ─────────────────────────────────
    step_ms: int = 50  # 1 Next-step ≈ 50 ms

    # ── Linguistic tool ──────────────────────────────────
    nlp_backend: str = "none"  # "none" | "spacy"
    spacy_model: str = "en_core_web_sm"

    # ── Prover ───────────────────────────────────────────
    prover_url: str = "http://localhost:8787/api/prove"
    prover_client_timeout_ms: int = 12000
    prover_timeout_ms: int = 10000  # server-side evaluation bound

    # ── API server ───────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8787

    # ── Storage / rules ──────────────────────────────────
    local_storage_path: str = "./storage"
    rules_config_path: str = ""  # optional JSON override for rule tables

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
