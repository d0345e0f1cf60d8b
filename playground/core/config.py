"""Core configuration for the security playground engine."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

ETHER = 10**18


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PLAYGROUND_",
        case_sensitive=False,
    )

    # ── App ──────────────────────────────────────────────────────────────
    app_name: str = "Security Playground"
    app_env: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    log_retention: int = 100

    # ── Ledger ───────────────────────────────────────────────────────────
    seed_account_balance: int = 100 * ETHER
    default_account_balance: int = 1 * ETHER
    deployer_balance: int = 100 * ETHER
    contract_endowment: int = 10 * ETHER
    block_gas_limit: int = 30_000_000
    base_transaction_gas: int = 21_000
    contract_call_gas: int = 50_000
    nominal_deploy_gas: int = 21_000

    # ── Compiler ─────────────────────────────────────────────────────────
    compiler_version: str = "0.8.19"

    # Pins bytecode and block hash generation when set
    random_seed: int | None = None

    # ── Progress storage ─────────────────────────────────────────────────
    storage_backend: Literal["memory", "file", "redis"] = "memory"
    storage_path: str = "~/.security-playground/progress.json"
    redis_url: str = "redis://localhost:6379/0"
    progress_key: str = "security-playground-progress"
    completed_modules_key: str = "completed-modules"
    total_modules: int = 9


@lru_cache
def get_settings() -> Settings:
    """Return cached settings singleton."""
    return Settings()
