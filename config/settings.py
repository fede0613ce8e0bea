"""Pydantic settings for the Reward Calculator."""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from src.core.constants import DEFAULT_EXCLUDED_STRATEGIES


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Chain access
    rpc_url: Optional[str] = Field(default=None, description="JSON-RPC endpoint for chain state reads")
    chain_id: int = Field(default=137, description="Chain id of the network holding the vaults")

    # Registry / oracle contracts
    bookkeeper_address: Optional[str] = Field(default=None, description="Bookkeeper contract enumerating vaults")
    price_calculator_address: Optional[str] = Field(default=None, description="On-chain price calculator contract")

    # Price source
    price_source: str = Field(default="onchain", description="Price oracle backend: onchain or graphql")
    price_api_url: str = Field(
        default="https://blue-api.morpho.org/graphql",
        description="GraphQL pricing API URL",
    )
    max_price_age_seconds: int = Field(default=6 * 3600, ge=60, description="Prices older than this are stale")

    # Computation
    reference_period_seconds: int = Field(default=86400, gt=0, description="KPI reference period in seconds")
    query_timeout_seconds: float = Field(default=30.0, gt=0, description="Timeout for a single external query")
    max_concurrency: int = Field(default=8, ge=1, le=128, description="Concurrent external queries")
    scan_concurrency: int = Field(default=4, ge=1, le=64, description="Vaults processed concurrently in a scan")

    # Aggregate scans skip strategies with these names
    excluded_strategy_names: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: sorted(DEFAULT_EXCLUDED_STRATEGIES),
        description="Strategy names skipped by vault scans",
    )

    # Price cache
    price_cache_enabled: bool = Field(default=False, description="Persist historical prices on disk")
    cache_dir: Path = Field(default=Path(".cache/rewards"), description="Cache directory path")
    cache_ttl_seconds: int = Field(default=7 * 86400, ge=60, description="Cache TTL in seconds")

    # Logging
    log_level: str = Field(default="INFO", description="DEBUG / INFO / WARNING / ERROR")

    @field_validator("excluded_strategy_names", mode="before")
    @classmethod
    def parse_excluded_strategy_names(cls, v):
        """Parse comma-separated strategy names."""
        if isinstance(v, str):
            if not v.strip():
                return []
            return [name.strip() for name in v.split(",") if name.strip()]
        return v or []

    @field_validator("price_source")
    @classmethod
    def validate_price_source(cls, v: str) -> str:
        v = v.lower()
        if v not in {"onchain", "graphql"}:
            raise ValueError("price_source must be 'onchain' or 'graphql'")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        v_up = v.upper()
        if v_up not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v_up

    @field_validator("cache_dir", mode="before")
    @classmethod
    def parse_cache_dir(cls, v):
        """Convert string to Path."""
        if isinstance(v, str):
            return Path(v)
        return v

    def ensure_cache_dir(self) -> Path:
        """Ensure cache directory exists and return it."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        return self.cache_dir


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
