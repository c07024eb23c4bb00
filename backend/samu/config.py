"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Empty integration credentials mean "offline mode" for that integration

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Comma-separated strings accepted for list settings (ADMIN_EMAILS, SOLANA_RPC_ENDPOINTS)
"""

from functools import lru_cache
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _split_csv(v):
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    return v


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "postgresql+asyncpg://samu:samu@db:5432/samu"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # API
    cors_origins: Annotated[list[str], NoDecode] = ["http://localhost:5173"]
    admin_emails: Annotated[list[str], NoDecode] = []

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, v):
        return _split_csv(v)

    @field_validator("admin_emails", mode="before")
    @classmethod
    def normalize_admin_emails(cls, v):
        return [email.lower() for email in _split_csv(v) or []]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    # Solana
    samu_token_mint: str = "EHy2UQWKKVWYvMTzbEfYy1jvZD8VhRBUAvz3bnJ1GnuF"
    samu_decimals: int = 8
    solana_rpc_endpoints: Annotated[list[str], NoDecode] = [
        "https://api.mainnet-beta.solana.com",
        "https://rpc.ankr.com/solana",
    ]
    helius_api_key: str = ""
    treasury_wallet_address: str = ""
    verify_vote_transactions: bool = True
    rpc_timeout_seconds: float = 10.0

    @field_validator("solana_rpc_endpoints", mode="before")
    @classmethod
    def split_rpc_endpoints(cls, v):
        return _split_csv(v)

    # Printful
    printful_api_key: str = ""
    printful_store_id: str = "17717241"
    printful_base_url: str = "https://api.printful.com"
    printful_webhook_secret: str = ""
    printful_timeout_seconds: float = 30.0
    printful_max_retries: int = 3
    printful_mockup_poll_attempts: int = 20
    printful_mockup_poll_interval_seconds: float = 2.0

    # Object storage (Cloudflare R2, S3-compatible)
    r2_account_id: str = ""
    r2_access_key_id: str = ""
    r2_secret_access_key: str = ""
    r2_bucket_name: str = ""
    r2_public_url: str = ""
    upload_dir: str = "uploads"
    max_upload_bytes: int = 50 * 1024 * 1024

    # Contest scheduler
    contest_scheduler_enabled: bool = True
    contest_scheduler_interval_seconds: float = 60.0

    # Bulk balance sync
    bulk_sync_delay_seconds: float = 0.1

    # Goods economics
    base_price_ratio: float = 0.6
    default_shipping_rate: str = "4.99"

    @property
    def rpc_endpoints(self) -> list[str]:
        """Ordered RPC fallback list; Helius goes first when a key is configured."""
        if self.helius_api_key:
            return [
                f"https://rpc.helius.xyz/?api-key={self.helius_api_key}",
                *self.solana_rpc_endpoints,
            ]
        return list(self.solana_rpc_endpoints)

    @property
    def printful_enabled(self) -> bool:
        return bool(self.printful_api_key)

    @property
    def r2_enabled(self) -> bool:
        return all((
            self.r2_account_id, self.r2_access_key_id,
            self.r2_secret_access_key, self.r2_bucket_name, self.r2_public_url,
        ))


@lru_cache
def get_settings() -> Settings:
    return Settings()
