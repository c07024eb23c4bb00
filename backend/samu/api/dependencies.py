"""API Dependencies — admin guard and providers for external clients.

Invariants:
    - Admin = X-Admin-Email header present in settings.admin_emails (case-insensitive)
    - get_printful_client returns None in offline mode (no API key)
    - Every external client is obtained through a dependency, so tests override them with
      app.dependency_overrides instead of patching modules

Design Decisions:
    - Header-based admin check: wallet/email login happens client-side; the API only
      needs the caller's admin identity
"""

from fastapi import Depends, Header

from samu.config import Settings, get_settings
from samu.core.errors import AdminRequiredError
from samu.infrastructure.object_storage import ObjectStorage, build_object_storage
from samu.infrastructure.printful_client import PrintfulClient
from samu.infrastructure.solana_rpc import SolanaRpcClient

PLATFORM_WALLET_FALLBACK = "platform_treasury"


def require_admin(
    x_admin_email: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> str:
    email = (x_admin_email or "").strip().lower()
    if not email or email not in settings.admin_emails:
        raise AdminRequiredError()
    return email


def get_rpc_client(settings: Settings = Depends(get_settings)) -> SolanaRpcClient:
    return SolanaRpcClient(
        settings.rpc_endpoints,
        settings.samu_token_mint,
        timeout_seconds=settings.rpc_timeout_seconds,
    )


def get_printful_client(
    settings: Settings = Depends(get_settings),
) -> PrintfulClient | None:
    if not settings.printful_enabled:
        return None
    return PrintfulClient(
        settings.printful_api_key,
        settings.printful_store_id,
        base_url=settings.printful_base_url,
        timeout_seconds=settings.printful_timeout_seconds,
        max_retries=settings.printful_max_retries,
    )


def get_object_storage(settings: Settings = Depends(get_settings)) -> ObjectStorage:
    return build_object_storage(settings)


def get_platform_wallet(settings: Settings = Depends(get_settings)) -> str:
    return settings.treasury_wallet_address or PLATFORM_WALLET_FALLBACK
