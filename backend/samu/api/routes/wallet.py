"""Wallet Routes — read-only SAMU/SOL balances and the treasury address."""

from fastapi import APIRouter, Depends, Response

from samu.api.dependencies import get_rpc_client
from samu.config import Settings, get_settings
from samu.core.errors import ExternalServiceError
from samu.infrastructure.solana_rpc import SolanaRpcClient

router = APIRouter(prefix="/api/wallet", tags=["wallet"])

BALANCE_CACHE = "public, max-age=5"


@router.get("/samu-balance/{wallet}")
async def samu_balance(
    wallet: str, response: Response,
    rpc: SolanaRpcClient = Depends(get_rpc_client),
):
    response.headers["Cache-Control"] = BALANCE_CACHE
    return {"wallet": wallet, "balance": await rpc.get_samu_balance(wallet)}


@router.get("/sol-balance/{wallet}")
async def sol_balance(
    wallet: str, response: Response,
    rpc: SolanaRpcClient = Depends(get_rpc_client),
):
    response.headers["Cache-Control"] = BALANCE_CACHE
    return {"wallet": wallet, "balance": await rpc.get_sol_balance(wallet)}


@router.get("/treasury")
async def treasury_wallet(settings: Settings = Depends(get_settings)):
    if not settings.treasury_wallet_address:
        raise ExternalServiceError(
            "solana", "treasury wallet not configured", http_status=500,
        )
    return {"treasury_wallet": settings.treasury_wallet_address}
