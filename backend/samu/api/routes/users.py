"""User Routes — profiles, activity, stats and on-chain balance sync.

Invariants:
    - GET /profile/{wallet} creates the profile on first read
    - PUT /profile/{wallet} only touches fields present in the body; 404 when absent
    - POST /sync-all is admin-only: it fans out one RPC lookup per stored profile
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from samu.api.dependencies import get_rpc_client, require_admin
from samu.config import Settings, get_settings
from samu.infrastructure.database import get_db
from samu.infrastructure.solana_rpc import SolanaRpcClient
from samu.schemas.meme import MemeResponse, VoteResponse
from samu.schemas.user import BulkSyncResponse, UserResponse, UserStats, UserUpdate
from samu.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/profile/{wallet}", response_model=UserResponse)
async def get_profile(wallet: str, db: AsyncSession = Depends(get_db)):
    return await UserService(db).get_or_create(wallet)


@router.put("/profile/{wallet}", response_model=UserResponse)
async def update_profile(
    wallet: str, body: UserUpdate, db: AsyncSession = Depends(get_db),
):
    return await UserService(db).update_profile(
        wallet, body.model_dump(exclude_unset=True),
    )


@router.get("/{wallet}/memes", response_model=list[MemeResponse])
async def user_memes(wallet: str, db: AsyncSession = Depends(get_db)):
    return await UserService(db).memes_of(wallet)


@router.get("/{wallet}/votes", response_model=list[VoteResponse])
async def user_votes(wallet: str, db: AsyncSession = Depends(get_db)):
    return await UserService(db).votes_of(wallet)


@router.get("/{wallet}/stats", response_model=UserStats)
async def user_stats(wallet: str, db: AsyncSession = Depends(get_db)):
    return await UserService(db).stats(wallet)


@router.post("/{wallet}/sync", response_model=UserResponse)
async def sync_user_balance(
    wallet: str,
    db: AsyncSession = Depends(get_db),
    rpc: SolanaRpcClient = Depends(get_rpc_client),
):
    """Pull the on-chain SAMU balance and recompute voting power."""
    return await UserService(db).sync_balance(wallet, rpc)


@router.post(
    "/sync-all", response_model=BulkSyncResponse,
    dependencies=[Depends(require_admin)],
)
async def sync_all_balances(
    db: AsyncSession = Depends(get_db),
    rpc: SolanaRpcClient = Depends(get_rpc_client),
    settings: Settings = Depends(get_settings),
):
    """Re-sync every known wallet's SAMU balance (admin)."""
    results = await UserService(db).sync_all(rpc, settings.bulk_sync_delay_seconds)
    return {"total_users": len(results), "results": results}
