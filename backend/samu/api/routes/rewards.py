"""Reward Routes — goods revenue dashboard, voter pools, claims and the order map."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from samu.api.dependencies import get_platform_wallet
from samu.infrastructure.database import get_db
from samu.schemas.goods import DistributionResponse
from samu.schemas.revenue import ClaimRequest, VoterPoolResponse
from samu.services.reward_service import RewardService

router = APIRouter(prefix="/api/rewards", tags=["rewards"])


@router.get("/dashboard")
async def rewards_dashboard(
    db: AsyncSession = Depends(get_db),
    platform_wallet: str = Depends(get_platform_wallet),
):
    dashboard = await RewardService(db).dashboard(platform_wallet)
    dashboard["recent_distributions"] = [
        DistributionResponse.model_validate(d)
        for d in dashboard["recent_distributions"]
    ]
    return dashboard


@router.get("/voter-pool/{contest_id}")
async def voter_pool(contest_id: int, db: AsyncSession = Depends(get_db)):
    view = await RewardService(db).pool_view(contest_id)
    pool = view["pool"]
    return {
        "pool": VoterPoolResponse.model_validate(pool) if pool else None,
        "voters": view["voters"],
    }


@router.get("/claimable/{contest_id}/{wallet}")
async def claimable_reward(
    contest_id: int, wallet: str, db: AsyncSession = Depends(get_db),
):
    return await RewardService(db).claimable(contest_id, wallet)


@router.post("/claim/{contest_id}")
async def claim_reward(
    contest_id: int, body: ClaimRequest, db: AsyncSession = Depends(get_db),
):
    return await RewardService(db).claim(contest_id, body.wallet_address)


@router.get("/my-claims/{wallet}")
async def my_claims(wallet: str, db: AsyncSession = Depends(get_db)):
    return {"claims": await RewardService(db).claims_of(wallet)}


@router.get("/map")
async def order_map(
    wallet: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Orders with shipping geography; `wallet` flags orders it earned from."""
    return await RewardService(db).order_map(wallet)
