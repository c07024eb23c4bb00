"""Revenue Routes — admin contest revenue recording/distribution and public share views."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from samu.api.dependencies import get_platform_wallet, require_admin
from samu.core.domain_types import lamports_to_sol
from samu.infrastructure.database import get_db
from samu.schemas.revenue import (
    RevenueCreate, RevenueDistribute, RevenueResponse, RevenueShareResponse,
)
from samu.services.revenue_service import RevenueService

router = APIRouter(prefix="/api/revenue", tags=["revenue"])


def _shares(shares) -> list[RevenueShareResponse]:
    return [RevenueShareResponse.model_validate(s) for s in shares]


@router.post("", response_model=RevenueResponse, status_code=status.HTTP_201_CREATED)
async def create_revenue(
    body: RevenueCreate,
    db: AsyncSession = Depends(get_db),
    _admin: str = Depends(require_admin),
):
    return await RevenueService(db).create(body)


@router.post("/{revenue_id}/distribute")
async def distribute_revenue(
    revenue_id: int,
    body: RevenueDistribute | None = None,
    db: AsyncSession = Depends(get_db),
    platform_wallet: str = Depends(get_platform_wallet),
    _admin: str = Depends(require_admin),
):
    revenue, shares = await RevenueService(db).distribute(
        revenue_id,
        nft_holder_wallet=body.nft_holder_wallet if body else None,
        platform_wallet=platform_wallet,
    )
    return {
        "revenue": RevenueResponse.model_validate(revenue),
        "shares": _shares(shares),
        "total_distributed_sol": lamports_to_sol(revenue.total_lamports),
    }


@router.get("/contest/{contest_id}")
async def contest_revenue(contest_id: int, db: AsyncSession = Depends(get_db)):
    summary = await RevenueService(db).contest_summary(contest_id)
    return {
        **summary,
        "revenues": [RevenueResponse.model_validate(r) for r in summary["revenues"]],
        "shares": _shares(summary["shares"]),
    }


@router.get("/contest/{contest_id}/my-share/{wallet}")
async def my_contest_share(
    contest_id: int, wallet: str, db: AsyncSession = Depends(get_db),
):
    share = await RevenueService(db).my_share(contest_id, wallet)
    return {**share, "revenue_shares": _shares(share["revenue_shares"])}


@router.get("/wallet/{wallet}")
async def wallet_revenue(wallet: str, db: AsyncSession = Depends(get_db)):
    result = await RevenueService(db).wallet_shares(wallet)
    return {**result, "shares": _shares(result["shares"])}
