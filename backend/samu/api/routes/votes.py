"""Vote Routes — SAMU votes on memes and per-wallet vote status."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from samu.api.dependencies import get_rpc_client
from samu.config import Settings, get_settings
from samu.infrastructure.database import get_db
from samu.infrastructure.solana_rpc import SolanaRpcClient
from samu.schemas.meme import MemeResponse, VoteCreate, VoteResponse
from samu.services.vote_service import VoteService

router = APIRouter(prefix="/api/memes", tags=["votes"])


@router.post("/{meme_id}/vote")
async def vote_on_meme(
    meme_id: int,
    body: VoteCreate,
    db: AsyncSession = Depends(get_db),
    rpc: SolanaRpcClient = Depends(get_rpc_client),
    settings: Settings = Depends(get_settings),
):
    vote, meme = await VoteService(db).cast_vote(
        meme_id, body, rpc=rpc, settings=settings,
    )
    return {
        "vote": VoteResponse.model_validate(vote),
        "meme": MemeResponse.model_validate(meme),
    }


@router.get("/{meme_id}/voted/{wallet}")
async def has_voted(meme_id: int, wallet: str, db: AsyncSession = Depends(get_db)):
    return {"has_voted": await VoteService(db).has_voted(meme_id, wallet)}
