"""Partner Contest Routes — partner registry, partner memes and partner votes.

Invariants:
    - Unknown partner ids are a 404 on every route
    - A repeated vote by the same wallet on the same meme is a 400 ALREADY_VOTED
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from samu.core.partners import active_partners
from samu.infrastructure.database import get_db
from samu.schemas.meme import MemeCreate
from samu.schemas.partner import (
    PartnerMemeResponse, PartnerResponse, PartnerVoteCreate, PartnerVoteResponse,
)
from samu.services.partner_service import PartnerService, require_partner

router = APIRouter(prefix="/api/partners", tags=["partners"])


@router.get("", response_model=list[PartnerResponse])
async def list_partners():
    return [p.to_dict() for p in active_partners()]


@router.get("/{partner_id}", response_model=PartnerResponse)
async def get_partner(partner_id: str):
    return require_partner(partner_id).to_dict()


@router.get("/{partner_id}/memes", response_model=list[PartnerMemeResponse])
async def list_partner_memes(partner_id: str, db: AsyncSession = Depends(get_db)):
    return await PartnerService(db, partner_id).list_memes()


@router.post(
    "/{partner_id}/memes", response_model=PartnerMemeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_partner_meme(
    partner_id: str, body: MemeCreate, db: AsyncSession = Depends(get_db),
):
    return await PartnerService(db, partner_id).create_meme(body)


@router.post(
    "/{partner_id}/memes/{meme_id}/vote", response_model=PartnerVoteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def vote_on_partner_meme(
    partner_id: str, meme_id: int, body: PartnerVoteCreate,
    db: AsyncSession = Depends(get_db),
):
    return await PartnerService(db, partner_id).cast_vote(meme_id, body)


@router.get("/{partner_id}/memes/{meme_id}/vote-status/{wallet}")
async def partner_vote_status(
    partner_id: str, meme_id: int, wallet: str, db: AsyncSession = Depends(get_db),
):
    return {"has_voted": await PartnerService(db, partner_id).has_voted(meme_id, wallet)}
