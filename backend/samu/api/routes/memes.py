"""Meme Routes — feed listing, submission, lookup and author deletion.

Invariants:
    - Feed sorted by votes is never cached; the latest feed is cached for 60s
    - DELETE requires the author's wallet in the body (403 otherwise)
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from samu.api.dependencies import get_object_storage
from samu.core.domain_types import MemeSort
from samu.core.meme_listing import SHORT_CACHE, cache_control_for
from samu.infrastructure.database import get_db
from samu.infrastructure.object_storage import ObjectStorage
from samu.schemas.meme import MemeCreate, MemeDelete, MemeResponse
from samu.services.meme_service import MemeService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/memes", tags=["memes"])


@router.get("")
async def list_memes(
    response: Response,
    page: int = Query(1, ge=1),
    limit: int = Query(1000, ge=1, le=1000),
    sort_by: MemeSort = Query(MemeSort.VOTES),
    contest_id: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Current memes, or every meme of one contest when contest_id is given."""
    memes, pagination = await MemeService(db).list_memes(
        sort=sort_by, page=page, limit=limit, contest_id=contest_id,
    )
    response.headers["Cache-Control"] = cache_control_for(sort_by)
    return {
        "memes": [MemeResponse.model_validate(m) for m in memes],
        "pagination": pagination.to_dict(),
    }


@router.get("/all")
async def list_all_memes(response: Response, db: AsyncSession = Depends(get_db)):
    memes = await MemeService(db).list_all()
    response.headers["Cache-Control"] = SHORT_CACHE
    return {
        "memes": [MemeResponse.model_validate(m) for m in memes],
        "total": len(memes),
    }


@router.post("", response_model=MemeResponse, status_code=status.HTTP_201_CREATED)
async def create_meme(body: MemeCreate, db: AsyncSession = Depends(get_db)):
    return await MemeService(db).create(body)


@router.get("/{meme_id}", response_model=MemeResponse)
async def get_meme(meme_id: int, db: AsyncSession = Depends(get_db)):
    return await MemeService(db).get(meme_id)


@router.delete("/{meme_id}")
async def delete_meme(
    meme_id: int,
    body: MemeDelete,
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
):
    await MemeService(db).delete(meme_id, body.author_wallet, storage)
    return {"message": "Meme deleted successfully"}
