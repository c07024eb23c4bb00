"""Contest Routes — admin lifecycle actions and public contest/archive views.

Invariants:
    - Every /api/admin route depends on require_admin (403 without an admin header)
    - GET /api/contests/current returns null when no contest is active
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from samu.api.dependencies import require_admin
from samu.infrastructure.database import get_db
from samu.schemas.contest import ArchivedContestResponse, ContestCreate, ContestResponse
from samu.schemas.meme import MemeResponse
from samu.services.contest_service import ContestService

admin_router = APIRouter(prefix="/api/admin", tags=["admin"])
router = APIRouter(prefix="/api/contests", tags=["contests"])


# ─── Admin ──────────────────────────────────────────────────────

@admin_router.get("/status")
async def admin_status(admin_email: str = Depends(require_admin)):
    return {"is_admin": True, "email": admin_email}


@admin_router.post(
    "/contests", response_model=ContestResponse, status_code=status.HTTP_201_CREATED,
)
async def create_contest(
    body: ContestCreate,
    db: AsyncSession = Depends(get_db),
    admin_email: str = Depends(require_admin),
):
    return await ContestService(db).create(body, created_by=admin_email)


@admin_router.post("/contests/{contest_id}/start", response_model=ContestResponse)
async def start_contest(
    contest_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: str = Depends(require_admin),
):
    return await ContestService(db).start(contest_id)


@admin_router.post("/contests/{contest_id}/end", response_model=ArchivedContestResponse)
async def end_contest(
    contest_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: str = Depends(require_admin),
):
    """End the contest, pick the winner and archive its memes."""
    return await ContestService(db).end_and_archive(contest_id)


# ─── Public ─────────────────────────────────────────────────────

@router.get("/current", response_model=ContestResponse | None)
async def current_contest(db: AsyncSession = Depends(get_db)):
    return await ContestService(db).current()


@router.get("", response_model=list[ContestResponse])
async def list_contests(db: AsyncSession = Depends(get_db)):
    return await ContestService(db).list_all()


@router.get("/archived", response_model=list[ArchivedContestResponse])
async def list_archived_contests(db: AsyncSession = Depends(get_db)):
    return await ContestService(db).list_archived()


@router.get("/archived/{archive_id}")
async def archived_contest_detail(archive_id: int, db: AsyncSession = Depends(get_db)):
    archive, memes = await ContestService(db).archived_detail(archive_id)
    return {
        "contest": ArchivedContestResponse.model_validate(archive),
        "memes": [MemeResponse.model_validate(m) for m in memes],
    }
