"""NFT Routes — collection catalog, admin additions and comment threads."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from samu.api.dependencies import require_admin
from samu.infrastructure.database import get_db
from samu.schemas.nft import CommentCreate, CommentResponse, NftCreate, NftResponse
from samu.services.nft_service import NftService

router = APIRouter(prefix="/api/nfts", tags=["nfts"])


@router.get("", response_model=list[NftResponse])
async def list_nfts(db: AsyncSession = Depends(get_db)):
    return await NftService(db).list_nfts()


@router.post(
    "", response_model=NftResponse, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_nft(body: NftCreate, db: AsyncSession = Depends(get_db)):
    return await NftService(db).create(body)


@router.get("/{nft_id}", response_model=NftResponse)
async def get_nft(nft_id: int, db: AsyncSession = Depends(get_db)):
    return await NftService(db).get(nft_id)


@router.get("/{nft_id}/comments", response_model=list[CommentResponse])
async def list_comments(nft_id: int, db: AsyncSession = Depends(get_db)):
    return await NftService(db).comments_of(nft_id)


@router.post(
    "/{nft_id}/comments", response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    nft_id: int, body: CommentCreate, db: AsyncSession = Depends(get_db),
):
    return await NftService(db).add_comment(nft_id, body)
