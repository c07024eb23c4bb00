"""Goods Routes — merch catalog, admin product management, shipping and orders.

Invariants:
    - Static paths (/printful/variants, /orders/{wallet}, /admin/...) are declared before
      /{goods_id} so they never match as an id
    - Admin routes depend on require_admin
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from samu.api.dependencies import get_platform_wallet, get_printful_client, require_admin
from samu.config import Settings, get_settings
from samu.infrastructure.database import get_db
from samu.infrastructure.printful_client import PrintfulClient
from samu.schemas.goods import (
    DistributionResponse, EscrowResponse, GoodsCreate, GoodsResponse, OrderCreate,
    OrderResponse, ShippingEstimateRequest,
)
from samu.services.escrow_service import EscrowService
from samu.services.goods_service import GoodsService

router = APIRouter(prefix="/api/goods", tags=["goods"])


def get_goods_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    printful: PrintfulClient | None = Depends(get_printful_client),
) -> GoodsService:
    return GoodsService(db, settings, printful)


@router.get("", response_model=list[GoodsResponse])
async def list_goods(service: GoodsService = Depends(get_goods_service)):
    return await service.list_active()


@router.get("/printful/variants")
async def printful_variants(service: GoodsService = Depends(get_goods_service)):
    return await service.variants()


@router.get("/orders/{wallet}", response_model=list[OrderResponse])
async def wallet_orders(wallet: str, service: GoodsService = Depends(get_goods_service)):
    return await service.orders_of(wallet)


# ─── Admin ──────────────────────────────────────────────────────

@router.post(
    "/admin/create-simple", response_model=GoodsResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_simple_goods(
    body: GoodsCreate,
    service: GoodsService = Depends(get_goods_service),
    _admin: str = Depends(require_admin),
):
    return await service.create_simple(body)


@router.post("/admin/create", status_code=status.HTTP_201_CREATED)
async def create_printful_goods(
    body: GoodsCreate,
    service: GoodsService = Depends(get_goods_service),
    _admin: str = Depends(require_admin),
):
    """Create a Printful sync product over every valid colour/size pair."""
    goods, sync_product = await service.create_with_printful(body)
    return {
        "goods": GoodsResponse.model_validate(goods),
        "printful_product": sync_product,
    }


@router.post("/admin/generate-mockup/{goods_id}", response_model=GoodsResponse)
async def generate_goods_mockup(
    goods_id: int,
    service: GoodsService = Depends(get_goods_service),
    _admin: str = Depends(require_admin),
):
    return await service.generate_mockup(goods_id)


@router.post(
    "/admin/orders/{order_id}/release-escrow", response_model=DistributionResponse,
)
async def release_order_escrow(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    platform_wallet: str = Depends(get_platform_wallet),
    _admin: str = Depends(require_admin),
):
    return await EscrowService(db).release(order_id, platform_wallet=platform_wallet)


# ─── Public per-goods ───────────────────────────────────────────

@router.get("/{goods_id}", response_model=GoodsResponse)
async def get_goods(goods_id: int, service: GoodsService = Depends(get_goods_service)):
    return await service.get(goods_id)


@router.post("/{goods_id}/estimate-shipping")
async def estimate_shipping(
    goods_id: int,
    body: ShippingEstimateRequest,
    service: GoodsService = Depends(get_goods_service),
):
    return {"shipping_rates": await service.estimate_shipping(goods_id, body)}


@router.post("/{goods_id}/order", status_code=status.HTTP_201_CREATED)
async def place_order(
    goods_id: int,
    body: OrderCreate,
    service: GoodsService = Depends(get_goods_service),
):
    order, escrow = await service.place_order(goods_id, body)
    return {
        "order": OrderResponse.model_validate(order),
        "escrow": EscrowResponse.model_validate(escrow) if escrow else None,
    }
