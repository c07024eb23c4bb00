"""Service test fixtures — async DB + FastAPI test client + fake integrations.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched for code that bypasses get_db (scheduler, readiness probe)
    - Solana RPC and object storage are always fakes; Printful is offline unless a
      test requests the `printful` fixture

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - Integrations replaced via app.dependency_overrides, never by patching modules
"""

import itertools
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

import samu.infrastructure.database as db_module
from samu.api.dependencies import (
    get_object_storage, get_printful_client, get_rpc_client,
)
from samu.core.errors import ExternalServiceError
from samu.db.base import Base
from samu.infrastructure.database import DatabaseSessionManager, get_db
from samu.infrastructure.object_storage import LocalObjectStorage
from samu.main import app
from samu.models.contest import Contest
from samu.models.goods import Goods
from samu.models.meme import Meme
from samu.models.order import Order
from samu.models.user import User
from samu.models.vote import Vote

ADMIN_HEADERS = {"X-Admin-Email": "admin@samu.test"}


def make_signature() -> str:
    """Unique base58 signature (hex digits with 0 swapped out)."""
    return uuid.uuid4().hex.replace("0", "z") * 2


class FakeRpc:
    """Stands in for SolanaRpcClient."""

    def __init__(self):
        self.samu_balances: dict[str, float] = {}
        self.sol_balances: dict[str, float] = {}
        self.transactions: dict[str, dict] = {}

    async def get_samu_balance(self, wallet: str) -> float:
        return self.samu_balances.get(wallet, 0.0)

    async def get_sol_balance(self, wallet: str) -> float:
        return self.sol_balances.get(wallet, 0.0)

    async def get_transaction(self, signature: str) -> dict | None:
        return self.transactions.get(signature)


class FakePrintful:
    """Stands in for PrintfulClient; records every payload it receives."""

    def __init__(self):
        self.calls: list[tuple[str, dict]] = []
        self.mockup_urls = ["https://mockups.test/front.jpg"]
        self.fail_orders = False
        self.next_order_id = 9001

    async def get_product(self, product_id: int) -> dict:
        self.calls.append(("get_product", {"product_id": product_id}))
        return {
            "product": {"title": "Live Tee"},
            "variants": [{"id": 1, "color": "Black", "size": "M"}],
        }

    async def create_sync_product(self, payload: dict) -> dict:
        self.calls.append(("create_sync_product", payload))
        return {
            "sync_product": {"id": 555, "name": payload["sync_product"]["name"]},
            "sync_variants": [{"id": 777}],
        }

    async def estimate_shipping(self, payload: dict) -> list:
        self.calls.append(("estimate_shipping", payload))
        return [{"id": "STANDARD", "name": "Standard", "rate": "3.99", "currency": "USD"}]

    async def create_order(self, payload: dict) -> dict:
        self.calls.append(("create_order", payload))
        if self.fail_orders:
            raise ExternalServiceError("printful", "out of stock")
        return {"id": self.next_order_id, "status": "draft"}

    async def generate_mockups(self, product_id, payload, *, attempts, interval_seconds):
        self.calls.append(("generate_mockups", payload))
        return list(self.mockup_urls)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def fake_rpc():
    return FakeRpc()


@pytest.fixture
def storage(tmp_path):
    return LocalObjectStorage(str(tmp_path / "uploads"))


@pytest.fixture
async def client(test_engine, test_session_factory, fake_rpc, storage):
    """FastAPI test client with DB and integrations overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rpc_client] = lambda: fake_rpc
    app.dependency_overrides[get_object_storage] = lambda: storage

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def printful(client):
    """Switch the app to online Printful mode backed by FakePrintful."""
    fake = FakePrintful()
    app.dependency_overrides[get_printful_client] = lambda: fake
    return fake


# ─── Seed factories ─────────────────────────────────────────────

@pytest.fixture
def make_contest(test_db):
    async def _make(status="active", title="SAMU Contest", **kwargs):
        contest = Contest(title=title, status=status, **kwargs)
        test_db.add(contest)
        await test_db.commit()
        await test_db.refresh(contest)
        return contest
    return _make


@pytest.fixture
def make_meme(test_db):
    created = itertools.count()

    async def _make(
        author_wallet="AuthorWallet1", contest_id=None, votes=0, is_archived=False,
        title="Meme", image_url="https://img.test/meme.png",
    ):
        meme = Meme(
            title=title,
            image_url=image_url,
            author_wallet=author_wallet,
            author_username=author_wallet[:8],
            contest_id=contest_id,
            votes=votes,
            is_archived=is_archived,
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc)
            + timedelta(minutes=next(created)),
        )
        test_db.add(meme)
        await test_db.commit()
        await test_db.refresh(meme)
        return meme
    return _make


@pytest.fixture
def make_vote(test_db):
    async def _make(meme, voter_wallet, samu_amount):
        vote = Vote(
            meme_id=meme.id,
            contest_id=meme.contest_id,
            voter_wallet=voter_wallet,
            samu_amount=samu_amount,
            tx_signature=make_signature(),
        )
        test_db.add(vote)
        meme.votes += samu_amount
        await test_db.commit()
        await test_db.refresh(vote)
        return vote
    return _make


@pytest.fixture
def make_user(test_db):
    async def _make(wallet, username=None, **kwargs):
        user = User(wallet_address=wallet, username=username or wallet[:8], **kwargs)
        test_db.add(user)
        await test_db.commit()
        await test_db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_goods(test_db):
    async def _make(meme_id=None, contest_id=None, retail_price=25.0, base_price=15.0,
                    printful_product_id=None, printful_variant_id=None):
        goods = Goods(
            title="SAMU Tee",
            image_url="https://img.test/design.png",
            mockup_urls=["https://img.test/design.png"],
            meme_id=meme_id,
            contest_id=contest_id,
            base_price=base_price,
            retail_price=retail_price,
            sizes=["S", "M", "L"],
            colors=["Black", "White"],
            printful_product_id=printful_product_id,
            printful_variant_id=printful_variant_id,
        )
        test_db.add(goods)
        await test_db.commit()
        await test_db.refresh(goods)
        return goods
    return _make


@pytest.fixture
def order_payload():
    def _payload(**overrides):
        body = {
            "size": "M",
            "color": "Black",
            "buyer_wallet": "BuyerWallet1",
            "buyer_email": "buyer@samu.test",
            "shipping_name": "Shiba Buyer",
            "shipping_address1": "1 Doge Street",
            "shipping_city": "Seoul",
            "shipping_country": "kr",
            "shipping_zip": "04524",
            "shipping_lat": 37.56,
            "shipping_lng": 126.97,
        }
        body.update(overrides)
        return body
    return _payload


@pytest.fixture
def make_paid_order(client, order_payload):
    """Place a SOL-paid order through the API; returns the response JSON."""
    async def _make(goods_id, sol_amount=1.0, **overrides):
        res = await client.post(
            f"/api/goods/{goods_id}/order",
            json=order_payload(
                sol_amount=sol_amount,
                payment_tx_signature=make_signature(),
                **overrides,
            ),
        )
        assert res.status_code == 201, res.text
        return res.json()
    return _make


@pytest.fixture
def set_printful_order_id(test_db):
    async def _set(order_id: int, printful_order_id: int):
        order = await test_db.get(Order, order_id)
        order.printful_order_id = printful_order_id
        await test_db.commit()
    return _set


@pytest.fixture
def new_signature():
    return make_signature


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)
