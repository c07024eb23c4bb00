"""Escrow Release & Reward Routes — goods profit split, voter pool claims, dashboard and map.

Invariants:
    - Released profit splits 45/40/15 (creator / voter pool / platform)
    - Missing creator or missing voters route that part to the platform
    - Voter pool weight is frozen at pool creation; later votes earn nothing from it
    - A claim pays the accrued amount once; a repeated claim finds nothing
"""

import pytest

from samu.models.escrow import Escrow

PLATFORM = "Treasury111111111111111111111111111111111"


@pytest.fixture
async def voted_goods(make_contest, make_meme, make_vote, make_goods):
    """Active contest: Creator's meme with V1=30 and V2=10 SAMU, plus tee goods for it."""
    contest = await make_contest(status="active")
    meme = await make_meme(author_wallet="Creator", contest_id=contest.id)
    await make_vote(meme, "V1", 30)
    await make_vote(meme, "V2", 10)
    goods = await make_goods(meme_id=meme.id, contest_id=contest.id)
    return contest, meme, goods


async def _release(client, admin_headers, order_id):
    return await client.post(
        f"/api/goods/admin/orders/{order_id}/release-escrow", headers=admin_headers,
    )


async def test_release_splits_profit(client, admin_headers, voted_goods, make_paid_order):
    contest, _, goods = voted_goods
    order = (await make_paid_order(goods.id, sol_amount=1.0))["order"]

    res = await _release(client, admin_headers, order["id"])

    assert res.status_code == 200
    dist = res.json()
    assert dist["total_lamports"] == 400_000_000
    assert dist["creator_wallet"] == "Creator"
    assert dist["creator_lamports"] == 180_000_000
    assert dist["voter_pool_lamports"] == 160_000_000
    assert dist["platform_lamports"] == 60_000_000
    assert dist["platform_wallet"] == PLATFORM
    assert dist["contest_id"] == contest.id


async def test_release_twice_rejected(client, admin_headers, voted_goods, make_paid_order):
    _, _, goods = voted_goods
    order = (await make_paid_order(goods.id))["order"]

    await _release(client, admin_headers, order["id"])
    again = await _release(client, admin_headers, order["id"])

    assert again.status_code == 400
    assert again.json()["error"]["code"] == "ESCROW_SETTLED"


async def test_release_without_escrow_404(client, admin_headers, make_goods, order_payload):
    goods = await make_goods()
    order = (await client.post(f"/api/goods/{goods.id}/order", json=order_payload())).json()
    res = await _release(client, admin_headers, order["order"]["id"])
    assert res.status_code == 404


async def test_release_requires_admin(client):
    assert (await client.post("/api/goods/admin/orders/1/release-escrow")).status_code == 403


async def test_unclaimable_parts_go_to_platform(
    client, admin_headers, make_contest, make_goods, make_paid_order,
):
    contest = await make_contest(status="active")
    goods = await make_goods(contest_id=contest.id)
    order = (await make_paid_order(goods.id))["order"]

    dist = (await _release(client, admin_headers, order["id"])).json()

    assert dist["creator_wallet"] is None
    assert dist["creator_lamports"] == 0
    assert dist["voter_pool_lamports"] == 0
    assert dist["platform_lamports"] == 400_000_000

    pool = (await client.get(f"/api/rewards/voter-pool/{contest.id}")).json()
    assert pool == {"pool": None, "voters": []}


async def test_voter_pool_and_claims(client, admin_headers, voted_goods, make_paid_order):
    contest, _, goods = voted_goods
    order = (await make_paid_order(goods.id))["order"]
    await _release(client, admin_headers, order["id"])

    pool = (await client.get(f"/api/rewards/voter-pool/{contest.id}")).json()
    assert pool["pool"]["total_weight"] == 40
    assert pool["pool"]["total_deposited_lamports"] == 160_000_000
    assert [(v["wallet"], v["share_percent"]) for v in pool["voters"]] == [
        ("V1", 75.0), ("V2", 25.0),
    ]

    pending = (await client.get(f"/api/rewards/claimable/{contest.id}/V1")).json()
    assert pending["weight"] == 30
    assert pending["pending_lamports"] == 120_000_000
    assert pending["pending_sol"] == 0.12

    claim = await client.post(f"/api/rewards/claim/{contest.id}", json={"wallet_address": "V1"})
    assert claim.status_code == 200
    assert claim.json()["claimed_lamports"] == 120_000_000

    again = await client.post(f"/api/rewards/claim/{contest.id}", json={"wallet_address": "V1"})
    assert again.status_code == 400
    assert again.json()["error"]["code"] == "NOTHING_TO_CLAIM"

    after = (await client.get(f"/api/rewards/claimable/{contest.id}/V1")).json()
    assert after["pending_lamports"] == 0
    assert after["total_claimed_lamports"] == 120_000_000


async def test_claims_accumulate_across_sales(
    client, admin_headers, voted_goods, make_paid_order,
):
    contest, _, goods = voted_goods
    first = (await make_paid_order(goods.id))["order"]
    await _release(client, admin_headers, first["id"])
    await client.post(f"/api/rewards/claim/{contest.id}", json={"wallet_address": "V2"})

    second = (await make_paid_order(goods.id))["order"]
    await _release(client, admin_headers, second["id"])
    res = await client.post(f"/api/rewards/claim/{contest.id}", json={"wallet_address": "V2"})

    assert res.json()["claimed_lamports"] == 40_000_000
    assert res.json()["total_claimed_lamports"] == 80_000_000

    claims = (await client.get("/api/rewards/my-claims/V2")).json()["claims"]
    assert len(claims) == 1
    assert claims[0]["total_claimed_lamports"] == 80_000_000
    assert claims[0]["pending_lamports"] == 0


async def test_votes_after_pool_creation_do_not_earn(
    client, admin_headers, voted_goods, make_vote, make_paid_order,
):
    contest, meme, goods = voted_goods
    order = (await make_paid_order(goods.id))["order"]
    await _release(client, admin_headers, order["id"])

    await make_vote(meme, "LateVoter", 1_000)
    res = await client.post(
        f"/api/rewards/claim/{contest.id}", json={"wallet_address": "LateVoter"},
    )

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "NOT_A_VOTER"


async def test_claim_without_pool(client, make_contest):
    contest = await make_contest()
    res = await client.post(f"/api/rewards/claim/{contest.id}", json={"wallet_address": "V1"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "NOTHING_TO_CLAIM"


# ─── Dashboard & map ────────────────────────────────────────────

async def test_dashboard_totals(
    client, admin_headers, voted_goods, make_paid_order, set_printful_order_id,
):
    _, _, goods = voted_goods
    order = (await make_paid_order(goods.id))["order"]
    await set_printful_order_id(order["id"], 4242)
    await client.post("/api/webhooks/printful", json={
        "type": "package_delivered", "data": {"order": {"id": 4242}},
    })

    dash = (await client.get("/api/rewards/dashboard")).json()

    assert dash["summary"] == {
        "total_sales_lamports": 1_000_000_000,
        "total_orders": 1,
        "total_distributed_lamports": 400_000_000,
    }
    shares = dash["share_breakdown"]
    assert shares["creator"]["percent"] == 45.0
    assert shares["creator"]["wallets"] == ["Creator"]
    assert shares["voter"]["total_lamports"] == 160_000_000
    assert shares["platform"]["wallet"] == PLATFORM
    assert dash["share_ratios"] == {"creator": 0.45, "voter": 0.4, "platform": 0.15}
    assert len(dash["recent_distributions"]) == 1


async def test_order_map_flags_revenue(client, admin_headers, voted_goods, make_paid_order):
    _, _, goods = voted_goods
    released = (await make_paid_order(goods.id))["order"]
    await make_paid_order(goods.id, shipping_country="jp", shipping_city="Tokyo")
    await _release(client, admin_headers, released["id"])

    as_voter = (await client.get("/api/rewards/map", params={"wallet": "V1"})).json()
    anonymous = (await client.get("/api/rewards/map")).json()

    flags = {o["id"]: o["has_revenue"] for o in as_voter["orders"]}
    assert flags[released["id"]] is True
    assert sum(flags.values()) == 1
    assert not any(o["has_revenue"] for o in anonymous["orders"])
    assert anonymous["stats"]["total"] == 2
    assert anonymous["stats"]["countries"] == 2
    entry = next(o for o in anonymous["orders"] if o["id"] == released["id"])
    assert entry["goods_title"] == "SAMU Tee"
    assert entry["distribution"]["voter_pool_lamports"] == 160_000_000


async def test_escrow_row_marked_released(
    client, admin_headers, voted_goods, make_paid_order, test_db,
):
    _, _, goods = voted_goods
    placed = await make_paid_order(goods.id)
    await _release(client, admin_headers, placed["order"]["id"])

    test_db.expire_all()
    escrow = await test_db.get(Escrow, placed["escrow"]["id"])
    assert escrow.status == "released"
    assert escrow.settled_at is not None
