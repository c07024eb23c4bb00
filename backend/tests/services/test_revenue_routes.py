"""Revenue Routes — admin contest revenue and the 30/30/25/15 share split."""

import pytest

PLATFORM = "Treasury111111111111111111111111111111111"


@pytest.fixture
async def ended_contest(client, admin_headers, make_contest, make_meme, make_vote):
    """Ended contest won by Creator's meme; V1 voted 30 SAMU, V2 voted 10."""
    contest = await make_contest(status="active")
    winner = await make_meme(author_wallet="Creator", contest_id=contest.id)
    runner_up = await make_meme(author_wallet="Other", contest_id=contest.id)
    await make_vote(winner, "V1", 30)
    await make_vote(runner_up, "V2", 10)
    await client.post(f"/api/admin/contests/{contest.id}/end", headers=admin_headers)
    return contest


async def _record(client, admin_headers, contest_id, sol=1.0):
    res = await client.post("/api/revenue", headers=admin_headers, json={
        "contest_id": contest_id, "source": "sponsorship", "total_amount_sol": sol,
    })
    assert res.status_code == 201, res.text
    return res.json()


async def test_record_revenue(client, admin_headers, make_contest):
    contest = await make_contest()

    revenue = await _record(client, admin_headers, contest.id, sol=2.5)

    assert revenue["total_lamports"] == 2_500_000_000
    assert revenue["status"] == "pending"
    assert revenue["distributed_at"] is None


async def test_record_revenue_requires_admin_and_contest(client, admin_headers):
    body = {"contest_id": 1, "source": "nft", "total_amount_sol": 1}
    assert (await client.post("/api/revenue", json=body)).status_code == 403
    missing = await client.post("/api/revenue", headers=admin_headers, json=body)
    assert missing.status_code == 404


async def test_distribute_splits_among_recipients(client, admin_headers, ended_contest):
    revenue = await _record(client, admin_headers, ended_contest.id)

    res = await client.post(
        f"/api/revenue/{revenue['id']}/distribute", headers=admin_headers,
        json={"nft_holder_wallet": "NftHolder"},
    )

    assert res.status_code == 200
    body = res.json()
    assert body["revenue"]["status"] == "distributed"
    assert body["total_distributed_sol"] == 1.0
    lines = {(s["role"], s["wallet_address"]): s["amount_lamports"] for s in body["shares"]}
    assert lines == {
        ("creator", "Creator"): 300_000_000,
        ("voter", "V1"): 225_000_000,
        ("voter", "V2"): 75_000_000,
        ("nft_holder", "NftHolder"): 250_000_000,
        ("platform", PLATFORM): 150_000_000,
    }
    assert sum(lines.values()) == 1_000_000_000


async def test_distribute_once(client, admin_headers, ended_contest):
    revenue = await _record(client, admin_headers, ended_contest.id)
    url = f"/api/revenue/{revenue['id']}/distribute"

    first = await client.post(url, headers=admin_headers)
    second = await client.post(url, headers=admin_headers)

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json()["error"]["code"] == "ALREADY_DISTRIBUTED"


async def test_distribute_without_votes_or_memes(client, admin_headers, make_contest):
    contest = await make_contest(status="ended")
    revenue = await _record(client, admin_headers, contest.id, sol=0.000000013)

    body = (await client.post(
        f"/api/revenue/{revenue['id']}/distribute", headers=admin_headers,
    )).json()

    lines = {s["role"]: (s["wallet_address"], s["amount_lamports"]) for s in body["shares"]}
    assert lines == {
        "nft_holder": ("unassigned_nft_holder", 3),
        "platform": (PLATFORM, 10),
    }


async def test_distribute_unknown_revenue_404(client, admin_headers):
    res = await client.post("/api/revenue/77/distribute", headers=admin_headers)
    assert res.status_code == 404


async def test_contest_revenue_summary(client, admin_headers, ended_contest):
    revenue = await _record(client, admin_headers, ended_contest.id)
    await client.post(f"/api/revenue/{revenue['id']}/distribute", headers=admin_headers)

    summary = (await client.get(f"/api/revenue/contest/{ended_contest.id}")).json()

    assert [r["id"] for r in summary["revenues"]] == [revenue["id"]]
    assert len(summary["shares"]) == 5
    assert summary["vote_summary"]["total_voters"] == 2
    assert summary["vote_summary"]["total_samu_voted"] == 40
    assert summary["share_config"] == {
        "creator": 0.3, "voter": 0.3, "nft_holder": 0.25, "platform": 0.15,
    }


async def test_my_share_and_wallet_history(client, admin_headers, ended_contest):
    revenue = await _record(client, admin_headers, ended_contest.id)
    await client.post(f"/api/revenue/{revenue['id']}/distribute", headers=admin_headers)

    mine = (await client.get(
        f"/api/revenue/contest/{ended_contest.id}/my-share/V1",
    )).json()
    creator = (await client.get(
        f"/api/revenue/contest/{ended_contest.id}/my-share/Creator",
    )).json()
    history = (await client.get("/api/revenue/wallet/V1")).json()

    assert mine["voting"] == {
        "samu_voted": 30, "vote_percent": 75.0, "total_contest_samu": 40,
    }
    assert mine["is_creator"] is False
    assert mine["total_earned_lamports"] == 225_000_000
    assert creator["is_creator"] is True
    assert history["total_earned_lamports"] == 225_000_000
    assert [s["role"] for s in history["shares"]] == ["voter"]
