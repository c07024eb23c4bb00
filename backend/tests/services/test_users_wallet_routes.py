"""User and Wallet Routes — profiles, activity, stats, balance sync and balances."""


async def test_profile_created_on_first_read(client):
    res = await client.get("/api/users/profile/NewWallet123456")

    assert res.status_code == 200
    profile = res.json()
    assert profile["wallet_address"] == "NewWallet123456"
    assert profile["username"]
    assert profile["total_voting_power"] == 0

    again = await client.get("/api/users/profile/NewWallet123456")
    assert again.json()["id"] == profile["id"]


async def test_profile_partial_update(client, make_user):
    await make_user("W1", username="before", avatar_url="https://a/old.png")

    res = await client.put("/api/users/profile/W1", json={"username": "after"})

    assert res.status_code == 200
    assert res.json()["username"] == "after"
    assert res.json()["avatar_url"] == "https://a/old.png"


async def test_profile_update_unknown_wallet_404(client):
    res = await client.put("/api/users/profile/Ghost", json={"username": "x"})
    assert res.status_code == 404


async def test_profile_update_rejects_bad_email(client, make_user):
    await make_user("W1")
    res = await client.put("/api/users/profile/W1", json={"email": "not-an-email"})
    assert res.status_code == 400


async def test_user_memes_and_votes(client, make_meme, make_vote):
    mine = await make_meme(author_wallet="W1")
    other = await make_meme(author_wallet="W2")
    await make_vote(other, "W1", 7)

    memes = (await client.get("/api/users/W1/memes")).json()
    votes = (await client.get("/api/users/W1/votes")).json()

    assert [m["id"] for m in memes] == [mine.id]
    assert [v["samu_amount"] for v in votes] == [7]


async def test_user_stats(client, make_user, make_meme, make_vote):
    await make_user("W1", total_voting_power=13, samu_balance=1_000_000)
    meme = await make_meme(author_wallet="W1")
    other = await make_meme(author_wallet="W2")
    await make_vote(meme, "W2", 40)
    await make_vote(other, "W1", 5)
    await make_vote(other, "W1", 6)

    stats = (await client.get("/api/users/W1/stats")).json()

    assert stats["total_memes"] == 1
    assert stats["total_votes_received"] == 40
    assert stats["votes_cast"] == 2
    assert stats["samu_voted"] == 11
    assert stats["total_voting_power"] == 13
    assert stats["remaining_voting_power"] == 11


async def test_stats_unknown_wallet_404(client):
    assert (await client.get("/api/users/Nobody/stats")).status_code == 404


async def test_sync_updates_balance_and_voting_power(client, fake_rpc):
    fake_rpc.samu_balances["Whale"] = 3_200_000.0

    res = await client.post("/api/users/Whale/sync")

    assert res.status_code == 200
    assert res.json()["samu_balance"] == 3_200_000
    assert res.json()["total_voting_power"] == 33


async def test_sync_all_refreshes_every_profile(client, fake_rpc, make_user, admin_headers):
    await make_user("Whale", samu_balance=10, total_voting_power=3)
    await make_user("Shrimp", samu_balance=500, total_voting_power=3)
    fake_rpc.samu_balances["Whale"] = 2_000_000.0

    res = await client.post("/api/users/sync-all", headers=admin_headers)

    assert res.status_code == 200
    body = res.json()
    assert body["total_users"] == 2
    assert body["results"] == [
        {"wallet": "Whale", "username": "Whale", "old_balance": 10,
         "new_balance": 2_000_000, "voting_power": 23},
        {"wallet": "Shrimp", "username": "Shrimp", "old_balance": 500,
         "new_balance": 0, "voting_power": 3},
    ]
    profile = await client.get("/api/users/profile/Whale")
    assert profile.json()["total_voting_power"] == 23


async def test_sync_all_requires_admin(client):
    res = await client.post("/api/users/sync-all")
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "ADMIN_REQUIRED"


async def test_wallet_balances_short_cache(client, fake_rpc):
    fake_rpc.samu_balances["W1"] = 12.5
    fake_rpc.sol_balances["W1"] = 0.75

    samu = await client.get("/api/wallet/samu-balance/W1")
    sol = await client.get("/api/wallet/sol-balance/W1")

    assert samu.json() == {"wallet": "W1", "balance": 12.5}
    assert sol.json() == {"wallet": "W1", "balance": 0.75}
    assert samu.headers["cache-control"] == "public, max-age=5"


async def test_treasury_address(client):
    res = await client.get("/api/wallet/treasury")
    assert res.json() == {"treasury_wallet": "Treasury111111111111111111111111111111111"}


async def test_treasury_not_configured_500(client):
    from samu.config import Settings, get_settings
    from samu.main import app

    app.dependency_overrides[get_settings] = lambda: Settings(treasury_wallet_address="")
    res = await client.get("/api/wallet/treasury")
    assert res.status_code == 500
