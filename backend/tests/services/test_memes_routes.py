"""Meme Routes — feed listing, submission, lookup and author-only deletion.

Invariants:
    - Default feed = non-archived memes sorted by votes desc, never cached
    - contest_id filter returns every meme of that contest (archived included)
    - New memes join the active contest and pick up the author's profile name
    - Only the author can delete; votes go with the meme
"""

from sqlalchemy import select

from samu.models.meme import Meme
from samu.models.vote import Vote


async def test_feed_sorted_by_votes_without_cache(client, make_meme):
    await make_meme(title="low", votes=1)
    await make_meme(title="high", votes=50)
    await make_meme(title="old", votes=5, is_archived=True)

    res = await client.get("/api/memes")

    assert res.status_code == 200
    assert res.headers["cache-control"] == "no-cache, no-store, must-revalidate"
    body = res.json()
    assert [m["title"] for m in body["memes"]] == ["high", "low"]
    assert body["pagination"]["total"] == 2
    assert body["pagination"]["has_more"] is False


async def test_latest_feed_is_cached_and_newest_first(client, make_meme):
    await make_meme(title="first")
    await make_meme(title="second")

    res = await client.get("/api/memes", params={"sort_by": "latest"})

    assert res.headers["cache-control"] == "public, max-age=60"
    assert [m["title"] for m in res.json()["memes"]] == ["second", "first"]


async def test_pagination(client, make_meme):
    for i in range(5):
        await make_meme(title=f"m{i}", votes=10 - i)

    res = await client.get("/api/memes", params={"page": 2, "limit": 2})

    body = res.json()
    assert [m["title"] for m in body["memes"]] == ["m2", "m3"]
    assert body["pagination"] == {
        "page": 2, "limit": 2, "total": 5, "has_more": True, "total_pages": 3,
    }


async def test_contest_filter_includes_archived(client, make_contest, make_meme):
    contest = await make_contest(status="ended")
    await make_meme(title="in-contest", contest_id=contest.id, is_archived=True)
    await make_meme(title="elsewhere")

    res = await client.get("/api/memes", params={"contest_id": contest.id})

    assert [m["title"] for m in res.json()["memes"]] == ["in-contest"]


async def test_invalid_sort_is_400(client):
    res = await client.get("/api/memes", params={"sort_by": "random"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_all_memes_includes_archived(client, make_meme):
    await make_meme(title="live")
    await make_meme(title="archived", is_archived=True)

    res = await client.get("/api/memes/all")

    assert res.json()["total"] == 2


async def test_create_meme_joins_active_contest(client, make_contest, make_user):
    contest = await make_contest(status="active")
    await make_user("AuthorWallet1", username="doge_master", avatar_url="https://a/1.png")

    res = await client.post("/api/memes", json={
        "title": "  Much wow  ",
        "image_url": "/uploads/abc.png",
        "author_wallet": "AuthorWallet1",
        "author_username": "client-supplied",
    })

    assert res.status_code == 201
    meme = res.json()
    assert meme["title"] == "Much wow"
    assert meme["contest_id"] == contest.id
    assert meme["author_username"] == "doge_master"
    assert meme["author_avatar_url"] == "https://a/1.png"
    assert meme["votes"] == 0


async def test_create_meme_without_contest(client):
    res = await client.post("/api/memes", json={
        "title": "Solo",
        "image_url": "https://img/x.png",
        "author_wallet": "W1",
        "author_username": "w1",
    })
    assert res.status_code == 201
    assert res.json()["contest_id"] is None


async def test_create_meme_rejects_blank_title(client):
    res = await client.post("/api/memes", json={
        "title": "   ",
        "image_url": "https://img/x.png",
        "author_wallet": "W1",
        "author_username": "w1",
    })
    assert res.status_code == 400


async def test_get_meme_and_404(client, make_meme):
    meme = await make_meme()
    assert (await client.get(f"/api/memes/{meme.id}")).json()["id"] == meme.id
    res = await client.get("/api/memes/9999")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_delete_requires_author(client, make_meme):
    meme = await make_meme(author_wallet="Owner")

    res = await client.request(
        "DELETE", f"/api/memes/{meme.id}", json={"author_wallet": "Intruder"},
    )

    assert res.status_code == 403


async def test_delete_removes_meme_votes_and_local_file(
    client, make_meme, make_vote, storage, test_db,
):
    await storage.save("pic.png", b"png-bytes", "image/png")
    meme = await make_meme(author_wallet="Owner", image_url="/uploads/pic.png")
    await make_vote(meme, "Voter", 10)

    res = await client.request(
        "DELETE", f"/api/memes/{meme.id}", json={"author_wallet": "Owner"},
    )

    assert res.status_code == 200
    test_db.expire_all()
    assert (await test_db.execute(select(Meme).where(Meme.id == meme.id))).first() is None
    assert (await test_db.execute(select(Vote).where(Vote.meme_id == meme.id))).first() is None
    assert await storage.info("pic.png") is None


async def test_delete_with_foreign_image_url(client, make_meme):
    meme = await make_meme(author_wallet="Owner", image_url="https://cdn.other/x.png")
    res = await client.request(
        "DELETE", f"/api/memes/{meme.id}", json={"author_wallet": "Owner"},
    )
    assert res.status_code == 200
