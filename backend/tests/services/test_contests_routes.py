"""Contest Routes & Scheduler — admin lifecycle, archive snapshot and automatic transitions.

Invariants:
    - Admin routes return 403 without an allow-listed X-Admin-Email
    - Only one contest is active at a time (409)
    - Ending archives the contest's memes plus unassigned current memes,
      re-tagging their votes with the contest
    - Scheduler ticks end overdue contests before starting due ones
"""

from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from samu.models.contest import ArchivedContest, Contest
from samu.models.vote import Vote
from samu.scheduler import ContestScheduler

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


async def test_admin_routes_require_admin(client):
    res = await client.post("/api/admin/contests", json={"title": "x"})
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "ADMIN_REQUIRED"

    res = await client.get(
        "/api/admin/status", headers={"X-Admin-Email": "random@example.com"},
    )
    assert res.status_code == 403


async def test_admin_status_case_insensitive(client):
    res = await client.get("/api/admin/status", headers={"X-Admin-Email": "Admin@SAMU.test"})
    assert res.json() == {"is_admin": True, "email": "admin@samu.test"}


async def test_create_contest_as_draft(client, admin_headers):
    res = await client.post("/api/admin/contests", headers=admin_headers, json={
        "title": "Spring Meme War",
        "start_time": "2026-05-01T00:00:00Z",
        "end_time": "2026-05-08T00:00:00Z",
    })

    assert res.status_code == 201
    contest = res.json()
    assert contest["status"] == "draft"
    assert contest["created_by"] == "admin@samu.test"


async def test_create_contest_rejects_inverted_window(client, admin_headers):
    res = await client.post("/api/admin/contests", headers=admin_headers, json={
        "title": "Backwards",
        "start_time": "2026-05-08T00:00:00Z",
        "end_time": "2026-05-01T00:00:00Z",
    })
    assert res.status_code == 400


async def test_start_contest_and_single_active_rule(client, admin_headers, make_contest):
    first = await make_contest(status="draft")
    second = await make_contest(status="draft")

    started = await client.post(
        f"/api/admin/contests/{first.id}/start", headers=admin_headers,
    )
    blocked = await client.post(
        f"/api/admin/contests/{second.id}/start", headers=admin_headers,
    )
    again = await client.post(
        f"/api/admin/contests/{first.id}/start", headers=admin_headers,
    )

    assert started.status_code == 200
    assert started.json()["status"] == "active"
    assert started.json()["start_time"] is not None
    assert blocked.status_code == 409
    assert again.status_code == 400

    current = await client.get("/api/contests/current")
    assert current.json()["id"] == first.id


async def test_current_is_null_without_active_contest(client):
    res = await client.get("/api/contests/current")
    assert res.status_code == 200
    assert res.json() is None


async def test_end_contest_archives_memes_and_picks_winner(
    client, admin_headers, make_contest, make_meme, make_vote, test_db,
):
    contest = await make_contest(status="active")
    loser = await make_meme(contest_id=contest.id)
    winner = await make_meme(contest_id=contest.id)
    stray = await make_meme()
    await make_vote(loser, "V1", 10)
    await make_vote(winner, "V2", 30)
    await make_vote(stray, "V3", 5)

    res = await client.post(
        f"/api/admin/contests/{contest.id}/end", headers=admin_headers,
    )

    assert res.status_code == 200
    archive = res.json()
    assert archive["winner_meme_id"] == winner.id
    assert archive["total_memes"] == 3
    assert archive["total_votes"] == 45

    detail = (await client.get(f"/api/contests/archived/{archive['id']}")).json()
    assert detail["contest"]["original_contest_id"] == contest.id
    assert [m["id"] for m in detail["memes"]] == [winner.id, loser.id, stray.id]
    assert all(m["is_archived"] for m in detail["memes"])

    test_db.expire_all()
    stray_vote = (await test_db.execute(
        select(Vote).where(Vote.meme_id == stray.id),
    )).scalar_one()
    assert stray_vote.contest_id == contest.id

    feed = (await client.get("/api/memes")).json()
    assert feed["memes"] == []


async def test_end_requires_active_contest(client, admin_headers, make_contest):
    contest = await make_contest(status="draft")
    res = await client.post(
        f"/api/admin/contests/{contest.id}/end", headers=admin_headers,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_CONTEST_TRANSITION"


async def test_public_lists(client, make_contest, admin_headers):
    contest = await make_contest(status="active")
    await client.post(f"/api/admin/contests/{contest.id}/end", headers=admin_headers)

    contests = (await client.get("/api/contests")).json()
    archived = (await client.get("/api/contests/archived")).json()

    assert [c["status"] for c in contests] == ["ended"]
    assert len(archived) == 1
    assert (await client.get("/api/contests/archived/999")).status_code == 404


# ─── Scheduler ──────────────────────────────────────────────────

async def test_scheduler_tick_applies_due_transitions(
    test_session_factory, make_contest, make_meme, test_db,
):
    overdue = await make_contest(
        status="active", start_time=NOW - timedelta(days=7), end_time=NOW - timedelta(minutes=1),
    )
    due = await make_contest(
        status="draft", start_time=NOW - timedelta(minutes=1), end_time=NOW + timedelta(days=7),
    )
    future = await make_contest(status="draft", start_time=NOW + timedelta(days=1))
    await make_meme(contest_id=overdue.id, votes=3)

    scheduler = ContestScheduler(session_factory=test_session_factory)
    result = await scheduler.tick(NOW)

    assert result.to_end == [overdue.id]
    assert result.to_start == [due.id]
    test_db.expire_all()
    statuses = {
        c.id: c.status for c in (await test_db.execute(select(Contest))).scalars().all()
    }
    assert statuses == {overdue.id: "ended", due.id: "active", future.id: "draft"}
    archive = (await test_db.execute(select(ArchivedContest))).scalar_one()
    assert archive.original_contest_id == overdue.id


async def test_scheduler_tick_survives_blocked_start(test_session_factory, make_contest, test_db):
    active = await make_contest(status="active")
    blocked = await make_contest(status="draft", start_time=NOW - timedelta(hours=1))

    due = await ContestScheduler(session_factory=test_session_factory).tick(NOW)

    assert due.to_start == [blocked.id]
    test_db.expire_all()
    assert (await test_db.get(Contest, blocked.id)).status == "draft"
    assert (await test_db.get(Contest, active.id)).status == "active"


async def test_scheduler_start_stop(test_session_factory):
    scheduler = ContestScheduler(interval_seconds=3600, session_factory=test_session_factory)
    scheduler.start()
    assert scheduler.running
    await scheduler.stop()
    assert not scheduler.running
