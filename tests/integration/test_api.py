"""HTTP surface: public listing, bookmarks and the admin workspace endpoints."""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from sweepstakes_hub.core.config import Settings
from sweepstakes_hub.main import create_app
from sweepstakes_hub.schemas.competition import validate_form
from sweepstakes_hub.services.competition_service import CompetitionService


@pytest_asyncio.fixture
async def client(db, fake_auth):
    app = create_app(Settings(env="test", database_url="sqlite+aiosqlite://"), auth_provider=fake_auth)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_public_listing_with_filters(client, db, form_payload):
    service = CompetitionService(db)
    for title, prize in (("Cheap", "$100"), ("Mid", "$2,500"), ("Huge", "$10,000")):
        await service.create(validate_form(form_payload(title=title, prizeValue=prize)))

    r = await client.get("/api/v1/competitions")
    assert r.status_code == 200
    assert [c["title"] for c in r.json()] == ["Huge", "Mid", "Cheap"]
    assert "prizeValue" in r.json()[0]

    r = await client.get("/api/v1/competitions", params={"prize_min": 500, "prize_max": 5000, "status": "all"})
    assert [c["title"] for c in r.json()] == ["Mid"]

    r = await client.get("/api/v1/competitions", params={"search": "HUG"})
    assert [c["title"] for c in r.json()] == ["Huge"]


@pytest.mark.asyncio
async def test_detail_and_projections(client, db, form_payload):
    cid = (await CompetitionService(db).create(validate_form(form_payload()))).competition.id

    r = await client.get(f"/api/v1/competitions/{cid}")
    assert r.status_code == 200
    assert r.json()["id"] == cid

    r = await client.get(f"/api/v1/competitions/{cid}/eligibility")
    assert [e["criteria"] for e in r.json()] == ["Must be 18 or older", "One entry per person"]

    r = await client.get(f"/api/v1/competitions/{cid}/requirements")
    assert [e["requirement"] for e in r.json()] == ["Original work only", "No watermarks"]


@pytest.mark.asyncio
async def test_unknown_competition_is_404(client):
    r = await client.get("/api/v1/competitions/missing")
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_invalid_filter_is_422(client):
    r = await client.get("/api/v1/competitions", params={"prize_min": 5000, "prize_max": 10})
    assert r.status_code == 422
    assert r.json()["error"] == "validation_failed"


@pytest.mark.asyncio
async def test_bookmarks_require_a_session(client, db, fake_auth, form_payload):
    cid = (await CompetitionService(db).create(validate_form(form_payload()))).competition.id
    assert (await client.get("/api/v1/saved")).status_code == 401

    user = fake_auth.add_user("fan@example.com")
    headers = _bearer(fake_auth.issue_token(user))
    r = await client.post(f"/api/v1/saved/{cid}", headers=headers)
    assert r.json() == {"competition_id": cid, "saved": True, "created": True}
    r = await client.get("/api/v1/saved", headers=headers)
    assert [c["id"] for c in r.json()] == [cid]
    r = await client.delete(f"/api/v1/saved/{cid}", headers=headers)
    assert r.json()["removed"] is True


@pytest.mark.asyncio
async def test_non_admin_login_is_forbidden(client, fake_auth):
    fake_auth.add_user("fan@example.com")
    r = await client.post("/api/v1/admin/login", json={"email": "fan@example.com", "password": "secret123"})
    assert r.status_code == 403
    assert r.json()["error"] == "authorization_denied"


@pytest.mark.asyncio
async def test_bad_credentials_are_401(client, fake_auth):
    fake_auth.add_user("admin@example.com")
    r = await client.post("/api/v1/admin/login", json={"email": "admin@example.com", "password": "wrong"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_signup_then_login_reaches_workspace(client):
    r = await client.post(
        "/api/v1/admin/signup",
        json={"email": "owner@example.com", "password": "secret123", "confirmPassword": "secret123"},
    )
    assert r.status_code == 201
    assert r.json()["status"] == "created"
    assert r.json()["needsRemediation"] is False

    r = await client.post("/api/v1/admin/login", json={"email": "owner@example.com", "password": "secret123"})
    assert r.status_code == 200
    assert r.json()["state"] == "authenticated_admin"

    r = await client.get("/api/v1/admin/workspace", headers=_bearer(r.json()["access_token"]))
    assert r.status_code == 200
    assert r.json()["competitions"] == []


@pytest.mark.asyncio
async def test_signup_password_mismatch_is_422(client):
    r = await client.post(
        "/api/v1/admin/signup",
        json={"email": "owner@example.com", "password": "secret123", "confirmPassword": "different"},
    )
    assert r.status_code == 422
    assert "confirm_password" in r.json()["fields"]


@pytest.mark.asyncio
async def test_workspace_save_filter_and_select(client, make_admin, form_payload):
    _, token = await make_admin()
    headers = _bearer(token)

    r = await client.post("/api/v1/admin/workspace/new", headers=headers)
    assert r.json()["creatingNew"] is True

    r = await client.post("/api/v1/admin/workspace/save", json=form_payload(title="Alpha"), headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["created"] is True
    assert body["selectedId"] == body["competition"]["id"]
    assert all(effect["ok"] for effect in body["sideEffects"])

    await client.post("/api/v1/admin/workspace/new", headers=headers)
    r = await client.post("/api/v1/admin/workspace/save", json=form_payload(title="Beta", category="Food"),
                          headers=headers)
    beta_id = r.json()["competition"]["id"]
    assert [c["title"] for c in r.json()["competitions"]] == ["Beta", "Alpha"]

    r = await client.patch("/api/v1/admin/workspace/filters", json={"category": "Food"}, headers=headers)
    assert r.json()["superseded"] is False
    assert [c["id"] for c in r.json()["competitions"]] == [beta_id]
    assert r.json()["filters"]["category"] == "Food"

    r = await client.post("/api/v1/admin/workspace/select/missing", headers=headers)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_workspace_save_reports_field_errors(client, make_admin, form_payload):
    _, token = await make_admin()
    r = await client.post(
        "/api/v1/admin/workspace/save", json=form_payload(imageUrl="nope"), headers=_bearer(token)
    )
    assert r.status_code == 422
    assert r.json()["fields"] == {"imageUrl": "Must be a valid URL"}


@pytest.mark.asyncio
async def test_workspace_requires_admin(client, fake_auth):
    user = fake_auth.add_user("fan@example.com")
    r = await client.get("/api/v1/admin/workspace", headers=_bearer(fake_auth.issue_token(user)))
    assert r.status_code == 403
    assert (await client.get("/api/v1/admin/workspace")).status_code == 401


@pytest.mark.asyncio
async def test_logout_revokes_token(client, fake_auth, make_admin):
    _, token = await make_admin()
    assert (await client.get("/api/v1/admin/workspace", headers=_bearer(token))).status_code == 200
    r = await client.post("/api/v1/admin/logout", headers=_bearer(token))
    assert r.json() == {"signed_out": True}
    assert not fake_auth.is_live(token)
    assert (await client.get("/api/v1/admin/workspace", headers=_bearer(token))).status_code == 401
