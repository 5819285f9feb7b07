"""
Admin session gate: membership check, first-login bootstrap, denial and sign-up outcomes.
"""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from sweepstakes_hub.errors import (
    AuthenticationFailed,
    AuthorizationDenied,
    ProvisioningFailed,
    RemoteUnavailable,
    ValidationFailed,
)
from sweepstakes_hub.repositories import AdminUserRepository, UserRepository
from sweepstakes_hub.services.admin_gate import AdminSessionGate, GateState, SignUpStatus


async def _membership(db, user_id):
    async with db.session() as session:
        return await AdminUserRepository(session).get_by_user_id(user_id)


@pytest.mark.asyncio
async def test_existing_member_is_admin(db, fake_auth, make_admin):
    user, _ = await make_admin()
    gate = AdminSessionGate(fake_auth, db)
    session = await gate.sign_in("admin@example.com", "secret123")
    assert gate.state is GateState.AUTHENTICATED_ADMIN
    assert gate.is_admin
    assert gate.require_admin().id == user.id
    assert fake_auth.is_live(session.access_token)


@pytest.mark.asyncio
async def test_role_marker_bootstraps_membership_on_first_login(db, fake_auth):
    user = fake_auth.add_user("new-admin@example.com", role="admin")
    gate = AdminSessionGate(fake_auth, db)
    await gate.sign_in("new-admin@example.com", "secret123")

    assert gate.state is GateState.AUTHENTICATED_ADMIN
    assert await _membership(db, user.id) is not None
    async with db.session() as session:
        assert (await UserRepository(session).get_by_id(user.id)).email == "new-admin@example.com"


@pytest.mark.asyncio
async def test_bootstrap_failure_signs_out_and_reports(db, fake_auth, monkeypatch):
    async def broken_grant(self, user_id, is_super_admin=False):
        raise OperationalError("INSERT INTO admin_users", {}, Exception("permission denied"))

    monkeypatch.setattr(AdminUserRepository, "grant", broken_grant)
    user = fake_auth.add_user("new-admin@example.com", role="admin")
    gate = AdminSessionGate(fake_auth, db)

    with pytest.raises(ProvisioningFailed):
        await gate.sign_in("new-admin@example.com", "secret123")
    assert gate.state is GateState.AUTH_FAILED
    assert gate.session is None
    assert len(fake_auth.signed_out) == 1
    assert await _membership(db, user.id) is None


@pytest.mark.asyncio
async def test_non_admin_is_denied_and_signed_out(db, fake_auth):
    fake_auth.add_user("fan@example.com")
    gate = AdminSessionGate(fake_auth, db)
    with pytest.raises(AuthorizationDenied) as exc_info:
        await gate.sign_in("fan@example.com", "secret123")
    assert "must be an admin" in exc_info.value.message
    assert gate.state is GateState.AUTHENTICATED_NON_ADMIN
    assert not gate.is_admin
    [token] = fake_auth.signed_out
    assert not fake_auth.is_live(token)
    with pytest.raises(AuthenticationFailed):
        gate.require_admin()


@pytest.mark.asyncio
async def test_denial_stands_even_if_provider_sign_out_fails(db, fake_auth):
    fake_auth.add_user("fan@example.com")
    fake_auth.fail_sign_out = True
    gate = AdminSessionGate(fake_auth, db)
    with pytest.raises(AuthorizationDenied):
        await gate.sign_in("fan@example.com", "secret123")
    assert gate.session is None


@pytest.mark.asyncio
async def test_bad_credentials(db, fake_auth):
    fake_auth.add_user("admin@example.com")
    gate = AdminSessionGate(fake_auth, db)
    with pytest.raises(AuthenticationFailed):
        await gate.sign_in("admin@example.com", "nope")
    assert gate.state is GateState.AUTH_FAILED


@pytest.mark.asyncio
async def test_provider_outage_is_remote_unavailable(db, fake_auth):
    fake_auth.unavailable = True
    gate = AdminSessionGate(fake_auth, db)
    with pytest.raises(RemoteUnavailable):
        await gate.sign_in("admin@example.com", "secret123")


@pytest.mark.asyncio
async def test_resume_with_unknown_token(db, fake_auth):
    gate = AdminSessionGate(fake_auth, db)
    with pytest.raises(AuthenticationFailed):
        await gate.resume("no-such-token")
    assert gate.state is GateState.UNAUTHENTICATED


@pytest.mark.asyncio
async def test_sign_out_clears_session(db, fake_auth, make_admin):
    _, token = await make_admin()
    gate = AdminSessionGate(fake_auth, db)
    await gate.resume(token)
    await gate.sign_out()
    assert gate.state is GateState.UNAUTHENTICATED
    assert not fake_auth.is_live(token)


@pytest.mark.asyncio
async def test_sign_up_provisions_admin(db, fake_auth):
    gate = AdminSessionGate(fake_auth, db)
    outcome = await gate.sign_up("owner@example.com", "secret123", "secret123")
    assert outcome.status is SignUpStatus.CREATED
    assert not outcome.needs_remediation
    assert await _membership(db, outcome.user_id) is not None


@pytest.mark.asyncio
async def test_sign_up_provisioning_failure_is_partial_success(db, fake_auth, monkeypatch):
    async def broken_ensure(self, user_id, email):
        raise OperationalError("INSERT INTO users", {}, Exception("database is locked"))

    monkeypatch.setattr(UserRepository, "ensure", broken_ensure)
    gate = AdminSessionGate(fake_auth, db)
    outcome = await gate.sign_up("owner@example.com", "secret123", "secret123")
    assert outcome.status is SignUpStatus.CREATED_UNPROVISIONED
    assert outcome.needs_remediation
    assert "contact support" in outcome.message


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email,password,confirm,field",
    [
        ("", "secret123", "secret123", "email"),
        ("owner@example.com", "short", "short", "password"),
        ("owner@example.com", "secret123", "secret124", "confirm_password"),
    ],
)
async def test_sign_up_validation(db, fake_auth, email, password, confirm, field):
    gate = AdminSessionGate(fake_auth, db)
    with pytest.raises(ValidationFailed) as exc_info:
        await gate.sign_up(email, password, confirm)
    assert field in exc_info.value.fields
