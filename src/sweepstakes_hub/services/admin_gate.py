"""
Admin session gate: decides whether the current session may reach admin operations.

A session is admin when either an ``admin_users`` row exists for the user, or the
account's signup metadata carries the admin role marker. In the latter case the
membership (and base user) rows are bootstrapped on first sign-in. Any session that
ends up not authorized, including a failed bootstrap, is signed out before the error
is reported.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from sweepstakes_hub.auth.provider import ADMIN_ROLE, AuthProvider, AuthSession, AuthUser
from sweepstakes_hub.core.database import DatabaseManager
from sweepstakes_hub.errors import (
    AuthenticationFailed,
    AuthorizationDenied,
    PortalError,
    ProvisioningFailed,
    RemoteUnavailable,
    ValidationFailed,
)
from sweepstakes_hub.repositories import AdminUserRepository, UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class GateState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED_ADMIN = "authenticated_admin"
    AUTHENTICATED_NON_ADMIN = "authenticated_non_admin"
    AUTH_FAILED = "auth_failed"


class SignUpStatus(str, Enum):
    CREATED = "created"
    # Account exists with the auth provider, but membership rows could not be written.
    CREATED_UNPROVISIONED = "created_unprovisioned"


@dataclass(frozen=True)
class SignUpOutcome:
    status: SignUpStatus
    user_id: str
    email: Optional[str]
    message: str

    @property
    def needs_remediation(self) -> bool:
        return self.status is SignUpStatus.CREATED_UNPROVISIONED


def validate_sign_up(email: str, password: str, confirm_password: str) -> None:
    fields = {}
    if not email or not email.strip():
        fields["email"] = "Email is required"
    if password != confirm_password:
        fields["confirm_password"] = "Passwords do not match"
    if len(password) < MIN_PASSWORD_LENGTH:
        fields["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    if fields:
        first = next(iter(fields.values()))
        raise ValidationFailed(first, fields=fields)


class AdminSessionGate:
    """Per-session admin access state machine."""

    def __init__(self, auth: AuthProvider, db: DatabaseManager) -> None:
        self._auth = auth
        self._db = db
        self.state = GateState.UNAUTHENTICATED
        self.session: Optional[AuthSession] = None

    @property
    def is_admin(self) -> bool:
        return self.state is GateState.AUTHENTICATED_ADMIN and self.session is not None

    @property
    def user(self) -> Optional[AuthUser]:
        return self.session.user if self.session is not None else None

    def require_admin(self) -> AuthUser:
        """Guard for mutating operations."""
        if self.session is None:
            raise AuthenticationFailed("Please log in to continue.")
        if not self.is_admin:
            raise AuthorizationDenied("Unauthorized access. You must be an admin to access this page.")
        return self.session.user

    async def sign_in(self, email: str, password: str) -> AuthSession:
        self.state = GateState.AUTHENTICATING
        self.session = None
        try:
            session = await self._auth.sign_in(email, password)
        except PortalError:
            self.state = GateState.AUTH_FAILED
            raise
        await self._authorize(session)
        return session

    async def resume(self, access_token: str) -> AuthSession:
        """Re-check an existing session (e.g. a bearer token presented on a later request)."""
        self.state = GateState.AUTHENTICATING
        self.session = None
        try:
            user = await self._auth.get_user(access_token)
        except PortalError:
            self.state = GateState.AUTH_FAILED
            raise
        if user is None:
            self.state = GateState.UNAUTHENTICATED
            raise AuthenticationFailed("Your session has expired. Please log in again.")
        session = AuthSession(access_token=access_token, user=user)
        await self._authorize(session)
        return session

    async def sign_out(self) -> None:
        session, self.session = self.session, None
        self.state = GateState.UNAUTHENTICATED
        if session is not None:
            await self._auth.sign_out(session.access_token)

    async def _authorize(self, session: AuthSession) -> None:
        user = session.user
        try:
            async with self._db.session() as db_session:
                membership = await AdminUserRepository(db_session).get_by_user_id(user.id)
        except SQLAlchemyError as e:
            logger.warning("Admin membership lookup failed for %s: %s", user.id, e)
            await self._force_sign_out(session, GateState.AUTH_FAILED)
            raise RemoteUnavailable("Could not verify admin access. Please try again later.") from e

        if membership is not None:
            self._grant(session)
            return

        if user.role == ADMIN_ROLE:
            try:
                await self._provision(user)
            except SQLAlchemyError as e:
                logger.error("Admin bootstrap failed for %s: %s", user.id, e)
                await self._force_sign_out(session, GateState.AUTH_FAILED)
                raise ProvisioningFailed(
                    "Your admin account could not be set up. Please contact support."
                ) from e
            logger.info("Bootstrapped admin membership for %s", user.id)
            self._grant(session)
            return

        await self._force_sign_out(session, GateState.AUTHENTICATED_NON_ADMIN)
        raise AuthorizationDenied("Unauthorized access. You must be an admin to access this page.")

    def _grant(self, session: AuthSession) -> None:
        self.session = session
        self.state = GateState.AUTHENTICATED_ADMIN

    async def _force_sign_out(self, session: AuthSession, state: GateState) -> None:
        self.session = None
        self.state = state
        try:
            await self._auth.sign_out(session.access_token)
        except PortalError as e:
            # Local session is already dropped; the provider token will expire on its own.
            logger.warning("Forced sign-out of %s failed at the provider: %s", session.user.id, e.message)
        else:
            logger.info("Signed out %s (%s)", session.user.id, state.value)

    async def _provision(self, user: AuthUser) -> None:
        """Create the base user row and the admin membership in one unit of work."""
        async with self._db.session() as db_session:
            await UserRepository(db_session).ensure(user.id, user.email)
            await AdminUserRepository(db_session).grant(user.id)

    async def sign_up(self, email: str, password: str, confirm_password: str) -> SignUpOutcome:
        """Create an admin account. Membership provisioning failure is a partial success."""
        validate_sign_up(email, password, confirm_password)
        user = await self._auth.sign_up(email, password, {"role": ADMIN_ROLE})
        try:
            await self._provision(user)
        except SQLAlchemyError as e:
            logger.error("Admin provisioning after sign-up failed for %s: %s", user.id, e)
            return SignUpOutcome(
                status=SignUpStatus.CREATED_UNPROVISIONED,
                user_id=user.id,
                email=user.email,
                message=(
                    "Account created, but admin access could not be set up. Please verify your "
                    "email, then contact support to finish setting up your account."
                ),
            )
        return SignUpOutcome(
            status=SignUpStatus.CREATED,
            user_id=user.id,
            email=user.email,
            message="Account created successfully! Please check your email to verify your account.",
        )
