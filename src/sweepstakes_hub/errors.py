"""
Typed failures surfaced by the gate, the competition service and the coordinator.

Raw backend exceptions (SQLAlchemy, httpx) are converted into one of these kinds at the
service boundary; the API layer renders them with a single exception handler.
"""

from __future__ import annotations

from typing import Dict, Optional

from sqlalchemy.exc import DataError, IntegrityError


class PortalError(Exception):
    """Base class: carries a user-readable message and a stable error code."""

    code: str = "error"
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}


class AuthenticationFailed(PortalError):
    """Credentials rejected by the auth provider (or no live session)."""

    code = "authentication_failed"
    status_code = 401


class AuthorizationDenied(PortalError):
    """Valid credentials, but the account is not an admin."""

    code = "authorization_denied"
    status_code = 403


class ProvisioningFailed(PortalError):
    """Admin bootstrap (membership + user rows) could not be completed."""

    code = "provisioning_failed"
    status_code = 500


class NotFound(PortalError):
    code = "not_found"
    status_code = 404


class RemoteUnavailable(PortalError):
    """Network or backend failure."""

    code = "remote_unavailable"
    status_code = 503


class ValidationFailed(PortalError):
    """Form-level validation failure, or a write the backend rejected as invalid."""

    code = "validation_failed"
    status_code = 422

    def __init__(self, message: str, fields: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message)
        self.fields: Dict[str, str] = dict(fields or {})

    def to_dict(self) -> dict:
        out = super().to_dict()
        out["fields"] = self.fields
        return out


def from_db_error(exc: Exception, action: str) -> PortalError:
    """Translate a SQLAlchemy failure during ``action`` into a typed portal error."""
    if isinstance(exc, (IntegrityError, DataError)):
        return ValidationFailed(f"The backend rejected the data while trying to {action}.")
    return RemoteUnavailable(f"Could not {action}. Please try again later.")
