"""Business rules for accounts, verification passcodes and sessions."""

from __future__ import annotations

from datetime import datetime, timezone

from .auth_repository import AuthRepository
from .models import (
    Auth,
    CreateAuth,
    EmailVerification,
    PhoneVerification,
    Session,
    generate_id,
)

__all__ = ["ValidationError", "AuthenticationService"]


class ValidationError(ValueError):
    """A request does not satisfy the service's rules."""


class AuthenticationService:
    """Creates and looks up accounts; the rest passes through to the repository."""

    def __init__(self, repository: AuthRepository) -> None:
        self._repository = repository

    def create_auth(self, request: CreateAuth) -> Auth:
        """Create an account identified by an e-mail address, a phone number or both."""
        if request.email is None and request.phone is None:
            raise ValidationError("One of email or phone is required")

        now = datetime.now(timezone.utc)
        auth = Auth(
            id=generate_id(),
            email=request.email,
            email_verified=request.email_verified,
            phone=request.phone,
            auth_role=request.auth_role,
            created_at=now,
            updated_at=now,
        )
        self._repository.create_auth(auth)
        return auth

    def get_auth_by_id(self, auth_id: str) -> Auth:
        return self._repository.get_auth_by_id(auth_id)

    def get_auth(self, email: str | None = None, phone: str | None = None) -> Auth:
        """Look an account up by exactly one of e-mail address or phone number."""
        if email is not None and phone is not None:
            raise ValidationError("Either email or phone is needed")
        if phone is not None:
            return self._repository.get_auth_by_phone(phone)
        if email is not None:
            return self._repository.get_auth_by_email(email)
        raise ValidationError("One of email or phone is required")

    def delete_auth(self, auth_id: str) -> None:
        self._repository.delete_auth(auth_id)

    def create_email_verification(self, verification: EmailVerification) -> None:
        self._repository.create_email_verification(verification)

    def create_phone_verification(self, verification: PhoneVerification) -> None:
        self._repository.create_phone_verification(verification)

    def get_email_verification(self, email: str) -> EmailVerification:
        return self._repository.get_email_verification(email)

    def get_phone_verification(self, phone: str) -> PhoneVerification:
        return self._repository.get_phone_verification(phone)

    def delete_email_verification(self, email: str) -> None:
        self._repository.delete_email_verification(email)

    def delete_phone_verification(self, phone: str) -> None:
        self._repository.delete_phone_verification(phone)

    def create_session(self, session: Session) -> None:
        self._repository.create_session(session)

    def get_session(self, session_id: str) -> Session:
        return self._repository.get_session(session_id)

    def revoke_session(self, session_id: str) -> None:
        self._repository.revoke_session(session_id)

    def delete_session(self, session_id: str) -> None:
        self._repository.delete_session(session_id)