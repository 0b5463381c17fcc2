"""Storage of credentials, verification passcodes and sessions."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import asdict, fields
from typing import Any, TypeVar

from . import queries
from .database import Database, DatabaseError
from .models import Auth, EmailVerification, PhoneVerification, Session, from_document

__all__ = ["AuthRepository"]

M = TypeVar("M")


def _record(model_type: type[M], row: Mapping[str, Any]) -> M:
    """Build a record from a row, turning integer flags into booleans."""
    values = dict(row)
    for f in fields(model_type):
        if f.type in (bool, "bool") and values.get(f.name) is not None:
            values[f.name] = bool(values[f.name])
    return from_document(model_type, values)


@contextmanager
def _failure(message: str) -> Iterator[None]:
    """Prefix any database error raised in the block with ``message``."""
    try:
        yield
    except DatabaseError as exc:
        raise type(exc)(f"{message}: {exc}") from exc


def _require_rows(count: int, message: str) -> None:
    if count == 0:
        raise DatabaseError(message)


class AuthRepository:
    """Reads and writes authentication records through a relational database."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def __enter__(self) -> AuthRepository:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying database."""
        self._db.close()

    # Credentials

    def create_auth(self, auth: Auth) -> None:
        with _failure("Failed to create auth"):
            count = self._db.execute(queries.CREATE_AUTH, asdict(auth))
        _require_rows(count, "Failed to create auth, 0 rows affected")

    def get_auth_by_id(self, auth_id: str) -> Auth:
        with _failure("Failed to get auth"):
            row = self._db.fetch_one(queries.GET_AUTH_BY_ID, (auth_id,))
        return _record(Auth, row)

    def get_auth_by_email(self, email: str) -> Auth:
        with _failure("Failed to get auth by email"):
            row = self._db.fetch_one(queries.GET_AUTH_BY_EMAIL, (email,))
        return _record(Auth, row)

    def get_auth_by_phone(self, phone: str) -> Auth:
        with _failure("Failed to get auth by phone"):
            row = self._db.fetch_one(queries.GET_AUTH_BY_PHONE, (phone,))
        return _record(Auth, row)

    def delete_auth(self, auth_id: str) -> None:
        with _failure(f"Failed to delete auth with id {auth_id}"):
            count = self._db.execute(queries.DELETE_AUTH, (auth_id,))
        _require_rows(count, f"Failed to delete auth with id {auth_id}, 0 rows affected")

    def update_email(self, email: str, auth_id: str) -> None:
        with _failure("Failed to update email"):
            count = self._db.execute(queries.UPDATE_EMAIL, (email, auth_id))
        _require_rows(count, "Failed to update email, 0 rows affected")

    def update_phone(self, phone: str, auth_id: str) -> None:
        with _failure("Failed to update phone"):
            count = self._db.execute(queries.UPDATE_PHONE, (phone, auth_id))
        _require_rows(count, "Failed to update phone, 0 rows affected")

    # Verification passcodes

    def create_email_verification(self, verification: EmailVerification) -> None:
        with _failure("Error creating email verification"):
            count = self._db.execute(queries.CREATE_EMAIL_VERIFICATION, asdict(verification))
        _require_rows(count, "Failed to create email verification, 0 rows affected")

    def create_phone_verification(self, verification: PhoneVerification) -> None:
        with _failure("Error creating phone verification"):
            count = self._db.execute(queries.CREATE_PHONE_VERIFICATION, asdict(verification))
        _require_rows(count, "Failed to create phone verification, 0 rows affected")

    def get_email_verification(self, email: str) -> EmailVerification:
        with _failure("Error getting email verification"):
            row = self._db.fetch_one(queries.GET_EMAIL_VERIFICATION, (email,))
        return _record(EmailVerification, row)

    def get_phone_verification(self, phone: str) -> PhoneVerification:
        with _failure("Error getting phone verification"):
            row = self._db.fetch_one(queries.GET_PHONE_VERIFICATION, (phone,))
        return _record(PhoneVerification, row)

    def delete_email_verification(self, email: str) -> None:
        with _failure(f"Failed to delete email verification with email {email}"):
            count = self._db.execute(queries.DELETE_EMAIL_VERIFICATION, (email,))
        _require_rows(
            count, f"Failed to delete email verification with email {email}, 0 rows affected"
        )

    def delete_phone_verification(self, phone: str) -> None:
        with _failure(f"Failed to delete phone verification with phone {phone}"):
            count = self._db.execute(queries.DELETE_PHONE_VERIFICATION, (phone,))
        _require_rows(
            count, f"Failed to delete phone verification with phone {phone}, 0 rows affected"
        )

    # Sessions

    def create_session(self, session: Session) -> None:
        with _failure("Failed to create session"):
            count = self._db.execute(queries.CREATE_SESSION, asdict(session))
        _require_rows(count, "Failed to create session, 0 rows affected")

    def get_session(self, session_id: str) -> Session:
        with _failure("Failed to get session"):
            row = self._db.fetch_one(queries.GET_SESSION, (session_id,))
        return _record(Session, row)

    def revoke_session(self, session_id: str) -> None:
        with _failure("Failed to revoke session"):
            count = self._db.execute(queries.REVOKE_SESSION, (session_id,))
        _require_rows(count, "Failed to revoke session, 0 rows affected")

    def delete_session(self, session_id: str) -> None:
        with _failure("Failed to delete session"):
            count = self._db.execute(queries.DELETE_SESSION, (session_id,))
        _require_rows(count, "Failed to delete session, 0 rows affected")