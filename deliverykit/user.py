"""Storage and business rules for user profiles."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict
from datetime import datetime, timezone

from . import queries
from .database import Database, DatabaseError
from .models import CreateProfile, Profile, from_document, generate_id

__all__ = ["UserRepository", "UserService"]


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


class UserRepository:
    """Reads and writes profiles through a relational database."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def __enter__(self) -> UserRepository:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying database."""
        self._db.close()

    def create_profile(self, profile: Profile) -> None:
        with _failure("Failed to create profile"):
            count = self._db.execute(queries.CREATE_PROFILE, asdict(profile))
        _require_rows(count, "Failed to create profile, 0 rows affected")

    def get_profile_by_id(self, profile_id: str) -> Profile:
        with _failure("Profile not found"):
            row = self._db.fetch_one(queries.GET_PROFILE_BY_ID, (profile_id,))
        return from_document(Profile, row)

    def get_profile_by_auth_id(self, auth_id: str) -> Profile:
        with _failure("Profile not found"):
            row = self._db.fetch_one(queries.GET_PROFILE_BY_AUTH_ID, (auth_id,))
        return from_document(Profile, row)

    def update_profile(self, profile: Profile) -> None:
        with _failure(f"Failed to update profile id {profile.id}"):
            count = self._db.execute(queries.UPDATE_PROFILE, asdict(profile))
        _require_rows(count, "Failed to update profile, 0 rows affected")

    def delete_profile(self, profile_id: str) -> None:
        with _failure(f"Failed to delete profile id {profile_id}"):
            count = self._db.execute(queries.DELETE_PROFILE, (profile_id,))
        _require_rows(count, "Failed to delete profile, 0 rows affected")


class UserService:
    """Creates, finds, updates and removes user profiles."""

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    def create_profile(self, request: CreateProfile) -> Profile:
        """Create a profile with a fresh identifier and timestamps."""
        now = datetime.now(timezone.utc)
        profile = Profile(
            id=generate_id(),
            name=request.name,
            image_url=request.image_url,
            dob=request.dob,
            anniversary=request.anniversary,
            gender=request.gender,
            auth_id=request.auth_id,
            created_at=now,
            updated_at=now,
        )
        self._repository.create_profile(profile)
        return profile

    def get_profile(self, auth_id: str) -> Profile:
        """Return the profile belonging to an account."""
        return self._repository.get_profile_by_auth_id(auth_id)

    def update_profile(self, profile: Profile) -> None:
        """Store changes to a profile, stamping its update time."""
        profile.updated_at = datetime.now(timezone.utc)
        self._repository.update_profile(profile)

    def delete_profile(self, profile_id: str) -> None:
        self._repository.delete_profile(profile_id)