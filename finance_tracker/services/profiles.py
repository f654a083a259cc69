"""
Local Profiles and Mock Sign-In

DESIGN DECISION: There is no authentication. Registering creates a
profile, signing in selects one by email, and neither checks a
password. The only purpose of a profile is to namespace the user's
collections in the store and to carry a currency label for display.
"""

from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from finance_tracker.audit.logger import AuditLogger
from finance_tracker.models.records import UserProfile
from finance_tracker.services.storage.interface import (
    DuplicateError,
    KeyValueStore,
    NotFoundError,
    StorageError,
)


USERS_KEY = "users"
CURRENT_USER_KEY = "currentUser"

_PROFILES = TypeAdapter(list[UserProfile])


class ProfileService:
    """Registers, selects and edits local user profiles."""

    def __init__(
        self,
        store: KeyValueStore,
        audit_logger: Optional[AuditLogger] = None,
        default_currency: str = "USD",
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._default_currency = default_currency

    def list_profiles(self) -> list[UserProfile]:
        """All stored profiles; unreadable profile data reads as none."""
        raw = self._store.get(USERS_KEY)
        if raw is None:
            return []
        try:
            return _PROFILES.validate_json(raw)
        except ValidationError as e:
            if self._audit_logger:
                self._audit_logger.log_data_load_failed(USERS_KEY, str(e))
            return []

    def _save_profiles(self, profiles: list[UserProfile]) -> None:
        self._store.set(USERS_KEY, _PROFILES.dump_json(profiles, by_alias=True).decode("utf-8"))

    def find_by_email(self, email: str) -> Optional[UserProfile]:
        wanted = email.strip().lower()
        for profile in self.list_profiles():
            if profile.email == wanted:
                return profile
        return None

    def get(self, user_id: str) -> Optional[UserProfile]:
        for profile in self.list_profiles():
            if profile.id == user_id:
                return profile
        return None

    def register(
        self,
        name: str,
        email: str,
        currency: Optional[str] = None,
    ) -> UserProfile:
        """
        Create a profile and sign it in.

        Raises:
            DuplicateError: If a profile with this email exists
            ValidationError: If name or email are invalid
        """
        profile = UserProfile(
            name=name,
            email=email,
            currency=currency or self._default_currency,
        )
        profiles = self.list_profiles()
        if any(existing.email == profile.email for existing in profiles):
            raise DuplicateError(f"A profile for {profile.email} already exists")

        profiles.append(profile)
        self._save_profiles(profiles)
        if self._audit_logger:
            self._audit_logger.log_user_registered(profile.id, profile.email)

        self._store.set(CURRENT_USER_KEY, profile.id)
        return profile

    def sign_in(self, email: str) -> UserProfile:
        """
        Select the profile registered under ``email``.

        Raises:
            NotFoundError: If no such profile exists
        """
        profile = self.find_by_email(email)
        if profile is None:
            raise NotFoundError(f"No profile registered for {email}")

        self._store.set(CURRENT_USER_KEY, profile.id)
        if self._audit_logger:
            self._audit_logger.log_user_signed_in(profile.id)
        return profile

    def sign_out(self) -> None:
        user_id = self._store.get(CURRENT_USER_KEY)
        self._store.delete(CURRENT_USER_KEY)
        if user_id and self._audit_logger:
            self._audit_logger.log_user_signed_out(user_id)

    def current_user(self) -> Optional[UserProfile]:
        """The signed-in profile, or None if nobody is (or it was removed)."""
        try:
            user_id = self._store.get(CURRENT_USER_KEY)
        except StorageError:
            return None
        if not user_id:
            return None
        return self.get(user_id)

    def update_profile(self, user_id: str, **changes: Any) -> UserProfile:
        """
        Replace name, email or currency of a profile.

        Raises:
            NotFoundError: If the profile doesn't exist
            DuplicateError: If the new email belongs to another profile
        """
        profiles = self.list_profiles()
        for index, profile in enumerate(profiles):
            if profile.id != user_id:
                continue

            allowed = {k: v for k, v in changes.items() if k in ("name", "email", "currency")}
            updated = UserProfile.model_validate({**profile.model_dump(), **allowed})
            if any(
                other.email == updated.email and other.id != user_id
                for other in profiles
            ):
                raise DuplicateError(f"A profile for {updated.email} already exists")

            profiles[index] = updated
            self._save_profiles(profiles)
            if self._audit_logger:
                self._audit_logger.log_profile_updated(user_id, allowed)
            return updated

        raise NotFoundError(f"Profile not found: {user_id}")
