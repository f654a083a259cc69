"""Tests for local profiles and mock sign-in."""

import pytest

from finance_tracker.models import AuditEventType
from finance_tracker.services.profiles import CURRENT_USER_KEY, ProfileService
from finance_tracker.services.storage import DuplicateError, NotFoundError


@pytest.fixture
def profiles(store, audit_logger):
    return ProfileService(store, audit_logger=audit_logger, default_currency="EUR")


class TestProfileService:
    """Tests for ProfileService."""

    def test_register_signs_in(self, profiles, store):
        profile = profiles.register("Sam", "Sam@Example.com")

        assert profile.email == "sam@example.com"
        assert profile.currency == "EUR"
        assert store.get(CURRENT_USER_KEY) == profile.id
        assert profiles.current_user() == profile

    def test_duplicate_email_rejected(self, profiles):
        profiles.register("Sam", "sam@example.com")
        with pytest.raises(DuplicateError):
            profiles.register("Other Sam", "SAM@example.com")

    def test_sign_in_and_out(self, profiles):
        registered = profiles.register("Sam", "sam@example.com", currency="GBP")
        profiles.sign_out()
        assert profiles.current_user() is None

        signed_in = profiles.sign_in(" sam@EXAMPLE.com ")
        assert signed_in.id == registered.id
        assert signed_in.currency == "GBP"

    def test_sign_in_unknown_email(self, profiles):
        with pytest.raises(NotFoundError):
            profiles.sign_in("nobody@example.com")

    def test_update_profile(self, profiles):
        profile = profiles.register("Sam", "sam@example.com")
        updated = profiles.update_profile(profile.id, name="Samantha", currency="JPY", id="hijack")

        assert updated.id == profile.id
        assert updated.name == "Samantha"
        assert updated.currency == "JPY"
        assert profiles.get(profile.id) == updated

    def test_update_to_taken_email(self, profiles):
        profiles.register("Sam", "sam@example.com")
        other = profiles.register("Alex", "alex@example.com")
        with pytest.raises(DuplicateError):
            profiles.update_profile(other.id, email="sam@example.com")

    def test_update_unknown_profile(self, profiles):
        with pytest.raises(NotFoundError):
            profiles.update_profile("missing", name="X")

    def test_unreadable_profiles_read_as_none(self, profiles, store):
        store.set("users", "[{]")
        assert profiles.list_profiles() == []

    def test_events_are_audited(self, profiles, audit_storage):
        profile = profiles.register("Sam", "sam@example.com")
        profiles.sign_out()
        profiles.sign_in("sam@example.com")

        types = [e.event_type for e in reversed(audit_storage.get_recent_events())]
        assert types == [
            AuditEventType.USER_REGISTERED,
            AuditEventType.USER_SIGNED_OUT,
            AuditEventType.USER_SIGNED_IN,
        ]
        assert all(e.user_id == profile.id for e in audit_storage.get_recent_events())
