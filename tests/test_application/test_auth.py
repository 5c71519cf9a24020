"""
Tests for the session manager: login-or-register, register, logout, profile
"""
from gropact.application.auth import (
    ACCOUNT_EXISTS,
    INVALID_EMAIL,
    NAME_REQUIRED,
    SHORT_PASSWORD,
    WRONG_PASSWORD,
    SessionManager,
    verify_password,
)
from gropact.config import get_settings
from gropact.infrastructure.store import keys
from gropact.infrastructure.store.kv_store import KeyValueStore
from gropact.infrastructure.store.repositories import UsersRepository


class TestLogin:
    def test_invalid_email(self, db_session):
        result = SessionManager(db_session).login("not-an-email", "secret123")
        assert result.success is False
        assert result.error == INVALID_EMAIL

    def test_short_password(self, db_session):
        result = SessionManager(db_session).login("a@b.io", "12345")
        assert result.success is False
        assert result.error == SHORT_PASSWORD

    def test_unknown_email_creates_account(self, db_session):
        """Login = login-or-register"""
        auth = SessionManager(db_session)

        result = auth.login("newbie@example.com", "secret123")

        assert result.success is True
        user = auth.get_user()
        assert user is not None
        assert user.email == "newbie@example.com"
        assert user.name == "newbie"
        assert user.current_streak == 0
        assert user.completion_rate == 0
        assert user.id.startswith("user-")

    def test_existing_email_reuses_account_case_insensitive(self, db_session):
        auth = SessionManager(db_session)
        auth.register("Kim", "kim@example.com", "secret123")
        user_id = auth.get_user().id
        auth.logout()

        result = auth.login("KIM@example.com", "whatever")

        assert result.success is True
        assert auth.get_user().id == user_id
        assert len(UsersRepository(db_session).load()) == 1

    def test_password_checked_when_enabled(self, db_session, monkeypatch):
        auth = SessionManager(db_session)
        auth.register("Kim", "kim@example.com", "secret123")
        auth.logout()
        monkeypatch.setenv("REQUIRE_PASSWORD_MATCH", "true")
        get_settings.cache_clear()

        assert auth.login("kim@example.com", "wrong-pass").error == WRONG_PASSWORD
        assert auth.is_authenticated() is False
        assert auth.login("kim@example.com", "secret123").success is True

    def test_session_token_shape(self, db_session):
        SessionManager(db_session).login("a@b.io", "secret123")
        session = KeyValueStore(db_session).get(keys.SESSION)
        assert session["token"].startswith("tok_")
        assert session["userId"].startswith("user-")


class TestRegister:
    def test_register_creates_user_and_session(self, db_session):
        auth = SessionManager(db_session)

        result = auth.register("  Kim  ", "kim@example.com", "secret123")

        assert result.success is True
        assert result.error is None
        user = auth.get_user()
        assert user.name == "Kim"
        assert user.password_hash
        assert verify_password("secret123", user.password_hash)

    def test_name_required(self, db_session):
        result = SessionManager(db_session).register("   ", "kim@example.com", "secret123")
        assert result.error == NAME_REQUIRED

    def test_duplicate_email_rejected(self, db_session):
        auth = SessionManager(db_session)
        auth.register("Kim", "kim@example.com", "secret123")

        result = auth.register("Kim Again", "Kim@Example.com", "secret123")

        assert result.success is False
        assert result.error == ACCOUNT_EXISTS
        assert len(UsersRepository(db_session).load()) == 1


class TestLogout:
    def test_logout_keeps_user_record(self, db_session):
        auth = SessionManager(db_session)
        auth.register("Kim", "kim@example.com", "secret123")

        auth.logout()

        assert auth.get_user() is None
        assert auth.is_authenticated() is False
        assert len(UsersRepository(db_session).load()) == 1


class TestUpdateProfile:
    def test_update_profile_merges_fields(self, db_session):
        auth = SessionManager(db_session)
        auth.register("Kim", "kim@example.com", "secret123")

        updated = auth.update_profile(bio="Runner", tier="premium")

        assert updated.bio == "Runner"
        assert auth.get_user().tier == "premium"
        assert auth.get_user().name == "Kim"

    def test_update_profile_without_session(self, db_session):
        assert SessionManager(db_session).update_profile(bio="x") is None

    def test_update_profile_accepts_camel_case_keys(self, db_session):
        auth = SessionManager(db_session)
        auth.register("Kim", "kim@example.com", "secret123")

        updated = auth.update_profile(currentStreak=5, trust_score=80)

        assert updated.current_streak == 5
        assert auth.get_user().current_streak == 5
        assert auth.get_user().trust_score == 80

    def test_invalid_update_leaves_users_intact(self, db_session):
        auth = SessionManager(db_session)
        auth.register("Other", "other@example.com", "secret123")
        auth.logout()
        auth.register("Kim", "kim@example.com", "secret123")

        assert auth.update_profile(tier="gold") is None

        users = UsersRepository(db_session).load()
        assert sorted(u.name for u in users) == ["Kim", "Other"]
        assert auth.get_user().tier == "free"
