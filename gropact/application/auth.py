"""
Session manager - login / register / logout bookkeeping

Login is login-or-register: an unknown email gets a fresh account. The
session is a device-local "who is using this" marker, not a credential.
Validation problems come back as AuthResult(success=False, error=...).
"""
import logging
import secrets
import uuid
from dataclasses import dataclass
from typing import Any

from passlib.context import CryptContext
from pydantic import ValidationError
from sqlalchemy.orm import Session

from gropact.config import get_settings
from gropact.domain.user import User
from gropact.infrastructure.store.repositories import SessionRecord, SessionRepository, UsersRepository

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"])

MIN_PASSWORD_LENGTH = 6

INVALID_EMAIL = "Please enter a valid email address."
SHORT_PASSWORD = "Password must be at least 6 characters."
NAME_REQUIRED = "Name is required."
ACCOUNT_EXISTS = "An account with this email already exists. Please sign in."
WRONG_PASSWORD = "Incorrect email or password."


@dataclass
class AuthResult:
    success: bool
    error: str | None = None


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def new_user_id() -> str:
    return "user-" + uuid.uuid4().hex[:8]


def new_session_token() -> str:
    return "tok_" + secrets.token_urlsafe(12)


def _validate_credentials(email: str, password: str) -> str | None:
    if not email or "@" not in email:
        return INVALID_EMAIL
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        return SHORT_PASSWORD
    return None


class SessionManager:
    def __init__(self, db: Session):
        self.db = db
        self.users = UsersRepository(db)
        self.sessions = SessionRepository(db)

    def get_user_by_email(self, email: str) -> User | None:
        email = email.lower()
        return next((u for u in self.users.load() if u.email.lower() == email), None)

    def get_user(self) -> User | None:
        """User bound to the current session, or None"""
        session = self.sessions.load()
        if session is None:
            return None
        return next((u for u in self.users.load() if u.id == session.user_id), None)

    def is_authenticated(self) -> bool:
        return self.sessions.load() is not None

    def save_user(self, user: User) -> None:
        """Upsert by id"""
        users = self.users.load()
        for idx, existing in enumerate(users):
            if existing.id == user.id:
                users[idx] = user
                break
        else:
            users.append(user)
        self.users.save(users)

    def login(self, email: str, password: str) -> AuthResult:
        error = _validate_credentials(email, password)
        if error:
            return AuthResult(success=False, error=error)

        existing = self.get_user_by_email(email)
        if existing:
            if (
                get_settings().REQUIRE_PASSWORD_MATCH
                and existing.password_hash
                and not verify_password(password, existing.password_hash)
            ):
                return AuthResult(success=False, error=WRONG_PASSWORD)
            self._open_session(existing.id)
            return AuthResult(success=True)

        user = User.new(new_user_id(), name=email.split("@")[0], email=email)
        self.save_user(user)
        self._open_session(user.id)
        logger.info("Created account %s on first login", user.id)
        return AuthResult(success=True)

    def register(self, name: str, email: str, password: str) -> AuthResult:
        if not name or not name.strip():
            return AuthResult(success=False, error=NAME_REQUIRED)
        error = _validate_credentials(email, password)
        if error:
            return AuthResult(success=False, error=error)

        if self.get_user_by_email(email):
            return AuthResult(success=False, error=ACCOUNT_EXISTS)

        user = User.new(new_user_id(), name=name.strip(), email=email, password_hash=hash_password(password))
        self.save_user(user)
        self._open_session(user.id)
        return AuthResult(success=True)

    def logout(self) -> None:
        """Drops the session only; the user record stays"""
        self.sessions.clear()

    def update_profile(self, **updates: Any) -> User | None:
        """
        Merge field updates into the current user

        Keys may be snake_case or camelCase. Returns None without a session or
        when the merged user does not validate; nothing is written then.
        """
        user = self.get_user()
        if user is None:
            return None
        by_alias = {info.alias: name for name, info in User.model_fields.items() if info.alias}
        merged = user.model_dump()
        for key, value in updates.items():
            merged[by_alias.get(key, key)] = value
        try:
            updated = User.model_validate(merged)
        except ValidationError:
            logger.warning("Rejected profile update for %s", user.id, exc_info=True)
            return None
        self.save_user(updated)
        return updated

    def _open_session(self, user_id: str) -> None:
        self.sessions.save(SessionRecord(user_id=user_id, token=new_session_token()))
