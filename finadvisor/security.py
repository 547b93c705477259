# finadvisor/security.py
"""
Identity & access.

Bearer tokens are HS256 JWTs whose ``sub`` is the caller's user id. Two
subject spaces coexist:

* persisted users, looked up in the record store by id;
* built-in demo accounts (only when ``demo_mode`` is on), all sharing the
  fixed subject id ``DEMO_SUBJECT_ID``. Demo tokens carry ``demo``,
  ``email`` and ``name`` claims so the identity can be rebuilt from the token
  alone when the store cannot be reached.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import jwt
import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud
from .config import Settings, get_settings
from .database import get_db
from .errors import AuthError

logger = structlog.get_logger(__name__)

DEMO_SUBJECT_ID = "mock123456789"


@dataclass(frozen=True)
class DemoAccount:
    email: str
    password: str
    full_name: str
    phone_number: str
    date_of_birth: datetime


DEMO_ACCOUNTS = {
    "user@example.com": DemoAccount(
        email="user@example.com",
        password="password123",
        full_name="Test User",
        phone_number="555-123-4567",
        date_of_birth=datetime(1990, 1, 1),
    ),
    "admin@example.com": DemoAccount(
        email="admin@example.com",
        password="admin123",
        full_name="Admin User",
        phone_number="555-987-6543",
        date_of_birth=datetime(1985, 5, 15),
    ),
}
DEFAULT_DEMO_EMAIL = "user@example.com"


@dataclass(frozen=True)
class Identity:
    """The authenticated caller attached to a request."""
    id: str
    email: str
    full_name: str
    is_demo: bool = False


# -----------------------------
# Password helpers
# -----------------------------
@lru_cache()
def _pwd_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(password: str, settings: Settings) -> str:
    return _pwd_context(settings.bcrypt_rounds).hash(password)


def verify_password(plain: str, hashed: str, settings: Settings) -> bool:
    return _pwd_context(settings.bcrypt_rounds).verify(plain, hashed)


@lru_cache()
def _placeholder_hash(rounds: int) -> str:
    return _pwd_context(rounds).hash("placeholder-password")


def verify_against_placeholder(plain: str, settings: Settings) -> bool:
    """Pay the same bcrypt cost as a real check when there is no user to check against."""
    verify_password(plain, _placeholder_hash(settings.bcrypt_rounds), settings)
    return False


# -----------------------------
# Tokens
# -----------------------------
def create_access_token(subject: str, settings: Settings, **claims) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "iat": now,
        "exp": now + timedelta(days=settings.jwt_expires_days),
        **claims,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def issue_token(identity: Identity, settings: Settings) -> str:
    if identity.is_demo:
        return create_access_token(
            identity.id, settings, demo=True, email=identity.email, name=identity.full_name
        )
    return create_access_token(identity.id, settings)


def decode_access_token(token: str, settings: Settings) -> dict:
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.InvalidTokenError as exc:
        logger.info("token_rejected", reason=str(exc))
        raise AuthError("Not authorized, token failed")


# -----------------------------
# Demo identities
# -----------------------------
def demo_identity(email: Optional[str] = None) -> Identity:
    account = DEMO_ACCOUNTS.get(email or DEFAULT_DEMO_EMAIL, DEMO_ACCOUNTS[DEFAULT_DEMO_EMAIL])
    return Identity(id=DEMO_SUBJECT_ID, email=account.email, full_name=account.full_name, is_demo=True)


def authenticate_demo(email: str, password: str, settings: Settings) -> Optional[Identity]:
    """Match the built-in demo credentials. Never consults the store."""
    if not settings.demo_mode:
        return None
    account = DEMO_ACCOUNTS.get(email)
    if account is None or account.password != password:
        return None
    return demo_identity(email)


def _degraded_identity(payload: dict) -> Identity:
    return Identity(
        id=payload["sub"],
        email=payload.get("email") or DEFAULT_DEMO_EMAIL,
        full_name=payload.get("name") or DEMO_ACCOUNTS[DEFAULT_DEMO_EMAIL].full_name,
        is_demo=True,
    )


# -----------------------------
# Identity resolution
# -----------------------------
def resolve_identity(payload: dict, db: Session, settings: Settings) -> Identity:
    """
    Turn a verified token payload into an Identity.

    Demo tokens fall back to the identity carried in their claims when the
    user row is missing or the store is unreachable.
    """
    subject = str(payload["sub"])
    demo_sentinel = settings.demo_mode and bool(payload.get("demo"))

    if settings.demo_mode and subject == DEMO_SUBJECT_ID:
        return demo_identity(payload.get("email"))

    try:
        user = crud.get_user(db, subject)
    except SQLAlchemyError:
        logger.exception("identity_store_unavailable", subject=subject)
        if demo_sentinel:
            return _degraded_identity(payload)
        raise AuthError("Not authorized, database error")

    if user is None:
        if demo_sentinel:
            return _degraded_identity(payload)
        raise AuthError("User not found")

    return Identity(id=user.id, email=user.email, full_name=user.full_name)


bearer_scheme = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Identity:
    if credentials is None or not credentials.credentials:
        raise AuthError("Not authorized, no token")
    payload = decode_access_token(credentials.credentials, settings)
    return resolve_identity(payload, db, settings)
