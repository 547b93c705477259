# finadvisor/routers/users.py
"""
Account endpoints.

These answer with {token, user} on success and a bare {message} on failure,
unlike the {success, data, message} envelope of the entity routers.
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..config import Settings, get_settings
from ..database import get_db
from ..errors import AuthError, ConflictError, NotFoundError, ValidationError
from ..models import utcnow
from ..responses import serialize
from ..security import (
    DEFAULT_DEMO_EMAIL,
    DEMO_ACCOUNTS,
    Identity,
    authenticate_demo,
    get_current_identity,
    hash_password,
    issue_token,
    verify_against_placeholder,
    verify_password,
)

router = APIRouter(prefix="/api/users", tags=["Users"])
logger = structlog.get_logger(__name__)


def _auth_response(identity: Identity, settings: Settings) -> dict:
    return schemas.AuthResponse(
        token=issue_token(identity, settings),
        user=schemas.UserSummary(id=identity.id, email=identity.email, full_name=identity.full_name),
    ).model_dump(mode="json", by_alias=True)


@router.get("/test")
def users_test():
    return {"message": "User routes working"}


# -----------------------------
# Registration & login
# -----------------------------
@router.post("/register", status_code=201)
def register(
    payload: schemas.RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if crud.get_user_by_email(db, payload.email):
        raise ConflictError("Email already in use")

    try:
        user = crud.create_user(db, payload, hash_password(payload.password, settings))
    except IntegrityError:
        # lost a race with a concurrent registration for the same email
        db.rollback()
        raise ConflictError("Email already in use")

    logger.info("user_registered", user_id=user.id)
    identity = Identity(id=user.id, email=user.email, full_name=user.full_name)
    return _auth_response(identity, settings)


@router.post("/login")
def login(
    payload: schemas.LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if not payload.email or not payload.password:
        raise ValidationError("Please provide email and password")

    identity = authenticate_demo(payload.email, payload.password, settings)
    if identity is None:
        user = crud.get_user_by_email(db, payload.email)
        # same answer, and the same bcrypt cost, for unknown email and wrong password
        if user is None:
            verified = verify_against_placeholder(payload.password, settings)
        else:
            verified = verify_password(payload.password, user.password, settings)
        if not verified:
            logger.info("login_failed")
            raise AuthError("Invalid credentials")
        identity = Identity(id=user.id, email=user.email, full_name=user.full_name)

    logger.info("login_succeeded", user_id=identity.id, demo=identity.is_demo)
    return _auth_response(identity, settings)


@router.get("/profile")
def profile(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    if identity.is_demo:
        account = DEMO_ACCOUNTS.get(identity.email, DEMO_ACCOUNTS[DEFAULT_DEMO_EMAIL])
        demo_profile = schemas.UserProfile(
            id=identity.id,
            email=identity.email,
            full_name=identity.full_name,
            phone_number=account.phone_number,
            date_of_birth=account.date_of_birth,
            created_at=utcnow(),
        )
        return demo_profile.model_dump(mode="json", by_alias=True)

    user = crud.get_user(db, identity.id)
    if user is None:
        raise NotFoundError("User not found")
    return serialize(schemas.UserProfile, user)
