# finadvisor/routers/seed.py
import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import crud
from ..config import Settings, get_settings
from ..database import get_db
from ..errors import NotFoundError
from ..security import DEMO_ACCOUNTS, hash_password

router = APIRouter(prefix="/api/seed", tags=["Seed"])
logger = structlog.get_logger(__name__)


@router.get("/users", status_code=201)
def seed_users(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Destructive: replaces every user with the demo accounts. Demo mode only."""
    if not settings.demo_mode:
        raise NotFoundError("Not found")

    crud.replace_all_users(db, [
        {
            "email": account.email,
            "password": hash_password(account.password, settings),
            "full_name": account.full_name,
            "phone_number": account.phone_number,
            "date_of_birth": account.date_of_birth,
        }
        for account in DEMO_ACCOUNTS.values()
    ])
    logger.warning("users_reseeded", count=len(DEMO_ACCOUNTS))

    return {
        "message": "Test users created successfully",
        "users": [{"email": a.email, "password": a.password} for a in DEMO_ACCOUNTS.values()],
    }
