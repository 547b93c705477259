# finadvisor/crud.py
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel
from sqlalchemy import case
from sqlalchemy.orm import Session

from . import models, schemas
from .errors import ForbiddenError, NotFoundError, ValidationError
from .models import Goal, GoalContribution, User, utcnow


# -----------------------------
# User CRUD
# -----------------------------
def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, data: schemas.RegisterRequest, password_hash: str) -> User:
    user = User(
        email=data.email,
        password=password_hash,
        full_name=data.full_name,
        phone_number=data.phone_number,
        date_of_birth=data.date_of_birth,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def replace_all_users(db: Session, users: list[dict]) -> list[User]:
    """Wipe the users table and insert ``users`` (dicts of column values)."""
    db.query(User).delete(synchronize_session=False)
    created = [User(**values) for values in users]
    db.add_all(created)
    db.commit()
    return created


# -----------------------------
# Owned resources (Income / Expense / Asset / Liability)
# -----------------------------
@dataclass(frozen=True)
class ResourceKind:
    """Everything that distinguishes one owned-resource collection from another."""
    label: str                      # singular, used in messages
    path: str                       # URL segment under /api
    model: type
    create_schema: type[BaseModel]
    out_schema: type[BaseModel]


class OwnedResourceService:
    """
    list / create / update / delete scoped to the owning user.

    Updates are full replaces: the payload is validated with the create schema,
    so absent optional fields go back to their defaults. Update and delete are
    single statements conditioned on id AND owner; when nothing matched, a
    second lookup tells "not found" (404) from "not yours" (401).
    """

    def __init__(self, kind: ResourceKind):
        self.kind = kind

    def list(self, db: Session, owner: str):
        model = self.kind.model
        return db.query(model).filter(model.user_id == owner).all()

    def create(self, db: Session, owner: str, payload: BaseModel):
        record = self.kind.model(user_id=owner, **payload.model_dump())
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    def update(self, db: Session, owner: str, record_id: str, payload: BaseModel):
        model = self.kind.model
        values = payload.model_dump()
        values["updated_at"] = utcnow()
        changed = (
            db.query(model)
            .filter(model.id == record_id, model.user_id == owner)
            .update(values, synchronize_session=False)
        )
        if not changed:
            db.rollback()
            self._raise_missing(db, record_id)
        db.commit()
        record = db.get(model, record_id, populate_existing=True)
        if record is None:
            # deleted between the update and the re-read
            raise NotFoundError(f"{self.kind.label} not found")
        return record

    def delete(self, db: Session, owner: str, record_id: str) -> None:
        model = self.kind.model
        removed = (
            db.query(model)
            .filter(model.id == record_id, model.user_id == owner)
            .delete(synchronize_session=False)
        )
        if not removed:
            db.rollback()
            self._raise_missing(db, record_id)
        db.commit()

    def _raise_missing(self, db: Session, record_id: str):
        model = self.kind.model
        if db.query(model.id).filter(model.id == record_id).first() is None:
            raise NotFoundError(f"{self.kind.label} not found")
        raise ForbiddenError("Not authorized")


INCOMES = ResourceKind("Income", "incomes", models.Income, schemas.IncomeCreate, schemas.IncomeOut)
EXPENSES = ResourceKind("Expense", "expenses", models.Expense, schemas.ExpenseCreate, schemas.ExpenseOut)
ASSETS = ResourceKind("Asset", "assets", models.Asset, schemas.AssetCreate, schemas.AssetOut)
LIABILITIES = ResourceKind("Liability", "liabilities", models.Liability, schemas.LiabilityCreate, schemas.LiabilityOut)

RESOURCE_KINDS = (INCOMES, EXPENSES, ASSETS, LIABILITIES)


# -----------------------------
# Goals
# -----------------------------
GOAL_NOT_FOUND = "Goal not found or not authorized"

# null in an update clears these; for every other field it is ignored
CLEARABLE_GOAL_FIELDS = {"description"}


def _build_contributions(items: list[schemas.ContributionIn]) -> list[GoalContribution]:
    return [
        GoalContribution(position=i, amount=c.amount, date=c.date, note=c.note)
        for i, c in enumerate(items)
    ]


def list_goals(db: Session, owner: str):
    return db.query(Goal).filter(Goal.user_id == owner).all()


def get_goal(db: Session, owner: str, goal_id: str) -> Optional[Goal]:
    # id and owner in one predicate: someone else's goal is simply not found
    return db.query(Goal).filter(Goal.id == goal_id, Goal.user_id == owner).first()


def create_goal(db: Session, owner: str, payload: schemas.GoalCreate) -> Goal:
    goal = Goal(user_id=owner, **payload.model_dump(exclude={"contributions"}))
    goal.contributions = _build_contributions(payload.contributions)
    db.add(goal)
    db.commit()
    db.refresh(goal)
    return goal


def update_goal(db: Session, owner: str, goal_id: str, payload: schemas.GoalUpdate) -> Goal:
    goal = get_goal(db, owner, goal_id)
    if goal is None:
        raise NotFoundError(GOAL_NOT_FOUND)

    changes = payload.model_dump(exclude_unset=True, exclude={"contributions"})
    for field, value in changes.items():
        if value is None and field not in CLEARABLE_GOAL_FIELDS:
            continue
        setattr(goal, field, value)

    # a supplied list replaces the stored one wholesale
    if payload.contributions is not None:
        goal.contributions = _build_contributions(payload.contributions)

    db.commit()
    db.refresh(goal)
    return goal


def update_goal_progress(db: Session, owner: str, goal_id: str, current_amount: Optional[float]) -> Goal:
    """
    Set current_amount and mark the goal completed once it reaches the target.

    Completion is one-way: lowering the amount later never clears it.
    """
    if current_amount is None:
        raise ValidationError("Current amount is required")

    changed = (
        db.query(Goal)
        .filter(Goal.id == goal_id, Goal.user_id == owner)
        .update(
            {
                Goal.current_amount: current_amount,
                Goal.is_completed: case(
                    (Goal.target_amount <= current_amount, True),
                    else_=Goal.is_completed,
                ),
                Goal.updated_at: utcnow(),
            },
            synchronize_session=False,
        )
    )
    if not changed:
        db.rollback()
        raise NotFoundError(GOAL_NOT_FOUND)
    db.commit()
    goal = db.get(Goal, goal_id, populate_existing=True)
    if goal is None:
        raise NotFoundError(GOAL_NOT_FOUND)
    return goal


def delete_goal(db: Session, owner: str, goal_id: str) -> None:
    goal = get_goal(db, owner, goal_id)
    if goal is None:
        raise NotFoundError(GOAL_NOT_FOUND)
    db.delete(goal)
    db.commit()
