# finadvisor/models.py
import math
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return uuid.uuid4().hex


class TimestampMixin:
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class User(TimestampMixin, Base):
    __tablename__ = "users"
    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash
    full_name = Column(String, nullable=False)
    phone_number = Column(String)
    date_of_birth = Column(DateTime)


# Owned records keep user_id as a plain string: demo identities are never
# persisted, so there is nothing for a foreign key to point at.

class Income(TimestampMixin, Base):
    __tablename__ = "incomes"
    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String, index=True, nullable=False)
    source = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    frequency = Column(String, nullable=False, default="monthly")
    date = Column(DateTime, nullable=False, default=utcnow)
    description = Column(Text)
    category = Column(String, nullable=False, default="Employment")
    is_recurring = Column(Boolean, nullable=False, default=True)


class Expense(TimestampMixin, Base):
    __tablename__ = "expenses"
    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String, index=True, nullable=False)
    title = Column(String, nullable=False)
    category = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    frequency = Column(String, nullable=False, default="monthly")
    duration_months = Column(Integer)
    is_recurring = Column(Boolean, nullable=False, default=True)
    date = Column(DateTime, nullable=False, default=utcnow)
    description = Column(Text)


class Asset(TimestampMixin, Base):
    __tablename__ = "assets"
    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String, index=True, nullable=False)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    value = Column(Float, nullable=False)
    purchase_price = Column(Float, nullable=False, default=0.0)
    acquisition_date = Column(DateTime, nullable=False, default=utcnow)
    location = Column(String)
    description = Column(Text)
    is_appreciating = Column(Boolean, nullable=False, default=True)
    appreciation_rate = Column(Float, nullable=False, default=0.0)


class Liability(TimestampMixin, Base):
    __tablename__ = "liabilities"
    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String, index=True, nullable=False)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    interest_rate = Column(Float, nullable=False)
    start_date = Column(DateTime, nullable=False)
    due_date = Column(DateTime, nullable=False)
    lender = Column(String)
    description = Column(Text)
    is_fixed = Column(Boolean, nullable=False, default=True)
    minimum_payment = Column(Float)
    remaining_payments = Column(Integer)


class Goal(TimestampMixin, Base):
    __tablename__ = "goals"
    id = Column(String(32), primary_key=True, default=new_id)
    user_id = Column(String, index=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text)
    target_amount = Column(Float, nullable=False)
    current_amount = Column(Float, nullable=False, default=0.0)
    target_date = Column(DateTime, nullable=False)
    start_date = Column(DateTime, nullable=False, default=utcnow)
    category = Column(String, nullable=False, default="Other")
    priority = Column(Integer, nullable=False, default=2)  # 1 high, 2 medium, 3 low
    is_completed = Column(Boolean, nullable=False, default=False)

    contributions = relationship(
        "GoalContribution",
        order_by="GoalContribution.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def progress_percentage(self) -> float:
        if not self.target_amount or self.target_amount <= 0:
            return 0
        return (self.current_amount or 0) / self.target_amount * 100

    @property
    def days_remaining(self) -> int:
        diff = self.target_date - utcnow()
        return math.ceil(diff.total_seconds() / 86400)

    @property
    def is_overdue(self) -> bool:
        return not self.is_completed and self.days_remaining < 0


class GoalContribution(Base):
    __tablename__ = "goal_contributions"
    id = Column(Integer, primary_key=True, index=True)
    goal_id = Column(String(32), ForeignKey("goals.id", ondelete="CASCADE"), index=True, nullable=False)
    position = Column(Integer, nullable=False)
    amount = Column(Float)
    date = Column(DateTime, nullable=False, default=utcnow)
    note = Column(String)
