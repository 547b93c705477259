# finadvisor/schemas.py
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, PlainSerializer, constr
from pydantic.alias_generators import to_camel

from .models import utcnow


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _iso_utc(value: datetime) -> str:
    return value.replace(tzinfo=timezone.utc).isoformat().replace("+00:00", "Z")


def _canonical_email(value: str) -> str:
    return value.strip().lower()


# Stored timestamps are naive UTC; aware input is converted on the way in
# and JSON output carries an explicit Z.
UTCDateTime = Annotated[
    datetime,
    AfterValidator(_as_naive_utc),
    PlainSerializer(_iso_utc, return_type=str, when_used="json"),
]

# Emails are stored and looked up lowercased.
CanonicalEmail = Annotated[EmailStr, AfterValidator(_canonical_email)]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        from_attributes=True,
    )


# -----------------------------
# Enumerations
# -----------------------------
class Frequency(str, Enum):
    ONE_TIME = "one-time"
    DAILY = "daily"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"


class IncomeCategory(str, Enum):
    EMPLOYMENT = "Employment"
    INVESTMENTS = "Investments"
    SIDE_GIG = "Side Gig"
    RENTAL = "Rental"
    GIFTS = "Gifts"
    OTHER = "Other"


class LiabilityType(str, Enum):
    CREDIT_CARD = "Credit Card"
    MORTGAGE = "Mortgage"
    AUTO_LOAN = "Auto Loan"
    STUDENT_LOAN = "Student Loan"
    PERSONAL_LOAN = "Personal Loan"
    MEDICAL_DEBT = "Medical Debt"
    OTHER = "Other"


class GoalCategory(str, Enum):
    RETIREMENT = "Retirement"
    EDUCATION = "Education"
    HOME = "Home"
    CAR = "Car"
    TRAVEL = "Travel"
    EMERGENCY_FUND = "Emergency Fund"
    DEBT_PAYOFF = "Debt Payoff"
    INVESTMENT = "Investment"
    OTHER = "Other"


Priority = Literal[1, 2, 3]  # 1 high, 2 medium, 3 low

RequiredText = constr(strip_whitespace=True, min_length=1)


# -----------------------------
# User Schemas
# -----------------------------
class RegisterRequest(CamelModel):
    email: CanonicalEmail
    password: constr(min_length=6)
    full_name: constr(strip_whitespace=True, min_length=1, max_length=100)
    phone_number: Optional[str] = None
    date_of_birth: Optional[UTCDateTime] = None


class LoginRequest(CamelModel):
    # both optional so a missing field gets the friendly 400 from the route
    email: Optional[Annotated[str, AfterValidator(_canonical_email)]] = None
    password: Optional[str] = None


class UserSummary(CamelModel):
    id: str
    email: str
    full_name: str


class AuthResponse(CamelModel):
    token: str
    user: UserSummary


class UserProfile(UserSummary):
    phone_number: Optional[str] = None
    date_of_birth: Optional[UTCDateTime] = None
    created_at: UTCDateTime


# -----------------------------
# Shared output fields
# -----------------------------
class OwnedOut(CamelModel):
    id: str
    user_id: str
    created_at: UTCDateTime
    updated_at: UTCDateTime


# -----------------------------
# Income Schemas
# -----------------------------
class IncomeCreate(CamelModel):
    source: RequiredText
    amount: float = Field(..., ge=0)
    frequency: Frequency = Frequency.MONTHLY
    date: UTCDateTime = Field(default_factory=utcnow)
    description: Optional[str] = None
    category: IncomeCategory = IncomeCategory.EMPLOYMENT
    is_recurring: bool = True


class IncomeOut(IncomeCreate, OwnedOut):
    pass


# -----------------------------
# Expense Schemas
# -----------------------------
class ExpenseCreate(CamelModel):
    title: RequiredText
    category: RequiredText
    amount: float = Field(..., ge=0)
    frequency: Frequency = Frequency.MONTHLY
    duration_months: Optional[int] = Field(None, ge=0)
    is_recurring: bool = True
    date: UTCDateTime = Field(default_factory=utcnow)
    description: Optional[str] = None


class ExpenseOut(ExpenseCreate, OwnedOut):
    pass


# -----------------------------
# Asset Schemas
# -----------------------------
class AssetCreate(CamelModel):
    name: RequiredText
    type: RequiredText
    value: float
    purchase_price: float = 0.0
    acquisition_date: UTCDateTime = Field(default_factory=utcnow)
    location: Optional[str] = None
    description: Optional[str] = None
    is_appreciating: bool = True
    appreciation_rate: float = 0.0


class AssetOut(AssetCreate, OwnedOut):
    pass


# -----------------------------
# Liability Schemas
# -----------------------------
class LiabilityCreate(CamelModel):
    name: RequiredText
    type: LiabilityType
    amount: float
    interest_rate: float = Field(..., ge=0)
    start_date: UTCDateTime
    due_date: UTCDateTime
    lender: Optional[str] = None
    description: Optional[str] = None
    is_fixed: bool = True
    minimum_payment: Optional[float] = Field(None, ge=0)
    remaining_payments: Optional[int] = Field(None, ge=0)


class LiabilityOut(LiabilityCreate, OwnedOut):
    pass


# -----------------------------
# Goal Schemas
# -----------------------------
class ContributionIn(CamelModel):
    amount: Optional[float] = None
    date: UTCDateTime = Field(default_factory=utcnow)
    note: Optional[str] = None


class ContributionOut(CamelModel):
    amount: Optional[float] = None
    date: UTCDateTime
    note: Optional[str] = None


class GoalCreate(CamelModel):
    name: RequiredText
    description: Optional[str] = None
    target_amount: float = Field(..., ge=0)
    current_amount: float = Field(0.0, ge=0)
    target_date: UTCDateTime
    start_date: UTCDateTime = Field(default_factory=utcnow)
    category: GoalCategory = GoalCategory.OTHER
    priority: Priority = 2
    is_completed: bool = False
    contributions: list[ContributionIn] = Field(default_factory=list)


class GoalUpdate(CamelModel):
    """Every field optional. Null is ignored, except on description where it clears the text."""
    name: Optional[RequiredText] = None
    description: Optional[str] = None
    target_amount: Optional[float] = Field(None, ge=0)
    current_amount: Optional[float] = Field(None, ge=0)
    target_date: Optional[UTCDateTime] = None
    start_date: Optional[UTCDateTime] = None
    category: Optional[GoalCategory] = None
    priority: Optional[Priority] = None
    is_completed: Optional[bool] = None
    contributions: Optional[list[ContributionIn]] = None


class GoalProgress(CamelModel):
    current_amount: Optional[float] = Field(None, ge=0)


class GoalOut(OwnedOut):
    name: str
    description: Optional[str] = None
    target_amount: float
    current_amount: float
    target_date: UTCDateTime
    start_date: UTCDateTime
    category: GoalCategory
    priority: int
    is_completed: bool
    contributions: list[ContributionOut] = Field(default_factory=list)
    progress_percentage: float
    days_remaining: int
    is_overdue: bool
