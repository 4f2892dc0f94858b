"""Pydantic schemas and enums shared by the API, the services and the client."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, ClassVar

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    model_validator,
)
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Current time as naive UTC, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


UtcDateTime = Annotated[
    datetime,
    AfterValidator(to_naive_utc),
    PlainSerializer(lambda dt: dt.isoformat() + "Z", return_type=str, when_used="json"),
]


# ============ Enums ============


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class TransactionCategory(str, Enum):
    """Transaction categories; each belongs to exactly one transaction type."""

    SALARY = "salary"
    INVESTMENT = "investment"
    OTHER_INCOME = "other_income"
    FOOD = "food"
    TRANSPORTATION = "transportation"
    UTILITIES = "utilities"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    HEALTHCARE = "healthcare"
    OTHER_EXPENSE = "other_expense"


INCOME_CATEGORIES = frozenset(
    {
        TransactionCategory.SALARY,
        TransactionCategory.INVESTMENT,
        TransactionCategory.OTHER_INCOME,
    }
)
EXPENSE_CATEGORIES = frozenset(set(TransactionCategory) - INCOME_CATEGORIES)


def categories_for(transaction_type: TransactionType) -> frozenset[TransactionCategory]:
    """Categories allowed for a transaction type."""
    if transaction_type is TransactionType.INCOME:
        return INCOME_CATEGORIES
    if transaction_type is TransactionType.EXPENSE:
        return EXPENSE_CATEGORIES
    raise ValueError(f"Unknown transaction type: {transaction_type!r}")


class FocusType(str, Enum):
    FOCUS = "focus"
    BREAK = "break"


# ============ Base models ============


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class PartialModel(CamelModel):
    """Update payload: every field optional, but required columns cannot be nulled."""

    non_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        for name in self.non_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        """Only the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


class Timestamped(CamelModel):
    id: str
    created_at: UtcDateTime
    updated_at: UtcDateTime


# ============ Tasks ============


class TaskCreate(CamelModel):
    title: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: UtcDateTime | None = None


class TaskUpdate(PartialModel):
    non_nullable: ClassVar[tuple[str, ...]] = ("title", "status", "priority")

    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: UtcDateTime | None = None


class TaskRead(Timestamped, TaskCreate):
    pass


# ============ Inventory ============


class InventoryItemCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    quantity: int = Field(ge=0)
    min_quantity: int = Field(default=0, ge=0)
    price: float = Field(ge=0)
    category: str = Field(min_length=1, max_length=50)
    location: str = Field(default="", max_length=100)


class InventoryItemUpdate(PartialModel):
    non_nullable: ClassVar[tuple[str, ...]] = (
        "name",
        "quantity",
        "min_quantity",
        "price",
        "category",
        "location",
    )

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    quantity: int | None = Field(default=None, ge=0)
    min_quantity: int | None = Field(default=None, ge=0)
    price: float | None = Field(default=None, ge=0)
    # Empty strings keep the stored value
    category: str | None = Field(default=None, max_length=50)
    location: str | None = Field(default=None, max_length=100)


class InventoryItemRead(Timestamped, InventoryItemCreate):
    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_quantity


class InventoryBulkUpdate(CamelModel):
    id: str
    data: InventoryItemUpdate


class InventoryBulkDelete(CamelModel):
    ids: list[str] = Field(min_length=1)


# ============ Finance ============


class TransactionCreate(CamelModel):
    type: TransactionType
    amount: float = Field(ge=0)
    category: TransactionCategory
    description: str | None = Field(default=None, max_length=500)
    date: UtcDateTime

    @model_validator(mode="after")
    def category_matches_type(self):
        if self.category not in categories_for(self.type):
            raise ValueError(
                f"Category '{self.category.value}' is not valid for {self.type.value} transactions"
            )
        return self


class TransactionUpdate(PartialModel):
    non_nullable: ClassVar[tuple[str, ...]] = ("type", "amount", "category", "date")

    type: TransactionType | None = None
    amount: float | None = Field(default=None, ge=0)
    category: TransactionCategory | None = None
    description: str | None = Field(default=None, max_length=500)
    date: UtcDateTime | None = None


class TransactionRead(Timestamped):
    type: TransactionType
    amount: float
    category: TransactionCategory
    description: str | None = None
    date: UtcDateTime


class FinanceStats(CamelModel):
    total_income: float = 0.0
    total_expenses: float = 0.0
    balance: float = 0.0
    by_category: dict[str, float] = Field(default_factory=dict)


# ============ Focus ============


class FocusSessionCreate(CamelModel):
    duration: int = Field(gt=0, description="Planned length in minutes")
    start_time: UtcDateTime
    end_time: UtcDateTime | None = None
    type: FocusType = FocusType.FOCUS


class FocusSessionUpdate(PartialModel):
    non_nullable: ClassVar[tuple[str, ...]] = ("duration", "start_time", "type", "completed")

    duration: int | None = Field(default=None, gt=0)
    start_time: UtcDateTime | None = None
    end_time: UtcDateTime | None = None
    type: FocusType | None = None
    completed: bool | None = None


class FocusSessionRead(Timestamped):
    duration: int
    start_time: UtcDateTime
    end_time: UtcDateTime | None = None
    type: FocusType
    completed: bool = False


class FocusPresetCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    duration: int = Field(gt=0)
    type: FocusType = FocusType.FOCUS


class FocusPresetUpdate(PartialModel):
    non_nullable: ClassVar[tuple[str, ...]] = ("name", "duration", "type")

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    duration: int | None = Field(default=None, gt=0)
    type: FocusType | None = None


class FocusPresetRead(Timestamped, FocusPresetCreate):
    pass


class FocusStats(CamelModel):
    total_sessions: int = 0
    total_focus_time: int = 0
    total_break_time: int = 0
    completed_sessions: int = 0
    by_type: dict[str, int] = Field(default_factory=dict)


# ============ Shared ============


class DateRange(CamelModel):
    start_date: UtcDateTime
    end_date: UtcDateTime

    @model_validator(mode="after")
    def ordered(self):
        if self.start_date > self.end_date:
            raise ValueError("startDate must not be after endDate")
        return self


class SuccessResponse(BaseModel):
    success: bool = True
