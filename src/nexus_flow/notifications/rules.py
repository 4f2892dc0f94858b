"""Alert rules: pure functions from domain snapshots to notification drafts.

Each rule returns drafts keyed by the condition that triggered them, e.g.
``task-overdue-<id>`` or ``finance-critical-2024-05``. The store decides
whether a draft becomes a new notification.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable

from nexus_flow.schemas import (
    FocusSessionRead,
    TaskRead,
    TaskStatus,
    TransactionRead,
    TransactionType,
)

SECONDS_PER_DAY = 24 * 3600


class NotificationType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class NotificationCategory(str, Enum):
    TASK = "task"
    FINANCE = "finance"
    INVENTORY = "inventory"
    FOCUS = "focus"


@dataclass
class NotificationThresholds:
    """Configurable thresholds for alert triggers."""

    # Tasks due within this many days raise a warning
    due_soon_days: int = 2

    # Monthly expense/income ratios
    expense_warning_ratio: float = 0.75
    expense_critical_ratio: float = 0.9

    # Single expense above this share of monthly income
    large_expense_ratio: float = 0.1

    # Focus session ending window
    focus_ending_minutes: int = 5


@dataclass(frozen=True)
class NotificationDraft:
    """A notification before the store assigns id, timestamp and read state."""

    key: str
    title: str
    message: str
    type: NotificationType
    category: NotificationCategory
    link: str | None = None


def month_key(moment: datetime) -> str:
    return f"{moment.year:04d}-{moment.month:02d}"


def task_alerts(
    tasks: Iterable[TaskRead],
    now: datetime,
    thresholds: NotificationThresholds | None = None,
) -> list[NotificationDraft]:
    """Overdue and due-soon alerts for unfinished tasks."""
    thresholds = thresholds or NotificationThresholds()
    drafts: list[NotificationDraft] = []

    for task in tasks:
        if task.due_date is None or task.status is TaskStatus.DONE:
            continue

        seconds_left = (task.due_date - now).total_seconds()
        days_left = math.ceil(seconds_left / SECONDS_PER_DAY)

        if seconds_left < 0:
            drafts.append(
                NotificationDraft(
                    key=f"task-overdue-{task.id}",
                    title="Task Overdue",
                    message=f'The task "{task.title}" is overdue by {abs(days_left)} days',
                    type=NotificationType.CRITICAL,
                    category=NotificationCategory.TASK,
                    link="/tasks",
                )
            )
        elif 0 < days_left <= thresholds.due_soon_days:
            drafts.append(
                NotificationDraft(
                    key=f"task-due-soon-{task.id}",
                    title="Task Due Soon",
                    message=f'The task "{task.title}" is due in {days_left} days',
                    type=NotificationType.WARNING,
                    category=NotificationCategory.TASK,
                    link="/tasks",
                )
            )

    return drafts


def finance_alerts(
    transactions: Iterable[TransactionRead],
    now: datetime,
    thresholds: NotificationThresholds | None = None,
) -> list[NotificationDraft]:
    """Monthly spending ratio alerts and the latest large expense.

    Only transactions in the calendar month of ``now`` count. Without income
    in that month no alert is raised.
    """
    thresholds = thresholds or NotificationThresholds()
    current = [t for t in transactions if (t.date.year, t.date.month) == (now.year, now.month)]

    income = sum(t.amount for t in current if t.type is TransactionType.INCOME)
    expenses = sum(t.amount for t in current if t.type is TransactionType.EXPENSE)
    if income <= 0:
        return []

    drafts: list[NotificationDraft] = []
    month = month_key(now)
    ratio = expenses / income

    if ratio > thresholds.expense_critical_ratio:
        drafts.append(
            NotificationDraft(
                key=f"finance-critical-{month}",
                title="Critical Financial Alert",
                message=(
                    f"Your expenses ({expenses:.2f}) are {ratio * 100:.0f}% "
                    f"of your income ({income:.2f})"
                ),
                type=NotificationType.CRITICAL,
                category=NotificationCategory.FINANCE,
                link="/finances",
            )
        )
    elif ratio > thresholds.expense_warning_ratio:
        drafts.append(
            NotificationDraft(
                key=f"finance-warning-{month}",
                title="Financial Warning",
                message=f"Your expenses are reaching {ratio * 100:.0f}% of your income",
                type=NotificationType.WARNING,
                category=NotificationCategory.FINANCE,
                link="/finances",
            )
        )

    large = [
        t
        for t in current
        if t.type is TransactionType.EXPENSE and t.amount > income * thresholds.large_expense_ratio
    ]
    if large:
        latest = max(large, key=lambda t: (t.date, t.created_at))
        drafts.append(
            NotificationDraft(
                key=f"finance-large-expense-{latest.id}",
                title="Large Expense Added",
                message=f"A large expense of {latest.amount:.2f} was added for {latest.category.value}",
                type=NotificationType.INFO,
                category=NotificationCategory.FINANCE,
                link="/finances",
            )
        )

    return drafts


def focus_alerts(
    session: FocusSessionRead | None,
    time_left: int,
    is_active: bool = True,
    thresholds: NotificationThresholds | None = None,
) -> list[NotificationDraft]:
    """Warn when an active session is about to end.

    ``time_left`` is the remaining time in seconds as tracked by the timer.
    """
    thresholds = thresholds or NotificationThresholds()
    if session is None or session.completed or not is_active:
        return []

    if not 0 < time_left <= thresholds.focus_ending_minutes * 60:
        return []

    minutes = math.ceil(time_left / 60)
    return [
        NotificationDraft(
            key=f"focus-ending-{session.id}",
            title="Focus Time Ending Soon",
            message=f"Your {session.type.value} session will end in {minutes} minutes",
            type=NotificationType.WARNING,
            category=NotificationCategory.FOCUS,
            link="/focus",
        )
    ]


def focus_complete(session: FocusSessionRead) -> NotificationDraft:
    """Info notice emitted when the timer runs out."""
    return NotificationDraft(
        key=f"focus-complete-{session.id}",
        title="Focus Session Complete",
        message=f"Your {session.type.value} session of {session.duration} minutes is complete",
        type=NotificationType.INFO,
        category=NotificationCategory.FOCUS,
        link="/focus",
    )
