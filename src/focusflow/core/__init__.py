"""Functional core - pure business logic with no I/O."""

from .tasks import (
    ALL_PRIORITIES,
    NO_COLOR,
    Priority,
    Task,
    TaskDraft,
    color_for,
    format_created_date,
    format_due_date,
    shorthand_for,
)
from .calendar import days_in_month, select_month, day_brief
from .user import AppUser

__all__ = [
    # Tasks
    "ALL_PRIORITIES",
    "NO_COLOR",
    "Priority",
    "Task",
    "TaskDraft",
    "color_for",
    "format_created_date",
    "format_due_date",
    "shorthand_for",
    # Calendar
    "days_in_month",
    "select_month",
    "day_brief",
    # Users
    "AppUser",
]
