"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from enum import Enum

NO_COLOR = "none"


class Priority(Enum):
    """Task priority. Values are the strings stored in the `priority` column."""

    P1 = "Priority 1"
    P2 = "Priority 2"
    P3 = "Priority 3"
    P4 = "Priority 4"
    UNSET = ""

    @classmethod
    def from_wire(cls, value: str | None) -> "Priority":
        """Decode a stored priority string. Anything unrecognised is UNSET."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNSET

    @classmethod
    def from_level(cls, level: int | None) -> "Priority":
        """1..4 -> P1..P4, anything else -> UNSET."""
        if _is_int(level) and 1 <= level <= len(ALL_PRIORITIES):
            return ALL_PRIORITIES[level - 1]
        return cls.UNSET

    def to_wire(self) -> str:
        return self.value

    @property
    def shorthand(self) -> str:
        return _SHORTHAND[self]

    @property
    def color(self) -> str:
        return _COLORS[self]


# Color tokens double as click/ANSI color names
_COLORS = {
    Priority.P1: "red",
    Priority.P2: "yellow",
    Priority.P3: "blue",
    Priority.P4: "bright_black",
    Priority.UNSET: NO_COLOR,
}

_SHORTHAND = {
    Priority.P1: "P1",
    Priority.P2: "P2",
    Priority.P3: "P3",
    Priority.P4: "P4",
    Priority.UNSET: "",
}

ALL_PRIORITIES = [Priority.P1, Priority.P2, Priority.P3, Priority.P4]


def _as_priority(priority: "Priority | str | None") -> Priority:
    if isinstance(priority, Priority):
        return priority
    return Priority.from_wire(priority)


def color_for(priority: "Priority | str | None") -> str:
    """Color token for a priority. Unknown or empty priorities get NO_COLOR."""
    return _as_priority(priority).color


def shorthand_for(priority: "Priority | str | None") -> str:
    """Shorthand label ("P1".."P4"), or "" for anything else."""
    return _as_priority(priority).shorthand


def format_due_date(timestamp: int | None, tz: tzinfo = timezone.utc) -> str:
    """
    Format a Unix timestamp (seconds) as "dd-MM".

    Returns "" for None, zero or negative timestamps. The year is dropped.
    """
    if not timestamp or timestamp <= 0:
        return ""
    return datetime.fromtimestamp(timestamp, tz).strftime("%d-%m")


# Client-formatted timestamp found on older rows
LEGACY_CREATED_FORMAT = "%d/%m/%Y, %I:%M:%S %p"


def format_created_date(created_at: str | None, tz: tzinfo = timezone.utc) -> str:
    """
    Format a stored `created_at` value as "dd-MM".

    Accepts ISO 8601 timestamps and the legacy "dd/MM/yyyy, hh:mm:ss AM" form.
    Naive values are taken as UTC. Returns "" if the value cannot be parsed.
    """
    if not created_at:
        return ""

    text = created_at.strip().replace("\u202f", " ")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            parsed = datetime.strptime(text, LEGACY_CREATED_FORMAT)
        except ValueError:
            return ""

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(tz).strftime("%d-%m")


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class Task:
    """A stored to-do item."""

    id: int
    created_at: str
    title: str
    description: str
    priority: Priority
    due_date: int | None
    owner_id: str

    @property
    def has_due_date(self) -> bool:
        return bool(self.due_date and self.due_date > 0)

    @property
    def shorthand(self) -> str:
        return self.priority.shorthand

    @property
    def color(self) -> str:
        return self.priority.color

    def due_label(self, tz: tzinfo = timezone.utc) -> str:
        return format_due_date(self.due_date, tz)

    def created_label(self, tz: tzinfo = timezone.utc) -> str:
        return format_created_date(self.created_at, tz)

    @classmethod
    def from_api(cls, data: dict) -> "Task":
        """
        Create Task from a `todos` row.

        Raises ValueError if the row does not have the expected shape.
        `duedate` may be missing or null; every other column must be present.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a task object, got {type(data).__name__}")

        missing = [
            key
            for key in ("id", "created_at", "task", "task_description", "priority", "user_uid")
            if key not in data
        ]
        if missing:
            raise ValueError(f"Task row missing fields: {', '.join(missing)}")

        if not _is_int(data["id"]):
            raise ValueError(f"Task id must be an integer, got {data['id']!r}")
        for key in ("created_at", "task", "task_description", "user_uid"):
            if not isinstance(data[key], str):
                raise ValueError(f"Task field {key!r} must be a string, got {data[key]!r}")
        if data["priority"] is not None and not isinstance(data["priority"], str):
            raise ValueError(f"Task priority must be a string, got {data['priority']!r}")

        due = data.get("duedate")
        if due is not None and not _is_int(due):
            raise ValueError(f"Task duedate must be an integer, got {due!r}")

        return cls(
            id=data["id"],
            created_at=data["created_at"],
            title=data["task"],
            description=data["task_description"],
            priority=Priority.from_wire(data["priority"]),
            due_date=due,
            owner_id=data["user_uid"],
        )


@dataclass
class TaskDraft:
    """Everything needed to create a task except the server-assigned fields."""

    title: str
    owner_id: str
    description: str = ""
    priority: Priority = Priority.UNSET
    due_date: int | None = None

    def __post_init__(self):
        if not self.title or not self.title.strip():
            raise ValueError("Task title must not be empty")
        if not self.owner_id:
            raise ValueError("Task owner must not be empty")

    def to_api(self) -> dict:
        """Insert payload for the `todos` table."""
        return {
            "task": self.title,
            "task_description": self.description,
            "user_uid": self.owner_id,
            "priority": self.priority.to_wire(),
            "duedate": self.due_date or 0,
        }


def filter_by_priority(tasks: list[Task], priority: Priority) -> list[Task]:
    """Filter tasks to a single priority."""
    return [t for t in tasks if t.priority is priority]


def filter_due_on(tasks: list[Task], day, tz: tzinfo = timezone.utc) -> list[Task]:
    """Filter to tasks whose due date falls on `day` in `tz`."""
    return [
        t
        for t in tasks
        if t.has_due_date and datetime.fromtimestamp(t.due_date, tz).date() == day
    ]
