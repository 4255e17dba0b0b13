"""
Column and row view models for the board page.

Rows and columns are stateless; they are rebuilt from the task list on
every render.
"""
from dataclasses import dataclass, field
from typing import Dict, List

from .schema import Task, TaskStatus, parse_date

PRIORITY_COLORS = {
    "high": "red",
    "medium": "yellow",
    "low": "green",
}
NEUTRAL_COLOR = "gray"


def priority_color(priority: str) -> str:
    """Badge color for a priority (case-insensitive, gray when unknown)."""
    return PRIORITY_COLORS.get((priority or "").lower(), NEUTRAL_COLOR)


def priority_label(priority: str) -> str:
    return (priority or "").upper()


# Server-side fallback text; the page script re-renders <time> elements
# with the browser locale.
DEFAULT_DATE_FORMAT = "%Y-%m-%d"


def format_date(value: str, fmt: str = DEFAULT_DATE_FORMAT) -> str:
    """Formatted calendar date; values that are not YYYY-MM-DD pass through."""
    parsed = parse_date(value)
    if parsed is None:
        return value or ""
    return parsed.strftime(fmt)


@dataclass
class TaskRow:
    id: str
    title: str
    description: str
    date: str
    date_label: str
    status: str
    badge_label: str
    badge_color: str

    @classmethod
    def from_task(cls, task: Task, date_format: str = DEFAULT_DATE_FORMAT) -> "TaskRow":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            date=task.date if parse_date(task.date) else "",
            date_label=format_date(task.date, date_format),
            status=task.status.value,
            badge_label=priority_label(task.priority),
            badge_color=priority_color(task.priority),
        )


@dataclass
class Column:
    title: str
    rows: List[TaskRow] = field(default_factory=list)


def build_columns(columns: Dict[TaskStatus, List[Task]], date_format: str = DEFAULT_DATE_FORMAT) -> List[Column]:
    """One Column per status, in status order."""
    return [
        Column(
            title=status.value,
            rows=[TaskRow.from_task(t, date_format) for t in columns.get(status, [])],
        )
        for status in TaskStatus
    ]
