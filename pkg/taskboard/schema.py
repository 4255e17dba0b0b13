"""
Task schema.

Status columns:
  TODO → IN PROGRESS → COMPLETED

Any status may move to any other status; no workflow order is enforced.
"""
import re
from enum import Enum
from dataclasses import dataclass
from datetime import date as Date, datetime
from typing import Dict, Any, Optional


class TaskStatus(Enum):
    """Board columns, in display order."""
    TODO = "TODO"
    IN_PROGRESS = "IN PROGRESS"
    COMPLETED = "COMPLETED"

    @classmethod
    def from_str(cls, value: str) -> "TaskStatus":
        text = (value or "").strip().upper()
        for status in cls:
            if text == status.value or text == status.name:
                return status
        return cls.TODO

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return any(value == status.value for status in cls)


PRIORITIES = ("Low", "Medium", "High")
DEFAULT_PRIORITY = "Medium"

ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_date(value: Any) -> Optional[Date]:
    """Parse a YYYY-MM-DD calendar date (the native date input format), or None."""
    if not isinstance(value, str) or not ISO_DATE_RE.fullmatch(value):
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


@dataclass
class Task:
    """A task as held by the board (read-only copy of a store document)."""

    id: str
    title: str
    description: str = ""
    date: str = ""                  # ISO calendar date, e.g. "2024-01-01"
    status: TaskStatus = TaskStatus.TODO
    priority: str = DEFAULT_PRIORITY  # free text; only Low/Medium/High are offered

    def to_fields(self) -> Dict[str, Any]:
        """Stored fields, without the store-owned id."""
        return {
            "title": self.title,
            "description": self.description,
            "date": self.date,
            "status": self.status.value,
            "priority": self.priority,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, **self.to_fields()}

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Task":
        """Build a Task from a store document id and its fields."""
        return cls(
            id=doc_id,
            title=str(data.get("title", "")),
            description=str(data.get("description") or ""),
            date=str(data.get("date") or ""),
            status=TaskStatus.from_str(data.get("status", "")),
            priority=str(data.get("priority") or DEFAULT_PRIORITY),
        )


def new_task_fields(
    title: str,
    date: str,
    description: str = "",
    status: TaskStatus = TaskStatus.TODO,
    priority: str = DEFAULT_PRIORITY,
) -> Dict[str, Any]:
    """Create payload: the five stored fields, no id."""
    return {
        "title": title,
        "description": description,
        "date": date,
        "status": status.value if isinstance(status, TaskStatus) else status,
        "priority": priority,
    }
