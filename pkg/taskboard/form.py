"""
Create Task form.

Collects the five task fields and hands them to the caller on submit.
The form never talks to the store itself.
"""
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from .schema import TaskStatus, PRIORITIES, DEFAULT_PRIORITY, new_task_fields, parse_date

logger = logging.getLogger(__name__)


def _is_calendar_date(value: str) -> bool:
    return parse_date(value) is not None


class CreateTaskForm:
    """Modal form state plus the required-field gate."""

    def __init__(
        self,
        on_submit: Callable[[Dict[str, Any]], Any],
        on_close: Optional[Callable[[], None]] = None,
    ):
        self.on_submit = on_submit
        self.on_close = on_close
        self.title = ""
        self.description = ""
        self.date = ""
        self.status = TaskStatus.TODO.value
        self.priority = DEFAULT_PRIORITY

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        on_submit: Callable[[Dict[str, Any]], Any],
        on_close: Optional[Callable[[], None]] = None,
    ) -> "CreateTaskForm":
        """Fill a form from request form data or a JSON body."""
        form = cls(on_submit, on_close)
        form.title = str(data.get("title") or "")
        form.description = str(data.get("description") or "")
        form.date = str(data.get("date") or "").strip()
        form.status = str(data.get("status") or TaskStatus.TODO.value)
        form.priority = str(data.get("priority") or DEFAULT_PRIORITY)
        return form

    def missing_fields(self) -> List[str]:
        """Required fields that are empty or out of range."""
        missing = []
        if not self.title.strip():
            missing.append("title")
        if not _is_calendar_date(self.date):
            missing.append("date")
        if not TaskStatus.is_valid(self.status):
            missing.append("status")
        if self.priority not in PRIORITIES:
            missing.append("priority")
        return missing

    def fields(self) -> Dict[str, Any]:
        return new_task_fields(
            title=self.title,
            description=self.description,
            date=self.date,
            status=self.status,
            priority=self.priority,
        )

    def submit(self) -> bool:
        """Emit one create request if the required fields are present."""
        missing = self.missing_fields()
        if missing:
            logger.warning(f"Create Task form rejected, missing: {', '.join(missing)}")
            return False
        self.on_submit(self.fields())
        if self.on_close:
            self.on_close()
        return True
