"""
Task list controller: the board's root view state.

Holds the session's task list, kept in sync one-way from the document
store through a live subscription. User actions go out as one-shot store
calls; the list only changes when the next snapshot arrives.
"""
import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from .form import CreateTaskForm
from .schema import Task, TaskStatus
from .store import DocumentStore, Snapshot

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "tasks"


def partition(tasks: List[Task]) -> Dict[TaskStatus, List[Task]]:
    """Split tasks into one list per status, keeping their order."""
    return {status: [t for t in tasks if t.status == status] for status in TaskStatus}


class TaskBoard:
    """Mirrors a task collection and issues create/update/delete calls."""

    def __init__(
        self,
        store: DocumentStore,
        collection: str = DEFAULT_COLLECTION,
        on_change: Optional[Callable[[List[Task]], None]] = None,
    ):
        self.store = store
        self.collection = collection
        self.on_change = on_change
        self.tasks: List[Task] = []
        self.is_modal_open = False
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._lock = threading.Lock()

    # ── Subscription lifecycle ───────────────────────────────────────────────

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    def mount(self) -> None:
        """Open the store subscription (once)."""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self.store.subscribe(self.collection, self._on_snapshot)

    def unmount(self) -> None:
        """Release the store subscription."""
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def __enter__(self) -> "TaskBoard":
        self.mount()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unmount()

    def _on_snapshot(self, snapshot: Snapshot) -> None:
        tasks = [Task.from_document(doc.id, doc.to_dict()) for doc in snapshot.docs]
        with self._lock:
            self.tasks = tasks
        if self.on_change:
            self.on_change(tasks)

    # ── Operations ───────────────────────────────────────────────────────────

    def create(self, task_data: Dict[str, Any]) -> str:
        """Add a new task document; the list updates on the next snapshot."""
        task_id = self.store.add(self.collection, dict(task_data))
        logger.info(f"Created task {task_id}: {task_data.get('title', '')}")
        return task_id

    def change_status(self, task_id: str, new_status: TaskStatus) -> None:
        """Update only the status field of a task."""
        status = new_status.value if isinstance(new_status, TaskStatus) else new_status
        self.store.update(self.collection, task_id, {"status": status})
        logger.info(f"Task {task_id} moved to {status}")

    def edit(self, task_id: str) -> None:
        # No edit flow yet; records intent only.
        logger.info(f"Editing task with id: {task_id}")

    def delete(self, task_id: str) -> None:
        self.store.delete(self.collection, task_id)
        logger.info(f"Deleted task {task_id}")

    # ── Columns ──────────────────────────────────────────────────────────────

    def column(self, status: TaskStatus) -> List[Task]:
        """Tasks with the given status, in snapshot order."""
        with self._lock:
            tasks = self.tasks
        return [t for t in tasks if t.status == status]

    def columns(self) -> Dict[TaskStatus, List[Task]]:
        with self._lock:
            tasks = self.tasks
        return partition(tasks)

    # ── Create Task modal ────────────────────────────────────────────────────

    def open_create_modal(self) -> None:
        self.is_modal_open = True

    def close_create_modal(self) -> None:
        self.is_modal_open = False

    def create_form(self) -> CreateTaskForm:
        """A form wired to create() that closes the modal after submitting."""
        return CreateTaskForm(on_submit=self.create, on_close=self.close_create_modal)
