"""
Document store backend (SQLite).

Collections of JSON documents keyed by a store-generated id, with live
snapshot subscriptions. Every write pushes a full snapshot of the written
collection to its subscribers.
"""
import json
import logging
import sqlite3
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .events import SnapshotListeners

logger = logging.getLogger(__name__)

DEFAULT_DB = Path.home() / ".local" / "share" / "taskboard" / "taskboard.db"


class StoreError(Exception):
    """Raised when the document store cannot complete an operation."""
    pass


class DocumentNotFound(StoreError):
    """Raised when updating a document that does not exist."""
    pass


@dataclass
class DocumentSnapshot:
    """One document as seen in a snapshot."""
    id: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.data)


@dataclass
class Snapshot:
    """Full contents of a collection at one point in time (insertion order)."""
    collection: str
    docs: List[DocumentSnapshot] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.docs)

    @property
    def empty(self) -> bool:
        return not self.docs


def _connect(db_path: str) -> sqlite3.Connection:
    """Open a connection in WAL mode."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


def make_doc_id() -> str:
    """Opaque 20-char document id."""
    return uuid.uuid4().hex[:20]


class DocumentStore:
    """SQLite-backed document store with snapshot subscriptions."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize store and create tables if needed."""
        if db_path is None:
            db_path = str(DEFAULT_DB)
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self.listeners = SnapshotListeners()
        # Serializes writes with their notifications so listeners see
        # snapshots in write order.
        self._write_lock = threading.RLock()
        self._init_schema()

    def _init_schema(self):
        """Create tables if they don't exist."""
        try:
            with _connect(self.db_path) as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS documents (
                        seq INTEGER PRIMARY KEY AUTOINCREMENT,
                        collection TEXT NOT NULL,
                        doc_id TEXT NOT NULL,
                        data TEXT NOT NULL,  -- JSON object
                        created_at TEXT NOT NULL,
                        updated_at TEXT NOT NULL,
                        UNIQUE (collection, doc_id)
                    )
                """)
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_documents_collection ON documents(collection, seq)"
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Cannot initialize store at {self.db_path}: {e}") from e

    # ── Reads ────────────────────────────────────────────────────────────────

    def snapshot(self, collection: str) -> Snapshot:
        """Read the whole collection in insertion order."""
        try:
            with _connect(self.db_path) as conn:
                rows = conn.execute(
                    "SELECT doc_id, data FROM documents WHERE collection = ? ORDER BY seq ASC",
                    (collection,)
                ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Error reading collection {collection}: {e}") from e
        return Snapshot(
            collection=collection,
            docs=[DocumentSnapshot(id=row["doc_id"], data=json.loads(row["data"])) for row in rows],
        )

    def get(self, collection: str, doc_id: str) -> Optional[DocumentSnapshot]:
        """Retrieve a single document, or None."""
        try:
            with _connect(self.db_path) as conn:
                row = conn.execute(
                    "SELECT doc_id, data FROM documents WHERE collection = ? AND doc_id = ?",
                    (collection, doc_id)
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Error retrieving {collection}/{doc_id}: {e}") from e
        if not row:
            return None
        return DocumentSnapshot(id=row["doc_id"], data=json.loads(row["data"]))

    # ── Subscriptions ────────────────────────────────────────────────────────

    def subscribe(self, collection: str, on_change: Callable[[Snapshot], None]) -> Callable[[], None]:
        """
        Listen to a collection.

        The current snapshot is delivered immediately, then a new one after
        every write to the collection. Returns the unsubscribe handle.
        """
        with self._write_lock:
            unsubscribe = self.listeners.subscribe(collection, on_change)
            try:
                current = self.snapshot(collection)
            except StoreError:
                unsubscribe()
                raise
            try:
                on_change(current)
            except Exception:
                logger.exception(f"Error in initial '{collection}' snapshot listener")
        return unsubscribe

    def _notify(self, collection: str) -> None:
        """Push a fresh snapshot after a committed write; never fails the write."""
        if not self.listeners.count(collection):
            return
        try:
            current = self.snapshot(collection)
        except StoreError as e:
            logger.error(f"Write committed but '{collection}' snapshot not delivered: {e}")
            return
        self.listeners.emit(collection, current)

    # ── Writes ───────────────────────────────────────────────────────────────

    def add(self, collection: str, fields: Dict[str, Any]) -> str:
        """Insert a new document. Returns its generated id."""
        doc_id = make_doc_id()
        now = datetime.now(timezone.utc).isoformat()
        with self._write_lock:
            try:
                with _connect(self.db_path) as conn:
                    conn.execute(
                        "INSERT INTO documents (collection, doc_id, data, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                        (collection, doc_id, json.dumps(fields), now, now)
                    )
                    conn.commit()
            except sqlite3.Error as e:
                raise StoreError(f"Error adding to {collection}: {e}") from e
            self._notify(collection)
        return doc_id

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        """Merge the given fields into an existing document."""
        now = datetime.now(timezone.utc).isoformat()
        with self._write_lock:
            try:
                with _connect(self.db_path) as conn:
                    row = conn.execute(
                        "SELECT data FROM documents WHERE collection = ? AND doc_id = ?",
                        (collection, doc_id)
                    ).fetchone()
                    if not row:
                        raise DocumentNotFound(f"No document {collection}/{doc_id}")
                    data = json.loads(row["data"])
                    data.update(fields)
                    conn.execute(
                        "UPDATE documents SET data = ?, updated_at = ? WHERE collection = ? AND doc_id = ?",
                        (json.dumps(data), now, collection, doc_id)
                    )
                    conn.commit()
            except sqlite3.Error as e:
                raise StoreError(f"Error updating {collection}/{doc_id}: {e}") from e
            self._notify(collection)

    def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Missing documents are ignored."""
        with self._write_lock:
            try:
                with _connect(self.db_path) as conn:
                    conn.execute(
                        "DELETE FROM documents WHERE collection = ? AND doc_id = ?",
                        (collection, doc_id)
                    )
                    conn.commit()
            except sqlite3.Error as e:
                raise StoreError(f"Error deleting {collection}/{doc_id}: {e}") from e
            self._notify(collection)
