"""
Snapshot listeners: fan out store snapshots to subscribed views.

The store emits a full snapshot of a collection after every write.
Each subscriber gets the snapshot and replaces whatever it held before.
"""
import logging
import threading
from typing import Callable, Dict, List, Any

logger = logging.getLogger(__name__)


class SnapshotListeners:
    """Routes collection snapshots to registered callbacks."""

    def __init__(self):
        self.subscribers: Dict[str, List[Callable]] = {}  # collection -> callbacks
        self._lock = threading.Lock()

    def subscribe(self, collection: str, callback: Callable[[Any], None]) -> Callable[[], None]:
        """Register a callback for a collection. Returns an unsubscribe handle."""
        with self._lock:
            self.subscribers.setdefault(collection, []).append(callback)
        logger.debug(f"Listener added on '{collection}'")

        released = False

        def unsubscribe() -> None:
            nonlocal released
            if released:
                return
            released = True
            with self._lock:
                callbacks = self.subscribers.get(collection, [])
                if callback in callbacks:
                    callbacks.remove(callback)
                if not callbacks:
                    self.subscribers.pop(collection, None)
            logger.debug(f"Listener removed from '{collection}'")

        return unsubscribe

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self.subscribers.get(collection, []))

    def emit(self, collection: str, snapshot: Any) -> None:
        """Deliver a snapshot to every subscriber of the collection."""
        with self._lock:
            callbacks = list(self.subscribers.get(collection, []))
        for callback in callbacks:
            try:
                callback(snapshot)
            except Exception:
                logger.exception(f"Error in '{collection}' snapshot listener")
