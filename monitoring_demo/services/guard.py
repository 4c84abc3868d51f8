"""
Single-flight guard: at most one exercise run per backend at a time
"""
import threading
from typing import Dict, List

from monitoring_demo.core.errors import BackendBusyError
from monitoring_demo.core.logger import get_logger

logger = get_logger(__name__)


class RunGuard:
    """
    Owns the table of backends that are currently running.

    A backend name is present in the table only while its run is in
    progress. Acquire and release are serialized by one lock; the guarded
    work itself runs outside it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._running: Dict[str, bool] = {}

    def try_acquire(self, name: str) -> bool:
        """Mark `name` busy. Returns False if it already was."""
        with self._lock:
            if self._running.get(name):
                return False
            self._running[name] = True
            return True

    def acquire(self, name: str) -> None:
        """
        Mark `name` busy or reject

        Raises: BackendBusyError if a run for `name` is in progress
        """
        if not self.try_acquire(name):
            logger.warning("Run rejected, backend busy", backend=name)
            raise BackendBusyError(name)

    def release(self, name: str) -> None:
        with self._lock:
            self._running.pop(name, None)

    def is_busy(self, name: str) -> bool:
        with self._lock:
            return self._running.get(name, False)

    def busy(self) -> List[str]:
        """Snapshot of the backends currently running"""
        with self._lock:
            return sorted(self._running)
