"""Single-threaded completion context for request callbacks."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class CompletionQueue:
    """Runs completion callbacks one at a time on a dedicated thread.

    Every callback submitted to one queue executes on the same worker thread,
    so callers never observe callbacks running concurrently.
    """

    def __init__(self, name: str = "courier-completion"):
        self.name = name
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
        self._thread: Optional[threading.Thread] = None

    def deliver(self, callback: Callable[..., Any], *args: Any) -> Future:
        """Schedule ``callback(*args)``; the returned future resolves once it ran."""
        return self._executor.submit(self._run, callback, args)

    def _run(self, callback: Callable[..., Any], args: tuple) -> Any:
        self._thread = threading.current_thread()
        try:
            return callback(*args)
        except Exception:
            logger.exception(f"Completion callback {callback!r} raised")
            raise

    def is_current(self) -> bool:
        """Return True when called from this queue's worker thread."""
        return threading.current_thread() is self._thread

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


_main_queue_lock = threading.Lock()
_main_queue: Optional[CompletionQueue] = None


def main_queue() -> CompletionQueue:
    """Process-wide default completion queue, created on first use."""
    global _main_queue
    if _main_queue is None:
        with _main_queue_lock:
            if _main_queue is None:
                _main_queue = CompletionQueue("courier-main")
    return _main_queue
