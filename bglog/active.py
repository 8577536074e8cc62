"""A background worker thread that runs queued callbacks in order."""

from __future__ import annotations

import queue
import sys
import threading
from typing import Callable

Callback = Callable[[], object]


class Active:
    """Runs callbacks one at a time, in the order sent, on its own thread.

    Closing the object queues a stop request behind everything already sent,
    so every callback sent before :meth:`close` is run before the thread ends.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[Callback] = queue.SimpleQueue()
        self._done = False
        self._closed = False
        self._lock = threading.Lock()
        self._thread = threading.Thread(
            target=self._run, name="bglog-active", daemon=True
        )
        self._thread.start()

    def _run(self) -> None:
        while not self._done:
            func = self._queue.get()
            try:
                func()
            except BaseException:
                sys.excepthook(*sys.exc_info())

    def _stop(self) -> None:
        self._done = True

    @property
    def closed(self) -> bool:
        """True once :meth:`close` has been called."""
        return self._closed

    @property
    def thread(self) -> threading.Thread:
        """The thread that runs the callbacks."""
        return self._thread

    def send(self, callback: Callback) -> None:
        """Queue ``callback`` to run on the background thread."""
        with self._lock:
            if self._closed:
                raise RuntimeError("active object is closed")
            self._queue.put(callback)

    def close(self) -> None:
        """Run all pending callbacks, then stop and join the thread."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(self._stop)
        if threading.current_thread() is not self._thread:
            self._thread.join()

    def __enter__(self) -> "Active":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()