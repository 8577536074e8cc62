"""The log worker: fans messages out to sinks on background threads."""

from __future__ import annotations

import signal
import weakref
from concurrent.futures import Future
from typing import Any, Callable, Generic, TypeVar

from bglog.active import Active
from bglog.crashhandler import exit_with_default_signal_handler
from bglog.future import spawn_task
from bglog.loglevels import FATAL

S = TypeVar("S")


class _SinkWrapper(Generic[S]):
    """A sink with its own background thread and default receive call."""

    def __init__(self, sink: S, default_call: Callable[[S, Any], object]) -> None:
        self.sink = sink
        self._default_call = default_call
        self.active = Active()

    @property
    def closed(self) -> bool:
        return self.active.closed

    def send(self, message: Any) -> None:
        sink, call = self.sink, self._default_call
        self.active.send(lambda: call(sink, message))

    def close(self) -> None:
        self.active.close()


def _gone() -> Future:
    future: Future = Future()
    future.set_exception(ReferenceError("sink is no longer available"))
    return future


class SinkHandle(Generic[S]):
    """Access to a sink owned by a :class:`LogWorker`."""

    def __init__(self, wrapper: _SinkWrapper[S]) -> None:
        self._wrapper = weakref.ref(wrapper)

    def _target(self) -> _SinkWrapper[S] | None:
        return self._wrapper()

    def call(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Run ``func(sink, *args, **kwargs)`` on the sink's thread.

        The future holds a ``ReferenceError`` once the sink has been removed.
        """
        wrapper = self._target()
        if wrapper is None or wrapper.closed:
            return _gone()
        sink = wrapper.sink
        try:
            return spawn_task(lambda: func(sink, *args, **kwargs), wrapper.active)
        except RuntimeError:
            return _gone()


def _default_fatal(message: Any) -> None:
    exit_with_default_signal_handler(FATAL, signal.SIGABRT)


class LogWorker:
    """Receives messages and passes them, in order, to every sink.

    ``fatal_handler(message)`` runs after a fatal message has been flushed to
    all sinks; by default it exits the process through SIGABRT.
    """

    def __init__(self, fatal_handler: Callable[[Any], object] | None = None) -> None:
        self._sinks: list[_SinkWrapper] = []
        self._fatal_handler = fatal_handler or _default_fatal
        self._bg = Active()

    def add_sink(self, sink: S, default_call: Callable[[S, Any], object]) -> SinkHandle[S]:
        """Add ``sink``; each message is delivered as ``default_call(sink, message)``."""
        wrapper = _SinkWrapper(sink, default_call)
        spawn_task(lambda: self._sinks.append(wrapper), self._bg).result()
        return SinkHandle(wrapper)

    def remove_sink(self, handle: SinkHandle | None) -> None:
        """Remove the sink behind ``handle``; returns once it is removed and flushed."""
        if handle is None:
            return
        wrapper = handle._target()
        if wrapper is None:
            return

        def remove() -> bool:
            if wrapper in self._sinks:
                self._sinks.remove(wrapper)
                return True
            return False

        if spawn_task(remove, self._bg).result():
            wrapper.close()

    def remove_all_sinks(self) -> None:
        """Remove every sink, flushing each."""

        def clear() -> list[_SinkWrapper]:
            removed = list(self._sinks)
            self._sinks.clear()
            return removed

        for wrapper in spawn_task(clear, self._bg).result():
            wrapper.close()

    def _bg_save(self, message: Any) -> None:
        for wrapper in self._sinks:
            wrapper.send(message)

    def _bg_fatal(self, message: Any) -> None:
        self._bg_save(message)
        sinks = list(self._sinks)
        self._sinks.clear()
        for wrapper in sinks:
            wrapper.close()
        self._fatal_handler(message)

    def save(self, message: Any) -> None:
        """Queue ``message`` for all sinks."""
        self._bg.send(lambda: self._bg_save(message))

    def fatal(self, message: Any) -> None:
        """Queue a fatal message: it is delivered after all earlier ones,
        the sinks are flushed and then the fatal handler runs."""
        self._bg.send(lambda: self._bg_fatal(message))

    def close(self) -> None:
        """Deliver all queued messages, then flush and drop every sink."""
        self._bg.close()
        sinks = list(self._sinks)
        self._sinks.clear()
        for wrapper in sinks:
            wrapper.close()

    def __enter__(self) -> "LogWorker":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()