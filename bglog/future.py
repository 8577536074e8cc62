"""Run a callable on a background worker and get its result as a future."""

from __future__ import annotations

from concurrent.futures import Future
from typing import Callable, Protocol, TypeVar

T = TypeVar("T")


class Worker(Protocol):
    """Anything that accepts callbacks to run later."""

    def send(self, callback: Callable[[], object]) -> None: ...


def spawn_task(func: Callable[[], T], worker: Worker | None) -> "Future[T]":
    """Queue ``func`` on ``worker`` and return a future for its result.

    With no worker the returned future already holds a ``RuntimeError``.
    Exceptions raised by ``func`` are stored in the future.
    """
    future: Future[T] = Future()
    if worker is None:
        future.set_exception(RuntimeError("no worker instantiated"))
        return future

    def task() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = func()
        except BaseException as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)

    worker.send(task)
    return future