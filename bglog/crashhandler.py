"""Fatal signal handling: log the signal, flush, then exit through it."""

from __future__ import annotations

import itertools
import os
import signal
import sys
import threading
import time
import traceback
from types import FrameType
from typing import Callable, Mapping

from bglog.loglevels import FATAL_SIGNAL, Level

FatalCallback = Callable[[Level, int, str, str], object]

DEFAULT_SIGNALS: dict[int, str] = {
    signal.SIGABRT: "SIGABRT",
    signal.SIGFPE: "SIGFPE",
    signal.SIGILL: "SIGILL",
    signal.SIGSEGV: "SIGSEGV",
    signal.SIGTERM: "SIGTERM",
}

_KNOWN_NAMES = dict(DEFAULT_SIGNALS)

_block_for_fatal = True
_exit_counter = itertools.count()
_signals: dict[int, str] = dict(DEFAULT_SIGNALS)
_saved_handlers: dict[int, object] = {}
_setup_lock = threading.RLock()
_on_fatal: FatalCallback | None = None


def should_block_for_fatal_handling() -> bool:
    """True while threads that lost the race for a fatal signal must wait."""
    return _block_for_fatal


def stackdump(rawdump: str | None = None) -> str:
    """Return ``rawdump`` if it is non-empty, else a dump of the caller's stack.

    The innermost caller is frame 1; this function itself is left out.
    """
    if rawdump:
        return rawdump
    frames = traceback.extract_stack()[:-1]
    return "".join(
        f"\tstack dump [{idx}]  {frame.name} + {frame.filename}:{frame.lineno}\n"
        for idx, frame in enumerate(reversed(frames), start=1)
    )


def exit_reason_name(level: Level, signal_number: int) -> str:
    """Name of a fatal signal, or an UNKNOWN SIGNAL description."""
    name = _KNOWN_NAMES.get(signal_number)
    if name is not None:
        return name
    return f"UNKNOWN SIGNAL({signal_number}) for {level.text}"


def _signal_handler(signal_number: int, frame: FrameType | None) -> None:
    # Only the first fatal signal goes straight through.
    if next(_exit_counter) != 0:
        while should_block_for_fatal_handling():
            time.sleep(1)

    dump = stackdump()
    reason = exit_reason_name(FATAL_SIGNAL, signal_number)
    message = (
        f"Received fatal signal: {reason}({signal_number})\tPID: {os.getpid()}\n"
        f"\n***** SIGNAL {reason}({signal_number})\n"
    )
    handler = _on_fatal
    if handler is None:
        exit_with_default_signal_handler(FATAL_SIGNAL, signal_number)
    else:
        handler(FATAL_SIGNAL, signal_number, dump, message)


def exit_with_default_signal_handler(level: Level, signal_number: int) -> None:
    """Restore the saved handlers, re-raise the signal and exit with it."""
    global _block_for_fatal
    for signum in list(_signals):
        restore_signal_handler(signum)

    sys.stderr.write(
        f"\n\nexit_with_default_signal_handler. Exiting due to {level.text}, "
        f"{signal_number}   \n\n"
    )
    sys.stderr.flush()

    signal.raise_signal(signal_number)

    # If raising had no effect (e.g. running as PID 1), release blocked
    # threads so the process can terminate.
    _block_for_fatal = False
    sys.exit(signal_number)


def restore_fatal_handling_to_default() -> None:
    """Handle the default set of fatal signals again."""
    override_setup_signals(DEFAULT_SIGNALS)


def signal_to_str(signal_number: int) -> str:
    """Human-readable description of a signal number."""
    try:
        name = signal.strsignal(signal_number)
    except ValueError:
        name = None
    if name is None:
        return f"Unknown signal {signal_number}"
    return name


def restore_signal_handler(signal_number: int) -> None:
    """Put back the handler that was active before ours was installed."""
    with _setup_lock:
        old = _saved_handlers.get(signal_number)
        if old is None:
            return
        try:
            signal.signal(signal_number, old)
        except (OSError, ValueError, RuntimeError, TypeError) as exc:
            sys.stderr.write(f"sigaction - {signal_to_str(signal_number)}: {exc}\n")
        del _saved_handlers[signal_number]


def override_setup_signals(signals: Mapping[int, str]) -> None:
    """Replace the set of handled signals and install handlers for it."""
    global _signals
    with _setup_lock:
        for signum in list(_signals):
            restore_signal_handler(signum)
        _signals = dict(signals)
        install_crash_handler()


def _install_signal_handlers() -> None:
    for signum, name in _signals.items():
        try:
            old = signal.signal(signum, _signal_handler)
        except (OSError, ValueError, RuntimeError) as exc:
            sys.stderr.write(f"sigaction - {name}: {exc}\n")
            continue
        if old is _signal_handler and signum in _saved_handlers:
            continue
        _saved_handlers[signum] = signal.SIG_DFL if old is None else old


def install_crash_handler(on_fatal: FatalCallback | None = None) -> None:
    """Install handlers for the active signal set.

    ``on_fatal(level, signal_number, dump, message)`` receives each caught
    signal; once given it is kept for later installs. Without one, a caught
    signal exits at once through the default handler.
    """
    global _on_fatal
    with _setup_lock:
        if on_fatal is not None:
            _on_fatal = on_fatal
        _install_signal_handlers()