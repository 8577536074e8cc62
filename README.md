# bglog

The building blocks of an asynchronous logger. Messages go onto a queue, and one background thread hands each message to every registered sink. Each sink has its own thread too. The code that logs never waits on a sink's I/O.

## Modules

- `bglog.active`: `Active` is a background thread. It runs the callables passed to `send()` one at a time, in the order they were sent. An exception raised by a callable goes to `sys.excepthook`, and the thread keeps running. `close()` runs everything already queued, then stops and joins the thread. Calling `send()` after `close()` raises `RuntimeError`. `Active` also works as a context manager.
- `bglog.future`: `spawn_task(func, worker)` queues `func` on a worker and returns a `concurrent.futures.Future` for its result. An exception raised by `func` is stored in the future. If `worker` is `None`, the returned future already holds a `RuntimeError`.
- `bglog.logworker`:
  - `LogWorker` keeps a list of sinks. `add_sink(sink, default_call)` returns a `SinkHandle`. After that, each message passed to `save()` is delivered as `default_call(sink, message)`. Messages reach each sink in order.
  - `remove_sink(handle)` and `remove_all_sinks()` return only when the sinks are removed and flushed.
  - `fatal(message)` delivers the message after all earlier ones, flushes and drops every sink, and then calls the worker's `fatal_handler(message)`. By default the handler exits the process through SIGABRT.
  - `close()` (or leaving a `with` block) delivers everything queued, then flushes and drops every sink.
  - `SinkHandle.call(func, *args, **kwargs)` runs `func(sink, *args, **kwargs)` on the sink's thread and returns a future. Once the sink has been removed, the future holds a `ReferenceError`.
- `bglog.loglevels`:
  - The built-in levels are `DEBUG`, `INFO`, `WARNING` and `FATAL`. The internal fatal levels are `CONTRACT`, `FATAL_SIGNAL` and `FATAL_EXCEPTION`. Each level is a `Level(value, text)`.
  - A registry in the module records which levels are enabled:
    - `add_log_level` registers a level.
    - `enable`, `disable`, `set_enabled`, `enable_all`, `disable_all` and `set_highest` change whether levels are enabled.
    - `get_status` returns a `Status`: `ABSENT`, `ENABLED` or `DISABLED`.
    - `log_level` reports whether a level should be logged.
    - `get_all` returns a snapshot as `LoggingLevel` entries.
    - `to_string` prints the registry.
    - `reset` goes back to the four defaults, all enabled.
  - `was_fatal(level)` is true for any level at or above `FATAL`.
- `bglog.crashhandler`: handles the fatal signals SIGABRT, SIGFPE, SIGILL, SIGSEGV and SIGTERM.
  - `install_crash_handler(on_fatal)` installs handlers for these signals. When a signal arrives, the handler calls `on_fatal(level, signal_number, dump, message)` with a stack dump and a description of the signal. If no callback was given, the process exits at once through `exit_with_default_signal_handler`. That function restores the earlier handlers, raises the signal again and exits.
  - `override_setup_signals` changes which signals are handled.
  - `restore_signal_handler` and `restore_fatal_handling_to_default` undo the changes.
  - `exit_reason_name`, `signal_to_str` and `stackdump` are helpers.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Usage

```python
from bglog.logworker import LogWorker

class ListSink:
    def __init__(self):
        self.lines = []

    def receive(self, message):
        self.lines.append(str(message))

sink = ListSink()
with LogWorker() as worker:
    worker.add_sink(sink, ListSink.receive)
    worker.save("Hello World!")
print(sink.lines)   # ['Hello World!'] -- closing the worker flushed the sink
```

To query a sink while the worker is running, use its handle:

```python
count = handle.call(lambda s: len(s.lines)).result()
```

To run work on a background thread yourself:

```python
from bglog.active import Active
from bglog.future import spawn_task

with Active() as worker:
    future = spawn_task(lambda: "Hello from the background", worker)
    print(future.result())
```

To change log levels while the program runs:

```python
from bglog import loglevels

loglevels.set_highest(loglevels.WARNING)      # DEBUG and INFO are now disabled
print(loglevels.log_level(loglevels.INFO))    # False
print(loglevels.to_string())
loglevels.reset()
```

## What it does not do

- bglog has no logging front end. It provides no calls that build a message with a level, time, file and line, and no message formatting. A message is whatever object you pass to `save()` or `fatal()`.
- There is no file sink. Writing to files, or anywhere else, is up to the sinks you add.
- `LogWorker` does not check levels against the level registry.
- The crash handler is not connected to a worker automatically. To have a caught signal logged and flushed through your sinks, pass an `on_fatal` callback to `install_crash_handler`.