"""Background worker, sinks, log-level registry and fatal-signal handling for asynchronous logging."""

__version__ = "0.1.0"
__all__ = ["active", "future", "loglevels", "crashhandler", "logworker"]