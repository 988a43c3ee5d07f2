"""Logging utilities for responder-bot."""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Generator


@dataclass
class DispatchStats:
    """Cumulative statistics for a session.

    Thread-safe counters for install and dispatch activity.
    """

    installs: int = 0
    entries_installed: int = 0
    messages_dispatched: int = 0
    handlers_matched: int = 0
    handler_failures: int = 0
    failures_by_handler: dict[str, int] = field(default_factory=dict)
    _lock: Lock = field(default_factory=Lock, repr=False)

    def increment(self, stat: str, amount: int = 1) -> None:
        """Increment a stat counter."""
        with self._lock:
            if hasattr(self, stat) and stat != "_lock":
                current = getattr(self, stat)
                if isinstance(current, int):
                    setattr(self, stat, current + amount)

    def record_failure(self, handler: str) -> None:
        """Track a failed handler invocation."""
        with self._lock:
            self.handler_failures += 1
            self.failures_by_handler[handler] = self.failures_by_handler.get(handler, 0) + 1

    def summary(self) -> dict[str, Any]:
        """Return a summary of all stats."""
        with self._lock:
            return {
                "installs": self.installs,
                "entries": self.entries_installed,
                "dispatched": self.messages_dispatched,
                "matched": self.handlers_matched,
                "failures": self.handler_failures,
                "failures_by_handler": dict(self.failures_by_handler),
            }

    def summary_line(self) -> str:
        """Return a single-line summary for logging."""
        with self._lock:
            match_rate = self.handlers_matched / max(1, self.messages_dispatched)
            return (
                f"installs={self.installs} entries={self.entries_installed} "
                f"dispatched={self.messages_dispatched} "
                f"matched_per_message={match_rate:.2f} "
                f"failures={self.handler_failures}"
            )


# Global dispatch stats instance
_dispatch_stats: DispatchStats | None = None
_stats_lock = Lock()


def get_dispatch_stats() -> DispatchStats:
    """Get the global dispatch stats instance."""
    global _dispatch_stats
    with _stats_lock:
        if _dispatch_stats is None:
            _dispatch_stats = DispatchStats()
        return _dispatch_stats


def reset_dispatch_stats() -> None:
    """Reset dispatch stats (mainly for testing)."""
    global _dispatch_stats
    with _stats_lock:
        _dispatch_stats = DispatchStats()


@contextmanager
def log_timing(
    logger: logging.Logger, operation: str
) -> Generator[None, None, None]:
    """Context manager for timing operations.

    Logs at DEBUG level on completion.

    Example:
        with log_timing(logger, "Install ping"):
            entries = await install(group, identity, {})
        # Logs: "Install ping completed in 1.23ms"
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(f"{operation} completed in {elapsed_ms:.2f}ms")
