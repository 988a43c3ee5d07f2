"""Exceptions raised by the matching and dispatch core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from responder_bot.core.installer import DispatchEntry
    from responder_bot.core.registry import HandlerRef


class ResponderError(Exception):
    """Base exception for all responder operations."""

    pass


class ConfigurationError(ResponderError):
    """Raised when the bot identity or a responder config entry is unusable."""

    pass


class PatternError(ResponderError):
    """Raised when a pattern cannot be compiled.

    Covers both malformed patterns at declaration time and addressed patterns
    that fail to compile once embedded in the addressing prefix.
    """

    def __init__(
        self,
        message: str,
        pattern: Any = None,
        handler: HandlerRef | None = None,
    ):
        self.pattern = pattern
        self.handler = handler
        if handler is not None:
            message = f"{message} [{handler}]"
        super().__init__(message)


class HandlerError(ResponderError):
    """Raised (and reported, never propagated) when a dispatched handler fails."""

    def __init__(self, entry: DispatchEntry, cause: BaseException):
        self.entry = entry
        super().__init__(
            f"Handler {entry.handler} failed for pattern "
            f"{entry.pattern.pattern!r}: {cause!r}"
        )
        self.__cause__ = cause
