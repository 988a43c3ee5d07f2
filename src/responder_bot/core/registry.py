"""Responder groups: declaration-time registries of pattern handlers.

A responder group collects the handlers of one feature. Handlers are either
*ambient* (``hear``: match anywhere in any message) or *addressed*
(``respond``: match only when the message is directed at the bot).

Example:

    group = ResponderGroup("ping", usage=["bot ping - Replies with pong"])

    @group.respond(r"ping$", re.IGNORECASE)
    async def ping(msg, opts):
        await reply(msg, "pong")

    # with indexed captures
    @group.hear(r"i like (\\w+)")
    async def like(msg, opts):
        await emote(msg, f"likes {msg.matches[1]} too!")

    # with named captures
    @group.hear(r"i like (?P<subject>\\w+)")
    async def like_named(msg, opts):
        await emote(msg, f"likes {msg.matches['subject']} too!")
"""

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from responder_bot.core.errors import PatternError

logger = logging.getLogger(__name__)

# (message, options) -> ignored; coroutine functions are awaited
HandlerFunc = Callable[..., Any]
PatternLike = str | re.Pattern[str]


@dataclass(frozen=True)
class HandlerRef:
    """A handler function and the group it belongs to."""

    group: str
    name: str
    func: HandlerFunc

    def __str__(self) -> str:
        return f"{self.group}.{self.name}"


@dataclass(frozen=True)
class RegistryEntry:
    """A declared (pattern, handler) pair."""

    pattern: re.Pattern[str]
    handler: HandlerRef


def compile_pattern(pattern: PatternLike, flags: int = 0) -> re.Pattern[str]:
    """Compile a declared pattern, raising PatternError if it is malformed."""
    source = pattern.pattern if isinstance(pattern, re.Pattern) else pattern
    if not isinstance(source, str):
        raise PatternError(
            f"Patterns must match text, got {type(source).__name__} pattern {source!r}",
            pattern=source,
        )
    if isinstance(pattern, re.Pattern):
        if flags:
            raise PatternError(
                "Flags cannot be combined with an already compiled pattern",
                pattern=pattern.pattern,
            )
        return pattern
    try:
        return re.compile(pattern, flags)
    except (re.error, TypeError) as e:
        raise PatternError(f"Invalid pattern {pattern!r}: {e}", pattern=pattern) from e


class ResponderGroup:
    """Registry of ambient and addressed handlers for one responder group."""

    def __init__(
        self,
        name: str,
        usage: Iterable[str] = (),
        usage_placeholder: str = "bot",
    ):
        self.name = name
        self._usage = list(usage)
        self._usage_placeholder = re.compile(rf"\b{re.escape(usage_placeholder)}\b")
        self._ambient: list[RegistryEntry] = []
        self._addressed: list[RegistryEntry] = []

    def __repr__(self) -> str:
        return (
            f"ResponderGroup({self.name!r}, ambient={len(self._ambient)}, "
            f"addressed={len(self._addressed)})"
        )

    def _entry(self, pattern: PatternLike, func: HandlerFunc, flags: int) -> RegistryEntry:
        handler = HandlerRef(
            group=self.name,
            name=getattr(func, "__name__", repr(func)),
            func=func,
        )
        try:
            compiled = compile_pattern(pattern, flags)
        except PatternError as e:
            raise PatternError(str(e), pattern=e.pattern, handler=handler) from e
        return RegistryEntry(pattern=compiled, handler=handler)

    def register_ambient(
        self, pattern: PatternLike, func: HandlerFunc, flags: int = 0
    ) -> RegistryEntry:
        """Register a handler that matches anywhere in a message."""
        entry = self._entry(pattern, func, flags)
        self._ambient.append(entry)
        logger.debug(f"Registered ambient {entry.handler} for {entry.pattern.pattern!r}")
        return entry

    def register_addressed(
        self, pattern: PatternLike, func: HandlerFunc, flags: int = 0
    ) -> RegistryEntry:
        """Register a handler that matches only messages addressed to the bot."""
        entry = self._entry(pattern, func, flags)
        self._addressed.append(entry)
        logger.debug(f"Registered addressed {entry.handler} for {entry.pattern.pattern!r}")
        return entry

    def hear(self, pattern: PatternLike, flags: int = 0) -> Callable[[HandlerFunc], HandlerFunc]:
        """Decorator form of register_ambient."""

        def decorator(func: HandlerFunc) -> HandlerFunc:
            self.register_ambient(pattern, func, flags)
            return func

        return decorator

    def respond(self, pattern: PatternLike, flags: int = 0) -> Callable[[HandlerFunc], HandlerFunc]:
        """Decorator form of register_addressed."""

        def decorator(func: HandlerFunc) -> HandlerFunc:
            self.register_addressed(pattern, func, flags)
            return func

        return decorator

    def ambient_entries(self) -> list[RegistryEntry]:
        return list(self._ambient)

    def addressed_entries(self) -> list[RegistryEntry]:
        return list(self._addressed)

    def usage(self, bot_name: str) -> list[str]:
        """Help lines for this group with the placeholder replaced by the bot's name."""
        return [
            self._usage_placeholder.sub(lambda _: bot_name, line.strip())
            for line in self._usage
        ]
