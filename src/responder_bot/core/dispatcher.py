"""Concurrent dispatch of an incoming message to installed handlers."""

import asyncio
import inspect
import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from responder_bot.core.captures import extract
from responder_bot.core.errors import HandlerError
from responder_bot.core.installer import DispatchEntry
from responder_bot.core.logging import get_dispatch_stats
from responder_bot.core.message import Message

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """Outcome of running one dispatch entry against one message."""

    entry: DispatchEntry
    matched: bool
    error: HandlerError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        if not self.matched:
            status = "SKIP"
        elif self.error is None:
            status = "OK"
        else:
            status = "FAILED"
        return f"Dispatch[{status}]: {self.entry.handler} {self.entry.pattern.pattern!r}"


class Dispatcher:
    """Runs every dispatch entry against a message, one task per entry.

    Handlers that raise are isolated: the failure is logged and reported in
    that entry's DispatchResult, and sibling tasks carry on.
    """

    def __init__(self, include_unmatched_groups: bool = True):
        """Initialize the dispatcher.

        Args:
            include_unmatched_groups: Keep positional groups that did not take
                part in a match (as None) instead of leaving them out
        """
        self._include_unmatched = include_unmatched_groups
        # Strong references so fire-and-forget tasks are not collected early
        self._pending: set[asyncio.Task[DispatchResult]] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def dispatch(
        self, message: Message, entries: Sequence[DispatchEntry]
    ) -> list[asyncio.Task[DispatchResult]]:
        """Spawn one task per entry and return without waiting for them.

        Must be called from a running event loop.
        """
        get_dispatch_stats().increment("messages_dispatched")
        tasks = []
        for entry in entries:
            task = asyncio.create_task(self._run_entry(message, entry))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            tasks.append(task)
        logger.debug(f"DISPATCH: [{message.ref}] {message} -> {len(tasks)} entries")
        return tasks

    async def run(
        self, message: Message, entries: Sequence[DispatchEntry]
    ) -> list[DispatchResult]:
        """Dispatch and wait for every entry, returning results in entry order."""
        return list(await asyncio.gather(*self.dispatch(message, entries)))

    async def drain(self) -> None:
        """Wait for every task spawned so far to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _run_entry(self, message: Message, entry: DispatchEntry) -> DispatchResult:
        stats = get_dispatch_stats()
        matched = False
        try:
            if entry.pattern.search(message.text) is None:
                return DispatchResult(entry=entry, matched=False)

            matched = True
            matches = extract(entry.pattern, message.text, self._include_unmatched)
            derived = replace(message, matches=matches)
            stats.increment("handlers_matched")
            logger.debug(f"MATCH: {entry.handler} on {message.ref} captures={matches}")

            result = entry.handler.func(derived, entry.options)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            error = HandlerError(entry, e)
            logger.exception(f"HANDLER_FAILED: {error}")
            stats.record_failure(str(entry.handler))
            return DispatchResult(entry=entry, matched=matched, error=error)

        return DispatchResult(entry=entry, matched=True)


_default_dispatcher = Dispatcher()


def dispatch(
    message: Message, entries: Sequence[DispatchEntry]
) -> list[asyncio.Task[DispatchResult]]:
    """Fire-and-forget dispatch using the shared default dispatcher."""
    return _default_dispatcher.dispatch(message, entries)


async def run(message: Message, entries: Sequence[DispatchEntry]) -> list[DispatchResult]:
    """Dispatch using the shared default dispatcher and wait for every handler."""
    return await _default_dispatcher.run(message, entries)
