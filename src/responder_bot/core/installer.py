"""Compiles a responder group's registrations into dispatch entries."""

import asyncio
import copy
import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from responder_bot.core.compiler import BotIdentity, compile_addressed
from responder_bot.core.errors import ConfigurationError, PatternError
from responder_bot.core.logging import get_dispatch_stats, log_timing
from responder_bot.core.registry import HandlerRef, RegistryEntry, ResponderGroup

logger = logging.getLogger(__name__)

Options = Mapping[str, Any] | Iterable[tuple[str, Any]]


@dataclass(frozen=True)
class DispatchEntry:
    """Installed, ready-to-match form of a registration."""

    pattern: re.Pattern[str]
    handler: HandlerRef
    options: Mapping[str, Any]
    addressed: bool = False


async def _install_ambient(entry: RegistryEntry, options: Mapping[str, Any]) -> DispatchEntry:
    return DispatchEntry(pattern=entry.pattern, handler=entry.handler, options=options)


async def _install_addressed(
    entry: RegistryEntry, identity: BotIdentity, options: Mapping[str, Any]
) -> DispatchEntry:
    try:
        pattern = compile_addressed(entry.pattern, identity)
    except PatternError as e:
        raise PatternError(str(e), pattern=entry.pattern.pattern, handler=entry.handler) from e
    return DispatchEntry(
        pattern=pattern, handler=entry.handler, options=options, addressed=True
    )


async def install(
    group: ResponderGroup,
    identity: BotIdentity | None,
    options: Options | None = None,
) -> list[DispatchEntry]:
    """Install a responder group for a bot.

    Every registration is compiled in its own task. The call waits for all of
    them and returns ambient entries first, then addressed entries, each in
    declaration order. If any registration fails nothing is returned.

    Args:
        group: The responder group to install
        identity: The bot's names, used to rewrite addressed patterns
        options: Key-value options handed to every handler of the group

    Returns:
        A fresh list of dispatch entries

    Raises:
        ConfigurationError: If the group has addressed handlers and the
            identity is missing or malformed
        PatternError: If any addressed pattern fails to compile
    """
    ambient = group.ambient_entries()
    addressed = group.addressed_entries()

    if addressed:
        if identity is None:
            raise ConfigurationError(
                f"Responder group {group.name!r} has addressed handlers but no bot identity"
            )
        identity.validate()

    # Deep copy so nested values are not shared with the caller or other installs
    merged: Mapping[str, Any] = MappingProxyType(copy.deepcopy(dict(options or {})))

    with log_timing(logger, f"Install {group.name}"):
        tasks = [asyncio.create_task(_install_ambient(e, merged)) for e in ambient]
        tasks += [
            asyncio.create_task(_install_addressed(e, identity, merged))
            for e in addressed
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

    for result in results:
        if isinstance(result, BaseException):
            logger.error(f"INSTALL_FAILED: {group.name}: {result}")
            raise result

    entries: list[DispatchEntry] = list(results)
    stats = get_dispatch_stats()
    stats.increment("installs")
    stats.increment("entries_installed", len(entries))
    logger.info(
        f"INSTALL: {group.name} -> {len(ambient)} ambient, {len(addressed)} addressed"
    )
    return entries
