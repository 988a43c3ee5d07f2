"""The robot: loads responder groups and routes messages through them."""

import asyncio
import importlib
import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Protocol

from responder_bot.core.compiler import BotIdentity
from responder_bot.core.dispatcher import Dispatcher, DispatchResult
from responder_bot.core.errors import ConfigurationError
from responder_bot.core.installer import DispatchEntry, Options, install
from responder_bot.core.logging import get_dispatch_stats
from responder_bot.core.message import Message
from responder_bot.core.registry import ResponderGroup

if TYPE_CHECKING:
    from responder_bot.config import Config

logger = logging.getLogger(__name__)


class Adapter(Protocol):
    """Transport that delivers outgoing messages to a chat network."""

    async def send(self, message: Message) -> None: ...

    async def reply(self, message: Message) -> None: ...

    async def emote(self, message: Message) -> None: ...


def load_group(path: str) -> ResponderGroup:
    """Import a responder group from a ``"package.module:attribute"`` string.

    The attribute defaults to ``group`` when omitted.
    """
    module_name, _, attr = path.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import responder module {module_name!r}: {e}") from e
    group = getattr(module, attr or "group", None)
    if not isinstance(group, ResponderGroup):
        raise ConfigurationError(f"{path!r} does not name a ResponderGroup")
    return group


class Robot:
    """Hosts installed responder groups for one bot identity."""

    def __init__(
        self,
        identity: BotIdentity,
        adapter: Adapter | None = None,
        include_unmatched_groups: bool = True,
    ):
        self.identity = identity
        self._adapter = adapter
        self._dispatcher = Dispatcher(include_unmatched_groups=include_unmatched_groups)
        self._groups: dict[str, ResponderGroup] = {}
        self._options: dict[str, Options | None] = {}
        self._installed: dict[str, list[DispatchEntry]] = {}
        # Serialises load and reload so neither overwrites the other's entries
        self._install_lock = asyncio.Lock()

    @classmethod
    async def from_config(cls, config: "Config", adapter: Adapter | None = None) -> "Robot":
        """Build a robot and load every responder group listed in the config."""
        from responder_bot.config import identity_from_config

        robot = cls(
            identity_from_config(config),
            adapter=adapter,
            include_unmatched_groups=config.dispatch.include_unmatched_groups,
        )
        for responder in config.responders:
            await robot.load(load_group(responder.path), responder.options)
        return robot

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def entries(self) -> list[DispatchEntry]:
        """All installed entries, grouped in load order."""
        return [e for entries in self._installed.values() for e in entries]

    async def load(self, group: ResponderGroup, options: Options | None = None) -> None:
        """Install a responder group, replacing any earlier install of it.

        A failed install leaves the previously installed entries in place.
        """
        async with self._install_lock:
            entries = await install(group, self.identity, options)
            self._groups[group.name] = group
            self._options[group.name] = options
            self._installed[group.name] = entries
        logger.info(f"Loaded responder group {group.name} for {self.name}")

    async def reload(self, identity: BotIdentity | None = None) -> None:
        """Reinstall every loaded group, optionally under a new identity."""
        if identity is not None:
            identity.validate()
        new_identity = identity or self.identity
        async with self._install_lock:
            groups = list(self._groups.values())
            installed = await asyncio.gather(
                *(install(g, new_identity, self._options[g.name]) for g in groups)
            )
            self.identity = new_identity
            self._installed = {g.name: entries for g, entries in zip(groups, installed)}
        logger.info(f"Reloaded {len(groups)} responder groups for {self.name}")

    def handle_in(self, message: Message) -> list[asyncio.Task[DispatchResult]]:
        """Dispatch an inbound message to every installed handler without waiting."""
        return self._dispatcher.dispatch(replace(message, robot=self), self.entries)

    async def handle_in_and_wait(self, message: Message) -> list[DispatchResult]:
        """Dispatch an inbound message and wait for every handler to finish."""
        return await self._dispatcher.run(replace(message, robot=self), self.entries)

    async def drain(self) -> None:
        """Wait for every handler dispatched so far."""
        await self._dispatcher.drain()
        logger.info(f"DISPATCH_STATS [{self.name}]: {get_dispatch_stats().summary_line()}")

    def usage(self) -> list[str]:
        """Help lines of every loaded group, with this robot's name filled in."""
        return [line for group in self._groups.values() for line in group.usage(self.name)]

    def _require_adapter(self) -> Adapter:
        if self._adapter is None:
            raise ConfigurationError(f"Robot {self.name!r} has no adapter")
        return self._adapter

    async def send(self, message: Message) -> None:
        await self._require_adapter().send(message)

    async def reply(self, message: Message) -> None:
        await self._require_adapter().reply(message)

    async def emote(self, message: Message) -> None:
        await self._require_adapter().emote(message)

    def __repr__(self) -> str:
        return f"Robot({self.identity!r}, groups={list(self._groups)})"


__all__ = ["Adapter", "Robot", "load_group"]
