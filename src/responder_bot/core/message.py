"""Chat message model and helpers for handler authors."""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, TypeVar
from uuid import uuid4

from responder_bot.core.errors import ConfigurationError

if TYPE_CHECKING:
    from responder_bot.core.robot import Robot

T = TypeVar("T")

MatchResult = dict[str, str | None] | dict[int, str | None]


@dataclass(frozen=True)
class Message:
    """An incoming (or outgoing) chat message.

    ``matches`` is empty on inbound messages; the dispatcher hands each matching
    handler its own copy with the captures filled in.
    """

    text: str
    user: str | None = None
    room: str | None = None
    type: str = "chat"
    robot: Robot | None = None
    matches: MatchResult = field(default_factory=dict)
    private: dict[str, Any] = field(default_factory=dict)
    ref: str = field(default_factory=lambda: str(uuid4()))

    def __str__(self) -> str:
        if self.type == "emote":
            return f"* {self.user} {self.text}"
        return f"<{self.user}> {self.text}"


def _robot(msg: Message) -> Robot:
    if msg.robot is None:
        raise ConfigurationError(f"Message {msg.ref} is not attached to a robot")
    return msg.robot


async def send(msg: Message, text: str) -> None:
    """Send a message via the owning robot's adapter.

    Example:
        await send(msg, "Hello there!")
    """
    await _robot(msg).send(replace(msg, text=text))


async def reply(msg: Message, text: str) -> None:
    """Send a reply to the message's author via the owning robot's adapter."""
    await _robot(msg).reply(replace(msg, text=text))


async def emote(msg: Message, text: str) -> None:
    """Send an emote via the owning robot's adapter.

    Example:
        await emote(msg, "goes and hides")
    """
    await _robot(msg).emote(replace(msg, text=text))


def random_choice(items: Sequence[T]) -> T:
    """Return a random item from a non-empty sequence or range."""
    if len(items) == 0:
        raise ValueError("random_choice() needs a non-empty sequence")
    return random.choice(items)
