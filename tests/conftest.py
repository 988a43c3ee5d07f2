"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from responder_bot.config import Config
from responder_bot.core import BotIdentity, Message
from responder_bot.core.logging import reset_dispatch_stats


class RecordingAdapter:
    """Adapter that records outgoing messages instead of delivering them."""

    def __init__(self):
        self.outbox: list[tuple[str, Message]] = []

    async def send(self, message: Message) -> None:
        self.outbox.append(("send", message))

    async def reply(self, message: Message) -> None:
        self.outbox.append(("reply", message))

    async def emote(self, message: Message) -> None:
        self.outbox.append(("emote", message))

    @property
    def texts(self) -> list[str]:
        return [m.text for _, m in self.outbox]


@pytest.fixture(autouse=True)
def fresh_stats():
    """Start every test with zeroed dispatch stats."""
    reset_dispatch_stats()
    yield
    reset_dispatch_stats()


@pytest.fixture
def default_config() -> Config:
    """Provide a default configuration for testing."""
    return Config()


@pytest.fixture
def identity() -> BotIdentity:
    """Bot identity without an alias."""
    return BotIdentity(name="hedwig")


@pytest.fixture
def alias_identity() -> BotIdentity:
    """Bot identity whose alias extends its name."""
    return BotIdentity(name="hal", aka="hal9000")


@pytest.fixture
def adapter() -> RecordingAdapter:
    return RecordingAdapter()


@pytest.fixture
def message() -> Message:
    return Message(text="hi there", user="alice", room="#lobby")


@pytest.fixture
def temp_config_file(tmp_path: Path) -> Path:
    """Create a temporary config file."""
    config_content = """
robot:
  name: "alfred"
  aka: "al"

dispatch:
  include_unmatched_groups: false

responders:
  - path: "responder_bot.responders.ping"
  - path: "responder_bot.responders.greeting:group"
    options:
      replies: ["yo"]
"""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(config_content)
    return config_path

