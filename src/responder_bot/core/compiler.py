"""Rewrites addressed patterns so they only match messages directed at the bot."""

import logging
import re
from dataclasses import dataclass

from responder_bot.core.errors import ConfigurationError, PatternError

logger = logging.getLogger(__name__)

# Global inline flags are only legal at the start of an expression. Their
# effect is already part of ``Pattern.flags``, so they are dropped from the
# embedded source.
_LEADING_FLAGS = re.compile(r"^(?:\(\?[aiLmsux]+\))+")


@dataclass(frozen=True)
class BotIdentity:
    """The names a bot answers to when addressed."""

    name: str
    aka: str | None = None

    def validate(self) -> None:
        """Raise ConfigurationError unless the identity can build a prefix."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise ConfigurationError(f"Bot name must be a non-empty string, got {self.name!r}")
        if self.aka is not None and (not isinstance(self.aka, str) or not self.aka.strip()):
            raise ConfigurationError(f"Bot alias must be a non-empty string, got {self.aka!r}")

    def addressing_names(self) -> list[str]:
        """Names in the order they are tried: longest first, primary name on ties."""
        if self.aka is None or self.aka == self.name:
            return [self.name]
        # sorted() is stable, so the primary name stays first on equal length
        return sorted([self.name, self.aka], key=len, reverse=True)


def rewrite_source(source: str, identity: BotIdentity, flags: int = 0) -> str:
    """Wrap a pattern source in the addressing prefix for ``identity``."""
    source = _LEADING_FLAGS.sub("", source)
    if flags & re.VERBOSE:
        # a trailing comment would otherwise swallow the closing parenthesis
        source += "\n"
    names = [re.escape(n) for n in identity.addressing_names()]
    if len(names) == 1:
        return rf"^\s*[@]?{names[0]}[:,]?\s*(?:{source})"
    a, b = names
    return rf"^\s*[@]?(?:{a}[:,]?|{b}[:,]?)\s*(?:{source})"


def compile_addressed(pattern: re.Pattern[str], identity: BotIdentity) -> re.Pattern[str]:
    """Compile a new pattern that matches ``pattern`` only after the bot's name.

    Given name "hal" and alias "hal9000", ``ping`` becomes a pattern accepting
    "hal ping", "@hal9000: ping" or "  hal, ping", but not a bare "ping".
    The declared pattern's flags carry over unchanged.

    Raises:
        ConfigurationError: If the identity has no usable name.
        PatternError: If the rewritten source does not compile.
    """
    identity.validate()
    if not isinstance(pattern.pattern, str):
        raise PatternError(
            f"Addressed pattern {pattern.pattern!r} is not a text pattern",
            pattern=pattern.pattern,
        )
    source = rewrite_source(pattern.pattern, identity, pattern.flags)
    try:
        return re.compile(source, pattern.flags)
    except re.error as e:
        raise PatternError(
            f"Addressed pattern {pattern.pattern!r} does not compile after rewriting: {e}",
            pattern=pattern.pattern,
        ) from e
