"""Capture extraction for matched messages."""

import re

from responder_bot.core.message import MatchResult


def extract(
    pattern: re.Pattern[str], text: str, include_unmatched: bool = True
) -> MatchResult:
    """Build the MatchResult for a message the dispatcher already matched.

    Patterns with named groups yield ``{name: value}``; groups that did not
    take part map to None. Otherwise captures are keyed by position, 0 being
    the whole match. With ``include_unmatched=False`` positional groups that
    did not take part are left out instead of mapping to None.

    Only call this when ``pattern.search(text)`` succeeds.
    """
    match = pattern.search(text)
    if match is None:
        raise ValueError(f"Pattern {pattern.pattern!r} does not match {text!r}")

    if pattern.groupindex:
        return {name: match.group(name) for name in pattern.groupindex}

    groups = (match.group(0), *match.groups())
    return {
        index: value
        for index, value in enumerate(groups)
        if include_unmatched or value is not None
    }
