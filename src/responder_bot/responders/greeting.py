"""Greets people who say hello anywhere in the room."""

import re

from responder_bot.core import Message, ResponderGroup, random_choice, reply

group = ResponderGroup("greeting")

REPLIES = ["hi there!", "hello!", "hey, good to see you", "oh hi"]


@group.hear(r"(?P<greeting>hi|hello|hey)\b", re.IGNORECASE)
async def greet(msg: Message, opts) -> None:
    # An options entry overrides the default reply pool
    await reply(msg, random_choice(opts.get("replies", REPLIES)))
