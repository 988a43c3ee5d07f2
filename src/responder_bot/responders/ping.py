"""Ping responder."""

import re

from responder_bot.core import ResponderGroup, reply

group = ResponderGroup("ping", usage=["bot ping - Responds with 'pong'"])


@group.respond(r"ping$", re.IGNORECASE)
async def ping(msg, opts):
    await reply(msg, "pong")
