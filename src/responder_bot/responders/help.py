"""Help responder listing the usage of every loaded group."""

import re

from responder_bot.core import ResponderGroup, send

group = ResponderGroup(
    "help",
    usage=[
        "bot help - Displays all of the help commands that bot knows about.",
        "bot help <query> - Displays all help commands that match <query>.",
    ],
)


@group.respond(r"help(?:\s+(?P<query>.+?))?\s*$", re.IGNORECASE)
async def show_help(msg, opts):
    lines = msg.robot.usage()
    query = msg.matches.get("query")
    if query:
        lines = [line for line in lines if query.lower() in line.lower()]
        if not lines:
            await send(msg, f"No available commands match {query}")
            return
    await send(msg, "\n".join(sorted(lines)))
