"""Responder groups shipped with responder-bot."""

from .greeting import group as greeting_group
from .help import group as help_group
from .ping import group as ping_group

__all__ = ["greeting_group", "help_group", "ping_group"]
