"""Core matching and dispatch logic."""

from .captures import extract
from .compiler import BotIdentity, compile_addressed
from .dispatcher import DispatchResult, Dispatcher, dispatch, run
from .errors import ConfigurationError, HandlerError, PatternError, ResponderError
from .installer import DispatchEntry, install
from .message import Message, emote, random_choice, reply, send
from .registry import HandlerRef, RegistryEntry, ResponderGroup
from .robot import Adapter, Robot, load_group

__all__ = [
    "Adapter",
    "BotIdentity",
    "ConfigurationError",
    "DispatchEntry",
    "DispatchResult",
    "Dispatcher",
    "HandlerError",
    "HandlerRef",
    "Message",
    "PatternError",
    "RegistryEntry",
    "ResponderError",
    "ResponderGroup",
    "Robot",
    "compile_addressed",
    "dispatch",
    "emote",
    "extract",
    "install",
    "load_group",
    "random_choice",
    "reply",
    "run",
    "send",
]
