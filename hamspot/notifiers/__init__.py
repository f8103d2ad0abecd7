"""Outbound delivery to the chat platform."""

from .base import ChatClient, ChatSendError, Member
from .discord import DiscordClient
from .dispatcher import Dispatcher
from .template import SpotTemplate

__all__ = ["ChatClient", "ChatSendError", "Member", "DiscordClient", "Dispatcher", "SpotTemplate"]
