"""Utilities for hamspot."""

from .cache import DedupCache, MemoryDedupCache, RedisDedupCache, format_key
from .queue import OutboundQueue, MemoryOutboundQueue, RedisOutboundQueue
from .logging import setup_logging

__all__ = [
    "DedupCache",
    "MemoryDedupCache",
    "RedisDedupCache",
    "format_key",
    "OutboundQueue",
    "MemoryOutboundQueue",
    "RedisOutboundQueue",
    "setup_logging",
]
