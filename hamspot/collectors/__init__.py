"""Spot producers."""

from .base import BaseCollector
from .pota import PotaCollector, PotaFetchError, PollerState
from .hamalert import HamAlertReceiver, create_router

__all__ = [
    "BaseCollector",
    "PotaCollector",
    "PotaFetchError",
    "PollerState",
    "HamAlertReceiver",
    "create_router",
]
