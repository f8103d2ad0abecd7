"""Base collector interface."""

from abc import ABC, abstractmethod
from typing import AsyncIterator

from hamspot.schemas import Spot


class BaseCollector(ABC):
    """Base class for spot sources."""

    @abstractmethod
    async def start(self) -> None:
        """Start the collector."""
        pass

    @abstractmethod
    async def stop(self) -> None:
        """Stop the collector."""
        pass

    @abstractmethod
    async def collect(self) -> AsyncIterator[Spot]:
        """Collect normalized spots from the source."""
        pass
