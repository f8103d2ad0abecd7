"""Base processor interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from hamspot.schemas import Spot


class BaseProcessor(ABC):
    """Interface for deciding whether a spot moves on (filtering, dedup)."""

    @abstractmethod
    async def process(self, spot: Spot) -> Optional[Spot]:
        """
        Process a spot.
        Return the spot to keep it, or None to drop it.
        """
        pass


class ProcessorPipeline:
    """Chains multiple processors together."""

    def __init__(self, processors: List[BaseProcessor]):
        self.processors = processors

    async def run(self, spot: Spot) -> Optional[Spot]:
        current = spot
        for p in self.processors:
            current = await p.process(current)
            if current is None:
                return None
        return current
