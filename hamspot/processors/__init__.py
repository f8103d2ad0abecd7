"""Spot normalization, filtering and deduplication."""

from .base import BaseProcessor, ProcessorPipeline
from .dedup import DedupProcessor
from .filter import FilterProcessor, is_relevant, accepted_modes
from .normalize import from_pota, from_hamalert, is_qrt

__all__ = [
    "BaseProcessor",
    "ProcessorPipeline",
    "DedupProcessor",
    "FilterProcessor",
    "is_relevant",
    "accepted_modes",
    "from_pota",
    "from_hamalert",
    "is_qrt",
]
