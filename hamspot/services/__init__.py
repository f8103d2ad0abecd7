"""Services shared by the spot producers."""

from .members import MemberDirectory
from .relay import SpotRelay

__all__ = ["MemberDirectory", "SpotRelay"]
