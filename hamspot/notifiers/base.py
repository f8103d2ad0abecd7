"""Chat platform client interface."""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from pydantic import BaseModel


class ChatSendError(Exception):
    """A chat platform call failed.

    ``retry_after`` is set when the platform asked us to back off.
    """

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


class Member(BaseModel):
    id: str
    username: str


class ChatClient(ABC):
    """Interface for the outbound chat platform."""

    @abstractmethod
    async def connect(self) -> None:
        """Open the session and verify credentials."""
        pass

    @abstractmethod
    async def send_message(self, channel_id: str, text: str) -> str:
        """Post ``text`` to a channel, returning the platform message id."""
        pass

    @abstractmethod
    async def list_members(
        self, group_id: str, after: Optional[str] = None, limit: int = 1000
    ) -> Tuple[List[Member], Optional[str]]:
        """Return one page of members and the cursor for the next page."""
        pass

    async def close(self) -> None:
        pass
