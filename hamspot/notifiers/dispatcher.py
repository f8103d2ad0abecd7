"""Single consumer delivering queued messages to the chat channel."""

import asyncio
from collections import deque
from typing import Awaitable, Callable, Deque, Optional

from loguru import logger

from hamspot.schemas import DeadLetter, OutboundMessage
from hamspot.utils.queue import OutboundQueue
from .base import ChatClient, ChatSendError


class Dispatcher:
    """Drain the outbound queue into the chat client.

    Polls the queue, sleeping ``idle_interval`` seconds whenever it is
    empty. Each message gets up to ``max_attempts`` sends with exponential
    backoff between them; a message that still fails is logged, kept in
    ``dead_letters`` and dropped.
    """

    def __init__(
        self,
        queue: OutboundQueue,
        client: ChatClient,
        idle_interval: float = 0.1,
        max_attempts: int = 1,
        backoff_base: float = 1.0,
        dead_letter_size: int = 100,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.queue = queue
        self.client = client
        self.idle_interval = idle_interval
        self.max_attempts = max(1, max_attempts)
        self.backoff_base = backoff_base
        self.dead_letters: Deque[DeadLetter] = deque(maxlen=dead_letter_size)
        self._sleep = sleep
        self._running = False
        self.sent = 0
        self.failed = 0

    async def run(self) -> None:
        """Main loop; returns after stop() or when cancelled."""
        self._running = True
        logger.info("Dispatcher started")
        try:
            while self._running:
                try:
                    message = await self.queue.dequeue()
                except Exception as e:
                    logger.error(f"Error reading from queue: {e}")
                    await self._sleep(self.idle_interval)
                    continue

                if message is None:
                    await self._sleep(self.idle_interval)
                    continue

                await self.deliver(message)
        finally:
            self._running = False
            logger.info("Dispatcher stopped")

    def stop(self) -> None:
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def deliver(self, message: OutboundMessage) -> Optional[str]:
        """Send one message, returning its id, or None once it has been dropped."""
        error: Optional[Exception] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                message_id = await self.client.send_message(message.channel, message.text)
            except Exception as e:
                error = e
                logger.warning(f"Send attempt {attempt}/{self.max_attempts} to {message.channel} failed: {e}")
                if attempt < self.max_attempts:
                    await self._sleep(self._backoff(attempt, e))
                continue

            self.sent += 1
            logger.info(f"Sent message to {message.channel} - message id {message_id}")
            return message_id

        self.failed += 1
        self.dead_letters.append(DeadLetter(message=message, error=str(error), attempts=self.max_attempts))
        logger.error(f"Dropping message for {message.channel} after {self.max_attempts} attempt(s): {error}")
        return None

    def _backoff(self, attempt: int, error: Exception) -> float:
        delay = self.backoff_base * 2 ** (attempt - 1)
        if isinstance(error, ChatSendError) and error.retry_after is not None:
            delay = max(delay, error.retry_after)
        return delay

    def stats(self) -> dict:
        return {"sent": self.sent, "failed": self.failed, "dead_letters": len(self.dead_letters)}
