"""HamAlert webhook receiver."""

import asyncio
from typing import Optional, Set

from fastapi import APIRouter, HTTPException, Request, Response
from loguru import logger
from pydantic import ValidationError

from hamspot.processors.normalize import MemberCheck, from_hamalert, no_members
from hamspot.schemas import HamAlertPayload
from hamspot.services.relay import SpotRelay


class HamAlertReceiver:
    """Accept pushed spots and relay them off the request path.

    Each accepted payload runs in its own task; at most ``max_inflight``
    of them do work at once and at most ``max_pending`` may be scheduled.
    Past that, new payloads are refused until the backlog drains.
    """

    def __init__(
        self,
        relay: SpotRelay,
        max_inflight: int = 32,
        max_pending: int = 1000,
        is_member: MemberCheck = no_members,
    ):
        self.relay = relay
        self.max_pending = max_pending
        self.is_member = is_member
        self._slots = asyncio.Semaphore(max_inflight)
        self._tasks: Set[asyncio.Task] = set()

    @staticmethod
    def parse(body: bytes) -> HamAlertPayload:
        """Decode a webhook body, raising ValueError when it is not a valid payload."""
        try:
            return HamAlertPayload.model_validate_json(body)
        except ValidationError as e:
            raise ValueError(f"Invalid JSON payload: {e.error_count()} error(s)") from e

    def accept(self, payload: HamAlertPayload) -> Optional[asyncio.Task]:
        """Schedule processing and return immediately; None when the backlog is full."""
        if len(self._tasks) >= self.max_pending:
            logger.warning(f"Webhook backlog full ({self.max_pending}), refusing spot for {payload.callsign}")
            return None
        task = asyncio.create_task(self._process(payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _process(self, payload: HamAlertPayload) -> bool:
        async with self._slots:
            try:
                spot = from_hamalert(payload, self.is_member)
                if spot is None:
                    return False
                return await self.relay.submit(spot)
            except Exception as e:
                logger.error(f"Error relaying HamAlert spot {payload.callsign}: {e}")
                return False

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every scheduled payload to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


def create_router(receiver: HamAlertReceiver, path: str = "/webhook/hamalert") -> APIRouter:
    """Router exposing the receiver at ``path`` (POST only)."""
    router = APIRouter()

    @router.post(path, status_code=204, response_class=Response)
    async def hamalert_webhook(request: Request) -> Response:
        body = await request.body()
        try:
            payload = receiver.parse(body)
        except ValueError as e:
            logger.warning(f"Rejected HamAlert webhook: {e}")
            raise HTTPException(status_code=400, detail="Invalid JSON payload")

        if receiver.accept(payload) is None:
            raise HTTPException(status_code=503, detail="Too many pending spots")
        # HamAlert ignores the body, so answer before the spot is processed
        return Response(status_code=204)

    return router
