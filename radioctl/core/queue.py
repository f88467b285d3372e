"""Serialized request handling for a single settings instance."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from radioctl.core.errors import SettingsClosedError

LOGGER = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[Any]]


@dataclass
class _Request:
    handler: Handler
    args: tuple[Any, ...]
    future: asyncio.Future[Any]


class RequestQueue:
    """FIFO of requests serviced strictly one at a time.

    A request is dequeued only after its handler has finished, so state
    committed or rolled back by request N is visible to request N+1.
    """

    def __init__(self) -> None:
        self._requests: deque[_Request] = deque()
        self._worker: asyncio.Task[None] | None = None
        self._closed = False

    def submit(self, handler: Handler, *args: Any) -> asyncio.Future[Any]:
        if self._closed:
            raise SettingsClosedError("Radio settings have been removed")
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()
        self._requests.append(_Request(handler, args, future))
        if self._worker is None or self._worker.done():
            self._worker = loop.create_task(self._run())
        return future

    def reply_all(self, handler: Handler, fn: Callable[[], Any]) -> int:
        """Resolve every waiting request bound to ``handler`` with ``fn()``."""
        replied = 0
        for request in self._requests:
            if request.handler == handler and not request.future.done():
                request.future.set_result(fn())
                replied += 1
        return replied

    def pending(self) -> int:
        return len(self._requests)

    async def _run(self) -> None:
        while self._requests:
            request = self._requests[0]
            if not request.future.done():
                try:
                    result = await request.handler(*request.args)
                except Exception as exc:
                    LOGGER.debug("%s failed: %s", getattr(request.handler, "__name__", request.handler), exc)
                    if not request.future.done():
                        request.future.set_exception(exc)
                else:
                    if not request.future.done():
                        request.future.set_result(result)
            self._requests.popleft()

    def close(self) -> None:
        self._closed = True
        if self._worker is not None and not self._worker.done():
            self._worker.cancel()
        self._worker = None
        while self._requests:
            request = self._requests.popleft()
            if not request.future.done():
                request.future.set_exception(SettingsClosedError("Radio settings have been removed"))
