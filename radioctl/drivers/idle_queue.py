"""Deferred delivery of driver completions on the running event loop."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Hashable
from typing import Any


class IdleQueue:
    """Completions keyed by tag, each fired on a later loop iteration.

    Queuing a completion under a tag that is still pending replaces the
    earlier one. ``cancel_all`` drops everything not yet delivered; the
    corresponding awaiters see ``CancelledError``.
    """

    def __init__(self) -> None:
        self._entries: dict[Hashable, tuple[asyncio.Handle, asyncio.Future[Any]]] = {}

    def later(self, tag: Hashable, fn: Callable[[], Any]) -> asyncio.Future[Any]:
        loop = asyncio.get_running_loop()
        self.cancel(tag)
        future: asyncio.Future[Any] = loop.create_future()

        def _fire() -> None:
            self._entries.pop(tag, None)
            if future.done():
                return
            try:
                result = fn()
            except Exception as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)

        self._entries[tag] = (loop.call_soon(_fire), future)
        return future

    def cancel(self, tag: Hashable) -> bool:
        entry = self._entries.pop(tag, None)
        if entry is None:
            return False
        handle, future = entry
        handle.cancel()
        future.cancel()
        return True

    def cancel_all(self) -> None:
        for tag in list(self._entries):
            self.cancel(tag)

    def __len__(self) -> int:
        return len(self._entries)
