"""Asyncio frame scheduler for hosts without a display refresh callback."""

from __future__ import annotations

import asyncio
from collections.abc import Callable


class AsyncioFrameScheduler:
    """Run each requested frame once, ``1 / fps`` seconds from now."""

    def __init__(
        self, fps: int = 30, *, loop: asyncio.AbstractEventLoop | None = None
    ) -> None:
        self._interval_s = 1.0 / max(1, fps)
        self._loop = loop

    @property
    def interval_s(self) -> float:
        return self._interval_s

    def request_frame(self, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(self._interval_s, callback)

    def cancel_frame(self, handle: object) -> None:
        if isinstance(handle, asyncio.TimerHandle):
            handle.cancel()
