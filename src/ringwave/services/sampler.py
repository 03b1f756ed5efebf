"""Fixed-cadence sampler publishing the latest time-domain sample buffer.

The sampler polls whichever analysis handle is attached and republishes the
result as an immutable `bytes` object. Readers (the renderer) only ever swap
in the whole object, so a frame sees either the previous buffer or the new
one, never a partially written one.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from contextlib import suppress

from .audio_analysis import PCM_BIAS, AudioAnalysisHandle

logger = logging.getLogger(__name__)

REFRESH_INTERVAL_S = 0.05
EMPTY_BUFFER = b""


class Sampler:
    """Poll an optional analysis handle and publish its time-domain samples."""

    def __init__(
        self,
        *,
        interval_s: float = REFRESH_INTERVAL_S,
        on_publish: Callable[[bytes], None] | None = None,
    ) -> None:
        self._interval_s = max(0.001, interval_s)
        self._on_publish = on_publish
        self._handle: AudioAnalysisHandle | None = None
        self._latest = EMPTY_BUFFER
        self._task: asyncio.Task[None] | None = None
        self._poll_count = 0
        self._fill_failures = 0

    @property
    def latest(self) -> bytes:
        """Most recently published sample buffer (empty when idle)."""
        return self._latest

    @property
    def handle(self) -> AudioAnalysisHandle | None:
        return self._handle

    @property
    def interval_s(self) -> float:
        return self._interval_s

    @property
    def poll_count(self) -> int:
        return self._poll_count

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def attach(self, handle: AudioAnalysisHandle | None) -> None:
        """Attach (or swap, or with ``None`` detach) the polled handle.

        The previous poll loop is cancelled before the new one starts, and the
        first sample is taken immediately rather than one interval later.
        Must be called from the running event loop when ``handle`` is set.
        """
        if handle is None:
            self.detach()
            return
        loop = asyncio.get_running_loop()
        self._cancel_task()
        self._handle = handle
        self._fill_failures = 0
        self.poll()
        logger.info(
            "Analysis handle attached",
            extra={
                "event": "sampler_attached",
                "bin_count": len(self._latest),
                "interval_s": self._interval_s,
            },
        )
        self._task = loop.create_task(self._poll_loop())

    def detach(self) -> None:
        """Stop polling and publish an empty buffer right away."""
        had_handle = self._handle is not None
        self._cancel_task()
        self._handle = None
        self._publish(EMPTY_BUFFER)
        if had_handle:
            logger.info(
                "Analysis handle detached",
                extra={"event": "sampler_detached", "polls": self._poll_count},
            )

    async def shutdown(self) -> None:
        """Tear down: cancel and await the poll loop, then clear the buffer."""
        task = self._task
        self._task = None
        if task is not None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        self._handle = None
        self._publish(EMPTY_BUFFER)

    def poll(self) -> bytes:
        """Take one sample from the attached handle and publish it."""
        handle = self._handle
        if handle is None:
            self._publish(EMPTY_BUFFER)
            return EMPTY_BUFFER
        try:
            count = _bin_count(handle)
            buffer = bytearray(count)
            handle.get_byte_time_domain_data(buffer)
        except Exception as exc:
            self._fill_failures += 1
            if self._fill_failures == 1:
                logger.warning("Analysis handle failed to provide samples: %s", exc)
            self._publish(EMPTY_BUFFER)
            return EMPTY_BUFFER
        self._fill_failures = 0
        self._poll_count += 1
        if len(buffer) != count:
            buffer = buffer[:count].ljust(count, bytes([PCM_BIAS]))
        published = bytes(buffer)
        self._publish(published)
        return published

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval_s)
            try:
                self.poll()
            except Exception as exc:  # pragma: no cover - poll loop safety net
                logger.exception("Sample poll failed: %s", exc)
                self._latest = EMPTY_BUFFER

    def _cancel_task(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def _publish(self, buffer: bytes) -> None:
        self._latest = buffer
        if self._on_publish is not None:
            self._on_publish(buffer)


def _bin_count(handle: AudioAnalysisHandle) -> int:
    return max(0, int(handle.frequency_bin_count))

