"""Audio analysis handle contract and synthetic handles.

A handle behaves like a Web Audio analyser node: it reports a fixed number of
frequency bins and, on request, fills a caller-owned byte buffer with the
current time-domain waveform as unsigned 8-bit samples biased at 128.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable, Sequence
from typing import Protocol, runtime_checkable

PCM_BIAS = 128
DEFAULT_FFT_SIZE = 512
DEFAULT_SAMPLE_RATE = 44_100


@runtime_checkable
class AudioAnalysisHandle(Protocol):
    """Live analysis capability borrowed (read-only) by the sampler."""

    @property
    def frequency_bin_count(self) -> int: ...

    def get_byte_time_domain_data(self, buffer: bytearray) -> None: ...


def to_unsigned_byte(value: float) -> int:
    """Map a float sample in [-1, 1] onto the biased 8-bit range [0, 255]."""
    if not math.isfinite(value):
        return PCM_BIAS
    scaled = int(math.floor(PCM_BIAS * (1.0 + value)))
    return max(0, min(255, scaled))


class SilentAnalyser:
    """Attached handle producing true silence (every sample at the bias)."""

    def __init__(self, *, fft_size: int = DEFAULT_FFT_SIZE) -> None:
        self._bin_count = max(0, fft_size // 2)

    @property
    def frequency_bin_count(self) -> int:
        return self._bin_count

    def get_byte_time_domain_data(self, buffer: bytearray) -> None:
        for idx in range(len(buffer)):
            buffer[idx] = PCM_BIAS


class ToneAnalyser:
    """Deterministic synthetic signal: a sum of partials under a slow swell.

    The waveform window ends at the current playhead, so successive polls see
    the signal move. ``duration_s`` makes the tone finite; once the playhead
    passes it the handle reports `finished` and yields silence, letting the
    host detach it the way a player detaches on track end.
    """

    def __init__(
        self,
        *,
        partials: Sequence[tuple[float, float]] = ((220.0, 0.55), (330.0, 0.25)),
        fft_size: int = DEFAULT_FFT_SIZE,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        swell_hz: float = 0.5,
        duration_s: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._partials = tuple(partials)
        self._bin_count = max(0, fft_size // 2)
        self._sample_rate = max(1, sample_rate)
        self._swell_hz = swell_hz
        self._duration_s = duration_s
        self._clock = clock
        self._started_s = clock()

    @property
    def frequency_bin_count(self) -> int:
        return self._bin_count

    @property
    def position_s(self) -> float:
        return max(0.0, self._clock() - self._started_s)

    @property
    def finished(self) -> bool:
        return self._duration_s is not None and self.position_s >= self._duration_s

    def get_byte_time_domain_data(self, buffer: bytearray) -> None:
        if self.finished:
            for idx in range(len(buffer)):
                buffer[idx] = PCM_BIAS
            return
        count = len(buffer)
        end_s = self.position_s
        step = 1.0 / self._sample_rate
        for idx in range(count):
            t = end_s - (count - idx) * step
            buffer[idx] = to_unsigned_byte(self._sample_at(t))

    def _sample_at(self, t: float) -> float:
        phase = 2.0 * math.pi * self._swell_hz * t
        swell = 0.35 + 0.65 * (0.5 + 0.5 * math.sin(phase))
        value = sum(
            gain * math.sin(2.0 * math.pi * freq * t) for freq, gain in self._partials
        )
        return swell * value


def build_analyser(
    signal: str, *, duration_s: float | None = None
) -> AudioAnalysisHandle | None:
    """Build the synthetic handle for a ``--signal`` choice (``none`` -> None)."""
    if signal == "none":
        return None
    if signal == "silence":
        return SilentAnalyser()
    return ToneAnalyser(duration_s=duration_s)
