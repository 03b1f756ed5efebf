"""Shared renderer contracts: visual configuration and frame scheduling.

The host supplies a `VisualConfig` through a zero-argument callable that the
renderer re-reads on every frame, and a `FrameScheduler` that decides when the
next frame runs (display refresh in a real host, a Textual timer in the TUI).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

DEFAULT_OVERSAMPLING = 3
DEFAULT_WAVE_COLOR = "#60a5fa"
DEFAULT_DOT_COLOR = "#4ade80"
IDLE_DOT_COLOR = "#2d3748"
DEFAULT_BACKGROUND = "#000000"


@dataclass(frozen=True)
class VisualConfig:
    """Rendering parameters owned by the host and read-only to the renderer."""

    wave_color: str = DEFAULT_WAVE_COLOR
    dot_color: str = DEFAULT_DOT_COLOR
    amplitude: float = 1.5
    number_of_bars: int = 50
    dot_count: int = 8
    show_dots: bool = True


ConfigSource = Callable[[], VisualConfig]
BufferSource = Callable[[], bytes]


class FrameScheduler(Protocol):
    """Per-frame callback scheduling used by the renderer loop."""

    def request_frame(self, callback: Callable[[], None]) -> object: ...
    def cancel_frame(self, handle: object) -> None: ...
