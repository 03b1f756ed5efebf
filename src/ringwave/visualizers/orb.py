"""Orb renderer: dot rings plus a centered amplitude bar graph.

The renderer owns its drawing surface and a single pending frame callback.
Each frame re-reads the latest sample buffer and visual configuration, so
configuration changes and newly published buffers show up on the next frame
without restarting anything.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .base import (
    DEFAULT_BACKGROUND,
    DEFAULT_DOT_COLOR,
    DEFAULT_OVERSAMPLING,
    DEFAULT_WAVE_COLOR,
    IDLE_DOT_COLOR,
    BufferSource,
    ConfigSource,
    FrameScheduler,
    VisualConfig,
)
from .geometry import DOT_RADIUS, bar_shapes, dot_rings, trace_rounded_rect
from .surface import RGB, RasterSurface, parse_rgb

logger = logging.getLogger(__name__)

ACTIVE_DOT_ALPHA = 0.6
IDLE_DOT_ALPHA = 0.3


class SurfaceUnavailableError(RuntimeError):
    """Raised when the renderer cannot acquire a drawing surface at start."""


class OrbRenderer:
    """Per-frame redraw loop for the orb visualization."""

    def __init__(
        self,
        *,
        buffer_source: BufferSource,
        config_source: ConfigSource,
        scheduler: FrameScheduler,
        surface_factory: Callable[..., RasterSurface | None] = RasterSurface,
        oversampling: float = DEFAULT_OVERSAMPLING,
        background: str = DEFAULT_BACKGROUND,
        idle_dot_color: str = IDLE_DOT_COLOR,
        on_frame: Callable[[int], None] | None = None,
    ) -> None:
        self._buffer_source = buffer_source
        self._config_source = config_source
        self._scheduler = scheduler
        self._surface_factory = surface_factory
        self._oversampling = oversampling if oversampling > 0 else 1
        self._background = parse_rgb(background) or (0, 0, 0)
        self._idle_dot_rgb = parse_rgb(idle_dot_color) or (45, 55, 72)
        self._on_frame = on_frame
        self._surface: RasterSurface | None = None
        self._pending: object | None = None
        self._frame_index = 0
        self._logical_size = (0.0, 0.0)
        self._warned_colors: set[str] = set()

    @property
    def surface(self) -> RasterSurface | None:
        return self._surface

    @property
    def running(self) -> bool:
        return self._surface is not None

    @property
    def frame_index(self) -> int:
        return self._frame_index

    @property
    def oversampling(self) -> float:
        return self._oversampling

    @property
    def logical_size(self) -> tuple[float, float]:
        return self._logical_size

    def start(self, width: float, height: float) -> None:
        """Acquire the surface, size it to the container and schedule frames.

        Raises `SurfaceUnavailableError` without scheduling anything when no
        surface can be created.
        """
        if self._surface is not None:
            return
        try:
            surface = self._surface_factory(background=self._background)
        except Exception as exc:
            raise SurfaceUnavailableError(
                f"Drawing surface could not be created: {exc}"
            ) from exc
        if surface is None:
            raise SurfaceUnavailableError("Drawing surface is unavailable.")
        self._surface = surface
        self.resize(width, height)
        logger.info(
            "Orb renderer started",
            extra={
                "event": "renderer_started",
                "width": width,
                "height": height,
                "oversampling": self._oversampling,
            },
        )
        self._pending = self._scheduler.request_frame(self._on_frame_due)

    def stop(self) -> None:
        """Cancel the pending frame and release the surface."""
        if self._pending is not None:
            self._scheduler.cancel_frame(self._pending)
            self._pending = None
        if self._surface is not None:
            logger.info(
                "Orb renderer stopped",
                extra={"event": "renderer_stopped", "frames": self._frame_index},
            )
        self._surface = None

    def resize(self, width: float, height: float) -> None:
        """Match the surface to a container of ``width x height`` logical units."""
        width = max(0.0, float(width))
        height = max(0.0, float(height))
        self._logical_size = (width, height)
        surface = self._surface
        if surface is None:
            return
        surface.resize(
            int(round(width * self._oversampling)),
            int(round(height * self._oversampling)),
        )
        surface.set_scale(self._oversampling)
        logger.debug(
            "Orb surface resized to %sx%s device pixels",
            surface.device_width,
            surface.device_height,
        )

    def render_frame(self) -> None:
        """Paint one frame from the current buffer and configuration."""
        surface = self._surface
        if surface is None:
            return
        config = self._config_source()
        samples = self._buffer_source()
        width = surface.logical_width
        height = surface.logical_height

        surface.clear()
        if config.show_dots:
            self._draw_dots(surface, config, bool(samples), width, height)
        if samples:
            self._draw_bars(surface, config, samples, width, height)
        self._frame_index += 1

    def _on_frame_due(self) -> None:
        self._pending = None
        if self._surface is None:
            return
        try:
            self.render_frame()
        except Exception as exc:  # pragma: no cover - render safety net
            logger.exception("Orb frame render failed: %s", exc)
        if self._on_frame is not None:
            self._on_frame(self._frame_index)
        if self._surface is not None and self._pending is None:
            self._pending = self._scheduler.request_frame(self._on_frame_due)

    def _draw_dots(
        self,
        surface: RasterSurface,
        config: VisualConfig,
        has_audio: bool,
        width: float,
        height: float,
    ) -> None:
        if has_audio:
            color = self._color(config.dot_color, DEFAULT_DOT_COLOR)
            surface.set_fill(color, ACTIVE_DOT_ALPHA)
        else:
            surface.set_fill(self._idle_dot_rgb, IDLE_DOT_ALPHA)
        center_x = width / 2.0
        center_y = height / 2.0
        for ring in dot_rings(config.dot_count, width, height):
            for x, y in ring.positions(center_x, center_y):
                surface.fill_circle(x, y, DOT_RADIUS)

    def _draw_bars(
        self,
        surface: RasterSurface,
        config: VisualConfig,
        samples: bytes,
        width: float,
        height: float,
    ) -> None:
        surface.set_fill(self._color(config.wave_color, DEFAULT_WAVE_COLOR))
        for shape in bar_shapes(
            samples,
            number_of_bars=config.number_of_bars,
            width=width,
            height=height,
            amplitude=config.amplitude,
        ):
            surface.fill_polygon(trace_rounded_rect(shape.rect))

    def _color(self, value: str, default: str) -> RGB:
        rgb = parse_rgb(value)
        if rgb is not None:
            return rgb
        if value not in self._warned_colors:
            self._warned_colors.add(value)
            logger.warning("Unparseable color %r; drawing with %s", value, default)
        return parse_rgb(default) or (255, 255, 255)
