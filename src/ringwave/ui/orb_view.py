"""Textual widget hosting the orb renderer."""

from __future__ import annotations

import logging
from collections.abc import Callable

from rich.text import Text
from textual.events import Resize
from textual.timer import Timer
from textual.widget import Widget

from ringwave.events import OrbViewStartFailed
from ringwave.visualizers.base import (
    DEFAULT_OVERSAMPLING,
    BufferSource,
    ConfigSource,
)
from ringwave.visualizers.halfblock import logical_size_for_cells, render_halfblock
from ringwave.visualizers.orb import OrbRenderer, SurfaceUnavailableError
from ringwave.visualizers.surface import RasterSurface

logger = logging.getLogger(__name__)


class OrbView(Widget):
    """Draws the orb into half-block cells, one frame per timer tick.

    The widget doubles as the renderer's frame scheduler: each requested frame
    is a one-shot Textual timer, so frames stop as soon as the widget unmounts.
    """

    DEFAULT_CSS = """
    OrbView {
        width: 1fr;
        height: 1fr;
    }
    """

    def __init__(
        self,
        *,
        buffer_source: BufferSource,
        config_source: ConfigSource,
        fps: int = 30,
        oversampling: int = DEFAULT_OVERSAMPLING,
        surface_factory: Callable[..., RasterSurface | None] = RasterSurface,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._interval_s = 1.0 / max(1, fps)
        self._renderer = OrbRenderer(
            buffer_source=buffer_source,
            config_source=config_source,
            scheduler=self,
            surface_factory=surface_factory,
            oversampling=oversampling,
            on_frame=self._frame_rendered,
        )

    @property
    def renderer(self) -> OrbRenderer:
        return self._renderer

    def request_frame(self, callback: Callable[[], None]) -> Timer:
        return self.set_timer(self._interval_s, callback, name="orb-frame")

    def cancel_frame(self, handle: object) -> None:
        if isinstance(handle, Timer):
            handle.stop()

    def on_mount(self) -> None:
        width, height = logical_size_for_cells(self.size.width, self.size.height)
        try:
            self._renderer.start(width, height)
        except SurfaceUnavailableError as exc:
            logger.error("Orb view could not start: %s", exc)
            self.post_message(OrbViewStartFailed(str(exc)))

    def on_resize(self, event: Resize) -> None:
        if not self._renderer.running:
            return
        width, height = logical_size_for_cells(event.size.width, event.size.height)
        self._renderer.resize(width, height)

    def on_unmount(self) -> None:
        self._renderer.stop()

    def render(self) -> Text:
        surface = self._renderer.surface
        if surface is None:
            return Text("Visualizer unavailable")
        return render_halfblock(surface)

    def _frame_rendered(self, frame_index: int) -> None:
        del frame_index
        self.refresh()
