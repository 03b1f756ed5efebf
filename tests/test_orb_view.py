"""Textual integration tests for the orb view and host app."""

from __future__ import annotations

import asyncio

from textual.app import App, ComposeResult

from ringwave.app import RingwaveApp
from ringwave.events import OrbViewStartFailed
from ringwave.ui.modals.error import ErrorModal
from ringwave.ui.orb_view import OrbView
from ringwave.visualizers.base import VisualConfig


def _run(coro):
    """Run async Textual scenario from sync test function."""
    return asyncio.run(coro)


class _OrbHostApp(App):
    """Minimal host that records orb view start failures."""

    def __init__(self, **view_kwargs) -> None:
        super().__init__()
        self.buffer = b""
        self.config = VisualConfig(dot_count=4, number_of_bars=20)
        self.failures: list[str] = []
        self._view_kwargs = view_kwargs

    def compose(self) -> ComposeResult:
        yield OrbView(
            buffer_source=lambda: self.buffer,
            config_source=lambda: self.config,
            fps=60,
            id="orb",
            **self._view_kwargs,
        )

    def on_orb_view_start_failed(self, message: OrbViewStartFailed) -> None:
        self.failures.append(message.reason)


def test_orb_view_sizes_surface_from_cells_and_renders_frames() -> None:
    app = _OrbHostApp()

    async def run_app() -> None:
        async with app.run_test(size=(40, 12)) as pilot:
            await pilot.pause(0.1)
            view = app.query_one(OrbView)
            surface = view.renderer.surface
            assert surface is not None
            assert surface.device_width == view.size.width * 3
            assert surface.device_height == view.size.height * 2 * 3
            assert view.renderer.frame_index > 0
            rendered = view.render()
            assert rendered.plain.count("\n") == view.size.height - 1
            app.exit()

    _run(run_app())
    assert app.failures == []


def test_orb_view_reports_missing_surface() -> None:
    app = _OrbHostApp(surface_factory=lambda **_: None)

    async def run_app() -> None:
        async with app.run_test(size=(30, 10)) as pilot:
            await pilot.pause()
            view = app.query_one(OrbView)
            assert view.renderer.running is False
            assert view.render().plain == "Visualizer unavailable"
            app.exit()

    _run(run_app())
    assert len(app.failures) == 1
    assert "unavailable" in app.failures[0]


def test_app_attaches_tone_and_toggles_playback() -> None:
    app = RingwaveApp(signal="tone", fps=30)

    async def run_app() -> None:
        async with app.run_test(size=(60, 20)) as pilot:
            await pilot.pause()
            assert app.sampler.handle is not None
            assert len(app.sampler.latest) == 256
            await pilot.press("space")
            assert app.sampler.handle is None
            assert app.sampler.latest == b""
            assert app.status_text.startswith("STOPPED")
            await pilot.press("space")
            assert app.sampler.handle is not None
            app.exit()

    _run(run_app())
    assert app.sampler.latest == b""


def test_app_key_bindings_update_config_within_bounds() -> None:
    app = RingwaveApp(signal="none", config=VisualConfig(amplitude=2.9))

    async def run_app() -> None:
        async with app.run_test(size=(60, 20)) as pilot:
            await pilot.pause()
            await pilot.press("d")
            assert app.visual_config.show_dots is False
            await pilot.press("plus", "plus")
            assert app.visual_config.amplitude == 3.0
            await pilot.press("minus")
            assert app.visual_config.amplitude == 2.9
            await pilot.press("right_square_bracket")
            assert app.visual_config.number_of_bars == 55
            await pilot.press("comma")
            assert app.visual_config.dot_count == 7
            app.exit()

    _run(run_app())


def test_app_detaches_finished_signal() -> None:
    app = RingwaveApp(signal="tone", tone_duration_s=0.05)

    async def run_app() -> None:
        async with app.run_test(size=(40, 12)) as pilot:
            await pilot.pause(0.6)
            assert app.sampler.handle is None
            assert app.sampler.latest == b""
            app.exit()

    _run(run_app())


def test_app_flags_startup_failure_when_surface_missing(monkeypatch) -> None:
    pushed: list[object] = []

    async def capture_push_screen(self, screen, *args, **kwargs):
        pushed.append(screen)
        return None

    monkeypatch.setattr(RingwaveApp, "push_screen", capture_push_screen)
    app = RingwaveApp(signal="tone", surface_factory=lambda **_: None)

    async def run_app() -> None:
        async with app.run_test(size=(40, 12)) as pilot:
            await pilot.pause()
            assert app.startup_failed is True
            assert app.sampler.handle is None
            app.exit()

    _run(run_app())
    assert any(
        isinstance(screen, ErrorModal)
        and "Failed to start the visualizer." in screen._message
        for screen in pushed
    )
