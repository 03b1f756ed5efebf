"""Textual TUI host for the ringwave orb visualizer.

The app plays the part of the external collaborator: it owns the visual
configuration, attaches and detaches synthetic analysis handles, and lets the
orb view and sampler do the rest.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

from textual.app import App, ComposeResult
from textual.timer import Timer
from textual.widgets import Footer, Header, Static

from . import __version__
from .events import OrbViewStartFailed
from .logging_utils import setup_logging
from .paths import log_dir
from .runtime_config import (
    AMPLITUDE_STEP,
    BARS_STEP,
    DOT_RINGS_STEP,
    add_visual_arguments,
    clamp_fps,
    clamp_oversampling,
    normalize_visual_config,
    resolve_log_level,
    visual_config_from_args,
)
from .services.audio_analysis import build_analyser
from .services.sampler import Sampler
from .ui.modals.error import ErrorModal
from .ui.orb_view import OrbView
from .version import build_help_epilog
from .visualizers.base import DEFAULT_OVERSAMPLING, VisualConfig
from .visualizers.surface import RasterSurface

logger = logging.getLogger(__name__)
ENDED_CHECK_INTERVAL_S = 0.25
DEMO_CONFIG = VisualConfig(amplitude=2.0, number_of_bars=30, dot_count=8)


class RingwaveApp(App):
    TITLE = "ringwave"
    CSS = """
    Screen {
        layout: vertical;
        background: black;
    }

    #orb {
        height: 1fr;
    }

    #status-line {
        height: 1;
        overflow: hidden;
    }
    """

    BINDINGS = [
        ("space", "toggle_play", "Play/Stop"),
        ("d", "toggle_dots", "Dots"),
        ("plus,equals_sign", "amplitude_up", "Amp+"),
        ("minus", "amplitude_down", "Amp-"),
        ("right_square_bracket", "bars_up", "Bars+"),
        ("left_square_bracket", "bars_down", "Bars-"),
        ("full_stop", "rings_up", "Rings+"),
        ("comma", "rings_down", "Rings-"),
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        config: VisualConfig | None = None,
        signal: str = "tone",
        fps: int | None = None,
        oversampling: int = DEFAULT_OVERSAMPLING,
        tone_duration_s: float | None = None,
        surface_factory: Callable[..., RasterSurface | None] = RasterSurface,
    ) -> None:
        super().__init__()
        self.visual_config = config or DEMO_CONFIG
        self.sampler = Sampler()
        self.startup_failed = False
        self.status_text = ""
        self._signal = signal
        self._fps = clamp_fps(fps)
        self._oversampling = oversampling
        self._tone_duration_s = tone_duration_s
        self._surface_factory = surface_factory
        self._ended_timer: Timer | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield OrbView(
            buffer_source=lambda: self.sampler.latest,
            config_source=lambda: self.visual_config,
            fps=self._fps,
            oversampling=self._oversampling,
            surface_factory=self._surface_factory,
            id="orb",
        )
        yield Static("", id="status-line")
        yield Footer()

    def on_mount(self) -> None:
        if self._signal != "none" and not self.startup_failed:
            self._attach(self._signal)
        self._ended_timer = self.set_interval(
            ENDED_CHECK_INTERVAL_S, self._detach_if_ended
        )
        self._update_status_line()

    async def on_unmount(self) -> None:
        if self._ended_timer is not None:
            self._ended_timer.stop()
            self._ended_timer = None
        await self.sampler.shutdown()

    async def on_orb_view_start_failed(self, message: OrbViewStartFailed) -> None:
        self.startup_failed = True
        self.sampler.detach()
        await self.push_screen(
            ErrorModal(
                "Failed to start the visualizer.\n"
                f"Cause: {message.reason}\n"
                "Next step: review the log file and re-run with --verbose."
            )
        )

    def action_toggle_play(self) -> None:
        if self.sampler.handle is None:
            self._attach("silence" if self._signal == "silence" else "tone")
        else:
            self.sampler.detach()
        self._update_status_line()

    def action_toggle_dots(self) -> None:
        self._set_config(show_dots=not self.visual_config.show_dots)

    def action_amplitude_up(self) -> None:
        self._set_config(amplitude=self.visual_config.amplitude + AMPLITUDE_STEP)

    def action_amplitude_down(self) -> None:
        self._set_config(amplitude=self.visual_config.amplitude - AMPLITUDE_STEP)

    def action_bars_up(self) -> None:
        self._set_config(number_of_bars=self.visual_config.number_of_bars + BARS_STEP)

    def action_bars_down(self) -> None:
        self._set_config(number_of_bars=self.visual_config.number_of_bars - BARS_STEP)

    def action_rings_up(self) -> None:
        self._set_config(dot_count=self.visual_config.dot_count + DOT_RINGS_STEP)

    def action_rings_down(self) -> None:
        self._set_config(dot_count=self.visual_config.dot_count - DOT_RINGS_STEP)

    def _attach(self, signal: str) -> None:
        handle = build_analyser(signal, duration_s=self._tone_duration_s)
        self.sampler.attach(handle)

    def _detach_if_ended(self) -> None:
        handle = self.sampler.handle
        if handle is not None and getattr(handle, "finished", False):
            logger.info("Analysis signal ended; detaching")
            self.sampler.detach()
            self._update_status_line()

    def _set_config(self, **changes: object) -> None:
        candidate = replace(self.visual_config, **changes)  # type: ignore[arg-type]
        self.visual_config = normalize_visual_config(
            amplitude=candidate.amplitude,
            number_of_bars=candidate.number_of_bars,
            dot_count=candidate.dot_count,
            show_dots=candidate.show_dots,
            base=candidate,
        )
        self._update_status_line()

    def _update_status_line(self) -> None:
        config = self.visual_config
        state = "PLAYING" if self.sampler.handle is not None else "STOPPED"
        dots = "on" if config.show_dots else "off"
        self.status_text = (
            f"{state}  amp {config.amplitude:.1f}  bars {config.number_of_bars}"
            f"  rings {config.dot_count}  dots {dots}"
        )
        self.query_one("#status-line", Static).update(self.status_text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ringwave",
        description="Real-time circular audio visualizer for the terminal.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=build_help_epilog(),
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--quiet", action="store_true", help="Only show warnings and errors"
    )
    parser.add_argument("--log-file", help="Write logs to a file path")
    parser.add_argument(
        "--tone-duration",
        type=float,
        help="Stop the synthetic tone after this many seconds.",
    )
    add_visual_arguments(parser)
    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    try:
        level = resolve_log_level(verbose=args.verbose, quiet=args.quiet)
        setup_logging(
            log_dir=log_dir(),
            level=level,
            log_file=Path(args.log_file) if args.log_file else None,
            console=False,
        )
        logging.getLogger(__name__).info("Starting ringwave TUI")
        app = RingwaveApp(
            config=visual_config_from_args(args, base=DEMO_CONFIG),
            signal=getattr(args, "signal", "tone"),
            fps=getattr(args, "fps", None),
            oversampling=clamp_oversampling(getattr(args, "oversampling", None)),
            tone_duration_s=getattr(args, "tone_duration", None),
        )
        app.run()
        return 1 if app.startup_failed else 0
    except Exception as exc:  # pragma: no cover - top-level safety net
        logging.getLogger(__name__).exception("Fatal startup error: %s", exc)
        print(
            "Startup failed. Verify log configuration and re-run with --verbose.",
            file=sys.stderr,
        )
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
