"""Headless command-line snapshot renderer for ringwave.

Runs the sampler and renderer on a plain asyncio loop for a few frames and
prints the last frame with rich, without starting the Textual app.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.text import Text

from . import __version__
from .logging_utils import setup_logging
from .paths import log_dir
from .runtime_config import (
    add_visual_arguments,
    clamp_fps,
    clamp_oversampling,
    resolve_log_level,
    visual_config_from_args,
)
from .services.audio_analysis import build_analyser
from .services.sampler import Sampler
from .visualizers.base import DEFAULT_OVERSAMPLING, VisualConfig
from .visualizers.halfblock import logical_size_for_cells, render_halfblock
from .visualizers.orb import OrbRenderer, SurfaceUnavailableError
from .visualizers.scheduling import AsyncioFrameScheduler

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ringwave-snapshot",
        description="Render ringwave frames headlessly and print the last one.",
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
        "--width", type=int, default=48, help="Snapshot width in terminal columns."
    )
    parser.add_argument(
        "--height", type=int, default=16, help="Snapshot height in terminal rows."
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=3,
        help="Frames to render before printing the last one.",
    )
    add_visual_arguments(parser)
    return parser


async def render_snapshot(
    *,
    config: VisualConfig,
    signal: str,
    columns: int,
    rows: int,
    frames: int = 1,
    fps: int = 30,
    oversampling: int = DEFAULT_OVERSAMPLING,
) -> Text:
    """Run sampler and renderer until ``frames`` frames are drawn."""
    sampler = Sampler()
    done = asyncio.Event()
    target = max(1, frames)

    def on_frame(frame_index: int) -> None:
        if frame_index >= target:
            done.set()

    renderer = OrbRenderer(
        buffer_source=lambda: sampler.latest,
        config_source=lambda: config,
        scheduler=AsyncioFrameScheduler(fps),
        oversampling=oversampling,
        on_frame=on_frame,
    )
    sampler.attach(build_analyser(signal))
    width, height = logical_size_for_cells(columns, rows)
    renderer.start(width, height)
    try:
        await done.wait()
        surface = renderer.surface
        if surface is None:
            raise SurfaceUnavailableError(
                "Drawing surface was released before capture."
            )
        return render_halfblock(surface)
    finally:
        renderer.stop()
        await sampler.shutdown()


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    try:
        level = resolve_log_level(verbose=args.verbose, quiet=args.quiet)
        setup_logging(
            log_dir=log_dir(),
            level=level,
            log_file=Path(args.log_file) if args.log_file else None,
        )
        logger.info("Starting ringwave snapshot")
        text = asyncio.run(
            render_snapshot(
                config=visual_config_from_args(args),
                signal=getattr(args, "signal", "tone"),
                columns=max(1, args.width),
                rows=max(1, args.height),
                frames=args.frames,
                fps=clamp_fps(getattr(args, "fps", None)),
                oversampling=clamp_oversampling(getattr(args, "oversampling", None)),
            )
        )
        Console().print(text)
        return 0
    except Exception as exc:  # pragma: no cover - top-level safety net
        logger.exception("Unhandled error: %s", exc)
        print("Unexpected error. Re-run with --verbose for details.", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
