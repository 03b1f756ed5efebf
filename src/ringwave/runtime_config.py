"""Runtime configuration normalization helpers.

These helpers keep CLI flag and key-binding interpretation deterministic
across entrypoints. Everything handed to the renderer passes through
`normalize_visual_config`, so the renderer itself never has to clamp.
"""

from __future__ import annotations

import argparse
import logging

from rich.color import Color, ColorParseError

from .visualizers.base import DEFAULT_OVERSAMPLING, VisualConfig

logger = logging.getLogger(__name__)

AMPLITUDE_MIN = 0.5
AMPLITUDE_MAX = 3.0
AMPLITUDE_STEP = 0.1
BARS_MIN = 20
BARS_MAX = 100
BARS_STEP = 5
DOT_RINGS_MIN = 4
DOT_RINGS_MAX = 15
DOT_RINGS_STEP = 1
FPS_MIN = 2
FPS_MAX = 60
DEFAULT_FPS = 30
OVERSAMPLING_MIN = 1
OVERSAMPLING_MAX = 8
SIGNAL_CHOICES = ("tone", "silence", "none")


def resolve_log_level(*, verbose: bool, quiet: bool) -> str:
    """Resolve effective log level from CLI flags.

    Precedence is deterministic: --quiet overrides --verbose.
    """
    if quiet:
        return "WARNING"
    if verbose:
        return "DEBUG"
    return "INFO"


def clamp_amplitude(value: float) -> float:
    return round(max(AMPLITUDE_MIN, min(AMPLITUDE_MAX, float(value))), 2)


def clamp_bars(value: int) -> int:
    return max(BARS_MIN, min(BARS_MAX, int(value)))


def clamp_dot_rings(value: int) -> int:
    return max(DOT_RINGS_MIN, min(DOT_RINGS_MAX, int(value)))


def clamp_fps(value: int | None) -> int:
    if value is None:
        return DEFAULT_FPS
    return max(FPS_MIN, min(FPS_MAX, int(value)))


def clamp_oversampling(value: int | None) -> int:
    if value is None:
        return DEFAULT_OVERSAMPLING
    return max(OVERSAMPLING_MIN, min(OVERSAMPLING_MAX, int(value)))


def normalize_color(value: str | None, default: str) -> str:
    """Return ``value`` if rich can parse it as a color, else ``default``."""
    if not value:
        return default
    candidate = value.strip()
    try:
        Color.parse(candidate)
    except ColorParseError:
        logger.warning("Ignoring unparseable color %r; using %s", value, default)
        return default
    return candidate


def normalize_visual_config(
    *,
    wave_color: str | None = None,
    dot_color: str | None = None,
    amplitude: float | None = None,
    number_of_bars: int | None = None,
    dot_count: int | None = None,
    show_dots: bool = True,
    base: VisualConfig | None = None,
) -> VisualConfig:
    """Build a `VisualConfig` with every value clamped into its bounds.

    Unset values come from ``base`` (or the `VisualConfig` defaults).
    """
    seed = base or VisualConfig()
    return VisualConfig(
        wave_color=normalize_color(wave_color, seed.wave_color),
        dot_color=normalize_color(dot_color, seed.dot_color),
        amplitude=clamp_amplitude(seed.amplitude if amplitude is None else amplitude),
        number_of_bars=clamp_bars(
            seed.number_of_bars if number_of_bars is None else number_of_bars
        ),
        dot_count=clamp_dot_rings(seed.dot_count if dot_count is None else dot_count),
        show_dots=bool(show_dots),
    )


def add_visual_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the visual configuration flags shared by every entrypoint."""
    defaults = VisualConfig()
    parser.add_argument(
        "--wave-color", help=f"Bar color (default {defaults.wave_color})."
    )
    parser.add_argument(
        "--dot-color", help=f"Dot color (default {defaults.dot_color})."
    )
    parser.add_argument(
        "--amplitude",
        type=float,
        help=f"Amplitude multiplier (clamped to {AMPLITUDE_MIN}-{AMPLITUDE_MAX}).",
    )
    parser.add_argument(
        "--bars",
        type=int,
        help=f"Number of bars (clamped to {BARS_MIN}-{BARS_MAX}).",
    )
    parser.add_argument(
        "--dot-rings",
        type=int,
        help=f"Number of dot rings (clamped to {DOT_RINGS_MIN}-{DOT_RINGS_MAX}).",
    )
    parser.add_argument(
        "--no-dots", action="store_true", help="Hide the decorative dot rings."
    )
    parser.add_argument(
        "--signal",
        choices=SIGNAL_CHOICES,
        default="tone",
        help="Synthetic analysis signal to attach at start (tone|silence|none).",
    )
    parser.add_argument(
        "--fps",
        type=int,
        help=f"Frame cadence (clamped to {FPS_MIN}-{FPS_MAX} FPS).",
    )
    parser.add_argument(
        "--oversampling",
        type=int,
        help=(
            "Device pixels per logical unit "
            f"(clamped to {OVERSAMPLING_MIN}-{OVERSAMPLING_MAX})."
        ),
    )


def visual_config_from_args(
    args: argparse.Namespace, base: VisualConfig | None = None
) -> VisualConfig:
    """Translate parsed visual flags into a normalized `VisualConfig`."""
    return normalize_visual_config(
        wave_color=getattr(args, "wave_color", None),
        dot_color=getattr(args, "dot_color", None),
        amplitude=getattr(args, "amplitude", None),
        number_of_bars=getattr(args, "bars", None),
        dot_count=getattr(args, "dot_rings", None),
        show_dots=not getattr(args, "no_dots", False),
        base=base,
    )
