"""Pure geometry for the orb: dot rings, amplitude bars, rounded rectangles.

Nothing here touches audio state or a drawing surface; every function maps
numbers to shapes in logical drawing units.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ringwave.services.audio_analysis import PCM_BIAS

DOT_RADIUS = 2.0
RING_RADIUS_FRACTION = 0.4
DOTS_ADDED_PER_RING = 4
BAR_GAP = 3.0
BAR_CORNER_RADIUS = 5.0
FLAT_THRESHOLD = 5
FLAT_PILL_HEIGHT = 10.0
FLAT_PILL_RADIUS = 3.0
ARC_SEGMENTS = 6

Point = tuple[float, float]


@dataclass(frozen=True)
class DotRing:
    """One concentric ring of evenly spaced dots."""

    index: int
    radius: float
    dot_count: int

    def positions(self, center_x: float, center_y: float) -> list[Point]:
        if self.dot_count <= 0:
            return []
        step = 2.0 * math.pi / self.dot_count
        return [
            (
                center_x + math.cos(dot * step) * self.radius,
                center_y + math.sin(dot * step) * self.radius,
            )
            for dot in range(self.dot_count)
        ]


@dataclass(frozen=True)
class RoundedRect:
    x: float
    y: float
    width: float
    height: float
    radius: float


@dataclass(frozen=True)
class BarShape:
    """Resolved bar for one slot of the bar graph."""

    index: int
    sample: int
    flat: bool
    rect: RoundedRect


def sample_amplitude(sample: int) -> float:
    """Convert an unsigned 8-bit sample to a signed unit amplitude."""
    return (sample - PCM_BIAS) / PCM_BIAS


def bar_sample_index(bar_index: int, bar_count: int, buffer_length: int) -> int:
    """Sample index feeding ``bar_index`` when ``bar_count`` bars span the buffer."""
    if bar_count <= 0 or buffer_length <= 0:
        return 0
    index = math.floor((bar_index / bar_count) * buffer_length)
    return max(0, min(buffer_length - 1, index))


def max_ring_radius(width: float, height: float) -> float:
    return max(0.0, min(width, height) * RING_RADIUS_FRACTION)


def dot_rings(dot_count: int, width: float, height: float) -> list[DotRing]:
    """Concentric rings; ring ``r`` holds ``dot_count + 4r`` dots."""
    if dot_count <= 0:
        return []
    spacing = max_ring_radius(width, height) / dot_count
    return [
        DotRing(
            index=ring,
            radius=spacing * (ring + 1),
            dot_count=dot_count + ring * DOTS_ADDED_PER_RING,
        )
        for ring in range(dot_count)
    ]


def rounded_rect(
    x: float, y: float, width: float, height: float, radius: float
) -> RoundedRect:
    """Clamp rectangle inputs so the shape is always drawable.

    Position and size are floored at zero and the corner radius may not
    exceed half of the shorter side.
    """
    width = max(0.0, width)
    height = max(0.0, height)
    x = max(0.0, x)
    y = max(0.0, y)
    radius = max(0.0, min(radius, min(width, height) / 2.0))
    return RoundedRect(x=x, y=y, width=width, height=height, radius=radius)


def trace_rounded_rect(rect: RoundedRect, segments: int = ARC_SEGMENTS) -> list[Point]:
    """Outline of ``rect``: four edges joined by four quarter-turn arcs."""
    x, y, w, h, r = rect.x, rect.y, rect.width, rect.height, rect.radius
    corners = (
        (x + w - r, y + r, -math.pi / 2.0),
        (x + w - r, y + h - r, 0.0),
        (x + r, y + h - r, math.pi / 2.0),
        (x + r, y + r, math.pi),
    )
    steps = max(1, segments)
    points: list[Point] = []
    for cx, cy, start in corners:
        for step in range(steps + 1):
            angle = start + (math.pi / 2.0) * (step / steps)
            points.append((cx + math.cos(angle) * r, cy + math.sin(angle) * r))
    return points


def bar_shapes(
    samples: bytes,
    *,
    number_of_bars: int,
    width: float,
    height: float,
    amplitude: float,
) -> list[BarShape]:
    """Lay out ``number_of_bars`` bars across the full width, centered vertically.

    Samples within `FLAT_THRESHOLD` of the bias become a fixed flat pill.
    """
    if not samples or number_of_bars <= 0:
        return []
    center_y = height / 2.0
    slot_width = width / number_of_bars
    bar_width = slot_width - BAR_GAP
    shapes: list[BarShape] = []
    for bar in range(number_of_bars):
        sample = samples[bar_sample_index(bar, number_of_bars, len(samples))]
        x = bar * slot_width
        if abs(sample - PCM_BIAS) < FLAT_THRESHOLD:
            rect = rounded_rect(
                x,
                center_y - FLAT_PILL_HEIGHT / 2.0,
                bar_width,
                FLAT_PILL_HEIGHT,
                FLAT_PILL_RADIUS,
            )
            shapes.append(BarShape(index=bar, sample=sample, flat=True, rect=rect))
            continue
        bar_height = max(0.0, abs(sample_amplitude(sample)) * center_y * amplitude)
        rect = rounded_rect(
            x, center_y - bar_height / 2.0, bar_width, bar_height, BAR_CORNER_RADIUS
        )
        shapes.append(BarShape(index=bar, sample=sample, flat=False, rect=rect))
    return shapes
