"""Pillow-backed RGB drawing surface with an oversampling scale transform.

Drawing calls take logical units; the surface multiplies them by its scale and
draws onto a device-pixel `PIL.Image`. `logical_pixels` box-filters the image
back down to the logical size, which is where the oversampling pays off as
anti-aliased edges.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache
from typing import cast

from PIL import Image, ImageDraw
from rich.color import Color, ColorParseError

RGB = tuple[int, int, int]
RGBA = tuple[int, int, int, int]


@lru_cache(maxsize=256)
def parse_rgb(color: str) -> RGB | None:
    """Parse any color string rich understands into an RGB triplet."""
    try:
        triplet = Color.parse(color.strip()).get_truecolor()
    except (ColorParseError, AttributeError):
        return None
    return (triplet.red, triplet.green, triplet.blue)


def _alpha_byte(alpha: float) -> int:
    return int(max(0.0, min(1.0, alpha)) * 255 + 0.5)


class RasterSurface:
    """Device-pixel RGB image addressed in logical units."""

    def __init__(self, *, background: RGB = (0, 0, 0)) -> None:
        self._background = background
        self._scale = 1.0
        self._fill: RGBA = (255, 255, 255, 255)
        self._image = Image.new("RGB", (0, 0), background)
        self._draw = ImageDraw.Draw(self._image, "RGBA")

    @property
    def device_width(self) -> int:
        return self._image.width

    @property
    def device_height(self) -> int:
        return self._image.height

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def logical_width(self) -> float:
        return self._image.width / self._scale

    @property
    def logical_height(self) -> float:
        return self._image.height / self._scale

    @property
    def background(self) -> RGB:
        return self._background

    @property
    def image(self) -> Image.Image:
        return self._image

    def resize(self, device_width: int, device_height: int) -> None:
        """Reallocate the image; like a canvas, this resets the transform."""
        size = (max(0, int(device_width)), max(0, int(device_height)))
        self._scale = 1.0
        self._image = Image.new("RGB", size, self._background)
        self._draw = ImageDraw.Draw(self._image, "RGBA")

    def set_scale(self, scale: float) -> None:
        self._scale = scale if scale > 0 else 1.0

    def set_fill(self, color: RGB, alpha: float = 1.0) -> None:
        self._fill = (*color, _alpha_byte(alpha))

    def clear(self) -> None:
        if self._is_empty():
            return
        self._image.paste(self._background, (0, 0, *self._image.size))

    def pixel(self, x: int, y: int) -> RGB:
        """Device-pixel color at ``(x, y)``."""
        return cast(RGB, self._image.getpixel((x, y)))

    def fill_circle(self, center_x: float, center_y: float, radius: float) -> None:
        scale = self._scale
        r = radius * scale
        if r <= 0 or self._fill[3] == 0 or self._is_empty():
            return
        cx = center_x * scale
        cy = center_y * scale
        self._draw.ellipse((cx - r, cy - r, cx + r, cy + r), fill=self._fill)

    def fill_polygon(self, points: Sequence[tuple[float, float]]) -> None:
        """Fill a closed polygon given in logical units."""
        if len(points) < 3 or self._fill[3] == 0 or self._is_empty():
            return
        scale = self._scale
        self._draw.polygon([(x * scale, y * scale) for x, y in points], fill=self._fill)

    def logical_size(self) -> tuple[int, int]:
        """Pixel grid size after downsampling by the current scale."""
        return (
            int(round(self._image.width / self._scale)),
            int(round(self._image.height / self._scale)),
        )

    def logical_pixels(self) -> list[list[RGB]]:
        """Box-filter the oversampled image down to one pixel per logical unit."""
        width, height = self.logical_size()
        if width <= 0 or height <= 0 or self._is_empty():
            return []
        if (width, height) == self._image.size:
            reduced = self._image
        else:
            reduced = self._image.resize(
                (width, height), resample=Image.Resampling.BOX
            )
        pixels = reduced.load()
        if pixels is None:
            return []
        return [
            [cast(RGB, pixels[x, y]) for x in range(width)] for y in range(height)
        ]

    def _is_empty(self) -> bool:
        return self._image.width == 0 or self._image.height == 0
