"""Orb visualizer: geometry, raster surface and per-frame renderer."""

from .base import FrameScheduler, VisualConfig
from .orb import OrbRenderer, SurfaceUnavailableError
from .scheduling import AsyncioFrameScheduler
from .surface import RasterSurface

__all__ = [
    "AsyncioFrameScheduler",
    "FrameScheduler",
    "OrbRenderer",
    "RasterSurface",
    "SurfaceUnavailableError",
    "VisualConfig",
]
