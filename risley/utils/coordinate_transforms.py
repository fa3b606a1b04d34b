"""
Coordinate and unit conversion helpers for the boundary layers.

The core works in millimetres on the screen plane (y up) and radians. Input
layers work in pixels on a canvas (y down). These helpers make the conversion
explicit so the core never sees pixels.
"""

from dataclasses import dataclass
from typing import Tuple, Union
import numpy as np

from ..geometry.constants import VIEW_HEADROOM, VIEW_MARGIN_PX


@dataclass(frozen=True)
class ScreenMapping:
    """
    Maps a square scan-view canvas to screen millimetres.

    The optical axis sits at the canvas centre and the view spans
    VIEW_HEADROOM * rmax on each side, inside a VIEW_MARGIN_PX / 2 margin.
    """

    width: float   # px
    height: float  # px
    rmax: float    # mm

    def __post_init__(self):
        if self.width <= VIEW_MARGIN_PX:
            raise ValueError(f"Canvas width must exceed {VIEW_MARGIN_PX}px, got {self.width}px")
        if self.height <= 0:
            raise ValueError(f"Canvas height must be positive, got {self.height}px")
        if self.rmax <= 0:
            raise ValueError(f"rmax must be positive, got {self.rmax}mm")

    @property
    def scale(self) -> float:
        """Pixels per millimetre."""
        return (self.width - VIEW_MARGIN_PX) / (2 * self.rmax * VIEW_HEADROOM)

    @property
    def center(self) -> Tuple[float, float]:
        return self.width / 2, self.height / 2

    def to_mm(self, px: float, py: float) -> Tuple[float, float]:
        """
        Convert canvas pixel coordinates to screen millimetres.

        Args:
            px: Pixel x, measured from the left edge
            py: Pixel y, measured from the top edge

        Returns:
            Tuple[float, float]: (x, y) in mm with y pointing up
        """
        cx, cy = self.center
        return (px - cx) / self.scale, -(py - cy) / self.scale

    def to_pixels(self, x: float, y: float) -> Tuple[float, float]:
        """Convert screen millimetres back to canvas pixels."""
        cx, cy = self.center
        return cx + x * self.scale, cy - y * self.scale


def deg_to_rad(value_deg: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Convert degrees to radians.

    Args:
        value_deg: Angle(s) in degrees

    Returns:
        Angle(s) in radians
    """
    if isinstance(value_deg, np.ndarray):
        return np.deg2rad(value_deg)
    else:
        return float(np.deg2rad(value_deg))


def rad_to_deg(value_rad: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Convert radians to degrees.

    Args:
        value_rad: Angle(s) in radians

    Returns:
        Angle(s) in degrees
    """
    if isinstance(value_rad, np.ndarray):
        return np.rad2deg(value_rad)
    else:
        return float(np.rad2deg(value_rad))
