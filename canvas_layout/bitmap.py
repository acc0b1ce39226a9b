"""Minimal numpy-backed pixel sink with a z-buffer and a permitted region."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import NamedTuple, Union

import numpy as np

logger = logging.getLogger(__name__)


class PixelColor(NamedTuple):
    red: int
    green: int
    blue: int
    alpha: int = 255


RED = PixelColor(255, 0, 0)
GREEN = PixelColor(0, 255, 0)
BLUE = PixelColor(0, 0, 255)
BLACK = PixelColor(0, 0, 0)
WHITE = PixelColor(255, 255, 255)
GRAY = PixelColor(128, 128, 128)

NAMED_COLORS = {
    "red": RED,
    "green": GREEN,
    "blue": BLUE,
    "black": BLACK,
    "white": WHITE,
    "gray": GRAY,
    "grey": GRAY,
}

_HEX_RE = re.compile(r"^#([0-9a-fA-F]{6})([0-9a-fA-F]{2})?$")


def parse_color(value: Union[str, PixelColor]) -> PixelColor:
    """Accept a named colour or ``#rrggbb`` / ``#rrggbbaa``."""

    if isinstance(value, PixelColor):
        return value
    text = str(value).strip()
    named = NAMED_COLORS.get(text.lower())
    if named is not None:
        return named
    match = _HEX_RE.match(text)
    if not match:
        raise ValueError(f"unrecognized colour {value!r}")
    rgb = match.group(1)
    alpha = int(match.group(2), 16) if match.group(2) else 255
    return PixelColor(int(rgb[0:2], 16), int(rgb[2:4], 16), int(rgb[4:6], 16), alpha)


class Bitmap:
    """RGBA raster addressed with the origin at the bottom-left corner.

    Writes outside the half-open permitted region ``[xlow, xhi) x [ylow, yhi)``
    are dropped. A pixel is overwritten when the new z is greater than or equal
    to the stored one.
    """

    def __init__(self, width: int, height: int):
        if width < 0 or height < 0:
            raise ValueError(f"bitmap size must be non-negative, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self._pixels = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        self._pixels[:, :, 3] = 255
        self._z = np.full((self.height, self.width), np.nan, dtype=float)
        self.reset_permitted_region()

    def reset_permitted_region(self) -> None:
        self._region = (0, self.width, 0, self.height)

    def set_permitted_region(self, xlow: int, xhi: int, ylow: int, yhi: int) -> None:
        self._region = (
            max(0, int(xlow)),
            min(self.width, int(xhi)),
            max(0, int(ylow)),
            min(self.height, int(yhi)),
        )

    @property
    def permitted_region(self):
        return self._region

    def set_pixel(self, x: int, y: int, color: PixelColor, z: float = 0.0) -> None:
        xlow, xhi, ylow, yhi = self._region
        if not (xlow <= x < xhi and ylow <= y < yhi):
            return
        row = self.height - 1 - y
        current = self._z[row, x]
        if np.isnan(current) or current <= z:
            self._pixels[row, x] = color
            self._z[row, x] = z

    def fill_rect(self, xlow: int, xhi: int, ylow: int, yhi: int, color: PixelColor, z: float = 0.0) -> None:
        """``set_pixel`` over the half-open rectangle, clipped to the permitted region."""

        pxlow, pxhi, pylow, pyhi = self._region
        x0, x1 = max(int(xlow), pxlow), min(int(xhi), pxhi)
        y0, y1 = max(int(ylow), pylow), min(int(yhi), pyhi)
        if x0 >= x1 or y0 >= y1:
            return
        rows = slice(self.height - y1, self.height - y0)
        cols = slice(x0, x1)
        zone = self._z[rows, cols]
        mask = np.isnan(zone) | (zone <= z)
        self._pixels[rows, cols][mask] = color
        zone[mask] = z

    def get_pixel(self, x: int, y: int) -> PixelColor:
        if 0 <= x < self.width and 0 <= y < self.height:
            return PixelColor(*(int(v) for v in self._pixels[self.height - 1 - y, x]))
        return BLACK

    def to_array(self) -> np.ndarray:
        """Return a copy in image row order (top row first)."""

        return self._pixels.copy()

    def save(self, path: Union[str, Path]) -> Path:
        from matplotlib import image as mpimg

        output = Path(path)
        output.parent.mkdir(parents=True, exist_ok=True)
        mpimg.imsave(output, self._pixels)
        logger.info("Wrote %dx%d bitmap to %s", self.width, self.height, output)
        return output


__all__ = [
    "BLACK",
    "BLUE",
    "Bitmap",
    "GRAY",
    "GREEN",
    "NAMED_COLORS",
    "PixelColor",
    "RED",
    "WHITE",
    "parse_color",
]
