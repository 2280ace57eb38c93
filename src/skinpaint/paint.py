import math
import logging
from enum import Enum
from functools import partial
from typing import Callable, Optional, Sequence, Tuple

import numpy as np

from .errors import OutOfBoundsError
from .layout import BodyPart, region_for
from .symmetry import SymmetryMode
from .texture import (
    ATLAS_SIZE, TRANSPARENT, Color, Layer, PixelSurface,
    blend_over, colors_match, validate_color,
)

logger = logging.getLogger(__name__)

Point = Tuple[int, int]


class Tool(Enum):
    PENCIL = "pencil"
    BRUSH = "brush"
    ERASER = "eraser"
    FILL = "fill"
    EYEDROPPER = "eyedropper"
    SPRAY = "spray"

    @property
    def is_brush(self) -> bool:
        return self in (Tool.PENCIL, Tool.BRUSH, Tool.ERASER)


def falloff(distance: float, radius: int) -> float:
    """Brush strength at a distance from the centre: 1 at the centre, 0 at the rim."""
    if radius <= 0:
        return 1.0
    return max(0.0, 1.0 - distance / radius)


def line_samples(start: Point, end: Point) -> list:
    """
    ceil(distance / 2) + 1 evenly spaced integer points from start to end,
    both ends included, so consecutive samples are at most 2px apart.
    """
    (x0, y0), (x1, y1) = start, end
    distance = math.hypot(x1 - x0, y1 - y0)
    count = math.ceil(distance / 2) + 1
    if count == 1:
        return [(int(x0), int(y0))]

    samples = []
    for i in range(count):
        t = i / (count - 1)
        samples.append((int(round(x0 + (x1 - x0) * t)), int(round(y0 + (y1 - y0) * t))))
    return samples


class PaintEngine:
    """
    Applies drawing tools to a PixelSurface.

    Every call mutates the surface immediately; recording history is up to
    the caller (one snapshot per gesture).
    """

    def __init__(self, surface: PixelSurface, symmetry: SymmetryMode = SymmetryMode.NONE,
                 seed: Optional[int] = None):
        self.surface = surface
        self.symmetry = symmetry
        self._rng = np.random.default_rng(seed)

    # --- Brush tools ---

    def apply_point(self, tool: Tool, x: int, y: int, color: Sequence[int], layer: Layer,
                    brush_radius: int = 0) -> int:
        """
        Stamps one brush dab centred on (x, y). Returns the number of pixels
        the dab touched; offsets outside the canvas are skipped.
        """
        if brush_radius < 0:
            raise ValueError(f"Brush radius must be >= 0, got {brush_radius}")

        if tool is Tool.FILL:
            return self.fill(x, y, color, layer)
        if tool is Tool.SPRAY:
            return self.spray(x, y, color, layer, brush_radius)
        if tool is Tool.EYEDROPPER:
            return 0

        src = TRANSPARENT if tool is Tool.ERASER else validate_color(color)
        arr = self.surface.layer_array(layer)
        touched = 0

        for dy in range(-brush_radius, brush_radius + 1):
            for dx in range(-brush_radius, brush_radius + 1):
                px, py = x + dx, y + dy
                if not (0 <= px < ATLAS_SIZE and 0 <= py < ATLAS_SIZE):
                    continue

                distance = math.sqrt(dx * dx + dy * dy)
                if distance > brush_radius:
                    continue

                strength = falloff(distance, brush_radius)
                dst = tuple(int(c) for c in arr[py, px])
                if tool is Tool.ERASER:
                    arr[py, px] = self._erase(dst, strength)
                else:
                    arr[py, px] = blend_over(src, dst, strength)
                touched += 1

        return touched

    @staticmethod
    def _erase(dst: Color, strength: float) -> Color:
        # Blending a transparent source "over" anything is the identity,
        # so the eraser removes coverage from the destination instead.
        alpha = int(round(dst[3] * (1.0 - strength)))
        if alpha <= 0:
            return TRANSPARENT
        return (dst[0], dst[1], dst[2], alpha)

    def apply_line(self, tool: Tool, start: Point, end: Point, color: Sequence[int], layer: Layer,
                   brush_radius: int = 0, mirrored: bool = False, skip_start: bool = False) -> int:
        """
        Stamps the tool along a segment, see line_samples for the spacing.

        skip_start leaves out the first sample, for segments that continue
        from a point that has already been stamped.
        """
        op = partial(self.apply_point, tool)
        samples = line_samples(start, end)
        if skip_start:
            samples = samples[1:]

        touched = 0
        for sx, sy in samples:
            if mirrored:
                touched += self.apply_with_symmetry(op, sx, sy, color, layer, brush_radius)
            else:
                touched += op(sx, sy, color, layer, brush_radius)
        return touched

    def apply_with_symmetry(self, op: Callable[..., int], x: int, y: int, *args, **kwargs) -> int:
        """
        Runs op(x, y, *args) for the point and each of its mirror images.
        Mirrored dabs are independent, so they can overlap near an axis.
        """
        total = 0
        for px, py in self.symmetry.mirrored_points(x, y):
            result = op(px, py, *args, **kwargs)
            if isinstance(result, int):
                total += result
        return total

    def stroke(self, tool: Tool, x: int, y: int, color: Sequence[int], layer: Layer,
               brush_radius: int = 0) -> int:
        """apply_point for (x, y) and its mirror images under the active symmetry."""
        return self.apply_with_symmetry(partial(self.apply_point, tool), x, y, color, layer, brush_radius)

    # --- Fill ---

    def fill(self, x: int, y: int, color: Sequence[int], layer: Layer, tolerance: int = 0) -> int:
        """
        4-connected flood fill from (x, y) over pixels matching the seed color.
        Returns the number of pixels changed.
        """
        return self._flood(x, y, validate_color(color), layer, (0, 0, ATLAS_SIZE, ATLAS_SIZE), tolerance)

    def fill_region(self, x: int, y: int, color: Sequence[int], layer: Layer, part: BodyPart,
                    tolerance: int = 0) -> int:
        """Flood fill that never leaves the 2D region of one body part."""
        xs, ys = region_for(part)
        if x not in xs or y not in ys:
            return 0
        bounds = (xs.start, ys.start, xs.stop, ys.stop)
        return self._flood(x, y, validate_color(color), layer, bounds, tolerance)

    def _flood(self, x: int, y: int, color: Color, layer: Layer, bounds: Tuple[int, int, int, int],
               tolerance: int) -> int:
        if not self.surface.in_bounds(x, y):
            raise OutOfBoundsError(x, y)

        arr = self.surface.layer_array(layer)
        target = tuple(int(c) for c in arr[y, x])
        if colors_match(target, color):
            return 0

        x_min, y_min, x_max, y_max = bounds
        visited = np.zeros((ATLAS_SIZE, ATLAS_SIZE), dtype=bool)
        visited[y, x] = True
        stack = [(x, y)]
        changed = 0

        while stack:
            px, py = stack.pop()
            if not colors_match(arr[py, px], target, tolerance):
                continue

            arr[py, px] = color
            changed += 1

            for nx, ny in ((px + 1, py), (px - 1, py), (px, py + 1), (px, py - 1)):
                if x_min <= nx < x_max and y_min <= ny < y_max and not visited[ny, nx]:
                    visited[ny, nx] = True
                    stack.append((nx, ny))

        logger.debug(f"Filled {changed} pixels on {layer.value} layer from ({x}, {y})")
        return changed

    # --- Other tools ---

    def spray(self, x: int, y: int, color: Sequence[int], layer: Layer, brush_radius: int = 1,
              density: float = 1 / 3) -> int:
        """Sets a random subset of the square around (x, y) to color."""
        src = validate_color(color)
        radius = max(brush_radius, 1)
        arr = self.surface.layer_array(layer)
        painted = 0

        for dy in range(-radius, radius + 1):
            for dx in range(-radius, radius + 1):
                px, py = x + dx, y + dy
                if not (0 <= px < ATLAS_SIZE and 0 <= py < ATLAS_SIZE):
                    continue
                if self._rng.random() < density:
                    arr[py, px] = src
                    painted += 1
        return painted

    def pick_color(self, x: int, y: int, layer: Layer) -> Color:
        return self.surface.get(x, y, layer)

    def mirror_layer(self, layer: Layer):
        """Copies the left half of a layer onto the right half, mirrored."""
        arr = self.surface.layer_array(layer)
        half = ATLAS_SIZE // 2
        arr[:, half:] = arr[:, :half][:, ::-1]
