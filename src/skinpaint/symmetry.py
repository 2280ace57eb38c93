from enum import Enum
from typing import List, Tuple

from .texture import ATLAS_SIZE


class SymmetryMode(Enum):
    NONE = "none"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    RADIAL = "radial"

    def mirrored_points(self, x: int, y: int) -> List[Tuple[int, int]]:
        """
        The original point followed by its mirror images, clipped to the canvas.

        Points lying on a mirror axis are returned more than once; callers
        paint each entry independently.
        """
        mx = ATLAS_SIZE - 1 - x
        my = ATLAS_SIZE - 1 - y

        points = [(x, y)]
        if self is SymmetryMode.HORIZONTAL:
            points.append((mx, y))
        elif self is SymmetryMode.VERTICAL:
            points.append((x, my))
        elif self is SymmetryMode.RADIAL:
            points.extend([(mx, y), (x, my), (mx, my)])

        return [
            (px, py) for px, py in points
            if 0 <= px < ATLAS_SIZE and 0 <= py < ATLAS_SIZE
        ]
