from typing import List

import numpy as np

from .texture import Color, Layer, Texture, validate_color


def extract_palette(texture: Texture, limit: int = 16, layer: Layer = Layer.BASE) -> List[Color]:
    """
    Most used visible colors of a layer, most frequent first.
    """
    pixels = texture.layer(layer).reshape(-1, 4)
    pixels = pixels[pixels[:, 3] > 0]
    if pixels.size == 0:
        return []

    u_colors, counts = np.unique(pixels, axis=0, return_counts=True)
    # Stable sort keeps ties in np.unique's (lexicographic) order.
    order = np.argsort(-counts, kind="stable")[:limit]
    return [tuple(int(c) for c in u_colors[i]) for i in order]


class RecentColors:
    """Most-recently-used colors, newest first, without duplicates."""

    def __init__(self, capacity: int = 20):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._colors: List[Color] = []

    def add(self, color) -> None:
        color = validate_color(color)
        if color in self._colors:
            self._colors.remove(color)
        self._colors.insert(0, color)
        del self._colors[self.capacity:]

    def __iter__(self):
        return iter(self._colors)

    def __len__(self):
        return len(self._colors)

    def as_list(self) -> List[Color]:
        return list(self._colors)
