import logging
from enum import Enum
from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np

from .errors import OutOfBoundsError

logger = logging.getLogger(__name__)

ATLAS_SIZE = 64

# RGBA, 0-255 per channel. Alpha 0 is the canonical empty value.
Color = Tuple[int, int, int, int]
TRANSPARENT: Color = (0, 0, 0, 0)


class Layer(Enum):
    BASE = "base"
    OVERLAY = "overlay"


def validate_color(color: Sequence[int]) -> Color:
    """Normalise an RGB or RGBA sequence to an RGBA tuple of ints."""
    if len(color) == 3:
        color = (*color, 255)
    if len(color) != 4:
        raise ValueError(f"Color must have 3 or 4 components, got {len(color)}")
    result = tuple(int(c) for c in color)
    for c in result:
        if not 0 <= c <= 255:
            raise ValueError(f"Color component out of range 0-255: {color}")
    return result


def parse_color(text: str) -> Color:
    """
    Parses '#rrggbb', '#rrggbbaa' or 'r,g,b[,a]'.
    """
    text = text.strip()
    if text.startswith("#"):
        hex_part = text[1:]
        if len(hex_part) not in (6, 8):
            raise ValueError(f"Invalid hex color: {text}")
        try:
            values = [int(hex_part[i:i + 2], 16) for i in range(0, len(hex_part), 2)]
        except ValueError:
            raise ValueError(f"Invalid hex color: {text}")
        return validate_color(values)
    try:
        values = [int(p) for p in text.split(",")]
    except ValueError:
        raise ValueError(f"Invalid color: {text}")
    return validate_color(values)


def colors_match(a: Sequence[int], b: Sequence[int], tolerance: int = 0) -> bool:
    """
    Per-channel comparison within tolerance. Any two alpha-0 colors match:
    transparent pixels are empty whatever RGB they carry.
    """
    if int(a[3]) == 0 and int(b[3]) == 0:
        return True
    return all(abs(int(ca) - int(cb)) <= tolerance for ca, cb in zip(a, b))


def blend_over(src: Color, dst: Color, strength: float = 1.0) -> Color:
    """
    Straight-alpha "over" compositing of src (alpha scaled by strength) onto dst.

    outA = srcA + dstA * (1 - srcA)
    outC = (srcC * srcA + dstC * dstA * (1 - srcA)) / outA
    """
    sa = (src[3] / 255.0) * strength
    da = dst[3] / 255.0
    out_a = sa + da * (1.0 - sa)
    if out_a <= 0.0:
        return TRANSPARENT
    channels = [
        (src[i] * sa + dst[i] * da * (1.0 - sa)) / out_a
        for i in range(3)
    ]
    return (
        int(round(channels[0])),
        int(round(channels[1])),
        int(round(channels[2])),
        int(round(out_a * 255.0)),
    )


def composite_layers(base: np.ndarray, overlay: np.ndarray) -> np.ndarray:
    """
    Vectorised base-then-overlay compositing of two (H, W, 4) uint8 arrays.
    """
    src = overlay.astype(np.float64)
    dst = base.astype(np.float64)
    sa = src[..., 3:4] / 255.0
    da = dst[..., 3:4] / 255.0

    out_a = sa + da * (1.0 - sa)
    # Avoid division by zero; fully transparent results are zeroed below.
    safe_a = np.where(out_a > 0, out_a, 1.0)
    out_rgb = (src[..., :3] * sa + dst[..., :3] * da * (1.0 - sa)) / safe_a

    result = np.concatenate((out_rgb, out_a * 255.0), axis=2)
    result[(out_a[..., 0] <= 0)] = 0
    return np.clip(np.rint(result), 0, 255).astype(np.uint8)


def _blank_array() -> np.ndarray:
    return np.zeros((ATLAS_SIZE, ATLAS_SIZE, 4), dtype=np.uint8)


def _frozen_copy(arr: np.ndarray) -> np.ndarray:
    if arr.shape != (ATLAS_SIZE, ATLAS_SIZE, 4):
        raise ValueError(f"Layer must have shape ({ATLAS_SIZE}, {ATLAS_SIZE}, 4), got {arr.shape}")
    copy = np.array(arr, dtype=np.uint8, copy=True)
    copy.setflags(write=False)
    return copy


class Texture:
    """
    Immutable two-layer 64x64 RGBA texture.

    Both layers are private read-only copies, so a Texture can be stored in
    history and shared freely while the live surface keeps changing.
    """

    __slots__ = ("_base", "_overlay")

    def __init__(self, base: Optional[np.ndarray] = None, overlay: Optional[np.ndarray] = None):
        self._base = _frozen_copy(base if base is not None else _blank_array())
        self._overlay = _frozen_copy(overlay if overlay is not None else _blank_array())

    @classmethod
    def blank(cls) -> "Texture":
        return cls()

    @property
    def base(self) -> np.ndarray:
        return self._base

    @property
    def overlay(self) -> np.ndarray:
        return self._overlay

    def layer(self, layer: Layer) -> np.ndarray:
        return self._base if layer is Layer.BASE else self._overlay

    def pixel(self, x: int, y: int, layer: Layer = Layer.BASE) -> Color:
        if not (0 <= x < ATLAS_SIZE and 0 <= y < ATLAS_SIZE):
            raise OutOfBoundsError(x, y)
        r, g, b, a = self.layer(layer)[y, x]
        return (int(r), int(g), int(b), int(a))

    def composite(self) -> np.ndarray:
        return composite_layers(self._base, self._overlay)

    def __eq__(self, other):
        if not isinstance(other, Texture):
            return NotImplemented
        return np.array_equal(self._base, other._base) and np.array_equal(self._overlay, other._overlay)

    __hash__ = None

    def __repr__(self):
        painted = int(np.count_nonzero(self._base[..., 3])) + int(np.count_nonzero(self._overlay[..., 3]))
        return f"Texture(painted_pixels={painted})"


class PixelSurface:
    """
    The live, mutable two-layer pixel buffer of an editing session.

    get/set reject coordinates outside [0, 64) with OutOfBoundsError; set
    overwrites without blending.
    """

    def __init__(self, texture: Optional[Texture] = None):
        self._layers: Dict[Layer, np.ndarray] = {
            Layer.BASE: _blank_array(),
            Layer.OVERLAY: _blank_array(),
        }
        if texture is not None:
            self.restore(texture)

    width = ATLAS_SIZE
    height = ATLAS_SIZE

    @staticmethod
    def in_bounds(x: int, y: int) -> bool:
        return 0 <= x < ATLAS_SIZE and 0 <= y < ATLAS_SIZE

    def _check(self, x: int, y: int):
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(x, y)

    def get(self, x: int, y: int, layer: Layer = Layer.BASE) -> Color:
        self._check(x, y)
        r, g, b, a = self._layers[layer][y, x]
        return (int(r), int(g), int(b), int(a))

    def set(self, x: int, y: int, layer: Layer, color: Sequence[int]):
        self._check(x, y)
        self._layers[layer][y, x] = validate_color(color)

    def clear(self, layer: Layer):
        self._layers[layer][...] = 0
        logger.debug("Cleared %s layer", layer.value)

    def layer_array(self, layer: Layer) -> np.ndarray:
        """Live (writable) view of a layer, indexed [y, x, channel]."""
        return self._layers[layer]

    def snapshot(self) -> Texture:
        return Texture(self._layers[Layer.BASE], self._layers[Layer.OVERLAY])

    def restore(self, texture: Texture):
        self._layers[Layer.BASE][...] = texture.base
        self._layers[Layer.OVERLAY][...] = texture.overlay

    def composite(self) -> np.ndarray:
        return composite_layers(self._layers[Layer.BASE], self._layers[Layer.OVERLAY])

    def has_content(self, ignore: Iterable[Sequence[int]] = ()) -> bool:
        """
        True if any pixel on either layer is non-transparent and not one of
        the ignored colors (e.g. the template's default skin tone).
        """
        ignored = [validate_color(c) for c in ignore]
        for arr in self._layers.values():
            visible = arr[arr[..., 3] > 0]
            if visible.size == 0:
                continue
            if not ignored:
                return True
            mask = np.ones(len(visible), dtype=bool)
            for color in ignored:
                mask &= ~np.all(visible == np.array(color, dtype=np.uint8), axis=1)
            if np.any(mask):
                return True
        return False
