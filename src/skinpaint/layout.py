from enum import Enum
from dataclasses import dataclass
from typing import Dict, Tuple, Optional

from .texture import Layer, ATLAS_SIZE


class BodyPart(Enum):
    HEAD = "Head"
    BODY = "Body"
    RIGHT_ARM = "Right Arm"
    LEFT_ARM = "Left Arm"
    RIGHT_LEG = "Right Leg"
    LEFT_LEG = "Left Leg"
    HAT = "Hat Layer"
    JACKET = "Jacket"


class Face(Enum):
    FRONT = "front"
    BACK = "back"
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"


# Parts that exist as boxes on the 3D preview model.
MODEL_PARTS: Tuple[BodyPart, ...] = (
    BodyPart.HEAD,
    BodyPart.BODY,
    BodyPart.RIGHT_ARM,
    BodyPart.LEFT_ARM,
    BodyPart.RIGHT_LEG,
    BodyPart.LEFT_LEG,
)


@dataclass(frozen=True)
class UVRect:
    """
    Rectangle in normalised atlas space ([0, 1] on both axes, origin top-left).
    """
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_pixels(cls, u: int, v: int, w: int, h: int) -> "UVRect":
        return cls(u / ATLAS_SIZE, v / ATLAS_SIZE, (u + w) / ATLAS_SIZE, (v + h) / ATLAS_SIZE)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def pixel_bounds(self) -> Tuple[int, int, int, int]:
        """Half-open pixel rectangle (x0, y0, x1, y1) covered by this rect."""
        return (
            int(round(self.min_x * ATLAS_SIZE)),
            int(round(self.min_y * ATLAS_SIZE)),
            int(round(self.max_x * ATLAS_SIZE)),
            int(round(self.max_y * ATLAS_SIZE)),
        )

    def contains_pixel(self, x: int, y: int) -> bool:
        x0, y0, x1, y1 = self.pixel_bounds()
        return x0 <= x < x1 and y0 <= y < y1


# 2D editing regions (x range, y range) in atlas pixels.
_REGIONS: Dict[BodyPart, Tuple[range, range]] = {
    BodyPart.HEAD: (range(8, 24), range(0, 16)),
    BodyPart.BODY: (range(16, 40), range(16, 32)),
    BodyPart.RIGHT_ARM: (range(40, 56), range(16, 32)),
    BodyPart.LEFT_ARM: (range(32, 48), range(48, 64)),
    BodyPart.RIGHT_LEG: (range(0, 16), range(16, 32)),
    BodyPart.LEFT_LEG: (range(16, 32), range(48, 64)),
    BodyPart.HAT: (range(32, 64), range(0, 16)),
    BodyPart.JACKET: (range(16, 40), range(32, 48)),
}

# Box size (width, height, depth) in model units (one unit per texel).
_DIMENSIONS: Dict[BodyPart, Tuple[int, int, int]] = {
    BodyPart.HEAD: (8, 8, 8),
    BodyPart.BODY: (8, 12, 4),
    BodyPart.RIGHT_ARM: (4, 12, 4),
    BodyPart.LEFT_ARM: (4, 12, 4),
    BodyPart.RIGHT_LEG: (4, 12, 4),
    BodyPart.LEFT_LEG: (4, 12, 4),
    BodyPart.HAT: (8, 8, 8),
    BodyPart.JACKET: (8, 12, 4),
}

# Top-left corner of each part's unfolded box in the atlas.
_BASE_UV_ORIGINS: Dict[BodyPart, Tuple[int, int]] = {
    BodyPart.HEAD: (0, 0),
    BodyPart.BODY: (16, 16),
    BodyPart.RIGHT_ARM: (40, 16),
    BodyPart.LEFT_ARM: (32, 48),
    BodyPart.RIGHT_LEG: (0, 16),
    BodyPart.LEFT_LEG: (16, 48),
    BodyPart.HAT: (32, 0),
    BodyPart.JACKET: (16, 32),
}

# Second-layer boxes (hat, jacket, sleeves, pants) for the same model parts.
_OVERLAY_UV_ORIGINS: Dict[BodyPart, Tuple[int, int]] = {
    BodyPart.HEAD: (32, 0),
    BodyPart.BODY: (16, 32),
    BodyPart.RIGHT_ARM: (40, 32),
    BodyPart.LEFT_ARM: (48, 48),
    BodyPart.RIGHT_LEG: (0, 32),
    BodyPart.LEFT_LEG: (0, 48),
    BodyPart.HAT: (32, 0),
    BodyPart.JACKET: (16, 32),
}

_OVERLAY_NAMES: Dict[BodyPart, BodyPart] = {
    BodyPart.HEAD: BodyPart.HAT,
    BodyPart.BODY: BodyPart.JACKET,
}

# The left limbs' atlas boxes are laid out mirrored: the strip at u is
# their LEFT face and the strip past the front is their RIGHT face.
_MIRRORED_SIDES = (BodyPart.LEFT_ARM, BodyPart.LEFT_LEG)

_MIRRORS: Dict[BodyPart, BodyPart] = {
    BodyPart.LEFT_ARM: BodyPart.RIGHT_ARM,
    BodyPart.RIGHT_ARM: BodyPart.LEFT_ARM,
    BodyPart.LEFT_LEG: BodyPart.RIGHT_LEG,
    BodyPart.RIGHT_LEG: BodyPart.LEFT_LEG,
}


def _create_box_uv(u: int, v: int, w: int, h: int, d: int) -> Dict[Face, UVRect]:
    return {
        Face.TOP: UVRect.from_pixels(u + d, v, w, d),
        Face.BOTTOM: UVRect.from_pixels(u + d + w, v, w, d),
        Face.RIGHT: UVRect.from_pixels(u, v + d, d, h),  # Outer Right
        Face.FRONT: UVRect.from_pixels(u + d, v + d, w, h),
        Face.LEFT: UVRect.from_pixels(u + d + w, v + d, d, h),
        Face.BACK: UVRect.from_pixels(u + d + w + d, v + d, w, h),
    }


def _build_uv_table() -> Dict[Tuple[BodyPart, Layer], Dict[Face, UVRect]]:
    table = {}
    for part in BodyPart:
        w, h, d = _DIMENSIONS[part]
        for layer, origins in ((Layer.BASE, _BASE_UV_ORIGINS), (Layer.OVERLAY, _OVERLAY_UV_ORIGINS)):
            u, v = origins[part]
            faces = _create_box_uv(u, v, w, h, d)
            if part in _MIRRORED_SIDES:
                faces[Face.LEFT], faces[Face.RIGHT] = faces[Face.RIGHT], faces[Face.LEFT]
            table[(part, layer)] = faces
    return table


_UV_TABLE = _build_uv_table()


def region_for(part: BodyPart) -> Tuple[range, range]:
    """2D editing region of a part as (x range, y range) in atlas pixels."""
    return _REGIONS[part]


def uv_region_for(part: BodyPart, layer: Layer = Layer.BASE) -> Dict[Face, UVRect]:
    """
    The six face rectangles of a part in normalised atlas space.

    HAT and JACKET always resolve to their own boxes; for the six model parts
    the layer selects between the skin box and its second-layer box.
    """
    return dict(_UV_TABLE[(part, layer)])


def dimensions_for(part: BodyPart) -> Tuple[int, int, int]:
    return _DIMENSIONS[part]


def mirror_part(part: BodyPart) -> Optional[BodyPart]:
    return _MIRRORS.get(part)


def locate(x: int, y: int, layer: Layer = Layer.BASE) -> Optional[Tuple[BodyPart, Face]]:
    """
    Reverse lookup: which part face a given atlas pixel textures.

    Only model parts are searched; on the overlay layer the head and body
    boxes are reported as HAT and JACKET. Returns None for unused atlas space.
    """
    for part in MODEL_PARTS:
        for face, rect in _UV_TABLE[(part, layer)].items():
            if rect.contains_pixel(x, y):
                if layer is Layer.OVERLAY:
                    return _OVERLAY_NAMES.get(part, part), face
                return part, face
    return None
