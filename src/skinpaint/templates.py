"""
Built-in starting textures handed to a session at startup or on reset.
"""

from typing import Callable, Dict, List

import numpy as np

from .layout import BodyPart, Face, uv_region_for
from .texture import Color, Layer, Texture, ATLAS_SIZE

SKIN_TONE: Color = (245, 204, 176, 255)
HAIR: Color = (64, 38, 13, 255)
EYE_WHITE: Color = (255, 255, 255, 255)
EYE_BLUE: Color = (51, 102, 204, 255)
MOUTH: Color = (128, 51, 51, 255)
SHIRT: Color = (0, 179, 204, 255)
PANTS: Color = (51, 51, 128, 255)
SHOES: Color = (77, 77, 77, 255)


def _paint_rect(arr: np.ndarray, x: int, y: int, w: int, h: int, color: Color):
    arr[y:y + h, x:x + w] = color


def _paint_face(arr: np.ndarray, part: BodyPart, face: Face, color: Color):
    x0, y0, x1, y1 = uv_region_for(part, Layer.BASE)[face].pixel_bounds()
    arr[y0:y1, x0:x1] = color


def _paint_part(arr: np.ndarray, part: BodyPart, color: Color):
    for face in Face:
        _paint_face(arr, part, face, color)


def blank() -> Texture:
    return Texture.blank()


def steve() -> Texture:
    """Classic character: brown hair, cyan shirt, blue trousers."""
    base = np.zeros((ATLAS_SIZE, ATLAS_SIZE, 4), dtype=np.uint8)

    _paint_part(base, BodyPart.HEAD, SKIN_TONE)
    _paint_face(base, BodyPart.HEAD, Face.TOP, HAIR)
    _paint_face(base, BodyPart.HEAD, Face.BACK, HAIR)

    # Face details on the head front (8, 8)
    _paint_rect(base, 8, 8, 8, 3, HAIR)
    _paint_rect(base, 10, 12, 2, 1, EYE_WHITE)
    _paint_rect(base, 13, 12, 2, 1, EYE_WHITE)
    _paint_rect(base, 10, 12, 1, 1, EYE_BLUE)
    _paint_rect(base, 14, 12, 1, 1, EYE_BLUE)
    _paint_rect(base, 11, 14, 3, 1, MOUTH)

    _paint_part(base, BodyPart.BODY, SHIRT)
    _paint_part(base, BodyPart.RIGHT_ARM, SKIN_TONE)
    _paint_part(base, BodyPart.LEFT_ARM, SKIN_TONE)

    for leg in (BodyPart.RIGHT_LEG, BodyPart.LEFT_LEG):
        _paint_part(base, leg, PANTS)
        _paint_face(base, leg, Face.BOTTOM, SHOES)

    return Texture(base=base)


TEMPLATES: Dict[str, Callable[[], Texture]] = {
    "blank": blank,
    "steve": steve,
}


def names() -> List[str]:
    return sorted(TEMPLATES)


def get(name: str) -> Texture:
    try:
        factory = TEMPLATES[name.lower()]
    except KeyError:
        raise KeyError(f"Unknown template '{name}'. Available: {', '.join(names())}")
    return factory()
