import logging
from dataclasses import dataclass
from typing import Tuple

from ..layout import BodyPart, Face, MODEL_PARTS, dimensions_for, uv_region_for
from ..texture import ATLAS_SIZE, Layer
from .primitives import Vec3

logger = logging.getLogger(__name__)

# A face is selected outright once one normal axis exceeds this magnitude.
DOMINANT_AXIS_THRESHOLD = 0.5


@dataclass(frozen=True)
class HitResult:
    """
    A hit on a model part as reported by the renderer.

    normal and local are in the part's own space; local coordinates are
    centred on the box, so x lies in [-w/2, w/2], y in [-h/2, h/2] and z in
    [-d/2, d/2].
    """
    part: BodyPart
    normal: Vec3
    local: Vec3


def select_face(normal: Vec3) -> Face:
    """
    Picks the box face from a local face normal.

    Axes are tried in the order z, x, y and the first one above 0.5 in
    magnitude selects its face pair, even if a later axis is larger. When
    no axis passes, the largest magnitude wins, ties going to z, then x,
    then y; a zero normal maps to FRONT.
    """
    nx, ny, nz = normal
    candidates = (("z", nz), ("x", nx), ("y", ny))

    for axis, value in candidates:
        if abs(value) > DOMINANT_AXIS_THRESHOLD:
            break
    else:
        # max() keeps the first of equal candidates.
        axis, value = max(candidates, key=lambda c: abs(c[1]))
        if value == 0:
            logger.debug("Zero face normal, defaulting to front face")
            return Face.FRONT
        logger.debug(f"Degenerate hit normal {normal}, using dominant axis {axis}")

    if axis == "z":
        return Face.FRONT if value > 0 else Face.BACK
    if axis == "x":
        return Face.RIGHT if value > 0 else Face.LEFT
    return Face.TOP if value > 0 else Face.BOTTOM


def _clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def face_uv(part: BodyPart, face: Face, local: Vec3) -> Tuple[float, float]:
    """
    Continuous (u, v) in [0, 1]^2 within a face, origin top-left.
    """
    w, h, d = dimensions_for(part)
    lx, ly, lz = local

    if face in (Face.FRONT, Face.BACK):
        u = (lx + w / 2) / w
        v = 1.0 - (ly + h / 2) / h
    elif face in (Face.LEFT, Face.RIGHT):
        u = (lz + d / 2) / d
        v = 1.0 - (ly + h / 2) / h
    else:
        u = (lx + w / 2) / w
        v = (lz + d / 2) / d

    return _clamp01(u), _clamp01(v)


def map_hit_to_uv(part: BodyPart, normal: Vec3, local: Vec3, layer: Layer = Layer.BASE) -> Tuple[float, float]:
    """Atlas-space UV (both axes in [0, 1]) for a hit on a model part."""
    if part not in MODEL_PARTS:
        raise ValueError(f"{part.value} is not a 3D model part")

    face = select_face(normal)
    rect = uv_region_for(part, layer)[face]
    u, v = face_uv(part, face, local)

    return (
        rect.min_x + u * (rect.max_x - rect.min_x),
        rect.min_y + v * (rect.max_y - rect.min_y),
    )


def map_hit_to_pixel(part: BodyPart, normal: Vec3, local: Vec3, layer: Layer = Layer.BASE) -> Tuple[int, int]:
    """
    Converts a 3D hit into an atlas pixel address.

    The result is always inside the hit face's pixel rectangle: u = 1.0 on
    the far edge would otherwise land one pixel past it.
    """
    face = select_face(normal)
    U, V = map_hit_to_uv(part, normal, local, layer)
    x0, y0, x1, y1 = uv_region_for(part, layer)[face].pixel_bounds()

    x = min(max(int(U * ATLAS_SIZE), x0), x1 - 1)
    y = min(max(int(V * ATLAS_SIZE), y0), y1 - 1)
    return x, y


def map_hit(hit: HitResult, layer: Layer = Layer.BASE) -> Tuple[int, int]:
    return map_hit_to_pixel(hit.part, hit.normal, hit.local, layer)
