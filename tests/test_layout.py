"""
Tests for the fixed 64x64 skin atlas tables.
"""
import itertools

import pytest

from skinpaint.layout import (
    MODEL_PARTS, BodyPart, Face, UVRect,
    dimensions_for, locate, mirror_part, region_for, uv_region_for,
)
from skinpaint.texture import Layer


def _pixels(rect: UVRect):
    x0, y0, x1, y1 = rect.pixel_bounds()
    return {(x, y) for x in range(x0, x1) for y in range(y0, y1)}


class TestTables:

    def test_head_uv_matches_atlas(self):
        uv = uv_region_for(BodyPart.HEAD)
        assert uv[Face.FRONT].pixel_bounds() == (8, 8, 16, 16)
        assert uv[Face.BACK].pixel_bounds() == (24, 8, 32, 16)
        assert uv[Face.LEFT].pixel_bounds() == (16, 8, 24, 16)
        assert uv[Face.RIGHT].pixel_bounds() == (0, 8, 8, 16)
        assert uv[Face.TOP].pixel_bounds() == (8, 0, 16, 8)
        assert uv[Face.BOTTOM].pixel_bounds() == (16, 0, 24, 8)

    def test_body_uv_matches_atlas(self):
        uv = uv_region_for(BodyPart.BODY)
        assert uv[Face.FRONT].pixel_bounds() == (20, 20, 28, 32)
        assert uv[Face.BACK].pixel_bounds() == (32, 20, 40, 32)
        assert uv[Face.TOP].pixel_bounds() == (20, 16, 28, 20)
        assert uv[Face.BOTTOM].pixel_bounds() == (28, 16, 36, 20)

    def test_limb_uv_matches_atlas(self):
        assert uv_region_for(BodyPart.RIGHT_ARM)[Face.FRONT].pixel_bounds() == (44, 20, 48, 32)
        assert uv_region_for(BodyPart.LEFT_ARM)[Face.FRONT].pixel_bounds() == (36, 52, 40, 64)
        assert uv_region_for(BodyPart.RIGHT_LEG)[Face.FRONT].pixel_bounds() == (4, 20, 8, 32)
        assert uv_region_for(BodyPart.LEFT_LEG)[Face.FRONT].pixel_bounds() == (20, 52, 24, 64)

    def test_limb_side_faces(self):
        right_arm = uv_region_for(BodyPart.RIGHT_ARM)
        assert right_arm[Face.RIGHT].pixel_bounds() == (40, 20, 44, 32)
        assert right_arm[Face.LEFT].pixel_bounds() == (48, 20, 52, 32)

        left_arm = uv_region_for(BodyPart.LEFT_ARM)
        assert left_arm[Face.LEFT].pixel_bounds() == (32, 52, 36, 64)
        assert left_arm[Face.RIGHT].pixel_bounds() == (40, 52, 44, 64)

        left_leg = uv_region_for(BodyPart.LEFT_LEG)
        assert left_leg[Face.LEFT].pixel_bounds() == (16, 52, 20, 64)
        assert left_leg[Face.RIGHT].pixel_bounds() == (24, 52, 28, 64)

    def test_uv_rects_are_normalised(self):
        rect = uv_region_for(BodyPart.HEAD)[Face.FRONT]
        assert rect == UVRect(8 / 64, 8 / 64, 16 / 64, 16 / 64)
        assert rect.width == pytest.approx(0.125)

    def test_overlay_uv_uses_second_layer_boxes(self):
        assert uv_region_for(BodyPart.HEAD, Layer.OVERLAY)[Face.FRONT].pixel_bounds() == (40, 8, 48, 16)
        assert uv_region_for(BodyPart.BODY, Layer.OVERLAY)[Face.FRONT].pixel_bounds() == (20, 36, 28, 48)
        assert uv_region_for(BodyPart.LEFT_LEG, Layer.OVERLAY)[Face.FRONT].pixel_bounds() == (4, 52, 8, 64)

    def test_hat_resolves_to_its_own_box(self):
        assert uv_region_for(BodyPart.HAT) == uv_region_for(BodyPart.HEAD, Layer.OVERLAY)

    def test_dimensions(self):
        assert dimensions_for(BodyPart.HEAD) == (8, 8, 8)
        assert dimensions_for(BodyPart.BODY) == (8, 12, 4)
        assert dimensions_for(BodyPart.LEFT_ARM) == (4, 12, 4)

    def test_regions(self):
        xs, ys = region_for(BodyPart.HEAD)
        assert (xs.start, xs.stop, ys.start, ys.stop) == (8, 24, 0, 16)
        xs, ys = region_for(BodyPart.JACKET)
        assert (xs.start, xs.stop, ys.start, ys.stop) == (16, 40, 32, 48)

    def test_face_sizes_match_box_dimensions(self):
        for part in MODEL_PARTS:
            w, h, d = dimensions_for(part)
            uv = uv_region_for(part)
            x0, y0, x1, y1 = uv[Face.FRONT].pixel_bounds()
            assert (x1 - x0, y1 - y0) == (w, h)
            x0, y0, x1, y1 = uv[Face.TOP].pixel_bounds()
            assert (x1 - x0, y1 - y0) == (w, d)
            x0, y0, x1, y1 = uv[Face.LEFT].pixel_bounds()
            assert (x1 - x0, y1 - y0) == (d, h)

    @pytest.mark.parametrize("layer", list(Layer))
    def test_model_part_faces_never_overlap(self, layer):
        rects = [
            (part, face, _pixels(rect))
            for part in MODEL_PARTS
            for face, rect in uv_region_for(part, layer).items()
        ]
        for (p1, f1, a), (p2, f2, b) in itertools.combinations(rects, 2):
            assert not (a & b), f"{p1}/{f1} overlaps {p2}/{f2}"

    def test_all_rects_inside_atlas(self):
        for part in BodyPart:
            for layer in Layer:
                for rect in uv_region_for(part, layer).values():
                    x0, y0, x1, y1 = rect.pixel_bounds()
                    assert 0 <= x0 < x1 <= 64
                    assert 0 <= y0 < y1 <= 64


class TestLookups:

    def test_locate_base(self):
        assert locate(12, 12) == (BodyPart.HEAD, Face.FRONT)
        assert locate(24, 26) == (BodyPart.BODY, Face.FRONT)
        assert locate(8, 16) == (BodyPart.RIGHT_LEG, Face.BOTTOM)
        assert locate(33, 60) == (BodyPart.LEFT_ARM, Face.LEFT)
        assert locate(25, 52) == (BodyPart.LEFT_LEG, Face.RIGHT)

    def test_locate_overlay_reports_hat_and_jacket(self):
        assert locate(44, 12, Layer.OVERLAY) == (BodyPart.HAT, Face.FRONT)
        assert locate(24, 40, Layer.OVERLAY) == (BodyPart.JACKET, Face.FRONT)
        assert locate(44, 40, Layer.OVERLAY) == (BodyPart.RIGHT_ARM, Face.FRONT)

    def test_locate_unused_space(self):
        assert locate(0, 0) is None
        assert locate(60, 60) is None

    def test_mirror_part(self):
        assert mirror_part(BodyPart.LEFT_ARM) is BodyPart.RIGHT_ARM
        assert mirror_part(BodyPart.RIGHT_LEG) is BodyPart.LEFT_LEG
        assert mirror_part(BodyPart.HEAD) is None
