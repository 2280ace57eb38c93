"""
Interaction layer: one EditingSession per open skin.

Owns the live surface, the paint engine and the history, and turns
touch-down / drag / touch-up events into engine calls. A gesture is the
unit of undo: the surface changes on every event so previews can redraw,
but history records a single entry when the gesture ends.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Optional, Tuple

from . import templates
from .errors import GestureStateError
from .geometry.mapper import HitResult, map_hit
from .geometry.rig import ModelRig
from .history import DEFAULT_MAX_HISTORY, HistoryEntry, HistoryManager
from .layout import BodyPart
from .paint import PaintEngine, Tool
from .palette import RecentColors
from .symmetry import SymmetryMode
from .texture import Color, Layer, PixelSurface, Texture, validate_color

logger = logging.getLogger(__name__)

MAX_BRUSH_RADIUS = 8


@dataclass
class ToolSettings:
    tool: Tool = Tool.PENCIL
    color: Color = (0, 0, 0, 255)
    brush_radius: int = 0
    layer: Layer = Layer.BASE
    symmetry: SymmetryMode = SymmetryMode.NONE

    def __post_init__(self):
        self.color = validate_color(self.color)
        if not 0 <= self.brush_radius <= MAX_BRUSH_RADIUS:
            raise ValueError(f"brush_radius must be within 0-{MAX_BRUSH_RADIUS}, got {self.brush_radius}")


class GestureState(Enum):
    IDLE = "idle"
    PAINTING = "painting"


class EditingSession:
    def __init__(self, texture: Optional[Texture] = None, settings: Optional[ToolSettings] = None,
                 max_history: int = DEFAULT_MAX_HISTORY, seed: Optional[int] = None):
        self.surface = PixelSurface(texture)
        self.settings = settings if settings is not None else ToolSettings()
        self.engine = PaintEngine(self.surface, self.settings.symmetry, seed=seed)
        self.history = HistoryManager(max_history)
        self.recent_colors = RecentColors()
        self.rig = ModelRig()
        self.state = GestureState.IDLE
        self._last_point: Optional[Tuple[int, int]] = None
        self._gesture_start: Optional[Texture] = None

        self.history.push(self.surface.snapshot(), "Initial")

    # --- Gestures ---

    def begin_gesture(self, x: int, y: int):
        if self.state is GestureState.PAINTING:
            raise GestureStateError("A gesture is already in progress")

        self.state = GestureState.PAINTING
        self._gesture_start = self.surface.snapshot()
        self.engine.symmetry = self.settings.symmetry
        logger.debug(f"Gesture started with {self.settings.tool.value} at ({x}, {y})")

        try:
            if self.settings.tool.is_brush or self.settings.tool is Tool.SPRAY:
                self.recent_colors.add(self.settings.color)
            self._stamp(x, y)
        except Exception:
            self.state = GestureState.IDLE
            self._gesture_start = None
            raise

    def drag_to(self, x: int, y: int):
        """Continues the gesture with a line from the previous point."""
        self._require_painting()
        tool = self.settings.tool

        if tool is Tool.FILL:
            pass
        elif tool is Tool.EYEDROPPER:
            self._pick(x, y)
        else:
            self.engine.apply_line(tool, self._last_point, (x, y), self.settings.color,
                                   self.settings.layer, self.settings.brush_radius, mirrored=True,
                                   skip_start=True)
        self._last_point = (x, y)

    def end_gesture(self, description: Optional[str] = None) -> Optional[HistoryEntry]:
        """
        Finishes the gesture and records one history entry, unless the
        gesture left the texture unchanged.
        """
        self._require_painting()
        self.state = GestureState.IDLE
        self._last_point = None
        start, self._gesture_start = self._gesture_start, None

        snapshot = self.surface.snapshot()
        if snapshot == start:
            logger.debug("Gesture ended without changes")
            return None
        return self.history.push(snapshot, description or self.settings.tool.value.capitalize())

    def tap(self, x: int, y: int, description: Optional[str] = None) -> Optional[HistoryEntry]:
        self.begin_gesture(x, y)
        return self.end_gesture(description)

    def paint_hit(self, hit: HitResult):
        """
        Feeds a 3D hit into the current gesture, starting one if idle.

        Consecutive hits are stamped individually: neighbouring points on
        the model can be far apart in the atlas.
        """
        x, y = map_hit(hit, self.settings.layer)
        if self.state is GestureState.IDLE:
            self.begin_gesture(x, y)
        else:
            self._stamp(x, y)
        return x, y

    def paint_world_hit(self, world_point, world_normal, part: Optional[BodyPart] = None):
        """
        Feeds a model-space hit from the preview into the current gesture.

        Without an explicit part, the rig finds the box containing the
        point. Returns the painted atlas pixel, or None if the point is on
        no part.
        """
        if part is None:
            found = self.rig.part_at(world_point)
            if found is None:
                logger.debug(f"No model part at {world_point}")
                return None
            part = found[0]
        return self.paint_hit(self.rig.to_local_hit(part, world_point, world_normal))

    def _require_painting(self):
        if self.state is not GestureState.PAINTING:
            raise GestureStateError("No gesture in progress")

    def _stamp(self, x: int, y: int):
        tool = self.settings.tool
        color = self.settings.color
        layer = self.settings.layer

        if tool is Tool.EYEDROPPER:
            self._pick(x, y)
        elif tool is Tool.FILL:
            self.engine.apply_with_symmetry(self.engine.fill, x, y, color, layer)
        else:
            op = partial(self.engine.apply_point, tool)
            self.engine.apply_with_symmetry(op, x, y, color, layer, self.settings.brush_radius)
        self._last_point = (x, y)

    def _pick(self, x: int, y: int):
        if not self.surface.in_bounds(x, y):
            return
        color = self.engine.pick_color(x, y, self.settings.layer)
        # Transparent pixels leave the active color alone.
        if color[3] > 0:
            self.settings.color = color
            self.recent_colors.add(color)

    # --- History ---

    def undo(self) -> bool:
        self._require_idle()
        texture = self.history.undo()
        if texture is None:
            return False
        self.surface.restore(texture)
        return True

    def redo(self) -> bool:
        self._require_idle()
        texture = self.history.redo()
        if texture is None:
            return False
        self.surface.restore(texture)
        return True

    def reset(self, texture: Optional[Texture] = None, description: str = "Reset") -> HistoryEntry:
        """Replaces the whole texture (blank by default) as one checkpoint."""
        self._require_idle()
        self.surface.restore(texture if texture is not None else Texture.blank())
        return self.history.push(self.surface.snapshot(), description)

    def load_template(self, name: str) -> HistoryEntry:
        return self.reset(templates.get(name), f"Template: {name}")

    def _require_idle(self):
        if self.state is not GestureState.IDLE:
            raise GestureStateError("Cannot change history during a gesture")

    # --- Read back ---

    def snapshot(self) -> Texture:
        return self.surface.snapshot()
