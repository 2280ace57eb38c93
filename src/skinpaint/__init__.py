from .errors import SkinPaintError, OutOfBoundsError, GestureStateError, SkinLoadError
from .texture import ATLAS_SIZE, TRANSPARENT, Color, Layer, Texture, PixelSurface
from .layout import BodyPart, Face, UVRect, MODEL_PARTS, region_for, uv_region_for, dimensions_for
from .symmetry import SymmetryMode
from .paint import PaintEngine, Tool
from .history import HistoryEntry, HistoryManager
from .session import EditingSession, GestureState, ToolSettings

__version__ = "0.1.0"
