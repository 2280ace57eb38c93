class SkinPaintError(Exception):
    """Base class for every error raised by skinpaint."""


class OutOfBoundsError(SkinPaintError, IndexError):
    def __init__(self, x: int, y: int, width: int = 64, height: int = 64):
        super().__init__(f"Pixel ({x}, {y}) is outside the {width}x{height} canvas")
        self.x = x
        self.y = y


class GestureStateError(SkinPaintError, RuntimeError):
    pass


class SkinLoadError(SkinPaintError, ValueError):
    pass
