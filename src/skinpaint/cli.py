import sys
import logging
import argparse
from typing import List, Optional, Tuple

from . import templates
from .errors import SkinPaintError
from .palette import extract_palette
from .paint import Tool
from .session import EditingSession, ToolSettings
from .skin_loader import SkinLoader
from .symmetry import SymmetryMode
from .texture import Layer, PixelSurface, parse_color


def _parse_ints(text: str, count: int) -> Tuple[int, ...]:
    parts = text.split(",")
    if len(parts) != count:
        raise argparse.ArgumentTypeError(f"Expected {count} comma separated integers, got '{text}'")
    try:
        return tuple(int(p) for p in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected integers, got '{text}'")


def _point(text: str) -> Tuple[int, ...]:
    return _parse_ints(text, 2)


def _segment(text: str) -> Tuple[int, ...]:
    return _parse_ints(text, 4)


def _color(text: str):
    try:
        return parse_color(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="skinpaint", description="Paint Minecraft-style 64x64 skins.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_new = sub.add_parser("new", help="Write a template skin to a PNG file")
    p_new.add_argument("output", help="Output PNG path")
    p_new.add_argument("-t", "--template", default="steve", choices=templates.names(), help="Template name")

    p_info = sub.add_parser("info", help="Describe a skin")
    p_info.add_argument("source", help="Skin file, URL or player name")
    p_info.add_argument("--colors", type=int, default=8, help="Number of palette colors to list")

    p_paint = sub.add_parser("paint", help="Apply paint operations to a skin")
    p_paint.add_argument("source", help="Skin file, URL or player name")
    p_paint.add_argument("output", help="Output PNG path")
    p_paint.add_argument("--tool", default="pencil", choices=["pencil", "brush", "eraser", "spray"])
    p_paint.add_argument("--color", type=_color, default=(0, 0, 0, 255), help="#rrggbb[aa] or r,g,b[,a]")
    p_paint.add_argument("--radius", type=int, default=0, help="Brush radius in pixels")
    p_paint.add_argument("--layer", default="base", choices=[layer.value for layer in Layer])
    p_paint.add_argument("--symmetry", default="none", choices=[s.value for s in SymmetryMode])
    p_paint.add_argument("--point", type=_point, action="append", default=[], metavar="X,Y")
    p_paint.add_argument("--line", type=_segment, action="append", default=[], metavar="X1,Y1,X2,Y2")
    p_paint.add_argument("--fill", type=_point, action="append", default=[], metavar="X,Y")
    p_paint.add_argument("--seed", type=int, help="Random seed for the spray tool")

    return parser


def cmd_new(args) -> int:
    texture = templates.get(args.template)
    SkinLoader.save_png(texture, args.output)
    print(f"Wrote '{args.template}' template to {args.output}")
    return 0


def cmd_info(args) -> int:
    img = SkinLoader.load_skin(args.source)
    texture = SkinLoader.to_texture(img)
    surface = PixelSurface(texture)

    print(f"Source: {args.source}")
    print(f"Model: {SkinLoader.detect_model(img)}")
    print(f"Has content: {'yes' if surface.has_content() else 'no'}")
    print("Palette:")
    for r, g, b, a in extract_palette(texture, limit=args.colors):
        print(f" - #{r:02x}{g:02x}{b:02x}{a:02x}")
    return 0


def cmd_paint(args) -> int:
    texture = SkinLoader.load_texture(args.source)
    settings = ToolSettings(
        tool=Tool(args.tool),
        color=args.color,
        brush_radius=args.radius,
        layer=Layer(args.layer),
        symmetry=SymmetryMode(args.symmetry),
    )
    session = EditingSession(texture, settings, seed=args.seed)

    for x, y in args.point:
        session.tap(x, y)

    for x1, y1, x2, y2 in args.line:
        session.begin_gesture(x1, y1)
        session.drag_to(x2, y2)
        session.end_gesture("Line")

    if args.fill:
        brush_tool = settings.tool
        settings.tool = Tool.FILL
        for x, y in args.fill:
            session.tap(x, y)
        settings.tool = brush_tool

    SkinLoader.save_png(session.snapshot(), args.output)
    print(f"Applied {len(session.history) - 1} operation(s), saved to {args.output}")
    return 0


COMMANDS = {
    "new": cmd_new,
    "info": cmd_info,
    "paint": cmd_paint,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return COMMANDS[args.command](args)
    except (SkinPaintError, ValueError, KeyError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
