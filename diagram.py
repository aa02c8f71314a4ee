# diagram.py - rollcut
#
# Maps a layout onto drawing primitives for a roll diagram. No drawing
# happens here; pdf_export.py (or any other renderer) consumes the result.
#
# Coordinates: origin top-left, X across the roll, Y down the roll,
# in output units (scale units per meter, offset by origin).

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from costing import describe_shelf
from models import EPSILON, LayoutResult, PlacedPiece, Shelf

EMPTY_ROLL_LENGTH = 5.0     # example length shown when there is nothing to lay

ROOM_COLORS = [
    "#ffcccc", "#ccffcc", "#ccccff", "#ffffcc",
    "#ffccff", "#ccffff", "#ffddaa", "#ddffaa",
    "#aaddff", "#ffaadd", "#aaffdd", "#ddaaff",
]
MARGIN_COLOR = "#ff0000"
MARGIN_OPACITY = 0.2
ROLL_FILL = "#f5f5f5"
OUTLINE_COLOR = "#666666"
GUIDE_COLOR = "#000000"
GUIDE_OPACITY = 0.3


@dataclass
class DiagramRect:
    x: float
    y: float
    width: float
    height: float
    fill: Optional[str] = None
    stroke: Optional[str] = None
    opacity: float = 1.0


@dataclass
class DiagramLine:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str = GUIDE_COLOR
    opacity: float = GUIDE_OPACITY
    dash: Tuple[float, ...] = ()


@dataclass
class DiagramLabel:
    text: str
    x: float
    y: float
    font_size: float = 12
    align: str = "center"     # 'center' or 'left'
    rotation: float = 0.0     # degrees, counter-clockwise
    color: str = "#000000"


@dataclass
class RollDiagram:
    width: float
    height: float
    roll: DiagramRect
    rects: List[DiagramRect] = field(default_factory=list)
    lines: List[DiagramLine] = field(default_factory=list)
    labels: List[DiagramLabel] = field(default_factory=list)


# ------------------------------------------------------------
# Colours
# ------------------------------------------------------------

def shade_color(color: str, percent: float) -> str:
    """Lightens (percent > 0) or darkens (percent < 0) a #rrggbb colour."""
    s = color.lstrip("#")
    channels = [int(s[i:i + 2], 16) for i in (0, 2, 4)]
    shaded = [min(255, max(0, round(c * (100 + percent) / 100))) for c in channels]
    return "#" + "".join(f"{c:02x}" for c in shaded)


def piece_color(piece: PlacedPiece) -> str:
    base = ROOM_COLORS[piece.source_room_index % len(ROOM_COLORS)]
    if piece.is_stairs:
        return shade_color(base, -10)
    if piece.strip_index > 0:
        return shade_color(base, 10 if piece.strip_index % 2 == 0 else -10)
    return base


# ------------------------------------------------------------
# Labels
# ------------------------------------------------------------

def piece_label_lines(piece: PlacedPiece) -> List[Tuple[str, float]]:
    """(text, font size) lines drawn in the middle of a piece."""
    dims = f"{piece.width:.1f}m × {piece.length:.1f}m"
    if piece.is_stairs:
        return [(f"{piece.room_name} #{piece.stair_number}", 12), (dims, 10)]

    title = piece.room_name
    if piece.total_strips > 1:
        title += f" (Strip {piece.strip_index + 1}/{piece.total_strips})"
    lines = [(title, 12), (dims, 10)]
    if piece.is_rotated:
        lines.append(("(rotated)", 10))
    return lines


def shelf_label(index: int, height: float, regular: int, stairs: int) -> str:
    text = f"Row {index}: {height:.2f}m"
    contents = describe_shelf(regular, stairs)
    if contents:
        text += f" ({contents})"
    return text


# ------------------------------------------------------------
# Builder
# ------------------------------------------------------------

def build_roll_diagram(
    result: LayoutResult,
    scale: float = 20.0,
    show_labels: bool = True,
    origin: Tuple[float, float] = (50.0, 50.0)
) -> RollDiagram:
    """
    Geometry for the whole roll:
      - roll outline with width and length labels
      - one filled rectangle per piece plus its cutting-margin band
      - dashed shelf boundaries with row labels
    An empty layout yields an example roll with a hint message.
    """
    ox, oy = origin
    roll_w = result.roll_width * scale
    empty = not result.pieces
    roll_length = EMPTY_ROLL_LENGTH if empty else result.total_length
    roll_h = roll_length * scale

    diagram = RollDiagram(
        width=max(roll_w + 2 * ox + (0 if empty else 50), 400),
        height=max(roll_h + 2 * oy, 300),
        roll=DiagramRect(ox, oy, roll_w, roll_h, fill=ROLL_FILL, stroke="#999999")
    )

    diagram.labels.append(DiagramLabel(f"{result.roll_width:g}m", ox + roll_w / 2, oy - 10, 14))
    length_text = (
        f"{EMPTY_ROLL_LENGTH:g}m (example)" if empty
        else f"{result.total_length:.2f}m broadloom"
    )
    diagram.labels.append(
        DiagramLabel(length_text, ox - 20, oy + roll_h / 2, 14, rotation=90)
    )

    if empty:
        diagram.labels.append(DiagramLabel(
            "Add room dimensions to see carpet layout",
            ox + roll_w / 2, oy + roll_h / 2, 14, color="#666666"
        ))
        return diagram

    for p in result.pieces:
        x = ox + p.x * scale
        y = oy + p.y * scale
        w = p.width * scale
        h = p.length * scale

        diagram.rects.append(DiagramRect(x, y, w, h, fill=piece_color(p), stroke=OUTLINE_COLOR))
        if p.margin > 0:
            diagram.rects.append(DiagramRect(
                x, y + h, w, p.margin * scale, fill=MARGIN_COLOR, opacity=MARGIN_OPACITY
            ))

        if show_labels:
            lines = piece_label_lines(p)
            top = y + h / 2 - 7.5 * (len(lines) - 1)
            for i, (text, size) in enumerate(lines):
                diagram.labels.append(DiagramLabel(text, x + w / 2, top + i * 15, size))

    for i, shelf in enumerate(result.shelves, start=1):
        bottom = oy + shelf.bottom * scale
        diagram.lines.append(DiagramLine(ox, bottom, ox + roll_w, bottom, dash=(5, 5)))
        if show_labels:
            stairs = sum(1 for p in shelf.pieces if p.is_stairs)
            diagram.labels.append(DiagramLabel(
                shelf_label(i, shelf.height, len(shelf.pieces) - stairs, stairs),
                ox + roll_w + 10,
                oy + (shelf.y + shelf.height / 2) * scale,
                12,
                align="left",
                color="#333333"
            ))

    return diagram


# ------------------------------------------------------------
# Paging
# ------------------------------------------------------------

def roll_windows(
    shelves: Sequence[Shelf],
    total_length: float,
    page_length: float
) -> List[Tuple[float, float]]:
    """
    Splits the roll into (start, end) stretches no longer than page_length,
    breaking between shelves. A shelf taller than a page is cut into
    page_length pieces.
    """
    if page_length <= 0:
        raise ValueError(f"Page length must be positive, got {page_length!r}.")
    if total_length <= page_length + EPSILON:
        return [(0.0, total_length)]

    windows = []
    start = 0.0
    for shelf in shelves:
        if shelf.bottom - start <= page_length + EPSILON:
            continue
        if shelf.y > start + EPSILON:
            windows.append((start, shelf.y))
            start = shelf.y
        while shelf.bottom - start > page_length + EPSILON:
            windows.append((start, start + page_length))
            start += page_length
    windows.append((start, total_length))
    return windows
