# models.py - rollcut
# Data structures for rooms, roll pieces, shelves and layout results.

from dataclasses import dataclass, field
from typing import List, Optional, Union


# ------------------------------
# Constants (meters)
# ------------------------------

DEFAULT_ROLL_WIDTH = 3.66
CUTTING_MARGIN = 0.2
STAIR_DEPTH = 0.5       # riser + tread

ROTATION_PER_ROOM = "per-room"
ROTATION_GLOBAL = "global"
ROTATION_POLICIES = (ROTATION_PER_ROOM, ROTATION_GLOBAL)

# tolerance for float comparisons on widths/lengths
EPSILON = 1e-9


Dimension = Union[float, int, str, None]


# ------------------------------
# Input
# ------------------------------

@dataclass
class RoomSpec:
    """
    A room or staircase as entered by the customer.
    Dimensions may still be raw text; unusable values exclude the room.
    """
    name: str
    length: Dimension = None
    width: Dimension = None
    is_stairs: bool = False
    stair_count: Dimension = 0


@dataclass
class LayoutSettings:
    roll_width: float = DEFAULT_ROLL_WIDTH
    cutting_margin: float = CUTTING_MARGIN
    stair_depth: float = STAIR_DEPTH
    rotation_policy: str = ROTATION_PER_ROOM


# ------------------------------
# Pieces
# ------------------------------

@dataclass
class Piece:
    source_room_index: int
    room_name: str
    is_stairs: bool
    width: float        # across the roll
    length: float       # along the roll, without margin
    strip_index: int = 0
    total_strips: int = 1
    is_rotated: bool = False
    margin: float = 0.0
    stair_number: Optional[int] = None

    @property
    def cut_length(self) -> float:
        """Length taken on the roll, cutting margin included."""
        return self.length + self.margin

    @property
    def area(self) -> float:
        return self.width * self.length


@dataclass
class PlacedPiece(Piece):
    x: float = 0.0
    y: float = 0.0


# ------------------------------
# Layout structures
# ------------------------------

class Shelf:
    """
    One horizontal band across the roll. The shelf has:
    - a fixed Y position (y)
    - a height set by its first (tallest) piece
    - pieces placed left→right (X direction)
    """

    def __init__(self, y: float, height: float, roll_width: float):
        self.y = y
        self.height = height
        self.current_x: float = 0.0
        self.remaining_width: float = roll_width
        self.pieces: List[PlacedPiece] = []

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def used_width(self) -> float:
        return sum(p.width for p in self.pieces)


@dataclass
class LayoutResult:
    total_length: float = 0.0
    pieces: List[PlacedPiece] = field(default_factory=list)
    roll_width: float = DEFAULT_ROLL_WIDTH
    shelves: List[Shelf] = field(default_factory=list, compare=False, repr=False)

    def pieces_for_room(self, room_index: int) -> List[PlacedPiece]:
        return [p for p in self.pieces if p.source_room_index == room_index]
