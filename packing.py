# packing.py - rollcut
#
# Builds the roll layout using a shelf-based strategy:
#   1. derive pieces (strips for wide rooms, one piece per stair)
#   2. add the cutting margin and sort tallest-first
#   3. place pieces left→right on shelves running across the roll
# Produces a LayoutResult with placed pieces, shelves and total length.

import logging
import math
from typing import List, Optional, Sequence

from models import (
    CUTTING_MARGIN, EPSILON, ROTATION_GLOBAL, ROTATION_PER_ROOM, STAIR_DEPTH,
    LayoutResult, LayoutSettings, Piece, PlacedPiece, RoomSpec, Shelf
)
from orientation import (
    choose_global_rotation, choose_room_rotation, room_dimensions,
    split_into_strips, stair_count_of, validate_rotation_policy,
    validate_stair_width
)

logger = logging.getLogger(__name__)


# -------------------------------------------------------------
# Phase 1: piece derivation
# -------------------------------------------------------------

def stair_pieces(
    room_index: int,
    room: RoomSpec,
    width: float,
    stair_depth: float
) -> List[Piece]:
    """One piece per stair, stair width across the roll, never rotated."""
    count = stair_count_of(room)
    return [
        Piece(
            source_room_index=room_index,
            room_name=room.name,
            is_stairs=True,
            width=width,
            length=stair_depth,
            strip_index=0,
            total_strips=1,
            is_rotated=False,
            margin=0.0,
            stair_number=n
        )
        for n in range(1, count + 1)
    ]


def room_pieces(
    room_index: int,
    room: RoomSpec,
    length: float,
    width: float,
    rotated: bool,
    roll_width: float,
    cutting_margin: float
) -> List[Piece]:
    """Strips for a regular room in the chosen orientation."""
    if rotated:
        length, width = width, length

    strip_widths = split_into_strips(width, roll_width)
    return [
        Piece(
            source_room_index=room_index,
            room_name=room.name,
            is_stairs=False,
            width=strip_width,
            length=length,
            strip_index=i,
            total_strips=len(strip_widths),
            is_rotated=rotated,
            margin=cutting_margin
        )
        for i, strip_width in enumerate(strip_widths)
    ]


def derive_pieces(
    rooms: Sequence[RoomSpec],
    roll_width: float,
    cutting_margin: float = CUTTING_MARGIN,
    stair_depth: float = STAIR_DEPTH,
    rotation_policy: str = ROTATION_PER_ROOM
) -> List[Piece]:
    """
    Turns rooms into roll pieces, in input order. Rooms with unusable
    dimensions are skipped.
    """
    valid = []
    for index, room in enumerate(rooms):
        dims = room_dimensions(room)
        if dims is None:
            logger.debug("Skipping room %d (%r): invalid dimensions", index, room.name)
            continue
        valid.append((index, room, dims))

    rotate_all = False
    if rotation_policy == ROTATION_GLOBAL:
        rotate_all = choose_global_rotation(
            [dims for _, room, dims in valid if not room.is_stairs],
            roll_width,
            cutting_margin
        )

    pieces: List[Piece] = []
    for index, room, (length, width) in valid:
        if room.is_stairs:
            validate_stair_width(room, width, roll_width)
            pieces.extend(stair_pieces(index, room, width, stair_depth))
            continue

        if rotation_policy == ROTATION_GLOBAL:
            rotated = rotate_all
        else:
            rotated = choose_room_rotation(length, width, roll_width, cutting_margin)

        derived = room_pieces(
            index, room, length, width, rotated, roll_width, cutting_margin
        )
        logger.debug(
            "Room %d (%r): %d strip(s), rotated=%s",
            index, room.name, len(derived), rotated
        )
        pieces.extend(derived)

    return pieces


# -------------------------------------------------------------
# Phase 2: sort
# -------------------------------------------------------------

def sort_pieces(pieces: Sequence[Piece]) -> List[Piece]:
    """
    Tallest first (margin included), then widest. The sort is stable, so
    equal pieces keep derivation order.
    """
    return sorted(
        pieces,
        key=lambda p: (-round(p.cut_length, 9), -round(p.width, 9))
    )


# -------------------------------------------------------------
# Phase 3: shelf placement
# -------------------------------------------------------------

def _placed(piece: Piece, x: float, y: float) -> PlacedPiece:
    return PlacedPiece(
        source_room_index=piece.source_room_index,
        room_name=piece.room_name,
        is_stairs=piece.is_stairs,
        width=piece.width,
        length=piece.length,
        strip_index=piece.strip_index,
        total_strips=piece.total_strips,
        is_rotated=piece.is_rotated,
        margin=piece.margin,
        stair_number=piece.stair_number,
        x=x,
        y=y
    )


def try_place_on_shelf(shelf: Shelf, piece: Piece) -> Optional[PlacedPiece]:
    """
    Places piece at the shelf's current X if the remaining width allows.
    Returns the placed piece, or None when it does not fit.
    """
    if shelf.remaining_width + EPSILON < piece.width:
        return None

    p = _placed(piece, shelf.current_x, shelf.y)
    shelf.pieces.append(p)
    shelf.current_x += piece.width
    shelf.remaining_width -= piece.width
    shelf.height = max(shelf.height, piece.cut_length)
    return p


def start_new_shelf(shelves: List[Shelf], piece: Piece, roll_width: float) -> Shelf:
    """Opens a shelf directly below the last one."""
    y0 = shelves[-1].bottom if shelves else 0.0
    shelf = Shelf(y=y0, height=piece.cut_length, roll_width=roll_width)
    shelves.append(shelf)
    return shelf


def place_pieces(pieces: Sequence[Piece], roll_width: float) -> LayoutResult:
    """First-fit shelf placement of already sorted pieces."""
    shelves: List[Shelf] = []
    placed: List[PlacedPiece] = []

    for piece in pieces:
        p = None
        for shelf in shelves:
            p = try_place_on_shelf(shelf, piece)
            if p is not None:
                break

        if p is None:
            shelf = start_new_shelf(shelves, piece, roll_width)
            p = try_place_on_shelf(shelf, piece)

        placed.append(p)

    total_length = shelves[-1].bottom if shelves else 0.0
    return LayoutResult(
        total_length=total_length,
        pieces=placed,
        roll_width=roll_width,
        shelves=shelves
    )


# -------------------------------------------------------------
# Entry point
# -------------------------------------------------------------

def _finite(value) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)


def compute_layout(
    rooms: Sequence[RoomSpec],
    roll_width: float,
    cutting_margin: float = CUTTING_MARGIN,
    stair_depth: float = STAIR_DEPTH,
    rotation_policy: str = ROTATION_PER_ROOM
) -> LayoutResult:
    """
    Lays out all usable rooms on a roll of the given width and returns
    the placed pieces together with the broadloom length consumed.

    Raises ValueError for a non-positive or non-finite roll width, margin
    or stair depth, an unknown rotation policy, or a staircase wider than
    the roll.
    """
    if not _finite(roll_width) or roll_width <= 0:
        raise ValueError(f"Roll width must be a positive finite number, got {roll_width!r}.")
    if not _finite(cutting_margin) or cutting_margin < 0:
        raise ValueError(f"Cutting margin must be a finite number >= 0, got {cutting_margin!r}.")
    if not _finite(stair_depth) or stair_depth <= 0:
        raise ValueError(f"Stair depth must be a positive finite number, got {stair_depth!r}.")
    validate_rotation_policy(rotation_policy)

    pieces = derive_pieces(
        rooms, roll_width,
        cutting_margin=cutting_margin,
        stair_depth=stair_depth,
        rotation_policy=rotation_policy
    )
    result = place_pieces(sort_pieces(pieces), roll_width)

    logger.info(
        "Layout: %d piece(s) on %d shelf/shelves, %.2f m of %.2f m roll",
        len(result.pieces), len(result.shelves), result.total_length, roll_width
    )
    return result


def compute_layout_with(rooms: Sequence[RoomSpec], settings: LayoutSettings) -> LayoutResult:
    return compute_layout(
        rooms,
        settings.roll_width,
        cutting_margin=settings.cutting_margin,
        stair_depth=settings.stair_depth,
        rotation_policy=settings.rotation_policy
    )
