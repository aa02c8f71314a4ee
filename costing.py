# costing.py - rollcut
#
# Turns a layout into quote figures: broadloom meters, price per broadloom
# meter, carpet cost, shelf utilization and layout efficiency.
# Also holds the quick room/stair estimates used before a full layout exists.
# Currency formatting is done in pdf_export.py; numeric totals are prepared here.

import math
from dataclasses import dataclass, field
from typing import List

from models import CUTTING_MARGIN, EPSILON, STAIR_DEPTH, LayoutResult
from orientation import strips_needed


# -------------------------------------------------------------
# Data structures
# -------------------------------------------------------------

@dataclass
class RoomEstimate:
    strips: int = 0
    broadloom_meters: float = 0.0   # strips * (length + margin)
    square_meters: float = 0.0      # carpet bought, broadloom * roll width


@dataclass
class StairEstimate:
    area: float = 0.0               # stair width * stairs * depth
    stairs_per_row: int = 0
    rows: int = 0
    broadloom_meters: float = 0.0   # rows * depth, no margin for stairs


@dataclass
class ShelfSummary:
    index: int                      # 1-based
    y: float
    height: float
    used_width: float
    utilization_percent: int
    regular_pieces: int
    stair_pieces: int

    @property
    def description(self) -> str:
        return describe_shelf(self.regular_pieces, self.stair_pieces)


@dataclass
class QuoteSummary:
    roll_width: float = 0.0
    broadloom_meters: float = 0.0
    price_per_m2: float = 0.0
    price_per_broadloom_meter: float = 0.0
    carpet_cost: float = 0.0

    piece_area: float = 0.0         # m² of carpet actually laid
    roll_area: float = 0.0          # m² of roll consumed
    efficiency_percent: float = 0.0

    shelves: List[ShelfSummary] = field(default_factory=list)
    rotated_pieces: int = 0
    stair_pieces: int = 0
    mixed_shelves: int = 0


# -------------------------------------------------------------
# Shelf contents
# -------------------------------------------------------------

def describe_shelf(regular: int, stairs: int) -> str:
    """Short text for what sits on a shelf, empty for a lone room piece."""
    if stairs and regular:
        return f"{regular} room + {stairs} stair"
    if stairs:
        return f"{stairs} stair strips"
    if regular > 1:
        return f"{regular} pieces"
    return ""


# -------------------------------------------------------------
# Quick estimates
# -------------------------------------------------------------

def price_per_broadloom_meter(price_per_m2: float, roll_width: float) -> float:
    """One broadloom meter is roll_width square meters of carpet."""
    return price_per_m2 * roll_width


def estimate_room(
    length: float,
    width: float,
    roll_width: float,
    cutting_margin: float = CUTTING_MARGIN
) -> RoomEstimate:
    """
    Carpet for one room cut on its own, without sharing the roll:
    every strip runs the room length plus the cutting margin.
    """
    if length <= 0 or width <= 0:
        return RoomEstimate()

    strips = strips_needed(width, roll_width)
    broadloom = strips * (length + cutting_margin)
    return RoomEstimate(
        strips=strips,
        broadloom_meters=broadloom,
        square_meters=broadloom * roll_width
    )


def estimate_stairs(
    width: float,
    stair_count: int,
    roll_width: float,
    stair_depth: float = STAIR_DEPTH
) -> StairEstimate:
    """
    Stairs are cut individually and packed side by side across the roll,
    floor(roll_width / width) per row.
    """
    if width <= 0 or stair_count <= 0:
        return StairEstimate()

    per_row = int(math.floor(roll_width / width + EPSILON))
    if per_row < 1:
        raise ValueError(
            f"Stairs {width:g} m wide cannot be cut from a {roll_width:g} m roll."
        )

    rows = int(math.ceil(stair_count / per_row))
    return StairEstimate(
        area=width * stair_count * stair_depth,
        stairs_per_row=per_row,
        rows=rows,
        broadloom_meters=rows * stair_depth
    )


# -------------------------------------------------------------
# Layout statistics
# -------------------------------------------------------------

def summarize_shelves(result: LayoutResult) -> List[ShelfSummary]:
    summaries = []
    for i, shelf in enumerate(result.shelves, start=1):
        used = shelf.used_width()
        stairs = sum(1 for p in shelf.pieces if p.is_stairs)
        summaries.append(ShelfSummary(
            index=i,
            y=shelf.y,
            height=shelf.height,
            used_width=used,
            utilization_percent=min(100, int(round(used / result.roll_width * 100))),
            regular_pieces=len(shelf.pieces) - stairs,
            stair_pieces=stairs
        ))
    return summaries


def layout_efficiency(result: LayoutResult) -> float:
    """Laid carpet area as a percentage of the roll area consumed."""
    roll_area = result.roll_width * result.total_length
    if roll_area <= 0:
        return 0.0
    return sum(p.area for p in result.pieces) / roll_area * 100


# -------------------------------------------------------------
# Main quote computation
# -------------------------------------------------------------

def compute_quote(result: LayoutResult, price_per_m2: float = 0.0) -> QuoteSummary:

    quote = QuoteSummary(
        roll_width=result.roll_width,
        broadloom_meters=result.total_length,
        price_per_m2=price_per_m2
    )

    # --- PRICE ---
    quote.price_per_broadloom_meter = price_per_broadloom_meter(
        price_per_m2, result.roll_width
    )
    quote.carpet_cost = quote.broadloom_meters * quote.price_per_broadloom_meter

    # --- AREAS ---
    quote.piece_area = sum(p.area for p in result.pieces)
    quote.roll_area = result.roll_width * result.total_length
    quote.efficiency_percent = layout_efficiency(result)

    # --- SHELVES ---
    quote.shelves = summarize_shelves(result)
    quote.mixed_shelves = sum(
        1 for s in quote.shelves if s.stair_pieces and s.regular_pieces
    )

    # --- PIECES ---
    quote.rotated_pieces = sum(1 for p in result.pieces if p.is_rotated)
    quote.stair_pieces = sum(1 for p in result.pieces if p.is_stairs)

    return quote
