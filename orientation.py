# orientation.py - rollcut
#
# Decides how each room sits on the roll: how many strips it needs and
# whether its length and width are swapped. Stairs are never rotated and
# never split; a staircase wider than the roll is rejected.

import logging
import math
from typing import List, Optional, Sequence, Tuple

from models import (
    EPSILON, ROTATION_GLOBAL, ROTATION_PER_ROOM, ROTATION_POLICIES,
    Dimension, RoomSpec
)

logger = logging.getLogger(__name__)


# ---------------------------------------
# Input coercion
# ---------------------------------------

def positive_number(value: Dimension) -> Optional[float]:
    """
    Returns value as a float when it is a finite number > 0, else None.
    Accepts numeric text such as "4.2" coming straight from a form.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def stair_count_of(room: RoomSpec) -> int:
    """Number of stairs; anything unusable counts as none."""
    try:
        count = int(float(room.stair_count))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(count, 0)


def room_dimensions(room: RoomSpec) -> Optional[Tuple[float, float]]:
    """
    Returns (length, width) for a usable room, None for one that must be
    left out of the layout. Stairs only need a width; their length is
    reported as 0.
    """
    width = positive_number(room.width)
    if width is None:
        return None
    if room.is_stairs:
        return 0.0, width
    length = positive_number(room.length)
    if length is None:
        return None
    return length, width


# ---------------------------------------
# Strips
# ---------------------------------------

def strips_needed(width: float, roll_width: float) -> int:
    """ceil(width / roll_width), ignoring float noise just above a whole count."""
    return max(1, math.ceil(width / roll_width - EPSILON))


def split_into_strips(width: float, roll_width: float) -> List[float]:
    """
    Widths of the strips cut for one room: full roll widths, then the
    remainder in the last strip.
    """
    count = strips_needed(width, roll_width)
    widths = [roll_width] * (count - 1)
    widths.append(min(width - roll_width * (count - 1), roll_width))
    return widths


# ---------------------------------------
# Orientation rules
# ---------------------------------------

def choose_room_rotation(
    length: float,
    width: float,
    roll_width: float,
    cutting_margin: float
) -> bool:
    """
    Returns True when the room should be laid with length and width swapped.
      - fewer strips wins
      - both in one strip → narrower piece wins
      - same strip count above one → less roll length wins
      - ties stay unrotated
    """
    natural = strips_needed(width, roll_width)
    rotated = strips_needed(length, roll_width)

    if natural != rotated:
        return rotated < natural

    if natural == 1:
        return length < width - EPSILON

    natural_total = natural * (length + cutting_margin)
    rotated_total = rotated * (width + cutting_margin)
    return rotated_total < natural_total - EPSILON


def choose_global_rotation(
    rooms: Sequence[Tuple[float, float]],
    roll_width: float,
    cutting_margin: float
) -> bool:
    """
    Rotate-all-or-nothing: compares total strip length of every regular
    room (length, width) laid unrotated against all of them rotated.
    """
    unrotated_total = 0.0
    rotated_total = 0.0
    for length, width in rooms:
        unrotated_total += strips_needed(width, roll_width) * (length + cutting_margin)
        rotated_total += strips_needed(length, roll_width) * (width + cutting_margin)

    logger.debug(
        "Global rotation: %.3f m unrotated, %.3f m rotated",
        unrotated_total, rotated_total
    )
    return rotated_total < unrotated_total - EPSILON


def validate_rotation_policy(policy: str) -> str:
    if policy not in ROTATION_POLICIES:
        raise ValueError(
            f"Unknown rotation policy '{policy}' "
            f"(expected '{ROTATION_PER_ROOM}' or '{ROTATION_GLOBAL}')."
        )
    return policy


# ---------------------------------------
# Stairs
# ---------------------------------------

def validate_stair_width(room: RoomSpec, width: float, roll_width: float) -> None:
    """Stairs cannot be split, so each one must fit the roll as it is."""
    if width > roll_width + EPSILON:
        raise ValueError(
            f"Staircase '{room.name}' is {width:g} m wide and cannot be cut "
            f"from a {roll_width:g} m roll (stairs are never split or rotated)."
        )
