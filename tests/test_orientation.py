"""Tests for orientation.py: strip counting and rotation rules."""
import pytest

from models import RoomSpec
from orientation import (
    choose_global_rotation, choose_room_rotation, positive_number,
    room_dimensions, split_into_strips, stair_count_of, strips_needed,
    validate_rotation_policy, validate_stair_width
)

ROLL = 3.66
MARGIN = 0.2


class TestStrips:
    @pytest.mark.parametrize("width, expected", [
        (0.5, 1),
        (3.66, 1),
        (3.67, 2),
        (7.32, 2),
        (7.5, 3),
    ])
    def test_strips_needed(self, width, expected):
        assert strips_needed(width, ROLL) == expected

    def test_split_remainder_goes_last(self):
        widths = split_into_strips(4, ROLL)
        assert widths == pytest.approx([3.66, 0.34])

    def test_split_exact_multiple_has_no_sliver(self):
        widths = split_into_strips(2 * ROLL, ROLL)
        assert len(widths) == 2
        assert all(w <= ROLL for w in widths)
        assert sum(widths) == pytest.approx(7.32)

    def test_single_strip(self):
        assert split_into_strips(2.5, ROLL) == [2.5]


class TestRoomRotation:
    @pytest.mark.parametrize("length, width, rotated", [
        (5, 4, True),     # 2 strips either way, rotated is shorter
        (4, 4, False),    # 2 strips either way, tie stays unrotated
        (3, 2, False),    # one strip either way, already narrower
        (2, 3, True),     # one strip either way, rotated is narrower
        (3, 3, False),    # square
        (3, 5, True),     # rotation saves a strip
        (8, 3, False),    # rotation would need 3 strips
    ])
    def test_choose_room_rotation(self, length, width, rotated):
        assert choose_room_rotation(length, width, ROLL, MARGIN) is rotated

    def test_global_rotation(self):
        assert choose_global_rotation([(5, 4)], ROLL, MARGIN) is True
        assert choose_global_rotation([(8, 3)], ROLL, MARGIN) is False
        assert choose_global_rotation([(3, 2), (5, 4)], ROLL, MARGIN) is True

    def test_global_rotation_without_rooms(self):
        assert choose_global_rotation([], ROLL, MARGIN) is False

    def test_policy_validation(self):
        assert validate_rotation_policy("global") == "global"
        with pytest.raises(ValueError):
            validate_rotation_policy("sideways")


class TestCoercion:
    @pytest.mark.parametrize("value, expected", [
        ("4.2", 4.2),
        (3, 3.0),
        ("abc", None),
        ("", None),
        (0, None),
        (-1, None),
        (None, None),
        (True, None),
        ("inf", None),
    ])
    def test_positive_number(self, value, expected):
        assert positive_number(value) == expected

    @pytest.mark.parametrize("count, expected", [
        ("12", 12), ("3.0", 3), (5, 5), ("x", 0), (-2, 0), (None, 0),
    ])
    def test_stair_count(self, count, expected):
        room = RoomSpec("Stairs", width=1, is_stairs=True, stair_count=count)
        assert stair_count_of(room) == expected

    def test_room_dimensions(self):
        assert room_dimensions(RoomSpec("Hall", "4", "1.5")) == (4.0, 1.5)
        assert room_dimensions(RoomSpec("Hall", "4", "")) is None
        assert room_dimensions(RoomSpec("Stairs", None, 1.0, is_stairs=True)) == (0.0, 1.0)
        assert room_dimensions(RoomSpec("Stairs", 3, 0, is_stairs=True)) is None

    def test_stair_width(self):
        validate_stair_width(RoomSpec("Stairs"), ROLL, ROLL)
        with pytest.raises(ValueError, match="cannot be cut"):
            validate_stair_width(RoomSpec("Stairs"), 3.7, ROLL)
