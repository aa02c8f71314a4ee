"""Tests for diagram.py: layout to drawing geometry."""
import pytest

from costing import summarize_shelves
from diagram import (
    MARGIN_OPACITY, ROOM_COLORS, build_roll_diagram, piece_color,
    piece_label_lines, roll_windows, shade_color, shelf_label
)
from models import LayoutResult, RoomSpec, Shelf
from packing import compute_layout

ROLL = 3.66


@pytest.fixture
def two_rooms():
    return compute_layout([RoomSpec("Hall", 4, 1.5), RoomSpec("Study", 3, 2)], ROLL)


class TestColors:
    def test_shade_darker(self):
        assert shade_color("#ffcccc", -10) == "#e6b8b8"

    def test_shade_lighter_is_clamped(self):
        assert shade_color("#ffcccc", 10) == "#ffe0e0"

    def test_piece_colors(self):
        result = compute_layout(
            [RoomSpec("Lounge", 5, 4), RoomSpec("Stairs", width=1, is_stairs=True, stair_count=1)],
            ROLL
        )
        lounge = result.pieces_for_room(0)
        stair = result.pieces_for_room(1)[0]
        assert piece_color(lounge[0]) == ROOM_COLORS[0]
        assert piece_color(lounge[1]) == shade_color(ROOM_COLORS[0], -10)
        assert piece_color(stair) == shade_color(ROOM_COLORS[1], -10)


class TestLabels:
    def test_strip_label(self):
        result = compute_layout([RoomSpec("Lounge", 5, 4)], ROLL)
        texts = [t for t, _ in piece_label_lines(result.pieces[0])]
        assert texts[0] == "Lounge (Strip 1/2)"
        assert texts[-1] == "(rotated)"

    def test_stair_label(self):
        result = compute_layout([RoomSpec("Stairs", width=1, is_stairs=True, stair_count=2)], ROLL)
        texts = [t for t, _ in piece_label_lines(result.pieces[1])]
        assert texts[0] == "Stairs #2"

    @pytest.mark.parametrize("regular, stairs, expected", [
        (2, 0, "Row 1: 4.20m (2 pieces)"),
        (0, 3, "Row 1: 4.20m (3 stair strips)"),
        (1, 2, "Row 1: 4.20m (1 room + 2 stair)"),
        (1, 0, "Row 1: 4.20m"),
    ])
    def test_shelf_label(self, regular, stairs, expected):
        assert shelf_label(1, 4.2, regular, stairs) == expected

    def test_shelf_label_matches_quote_description(self):
        result = compute_layout(
            [RoomSpec("Hall", 2, 2), RoomSpec("Stairs", width=1.0, is_stairs=True, stair_count=1)],
            ROLL
        )
        summary = summarize_shelves(result)[0]
        texts = [lb.text for lb in build_roll_diagram(result).labels]
        assert f"Row 1: 2.20m ({summary.description})" in texts


class TestBuildDiagram:
    def test_pieces_and_margins(self, two_rooms):
        d = build_roll_diagram(two_rooms, scale=20, origin=(50, 50))

        assert d.roll.width == pytest.approx(ROLL * 20)
        assert d.roll.height == pytest.approx(4.2 * 20)
        assert len(d.rects) == 4

        hall, hall_margin = d.rects[0], d.rects[1]
        assert (hall.x, hall.y) == (50, 50)
        assert hall.width == pytest.approx(30)
        assert hall.height == pytest.approx(80)
        assert hall_margin.y == pytest.approx(130)
        assert hall_margin.height == pytest.approx(4)
        assert hall_margin.opacity == MARGIN_OPACITY

    def test_shelf_lines(self, two_rooms):
        d = build_roll_diagram(two_rooms, scale=20, origin=(50, 50))
        assert len(d.lines) == 1
        assert d.lines[0].y1 == pytest.approx(50 + 4.2 * 20)
        assert d.lines[0].dash == (5, 5)

    def test_stairs_have_no_margin_band(self):
        result = compute_layout([RoomSpec("Stairs", width=1, is_stairs=True, stair_count=3)], ROLL)
        d = build_roll_diagram(result)
        assert len(d.rects) == 3

    def test_labels_can_be_hidden(self, two_rooms):
        d = build_roll_diagram(two_rooms, show_labels=False)
        assert [lb.text for lb in d.labels] == ["3.66m", "4.20m broadloom"]

    def test_empty_roll(self):
        d = build_roll_diagram(LayoutResult(roll_width=ROLL), scale=20)
        assert d.rects == []
        assert d.roll.height == pytest.approx(100)
        assert "Add room dimensions to see carpet layout" in [lb.text for lb in d.labels]
        assert d.width >= 400 and d.height >= 300


def stacked_shelves(heights):
    shelves, y = [], 0.0
    for h in heights:
        shelves.append(Shelf(y=y, height=h, roll_width=ROLL))
        y += h
    return shelves


class TestRollWindows:
    def test_short_roll_is_one_window(self):
        assert roll_windows(stacked_shelves([2, 2]), 4.0, 5.0) == [(0.0, 4.0)]

    def test_breaks_between_shelves(self):
        windows = roll_windows(stacked_shelves([2, 2, 2]), 6.0, 5.0)
        assert windows == [(0.0, 4.0), (4.0, 6.0)]

    def test_shelf_taller_than_a_page_is_cut(self):
        windows = roll_windows(stacked_shelves([1, 7]), 8.0, 3.0)
        assert windows == [(0.0, 1.0), (1.0, 4.0), (4.0, 7.0), (7.0, 8.0)]

    def test_windows_cover_the_roll(self):
        result = compute_layout(
            [RoomSpec("Tower stairs", width=1.2, is_stairs=True, stair_count=300)], ROLL
        )
        windows = roll_windows(result.shelves, result.total_length, 18.0)

        assert windows[0][0] == 0.0
        assert windows[-1][1] == pytest.approx(result.total_length)
        shelf_tops = {round(s.y, 9) for s in result.shelves}
        for (start, end), (next_start, _) in zip(windows, windows[1:]):
            assert end == next_start
            assert round(end, 9) in shelf_tops
        assert all(end - start <= 18.0 + 1e-9 for start, end in windows)

    @pytest.mark.parametrize("page_length", [0, -1.0])
    def test_page_length_must_be_positive(self, page_length):
        with pytest.raises(ValueError, match="Page length"):
            roll_windows(stacked_shelves([1]), 1.0, page_length)
