"""Tests for costing.py: estimates, shelf statistics and quotes."""
import pytest

from costing import (
    compute_quote, describe_shelf, estimate_room, estimate_stairs, layout_efficiency,
    price_per_broadloom_meter, summarize_shelves
)
from models import LayoutResult, RoomSpec
from packing import compute_layout

ROLL = 3.66


@pytest.fixture
def staircase_layout():
    return compute_layout(
        [RoomSpec("Stairs", width=1.0, is_stairs=True, stair_count=12)], ROLL
    )


class TestEstimates:
    def test_price_per_broadloom_meter(self):
        assert price_per_broadloom_meter(50, ROLL) == pytest.approx(183.0)

    def test_room_estimate(self):
        est = estimate_room(5, 4, ROLL)
        assert est.strips == 2
        assert est.broadloom_meters == pytest.approx(10.4)
        assert est.square_meters == pytest.approx(10.4 * ROLL)

    def test_room_estimate_without_dimensions(self):
        est = estimate_room(0, 4, ROLL)
        assert est.strips == 0
        assert est.broadloom_meters == 0

    def test_stair_estimate(self):
        est = estimate_stairs(1.0, 12, ROLL)
        assert est.stairs_per_row == 3
        assert est.rows == 4
        assert est.broadloom_meters == pytest.approx(2.0)
        assert est.area == pytest.approx(6.0)

    def test_stair_estimate_matches_layout(self, staircase_layout):
        est = estimate_stairs(1.0, 12, ROLL)
        assert est.broadloom_meters == pytest.approx(staircase_layout.total_length)

    def test_stair_estimate_without_stairs(self):
        assert estimate_stairs(1.0, 0, ROLL).broadloom_meters == 0

    def test_stairs_wider_than_roll(self):
        with pytest.raises(ValueError):
            estimate_stairs(4.0, 3, ROLL)


class TestShelves:
    def test_stair_shelves(self, staircase_layout):
        shelves = summarize_shelves(staircase_layout)
        assert [s.index for s in shelves] == [1, 2, 3, 4]
        for s in shelves:
            assert s.height == pytest.approx(0.5)
            assert s.used_width == pytest.approx(3.0)
            assert s.utilization_percent == 82
            assert s.stair_pieces == 3
            assert s.regular_pieces == 0
            assert s.description == "3 stair strips"

    def test_mixed_shelf(self):
        result = compute_layout(
            [RoomSpec("Hall", 2, 2), RoomSpec("Stairs", width=1.0, is_stairs=True, stair_count=1)],
            ROLL
        )
        shelves = summarize_shelves(result)
        assert len(shelves) == 1
        assert shelves[0].description == "1 room + 1 stair"

    def test_single_room_has_no_description(self):
        result = compute_layout([RoomSpec("Hall", 4, 1.5)], ROLL)
        assert summarize_shelves(result)[0].description == ""

    @pytest.mark.parametrize("regular, stairs, expected", [
        (0, 0, ""),
        (1, 0, ""),
        (3, 0, "3 pieces"),
        (0, 1, "1 stair strips"),
        (2, 1, "2 room + 1 stair"),
    ])
    def test_describe_shelf(self, regular, stairs, expected):
        assert describe_shelf(regular, stairs) == expected


class TestQuote:
    def test_staircase_quote(self, staircase_layout):
        quote = compute_quote(staircase_layout, price_per_m2=50)

        assert quote.broadloom_meters == pytest.approx(2.0)
        assert quote.price_per_broadloom_meter == pytest.approx(183.0)
        assert quote.carpet_cost == pytest.approx(366.0)
        assert quote.piece_area == pytest.approx(6.0)
        assert quote.roll_area == pytest.approx(7.32)
        assert quote.efficiency_percent == pytest.approx(6.0 / 7.32 * 100)
        assert quote.stair_pieces == 12
        assert quote.rotated_pieces == 0
        assert quote.mixed_shelves == 0
        assert len(quote.shelves) == 4

    def test_rotated_pieces_are_counted(self):
        quote = compute_quote(compute_layout([RoomSpec("Lounge", 5, 4)], ROLL))
        assert quote.rotated_pieces == 2
        assert quote.carpet_cost == 0

    def test_empty_layout(self):
        result = LayoutResult(roll_width=ROLL)
        assert layout_efficiency(result) == 0
        quote = compute_quote(result, price_per_m2=50)
        assert quote.carpet_cost == 0
        assert quote.shelves == []
