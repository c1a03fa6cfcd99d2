"""Tests for proximity grouping and route ordering."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from models.room import Room
from engine.proximity import (
    group_rooms_by_proximity, is_adjacent_room, movement_distance,
    optimize_room_order, room_distance,
)


def make_rooms(*room_numbers):
    return [Room(n, "NS") for n in room_numbers]


def numbers(rooms):
    return [r.room_number for r in rooms]


class TestGrouping:
    def test_nearby_rooms_grouped(self):
        groups = group_rooms_by_proximity(make_rooms("110", "101", "103", "102", "111"))
        assert [numbers(g) for g in groups] == [["101", "102", "103"], ["110", "111"]]

    def test_floors_never_share_a_group(self):
        groups = group_rooms_by_proximity(make_rooms("201", "108", "109"))
        assert [numbers(g) for g in groups] == [["108", "109"], ["201"]]

    def test_custom_gap(self):
        groups = group_rooms_by_proximity(make_rooms("101", "103", "105"), max_gap=1)
        assert len(groups) == 3

    def test_adjacency_needs_numbers(self):
        assert is_adjacent_room("101", "104")
        assert not is_adjacent_room("101", "LOBBY")


class TestDistance:
    def test_cross_floor_distance(self):
        a, b = make_rooms("101", "301")
        assert room_distance(a, b) == 140.0

    def test_same_floor_distance(self):
        a, b = make_rooms("101", "105")
        assert room_distance(a, b) == 8.0

    def test_unparseable_numbers(self):
        a, b = make_rooms("A", "B")
        assert room_distance(a, b) == 10.0

    def test_movement_distance(self):
        assert movement_distance(make_rooms("101", "103", "102")) == 6.0
        assert movement_distance(make_rooms("101")) == 0


class TestRouteOrder:
    def test_nearest_neighbour_from_first_room(self):
        route = optimize_room_order(make_rooms("101", "301", "102", "103"))
        assert numbers(route) == ["101", "102", "103", "301"]

    def test_route_never_longer_than_input_order(self):
        rooms = make_rooms("105", "201", "101", "204", "103")
        assert movement_distance(optimize_room_order(rooms)) <= movement_distance(rooms)

    def test_short_lists_unchanged(self):
        rooms = make_rooms("301", "101")
        assert optimize_room_order(rooms) == rooms
