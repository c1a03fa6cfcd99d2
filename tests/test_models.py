"""Tests for room parsing, floor encoding and workload records."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from models import (
    Staff, BuildingAssignment, FloorInfo, Room, CleaningData, BathCleaningType,
    RoomAllocation, StaffAssignment, MAIN_BUILDING, ANNEX_BUILDING,
)
from models.load_config import LoadConfig
from models.room import parse_room_number, canonical_room_type, room_sort_key


def make_staff(sid="S1", name="Alice"):
    return Staff(sid, name)


class TestRoomNumberParsing:
    def test_three_digits_is_main_building(self):
        assert parse_room_number("305") == (3, MAIN_BUILDING)

    def test_ten_hundreds_is_main_tenth_floor(self):
        assert parse_room_number("1012") == (10, MAIN_BUILDING)

    def test_other_four_digits_is_annex(self):
        assert parse_room_number("2304") == (23, ANNEX_BUILDING)

    def test_non_digits_are_stripped(self):
        assert parse_room_number("A-204") == (2, MAIN_BUILDING)

    def test_unparseable_number_is_floor_zero(self):
        assert parse_room_number("LOBBY") == (0, None)
        assert parse_room_number("12") == (0, None)

    def test_room_derives_floor_and_building(self):
        room = Room("2101", "ANS")
        assert room.floor == 21
        assert room.building == ANNEX_BUILDING
        assert room.canonical_type == "S"
        assert not room.is_main_building

    def test_sort_key_orders_numerically(self):
        rooms = [Room("110", "NS"), Room("102", "NS"), Room("1001", "NS"), Room("203", "NS")]
        assert [r.room_number for r in sorted(rooms, key=room_sort_key)] == ["102", "110", "203", "1001"]


class TestRoomTypes:
    def test_aliases_map_to_canonical_types(self):
        assert canonical_room_type("ABF") == "S"
        assert canonical_room_type("and") == "D"
        assert canonical_room_type("ADT") == "T"
        assert canonical_room_type("NFD") == "FD"

    def test_unknown_type_passes_through(self):
        assert canonical_room_type("SUITE") == "SUITE"

    def test_status_label(self):
        assert Room("101", "NS", status="2").status_label == "Checkout"
        assert Room("101", "NS").status_label == "Unknown"


class TestFloorInfo:
    def test_floor_encoding(self):
        main = FloorInfo.from_counts(20, {"S": 1})
        annex = FloorInfo.from_counts(21, {"S": 1})
        assert main.is_main_building and main.building_floor == 20
        assert not annex.is_main_building and annex.building_floor == 1
        assert annex.label == "Annex 1F"

    def test_points_use_type_weights_and_eco_override(self):
        floor = FloorInfo.from_counts(3, {"S": 2, "T": 1, "FD": 1, "QUEEN": 1}, eco_rooms=2)
        assert floor.total_rooms == 7
        assert floor.total_points == pytest.approx(2 * 1.0 + 1.67 + 2.0 + 1.0 + 2 * 0.2)

    def test_negative_counts_rejected(self):
        with pytest.raises(ValueError):
            FloorInfo(1, {"S": -1})


class TestStaffAssignment:
    def test_aggregates_are_derived(self):
        assignment = StaffAssignment(
            staff=make_staff(),
            rooms_by_floor={
                2: RoomAllocation({"D": 2}),
                22: RoomAllocation({"T": 1}, eco_rooms=1),
            },
        )
        assert assignment.floors == frozenset({2, 22})
        assert assignment.total_rooms == 4
        assert assignment.total_points == pytest.approx(2.0 + 1.67 + 0.2)
        assert assignment.has_main_building and assignment.has_annex_building
        assert assignment.mixes_buildings
        assert assignment.adjusted_score == assignment.total_points

    def test_empty_floors_are_dropped(self):
        assignment = StaffAssignment(
            staff=make_staff(),
            rooms_by_floor={1: RoomAllocation({"S": 0}), 2: RoomAllocation({"S": 1})},
        )
        assert assignment.floors == frozenset({2})

    def test_bath_duty_reduces_adjusted_score(self):
        assignment = StaffAssignment(
            staff=make_staff(),
            rooms_by_floor={1: RoomAllocation({"S": 10})},
            bath_type=BathCleaningType.NORMAL,
            bath_duty_cost=4.0,
        )
        assert assignment.has_bath_duty
        assert assignment.adjusted_score == pytest.approx(6.0)

    def test_adjusted_score_floored_at_zero(self):
        assignment = StaffAssignment(
            staff=make_staff(),
            rooms_by_floor={1: RoomAllocation({"S": 2})},
            bath_type=BathCleaningType.WITH_DRAINING,
            bath_duty_cost=5.0,
        )
        assert assignment.adjusted_score == 0.0

    def test_records_are_immutable(self):
        assignment = StaffAssignment(staff=make_staff())
        with pytest.raises(AttributeError):
            assignment.total_rooms = 3


class TestCleaningData:
    def test_from_rooms_partitions_by_building(self):
        rooms = [Room("101", "NS"), Room("2101", "ANS", is_eco=True), Room("X", "NS")]
        data = CleaningData.from_rooms(rooms)
        assert [r.room_number for r in data.main_rooms] == ["101", "X"]
        assert [r.room_number for r in data.annex_rooms] == ["2101"]
        assert [r.room_number for r in data.eco_rooms] == ["2101"]
        assert len(data.rooms_to_clean) == 3

    def test_bath_type_costs(self):
        assert BathCleaningType.NONE.default_cost == 0.0
        assert BathCleaningType.NORMAL.default_cost == 4.0
        assert BathCleaningType.WITH_DRAINING.default_cost == 5.0
        assert BathCleaningType.NORMAL.display_name == "Bath cleaning"


class TestBuildingAssignment:
    def test_parse_accepts_short_and_display_forms(self):
        assert BuildingAssignment.parse("main") == BuildingAssignment.MAIN_ONLY
        assert BuildingAssignment.parse("Main building only") == BuildingAssignment.MAIN_ONLY
        assert BuildingAssignment.parse(" Annex only ") == BuildingAssignment.ANNEX_ONLY
        assert BuildingAssignment.parse("") == BuildingAssignment.BOTH

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError):
            BuildingAssignment.parse("roof")

    def test_allows_floor(self):
        assert BuildingAssignment.MAIN_ONLY.allows_floor(20)
        assert not BuildingAssignment.MAIN_ONLY.allows_floor(21)
        assert BuildingAssignment.ANNEX_ONLY.allows_floor(21)
        assert not BuildingAssignment.ANNEX_ONLY.allows_floor(3)
        assert BuildingAssignment.BOTH.allows_floor(3) and BuildingAssignment.BOTH.allows_floor(21)


class TestLoadConfigFloorCap:
    def test_no_cap_by_default(self):
        config = LoadConfig(staff=[make_staff()], target_points_by_staff={"S1": 1.0})
        assert config.max_floors("S1") is None
        assert config.building_for("S1") == BuildingAssignment.BOTH

    def test_bath_carrier_gets_one_floor_less(self):
        config = LoadConfig(
            staff=[make_staff("S1"), make_staff("S2", "Bob")],
            target_points_by_staff={"S1": 1.0, "S2": 1.0},
            bath_duty_assignee="S1",
            bath_type=BathCleaningType.NORMAL,
            max_floors_per_staff=2,
        )
        assert config.max_floors("S1") == 1
        assert config.max_floors("S2") == 2

    def test_bath_carrier_keeps_at_least_one_floor(self):
        config = LoadConfig(
            staff=[make_staff()],
            target_points_by_staff={"S1": 1.0},
            bath_duty_assignee="S1",
            bath_type=BathCleaningType.NORMAL,
            max_floors_per_staff=1,
        )
        assert config.max_floors("S1") == 1
