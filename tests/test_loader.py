"""Tests for DataFrame parsing and summary frames."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pandas as pd
import pytest

from models.duty import BathCleaningType
from models.staff import BuildingAssignment
from data.loader import (
    assignments_to_frame, build_floor_infos, build_snapshot,
    parse_building_assignments, parse_limits, parse_rooms, parse_staff, rooms_to_frame,
)
from data.sample_data import generate_limits_df, generate_rooms_df, generate_staff_df
from engine.errors import ConfigError
from engine.load_config import build_load_config
from engine.optimizer import optimize


def make_rooms_df():
    return pd.DataFrame([
        {"Room Number": 101, "Room Type": "NS", "Eco": False, "Broken": False, "Status": 2},
        {"Room Number": 102, "Room Type": "ND", "Eco": True, "Broken": False, "Status": 3},
        {"Room Number": 103, "Room Type": "NT", "Eco": False, "Broken": True, "Status": 4},
        {"Room Number": 2101, "Room Type": "ANS", "Eco": False, "Broken": False, "Status": 2},
        {"Room Number": "X1", "Room Type": "NS", "Eco": False, "Broken": False, "Status": 2},
    ])


def numbers(rooms):
    return [r.room_number for r in rooms]


class TestParseRooms:
    def test_broken_rooms_left_out(self):
        data = parse_rooms(make_rooms_df())
        assert numbers(data.rooms_to_clean) == ["101", "102", "X1", "2101"]
        assert numbers(data.broken_rooms) == ["103"]
        assert numbers(data.eco_rooms) == ["102"]

    def test_included_broken_room_is_cleaned(self):
        data = parse_rooms(make_rooms_df(), include_broken=["103"])
        assert "103" in numbers(data.rooms_to_clean)
        assert numbers(data.broken_rooms) == ["103"]

    def test_optional_columns_default(self):
        df = pd.DataFrame([{"Room Number": "305", "Room Type": "NFD"}])
        data = parse_rooms(df)
        room = data.main_rooms[0]
        assert (room.is_eco, room.is_broken, room.status) == (False, False, "")
        assert room.canonical_type == "FD"

    def test_status_kept_as_text(self):
        data = parse_rooms(make_rooms_df())
        assert data.main_rooms[0].status == "2"
        assert data.main_rooms[0].status_label == "Checkout"


class TestParseStaffAndLimits:
    def test_staff_in_row_order(self):
        staff = parse_staff(pd.DataFrame({"Staff ID": ["S2", "S1"], "Name": [" Bo ", "Al"]}))
        assert [(s.id, s.name) for s in staff] == [("S2", "Bo"), ("S1", "Al")]

    def test_blank_limits_skipped(self):
        df = pd.DataFrame({"Staff ID": ["S1", "S2", "S3"], "Limit": [8, None, -12]})
        assert parse_limits(df) == {"S1": 8, "S3": -12}

    def test_building_column_parsed(self):
        df = pd.DataFrame({
            "Staff ID": ["S1", "S2", "S3", "S4"],
            "Name": ["Al", "Bo", "Cy", "Di"],
            "Building": ["Main", None, "Annex only", "both"],
        })
        assert parse_building_assignments(df) == {
            "S1": BuildingAssignment.MAIN_ONLY,
            "S3": BuildingAssignment.ANNEX_ONLY,
        }

    def test_building_column_optional(self):
        df = pd.DataFrame({"Staff ID": ["S1"], "Name": ["Al"]})
        assert parse_building_assignments(df) == {}

    def test_unknown_building_rejected(self):
        df = pd.DataFrame({"Staff ID": ["S1"], "Name": ["Al"], "Building": ["Roof"]})
        with pytest.raises(ConfigError, match="S1"):
            parse_building_assignments(df)


class TestFloorInfos:
    def test_summary_per_floor_skips_unknown_floor(self):
        floors = build_floor_infos(parse_rooms(make_rooms_df()))
        assert [f.floor_number for f in floors] == [1, 21]
        first, annex = floors
        assert first.room_counts == {"S": 1}
        assert first.eco_rooms == 1
        assert first.is_main_building
        assert annex.room_counts == {"S": 1}
        assert not annex.is_main_building

    def test_snapshot_from_sample_hotel(self):
        snapshot = build_snapshot(
            generate_rooms_df(), generate_staff_df(), generate_limits_df(),
            bath_type=BathCleaningType.NORMAL,
        )
        assert snapshot.total_rooms == len(snapshot.inventory.rooms_to_clean)
        assert snapshot.main_room_count > 0 and snapshot.annex_room_count > 0
        assert snapshot.raw_limits == {"S003": 8, "S006": -12}
        assert len(snapshot.staff) == 7


class TestSummaryFrames:
    def test_assignment_and_room_frames(self):
        data = parse_rooms(make_rooms_df())
        floors = build_floor_infos(data)
        staff = parse_staff(pd.DataFrame({"Staff ID": ["S1"], "Name": ["Al"]}))
        total = sum(f.total_rooms for f in floors)
        config = build_load_config(staff, total, total - 1, 1, total_points=sum(f.total_points for f in floors))
        result = optimize(floors, config)

        summary = assignments_to_frame(result)
        assert list(summary["Name"]) == ["Al"]
        assert summary.loc[0, "Rooms"] == 3
        assert summary.loc[0, "Floors"] == "1, 21"

        rooms = rooms_to_frame({"Al": data.rooms_to_clean})
        assert list(rooms["Room Number"]) == ["X1", "101", "102", "2101"]
        assert list(rooms.columns) == ["Staff", "Room Number", "Floor", "Building", "Room Type", "Eco", "Status"]

    def test_empty_frames_keep_columns(self):
        assert list(rooms_to_frame({}).columns)[0] == "Staff"
