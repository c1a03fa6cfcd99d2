"""End-to-end tests: snapshot to named rooms per staff member."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import date

import pandas as pd
import pytest

from models.duty import BathCleaningType
from data.loader import build_snapshot
from data.sample_data import generate_limits_df, generate_rooms_df, generate_staff_df
from engine.editor import find_inconsistencies
from engine.errors import ConfigError
from engine.pipeline import compare_runs, run_housekeeping


def make_sample_snapshot(**kwargs):
    return build_snapshot(
        generate_rooms_df(), generate_staff_df(), generate_limits_df(),
        target_date=date(2024, 5, 1), **kwargs,
    )


def make_small_snapshot():
    rooms = pd.DataFrame({
        "Room Number": ["101", "102", "103", "201", "202", "2101", "2102"],
        "Room Type": ["NS", "ND", "NT", "NS", "NS", "ANS", "AND"],
        "Eco": [False, False, False, True, False, False, False],
    })
    staff = pd.DataFrame({"Staff ID": ["S1", "S2"], "Name": ["Ana", "Ben"]})
    return build_snapshot(rooms, staff)


class TestRunHousekeeping:
    def test_every_room_assigned_exactly_once(self):
        snapshot = make_sample_snapshot()
        run = run_housekeeping(snapshot)

        assigned = [r.room_number for rooms in run.rooms_by_staff.values() for r in rooms]
        expected = [r.room_number for r in snapshot.inventory.rooms_to_clean]
        assert sorted(assigned) == sorted(expected)
        assert len(set(assigned)) == len(assigned)
        assert run.shortfalls == []
        assert run.unassigned == []

    def test_assignments_carry_consistent_detailed_rooms(self):
        run = run_housekeeping(make_sample_snapshot())
        assert find_inconsistencies(run.assignments) == []
        for a in run.assignments:
            assert len(a.detailed_rooms) == a.total_rooms

    def test_bath_duty_flows_through(self):
        run = run_housekeeping(make_sample_snapshot(bath_type=BathCleaningType.WITH_DRAINING))
        carriers = [a for a in run.assignments if a.has_bath_duty]
        assert len(carriers) == 1
        assert carriers[0].bath_duty_cost == 5.0

    def test_explanations_for_every_staff(self):
        run = run_housekeeping(make_sample_snapshot())
        assert set(run.explanations) == {a.staff.name for a in run.assignments}
        assert run.explanations["Aiko"][0].startswith("Step 1 - Fair share")

    def test_routes_and_groups_cover_each_staff_list(self):
        run = run_housekeeping(make_sample_snapshot(), rule_config={"proximity_max_gap": 2})
        for name, rooms in run.rooms_by_staff.items():
            assert sorted(r.room_number for r in run.routes[name]) == sorted(r.room_number for r in rooms)
            grouped = [r for group in run.room_groups[name] for r in group]
            assert len(grouped) == len(rooms)

    def test_result_keeps_target_date(self):
        run = run_housekeeping(make_sample_snapshot())
        assert run.result.target_date == date(2024, 5, 1)

    def test_unknown_engine(self):
        with pytest.raises(ConfigError):
            run_housekeeping(make_small_snapshot(), engine="quantum")


class TestEngines:
    def test_exact_engine_end_to_end(self):
        snapshot = make_small_snapshot()
        run = run_housekeeping(snapshot, engine="exact")
        assert run.result.engine == "exact"
        assert sum(len(r) for r in run.rooms_by_staff.values()) == 7
        assert run.shortfalls == []

    def test_compare_runs(self):
        snapshot = make_small_snapshot()
        greedy = run_housekeeping(snapshot)
        exact = run_housekeeping(snapshot, engine="exact")
        diffs = compare_runs(greedy, exact)

        assert [d["Staff"] for d in diffs] == ["Ana", "Ben"]
        assert sum(d["greedy Rooms"] for d in diffs) == 7
        assert sum(d["exact Rooms"] for d in diffs) == 7
        assert sum(d["Point Change"] for d in diffs) == pytest.approx(0.0)


class TestStaffConstraints:
    def test_duplicate_staff_names_rejected(self):
        rooms = pd.DataFrame({
            "Room Number": ["101", "102", "103", "104", "201", "202", "203", "204"],
            "Room Type": ["NS"] * 8,
        })
        staff = pd.DataFrame({"Staff ID": ["S1", "S2"], "Name": ["Kim", "Kim"]})
        with pytest.raises(ConfigError, match="Kim"):
            run_housekeeping(build_snapshot(rooms, staff))

    def test_building_column_keeps_staff_in_main_building(self):
        rooms = pd.DataFrame({
            "Room Number": ["101", "102", "2101", "2102", "2201", "2202"],
            "Room Type": ["NS", "NS", "ANS", "ANS", "ANS", "ANS"],
        })
        staff = pd.DataFrame({
            "Staff ID": ["S1", "S2"],
            "Name": ["Ana", "Ben"],
            "Building": ["Main", "Both"],
        })
        run = run_housekeeping(build_snapshot(rooms, staff))
        assert all(r.floor <= 20 for r in run.rooms_by_staff["Ana"])
        assert sum(len(r) for r in run.rooms_by_staff.values()) == 6
        assert "Note: Restricted to Main building only" in run.explanations["Ana"]
