"""End-to-end run: snapshot -> load config -> floor allocation -> room numbers."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from config.defaults import PROXIMITY_MAX_GAP
from engine.errors import ConfigError, InventoryMismatchError
from engine.exact_optimizer import optimize_exact
from engine.explainer import explain_result
from engine.load_config import build_load_config
from engine.optimizer import max_deviation, optimize
from engine.proximity import group_rooms_by_proximity, optimize_room_order
from engine.room_assigner import assign_detailed_rooms, attach_detailed_rooms
from models.allocation import OptimizationResult, StaffAssignment
from models.room import Room
from models.snapshot import InventorySnapshot
from utils.logger import get_logger


logger = get_logger(__name__)

ENGINES = {
    "greedy": optimize,
    "exact": optimize_exact,
}


@dataclass
class HousekeepingRun:
    result: OptimizationResult
    assignments: List[StaffAssignment]             # carrying detailed rooms
    rooms_by_staff: Dict[str, List[Room]]
    shortfalls: List[InventoryMismatchError] = field(default_factory=list)
    unassigned: List[Room] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    explanations: Dict[str, List[str]] = field(default_factory=dict)
    routes: Dict[str, List[Room]] = field(default_factory=dict)          # walking order
    room_groups: Dict[str, List[List[Room]]] = field(default_factory=dict)


def run_housekeeping(
    snapshot: InventorySnapshot,
    rule_config: Optional[dict] = None,
    engine: str = "greedy",
) -> HousekeepingRun:
    """Run the full allocation for one day's snapshot."""
    cfg = rule_config or {}
    max_gap = cfg.get("proximity_max_gap", PROXIMITY_MAX_GAP)

    if engine not in ENGINES:
        raise ConfigError(f"Unknown optimization engine: {engine}. Use one of {sorted(ENGINES)}")

    logger.info(
        "Housekeeping run started | date=%s | engine=%s | staff=%s | floors=%s | rooms=%s",
        snapshot.target_date, engine, len(snapshot.staff), len(snapshot.floors), snapshot.total_rooms,
    )

    # Step 1: Point targets, limits and bath duty
    config = build_load_config(
        staff=snapshot.staff,
        total_rooms=snapshot.total_rooms,
        main_room_count=snapshot.main_room_count,
        annex_room_count=snapshot.annex_room_count,
        bath_type=snapshot.bath_type,
        raw_limits=snapshot.raw_limits,
        total_points=snapshot.total_points,
        rule_config=rule_config,
        building_assignments=snapshot.building_assignments,
    )

    # Step 2: Floors and type blocks to staff
    result = ENGINES[engine](snapshot.floors, config, snapshot.target_date, rule_config)

    # Step 3: Concrete room numbers
    detailed = assign_detailed_rooms(snapshot.inventory, result.assignments)
    assignments = attach_detailed_rooms(result.assignments, detailed.rooms_by_staff)

    warnings = list(config.warnings)
    warnings += [str(s) for s in detailed.shortfalls]
    if detailed.unassigned:
        warnings.append(
            f"{len(detailed.unassigned)} rooms were not assigned: "
            + ", ".join(r.room_number for r in detailed.unassigned)
        )

    logger.info(
        "Housekeeping run completed | engine=%s | rooms=%s | points=%.2f | max_deviation=%.2f | warnings=%s",
        result.engine, result.total_rooms, result.total_points, max_deviation(result), len(warnings),
    )

    return HousekeepingRun(
        result=result,
        assignments=assignments,
        rooms_by_staff=detailed.rooms_by_staff,
        shortfalls=detailed.shortfalls,
        unassigned=detailed.unassigned,
        warnings=warnings,
        explanations=explain_result(result),
        routes={name: optimize_room_order(rooms) for name, rooms in detailed.rooms_by_staff.items()},
        room_groups={
            name: group_rooms_by_proximity(rooms, max_gap)
            for name, rooms in detailed.rooms_by_staff.items()
        },
    )


def compare_runs(run_a: HousekeepingRun, run_b: HousekeepingRun) -> List[dict]:
    """Compare two runs and return per-staff differences."""
    a_map = {a.staff.name: a for a in run_a.assignments}
    b_map = {b.staff.name: b for b in run_b.assignments}
    label_a = run_a.result.engine
    label_b = run_b.result.engine
    if label_a == label_b:
        label_a, label_b = "A", "B"

    diffs = []
    for name in sorted(set(a_map) | set(b_map)):
        a = a_map.get(name)
        b = b_map.get(name)
        a_points = a.total_points if a else 0.0
        b_points = b.total_points if b else 0.0
        diffs.append({
            "Staff": name,
            f"{label_a} Rooms": a.total_rooms if a else 0,
            f"{label_b} Rooms": b.total_rooms if b else 0,
            f"{label_a} Points": round(a_points, 2),
            f"{label_b} Points": round(b_points, 2),
            "Point Change": round(b_points - a_points, 2),
            f"{label_a} Floors": ", ".join(str(f) for f in a.sorted_floors) if a else "",
            f"{label_b} Floors": ", ".join(str(f) for f in b.sorted_floors) if b else "",
        })
    return diffs
