"""Generates human-readable explanations for staff workload assignments."""

from typing import Dict, List

from models.allocation import OptimizationResult, StaffAssignment
from models.floor import building_floor, is_main_floor
from models.load_config import LoadConfig
from models.staff import BuildingAssignment


def _floor_label(floor_number: int) -> str:
    prefix = "Main" if is_main_floor(floor_number) else "Annex"
    return f"{prefix} {building_floor(floor_number)}F"


def explain_assignment(assignment: StaffAssignment, config: LoadConfig) -> List[str]:
    """Produce step-by-step explanation for one staff member's workload."""
    steps = []
    sid = assignment.staff.id
    target = config.target_for(sid)
    share = config.total_points / len(config.staff) if config.staff else 0.0

    steps.append(
        f"Step 1 - Fair share: {config.total_points:.2f} points over "
        f"{len(config.staff)} staff => {share:.2f} points each"
    )

    limit = config.raw_limits.get(sid)
    if limit is None:
        steps.append(f"Step 2 - Room limit: none => target {target:.2f} points")
    elif limit > 0:
        steps.append(f"Step 2 - Room limit: at most {limit} rooms => target {target:.2f} points")
    else:
        steps.append(f"Step 2 - Room limit: at least {-limit} rooms => target {target:.2f} points")

    floors = []
    for floor_number, alloc in assignment.rooms_by_floor.items():
        types = ", ".join(f"{c}x{t}" for t, c in alloc.room_counts.items())
        if alloc.eco_rooms:
            types = f"{types}, {alloc.eco_rooms}xECO" if types else f"{alloc.eco_rooms}xECO"
        floors.append(f"{_floor_label(floor_number)} ({types})")
    steps.append(
        f"Step 3 - Floors: {'; '.join(floors) if floors else 'none'} "
        f"=> {assignment.total_rooms} rooms, {assignment.total_points:.2f} points"
    )

    deviation = assignment.total_points - target
    steps.append(f"Step 4 - Balance: {deviation:+.2f} points against target")

    if assignment.has_bath_duty:
        steps.append(
            f"Note: Carries {assignment.bath_type.display_name} "
            f"(cost {assignment.bath_duty_cost:.2f}) => adjusted score {assignment.adjusted_score:.2f}"
        )

    if assignment.mixes_buildings:
        steps.append("Note: Works in both the main building and the annex")

    building = config.building_for(sid)
    if building != BuildingAssignment.BOTH:
        steps.append(f"Note: Restricted to {building.display_name}")

    floor_cap = config.max_floors(sid)
    if floor_cap is not None:
        steps.append(f"Note: At most {floor_cap} normal-cleaning floors")

    return steps


def explain_result(result: OptimizationResult) -> Dict[str, List[str]]:
    """Explanations for every staff member, keyed by name."""
    return {
        a.staff.name: explain_assignment(a, result.config)
        for a in result.assignments
    }
