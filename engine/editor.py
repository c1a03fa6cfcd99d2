"""Pure edit operations on staff assignments (move, swap, rebuild)."""

from dataclasses import replace
from typing import Dict, List, Tuple

from engine.errors import EditError
from models.allocation import RoomAllocation, StaffAssignment
from models.room import Room, room_sort_key
from utils.logger import get_logger


logger = get_logger(__name__)


def recompute_allocations(rooms: List[Room]) -> Dict[int, RoomAllocation]:
    """Aggregate detailed rooms back into per-floor type counts."""
    counts: Dict[int, Dict[str, int]] = {}
    eco: Dict[int, int] = {}
    for room in rooms:
        counts.setdefault(room.floor, {})
        if room.is_eco:
            eco[room.floor] = eco.get(room.floor, 0) + 1
        else:
            by_type = counts[room.floor]
            by_type[room.canonical_type] = by_type.get(room.canonical_type, 0) + 1
    return {
        floor: RoomAllocation(by_type, eco.get(floor, 0))
        for floor, by_type in sorted(counts.items())
    }


def rebuild_assignment(assignment: StaffAssignment, rooms: List[Room]) -> StaffAssignment:
    """New record whose aggregates are derived from ``rooms``."""
    return replace(
        assignment,
        rooms_by_floor=recompute_allocations(rooms),
        detailed_rooms=tuple(sorted(rooms, key=room_sort_key)),
    )


def _locate_room(assignments: List[StaffAssignment], room_number: str) -> Tuple[int, Room]:
    for i, assignment in enumerate(assignments):
        for room in assignment.detailed_rooms:
            if room.room_number == room_number:
                return i, room
    raise EditError(f"Room {room_number} is not assigned to anyone")


def _locate_staff(assignments: List[StaffAssignment], staff_name: str) -> int:
    for i, assignment in enumerate(assignments):
        if assignment.staff.name == staff_name:
            return i
    raise EditError(f"Unknown staff member: {staff_name}")


def move_room(
    assignments: List[StaffAssignment],
    room_number: str,
    to_staff_name: str,
) -> List[StaffAssignment]:
    """Move one room to another staff member; both records are rebuilt."""
    source, room = _locate_room(assignments, room_number)
    target = _locate_staff(assignments, to_staff_name)
    updated = list(assignments)
    if source == target:
        return updated

    remaining = [r for r in assignments[source].detailed_rooms if r.room_number != room_number]
    updated[source] = rebuild_assignment(assignments[source], remaining)
    updated[target] = rebuild_assignment(assignments[target], list(assignments[target].detailed_rooms) + [room])

    logger.info(
        "Room moved | room=%s | from=%s | to=%s",
        room_number, assignments[source].staff.name, to_staff_name,
    )
    return updated


def swap_rooms(
    assignments: List[StaffAssignment],
    room_a: str,
    room_b: str,
) -> List[StaffAssignment]:
    """Exchange two rooms between their holders."""
    owner_a, first = _locate_room(assignments, room_a)
    owner_b, second = _locate_room(assignments, room_b)
    updated = list(assignments)
    if owner_a == owner_b:
        return updated

    rooms_a = [second if r.room_number == room_a else r for r in assignments[owner_a].detailed_rooms]
    rooms_b = [first if r.room_number == room_b else r for r in assignments[owner_b].detailed_rooms]
    updated[owner_a] = rebuild_assignment(assignments[owner_a], rooms_a)
    updated[owner_b] = rebuild_assignment(assignments[owner_b], rooms_b)

    logger.info(
        "Rooms swapped | %s (%s) <-> %s (%s)",
        room_a, assignments[owner_a].staff.name, room_b, assignments[owner_b].staff.name,
    )
    return updated


def find_inconsistencies(assignments: List[StaffAssignment]) -> List[str]:
    """Names of staff whose stored aggregates disagree with their detailed rooms."""
    return [
        a.staff.name for a in assignments
        if recompute_allocations(list(a.detailed_rooms)) != a.rooms_by_floor
    ]
