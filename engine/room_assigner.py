"""Expand per-floor room counts into concrete room numbers."""

from dataclasses import dataclass, field, replace
from typing import Dict, List

from config.defaults import ROOM_TYPE_ORDER, ECO_KEY
from engine.errors import InventoryMismatchError
from models.allocation import RoomAllocation, StaffAssignment
from models.room import CleaningData, Room, room_sort_key
from utils.logger import get_logger


logger = get_logger(__name__)

RoomPools = Dict[int, Dict[str, List[Room]]]  # floor -> type key -> rooms, lowest first


@dataclass
class DetailedRoomResult:
    rooms_by_staff: Dict[str, List[Room]]
    shortfalls: List[InventoryMismatchError] = field(default_factory=list)
    unassigned: List[Room] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.shortfalls and not self.unassigned


def pool_key(room: Room) -> str:
    """Eco rooms form their own pool regardless of type."""
    return ECO_KEY if room.is_eco else room.canonical_type


def build_room_pools(inventory: CleaningData) -> RoomPools:
    pools: RoomPools = {}
    for room in sorted(inventory.rooms_to_clean, key=room_sort_key):
        pools.setdefault(room.floor, {}).setdefault(pool_key(room), []).append(room)
    return pools


def _requests(allocation: RoomAllocation):
    """(type key, count) pairs in canonical order, eco last."""
    ordered = [t for t in ROOM_TYPE_ORDER if t in allocation.room_counts]
    ordered += sorted(t for t in allocation.room_counts if t not in ROOM_TYPE_ORDER)
    pairs = [(t, allocation.room_counts[t]) for t in ordered]
    if allocation.eco_rooms > 0:
        pairs.append((ECO_KEY, allocation.eco_rooms))
    return pairs


def draw_rooms(
    pools: RoomPools,
    staff_name: str,
    floor: int,
    type_key: str,
    count: int,
    shortfalls: List[InventoryMismatchError],
) -> List[Room]:
    """Take the ``count`` lowest-numbered rooms of a type from a floor pool."""
    pool = pools.get(floor, {}).get(type_key, [])
    taken = pool[:count]
    del pool[:count]
    if len(taken) < count:
        mismatch = InventoryMismatchError(staff_name, floor, type_key, count, len(taken))
        shortfalls.append(mismatch)
        logger.warning("Inventory shortfall | %s", mismatch)
    return taken


def assign_detailed_rooms(
    inventory: CleaningData,
    assignments: List[StaffAssignment],
) -> DetailedRoomResult:
    """Hand each staff member concrete rooms matching their aggregate counts.

    Staff are served in assignment order, floors ascending, types in canonical
    order; each request draws the lowest unassigned room numbers. Shortfalls
    are recorded and the run continues.
    """
    pools = build_room_pools(inventory)
    shortfalls: List[InventoryMismatchError] = []
    rooms_by_staff: Dict[str, List[Room]] = {}

    logger.info("Room number assignment started | available_rooms=%s", len(inventory.rooms_to_clean))

    for assignment in assignments:
        name = assignment.staff.name
        assigned: List[Room] = []
        for floor in assignment.sorted_floors:
            for type_key, count in _requests(assignment.rooms_by_floor[floor]):
                assigned.extend(draw_rooms(pools, name, floor, type_key, count, shortfalls))
        rooms_by_staff[name] = sorted(assigned, key=room_sort_key)
        logger.debug("Rooms assigned | staff=%s | rooms=%s", name, len(assigned))

    unassigned = sorted(
        (room for by_type in pools.values() for rooms in by_type.values() for room in rooms),
        key=room_sort_key,
    )
    if unassigned:
        logger.warning(
            "Rooms left unassigned | count=%s | rooms=%s",
            len(unassigned), [r.room_number for r in unassigned],
        )

    logger.info(
        "Room number assignment completed | staff=%s | assigned=%s | shortfalls=%s | unassigned=%s",
        len(rooms_by_staff), sum(len(r) for r in rooms_by_staff.values()), len(shortfalls), len(unassigned),
    )
    return DetailedRoomResult(rooms_by_staff=rooms_by_staff, shortfalls=shortfalls, unassigned=unassigned)


def attach_detailed_rooms(
    assignments: List[StaffAssignment],
    rooms_by_staff: Dict[str, List[Room]],
) -> List[StaffAssignment]:
    """Return new assignment records carrying their detailed room lists."""
    return [
        replace(a, detailed_rooms=tuple(rooms_by_staff.get(a.staff.name, ())))
        for a in assignments
    ]
