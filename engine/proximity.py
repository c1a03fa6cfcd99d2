"""Room proximity grouping, walking distance and route ordering."""

from typing import Dict, List

from config.defaults import (
    PROXIMITY_MAX_GAP, CROSS_FLOOR_BASE_DISTANCE, CROSS_FLOOR_DISTANCE_PER_FLOOR,
    SAME_FLOOR_DISTANCE_PER_ROOM, UNPARSEABLE_ROOM_DISTANCE,
)
from models.room import Room, room_numeric_value, room_sort_key


def is_adjacent_room(first: str, second: str, max_gap: int = PROXIMITY_MAX_GAP) -> bool:
    n1 = room_numeric_value(first)
    n2 = room_numeric_value(second)
    if n1 is None or n2 is None:
        return False
    return abs(n2 - n1) <= max_gap


def group_rooms_by_proximity(
    rooms: List[Room],
    max_gap: int = PROXIMITY_MAX_GAP,
) -> List[List[Room]]:
    """Group rooms into runs of nearby numbers, floor by floor."""
    by_floor: Dict[int, List[Room]] = {}
    for room in rooms:
        by_floor.setdefault(room.floor, []).append(room)

    groups: List[List[Room]] = []
    for floor in sorted(by_floor):
        current: List[Room] = []
        for room in sorted(by_floor[floor], key=room_sort_key):
            if current and not is_adjacent_room(current[-1].room_number, room.room_number, max_gap):
                groups.append(current)
                current = []
            current.append(room)
        if current:
            groups.append(current)
    return groups


def room_distance(first: Room, second: Room) -> float:
    """Walking cost between two rooms; changing floors is expensive."""
    if first.floor != second.floor:
        return CROSS_FLOOR_BASE_DISTANCE + abs(first.floor - second.floor) * CROSS_FLOOR_DISTANCE_PER_FLOOR

    n1 = room_numeric_value(first.room_number)
    n2 = room_numeric_value(second.room_number)
    if n1 is None or n2 is None:
        return UNPARSEABLE_ROOM_DISTANCE
    return abs(n2 - n1) * SAME_FLOOR_DISTANCE_PER_ROOM


def movement_distance(rooms: List[Room]) -> float:
    """Total walking cost when visiting rooms in the given order."""
    return sum(room_distance(a, b) for a, b in zip(rooms, rooms[1:]))


def optimize_room_order(rooms: List[Room]) -> List[Room]:
    """Nearest-neighbour route starting from the first room.

    Ties go to the room that comes first in the input.
    """
    if len(rooms) <= 2:
        return list(rooms)

    route = [rooms[0]]
    remaining = list(rooms[1:])
    while remaining:
        current = route[-1]
        nearest = min(remaining, key=lambda r: room_distance(current, r))
        remaining.remove(nearest)
        route.append(nearest)
    return route
