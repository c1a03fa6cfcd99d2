from dataclasses import dataclass, field
from typing import Dict

from config.defaults import (
    MAIN_BUILDING_MAX_FLOOR, ROOM_POINTS, DEFAULT_ROOM_POINTS, ECO_POINTS,
)

MAIN_BUILDING = "main"
ANNEX_BUILDING = "annex"


def is_main_floor(floor_number: int) -> bool:
    return floor_number <= MAIN_BUILDING_MAX_FLOOR


def building_of_floor(floor_number: int) -> str:
    return MAIN_BUILDING if is_main_floor(floor_number) else ANNEX_BUILDING


def building_floor(floor_number: int) -> int:
    """Floor number within its own building (annex floors are stored +20)."""
    if is_main_floor(floor_number):
        return floor_number
    return floor_number - MAIN_BUILDING_MAX_FLOOR


def type_points(room_type: str) -> float:
    return ROOM_POINTS.get(room_type, DEFAULT_ROOM_POINTS)


def count_points(room_counts: Dict[str, int], eco_rooms: int) -> float:
    points = sum(count * type_points(room_type) for room_type, count in room_counts.items())
    return points + eco_rooms * ECO_POINTS


@dataclass(frozen=True)
class FloorInfo:
    floor_number: int
    room_counts: Dict[str, int] = field(default_factory=dict)  # Non-eco rooms by type
    eco_rooms: int = 0
    is_main_building: bool = True

    def __post_init__(self):
        if self.eco_rooms < 0 or any(c < 0 for c in self.room_counts.values()):
            raise ValueError(f"Floor {self.floor_number}: room counts cannot be negative")

    @property
    def total_normal_rooms(self) -> int:
        return sum(self.room_counts.values())

    @property
    def total_rooms(self) -> int:
        return self.total_normal_rooms + self.eco_rooms

    @property
    def total_points(self) -> float:
        return count_points(self.room_counts, self.eco_rooms)

    @property
    def building(self) -> str:
        return MAIN_BUILDING if self.is_main_building else ANNEX_BUILDING

    @property
    def building_floor(self) -> int:
        return building_floor(self.floor_number)

    @property
    def label(self) -> str:
        prefix = "Main" if self.is_main_building else "Annex"
        return f"{prefix} {self.building_floor}F"

    @classmethod
    def from_counts(cls, floor_number: int, room_counts: Dict[str, int], eco_rooms: int = 0) -> "FloorInfo":
        """Build a floor summary whose building follows the floor-number encoding."""
        return cls(floor_number, dict(room_counts), eco_rooms, is_main_floor(floor_number))
