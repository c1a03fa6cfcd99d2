from dataclasses import dataclass, field
from datetime import date
from typing import Dict, FrozenSet, List, Optional, Tuple

from models.duty import BathCleaningType
from models.floor import count_points, is_main_floor
from models.load_config import LoadConfig
from models.room import Room
from models.staff import Staff


@dataclass(frozen=True)
class RoomAllocation:
    """Rooms of one floor held by one staff member."""
    room_counts: Dict[str, int] = field(default_factory=dict)  # Non-eco rooms by type
    eco_rooms: int = 0

    def __post_init__(self):
        # Zero entries are dropped so equal workloads compare equal
        object.__setattr__(
            self, "room_counts",
            {t: c for t, c in sorted(self.room_counts.items()) if c != 0},
        )

    @property
    def total_rooms(self) -> int:
        return sum(self.room_counts.values()) + self.eco_rooms

    @property
    def total_points(self) -> float:
        return count_points(self.room_counts, self.eco_rooms)

    @property
    def is_empty(self) -> bool:
        return self.total_rooms == 0

    def merged(self, other: "RoomAllocation") -> "RoomAllocation":
        counts = dict(self.room_counts)
        for room_type, count in other.room_counts.items():
            counts[room_type] = counts.get(room_type, 0) + count
        return RoomAllocation(counts, self.eco_rooms + other.eco_rooms)


@dataclass(frozen=True)
class StaffAssignment:
    staff: Staff
    rooms_by_floor: Dict[int, RoomAllocation] = field(default_factory=dict)
    bath_type: BathCleaningType = BathCleaningType.NONE
    bath_duty_cost: float = 0.0
    detailed_rooms: Tuple[Room, ...] = ()
    floors: FrozenSet[int] = field(init=False)
    total_rooms: int = field(init=False)
    total_points: float = field(init=False)
    adjusted_score: float = field(init=False)
    has_main_building: bool = field(init=False)
    has_annex_building: bool = field(init=False)

    def __post_init__(self):
        rooms_by_floor = {
            floor: alloc for floor, alloc in sorted(self.rooms_by_floor.items())
            if not alloc.is_empty
        }
        total_points = sum(alloc.total_points for alloc in rooms_by_floor.values())
        adjusted = total_points
        if self.bath_type != BathCleaningType.NONE:
            adjusted = max(0.0, total_points - self.bath_duty_cost)

        object.__setattr__(self, "rooms_by_floor", rooms_by_floor)
        object.__setattr__(self, "detailed_rooms", tuple(self.detailed_rooms))
        object.__setattr__(self, "floors", frozenset(rooms_by_floor))
        object.__setattr__(self, "total_rooms", sum(a.total_rooms for a in rooms_by_floor.values()))
        object.__setattr__(self, "total_points", total_points)
        object.__setattr__(self, "adjusted_score", adjusted)
        object.__setattr__(self, "has_main_building", any(is_main_floor(f) for f in rooms_by_floor))
        object.__setattr__(self, "has_annex_building", any(not is_main_floor(f) for f in rooms_by_floor))

    @property
    def staff_name(self) -> str:
        return self.staff.name

    @property
    def has_bath_duty(self) -> bool:
        return self.bath_type != BathCleaningType.NONE

    @property
    def sorted_floors(self) -> List[int]:
        return sorted(self.floors)

    @property
    def mixes_buildings(self) -> bool:
        return self.has_main_building and self.has_annex_building


@dataclass(frozen=True)
class OptimizationResult:
    target_date: Optional[date]
    config: LoadConfig
    assignments: List[StaffAssignment]
    engine: str = "greedy"  # "greedy" or "exact"

    @property
    def total_rooms(self) -> int:
        return sum(a.total_rooms for a in self.assignments)

    @property
    def total_points(self) -> float:
        return sum(a.total_points for a in self.assignments)

    def assignment_for(self, staff_name: str) -> Optional[StaffAssignment]:
        for a in self.assignments:
            if a.staff.name == staff_name:
                return a
        return None
