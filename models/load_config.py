from dataclasses import dataclass, field
from typing import Dict, List, Optional

from config.defaults import SPLIT_OVERSHOOT_RATIO, BATH_DUTY_FLOOR_REDUCTION
from models.duty import BathCleaningType
from models.staff import BuildingAssignment, Staff


@dataclass(frozen=True)
class LoadConfig:
    """Per-run workload plan: point targets, bath duty and room limits."""
    staff: List[Staff]
    target_points_by_staff: Dict[str, float]   # staff id -> target points
    bath_duty_assignee: Optional[str] = None   # staff id
    bath_type: BathCleaningType = BathCleaningType.NONE
    bath_duty_cost: float = 0.0
    raw_limits: Dict[str, int] = field(default_factory=dict)  # +L max rooms, -L min rooms
    ignored_limits: List[str] = field(default_factory=list)   # unknown staff ids
    split_overshoot_ratio: float = SPLIT_OVERSHOOT_RATIO
    total_points: float = 0.0
    total_rooms: int = 0
    main_room_count: int = 0
    annex_room_count: int = 0
    building_assignments: Dict[str, BuildingAssignment] = field(default_factory=dict)  # staff id -> restriction
    max_floors_per_staff: Optional[int] = None  # normal-cleaning floors
    warnings: List[str] = field(default_factory=list)

    def target_for(self, staff_id: str) -> float:
        return self.target_points_by_staff.get(staff_id, 0.0)

    def max_rooms(self, staff_id: str) -> Optional[int]:
        limit = self.raw_limits.get(staff_id, 0)
        return limit if limit > 0 else None

    def min_rooms(self, staff_id: str) -> Optional[int]:
        limit = self.raw_limits.get(staff_id, 0)
        return -limit if limit < 0 else None

    def building_for(self, staff_id: str) -> BuildingAssignment:
        return self.building_assignments.get(staff_id, BuildingAssignment.BOTH)

    def max_floors(self, staff_id: str) -> Optional[int]:
        """Normal-cleaning floor cap; the bath duty carrier gets fewer floors."""
        if self.max_floors_per_staff is None:
            return None
        if self.bath_duty_assignee == staff_id:
            return max(1, self.max_floors_per_staff - BATH_DUTY_FLOOR_REDUCTION)
        return self.max_floors_per_staff

    def bath_type_for(self, staff_id: str) -> BathCleaningType:
        if self.bath_duty_assignee == staff_id:
            return self.bath_type
        return BathCleaningType.NONE

    def bath_cost_for(self, staff_id: str) -> float:
        return self.bath_duty_cost if self.bath_duty_assignee == staff_id else 0.0
