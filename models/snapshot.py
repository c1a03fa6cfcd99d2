from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from models.duty import BathCleaningType
from models.floor import FloorInfo
from models.room import CleaningData
from models.staff import BuildingAssignment, Staff


@dataclass(frozen=True)
class InventorySnapshot:
    """Immutable per-run input handed over by the ingestion layer."""
    target_date: Optional[date]
    staff: List[Staff]
    floors: List[FloorInfo]
    inventory: CleaningData
    raw_limits: Dict[str, int] = field(default_factory=dict)
    bath_type: BathCleaningType = BathCleaningType.NONE
    building_assignments: Dict[str, BuildingAssignment] = field(default_factory=dict)

    @property
    def total_rooms(self) -> int:
        return sum(f.total_rooms for f in self.floors)

    @property
    def main_room_count(self) -> int:
        return sum(f.total_rooms for f in self.floors if f.is_main_building)

    @property
    def annex_room_count(self) -> int:
        return sum(f.total_rooms for f in self.floors if not f.is_main_building)

    @property
    def total_points(self) -> float:
        return sum(f.total_points for f in self.floors)
