from dataclasses import dataclass
from enum import Enum

from models.floor import is_main_floor


@dataclass(frozen=True)
class Staff:
    id: str
    name: str


class BuildingAssignment(Enum):
    """Which building(s) a staff member may clean in."""
    MAIN_ONLY = "Main building only"
    ANNEX_ONLY = "Annex only"
    BOTH = "Both"

    @property
    def display_name(self) -> str:
        return self.value

    def allows_floor(self, floor_number: int) -> bool:
        if self == BuildingAssignment.MAIN_ONLY:
            return is_main_floor(floor_number)
        if self == BuildingAssignment.ANNEX_ONLY:
            return not is_main_floor(floor_number)
        return True

    @classmethod
    def parse(cls, raw: str) -> "BuildingAssignment":
        """Accept enum names, display names or the short forms main/annex/both."""
        key = str(raw).strip().lower().replace(" ", "_")
        aliases = {
            "main": cls.MAIN_ONLY, "main_only": cls.MAIN_ONLY, "main_building_only": cls.MAIN_ONLY,
            "annex": cls.ANNEX_ONLY, "annex_only": cls.ANNEX_ONLY,
            "both": cls.BOTH, "": cls.BOTH,
        }
        if key not in aliases:
            raise ValueError(f"Unknown building assignment: {raw!r}")
        return aliases[key]
