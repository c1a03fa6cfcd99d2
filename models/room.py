import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from config.defaults import ROOM_TYPE_ALIASES, ROOM_STATUS_LABELS
from models.floor import MAIN_BUILDING, ANNEX_BUILDING

_NON_DIGITS = re.compile(r"[^0-9]")


def room_digits(room_number: str) -> str:
    return _NON_DIGITS.sub("", room_number)


def parse_room_number(room_number: str) -> Tuple[int, Optional[str]]:
    """Derive (floor_number, building) from a room number.

    3 digits -> main building, floor = first digit.
    4 digits starting with "10" -> main building, floor 10.
    Any other 4 digits -> annex, floor number = first two digits.
    Anything else is unknown: (0, None).
    """
    digits = room_digits(room_number)
    if len(digits) == 3:
        return int(digits[0]), MAIN_BUILDING
    if len(digits) == 4 and digits.startswith("10"):
        return 10, MAIN_BUILDING
    if len(digits) == 4:
        return int(digits[:2]), ANNEX_BUILDING
    return 0, None


def room_numeric_value(room_number: str) -> Optional[int]:
    digits = room_digits(room_number)
    return int(digits) if digits else None


def canonical_room_type(raw_type: str) -> str:
    """Map an inventory room code (NS, ANT, ...) onto S / D / T / FD."""
    key = raw_type.strip().upper()
    return ROOM_TYPE_ALIASES.get(key, key)


@dataclass(frozen=True)
class Room:
    room_number: str
    room_type: str
    is_eco: bool = False
    is_broken: bool = False
    status: str = ""
    floor: int = field(init=False)
    building: Optional[str] = field(init=False)

    def __post_init__(self):
        floor, building = parse_room_number(self.room_number)
        object.__setattr__(self, "floor", floor)
        object.__setattr__(self, "building", building)

    @property
    def canonical_type(self) -> str:
        return canonical_room_type(self.room_type)

    @property
    def is_main_building(self) -> bool:
        return self.building == MAIN_BUILDING

    @property
    def status_label(self) -> str:
        if not self.status:
            return "Unknown"
        return ROOM_STATUS_LABELS.get(self.status, self.status)


def room_sort_key(room: Room) -> tuple:
    """Order rooms by floor, then numeric room number."""
    numeric = room_numeric_value(room.room_number)
    return (room.floor, numeric if numeric is not None else -1, room.room_number)


@dataclass(frozen=True)
class CleaningData:
    main_rooms: List[Room] = field(default_factory=list)
    annex_rooms: List[Room] = field(default_factory=list)
    eco_rooms: List[Room] = field(default_factory=list)
    broken_rooms: List[Room] = field(default_factory=list)

    @property
    def rooms_to_clean(self) -> List[Room]:
        return list(self.main_rooms) + list(self.annex_rooms)

    @property
    def total_main_rooms(self) -> int:
        return len(self.main_rooms)

    @property
    def total_annex_rooms(self) -> int:
        return len(self.annex_rooms)

    @property
    def total_broken_rooms(self) -> int:
        return len(self.broken_rooms)

    @classmethod
    def from_rooms(cls, rooms: List[Room], broken_rooms: Optional[List[Room]] = None) -> "CleaningData":
        """Partition a flat cleaning list by building."""
        return cls(
            main_rooms=[r for r in rooms if r.building != ANNEX_BUILDING],
            annex_rooms=[r for r in rooms if r.building == ANNEX_BUILDING],
            eco_rooms=[r for r in rooms if r.is_eco],
            broken_rooms=list(broken_rooms or []),
        )
