"""DataFrame parsing: room inventory, staff and limits into typed models."""

import pandas as pd
from datetime import date
from typing import Dict, Iterable, List, Optional

from models.allocation import OptimizationResult
from models.duty import BathCleaningType
from models.floor import FloorInfo
from models.room import CleaningData, Room, room_sort_key
from models.snapshot import InventorySnapshot
from engine.errors import ConfigError
from models.staff import BuildingAssignment, Staff
from utils.logger import get_logger


logger = get_logger(__name__)

_TRUE_VALUES = {"true", "yes", "y", "1", "x"}


def _cell_text(value) -> str:
    """Cell as stripped text; integral floats lose their '.0'."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _cell_flag(value) -> bool:
    if isinstance(value, bool):
        return value
    return _cell_text(value).lower() in _TRUE_VALUES


def _optional(row, df: pd.DataFrame, column: str):
    return row[column] if column in df.columns else None


def parse_rooms(df: pd.DataFrame, include_broken: Optional[Iterable[str]] = None) -> CleaningData:
    """Convert a room inventory DataFrame into CleaningData.

    Broken rooms stay out of the cleaning pool unless their number is listed
    in ``include_broken``.
    """
    keep_broken = {str(r).strip() for r in (include_broken or [])}
    rooms = []
    broken = []
    for _, row in df.iterrows():
        room = Room(
            room_number=_cell_text(row["Room Number"]),
            room_type=_cell_text(row["Room Type"]),
            is_eco=_cell_flag(_optional(row, df, "Eco")),
            is_broken=_cell_flag(_optional(row, df, "Broken")),
            status=_cell_text(_optional(row, df, "Status")),
        )
        if not room.room_number:
            continue
        if room.is_broken:
            broken.append(room)
            if room.room_number not in keep_broken:
                continue
        rooms.append(room)

    inventory = CleaningData.from_rooms(rooms, broken)
    logger.info(
        "Rooms parsed | main=%s | annex=%s | eco=%s | broken=%s",
        inventory.total_main_rooms, inventory.total_annex_rooms,
        len(inventory.eco_rooms), inventory.total_broken_rooms,
    )
    return inventory


def parse_staff(df: pd.DataFrame) -> List[Staff]:
    """Convert a staff DataFrame into Staff objects, keeping row order."""
    staff = []
    for _, row in df.iterrows():
        staff.append(Staff(
            id=_cell_text(row["Staff ID"]),
            name=_cell_text(row["Name"]),
        ))
    return staff


def parse_limits(df: pd.DataFrame) -> Dict[str, int]:
    """Signed room limits by staff id; blank cells are skipped."""
    limits = {}
    for _, row in df.iterrows():
        if pd.isna(row["Limit"]):
            continue
        limits[_cell_text(row["Staff ID"])] = int(row["Limit"])
    return limits


def parse_building_assignments(df: pd.DataFrame) -> Dict[str, BuildingAssignment]:
    """Building restrictions from the optional "Building" column of the staff frame."""
    if "Building" not in df.columns:
        return {}
    restrictions = {}
    for _, row in df.iterrows():
        staff_id = _cell_text(row["Staff ID"])
        try:
            building = BuildingAssignment.parse(_cell_text(row["Building"]))
        except ValueError as e:
            raise ConfigError(f"Staff '{staff_id}': {e}") from e
        if building != BuildingAssignment.BOTH:
            restrictions[staff_id] = building
    return restrictions


def build_floor_infos(inventory: CleaningData) -> List[FloorInfo]:
    """Summarise the cleaning pool per floor. Unparseable rooms (floor 0) are skipped."""
    counts: Dict[int, Dict[str, int]] = {}
    eco: Dict[int, int] = {}
    skipped = []
    for room in inventory.rooms_to_clean:
        if room.floor == 0:
            skipped.append(room.room_number)
            continue
        counts.setdefault(room.floor, {})
        if room.is_eco:
            eco[room.floor] = eco.get(room.floor, 0) + 1
        else:
            by_type = counts[room.floor]
            by_type[room.canonical_type] = by_type.get(room.canonical_type, 0) + 1

    if skipped:
        logger.warning("Rooms with unknown floor skipped | rooms=%s", skipped)

    return [
        FloorInfo.from_counts(floor, by_type, eco.get(floor, 0))
        for floor, by_type in sorted(counts.items())
    ]


def build_snapshot(
    rooms_df: pd.DataFrame,
    staff_df: pd.DataFrame,
    limits_df: Optional[pd.DataFrame] = None,
    bath_type: BathCleaningType = BathCleaningType.NONE,
    target_date: Optional[date] = None,
    include_broken: Optional[Iterable[str]] = None,
) -> InventorySnapshot:
    """Assemble a full per-run snapshot from the three input frames."""
    inventory = parse_rooms(rooms_df, include_broken)
    return InventorySnapshot(
        target_date=target_date,
        staff=parse_staff(staff_df),
        floors=build_floor_infos(inventory),
        inventory=inventory,
        raw_limits=parse_limits(limits_df) if limits_df is not None else {},
        bath_type=bath_type,
        building_assignments=parse_building_assignments(staff_df),
    )


def assignments_to_frame(result: OptimizationResult) -> pd.DataFrame:
    """One row per staff member with workload totals."""
    rows = []
    for a in result.assignments:
        rows.append({
            "Staff ID": a.staff.id,
            "Name": a.staff.name,
            "Floors": ", ".join(str(f) for f in a.sorted_floors),
            "Rooms": a.total_rooms,
            "Points": round(a.total_points, 2),
            "Target": round(result.config.target_for(a.staff.id), 2),
            "Adjusted Score": round(a.adjusted_score, 2),
            "Bath Duty": a.bath_type.display_name,
            "Main Building": a.has_main_building,
            "Annex": a.has_annex_building,
        })
    return pd.DataFrame(rows, columns=[
        "Staff ID", "Name", "Floors", "Rooms", "Points", "Target",
        "Adjusted Score", "Bath Duty", "Main Building", "Annex",
    ])


def rooms_to_frame(rooms_by_staff: Dict[str, List[Room]]) -> pd.DataFrame:
    """One row per assigned room."""
    rows = []
    for name, rooms in rooms_by_staff.items():
        for room in sorted(rooms, key=room_sort_key):
            rows.append({
                "Staff": name,
                "Room Number": room.room_number,
                "Floor": room.floor,
                "Building": room.building,
                "Room Type": room.canonical_type,
                "Eco": room.is_eco,
                "Status": room.status_label,
            })
    return pd.DataFrame(rows, columns=["Staff", "Room Number", "Floor", "Building", "Room Type", "Eco", "Status"])
