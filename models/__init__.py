from models.staff import Staff, BuildingAssignment
from models.floor import FloorInfo, MAIN_BUILDING, ANNEX_BUILDING
from models.room import Room, CleaningData
from models.duty import BathCleaningType
from models.load_config import LoadConfig
from models.allocation import RoomAllocation, StaffAssignment, OptimizationResult
from models.snapshot import InventorySnapshot
