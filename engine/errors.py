"""Error taxonomy for the allocation engine."""


class HousekeepingError(Exception):
    """Base class for allocation engine errors."""


class ConfigError(HousekeepingError):
    """Raised when workload constraints are impossible or contradictory."""


class UnassignableInventoryError(HousekeepingError):
    """Raised when there are rooms to clean but no staff to receive them."""


class InventoryMismatchError(HousekeepingError):
    """Shortfall between an aggregate room count and the real inventory.

    Recorded by the room number assigner rather than raised.
    """

    def __init__(self, staff_name: str, floor: int, room_type: str, required: int, available: int):
        self.staff_name = staff_name
        self.floor = floor
        self.room_type = room_type
        self.required = required
        self.available = available
        super().__init__(
            f"{staff_name}: floor {floor} needs {required} x {room_type}, "
            f"only {available} left in inventory"
        )

    @property
    def shortfall(self) -> int:
        return self.required - self.available


class EditError(HousekeepingError, ValueError):
    """Raised when a move or swap refers to an unknown room or staff member."""
