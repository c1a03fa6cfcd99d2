from enum import Enum

from config.defaults import BATH_DUTY_COSTS


class BathCleaningType(Enum):
    NONE = "None"
    NORMAL = "Bath cleaning"
    WITH_DRAINING = "Bath cleaning with draining"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def default_cost(self) -> float:
        """Fixed time cost of the duty, expressed in points."""
        return BATH_DUTY_COSTS[self.name]
