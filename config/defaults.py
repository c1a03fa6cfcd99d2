"""Default configuration constants for the housekeeping allocation engine."""

# Floor numbering: floors above this number belong to the annex building
MAIN_BUILDING_MAX_FLOOR = 20

# Point weights per canonical room type
ROOM_POINTS = {
    "S": 1.0,
    "D": 1.0,
    "T": 1.67,
    "FD": 2.0,
}
DEFAULT_ROOM_POINTS = 1.0  # Unknown room types
ECO_POINTS = 0.2           # Eco rooms override their base type weight

# Canonical room type order (eco block always last)
ROOM_TYPE_ORDER = ["S", "D", "T", "FD"]
ECO_KEY = "ECO"

# Raw inventory room codes -> canonical room type
ROOM_TYPE_ALIASES = {
    "S": "S", "NS": "S", "ANS": "S", "ABF": "S", "AKS": "S",
    "D": "D", "ND": "D", "AND": "D",
    "T": "T", "NT": "T", "ANT": "T", "ADT": "T",
    "FD": "FD", "NFD": "FD",
}

# Normal-cleaning floors one staff member may hold (None = no cap); the bath
# duty carrier gets one floor fewer. Eco-only floors do not count.
MAX_FLOORS_PER_STAFF = None
BATH_DUTY_FLOOR_REDUCTION = 1

# Bath cleaning duty time cost, in points
BATH_DUTY_COSTS = {
    "NONE": 0.0,
    "NORMAL": 4.0,
    "WITH_DRAINING": 5.0,
}

# A whole floor may overshoot the receiver's target by at most this share
# of the floor's point value before a type-block split is considered
SPLIT_OVERSHOOT_RATIO = 0.5

# Decimal places kept on per-staff point targets
TARGET_PRECISION = 2

# Tolerance for point comparisons
POINT_EPSILON = 1e-9

# Exact (PuLP) optimizer weights
SOLVER_TIME_LIMIT_SECONDS = 30
SPLIT_PENALTY = 0.01          # Per extra staff member on one floor
BUILDING_MIX_PENALTY = 0.005  # Per staff member holding both buildings
LIMIT_SLACK_PENALTY = 1000.0  # Per room outside a soft room limit
FLOOR_SLACK_PENALTY = 500.0   # Per floor above the floor cap

# Proximity grouping and route ordering
PROXIMITY_MAX_GAP = 5
CROSS_FLOOR_BASE_DISTANCE = 100.0
CROSS_FLOOR_DISTANCE_PER_FLOOR = 20.0
SAME_FLOOR_DISTANCE_PER_ROOM = 2.0
UNPARSEABLE_ROOM_DISTANCE = 10.0

# Room status codes from the front-desk system
ROOM_STATUS_LABELS = {
    "2": "Checkout",
    "3": "Stayover",
    "4": "Cleaning required",
}

# Logging
LOG_LEVEL_ENV_VAR = "HOUSEKEEPING_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
