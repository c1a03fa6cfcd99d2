"""Generate a synthetic hotel for demos and tests."""

import pandas as pd
import random

MAIN_FLOORS = range(2, 11)      # 2F..10F, room numbers 201..1012
ANNEX_FLOORS = range(1, 5)      # annex 1F..4F, room numbers 2101..2410
MAIN_ROOMS_PER_FLOOR = 12
ANNEX_ROOMS_PER_FLOOR = 10

MAIN_TYPES = ["NS", "NS", "ND", "ND", "NT", "NFD"]
ANNEX_TYPES = ["ANS", "ABF", "AND", "ANT", "ADT"]


def generate_rooms_df(occupancy: float = 0.7) -> pd.DataFrame:
    """Room inventory for one day: rooms needing cleaning at roughly ``occupancy``."""
    random.seed(42)
    rows = []
    floors = [(f"{f}", MAIN_ROOMS_PER_FLOOR, MAIN_TYPES) for f in MAIN_FLOORS]
    floors += [(f"{f + 20}", ANNEX_ROOMS_PER_FLOOR, ANNEX_TYPES) for f in ANNEX_FLOORS]
    for prefix, per_floor, types in floors:
        for n in range(1, per_floor + 1):
            if random.random() > occupancy:
                continue
            status = random.choice(["2", "2", "3", "3", "3", "4"])
            rows.append({
                "Room Number": f"{prefix}{n:02d}",
                "Room Type": random.choice(types),
                "Eco": status == "3" and random.random() < 0.3,
                "Broken": random.random() < 0.03,
                "Status": status,
            })
    return pd.DataFrame(rows)


def generate_staff_df() -> pd.DataFrame:
    names = ["Aiko", "Bruno", "Chen", "Dana", "Emeka", "Fatima", "Goran"]
    return pd.DataFrame([
        {"Staff ID": f"S{i:03d}", "Name": name}
        for i, name in enumerate(names, start=1)
    ])


def generate_limits_df() -> pd.DataFrame:
    """A part-timer capped at 8 rooms and a trainee guaranteed at least 12."""
    return pd.DataFrame([
        {"Staff ID": "S003", "Limit": 8},
        {"Staff ID": "S006", "Limit": -12},
    ])
