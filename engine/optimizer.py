"""Greedy load-balancing optimizer: floors and room-type blocks to staff."""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Set, Tuple

from config.defaults import (
    ROOM_TYPE_ORDER, ECO_KEY, ECO_POINTS, POINT_EPSILON,
)
from engine.errors import ConfigError, UnassignableInventoryError
from models.allocation import OptimizationResult, RoomAllocation, StaffAssignment
from models.floor import FloorInfo, is_main_floor, type_points
from models.load_config import LoadConfig
from models.staff import BuildingAssignment, Staff
from utils.logger import get_logger


logger = get_logger(__name__)

Block = Tuple[int, str, int]  # (floor_number, type key or ECO, room count)


def sort_floors(floors: List[FloorInfo]) -> List[FloorInfo]:
    """Main building ascending, then annex ascending."""
    main = sorted((f for f in floors if f.is_main_building), key=lambda f: f.floor_number)
    annex = sorted((f for f in floors if not f.is_main_building), key=lambda f: f.floor_number)
    return main + annex


def block_points(type_key: str, count: int) -> float:
    if type_key == ECO_KEY:
        return count * ECO_POINTS
    return count * type_points(type_key)


def floor_blocks(floor: FloorInfo) -> List[Block]:
    """Split a floor into room-type blocks: S, D, T, FD, other types, then eco."""
    ordered = [t for t in ROOM_TYPE_ORDER if floor.room_counts.get(t, 0) > 0]
    ordered += sorted(t for t, c in floor.room_counts.items() if c > 0 and t not in ROOM_TYPE_ORDER)
    blocks = [(floor.floor_number, t, floor.room_counts[t]) for t in ordered]
    if floor.eco_rooms > 0:
        blocks.append((floor.floor_number, ECO_KEY, floor.eco_rooms))
    return blocks


@dataclass
class _StaffLoad:
    staff: Staff
    index: int
    target: float
    max_rooms: Optional[int]
    min_rooms: Optional[int]
    held: Dict[int, Dict[str, int]] = field(default_factory=dict)  # floor -> type key -> count
    points: float = 0.0
    rooms: int = 0
    building: BuildingAssignment = BuildingAssignment.BOTH
    max_floors: Optional[int] = None

    @property
    def headroom(self) -> float:
        return self.target - self.points

    def holds_building(self, main: bool) -> bool:
        return any(is_main_floor(f) == main for f, counts in self.held.items() if counts)

    def would_mix(self, floor_number: int) -> bool:
        return self.holds_building(not is_main_floor(floor_number))

    def normal_floors(self) -> Set[int]:
        return {f for f, counts in self.held.items() if any(t != ECO_KEY for t in counts)}

    def allows(self, floor_number: int) -> bool:
        return self.building.allows_floor(floor_number)

    def can_take_floor(self, floor_number: int, normal: bool = True) -> bool:
        """Eco-only work never counts against the floor cap."""
        if self.max_floors is None or not normal:
            return True
        floors = self.normal_floors()
        return floor_number in floors or len(floors) < self.max_floors

    def accepts(self, block: Block) -> bool:
        return self.allows(block[0]) and self.can_take_floor(block[0], block[1] != ECO_KEY)

    def cap_excess(self, extra_rooms: int = 0) -> int:
        if self.max_rooms is None:
            return 0
        return max(0, self.rooms + extra_rooms - self.max_rooms)

    def add(self, block: Block):
        floor_number, type_key, count = block
        counts = self.held.setdefault(floor_number, {})
        counts[type_key] = counts.get(type_key, 0) + count
        self.points += block_points(type_key, count)
        self.rooms += count

    def remove(self, block: Block):
        floor_number, type_key, count = block
        counts = self.held[floor_number]
        counts[type_key] -= count
        if counts[type_key] == 0:
            del counts[type_key]
        if not counts:
            del self.held[floor_number]
        self.points -= block_points(type_key, count)
        self.rooms -= count

    def blocks(self) -> List[Block]:
        return [(f, t, c) for f, counts in sorted(self.held.items()) for t, c in counts.items()]


def _headroom_key(load: _StaffLoad, floor_number: int):
    # Greatest headroom first, then no building mixing, then input order
    return (-round(load.headroom, 9), load.would_mix(floor_number), load.index)


def _eligible(
    loads: List[_StaffLoad],
    floor_number: int,
    normal: bool = True,
    exclude: Optional[_StaffLoad] = None,
) -> List[_StaffLoad]:
    """Staff allowed in the floor's building, preferring those under their floor cap."""
    allowed = [l for l in loads if l is not exclude and l.allows(floor_number)]
    open_floor = [l for l in allowed if l.can_take_floor(floor_number, normal)]
    return open_floor or allowed


def _choose_receiver(
    candidates: List[_StaffLoad],
    floor_number: int,
    rooms_needed: int,
) -> _StaffLoad:
    fits = [l for l in candidates if l.cap_excess(rooms_needed) == 0]
    below_cap = [l for l in candidates if l.cap_excess(1) == 0]
    pool = fits or below_cap or candidates
    return min(pool, key=lambda l: _headroom_key(l, floor_number))


def _partition_score(receiver: _StaffLoad, runner: _StaffLoad, mine: List[Block], theirs: List[Block]):
    mine_points = sum(block_points(t, c) for _, t, c in mine)
    theirs_points = sum(block_points(t, c) for _, t, c in theirs)
    mine_rooms = sum(c for _, _, c in mine)
    theirs_rooms = sum(c for _, _, c in theirs)
    violation = receiver.cap_excess(mine_rooms) + runner.cap_excess(theirs_rooms)
    deviation = max(
        abs(receiver.points + mine_points - receiver.target),
        abs(runner.points + theirs_points - runner.target),
    )
    return (violation, round(deviation, 9))


def _best_partition(receiver: _StaffLoad, runner: _StaffLoad, blocks: List[Block]) -> List[bool]:
    """Choose which blocks stay with the receiver; the whole floor wins ties."""
    n = len(blocks)
    full = (1 << n) - 1
    best_mask = full
    best_score = _partition_score(receiver, runner, blocks, [])

    for mask in range(full - 1, 0, -1):
        mine = [b for i, b in enumerate(blocks) if mask >> (n - 1 - i) & 1]
        theirs = [b for i, b in enumerate(blocks) if not mask >> (n - 1 - i) & 1]
        score = _partition_score(receiver, runner, mine, theirs)
        if score < best_score:
            best_score = score
            best_mask = mask

    return [bool(best_mask >> (n - 1 - i) & 1) for i in range(n)]


def _place_floor(loads: List[_StaffLoad], floor: FloorInfo, split_ratio: float):
    floor_points = floor.total_points
    floor_rooms = floor.total_rooms
    blocks = floor_blocks(floor)

    normal = floor.total_normal_rooms > 0
    candidates = _eligible(loads, floor.floor_number, normal)
    if not candidates:
        logger.warning(
            "No staff may work on floor %s under building restrictions | restriction relaxed",
            floor.floor_number,
        )
        candidates = loads

    receiver = _choose_receiver(candidates, floor.floor_number, floor_rooms)
    overshoot = receiver.points + floor_points - receiver.target
    needs_split = (
        overshoot > split_ratio * floor_points + POINT_EPSILON
        or receiver.cap_excess(floor_rooms) > 0
    )

    runners = _eligible(loads, floor.floor_number, normal, exclude=receiver)
    if not needs_split or len(blocks) < 2 or not runners:
        for block in blocks:
            receiver.add(block)
        logger.debug("Floor %s -> %s (whole)", floor.floor_number, receiver.staff.name)
        return

    runner = _choose_receiver(runners, floor.floor_number, 1)
    keep = _best_partition(receiver, runner, blocks)
    for block, stays in zip(blocks, keep):
        (receiver if stays else runner).add(block)

    if all(keep):
        logger.debug("Floor %s -> %s (whole, no better split)", floor.floor_number, receiver.staff.name)
    else:
        logger.debug(
            "Floor %s split | %s=%s | %s=%s",
            floor.floor_number,
            receiver.staff.name, [b[1] for b, s in zip(blocks, keep) if s],
            runner.staff.name, [b[1] for b, s in zip(blocks, keep) if not s],
        )


def _repair_upper_limits(loads: List[_StaffLoad]):
    for load in loads:
        if load.cap_excess() == 0:
            continue
        # Smallest blocks first, to disturb the balance as little as possible
        for block in sorted(load.blocks(), key=lambda b: (b[2], b[0], b[1])):
            if load.cap_excess() == 0:
                break
            others = [
                l for l in loads
                if l is not load and l.cap_excess(block[2]) == 0 and l.accepts(block)
            ]
            if not others:
                continue
            taker = min(others, key=lambda l: _headroom_key(l, block[0]))
            load.remove(block)
            taker.add(block)
            logger.info(
                "Upper limit repair | moved %s x%s on floor %s from %s to %s",
                block[1], block[2], block[0], load.staff.name, taker.staff.name,
            )


def _lower_limit_donations(load: _StaffLoad, loads: List[_StaffLoad]):
    # Most overloaded donors first, their largest blocks first
    donors = sorted(
        (l for l in loads if l is not load),
        key=lambda l: (round(l.headroom, 9), l.index),
    )
    for donor in donors:
        for block in sorted(donor.blocks(), key=lambda b: (-b[2], b[0], b[1])):
            yield donor, block


def _repair_lower_limits(loads: List[_StaffLoad]):
    for load in loads:
        if load.min_rooms is None:
            continue
        for donor, block in _lower_limit_donations(load, loads):
            if load.rooms >= load.min_rooms:
                break
            if donor.min_rooms is not None and donor.rooms - block[2] < donor.min_rooms:
                continue
            if not load.accepts(block):
                continue
            donor.remove(block)
            load.add(block)
            logger.info(
                "Lower limit repair | moved %s x%s on floor %s from %s to %s",
                block[1], block[2], block[0], donor.staff.name, load.staff.name,
            )


def _to_assignment(load: _StaffLoad, config: LoadConfig) -> StaffAssignment:
    rooms_by_floor = {}
    for floor_number, counts in load.held.items():
        eco = counts.get(ECO_KEY, 0)
        normal = {t: c for t, c in counts.items() if t != ECO_KEY}
        rooms_by_floor[floor_number] = RoomAllocation(normal, eco)
    return StaffAssignment(
        staff=load.staff,
        rooms_by_floor=rooms_by_floor,
        bath_type=config.bath_type_for(load.staff.id),
        bath_duty_cost=config.bath_cost_for(load.staff.id),
    )


def build_loads(config: LoadConfig) -> List[_StaffLoad]:
    return [
        _StaffLoad(
            staff=s,
            index=i,
            target=config.target_for(s.id),
            max_rooms=config.max_rooms(s.id),
            min_rooms=config.min_rooms(s.id),
            building=config.building_for(s.id),
            max_floors=config.max_floors(s.id),
        )
        for i, s in enumerate(config.staff)
    ]


def max_deviation(result: OptimizationResult) -> float:
    """Largest |total_points - target| over all staff (the fairness objective)."""
    if not result.assignments:
        return 0.0
    return max(
        abs(a.total_points - result.config.target_for(a.staff.id))
        for a in result.assignments
    )


def optimize(
    floors: List[FloorInfo],
    config: LoadConfig,
    target_date: Optional[date] = None,
    rule_config: Optional[dict] = None,
) -> OptimizationResult:
    """Partition floors among staff, balancing points against LoadConfig targets.

    Deterministic: floor order is fixed (main then annex, ascending) and ties
    fall to input staff order. Returns one StaffAssignment per staff member,
    in input order.
    """
    cfg = rule_config or {}
    split_ratio = cfg.get("split_overshoot_ratio", config.split_overshoot_ratio)
    if split_ratio < 0:
        raise ConfigError(f"split_overshoot_ratio cannot be negative: {split_ratio}")

    if floors and not config.staff:
        raise UnassignableInventoryError(
            f"{sum(f.total_rooms for f in floors)} rooms on {len(floors)} floors but no staff"
        )

    loads = build_loads(config)

    # Step 1: Greedy placement, floor by floor
    for floor in sort_floors(floors):
        if floor.total_rooms == 0:
            continue
        _place_floor(loads, floor, split_ratio)

    # Step 2: Room limit repair
    if config.raw_limits:
        _repair_upper_limits(loads)
        _repair_lower_limits(loads)

    assignments = [_to_assignment(load, config) for load in loads]
    result = OptimizationResult(target_date=target_date, config=config, assignments=assignments)

    logger.info(
        "Optimization completed | engine=greedy | staff=%s | floors=%s | rooms=%s | points=%.2f | max_deviation=%.2f",
        len(assignments), len(floors), result.total_rooms, result.total_points, max_deviation(result),
    )
    return result
