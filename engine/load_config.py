"""Workload plan builder: fair-share point targets, room limits and bath duty."""

from typing import Dict, List, Optional

from config.defaults import (
    SPLIT_OVERSHOOT_RATIO, TARGET_PRECISION, POINT_EPSILON, MAX_FLOORS_PER_STAFF,
)
from engine.errors import ConfigError
from models.duty import BathCleaningType
from models.load_config import LoadConfig
from models.staff import BuildingAssignment, Staff
from utils.logger import get_logger


logger = get_logger(__name__)


def bath_duty_cost(bath_type: BathCleaningType, rule_config: Optional[dict] = None) -> float:
    """Resolve the time cost of a bath duty, honouring ``bath_duty_costs`` overrides."""
    cfg = rule_config or {}
    overrides = cfg.get("bath_duty_costs", {})
    cost = float(overrides.get(bath_type.name, bath_type.default_cost))
    if bath_type == BathCleaningType.NONE:
        return 0.0
    if cost < 0:
        raise ConfigError(f"Bath duty cost for {bath_type.name} cannot be negative: {cost}")
    return cost


def _lowest_target(staff: List[Staff], targets: Dict[str, float]) -> Staff:
    # min() keeps the first listed staff member on ties
    return min(staff, key=lambda s: targets[s.id])


def _filter_limits(staff: List[Staff], raw_limits: Dict[str, int]):
    known = {s.id for s in staff}
    limits = {}
    ignored = []
    for staff_id, value in raw_limits.items():
        if staff_id not in known:
            ignored.append(staff_id)
            continue
        if int(value) != 0:
            limits[staff_id] = int(value)
    return limits, ignored


def _check_unique_names(staff: List[Staff]):
    seen = set()
    for s in staff:
        if s.name in seen:
            raise ConfigError(f"Duplicate staff name '{s.name}'; rooms are reported by name")
        seen.add(s.name)


def _filter_building_assignments(
    staff: List[Staff],
    raw: Dict[str, BuildingAssignment],
):
    known = {s.id for s in staff}
    restrictions = {}
    ignored = []
    for staff_id, assignment in raw.items():
        if staff_id not in known:
            ignored.append(staff_id)
        elif assignment != BuildingAssignment.BOTH:
            restrictions[staff_id] = assignment
    return restrictions, ignored


def _round_targets(
    staff: List[Staff],
    targets: Dict[str, float],
    total: float,
    precision: int,
) -> Dict[str, float]:
    """Round targets and hand the remainder to the staff member lowest on target."""
    rounded = {sid: round(t, precision) for sid, t in targets.items()}
    remainder = round(total - sum(rounded.values()), precision)
    if abs(remainder) > POINT_EPSILON:
        lowest = _lowest_target(staff, rounded)
        rounded[lowest.id] = round(rounded[lowest.id] + remainder, precision)
    return rounded


def compute_targets(
    staff: List[Staff],
    total_points: float,
    points_per_room: float,
    limits: Dict[str, int],
) -> Dict[str, float]:
    """Fair-share point targets with explicit room limits applied (unrounded)."""
    baseline = total_points / len(staff)

    # Step 1: Constrained staff
    targets: Dict[str, float] = {}
    for s in staff:
        limit = limits.get(s.id)
        if limit is None:
            continue
        limit_points = abs(limit) * points_per_room
        if limit > 0:
            targets[s.id] = min(baseline, limit_points)
        else:
            targets[s.id] = max(baseline, limit_points)

    # Step 2: Unconstrained staff absorb what is left
    unconstrained = [s for s in staff if s.id not in targets]
    constrained_sum = sum(targets.values())
    remaining = total_points - constrained_sum

    if remaining < -POINT_EPSILON:
        # Lower limits exceed the inventory: soft limits yield proportionally
        factor = total_points / constrained_sum
        logger.warning(
            "Room limits exceed inventory | requested_points=%.2f | available_points=%.2f",
            constrained_sum, total_points,
        )
        for sid in targets:
            targets[sid] *= factor
        for s in unconstrained:
            targets[s.id] = 0.0
    elif unconstrained:
        share = remaining / len(unconstrained)
        for s in unconstrained:
            targets[s.id] = share
    elif remaining > POINT_EPSILON:
        # Lower-bounded staff absorb the overflow; capped staff only when nobody else can
        uncapped = [s for s in staff if limits[s.id] < 0]
        if uncapped:
            share = remaining / len(uncapped)
            for s in uncapped:
                targets[s.id] += share
            logger.info(
                "Overflow shared by lower-bounded staff | overflow_points=%.2f | receivers=%s",
                remaining, [s.name for s in uncapped],
            )
        else:
            lowest = _lowest_target(staff, targets)
            logger.warning(
                "Upper room limits cannot absorb inventory | overflow_points=%.2f | receiver=%s",
                remaining, lowest.name,
            )
            targets[lowest.id] += remaining

    return {s.id: targets[s.id] for s in staff}


def build_load_config(
    staff: List[Staff],
    total_rooms: int,
    main_room_count: int,
    annex_room_count: int,
    bath_type: BathCleaningType = BathCleaningType.NONE,
    raw_limits: Optional[Dict[str, int]] = None,
    total_points: Optional[float] = None,
    rule_config: Optional[dict] = None,
    building_assignments: Optional[Dict[str, BuildingAssignment]] = None,
) -> LoadConfig:
    """Turn inventory totals, per-staff limits and the bath duty into a LoadConfig.

    ``total_points`` defaults to ``total_rooms`` (one point per room) when the
    caller has no weighted total.
    """
    cfg = rule_config or {}
    precision = cfg.get("target_precision", TARGET_PRECISION)
    split_ratio = cfg.get("split_overshoot_ratio", SPLIT_OVERSHOOT_RATIO)
    if split_ratio < 0:
        raise ConfigError(f"split_overshoot_ratio cannot be negative: {split_ratio}")
    max_floors = cfg.get("max_floors_per_staff", MAX_FLOORS_PER_STAFF)
    if max_floors is not None and max_floors < 1:
        raise ConfigError(f"max_floors_per_staff must be at least 1: {max_floors}")
    cost = bath_duty_cost(bath_type, cfg)

    total = float(total_points) if total_points is not None else float(total_rooms)
    staff = list(staff)

    if not staff:
        if total_rooms > 0:
            raise ConfigError(f"No staff available for {total_rooms} rooms")
        return LoadConfig(
            staff=[],
            target_points_by_staff={},
            bath_type=bath_type,
            bath_duty_cost=cost,
            split_overshoot_ratio=split_ratio,
            total_points=total,
            total_rooms=total_rooms,
            main_room_count=main_room_count,
            annex_room_count=annex_room_count,
            max_floors_per_staff=max_floors,
        )

    _check_unique_names(staff)
    limits, ignored = _filter_limits(staff, raw_limits or {})
    restrictions, ignored_restrictions = _filter_building_assignments(staff, building_assignments or {})
    warnings = []
    for staff_id in ignored:
        message = f"Limit for unknown staff id '{staff_id}' was ignored"
        warnings.append(message)
        logger.warning(message)
    for staff_id in ignored_restrictions:
        message = f"Building assignment for unknown staff id '{staff_id}' was ignored"
        warnings.append(message)
        logger.warning(message)

    points_per_room = total / total_rooms if total_rooms > 0 else 1.0
    targets = compute_targets(staff, total, points_per_room, limits)
    targets = _round_targets(staff, targets, total, precision)

    # Bath duty: lowest baseline target carries it, others absorb the cost
    assignee_id = None
    if bath_type != BathCleaningType.NONE:
        assignee = _lowest_target(staff, targets)
        assignee_id = assignee.id
        deducted = min(cost, targets[assignee_id])
        targets[assignee_id] = round(targets[assignee_id] - deducted, precision)

        others = [s for s in staff if s.id != assignee_id]
        recipients = [s for s in others if s.id not in limits or limits[s.id] < 0] or others
        if recipients:
            share = round(deducted / len(recipients), precision)
            for s in recipients:
                targets[s.id] = round(targets[s.id] + share, precision)
            leftover = round(deducted - share * len(recipients), precision)
            if abs(leftover) > POINT_EPSILON:
                first = recipients[0].id
                targets[first] = round(targets[first] + leftover, precision)

    logger.info(
        "Load config built | staff=%s | total_points=%.2f | limits=%s | restrictions=%s | max_floors=%s | bath=%s | bath_assignee=%s",
        len(staff), total, len(limits), len(restrictions), max_floors, bath_type.name, assignee_id,
    )

    return LoadConfig(
        staff=staff,
        target_points_by_staff=targets,
        bath_duty_assignee=assignee_id,
        bath_type=bath_type,
        bath_duty_cost=cost,
        raw_limits=limits,
        ignored_limits=ignored,
        split_overshoot_ratio=split_ratio,
        total_points=total,
        total_rooms=total_rooms,
        main_room_count=main_room_count,
        annex_room_count=annex_room_count,
        building_assignments=restrictions,
        max_floors_per_staff=max_floors,
        warnings=warnings,
    )
