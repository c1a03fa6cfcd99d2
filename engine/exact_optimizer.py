"""PuLP MILP optimizer: exact min-max balancing over floor type-blocks."""

from datetime import date
from typing import Dict, List, Optional, Tuple

import pulp

from config.defaults import (
    ECO_KEY, SOLVER_TIME_LIMIT_SECONDS, SPLIT_PENALTY,
    BUILDING_MIX_PENALTY, LIMIT_SLACK_PENALTY, FLOOR_SLACK_PENALTY,
)
from engine.errors import UnassignableInventoryError
from engine.optimizer import (
    Block, block_points, floor_blocks, sort_floors, optimize, max_deviation,
)
from models.allocation import OptimizationResult, RoomAllocation, StaffAssignment
from models.floor import FloorInfo, is_main_floor
from models.load_config import LoadConfig
from utils.logger import get_logger


logger = get_logger(__name__)


def _build_assignments(
    config: LoadConfig,
    owners: List[Tuple[Block, str]],
) -> List[StaffAssignment]:
    held: Dict[str, Dict[int, Dict[str, int]]] = {s.id: {} for s in config.staff}
    for (floor_number, type_key, count), staff_id in owners:
        counts = held[staff_id].setdefault(floor_number, {})
        counts[type_key] = counts.get(type_key, 0) + count

    assignments = []
    for s in config.staff:
        rooms_by_floor = {
            f: RoomAllocation({t: c for t, c in counts.items() if t != ECO_KEY}, counts.get(ECO_KEY, 0))
            for f, counts in held[s.id].items()
        }
        assignments.append(StaffAssignment(
            staff=s,
            rooms_by_floor=rooms_by_floor,
            bath_type=config.bath_type_for(s.id),
            bath_duty_cost=config.bath_cost_for(s.id),
        ))
    return assignments


def optimize_exact(
    floors: List[FloorInfo],
    config: LoadConfig,
    target_date: Optional[date] = None,
    rule_config: Optional[dict] = None,
) -> OptimizationResult:
    """
    Solve the balancing problem as a MILP.

    Objective (minimised):
    - largest absolute deviation between a staff member's points and target
    - + split penalty per extra staff member sharing a floor
    - + building mix penalty per staff member holding both buildings
    - + heavy penalty per room outside a soft room limit
    - + heavy penalty per normal floor above a staff member's floor cap

    Building restrictions are hard unless nobody may take a block, in which
    case the block is open to everyone.

    Falls back to the greedy optimizer when CBC does not report Optimal.
    """
    cfg = rule_config or {}
    time_limit = cfg.get("solver_time_limit", SOLVER_TIME_LIMIT_SECONDS)
    split_penalty = cfg.get("split_penalty", SPLIT_PENALTY)
    mix_penalty = cfg.get("building_mix_penalty", BUILDING_MIX_PENALTY)
    slack_penalty = cfg.get("limit_slack_penalty", LIMIT_SLACK_PENALTY)
    floor_penalty = cfg.get("floor_slack_penalty", FLOOR_SLACK_PENALTY)

    if floors and not config.staff:
        raise UnassignableInventoryError(
            f"{sum(f.total_rooms for f in floors)} rooms on {len(floors)} floors but no staff"
        )

    ordered = [f for f in sort_floors(floors) if f.total_rooms > 0]
    if not ordered:
        return OptimizationResult(
            target_date=target_date,
            config=config,
            assignments=_build_assignments(config, []),
            engine="exact",
        )

    staff_ids = [s.id for s in config.staff]
    blocks: List[Block] = [b for f in ordered for b in floor_blocks(f)]
    floor_numbers = list(dict.fromkeys(f.floor_number for f in ordered))

    prob = pulp.LpProblem("HousekeepingBalance", pulp.LpMinimize)

    # Decision variables: x[staff][block] = 1 if the staff member cleans the block
    x: Dict[Tuple[str, int], pulp.LpVariable] = {}
    for si, sid in enumerate(staff_ids):
        for bi, _ in enumerate(blocks):
            x[(sid, bi)] = pulp.LpVariable(f"x_{si}_{bi}", cat="Binary")

    # Building restrictions: x = 0 where the staff member may not work
    for bi, (fn, _, _) in enumerate(blocks):
        allowed = [sid for sid in staff_ids if config.building_for(sid).allows_floor(fn)]
        if not allowed:
            logger.warning("No staff may work on floor %s under building restrictions | restriction relaxed", fn)
            continue
        for sid in staff_ids:
            if sid not in allowed:
                x[(sid, bi)].upBound = 0

    # y[staff][floor] = 1 if the staff member holds anything on the floor
    y: Dict[Tuple[str, int], pulp.LpVariable] = {}
    for si, sid in enumerate(staff_ids):
        for fn in floor_numbers:
            y[(sid, fn)] = pulp.LpVariable(f"y_{si}_{fn}", cat="Binary")

    # z[staff][floor] = 1 if the staff member holds normal (non-eco) rooms on the floor
    z: Dict[Tuple[str, int], pulp.LpVariable] = {}
    for si, sid in enumerate(staff_ids):
        for fn in floor_numbers:
            z[(sid, fn)] = pulp.LpVariable(f"z_{si}_{fn}", cat="Binary")

    main_used, annex_used, mixed, dev, over, under, floor_over = {}, {}, {}, {}, {}, {}, {}
    for si, sid in enumerate(staff_ids):
        main_used[sid] = pulp.LpVariable(f"main_{si}", cat="Binary")
        annex_used[sid] = pulp.LpVariable(f"annex_{si}", cat="Binary")
        mixed[sid] = pulp.LpVariable(f"mix_{si}", lowBound=0)
        dev[sid] = pulp.LpVariable(f"dev_{si}", lowBound=0)
        over[sid] = pulp.LpVariable(f"over_{si}", lowBound=0)
        under[sid] = pulp.LpVariable(f"under_{si}", lowBound=0)
        floor_over[sid] = pulp.LpVariable(f"floor_over_{si}", lowBound=0)
    worst = pulp.LpVariable("max_deviation", lowBound=0)

    prob += (
        worst
        + split_penalty * pulp.lpSum(y.values())
        + mix_penalty * pulp.lpSum(mixed.values())
        + slack_penalty * pulp.lpSum(list(over.values()) + list(under.values()))
        + floor_penalty * pulp.lpSum(floor_over.values())
    ), "balance_objective"

    # --- Constraints ---
    # C1: Coverage, every block to exactly one staff member
    for bi, _ in enumerate(blocks):
        prob += pulp.lpSum(x[(sid, bi)] for sid in staff_ids) == 1, f"cover_{bi}"

    # C2: Floor usage and building flags
    for sid in staff_ids:
        for bi, (fn, _, _) in enumerate(blocks):
            prob += x[(sid, bi)] <= y[(sid, fn)]
        for fn in floor_numbers:
            flag = main_used[sid] if is_main_floor(fn) else annex_used[sid]
            prob += y[(sid, fn)] <= flag
        prob += mixed[sid] >= main_used[sid] + annex_used[sid] - 1

    # C3: Deviation from target, bounded by the min-max variable
    for sid in staff_ids:
        points = pulp.lpSum(block_points(t, c) * x[(sid, bi)] for bi, (_, t, c) in enumerate(blocks))
        target = config.target_for(sid)
        prob += dev[sid] >= points - target
        prob += dev[sid] >= target - points
        prob += worst >= dev[sid]

    # C4: Soft room limits
    for si, sid in enumerate(staff_ids):
        rooms = pulp.lpSum(c * x[(sid, bi)] for bi, (_, _, c) in enumerate(blocks))
        cap = config.max_rooms(sid)
        floor_limit = config.min_rooms(sid)
        if cap is not None:
            prob += rooms <= cap + over[sid], f"max_rooms_{si}"
        if floor_limit is not None:
            prob += rooms >= floor_limit - under[sid], f"min_rooms_{si}"

    # C5: Soft cap on normal-cleaning floors per staff member
    for si, sid in enumerate(staff_ids):
        floor_cap = config.max_floors(sid)
        if floor_cap is None:
            continue
        for bi, (fn, t, _) in enumerate(blocks):
            if t != ECO_KEY:
                prob += x[(sid, bi)] <= z[(sid, fn)]
        prob += (
            pulp.lpSum(z[(sid, fn)] for fn in floor_numbers) <= floor_cap + floor_over[sid]
        ), f"max_floors_{si}"

    # --- Solve ---
    prob.solve(pulp.PULP_CBC_CMD(msg=0, timeLimit=time_limit))
    status = pulp.LpStatus[prob.status]

    if status != "Optimal":
        logger.warning("Exact optimization failed | status=%s | falling back to greedy", status)
        return optimize(floors, config, target_date, rule_config)

    owners: List[Tuple[Block, str]] = []
    for bi, block in enumerate(blocks):
        for sid in staff_ids:
            if round(x[(sid, bi)].varValue or 0) == 1:
                owners.append((block, sid))
                break

    result = OptimizationResult(
        target_date=target_date,
        config=config,
        assignments=_build_assignments(config, owners),
        engine="exact",
    )
    logger.info(
        "Optimization completed | engine=exact | status=%s | staff=%s | rooms=%s | points=%.2f | max_deviation=%.2f",
        status, len(staff_ids), result.total_rooms, result.total_points, max_deviation(result),
    )
    return result
