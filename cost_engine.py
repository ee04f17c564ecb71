"""
Cost Engine Module.

This module prices a drainage network against a schedule of rates.

CRITICAL PRINCIPLES:
- Has NO hydraulic or compliance logic
- Does NOT validate networks
- Pure cost calculation functions
- Rates are injected (RateTable), never read from module state

Cost components:
- Pipe material (per metre, diameter keyed)
- Trench excavation + backfill (proportional to trench volume)
- Labor (flat per-metre allowance)
- Manholes (by depth class)

THIS IS A DECISION-SUPPORT COST MODEL, NOT A CONTRACT BOQ.
"""

import logging
from typing import Iterable, List, Mapping, Tuple

from data_models import (
    CatchmentParams, CostBreakdown, DrainageNetwork, ManHole, PipeMaterial, PipeSegment
)
from design_config import RateTable, DEFAULT_CONFIG

logger = logging.getLogger(__name__)


RUPEES_PER_LAKH = 100000.0

# Trench geometry allowances
TRENCH_WIDTH_M = 0.8
TRENCH_CLEARANCE_M = 0.6  # added to pipe diameter for trench depth

# Labor allowance: half a labor-day per metre of pipe
LABOR_DAYS_PER_M = 0.5

# Backfill itemised as a share of excavation cost in the breakdown
BACKFILL_SHARE_OF_EXCAVATION = 0.5

# Manhole depth classes (m)
SHALLOW_DEPTH_LIMIT = 1.5
MEDIUM_DEPTH_LIMIT = 3.0

# Naive area-based estimate (₹ lakhs)
NAIVE_COST_PER_HA = 1500.0
NAIVE_COST_PER_PIPE = 3.5

# Expected cost per metre of trunk (₹), used for sanity warnings only
EXPECTED_COST_PER_M = (2000.0, 60000.0)


def to_lakhs(rupees: float) -> float:
    """Convert ₹ to ₹ lakhs."""
    return rupees / RUPEES_PER_LAKH


def _rate_map_for(material: PipeMaterial, rates: RateTable) -> Mapping[int, float]:
    if material == PipeMaterial.RCC:
        return rates.rcc_pipe_per_m
    return rates.pvc_pipe_per_m


def pipe_rate_per_m(pipe: PipeSegment, rates: RateTable) -> float:
    """
    Per-metre pipe rate.

    Uses the smallest table diameter >= the pipe diameter, or the largest
    table diameter when the pipe is bigger than every key.
    """
    rate_map = _rate_map_for(pipe.material, rates)
    if not rate_map:
        return rates.default_pipe_rate

    keys = sorted(rate_map)
    key = next((k for k in keys if k >= pipe.diameter), keys[-1])
    return rate_map.get(key, rates.default_pipe_rate)


def trench_volume(pipe: PipeSegment) -> float:
    """Trench volume in m³."""
    return pipe.length * TRENCH_WIDTH_M * (pipe.diameter / 1000.0 + TRENCH_CLEARANCE_M)


def manhole_depth_class(manhole: ManHole) -> str:
    """Depth class: 'shallow', 'medium' or 'deep'."""
    depth = manhole.depth
    if depth < SHALLOW_DEPTH_LIMIT:
        return "shallow"
    if depth < MEDIUM_DEPTH_LIMIT:
        return "medium"
    return "deep"


def network_cost(
    pipes: Iterable[PipeSegment],
    manholes: Iterable[ManHole],
    rates: RateTable = DEFAULT_CONFIG.rates,
) -> float:
    """
    Calculate total network cost.

    Args:
        pipes: Pipe segments to price
        manholes: Manholes to price
        rates: RateTable with unit rates

    Returns:
        Total cost in ₹ (NOT lakhs)

    Note:
        This function is deterministic and has no side effects.
    """
    cost = 0.0

    for pipe in pipes:
        cost += pipe_rate_per_m(pipe, rates) * pipe.length
        cost += trench_volume(pipe) * (rates.excavation_per_m3 + rates.backfill_per_m3)
        cost += pipe.length * rates.labor_per_day * LABOR_DAYS_PER_M

    for manhole in manholes:
        cost += rates.manhole_cost[manhole_depth_class(manhole)]

    return cost


def cost_breakdown(
    network: DrainageNetwork,
    rates: RateTable = DEFAULT_CONFIG.rates,
) -> CostBreakdown:
    """
    Itemised cost of a network in ₹ lakhs.

    Backfill is modelled as a flat share of excavation cost and every
    manhole is priced at the medium depth rate. This is a summary view and
    intentionally differs from network_cost().

    Args:
        network: DrainageNetwork to price
        rates: RateTable with unit rates

    Returns:
        CostBreakdown with each item rounded to 0.1 lakh
    """
    pipe_material = sum(pipe_rate_per_m(p, rates) * p.length for p in network.pipes)
    excavation = sum(trench_volume(p) * rates.excavation_per_m3 for p in network.pipes)
    backfill = excavation * BACKFILL_SHARE_OF_EXCAVATION
    labor = sum(p.length * rates.labor_per_day * LABOR_DAYS_PER_M for p in network.pipes)
    manholes = len(network.manholes) * rates.manhole_cost["medium"]

    total = pipe_material + excavation + backfill + labor + manholes

    def lakhs(value: float) -> float:
        return round(to_lakhs(value), 1)

    return CostBreakdown(
        pipe_material=lakhs(pipe_material),
        manholes=lakhs(manholes),
        excavation=lakhs(excavation),
        backfill=lakhs(backfill),
        labor=lakhs(labor),
        total=lakhs(total),
    )


def estimate_naive_cost(catchment: CatchmentParams, num_pipes: int) -> float:
    """
    Naive area-based network cost estimate used as the savings baseline.

    Returns:
        Cost in ₹ lakhs
    """
    return catchment.area * NAIVE_COST_PER_HA + num_pipes * NAIVE_COST_PER_PIPE


def check_cost_sanity(network: DrainageNetwork) -> Tuple[bool, str]:
    """
    Check whether cost per metre of trunk is within the expected band.

    Args:
        network: Priced DrainageNetwork

    Returns:
        Tuple of (is_reasonable, warning_message)
    """
    if network.total_pipe_length <= 0:
        return True, ""

    cost_per_m = network.total_cost * RUPEES_PER_LAKH / network.total_pipe_length
    low, high = EXPECTED_COST_PER_M
    if cost_per_m < low or cost_per_m > high:
        warning = (
            f"WARNING: Cost per metre of trunk (₹{cost_per_m:,.0f}/m) is outside the "
            f"typical range (₹{low:,.0f} - ₹{high:,.0f}/m). Check inputs or rate table."
        )
        logger.warning(warning)
        return False, warning

    return True, ""


def describe_rates(rates: RateTable) -> List[str]:
    """Human-readable summary lines of a rate table for CLI display."""
    return [
        f"Excavation: ₹{rates.excavation_per_m3:,.0f}/m³",
        f"Backfill:   ₹{rates.backfill_per_m3:,.0f}/m³",
        f"Labor:      ₹{rates.labor_per_day:,.0f}/day",
        "Manholes:   " + ", ".join(
            f"{cls} ₹{cost:,.0f}" for cls, cost in rates.manhole_cost.items()
        ),
    ]
