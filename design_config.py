"""
Design Configuration Tables.

Bengaluru schedule of rates, NBC / BBMP design constraints and IMD rainfall
reference data used by the drainage engines.

All tables are immutable. Engines receive a DesignConfig explicitly so that
what-if runs (e.g. another city's rate table) never share mutable state.

Sources:
- BBMP Schedule of Rates 2024-25
- NBC 2016 Part 9, BBMP Bylaws 2020
- IMD Bengaluru historical rainfall
"""

import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

logger = logging.getLogger(__name__)


# ============================================================================
# STANDARD PIPE DIAMETERS (mm) per IS:458
# ============================================================================

STANDARD_DIAMETERS: Tuple[int, ...] = (
    150, 200, 250, 300, 375, 450, 525, 600, 750, 900, 1050, 1200,
)


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class NBCConstraints:
    """NBC 2016 Part 9 / BBMP hydraulic design limits."""
    min_velocity: float = 0.6         # m/s (self-cleansing)
    max_velocity: float = 3.0         # m/s (erosion limit)
    max_fill_ratio: float = 0.80      # 80% of full-bore depth
    min_pipe_dia: int = 150           # mm
    max_pipe_dia: int = 1200          # mm
    min_cover_depth: float = 0.9      # m (road crossing)
    max_manhole_spacing: float = 60.0  # m
    min_slope: float = 0.5            # %
    max_slope: float = 10.0           # %
    freeboard_factor: float = 1.25


@dataclass(frozen=True)
class RateTable:
    """
    Unit rates in ₹.

    Pipe rates are keyed by nominal diameter (mm). The RCC table is used for
    RCC pipes; every other material is priced from the PVC table.
    """
    cement_per_bag: float = 400.0
    labor_per_day: float = 800.0
    pvc_pipe_per_m: Mapping[int, float] = field(default_factory=lambda: _frozen({
        150: 350.0, 200: 520.0, 250: 750.0, 300: 980.0,
        375: 1450.0, 450: 2100.0, 525: 2900.0, 600: 3800.0,
        750: 5500.0, 900: 7800.0, 1050: 10200.0, 1200: 13500.0,
    }))
    rcc_pipe_per_m: Mapping[int, float] = field(default_factory=lambda: _frozen({
        300: 1200.0, 375: 1650.0, 450: 2300.0, 525: 3100.0,
        600: 4200.0, 750: 6000.0, 900: 8500.0, 1050: 11000.0, 1200: 15000.0,
    }))
    manhole_cost: Mapping[str, float] = field(default_factory=lambda: _frozen({
        "shallow": 18000.0,
        "medium": 28000.0,
        "deep": 45000.0,
    }))
    excavation_per_m3: float = 350.0
    backfill_per_m3: float = 180.0
    sand_bedding_per_m3: float = 450.0
    default_pipe_rate: float = 2000.0  # used only when a rate table is empty


@dataclass(frozen=True)
class RainfallReference:
    """IMD Bengaluru rainfall intensity reference (mm/hr)."""
    monsoon_avg: float = 100.0     # design storm
    extreme_event: float = 150.0   # flood scenario
    annual_avg_mm: float = 970.0
    peak_month: str = "September"
    # Multipliers for urban micro-watershed effects
    ward_adjustments: Mapping[str, float] = field(default_factory=lambda: _frozen({
        "central": 1.1,
        "north": 0.95,
        "south": 1.05,
        "east": 1.0,
        "west": 1.08,
        "yelahanka": 0.92,
        "whitefield": 1.12,
    }))


@dataclass(frozen=True)
class DesignConfig:
    """Bundle of every static table consumed by the drainage engines."""
    constraints: NBCConstraints = field(default_factory=NBCConstraints)
    rates: RateTable = field(default_factory=RateTable)
    rainfall: RainfallReference = field(default_factory=RainfallReference)
    diameters: Tuple[int, ...] = STANDARD_DIAMETERS
    region: str = "bengaluru"


DEFAULT_CONFIG = DesignConfig()


def _diameter_keyed(raw: Dict[str, float]) -> Mapping[int, float]:
    return _frozen({int(k): float(v) for k, v in raw.items()})


def load_rate_table(path: str) -> RateTable:
    """
    Load a rate table override from a JSON file.

    The file uses the same keys as RateTable. Diameter keys are strings in
    JSON and are converted to int. Missing keys keep the Bengaluru defaults.

    Args:
        path: Path to the JSON file

    Returns:
        New RateTable instance

    Raises:
        ValueError: If the file contains a key RateTable does not know
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    defaults = RateTable()
    known = set(defaults.__dataclass_fields__)
    unknown = set(raw) - known
    if unknown:
        raise ValueError(f"Unknown rate table keys: {sorted(unknown)}")

    kwargs = {}
    for key, value in raw.items():
        if key in ("pvc_pipe_per_m", "rcc_pipe_per_m"):
            kwargs[key] = _diameter_keyed(value)
        elif key == "manhole_cost":
            merged = dict(defaults.manhole_cost)
            merged.update({k: float(v) for k, v in value.items()})
            kwargs[key] = _frozen(merged)
        else:
            kwargs[key] = float(value)

    logger.info(f"Loaded rate table override from {path} ({len(kwargs)} keys)")
    return RateTable(**kwargs)
