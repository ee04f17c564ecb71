"""
Data models for the stormwater drainage design optimization system.

This module defines the core data structures used throughout the system.
Catchment inputs, network geometry, cost and compliance results are kept
as separate structures so that each engine only sees what it needs.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Dict, Any


class SoilType(Enum):
    """Soil classification of the catchment."""
    CLAY = "clay"
    LOAM = "loam"
    SANDY = "sandy"
    ROCKY = "rocky"


class LandUse(Enum):
    """Dominant land use of the catchment."""
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"
    MIXED = "mixed"


class PipeMaterial(Enum):
    """Pipe materials supported by the rate tables."""
    PVC = "PVC"
    RCC = "RCC"
    HDPE = "HDPE"
    CI = "CI"  # Cast iron


class ManholeRole(Enum):
    """Position of a manhole in the trunk chain."""
    INLET = "inlet"
    JUNCTION = "junction"
    OUTLET = "outlet"


class ComplianceStatus(Enum):
    """Verdict of a single compliance rule."""
    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"  # Advisory-only rules


def _serialize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


@dataclass(frozen=True)
class CatchmentParams:
    """
    Drainage basin description for a single optimization run.

    Range checks (area > 0, 0 <= runoff_coeff <= 1, ...) belong to the
    boundary layer (backend.models.request). The engines assume valid input.
    """
    area: float  # hectares
    runoff_coeff: float  # C factor, typically 0.1 - 0.9
    rainfall_intensity: float  # mm/hr (IMD design storm)
    slope: float  # average ground slope, %
    soil_type: SoilType
    land_use: LandUse

    def to_dict(self) -> Dict[str, Any]:
        return _serialize(asdict(self))


@dataclass
class ManHole:
    """
    Network node.

    x / y are layout coordinates for drawing only. Elevations are in metres.
    """
    id: str
    label: str
    x: float
    y: float
    invert: float  # m
    rim: float  # m, always above invert
    role: ManholeRole
    flood_risk: int = 0  # 0-100, backfilled from adjacent pipes

    @property
    def depth(self) -> float:
        """Rim to invert depth in metres."""
        return self.rim - self.invert

    def to_dict(self) -> Dict[str, Any]:
        data = _serialize(asdict(self))
        data["depth"] = round(self.depth, 3)
        return data


@dataclass
class PipeSegment:
    """Directed pipe from an upstream manhole to the next one downstream."""
    id: str
    from_node: str
    to_node: str
    length: float  # m
    diameter: int  # mm, always a standard catalog size
    slope: float  # %
    material: PipeMaterial
    velocity: float  # m/s at design fill (not clamped)
    flow_rate: float  # m³/s capacity at design fill
    fill_ratio: float  # required flow / capacity, capped at 0.79
    risk_score: int  # 0-100

    def to_dict(self) -> Dict[str, Any]:
        return _serialize(asdict(self))


@dataclass
class DrainageNetwork:
    """
    Linear trunk network snapshot.

    The optimizer never mutates a network once the generator returns it.
    """
    manholes: List[ManHole]
    pipes: List[PipeSegment]
    catchment: CatchmentParams
    peak_runoff: float  # m³/s
    total_pipe_length: float  # m
    total_cost: float  # ₹ lakhs
    flood_risk_score: int  # mean pipe risk, 0-100
    nbc_compliant: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "manholes": [mh.to_dict() for mh in self.manholes],
            "pipes": [p.to_dict() for p in self.pipes],
            "catchment": self.catchment.to_dict(),
            "peak_runoff": self.peak_runoff,
            "total_pipe_length": self.total_pipe_length,
            "total_cost": self.total_cost,
            "flood_risk_score": self.flood_risk_score,
            "nbc_compliant": self.nbc_compliant,
        }


@dataclass
class CostBreakdown:
    """Itemised network cost in ₹ lakhs (rounded to 0.1)."""
    pipe_material: float
    manholes: float
    excavation: float
    backfill: float
    labor: float
    total: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ComplianceCheck:
    """Result of one code clause check."""
    rule: str
    clause: str
    status: ComplianceStatus
    value: str  # observed value, human readable
    limit: str  # threshold, human readable
    note: str

    def to_dict(self) -> Dict[str, Any]:
        return _serialize(asdict(self))


@dataclass
class GenerationProgress:
    """Progress report yielded after each optimizer generation."""
    generation: int  # 1-based count of completed generations
    total_generations: int
    candidate_cost: float
    best_cost: float
    improved: bool

    @property
    def percent(self) -> int:
        if self.total_generations <= 0:
            return 100
        return round(self.generation / self.total_generations * 100)


@dataclass
class OptimizationResult:
    """
    Final result from an optimizer run.
    """
    network: DrainageNetwork
    savings: int  # % cost reduction vs naive estimate, never negative
    iterations: int
    convergence_data: List[float]
    warnings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    naive_cost: float = 0.0  # ₹ lakhs
    convergence_mode: str = "simulated"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "network": self.network.to_dict(),
            "savings": self.savings,
            "iterations": self.iterations,
            "convergence_data": list(self.convergence_data),
            "warnings": list(self.warnings),
            "recommendations": list(self.recommendations),
            "naive_cost": self.naive_cost,
            "convergence_mode": self.convergence_mode,
        }
