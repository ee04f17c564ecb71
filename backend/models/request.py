"""
Request models for the drainage API.

This is the validation boundary: the engines assume the ranges checked here.
"""

from pydantic import BaseModel, Field
from typing import Literal, Optional


class CatchmentRequest(BaseModel):
    """Catchment description supplied by the client."""
    area: float = Field(..., gt=0, description="Catchment area in hectares")
    runoff_coeff: float = Field(..., ge=0, le=1, description="Runoff coefficient C")
    rainfall_intensity: Optional[float] = Field(
        None, gt=0, description="Design rainfall in mm/hr. Derived from ward if omitted."
    )
    ward: Optional[str] = Field(None, description="Bengaluru ward / zone for IMD adjustment")
    slope: float = Field(..., gt=0, description="Average ground slope in percent")
    soil_type: Literal["clay", "loam", "sandy", "rocky"]
    land_use: Literal["residential", "commercial", "industrial", "mixed"]


class OptimizationRequest(BaseModel):
    """Request model for optimization endpoint."""
    catchment: CatchmentRequest
    num_pipes: int = Field(8, ge=1, le=20, description="Pipe segments in the trunk")
    generations: int = Field(50, ge=0, le=500, description="Generation budget")
    seed: Optional[int] = Field(None, description="Random seed for reproducible runs")
    convergence_mode: Literal["simulated", "actual"] = "simulated"


class ComplianceRequest(BaseModel):
    """Request model for a single-network compliance check."""
    catchment: CatchmentRequest
    num_pipes: int = Field(8, ge=1, le=20, description="Pipe segments in the trunk")
    seed: Optional[int] = Field(None, description="Random seed for reproducible runs")
