"""
Response models for the drainage API.
"""

from pydantic import BaseModel, Field
from typing import Dict, List, Any


class ComplianceSummaryResponse(BaseModel):
    """Verdict counts for the compliance battery."""
    passed: int = Field(..., alias="pass")
    fail: int
    warn: int
    total: int
    score: int = Field(..., description="Share of passed rules (0-100)")

    model_config = {"populate_by_name": True}


class OptimizationResponse(BaseModel):
    """Complete optimization response."""
    network: Dict[str, Any]
    savings: int
    iterations: int
    convergence_data: List[float]
    convergence_mode: str
    naive_cost: float
    warnings: List[str] = []
    recommendations: List[str] = []
    cost_breakdown: Dict[str, float]
    compliance: List[Dict[str, Any]]
    compliance_summary: ComplianceSummaryResponse
    cost_sanity_warning: str = ""
    codal_engine_name: str


class RunoffResponse(BaseModel):
    """Peak runoff for a catchment."""
    peak_runoff: float = Field(..., description="m³/s")
    rainfall_intensity: float = Field(..., description="mm/hr used")


class ComplianceResponse(BaseModel):
    """Compliance report for one generated network."""
    network: Dict[str, Any]
    nbc_compliant: bool
    compliance: List[Dict[str, Any]]
    compliance_summary: ComplianceSummaryResponse
    codal_engine_name: str
