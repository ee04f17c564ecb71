"""
Backend models package.
"""

from backend.models.request import CatchmentRequest, ComplianceRequest, OptimizationRequest
from backend.models.response import (
    ComplianceResponse, ComplianceSummaryResponse, OptimizationResponse, RunoffResponse
)

__all__ = [
    "CatchmentRequest",
    "ComplianceRequest",
    "OptimizationRequest",
    "ComplianceResponse",
    "ComplianceSummaryResponse",
    "OptimizationResponse",
    "RunoffResponse",
]
