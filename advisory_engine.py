"""
Design Advisory Engine.

Produces warnings about the catchment and recommendations for the selected
network.

CRITICAL PRINCIPLES:
- NEVER rejects a network
- Warnings are driven by the catchment inputs only
- Recommendations reference the winning network

These are advisories for the design engineer, not compliance verdicts.
"""

from typing import List

from data_models import CatchmentParams, DrainageNetwork


EXTREME_RAINFALL_LIMIT = 120.0  # mm/hr
HIGH_IMPERVIOUSNESS_LIMIT = 0.75  # runoff coefficient
FLAT_TERRAIN_SLOPE = 0.5  # %
RETENTION_BASIN_AREA = 20.0  # ha


class Advisory:
    """Represents a single advisory message."""

    def __init__(self, message: str, severity: str = "advisory"):
        """
        Initialize advisory.

        Args:
            message: Human-readable message
            severity: "warning" or "advisory"
        """
        self.message = message
        self.severity = severity

    def __str__(self):
        return self.message


def check_catchment_warnings(catchment: CatchmentParams) -> List[Advisory]:
    """
    Static threshold checks on the catchment inputs.

    Args:
        catchment: CatchmentParams

    Returns:
        List of Advisory objects with severity "warning"
    """
    warnings = []

    if catchment.rainfall_intensity > EXTREME_RAINFALL_LIMIT:
        warnings.append(Advisory(
            "Extreme rainfall intensity – consider detention pond.", "warning"
        ))

    if catchment.runoff_coeff > HIGH_IMPERVIOUSNESS_LIMIT:
        warnings.append(Advisory(
            "High imperviousness – bioretention cells recommended.", "warning"
        ))

    if catchment.slope < FLAT_TERRAIN_SLOPE:
        warnings.append(Advisory(
            "Flat terrain – check minimum self-cleansing velocity.", "warning"
        ))

    return warnings


def build_recommendations(network: DrainageNetwork) -> List[Advisory]:
    """
    Template recommendations for the selected network.

    Args:
        network: Winning DrainageNetwork

    Returns:
        List of Advisory objects
    """
    trunk_material = network.pipes[0].material.value if network.pipes else "RCC"

    recommendations = [
        Advisory(f"Use {trunk_material} pipes for primary trunk."),
        Advisory("Install flap gates at outlet to prevent backflow during peak monsoon."),
    ]

    if network.catchment.area > RETENTION_BASIN_AREA:
        recommendations.append(Advisory(
            f"Consider retention basin for catchment >{RETENTION_BASIN_AREA:.0f} ha."
        ))

    return recommendations


def format_advisories(title: str, advisories: List[Advisory]) -> str:
    """
    Format advisories for display.

    Args:
        title: Section heading
        advisories: List of Advisory objects

    Returns:
        Formatted string for display
    """
    if not advisories:
        return f"No {title.lower()} identified."

    lines = []
    lines.append("=" * 70)
    lines.append(title.upper())
    lines.append("=" * 70)

    for i, advisory in enumerate(advisories, 1):
        tag = "[WARNING] " if advisory.severity == "warning" else ""
        lines.append(f"{i}. {tag}{advisory.message}")

    lines.append("=" * 70)

    return "\n".join(lines)
