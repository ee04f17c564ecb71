"""
Hydraulic Formula Library.

Pure functions for stormwater pipe sizing:
- Rational Method peak runoff (IS:1172 / NBC 2016 Part 9)
- Manning's equation for part-full circular pipes
- Standard diameter and material selection

These functions have NO side effects and NO randomness.
"""

import logging
import math
from typing import Optional

from data_models import CatchmentParams, PipeMaterial, SoilType
from design_config import DesignConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)


DEFAULT_ROUGHNESS = 0.013  # Manning's n, PVC / RCC
DESIGN_FILL_RATIO = 0.8  # NBC maximum, used for capacity checks

# Q [m³/s] = C * I [mm/hr] * A [ha] / 360
RATIONAL_METHOD_FACTOR = 360.0


def peak_runoff(params: CatchmentParams) -> float:
    """
    Peak runoff by the Rational Method.

    Args:
        params: CatchmentParams (area in ha, intensity in mm/hr)

    Returns:
        Peak flow in m³/s. Zero area gives zero flow.
    """
    return (params.runoff_coeff * params.rainfall_intensity * params.area) / RATIONAL_METHOD_FACTOR


def _wetted_section(diameter_mm: float, fill_ratio: float):
    """
    Wetted area (m²) and hydraulic radius (m) of a part-full circular pipe.

    Raises:
        ValueError: If fill_ratio is not strictly between 0 and 1
    """
    if not 0.0 < fill_ratio < 1.0:
        raise ValueError(f"fill_ratio must be strictly between 0 and 1, got {fill_ratio}")

    d = diameter_mm / 1000.0
    theta = 2.0 * math.acos(1.0 - 2.0 * fill_ratio)  # wetted central angle
    area = (d * d / 8.0) * (theta - math.sin(theta))
    perimeter = (d / 2.0) * theta
    return area, area / perimeter


def pipe_velocity_at_fill(
    diameter_mm: float,
    slope_pct: float,
    fill_ratio: float = DESIGN_FILL_RATIO,
    roughness: float = DEFAULT_ROUGHNESS,
) -> float:
    """
    Mean flow velocity by Manning's equation.

    V = (1/n) * R^(2/3) * S^(1/2)

    Args:
        diameter_mm: Internal diameter in mm
        slope_pct: Longitudinal slope in percent
        fill_ratio: Flow depth / diameter, strictly between 0 and 1
        roughness: Manning's n

    Returns:
        Velocity in m/s
    """
    _, hydraulic_radius = _wetted_section(diameter_mm, fill_ratio)
    s = slope_pct / 100.0
    return (1.0 / roughness) * math.pow(hydraulic_radius, 2.0 / 3.0) * math.sqrt(s)


def pipe_full_flow_at_fill(
    diameter_mm: float,
    slope_pct: float,
    fill_ratio: float = DESIGN_FILL_RATIO,
    roughness: float = DEFAULT_ROUGHNESS,
) -> float:
    """
    Pipe discharge capacity at the given fill ratio.

    Q = V * A

    Returns:
        Flow in m³/s
    """
    area, hydraulic_radius = _wetted_section(diameter_mm, fill_ratio)
    s = slope_pct / 100.0
    return (1.0 / roughness) * area * math.pow(hydraulic_radius, 2.0 / 3.0) * math.sqrt(s)


def select_pipe_diameter(
    required_flow: float,
    slope_pct: float,
    config: DesignConfig = DEFAULT_CONFIG,
) -> int:
    """
    Smallest standard diameter that carries the flow within velocity limits.

    Slope is floored at the NBC minimum. If no catalog size satisfies
    capacity AND both velocity limits, the largest catalog size is returned.
    That fallback is not an error: the network's compliance flag reports it.

    Args:
        required_flow: Design flow in m³/s
        slope_pct: Pipe slope in percent
        config: DesignConfig with diameter catalog and NBC limits

    Returns:
        Diameter in mm (always a catalog member)
    """
    limits = config.constraints
    slope = max(slope_pct, limits.min_slope)

    for diameter in config.diameters:
        capacity = pipe_full_flow_at_fill(diameter, slope)
        velocity = pipe_velocity_at_fill(diameter, slope)
        if (capacity >= required_flow
                and limits.min_velocity <= velocity <= limits.max_velocity):
            return diameter

    fallback = max(config.diameters)
    logger.debug(
        f"No standard diameter satisfies Q={required_flow:.4f} m³/s at S={slope:.2f}%. "
        f"Falling back to {fallback} mm"
    )
    return fallback


def select_material(diameter_mm: float, slope_pct: float, soil_type: SoilType) -> PipeMaterial:
    """
    Pipe material decision table.

    - Small pipes on gentle slopes: PVC
    - Medium pipes outside rocky ground: HDPE
    - Everything else: RCC
    """
    if diameter_mm <= 300 and slope_pct < 5:
        return PipeMaterial.PVC
    if diameter_mm <= 450 and soil_type != SoilType.ROCKY:
        return PipeMaterial.HDPE
    return PipeMaterial.RCC


def design_rainfall_intensity(
    ward: Optional[str] = None,
    config: DesignConfig = DEFAULT_CONFIG,
) -> float:
    """
    IMD design storm intensity adjusted for the ward's micro-watershed.

    Args:
        ward: Ward / zone name (case-insensitive). None uses the city average.
        config: DesignConfig with rainfall reference data

    Returns:
        Rainfall intensity in mm/hr
    """
    rainfall = config.rainfall
    if ward is None:
        return rainfall.monsoon_avg

    multiplier = rainfall.ward_adjustments.get(ward.lower().strip())
    if multiplier is None:
        logger.warning(f"Unknown ward '{ward}'. Using city-wide design storm.")
        multiplier = 1.0
    return rainfall.monsoon_avg * multiplier
