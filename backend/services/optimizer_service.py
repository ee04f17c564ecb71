"""
Optimizer Service Module.

Extracts core optimization logic into a reusable service.
Used by both CLI (main.py) and API (api.py).
"""

import logging
import random
from typing import Dict, Any, Optional

from data_models import (
    CatchmentParams, DrainageNetwork, SoilType, LandUse, OptimizationResult
)
from design_config import DesignConfig, DEFAULT_CONFIG
from hydraulics import peak_runoff, design_rainfall_intensity
from ga_optimizer import DrainageOptimizer, CONVERGENCE_SIMULATED, DEFAULT_GENERATIONS
from network_generator import NetworkGenerator, DEFAULT_NUM_PIPES
from cost_engine import cost_breakdown, check_cost_sanity
from codal_engine import NBCEngine, summarize

logger = logging.getLogger(__name__)


def parse_soil_type(soil_str: str) -> SoilType:
    """Parse soil type string."""
    try:
        return SoilType(soil_str.lower().strip())
    except ValueError:
        raise ValueError(f"Unknown soil type: {soil_str}") from None


def parse_land_use(land_use_str: str) -> LandUse:
    """Parse land use string."""
    try:
        return LandUse(land_use_str.lower().strip())
    except ValueError:
        raise ValueError(f"Unknown land use: {land_use_str}") from None


def parse_catchment(
    input_dict: Dict[str, Any],
    config: DesignConfig = DEFAULT_CONFIG,
) -> CatchmentParams:
    """
    Parse input dictionary into CatchmentParams.

    Args:
        input_dict: Dictionary with keys:
            - area: float (ha, > 0)
            - runoff_coeff: float (0-1)
            - rainfall_intensity: float (mm/hr, optional if ward given)
            - ward: str (optional)
            - slope: float (%, > 0)
            - soil_type: str
            - land_use: str
        config: DesignConfig with IMD rainfall reference

    Returns:
        CatchmentParams

    Raises:
        ValueError: If a value is missing or out of range
    """
    for key in ("area", "runoff_coeff", "slope", "soil_type", "land_use"):
        if input_dict.get(key) is None:
            raise ValueError(f"Missing required catchment field: {key}")

    area = float(input_dict["area"])
    if area <= 0:
        raise ValueError(f"Catchment area must be positive, got {area}")

    runoff_coeff = float(input_dict["runoff_coeff"])
    if not 0.0 <= runoff_coeff <= 1.0:
        raise ValueError(f"Runoff coefficient must be between 0 and 1, got {runoff_coeff}")

    slope = float(input_dict["slope"])
    if slope <= 0:
        raise ValueError(f"Slope must be positive, got {slope}")

    rainfall = input_dict.get("rainfall_intensity")
    if rainfall is None:
        rainfall = design_rainfall_intensity(input_dict.get("ward"), config)
    rainfall = float(rainfall)
    if rainfall <= 0:
        raise ValueError(f"Rainfall intensity must be positive, got {rainfall}")

    return CatchmentParams(
        area=area,
        runoff_coeff=runoff_coeff,
        rainfall_intensity=rainfall,
        slope=slope,
        soil_type=parse_soil_type(input_dict["soil_type"]),
        land_use=parse_land_use(input_dict["land_use"]),
    )


def compliance_section(
    network: DrainageNetwork,
    config: DesignConfig = DEFAULT_CONFIG,
) -> Dict[str, Any]:
    """NBC checks, verdict summary and engine name for one network."""
    engine = NBCEngine(config)
    checks = engine.evaluate(network)
    return {
        "compliance": [c.to_dict() for c in checks],
        "compliance_summary": summarize(checks),
        "codal_engine_name": engine.standard_name,
    }


def _parse_num_pipes(input_dict: Dict[str, Any]) -> int:
    num_pipes = input_dict.get("num_pipes")
    num_pipes = DEFAULT_NUM_PIPES if num_pipes is None else int(num_pipes)
    if num_pipes < 1:
        raise ValueError(f"num_pipes must be at least 1, got {num_pipes}")
    return num_pipes


def build_report(
    result: OptimizationResult,
    config: DesignConfig = DEFAULT_CONFIG,
) -> Dict[str, Any]:
    """
    Combine optimizer result, cost breakdown and compliance into one dict.

    Args:
        result: OptimizationResult
        config: DesignConfig used for the run

    Returns:
        JSON-ready dictionary
    """
    breakdown = cost_breakdown(result.network, config.rates)
    _, sanity_warning = check_cost_sanity(result.network)

    report = result.to_dict()
    report.update(compliance_section(result.network, config))
    report.update({
        "cost_breakdown": breakdown.to_dict(),
        "cost_sanity_warning": sanity_warning,
    })
    return report


def run_optimization(
    input_dict: Dict[str, Any],
    config: DesignConfig = DEFAULT_CONFIG,
) -> Dict[str, Any]:
    """
    Run a complete optimization from a plain input dictionary.

    Args:
        input_dict: Dictionary with keys:
            - catchment: dict (see parse_catchment)
            - num_pipes: int (optional, default 8)
            - generations: int (optional, default 50)
            - seed: int (optional)
            - convergence_mode: str (optional, "simulated" or "actual")
        config: DesignConfig

    Returns:
        Report dictionary (see build_report)

    Raises:
        ValueError: If inputs are invalid
    """
    catchment = parse_catchment(input_dict.get("catchment") or {}, config)

    num_pipes = _parse_num_pipes(input_dict)

    generations = input_dict.get("generations")
    generations = DEFAULT_GENERATIONS if generations is None else int(generations)
    if generations < 0:
        raise ValueError(f"generations must be non-negative, got {generations}")

    seed: Optional[int] = input_dict.get("seed")
    mode = input_dict.get("convergence_mode") or CONVERGENCE_SIMULATED

    optimizer = DrainageOptimizer(
        config=config,
        rng=random.Random(seed),
        convergence_mode=mode,
    )

    logger.info(
        f"Running optimization: area={catchment.area} ha, C={catchment.runoff_coeff}, "
        f"I={catchment.rainfall_intensity} mm/hr, seed={seed}"
    )
    result = optimizer.optimize(catchment, num_pipes=num_pipes, generations=generations)

    return build_report(result, config)


def run_runoff(
    input_dict: Dict[str, Any],
    config: DesignConfig = DEFAULT_CONFIG,
) -> Dict[str, float]:
    """
    Peak runoff for a catchment dictionary.

    Returns:
        Dictionary with peak_runoff (m³/s) and rainfall_intensity (mm/hr)
    """
    catchment = parse_catchment(input_dict, config)
    return {
        "peak_runoff": round(peak_runoff(catchment), 3),
        "rainfall_intensity": catchment.rainfall_intensity,
    }


def run_compliance(
    input_dict: Dict[str, Any],
    config: DesignConfig = DEFAULT_CONFIG,
) -> Dict[str, Any]:
    """
    Generate a single network for a catchment and check it, without searching.

    Args:
        input_dict: Dictionary with keys:
            - catchment: dict (see parse_catchment)
            - num_pipes: int (optional, default 8)
            - seed: int (optional)
        config: DesignConfig

    Returns:
        Dictionary with network, nbc_compliant, compliance,
        compliance_summary and codal_engine_name

    Raises:
        ValueError: If inputs are invalid
    """
    catchment = parse_catchment(input_dict.get("catchment") or {}, config)
    num_pipes = _parse_num_pipes(input_dict)

    generator = NetworkGenerator(config=config, rng=random.Random(input_dict.get("seed")))
    network = generator.generate(catchment, num_pipes)

    report = {
        "network": network.to_dict(),
        "nbc_compliant": network.nbc_compliant,
    }
    report.update(compliance_section(network, config))
    return report
