"""
Flood Risk Scorer.

Additive point model giving each pipe segment a 0-100 flood risk score.
This is an ADVISORY heuristic, not a probability of flooding.

Point allocation:
- Fill ratio:            up to 40
- Velocity out of band:  15 (below self-cleansing) / 10 (above erosion threshold)
- Rainfall intensity:    up to 25, scaled against the IMD extreme event
- Runoff coefficient:    up to 15
"""

from design_config import DesignConfig, DEFAULT_CONFIG


SELF_CLEANSING_VELOCITY = 0.6  # m/s
EROSION_VELOCITY = 2.5  # m/s, scoring threshold (below the 3.0 m/s NBC limit)

LOW_RISK_LIMIT = 30
HIGH_RISK_LIMIT = 60


def flood_risk(
    fill_ratio: float,
    velocity: float,
    runoff_coeff: float,
    rainfall_intensity: float,
    config: DesignConfig = DEFAULT_CONFIG,
) -> int:
    """
    Score flood risk for one pipe segment.

    Args:
        fill_ratio: Required flow / capacity (0-1)
        velocity: Flow velocity in m/s
        runoff_coeff: Catchment C factor
        rainfall_intensity: Design rainfall in mm/hr
        config: DesignConfig (extreme event intensity)

    Returns:
        Integer score capped at 100
    """
    score = min(40.0, fill_ratio * 50.0)

    if velocity < SELF_CLEANSING_VELOCITY:
        score += 15
    if velocity > EROSION_VELOCITY:
        score += 10

    score += min(25.0, (rainfall_intensity / config.rainfall.extreme_event) * 25.0)
    score += runoff_coeff * 15.0

    return min(100, round(score))


def risk_band(score: float) -> str:
    """Classify a risk score as 'low', 'moderate' or 'high'."""
    if score < LOW_RISK_LIMIT:
        return "low"
    if score < HIGH_RISK_LIMIT:
        return "moderate"
    return "high"
