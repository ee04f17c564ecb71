"""
Unit Tests for the Flood Risk Scorer.
"""

import random

from risk_scorer import flood_risk, risk_band


class TestFloodRisk:
    """Additive point model."""

    def test_reference_score(self):
        """Fill 0.4 (20) + rainfall 90/150 (15) + C 0.6 (9) = 44."""
        assert flood_risk(0.4, 1.0, 0.6, 90.0) == 44

    def test_low_velocity_adds_fifteen(self):
        assert flood_risk(0.4, 0.5, 0.6, 90.0) == 44 + 15

    def test_high_velocity_adds_ten(self):
        assert flood_risk(0.4, 2.8, 0.6, 90.0) == 44 + 10

    def test_fill_contribution_capped_at_forty(self):
        assert flood_risk(0.9, 1.0, 0.0, 0.0) == 40
        assert flood_risk(1.0, 1.0, 0.0, 0.0) == 40

    def test_rainfall_contribution_capped_at_twenty_five(self):
        assert flood_risk(0.0, 1.0, 0.0, 300.0) == 25

    def test_score_capped_at_one_hundred(self):
        """Out-of-range runoff coefficient is still clipped by the final cap."""
        assert flood_risk(1.0, 0.3, 2.0, 300.0) == 100

    def test_score_bounded_for_valid_inputs(self):
        rng = random.Random(7)
        for _ in range(500):
            score = flood_risk(
                rng.uniform(0.0, 0.79),
                rng.uniform(0.1, 4.0),
                rng.uniform(0.0, 1.0),
                rng.uniform(1.0, 250.0),
            )
            assert isinstance(score, int)
            assert 0 <= score <= 100


class TestRiskBand:

    def test_bands(self):
        assert risk_band(10) == "low"
        assert risk_band(30) == "moderate"
        assert risk_band(59) == "moderate"
        assert risk_band(60) == "high"
