"""
Unit Tests for the Design Advisory Engine.
"""

import random

from data_models import CatchmentParams, SoilType, LandUse
from network_generator import NetworkGenerator
from advisory_engine import (
    Advisory, check_catchment_warnings, build_recommendations, format_advisories
)


class TestCatchmentWarnings:

    def test_benign_catchment(self):
        catchment = CatchmentParams(10.0, 0.6, 100.0, 1.2, SoilType.CLAY, LandUse.RESIDENTIAL)
        assert check_catchment_warnings(catchment) == []

    def test_all_thresholds_tripped(self):
        catchment = CatchmentParams(10.0, 0.8, 130.0, 0.4, SoilType.CLAY, LandUse.COMMERCIAL)
        warnings = check_catchment_warnings(catchment)
        assert len(warnings) == 3
        assert all(w.severity == "warning" for w in warnings)
        assert str(warnings[0]) == "Extreme rainfall intensity – consider detention pond."


class TestRecommendations:

    def test_trunk_material_and_retention_basin(self):
        catchment = CatchmentParams(25.0, 0.6, 100.0, 1.2, SoilType.CLAY, LandUse.MIXED)
        network = NetworkGenerator(rng=random.Random(9)).generate(catchment, 4)
        messages = [str(r) for r in build_recommendations(network)]

        assert messages[0] == f"Use {network.pipes[0].material.value} pipes for primary trunk."
        assert any("retention basin" in m for m in messages)
        assert all(r.severity == "advisory" for r in build_recommendations(network))


class TestFormatAdvisories:

    def test_empty(self):
        assert format_advisories("Warnings", []) == "No warnings identified."

    def test_warning_severity_is_tagged(self):
        text = format_advisories("Mixed", [
            Advisory("Flat terrain.", "warning"),
            Advisory("Install flap gates."),
        ])
        assert "1. [WARNING] Flat terrain." in text
        assert "2. Install flap gates." in text
        assert text.splitlines()[1] == "MIXED"
