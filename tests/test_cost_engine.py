"""
Unit Tests for the Cost Engine.

Reference figures are worked by hand from the Bengaluru schedule of rates.
"""

import pytest
from data_models import (
    CatchmentParams, DrainageNetwork, ManHole, ManholeRole, PipeMaterial,
    PipeSegment, SoilType, LandUse
)
from design_config import RateTable, DEFAULT_CONFIG
from cost_engine import (
    network_cost,
    cost_breakdown,
    pipe_rate_per_m,
    manhole_depth_class,
    estimate_naive_cost,
    check_cost_sanity,
    describe_rates,
    to_lakhs,
)


def make_pipe(diameter=300, material=PipeMaterial.PVC, length=50.0) -> PipeSegment:
    return PipeSegment(
        id="P-01", from_node="MH-00", to_node="MH-01",
        length=length, diameter=diameter, slope=1.0, material=material,
        velocity=1.2, flow_rate=0.05, fill_ratio=0.5, risk_score=30,
    )


def make_manhole(node_id: str, depth: float) -> ManHole:
    return ManHole(
        id=node_id, label=node_id, x=0.0, y=0.0,
        invert=900.0 - depth, rim=900.0, role=ManholeRole.JUNCTION,
    )


CATCHMENT = CatchmentParams(18.5, 0.65, 100.0, 1.2, SoilType.CLAY, LandUse.RESIDENTIAL)


class TestNetworkCost:
    """Itemised ₹ cost of pipes and manholes."""

    def setup_method(self):
        self.rates = DEFAULT_CONFIG.rates

    def test_single_pvc_pipe(self):
        """
        300 mm PVC, 50 m:
        pipe 980 x 50 = 49000
        trench 50 x 0.8 x 0.9 = 36 m³ x (350 + 180) = 19080
        labor 50 x 800 x 0.5 = 20000
        """
        assert network_cost([make_pipe()], [], self.rates) == pytest.approx(88080.0)

    def test_manholes_priced_by_depth_class(self):
        manholes = [make_manhole("MH-00", 1.0), make_manhole("MH-01", 2.0)]
        total = network_cost([make_pipe()], manholes, self.rates)
        assert total == pytest.approx(88080.0 + 18000.0 + 28000.0)

    def test_empty_network_costs_nothing(self):
        assert network_cost([], [], self.rates) == 0.0

    def test_cost_is_deterministic(self):
        pipes = [make_pipe(), make_pipe(450, PipeMaterial.RCC, 72.5)]
        assert network_cost(pipes, [], self.rates) == network_cost(pipes, [], self.rates)


class TestPipeRates:
    """Diameter-keyed rate lookup."""

    def test_exact_key(self):
        assert pipe_rate_per_m(make_pipe(300), DEFAULT_CONFIG.rates) == 980.0

    def test_rcc_uses_rcc_table_next_size_up(self):
        assert pipe_rate_per_m(make_pipe(350, PipeMaterial.RCC), DEFAULT_CONFIG.rates) == 1650.0

    def test_hdpe_priced_from_pvc_table(self):
        assert pipe_rate_per_m(make_pipe(350, PipeMaterial.HDPE), DEFAULT_CONFIG.rates) == 1450.0

    def test_oversize_uses_largest_key(self):
        assert pipe_rate_per_m(make_pipe(1300), DEFAULT_CONFIG.rates) == 13500.0

    def test_empty_table_uses_default_rate(self):
        rates = RateTable(pvc_pipe_per_m={})
        assert pipe_rate_per_m(make_pipe(300), rates) == 2000.0


class TestManholeDepthClass:

    @pytest.mark.parametrize("depth,expected", [
        (1.0, "shallow"),
        (1.5, "medium"),
        (2.9, "medium"),
        (3.0, "deep"),
        (4.2, "deep"),
    ])
    def test_depth_classes(self, depth, expected):
        assert manhole_depth_class(make_manhole("MH-00", depth)) == expected


class TestCostBreakdown:
    """Summary breakdown in ₹ lakhs."""

    def setup_method(self):
        pipes = [make_pipe(300, length=50.0), make_pipe(600, PipeMaterial.RCC, length=70.0)]
        manholes = [make_manhole(f"MH-0{i}", 2.0) for i in range(3)]
        self.network = DrainageNetwork(
            manholes=manholes,
            pipes=pipes,
            catchment=CATCHMENT,
            peak_runoff=3.34,
            total_pipe_length=120.0,
            total_cost=round(to_lakhs(network_cost(pipes, manholes)), 1),
            flood_risk_score=30,
            nbc_compliant=True,
        )

    def test_items_sum_to_total(self):
        b = cost_breakdown(self.network)
        items = b.pipe_material + b.manholes + b.excavation + b.backfill + b.labor
        assert items == pytest.approx(b.total, abs=0.3)

    def test_manholes_at_medium_rate(self):
        b = cost_breakdown(self.network)
        assert b.manholes == round(to_lakhs(3 * 28000.0), 1)

    def test_backfill_is_half_excavation(self):
        b = cost_breakdown(self.network)
        assert b.backfill == pytest.approx(b.excavation / 2, abs=0.1)

    def test_values_in_lakhs(self):
        """Pipe material: 980 x 50 + 4200 x 70 = ₹343000 = 3.4 lakhs."""
        assert cost_breakdown(self.network).pipe_material == 3.4


class TestNaiveEstimateAndSanity:

    def test_naive_estimate(self):
        assert estimate_naive_cost(CATCHMENT, 8) == pytest.approx(27778.0)

    def test_reasonable_cost_per_metre(self):
        network = DrainageNetwork(
            manholes=[], pipes=[], catchment=CATCHMENT, peak_runoff=0.0,
            total_pipe_length=400.0, total_cost=40.0, flood_risk_score=0,
            nbc_compliant=True,
        )
        assert check_cost_sanity(network) == (True, "")

    def test_unreasonable_cost_per_metre_warns(self):
        network = DrainageNetwork(
            manholes=[], pipes=[], catchment=CATCHMENT, peak_runoff=0.0,
            total_pipe_length=400.0, total_cost=0.01, flood_risk_score=0,
            nbc_compliant=True,
        )
        is_reasonable, warning = check_cost_sanity(network)
        assert not is_reasonable
        assert "WARNING" in warning

    def test_describe_rates_lists_manhole_classes(self):
        lines = describe_rates(DEFAULT_CONFIG.rates)
        assert any("shallow" in line and "deep" in line for line in lines)
