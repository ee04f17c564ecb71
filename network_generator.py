"""
Network Generator Module.

Builds a linear (non-branching) trunk of manholes and pipe segments for a
catchment and sizes every segment with the hydraulic formula library.

Generation is stochastic: manhole layout jitter, segment slope and segment
length are sampled from the injected random source. Repeated calls with the
same inputs produce different networks, which is the variation the optimizer
exploits. Pass a seeded random.Random for reproducible output.
"""

import logging
import random
from typing import List, Optional

from data_models import (
    CatchmentParams, DrainageNetwork, ManHole, ManholeRole, PipeSegment
)
from design_config import DesignConfig, DEFAULT_CONFIG
from hydraulics import (
    peak_runoff as calc_peak_runoff,
    pipe_full_flow_at_fill,
    pipe_velocity_at_fill,
    select_material,
    select_pipe_diameter,
)
from risk_scorer import flood_risk
from cost_engine import network_cost, to_lakhs

logger = logging.getLogger(__name__)


DEFAULT_NUM_PIPES = 8

# Layout (drawing units, not hydraulically meaningful)
LAYOUT_COLUMNS = 4
LAYOUT_ORIGIN = 100.0
LAYOUT_COLUMN_SPACING = 160.0
LAYOUT_ROW_SPACING = 140.0
LAYOUT_X_JITTER = 40.0
LAYOUT_Y_JITTER = 30.0

# Elevations (m)
INVERT_START = 900.0
INVERT_DROP_PER_MANHOLE = 1.2
INVERT_JITTER = 0.5
RIM_START = 903.0
RIM_DROP_PER_MANHOLE = 1.0

# Segment sampling
FLOW_DECAY_PER_SEGMENT = 0.05
SLOPE_JITTER = 0.5  # %
SEGMENT_LENGTH_RANGE = (30.0, 80.0)  # m

# Fill ratio cap, one percent below the NBC maximum of 0.80
FILL_RATIO_CAP = 0.79


def _node_id(index: int) -> str:
    return f"MH-{index:02d}"


def _pipe_id(index: int) -> str:
    return f"P-{index + 1:02d}"


def is_pipe_compliant(pipe: PipeSegment, config: DesignConfig = DEFAULT_CONFIG) -> bool:
    """Velocity band, fill ratio and minimum diameter for one pipe."""
    limits = config.constraints
    return (
        limits.min_velocity <= pipe.velocity <= limits.max_velocity
        and pipe.fill_ratio <= limits.max_fill_ratio
        and pipe.diameter >= limits.min_pipe_dia
    )


class NetworkGenerator:
    """
    Generates sized drainage networks.

    Each call to generate() is independent. The generator holds no state
    other than its configuration and random source.
    """

    def __init__(
        self,
        config: DesignConfig = DEFAULT_CONFIG,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize generator.

        Args:
            config: DesignConfig with NBC limits, rate table and diameters
            rng: Random source (a fresh unseeded random.Random if None)
        """
        self.config = config
        self.rng = rng if rng is not None else random.Random()

    def generate(
        self,
        catchment: CatchmentParams,
        num_pipes: int = DEFAULT_NUM_PIPES,
        peak_runoff: Optional[float] = None,
    ) -> DrainageNetwork:
        """
        Generate one candidate network.

        Args:
            catchment: CatchmentParams for the basin
            num_pipes: Number of pipe segments N (N + 1 manholes)
            peak_runoff: Precomputed peak runoff in m³/s (computed if None)

        Returns:
            DrainageNetwork

        Raises:
            ValueError: If num_pipes < 1
        """
        if num_pipes < 1:
            raise ValueError(f"num_pipes must be at least 1, got {num_pipes}")

        if peak_runoff is None:
            peak_runoff = calc_peak_runoff(catchment)

        manholes = self._place_manholes(num_pipes)
        pipes: List[PipeSegment] = []

        for i in range(num_pipes):
            pipe = self._size_segment(i, catchment, peak_runoff, manholes[i], manholes[i + 1])
            pipes.append(pipe)

            # Last segment processed wins for shared manholes
            manholes[i].flood_risk = pipe.risk_score
            manholes[i + 1].flood_risk = pipe.risk_score

        total_pipe_length = sum(p.length for p in pipes)
        total_cost = to_lakhs(network_cost(pipes, manholes, self.config.rates))
        flood_risk_score = round(sum(p.risk_score for p in pipes) / len(pipes))
        nbc_compliant = all(is_pipe_compliant(p, self.config) for p in pipes)

        if not nbc_compliant:
            logger.debug(
                f"Generated network with {num_pipes} pipes is not NBC compliant"
            )

        return DrainageNetwork(
            manholes=manholes,
            pipes=pipes,
            catchment=catchment,
            peak_runoff=round(peak_runoff, 3),
            total_pipe_length=round(total_pipe_length),
            total_cost=round(total_cost, 1),
            flood_risk_score=flood_risk_score,
            nbc_compliant=nbc_compliant,
        )

    def _place_manholes(self, num_pipes: int) -> List[ManHole]:
        """
        Lay out N + 1 manholes on a 4-column raster.

        Inverts fall monotonically downstream so every segment has a gravity
        fall; rims stay above inverts.
        """
        manholes = []
        for i in range(num_pipes + 1):
            if i == 0:
                role = ManholeRole.INLET
            elif i == num_pipes:
                role = ManholeRole.OUTLET
            else:
                role = ManholeRole.JUNCTION

            node_id = _node_id(i)
            manholes.append(ManHole(
                id=node_id,
                label=node_id,
                x=LAYOUT_ORIGIN + (i % LAYOUT_COLUMNS) * LAYOUT_COLUMN_SPACING
                + self.rng.random() * LAYOUT_X_JITTER,
                y=LAYOUT_ORIGIN + (i // LAYOUT_COLUMNS) * LAYOUT_ROW_SPACING
                + self.rng.random() * LAYOUT_Y_JITTER,
                invert=INVERT_START - i * INVERT_DROP_PER_MANHOLE
                - self.rng.random() * INVERT_JITTER,
                rim=RIM_START - i * RIM_DROP_PER_MANHOLE,
                role=role,
                flood_risk=0,
            ))
        return manholes

    def _size_segment(
        self,
        index: int,
        catchment: CatchmentParams,
        peak_runoff: float,
        upstream: ManHole,
        downstream: ManHole,
    ) -> PipeSegment:
        """Sample slope and length, then size one segment."""
        limits = self.config.constraints

        # Simplified downstream attenuation of contributing flow
        segment_flow = max(0.0, peak_runoff * (1 - index * FLOW_DECAY_PER_SEGMENT))
        slope = min(
            limits.max_slope,
            max(catchment.slope, limits.min_slope) + self.rng.random() * SLOPE_JITTER,
        )

        diameter = select_pipe_diameter(segment_flow, slope, self.config)
        material = select_material(diameter, slope, catchment.soil_type)
        velocity = pipe_velocity_at_fill(diameter, slope)
        flow_rate = pipe_full_flow_at_fill(diameter, slope)
        fill_ratio = min(FILL_RATIO_CAP, segment_flow / flow_rate)
        length = self.rng.uniform(*SEGMENT_LENGTH_RANGE)

        risk_score = flood_risk(
            fill_ratio,
            velocity,
            catchment.runoff_coeff,
            catchment.rainfall_intensity,
            self.config,
        )

        return PipeSegment(
            id=_pipe_id(index),
            from_node=upstream.id,
            to_node=downstream.id,
            length=length,
            diameter=diameter,
            slope=slope,
            material=material,
            velocity=round(velocity, 2),
            flow_rate=round(flow_rate, 4),
            fill_ratio=round(fill_ratio, 2),
            risk_score=risk_score,
        )
