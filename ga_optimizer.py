"""
Drainage Network Optimizer Module.

Stochastic search for a low-cost drainage network.

═══════════════════════════════════════════════════════════════════════════
CORE CONTRACT:
═══════════════════════════════════════════════════════════════════════════

- ALWAYS returns a network, even when zero generations run
- NEVER mutates a network returned by the generator
- Convergence trace has exactly one entry per executed generation
- Savings versus the naive estimate are never negative

This is NOT a textbook genetic algorithm. There is no population,
crossover or mutation. Each generation either keeps the retained network
or replaces it with a freshly generated one.

Convergence modes:
- "simulated" (default): the trace follows an exponential-decay model of
  a GA converging. A new network is generated whenever the simulated
  candidate cost undercuts the running best. The trace is NOT derived from
  the retained network's real cost.
- "actual": every generation prices a fresh network; the best real cost
  (₹ lakhs) is recorded in the trace.
═══════════════════════════════════════════════════════════════════════════
"""

import logging
import math
import random
from typing import Generator, List, Optional

from data_models import (
    CatchmentParams, DrainageNetwork, GenerationProgress, OptimizationResult
)
from design_config import DesignConfig, DEFAULT_CONFIG
from hydraulics import peak_runoff as calc_peak_runoff
from network_generator import NetworkGenerator, DEFAULT_NUM_PIPES
from cost_engine import estimate_naive_cost
from advisory_engine import check_catchment_warnings, build_recommendations

logger = logging.getLogger(__name__)


DEFAULT_GENERATIONS = 50

CONVERGENCE_SIMULATED = "simulated"
CONVERGENCE_ACTUAL = "actual"
CONVERGENCE_MODES = (CONVERGENCE_SIMULATED, CONVERGENCE_ACTUAL)

# Simulated convergence model
INITIAL_COST_PER_CUMEC = 800.0
INITIAL_COST_PER_PIPE = 2.5
DECAY_GENERATIONS = 15.0
IMPROVEMENT_STEP = 0.03
NOISE_AMPLITUDE = 0.025

# Floor for every trace entry
MIN_TRACE_COST = 0.5


class DrainageOptimizer:
    """
    Generation-budgeted search engine for drainage networks.

    This optimizer:
    - Uses NetworkGenerator to produce candidate networks
    - Retains the best candidate found
    - Reports progress after every generation (see iterate())
    - Derives savings, warnings and recommendations for the winner
    """

    def __init__(
        self,
        config: DesignConfig = DEFAULT_CONFIG,
        rng: Optional[random.Random] = None,
        convergence_mode: str = CONVERGENCE_SIMULATED,
    ):
        """
        Initialize optimizer.

        Args:
            config: DesignConfig shared with the generator
            rng: Random source for noise and network sampling
            convergence_mode: "simulated" or "actual"

        Raises:
            ValueError: If convergence_mode is unknown
        """
        if convergence_mode not in CONVERGENCE_MODES:
            raise ValueError(
                f"Unknown convergence mode: {convergence_mode}. "
                f"Expected one of {CONVERGENCE_MODES}"
            )

        self.config = config
        self.rng = rng if rng is not None else random.Random()
        self.convergence_mode = convergence_mode
        self.generator = NetworkGenerator(config=config, rng=self.rng)
        self._cancelled = False

    def cancel(self):
        """Stop the running search after the current generation."""
        self._cancelled = True

    def optimize(
        self,
        catchment: CatchmentParams,
        num_pipes: int = DEFAULT_NUM_PIPES,
        generations: int = DEFAULT_GENERATIONS,
    ) -> OptimizationResult:
        """
        Run the search to completion.

        Args:
            catchment: CatchmentParams for the basin
            num_pipes: Pipe segments per network
            generations: Generation budget

        Returns:
            OptimizationResult with the best network and metadata
        """
        steps = self.iterate(catchment, num_pipes, generations)
        while True:
            try:
                next(steps)
            except StopIteration as stop:
                return stop.value

    def iterate(
        self,
        catchment: CatchmentParams,
        num_pipes: int = DEFAULT_NUM_PIPES,
        generations: int = DEFAULT_GENERATIONS,
    ) -> Generator[GenerationProgress, None, OptimizationResult]:
        """
        Run the search one generation at a time.

        Returns a generator that yields a GenerationProgress after every
        generation. Its return value (StopIteration.value) is the
        OptimizationResult. A cancel() issued before the first step is
        honoured: no generation runs and the fallback network is returned.

        Args:
            catchment: CatchmentParams for the basin
            num_pipes: Pipe segments per network
            generations: Generation budget

        Raises:
            ValueError: If num_pipes < 1 or generations < 0
        """
        if num_pipes < 1:
            raise ValueError(f"num_pipes must be at least 1, got {num_pipes}")
        if generations < 0:
            raise ValueError(f"generations must be non-negative, got {generations}")

        # Reset here, not inside the generator body, which only starts on next()
        self._cancelled = False
        return self._search(catchment, num_pipes, generations)

    def _search(
        self,
        catchment: CatchmentParams,
        num_pipes: int,
        generations: int,
    ) -> Generator[GenerationProgress, None, OptimizationResult]:
        q_peak = calc_peak_runoff(catchment)
        convergence_data: List[float] = []
        best_cost = float('inf')
        best_network: Optional[DrainageNetwork] = None
        executed = 0

        logger.info(
            f"Optimizer start: Q={q_peak:.3f} m³/s, {num_pipes} pipes, "
            f"{generations} generations, mode={self.convergence_mode}"
        )

        for gen in range(generations):
            if self._cancelled:
                logger.info(f"Optimizer cancelled after {executed} generations")
                break

            if self.convergence_mode == CONVERGENCE_ACTUAL:
                candidate = self.generator.generate(catchment, num_pipes, q_peak)
                candidate_cost = candidate.total_cost
                improved = candidate_cost < best_cost
                if improved:
                    best_cost = candidate_cost
                    best_network = candidate
                convergence_data.append(max(MIN_TRACE_COST, best_cost))
            else:
                candidate_cost = self._simulated_candidate_cost(
                    gen, best_cost, q_peak, num_pipes
                )
                improved = candidate_cost < best_cost
                if improved:
                    best_cost = candidate_cost
                    best_network = self.generator.generate(catchment, num_pipes, q_peak)
                convergence_data.append(max(MIN_TRACE_COST, candidate_cost))

            executed += 1
            logger.debug(
                f"Generation {executed}/{generations}: candidate={candidate_cost:.2f}, "
                f"best={best_cost:.2f}, improved={improved}"
            )

            yield GenerationProgress(
                generation=executed,
                total_generations=generations,
                candidate_cost=candidate_cost,
                best_cost=best_cost,
                improved=improved,
            )

        # Fallback: the loop may not run at all
        network = best_network
        if network is None:
            network = self.generator.generate(catchment, num_pipes, q_peak)

        naive_cost = estimate_naive_cost(catchment, num_pipes)
        savings = self._calculate_savings(naive_cost, network.total_cost)

        warnings = [str(w) for w in check_catchment_warnings(catchment)]
        recommendations = [str(r) for r in build_recommendations(network)]

        logger.info(
            f"Optimizer finished: cost=₹{network.total_cost:.1f} lakhs, "
            f"savings={savings}%, nbc_compliant={network.nbc_compliant}"
        )

        return OptimizationResult(
            network=network,
            savings=savings,
            iterations=executed,
            convergence_data=convergence_data,
            warnings=warnings,
            recommendations=recommendations,
            naive_cost=round(naive_cost, 1),
            convergence_mode=self.convergence_mode,
        )

    def _simulated_candidate_cost(
        self,
        gen: int,
        best_cost: float,
        q_peak: float,
        num_pipes: int,
    ) -> float:
        """
        Candidate cost from the exponential-decay convergence model.

        The first candidate comes from a closed-form estimate; later ones
        shrink the running best by a decaying percentage plus noise.
        """
        noise = self.rng.random() * (2 * NOISE_AMPLITUDE) - NOISE_AMPLITUDE
        improvement = math.exp(-gen / DECAY_GENERATIONS)

        if math.isinf(best_cost):
            base = q_peak * INITIAL_COST_PER_CUMEC + num_pipes * INITIAL_COST_PER_PIPE
            return base * (1 + noise + improvement)

        return best_cost * (1 - improvement * IMPROVEMENT_STEP + noise)

    @staticmethod
    def _calculate_savings(naive_cost: float, actual_cost: float) -> int:
        """Percentage saving versus the naive estimate, floored at 0."""
        if naive_cost <= 0:
            return 0
        savings = round((naive_cost - actual_cost) / naive_cost * 100)
        return max(0, savings)
