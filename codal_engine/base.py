"""
Base Compliance Engine Abstract Class.

This defines the interface that all drainage compliance engines implement.
The compliance engine is responsible ONLY for code checks: no sizing,
no cost considerations.
"""

from abc import ABC, abstractmethod
from typing import Dict, List

from data_models import ComplianceCheck, ComplianceStatus, DrainageNetwork


class ComplianceEngine(ABC):
    """
    Abstract base class for drainage compliance engines.

    RESPONSIBILITIES:
    - Evaluate a finished network against a fixed battery of clauses
    - Report every clause, whatever the outcome

    NOT RESPONSIBLE FOR:
    - Pipe sizing
    - Cost calculations
    - Network generation
    """

    def __init__(self, standard_name: str):
        """
        Initialize compliance engine.

        Args:
            standard_name: Human-readable name of the governing codes
        """
        self.standard_name = standard_name

    @abstractmethod
    def evaluate(self, network: DrainageNetwork) -> List[ComplianceCheck]:
        """
        Evaluate a network against every rule of the engine.

        Rules are independent and always all returned, in a stable order.

        Args:
            network: DrainageNetwork to evaluate

        Returns:
            List of ComplianceCheck

        Note:
            This method is deterministic and has no side effects.
        """
        pass

    def _require_pipes(self, network: DrainageNetwork):
        if not network.pipes:
            raise ValueError("Cannot evaluate compliance of a network with no pipes")

    @staticmethod
    def _mean_velocity(network: DrainageNetwork) -> float:
        return sum(p.velocity for p in network.pipes) / len(network.pipes)

    @staticmethod
    def _max_fill_ratio(network: DrainageNetwork) -> float:
        return max(p.fill_ratio for p in network.pipes)

    @staticmethod
    def _min_diameter(network: DrainageNetwork) -> int:
        return min(p.diameter for p in network.pipes)

    @staticmethod
    def _mean_slope(network: DrainageNetwork) -> float:
        return sum(p.slope for p in network.pipes) / len(network.pipes)

    @staticmethod
    def _verdict(passed: bool, on_failure: ComplianceStatus = ComplianceStatus.FAIL) -> ComplianceStatus:
        return ComplianceStatus.PASS if passed else on_failure


def summarize(checks: List[ComplianceCheck]) -> Dict[str, int]:
    """
    Count verdicts and compute the share of passed rules.

    Args:
        checks: Result of ComplianceEngine.evaluate()

    Returns:
        Dictionary with pass / fail / warn counts, total and score (0-100)
    """
    counts = {status.value: 0 for status in ComplianceStatus}
    for check in checks:
        counts[check.status.value] += 1

    total = len(checks)
    counts["total"] = total
    counts["score"] = round(counts["pass"] / total * 100) if total else 0
    return counts
