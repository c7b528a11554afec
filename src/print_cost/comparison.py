"""Side-by-side comparison of cost scenarios."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from print_cost.calculator import CalculationRequest, CostBreakdown, CostEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scenario:
    """A named set of calculation inputs.

    Attributes:
        request: Inputs to calculate
        name: Display name; unnamed scenarios are called "Scenario N"
    """

    request: CalculationRequest
    name: Optional[str] = None


@dataclass(frozen=True)
class ScenarioResult:
    """One scenario's breakdown, ranked against the others.

    Attributes:
        index: Position of the scenario in the input list
        name: Scenario name
        breakdown: Cost breakdown of the scenario
        is_lowest: Whether the total equals the lowest total (ties all flagged)
        is_highest: Whether the total equals the highest total (ties all flagged)
        difference_from_lowest: total - lowest total
        percent_from_lowest: difference as a percentage of the lowest total
            (0 when the lowest total is not positive)
    """

    index: int
    name: str
    breakdown: CostBreakdown
    is_lowest: bool
    is_highest: bool
    difference_from_lowest: float
    percent_from_lowest: float

    @property
    def total(self) -> float:
        return self.breakdown.total


def compare_scenarios(
    scenarios: Sequence[Scenario], engine: Optional[CostEngine] = None
) -> List[ScenarioResult]:
    """
    Calculate every scenario and rank the totals.

    Args:
        scenarios: Scenarios to compare
        engine: Engine to calculate with (default: CostEngine with DEFAULT_CONFIG)

    Returns:
        One ScenarioResult per scenario, in input order. An empty input returns [].
        A single scenario is both lowest and highest.

    Examples:
        >>> results = compare_scenarios([Scenario(cheap, "PLA"), Scenario(pricey, "PETG")])
        >>> [r.name for r in results if r.is_lowest]
        ['PLA']
    """
    if not scenarios:
        return []

    engine = engine or CostEngine()
    breakdowns = [engine.calculate(scenario.request) for scenario in scenarios]

    totals = [b.total for b in breakdowns]
    min_total = min(totals)
    max_total = max(totals)
    logger.debug("compared %d scenarios, min=%.4f max=%.4f", len(totals), min_total, max_total)

    results = []
    for index, (scenario, breakdown) in enumerate(zip(scenarios, breakdowns)):
        difference = breakdown.total - min_total
        results.append(
            ScenarioResult(
                index=index,
                name=scenario.name or f"Scenario {index + 1}",
                breakdown=breakdown,
                is_lowest=breakdown.total == min_total,
                is_highest=breakdown.total == max_total,
                difference_from_lowest=difference,
                percent_from_lowest=(difference / min_total) * 100 if min_total > 0 else 0.0,
            )
        )
    return results
