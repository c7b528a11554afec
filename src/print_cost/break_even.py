"""Break-even quantity for selling prints."""

import logging
import math
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

UNPROFITABLE_MESSAGE = "selling price must exceed cost per unit"


@dataclass(frozen=True)
class BreakEvenResult:
    """Outcome of a break-even analysis.

    Attributes:
        profitable: Whether each unit sold earns a positive margin
        break_even_quantity: Units to sell before fixed costs are recovered
            (math.inf when not profitable)
        margin_per_unit: price_per_unit - cost_per_unit
        fixed_costs: One-time costs to recover
        cost_per_unit: Variable cost of one unit
        price_per_unit: Selling price of one unit
        message: Explanation when not profitable, else None
    """

    profitable: bool
    break_even_quantity: float
    margin_per_unit: float
    fixed_costs: float
    cost_per_unit: float
    price_per_unit: float
    message: Optional[str] = None


def analyze_break_even(
    fixed_costs: float, cost_per_unit: float, price_per_unit: float
) -> BreakEvenResult:
    """
    Find how many units must sell to recover fixed costs.

    Args:
        fixed_costs: One-time costs (design time, tooling, ...)
        cost_per_unit: Variable cost of one print, e.g. CostBreakdown.total
        price_per_unit: Selling price of one print

    Returns:
        BreakEvenResult. When the margin is not positive the result is
        unprofitable with an infinite quantity; this is a normal return value.

    Examples:
        >>> analyze_break_even(500.0, 2.0, 7.0).break_even_quantity
        100
        >>> analyze_break_even(500.0, 2.0, 1.0).profitable
        False
    """
    margin = price_per_unit - cost_per_unit

    if margin <= 0:
        logger.warning(
            "price %.4f does not exceed unit cost %.4f, no break-even point",
            price_per_unit,
            cost_per_unit,
        )
        return BreakEvenResult(
            profitable=False,
            break_even_quantity=math.inf,
            margin_per_unit=margin,
            fixed_costs=fixed_costs,
            cost_per_unit=cost_per_unit,
            price_per_unit=price_per_unit,
            message=UNPROFITABLE_MESSAGE,
        )

    return BreakEvenResult(
        profitable=True,
        break_even_quantity=math.ceil(fixed_costs / margin),
        margin_per_unit=margin,
        fixed_costs=fixed_costs,
        cost_per_unit=cost_per_unit,
        price_per_unit=price_per_unit,
    )
