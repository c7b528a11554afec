"""Shared arithmetic for spreading a purchase price over hours of use."""

from print_cost.config import MINUTES_PER_HOUR, WATTS_PER_KILOWATT


def per_hour_rate(price: float, lifetime_hours: float) -> float:
    """Spread a price linearly over an expected lifetime.

    Args:
        price: Purchase or unit price
        lifetime_hours: Expected operating lifetime in hours

    Returns:
        Cost per hour of use. A non-positive lifetime yields 0.0 rather than
        an error so that half-configured assets contribute nothing.

    Examples:
        >>> per_hour_rate(300.0, 5000.0)
        0.06
        >>> per_hour_rate(300.0, 0.0)
        0.0
    """
    if lifetime_hours <= 0:
        return 0.0
    return price / lifetime_hours


def cost_for_minutes(rate_per_hour: float, minutes: float) -> float:
    """Scale an hourly rate to a duration given in minutes."""
    return rate_per_hour * (minutes / MINUTES_PER_HOUR)


def usage_percentage(current_hours: float, lifetime_hours: float) -> float:
    """Share of lifetime already used, capped at 100 (0.0 for non-positive lifetimes)."""
    if lifetime_hours <= 0:
        return 0.0
    return min(100.0, (current_hours / lifetime_hours) * 100)


def energy_kwh(watts: float, minutes: float) -> float:
    """Energy drawn at a constant power over a duration.

    Examples:
        >>> energy_kwh(120.0, 60.0)
        0.12
    """
    return (watts / WATTS_PER_KILOWATT) * (minutes / MINUTES_PER_HOUR)
