"""Depreciation and energy cost of printing on a printer.

The functions accept any asset exposing ``purchase_price`` and
``estimated_lifetime_hours`` (a Printer or an AuxiliaryModule). None of them
raise: an asset with a non-positive lifetime simply depreciates at 0 per hour.
"""

from typing import Protocol

from print_cost.models.amortization import cost_for_minutes, energy_kwh, per_hour_rate
from print_cost.models.printer import Printer


class DepreciatingAsset(Protocol):
    """Anything with a purchase price spread over a lifetime in hours."""

    purchase_price: float
    estimated_lifetime_hours: float


def depreciation_per_hour(asset: DepreciatingAsset) -> float:
    """Calculate the hourly depreciation of an asset.

    Args:
        asset: Printer, AuxiliaryModule or any other depreciating asset

    Returns:
        purchase_price / estimated_lifetime_hours, or 0.0 when the lifetime
        is not positive

    Examples:
        >>> depreciation_per_hour(Printer(purchase_price=300.0, estimated_lifetime_hours=5000.0))
        0.06
    """
    return per_hour_rate(asset.purchase_price, asset.estimated_lifetime_hours)


def depreciation_cost(asset: DepreciatingAsset, minutes: float) -> float:
    """Depreciation of an asset over a print of the given duration in minutes."""
    return cost_for_minutes(depreciation_per_hour(asset), minutes)


def electricity_cost(printer: Printer, minutes: float, rate_per_kwh: float) -> float:
    """
    Calculate the electricity cost of printing for a duration.

    The power draw is the printer's printing draw plus the working draw of its
    auxiliary module, if one is attached.

    Args:
        printer: Printer doing the work
        minutes: Print time in minutes
        rate_per_kwh: Electricity price per kWh

    Returns:
        Cost of the energy used

    Examples:
        >>> electricity_cost(Printer(printing_watts=120.0), 60.0, 0.15)
        0.018
    """
    return energy_kwh(printer.total_power_watts(), minutes) * rate_per_kwh


def total_depreciation_cost(printer: Printer, minutes: float) -> float:
    """Printer depreciation plus auxiliary module depreciation (if attached)."""
    cost = depreciation_cost(printer, minutes)
    if printer.auxiliary is not None:
        cost += depreciation_cost(printer.auxiliary, minutes)
    return cost
