"""Entity models for print cost calculation.

This package contains the printer, filament, consumable and print job models
together with their shared amortization helpers.
"""

from print_cost.models.amortization import (
    cost_for_minutes,
    energy_kwh,
    per_hour_rate,
    usage_percentage,
)
from print_cost.models.consumable import (
    Consumable,
    ReplacementRecord,
    WearLevel,
    consumables_for_printer,
)
from print_cost.models.filament import Filament
from print_cost.models.print_job import (
    ConsumableUsage,
    JobCosts,
    JobParameters,
    JobStatus,
    PrintJob,
    SourceType,
)
from print_cost.models.printer import AuxiliaryModule, Printer

__all__ = [
    "AuxiliaryModule",
    "Printer",
    "Filament",
    "Consumable",
    "ReplacementRecord",
    "WearLevel",
    "consumables_for_printer",
    "PrintJob",
    "JobCosts",
    "JobParameters",
    "JobStatus",
    "SourceType",
    "ConsumableUsage",
    "per_hour_rate",
    "cost_for_minutes",
    "usage_percentage",
    "energy_kwh",
]
