"""Basic usage example.

This example demonstrates:
- Creating a printer from a preset and a filament from a spool price
- Calculating the full cost breakdown of one print
- Freezing the result into a print job and completing it
- Saving a breakdown chart

This is the simplest way to use the cost engine.
"""

import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from plot_helper import save_breakdown_plot

from print_cost import CalculationRequest, Consumable, CostEngine, Filament, Printer
from print_cost.profiles import get_electricity_rate


def main():
    """Cost of a 3.5 hour PETG print on a Prusa MK4."""

    print("=" * 80)
    print("BASIC PRINT COST CALCULATION")
    print("=" * 80)

    printer = Printer.from_preset("prusa-mk4", purchase_price=1099.0)
    filament = Filament(
        name="Prusament PETG", material="PETG", color="Orange", spool_price=29.99
    )
    nozzle = Consumable.from_type("nozzle-brass")

    request = CalculationRequest(
        printer=printer,
        filament=filament,
        print_time_minutes=210.0,
        filament_grams=86.0,
        consumables=(nozzle,),
        electricity_rate=get_electricity_rate("germany"),
        failure_rate=0.05,
    )

    print("\nInput Configuration:")
    print(f"  Printer:  {printer.display_name()} ({printer.printing_watts:.0f} W)")
    print(f"  Filament: {filament.display_name()} at {filament.price_per_gram():.4f}/g")
    print(f"  Print:    {request.print_time_minutes:.0f} min, {request.filament_grams:.0f} g")

    engine = CostEngine()
    breakdown = engine.calculate(request)

    print("\nCost Breakdown:")
    print(f"  {'Component':<14} {'Cost':>10} {'Share':>8}")
    print("  " + "-" * 34)
    shares = breakdown.percentages.as_dict()
    for name, cost in breakdown.component_costs().items():
        print(f"  {name.title():<14} {cost:>10.4f} {shares[name]:>7.1f}%")
    print("  " + "-" * 34)
    print(f"  {'Subtotal':<14} {breakdown.subtotal:>10.4f}")
    print(f"  {'Failure buffer':<14} {breakdown.failure_buffer:>10.4f}")
    print(f"  {'Total':<14} {breakdown.total:>10.4f}")

    job = engine.create_print_job(breakdown, datetime.now(), name="Cable clips")
    job = job.start().mark_completed(datetime.now())
    print(f"\nJob '{job.name}' is {job.status.value}, {job.cost_per_gram():.4f} per gram")

    print("\n" + "=" * 80)
    print("GENERATING PLOT")
    print("=" * 80)
    save_breakdown_plot("basic_usage", breakdown)
    print()


if __name__ == "__main__":
    main()
