"""Advanced example: comparing printers and pricing a small batch.

This example demonstrates:
- A printer with an attached multi-material unit (AMS)
- Comparing the same part across printers and filaments
- Break-even analysis for selling the cheapest option
- Saving a comparison chart
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from plot_helper import save_comparison_plot

from print_cost import (
    AuxiliaryModule,
    CalculationRequest,
    Filament,
    Printer,
    Scenario,
    analyze_break_even,
    compare_scenarios,
)

PRINT_MINUTES = 150.0
PRINT_GRAMS = 64.0


def make_request(printer: Printer, filament: Filament) -> CalculationRequest:
    """Same part on different hardware, with half an hour of post-processing."""
    return CalculationRequest(
        printer=printer,
        filament=filament,
        print_time_minutes=PRINT_MINUTES,
        filament_grams=PRINT_GRAMS,
        labor_hourly_rate=15.0,
        labor_hours=0.5,
    )


def main():
    """Compare three setups and find the break-even batch size."""

    print("=" * 80)
    print("SCENARIO COMPARISON")
    print("=" * 80)

    x1c = Printer.from_preset(
        "bambu-x1-carbon",
        purchase_price=1449.0,
        auxiliary=AuxiliaryModule.from_preset("bambu-ams"),
    )
    ender = Printer.from_preset("creality-ender3-v3", purchase_price=199.0)

    pla = Filament(name="Basic PLA", material="PLA", spool_price=19.99)
    petg = Filament(name="PETG HF", material="PETG", spool_price=24.99)

    scenarios = [
        Scenario(make_request(x1c, pla), "X1C + AMS, PLA"),
        Scenario(make_request(ender, pla), "Ender-3 V3, PLA"),
        Scenario(make_request(ender, petg), "Ender-3 V3, PETG"),
    ]
    results = compare_scenarios(scenarios)

    print(f"\n  {'Scenario':<20} {'Total':>10} {'vs lowest':>12}")
    print("  " + "-" * 44)
    for result in results:
        marker = " <- lowest" if result.is_lowest else ""
        print(
            f"  {result.name:<20} {result.total:>10.2f} "
            f"{result.percent_from_lowest:>+11.1f}%{marker}"
        )

    cheapest = next(result for result in results if result.is_lowest)
    analysis = analyze_break_even(
        fixed_costs=40.0, cost_per_unit=cheapest.total, price_per_unit=12.0
    )

    print("\nBreak-even (40.00 design time, selling at 12.00):")
    if analysis.profitable:
        print(f"  Margin per unit: {analysis.margin_per_unit:.2f}")
        print(f"  Units to sell:   {analysis.break_even_quantity}")
    else:
        print(f"  {analysis.message}")

    print("\n" + "=" * 80)
    print("GENERATING PLOT")
    print("=" * 80)
    save_comparison_plot("compare_scenarios", results)
    print()


if __name__ == "__main__":
    main()
