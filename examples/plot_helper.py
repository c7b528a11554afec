"""Helper functions for saving matplotlib plots in examples."""

import inspect
import os
from typing import Optional, Sequence

from print_cost.calculator import CostBreakdown
from print_cost.comparison import ScenarioResult
from print_cost.visualize import plot_cost_breakdown, plot_scenario_comparison


def _output_path(name: str, output_dir: Optional[str], caller_depth: int = 2) -> str:
    """Build "<name>_plot.png" next to the calling example unless a directory is given."""
    if output_dir is None:
        caller_file = inspect.stack()[caller_depth].filename
        output_dir = os.path.dirname(os.path.abspath(caller_file))
    return os.path.join(output_dir, f"{name}_plot.png")


def save_breakdown_plot(
    name: str, breakdown: CostBreakdown, output_dir: Optional[str] = None
) -> None:
    """Save a cost breakdown doughnut chart.

    Args:
        name: Base name for the plot (e.g., "basic_usage")
        breakdown: Breakdown to plot
        output_dir: Optional output directory (defaults to caller's directory)
    """
    filename = _output_path(name, output_dir)
    plot_cost_breakdown(breakdown, show=False, save_path=filename)
    print(f"  Plot saved: {filename}")


def save_comparison_plot(
    name: str, results: Sequence[ScenarioResult], output_dir: Optional[str] = None
) -> None:
    """Save a stacked bar chart of compared scenarios.

    Args:
        name: Base name for the plot (e.g., "compare_materials")
        results: Output of compare_scenarios
        output_dir: Optional output directory (defaults to caller's directory)
    """
    filename = _output_path(name, output_dir)
    title = name.replace("_", " ").title()
    plot_scenario_comparison(results, title=title, show=False, save_path=filename)
    print(f"  Plot saved: {filename}")
