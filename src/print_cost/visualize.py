"""Visualization utilities for print cost analysis.

This module provides functions to plot the cost breakdown of a single print,
the stacked costs of compared scenarios and spending over time.
"""

from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from print_cost.calculator import CostBreakdown
from print_cost.comparison import ScenarioResult
from print_cost.history import daily_spending
from print_cost.models.print_job import PrintJob

COMPONENT_COLORS = {
    "filament": "#ef4444",
    "electricity": "#3b82f6",
    "depreciation": "#f59e0b",
    "consumables": "#14b8a6",
    "labor": "#8b5cf6",
    "failure_buffer": "#f97316",
    "markup": "#ec4899",
}


def _finish(fig: plt.Figure, show: bool, save_path: Optional[str]) -> plt.Figure:
    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    if show:
        plt.show()

    return fig


def _label(name: str) -> str:
    return name.replace("_", " ").title()


def _stack(breakdown: CostBreakdown) -> Dict[str, float]:
    """Bar layers of one breakdown, summing to its total."""
    layers = breakdown.component_costs()
    layers["failure_buffer"] = breakdown.failure_buffer
    layers["markup"] = breakdown.markup_amount
    return layers


def plot_cost_breakdown(
    breakdown: CostBreakdown,
    title: Optional[str] = None,
    currency_symbol: str = "$",
    show: bool = True,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Plot the cost components of one print as a doughnut chart.

    Components with a zero cost are left out.

    Args:
        breakdown: Result of CostEngine.calculate
        title: Optional custom title (default: total cost)
        currency_symbol: Symbol used in labels
        show: Whether to display the plot (default: True)
        save_path: Optional path to save the figure

    Returns:
        matplotlib Figure object

    Example:
        >>> breakdown = CostEngine().calculate(request)
        >>> plot_cost_breakdown(breakdown, show=False, save_path="breakdown.png")
    """
    components = {name: cost for name, cost in breakdown.component_costs().items() if cost > 0}
    if not components:
        raise ValueError("Cannot plot a breakdown without costs")

    names: List[str] = list(components)
    values = np.array([components[name] for name in names])
    shares = values / values.sum() * 100

    if title is None:
        title = f"Cost Breakdown (total {currency_symbol}{breakdown.total:.2f})"

    fig, ax = plt.subplots(figsize=(8, 6))
    wedges, _ = ax.pie(
        values,
        colors=[COMPONENT_COLORS[name] for name in names],
        startangle=90,
        wedgeprops={"width": 0.4, "edgecolor": "white", "linewidth": 2},
    )
    ax.legend(
        wedges,
        [
            f"{_label(name)}: {currency_symbol}{value:.2f} ({share:.1f}%)"
            for name, value, share in zip(names, values, shares)
        ],
        loc="center left",
        bbox_to_anchor=(1.0, 0.5),
    )
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.axis("equal")

    return _finish(fig, show, save_path)


def plot_scenario_comparison(
    results: Sequence[ScenarioResult],
    title: str = "Scenario Comparison",
    currency_symbol: str = "$",
    show: bool = True,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Plot compared scenarios as stacked cost bars.

    Each bar stacks the costs of one scenario up to its total, markup included.
    The lowest total is marked in the tick labels.

    Args:
        results: Output of compare_scenarios
        title: Plot title
        currency_symbol: Symbol used on the y axis
        show: Whether to display the plot
        save_path: Optional path to save the figure

    Returns:
        matplotlib Figure object
    """
    if not results:
        raise ValueError("Cannot plot empty scenario list")

    positions = np.arange(len(results))
    stacks = [_stack(r.breakdown) for r in results]
    layers = list(stacks[0])
    if not any(stack["markup"] for stack in stacks):
        layers.remove("markup")
    bottom = np.zeros(len(results))

    fig, ax = plt.subplots(figsize=(max(6, 2 * len(results)), 5))
    for layer in layers:
        heights = np.array([stack[layer] for stack in stacks])
        ax.bar(
            positions,
            heights,
            bottom=bottom,
            color=COMPONENT_COLORS[layer],
            label=_label(layer),
        )
        bottom += heights

    ax.set_xticks(positions)
    ax.set_xticklabels([f"{r.name}\n(lowest)" if r.is_lowest else r.name for r in results])
    ax.set_ylabel(f"Cost ({currency_symbol})")
    ax.set_title(title)
    ax.legend()
    ax.grid(True, axis="y", alpha=0.3)

    return _finish(fig, show, save_path)


def plot_spending_over_time(
    jobs: Sequence[PrintJob],
    title: str = "Spending Over Time",
    currency_symbol: str = "$",
    show: bool = True,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Plot daily spending as bars with the cumulative spend as a line.

    Args:
        jobs: Print jobs; jobs without a creation timestamp are ignored
        title: Plot title
        currency_symbol: Symbol used on the y axes
        show: Whether to display the plot
        save_path: Optional path to save the figure

    Returns:
        matplotlib Figure object
    """
    spending = daily_spending(jobs)
    if not spending:
        raise ValueError("Cannot plot spending without dated jobs")

    days = [day for day, _, _ in spending]
    costs = np.array([cost for _, cost, _ in spending])
    cumulative = np.array([running for _, _, running in spending])
    positions = np.arange(len(days))

    fig, ax1 = plt.subplots(figsize=(12, 4))
    ax1.bar(positions, costs, color=COMPONENT_COLORS["electricity"], alpha=0.7, label="Per Day")
    ax1.set_ylabel(f"Daily Cost ({currency_symbol})")
    ax1.set_xticks(positions)
    ax1.set_xticklabels([day.isoformat() for day in days], rotation=45, ha="right")
    ax1.grid(True, axis="y", alpha=0.3)

    ax2 = ax1.twinx()
    ax2.plot(
        positions,
        cumulative,
        color=COMPONENT_COLORS["filament"],
        linewidth=2,
        marker="o",
        label="Cumulative",
    )
    ax2.set_ylabel(f"Cumulative Cost ({currency_symbol})")

    handles1, labels1 = ax1.get_legend_handles_labels()
    handles2, labels2 = ax2.get_legend_handles_labels()
    ax1.legend(handles1 + handles2, labels1 + labels2, loc="upper left")
    ax1.set_title(title)

    return _finish(fig, show, save_path)
