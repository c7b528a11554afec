"""Tests for visualization utilities."""

from datetime import datetime

import matplotlib
import pytest

# Use non-interactive backend for testing
matplotlib.use("Agg")

import matplotlib.pyplot as plt

from print_cost.calculator import CalculationRequest, CostEngine
from print_cost.comparison import Scenario, compare_scenarios
from print_cost.history import daily_spending
from print_cost.models import Consumable, Filament, JobCosts, PrintJob, Printer
from print_cost.visualize import (
    plot_cost_breakdown,
    plot_scenario_comparison,
    plot_spending_over_time,
)


@pytest.fixture
def request_pla():
    """Two hour PLA print with a nozzle."""
    return CalculationRequest(
        printer=Printer(purchase_price=300.0),
        filament=Filament(spool_price=25.0),
        print_time_minutes=120.0,
        filament_grams=45.0,
        consumables=(Consumable(type="nozzle-brass"),),
    )


@pytest.fixture
def request_petg():
    """Same print in a pricier filament."""
    return CalculationRequest(
        printer=Printer(purchase_price=300.0),
        filament=Filament(material="PETG", spool_price=32.0),
        print_time_minutes=120.0,
        filament_grams=45.0,
    )


class TestPlotCostBreakdown:
    """Test plot_cost_breakdown."""

    def test_creates_figure(self, request_pla):
        """Test that a figure is returned."""
        fig = plot_cost_breakdown(CostEngine().calculate(request_pla), show=False)
        assert isinstance(fig, plt.Figure)
        plt.close(fig)

    def test_skips_zero_components(self, request_pla):
        """Test zero components are left out of the chart."""
        fig = plot_cost_breakdown(CostEngine().calculate(request_pla), show=False)
        labels = [text.get_text() for text in fig.axes[0].get_legend().get_texts()]
        assert len(labels) == 4
        assert not any(label.startswith("Labor") for label in labels)
        plt.close(fig)

    def test_default_title(self, request_pla):
        """Test the default title carries the total."""
        breakdown = CostEngine().calculate(request_pla)
        fig = plot_cost_breakdown(breakdown, show=False)
        assert f"{breakdown.total:.2f}" in fig.axes[0].get_title()
        plt.close(fig)

    def test_no_costs_raises(self):
        """Test that a zero cost breakdown raises ValueError."""
        breakdown = CostEngine().calculate(
            printer=Printer(),
            filament=Filament(),
            print_time_minutes=0.0,
            filament_grams=0.0,
        )
        with pytest.raises(ValueError, match="Cannot plot a breakdown without costs"):
            plot_cost_breakdown(breakdown, show=False)

    def test_save(self, request_pla, tmp_path):
        """Test saving to a file."""
        path = tmp_path / "breakdown.png"
        fig = plot_cost_breakdown(
            CostEngine().calculate(request_pla), show=False, save_path=str(path)
        )
        assert path.exists()
        plt.close(fig)


class TestPlotScenarioComparison:
    """Test plot_scenario_comparison."""

    def test_creates_figure(self, request_pla, request_petg):
        """Test that one bar position per scenario is drawn."""
        results = compare_scenarios([Scenario(request_pla, "PLA"), Scenario(request_petg, "PETG")])
        fig = plot_scenario_comparison(results, show=False)
        ax = fig.axes[0]
        assert isinstance(fig, plt.Figure)
        assert len(ax.get_xticks()) == 2
        assert "(lowest)" in ax.get_xticklabels()[0].get_text()
        plt.close(fig)

    def test_bars_reach_total_with_markup(self, request_pla):
        """Test stacked layers include markup and top out at each total."""
        marked_up = CalculationRequest(
            printer=request_pla.printer,
            filament=request_pla.filament,
            print_time_minutes=120.0,
            filament_grams=45.0,
            markup_percent=30.0,
        )
        results = compare_scenarios([Scenario(request_pla), Scenario(marked_up)])
        fig = plot_scenario_comparison(results, show=False)
        ax = fig.axes[0]
        labels = [text.get_text() for text in ax.get_legend().get_texts()]
        assert "Markup" in labels
        tops = [
            max(patch.get_y() + patch.get_height() for patch in ax.patches[i::2]) for i in (0, 1)
        ]
        assert tops == pytest.approx([r.total for r in results])
        plt.close(fig)

    def test_markup_layer_omitted_without_markup(self, request_pla, request_petg):
        """Test no markup layer is drawn when no scenario has markup."""
        results = compare_scenarios([Scenario(request_pla), Scenario(request_petg)])
        fig = plot_scenario_comparison(results, show=False)
        labels = [text.get_text() for text in fig.axes[0].get_legend().get_texts()]
        assert "Markup" not in labels
        plt.close(fig)

    def test_empty_raises(self):
        """Test that an empty list raises ValueError."""
        with pytest.raises(ValueError, match="Cannot plot empty scenario list"):
            plot_scenario_comparison([], show=False)


class TestPlotSpendingOverTime:
    """Test plot_spending_over_time."""

    def test_creates_figure(self):
        """Test bars and cumulative line on twin axes."""
        jobs = [
            PrintJob(costs=JobCosts(total=2.0), created_at=datetime(2024, 5, 1, 10, 0)),
            PrintJob(costs=JobCosts(total=3.0), created_at=datetime(2024, 5, 3, 10, 0)),
        ]
        fig = plot_spending_over_time(jobs, show=False)
        assert len(fig.axes) == 2
        assert list(fig.axes[1].get_lines()[0].get_ydata()) == pytest.approx([2.0, 5.0])
        plt.close(fig)

    def test_undated_raises(self):
        """Test that jobs without dates raise ValueError."""
        with pytest.raises(ValueError, match="Cannot plot spending without dated jobs"):
            plot_spending_over_time([PrintJob()], show=False)

    def test_cumulative_line_follows_daily_spending(self):
        """Test the cumulative line uses the running totals of daily_spending."""
        jobs = [
            PrintJob(costs=JobCosts(total=1.5), created_at=datetime(2024, 5, 2, 8, 0)),
            PrintJob(costs=JobCosts(total=2.5), created_at=datetime(2024, 5, 2, 18, 0)),
            PrintJob(costs=JobCosts(total=4.0), created_at=datetime(2024, 5, 1, 9, 0)),
        ]
        fig = plot_spending_over_time(jobs, show=False)
        expected = [running for _, _, running in daily_spending(jobs)]
        assert list(fig.axes[1].get_lines()[0].get_ydata()) == pytest.approx(expected)
        assert expected == pytest.approx([4.0, 8.0])
        plt.close(fig)
