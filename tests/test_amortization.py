"""Tests for price amortization helpers and depreciation functions."""

from dataclasses import replace

import pytest

from print_cost.depreciation import (
    depreciation_cost,
    depreciation_per_hour,
    electricity_cost,
    total_depreciation_cost,
)
from print_cost.models import AuxiliaryModule, Printer
from print_cost.models.amortization import (
    cost_for_minutes,
    energy_kwh,
    per_hour_rate,
    usage_percentage,
)


class TestAmortization:
    """Tests for the shared amortization arithmetic."""

    def test_per_hour_rate(self):
        """Test a price spread over its lifetime."""
        assert per_hour_rate(300.0, 5000.0) == pytest.approx(0.06)

    @pytest.mark.parametrize("lifetime", [0.0, -10.0])
    def test_per_hour_rate_without_lifetime(self, lifetime):
        """Test that a non-positive lifetime yields zero."""
        assert per_hour_rate(300.0, lifetime) == 0.0

    def test_cost_for_minutes(self):
        """Test scaling an hourly rate to minutes."""
        assert cost_for_minutes(0.06, 90.0) == pytest.approx(0.09)

    def test_usage_percentage_capped(self):
        """Test usage beyond the lifetime caps at 100."""
        assert usage_percentage(50.0, 100.0) == pytest.approx(50.0)
        assert usage_percentage(150.0, 100.0) == 100.0
        assert usage_percentage(10.0, 0.0) == 0.0


class TestDepreciation:
    """Tests for the depreciation module."""

    @pytest.fixture
    def printer(self):
        """Printer worth 300 over 5000 hours."""
        return Printer(purchase_price=300.0, estimated_lifetime_hours=5000.0, printing_watts=120.0)

    @pytest.fixture
    def ams(self):
        """Auxiliary module worth 250 over 5000 hours."""
        return AuxiliaryModule(
            name="AMS", working_watts=15.0, purchase_price=250.0, estimated_lifetime_hours=5000.0
        )

    def test_depreciation_per_hour(self, printer):
        """Test hourly depreciation of a printer."""
        assert depreciation_per_hour(printer) == pytest.approx(0.06)

    def test_depreciation_cost(self, printer):
        """Test depreciation for a one hour print."""
        assert depreciation_cost(printer, 60.0) == pytest.approx(0.06)

    def test_zero_lifetime(self):
        """Test that a zero lifetime printer does not depreciate."""
        printer = Printer(purchase_price=300.0, estimated_lifetime_hours=0.0)
        assert depreciation_cost(printer, 60.0) == 0.0

    def test_energy_kwh(self):
        """Test energy drawn at constant power."""
        assert energy_kwh(120.0, 60.0) == pytest.approx(0.12)

    def test_electricity_cost(self, printer):
        """Test electricity cost of a one hour print."""
        assert electricity_cost(printer, 60.0, 0.15) == pytest.approx(0.018)

    def test_electricity_cost_with_auxiliary(self, printer, ams):
        """Test the auxiliary module's working draw is included."""
        with_ams = replace(printer, auxiliary=ams)
        assert electricity_cost(with_ams, 60.0, 0.15) == pytest.approx(0.135 * 0.15)

    def test_total_depreciation_with_auxiliary(self, printer, ams):
        """Test total depreciation adds the module's share."""
        assert total_depreciation_cost(printer, 60.0) == pytest.approx(0.06)
        with_ams = replace(printer, auxiliary=ams)
        assert total_depreciation_cost(with_ams, 60.0) == pytest.approx(0.06 + 0.05)
