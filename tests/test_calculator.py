"""Tests for the cost engine."""

import logging
import math
from datetime import datetime

import pytest

from print_cost.calculator import (
    CalculationRequest,
    CostEngine,
    apply_failure_rate,
    validate_request,
)
from print_cost.config import DEFAULT_CONFIG
from print_cost.models import AuxiliaryModule, Consumable, Filament, JobStatus, Printer

CREATED = datetime(2024, 5, 1, 9, 0, 0)


@pytest.fixture
def printer():
    """Printer worth 300 over 5000 hours drawing 120 W."""
    return Printer(
        id="p1", purchase_price=300.0, estimated_lifetime_hours=5000.0, printing_watts=120.0
    )


@pytest.fixture
def filament():
    """Filament at 25 per kilogram."""
    return Filament(id="f1", spool_price=25.0, spool_weight=1000.0)


@pytest.fixture
def reference_request(printer, filament):
    """One hour print using 20 g at 0.15 per kWh and 5% failures."""
    return CalculationRequest(
        printer=printer,
        filament=filament,
        print_time_minutes=60.0,
        filament_grams=20.0,
        electricity_rate=0.15,
        failure_rate=0.05,
    )


@pytest.fixture
def engine():
    """Engine with default configuration."""
    return CostEngine()


class TestCostEngineCalculate:
    """Test CostEngine.calculate."""

    def test_reference_example(self, engine, reference_request):
        """Test the one hour, 20 g reference print."""
        breakdown = engine.calculate(reference_request)

        assert breakdown.filament.cost == pytest.approx(0.5)
        assert breakdown.electricity.cost == pytest.approx(0.018)
        assert breakdown.electricity.kwh == pytest.approx(0.12)
        assert breakdown.depreciation.cost == pytest.approx(0.06)
        assert breakdown.consumables.total_cost == 0.0
        assert breakdown.labor.cost == 0.0
        assert breakdown.subtotal == pytest.approx(0.578)
        assert breakdown.effective_cost == pytest.approx(0.578 / 0.95)
        assert breakdown.total == pytest.approx(0.608421, rel=1e-5)

    def test_keyword_arguments(self, engine, printer, filament):
        """Test calculate accepts request fields as keywords."""
        breakdown = engine.calculate(
            printer=printer, filament=filament, print_time_minutes=60.0, filament_grams=20.0
        )
        assert breakdown.subtotal == pytest.approx(0.578)

    def test_defaults_from_config(self, printer, filament):
        """Test omitted rates come from the engine config."""
        engine = CostEngine(DEFAULT_CONFIG.with_overrides(electricity_rate=0.30, failure_rate=0.0))
        request = CalculationRequest(
            printer=printer, filament=filament, print_time_minutes=60.0, filament_grams=20.0
        )
        breakdown = engine.calculate(request)
        assert breakdown.electricity.rate == 0.30
        assert breakdown.failure_rate == 0.0
        assert breakdown.total == pytest.approx(breakdown.subtotal)

    def test_invariants(self, engine, reference_request):
        """Test subtotal, buffer and total relations."""
        breakdown = engine.calculate(reference_request)
        components = breakdown.component_costs()

        assert breakdown.subtotal == pytest.approx(sum(components.values()))
        assert breakdown.failure_buffer == pytest.approx(
            breakdown.effective_cost - breakdown.subtotal
        )
        assert breakdown.total == pytest.approx(
            breakdown.subtotal + breakdown.failure_buffer + breakdown.markup_amount
        )

    def test_percentages_sum_to_100(self, engine, reference_request):
        """Test component percentages add up to 100."""
        percentages = engine.calculate(reference_request).percentages
        assert sum(percentages.as_dict().values()) == pytest.approx(100.0)
        assert percentages.filament == pytest.approx(0.5 / 0.578 * 100)

    def test_zero_subtotal_percentages(self, engine, printer, filament):
        """Test a zero cost print has all-zero percentages."""
        breakdown = engine.calculate(
            printer=printer, filament=filament, print_time_minutes=0.0, filament_grams=0.0
        )
        assert breakdown.subtotal == 0.0
        assert set(breakdown.percentages.as_dict().values()) == {0.0}

    def test_auxiliary_module(self, engine, reference_request):
        """Test the auxiliary module adds power and depreciation."""
        ams = AuxiliaryModule(
            name="AMS", working_watts=15.0, purchase_price=250.0, estimated_lifetime_hours=5000.0
        )
        request = CalculationRequest(
            printer=Printer(
                purchase_price=300.0,
                estimated_lifetime_hours=5000.0,
                printing_watts=120.0,
                auxiliary=ams,
            ),
            filament=reference_request.filament,
            print_time_minutes=60.0,
            filament_grams=20.0,
            electricity_rate=0.15,
        )
        breakdown = engine.calculate(request)

        assert breakdown.electricity.watts == 135.0
        assert breakdown.electricity.cost == pytest.approx(0.135 * 0.15)
        assert breakdown.depreciation.printer_cost == pytest.approx(0.06)
        assert breakdown.depreciation.auxiliary_cost == pytest.approx(0.05)
        assert breakdown.depreciation.cost == pytest.approx(0.11)

    def test_consumables(self, engine, printer, filament):
        """Test consumable lines are amortized over the print time."""
        nozzle = Consumable(id="c1", type="nozzle-brass")
        plate = Consumable(id="c2", type="bed-pei", name="Textured")
        breakdown = engine.calculate(
            printer=printer,
            filament=filament,
            print_time_minutes=120.0,
            filament_grams=0.0,
            consumables=[nozzle, plate],
        )
        items = breakdown.consumables.items

        assert [item.id for item in items] == ["c1", "c2"]
        assert items[0].name == "Brass Nozzle"
        assert items[0].cost == pytest.approx(3 / 400 * 2)
        assert items[1].name == "Textured"
        assert breakdown.consumables.total_cost == pytest.approx(sum(i.cost for i in items))
        assert breakdown.params.consumable_ids == ("c1", "c2")

    def test_labor_and_markup(self, engine, reference_request):
        """Test labor joins the subtotal and markup applies to the effective cost."""
        request = CalculationRequest(
            printer=reference_request.printer,
            filament=reference_request.filament,
            print_time_minutes=60.0,
            filament_grams=20.0,
            electricity_rate=0.15,
            failure_rate=0.0,
            labor_hourly_rate=20.0,
            labor_hours=0.5,
            markup_percent=20.0,
        )
        breakdown = engine.calculate(request)

        assert breakdown.labor.cost == pytest.approx(10.0)
        assert breakdown.subtotal == pytest.approx(10.578)
        assert breakdown.markup_amount == pytest.approx(10.578 * 0.2)
        assert breakdown.total == pytest.approx(10.578 * 1.2)

    def test_zero_lifetime_printer(self, engine, filament, caplog):
        """Test a printer without lifetime depreciates nothing and logs a warning."""
        printer = Printer(purchase_price=300.0, estimated_lifetime_hours=0.0)
        with caplog.at_level(logging.WARNING, logger="print_cost.calculator"):
            breakdown = engine.calculate(
                printer=printer, filament=filament, print_time_minutes=60.0, filament_grams=20.0
            )
        assert breakdown.depreciation.cost == 0.0
        assert "no positive lifetime" in caplog.text

    def test_zero_lifetime_auxiliary(self, engine, printer, filament, caplog):
        """Test an auxiliary module without lifetime depreciates nothing and logs a warning."""
        ams = AuxiliaryModule(name="AMS", purchase_price=250.0, estimated_lifetime_hours=0.0)
        request = CalculationRequest(
            printer=Printer(
                id="p1", purchase_price=300.0, estimated_lifetime_hours=5000.0, auxiliary=ams
            ),
            filament=filament,
            print_time_minutes=60.0,
            filament_grams=20.0,
        )
        with caplog.at_level(logging.WARNING, logger="print_cost.calculator"):
            breakdown = engine.calculate(request)
        assert breakdown.depreciation.auxiliary_cost == 0.0
        assert breakdown.depreciation.printer_cost == pytest.approx(0.06)
        assert "auxiliary module AMS has no positive lifetime" in caplog.text
        assert "printer" not in caplog.text

    def test_zero_lifetime_consumable(self, engine, printer, filament, caplog):
        """Test a consumable without lifetime costs nothing and logs a warning."""
        worn = Consumable(id="c9", type="nozzle-brass", estimated_lifetime_hours=0.0)
        with caplog.at_level(logging.WARNING, logger="print_cost.calculator"):
            breakdown = engine.calculate(
                printer=printer,
                filament=filament,
                print_time_minutes=60.0,
                filament_grams=20.0,
                consumables=[worn],
            )
        assert breakdown.consumables.total_cost == 0.0
        assert "consumable c9 has no positive lifetime" in caplog.text

    def test_request_and_keywords_rejected(self, engine, reference_request):
        """Test passing a request together with keyword fields raises TypeError."""
        with pytest.raises(TypeError, match="not both"):
            engine.calculate(reference_request, filament_grams=50.0)

    def test_zero_spool_weight(self, engine, printer):
        """Test a zero weight spool gives zero filament cost."""
        breakdown = engine.calculate(
            printer=printer,
            filament=Filament(spool_weight=0.0),
            print_time_minutes=60.0,
            filament_grams=20.0,
        )
        assert breakdown.filament.cost == 0.0

    def test_failure_rate_one_passes_through(self, engine, reference_request, caplog):
        """Test a failure rate of 1 applies no buffer instead of dividing by zero."""
        request = CalculationRequest(
            printer=reference_request.printer,
            filament=reference_request.filament,
            print_time_minutes=60.0,
            filament_grams=20.0,
            failure_rate=1.0,
        )
        with caplog.at_level(logging.WARNING):
            breakdown = engine.calculate(request)
        assert breakdown.effective_cost == pytest.approx(breakdown.subtotal)
        assert breakdown.failure_buffer == 0.0
        assert "no failure buffer" in caplog.text

    def test_nan_propagates(self, engine, reference_request):
        """Test non-finite inputs propagate rather than raise."""
        request = CalculationRequest(
            printer=reference_request.printer,
            filament=reference_request.filament,
            print_time_minutes=60.0,
            filament_grams=float("nan"),
        )
        assert math.isnan(engine.calculate(request).total)

    def test_breakdown_is_frozen(self, engine, reference_request):
        """Test the breakdown cannot be modified."""
        breakdown = engine.calculate(reference_request)
        with pytest.raises(AttributeError):
            breakdown.total = 0.0

    def test_repr(self, engine):
        """Test string representation."""
        assert "CostEngine" in repr(engine)


class TestApplyFailureRate:
    """Test the failure adjustment."""

    def test_buffer(self):
        """Test the effective cost for a 20% failure rate."""
        assert apply_failure_rate(8.0, 0.2) == pytest.approx(10.0)

    def test_zero_rate(self):
        """Test no failures means no buffer."""
        assert apply_failure_rate(8.0, 0.0) == 8.0


class TestQuickCalculate:
    """Test CostEngine.quick_calculate."""

    def test_defaults(self, engine):
        """Test the estimate with config defaults."""
        assert engine.quick_calculate(20.0, 0.025, 60.0) == pytest.approx(0.628 / 0.95)

    def test_overrides(self, engine):
        """Test explicit values replace the defaults."""
        total = engine.quick_calculate(
            20.0,
            0.025,
            60.0,
            electricity_rate=0.0,
            printer_cost=0.0,
            consumables_per_hour=0.0,
            failure_rate=0.0,
        )
        assert total == pytest.approx(0.5)


class TestCreatePrintJob:
    """Test CostEngine.create_print_job."""

    def test_job_snapshot(self, engine, reference_request):
        """Test the job carries the breakdown figures and references."""
        breakdown = engine.calculate(reference_request)
        job = engine.create_print_job(breakdown, CREATED, name="Bracket", job_id="j1")

        assert job.id == "j1"
        assert job.name == "Bracket"
        assert job.status == JobStatus.CALCULATED
        assert job.printer_id == "p1"
        assert job.filament_id == "f1"
        assert job.created_at == CREATED
        assert job.costs.total == pytest.approx(breakdown.total)
        assert job.costs.failure_buffer == pytest.approx(breakdown.failure_buffer)
        assert job.params.electricity_rate == 0.15
        assert job.print_time_minutes == 60.0

    def test_generated_id(self, engine, reference_request):
        """Test jobs get distinct generated ids."""
        breakdown = engine.calculate(reference_request)
        first = engine.create_print_job(breakdown, CREATED)
        second = engine.create_print_job(breakdown, CREATED)
        assert first.id != second.id


class TestValidateRequest:
    """Test the input boundary check."""

    def test_valid_request(self, reference_request):
        """Test a valid request passes."""
        validate_request(reference_request)

    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("print_time_minutes", -1.0, "print_time_minutes must be non-negative"),
            ("filament_grams", float("nan"), "filament_grams must be a finite number"),
            ("electricity_rate", float("inf"), "electricity_rate must be a finite number"),
            ("failure_rate", 1.0, "failure_rate must be less than 1"),
        ],
    )
    def test_invalid_values(self, printer, filament, field, value, message):
        """Test invalid numbers are rejected."""
        values = dict(print_time_minutes=60.0, filament_grams=20.0)
        values[field] = value
        request = CalculationRequest(printer=printer, filament=filament, **values)
        with pytest.raises(ValueError, match=message):
            validate_request(request)
