"""Cost engine: turns usage figures into an itemized print cost breakdown.

Example:
    >>> from print_cost import CostEngine, Filament, Printer
    >>>
    >>> printer = Printer(purchase_price=300.0, estimated_lifetime_hours=5000.0)
    >>> filament = Filament(spool_price=25.0, spool_weight=1000.0)
    >>>
    >>> engine = CostEngine()
    >>> breakdown = engine.calculate(
    ...     printer=printer, filament=filament, print_time_minutes=60.0, filament_grams=20.0
    ... )
    >>> round(breakdown.subtotal, 3)
    0.578
"""

import logging
import math
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Dict, Optional, Tuple

from print_cost.config import DEFAULT_CONFIG, MINUTES_PER_HOUR, CostConfig
from print_cost.depreciation import depreciation_per_hour
from print_cost.models.amortization import cost_for_minutes, energy_kwh, per_hour_rate
from print_cost.models.consumable import Consumable
from print_cost.models.filament import Filament
from print_cost.models.print_job import (
    ConsumableUsage,
    JobCosts,
    JobParameters,
    JobStatus,
    PrintJob,
    SourceType,
)
from print_cost.models.printer import Printer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculationRequest:
    """Inputs of one cost calculation.

    Rates left as None are taken from the engine's CostConfig.

    Attributes:
        printer: Printer doing the job
        filament: Filament being printed
        print_time_minutes: Print time in minutes
        filament_grams: Filament used in grams
        consumables: Wear parts charged for the job (may be empty)
        electricity_rate: Electricity price per kWh
        failure_rate: Expected share of failed prints, in [0, 1)
        labor_hourly_rate: Labor price per hour
        labor_hours: Labor time in hours
        markup_percent: Profit markup in percent
    """

    printer: Printer
    filament: Filament
    print_time_minutes: float
    filament_grams: float
    consumables: Tuple[Consumable, ...] = ()
    electricity_rate: Optional[float] = None
    failure_rate: Optional[float] = None
    labor_hourly_rate: Optional[float] = None
    labor_hours: float = 0.0
    markup_percent: Optional[float] = None

    def __post_init__(self) -> None:
        """Store consumables as a tuple so the request stays immutable."""
        object.__setattr__(self, "consumables", tuple(self.consumables))


@dataclass(frozen=True)
class ResolvedParameters:
    """Every input actually applied by a calculation, defaults filled in."""

    print_time_minutes: float
    filament_grams: float
    electricity_rate: float
    failure_rate: float
    labor_hourly_rate: float
    labor_hours: float
    markup_percent: float
    printer_id: str
    filament_id: str
    consumable_ids: Tuple[str, ...]


@dataclass(frozen=True)
class FilamentCost:
    """Filament line of a breakdown."""

    grams: float
    price_per_gram: float
    cost: float


@dataclass(frozen=True)
class ElectricityCost:
    """Electricity line of a breakdown."""

    watts: float
    hours: float
    kwh: float
    rate: float
    cost: float


@dataclass(frozen=True)
class DepreciationCost:
    """Depreciation line of a breakdown, split into printer and auxiliary module.

    Attributes:
        printer_value: Printer purchase price
        lifetime_hours: Printer expected lifetime
        rate_per_hour: Printer depreciation per hour
        printer_cost: Printer depreciation for this job
        auxiliary_value: Auxiliary module purchase price (0 without a module)
        auxiliary_lifetime_hours: Auxiliary module lifetime (0 without a module)
        auxiliary_rate_per_hour: Auxiliary module depreciation per hour
        auxiliary_cost: Auxiliary module depreciation for this job
        cost: printer_cost + auxiliary_cost
    """

    printer_value: float
    lifetime_hours: float
    rate_per_hour: float
    printer_cost: float
    auxiliary_value: float
    auxiliary_lifetime_hours: float
    auxiliary_rate_per_hour: float
    auxiliary_cost: float
    cost: float


@dataclass(frozen=True)
class ConsumableLine:
    """Cost allocated to one consumable."""

    id: str
    name: str
    type: str
    cost_per_hour: float
    cost: float


@dataclass(frozen=True)
class ConsumablesCost:
    """Consumables line of a breakdown with its per-item detail."""

    items: Tuple[ConsumableLine, ...]
    total_cost: float


@dataclass(frozen=True)
class LaborCost:
    """Labor line of a breakdown."""

    hourly_rate: float
    hours: float
    cost: float


@dataclass(frozen=True)
class CostPercentages:
    """Share of each component in the subtotal (not the total), 0-100."""

    filament: float = 0.0
    electricity: float = 0.0
    depreciation: float = 0.0
    consumables: float = 0.0
    labor: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class CostBreakdown:
    """Itemized result of a cost calculation.

    Invariants:
        subtotal == filament + electricity + depreciation + consumables + labor
        failure_buffer == effective_cost - subtotal
        total == subtotal + failure_buffer + markup_amount
    """

    filament: FilamentCost
    electricity: ElectricityCost
    depreciation: DepreciationCost
    consumables: ConsumablesCost
    labor: LaborCost
    subtotal: float
    effective_cost: float
    failure_rate: float
    failure_buffer: float
    markup_percent: float
    markup_amount: float
    total: float
    percentages: CostPercentages
    params: ResolvedParameters

    def component_costs(self) -> Dict[str, float]:
        """The five component costs, in breakdown order."""
        return {
            "filament": self.filament.cost,
            "electricity": self.electricity.cost,
            "depreciation": self.depreciation.cost,
            "consumables": self.consumables.total_cost,
            "labor": self.labor.cost,
        }


def _percentages(components: Dict[str, float], subtotal: float) -> CostPercentages:
    if subtotal <= 0:
        return CostPercentages()
    return CostPercentages(**{name: cost / subtotal * 100 for name, cost in components.items()})


def apply_failure_rate(subtotal: float, failure_rate: float) -> float:
    """
    Spread the cost of expected failed attempts over successful prints.

    Args:
        subtotal: Cost of one attempt
        failure_rate: Expected share of failed attempts

    Returns:
        subtotal / (1 - failure_rate). A failure rate of 1 or more returns the
        subtotal unchanged instead of dividing by zero.
    """
    if failure_rate < 1:
        return subtotal / (1 - failure_rate)
    logger.warning("failure_rate %s >= 1, no failure buffer applied", failure_rate)
    return subtotal


def validate_request(request: CalculationRequest, config: CostConfig = DEFAULT_CONFIG) -> None:
    """Reject inputs the cost engine would otherwise propagate arithmetically.

    The engine never validates; callers accepting user input run this first.

    Args:
        request: Request to check
        config: Config supplying the defaults for omitted rates

    Raises:
        ValueError: If a number is negative or not finite, or the failure rate
            is outside [0, 1)
    """
    resolved = CostEngine(config).resolve(request)
    checks = {
        "print_time_minutes": resolved.print_time_minutes,
        "filament_grams": resolved.filament_grams,
        "electricity_rate": resolved.electricity_rate,
        "failure_rate": resolved.failure_rate,
        "labor_hourly_rate": resolved.labor_hourly_rate,
        "labor_hours": resolved.labor_hours,
        "markup_percent": resolved.markup_percent,
    }
    for name, value in checks.items():
        if not math.isfinite(value):
            raise ValueError(f"{name} must be a finite number, got {value}")
        if value < 0:
            raise ValueError(f"{name} must be non-negative, got {value}")
    if resolved.failure_rate >= 1:
        raise ValueError(f"failure_rate must be less than 1, got {resolved.failure_rate}")


class CostEngine:
    """Itemized cost calculation for print jobs.

    The engine holds only its configuration; calculate() is a pure function of
    the request and that configuration.

    Args:
        config: Defaults for rates omitted from a request (default: DEFAULT_CONFIG)

    Example:
        >>> engine = CostEngine(DEFAULT_CONFIG.with_overrides(electricity_rate=0.30))
        >>> breakdown = engine.calculate(request)
    """

    def __init__(self, config: CostConfig = DEFAULT_CONFIG):
        self.config = config

    def resolve(self, request: CalculationRequest) -> ResolvedParameters:
        """Fill the request's omitted rates from the engine config."""
        config = self.config

        def pick(value: Optional[float], default: float) -> float:
            return default if value is None else value

        return ResolvedParameters(
            print_time_minutes=request.print_time_minutes,
            filament_grams=request.filament_grams,
            electricity_rate=pick(request.electricity_rate, config.electricity_rate),
            failure_rate=pick(request.failure_rate, config.failure_rate),
            labor_hourly_rate=pick(request.labor_hourly_rate, config.labor_hourly_rate),
            labor_hours=request.labor_hours,
            markup_percent=pick(request.markup_percent, config.markup_percent),
            printer_id=request.printer.id,
            filament_id=request.filament.id,
            consumable_ids=tuple(c.id for c in request.consumables),
        )

    def calculate(self, request: Optional[CalculationRequest] = None, **kwargs) -> CostBreakdown:
        """Calculate the complete cost of a print.

        Accepts either a CalculationRequest or its fields as keyword arguments.

        The steps run in a fixed order:
        1. Filament, electricity, depreciation, consumables and labor costs
        2. Subtotal of the five components
        3. Failure buffer: effective cost = subtotal / (1 - failure_rate)
        4. Markup on the effective cost
        5. Percentages of each component against the subtotal

        Args:
            request: Calculation inputs
            **kwargs: CalculationRequest fields, used when request is omitted

        Returns:
            Frozen CostBreakdown. Degenerate inputs (zero lifetimes, zero spool
            weight, zero print time, no consumables) yield zero components
            rather than errors.

        Raises:
            TypeError: If both a request and keyword fields are given
        """
        if request is None:
            request = CalculationRequest(**kwargs)
        elif kwargs:
            raise TypeError("pass either a CalculationRequest or its fields, not both")
        params = self.resolve(request)
        printer = request.printer
        minutes = params.print_time_minutes
        hours = minutes / MINUTES_PER_HOUR

        # 1. Filament
        price_per_gram = request.filament.price_per_gram()
        filament = FilamentCost(
            grams=params.filament_grams,
            price_per_gram=price_per_gram,
            cost=params.filament_grams * price_per_gram,
        )

        # 2-3. Electricity, including the auxiliary module's working draw
        watts = printer.total_power_watts()
        kwh = energy_kwh(watts, minutes)
        electricity = ElectricityCost(
            watts=watts,
            hours=hours,
            kwh=kwh,
            rate=params.electricity_rate,
            cost=kwh * params.electricity_rate,
        )

        # 4. Depreciation of printer and auxiliary module
        auxiliary = printer.auxiliary
        printer_rate = depreciation_per_hour(printer)
        auxiliary_rate = depreciation_per_hour(auxiliary) if auxiliary else 0.0
        printer_cost = cost_for_minutes(printer_rate, minutes)
        auxiliary_cost = cost_for_minutes(auxiliary_rate, minutes)
        if printer.estimated_lifetime_hours <= 0:
            logger.warning("printer %s has no positive lifetime, depreciation is 0", printer.id)
        if auxiliary is not None and auxiliary.estimated_lifetime_hours <= 0:
            logger.warning(
                "auxiliary module %s has no positive lifetime, depreciation is 0", auxiliary.name
            )
        depreciation = DepreciationCost(
            printer_value=printer.purchase_price,
            lifetime_hours=printer.estimated_lifetime_hours,
            rate_per_hour=printer_rate,
            printer_cost=printer_cost,
            auxiliary_value=auxiliary.purchase_price if auxiliary else 0.0,
            auxiliary_lifetime_hours=auxiliary.estimated_lifetime_hours if auxiliary else 0.0,
            auxiliary_rate_per_hour=auxiliary_rate,
            auxiliary_cost=auxiliary_cost,
            cost=printer_cost + auxiliary_cost,
        )

        # 5. Consumables
        lines = []
        consumables_total = 0.0
        for consumable in request.consumables:
            rate = consumable.cost_per_hour()
            if consumable.estimated_lifetime_hours <= 0:
                logger.warning(
                    "consumable %s has no positive lifetime, its cost is 0", consumable.id
                )
            cost = cost_for_minutes(rate, minutes)
            consumables_total += cost
            lines.append(
                ConsumableLine(
                    id=consumable.id,
                    name=consumable.display_name(),
                    type=consumable.type,
                    cost_per_hour=rate,
                    cost=cost,
                )
            )
        consumables = ConsumablesCost(items=tuple(lines), total_cost=consumables_total)

        # 6. Labor
        labor = LaborCost(
            hourly_rate=params.labor_hourly_rate,
            hours=params.labor_hours,
            cost=params.labor_hourly_rate * params.labor_hours,
        )

        # 7. Subtotal
        components = {
            "filament": filament.cost,
            "electricity": electricity.cost,
            "depreciation": depreciation.cost,
            "consumables": consumables_total,
            "labor": labor.cost,
        }
        subtotal = (
            filament.cost + electricity.cost + depreciation.cost + consumables_total + labor.cost
        )

        # 8-11. Failure buffer, markup, total
        effective_cost = apply_failure_rate(subtotal, params.failure_rate)
        failure_buffer = effective_cost - subtotal
        markup_amount = effective_cost * (params.markup_percent / 100)
        total = effective_cost + markup_amount

        # 12. Percentages against the subtotal
        percentages = _percentages(components, subtotal)

        breakdown = CostBreakdown(
            filament=filament,
            electricity=electricity,
            depreciation=depreciation,
            consumables=consumables,
            labor=labor,
            subtotal=subtotal,
            effective_cost=effective_cost,
            failure_rate=params.failure_rate,
            failure_buffer=failure_buffer,
            markup_percent=params.markup_percent,
            markup_amount=markup_amount,
            total=total,
            percentages=percentages,
            params=params,
        )

        logger.debug(
            "calculated printer=%s filament=%s subtotal=%.4f buffer=%.4f markup=%.4f total=%.4f",
            params.printer_id,
            params.filament_id,
            subtotal,
            failure_buffer,
            markup_amount,
            total,
        )
        return breakdown

    def quick_calculate(
        self,
        filament_grams: float,
        filament_price_per_gram: float,
        print_time_minutes: float,
        electricity_rate: Optional[float] = None,
        printer_watts: Optional[float] = None,
        printer_cost: Optional[float] = None,
        printer_lifetime_hours: Optional[float] = None,
        consumables_per_hour: Optional[float] = None,
        failure_rate: Optional[float] = None,
    ) -> float:
        """
        Estimate a total from scalar inputs, without building entities.

        Applies the same formula as calculate() with no labor and no markup.
        Omitted values come from the engine config.

        Args:
            filament_grams: Filament used in grams
            filament_price_per_gram: Filament price per gram
            print_time_minutes: Print time in minutes
            electricity_rate: Price per kWh
            printer_watts: Printer draw while printing
            printer_cost: Printer purchase price
            printer_lifetime_hours: Printer expected lifetime
            consumables_per_hour: Flat consumables cost per hour
            failure_rate: Expected share of failed prints

        Returns:
            Estimated total cost

        Examples:
            >>> engine = CostEngine()
            >>> round(engine.quick_calculate(20.0, 0.025, 60.0), 4)
            0.6611
        """
        config = self.config
        if electricity_rate is None:
            electricity_rate = config.electricity_rate
        if printer_watts is None:
            printer_watts = config.printer_power_watts
        if printer_cost is None:
            printer_cost = config.quick_printer_price
        if printer_lifetime_hours is None:
            printer_lifetime_hours = config.printer_lifetime_hours
        if consumables_per_hour is None:
            consumables_per_hour = config.quick_consumables_per_hour
        if failure_rate is None:
            failure_rate = config.failure_rate

        filament_cost = filament_grams * filament_price_per_gram
        electricity = energy_kwh(printer_watts, print_time_minutes) * electricity_rate
        depreciation = cost_for_minutes(
            per_hour_rate(printer_cost, printer_lifetime_hours), print_time_minutes
        )
        consumables = cost_for_minutes(consumables_per_hour, print_time_minutes)

        subtotal = filament_cost + electricity + depreciation + consumables
        return apply_failure_rate(subtotal, failure_rate)

    def create_print_job(
        self,
        breakdown: CostBreakdown,
        created_at: datetime,
        name: str = "Calculated Print",
        description: str = "",
        source_type: SourceType = SourceType.MANUAL,
        gcode_file_name: Optional[str] = None,
        slicer_type: Optional[str] = None,
        filament_meters: float = 0.0,
        job_id: Optional[str] = None,
    ) -> PrintJob:
        """Freeze a breakdown into a PrintJob in the calculated state.

        Args:
            breakdown: Result of calculate()
            created_at: Creation time, supplied by the caller
            name: Job name
            description: Free-form description
            source_type: Where the usage figures came from
            gcode_file_name: G-code file the figures were read from
            slicer_type: Slicer that produced the G-code
            filament_meters: Filament length, when known
            job_id: Identifier to use instead of a generated one

        Returns:
            New PrintJob referencing the printer, filament and consumables by id
        """
        params = breakdown.params
        costs = JobCosts(
            filament=breakdown.filament.cost,
            electricity=breakdown.electricity.cost,
            depreciation=breakdown.depreciation.cost,
            consumables=breakdown.consumables.total_cost,
            labor=breakdown.labor.cost,
            subtotal=breakdown.subtotal,
            failure_buffer=breakdown.failure_buffer,
            markup=breakdown.markup_amount,
            total=breakdown.total,
        )
        job_params = JobParameters(
            electricity_rate=params.electricity_rate,
            failure_rate=params.failure_rate,
            labor_hourly_rate=params.labor_hourly_rate,
            labor_hours=params.labor_hours,
            markup_percent=params.markup_percent,
        )
        extra = {"id": job_id} if job_id else {}
        return PrintJob(
            name=name,
            description=description,
            source_type=source_type,
            gcode_file_name=gcode_file_name,
            slicer_type=slicer_type,
            printer_id=params.printer_id,
            filament_id=params.filament_id,
            consumable_ids=params.consumable_ids,
            print_time_minutes=params.print_time_minutes,
            filament_grams=params.filament_grams,
            filament_meters=filament_meters,
            costs=costs,
            params=job_params,
            consumables_used=tuple(
                ConsumableUsage(id=line.id, name=line.name, cost=line.cost)
                for line in breakdown.consumables.items
            ),
            status=JobStatus.CALCULATED,
            created_at=created_at,
            **extra,
        )

    def __repr__(self) -> str:
        return f"CostEngine(config={self.config!r})"

