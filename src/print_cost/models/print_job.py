"""Print job model: a frozen snapshot of one cost calculation plus its status."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from print_cost.config import DEFAULT_CONFIG, MINUTES_PER_HOUR, CostConfig
from print_cost.models.records import format_timestamp, get_or, new_id, parse_timestamp


class JobStatus(Enum):
    """Lifecycle of a print job."""

    CALCULATED = "calculated"
    PRINTING = "printing"
    COMPLETED = "completed"
    FAILED = "failed"


class SourceType(Enum):
    """Where the usage figures of a job came from."""

    MANUAL = "manual"
    GCODE = "gcode"


# Allowed status transitions; completed and failed are terminal
STATUS_TRANSITIONS = {
    JobStatus.CALCULATED: frozenset({JobStatus.PRINTING, JobStatus.COMPLETED, JobStatus.FAILED}),
    JobStatus.PRINTING: frozenset({JobStatus.COMPLETED, JobStatus.FAILED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.FAILED: frozenset(),
}

# Component cost fields, in breakdown order
COMPONENTS = ("filament", "electricity", "depreciation", "consumables", "labor")


@dataclass(frozen=True)
class JobCosts:
    """Frozen cost figures of a job.

    Attributes:
        filament: Filament cost
        electricity: Electricity cost
        depreciation: Printer and auxiliary module depreciation
        consumables: Amortized consumable cost
        labor: Labor cost
        subtotal: Sum of the five components
        failure_buffer: Surcharge covering expected failed attempts
        markup: Profit markup amount
        total: Final price
    """

    filament: float = 0.0
    electricity: float = 0.0
    depreciation: float = 0.0
    consumables: float = 0.0
    labor: float = 0.0
    subtotal: float = 0.0
    failure_buffer: float = 0.0
    markup: float = 0.0
    total: float = 0.0

    def to_record(self) -> Dict[str, float]:
        """Convert to a plain mapping for storage."""
        return {
            "filament": self.filament,
            "electricity": self.electricity,
            "depreciation": self.depreciation,
            "consumables": self.consumables,
            "labor": self.labor,
            "subtotal": self.subtotal,
            "failure_buffer": self.failure_buffer,
            "markup": self.markup,
            "total": self.total,
        }


@dataclass(frozen=True)
class JobParameters:
    """Rates that were applied when the job was calculated."""

    electricity_rate: float = DEFAULT_CONFIG.electricity_rate
    failure_rate: float = DEFAULT_CONFIG.failure_rate
    labor_hourly_rate: float = 0.0
    labor_hours: float = 0.0
    markup_percent: float = 0.0

    def to_record(self) -> Dict[str, float]:
        """Convert to a plain mapping for storage."""
        return {
            "electricity_rate": self.electricity_rate,
            "failure_rate": self.failure_rate,
            "labor_hourly_rate": self.labor_hourly_rate,
            "labor_hours": self.labor_hours,
            "markup_percent": self.markup_percent,
        }


@dataclass(frozen=True)
class ConsumableUsage:
    """Cost allocated to one consumable in a job."""

    id: str
    name: str
    cost: float


@dataclass(frozen=True)
class PrintJob:
    """Result record of one calculation.

    Cost figures and parameters never change once the job exists. Only the
    status (with its completion timestamp and outcome) and the tags move on,
    through methods that return a new PrintJob.

    Attributes:
        id: Stable identifier
        name: Job name
        description: Free-form description
        source_type: Whether the usage figures were typed in or read from G-code
        gcode_file_name: Name of the G-code file the figures came from
        slicer_type: Slicer that produced the G-code
        printer_id: Printer used (lookup only)
        filament_id: Filament used (lookup only)
        consumable_ids: Consumables charged (lookup only)
        print_time_minutes: Print time applied
        filament_grams: Filament weight applied
        filament_meters: Filament length, when known
        costs: Frozen cost figures
        params: Rates applied
        consumables_used: Per-consumable cost lines
        status: Lifecycle status
        actual_outcome: Failure reason or other outcome note
        tags: Free-form tags
        created_at: When the job was calculated
        completed_at: When the job completed or failed
    """

    id: str = field(default_factory=new_id)
    name: str = "Untitled Print"
    description: str = ""
    source_type: SourceType = SourceType.MANUAL
    gcode_file_name: Optional[str] = None
    slicer_type: Optional[str] = None
    printer_id: Optional[str] = None
    filament_id: Optional[str] = None
    consumable_ids: Tuple[str, ...] = ()
    print_time_minutes: float = 0.0
    filament_grams: float = 0.0
    filament_meters: float = 0.0
    costs: JobCosts = field(default_factory=JobCosts)
    params: JobParameters = field(default_factory=JobParameters)
    consumables_used: Tuple[ConsumableUsage, ...] = ()
    status: JobStatus = JobStatus.CALCULATED
    actual_outcome: Optional[str] = None
    tags: Tuple[str, ...] = ()
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def _transition(self, target: JobStatus, **changes) -> "PrintJob":
        if target not in STATUS_TRANSITIONS[self.status]:
            raise ValueError(
                f"cannot change job status from {self.status.value} to {target.value}"
            )
        return replace(self, status=target, **changes)

    def start(self) -> "PrintJob":
        """Move a calculated job to printing."""
        return self._transition(JobStatus.PRINTING)

    def mark_completed(self, timestamp: datetime) -> "PrintJob":
        """Mark the job completed at the given time."""
        return self._transition(JobStatus.COMPLETED, completed_at=timestamp)

    def mark_failed(self, timestamp: datetime, reason: Optional[str] = None) -> "PrintJob":
        """Mark the job failed at the given time, optionally recording why."""
        return self._transition(JobStatus.FAILED, completed_at=timestamp, actual_outcome=reason)

    def add_tag(self, tag: str) -> "PrintJob":
        """Return a copy with the tag added (unchanged if already present)."""
        if tag in self.tags:
            return self
        return replace(self, tags=self.tags + (tag,))

    def remove_tag(self, tag: str) -> "PrintJob":
        """Return a copy without the tag (unchanged if absent)."""
        if tag not in self.tags:
            return self
        return replace(self, tags=tuple(t for t in self.tags if t != tag))

    def cost_per_gram(self) -> float:
        """Total cost per gram of filament (0.0 without filament)."""
        if self.filament_grams <= 0:
            return 0.0
        return self.costs.total / self.filament_grams

    def cost_per_hour(self) -> float:
        """Total cost per hour of printing (0.0 without print time)."""
        if self.print_time_minutes <= 0:
            return 0.0
        return self.costs.total / (self.print_time_minutes / MINUTES_PER_HOUR)

    def percentages(self) -> Dict[str, float]:
        """Share of each component in the subtotal, 0-100 (all zero when subtotal <= 0)."""
        subtotal = self.costs.subtotal
        if subtotal <= 0:
            return {name: 0.0 for name in COMPONENTS}
        return {name: getattr(self.costs, name) / subtotal * 100 for name in COMPONENTS}

    def clone(self, created_at: datetime, job_id: Optional[str] = None) -> "PrintJob":
        """Copy the job under a new id, back in the calculated state."""
        return replace(
            self,
            id=job_id or new_id(),
            status=JobStatus.CALCULATED,
            actual_outcome=None,
            created_at=created_at,
            completed_at=None,
        )

    @classmethod
    def from_record(
        cls, record: Mapping[str, Any], config: CostConfig = DEFAULT_CONFIG
    ) -> "PrintJob":
        """Build a PrintJob from a stored record, filling absent fields with defaults.

        Raises:
            ValueError: If the record carries an unknown status or source type
        """
        costs = record.get("costs") or {}
        params = record.get("params") or {}
        return cls(
            id=get_or(record, "id", None) or new_id(),
            name=get_or(record, "name", "Untitled Print"),
            description=get_or(record, "description", ""),
            source_type=SourceType(get_or(record, "source_type", SourceType.MANUAL.value)),
            gcode_file_name=record.get("gcode_file_name"),
            slicer_type=record.get("slicer_type"),
            printer_id=record.get("printer_id"),
            filament_id=record.get("filament_id"),
            consumable_ids=tuple(record.get("consumable_ids") or ()),
            print_time_minutes=get_or(record, "print_time_minutes", 0.0),
            filament_grams=get_or(record, "filament_grams", 0.0),
            filament_meters=get_or(record, "filament_meters", 0.0),
            costs=JobCosts(**{key: get_or(costs, key, 0.0) for key in JobCosts().to_record()}),
            params=JobParameters(
                electricity_rate=get_or(params, "electricity_rate", config.electricity_rate),
                failure_rate=get_or(params, "failure_rate", config.failure_rate),
                labor_hourly_rate=get_or(params, "labor_hourly_rate", 0.0),
                labor_hours=get_or(params, "labor_hours", 0.0),
                markup_percent=get_or(params, "markup_percent", 0.0),
            ),
            consumables_used=tuple(
                ConsumableUsage(
                    id=entry["id"],
                    name=get_or(entry, "name", ""),
                    cost=get_or(entry, "cost", 0.0),
                )
                for entry in record.get("consumables_used") or ()
            ),
            status=JobStatus(get_or(record, "status", JobStatus.CALCULATED.value)),
            actual_outcome=record.get("actual_outcome"),
            tags=tuple(record.get("tags") or ()),
            created_at=parse_timestamp(record.get("created_at")),
            completed_at=parse_timestamp(record.get("completed_at")),
        )

    def to_record(self) -> Dict[str, Any]:
        """Convert to a plain mapping for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "source_type": self.source_type.value,
            "gcode_file_name": self.gcode_file_name,
            "slicer_type": self.slicer_type,
            "printer_id": self.printer_id,
            "filament_id": self.filament_id,
            "consumable_ids": list(self.consumable_ids),
            "print_time_minutes": self.print_time_minutes,
            "filament_grams": self.filament_grams,
            "filament_meters": self.filament_meters,
            "costs": self.costs.to_record(),
            "params": self.params.to_record(),
            "consumables_used": [
                {"id": c.id, "name": c.name, "cost": c.cost} for c in self.consumables_used
            ],
            "status": self.status.value,
            "actual_outcome": self.actual_outcome,
            "tags": list(self.tags),
            "created_at": format_timestamp(self.created_at),
            "completed_at": format_timestamp(self.completed_at),
        }
