"""Printer and auxiliary module models with depreciation and power draw."""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple

from print_cost.config import DEFAULT_CONFIG, MINUTES_PER_HOUR, CostConfig
from print_cost.models.amortization import (
    cost_for_minutes,
    energy_kwh,
    per_hour_rate,
    usage_percentage,
)
from print_cost.models.records import format_timestamp, get_or, new_id, parse_timestamp
from print_cost.profiles import get_auxiliary_preset, get_printer_preset

logger = logging.getLogger(__name__)

# Build volume assumed when a record carries none (x, y, z in mm)
DEFAULT_BUILD_VOLUME = (220.0, 220.0, 250.0)


@dataclass(frozen=True)
class AuxiliaryModule:
    """Optional sub-system attached to a printer (e.g. a multi-material unit).

    It draws power while the printer works and depreciates on its own schedule.

    Attributes:
        name: Display name of the module
        type: Preset key the module was created from, or "" for custom modules
        working_watts: Draw while the printer is printing, in watts
        standby_watts: Draw while idle, in watts
        purchase_price: Purchase price of the module
        estimated_lifetime_hours: Expected operating lifetime in hours
        current_hours: Hours of use accrued so far
    """

    name: str = ""
    type: str = ""
    working_watts: float = 0.0
    standby_watts: float = 0.0
    purchase_price: float = 0.0
    estimated_lifetime_hours: float = 5000.0
    current_hours: float = 0.0

    def depreciation_per_hour(self) -> float:
        """Purchase price spread over the expected lifetime (0.0 if lifetime <= 0)."""
        return per_hour_rate(self.purchase_price, self.estimated_lifetime_hours)

    def depreciation_cost(self, minutes: float) -> float:
        """Depreciation attributable to a print of the given duration."""
        return cost_for_minutes(self.depreciation_per_hour(), minutes)

    def add_print_time(self, minutes: float) -> "AuxiliaryModule":
        """Return a copy with the print time accrued (negative durations are ignored)."""
        hours = max(0.0, minutes) / MINUTES_PER_HOUR
        return replace(self, current_hours=self.current_hours + hours)

    @classmethod
    def from_preset(cls, key: str, **overrides) -> "AuxiliaryModule":
        """Create a module from AUXILIARY_PRESETS, optionally overriding fields."""
        preset = get_auxiliary_preset(key)
        values = dict(
            name=preset.name,
            type=key,
            working_watts=preset.working_watts,
            standby_watts=preset.standby_watts,
            purchase_price=preset.purchase_price,
            estimated_lifetime_hours=preset.estimated_lifetime_hours,
        )
        values.update(overrides)
        return cls(**values)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "AuxiliaryModule":
        """Build a module from a stored record, filling absent fields with defaults."""
        power = record.get("power_consumption") or {}
        return cls(
            name=get_or(record, "name", ""),
            type=get_or(record, "type", ""),
            working_watts=get_or(power, "working", 0.0),
            standby_watts=get_or(power, "standby", 0.0),
            purchase_price=get_or(record, "purchase_price", 0.0),
            estimated_lifetime_hours=get_or(record, "estimated_lifetime_hours", 5000.0),
            current_hours=get_or(record, "current_hours", 0.0),
        )

    def to_record(self) -> Dict[str, Any]:
        """Convert to a plain mapping for storage."""
        return {
            "type": self.type,
            "name": self.name,
            "power_consumption": {
                "standby": self.standby_watts,
                "working": self.working_watts,
            },
            "purchase_price": self.purchase_price,
            "estimated_lifetime_hours": self.estimated_lifetime_hours,
            "current_hours": self.current_hours,
        }


@dataclass(frozen=True)
class Printer:
    """3D printer profile with power consumption and depreciation settings.

    Note:
        Instances are immutable. Mutators such as add_print_time() return a new
        Printer; persisting it (exactly once per event) is up to the caller.

    Attributes:
        id: Stable identifier
        name: Model or user-given name
        manufacturer: Printer manufacturer
        model: Model designation
        printing_watts: Average draw while printing, in watts
        idle_watts: Draw while idle, in watts
        heated_watts: Draw while heating up, in watts
        purchase_price: Purchase price of the printer
        estimated_lifetime_hours: Expected operating lifetime in hours
        current_hours: Hours of printing accrued so far (never decreases)
        default_failure_rate: Failure rate usually applied to this printer's jobs
        build_volume: Build volume (x, y, z) in millimeters
        auxiliary: Attached auxiliary module, or None
        consumable_ids: Identifiers of consumables linked to this printer
        notes: Free-form notes
        created_at: Creation timestamp supplied by the caller
        updated_at: Last modification timestamp supplied by the caller
    """

    id: str = field(default_factory=new_id)
    name: str = ""
    manufacturer: str = ""
    model: str = ""
    printing_watts: float = DEFAULT_CONFIG.printer_power_watts
    idle_watts: float = DEFAULT_CONFIG.printer_idle_watts
    heated_watts: float = DEFAULT_CONFIG.printer_heated_watts
    purchase_price: float = 0.0
    estimated_lifetime_hours: float = DEFAULT_CONFIG.printer_lifetime_hours
    current_hours: float = 0.0
    default_failure_rate: float = DEFAULT_CONFIG.failure_rate
    build_volume: Tuple[float, float, float] = DEFAULT_BUILD_VOLUME
    auxiliary: Optional[AuxiliaryModule] = None
    consumable_ids: Tuple[str, ...] = ()
    notes: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_auxiliary(self) -> bool:
        """Whether an auxiliary module is attached."""
        return self.auxiliary is not None

    def depreciation_per_hour(self) -> float:
        """Printer depreciation per hour, excluding any auxiliary module."""
        return per_hour_rate(self.purchase_price, self.estimated_lifetime_hours)

    def depreciation_cost(self, minutes: float) -> float:
        """Printer depreciation for a print of the given duration."""
        return cost_for_minutes(self.depreciation_per_hour(), minutes)

    def auxiliary_depreciation_per_hour(self) -> float:
        """Auxiliary module depreciation per hour (0.0 without a module)."""
        if self.auxiliary is None:
            return 0.0
        return self.auxiliary.depreciation_per_hour()

    def auxiliary_depreciation_cost(self, minutes: float) -> float:
        """Auxiliary module depreciation for a print of the given duration."""
        if self.auxiliary is None:
            return 0.0
        return self.auxiliary.depreciation_cost(minutes)

    def total_depreciation_per_hour(self) -> float:
        """Printer plus auxiliary depreciation per hour."""
        return self.depreciation_per_hour() + self.auxiliary_depreciation_per_hour()

    def total_power_watts(self) -> float:
        """Draw while printing, including the auxiliary module's working draw."""
        watts = self.printing_watts
        if self.auxiliary is not None:
            watts += self.auxiliary.working_watts
        return watts

    def electricity_cost(self, minutes: float, rate_per_kwh: float) -> float:
        """Energy cost of printing for the given duration.

        Args:
            minutes: Print time in minutes
            rate_per_kwh: Electricity price per kWh

        Returns:
            Cost of the energy drawn by the printer and any auxiliary module
        """
        return energy_kwh(self.total_power_watts(), minutes) * rate_per_kwh

    def remaining_lifetime_hours(self) -> float:
        """Hours left before the expected lifetime is reached (never negative)."""
        return max(0.0, self.estimated_lifetime_hours - self.current_hours)

    def lifetime_percentage(self) -> float:
        """Share of the expected lifetime already used, 0-100."""
        return usage_percentage(self.current_hours, self.estimated_lifetime_hours)

    def add_print_time(self, minutes: float, timestamp: datetime) -> "Printer":
        """Return a copy with the print time accrued on the printer and its module.

        Negative durations are ignored so current_hours never decreases.
        """
        minutes = max(0.0, minutes)
        auxiliary = self.auxiliary.add_print_time(minutes) if self.auxiliary else None
        return replace(
            self,
            current_hours=self.current_hours + minutes / MINUTES_PER_HOUR,
            auxiliary=auxiliary,
            updated_at=timestamp,
        )

    def link_consumable(self, consumable_id: str, timestamp: datetime) -> "Printer":
        """Return a copy linked to the consumable (unchanged if already linked)."""
        if consumable_id in self.consumable_ids:
            return self
        return replace(
            self, consumable_ids=self.consumable_ids + (consumable_id,), updated_at=timestamp
        )

    def unlink_consumable(self, consumable_id: str, timestamp: datetime) -> "Printer":
        """Return a copy without the consumable link (unchanged if not linked)."""
        if consumable_id not in self.consumable_ids:
            return self
        remaining = tuple(cid for cid in self.consumable_ids if cid != consumable_id)
        return replace(self, consumable_ids=remaining, updated_at=timestamp)

    def display_name(self) -> str:
        """Manufacturer and name, or just the name, or a placeholder."""
        if self.manufacturer and self.name:
            return f"{self.manufacturer} {self.name}"
        return self.name or "Unnamed Printer"

    @classmethod
    def from_preset(
        cls, key: str, auxiliary: Optional[AuxiliaryModule] = None, **overrides
    ) -> "Printer":
        """
        Create a Printer from a PRINTER_PRESETS entry.

        Args:
            key: Preset key (e.g. "prusa-mk4")
            auxiliary: Optional auxiliary module to attach
            **overrides: Any Printer field, e.g. purchase_price or id

        Returns:
            Printer with the preset's power draw, lifetime and build volume

        Raises:
            ValueError: If the preset key is unknown

        Examples:
            >>> mk4 = Printer.from_preset("prusa-mk4", purchase_price=1099)
            >>> mk4.display_name()
            'Prusa MK4'
        """
        preset = get_printer_preset(key)
        values: Dict[str, Any] = dict(
            name=preset.name,
            manufacturer=preset.manufacturer,
            model=preset.model,
            printing_watts=preset.printing_watts,
            idle_watts=preset.idle_watts,
            heated_watts=preset.heated_watts,
            estimated_lifetime_hours=preset.estimated_lifetime_hours,
            build_volume=preset.build_volume,
            auxiliary=auxiliary,
        )
        values.update(overrides)
        return cls(**values)

    @classmethod
    def from_record(
        cls, record: Mapping[str, Any], config: CostConfig = DEFAULT_CONFIG
    ) -> "Printer":
        """Build a Printer from a stored record, filling absent fields from config.

        Args:
            record: Plain mapping as produced by to_record()
            config: Source of the printer power, lifetime and failure rate defaults

        Returns:
            Fully populated Printer
        """
        power = record.get("power_consumption") or {}
        volume = record.get("build_volume") or {}
        auxiliary = None
        if record.get("auxiliary") and record.get("has_auxiliary", True):
            auxiliary = AuxiliaryModule.from_record(record["auxiliary"])

        if "id" not in record:
            logger.debug("Printer record without id, generating a new one")

        return cls(
            id=get_or(record, "id", None) or new_id(),
            name=get_or(record, "name", ""),
            manufacturer=get_or(record, "manufacturer", ""),
            model=get_or(record, "model", ""),
            printing_watts=get_or(power, "printing", config.printer_power_watts),
            idle_watts=get_or(power, "idle", config.printer_idle_watts),
            heated_watts=get_or(power, "heated", config.printer_heated_watts),
            purchase_price=get_or(record, "purchase_price", 0.0),
            estimated_lifetime_hours=get_or(
                record, "estimated_lifetime_hours", config.printer_lifetime_hours
            ),
            current_hours=get_or(record, "current_hours", 0.0),
            default_failure_rate=get_or(record, "default_failure_rate", config.failure_rate),
            build_volume=(
                get_or(volume, "x", DEFAULT_BUILD_VOLUME[0]),
                get_or(volume, "y", DEFAULT_BUILD_VOLUME[1]),
                get_or(volume, "z", DEFAULT_BUILD_VOLUME[2]),
            ),
            auxiliary=auxiliary,
            consumable_ids=tuple(record.get("consumable_ids") or ()),
            notes=get_or(record, "notes", ""),
            created_at=parse_timestamp(record.get("created_at")),
            updated_at=parse_timestamp(record.get("updated_at")),
        )

    def to_record(self) -> Dict[str, Any]:
        """Convert to a plain mapping for storage."""
        x, y, z = self.build_volume
        return {
            "id": self.id,
            "name": self.name,
            "manufacturer": self.manufacturer,
            "model": self.model,
            "power_consumption": {
                "printing": self.printing_watts,
                "idle": self.idle_watts,
                "heated": self.heated_watts,
            },
            "purchase_price": self.purchase_price,
            "estimated_lifetime_hours": self.estimated_lifetime_hours,
            "current_hours": self.current_hours,
            "default_failure_rate": self.default_failure_rate,
            "build_volume": {"x": x, "y": y, "z": z},
            "has_auxiliary": self.has_auxiliary,
            "auxiliary": self.auxiliary.to_record() if self.auxiliary else None,
            "consumable_ids": list(self.consumable_ids),
            "notes": self.notes,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }
