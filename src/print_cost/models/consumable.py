"""Consumable (wear part) model with wear tracking and hourly amortization."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from print_cost.models.amortization import cost_for_minutes, per_hour_rate, usage_percentage
from print_cost.models.records import format_timestamp, get_or, new_id, parse_timestamp
from print_cost.profiles import (
    CONSUMABLE_TYPES,
    DEFAULT_CONSUMABLE_TYPE,
    consumable_type_or_default,
    get_consumable_type,
)

# Wear percentage at which a part is flagged for replacement
DEFAULT_REPLACEMENT_THRESHOLD = 90.0

# Wear percentage from which a part is no longer considered in good condition
FAIR_WEAR_THRESHOLD = 70.0


class WearLevel(Enum):
    """Condition of a wear part derived from its wear percentage."""

    GOOD = "good"  # below 70%
    FAIR = "fair"  # 70% up to the replacement threshold
    REPLACE_SOON = "warning"  # 90% up to 100%
    REPLACE_NOW = "critical"  # lifetime used up


@dataclass(frozen=True)
class ReplacementRecord:
    """Usage counters captured when a consumable was replaced.

    Attributes:
        timestamp: When the replacement happened
        hours_used: Hours accrued by the replaced part
        grams_used: Filament grams pushed through the replaced part
        prints_completed: Prints completed with the replaced part
    """

    timestamp: datetime
    hours_used: float
    grams_used: float
    prints_completed: int

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ReplacementRecord":
        """Build from a stored history entry."""
        return cls(
            timestamp=parse_timestamp(record["timestamp"]),
            hours_used=get_or(record, "hours_used", 0.0),
            grams_used=get_or(record, "grams_used", 0.0),
            prints_completed=get_or(record, "prints_completed", 0),
        )

    def to_record(self) -> Dict[str, Any]:
        """Convert to a plain mapping for storage."""
        return {
            "timestamp": format_timestamp(self.timestamp),
            "hours_used": self.hours_used,
            "grams_used": self.grams_used,
            "prints_completed": self.prints_completed,
        }


@dataclass(frozen=True)
class Consumable:
    """Wear part (nozzle, build plate, belt, ...) whose cost is amortized per hour.

    Price and lifetime default to the values of the consumable type in
    CONSUMABLE_TYPES when not given.

    Attributes:
        id: Stable identifier
        name: User-given name, empty to use the type name
        type: Consumable type key (e.g. "nozzle-brass")
        printer_id: Printer this part belongs to, or None when shared by all printers
        unit_price: Price of one part
        quantity: Parts in stock (never negative)
        estimated_lifetime_hours: Expected lifetime of one part in hours
        current_hours: Hours accrued by the part currently installed
        estimated_lifetime_prints: Optional expected lifetime in prints
        current_prints: Prints completed with the part currently installed
        estimated_lifetime_grams: Optional expected lifetime in grams of filament
        current_grams: Grams pushed through the part currently installed
        last_replaced: When the part was last replaced
        replacement_history: Append-only snapshots taken at each replacement
        notes: Free-form notes
        created_at: Creation timestamp supplied by the caller
        updated_at: Last modification timestamp supplied by the caller
    """

    id: str = field(default_factory=new_id)
    name: str = ""
    type: str = DEFAULT_CONSUMABLE_TYPE
    printer_id: Optional[str] = None
    unit_price: Optional[float] = None
    quantity: int = 1
    estimated_lifetime_hours: Optional[float] = None
    current_hours: float = 0.0
    estimated_lifetime_prints: Optional[int] = None
    current_prints: int = 0
    estimated_lifetime_grams: Optional[float] = None
    current_grams: float = 0.0
    last_replaced: Optional[datetime] = None
    replacement_history: Tuple[ReplacementRecord, ...] = ()
    notes: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Fill price and lifetime from the consumable type when not given."""
        defaults = consumable_type_or_default(self.type)
        if self.unit_price is None:
            object.__setattr__(self, "unit_price", defaults.default_price)
        if self.estimated_lifetime_hours is None:
            object.__setattr__(self, "estimated_lifetime_hours", defaults.default_lifetime_hours)

    def cost_per_hour(self) -> float:
        """Unit price spread over the expected lifetime (0.0 if lifetime <= 0)."""
        return per_hour_rate(self.unit_price, self.estimated_lifetime_hours)

    def cost(self, minutes: float) -> float:
        """Share of the part's price attributable to a print of the given duration."""
        return cost_for_minutes(self.cost_per_hour(), minutes)

    def wear_percentage(self) -> float:
        """Share of the expected lifetime already used, capped at 100."""
        return usage_percentage(self.current_hours, self.estimated_lifetime_hours)

    def remaining_hours(self) -> float:
        """Hours left before the expected lifetime is reached (never negative)."""
        return max(0.0, self.estimated_lifetime_hours - self.current_hours)

    def needs_replacement(self, threshold: float = DEFAULT_REPLACEMENT_THRESHOLD) -> bool:
        """Whether wear has reached the threshold percentage."""
        return self.wear_percentage() >= threshold

    def wear_level(self) -> WearLevel:
        """Classify the current wear percentage."""
        percentage = self.wear_percentage()
        if percentage >= 100:
            return WearLevel.REPLACE_NOW
        if percentage >= DEFAULT_REPLACEMENT_THRESHOLD:
            return WearLevel.REPLACE_SOON
        if percentage >= FAIR_WEAR_THRESHOLD:
            return WearLevel.FAIR
        return WearLevel.GOOD

    def record_usage(self, hours: float, grams: float, timestamp: datetime) -> "Consumable":
        """Return a copy with one print's usage added to the counters.

        Args:
            hours: Print time in hours
            grams: Filament used in grams
            timestamp: Time of the update, supplied by the caller

        Returns:
            Updated consumable; the caller persists it once per completed print
        """
        return replace(
            self,
            current_hours=self.current_hours + hours,
            current_grams=self.current_grams + grams,
            current_prints=self.current_prints + 1,
            updated_at=timestamp,
        )

    def record_replacement(self, timestamp: datetime) -> "Consumable":
        """
        Return a copy reflecting the replacement of the installed part.

        The current counters are appended to replacement_history and reset to
        zero, one part is taken from stock (quantity floored at 0), and
        last_replaced is set. Call once per physical replacement.

        Args:
            timestamp: Time of the replacement, supplied by the caller

        Returns:
            Updated consumable
        """
        snapshot = ReplacementRecord(
            timestamp=timestamp,
            hours_used=self.current_hours,
            grams_used=self.current_grams,
            prints_completed=self.current_prints,
        )
        return replace(
            self,
            replacement_history=self.replacement_history + (snapshot,),
            current_hours=0.0,
            current_grams=0.0,
            current_prints=0,
            quantity=max(0, self.quantity - 1),
            last_replaced=timestamp,
            updated_at=timestamp,
        )

    def average_lifetime_hours(self) -> Optional[float]:
        """Mean hours reached by replaced parts, or None without history."""
        if not self.replacement_history:
            return None
        total = sum(entry.hours_used for entry in self.replacement_history)
        return total / len(self.replacement_history)

    def type_name(self) -> str:
        """Display name of the consumable type."""
        entry = CONSUMABLE_TYPES.get(self.type)
        return entry.name if entry else self.type

    def display_name(self) -> str:
        """User-given name, or the type name."""
        return self.name or self.type_name()

    def applies_to(self, printer_id: str, include_shared: bool = True) -> bool:
        """Whether this part wears when the given printer prints."""
        if self.printer_id is None:
            return include_shared
        return self.printer_id == printer_id

    @classmethod
    def from_type(cls, type_key: str, **overrides) -> "Consumable":
        """Create a consumable of a known type; raises ValueError for unknown types."""
        get_consumable_type(type_key)
        return cls(type=type_key, **overrides)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Consumable":
        """Build a Consumable from a stored record, filling absent fields with defaults."""
        history = record.get("replacement_history") or ()
        return cls(
            id=get_or(record, "id", None) or new_id(),
            name=get_or(record, "name", ""),
            type=get_or(record, "type", DEFAULT_CONSUMABLE_TYPE),
            printer_id=record.get("printer_id"),
            unit_price=record.get("unit_price"),
            quantity=get_or(record, "quantity", 1),
            estimated_lifetime_hours=record.get("estimated_lifetime_hours"),
            current_hours=get_or(record, "current_hours", 0.0),
            estimated_lifetime_prints=record.get("estimated_lifetime_prints"),
            current_prints=get_or(record, "current_prints", 0),
            estimated_lifetime_grams=record.get("estimated_lifetime_grams"),
            current_grams=get_or(record, "current_grams", 0.0),
            last_replaced=parse_timestamp(record.get("last_replaced")),
            replacement_history=tuple(ReplacementRecord.from_record(h) for h in history),
            notes=get_or(record, "notes", ""),
            created_at=parse_timestamp(record.get("created_at")),
            updated_at=parse_timestamp(record.get("updated_at")),
        )

    def to_record(self) -> Dict[str, Any]:
        """Convert to a plain mapping for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "printer_id": self.printer_id,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "estimated_lifetime_hours": self.estimated_lifetime_hours,
            "current_hours": self.current_hours,
            "estimated_lifetime_prints": self.estimated_lifetime_prints,
            "current_prints": self.current_prints,
            "estimated_lifetime_grams": self.estimated_lifetime_grams,
            "current_grams": self.current_grams,
            "last_replaced": format_timestamp(self.last_replaced),
            "replacement_history": [entry.to_record() for entry in self.replacement_history],
            "notes": self.notes,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }


def consumables_for_printer(
    consumables: Iterable[Consumable], printer_id: str, include_shared: bool = True
) -> List[Consumable]:
    """Select the consumables that wear when the given printer prints.

    Args:
        consumables: All known consumables
        printer_id: Printer to select for
        include_shared: Also select parts not tied to any printer (default: True)

    Returns:
        Matching consumables in their original order
    """
    return [c for c in consumables if c.applies_to(printer_id, include_shared)]
