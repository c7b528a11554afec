"""Filament model with spool pricing and length/weight geometry."""

import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from print_cost.config import DEFAULT_CONFIG, CostConfig
from print_cost.models.records import format_timestamp, get_or, new_id, parse_timestamp
from print_cost.profiles import (
    ABRASIVE_MATERIALS,
    DEFAULT_MATERIAL,
    MATERIALS,
    TemperatureRange,
    material_profile_or_default,
)

# Millimeters per centimeter
MM_PER_CM = 10.0

DEFAULT_SPOOL_WEIGHT = 1000.0  # grams
DEFAULT_SPOOL_PRICE = 25.0


def _cross_section_cm2(diameter_mm: float) -> float:
    """Cross-sectional area of a filament strand in cm²."""
    radius_cm = (diameter_mm / 2) / MM_PER_CM
    return math.pi * radius_cm**2


@dataclass(frozen=True)
class Filament:
    """Filament profile with material properties, pricing and stock.

    Note:
        Density and temperature ranges default to the values of the material
        in MATERIALS. Use with_material() to switch material and re-apply them.

    Attributes:
        id: Stable identifier
        name: Product name
        manufacturer: Filament manufacturer
        material: Material name (e.g. "PLA", "PETG")
        color: Color name
        color_hex: Display color as a hex string
        diameter: Strand diameter in millimeters
        density: Material density in g/cm³
        spool_weight: Net filament weight per spool in grams
        spool_price: Price per spool
        print_temp: Recommended nozzle temperature range
        bed_temp: Recommended bed temperature range
        in_stock_grams: Grams of this filament on hand
        spools_in_stock: Spools of this filament on hand
        notes: Free-form notes
        created_at: Creation timestamp supplied by the caller
        updated_at: Last modification timestamp supplied by the caller
    """

    id: str = field(default_factory=new_id)
    name: str = ""
    manufacturer: str = ""
    material: str = DEFAULT_MATERIAL
    color: str = ""
    color_hex: str = "#808080"
    diameter: float = DEFAULT_CONFIG.filament_diameter
    density: Optional[float] = None
    spool_weight: float = DEFAULT_SPOOL_WEIGHT
    spool_price: float = DEFAULT_SPOOL_PRICE
    print_temp: Optional[TemperatureRange] = None
    bed_temp: Optional[TemperatureRange] = None
    in_stock_grams: float = 0.0
    spools_in_stock: int = 0
    notes: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Fill density and temperatures from the material table when not given."""
        profile = material_profile_or_default(self.material)
        if self.density is None:
            object.__setattr__(self, "density", profile.density)
        if self.print_temp is None:
            object.__setattr__(self, "print_temp", profile.print_temp)
        if self.bed_temp is None:
            object.__setattr__(self, "bed_temp", profile.bed_temp)

    def price_per_gram(self) -> float:
        """Spool price divided by spool weight (0.0 if the spool weight is not positive)."""
        if self.spool_weight <= 0:
            return 0.0
        return self.spool_price / self.spool_weight

    def cost(self, grams: float) -> float:
        """Cost of the given weight of filament."""
        return grams * self.price_per_gram()

    def length_to_weight(self, length_mm: float) -> float:
        """
        Convert a filament length to its weight.

        Uses the cylindrical volume model: volume = π·r²·length and
        weight = volume·density.

        Args:
            length_mm: Filament length in millimeters

        Returns:
            Weight in grams

        Examples:
            >>> pla = Filament(diameter=1.75, density=1.24)
            >>> round(pla.length_to_weight(1000.0), 3)
            2.983
        """
        length_cm = length_mm / MM_PER_CM
        volume_cm3 = _cross_section_cm2(self.diameter) * length_cm
        return volume_cm3 * self.density

    def weight_to_length(self, grams: float) -> float:
        """
        Convert a filament weight to its length; the exact inverse of length_to_weight().

        Args:
            grams: Weight in grams

        Returns:
            Length in millimeters
        """
        volume_cm3 = grams / self.density
        length_cm = volume_cm3 / _cross_section_cm2(self.diameter)
        return length_cm * MM_PER_CM

    def length_per_spool_m(self) -> float:
        """Length of filament on a full spool, in meters."""
        return self.weight_to_length(self.spool_weight) / 1000.0

    def is_abrasive(self) -> bool:
        """Whether the material or name indicates an abrasive (nozzle-wearing) filament."""
        material = self.material.lower()
        name = self.name.lower()
        return any(m.lower() in material or m.lower() in name for m in ABRASIVE_MATERIALS)

    def display_name(self) -> str:
        """Manufacturer and name, or material and color when unnamed."""
        if self.name:
            return f"{self.manufacturer} {self.name}" if self.manufacturer else self.name
        return f"{self.material} - {self.color}" if self.color else self.material

    def short_name(self) -> str:
        """Material and color."""
        return f"{self.material} {self.color}" if self.color else self.material

    def with_material(self, material: str, timestamp: datetime) -> "Filament":
        """Return a copy with a new material, re-applying known material defaults.

        Unknown materials keep the current density and temperature ranges.
        """
        profile = MATERIALS.get(material)
        if profile is None:
            return replace(self, material=material, updated_at=timestamp)
        return replace(
            self,
            material=material,
            density=profile.density,
            print_temp=profile.print_temp,
            bed_temp=profile.bed_temp,
            updated_at=timestamp,
        )

    def use_filament(self, grams: float, timestamp: datetime) -> "Filament":
        """Return a copy with the grams deducted from stock (floored at zero)."""
        return replace(
            self, in_stock_grams=max(0.0, self.in_stock_grams - grams), updated_at=timestamp
        )

    def add_spools(self, count: int, timestamp: datetime) -> "Filament":
        """Return a copy with full spools added to stock."""
        return replace(
            self,
            spools_in_stock=self.spools_in_stock + count,
            in_stock_grams=self.in_stock_grams + count * self.spool_weight,
            updated_at=timestamp,
        )

    @classmethod
    def from_record(
        cls, record: Mapping[str, Any], config: CostConfig = DEFAULT_CONFIG
    ) -> "Filament":
        """Build a Filament from a stored record, filling absent fields with defaults."""
        material = get_or(record, "material", DEFAULT_MATERIAL)
        profile = material_profile_or_default(material)
        print_temp = record.get("print_temp") or {}
        bed_temp = record.get("bed_temp") or {}
        return cls(
            id=get_or(record, "id", None) or new_id(),
            name=get_or(record, "name", ""),
            manufacturer=get_or(record, "manufacturer", ""),
            material=material,
            color=get_or(record, "color", ""),
            color_hex=get_or(record, "color_hex", "#808080"),
            diameter=get_or(record, "diameter", config.filament_diameter),
            density=get_or(record, "density", profile.density),
            spool_weight=get_or(record, "spool_weight", DEFAULT_SPOOL_WEIGHT),
            spool_price=get_or(record, "spool_price", DEFAULT_SPOOL_PRICE),
            print_temp=TemperatureRange(
                get_or(print_temp, "min", profile.print_temp.min),
                get_or(print_temp, "max", profile.print_temp.max),
            ),
            bed_temp=TemperatureRange(
                get_or(bed_temp, "min", profile.bed_temp.min),
                get_or(bed_temp, "max", profile.bed_temp.max),
            ),
            in_stock_grams=get_or(record, "in_stock_grams", 0.0),
            spools_in_stock=get_or(record, "spools_in_stock", 0),
            notes=get_or(record, "notes", ""),
            created_at=parse_timestamp(record.get("created_at")),
            updated_at=parse_timestamp(record.get("updated_at")),
        )

    def to_record(self) -> Dict[str, Any]:
        """Convert to a plain mapping for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "manufacturer": self.manufacturer,
            "material": self.material,
            "color": self.color,
            "color_hex": self.color_hex,
            "diameter": self.diameter,
            "density": self.density,
            "spool_weight": self.spool_weight,
            "spool_price": self.spool_price,
            "print_temp": {"min": self.print_temp.min, "max": self.print_temp.max},
            "bed_temp": {"min": self.bed_temp.min, "max": self.bed_temp.max},
            "in_stock_grams": self.in_stock_grams,
            "spools_in_stock": self.spools_in_stock,
            "notes": self.notes,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }
