"""Preset tables for materials, printers, consumables and electricity rates.

Every default the entity models fall back to lives here as a typed, read-only
table. Lookup helpers raise ValueError for unknown keys; the entity models use
the ``*_or_default`` variants when building from partial records.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class TemperatureRange:
    """Recommended temperature window in degrees Celsius."""

    min: float
    max: float


@dataclass(frozen=True)
class MaterialProfile:
    """Physical and thermal defaults for a filament material.

    Attributes:
        density: Material density in g/cm³
        print_temp: Recommended nozzle temperature range
        bed_temp: Recommended bed temperature range
    """

    density: float
    print_temp: TemperatureRange
    bed_temp: TemperatureRange


@dataclass(frozen=True)
class PrinterPreset:
    """Published power draw and lifetime figures for a printer model.

    Attributes:
        name: Short model name
        manufacturer: Printer manufacturer
        model: Full model designation
        printing_watts: Average draw while printing, in watts
        idle_watts: Draw while idle, in watts
        heated_watts: Peak draw while heating, in watts
        estimated_lifetime_hours: Expected operating lifetime in hours
        build_volume: Build volume (x, y, z) in millimeters
    """

    name: str
    manufacturer: str
    model: str
    printing_watts: float
    idle_watts: float
    heated_watts: float
    estimated_lifetime_hours: float
    build_volume: Tuple[float, float, float]


@dataclass(frozen=True)
class AuxiliaryPreset:
    """Defaults for an auxiliary module such as a multi-material feeder."""

    name: str
    working_watts: float
    standby_watts: float
    purchase_price: float
    estimated_lifetime_hours: float


@dataclass(frozen=True)
class ConsumableType:
    """Defaults for a class of wear part."""

    name: str
    default_lifetime_hours: float
    default_price: float


@dataclass(frozen=True)
class ElectricityRate:
    """Typical residential electricity price for a location, per kWh."""

    name: str
    rate: float
    region: str


def _frozen(table: Dict) -> Mapping:
    return MappingProxyType(table)


# Material used when a filament names none
DEFAULT_MATERIAL = "PLA"

# Density assumed for materials missing from MATERIALS (g/cm³)
FALLBACK_DENSITY = 1.24
FALLBACK_PRINT_TEMP = TemperatureRange(200, 220)
FALLBACK_BED_TEMP = TemperatureRange(50, 60)

MATERIALS: Mapping[str, MaterialProfile] = _frozen(
    {
        "PLA": MaterialProfile(1.24, TemperatureRange(190, 220), TemperatureRange(50, 60)),
        "PLA+": MaterialProfile(1.24, TemperatureRange(200, 230), TemperatureRange(50, 60)),
        "PETG": MaterialProfile(1.27, TemperatureRange(220, 250), TemperatureRange(70, 85)),
        "ABS": MaterialProfile(1.04, TemperatureRange(220, 250), TemperatureRange(90, 110)),
        "ASA": MaterialProfile(1.07, TemperatureRange(230, 260), TemperatureRange(90, 110)),
        "TPU": MaterialProfile(1.21, TemperatureRange(210, 230), TemperatureRange(30, 60)),
        "Nylon": MaterialProfile(1.14, TemperatureRange(240, 270), TemperatureRange(70, 90)),
        "PC": MaterialProfile(1.20, TemperatureRange(260, 300), TemperatureRange(100, 120)),
        "HIPS": MaterialProfile(1.04, TemperatureRange(220, 240), TemperatureRange(90, 110)),
        "PVA": MaterialProfile(1.23, TemperatureRange(180, 200), TemperatureRange(45, 60)),
        "Wood-Fill": MaterialProfile(1.15, TemperatureRange(190, 220), TemperatureRange(50, 60)),
        "Carbon Fiber": MaterialProfile(
            1.30, TemperatureRange(230, 260), TemperatureRange(70, 90)
        ),
        "Metal-Fill": MaterialProfile(3.00, TemperatureRange(190, 220), TemperatureRange(50, 60)),
    }
)

# Materials that wear brass nozzles noticeably faster
ABRASIVE_MATERIALS = ("Carbon Fiber", "Metal-Fill", "Wood-Fill", "Glow-in-Dark")

PRINTER_PRESETS: Mapping[str, PrinterPreset] = _frozen(
    {
        "bambu-x1-carbon": PrinterPreset(
            "X1 Carbon", "Bambu Lab", "X1 Carbon", 105, 10, 1100, 5000, (256, 256, 256)
        ),
        "bambu-p1s": PrinterPreset("P1S", "Bambu Lab", "P1S", 105, 6, 1100, 5000, (256, 256, 256)),
        "bambu-a1": PrinterPreset("A1", "Bambu Lab", "A1", 95, 5, 1300, 5000, (256, 256, 256)),
        "bambu-a1-mini": PrinterPreset(
            "A1 mini", "Bambu Lab", "A1 mini", 80, 7, 150, 5000, (180, 180, 180)
        ),
        "bambu-h2d": PrinterPreset("H2D", "Bambu Lab", "H2D", 197, 26, 1800, 5000, (350, 320, 325)),
        "prusa-mk4": PrinterPreset("MK4", "Prusa", "MK4", 120, 10, 300, 6000, (250, 210, 220)),
        "prusa-mini": PrinterPreset("MINI+", "Prusa", "MINI+", 80, 8, 180, 5000, (180, 180, 180)),
        "prusa-xl": PrinterPreset("XL", "Prusa", "XL", 200, 15, 500, 6000, (360, 360, 360)),
        "creality-ender3-v3": PrinterPreset(
            "Ender-3 V3", "Creality", "Ender-3 V3", 150, 10, 350, 4000, (220, 220, 250)
        ),
        "creality-k1": PrinterPreset("K1", "Creality", "K1", 150, 12, 400, 4000, (220, 220, 250)),
        "creality-k1-max": PrinterPreset(
            "K1 Max", "Creality", "K1 Max", 200, 15, 500, 4000, (300, 300, 300)
        ),
        "voron-2": PrinterPreset(
            "Voron 2.4", "Voron", "2.4 (350mm)", 200, 15, 600, 5000, (350, 350, 340)
        ),
    }
)

AUXILIARY_PRESETS: Mapping[str, AuxiliaryPreset] = _frozen(
    {
        "bambu-ams": AuxiliaryPreset("AMS", 15, 2, 279, 5000),
        "bambu-ams-lite": AuxiliaryPreset("AMS lite", 10, 1, 199, 4000),
        "bambu-ams-2-pro": AuxiliaryPreset("AMS 2 Pro", 25, 3, 349, 5000),
        "prusa-mmu3": AuxiliaryPreset("MMU3", 12, 2, 299, 4000),
    }
)

# Consumable type used when a record names none
DEFAULT_CONSUMABLE_TYPE = "other"

CONSUMABLE_TYPES: Mapping[str, ConsumableType] = _frozen(
    {
        "nozzle-brass": ConsumableType("Brass Nozzle", 400, 3),
        "nozzle-steel": ConsumableType("Hardened Steel Nozzle", 1500, 25),
        "nozzle-ruby": ConsumableType("Ruby Nozzle", 3000, 90),
        "bed-pei": ConsumableType("PEI Sheet", 2000, 25),
        "bed-glass": ConsumableType("Glass Bed", 3000, 30),
        "bed-magnetic": ConsumableType("Magnetic Flex Plate", 2500, 40),
        "tube-ptfe": ConsumableType("PTFE Bowden Tube", 500, 8),
        "tube-capricorn": ConsumableType("Capricorn Tube", 800, 15),
        "gear-extruder": ConsumableType("Extruder Gear", 3000, 12),
        "belt": ConsumableType("Timing Belt", 5000, 15),
        "bearing": ConsumableType("Linear Bearing", 4000, 8),
        "heater": ConsumableType("Heater Cartridge", 3000, 10),
        "thermistor": ConsumableType("Thermistor", 3000, 5),
        "heatbreak": ConsumableType("Heat Break", 2000, 15),
        "other": ConsumableType("Other", 1000, 10),
    }
)

ELECTRICITY_RATES: Mapping[str, ElectricityRate] = _frozen(
    {
        "us-average": ElectricityRate("USA (Average)", 0.18, "North America"),
        "us-nevada": ElectricityRate("USA - Nevada", 0.12, "North America"),
        "us-texas": ElectricityRate("USA - Texas", 0.14, "North America"),
        "us-florida": ElectricityRate("USA - Florida", 0.16, "North America"),
        "us-new-york": ElectricityRate("USA - New York", 0.24, "North America"),
        "us-california": ElectricityRate("USA - California", 0.32, "North America"),
        "us-hawaii": ElectricityRate("USA - Hawaii", 0.40, "North America"),
        "canada": ElectricityRate("Canada", 0.13, "North America"),
        "mexico": ElectricityRate("Mexico", 0.08, "North America"),
        "uk": ElectricityRate("United Kingdom", 0.28, "Europe"),
        "germany": ElectricityRate("Germany", 0.37, "Europe"),
        "france": ElectricityRate("France", 0.23, "Europe"),
        "netherlands": ElectricityRate("Netherlands", 0.29, "Europe"),
        "belgium": ElectricityRate("Belgium", 0.37, "Europe"),
        "spain": ElectricityRate("Spain", 0.21, "Europe"),
        "italy": ElectricityRate("Italy", 0.43, "Europe"),
        "ireland": ElectricityRate("Ireland", 0.45, "Europe"),
        "denmark": ElectricityRate("Denmark", 0.38, "Europe"),
        "sweden": ElectricityRate("Sweden", 0.20, "Europe"),
        "norway": ElectricityRate("Norway", 0.15, "Europe"),
        "finland": ElectricityRate("Finland", 0.18, "Europe"),
        "poland": ElectricityRate("Poland", 0.18, "Europe"),
        "czech": ElectricityRate("Czech Republic", 0.22, "Europe"),
        "austria": ElectricityRate("Austria", 0.26, "Europe"),
        "switzerland": ElectricityRate("Switzerland", 0.21, "Europe"),
        "portugal": ElectricityRate("Portugal", 0.20, "Europe"),
        "greece": ElectricityRate("Greece", 0.19, "Europe"),
        "australia": ElectricityRate("Australia", 0.24, "Asia-Pacific"),
        "new-zealand": ElectricityRate("New Zealand", 0.21, "Asia-Pacific"),
        "japan": ElectricityRate("Japan", 0.20, "Asia-Pacific"),
        "south-korea": ElectricityRate("South Korea", 0.11, "Asia-Pacific"),
        "china": ElectricityRate("China", 0.08, "Asia-Pacific"),
        "india": ElectricityRate("India", 0.08, "Asia-Pacific"),
        "singapore": ElectricityRate("Singapore", 0.18, "Asia-Pacific"),
        "hong-kong": ElectricityRate("Hong Kong", 0.15, "Asia-Pacific"),
        "taiwan": ElectricityRate("Taiwan", 0.09, "Asia-Pacific"),
        "philippines": ElectricityRate("Philippines", 0.18, "Asia-Pacific"),
        "thailand": ElectricityRate("Thailand", 0.11, "Asia-Pacific"),
        "malaysia": ElectricityRate("Malaysia", 0.06, "Asia-Pacific"),
        "indonesia": ElectricityRate("Indonesia", 0.08, "Asia-Pacific"),
        "vietnam": ElectricityRate("Vietnam", 0.08, "Asia-Pacific"),
        "brazil": ElectricityRate("Brazil", 0.15, "South America"),
        "argentina": ElectricityRate("Argentina", 0.06, "South America"),
        "chile": ElectricityRate("Chile", 0.14, "South America"),
        "colombia": ElectricityRate("Colombia", 0.12, "South America"),
        "uae": ElectricityRate("United Arab Emirates", 0.08, "Middle East & Africa"),
        "saudi-arabia": ElectricityRate("Saudi Arabia", 0.05, "Middle East & Africa"),
        "israel": ElectricityRate("Israel", 0.16, "Middle East & Africa"),
        "south-africa": ElectricityRate("South Africa", 0.12, "Middle East & Africa"),
        "custom": ElectricityRate("Custom Rate", 0.15, "Other"),
    }
)


def get_material_profile(material: str) -> MaterialProfile:
    """Look up the defaults for a filament material.

    Args:
        material: Material name as used in MATERIALS (e.g. "PETG")

    Returns:
        MaterialProfile for the material

    Raises:
        ValueError: If the material is not in the table
    """
    try:
        return MATERIALS[material]
    except KeyError:
        raise ValueError(f"Unknown material: {material}") from None


def material_profile_or_default(material: str) -> MaterialProfile:
    """Material defaults, falling back to generic values for unlisted materials."""
    profile = MATERIALS.get(material)
    if profile is None:
        return MaterialProfile(FALLBACK_DENSITY, FALLBACK_PRINT_TEMP, FALLBACK_BED_TEMP)
    return profile


def get_printer_preset(key: str) -> PrinterPreset:
    """Look up a printer preset by key (e.g. "prusa-mk4")."""
    try:
        return PRINTER_PRESETS[key]
    except KeyError:
        raise ValueError(f"Unknown printer preset: {key}") from None


def get_auxiliary_preset(key: str) -> AuxiliaryPreset:
    """Look up an auxiliary module preset by key (e.g. "bambu-ams")."""
    try:
        return AUXILIARY_PRESETS[key]
    except KeyError:
        raise ValueError(f"Unknown auxiliary preset: {key}") from None


def get_consumable_type(key: str) -> ConsumableType:
    """Look up a consumable type by key (e.g. "nozzle-brass")."""
    try:
        return CONSUMABLE_TYPES[key]
    except KeyError:
        raise ValueError(f"Unknown consumable type: {key}") from None


def consumable_type_or_default(key: str) -> ConsumableType:
    """Consumable type defaults, falling back to the generic "other" entry."""
    return CONSUMABLE_TYPES.get(key, CONSUMABLE_TYPES[DEFAULT_CONSUMABLE_TYPE])


def get_electricity_rate(location: str, fallback: Optional[float] = None) -> float:
    """
    Get the electricity price per kWh for a location key.

    Args:
        location: Location key (e.g. "germany", "us-texas")
        fallback: Rate returned for unknown locations. When omitted, an
            unknown location raises ValueError.

    Returns:
        Price per kWh

    Examples:
        >>> get_electricity_rate("germany")
        0.37
        >>> get_electricity_rate("atlantis", fallback=0.15)
        0.15
    """
    entry = ELECTRICITY_RATES.get(location)
    if entry is not None:
        return entry.rate
    if fallback is None:
        raise ValueError(f"Unknown electricity location: {location}")
    return fallback


def electricity_rates_by_region() -> Dict[str, List[Tuple[str, ElectricityRate]]]:
    """Group electricity rate entries by region, preserving table order."""
    grouped: Dict[str, List[Tuple[str, ElectricityRate]]] = {}
    for key, entry in ELECTRICITY_RATES.items():
        grouped.setdefault(entry.region, []).append((key, entry))
    return grouped


def printer_presets_by_manufacturer() -> Dict[str, List[Tuple[str, PrinterPreset]]]:
    """Group printer presets by manufacturer, preserving table order."""
    grouped: Dict[str, List[Tuple[str, PrinterPreset]]] = {}
    for key, preset in PRINTER_PRESETS.items():
        grouped.setdefault(preset.manufacturer, []).append((key, preset))
    return grouped
