"""Engine-level configuration defaults for cost calculation."""

from dataclasses import dataclass, replace

# Time conversion constant
MINUTES_PER_HOUR = 60.0

# Power conversion constant
WATTS_PER_KILOWATT = 1000.0


@dataclass(frozen=True)
class CostConfig:
    """Immutable table of calculation defaults.

    A config is supplied once when a CostEngine is built and is never changed
    afterwards. Use with_overrides() to derive a variant.

    Attributes:
        electricity_rate: Price per kWh used when a request omits one
        failure_rate: Fraction of prints expected to fail (0-1)
        labor_hourly_rate: Labor price per hour used when a request omits one
        markup_percent: Profit markup applied on top of the failure-adjusted cost
        filament_diameter: Default filament diameter in millimeters
        printer_lifetime_hours: Default expected printer lifetime in hours
        printer_power_watts: Default printer draw while printing, in watts
        printer_idle_watts: Default printer draw while idle, in watts
        printer_heated_watts: Default printer draw while heating, in watts
        quick_printer_price: Printer purchase price assumed by quick estimates
        quick_consumables_per_hour: Consumable cost per hour assumed by quick estimates
        currency_code: ISO currency code of every monetary amount
        currency_symbol: Currency symbol for display collaborators
    """

    electricity_rate: float = 0.15
    failure_rate: float = 0.05
    labor_hourly_rate: float = 0.0
    markup_percent: float = 0.0
    filament_diameter: float = 1.75
    printer_lifetime_hours: float = 5000.0
    printer_power_watts: float = 120.0
    printer_idle_watts: float = 10.0
    printer_heated_watts: float = 200.0
    quick_printer_price: float = 300.0
    quick_consumables_per_hour: float = 0.05
    currency_code: str = "USD"
    currency_symbol: str = "$"

    def __post_init__(self) -> None:
        """Validate configured defaults."""
        if self.electricity_rate < 0:
            raise ValueError(f"electricity_rate must be non-negative, got {self.electricity_rate}")
        if not 0 <= self.failure_rate <= 1:
            raise ValueError(f"failure_rate must be between 0 and 1, got {self.failure_rate}")
        if self.labor_hourly_rate < 0:
            raise ValueError(
                f"labor_hourly_rate must be non-negative, got {self.labor_hourly_rate}"
            )
        if self.markup_percent < 0:
            raise ValueError(f"markup_percent must be non-negative, got {self.markup_percent}")
        if self.filament_diameter <= 0:
            raise ValueError(f"filament_diameter must be positive, got {self.filament_diameter}")
        if self.printer_lifetime_hours <= 0:
            raise ValueError(
                f"printer_lifetime_hours must be positive, got {self.printer_lifetime_hours}"
            )
        if self.printer_power_watts < 0:
            raise ValueError(
                f"printer_power_watts must be non-negative, got {self.printer_power_watts}"
            )

    def with_overrides(self, **overrides) -> "CostConfig":
        """Return a copy of this config with the given fields replaced."""
        return replace(self, **overrides)


DEFAULT_CONFIG = CostConfig()
