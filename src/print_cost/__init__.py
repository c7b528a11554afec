"""3D print cost calculation with printer depreciation, consumable wear and scenario comparison."""

from .break_even import BreakEvenResult, analyze_break_even
from .calculator import CalculationRequest, CostBreakdown, CostEngine, validate_request
from .comparison import Scenario, ScenarioResult, compare_scenarios
from .config import DEFAULT_CONFIG, CostConfig
from .history import HistoryStats, summarize_history
from .models import AuxiliaryModule, Consumable, Filament, PrintJob, Printer

__all__ = [
    "CostEngine",
    "CalculationRequest",
    "CostBreakdown",
    "validate_request",
    "CostConfig",
    "DEFAULT_CONFIG",
    "Scenario",
    "ScenarioResult",
    "compare_scenarios",
    "BreakEvenResult",
    "analyze_break_even",
    "HistoryStats",
    "summarize_history",
    "Printer",
    "AuxiliaryModule",
    "Filament",
    "Consumable",
    "PrintJob",
]
