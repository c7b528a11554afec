"""Summary statistics over stored print jobs."""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Sequence, Tuple

from print_cost.models.filament import Filament
from print_cost.models.print_job import JobStatus, PrintJob


@dataclass(frozen=True)
class HistoryStats:
    """Aggregate figures over a set of print jobs.

    Attributes:
        total_prints: Number of jobs
        completed_prints: Jobs in the completed state
        failed_prints: Jobs in the failed state
        success_rate: completed / total, in percent (0 without jobs)
        total_cost: Sum of job totals
        total_filament_grams: Sum of filament used
        total_print_minutes: Sum of print time
        average_cost: total_cost / total_prints (0 without jobs)
    """

    total_prints: int
    completed_prints: int
    failed_prints: int
    success_rate: float
    total_cost: float
    total_filament_grams: float
    total_print_minutes: float
    average_cost: float


def summarize_history(jobs: Sequence[PrintJob]) -> HistoryStats:
    """Aggregate counts, costs and usage over print jobs."""
    count = len(jobs)
    completed = sum(1 for job in jobs if job.status == JobStatus.COMPLETED)
    failed = sum(1 for job in jobs if job.status == JobStatus.FAILED)
    total_cost = sum(job.costs.total for job in jobs)

    return HistoryStats(
        total_prints=count,
        completed_prints=completed,
        failed_prints=failed,
        success_rate=(completed / count) * 100 if count else 0.0,
        total_cost=total_cost,
        total_filament_grams=sum(job.filament_grams for job in jobs),
        total_print_minutes=sum(job.print_time_minutes for job in jobs),
        average_cost=total_cost / count if count else 0.0,
    )


def material_usage(jobs: Iterable[PrintJob], filaments: Iterable[Filament]) -> Dict[str, float]:
    """Grams of filament used per material.

    Jobs whose filament is unknown (deleted or never recorded) are skipped.
    """
    materials = {filament.id: filament.material for filament in filaments}
    usage: Dict[str, float] = {}
    for job in jobs:
        material = materials.get(job.filament_id)
        if material is None:
            continue
        usage[material] = usage.get(material, 0.0) + job.filament_grams
    return usage


def daily_spending(jobs: Iterable[PrintJob]) -> List[Tuple[date, float, float]]:
    """Total job cost per calendar day.

    Args:
        jobs: Print jobs; jobs without a creation timestamp are skipped

    Returns:
        (day, cost, cumulative cost) tuples sorted by day
    """
    per_day: Dict[date, float] = {}
    for job in jobs:
        if job.created_at is None:
            continue
        day = job.created_at.date()
        per_day[day] = per_day.get(day, 0.0) + job.costs.total

    spending = []
    running = 0.0
    for day in sorted(per_day):
        running += per_day[day]
        spending.append((day, per_day[day], running))
    return spending
