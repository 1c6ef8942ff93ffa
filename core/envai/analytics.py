"""
Composite Analytics

Weighted composite scores and summaries built from the metric primitives.
"""

from collections.abc import Sequence

import numpy as np

from .const import DAILY_WINDOW_SIZE, ENERGY_RATE, HUMIDITY_OPTIMAL_MAX, HUMIDITY_OPTIMAL_MIN
from .metrics import (
    daily_avg_temp,
    daily_energy_usage,
    efficiency_score,
    energy_cost,
    temperature_consistency,
)
from .models import ComfortMetrics, KPIMetrics, ModeShare, Reading, SummaryStats
from .utils import require_readings, round_half_up

# Radar weights, sum to 1
COMFORT_WEIGHTS = {
    "temp_consistency": 0.3,
    "humidity_control": 0.2,
    "energy_efficiency": 0.3,
    "cost_effectiveness": 0.2,
}


def _humidity_score(humidity: float) -> float:
    if HUMIDITY_OPTIMAL_MIN <= humidity <= HUMIDITY_OPTIMAL_MAX:
        return 100
    return max(0, 100 - abs(50 - humidity) * 2)


def comfort_metrics(readings: Sequence[Reading], rate: float = ENERGY_RATE) -> ComfortMetrics:
    """Home comfort scores for the radar chart.

    Each component is rounded on its own, and overall comfort is weighted from
    the unrounded components, so it can differ by one from a weighted sum of
    the rounded values.
    """
    require_readings(readings, "comfort metrics")

    temp_consistency = temperature_consistency(readings)

    # Optimal band 40-60%, 2 points lost per % away from 50 outside it
    humidity_control = float(np.mean([_humidity_score(r.humidity) for r in readings]))

    # Relative to the highest usage in the same sequence
    max_energy = max(r.energy_usage for r in readings)
    if max_energy > 0:
        energy_efficiency = float(np.mean([max(0, 100 - r.energy_usage / max_energy * 100) for r in readings]))
    else:
        energy_efficiency = 100.0

    avg_cost = daily_energy_usage(readings) * rate / len(readings)
    cost_effectiveness = max(0, 100 - avg_cost * 10)

    overall = (
        temp_consistency * COMFORT_WEIGHTS["temp_consistency"]
        + humidity_control * COMFORT_WEIGHTS["humidity_control"]
        + energy_efficiency * COMFORT_WEIGHTS["energy_efficiency"]
        + cost_effectiveness * COMFORT_WEIGHTS["cost_effectiveness"]
    )

    return ComfortMetrics(
        temp_consistency=round_half_up(temp_consistency),
        humidity_control=round_half_up(humidity_control),
        energy_efficiency=round_half_up(energy_efficiency),
        cost_effectiveness=round_half_up(cost_effectiveness),
        overall_comfort=round_half_up(overall),
    )


def kpi_metrics(readings: Sequence[Reading], rate: float = ENERGY_RATE) -> KPIMetrics:
    """Dashboard card values.

    The latest reading is the current status; the last 24 entries form the
    "daily" slice, which assumes hourly samples.
    """
    require_readings(readings, "KPI metrics")
    latest = readings[-1]
    daily = readings[-DAILY_WINDOW_SIZE:]

    return KPIMetrics(
        current_temp=latest.current_temp,
        daily_cost=energy_cost(daily_energy_usage(daily), rate),
        efficiency=efficiency_score(latest),
        humidity=latest.humidity,
        outside_temp=latest.outside_temp,
        mode=latest.mode,
        occupancy=latest.occupancy,
        daily_avg_temp=daily_avg_temp(daily),
    )


def occupancy_efficiency(readings: Sequence[Reading]) -> int:
    """How much less energy is used when nobody is home (0-100)."""
    require_readings(readings, "occupancy efficiency")
    occupied = [r.energy_usage for r in readings if r.occupancy]
    unoccupied = [r.energy_usage for r in readings if not r.occupancy]

    occupied_avg = float(np.mean(occupied)) if occupied else 0.0
    unoccupied_avg = float(np.mean(unoccupied)) if unoccupied else 0.0

    ratio = (occupied_avg - unoccupied_avg) / occupied_avg if occupied_avg > 0 else 0.0
    return round_half_up(max(0.0, min(100.0, ratio * 100)))


def mode_distribution(readings: Sequence[Reading]) -> list[ModeShare]:
    """Share of readings per mode, in order of first appearance.

    Percentages are rounded independently and may not sum to exactly 100.
    """
    require_readings(readings, "mode distribution")
    counts: dict[str, int] = {}
    for reading in readings:
        counts[reading.mode] = counts.get(reading.mode, 0) + 1

    total = len(readings)
    return [
        ModeShare(mode=mode, count=count, percentage=round_half_up(count / total * 100))
        for mode, count in counts.items()
    ]


def weather_impact(readings: Sequence[Reading]) -> int:
    """How well energy use tracks outdoor conditions (0-100).

    A 20°F outdoor/target gap is expected to need full (5 kWh) usage.
    """
    require_readings(readings, "weather impact")
    scores = []
    for r in readings:
        expected = min(1, abs(r.outside_temp - r.target_temp) / 20)
        actual = min(1, r.energy_usage / 5)
        scores.append(abs(expected - actual))

    return round_half_up(max(0, 100 - float(np.mean(scores)) * 100))


def summary_stats(readings: Sequence[Reading], rate: float = ENERGY_RATE) -> SummaryStats:
    require_readings(readings, "summary statistics")
    total_energy = daily_energy_usage(readings)
    occupied = sum(1 for r in readings if r.occupancy)

    return SummaryStats(
        total_energy=round_half_up(total_energy, 2),
        total_cost=energy_cost(total_energy, rate),
        avg_temp=daily_avg_temp(readings),
        avg_humidity=round_half_up(float(np.mean([r.humidity for r in readings]))),
        occupancy_rate=round_half_up(occupied / len(readings) * 100),
        data_points=len(readings),
        time_range={
            "start": readings[0].timestamp.isoformat(),
            "end": readings[-1].timestamp.isoformat(),
        },
    )
