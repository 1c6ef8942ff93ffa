"""
Metric Primitives

Single-purpose scores and aggregates over thermostat readings. Every function
is pure; aggregates raise EmptyInputError on an empty sequence instead of
producing NaN.
"""

import logging
from collections.abc import Sequence

import numpy as np

from .const import ENERGY_RATE, MODE_COOLING, MODE_HEATING, MODE_OFF, WEEKDAY_LABELS
from .models import DailyCost, EnergyBreakdown, HeatmapPoint, Reading, WeeklyCost
from .utils import require_readings, round_half_up, sunday_weekday, week_start

logger = logging.getLogger(__name__)


# --- Temperature ---------------------------------------------------------

def temperature_trends(readings: Sequence[Reading]) -> dict[str, list]:
    """Hour of day plus current/target/outside series, in sequence order."""
    return {
        "hours": [r.timestamp.hour for r in readings],
        "current_temps": [r.current_temp for r in readings],
        "target_temps": [r.target_temp for r in readings],
        "outside_temps": [r.outside_temp for r in readings],
    }


def efficiency_score(reading: Reading) -> int:
    """Efficiency (0-100) of a single reading.

    Closer to target scores higher, lower energy scores higher, and the result
    is discounted by 20% when fighting a >10°F indoor/outdoor difference.
    """
    temp_diff = abs(reading.current_temp - reading.target_temp)
    outside_diff = abs(reading.current_temp - reading.outside_temp)

    temp_efficiency = max(0, 100 - temp_diff * 20)
    energy_efficiency = max(0, 100 - reading.energy_usage * 10) if reading.energy_usage > 0 else 100
    weather_factor = 0.8 if outside_diff > 10 else 1.0

    return round_half_up((temp_efficiency + energy_efficiency) / 2 * weather_factor)


def temperature_consistency(readings: Sequence[Reading]) -> int:
    """Mean closeness to target (0-100), 4°F off target scores 0."""
    require_readings(readings, "temperature consistency")
    scores = [max(0, 100 - abs(r.current_temp - r.target_temp) * 25) for r in readings]
    return round_half_up(float(np.mean(scores)))


def daily_avg_temp(readings: Sequence[Reading]) -> float:
    require_readings(readings, "average temperature")
    return round_half_up(float(np.mean([r.current_temp for r in readings])), 1)


def current_temperature(readings: Sequence[Reading]) -> dict[str, float]:
    require_readings(readings, "current temperature")
    latest = readings[-1]
    return {
        "current": latest.current_temp,
        "target": latest.target_temp,
        "outside": latest.outside_temp,
    }


def temperature_variance(readings: Sequence[Reading]) -> float:
    """Population variance of the current temperature."""
    require_readings(readings, "temperature variance")
    return round_half_up(float(np.var([r.current_temp for r in readings])), 2)


def temperature_extremes(readings: Sequence[Reading]) -> dict[str, dict]:
    """Coldest and warmest readings. Ties keep the earliest reading."""
    require_readings(readings, "temperature extremes")
    # min()/max() return the first of equal elements
    coldest = min(readings, key=lambda r: r.current_temp)
    warmest = max(readings, key=lambda r: r.current_temp)
    return {
        "min": {"temp": coldest.current_temp, "timestamp": coldest.timestamp.isoformat()},
        "max": {"temp": warmest.current_temp, "timestamp": warmest.timestamp.isoformat()},
    }


# --- Energy --------------------------------------------------------------

def daily_energy_usage(readings: Sequence[Reading]) -> float:
    """Total energy (kWh)."""
    return sum(r.energy_usage for r in readings)


def energy_cost(energy_kwh: float, rate: float = ENERGY_RATE) -> float:
    """Cost in dollars, rounded to cents."""
    return round_half_up(energy_kwh * rate, 2)


def energy_breakdown(readings: Sequence[Reading]) -> EnergyBreakdown:
    """Share of total energy per mode.

    ``off`` is reported as standby. Fan is whatever the three measured modes
    do not account for, so it covers every other mode string. Zero total
    energy gives an all-zero breakdown.
    """
    require_readings(readings, "energy breakdown")
    total = daily_energy_usage(readings)
    if total == 0:
        logger.debug("Energy breakdown over zero total energy, returning zeros")
        return EnergyBreakdown()

    heating = sum(r.energy_usage for r in readings if r.mode == MODE_HEATING)
    cooling = sum(r.energy_usage for r in readings if r.mode == MODE_COOLING)
    standby = sum(r.energy_usage for r in readings if r.mode == MODE_OFF)

    # Residual of the unrounded sum never exceeds 100, clamp anyway
    fan = max(0, 100 - round_half_up((heating + cooling + standby) / total * 100))

    return EnergyBreakdown(
        heating=round_half_up(heating / total * 100),
        cooling=round_half_up(cooling / total * 100),
        standby=round_half_up(standby / total * 100),
        fan=fan,
    )


def daily_costs(readings: Sequence[Reading], rate: float = ENERGY_RATE) -> list[DailyCost]:
    """Cost per weekday name, in order of first appearance.

    Readings from the same weekday in different weeks are merged.
    """
    totals: dict[str, float] = {}
    for reading in readings:
        day = WEEKDAY_LABELS[sunday_weekday(reading.timestamp)]
        totals[day] = totals.get(day, 0.0) + reading.energy_usage

    return [DailyCost(day=day, cost=energy_cost(energy, rate)) for day, energy in totals.items()]


def weekly_costs(readings: Sequence[Reading], rate: float = ENERGY_RATE) -> list[WeeklyCost]:
    """Cost per Sunday-started week, oldest first, labelled Week 1..k."""
    totals: dict = {}
    for reading in readings:
        key = week_start(reading.timestamp)
        totals[key] = totals.get(key, 0.0) + reading.energy_usage

    return [
        WeeklyCost(week=f"Week {index}", cost=energy_cost(totals[key], rate), projected=None)
        for index, key in enumerate(sorted(totals), start=1)
    ]


def usage_heatmap(readings: Sequence[Reading]) -> list[HeatmapPoint]:
    """One point per reading, intensity normalized to the sequence maximum."""
    require_readings(readings, "usage heatmap")
    max_energy = max(r.energy_usage for r in readings)
    if max_energy == 0:
        logger.debug("Heatmap over zero energy, all intensities are 0")

    return [
        HeatmapPoint(
            day=sunday_weekday(r.timestamp),
            hour=r.timestamp.hour,
            intensity=round_half_up(r.energy_usage / max_energy, 2) if max_energy > 0 else 0.0,
            energy_usage=r.energy_usage,
            occupancy=r.occupancy,
        )
        for r in readings
    ]
