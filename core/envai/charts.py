"""
Chart Projection

Reshapes metric and analytics output into chart descriptors for the
dashboard. No new numbers are derived here, only labels and formatting.
"""

from collections.abc import Callable, Sequence
from typing import Any

from .analytics import comfort_metrics, kpi_metrics
from .const import (
    EFFICIENCY_FAIR_THRESHOLD,
    EFFICIENCY_GOOD_THRESHOLD,
    ENERGY_RATE,
    HOUR_LABELS,
    HUMIDITY_OPTIMAL_MAX,
    HUMIDITY_OPTIMAL_MIN,
    STATUS_FAIR,
    STATUS_GOOD,
    STATUS_POOR,
    TEMP_UNIT,
    WEEKDAY_LABELS,
)
from .exceptions import UnknownChartError
from .metrics import (
    daily_costs,
    efficiency_score,
    energy_breakdown,
    temperature_trends,
    usage_heatmap,
    weekly_costs,
)
from .models import Reading
from .utils import require_readings

RADAR_LABELS = [
    "Temperature Consistency",
    "Humidity Control",
    "Energy Efficiency",
    "Cost Effectiveness",
    "Overall Comfort",
]
BREAKDOWN_LABELS = ["Heating", "Cooling", "Standby", "Fan"]


def efficiency_level(score: int) -> str:
    """Bucket an efficiency score: >70 good, >40 fair, else poor."""
    if score > EFFICIENCY_GOOD_THRESHOLD:
        return STATUS_GOOD
    if score > EFFICIENCY_FAIR_THRESHOLD:
        return STATUS_FAIR
    return STATUS_POOR


def humidity_optimal(humidity: float) -> bool:
    return HUMIDITY_OPTIMAL_MIN <= humidity <= HUMIDITY_OPTIMAL_MAX


def temperature_chart(readings: Sequence[Reading], rate: float = ENERGY_RATE) -> dict[str, Any]:
    """Line chart: temperature trends over time."""
    trends = temperature_trends(readings)
    return {
        "labels": [f"{hour:02d}:00" for hour in trends["hours"]],
        "datasets": [
            {"label": "Current Temperature", "data": trends["current_temps"]},
            {"label": "Target Temperature", "data": trends["target_temps"]},
            {"label": "Outside Temperature", "data": trends["outside_temps"]},
        ],
    }


def gauge_chart(readings: Sequence[Reading], rate: float = ENERGY_RATE) -> dict[str, Any]:
    """Gauge: efficiency of the latest reading."""
    require_readings(readings, "gauge chart")
    return {
        "value": efficiency_score(readings[-1]),
        "min": 0,
        "max": 100,
        "title": "System Efficiency",
        "unit": "%",
    }


def energy_breakdown_chart(readings: Sequence[Reading], rate: float = ENERGY_RATE) -> dict[str, Any]:
    """Donut: energy share per mode."""
    breakdown = energy_breakdown(readings)
    return {
        "labels": list(BREAKDOWN_LABELS),
        "data": [breakdown.heating, breakdown.cooling, breakdown.standby, breakdown.fan],
    }


def weekly_costs_chart(readings: Sequence[Reading], rate: float = ENERGY_RATE) -> dict[str, Any]:
    """Bar chart: cost per weekday across the week."""
    costs = daily_costs(readings, rate)
    return {
        "labels": [c.day for c in costs],
        "data": [c.cost for c in costs],
        "unit": "$",
    }


def heatmap_chart(readings: Sequence[Reading], rate: float = ENERGY_RATE) -> dict[str, Any]:
    """Calendar heatmap: usage by weekday and hour."""
    points = usage_heatmap(readings)
    return {
        "data": [
            {
                "day": p.day,
                "hour": p.hour,
                "value": p.intensity,
                "energyUsage": p.energy_usage,
                "occupancy": p.occupancy,
            }
            for p in points
        ],
        "xAxisLabels": list(HOUR_LABELS),
        "yAxisLabels": list(WEEKDAY_LABELS),
        "valueRange": {"min": 0, "max": 1},
    }


def area_chart(readings: Sequence[Reading], rate: float = ENERGY_RATE) -> dict[str, Any]:
    """Area chart: cost trend per week."""
    costs = weekly_costs(readings, rate)
    return {
        "labels": [w.week for w in costs],
        "data": [w.cost for w in costs],
        "unit": "$",
    }


def radar_chart(readings: Sequence[Reading], rate: float = ENERGY_RATE) -> dict[str, Any]:
    """Radar: home comfort metrics."""
    metrics = comfort_metrics(readings, rate)
    return {
        "labels": list(RADAR_LABELS),
        "data": [
            metrics.temp_consistency,
            metrics.humidity_control,
            metrics.energy_efficiency,
            metrics.cost_effectiveness,
            metrics.overall_comfort,
        ],
        "scale": {"min": 0, "max": 100},
    }


def kpi_data(readings: Sequence[Reading], rate: float = ENERGY_RATE) -> dict[str, Any]:
    """KPI cards with presentation metadata."""
    kpis = kpi_metrics(readings, rate)
    latest = readings[-1]

    return {
        "currentTemp": {
            "title": "Current Temperature",
            "value": kpis.current_temp,
            "unit": TEMP_UNIT,
            "target": latest.target_temp,
            "comparison": "above_average" if kpis.current_temp > kpis.daily_avg_temp else "below_average",
        },
        "dailyCost": {
            "title": "Daily Cost",
            "value": kpis.daily_cost,
            "unit": "$",
            "description": "Energy usage cost",
        },
        "efficiency": {
            "title": "Efficiency Score",
            "value": kpis.efficiency,
            "unit": "%",
            "description": "System performance",
            "level": efficiency_level(kpis.efficiency),
        },
        "humidity": {
            "title": "Humidity",
            "value": kpis.humidity,
            "unit": "%",
            "description": "Current humidity level",
            "optimal": humidity_optimal(kpis.humidity),
        },
        "outsideTemp": {
            "title": "Outside Temperature",
            "value": kpis.outside_temp,
            "unit": TEMP_UNIT,
            "description": "Weather conditions",
        },
        "systemMode": {
            "title": "System Mode",
            "value": kpis.mode,
            "occupancy": kpis.occupancy,
            "description": "Occupied" if kpis.occupancy else "Unoccupied",
        },
    }


# Chart type token -> builder
CHART_BUILDERS: dict[str, Callable[[Sequence[Reading], float], dict[str, Any]]] = {
    "temperature": temperature_chart,
    "gauge": gauge_chart,
    "energy-breakdown": energy_breakdown_chart,
    "weekly-costs": weekly_costs_chart,
    "heatmap": heatmap_chart,
    "area": area_chart,
    "radar": radar_chart,
    "kpi": kpi_data,
}


def build_chart(chart_type: str, readings: Sequence[Reading], rate: float = ENERGY_RATE) -> dict[str, Any]:
    """Build one chart descriptor by type token.

    Raises:
        UnknownChartError: If the chart type is not known
    """
    builder = CHART_BUILDERS.get(chart_type)
    if builder is None:
        raise UnknownChartError(f"Unknown chart type: {chart_type}")
    return builder(readings, rate)


def all_charts(readings: Sequence[Reading], rate: float = ENERGY_RATE) -> dict[str, Any]:
    """Every chart descriptor for one reading slice."""
    require_readings(readings, "charts")
    return {
        "temperatureChart": temperature_chart(readings, rate),
        "gaugeChart": gauge_chart(readings, rate),
        "energyBreakdownChart": energy_breakdown_chart(readings, rate),
        "weeklyCostsChart": weekly_costs_chart(readings, rate),
        "heatmapChart": heatmap_chart(readings, rate),
        "areaChart": area_chart(readings, rate),
        "radarChart": radar_chart(readings, rate),
        "kpiData": kpi_data(readings, rate),
    }
