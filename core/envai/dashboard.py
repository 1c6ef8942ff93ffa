"""
Dashboard Orchestrator

Resolves time windows, date ranges and filters into reading subsets, runs the
analytics and chart projections over them, and builds health and comparison
reports. Holds no state beyond the store handle and the energy rate.
"""

import logging
from typing import Any

from .analytics import summary_stats
from .assistant import build_context
from .charts import all_charts, build_chart, kpi_data
from .const import (
    ENERGY_RATE,
    HUMIDITY_OPTIMAL_MAX,
    HUMIDITY_OPTIMAL_MIN,
    OVERALL_HEALTHY,
    OVERALL_NEEDS_ATTENTION,
    RECOMMEND_ENERGY_POOR,
    RECOMMEND_HUMIDITY_HIGH,
    RECOMMEND_HUMIDITY_LOW,
    RECOMMEND_OPTIMAL,
    RECOMMEND_TEMP_ABOVE,
    RECOMMEND_TEMP_BELOW,
    STATUS_GOOD,
    STATUS_POOR,
    STATUS_WARNING,
    TEMP_TOLERANCE,
    TIME_RANGE_HOURS,
)
from .exceptions import EmptyInputError, ZeroBaselineError
from .models import DateRange, Reading, ReadingFilter, SystemHealthReport
from .reading_store import ReadingStore, filter_readings
from .utils import format_delta, now_iso, percent_change, require_readings

logger = logging.getLogger(__name__)


def classify_temperature(reading: Reading) -> str:
    """good when within 2°F of target (exclusive), else warning."""
    if abs(reading.current_temp - reading.target_temp) < TEMP_TOLERANCE:
        return STATUS_GOOD
    return STATUS_WARNING


def classify_humidity(reading: Reading) -> str:
    if HUMIDITY_OPTIMAL_MIN <= reading.humidity <= HUMIDITY_OPTIMAL_MAX:
        return STATUS_GOOD
    return STATUS_WARNING


def health_recommendations(
    temp_health: str,
    energy_health: str,
    humidity_health: str,
    latest: Reading
) -> list[str]:
    """Rule-based recommendations, accumulated in fixed order."""
    recommendations = []

    if temp_health == STATUS_WARNING:
        # Warning means |diff| >= 2, so exactly one of these fires
        diff = latest.current_temp - latest.target_temp
        if diff >= TEMP_TOLERANCE:
            recommendations.append(RECOMMEND_TEMP_ABOVE)
        elif diff <= -TEMP_TOLERANCE:
            recommendations.append(RECOMMEND_TEMP_BELOW)

    if energy_health == STATUS_POOR:
        recommendations.append(RECOMMEND_ENERGY_POOR)

    if humidity_health == STATUS_WARNING:
        if latest.humidity < HUMIDITY_OPTIMAL_MIN:
            recommendations.append(RECOMMEND_HUMIDITY_LOW)
        elif latest.humidity > HUMIDITY_OPTIMAL_MAX:
            recommendations.append(RECOMMEND_HUMIDITY_HIGH)

    if not recommendations:
        recommendations.append(RECOMMEND_OPTIMAL)

    return recommendations


def _relative_change(label: str, baseline: float, value: float, undefined: list[str]) -> str | None:
    try:
        return format_delta(percent_change(baseline, value))
    except ZeroBaselineError:
        logger.info(f"{label} baseline is zero, change is undefined")
        undefined.append(label)
        return None


class DashboardService:
    """Builds dashboard payloads from a reading store."""

    def __init__(self, store: ReadingStore, energy_rate: float = ENERGY_RATE):
        """Initialize dashboard service.

        Args:
            store: Source of readings
            energy_rate: Electricity price ($/kWh) used for every cost
        """
        self.store = store
        self.energy_rate = energy_rate

    def resolve_time_range(self, time_range: str | None) -> list[Reading]:
        """Readings for a time range token ("24h", "7d", "30d"; anything else = all)."""
        hours = TIME_RANGE_HOURS.get(time_range) if time_range else None
        if hours is None:
            return self.store.get_all()
        return self.store.get_window(hours)

    def get_dashboard_data(self, time_range: str | None = None) -> dict[str, Any]:
        """Complete dashboard: summary, every chart, metadata.

        Raises:
            EmptyInputError: If the window holds no readings
        """
        readings = self.resolve_time_range(time_range)
        label = time_range if time_range in TIME_RANGE_HOURS else "all"
        require_readings(readings, f"dashboard ({label})")

        return {
            "summary": summary_stats(readings, self.energy_rate).to_dict(),
            "charts": all_charts(readings, self.energy_rate),
            "metadata": {
                "timeRange": label,
                "dataPoints": len(readings),
                "lastUpdated": now_iso(),
            },
        }

    def get_dashboard_summary(self) -> dict[str, Any]:
        """Current status, KPI cards and headline numbers over all readings."""
        readings = self.store.get_all()
        require_readings(readings, "dashboard summary")
        latest = readings[-1]
        summary = summary_stats(readings, self.energy_rate)

        return {
            "currentStatus": {
                "temperature": latest.current_temp,
                "targetTemp": latest.target_temp,
                "mode": latest.mode,
                "occupancy": latest.occupancy,
                "timestamp": latest.timestamp.isoformat(),
            },
            "kpis": kpi_data(readings, self.energy_rate),
            "summary": {
                "totalEnergy": summary.total_energy,
                "totalCost": summary.total_cost,
                "avgTemp": summary.avg_temp,
                "occupancyRate": summary.occupancy_rate,
            },
            "lastUpdated": now_iso(),
        }

    def get_chart_data(self, chart_type: str, time_range: str | None = None) -> dict[str, Any]:
        """One chart descriptor.

        Raises:
            UnknownChartError: If the chart type is not known
            EmptyInputError: If the window holds no readings
        """
        readings = self.resolve_time_range(time_range)
        require_readings(readings, f"{chart_type} chart")
        return build_chart(chart_type, readings, self.energy_rate)

    def get_charts(self, time_range: str | None = None) -> tuple[dict[str, Any], int]:
        """Every chart descriptor and the number of readings behind them."""
        readings = self.resolve_time_range(time_range)
        require_readings(readings, "charts")
        return all_charts(readings, self.energy_rate), len(readings)

    def get_filtered_dashboard_data(
        self,
        filters: ReadingFilter,
        date_range: DateRange | None = None
    ) -> dict[str, Any]:
        """Dashboard over readings matching every filter.

        A date range replaces the full sequence as the source. When nothing
        matches, summary and charts are None and only the counts are reported.
        """
        source = self.store.get_range(date_range) if date_range else self.store.get_all()
        filtered = filter_readings(source, filters)

        applied = filters.to_dict()
        if date_range:
            applied["dateRange"] = date_range.to_dict()

        logger.debug(f"Filters {applied} kept {len(filtered)}/{len(source)} readings")

        if filtered:
            summary = summary_stats(filtered, self.energy_rate).to_dict()
            charts = all_charts(filtered, self.energy_rate)
        else:
            summary = None
            charts = None

        return {
            "summary": summary,
            "charts": charts,
            "filters": applied,
            "metadata": {
                "originalDataPoints": len(source),
                "filteredDataPoints": len(filtered),
                "lastUpdated": now_iso(),
            },
        }

    def get_comparison_data(self, period1: DateRange, period2: DateRange) -> dict[str, Any]:
        """Compare two independent periods.

        Percentage changes against a zero baseline are None and their names
        are listed in ``undefinedChanges``.

        Raises:
            EmptyInputError: If either period holds no readings
        """
        periods = []
        for name, date_range in (("period1", period1), ("period2", period2)):
            readings = self.store.get_range(date_range)
            if not readings:
                raise EmptyInputError(
                    name,
                    f"No readings in {name} ({date_range.start.isoformat()} to {date_range.end.isoformat()})",
                )
            periods.append({
                "dateRange": date_range.to_dict(),
                "summary": summary_stats(readings, self.energy_rate).to_dict(),
                "kpis": kpi_data(readings, self.energy_rate),
            })

        first, second = periods
        undefined: list[str] = []
        comparison = {
            "energyChange": _relative_change(
                "energyChange", first["summary"]["totalEnergy"], second["summary"]["totalEnergy"], undefined
            ),
            "costChange": _relative_change(
                "costChange", first["summary"]["totalCost"], second["summary"]["totalCost"], undefined
            ),
            "tempChange": format_delta(second["summary"]["avgTemp"] - first["summary"]["avgTemp"]),
            "efficiencyChange": format_delta(
                second["kpis"]["efficiency"]["value"] - first["kpis"]["efficiency"]["value"]
            ),
            "undefinedChanges": undefined,
        }

        return {"period1": first, "period2": second, "comparison": comparison}

    def get_system_health(self) -> dict[str, Any]:
        """Health classification of the last 24 hours and recommendations.

        Raises:
            EmptyInputError: If the store holds no readings
        """
        readings = self.resolve_time_range("24h")
        require_readings(readings, "system health")
        latest = readings[-1]
        kpis = kpi_data(readings, self.energy_rate)

        temp_health = classify_temperature(latest)
        energy_health = kpis["efficiency"]["level"]
        humidity_health = classify_humidity(latest)

        overall = (
            OVERALL_HEALTHY
            if temp_health == energy_health == humidity_health == STATUS_GOOD
            else OVERALL_NEEDS_ATTENTION
        )

        report = SystemHealthReport(
            overall=overall,
            components={
                "temperature": {
                    "status": temp_health,
                    "current": latest.current_temp,
                    "target": latest.target_temp,
                    "difference": abs(latest.current_temp - latest.target_temp),
                },
                "energy": {
                    "status": energy_health,
                    "efficiency": kpis["efficiency"]["value"],
                    "dailyCost": kpis["dailyCost"]["value"],
                },
                "humidity": {
                    "status": humidity_health,
                    "current": latest.humidity,
                    "optimal": kpis["humidity"]["optimal"],
                },
                "system": {
                    "mode": latest.mode,
                    "occupancy": latest.occupancy,
                    "lastReading": latest.timestamp.isoformat(),
                },
            },
            recommendations=health_recommendations(temp_health, energy_health, humidity_health, latest),
        )

        if overall != OVERALL_HEALTHY:
            logger.info(f"System needs attention: {report.recommendations}")

        return report.to_dict()

    def get_assistant_context(self, time_range: str = "7d") -> str:
        """Text context describing the system for the natural-language layer."""
        dashboard = self.get_dashboard_data(time_range)
        health = self.get_system_health()
        latest = self.store.get_latest()
        return build_context(latest, dashboard, health, time_range)
