"""
Envai API Endpoints
"""

import asyncio
import os
import sys

from fastapi import APIRouter, HTTPException, Query
from loguru import logger
from pydantic import BaseModel

# Add core to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.envai.assistant import NO_DATA_RESPONSE, build_prompt
from core.envai.const import VALID_TIME_RANGES
from core.envai.dashboard import DashboardService
from core.envai.exceptions import EmptyInputError
from core.envai.llm_client import LLMClient
from core.envai.models import DateRange, ReadingFilter
from core.envai.reading_store import ReadingStore, filter_readings
from core.envai.settings import load_settings
from core.envai.utils import now_iso

router = APIRouter()

# Load settings (options.json in production, config.yaml + env in development)
settings = load_settings()

store = ReadingStore(
    settings.resolved_data_path,
    tz=settings.tzinfo,
    window_strategy=settings.window_strategy,
)
dashboard_service = DashboardService(store, energy_rate=settings.energy_rate)

llm_client = (
    LLMClient(
        settings.llm_api_base_url,
        settings.llm_api_key,
        settings.llm_model_name,
        timeout=settings.llm_timeout,
    )
    if settings.assistant_enabled
    else None
)


class AIQueryRequest(BaseModel):
    """Request body for an assistant question."""
    prompt: str
    timeRange: str = "7d"


def respond(data, endpoint: str, **metadata) -> dict:
    """Wrap a payload in the standard success envelope."""
    return {
        "success": True,
        "data": data,
        "metadata": {
            "timestamp": now_iso(),
            "endpoint": endpoint,
            **metadata,
        },
    }


def _selected_time_range(time_range: str | None) -> str | None:
    """Known token or None (all data)."""
    if time_range in VALID_TIME_RANGES and time_range != "all":
        return time_range
    return None


def _date_range(start: str | None, end: str | None) -> DateRange | None:
    """Parse an optional start/end pair. Both or neither must be given."""
    if start is None and end is None:
        return None
    if start is None or end is None:
        raise HTTPException(status_code=400, detail="Both startDate and endDate are required for a date range")
    return DateRange.parse(start, end, settings.tzinfo)


def _reading_filter(mode, occupancy, min_temp, max_temp, min_energy, max_energy) -> ReadingFilter:
    """Build a filter from query parameters. A blank mode (?mode=) is unset."""
    return ReadingFilter(
        mode=(mode or "").strip() or None,
        occupancy=occupancy,
        min_temp=min_temp,
        max_temp=max_temp,
        min_energy=min_energy,
        max_energy=max_energy,
    )


# --- Dashboard -------------------------------------------------------------

@router.get("/api/dashboard")
async def get_dashboard(time_range: str | None = Query(None, alias="timeRange")):
    """Complete dashboard data with all charts and metrics."""
    selected = _selected_time_range(time_range)
    data = dashboard_service.get_dashboard_data(selected)
    return respond(data, "dashboard", timeRange=selected or "all")


@router.get("/api/dashboard/summary")
async def get_dashboard_summary():
    """Dashboard summary with key metrics only."""
    return respond(dashboard_service.get_dashboard_summary(), "dashboard/summary")


@router.get("/api/dashboard/health")
async def get_dashboard_health():
    """System health overview."""
    return respond(dashboard_service.get_system_health(), "dashboard/health")


@router.get("/api/dashboard/filtered")
async def get_filtered_dashboard(
    mode: str | None = None,
    occupancy: bool | None = None,
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    min_temp: float | None = Query(None, alias="minTemp"),
    max_temp: float | None = Query(None, alias="maxTemp"),
    min_energy: float | None = Query(None, alias="minEnergy"),
    max_energy: float | None = Query(None, alias="maxEnergy"),
):
    """Dashboard over readings matching every given filter."""
    filters = _reading_filter(mode, occupancy, min_temp, max_temp, min_energy, max_energy)
    date_range = _date_range(start_date, end_date)

    data = dashboard_service.get_filtered_dashboard_data(filters, date_range)
    return respond(data, "dashboard/filtered", appliedFilters=data["filters"])


def _comparison(endpoint: str, period1_start, period1_end, period2_start, period2_end) -> dict:
    if not all((period1_start, period1_end, period2_start, period2_end)):
        raise HTTPException(
            status_code=400,
            detail="Missing required parameters: period1Start, period1End, period2Start, period2End",
        )

    period1 = DateRange.parse(period1_start, period1_end, settings.tzinfo)
    period2 = DateRange.parse(period2_start, period2_end, settings.tzinfo)

    data = dashboard_service.get_comparison_data(period1, period2)
    return respond(
        data,
        endpoint,
        periods={"period1": period1.to_dict(), "period2": period2.to_dict()},
    )


@router.get("/api/dashboard/comparison")
async def get_dashboard_comparison(
    period1_start: str | None = Query(None, alias="period1Start"),
    period1_end: str | None = Query(None, alias="period1End"),
    period2_start: str | None = Query(None, alias="period2Start"),
    period2_end: str | None = Query(None, alias="period2End"),
):
    """Comparison between two time periods."""
    return _comparison("dashboard/comparison", period1_start, period1_end, period2_start, period2_end)


# --- Charts ----------------------------------------------------------------

@router.get("/api/charts")
async def get_all_charts(time_range: str | None = Query(None, alias="timeRange")):
    """All chart data at once."""
    selected = _selected_time_range(time_range)
    charts, count = dashboard_service.get_charts(selected)
    return respond(charts, "charts", timeRange=selected or "all", dataPoints=count)


@router.get("/api/charts/{chart_type}")
async def get_chart(chart_type: str, time_range: str | None = Query(None, alias="timeRange")):
    """A single chart (temperature, gauge, energy-breakdown, weekly-costs, heatmap, area, radar, kpi)."""
    selected = _selected_time_range(time_range)
    data = dashboard_service.get_chart_data(chart_type, selected)
    return respond(data, f"charts/{chart_type}", timeRange=selected or "all")


# --- Raw data --------------------------------------------------------------

@router.get("/api/data")
async def get_all_data(
    mode: str | None = None,
    occupancy: bool | None = None,
    min_temp: float | None = Query(None, alias="minTemp"),
    max_temp: float | None = Query(None, alias="maxTemp"),
    min_energy: float | None = Query(None, alias="minEnergy"),
    max_energy: float | None = Query(None, alias="maxEnergy"),
):
    """All readings with optional filtering."""
    filters = _reading_filter(mode, occupancy, min_temp, max_temp, min_energy, max_energy)
    readings = store.get_all()
    if not filters.is_empty:
        readings = filter_readings(readings, filters)

    return respond(
        [r.to_dict() for r in readings],
        "data",
        totalRecords=len(readings),
        filters=filters.to_dict(),
    )


@router.get("/api/data/latest")
async def get_latest_reading():
    """The latest reading."""
    latest = store.get_latest()
    if latest is None:
        raise HTTPException(status_code=404, detail="No data available")
    return respond(latest.to_dict(), "data/latest")


@router.get("/api/data/stats")
async def get_data_stats():
    """Dataset statistics and overview."""
    stats = store.get_stats()
    if stats is None:
        raise HTTPException(status_code=404, detail="No data available for statistics")
    return respond(stats, "data/stats")


@router.get("/api/data/recent")
async def get_recent_data(hours: int = 24):
    """Readings from the last ``hours`` hours."""
    readings = store.get_window(hours)
    return respond([r.to_dict() for r in readings], "data/recent", hours=hours, totalRecords=len(readings))


@router.get("/api/data/range")
async def get_date_range_data(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
):
    """Readings within a date range (ISO 8601, inclusive)."""
    if not start_date or not end_date:
        raise HTTPException(status_code=400, detail="Missing required parameters: startDate and endDate")

    date_range = DateRange.parse(start_date, end_date, settings.tzinfo)
    readings = store.get_range(date_range)
    return respond(
        [r.to_dict() for r in readings],
        "data/range",
        dateRange=date_range.to_dict(),
        totalRecords=len(readings),
    )


@router.get("/api/data/grouped/day")
async def get_data_grouped_by_day():
    """Readings grouped by calendar date."""
    grouped = {day: [r.to_dict() for r in readings] for day, readings in store.group_by_day().items()}
    return respond(grouped, "data/grouped/day", totalDays=len(grouped))


@router.get("/api/data/grouped/hour")
async def get_data_grouped_by_hour():
    """Readings grouped by hour of day (0-23)."""
    grouped = {hour: [r.to_dict() for r in readings] for hour, readings in store.group_by_hour().items()}
    return respond(grouped, "data/grouped/hour", totalHours=len(grouped))


# --- Analytics -------------------------------------------------------------

@router.get("/api/analytics/comparison")
async def get_analytics_comparison(
    period1_start: str | None = Query(None, alias="period1Start"),
    period1_end: str | None = Query(None, alias="period1End"),
    period2_start: str | None = Query(None, alias="period2Start"),
    period2_end: str | None = Query(None, alias="period2End"),
):
    """Comparison between two time periods."""
    return _comparison("analytics/comparison", period1_start, period1_end, period2_start, period2_end)


@router.get("/api/analytics/health")
async def get_analytics_health():
    """System health analysis."""
    return respond(dashboard_service.get_system_health(), "analytics/health")


# --- Assistant -------------------------------------------------------------

@router.post("/api/ai/query")
async def query_assistant(request: AIQueryRequest):
    """Answer a natural-language question using dashboard data as context."""
    if not llm_client:
        raise HTTPException(status_code=503, detail="Assistant not configured (LLM_API_KEY missing)")

    prompt = request.prompt.strip()
    if not prompt:
        raise HTTPException(status_code=400, detail="Prompt cannot be empty")

    time_range = request.timeRange
    try:
        context = dashboard_service.get_assistant_context(time_range)
    except EmptyInputError as e:
        logger.warning(f"No data for assistant context: {e}")
        return {"answer": NO_DATA_RESPONSE, "timeRange": time_range, "timestamp": now_iso()}

    logger.info(f"Assistant query ({time_range}): {prompt[:80]}")
    answer = await asyncio.to_thread(llm_client.complete, build_prompt(prompt, context, time_range))

    return {"answer": answer, "timeRange": time_range, "timestamp": now_iso()}


@router.get("/api/ai/health")
async def assistant_health():
    """Check the text-generation service."""
    if not llm_client:
        return {"status": "disabled", "llm": False, "timestamp": now_iso()}

    healthy = await asyncio.to_thread(llm_client.health_check)
    return {"status": "healthy" if healthy else "unhealthy", "llm": healthy, "timestamp": now_iso()}
