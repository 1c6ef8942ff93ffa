"""Shared fixtures for Envai tests."""
import json
from datetime import datetime, timedelta, timezone

import pytest

from core.envai.dashboard import DashboardService
from core.envai.models import Reading
from core.envai.reading_store import ReadingStore

# A Sunday, so weekday buckets start at index 0
BASE_TIME = datetime(2024, 1, 7, 0, 0, tzinfo=timezone.utc)


def make_reading(**overrides) -> Reading:
    """Reading at target, comfortable humidity, 1 kWh heating, occupied."""
    values = {
        "timestamp": BASE_TIME,
        "current_temp": 70.0,
        "target_temp": 70.0,
        "humidity": 50.0,
        "energy_usage": 1.0,
        "mode": "heating",
        "occupancy": True,
        "outside_temp": 65.0,
    }
    values.update(overrides)
    return Reading(**values)


def hourly_readings(count: int, start: datetime = BASE_TIME, **overrides) -> list[Reading]:
    """``count`` readings one hour apart."""
    return [make_reading(timestamp=start + timedelta(hours=i), **overrides) for i in range(count)]


def write_readings(path, readings) -> str:
    """Write readings (Reading objects or raw dicts) as the JSON store file."""
    payload = [r.to_dict() if isinstance(r, Reading) else r for r in readings]
    path.write_text(json.dumps(payload))
    return str(path)


@pytest.fixture
def store_factory(tmp_path):
    """Build a ReadingStore over a temporary JSON file."""

    def _factory(readings, **kwargs) -> ReadingStore:
        data_path = write_readings(tmp_path / "db.json", readings)
        return ReadingStore(data_path, **kwargs)

    return _factory


@pytest.fixture
def service_factory(store_factory):
    """Build a DashboardService over a temporary store."""

    def _factory(readings, energy_rate: float = 0.12, **kwargs) -> DashboardService:
        return DashboardService(store_factory(readings, **kwargs), energy_rate=energy_rate)

    return _factory


@pytest.fixture
def sample_readings() -> list[Reading]:
    """48 hourly readings with varied modes, temperatures and occupancy."""
    modes = ["heating", "heating", "off", "cooling", "fan"]
    readings = []
    for i in range(48):
        readings.append(
            make_reading(
                timestamp=BASE_TIME + timedelta(hours=i),
                current_temp=68.0 + (i % 7) * 0.5,
                humidity=35.0 + (i % 9) * 3,
                energy_usage=(i % 5) * 0.8 + 0.4,
                mode=modes[i % 5],
                occupancy=7 <= i % 24 <= 22,
                outside_temp=40.0 + (i % 12),
            )
        )
    return readings
