"""
Envai Data Models

Thermostat readings and the derived entities computed from them. Derived
entities are transient: they are recomputed from a slice of readings on every
request and never stored.
"""

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime, tzinfo
from typing import Any

from .exceptions import InvalidRangeError
from .utils import camel_to_snake, parse_timestamp, snake_to_camel, to_utc

NUMERIC_FIELDS = ("current_temp", "target_temp", "humidity", "energy_usage", "outside_temp")


def _camel_dict(obj) -> dict[str, Any]:
    return {snake_to_camel(k): v for k, v in asdict(obj).items()}


@dataclass(frozen=True)
class Reading:
    """A single thermostat sample."""

    timestamp: datetime  # timezone-aware
    current_temp: float  # °F
    target_temp: float  # °F
    humidity: float  # %
    energy_usage: float  # kWh
    mode: str  # heating | cooling | off | anything else counts as fan
    occupancy: bool
    outside_temp: float  # °F

    @classmethod
    def from_dict(cls, data: dict, tz: tzinfo | None = None) -> "Reading":
        """Create from a wire dictionary (camelCase or snake_case keys).

        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError(f"Reading must be an object, got {type(data).__name__}")

        converted = {camel_to_snake(k): v for k, v in data.items()}

        missing = [name for name in (*NUMERIC_FIELDS, "timestamp", "mode", "occupancy") if name not in converted]
        if missing:
            raise ValueError(f"Reading is missing fields: {missing}")

        for name in NUMERIC_FIELDS:
            value = converted[name]
            # bool is an int subclass, reject it explicitly
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ValueError(f"Field {name} must be a finite number, got {value!r}")
        if not isinstance(converted["mode"], str):
            raise ValueError(f"Field mode must be a string, got {converted['mode']!r}")
        if not isinstance(converted["occupancy"], bool):
            raise ValueError(f"Field occupancy must be a boolean, got {converted['occupancy']!r}")
        if not isinstance(converted["timestamp"], str):
            raise ValueError(f"Field timestamp must be a string, got {converted['timestamp']!r}")

        try:
            timestamp = parse_timestamp(converted["timestamp"], tz)
        except InvalidRangeError as e:
            raise ValueError(str(e)) from e

        return cls(
            timestamp=timestamp,
            current_temp=float(converted["current_temp"]),
            target_temp=float(converted["target_temp"]),
            humidity=float(converted["humidity"]),
            energy_usage=float(converted["energy_usage"]),
            mode=converted["mode"],
            occupancy=converted["occupancy"],
            outside_temp=float(converted["outside_temp"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Wire form with camelCase keys."""
        data = _camel_dict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


@dataclass
class EnergyBreakdown:
    """Share of total energy per operating mode (%). Fan is the residual."""

    heating: int = 0
    cooling: int = 0
    standby: int = 0
    fan: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class DailyCost:
    day: str  # Sun..Sat
    cost: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class WeeklyCost:
    week: str  # "Week 1", "Week 2", ...
    cost: float
    projected: float | None = None  # Reserved for future projections

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class HeatmapPoint:
    day: int  # 0-6, Sunday = 0
    hour: int  # 0-23
    intensity: float  # 0-1
    energy_usage: float
    occupancy: bool

    def to_dict(self) -> dict[str, Any]:
        return _camel_dict(self)


@dataclass
class ComfortMetrics:
    """Radar chart scores, all 0-100."""

    temp_consistency: int
    humidity_control: int
    energy_efficiency: int
    cost_effectiveness: int
    overall_comfort: int

    def to_dict(self) -> dict[str, Any]:
        return _camel_dict(self)


@dataclass
class KPIMetrics:
    current_temp: float
    daily_cost: float
    efficiency: int
    humidity: float
    outside_temp: float
    mode: str
    occupancy: bool
    daily_avg_temp: float

    def to_dict(self) -> dict[str, Any]:
        return _camel_dict(self)


@dataclass
class ModeShare:
    mode: str
    count: int
    percentage: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SummaryStats:
    total_energy: float
    total_cost: float
    avg_temp: float
    avg_humidity: int
    occupancy_rate: int
    data_points: int
    time_range: dict[str, str] = field(default_factory=dict)  # {"start", "end"} ISO strings

    def to_dict(self) -> dict[str, Any]:
        return _camel_dict(self)


@dataclass
class SystemHealthReport:
    overall: str  # healthy | needs_attention
    components: dict[str, dict[str, Any]]
    recommendations: list[str]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DateRange:
    """Inclusive [start, end] interval."""

    start: datetime
    end: datetime

    @classmethod
    def parse(cls, start: str, end: str, tz: tzinfo | None = None) -> "DateRange":
        """Parse ISO strings.

        Raises:
            InvalidRangeError: If either value is malformed or start >= end
        """
        start_dt = parse_timestamp(start, tz)
        end_dt = parse_timestamp(end, tz)
        if to_utc(start_dt) >= to_utc(end_dt):
            raise InvalidRangeError(f"Start must be before end (start={start}, end={end})")
        return cls(start=start_dt, end=end_dt)

    def contains(self, moment: datetime) -> bool:
        return to_utc(self.start) <= to_utc(moment) <= to_utc(self.end)

    def to_dict(self) -> dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class ReadingFilter:
    """Optional predicates, ANDed together. Bounds are inclusive."""

    mode: str | None = None
    occupancy: bool | None = None
    min_temp: float | None = None
    max_temp: float | None = None
    min_energy: float | None = None
    max_energy: float | None = None

    def matches(self, reading: Reading) -> bool:
        if self.mode is not None and reading.mode != self.mode:
            return False
        if self.occupancy is not None and reading.occupancy != self.occupancy:
            return False
        if self.min_temp is not None and reading.current_temp < self.min_temp:
            return False
        if self.max_temp is not None and reading.current_temp > self.max_temp:
            return False
        if self.min_energy is not None and reading.energy_usage < self.min_energy:
            return False
        if self.max_energy is not None and reading.energy_usage > self.max_energy:
            return False
        return True

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in asdict(self).values())

    def to_dict(self) -> dict[str, Any]:
        """Only the predicates that are set, camelCase."""
        return {snake_to_camel(k): v for k, v in asdict(self).items() if v is not None}
