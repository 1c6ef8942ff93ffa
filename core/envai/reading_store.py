"""
Thermostat Reading Store

File-backed store for thermostat readings. The JSON file holds an array of
readings; every call re-reads it so edits show up without a restart.
Entries that do not match the reading contract are dropped on load.
"""

import json
import logging
import math
import threading
from collections.abc import Sequence
from datetime import timedelta, tzinfo

from .const import WINDOW_ELAPSED, WINDOW_POSITIONAL, WINDOW_STRATEGIES
from .exceptions import DataStoreError, InvalidRangeError
from .models import DateRange, Reading, ReadingFilter
from .utils import round_half_up, to_utc

logger = logging.getLogger(__name__)


def window_readings(
    readings: Sequence[Reading],
    hours: int,
    strategy: str = WINDOW_ELAPSED
) -> list[Reading]:
    """Select the trailing window of a sorted reading sequence.

    Args:
        readings: Readings sorted ascending by time
        hours: Window length in hours
        strategy: "elapsed" keeps readings newer than latest - hours,
            "positional" keeps the last ``hours`` entries (hourly cadence)

    Returns:
        Readings inside the window, oldest first

    Raises:
        InvalidRangeError: If hours is not positive
    """
    if hours <= 0:
        raise InvalidRangeError(f"Window must be a positive number of hours, got {hours}")
    if strategy not in WINDOW_STRATEGIES:
        raise ValueError(f"Unknown window strategy: {strategy}")
    if not readings:
        return []

    if strategy == WINDOW_POSITIONAL:
        return list(readings[-hours:])

    # Anchored at the newest reading so historical datasets still window correctly
    cutoff = to_utc(readings[-1].timestamp) - timedelta(hours=hours)
    return [r for r in readings if to_utc(r.timestamp) > cutoff]


def filter_readings(readings: Sequence[Reading], reading_filter: ReadingFilter) -> list[Reading]:
    """Keep readings matching every set predicate."""
    return [r for r in readings if reading_filter.matches(r)]


class ReadingStore:
    """Loads, validates and slices thermostat readings."""

    def __init__(
        self,
        data_path: str,
        tz: tzinfo | None = None,
        window_strategy: str = WINDOW_ELAPSED
    ):
        """Initialize reading store.

        Args:
            data_path: Path to the JSON array of readings
            tz: Zone timestamps are converted into (None keeps their own offset)
            window_strategy: How get_window() selects readings
        """
        self.data_path = data_path
        self.tz = tz
        self.window_strategy = window_strategy

        self.lock = threading.Lock()

    def _read_raw(self) -> list:
        try:
            with self.lock:
                with open(self.data_path, encoding="utf-8") as f:
                    raw = json.load(f)
        except FileNotFoundError as e:
            raise DataStoreError(f"Reading file not found: {self.data_path}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise DataStoreError(f"Failed to load thermostat data: {e}") from e

        if not isinstance(raw, list):
            raise DataStoreError("Reading data must be an array")
        return raw

    def load(self) -> list[Reading]:
        """Load and validate all readings, sorted ascending by time.

        Raises:
            DataStoreError: If the file is missing or malformed
        """
        raw = self._read_raw()

        readings = []
        dropped = 0
        for entry in raw:
            try:
                readings.append(Reading.from_dict(entry, self.tz))
            except ValueError as e:
                dropped += 1
                logger.debug(f"Dropping invalid reading {entry!r}: {e}")

        if dropped:
            logger.warning(f"Dropped {dropped} invalid reading(s) from {self.data_path}")

        readings.sort(key=lambda r: to_utc(r.timestamp))
        logger.debug(f"Loaded {len(readings)} readings from {self.data_path}")
        return readings

    def get_all(self) -> list[Reading]:
        """All readings, oldest first."""
        return self.load()

    def get_window(self, hours: int) -> list[Reading]:
        """Trailing window of ``hours`` using the configured strategy."""
        return window_readings(self.load(), hours, self.window_strategy)

    def get_range(self, date_range: DateRange) -> list[Reading]:
        """Readings within an inclusive date range."""
        return [r for r in self.load() if date_range.contains(r.timestamp)]

    def get_latest(self) -> Reading | None:
        """Most recent reading, or None when the store is empty."""
        readings = self.load()
        return readings[-1] if readings else None

    def get_filtered(self, reading_filter: ReadingFilter) -> list[Reading]:
        return filter_readings(self.load(), reading_filter)

    def group_by_day(self) -> dict[str, list[Reading]]:
        """Readings keyed by calendar date (YYYY-MM-DD)."""
        grouped: dict[str, list[Reading]] = {}
        for reading in self.load():
            grouped.setdefault(reading.timestamp.date().isoformat(), []).append(reading)
        return grouped

    def group_by_hour(self) -> dict[int, list[Reading]]:
        """Readings keyed by hour of day (0-23)."""
        grouped: dict[int, list[Reading]] = {}
        for reading in self.load():
            grouped.setdefault(reading.timestamp.hour, []).append(reading)
        return grouped

    def get_stats(self) -> dict | None:
        """Dataset overview: count, span, modes and readings per day.

        Returns:
            Statistics dict, or None when the store is empty
        """
        readings = self.load()
        if not readings:
            return None

        start = readings[0].timestamp
        end = readings[-1].timestamp
        # A span shorter than a day still counts as one day
        days = max(1, math.ceil((to_utc(end) - to_utc(start)).total_seconds() / 86400))

        return {
            "totalReadings": len(readings),
            "dateRange": {"start": start.isoformat(), "end": end.isoformat()},
            "modes": list(dict.fromkeys(r.mode for r in readings)),
            "avgReadingsPerDay": round_half_up(len(readings) / days),
        }

