"""Tests for the reading store and windowing."""
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from conftest import BASE_TIME, hourly_readings, make_reading
from core.envai.exceptions import DataStoreError, InvalidRangeError
from core.envai.models import DateRange, Reading, ReadingFilter
from core.envai.reading_store import ReadingStore, window_readings


def raw_reading(**overrides) -> dict:
    """Wire-format reading."""
    data = {
        "timestamp": "2024-01-07T00:00:00Z",
        "currentTemp": 70,
        "targetTemp": 70,
        "humidity": 50,
        "energyUsage": 1.0,
        "mode": "heating",
        "occupancy": True,
        "outsideTemp": 65,
    }
    data.update(overrides)
    return data


class TestReadingFromDict:
    """Tests for wire-format validation."""

    def test_parses_camel_case(self):
        reading = Reading.from_dict(raw_reading())

        assert reading.timestamp == BASE_TIME
        assert reading.current_temp == 70.0
        assert reading.energy_usage == 1.0
        assert reading.occupancy is True

    @pytest.mark.parametrize(
        "overrides",
        [
            {"currentTemp": True},
            {"humidity": "50"},
            {"energyUsage": float("nan")},
            {"occupancy": "yes"},
            {"mode": 3},
            {"timestamp": "yesterday"},
        ],
    )
    def test_rejects_wrong_types(self, overrides):
        with pytest.raises(ValueError):
            Reading.from_dict(raw_reading(**overrides))

    def test_rejects_missing_field(self):
        data = raw_reading()
        del data["outsideTemp"]
        with pytest.raises(ValueError):
            Reading.from_dict(data)

    def test_to_dict_round_trips(self):
        reading = make_reading()
        assert Reading.from_dict(reading.to_dict()) == reading


class TestLoad:
    """Tests for loading the JSON file."""

    def test_sorts_by_timestamp(self, store_factory):
        readings = hourly_readings(5)
        store = store_factory(list(reversed(readings)))

        assert store.get_all() == readings

    def test_drops_invalid_entries(self, store_factory):
        store = store_factory([
            raw_reading(),
            raw_reading(timestamp="2024-01-07T01:00:00Z", currentTemp=False),
            raw_reading(timestamp="2024-01-07T02:00:00Z", occupancy="true"),
            {"timestamp": "2024-01-07T03:00:00Z"},
            "not a reading",
        ])

        assert len(store.get_all()) == 1

    def test_missing_file(self, tmp_path):
        store = ReadingStore(str(tmp_path / "missing.json"))
        with pytest.raises(DataStoreError):
            store.get_all()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text("{not json")
        with pytest.raises(DataStoreError):
            ReadingStore(str(path)).get_all()

    def test_not_an_array(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text('{"readings": []}')
        with pytest.raises(DataStoreError):
            ReadingStore(str(path)).get_all()

    def test_naive_timestamps_are_utc(self, store_factory):
        store = store_factory([raw_reading(timestamp="2024-01-07T05:00:00")])
        assert store.get_latest().timestamp == BASE_TIME + timedelta(hours=5)

    def test_configured_timezone(self, store_factory):
        store = store_factory([raw_reading(timestamp="2024-01-07T05:00:00Z")], tz=ZoneInfo("America/New_York"))
        latest = store.get_latest()

        assert latest.timestamp.hour == 0
        assert latest.timestamp == BASE_TIME + timedelta(hours=5)

    def test_reloads_on_every_call(self, tmp_path, store_factory):
        store = store_factory(hourly_readings(2))
        assert len(store.get_all()) == 2

        (tmp_path / "db.json").write_text("[]")
        assert store.get_all() == []


class TestWindow:
    """Tests for trailing windows."""

    def test_elapsed_window_on_hourly_data(self):
        readings = hourly_readings(48)
        window = window_readings(readings, 24)

        assert len(window) == 24
        assert window[0] == readings[24]

    def test_strategies_differ_on_gaps(self):
        readings = hourly_readings(10) + [make_reading(timestamp=BASE_TIME + timedelta(hours=30))]

        elapsed = window_readings(readings, 24, "elapsed")
        positional = window_readings(readings, 24, "positional")

        assert [r.timestamp.hour for r in elapsed] == [7, 8, 9, 6]
        assert len(positional) == 11

    def test_positional_takes_last_entries(self):
        readings = hourly_readings(30)
        assert window_readings(readings, 24, "positional") == readings[-24:]

    def test_empty_sequence(self):
        assert window_readings([], 24) == []

    @pytest.mark.parametrize("hours", [0, -5])
    def test_non_positive_hours(self, hours):
        with pytest.raises(InvalidRangeError):
            window_readings(hourly_readings(3), hours)

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            window_readings(hourly_readings(3), 24, "sliding")

    def test_store_uses_configured_strategy(self, store_factory):
        readings = hourly_readings(10) + [make_reading(timestamp=BASE_TIME + timedelta(hours=30))]
        store = store_factory(readings, window_strategy="positional")
        assert len(store.get_window(24)) == 11


class TestQueries:
    """Tests for range, filter, grouping and stats queries."""

    def test_range_is_inclusive(self, store_factory):
        store = store_factory(hourly_readings(10))
        date_range = DateRange(start=BASE_TIME + timedelta(hours=2), end=BASE_TIME + timedelta(hours=5))

        assert len(store.get_range(date_range)) == 4

    def test_date_range_rejects_reversed_bounds(self):
        with pytest.raises(InvalidRangeError):
            DateRange.parse("2024-01-08T00:00:00Z", "2024-01-07T00:00:00Z")
        with pytest.raises(InvalidRangeError):
            DateRange.parse("2024-01-07T00:00:00Z", "2024-01-07T00:00:00Z")

    def test_filter_bounds_are_inclusive(self, store_factory):
        readings = [make_reading(timestamp=BASE_TIME + timedelta(hours=i), current_temp=68.0 + i) for i in range(5)]
        store = store_factory(readings)

        filtered = store.get_filtered(ReadingFilter(min_temp=69.0, max_temp=71.0))

        assert [r.current_temp for r in filtered] == [69.0, 70.0, 71.0]

    def test_filter_zero_bound_applies(self, store_factory):
        readings = [make_reading(energy_usage=0.0), make_reading(energy_usage=2.0)]
        store = store_factory(readings)

        assert len(store.get_filtered(ReadingFilter(max_energy=0.0))) == 1

    def test_filter_mode_and_occupancy(self, store_factory):
        readings = [
            make_reading(mode="heating", occupancy=True),
            make_reading(mode="heating", occupancy=False),
            make_reading(mode="cooling", occupancy=True),
        ]
        store = store_factory(readings)

        assert len(store.get_filtered(ReadingFilter(mode="heating", occupancy=False))) == 1

    def test_group_by_day(self, store_factory):
        store = store_factory(hourly_readings(30))
        grouped = store.group_by_day()

        assert list(grouped) == ["2024-01-07", "2024-01-08"]
        assert len(grouped["2024-01-07"]) == 24
        assert len(grouped["2024-01-08"]) == 6

    def test_group_by_hour(self, store_factory):
        store = store_factory(hourly_readings(30))
        grouped = store.group_by_hour()

        assert len(grouped) == 24
        assert len(grouped[0]) == 2
        assert len(grouped[23]) == 1

    def test_stats(self, store_factory):
        readings = hourly_readings(47) + [make_reading(timestamp=BASE_TIME + timedelta(hours=47), mode="off")]
        store = store_factory(readings)

        stats = store.get_stats()

        assert stats["totalReadings"] == 48
        assert stats["modes"] == ["heating", "off"]
        assert stats["avgReadingsPerDay"] == 24
        assert stats["dateRange"]["start"] == BASE_TIME.isoformat()

    def test_stats_short_span_counts_as_one_day(self, store_factory):
        store = store_factory(hourly_readings(3))
        assert store.get_stats()["avgReadingsPerDay"] == 3

    def test_empty_store(self, store_factory):
        store = store_factory([])

        assert store.get_latest() is None
        assert store.get_stats() is None
        assert store.get_window(24) == []


class TestDaylightSaving:
    """Windows, ordering and ranges follow real elapsed time across DST changes."""

    NEW_YORK = ZoneInfo("America/New_York")

    def test_window_across_fall_back(self, store_factory):
        start = datetime(2024, 11, 2, 0, tzinfo=timezone.utc)
        store = store_factory(hourly_readings(36, start=start), tz=self.NEW_YORK)

        window = store.get_window(24)

        assert len(window) == 24
        assert window == store.get_all()[-24:]

    def test_window_across_spring_forward(self, store_factory):
        start = datetime(2024, 3, 9, 12, tzinfo=timezone.utc)
        store = store_factory(hourly_readings(24, start=start), tz=self.NEW_YORK)

        assert len(store.get_window(24)) == 24

    def test_repeated_hour_sorts_by_instant(self, store_factory):
        later = make_reading(timestamp=datetime(2024, 11, 3, 6, 10, tzinfo=timezone.utc))
        earlier = make_reading(timestamp=datetime(2024, 11, 3, 5, 50, tzinfo=timezone.utc))
        store = store_factory([later, earlier], tz=self.NEW_YORK)

        assert [r.timestamp.isoformat() for r in store.get_all()] == [
            "2024-11-03T01:50:00-04:00",
            "2024-11-03T01:10:00-05:00",
        ]

    def test_range_across_repeated_hour(self, store_factory):
        readings = [
            make_reading(timestamp=datetime(2024, 11, 3, 5, 50, tzinfo=timezone.utc)),
            make_reading(timestamp=datetime(2024, 11, 3, 6, 10, tzinfo=timezone.utc)),
            make_reading(timestamp=datetime(2024, 11, 3, 7, 0, tzinfo=timezone.utc)),
        ]
        store = store_factory(readings, tz=self.NEW_YORK)

        # 01:30 EDT is before 01:20 EST
        date_range = DateRange.parse("2024-11-03T01:30:00-04:00", "2024-11-03T01:20:00-05:00", self.NEW_YORK)

        assert len(store.get_range(date_range)) == 2

    def test_stats_span_uses_elapsed_time(self, store_factory):
        start = datetime(2024, 3, 9, 12, tzinfo=timezone.utc)
        store = store_factory(hourly_readings(25, start=start), tz=self.NEW_YORK)

        # 24 real hours (25 on the wall clock) is one day
        assert store.get_stats()["avgReadingsPerDay"] == 25
