import datetime as dt
import unittest

from pinpoint.data_sources.open_meteo_client import DailySeries, HourlySeries, RawCurrentReading, RawForecastPayload
from pinpoint.domain import Coordinate
from pinpoint.errors import MalformedPayloadError
from pinpoint.normalizer import coordinate_label, hour_label, normalize, round_half_up

UTC = dt.timezone.utc
NOW = dt.datetime(2024, 5, 6, 12, 0, tzinfo=UTC)


def _current(**overrides):
    values = dict(
        temperature_c=15.0,
        relative_humidity=80,
        wind_speed_kmh=10.0,
        weather_code=3,
        apparent_temperature_c=14.0,
    )
    values.update(overrides)
    return RawCurrentReading(**values)


def _daily(days: int = 7):
    start = dt.date(2024, 5, 6)
    return DailySeries(
        time=[start + dt.timedelta(days=i) for i in range(days)],
        temperature_max_c=[20.0 + i for i in range(days)],
        temperature_min_c=[10.0 + i for i in range(days)],
        weather_code=[0, 61, 3, 95, 1, 2, 3][:days],
    )


def _hourly(hours: int = 48, start: dt.datetime = NOW):
    return HourlySeries(
        time=[start + dt.timedelta(hours=i) for i in range(hours)],
        temperature_c=[10.0 + (i % 10) for i in range(hours)],
        wind_speed_kmh=[4.4 + i for i in range(hours)],
        weather_code=[(0, 3, 999)[i % 3] for i in range(hours)],
        precipitation_probability=[None if i % 5 == 0 else 10 * (i % 10) for i in range(hours)],
    )


def _forecast(daily=None, hourly=None):
    return RawForecastPayload(
        daily=daily if daily is not None else _daily(),
        hourly=hourly if hourly is not None else _hourly(),
    )


class TestCurrentConditions(unittest.TestCase):
    def test_london_overcast(self):
        view = normalize("London", _current(), _forecast(), NOW)
        self.assertEqual(view.location, "London")
        self.assertEqual(view.current.condition, "Overcast")
        self.assertEqual(view.current.icon, "☁️")
        self.assertEqual(view.current.temperature, 59)
        self.assertEqual(view.current.humidity, 80)
        self.assertEqual(view.current.wind_speed, 10)

    def test_rounding(self):
        view = normalize("X", _current(temperature_c=21.4, wind_speed_kmh=12.5, relative_humidity=64.5), _forecast(), NOW)
        self.assertEqual(view.current.temperature, 71)  # 70.52
        self.assertEqual(view.current.wind_speed, 13)
        self.assertEqual(view.current.humidity, 65)

    def test_null_current_value_is_malformed(self):
        for field in ("temperature_c", "relative_humidity", "wind_speed_kmh"):
            with self.subTest(field=field):
                with self.assertRaises(MalformedPayloadError):
                    normalize("X", _current(**{field: None}), _forecast(), NOW)

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(-2.5), -2)
        self.assertEqual(round_half_up(59.0), 59)


class TestForecastDays(unittest.TestCase):
    def test_skips_today_and_takes_three(self):
        view = normalize("X", _current(), _forecast(), NOW)
        self.assertEqual(len(view.forecast), 3)
        first = view.forecast[0]
        self.assertEqual(first.high, round_half_up(21.0 * 9 / 5 + 32))
        self.assertEqual(first.low, 52)  # 11 C
        self.assertEqual(first.condition, "Slight Rain")

    def test_labels_follow_position_not_weekday(self):
        view = normalize("X", _current(), _forecast(), NOW)
        self.assertEqual([d.day for d in view.forecast], ["Today", "Tomorrow", "Wednesday"])

    def test_exactly_four_daily_entries_is_enough(self):
        view = normalize("X", _current(), _forecast(daily=_daily(4)), NOW)
        self.assertEqual(len(view.forecast), 3)

    def test_short_daily_series_is_malformed(self):
        with self.assertRaises(MalformedPayloadError):
            normalize("X", _current(), _forecast(daily=_daily(3)), NOW)

    def test_misaligned_daily_series_is_malformed(self):
        daily = _daily()
        daily.temperature_min_c = daily.temperature_min_c[:-1]
        with self.assertRaises(MalformedPayloadError):
            normalize("X", _current(), _forecast(daily=daily), NOW)

    def test_unknown_daily_code_falls_back(self):
        daily = _daily()
        daily.weather_code[1] = 12345
        view = normalize("X", _current(), _forecast(daily=daily), NOW)
        self.assertEqual(view.forecast[0].condition, "Unknown")


class TestHourlyWindow(unittest.TestCase):
    def test_lower_bound_exclusive_upper_bound_inclusive(self):
        view = normalize("X", _current(), _forecast(), NOW)
        # 13:00 today through 12:00 tomorrow
        self.assertEqual(len(view.hourly), 24)
        self.assertEqual(view.hourly[0].time, "1 PM")
        self.assertEqual(view.hourly[-1].time, "12 PM")

    def test_entries_before_now_are_dropped(self):
        hourly = _hourly(hours=6, start=NOW - dt.timedelta(hours=3))
        view = normalize("X", _current(), _forecast(hourly=hourly), NOW)
        self.assertEqual([h.time for h in view.hourly], ["1 PM", "2 PM"])

    def test_capped_at_limit(self):
        view = normalize("X", _current(), _forecast(), NOW, window_hours=40, limit=24)
        self.assertEqual(len(view.hourly), 24)
        view = normalize("X", _current(), _forecast(), NOW, limit=5)
        self.assertEqual(len(view.hourly), 5)

    def test_entry_mapping(self):
        view = normalize("X", _current(), _forecast(), NOW)
        first = view.hourly[0]  # index 1 of the series
        self.assertEqual(first.temperature, 52)  # 11 C -> 51.8
        self.assertEqual(first.wind_speed, 5)  # 5.4
        self.assertEqual(first.condition, "Overcast")
        self.assertEqual(first.precipitation_probability, 10)
        second = view.hourly[1]
        self.assertEqual(second.condition, "Unknown")

    def test_missing_precipitation_defaults_to_zero(self):
        view = normalize("X", _current(), _forecast(), NOW)
        # series index 5 is None
        self.assertEqual(view.hourly[4].precipitation_probability, 0)

    def test_empty_hourly_series(self):
        view = normalize("X", _current(), _forecast(hourly=HourlySeries()), NOW)
        self.assertEqual(view.hourly, [])

    def test_misaligned_hourly_series_is_malformed(self):
        hourly = _hourly()
        hourly.weather_code = hourly.weather_code[:10]
        with self.assertRaises(MalformedPayloadError):
            normalize("X", _current(), _forecast(hourly=hourly), NOW)

    def test_local_timestamps_compare_by_instant(self):
        tz = dt.timezone(dt.timedelta(hours=-5))
        local_start = dt.datetime(2024, 5, 6, 7, 0, tzinfo=tz)  # 12:00 UTC
        view = normalize("X", _current(), _forecast(hourly=_hourly(hours=30, start=local_start)), NOW)
        self.assertEqual(len(view.hourly), 24)
        self.assertEqual(view.hourly[0].time, "8 AM")

    def test_naive_now_is_utc(self):
        naive = NOW.replace(tzinfo=None)
        self.assertEqual(normalize("X", _current(), _forecast(), naive), normalize("X", _current(), _forecast(), NOW))

    def test_every_entry_inside_window(self):
        hourly = _hourly(hours=72, start=NOW - dt.timedelta(hours=10))
        view = normalize("X", _current(), _forecast(hourly=hourly), NOW)
        self.assertLessEqual(len(view.hourly), 24)
        in_window = [t for t in hourly.time if NOW < t <= NOW + dt.timedelta(hours=24)]
        self.assertEqual([h.time for h in view.hourly], [hour_label(t) for t in in_window][:24])


class TestLabels(unittest.TestCase):
    def test_coordinate_label(self):
        label = coordinate_label(Coordinate(latitude=40.7128, longitude=-74.0060))
        self.assertEqual(label, "📍 40.7128, -74.0060")

    def test_hour_label(self):
        self.assertEqual(hour_label(dt.datetime(2024, 1, 1, 0)), "12 AM")
        self.assertEqual(hour_label(dt.datetime(2024, 1, 1, 9)), "9 AM")
        self.assertEqual(hour_label(dt.datetime(2024, 1, 1, 12)), "12 PM")
        self.assertEqual(hour_label(dt.datetime(2024, 1, 1, 23)), "11 PM")


class TestIdempotence(unittest.TestCase):
    def test_same_inputs_same_output(self):
        current, forecast = _current(), _forecast()
        self.assertEqual(
            normalize("London", current, forecast, NOW).model_dump(),
            normalize("London", current, forecast, NOW).model_dump(),
        )

    def test_camel_case_serialization(self):
        data = normalize("London", _current(), _forecast(), NOW).model_dump(by_alias=True)
        self.assertIn("windSpeed", data["current"])
        self.assertIn("precipitationProbability", data["hourly"][0])


if __name__ == "__main__":
    unittest.main()
