import unittest
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from weatherboard.date_range import (
    CUSTOM,
    LAST_7_DAYS,
    LAST_30_DAYS,
    LAST_90_DAYS,
    YEAR_TO_DATE,
    DateRange,
    RangeSelection,
    end_of_day,
    epoch_bounds,
    max_end_date,
    query_bounds,
    resolve_custom,
    resolve_preset,
    start_of_day,
)

NEW_YORK = ZoneInfo("America/New_York")
START_OF_DAY = time(0, 0)
END_OF_DAY = time(23, 59, 59, 999000)


class DayBoundaryTest(unittest.TestCase):
    def test_start_and_end_of_day_keep_timezone(self):
        moment = datetime(2024, 6, 5, 13, 45, 12, 345678, tzinfo=NEW_YORK)
        self.assertEqual(start_of_day(moment), datetime(2024, 6, 5, tzinfo=NEW_YORK))
        self.assertEqual(end_of_day(moment), datetime(2024, 6, 5, 23, 59, 59, 999000, tzinfo=NEW_YORK))

    def test_plain_dates_take_given_timezone(self):
        self.assertEqual(start_of_day(date(2024, 6, 5), tz=NEW_YORK).tzinfo, NEW_YORK)
        self.assertIsNone(end_of_day(date(2024, 6, 5)).tzinfo)


class ResolvePresetTest(unittest.TestCase):
    def setUp(self):
        self.now = datetime(2024, 3, 15, 14, 30, tzinfo=NEW_YORK)

    def test_last_7_days_spans_eight_calendar_days(self):
        result = resolve_preset(LAST_7_DAYS, self.now)
        self.assertEqual(result.start, datetime(2024, 3, 8, tzinfo=NEW_YORK))
        self.assertEqual(result.end, datetime(2024, 3, 15, 23, 59, 59, 999000, tzinfo=NEW_YORK))
        self.assertEqual((result.end.date() - result.start.date()).days + 1, 8)
        self.assertEqual(result.start.timetz().replace(tzinfo=None), START_OF_DAY)
        self.assertEqual(result.end.timetz().replace(tzinfo=None), END_OF_DAY)
        self.assertEqual(result.preset, LAST_7_DAYS)

    def test_last_7_days_for_many_moments(self):
        moments = [
            datetime(2024, 1, 1, 0, 0),
            datetime(2024, 2, 29, 23, 59, 59),
            datetime(2023, 12, 31, 12, 0, tzinfo=timezone.utc),
            datetime(2024, 11, 3, 1, 30, tzinfo=NEW_YORK),
        ]
        for now in moments:
            with self.subTest(now=now):
                result = resolve_preset(LAST_7_DAYS, now)
                self.assertEqual((result.end.date() - result.start.date()).days + 1, 8)
                self.assertEqual(result.end.date(), now.date())
                self.assertEqual(result.start.time(), START_OF_DAY)
                self.assertEqual(result.end.time(), END_OF_DAY)

    def test_last_30_days_crosses_leap_day(self):
        result = resolve_preset(LAST_30_DAYS, datetime(2024, 3, 1, 9, 0))
        self.assertEqual(result.start, datetime(2024, 1, 31))

    def test_last_90_days(self):
        result = resolve_preset(LAST_90_DAYS, self.now)
        self.assertEqual(result.start, datetime(2023, 12, 16, tzinfo=NEW_YORK))

    def test_year_to_date_starts_on_january_first(self):
        for now in (
            datetime(2024, 1, 1, 0, 0, 1, tzinfo=NEW_YORK),
            datetime(2024, 7, 4, 12, 0, tzinfo=NEW_YORK),
            datetime(2024, 12, 31, 23, 59, tzinfo=NEW_YORK),
        ):
            with self.subTest(now=now):
                result = resolve_preset(YEAR_TO_DATE, now)
                self.assertEqual(result.start, datetime(2024, 1, 1, tzinfo=NEW_YORK))
                self.assertLessEqual(result.start, result.end)

    def test_start_never_after_end(self):
        for preset in (LAST_7_DAYS, LAST_30_DAYS, LAST_90_DAYS, YEAR_TO_DATE):
            with self.subTest(preset=preset):
                self.assertFalse(resolve_preset(preset, self.now).is_inverted)

    def test_unknown_preset(self):
        with self.assertRaises(ValueError):
            resolve_preset(CUSTOM, self.now)
        with self.assertRaises(ValueError):
            resolve_preset("last365days", self.now)


class ResolveCustomTest(unittest.TestCase):
    def test_bounds_are_normalized(self):
        result = resolve_custom(date(2024, 3, 1), date(2024, 3, 10), tz=NEW_YORK)
        self.assertEqual(result.start, datetime(2024, 3, 1, tzinfo=NEW_YORK))
        self.assertEqual(result.end, datetime(2024, 3, 10, 23, 59, 59, 999000, tzinfo=NEW_YORK))
        self.assertEqual(result.preset, CUSTOM)

    def test_datetime_inputs_keep_their_timezone(self):
        result = resolve_custom(
            datetime(2024, 3, 1, 15, 0, tzinfo=timezone.utc),
            datetime(2024, 3, 2, 1, 0, tzinfo=timezone.utc),
        )
        self.assertEqual(result.start, datetime(2024, 3, 1, tzinfo=timezone.utc))
        self.assertEqual(result.end, datetime(2024, 3, 2, 23, 59, 59, 999000, tzinfo=timezone.utc))

    def test_inverted_range_is_returned_as_is(self):
        result = resolve_custom(date(2024, 3, 10), date(2024, 3, 1))
        self.assertTrue(result.is_inverted)
        self.assertEqual(result.start, datetime(2024, 3, 10))
        self.assertEqual(result.end, datetime(2024, 3, 1, 23, 59, 59, 999000))
        self.assertFalse(result.contains(datetime(2024, 3, 5)))

    def test_same_day_range_covers_whole_day(self):
        result = resolve_custom(date(2024, 3, 1), date(2024, 3, 1))
        self.assertTrue(result.contains(datetime(2024, 3, 1, 0, 0)))
        self.assertTrue(result.contains(datetime(2024, 3, 1, 23, 59, 59)))
        self.assertFalse(result.contains(datetime(2024, 3, 2, 0, 0)))


class QueryBoundsTest(unittest.TestCase):
    def test_iso_bounds_are_utc(self):
        result = resolve_preset(LAST_7_DAYS, datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc))
        self.assertEqual(
            query_bounds(result),
            ("2024-03-08T00:00:00.000+00:00", "2024-03-15T23:59:59.999+00:00"),
        )

    def test_local_bounds_convert_to_utc(self):
        result = resolve_custom(date(2024, 7, 1), date(2024, 7, 1), tz=NEW_YORK)
        start, end = query_bounds(result)
        self.assertEqual(start, "2024-07-01T04:00:00.000+00:00")
        self.assertEqual(end, "2024-07-02T03:59:59.999+00:00")

    def test_epoch_bounds(self):
        result = resolve_custom(date(1970, 1, 1), date(1970, 1, 1), tz=timezone.utc)
        start, end = epoch_bounds(result)
        self.assertEqual(start, 0.0)
        self.assertAlmostEqual(end, 86399.999, places=6)

    def test_max_end_date_is_today(self):
        self.assertEqual(max_end_date(datetime(2024, 3, 15, 23, 0, tzinfo=NEW_YORK)), date(2024, 3, 15))


class RangeSelectionTest(unittest.TestCase):
    def setUp(self):
        self.now = datetime(2024, 3, 15, 14, 30, tzinfo=NEW_YORK)

    def test_starts_on_last_7_days(self):
        selection = RangeSelection(self.now)
        self.assertEqual(selection.mode, LAST_7_DAYS)
        self.assertEqual(selection.range, resolve_preset(LAST_7_DAYS, self.now))

    def test_editing_a_bound_switches_to_custom(self):
        selection = RangeSelection(self.now)
        original_end = selection.range.end
        result = selection.edit_start(date(2024, 3, 1))
        self.assertEqual(selection.mode, CUSTOM)
        self.assertEqual(result.start, datetime(2024, 3, 1, tzinfo=NEW_YORK))
        self.assertEqual(result.end, original_end)

        result = selection.edit_end(date(2024, 3, 12))
        self.assertEqual(selection.mode, CUSTOM)
        self.assertEqual(result.end, datetime(2024, 3, 12, 23, 59, 59, 999000, tzinfo=NEW_YORK))

    def test_custom_mode_stays_until_a_preset_is_selected(self):
        selection = RangeSelection(self.now)
        selection.edit_end(date(2024, 3, 14))
        selection.edit_start(date(2024, 3, 2))
        self.assertEqual(selection.mode, CUSTOM)
        selection.select_preset(YEAR_TO_DATE, self.now)
        self.assertEqual(selection.mode, YEAR_TO_DATE)
        self.assertEqual(selection.range.start, datetime(2024, 1, 1, tzinfo=NEW_YORK))

    def test_ranges_are_replaced_not_mutated(self):
        selection = RangeSelection(self.now)
        first = selection.range
        selection.edit_start(date(2024, 3, 1))
        self.assertEqual(first, resolve_preset(LAST_7_DAYS, self.now))
        self.assertIsNot(first, selection.range)
        with self.assertRaises(AttributeError):
            first.start = datetime(2020, 1, 1)

    def test_describe(self):
        self.assertEqual(resolve_preset(LAST_30_DAYS, self.now).describe(), "Last 30 Days")
        self.assertEqual(
            DateRange(datetime(2024, 3, 1), datetime(2024, 3, 2)).describe(),
            "2024-03-01 to 2024-03-02",
        )


if __name__ == "__main__":
    unittest.main()
