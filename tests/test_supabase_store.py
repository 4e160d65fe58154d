import unittest
from datetime import date, datetime, timezone
from unittest import mock

import requests

from weatherboard.date_range import resolve_custom
from weatherboard.store import READING_COLUMNS, StoreError, SupabaseStore


def fake_response(payload=None, status_error=None):
    resp = mock.Mock()
    resp.content = b"[]" if payload is None else b"..."
    resp.json.return_value = payload
    if status_error:
        resp.raise_for_status.side_effect = status_error
    return resp


class SupabaseStoreTest(unittest.TestCase):
    def setUp(self):
        self.store = SupabaseStore("https://demo.supabase.co/", "anon-key", timeout=5)
        self.date_range = resolve_custom(date(2024, 3, 1), date(2024, 3, 2), tz=timezone.utc)

    def test_auth_headers(self):
        self.assertEqual(self.store.base_url, "https://demo.supabase.co/rest/v1")
        self.assertEqual(self.store.session.headers["apikey"], "anon-key")
        self.assertEqual(self.store.session.headers["Authorization"], "Bearer anon-key")

    def test_fetch_readings_filters_and_flattens(self):
        rows = [
            {
                "id": "r1",
                "location_id": "loc-1",
                "recorded_at": "2024-03-02T12:00:00+00:00",
                "temperature_c": 20.5,
                "humidity_percent": None,
                "pressure_hpa": 1011.0,
                "wind_speed_ms": 2.0,
                "wind_direction_deg": 90,
                "precipitation_mm": 0.0,
                "created_at": "2024-03-02T12:00:05+00:00",
                "locations": {"name": "Headquarters"},
            }
        ]
        with mock.patch.object(self.store.session, "request", return_value=fake_response(rows)) as request:
            df = self.store.fetch_readings(self.date_range, location_id="loc-1", limit=100)

        method, url = request.call_args.args
        params = request.call_args.kwargs["params"]
        self.assertEqual(method, "GET")
        self.assertEqual(url, "https://demo.supabase.co/rest/v1/weather_readings")
        self.assertIn(("recorded_at", "gte.2024-03-01T00:00:00.000+00:00"), params)
        self.assertIn(("recorded_at", "lte.2024-03-02T23:59:59.999+00:00"), params)
        self.assertIn(("location_id", "eq.loc-1"), params)
        self.assertIn(("order", "recorded_at.desc"), params)
        self.assertIn(("limit", "100"), params)
        self.assertEqual(request.call_args.kwargs["timeout"], 5)

        self.assertEqual(list(df.columns), READING_COLUMNS)
        self.assertEqual(df.iloc[0]["location_name"], "Headquarters")
        self.assertEqual(df.iloc[0]["recorded_at"], datetime(2024, 3, 2, 12, tzinfo=timezone.utc))
        self.assertTrue(df["humidity_percent"].isna().all())

    def test_fetch_readings_empty(self):
        with mock.patch.object(self.store.session, "request", return_value=fake_response([])):
            df = self.store.fetch_readings(self.date_range)
        self.assertTrue(df.empty)

    def test_add_location_returns_inserted_row(self):
        inserted = {"id": "loc-9", "name": "Harbor"}
        with mock.patch.object(self.store.session, "request", return_value=fake_response([inserted])) as request:
            row = self.store.add_location({"name": "Harbor", "latitude": 1.0, "longitude": 2.0})
        self.assertEqual(row, inserted)
        self.assertEqual(request.call_args.kwargs["headers"], {"Prefer": "return=representation"})

    def test_add_readings_serializes_timestamps(self):
        rows = [
            {"location_id": "loc-1", "recorded_at": datetime(2024, 3, 1, 6, 0, tzinfo=timezone.utc), "temperature_c": 4.0}
        ]
        with mock.patch.object(self.store.session, "request", return_value=fake_response([{"id": "r-1"}])) as request:
            inserted = self.store.add_readings(rows)
        self.assertEqual(inserted, 1)
        body = request.call_args.kwargs["json"]
        self.assertEqual(body[0]["recorded_at"], "2024-03-01T06:00:00+00:00")
        self.assertEqual(body[0]["temperature_c"], 4.0)
        self.assertIsNone(body[0]["pressure_hpa"])
        self.assertEqual(
            request.call_args.kwargs["params"],
            {"on_conflict": "location_id,recorded_at", "select": "id"},
        )
        self.assertEqual(
            request.call_args.kwargs["headers"],
            {"Prefer": "resolution=ignore-duplicates,return=representation"},
        )

    def test_add_readings_counts_only_created_rows(self):
        rows = [
            {"location_id": "loc-1", "recorded_at": datetime(2024, 3, 1, 6, 0, tzinfo=timezone.utc)},
            {"location_id": "loc-1", "recorded_at": datetime(2024, 3, 1, 7, 0, tzinfo=timezone.utc)},
        ]
        with mock.patch.object(self.store.session, "request", return_value=fake_response([])):
            self.assertEqual(self.store.add_readings(rows[:1]), 0)
        with mock.patch.object(self.store.session, "request", return_value=fake_response([{"id": "r-2"}])):
            self.assertEqual(self.store.add_readings(rows), 1)

    def test_delete_location_filters_by_id(self):
        with mock.patch.object(self.store.session, "request", return_value=fake_response()) as request:
            self.store.delete_location("loc-1")
        self.assertEqual(request.call_args.args[0], "DELETE")
        self.assertEqual(request.call_args.kwargs["params"], {"id": "eq.loc-1"})

    def test_http_errors_raise_store_error(self):
        failing = fake_response(status_error=requests.HTTPError("500 Server Error"))
        with mock.patch.object(self.store.session, "request", return_value=failing):
            with self.assertRaises(StoreError):
                self.store.list_locations()

    def test_connection_errors_raise_store_error(self):
        with mock.patch.object(self.store.session, "request", side_effect=requests.ConnectionError("down")):
            with self.assertRaises(StoreError):
                self.store.fetch_readings(self.date_range)
            ok, message = self.store.check_connection()
        self.assertFalse(ok)
        self.assertIn("down", message)


if __name__ == "__main__":
    unittest.main()
