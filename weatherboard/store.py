import sqlite3
import time
import uuid
from contextlib import closing
from datetime import datetime
from pathlib import Path

import pandas as pd
import requests

from weatherboard.config import REQUEST_TIMEOUT_SECONDS
from weatherboard.config_store import connect
from weatherboard.date_range import DateRange, epoch_bounds, query_bounds, to_utc
from weatherboard.logs import log

INSERT_BATCH_SIZE = 500

LOCATION_COLUMNS = [
    "id",
    "name",
    "latitude",
    "longitude",
    "elevation",
    "timezone",
    "created_at",
    "updated_at",
]
READING_COLUMNS = [
    "id",
    "location_id",
    "recorded_at",
    "temperature_c",
    "humidity_percent",
    "pressure_hpa",
    "wind_speed_ms",
    "wind_direction_deg",
    "precipitation_mm",
    "created_at",
    "location_name",
]
READING_VALUE_COLUMNS = READING_COLUMNS[3:9]

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS locations (
  id TEXT PRIMARY KEY,
  name TEXT NOT NULL,
  latitude REAL NOT NULL,
  longitude REAL NOT NULL,
  elevation INTEGER,
  timezone TEXT,
  created_at INTEGER NOT NULL,
  updated_at INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS weather_readings (
  id TEXT PRIMARY KEY,
  location_id TEXT NOT NULL REFERENCES locations(id) ON DELETE CASCADE,
  recorded_at REAL NOT NULL,
  temperature_c REAL,
  humidity_percent REAL,
  pressure_hpa REAL,
  wind_speed_ms REAL,
  wind_direction_deg INTEGER,
  precipitation_mm REAL,
  created_at INTEGER NOT NULL,
  UNIQUE (location_id, recorded_at)
);

CREATE INDEX IF NOT EXISTS idx_weather_readings_location
  ON weather_readings(location_id);

CREATE INDEX IF NOT EXISTS idx_weather_readings_recorded
  ON weather_readings(recorded_at);

CREATE INDEX IF NOT EXISTS idx_weather_readings_location_recorded
  ON weather_readings(location_id, recorded_at);
"""


class StoreError(RuntimeError):
    pass


def _to_epoch(value) -> float:
    if isinstance(value, datetime):
        return to_utc(value).timestamp()
    if isinstance(value, str):
        return to_utc(datetime.fromisoformat(value.replace("Z", "+00:00"))).timestamp()
    return float(value)


def _to_iso(value) -> str:
    epoch = _to_epoch(value)
    return pd.Timestamp(epoch, unit="s", tz="UTC").isoformat()


def empty_readings() -> pd.DataFrame:
    return pd.DataFrame(columns=READING_COLUMNS)


def empty_locations() -> pd.DataFrame:
    return pd.DataFrame(columns=LOCATION_COLUMNS)


def _finish_readings(df: pd.DataFrame, time_unit: str | None = None) -> pd.DataFrame:
    if df.empty:
        return empty_readings()
    for column in READING_COLUMNS:
        if column not in df:
            df[column] = None
    if time_unit:
        df["recorded_at"] = pd.to_datetime(df["recorded_at"], unit=time_unit, utc=True)
    else:
        df["recorded_at"] = pd.to_datetime(df["recorded_at"], utc=True, format="ISO8601")
    for column in READING_VALUE_COLUMNS:
        df[column] = pd.to_numeric(df[column], errors="coerce")
    return df[READING_COLUMNS].reset_index(drop=True)


class SQLiteStore:
    """Locations and readings kept in a local SQLite file."""

    name = "SQLite"

    def __init__(self, db_path: str | Path):
        self.db_path = db_path
        with closing(self._connect()):
            pass

    def _connect(self) -> sqlite3.Connection:
        conn = connect(self.db_path)
        conn.executescript(SCHEMA_SQL)
        return conn

    def list_locations(self) -> pd.DataFrame:
        try:
            with closing(self._connect()) as conn:
                df = pd.read_sql_query("SELECT * FROM locations ORDER BY name", conn)
        except sqlite3.Error as exc:
            log(f"ERROR: list_locations failed ({exc}).")
            raise StoreError("Failed to load locations") from exc
        if df.empty:
            return empty_locations()
        for column in ("created_at", "updated_at"):
            df[column] = pd.to_datetime(df[column], unit="s", utc=True)
        return df[LOCATION_COLUMNS]

    def add_location(self, payload: dict) -> dict:
        now = int(time.time())
        row = {
            "id": str(uuid.uuid4()),
            "name": payload["name"],
            "latitude": payload["latitude"],
            "longitude": payload["longitude"],
            "elevation": payload.get("elevation"),
            "timezone": payload.get("timezone"),
            "created_at": now,
            "updated_at": now,
        }
        try:
            with closing(self._connect()) as conn:
                conn.execute(
                    """
                    INSERT INTO locations (id, name, latitude, longitude, elevation, timezone, created_at, updated_at)
                    VALUES (:id, :name, :latitude, :longitude, :elevation, :timezone, :created_at, :updated_at)
                    """,
                    row,
                )
                conn.commit()
        except sqlite3.Error as exc:
            log(f"ERROR: add_location failed ({exc}).")
            raise StoreError("Failed to add location") from exc
        return row

    def delete_location(self, location_id: str) -> None:
        try:
            with closing(self._connect()) as conn:
                conn.execute("DELETE FROM locations WHERE id = ?", (location_id,))
                conn.commit()
        except sqlite3.Error as exc:
            log(f"ERROR: delete_location failed ({exc}).")
            raise StoreError("Failed to delete location") from exc

    def clear(self) -> None:
        try:
            with closing(self._connect()) as conn:
                conn.execute("DELETE FROM weather_readings")
                conn.execute("DELETE FROM locations")
                conn.commit()
        except sqlite3.Error as exc:
            log(f"ERROR: clear failed ({exc}).")
            raise StoreError("Failed to clear existing data") from exc

    def add_readings(self, rows: list[dict]) -> int:
        now = int(time.time())
        records = []
        for row in rows:
            record = {column: row.get(column) for column in READING_VALUE_COLUMNS}
            record["id"] = row.get("id") or str(uuid.uuid4())
            record["location_id"] = row["location_id"]
            record["recorded_at"] = _to_epoch(row["recorded_at"])
            record["created_at"] = now
            records.append(record)

        inserted = 0
        try:
            with closing(self._connect()) as conn:
                for start in range(0, len(records), INSERT_BATCH_SIZE):
                    batch = records[start:start + INSERT_BATCH_SIZE]
                    before = conn.total_changes
                    conn.executemany(
                        """
                        INSERT OR IGNORE INTO weather_readings (
                          id, location_id, recorded_at, temperature_c, humidity_percent, pressure_hpa,
                          wind_speed_ms, wind_direction_deg, precipitation_mm, created_at
                        ) VALUES (
                          :id, :location_id, :recorded_at, :temperature_c, :humidity_percent, :pressure_hpa,
                          :wind_speed_ms, :wind_direction_deg, :precipitation_mm, :created_at
                        )
                        """,
                        batch,
                    )
                    conn.commit()
                    inserted += conn.total_changes - before
        except sqlite3.Error as exc:
            log(f"ERROR: add_readings failed after {inserted} rows ({exc}).")
            raise StoreError("Failed to add weather readings") from exc
        return inserted

    def fetch_readings(
        self,
        date_range: DateRange,
        location_id: str | None = None,
        limit: int | None = None,
        ascending: bool = False,
    ) -> pd.DataFrame:
        start, end = epoch_bounds(date_range)
        params = {"start": start, "end": end}
        query = """
            SELECT r.*, l.name AS location_name
            FROM weather_readings r
            JOIN locations l ON l.id = r.location_id
            WHERE r.recorded_at >= :start AND r.recorded_at <= :end
        """
        if location_id:
            query += " AND r.location_id = :location_id"
            params["location_id"] = location_id
        query += f" ORDER BY r.recorded_at {'ASC' if ascending else 'DESC'}"
        if limit:
            query += " LIMIT :limit"
            params["limit"] = int(limit)
        try:
            with closing(self._connect()) as conn:
                df = pd.read_sql_query(query, conn, params=params)
        except sqlite3.Error as exc:
            log(f"ERROR: fetch_readings failed ({exc}).")
            raise StoreError("Failed to load weather data") from exc
        return _finish_readings(df, time_unit="s")

    def check_connection(self) -> tuple[bool, str]:
        try:
            with closing(self._connect()) as conn:
                count = conn.execute("SELECT COUNT(*) FROM locations").fetchone()[0]
        except sqlite3.Error as exc:
            return False, f"SQLite unavailable: {exc}"
        return True, f"SQLite connected ({count} locations)"


class SupabaseStore:
    """Locations and readings kept in a Supabase project, over its REST API."""

    name = "Supabase"

    def __init__(self, url: str, api_key: str, timeout: int = REQUEST_TIMEOUT_SECONDS):
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            }
        )

    def _request(self, method: str, table: str, params=None, json=None, headers=None):
        try:
            resp = self.session.request(
                method,
                f"{self.base_url}/{table}",
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            log(f"ERROR: {method} {table} failed ({exc}).")
            raise StoreError(f"Supabase request failed: {exc}") from exc
        if not resp.content:
            return None
        return resp.json()

    def list_locations(self) -> pd.DataFrame:
        rows = self._request("GET", "locations", params={"select": "*", "order": "name.asc"})
        if not rows:
            return empty_locations()
        df = pd.DataFrame(rows)
        for column in LOCATION_COLUMNS:
            if column not in df:
                df[column] = None
        for column in ("created_at", "updated_at"):
            df[column] = pd.to_datetime(df[column], utc=True, format="ISO8601")
        return df[LOCATION_COLUMNS]

    def add_location(self, payload: dict) -> dict:
        rows = self._request(
            "POST",
            "locations",
            json=payload,
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise StoreError("Supabase returned no row for the new location")
        return rows[0]

    def delete_location(self, location_id: str) -> None:
        self._request("DELETE", "locations", params={"id": f"eq.{location_id}"})

    def clear(self) -> None:
        # PostgREST refuses an unfiltered DELETE.
        self._request("DELETE", "weather_readings", params={"id": "not.is.null"})
        self._request("DELETE", "locations", params={"id": "not.is.null"})

    def add_readings(self, rows: list[dict]) -> int:
        inserted = 0
        for start in range(0, len(rows), INSERT_BATCH_SIZE):
            batch = []
            for row in rows[start:start + INSERT_BATCH_SIZE]:
                record = {column: row.get(column) for column in READING_VALUE_COLUMNS}
                record["location_id"] = row["location_id"]
                record["recorded_at"] = _to_iso(row["recorded_at"])
                batch.append(record)
            # Skipped duplicates are left out of the returned rows.
            created = self._request(
                "POST",
                "weather_readings",
                params={"on_conflict": "location_id,recorded_at", "select": "id"},
                json=batch,
                headers={"Prefer": "resolution=ignore-duplicates,return=representation"},
            )
            inserted += len(created or [])
        return inserted

    def fetch_readings(
        self,
        date_range: DateRange,
        location_id: str | None = None,
        limit: int | None = None,
        ascending: bool = False,
    ) -> pd.DataFrame:
        start, end = query_bounds(date_range)
        params = [
            ("select", "*,locations!inner(name)"),
            ("recorded_at", f"gte.{start}"),
            ("recorded_at", f"lte.{end}"),
            ("order", f"recorded_at.{'asc' if ascending else 'desc'}"),
        ]
        if location_id:
            params.append(("location_id", f"eq.{location_id}"))
        if limit:
            params.append(("limit", str(int(limit))))
        rows = self._request("GET", "weather_readings", params=params) or []
        for row in rows:
            joined = row.pop("locations", None) or {}
            row["location_name"] = joined.get("name")
        return _finish_readings(pd.DataFrame(rows))

    def check_connection(self) -> tuple[bool, str]:
        try:
            self._request("GET", "locations", params={"select": "id", "limit": "1"})
        except StoreError as exc:
            return False, str(exc)
        return True, "Supabase connected"


def open_store(db_path: str | Path, supabase_url: str = "", supabase_key: str = ""):
    if supabase_url and supabase_key:
        return SupabaseStore(supabase_url, supabase_key)
    return SQLiteStore(db_path)
