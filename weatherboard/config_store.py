import sqlite3
from pathlib import Path
from typing import Any

from weatherboard.config import VOLATILITY_THRESHOLD

APP_SETTINGS_TABLE = "app_settings"

DEFAULT_SETTINGS = {
    "email_notifications": True,
    "volatility_alerts": True,
    "daily_reports": False,
    "temperature_unit": "celsius",
    "volatility_threshold": VOLATILITY_THRESHOLD,
}


def connect(db_path: str | Path) -> sqlite3.Connection:
    """
    Connect to the SQLite database with basic hardening to avoid lock issues.
    """
    db_file = Path(db_path)
    if not db_file.is_absolute():
        db_file = Path.cwd() / db_file
    db_file.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_file)
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA busy_timeout=5000;")
    conn.execute("PRAGMA foreign_keys=ON;")
    return conn


def _ensure_table(conn: sqlite3.Connection) -> None:
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {APP_SETTINGS_TABLE} (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
        """
    )


def get_config(conn: sqlite3.Connection, key: str) -> str | None:
    _ensure_table(conn)
    row = conn.execute(
        f"SELECT value FROM {APP_SETTINGS_TABLE} WHERE key = ?",
        (key,),
    ).fetchone()
    return row[0] if row else None


def set_config(conn: sqlite3.Connection, key: str, value: Any) -> None:
    _ensure_table(conn)
    conn.execute(
        f"""
        INSERT INTO {APP_SETTINGS_TABLE} (key, value)
        VALUES (?, ?)
        ON CONFLICT(key) DO UPDATE SET
          value=excluded.value
        """,
        (key, str(value)),
    )
    conn.commit()


def get_bool(conn: sqlite3.Connection, key: str) -> bool | None:
    value = get_config(conn, key)
    if value is None:
        return None
    return str(value) == "1"


def set_bool(conn: sqlite3.Connection, key: str, value: bool) -> None:
    set_config(conn, key, "1" if value else "0")


def get_float(conn: sqlite3.Connection, key: str) -> float | None:
    value = get_config(conn, key)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def set_float(conn: sqlite3.Connection, key: str, value: float) -> None:
    set_config(conn, key, str(value))


def load_settings(conn: sqlite3.Connection) -> dict:
    """Stored preferences layered over DEFAULT_SETTINGS."""
    settings = dict(DEFAULT_SETTINGS)
    for key, default in DEFAULT_SETTINGS.items():
        if isinstance(default, bool):
            value = get_bool(conn, key)
        elif isinstance(default, float):
            value = get_float(conn, key)
        else:
            value = get_config(conn, key)
        if value is not None:
            settings[key] = value
    return settings


def save_settings(conn: sqlite3.Connection, settings: dict) -> None:
    for key, value in settings.items():
        if key not in DEFAULT_SETTINGS:
            continue
        default = DEFAULT_SETTINGS[key]
        if isinstance(default, bool):
            set_bool(conn, key, bool(value))
        elif isinstance(default, float):
            set_float(conn, key, float(value))
        else:
            set_config(conn, key, value)
