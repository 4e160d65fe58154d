import pandas as pd

from weatherboard.volatility import METRIC_COLUMNS

TREND_LABELS = {
    "temperature_c": "Temperature (°C)",
    "humidity_percent": "Humidity (%)",
    "pressure_hpa": "Pressure (hPa)",
    "wind_speed_ms": "Wind Speed (m/s)",
}


def _column_mean(df: pd.DataFrame, column: str) -> float | None:
    if column not in df:
        return None
    values = pd.to_numeric(df[column], errors="coerce").dropna()
    if values.empty:
        return None
    return float(values.mean())


def summary_metrics(df: pd.DataFrame | None) -> dict:
    """
    Headline numbers for the dashboard cards.

    Averages skip missing values; None means no reading carried the field.
    """
    if df is None or df.empty:
        return {
            "count": 0,
            "avg_temperature": None,
            "avg_humidity": None,
            "avg_pressure": None,
            "avg_wind_speed": None,
            "total_precipitation": 0.0,
        }
    total_precip = 0.0
    if "precipitation_mm" in df:
        total_precip = float(pd.to_numeric(df["precipitation_mm"], errors="coerce").fillna(0).sum())
    return {
        "count": int(len(df)),
        "avg_temperature": _column_mean(df, "temperature_c"),
        "avg_humidity": _column_mean(df, "humidity_percent"),
        "avg_pressure": _column_mean(df, "pressure_hpa"),
        "avg_wind_speed": _column_mean(df, "wind_speed_ms"),
        "total_precipitation": total_precip,
    }


def daily_trends(df: pd.DataFrame | None, tz_name: str = "UTC", days: int = 7) -> pd.DataFrame:
    columns = ["date", "avg_temp", "avg_humidity", "avg_pressure", "avg_wind_speed", "readings"]
    if df is None or df.empty:
        return pd.DataFrame(columns=columns)
    work = df.copy()
    work["date"] = work["recorded_at"].dt.tz_convert(tz_name).dt.date
    grouped = (
        work.groupby("date")
        .agg(
            avg_temp=("temperature_c", "mean"),
            avg_humidity=("humidity_percent", "mean"),
            avg_pressure=("pressure_hpa", "mean"),
            avg_wind_speed=("wind_speed_ms", "mean"),
            readings=("id", "count"),
        )
        .reset_index()
        .sort_values("date")
    )
    return grouped.tail(days).reset_index(drop=True)[columns]


def latest_by_location(df: pd.DataFrame | None) -> dict[str, dict]:
    if df is None or df.empty:
        return {}
    latest = df.sort_values("recorded_at").groupby("location_id").tail(1)
    return {row["location_id"]: row for row in latest.to_dict("records")}


def trend_series(df: pd.DataFrame | None) -> dict[str, pd.DataFrame]:
    """Long-form time/value/metric frames per metric, ready for Altair."""
    if df is None or df.empty:
        return {}
    series = {}
    for column in METRIC_COLUMNS.values():
        if column not in df:
            continue
        label = TREND_LABELS[column]
        work = df[["recorded_at", column]].dropna().sort_values("recorded_at")
        if work.empty:
            continue
        frame = pd.DataFrame(
            {
                "time": work["recorded_at"],
                "value": pd.to_numeric(work[column], errors="coerce"),
                "metric": label,
            }
        ).dropna()
        series[label] = frame
    return series


def c_to_f(c):
    return c * 9 / 5 + 32


def format_temperature(value_c: float | None, unit: str = "celsius", fallback: str = "--") -> str:
    if value_c is None or pd.isna(value_c):
        return fallback
    if unit == "fahrenheit":
        return f"{c_to_f(value_c):.1f}°F"
    return f"{value_c:.1f}°C"


def fmt_value(value, fmt_str="{:.1f}", fallback="--"):
    if value is None or pd.isna(value):
        return fallback
    return fmt_str.format(value)
