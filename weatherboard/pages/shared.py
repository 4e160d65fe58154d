import pandas as pd
import streamlit as st

from weatherboard.store import StoreError, empty_locations, empty_readings

TABLE_COLUMNS = [
    "Location",
    "Time",
    "Temperature (°C)",
    "Humidity (%)",
    "Pressure (hPa)",
    "Wind (m/s)",
    "Precipitation (mm)",
]


def load_locations(ctx) -> pd.DataFrame:
    store = ctx["store"]
    try:
        df = store.list_locations()
    except StoreError as exc:
        st.error(f"Error loading data: {exc}. Please check your data store connection.")
        return st.session_state.get("last_locations", empty_locations())
    st.session_state.last_locations = df
    return df


def load_readings(ctx, key: str, date_range, location_id=None, limit=None, ascending=False) -> pd.DataFrame:
    """
    Fetch readings for a page, keeping the last good frame when the store fails.
    """
    store = ctx["store"]
    state_key = f"{key}_last_readings"
    try:
        df = store.fetch_readings(date_range, location_id=location_id, limit=limit, ascending=ascending)
    except StoreError as exc:
        st.error(f"Failed to load weather data: {exc}")
        return st.session_state.get(state_key, empty_readings())
    st.session_state[state_key] = df
    return df


def local_time(series: pd.Series, tz_name: str) -> pd.Series:
    return series.dt.tz_convert(tz_name)


def readings_table(df: pd.DataFrame, tz_name: str, limit: int | None = None) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=TABLE_COLUMNS)
    view = df if limit is None else df.head(limit)
    return pd.DataFrame(
        {
            "Location": view["location_name"].fillna("Unknown"),
            "Time": local_time(view["recorded_at"], tz_name).dt.strftime("%Y-%m-%d %H:%M"),
            "Temperature (°C)": view["temperature_c"],
            "Humidity (%)": view["humidity_percent"],
            "Pressure (hPa)": view["pressure_hpa"],
            "Wind (m/s)": view["wind_speed_ms"],
            "Precipitation (mm)": view["precipitation_mm"],
        }
    ).reset_index(drop=True)
