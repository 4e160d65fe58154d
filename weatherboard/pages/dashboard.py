import streamlit as st

from weatherboard.metrics import fmt_value, format_temperature, latest_by_location, summary_metrics
from weatherboard.pages.shared import load_locations, load_readings, readings_table
from weatherboard.ui.components.cards import metric_card, status_card, volatility_indicator
from weatherboard.ui.components.date_range_picker import date_range_picker
from weatherboard.ui.components.icons import icon
from weatherboard.ui.shell import render_header_strip
from weatherboard.volatility import compute_volatility, series_from_readings

RECENT_ROWS = 10


def _station_items(location, reading, unit, tz_name):
    lat_lon = f"{location['latitude']:.4f}, {location['longitude']:.4f}"
    if reading is None:
        return [("Coordinates", lat_lon), ("Status", "No data for selected period")]
    updated = reading["recorded_at"].tz_convert(tz_name).strftime("%H:%M")
    return [
        ("Coordinates", lat_lon),
        ("Temperature", format_temperature(reading.get("temperature_c"), unit)),
        ("Humidity", fmt_value(reading.get("humidity_percent"), "{:.1f}%")),
        ("Last Updated", updated),
    ]


def render(ctx):
    tz_name = ctx["tz_name"]
    settings = ctx["settings"]
    unit = settings.get("temperature_unit", "celsius")
    threshold = settings.get("volatility_threshold", ctx["volatility_threshold"])

    locations = load_locations(ctx)
    render_header_strip("Weather Dashboard", f"Real-time data from {len(locations)} weather stations")

    with st.container():
        st.markdown("<div class='section-title'>Select Date Range</div>", unsafe_allow_html=True)
        date_range = date_range_picker("dashboard", ctx["now"])

    readings = load_readings(ctx, "dashboard", date_range, limit=ctx["readings_limit"])
    volatility = compute_volatility(series_from_readings(readings))
    summary = summary_metrics(readings)

    volatility_indicator(volatility, threshold, show_label=True)

    cols = st.columns(4)
    with cols[0]:
        metric_card(
            icon("temp"),
            "Avg Temperature",
            format_temperature(summary["avg_temperature"], unit),
            f"Based on {summary['count']} readings",
        )
    with cols[1]:
        metric_card(
            icon("humidity"),
            "Avg Humidity",
            fmt_value(summary["avg_humidity"], "{:.1f}%"),
            "Across all locations",
        )
    with cols[2]:
        metric_card(
            icon("precip"),
            "Total Precipitation",
            f"{summary['total_precipitation']:.1f} mm",
            "Over selected period",
        )
    with cols[3]:
        metric_card(
            icon("volatility"),
            "Weather Volatility",
            f"{volatility:.2f}",
            f"Calculated from {summary['count']} data points",
        )
        volatility_indicator(volatility, threshold)

    st.markdown(
        f"<div class='section-title'>Weather Stations ({len(locations)})</div>",
        unsafe_allow_html=True,
    )
    latest = latest_by_location(readings)
    if locations.empty:
        st.info("No locations found. Add your first weather station on the Locations page.")
    else:
        station_cols = st.columns(3)
        for idx, location in enumerate(locations.to_dict("records")):
            with station_cols[idx % 3]:
                status_card(
                    location["name"],
                    _station_items(location, latest.get(location["id"]), unit, tz_name),
                )

    st.markdown("<div class='section-title'>Recent Weather Readings</div>", unsafe_allow_html=True)
    if readings.empty:
        message = "No weather data available for the selected period."
        if locations.empty:
            message += " Please add locations first."
        st.info(message)
        return
    st.caption(f"{len(readings)} records")
    st.dataframe(readings_table(readings, tz_name, limit=RECENT_ROWS), use_container_width=True)
