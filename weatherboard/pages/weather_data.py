import streamlit as st

from weatherboard.metrics import fmt_value, format_temperature, summary_metrics
from weatherboard.pages.shared import load_locations, load_readings, readings_table
from weatherboard.ui.components.cards import status_card
from weatherboard.ui.components.date_range_picker import date_range_picker
from weatherboard.ui.shell import render_header_strip

TABLE_LIMIT = 100
ALL_LOCATIONS = "all"


def render(ctx):
    tz_name = ctx["tz_name"]
    unit = ctx["settings"].get("temperature_unit", "celsius")
    render_header_strip("Weather Data", "Detailed weather readings and statistics")

    locations = load_locations(ctx)
    names = {row["id"]: row["name"] for row in locations.to_dict("records")}
    options = [ALL_LOCATIONS] + list(names)

    filter_col, action_col = st.columns([3, 1])
    with filter_col:
        selected = st.selectbox(
            "Select Location",
            options,
            format_func=lambda opt: "All Locations" if opt == ALL_LOCATIONS else names.get(opt, opt),
            key="weather_data_location",
        )
    with action_col:
        st.markdown("<div class='section-title'>&nbsp;</div>", unsafe_allow_html=True)
        if st.button("Refresh Data", key="weather_data_refresh"):
            st.rerun()

    date_range = date_range_picker("weather_data", ctx["now"])
    location_id = None if selected == ALL_LOCATIONS else selected
    readings = load_readings(ctx, "weather_data", date_range, location_id=location_id, limit=TABLE_LIMIT)

    summary = summary_metrics(readings)
    status_card(
        "Statistics",
        [
            ("Average Temperature", format_temperature(summary["avg_temperature"], unit)),
            ("Average Humidity", fmt_value(summary["avg_humidity"], "{:.1f}%")),
            ("Total Precipitation", f"{summary['total_precipitation']:.1f} mm"),
            ("Readings", str(summary["count"])),
        ],
    )

    if readings.empty:
        # The picker caps start at end; ranges built elsewhere may still be inverted.
        if date_range.is_inverted:
            st.info("The start date is after the end date, so no readings match.")
        else:
            st.info("No weather data available for the selected filters.")
        return
    st.dataframe(readings_table(readings, tz_name), use_container_width=True)
