import altair as alt
import pandas as pd
import streamlit as st

from weatherboard.metrics import daily_trends, fmt_value, format_temperature, trend_series
from weatherboard.pages.shared import load_readings
from weatherboard.ui.components.cards import chart_card, metric_card, status_card, volatility_indicator
from weatherboard.ui.components.date_range_picker import date_range_picker
from weatherboard.ui.components.icons import icon
from weatherboard.ui.shell import render_header_strip
from weatherboard.volatility import compute_volatility, metric_contributions, series_from_readings

METRIC_LABELS = {
    "temperature": "Temperature",
    "humidity": "Humidity",
    "pressure": "Pressure",
    "wind_speed": "Wind Speed",
}


def line_chart(df: pd.DataFrame, height: int = 260):
    return (
        alt.Chart(df)
        .mark_line(interpolate="monotone", strokeWidth=2)
        .encode(
            x=alt.X("time:T", title="Time"),
            y=alt.Y("value:Q", title=None, scale=alt.Scale(zero=False)),
            color=alt.Color("metric:N", legend=None),
        )
        .properties(height=height)
    )


def daily_temperature_chart(trends: pd.DataFrame, height: int = 240):
    return (
        alt.Chart(trends.assign(date=pd.to_datetime(trends["date"])))
        .mark_bar(cornerRadiusTopLeft=4, cornerRadiusTopRight=4)
        .encode(
            x=alt.X("date:T", title=None, timeUnit="yearmonthdate"),
            y=alt.Y("avg_temp:Q", title="Avg °C"),
            tooltip=[
                alt.Tooltip("date:T", title="Day"),
                alt.Tooltip("avg_temp:Q", title="Avg temp", format=".1f"),
            ],
        )
        .properties(height=height)
    )


def render(ctx):
    tz_name = ctx["tz_name"]
    settings = ctx["settings"]
    unit = settings.get("temperature_unit", "celsius")
    threshold = settings.get("volatility_threshold", ctx["volatility_threshold"])

    render_header_strip("Analytics", "Weather patterns and trends")
    date_range = date_range_picker("analytics", ctx["now"])
    readings = load_readings(ctx, "analytics", date_range, ascending=True)
    if readings.empty:
        st.info("No analytics data available. Add some weather data first.")
        return

    series = series_from_readings(readings)
    volatility = compute_volatility(series)
    contributions = metric_contributions(series)

    st.markdown("<div class='section-title'>Volatility Analysis</div>", unsafe_allow_html=True)
    score_col, detail_col = st.columns([1, 2])
    with score_col:
        metric_card(icon("volatility"), "Overall Volatility Score", f"{volatility:.2f}")
        volatility_indicator(volatility, threshold, show_label=True)
    with detail_col:
        items = [
            (f"{METRIC_LABELS[metric]} contribution", f"{value:.2f}")
            for metric, value in contributions.items()
        ]
        items.append(("Data Points Analyzed", str(len(readings))))
        items.append(("Time Period", date_range.describe()))
        status_card("Breakdown", items)

    trends = daily_trends(readings, tz_name)
    if not trends.empty:
        chart_card(
            "Temperature Trends",
            lambda: st.altair_chart(daily_temperature_chart(trends), use_container_width=True),
        )

    for name, df in trend_series(readings).items():
        chart_card(name, lambda df=df: st.altair_chart(line_chart(df), use_container_width=True))

    cols = st.columns(3)
    avg_temp = trends["avg_temp"].mean() if not trends.empty else None
    avg_humidity = trends["avg_humidity"].mean() if not trends.empty else None
    with cols[0]:
        metric_card(icon("temp"), "Average Temperature", format_temperature(avg_temp, unit))
    with cols[1]:
        metric_card(icon("humidity"), "Average Humidity", fmt_value(avg_humidity, "{:.1f}%"))
    with cols[2]:
        metric_card(icon("analytics"), "Data Coverage", str(len(readings)), "Total readings analyzed")
