import sqlite3
from contextlib import closing

import streamlit as st

from weatherboard.config_store import connect as config_connect
from weatherboard.config_store import save_settings
from weatherboard.ui.shell import render_header_strip

UNIT_OPTIONS = ["celsius", "fahrenheit"]


def render(ctx):
    settings = dict(ctx["settings"])
    render_header_strip("Settings", "Configure your weather dashboard preferences")

    with st.form("settings_form"):
        st.markdown("<div class='section-title'>Notification Settings</div>", unsafe_allow_html=True)
        settings["email_notifications"] = st.toggle(
            "Email Notifications",
            value=settings["email_notifications"],
            help="Receive email alerts for important updates",
        )
        settings["volatility_alerts"] = st.toggle(
            "Volatility Alerts",
            value=settings["volatility_alerts"],
            help="Get notified when volatility exceeds thresholds",
        )
        settings["daily_reports"] = st.toggle(
            "Daily Reports",
            value=settings["daily_reports"],
            help="Receive daily summary reports",
        )

        st.markdown("<div class='section-title'>Display</div>", unsafe_allow_html=True)
        settings["temperature_unit"] = st.selectbox(
            "Temperature Unit",
            UNIT_OPTIONS,
            index=UNIT_OPTIONS.index(settings["temperature_unit"]) if settings["temperature_unit"] in UNIT_OPTIONS else 0,
            format_func=str.title,
        )
        settings["volatility_threshold"] = st.number_input(
            "High volatility threshold",
            min_value=0.0,
            value=float(settings["volatility_threshold"]),
            step=0.5,
        )
        submitted = st.form_submit_button("Save Settings")

    if not submitted:
        return
    try:
        with closing(config_connect(ctx["db_path"])) as conn:
            save_settings(conn, settings)
    except sqlite3.Error as exc:
        st.error(f"Unable to save settings: {exc}")
        return
    st.success("Settings saved.")
