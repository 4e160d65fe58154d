import sqlite3
from contextlib import closing
from datetime import datetime
from zoneinfo import ZoneInfo

import streamlit as st
from streamlit_autorefresh import st_autorefresh

from weatherboard.config import (
    AUTO_REFRESH_SECONDS,
    DB_PATH,
    LOCAL_TZ,
    READINGS_LIMIT,
    SUPABASE_ANON_KEY,
    SUPABASE_URL,
    VOLATILITY_THRESHOLD,
    missing_backend_vars,
)
from weatherboard.config_store import DEFAULT_SETTINGS, load_settings
from weatherboard.config_store import connect as config_connect
from weatherboard.logs import log
from weatherboard.pages import analytics as page_analytics
from weatherboard.pages import dashboard as page_dashboard
from weatherboard.pages import locations as page_locations
from weatherboard.pages import settings as page_settings
from weatherboard.pages import weather_data as page_weather_data
from weatherboard.store import open_store
from weatherboard.ui.apply_styles import apply_styles
from weatherboard.ui.components.cards import status_card
from weatherboard.ui.shell import PAGES, render_left_rail

PAGE_RENDERERS = {
    "dashboard": page_dashboard.render,
    "weather_data": page_weather_data.render,
    "analytics": page_analytics.render,
    "locations": page_locations.render,
    "settings": page_settings.render,
}

st.set_page_config(
    page_title="Weather Dashboard",
    layout="wide",
)

apply_styles()

if AUTO_REFRESH_SECONDS > 0:
    st_autorefresh(interval=AUTO_REFRESH_SECONDS * 1000, key="auto_refresh")


@st.cache_resource
def get_store():
    store = open_store(DB_PATH, SUPABASE_URL, SUPABASE_ANON_KEY)
    log(f"Using {store.name} data store.")
    return store


def read_settings():
    try:
        with closing(config_connect(DB_PATH)) as conn:
            return load_settings(conn)
    except sqlite3.Error as exc:
        log(f"ERROR: unable to read settings ({exc}).")
        return dict(DEFAULT_SETTINGS)


# Navigation/page state
if "page" not in st.session_state:
    st.session_state.page = "dashboard"
try:
    query_page = st.query_params.get("page")
except Exception:
    query_page = None
if query_page in PAGES and "page_from_query" not in st.session_state:
    st.session_state.page = query_page
    st.session_state.page_from_query = True

store = get_store()


def render_connection_status():
    ok, message = store.check_connection()
    items = [("Backend", store.name), ("Status", message)]
    missing = missing_backend_vars()
    if missing:
        items.append(("Managed backend", "not configured: " + ", ".join(missing)))
    status_card("Connection", items)
    if not ok:
        st.error("Data store is unreachable. Showing the last loaded data.")


render_left_rail(st.session_state.page, render_connection_status)

ctx = {
    "store": store,
    "db_path": DB_PATH,
    "now": datetime.now(ZoneInfo(LOCAL_TZ)),
    "tz_name": LOCAL_TZ,
    "settings": read_settings(),
    "readings_limit": READINGS_LIMIT,
    "volatility_threshold": VOLATILITY_THRESHOLD,
}

PAGE_RENDERERS[st.session_state.page](ctx)
