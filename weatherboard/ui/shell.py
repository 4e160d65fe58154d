import streamlit as st

from weatherboard.ui.components.icons import icon

PAGES = ["dashboard", "weather_data", "analytics", "locations", "settings"]
PAGE_TITLES = {
    "dashboard": "Dashboard",
    "weather_data": "Weather Data",
    "analytics": "Analytics",
    "locations": "Locations",
    "settings": "Settings",
}


def render_left_rail(page: str, render_status):
    with st.sidebar:
        def fmt(opt):
            return f"{icon(opt)}  {PAGE_TITLES[opt]}"

        selection = st.radio(
            "Navigation",
            PAGES,
            index=PAGES.index(page),
            format_func=fmt,
            label_visibility="collapsed",
        )
        st.session_state.page = selection

        render_status()


def render_header_strip(title: str, subtitle: str | None = None):
    sub_html = f"<div class='header-sub'>{subtitle}</div>" if subtitle else ""
    st.markdown(
        f"<div class='header-strip'><div class='header-title'>{title}</div>{sub_html}</div>",
        unsafe_allow_html=True,
    )
