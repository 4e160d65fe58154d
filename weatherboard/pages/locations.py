import pandas as pd
import streamlit as st

from weatherboard.config import LOCAL_TZ
from weatherboard.locations import LocationValidationError, validate_location
from weatherboard.logs import log
from weatherboard.pages.shared import load_locations
from weatherboard.store import StoreError
from weatherboard.ui.shell import render_header_strip


def _render_table(ctx, locations):
    store = ctx["store"]
    if locations.empty:
        st.info("No locations found. Add your first weather station below.")
        return
    for location in locations.to_dict("records"):
        name_col, coord_col, elev_col, tz_col, action_col = st.columns([3, 3, 2, 3, 2])
        added = location["created_at"].strftime("%Y-%m-%d") if pd.notna(location.get("created_at")) else "--"
        name_col.markdown(f"**{location['name']}**  \nAdded {added}")
        coord_col.write(f"{location['latitude']:.4f}, {location['longitude']:.4f}")
        elevation = location.get("elevation")
        elev_col.write(f"{int(elevation)} m" if pd.notna(elevation) else "N/A")
        tz_col.write(location.get("timezone") or "Unknown")
        confirm_key = f"confirm_delete_{location['id']}"
        if st.session_state.get(confirm_key):
            action_col.warning("Delete station and all its readings?")
            if action_col.button("Confirm", key=f"confirm_btn_{location['id']}"):
                try:
                    store.delete_location(location["id"])
                except StoreError as exc:
                    st.error(f"Failed to delete location: {exc}")
                else:
                    log(f"Deleted location {location['name']} ({location['id']}).")
                    st.session_state[confirm_key] = False
                    st.session_state.locations_flash = "Location deleted successfully!"
                    st.rerun()
        elif action_col.button("Delete", key=f"delete_{location['id']}"):
            st.session_state[confirm_key] = True
            st.rerun()


def _render_form(ctx):
    store = ctx["store"]
    st.markdown("<div class='section-title'>Add New Location</div>", unsafe_allow_html=True)
    with st.form("add_location", clear_on_submit=True):
        name = st.text_input("Location Name *", placeholder="e.g., Central Weather Station")
        lat_col, lon_col = st.columns(2)
        latitude = lat_col.text_input("Latitude *", placeholder="40.7128")
        longitude = lon_col.text_input("Longitude *", placeholder="-74.0060")
        elev_col, tz_col = st.columns(2)
        elevation = elev_col.text_input("Elevation (m)", placeholder="10")
        timezone = tz_col.text_input("Timezone", value=LOCAL_TZ)
        submitted = st.form_submit_button("Add Location")

    if not submitted:
        return
    try:
        payload = validate_location(name, latitude, longitude, elevation, timezone)
        row = store.add_location(payload)
    except LocationValidationError as exc:
        st.error(str(exc))
        return
    except StoreError as exc:
        st.error(f"Failed to add location: {exc}")
        return
    log(f"Added location {row['name']} ({row['id']}).")
    st.session_state.locations_flash = f"Location \"{row['name']}\" added successfully!"
    st.rerun()


def render(ctx):
    render_header_strip("Locations", "Manage weather stations")
    flash = st.session_state.pop("locations_flash", None)
    if flash:
        st.success(flash)
    locations = load_locations(ctx)
    st.markdown(
        f"<div class='section-title'>Weather Stations ({len(locations)})</div>",
        unsafe_allow_html=True,
    )
    _render_table(ctx, locations)
    _render_form(ctx)
