from datetime import datetime

import streamlit as st

from weatherboard.date_range import CUSTOM, PRESET_LABELS, DateRange, RangeSelection, max_end_date


def _selection(key: str, now: datetime) -> RangeSelection:
    state_key = f"{key}_range_selection"
    if state_key not in st.session_state:
        st.session_state[state_key] = RangeSelection(now)
    return st.session_state[state_key]


def date_range_picker(key: str, now: datetime, show_presets: bool = True) -> DateRange:
    selection = _selection(key, now)

    if show_presets:
        st.markdown("<div class='section-title'>Quick Date Range</div>", unsafe_allow_html=True)
        cols = st.columns(len(PRESET_LABELS))
        for col, (preset, label) in zip(cols, PRESET_LABELS.items()):
            with col:
                kind = "primary" if selection.mode == preset else "secondary"
                if st.button(label, key=f"{key}_preset_{preset}", type=kind, use_container_width=True):
                    selection.select_preset(preset, now)
                    st.rerun()

    current = selection.range
    start_col, end_col = st.columns(2)
    with start_col:
        start_pick = st.date_input(
            "Start Date",
            value=current.start.date(),
            max_value=current.end.date(),
        )
    with end_col:
        end_pick = st.date_input(
            "End Date",
            value=current.end.date(),
            min_value=current.start.date(),
            max_value=max_end_date(now),
        )

    if start_pick != current.start.date():
        selection.edit_start(start_pick)
    if end_pick != current.end.date():
        selection.edit_end(end_pick)

    if selection.mode == CUSTOM:
        st.caption(f"Custom range selected: {selection.range.describe()}")
    return selection.range
