import html

import streamlit as st

from weatherboard.volatility import DEFAULT_THRESHOLD, volatility_level


def metric_card(icon: str, label: str, value: str, subvalue: str | None = None):
    sub_html = f"<div class=\"metric-sub\">{subvalue}</div>" if subvalue else ""
    st.markdown(
        f"""
        <div class="card metric-card">
          <div class="metric-icon">{icon}</div>
          <div class="metric-body">
            <div class="metric-label">{label}</div>
            <div class="metric-value">{value}</div>
            {sub_html}
          </div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def chart_card(title: str | None, body_renderer):
    if title and title.strip():
        st.markdown(f"<div class=\"chart-label\">{title}</div>", unsafe_allow_html=True)
    st.markdown(
        """
        <div class="card chart-card">
          <div class="body">
        """,
        unsafe_allow_html=True,
    )
    body_renderer()
    st.markdown("</div></div>", unsafe_allow_html=True)


def status_card(title: str, items: list[tuple[str, str]]):
    lines = "".join(
        f"<div class=\"status-line\"><span>{label}</span><span>{value}</span></div>"
        for label, value in items
    )
    st.markdown(
        f"""
        <div class="card status-card">
          <div class="section-title">{title}</div>
          {lines}
        </div>
        """,
        unsafe_allow_html=True,
    )


def volatility_indicator(score: float, threshold: float = DEFAULT_THRESHOLD, show_label: bool = False):
    level = volatility_level(score, threshold)
    dot_class = "vol-high" if level == "High" else "vol-low"
    if level == "High":
        detail = "Significant fluctuations: rapid temperature changes, unstable pressure or variable wind."
    else:
        detail = "Weather conditions are stable with minimal fluctuations."
    tooltip = html.escape(f"{level} Volatility | score {score:.2f} (threshold {threshold:g}). {detail}")
    label_html = f"<span class=\"vol-label {dot_class}\">{level} Volatility</span>" if show_label else ""
    st.markdown(
        f"""
        <div class="vol-indicator" title="{tooltip}">
          <span class="vol-dot {dot_class}"></span>
          {label_html}
        </div>
        """,
        unsafe_allow_html=True,
    )
