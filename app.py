"""Streamlit dashboard.

Display-only layer: the aggregated payload comes from the API (`/api/sheets`)
and is re-fetched on a fragment timer. Chart construction lives in
`sheetsdash.charts`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Optional

import pandas as pd
import requests
import streamlit as st

from sheetsdash.charts import (
    client_distribution_chart,
    monthly_trend_chart,
    raised_closed_chart,
)
from sheetsdash.datasets import DATASETS_BY_KEY
from sheetsdash.formatting import format_hours
from sheetsdash.settings import get_settings


settings = get_settings()


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def fetch_payload() -> Dict[str, Any]:
    response = requests.get(f"{settings.api_base_url.rstrip('/')}/api/sheets", timeout=settings.request_timeout_seconds * 4)
    if not response.ok:
        try:
            detail = response.json().get("detail") or response.reason
        except ValueError:
            detail = response.reason
        raise RuntimeError(f"Failed to fetch data: {detail}")
    return response.json()


def format_updated(value: Optional[str]) -> str:
    if not value:
        return "N/A"
    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        return value
    return ts.to_pydatetime().astimezone().strftime("%Y-%m-%d %H:%M:%S")


# ---------- Section renderers ----------
def render_kpis(data: Dict[str, Any]):
    videos = data["historicalVideoRequests"]
    cols = st.columns(4)
    cols[0].metric("Total Alerts", f"{data['alertTracking']['total']:,}")
    cols[1].metric("Misalignments", f"{data['misalignmentTracking']['total']:,}")
    cols[2].metric("Video Requests", f"{videos['total']:,}")
    cols[3].metric("Median Resolution", format_hours(videos["resolutionStats"]["median"]), help="Historical video requests, raised to resolved.")


def render_resolution_stats(stats: Dict[str, float]):
    cols = st.columns(3)
    cols[0].metric("Minimum", format_hours(stats["min"]))
    cols[1].metric("Median", format_hours(stats["median"]))
    cols[2].metric("Maximum", format_hours(stats["max"]))


def render_single_dataset(key: str, summary: Dict[str, Any], *, mark: str = "area", show_resolution: bool = False):
    title = DATASETS_BY_KEY[key].title
    st.subheader(f"{title} Analysis")
    if show_resolution:
        with card("Resolution Time Statistics"):
            render_resolution_stats(summary["resolutionStats"])
    cols = st.columns(2)
    with cols[0]:
        with card(f"Monthly {title}"):
            if summary["monthlyBreakdown"]:
                st.altair_chart(monthly_trend_chart(summary["monthlyBreakdown"], mark=mark), use_container_width=True)
            else:
                st.info("No dated rows.")
    with cols[1]:
        with card(f"Client-wise {title}"):
            if summary["clientBreakdown"]:
                st.altair_chart(client_distribution_chart(summary["clientBreakdown"]), use_container_width=True)
            else:
                st.info("No dated rows.")


def render_all_issues(summary: Dict[str, Any]):
    st.subheader("All Issues Analysis")
    cols = st.columns(3)
    cols[0].metric("Raised", f"{summary['totalRaised']:,}")
    cols[1].metric("Closed", f"{summary['totalClosed']:,}")
    cols[2].metric("Median Resolution", format_hours(summary["resolutionStats"]["median"]))
    chart_cols = st.columns(2)
    with chart_cols[0]:
        with card("Issues Raised vs Closed"):
            if summary["monthlyRaised"] or summary["monthlyClosed"]:
                st.altair_chart(raised_closed_chart(summary["monthlyRaised"], summary["monthlyClosed"]), use_container_width=True)
            else:
                st.info("No dated rows.")
    with chart_cols[1]:
        with card("Issues Raised by Client"):
            if summary["clientBreakdown"]:
                st.altair_chart(client_distribution_chart(summary["clientBreakdown"]), use_container_width=True)
            else:
                st.info("No dated rows.")


def render_dashboard(data: Dict[str, Any]):
    st.caption(f"Last updated: {format_updated(data.get('lastUpdated'))}")
    failed = data.get("failedDatasets") or []
    if failed:
        titles = ", ".join(DATASETS_BY_KEY[k].title if k in DATASETS_BY_KEY else k for k in failed)
        st.warning(f"Some sources could not be fetched and are shown as empty: {titles}")
    render_kpis(data)
    render_single_dataset("alertTracking", data["alertTracking"])
    render_single_dataset("misalignmentTracking", data["misalignmentTracking"], mark="line")
    render_single_dataset("historicalVideoRequests", data["historicalVideoRequests"], show_resolution=True)
    render_all_issues(data["allIssues"])


# ---------- UI setup ----------
st.set_page_config(page_title="Analytics Dashboard - Company Metrics", layout="wide")
inject_base_styles()
st.title("Analytics Dashboard")


@st.fragment(run_every=settings.refresh_interval_seconds)
def live_dashboard():
    try:
        with st.spinner("Loading Dashboard..."):
            data = fetch_payload()
    except (requests.RequestException, RuntimeError, ValueError) as exc:
        st.error(f"Error Loading Data: {exc}")
        if st.button("Retry"):
            st.rerun()
        return
    render_dashboard(data)


live_dashboard()
