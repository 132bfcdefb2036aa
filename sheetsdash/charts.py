from __future__ import annotations

from typing import Any, Dict, Mapping

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def month_label(month: str) -> str:
    """``2024-03`` -> ``Mar 2024``."""
    ts = pd.to_datetime(f"{month}-01", format="%Y-%m-%d", errors="coerce")
    if pd.isna(ts):
        return month
    return ts.strftime("%b %Y")


def monthly_frame(monthly: Mapping[str, int]) -> pd.DataFrame:
    df = pd.DataFrame(
        {"month": list(monthly.keys()), "count": [int(v) for v in monthly.values()]},
        columns=["month", "count"],
    )
    df = df.sort_values("month").reset_index(drop=True)
    df.insert(1, "month_name", df["month"].map(month_label))
    return df


def client_frame(client_breakdown: Mapping[str, Mapping[str, int]]) -> pd.DataFrame:
    records = [
        {"month": month, "client": client, "count": int(count)}
        for month, clients in client_breakdown.items()
        for client, count in clients.items()
    ]
    df = pd.DataFrame(records, columns=["month", "client", "count"])
    df = df.sort_values(["month", "client"]).reset_index(drop=True)
    df.insert(1, "month_name", df["month"].map(month_label))
    return df


def raised_closed_table(raised: Mapping[str, int], closed: Mapping[str, int]) -> pd.DataFrame:
    """One row per month with raised and closed counts, zero-filled."""
    months = sorted(set(raised) | set(closed))
    return pd.DataFrame(
        {
            "month": months,
            "Raised": [int(raised.get(m, 0)) for m in months],
            "Closed": [int(closed.get(m, 0)) for m in months],
        },
        columns=["month", "Raised", "Closed"],
    )


def raised_closed_frame(raised: Mapping[str, int], closed: Mapping[str, int]) -> pd.DataFrame:
    wide = raised_closed_table(raised, closed)
    long_df = wide.melt(id_vars="month", value_vars=["Raised", "Closed"], var_name="series", value_name="count")
    long_df = long_df.sort_values(["month", "series"]).reset_index(drop=True)
    long_df.insert(1, "month_name", long_df["month"].map(month_label))
    return long_df


def _month_axis(df: pd.DataFrame) -> alt.X:
    order = df.drop_duplicates("month").sort_values("month")["month_name"].tolist()
    return alt.X("month_name:N", title="Month", sort=order or "ascending", axis=alt.Axis(grid=False, labelAngle=0))


def monthly_trend_chart(monthly: Mapping[str, int], *, title: str = "", mark: str = "area") -> alt.Chart:
    df = monthly_frame(monthly)
    base = alt.Chart(df, title=title)
    if mark == "line":
        base = base.mark_line(point={"filled": True, "size": 60}, strokeWidth=3)
    else:
        base = base.mark_area(opacity=0.6, line=True)
    return base.encode(
        x=_month_axis(df),
        y=alt.Y("count:Q", title="Count", axis=alt.Axis(gridDash=[3, 3], domain=False, ticks=False)),
        tooltip=[alt.Tooltip("month_name:N", title="Month"), alt.Tooltip("count:Q", title="Count", format=",")],
    ).properties(height=300)


def client_distribution_chart(client_breakdown: Mapping[str, Mapping[str, int]], *, title: str = "") -> alt.Chart:
    df = client_frame(client_breakdown)
    hover = alt.selection_point(fields=["client"], on="mouseover", empty="all")
    return (
        alt.Chart(df, title=title)
        .mark_bar()
        .encode(
            x=_month_axis(df),
            y=alt.Y("count:Q", title="Count", stack="zero"),
            color=alt.Color("client:N", title="Client"),
            opacity=alt.condition(hover, alt.value(1), alt.value(0.3)),
            tooltip=[
                alt.Tooltip("month_name:N", title="Month"),
                alt.Tooltip("client:N", title="Client"),
                alt.Tooltip("count:Q", title="Count", format=","),
            ],
        )
        .add_params(hover)
        .properties(height=300)
    )


def raised_closed_chart(raised: Mapping[str, int], closed: Mapping[str, int], *, title: str = "") -> alt.Chart:
    df = raised_closed_frame(raised, closed)
    return (
        alt.Chart(df, title=title)
        .mark_line(point=True)
        .encode(
            x=_month_axis(df),
            y=alt.Y("count:Q", title="Issues"),
            color=alt.Color(
                "series:N",
                title="",
                scale=alt.Scale(domain=["Raised", "Closed"], range=["#FF8042", "#00C49F"]),
            ),
            tooltip=["month_name:N", "series:N", alt.Tooltip("count:Q", format=",")],
        )
        .properties(height=300)
    )


def build_dashboard_charts(payload: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    alerts = payload.get("alertTracking") or {}
    misalignments = payload.get("misalignmentTracking") or {}
    videos = payload.get("historicalVideoRequests") or {}
    issues = payload.get("allIssues") or {}
    return {
        "alertTracking": {
            "monthly_trend": to_vega_spec(monthly_trend_chart(alerts.get("monthlyBreakdown") or {}, title="Monthly Alert Trends")),
            "client_distribution": to_vega_spec(
                client_distribution_chart(alerts.get("clientBreakdown") or {}, title="Client-wise Alert Distribution")
            ),
        },
        "misalignmentTracking": {
            "monthly_trend": to_vega_spec(
                monthly_trend_chart(misalignments.get("monthlyBreakdown") or {}, title="Monthly Misalignment Counts", mark="line")
            ),
            "client_distribution": to_vega_spec(
                client_distribution_chart(misalignments.get("clientBreakdown") or {}, title="Client-wise Misalignment Distribution")
            ),
        },
        "historicalVideoRequests": {
            "monthly_trend": to_vega_spec(monthly_trend_chart(videos.get("monthlyBreakdown") or {}, title="Monthly Video Request Trends")),
            "client_distribution": to_vega_spec(
                client_distribution_chart(videos.get("clientBreakdown") or {}, title="Client-wise Video Requests")
            ),
        },
        "allIssues": {
            "raised_vs_closed": to_vega_spec(
                raised_closed_chart(issues.get("monthlyRaised") or {}, issues.get("monthlyClosed") or {}, title="Issues Raised vs Closed")
            ),
            "client_distribution": to_vega_spec(
                client_distribution_chart(issues.get("clientBreakdown") or {}, title="Issues Raised by Client")
            ),
        },
    }
