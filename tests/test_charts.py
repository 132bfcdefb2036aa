from sheetsdash.charts import (
    build_dashboard_charts,
    client_frame,
    month_label,
    monthly_frame,
    raised_closed_frame,
    raised_closed_table,
)


def test_month_label():
    assert month_label("2024-03") == "Mar 2024"
    assert month_label("garbage") == "garbage"


def test_monthly_frame_sorts_chronologically():
    df = monthly_frame({"2024-02": 1, "2023-12": 4})

    assert df["month"].tolist() == ["2023-12", "2024-02"]
    assert df["month_name"].tolist() == ["Dec 2023", "Feb 2024"]
    assert df["count"].tolist() == [4, 1]


def test_client_frame_is_long_format():
    df = client_frame({"2024-01": {"Globex": 1, "Acme": 2}})

    assert df[["client", "count"]].values.tolist() == [["Acme", 2], ["Globex", 1]]


def test_raised_closed_table_zero_fills():
    df = raised_closed_table({"2024-01": 3}, {"2024-02": 2})

    assert df.values.tolist() == [["2024-01", 3, 0], ["2024-02", 0, 2]]
    assert len(raised_closed_frame({"2024-01": 3}, {"2024-02": 2})) == 4


def test_build_dashboard_charts_handles_empty_payload():
    charts = build_dashboard_charts({})

    assert charts["alertTracking"]["monthly_trend"]["mark"]["type"] == "area"
    assert charts["misalignmentTracking"]["monthly_trend"]["mark"]["type"] == "line"
    assert charts["allIssues"]["client_distribution"]["mark"]["type"] == "bar"
