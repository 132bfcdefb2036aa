import pytest

from sheetsdash.dates import elapsed_hours, month_bucket, parse_date


@pytest.mark.parametrize("value", [None, "", "   ", "not-a-date", "2024-13", "2024-02-30", "2024-03-", "2024-00-10"])
def test_parse_date_returns_none_for_invalid_input(value):
    assert parse_date(value) is None


def test_parse_date_accepts_iso_variants():
    assert parse_date("2024-03-15").day == 15
    assert parse_date("2024-03-15T10:20:30").hour == 10
    assert parse_date("2024-03-15 10:20:30").minute == 20
    assert parse_date("2024-03-15T10:20:30.250Z").tzinfo is not None


@pytest.mark.parametrize(
    "value",
    [
        "2024-03-01",
        "2024-03-15T00:00:00",
        "2024-03-31T23:59:59",
        "2024-03-10 08:30:00",
        "2024-03-10T12:00:00Z",
        "2024-03-10T12:00:00+05:30",
    ],
)
def test_month_bucket_march_2024_regardless_of_time(value):
    assert month_bucket(value) == "2024-03"


@pytest.mark.parametrize("value", ["", "not-a-date", "2024-03-", "2024-02-30"])
def test_month_bucket_none_for_unparseable(value):
    assert month_bucket(value) is None


def test_month_bucket_zero_pads_month():
    assert month_bucket("2023-01-09") == "2023-01"
    assert month_bucket("2023-11-09") == "2023-11"


def test_elapsed_hours_keeps_fractional_hours():
    assert elapsed_hours("2024-01-01T00:00:00Z", "2024-01-01T05:30:00Z") == pytest.approx(5.5)


def test_elapsed_hours_is_symmetric():
    a, b = "2024-01-01T00:00:00Z", "2024-01-03T07:15:00Z"
    assert elapsed_hours(a, b) == elapsed_hours(b, a)
    assert elapsed_hours(a, b) == pytest.approx(55.25)


def test_elapsed_hours_none_when_either_side_fails():
    assert elapsed_hours("2024-01-01T00:00:00Z", "") is None
    assert elapsed_hours("garbage", "2024-01-01T00:00:00Z") is None


def test_elapsed_hours_compares_offsets_in_utc():
    assert elapsed_hours("2024-01-01T05:00:00+05:00", "2024-01-01T00:00:00Z") == pytest.approx(0.0)
    assert elapsed_hours("2024-01-01T00:00:00", "2024-01-01T02:00:00Z") == pytest.approx(2.0)
