from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from sheetsdash.aggregate import FieldMapping
from sheetsdash.settings import Settings


RowFilter = Callable[[Mapping[str, str]], bool]

ALERT_TYPE = "Alert Type"
NO_ALERTS_MARKER = "No L2 alerts found"
SUB_REQUEST = "Sub-request"
HISTORICAL_VIDEO_REQUEST = "Historical Video Request"

RAISED_AT = "Timestamp Issues Raised"
RESOLVED_AT = "Timestamp Issues Resolved"


def is_real_alert(row: Mapping[str, str]) -> bool:
    alert_type = (row.get(ALERT_TYPE) or "").strip()
    return bool(alert_type) and alert_type != NO_ALERTS_MARKER


def is_historical_video_request(row: Mapping[str, str]) -> bool:
    return HISTORICAL_VIDEO_REQUEST in (row.get(SUB_REQUEST) or "")


@dataclass(frozen=True)
class DatasetSpec:
    key: str
    title: str
    spreadsheet_setting: str
    range_name: str
    mapping: FieldMapping
    row_filter: Optional[RowFilter] = None

    def spreadsheet_id(self, settings: Settings) -> str:
        return getattr(settings, self.spreadsheet_setting)

    def select(self, rows: Sequence[Mapping[str, str]]) -> List[Mapping[str, str]]:
        if self.row_filter is None:
            return list(rows)
        return [r for r in rows if self.row_filter(r)]


ALERT_TRACKING = DatasetSpec(
    key="alertTracking",
    title="Alert Tracking",
    spreadsheet_setting="alerts_spreadsheet_id",
    range_name="Alert_Tracking!A:Z",
    mapping=FieldMapping(date_field="Date", client_field="Client Name"),
    row_filter=is_real_alert,
)

MISALIGNMENT_TRACKING = DatasetSpec(
    key="misalignmentTracking",
    title="Misalignment Tracking",
    spreadsheet_setting="alerts_spreadsheet_id",
    range_name="Misalignment_Tracking!A:Z",
    mapping=FieldMapping(date_field="Date", client_field="Client Name", count_field="Count"),
)

HISTORICAL_VIDEO_REQUESTS = DatasetSpec(
    key="historicalVideoRequests",
    title="Historical Video Requests",
    spreadsheet_setting="issues_spreadsheet_id",
    range_name="Issues- Realtime!A:Z",
    mapping=FieldMapping(date_field=RAISED_AT, resolved_field=RESOLVED_AT, client_field="Clients"),
    row_filter=is_historical_video_request,
)

ALL_ISSUES = DatasetSpec(
    key="allIssues",
    title="All Issues",
    spreadsheet_setting="issues_spreadsheet_id",
    range_name="Issues- Realtime!A:Z",
    mapping=FieldMapping(raised_date_field=RAISED_AT, resolved_date_field=RESOLVED_AT, client_field="Clients"),
)

DATASETS: Sequence[DatasetSpec] = (
    ALERT_TRACKING,
    MISALIGNMENT_TRACKING,
    HISTORICAL_VIDEO_REQUESTS,
    ALL_ISSUES,
)

DATASETS_BY_KEY: Dict[str, DatasetSpec] = {d.key: d for d in DATASETS}
