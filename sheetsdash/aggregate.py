"""Row-record aggregation.

Every dataset is reduced by the same routine: bucket each row by the month of
its date column, attribute it to a client, weight it by an optional count
column and, where a resolved timestamp is configured, collect its resolution
time in hours. Rows whose bucketing date does not parse are left out of the
totals and breakdowns entirely.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from sheetsdash.dates import elapsed_hours, month_bucket
from sheetsdash.stats import ResolutionStats, summarize


logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "Unknown"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class FieldMappingError(ValueError):
    """Raised when a field mapping cannot describe a dataset."""


@dataclass(frozen=True)
class FieldMapping:
    client_field: str
    date_field: Optional[str] = None
    raised_date_field: Optional[str] = None
    resolved_date_field: Optional[str] = None
    count_field: Optional[str] = None
    resolved_field: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.client_field:
            raise FieldMappingError("client_field is required")
        has_dual = bool(self.raised_date_field) or bool(self.resolved_date_field)
        if has_dual and not (self.raised_date_field and self.resolved_date_field):
            raise FieldMappingError("raised_date_field and resolved_date_field must be set together")
        if has_dual and self.date_field:
            raise FieldMappingError("date_field cannot be combined with raised/resolved date fields")
        if not has_dual and not self.date_field:
            raise FieldMappingError("either date_field or raised/resolved date fields must be set")
        if has_dual and self.resolved_field:
            raise FieldMappingError("resolved_field only applies to single-date mappings")

    @property
    def is_dual(self) -> bool:
        return bool(self.raised_date_field)


@dataclass
class DatasetSummary:
    total: int = 0
    monthly_breakdown: Dict[str, int] = field(default_factory=dict)
    client_breakdown: Dict[str, Dict[str, int]] = field(default_factory=dict)
    resolution_stats: ResolutionStats = field(default_factory=ResolutionStats)
    dropped_rows: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "monthlyBreakdown": _sorted_months(self.monthly_breakdown),
            "clientBreakdown": _sorted_clients(self.client_breakdown),
            "resolutionStats": self.resolution_stats.to_dict(),
        }


@dataclass
class RaisedClosedSummary:
    total_raised: int = 0
    total_closed: int = 0
    monthly_raised: Dict[str, int] = field(default_factory=dict)
    monthly_closed: Dict[str, int] = field(default_factory=dict)
    client_breakdown: Dict[str, Dict[str, int]] = field(default_factory=dict)
    resolution_stats: ResolutionStats = field(default_factory=ResolutionStats)
    dropped_rows: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRaised": self.total_raised,
            "totalClosed": self.total_closed,
            "monthlyRaised": _sorted_months(self.monthly_raised),
            "monthlyClosed": _sorted_months(self.monthly_closed),
            "clientBreakdown": _sorted_clients(self.client_breakdown),
            "resolutionStats": self.resolution_stats.to_dict(),
        }


Summary = Union[DatasetSummary, RaisedClosedSummary]


def _sorted_months(monthly: Dict[str, int]) -> Dict[str, int]:
    return {m: monthly[m] for m in sorted(monthly)}


def _sorted_clients(clients: Dict[str, Dict[str, int]]) -> Dict[str, Dict[str, int]]:
    return {m: dict(clients[m]) for m in sorted(clients)}


def parse_count(value: object) -> int:
    """Best-effort integer parse: ``"12 rows"`` -> 12, ``"3.7"`` -> 3, ``"abc"`` -> 0."""
    if value is None:
        return 0
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return int(match.group(1))


def _cell(row: Mapping, column: Optional[str]) -> str:
    if not column:
        return ""
    value = row.get(column)
    if value is None:
        return ""
    return str(value)


def _client(row: Mapping, mapping: FieldMapping) -> str:
    return _cell(row, mapping.client_field).strip() or UNKNOWN_CLIENT


def _count(row: Mapping, mapping: FieldMapping) -> int:
    if not mapping.count_field:
        return 1
    return parse_count(_cell(row, mapping.count_field))


def _add(bucket: Dict[str, int], key: str, count: int) -> None:
    bucket[key] = bucket.get(key, 0) + count


def _add_client(clients: Dict[str, Dict[str, int]], month: str, client: str, count: int) -> None:
    _add(clients.setdefault(month, {}), client, count)


def _check_rows(rows: object) -> Iterable:
    if isinstance(rows, (str, bytes, Mapping)) or not isinstance(rows, Iterable):
        raise TypeError(f"rows must be an iterable of row mappings, got {type(rows).__name__}")
    return rows


def aggregate_single(rows: Iterable[Mapping], mapping: FieldMapping, *, label: str = "") -> DatasetSummary:
    if mapping.is_dual:
        raise FieldMappingError("aggregate_single needs a single-date mapping")
    summary = DatasetSummary()
    times: List[float] = []

    for row in _check_rows(rows):
        if not isinstance(row, Mapping):
            summary.dropped_rows += 1
            continue
        start = _cell(row, mapping.date_field)
        month = month_bucket(start)
        if month is None:
            summary.dropped_rows += 1
        else:
            count = _count(row, mapping)
            summary.total += count
            _add(summary.monthly_breakdown, month, count)
            _add_client(summary.client_breakdown, month, _client(row, mapping), count)

        if mapping.resolved_field:
            hours = elapsed_hours(start, _cell(row, mapping.resolved_field))
            if hours is not None:
                times.append(hours)

    summary.resolution_stats = summarize(times)
    if summary.dropped_rows:
        logger.debug("%s: %d rows without a parseable %r", label or "dataset", summary.dropped_rows, mapping.date_field)
    return summary


def aggregate_raised_closed(rows: Iterable[Mapping], mapping: FieldMapping, *, label: str = "") -> RaisedClosedSummary:
    if not mapping.is_dual:
        raise FieldMappingError("aggregate_raised_closed needs raised/resolved date fields")
    summary = RaisedClosedSummary()
    times: List[float] = []

    for row in _check_rows(rows):
        if not isinstance(row, Mapping):
            summary.dropped_rows += 1
            continue
        raised = _cell(row, mapping.raised_date_field)
        resolved = _cell(row, mapping.resolved_date_field)
        raised_month = month_bucket(raised)
        resolved_month = month_bucket(resolved)
        count = _count(row, mapping)

        if raised_month is None:
            summary.dropped_rows += 1
        else:
            summary.total_raised += count
            _add(summary.monthly_raised, raised_month, count)
            _add_client(summary.client_breakdown, raised_month, _client(row, mapping), count)

        if resolved_month is not None:
            summary.total_closed += count
            _add(summary.monthly_closed, resolved_month, count)

        hours = elapsed_hours(raised, resolved)
        if hours is not None:
            times.append(hours)

    summary.resolution_stats = summarize(times)
    if summary.dropped_rows:
        logger.debug("%s: %d rows without a parseable %r", label or "dataset", summary.dropped_rows, mapping.raised_date_field)
    return summary


def aggregate_records(rows: Iterable[Mapping], mapping: FieldMapping, *, label: str = "") -> Summary:
    if mapping.is_dual:
        return aggregate_raised_closed(rows, mapping, label=label)
    return aggregate_single(rows, mapping, label=label)


def empty_summary(mapping: FieldMapping) -> Summary:
    return RaisedClosedSummary() if mapping.is_dual else DatasetSummary()
