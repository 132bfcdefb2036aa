from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from sheetsdash.aggregate import aggregate_records, empty_summary
from sheetsdash.datasets import DATASETS, DatasetSpec
from sheetsdash.settings import Settings
from sheetsdash.sheets import SheetsFetchError


logger = logging.getLogger(__name__)


class RowSource(Protocol):
    def fetch(self, spreadsheet_id: str, range_name: str) -> List[Mapping[str, str]]:
        ...


SourceKey = Tuple[str, str]


def _source_key(spec: DatasetSpec, settings: Settings) -> SourceKey:
    return spec.spreadsheet_id(settings), spec.range_name


def _fetch_all(client: RowSource, keys: Sequence[SourceKey], max_workers: int) -> Dict[SourceKey, Any]:
    """Fetch each distinct source once; values are row lists or the raised exception."""
    results: Dict[SourceKey, Any] = {}
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(keys) or 1))) as pool:
        futures = {key: pool.submit(client.fetch, *key) for key in keys}
        for key, future in futures.items():
            try:
                results[key] = future.result()
            except SheetsFetchError as exc:
                results[key] = exc
    return results


def build_dashboard_payload(
    client: RowSource,
    settings: Settings,
    *,
    datasets: Sequence[DatasetSpec] = DATASETS,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    keys = list(dict.fromkeys(_source_key(spec, settings) for spec in datasets))
    fetched = _fetch_all(client, keys, settings.max_workers)

    payload: Dict[str, Any] = {}
    failed: List[str] = []
    for spec in datasets:
        result = fetched[_source_key(spec, settings)]
        if isinstance(result, SheetsFetchError):
            if settings.fetch_failure_policy == "raise":
                raise result
            logger.warning("Fetch failed for %s, serving an empty summary: %s", spec.key, result)
            failed.append(spec.key)
            payload[spec.key] = empty_summary(spec.mapping).to_dict()
            continue
        rows = spec.select(result)
        payload[spec.key] = aggregate_records(rows, spec.mapping, label=spec.key).to_dict()

    payload["lastUpdated"] = (now or datetime.now(timezone.utc)).isoformat()
    payload["failedDatasets"] = failed
    return payload
