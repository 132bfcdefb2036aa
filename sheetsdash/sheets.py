"""
Google Sheets values client.

Fetches a range through the v4 ``values`` endpoint and turns the header row
plus data rows into row records. A failed fetch always raises
``SheetsFetchError``; an empty range is an empty list.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import requests

from sheetsdash.settings import Settings


logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

Row = Dict[str, str]


class SheetsFetchError(RuntimeError):
    """Raised when a range cannot be fetched from the Sheets API."""


def rows_from_values(values: Optional[Sequence[Sequence[Any]]]) -> List[Row]:
    """Header row + data rows -> row records; short rows are padded with ``""``."""
    if not values or len(values) < 2:
        return []
    header = ["" if h is None else str(h) for h in values[0]]
    rows: List[Row] = []
    for raw in values[1:]:
        raw = list(raw or [])
        record: Row = {}
        for idx, name in enumerate(header):
            cell = raw[idx] if idx < len(raw) else None
            record[name] = "" if cell is None else str(cell)
        rows.append(record)
    return rows


class SheetsClient:
    def __init__(self, settings: Settings, *, session: Optional[requests.Session] = None) -> None:
        self._api_key = settings.google_sheets_api_key
        self._base_url = settings.sheets_base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout_seconds = settings.request_timeout_seconds
        self._max_retries = max(0, settings.max_retries)
        self._backoff_initial_seconds = settings.backoff_initial_seconds
        self._backoff_multiplier = settings.backoff_multiplier

    def values_url(self, spreadsheet_id: str, range_name: str) -> str:
        return f"{self._base_url}/{quote(spreadsheet_id, safe='')}/values/{quote(range_name, safe='')}"

    def fetch_values(self, spreadsheet_id: str, range_name: str) -> List[List[Any]]:
        if not self._api_key:
            raise SheetsFetchError("GOOGLE_SHEETS_API_KEY is not configured.")

        response = self._request(self.values_url(spreadsheet_id, range_name), range_name)
        try:
            payload = response.json()
        except ValueError as exc:
            raise SheetsFetchError(f"{range_name}: response was not valid JSON.") from exc
        if not isinstance(payload, dict):
            raise SheetsFetchError(f"{range_name}: unexpected response body.")
        return payload.get("values") or []

    def fetch(self, spreadsheet_id: str, range_name: str) -> List[Row]:
        rows = rows_from_values(self.fetch_values(spreadsheet_id, range_name))
        logger.info("Fetched %d rows from %s", len(rows), range_name)
        return rows

    def _request(self, url: str, range_name: str) -> requests.Response:
        last_error: Optional[Exception] = None
        for attempt in range(self._max_retries + 1):
            try:
                response = self._session.get(url, params={"key": self._api_key}, timeout=self._timeout_seconds)
                if response.status_code in RETRYABLE_STATUS_CODES:
                    raise requests.HTTPError(
                        f"Retryable HTTP status code: {response.status_code}",
                        response=response,
                    )
                response.raise_for_status()
                return response
            except requests.HTTPError as exc:
                last_error = exc
                status_code = exc.response.status_code if exc.response is not None else None
                if status_code not in RETRYABLE_STATUS_CODES:
                    logger.error("Sheets request failed range=%s status=%s error=%s", range_name, status_code, exc)
                    raise SheetsFetchError(f"{range_name}: request failed with status {status_code}.") from exc
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc
            except requests.RequestException as exc:
                raise SheetsFetchError(f"{range_name}: request failed.") from exc

            if attempt >= self._max_retries:
                break

            backoff_seconds = self._backoff_initial_seconds * (self._backoff_multiplier**attempt)
            logger.warning(
                "Sheets request retry range=%s attempt=%s/%s wait_seconds=%.2f",
                range_name,
                attempt + 1,
                self._max_retries,
                backoff_seconds,
            )
            time.sleep(backoff_seconds)

        logger.error("Sheets request exhausted retries range=%s error=%s", range_name, last_error)
        raise SheetsFetchError(f"{range_name}: request failed after retries.") from last_error
