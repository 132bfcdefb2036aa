from __future__ import annotations

import logging
import math
from typing import Any, Dict

import numpy as np
import pandas as pd
from fastapi import Depends, FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import DashboardResponse
from sheetsdash.charts import build_dashboard_charts, monthly_frame, raised_closed_table
from sheetsdash.datasets import DATASETS_BY_KEY
from sheetsdash.logging_config import setup_logging
from sheetsdash.pipeline import RowSource, build_dashboard_payload
from sheetsdash.settings import Settings, get_settings
from sheetsdash.sheets import SheetsClient


settings = get_settings()
setup_logging(settings.log_level)

app = FastAPI(title="Sheets Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)


def get_row_source(settings: Settings = Depends(get_settings)) -> RowSource:
    return SheetsClient(settings)


def _json(data: object, status_code: int = 200) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            data,
            custom_encoder={
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        ),
    )


def _error(exc: Exception) -> JSONResponse:
    return _json({"error": "Failed to fetch data", "detail": str(exc), "type": type(exc).__name__}, status_code=500)


def _dashboard(client: RowSource, settings: Settings) -> Dict[str, Any]:
    payload = build_dashboard_payload(client, settings)
    return DashboardResponse.model_validate(payload).model_dump(by_alias=True)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/api/sheets")
def sheets(client: RowSource = Depends(get_row_source), settings: Settings = Depends(get_settings)):
    try:
        return _json(_dashboard(client, settings))
    except Exception as exc:
        logger.exception("sheets failed")
        return _error(exc)


@app.get("/api/charts")
def charts(client: RowSource = Depends(get_row_source), settings: Settings = Depends(get_settings)):
    try:
        return _json(build_dashboard_charts(_dashboard(client, settings)))
    except Exception as exc:
        logger.exception("charts failed")
        return _error(exc)


@app.get("/export/{dataset}")
def export_dataset(
    dataset: str,
    client: RowSource = Depends(get_row_source),
    settings: Settings = Depends(get_settings),
):
    spec = DATASETS_BY_KEY.get(dataset)
    if spec is None:
        return _json({"error": f"Unknown dataset: {dataset}", "type": "KeyError"}, status_code=404)
    try:
        summary = _dashboard(client, settings)[spec.key]
    except Exception as exc:
        logger.exception("export failed dataset=%s", dataset)
        return _error(exc)

    if spec.mapping.is_dual:
        export_df = raised_closed_table(summary["monthlyRaised"], summary["monthlyClosed"]).rename(
            columns={"Raised": "raised", "Closed": "closed"}
        )
    else:
        export_df = monthly_frame(summary["monthlyBreakdown"])[["month", "count"]]

    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    filename = f"{spec.key}.csv"
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
