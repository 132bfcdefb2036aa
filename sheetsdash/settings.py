from __future__ import annotations

from functools import lru_cache
from typing import List, Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Google Sheets
    google_sheets_api_key: str = ""
    sheets_base_url: str = "https://sheets.googleapis.com/v4/spreadsheets"
    alerts_spreadsheet_id: str = "1GPDqOSURZNALalPzfHNbMft0HQ1c_fIkgfu_V3fSroY"
    issues_spreadsheet_id: str = "1DzW-6Q7hTNn2hSJbEHOkSrbalOmbDIftdjw4I_PhEdA"

    # HTTP
    request_timeout_seconds: float = 15.0
    max_retries: int = 2
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0

    # Pipeline
    max_workers: int = 4
    fetch_failure_policy: Literal["degrade", "raise"] = "degrade"

    # API / UI
    allowed_origins: List[str] = ["http://localhost:8501", "http://127.0.0.1:8501"]
    api_base_url: str = "http://127.0.0.1:8000"
    refresh_interval_seconds: int = 300

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
