"""Core (UI-agnostic) dashboard logic.

This package contains:
- the Google Sheets values client (range -> row records)
- date and statistics helpers
- the record aggregator and the dataset definitions it runs over
- the pipeline that assembles the dashboard payload (JSON-serializable)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
