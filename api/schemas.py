from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class ResolutionStatsModel(BaseModel):
    min: float = 0.0
    median: float = 0.0
    max: float = 0.0


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class DatasetSummaryModel(_CamelModel):
    total: int = 0
    monthly_breakdown: Dict[str, int] = Field(default_factory=dict, alias="monthlyBreakdown")
    client_breakdown: Dict[str, Dict[str, int]] = Field(default_factory=dict, alias="clientBreakdown")
    resolution_stats: ResolutionStatsModel = Field(default_factory=ResolutionStatsModel, alias="resolutionStats")


class RaisedClosedSummaryModel(_CamelModel):
    total_raised: int = Field(default=0, alias="totalRaised")
    total_closed: int = Field(default=0, alias="totalClosed")
    monthly_raised: Dict[str, int] = Field(default_factory=dict, alias="monthlyRaised")
    monthly_closed: Dict[str, int] = Field(default_factory=dict, alias="monthlyClosed")
    client_breakdown: Dict[str, Dict[str, int]] = Field(default_factory=dict, alias="clientBreakdown")
    resolution_stats: ResolutionStatsModel = Field(default_factory=ResolutionStatsModel, alias="resolutionStats")


class DashboardResponse(_CamelModel):
    alert_tracking: DatasetSummaryModel = Field(alias="alertTracking")
    misalignment_tracking: DatasetSummaryModel = Field(alias="misalignmentTracking")
    historical_video_requests: DatasetSummaryModel = Field(alias="historicalVideoRequests")
    all_issues: RaisedClosedSummaryModel = Field(alias="allIssues")
    last_updated: str = Field(alias="lastUpdated")
    failed_datasets: List[str] = Field(default_factory=list, alias="failedDatasets")


class ErrorResponse(BaseModel):
    error: str
    detail: str = ""
    type: str = ""
