"""Request/response schemas for the screener API."""

from __future__ import annotations

from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field


class ScreenRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    mode: Literal["openHigh", "openLow", "openHighLow", "full"]
    min_gain_pct: float = Field(default=0.0, ge=0.0, allow_inf_nan=False)


class TradePlanModel(BaseModel):
    symbol: str
    side: Literal["BUY", "SELL"]
    entry: float
    stop: float
    target: float
    risk_per_share: float
    reward_per_share: float
    risk_reward: float | Literal["N/A"]
    risk_pct: float
    reward_pct: float


class PlanSummaryModel(BaseModel):
    available: bool
    message: str | None = None
    plans: List[TradePlanModel] = Field(default_factory=list)


class DatasetView(BaseModel):
    dataset_id: str
    status: str
    total_rows: int
    columns: List[str]
    rows: List[Dict[str, str]]
    header_map: Dict[str, str | None]


class DatasetLoaded(BaseModel):
    dataset_id: str
    status: str
    rows: int
    headers: List[str]
    header_map: Dict[str, str | None]
    columns: List[str]


class ScreenResponse(BaseModel):
    mode: str
    min_gain_pct: float
    results: int
    stage1_results: int
    buy: str | None = None
    sell: str | None = None
    summary: str
    view: DatasetView
    plans: PlanSummaryModel


class ChartLinks(BaseModel):
    symbol: str
    chart_url: str
    symbol_url: str


__all__ = [
    "ScreenRequest",
    "TradePlanModel",
    "PlanSummaryModel",
    "DatasetView",
    "DatasetLoaded",
    "ScreenResponse",
    "ChartLinks",
]
