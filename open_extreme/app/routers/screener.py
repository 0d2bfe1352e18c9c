"""Screener router: upload, screen, clear, export and chart links."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import Response

from ...config import get_settings
from ...chart_url import chart_links
from ...dataset import DatasetError
from ...export import CSV_FILENAME, PDF_FILENAME, ExportError, to_csv_text, to_pdf_bytes
from ...plans import PlanSummary
from ...schemas import (
    ChartLinks,
    DatasetLoaded,
    DatasetView,
    PlanSummaryModel,
    ScreenRequest,
    ScreenResponse,
)
from ...screen import ScreenError
from ..session import NoDatasetError, ScreenerSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["screener"])


def _session(request: Request) -> ScreenerSession:
    return request.app.state.session


def _no_dataset(exc: NoDatasetError) -> HTTPException:
    return HTTPException(status_code=409, detail={"error": "no_dataset", "message": str(exc)})


def _view(session: ScreenerSession) -> DatasetView:
    try:
        return DatasetView(**session.snapshot())
    except NoDatasetError as exc:
        raise _no_dataset(exc) from exc


@router.post("/dataset", response_model=DatasetLoaded, summary="Load a CSV upload (raw text body)")
async def load_dataset(request: Request) -> DatasetLoaded:
    body = await request.body()
    limit = get_settings().max_upload_bytes
    if len(body) > limit:
        raise HTTPException(
            status_code=413,
            detail={"error": "upload_too_large", "message": f"CSV exceeds the {limit} byte upload limit"},
        )
    try:
        text = body.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail={"error": "invalid_encoding", "message": "CSV must be UTF-8 text"}) from exc

    session = _session(request)
    try:
        dataset, status = session.load_csv(text)
    except DatasetError as exc:
        raise HTTPException(status_code=400, detail={"error": "invalid_csv", "message": str(exc)}) from exc

    return DatasetLoaded(
        dataset_id=dataset.dataset_id,
        status=status,
        rows=len(dataset),
        headers=list(dataset.headers),
        header_map=dataset.header_map.to_dict(),
        columns=dataset.display_columns(),
    )


@router.get("/dataset", response_model=DatasetView, summary="Current view of the loaded dataset")
def get_dataset(request: Request) -> DatasetView:
    return _view(_session(request))


@router.post("/screen", response_model=ScreenResponse, summary="Apply a predefined screen")
def run_screen(payload: ScreenRequest, request: Request) -> ScreenResponse:
    session = _session(request)
    try:
        result, plans, view = session.run_screen(payload.mode, payload.min_gain_pct)
    except NoDatasetError as exc:
        raise _no_dataset(exc) from exc
    except ScreenError as exc:
        logger.info("screen rejected", extra={"error": exc.code, "missing": [role.value for role in exc.missing]})
        raise HTTPException(status_code=400, detail=exc.to_dict()) from exc

    return ScreenResponse(
        **result.to_dict(),
        view=DatasetView(**view),
        plans=PlanSummaryModel(**plans.to_dict()),
    )


@router.get("/plans", response_model=PlanSummaryModel, summary="Trade plans from the last screen")
def get_plans(request: Request) -> PlanSummaryModel:
    session = _session(request)
    plans = session.plans or PlanSummary()
    return PlanSummaryModel(**plans.to_dict())


@router.post("/clear", response_model=DatasetView, summary="Reset the view to the full dataset")
def clear_screen(request: Request) -> DatasetView:
    session = _session(request)
    try:
        view = session.clear()
    except NoDatasetError as exc:
        raise _no_dataset(exc) from exc
    return DatasetView(**view)


def _download(request: Request, render, media_type: str, filename: str) -> Response:
    session = _session(request)
    try:
        dataset = session.require_dataset()
        content = render(dataset)
    except NoDatasetError as exc:
        raise _no_dataset(exc) from exc
    except ExportError as exc:
        raise HTTPException(status_code=400, detail={"error": "nothing_to_export", "message": str(exc)}) from exc
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export.csv", summary="Download the current view as CSV")
def export_csv(request: Request) -> Response:
    return _download(request, to_csv_text, "text/csv", CSV_FILENAME)


@router.get("/export.pdf", summary="Download the current view as PDF")
def export_pdf(request: Request) -> Response:
    return _download(request, to_pdf_bytes, "application/pdf", PDF_FILENAME)


@router.get("/chart-url", response_model=ChartLinks, summary="TradingView links for a symbol")
def chart_url(symbol: str = Query(..., description="Ticker as it appears in the upload")) -> ChartLinks:
    try:
        links: Dict[str, Any] = chart_links(symbol, exchange=get_settings().chart_exchange)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail={"error": "invalid_symbol", "message": str(exc)}) from exc
    return ChartLinks(**links)
