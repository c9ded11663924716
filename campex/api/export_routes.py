"""CAMPEX — Export API Routes."""

import json
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlmodel import Session

from campex.config import settings
from campex.connectors.activecampaign.client import ActiveCampaignAPIError
from campex.database import get_session, recent_runs
from campex.models.export_models import ExportRun, RunSummary
from campex.pipeline.export import run_configured_export
from campex.core.logging import get_logger

logger = get_logger("api.exports")

router = APIRouter(prefix="/exports", tags=["Exports"])


# ── Request / Response Models ──


class RunExportRequest(BaseModel):
    """Request body for POST /exports/run. Unset fields use the environment."""

    test_mode: Optional[bool] = None
    """Stop after one batch of campaigns."""
    max_pages: Optional[int] = Field(default=None, ge=1)
    """Hard cap on the number of pages fetched."""
    filter_enabled: Optional[bool] = None
    """Set to false to export every campaign."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"test_mode": True},
                {"test_mode": False, "max_pages": 20},
            ]
        }
    }


class RunExportResponse(BaseModel):
    """Response for POST /exports/run."""

    status: str = "success"
    summary: RunSummary
    campaign_count: int = 0


# ── Endpoints ──


@router.post("/run", response_model=RunExportResponse)
async def trigger_export(request: RunExportRequest):
    """Run a campaign export and return its summary.

    The full document is written to the configured export file.
    """
    overrides = {}
    if request.test_mode is not None:
        overrides["test_mode"] = request.test_mode
    if request.max_pages is not None:
        overrides["max_pages"] = request.max_pages
    if request.filter_enabled is not None:
        overrides["filters"] = settings.filter_settings().model_copy(
            update={"enabled": request.filter_enabled}
        )

    try:
        document = await run_configured_export(
            config=settings.export_config(**overrides)
        )
    except ActiveCampaignAPIError as e:
        raise HTTPException(
            status_code=502, detail=f"ActiveCampaign request failed: {str(e)}"
        )
    except Exception as e:
        logger.error(f"Export failed: {e}")
        raise HTTPException(status_code=500, detail=f"Export failed: {str(e)}")

    return RunExportResponse(
        status="success",
        summary=RunSummary.model_validate(document["summary"]),
        campaign_count=len(document["campaigns"]),
    )


@router.get("")
async def list_exports(
    limit: int = Query(10, ge=1, le=100),
    session: Session = Depends(get_session),
):
    """Archived export runs, newest first (only when ARCHIVE_RUNS is on)."""
    runs = recent_runs(session, limit)
    return {
        "status": "success",
        "count": len(runs),
        "results": [
            {
                "id": r.id,
                "created_at": r.created_at.isoformat(),
                "test_mode": r.test_mode,
                "total_fetched": r.total_fetched,
                "total_kept": r.total_kept,
                "total_with_errors": r.total_with_errors,
                "duration_seconds": r.duration_seconds,
            }
            for r in runs
        ],
    }


@router.get("/{run_id}")
async def get_export(run_id: int, session: Session = Depends(get_session)):
    """Full document of one archived run."""
    run = session.get(ExportRun, run_id)
    if run is None:
        raise HTTPException(status_code=404, detail=f"Export run {run_id} not found")
    return {
        "status": "success",
        "id": run.id,
        "created_at": run.created_at.isoformat(),
        "document": json.loads(run.result_json),
    }
