"""CAMPEX — Export Output Models (Versioned)."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel, Field

from campex.config import FilterSettings
from campex.models.campaign_models import EnrichedCampaign


# ─────────────────────────────────────────────
# DATABASE MODEL — Archived export runs
# ─────────────────────────────────────────────


class ExportRun(SQLModel, table=True):
    """One completed export run, stored with its full result document."""

    __tablename__ = "export_runs"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    test_mode: bool = Field(default=True)
    total_fetched: int = Field(default=0)
    total_kept: int = Field(default=0)
    total_with_errors: int = Field(default=0)
    duration_seconds: float = Field(default=0.0)
    result_json: str = Field(description="Full export document as JSON")


# ─────────────────────────────────────────────
# PYDANTIC SCHEMAS — Export document v1
# ─────────────────────────────────────────────


class RunSummary(BaseModel):
    """Aggregate counters for one export run."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    total_fetched: int = 0
    total_kept: int = 0
    total_with_errors: int = 0
    duration_seconds: float = 0.0
    timestamp: str = ""
    test_mode: bool = True
    filter_settings: FilterSettings = FilterSettings()


class ExportDocument(BaseModel):
    """What the result sinks receive: summary plus enriched campaigns."""

    summary: RunSummary
    campaigns: List[EnrichedCampaign] = []

    def to_json_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary.model_dump(mode="json", by_alias=True),
            "campaigns": [c.to_document() for c in self.campaigns],
        }
