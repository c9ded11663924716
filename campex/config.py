"""CAMPEX — Central Configuration via Pydantic Settings."""

import os
from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class AutomationMode(IntEnum):
    """Which kind of campaign the automation filter keeps."""

    REGULAR = 0  # Standard email blasts / newsletters
    AUTOMATION = 1  # Triggered / drip campaigns


# ActiveCampaign campaign status codes
STATUS_LABELS = {
    0: "Draft",
    1: "Scheduled",
    2: "Sending",
    3: "Paused",
    4: "Stopped",
    5: "Completed",
}


# ─────────────────────────────────────────────
# IMMUTABLE RUN CONFIGURATION
# ─────────────────────────────────────────────


class StatusFilter(BaseModel):
    """Keep only campaigns whose status equals ``value``."""

    model_config = {"frozen": True}

    enabled: bool = True
    value: int = 5


class AutomationFilter(BaseModel):
    """Keep only regular or only automation campaigns."""

    model_config = {"frozen": True}

    enabled: bool = True
    value: AutomationMode = AutomationMode.REGULAR


class FilterSettings(BaseModel):
    """Filter configuration. All enabled clauses must pass."""

    model_config = {"frozen": True}

    enabled: bool = True
    status: StatusFilter = StatusFilter()
    automation: AutomationFilter = AutomationFilter()

    def describe(self) -> list[str]:
        """Human-readable lines for the active clauses."""
        if not self.enabled:
            return ["Filtering disabled: all campaigns are kept"]
        lines = []
        if self.status.enabled:
            label = STATUS_LABELS.get(self.status.value, f"status {self.status.value}")
            lines.append(f"Status filter: {label} campaigns")
        if self.automation.enabled:
            kind = (
                "Automation"
                if self.automation.value == AutomationMode.AUTOMATION
                else "Non-automation"
            )
            lines.append(f"Automation filter: {kind} campaigns")
        return lines


class ExportConfig(BaseModel):
    """Immutable configuration handed to the export pipeline.

    Built once from :class:`Settings` at startup; components never read the
    global settings object directly.
    """

    model_config = {"frozen": True}

    test_mode: bool = True
    batch_size: int = Field(default=100, ge=1)
    delay_between_requests: float = Field(default=1.0, ge=0)
    max_pages: Optional[int] = Field(default=None, ge=1)
    filters: FilterSettings = FilterSettings()


# ─────────────────────────────────────────────
# ENVIRONMENT SETTINGS
# ─────────────────────────────────────────────


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── ActiveCampaign API ──
    activecampaign_base_url: str = ""
    activecampaign_api_token: str = ""
    request_timeout: float = 30.0

    # ── Run Mode ──
    test_mode: bool = True  # Only one batch when true
    delay_between_requests: float = 1.0  # Seconds between page requests
    batch_size: int = 100  # ActiveCampaign caps limit at 100
    max_pages: Optional[int] = None

    # ── Filters ──
    filter_enabled: bool = True
    filter_status_enabled: bool = True
    filter_status_value: int = 5  # Completed
    filter_automation_enabled: bool = True
    filter_automation_value: int = 0  # 0 = regular, 1 = automation

    # ── Output ──
    log_file: str = "relationship_errors.log"
    export_file: str = "exported_campaigns.json"

    # ── Database ──
    database_url: str = ""
    archive_runs: bool = False

    # ── App ──
    log_level: str = "INFO"
    scheduler_enabled: bool = False
    export_hour: int = 3  # Daily run at 3 AM UTC

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @field_validator("filter_automation_value")
    @classmethod
    def _automation_value_is_known(cls, v: int) -> int:
        if v not in (0, 1):
            raise ValueError("filter_automation_value must be 0 or 1")
        return v

    @property
    def effective_database_url(self) -> str:
        """Return PostgreSQL URL if set, otherwise fall back to SQLite."""
        if self.database_url:
            return self.database_url
        if os.environ.get("VERCEL"):
            return "sqlite:////tmp/campex.db"
        return "sqlite:///./campex.db"

    def filter_settings(self) -> FilterSettings:
        return FilterSettings(
            enabled=self.filter_enabled,
            status=StatusFilter(
                enabled=self.filter_status_enabled, value=self.filter_status_value
            ),
            automation=AutomationFilter(
                enabled=self.filter_automation_enabled,
                value=AutomationMode(self.filter_automation_value),
            ),
        )

    def export_config(self, **overrides) -> ExportConfig:
        """Snapshot the run-relevant settings into an immutable ExportConfig."""
        values = {
            "test_mode": self.test_mode,
            "batch_size": self.batch_size,
            "delay_between_requests": self.delay_between_requests,
            "max_pages": self.max_pages,
            "filters": self.filter_settings(),
        }
        values.update(overrides)
        return ExportConfig(**values)


settings = Settings()
