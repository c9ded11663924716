"""CAMPEX — Export Orchestrator.

Runs the full data flow:
  paginate → restructure → summarize → persist

The single entry point is :func:`export_campaigns`. It returns the enriched
campaigns on success; on a fetch failure it logs, persists nothing and
re-raises.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import httpx

from campex.config import ExportConfig, Settings, settings
from campex.connectors.activecampaign.client import ActiveCampaignClient
from campex.connectors.activecampaign.endpoints import CampaignEndpoints
from campex.database import engine, init_db
from campex.models.campaign_models import EnrichedCampaign
from campex.models.export_models import ExportDocument, RunSummary
from campex.pipeline.driver import DriverState, PageFetcher, PaginationDriver
from campex.pipeline.rate_limit import FixedIntervalRateLimiter, RateLimiter
from campex.pipeline.restructure import ErrorSink
from campex.sinks import DatabaseSink, JsonFileSink, MemorySink, ResultSink
from campex.core.logging import ErrorLog, get_logger

logger = get_logger("pipeline.export")


def build_summary(driver: PaginationDriver) -> RunSummary:
    return RunSummary(
        total_fetched=driver.total_fetched,
        total_kept=driver.total_kept,
        total_with_errors=driver.total_with_errors,
        duration_seconds=round(driver.duration_seconds, 3),
        timestamp=datetime.now(timezone.utc).isoformat(),
        test_mode=driver.config.test_mode,
        filter_settings=driver.config.filters,
    )


def _log_start(config: ExportConfig) -> None:
    logger.info("Starting campaign data restructuring process...")
    logger.info(f"Mode: {'TEST' if config.test_mode else 'PRODUCTION'}")
    if config.filters.enabled:
        logger.info("Filters enabled:")
    for line in config.filters.describe():
        logger.info(f"- {line}")


def _log_complete(summary: RunSummary, stop_reason: Optional[DriverState]) -> None:
    reason = stop_reason.value if stop_reason is not None else "unknown"
    logger.info(
        f"Processing complete ({reason}): "
        f"{summary.total_fetched} campaigns processed, "
        f"{summary.total_kept} matching filters, "
        f"{summary.total_with_errors} with relationship errors, "
        f"duration {summary.duration_seconds}s"
    )


async def export_campaigns(
    fetch: PageFetcher,
    config: ExportConfig,
    log_error: ErrorSink,
    sinks: Iterable[ResultSink] = (),
    rate_limiter: Optional[RateLimiter] = None,
) -> List[EnrichedCampaign]:
    """Export every campaign the filters keep, then hand the document to sinks."""
    if rate_limiter is None:
        rate_limiter = FixedIntervalRateLimiter(config.delay_between_requests)

    _log_start(config)
    driver = PaginationDriver(fetch, config, log_error, rate_limiter)

    try:
        campaigns = await driver.run()
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        log_error(f"Fatal error in export run: {e}")
        raise

    summary = build_summary(driver)
    driver.finish()

    document = ExportDocument(summary=summary, campaigns=campaigns).to_json_dict()
    for sink in sinks:
        sink.persist(document)

    _log_complete(summary, driver.stop_reason)
    return campaigns


async def run_configured_export(
    app_settings: Settings = settings,
    config: Optional[ExportConfig] = None,
    export_file: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """Export against the live API using the environment settings.

    Writes the JSON export file, archives the run when ``archive_runs`` is
    set, and returns the export document.
    """
    config = config or app_settings.export_config()
    error_log = ErrorLog(app_settings.log_file)
    memory = MemorySink()
    sinks: List[ResultSink] = [
        JsonFileSink(export_file or app_settings.export_file),
        memory,
    ]
    if app_settings.archive_runs:
        init_db()
        sinks.append(DatabaseSink(engine))

    async with ActiveCampaignClient(
        base_url=app_settings.activecampaign_base_url,
        api_token=app_settings.activecampaign_api_token,
        timeout=app_settings.request_timeout,
        transport=transport,
    ) as client:
        await export_campaigns(CampaignEndpoints(client), config, error_log, sinks)

    logger.info(f"Error log: {app_settings.log_file}")
    return memory.document
