"""CAMPEX — Pagination Driver.

Walks ``/campaigns`` page by page:

  fetch page → build lookup maps → restructure → accumulate → wait → repeat

Stops on the first empty page, after one page's worth of campaigns in test
mode, or at the optional page cap. A failed fetch aborts the run.
"""

import time
from enum import Enum
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Union

from campex.config import ExportConfig
from campex.models.campaign_models import CampaignPage, EnrichedCampaign
from campex.pipeline.rate_limit import NoopRateLimiter, RateLimiter
from campex.pipeline.restructure import ErrorSink, restructure_page
from campex.core.logging import get_logger

logger = get_logger("pipeline.driver")

PageFetcher = Callable[[int, int], Awaitable[Union[CampaignPage, Mapping[str, Any]]]]


class DriverState(str, Enum):
    """Where the driver is in its run."""

    FETCHING = "fetching"
    STOPPED_EMPTY = "stopped_empty"
    STOPPED_TEST_LIMIT = "stopped_test_limit"
    STOPPED_MAX_PAGES = "stopped_max_pages"
    DONE = "done"
    FAILED = "failed"


STOPPED_STATES = frozenset(
    {
        DriverState.STOPPED_EMPTY,
        DriverState.STOPPED_TEST_LIMIT,
        DriverState.STOPPED_MAX_PAGES,
    }
)


class PaginationDriver:
    """Sequential offset pagination with running totals.

    The driver owns the accumulated output and the counters; nothing else
    mutates them.
    """

    def __init__(
        self,
        fetch: PageFetcher,
        config: ExportConfig,
        log_error: ErrorSink,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        self.fetch = fetch
        self.config = config
        self.log_error = log_error
        self.rate_limiter = rate_limiter or NoopRateLimiter()

        self.state = DriverState.FETCHING
        self.offset = 0
        self.iterations = 0
        self.pages_processed = 0
        self.total_fetched = 0
        self.total_kept = 0
        self.total_with_errors = 0
        self.campaigns: List[EnrichedCampaign] = []
        self.duration_seconds = 0.0
        self.stop_reason: Optional[DriverState] = None

    def _next_stop_state(self) -> Optional[DriverState]:
        if self.config.test_mode and self.total_fetched >= self.config.batch_size:
            return DriverState.STOPPED_TEST_LIMIT
        if (
            self.config.max_pages is not None
            and self.pages_processed >= self.config.max_pages
        ):
            return DriverState.STOPPED_MAX_PAGES
        return None

    async def _fetch_page(self) -> CampaignPage:
        page = await self.fetch(self.offset, self.config.batch_size)
        if isinstance(page, CampaignPage):
            return page
        return CampaignPage.model_validate(page)

    def _accumulate(self, page: CampaignPage, batch: List[EnrichedCampaign]) -> None:
        batch_errors = sum(1 for c in batch if not c.metadata.relationships_valid)

        self.total_fetched += page.campaign_count
        self.total_kept += len(batch)
        self.total_with_errors += batch_errors
        self.campaigns.extend(batch)
        self.pages_processed += 1

        logger.info(
            f"Batch processed: {page.campaign_count} in batch, "
            f"{len(batch)} matching filters, {batch_errors} with errors | "
            f"totals: {self.total_fetched} processed, {self.total_kept} matching, "
            f"{self.total_with_errors} with errors",
            extra={"offset": self.offset},
        )

    async def run(self) -> List[EnrichedCampaign]:
        """Run until a stop state is reached. Re-raises fetch failures."""
        if self.state != DriverState.FETCHING:
            raise RuntimeError(f"Driver already ran (state={self.state.value})")

        started = time.monotonic()

        while self.state == DriverState.FETCHING:
            stop = self._next_stop_state()
            if stop is not None:
                if stop == DriverState.STOPPED_TEST_LIMIT:
                    logger.info("Test mode: Reached batch limit")
                else:
                    logger.warning(
                        f"Page cap reached after {self.pages_processed} pages; "
                        "later campaigns were not fetched"
                    )
                self.state = stop
                break

            try:
                page = await self._fetch_page()
            except Exception:
                self.state = DriverState.FAILED
                self.duration_seconds = time.monotonic() - started
                raise
            self.iterations += 1

            if not page.campaigns:
                logger.info("No more campaigns to process")
                self.state = DriverState.STOPPED_EMPTY
                break

            batch = restructure_page(page, self.config.filters, self.log_error)
            self._accumulate(page, batch)

            self.offset += self.config.batch_size
            await self.rate_limiter.wait()

        self.duration_seconds = time.monotonic() - started
        return self.campaigns

    def finish(self) -> None:
        """Mark a stopped run as done, remembering why it stopped."""
        if self.state in STOPPED_STATES:
            self.stop_reason = self.state
            self.state = DriverState.DONE
