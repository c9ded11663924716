"""CAMPEX — Batch Restructurer.

Joins each campaign on a page to its campaign message and message, filters,
validates, and emits enriched campaigns in page order.
"""

from typing import Any, Callable, List

from campex.config import FilterSettings
from campex.models.campaign_models import (
    Campaign,
    CampaignPage,
    EnrichedCampaign,
    RelationshipMetadata,
)
from campex.pipeline.filters import campaign_matches_filters
from campex.pipeline.lookup import build_lookup_index
from campex.pipeline.validator import validate_relationships
from campex.core.logging import get_logger

logger = get_logger("pipeline.restructure")

ErrorSink = Callable[[str], None]


def _raw_id(entry: Any) -> Any:
    if isinstance(entry, Campaign):
        return entry.id
    if isinstance(entry, dict):
        return entry.get("id")
    return None


def restructure_page(
    page: CampaignPage,
    filters: FilterSettings,
    log_error: ErrorSink,
) -> List[EnrichedCampaign]:
    """Restructure one page.

    Rejected campaigns are dropped without validation or logging. Each
    relationship violation of a kept campaign is written to ``log_error``.
    A campaign that raises while being processed is logged and skipped; the
    rest of the page still goes through.
    """
    index = build_lookup_index(page)
    restructured: List[EnrichedCampaign] = []

    for entry in page.campaigns or []:
        try:
            campaign = (
                entry if isinstance(entry, Campaign) else Campaign.model_validate(entry)
            )

            if not campaign_matches_filters(campaign, filters):
                continue

            campaign_message = index.campaign_message_for(campaign.id)
            message = index.message_for(campaign_message)

            errors = validate_relationships(campaign, campaign_message, message)
            for error in errors:
                log_error(error)

            restructured.append(
                EnrichedCampaign(
                    campaign=campaign,
                    campaign_message=campaign_message,
                    message=message,
                    metadata=RelationshipMetadata(errors=errors),
                )
            )
        except Exception as e:
            log_error(f"Error processing campaign {_raw_id(entry)}: {e}")

    return restructured
