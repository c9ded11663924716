"""CAMPEX — ActiveCampaign API Endpoints.

Fetch functions for the resources the export reads.
"""

from campex.connectors.activecampaign.client import (
    ActiveCampaignAPIError,
    ActiveCampaignClient,
)
from campex.models.campaign_models import CampaignPage
from campex.core.logging import get_logger

logger = get_logger("activecampaign.endpoints")

# Sideload the link records and their messages with every campaign page
CAMPAIGN_INCLUDE = "campaignMessage.message"


class CampaignEndpoints:
    """Page-level access to ``/campaigns``."""

    def __init__(self, client: ActiveCampaignClient):
        self.client = client

    async def fetch_campaign_page(self, offset: int, limit: int) -> CampaignPage:
        """Fetch one page of campaigns with campaign messages and messages."""
        params = {"limit": limit, "offset": offset, "include": CAMPAIGN_INCLUDE}
        data = await self.client.request("GET", "/campaigns", params)
        if not isinstance(data, dict):
            raise ActiveCampaignAPIError("Unexpected /campaigns response shape")
        page = CampaignPage.model_validate(data)
        logger.info(
            f"Fetched {page.campaign_count} campaigns at offset {offset}",
            extra={"endpoint": "/campaigns", "offset": offset},
        )
        return page

    __call__ = fetch_campaign_page
