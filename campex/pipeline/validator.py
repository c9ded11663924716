"""CAMPEX — Relationship Validator.

Checks the campaign → campaign message → message join for one campaign.
"""

from typing import List, Optional

from campex.models.campaign_models import Campaign, CampaignMessage, Message


def validate_relationships(
    campaign: Campaign,
    campaign_message: Optional[CampaignMessage],
    message: Optional[Message],
) -> List[str]:
    """Return one error string per violated relationship, in a fixed order:

    1. missing campaign message (link record)
    2. missing message (content record)
    3. link's ``messageid`` differs from the message's ``id``
    """
    errors: List[str] = []

    if campaign_message is None:
        errors.append(f"no link record found for primary id {campaign.id}")

    if message is None:
        errors.append(f"no content record found for primary id {campaign.id}")

    if (
        campaign_message is not None
        and message is not None
        and campaign_message.messageid != message.id
    ):
        errors.append(
            f"message id mismatch for primary id {campaign.id}: "
            f"link targetMessageId ({campaign_message.messageid}) "
            f"!= content id ({message.id})"
        )

    return errors
