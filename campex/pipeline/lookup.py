"""CAMPEX — Per-page lookup maps for the campaign join."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from campex.models.campaign_models import CampaignMessage, CampaignPage, Message

T = TypeVar("T", bound=BaseModel)


@dataclass
class LookupIndex:
    """Page-scoped join maps. Rebuilt for every page, never shared."""

    messages_by_id: Dict[str, Message] = field(default_factory=dict)
    campaign_messages_by_campaign: Dict[str, CampaignMessage] = field(
        default_factory=dict
    )

    def campaign_message_for(
        self, campaign_id: Optional[str]
    ) -> Optional[CampaignMessage]:
        if campaign_id is None:
            return None
        return self.campaign_messages_by_campaign.get(campaign_id)

    def message_for(
        self, campaign_message: Optional[CampaignMessage]
    ) -> Optional[Message]:
        if campaign_message is None or campaign_message.messageid is None:
            return None
        return self.messages_by_id.get(campaign_message.messageid)


def _parse_all(model: Type[T], entries: Optional[Iterable[Any]]) -> Iterable[T]:
    """Parse raw entries, dropping ones that are not records at all."""
    for entry in entries or []:
        if isinstance(entry, model):
            yield entry
            continue
        try:
            yield model.model_validate(entry)
        except ValidationError:
            continue


def build_lookup_index(page: CampaignPage) -> LookupIndex:
    """Index messages by id and campaign messages by owning campaign id.

    A later campaign message for the same campaign replaces an earlier one.
    Entries without a usable key are left out; the campaign that needed them
    surfaces as a relationship error instead.
    """
    index = LookupIndex()

    for message in _parse_all(Message, page.messages):
        if message.id is not None:
            index.messages_by_id[message.id] = message

    for campaign_message in _parse_all(CampaignMessage, page.campaign_messages):
        if campaign_message.campaign is not None:
            index.campaign_messages_by_campaign[campaign_message.campaign] = (
                campaign_message
            )

    return index
