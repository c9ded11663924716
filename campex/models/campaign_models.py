"""CAMPEX — ActiveCampaign Record Models.

Campaigns, campaign messages and messages as returned by
``GET /api/3/campaigns?include=campaignMessage.message``. Known fields are
named; everything else the API sends is kept as passthrough and written back
out unchanged.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, PrivateAttr, computed_field, field_validator

from campex.models.coercion import (
    AutomationFlag,
    coerce_automation,
    coerce_identifier,
    coerce_status,
)


class Campaign(BaseModel):
    """Top-level paginated entity."""

    model_config = {"extra": "allow"}

    id: Optional[str] = None
    status: Any = None
    automation: Any = None

    _status_code: Optional[int] = PrivateAttr(default=None)
    _automation_flag: AutomationFlag = PrivateAttr(default=AutomationFlag.ABSENT)

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, v: Any) -> Optional[str]:
        return coerce_identifier(v)

    def model_post_init(self, __context: Any) -> None:
        self._status_code = coerce_status(self.status)
        self._automation_flag = coerce_automation(self.automation)

    @property
    def status_code(self) -> Optional[int]:
        return self._status_code

    @property
    def automation_flag(self) -> AutomationFlag:
        return self._automation_flag

    def passthrough(self) -> Dict[str, Any]:
        """Fields exactly as received (unset known fields are omitted)."""
        return self.model_dump(mode="json", exclude_unset=True)


class CampaignMessage(BaseModel):
    """Join record linking a campaign (``campaign``) to a message (``messageid``)."""

    model_config = {"extra": "allow"}

    id: Optional[str] = None
    campaign: Optional[str] = None
    messageid: Optional[str] = None

    @field_validator("id", "campaign", "messageid", mode="before")
    @classmethod
    def _normalize_ids(cls, v: Any) -> Optional[str]:
        return coerce_identifier(v)


class Message(BaseModel):
    """Leaf content entity (subject, body, sender…)."""

    model_config = {"extra": "allow"}

    id: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, v: Any) -> Optional[str]:
        return coerce_identifier(v)


class CampaignPage(BaseModel):
    """One page of the campaigns endpoint with its sideloaded records.

    Entries are kept raw; they are parsed record by record during the join
    so a single malformed entry cannot reject the whole page.
    """

    model_config = {"extra": "allow", "populate_by_name": True}

    campaigns: Optional[List[Any]] = None
    campaign_messages: Optional[List[Any]] = Field(
        default=None, alias="campaignMessages"
    )
    messages: Optional[List[Any]] = None

    @property
    def campaign_count(self) -> int:
        return len(self.campaigns or [])


class RelationshipMetadata(BaseModel):
    """Outcome of the relationship checks for one campaign."""

    errors: List[str] = Field(default_factory=list)

    @computed_field(alias="relationshipsValid")
    @property
    def relationships_valid(self) -> bool:
        return not self.errors


class EnrichedCampaign(BaseModel):
    """A kept campaign with its joined records attached."""

    campaign: Campaign
    campaign_message: Optional[CampaignMessage] = None
    message: Optional[Message] = None
    metadata: RelationshipMetadata = Field(default_factory=RelationshipMetadata)

    @property
    def id(self) -> Optional[str]:
        return self.campaign.id

    def to_document(self) -> Dict[str, Any]:
        """Serialize as the campaign's own fields plus the joined records."""
        doc = self.campaign.passthrough()
        doc["message"] = (
            self.message.model_dump(mode="json", exclude_unset=True)
            if self.message
            else None
        )
        doc["campaignMessage"] = (
            self.campaign_message.model_dump(mode="json", exclude_unset=True)
            if self.campaign_message
            else None
        )
        doc["metadata"] = self.metadata.model_dump(mode="json", by_alias=True)
        return doc
