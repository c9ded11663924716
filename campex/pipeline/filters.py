"""CAMPEX — Campaign Filter Predicate."""

from typing import Optional

from campex.config import AutomationMode, FilterSettings
from campex.models.campaign_models import Campaign
from campex.models.coercion import AutomationFlag

# Flags accepted by each automation mode
REGULAR_FLAGS = frozenset({AutomationFlag.ABSENT, AutomationFlag.REGULAR})
AUTOMATION_FLAGS = frozenset({AutomationFlag.AUTOMATION})


def matches_status(campaign: Campaign, target: int) -> bool:
    return campaign.status_code is not None and campaign.status_code == target


def matches_automation(campaign: Campaign, mode: AutomationMode) -> bool:
    if mode == AutomationMode.AUTOMATION:
        return campaign.automation_flag in AUTOMATION_FLAGS
    return campaign.automation_flag in REGULAR_FLAGS


def campaign_matches_filters(
    campaign: Optional[Campaign], filters: FilterSettings
) -> bool:
    """Decide whether a campaign is kept.

    Disabled filtering keeps everything. Otherwise a campaign without an id is
    rejected outright, and every enabled clause must pass.
    """
    if not filters.enabled:
        return True
    if campaign is None or campaign.id is None:
        return False

    matches = True

    if filters.status.enabled:
        matches = matches and matches_status(campaign, filters.status.value)

    if filters.automation.enabled:
        matches = matches and matches_automation(campaign, filters.automation.value)

    return matches
