import asyncio

import pytest

from campex.config import (
    AutomationFilter,
    AutomationMode,
    ExportConfig,
    FilterSettings,
    StatusFilter,
)
from campex.models.campaign_models import CampaignPage
from campex.sinks import MemorySink


class RecordingErrorLog:
    """Stands in for ErrorLog; keeps messages in a list."""

    def __init__(self):
        self.messages = []

    def __call__(self, message):
        self.messages.append(message)


class ScriptedFetcher:
    """Async page fetcher that replays pages and records (offset, limit)."""

    def __init__(self, pages, fail_at=None, error=None):
        self.pages = list(pages)
        self.fail_at = fail_at
        self.error = error or RuntimeError("HTTP error! status: 500")
        self.calls = []

    async def __call__(self, offset, limit):
        self.calls.append((offset, limit))
        index = len(self.calls) - 1
        if self.fail_at is not None and index == self.fail_at:
            raise self.error
        if index < len(self.pages):
            return self.pages[index]
        return {"campaigns": []}


def make_page(campaigns=None, campaign_messages=None, messages=None):
    return CampaignPage.model_validate(
        {
            "campaigns": campaigns,
            "campaignMessages": campaign_messages,
            "messages": messages,
        }
    )


def joined_page(ids, status="5", automation=None):
    """A consistent page: each campaign has its link and message."""
    return {
        "campaigns": [
            {"id": cid, "status": status, "automation": automation, "name": f"c{cid}"}
            for cid in ids
        ],
        "campaignMessages": [
            {"id": f"cm{cid}", "campaign": cid, "messageid": f"m{cid}"} for cid in ids
        ],
        "messages": [{"id": f"m{cid}", "subject": f"s{cid}"} for cid in ids],
    }


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def error_log():
    return RecordingErrorLog()


@pytest.fixture
def memory_sink():
    return MemorySink()


@pytest.fixture
def completed_regular_filters():
    return FilterSettings(
        enabled=True,
        status=StatusFilter(enabled=True, value=5),
        automation=AutomationFilter(enabled=True, value=AutomationMode.REGULAR),
    )


@pytest.fixture
def no_filters():
    return FilterSettings(enabled=False)


@pytest.fixture
def production_config(completed_regular_filters):
    return ExportConfig(
        test_mode=False,
        batch_size=2,
        delay_between_requests=0,
        filters=completed_regular_filters,
    )


def as_page(data):
    return CampaignPage.model_validate(data)
