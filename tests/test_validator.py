from campex.models.campaign_models import Campaign, CampaignMessage, Message
from campex.pipeline.validator import validate_relationships


def _campaign(cid="1"):
    return Campaign(id=cid, status=5)


def test_valid_join_has_no_errors():
    errors = validate_relationships(
        _campaign(),
        CampaignMessage(campaign="1", messageid="m1"),
        Message(id="m1"),
    )

    assert errors == []


def test_missing_both_reports_link_then_content():
    errors = validate_relationships(_campaign(), None, None)

    assert errors == [
        "no link record found for primary id 1",
        "no content record found for primary id 1",
    ]


def test_missing_content_only():
    errors = validate_relationships(
        _campaign(), CampaignMessage(campaign="1", messageid="m1"), None
    )

    assert errors == ["no content record found for primary id 1"]


def test_mismatch_names_both_ids():
    errors = validate_relationships(
        _campaign(),
        CampaignMessage(campaign="1", messageid="m2"),
        Message(id="m1"),
    )

    assert len(errors) == 1
    assert "mismatch" in errors[0]
    assert "m2" in errors[0] and "m1" in errors[0]
