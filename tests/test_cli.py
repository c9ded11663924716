from campex import cli
from campex.connectors.activecampaign.client import ActiveCampaignAPIError


def test_production_flags_build_config(monkeypatch):
    captured = {}

    async def fake_export(config=None, export_file=None):
        captured["config"] = config
        captured["export_file"] = export_file
        return {"summary": {}, "campaigns": []}

    monkeypatch.setattr(cli, "run_configured_export", fake_export)

    code = cli.main(["--production", "--no-filter", "-o", "all.json", "--max-pages", "5", "--delay", "0"])

    assert code == 0
    assert captured["export_file"] == "all.json"
    assert captured["config"].test_mode is False
    assert captured["config"].filters.enabled is False
    assert captured["config"].max_pages == 5
    assert captured["config"].delay_between_requests == 0


def test_failure_exits_non_zero(monkeypatch):
    async def failing_export(**kwargs):
        raise ActiveCampaignAPIError("HTTP error! status: 500", 500)

    monkeypatch.setattr(cli, "run_configured_export", failing_export)

    assert cli.main([]) == 1
