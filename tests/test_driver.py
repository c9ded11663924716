import pytest

from campex.config import ExportConfig, FilterSettings
from campex.pipeline.driver import DriverState, PaginationDriver
from campex.pipeline.rate_limit import NoopRateLimiter

from conftest import ScriptedFetcher, joined_page, run


def _config(**overrides):
    values = {
        "test_mode": False,
        "batch_size": 3,
        "delay_between_requests": 0,
        "filters": FilterSettings(enabled=False),
    }
    values.update(overrides)
    return ExportConfig(**values)


def test_stops_on_empty_page_after_all_pages(error_log):
    fetch = ScriptedFetcher(
        [joined_page(["1", "2", "3"]), joined_page(["4", "5", "6"]), joined_page(["7"]), {"campaigns": []}]
    )
    limiter = NoopRateLimiter()
    driver = PaginationDriver(fetch, _config(), error_log, limiter)

    result = run(driver.run())

    assert driver.state is DriverState.STOPPED_EMPTY
    assert driver.iterations == 4
    assert driver.pages_processed == 3
    assert fetch.calls == [(0, 3), (3, 3), (6, 3), (9, 3)]
    assert driver.total_fetched == 7
    assert driver.total_kept == 7
    assert [c.id for c in result] == ["1", "2", "3", "4", "5", "6", "7"]
    # waits after every processed page, including the last non-empty one
    assert limiter.calls == 3


def test_absent_campaigns_key_counts_as_empty(error_log):
    fetch = ScriptedFetcher([{"messages": [{"id": "m1"}]}])
    driver = PaginationDriver(fetch, _config(), error_log)

    assert run(driver.run()) == []
    assert driver.state is DriverState.STOPPED_EMPTY
    assert driver.total_fetched == 0


def test_test_mode_stops_after_one_full_page(error_log):
    ids = [str(i) for i in range(100)]
    fetch = ScriptedFetcher([joined_page(ids), joined_page(["x"])])
    driver = PaginationDriver(fetch, _config(test_mode=True, batch_size=100), error_log)

    run(driver.run())

    assert driver.state is DriverState.STOPPED_TEST_LIMIT
    assert fetch.calls == [(0, 100)]
    assert driver.total_fetched == 100


def test_test_mode_keeps_going_while_under_one_batch(error_log):
    fetch = ScriptedFetcher([joined_page(["1", "2"]), joined_page(["3", "4"]), joined_page(["5"])])
    driver = PaginationDriver(fetch, _config(test_mode=True, batch_size=3), error_log)

    run(driver.run())

    assert driver.state is DriverState.STOPPED_TEST_LIMIT
    assert len(fetch.calls) == 2
    assert driver.total_fetched == 4


def test_max_pages_cap(error_log):
    fetch = ScriptedFetcher([joined_page(["1"]), joined_page(["2"]), joined_page(["3"])])
    driver = PaginationDriver(fetch, _config(max_pages=2), error_log)

    run(driver.run())

    assert driver.state is DriverState.STOPPED_MAX_PAGES
    assert len(fetch.calls) == 2
    assert driver.total_fetched == 2


def test_counters_track_kept_and_errors(completed_regular_filters, error_log):
    page = joined_page(["1", "2", "3"])
    page["campaigns"][0]["status"] = "1"  # filtered out
    page["messages"] = page["messages"][:2]  # campaign 3 loses its message
    fetch = ScriptedFetcher([page])
    driver = PaginationDriver(fetch, _config(filters=completed_regular_filters), error_log)

    run(driver.run())

    assert driver.total_fetched == 3
    assert driver.total_kept == 2
    assert driver.total_with_errors == 1
    assert driver.total_kept <= driver.total_fetched


def test_fetch_failure_moves_to_failed_and_reraises(error_log):
    fetch = ScriptedFetcher([joined_page(["1"])], fail_at=1)
    limiter = NoopRateLimiter()
    driver = PaginationDriver(fetch, _config(), error_log, limiter)

    with pytest.raises(RuntimeError, match="status: 500"):
        run(driver.run())

    assert driver.state is DriverState.FAILED
    assert len(fetch.calls) == 2
    assert limiter.calls == 1


def test_finish_records_stop_reason(error_log):
    driver = PaginationDriver(ScriptedFetcher([]), _config(), error_log)
    run(driver.run())

    driver.finish()

    assert driver.state is DriverState.DONE
    assert driver.stop_reason is DriverState.STOPPED_EMPTY


def test_driver_runs_once(error_log):
    driver = PaginationDriver(ScriptedFetcher([]), _config(), error_log)
    run(driver.run())

    with pytest.raises(RuntimeError, match="already ran"):
        run(driver.run())
