import pytest

from src.models import TrackerStatus
from src.trackers.base import BaseTracker, CheckResult, ExitCode, FetchResult


class _DummyTracker(BaseTracker):
    tracker_id = "dummy"

    def fetch(self):
        return FetchResult(html="")

    def extract_products(self, html):
        return []


def test_fetch_result_defaults():
    result = FetchResult(html="<html></html>")
    assert result.status_code == 200
    assert result.product_ids is None


def test_check_result_has_new_products():
    result = CheckResult(
        tracker_id="dummy",
        exit_code=ExitCode.NEW_PRODUCTS,
        status=TrackerStatus.IN,
        products=["1", "2"],
        new_products=["2"],
    )
    assert result.has_new_products is True
    assert CheckResult(tracker_id="dummy", exit_code=ExitCode.ERROR).has_new_products is False


def test_exit_codes():
    assert int(ExitCode.NEW_PRODUCTS) == 0
    assert int(ExitCode.NO_NEW_PRODUCTS) == 1
    assert int(ExitCode.ERROR) == 2


def test_base_tracker_is_abstract():
    with pytest.raises(TypeError):
        BaseTracker()


@pytest.mark.parametrize(
    "html,status_code,expected",
    [
        ("<html>ok</html>", 403, True),
        ("<script src='/WAFfailoverassets/x.js'></script>", 200, True),
        ("<title>HTTP 403</title>", 200, True),
        ("Reference Error #18.abc", 200, True),
        ("<html>ok</html>", 200, False),
        ("", 200, False),
    ],
)
def test_is_blocked(html, status_code, expected):
    assert _DummyTracker().is_blocked(html, status_code) is expected
