import pytest

from models import (
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    DetectedScript,
    ScanRequest,
    ScanResult,
    ScriptType,
    UserRightsDetection,
)


class TestScanRequest:
    def test_adds_scheme_and_defaults(self):
        request = ScanRequest.create("  Example.com/shop ")
        assert request.url == "https://Example.com/shop"
        assert request.hostname == "example.com"
        assert request.timeout == DEFAULT_TIMEOUT
        assert request.user_agent == DEFAULT_USER_AGENT
        assert request.wait_for_network_idle

    def test_keeps_http(self):
        assert ScanRequest.create("http://example.com").url == "http://example.com"

    @pytest.mark.parametrize("url", ["", "https://", "http:///path"])
    def test_rejects_urls_without_host(self, url):
        with pytest.raises(ValueError):
            ScanRequest.create(url)

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValueError):
            ScanRequest.create("example.com", timeout=0)


def test_script_needs_url_or_content():
    with pytest.raises(ValueError):
        DetectedScript(type=ScriptType.EXTERNAL)
    with pytest.raises(ValueError):
        DetectedScript(type=ScriptType.INLINE, url="https://a.example/x.js", content="x")


def test_failed_result():
    result = ScanResult.failed("https://example.com", TimeoutError("took too long"), duration=3.5)
    assert not result.success
    assert result.score == 0
    assert result.error == "took too long"
    assert result.cookies == () and result.scripts == () and result.findings == ()

    data = result.to_dict()
    assert data["error"] == "took too long"
    assert isinstance(data["scanned_at"], str)
    assert data["cookies"] == []


def test_account_features():
    assert not UserRightsDetection().has_account_features
    assert UserRightsDetection(has_authentication=True).has_account_features
    assert UserRightsDetection(has_dsar_mechanism=True).rights_present == 1
