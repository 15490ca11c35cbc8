"""Tests for cookie categorization and first/third-party detection."""

from datetime import datetime, timezone

import pytest

from conftest import FakeSnapshot, raw_cookie
from cookie_detector import CookieDetector, cookie_stats, is_first_party
from knowledge_base import CookieInfo, KnowledgeBase
from models import CookieCategory


@pytest.fixture
def detector():
    return CookieDetector()


class TestIsFirstParty:
    def test_same_host(self):
        assert is_first_party("example.com", "example.com")

    def test_leading_dot_parent_domain(self):
        assert is_first_party(".example.com", "www.example.com")

    def test_cookie_on_subdomain(self):
        assert is_first_party("shop.example.com", "example.com")

    def test_unrelated_domain(self):
        assert not is_first_party(".doubleclick.net", "example.com")

    def test_suffix_without_dot_boundary_is_not_first_party(self):
        assert not is_first_party("notexample.com", "example.com")


class TestCategorize:
    def test_known_cookie_uses_knowledge_base(self, detector):
        category, description = detector.categorize("_ga")
        assert category == CookieCategory.ANALYTICS
        assert description.endswith("(Google Analytics)")

    def test_known_cookie_prefix_before_underscore(self, detector):
        # "IDE_abc" → knowledge base entry "IDE"
        category, description = detector.categorize("IDE_abc")
        assert category == CookieCategory.MARKETING
        assert "DoubleClick" in description

    def test_ga4_property_cookie_matches_pattern_prefix(self, detector):
        category, _ = detector.categorize("_ga_ABC123XYZ")
        assert category == CookieCategory.ANALYTICS

    def test_short_pattern_not_used_as_prefix(self, detector):
        # "fr" is a Facebook cookie, but "frontend_session" is a session cookie.
        category, description = detector.categorize("frontend_session")
        assert category == CookieCategory.NECESSARY
        assert description == "Session cookie"

    @pytest.mark.parametrize("name,expected", [
        ("my_sess_id", CookieCategory.NECESSARY),
        ("userpref", CookieCategory.NECESSARY),
        ("x_csrf", CookieCategory.NECESSARY),
        ("site_tracker", CookieCategory.ANALYTICS),
        ("marketing_ref", CookieCategory.MARKETING),
        ("ui_setting", CookieCategory.FUNCTIONAL),
    ])
    def test_substring_heuristics(self, detector, name, expected):
        assert detector.categorize(name)[0] == expected

    def test_unrecognised_name_is_unknown(self, detector):
        assert detector.categorize("zz9") == (CookieCategory.UNKNOWN, None)

    def test_classification_is_repeatable(self, detector):
        assert detector.categorize("_fbp") == detector.categorize("_fbp")

    def test_injected_knowledge_base(self):
        kb = KnowledgeBase(
            known_cookies={"acme": CookieInfo("acme", "Acme", CookieCategory.FUNCTIONAL, "Remembers widgets")},
            cookie_patterns=(),
            cookie_heuristics=(),
        )
        detector = CookieDetector(knowledge_base=kb)
        assert detector.categorize("acme") == (CookieCategory.FUNCTIONAL, "Remembers widgets (Acme)")
        assert detector.categorize("_ga")[0] == CookieCategory.UNKNOWN


class TestClassify:
    def test_known_cookie_keeps_category_on_any_domain(self, detector):
        cookie = detector.classify(raw_cookie("_ga", domain=".google.com"), "example.com")
        assert cookie.category == CookieCategory.ANALYTICS
        assert cookie.third_party

    def test_unknown_third_party_cookie_becomes_marketing(self, detector):
        cookie = detector.classify(raw_cookie("zz9", domain=".adnetwork.io"), "example.com")
        assert cookie.category == CookieCategory.MARKETING
        assert cookie.description == "Third-party marketing cookie from .adnetwork.io"

    def test_unknown_first_party_cookie_stays_unknown(self, detector):
        cookie = detector.classify(raw_cookie("zz9", domain="example.com"), "example.com")
        assert cookie.category == CookieCategory.UNKNOWN
        assert not cookie.third_party
        assert cookie.description

    def test_flags_and_expiry(self, detector):
        cookie = detector.classify(
            raw_cookie("PHPSESSID", secure=True, httpOnly=True, sameSite="Strict", expires=1893456000),
            "example.com",
        )
        assert cookie.secure and cookie.http_only
        assert cookie.same_site == "Strict"
        assert cookie.expires == datetime(2030, 1, 1, tzinfo=timezone.utc)

    def test_session_cookie_has_no_expiry(self, detector):
        assert detector.classify(raw_cookie("PHPSESSID"), "example.com").expires is None


class TestDetect:
    @pytest.mark.asyncio
    async def test_preserves_browser_order_and_duplicates(self, detector):
        snapshot = FakeSnapshot(cookies=[
            raw_cookie("_gid"),
            raw_cookie("lang", path="/en"),
            raw_cookie("lang", path="/de"),
        ])
        cookies = await detector.detect(snapshot)
        assert [c.name for c in cookies] == ["_gid", "lang", "lang"]
        assert [c.path for c in cookies[1:]] == ["/en", "/de"]

    @pytest.mark.asyncio
    async def test_unreadable_cookie_jar_gives_empty_list(self, detector):
        snapshot = FakeSnapshot(cookies=RuntimeError("context closed"))
        assert await detector.detect(snapshot) == []


def test_cookie_stats(detector):
    cookies = [
        detector.classify(raw_cookie("_ga", domain=".google.com", secure=True), "example.com"),
        detector.classify(raw_cookie("PHPSESSID", httpOnly=True), "example.com"),
        detector.classify(raw_cookie("zz9"), "example.com"),
    ]
    stats = cookie_stats(cookies)
    assert stats["total"] == 3
    assert stats["analytics"] == 1
    assert stats["necessary"] == 1
    assert stats["unknown"] == 1
    assert stats["third_party"] == 1
    assert stats["first_party"] == 2
    assert stats["secure"] == 1
    assert stats["http_only"] == 1
