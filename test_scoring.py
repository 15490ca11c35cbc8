"""Tests for the compliance score."""

import pytest

from models import (
    CookieCategory,
    DetectedCookie,
    DetectedScript,
    Finding,
    FindingType,
    ScriptCategory,
    ScriptType,
    Severity,
    UserRightsDetection,
)
from scoring import (
    CLEAN_SITE_FLOOR,
    calculate_score,
    compliance_level,
    generate_recommendations,
    score_breakdown,
)


def cookie(name, category, domain="example.com"):
    return DetectedCookie(name=name, domain=domain, category=category)


def tracker(name="Google Analytics", category=ScriptCategory.ANALYTICS):
    return DetectedScript(type=ScriptType.EXTERNAL, url="https://www.google-analytics.com/analytics.js",
                          category=category, name=name)


def error(title="Problem"):
    return Finding(type=FindingType.COOKIE_BANNER, severity=Severity.ERROR, title=title, description="")


def warning(title="Heads up"):
    return Finding(type=FindingType.COOKIE_BANNER, severity=Severity.WARNING, title=title, description="")


class TestScenarios:
    def test_clean_site_with_good_policy_and_banner(self):
        breakdown = score_breakdown(
            has_privacy_policy=True,
            has_cookie_banner=True,
            cookies=[],
            scripts=[],
            findings=[],
            user_rights=UserRightsDetection(),
            privacy_policy_score=90,
            consent_quality_score=90,
        )
        assert breakdown.privacy_policy == 18
        assert breakdown.cookie_banner == 18
        assert breakdown.cookie_categorization == 20
        assert breakdown.tracking_disclosure == 20
        assert breakdown.user_rights == 0
        assert breakdown.penalty == 0
        assert breakdown.total == 76
        assert not breakdown.floor_applied

    def test_analytics_cookies_without_policy_or_banner(self):
        cookies = [
            cookie("_ga", CookieCategory.ANALYTICS, ".google-analytics.com"),
            cookie("_gid", CookieCategory.ANALYTICS, ".google-analytics.com"),
            cookie("_gat", CookieCategory.ANALYTICS, ".google-analytics.com"),
        ]
        findings = [error("No Privacy Policy Found"), error("No Cookie Consent Banner Found"),
                    error("Third-Party Cookies Without Consent")]
        breakdown = score_breakdown(False, False, cookies, [], findings)
        assert breakdown.penalty == 15
        assert breakdown.total == 25
        assert breakdown.total < 50


class TestBuckets:
    def test_missing_policy_and_banner_score_zero(self):
        breakdown = score_breakdown(False, False, [], [], [], privacy_policy_score=100, consent_quality_score=100)
        assert breakdown.privacy_policy == 0
        assert breakdown.cookie_banner == 0

    def test_found_without_quality_gets_full_bucket(self):
        breakdown = score_breakdown(True, True, [], [], [])
        assert breakdown.privacy_policy == 20
        assert breakdown.cookie_banner == 20

    def test_cookie_categorization_fraction(self):
        cookies = [
            cookie("PHPSESSID", CookieCategory.NECESSARY),
            cookie("a", CookieCategory.UNKNOWN),
            cookie("b", CookieCategory.UNKNOWN),
            cookie("c", CookieCategory.UNKNOWN),
        ]
        assert score_breakdown(True, True, cookies, [], []).cookie_categorization == 5

    @pytest.mark.parametrize("policy,banner,points", [
        (True, True, 20),
        (True, False, 12),
        (False, True, 12),
        (False, False, 4),
    ])
    def test_tracking_disclosure(self, policy, banner, points):
        assert score_breakdown(policy, banner, [], [tracker()], []).tracking_disclosure == points

    def test_non_tracking_scripts_do_not_affect_disclosure(self):
        social = tracker("Facebook Connect", ScriptCategory.SOCIAL)
        assert score_breakdown(False, False, [], [social], []).tracking_disclosure == 20

    def test_user_rights_only_count_on_account_sites(self):
        rights = UserRightsDetection(has_profile_settings=True, has_data_export=True, has_authentication=True)
        assert score_breakdown(True, True, [], [], [], user_rights=rights).user_rights == 10
        assert score_breakdown(True, True, [], [], [], user_rights=UserRightsDetection()).user_rights == 0

    def test_only_errors_are_penalised(self):
        breakdown = score_breakdown(True, True, [], [], [error(), warning(), warning()])
        assert breakdown.penalty == 5


class TestFloorAndClamp:
    def test_floor_never_lowers_a_score(self):
        breakdown = score_breakdown(True, False, [], [], [], privacy_policy_score=0)
        assert breakdown.total == 40
        assert not breakdown.floor_applied

    def test_floor_raises_a_clean_but_sparse_site(self):
        cookies = [cookie(name, CookieCategory.UNKNOWN) for name in ("a", "b", "c", "d")]
        breakdown = score_breakdown(False, False, cookies, [], [warning()])
        assert breakdown.raw_total == 20
        assert breakdown.total == CLEAN_SITE_FLOOR
        assert breakdown.floor_applied

    def test_no_floor_with_tracking_cookies(self):
        cookies = [cookie("_fbp", CookieCategory.MARKETING, ".facebook.com")] + [
            cookie(name, CookieCategory.UNKNOWN) for name in ("a", "b", "c", "d")
        ]
        breakdown = score_breakdown(False, False, cookies, [], [])
        assert breakdown.total == 24
        assert not breakdown.floor_applied

    def test_no_floor_with_errors(self):
        breakdown = score_breakdown(False, False, [], [tracker()], [error()] * 4)
        assert breakdown.total == 20 + 4 - 20

    def test_total_never_negative(self):
        cookies = [cookie("x", CookieCategory.MARKETING, ".ads.example")]
        findings = [error()] * 30
        assert calculate_score(False, False, cookies, [tracker()], findings) == 0

    def test_total_never_above_100(self):
        rights = UserRightsDetection(
            has_profile_settings=True, has_data_export=True,
            has_account_deletion=True, has_dsar_mechanism=True,
        )
        assert calculate_score(True, True, [], [], [], user_rights=rights) == 100


@pytest.mark.parametrize("score,level", [
    (100, "excellent"), (80, "excellent"), (79, "good"), (60, "good"),
    (59, "fair"), (40, "fair"), (39, "poor"), (0, "poor"),
])
def test_compliance_level(score, level):
    assert compliance_level(score)[0] == level


def test_recommendations():
    cookies = [cookie("_ga", CookieCategory.ANALYTICS, ".google.com"), cookie("zz", CookieCategory.UNKNOWN)]
    recommendations = generate_recommendations(False, False, cookies, [tracker()])
    assert len(recommendations) == 5
    assert "Review and categorize 1 unidentified cookies on your website." in recommendations


def test_no_recommendations_for_clean_site():
    assert generate_recommendations(True, True, [], []) == []
