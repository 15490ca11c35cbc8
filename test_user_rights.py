"""Tests for user-rights feature detection."""

import pytest

from conftest import FakeSnapshot
from models import FindingType, Severity, UserRightsDetection
from user_rights import (
    _COLLECT_CONTROLS_JS,
    UserRightsDetector,
    detect_rights,
    missing_rights,
    user_rights_findings,
)

FULL_RIGHTS_LINKS = [
    {"text": "My Account", "href": "/account"},
    {"text": "Download your data", "href": "/export"},
    {"text": "Delete account", "href": "/account/delete"},
    {"text": "Privacy request", "href": "/privacy-request"},
]


class TestDetectRights:
    def test_all_rights_from_links(self):
        detection = detect_rights(FULL_RIGHTS_LINKS)
        assert detection.rights_present == 4
        assert detection.data_export_url == "/export"
        assert detection.account_deletion_url == "/account/delete"
        assert detection.dsar_url == "/privacy-request"
        # "Delete account" also mentions the account, and the last match wins.
        assert detection.profile_settings_url == "/account/delete"
        assert missing_rights(detection) == []

    def test_login_link_sets_authentication_only(self):
        detection = detect_rights([{"text": "Log in", "href": "/login"}])
        assert detection.has_authentication
        assert detection.rights_present == 0
        assert detection.has_account_features

    def test_buttons_set_flags_without_urls(self):
        detection = detect_rights([], buttons=["Delete my account"])
        assert detection.has_account_deletion
        assert detection.account_deletion_url is None

    def test_form_action_counts_as_authentication(self):
        detection = detect_rights([], forms=["/users/login"])
        assert detection.has_authentication

    def test_password_field_counts_as_authentication(self):
        detection = detect_rights([], has_password_field=True)
        assert detection.has_authentication
        assert detection.rights_present == 0

    def test_german_links(self):
        detection = detect_rights([
            {"text": "Mein Konto", "href": "/mein-konto"},
            {"text": "Anmelden", "href": "/anmelden"},
        ])
        assert detection.has_profile_settings
        assert detection.has_authentication

    def test_nothing_found(self):
        detection = detect_rights([{"text": "Blog", "href": "/blog"}])
        assert detection == UserRightsDetection()
        assert not detection.has_account_features


class TestUserRightsFindings:
    def test_no_account_features_is_informational(self):
        findings = user_rights_findings(UserRightsDetection())
        assert len(findings) == 1
        assert findings[0].type == FindingType.INFORMATIONAL
        assert findings[0].severity == Severity.INFO

    def test_login_without_any_rights_is_an_error(self):
        findings = user_rights_findings(detect_rights([{"text": "Sign in", "href": "/signin"}]))
        assert len(findings) == 1
        assert findings[0].severity == Severity.ERROR
        assert findings[0].type == FindingType.DATA_RECTIFICATION
        assert "missing 4 of 4" in findings[0].description

    def test_three_missing_is_a_warning(self):
        findings = user_rights_findings(detect_rights([{"text": "Settings", "href": "/settings"}]))
        assert [f.severity for f in findings] == [Severity.WARNING]

    def test_two_missing_is_info(self):
        findings = user_rights_findings(detect_rights([], buttons=["Delete my account"]))
        assert [f.severity for f in findings] == [Severity.INFO]
        assert "Data Export" in findings[0].description
        assert "DSAR Request Form" in findings[0].description

    def test_all_rights_present(self):
        assert user_rights_findings(detect_rights(FULL_RIGHTS_LINKS)) == []


class TestUserRightsDetector:
    @pytest.mark.asyncio
    async def test_detect_reads_page_controls(self):
        snapshot = FakeSnapshot(responses={_COLLECT_CONTROLS_JS: {
            "links": [{"text": "Sign up", "href": "/register"}],
            "buttons": [],
            "forms": [],
            "hasPasswordField": False,
        }})
        detection = await UserRightsDetector().detect(snapshot)
        assert detection.has_authentication

    @pytest.mark.asyncio
    async def test_detect_failure_gives_empty_detection(self):
        snapshot = FakeSnapshot(responses={_COLLECT_CONTROLS_JS: RuntimeError("Target closed")})
        assert await UserRightsDetector().detect(snapshot) == UserRightsDetection()
