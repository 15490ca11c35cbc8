"""Tests for the Article 6/8/9/22 text sweeps."""

import pytest

from additional_compliance import _PAGE_TEXT_JS, AdditionalComplianceDetector, additional_findings, run_checks
from conftest import FakeSnapshot
from models import AdditionalComplianceChecks, FindingType, Severity


def titles(findings):
    return [f.title for f in findings]


class TestRunChecks:
    def test_empty_page(self):
        checks = run_checks("")
        assert checks == AdditionalComplianceChecks()

    def test_sensitive_categories_in_declaration_order(self):
        checks = run_checks("Log in with your fingerprint. Tell us your religion.")
        assert checks.processes_sensitive_data
        assert checks.sensitive_data_categories == ("biometric", "religious")

    def test_word_boundaries(self):
        # "grace" and "dnata" are not "race" and "DNA".
        checks = run_checks("Amazing grace. Flights by dnata.")
        assert not checks.processes_sensitive_data

    def test_age_input_field(self):
        checks = run_checks("Sign up", inputs=[{"type": "date", "name": "birthdate", "label": ""}])
        assert checks.has_age_verification

    def test_text_input_named_age_does_not_count(self):
        checks = run_checks("Sign up", inputs=[{"type": "text", "name": "age", "label": ""}])
        assert not checks.has_age_verification

    def test_parental_consent(self):
        assert run_checks("Children need parental consent to join.").has_parental_consent


class TestAdditionalFindings:
    def test_empty_page_findings(self):
        findings = additional_findings(run_checks(""))
        assert titles(findings) == [
            "No Age Verification Detected (Article 8)",
            "No Legal Basis Disclosed (Article 6)",
        ]
        assert findings[0].severity == Severity.INFO
        assert findings[1].severity == Severity.WARNING
        assert findings[1].type == FindingType.PRIVACY_POLICY

    def test_sensitive_data_without_explicit_consent(self):
        checks = run_checks("Track your health data and medical history. Enter your date of birth. "
                            "Our legal basis is contract.")
        findings = additional_findings(checks)
        assert titles(findings) == ["Sensitive Data Without Explicit Consent (Article 9)"]
        assert findings[0].severity == Severity.ERROR
        assert "(health)" in findings[0].description

    def test_sensitive_data_with_explicit_consent(self):
        checks = run_checks("We process health data only with your explicit consent. "
                            "Date of birth required. Legal basis: Article 6(1)(a).")
        assert additional_findings(checks) == []

    def test_undisclosed_automation(self):
        checks = run_checks("We use profiling to rank offers. Minimum age 16. Lawful basis: legitimate interest.")
        assert titles(additional_findings(checks)) == ["Automated Decisions Not Disclosed (Article 22)"]

    def test_disclosed_automation(self):
        checks = run_checks("We use profiling to rank offers, and you can ask for human review. "
                            "Minimum age 16. Lawful basis: legitimate interest.")
        assert checks.has_automated_decisions
        assert checks.discloses_automation
        assert additional_findings(checks) == []


class TestDetector:
    @pytest.mark.asyncio
    async def test_detect_reads_page_text_and_inputs(self):
        snapshot = FakeSnapshot(responses={_PAGE_TEXT_JS: {
            "text": "Please confirm your age.",
            "inputs": [],
        }})
        checks = await AdditionalComplianceDetector().detect(snapshot)
        assert checks.has_age_verification

    @pytest.mark.asyncio
    async def test_detect_failure_gives_empty_checks(self):
        snapshot = FakeSnapshot(responses={_PAGE_TEXT_JS: RuntimeError("Target closed")})
        assert await AdditionalComplianceDetector().detect(snapshot) == AdditionalComplianceChecks()
