"""
additional_compliance.py - Text sweeps for GDPR Articles 6, 8, 9 and 22.
"""

import logging

import patterns
from models import AdditionalComplianceChecks, Finding, FindingType, Severity

logger = logging.getLogger(__name__)

_PAGE_TEXT_JS = """
() => ({
    text: document.body ? (document.body.textContent || '') : '',
    inputs: Array.from(document.querySelectorAll('input')).map((input) => ({
        type: input.type || '',
        name: (input.name || input.id || '').toLowerCase(),
        label: (input.placeholder || input.getAttribute('aria-label') || '').toLowerCase(),
    })),
})
"""


def _has_age_input(inputs):
    # <input type=date name=birthdate>, <input type=number placeholder="Your age">, ...
    for field in inputs:
        if field.get("type") not in ("date", "number"):
            continue
        name = field.get("name", "")
        if "age" in name or "birth" in name or "age" in field.get("label", ""):
            return True
    return False


def run_checks(text, inputs=()):
    """Run all four sweeps over page text (and form inputs, for age checks)."""
    text = text or ""
    sensitive = tuple(
        category
        for category, pattern_set in patterns.SENSITIVE_DATA_CATEGORIES.items()
        if pattern_set.matches(text)
    )
    return AdditionalComplianceChecks(
        has_age_verification=patterns.AGE_VERIFICATION.matches(text) or _has_age_input(inputs),
        has_parental_consent=patterns.PARENTAL_CONSENT.matches(text),
        processes_sensitive_data=bool(sensitive),
        has_explicit_consent=patterns.EXPLICIT_CONSENT.matches(text),
        sensitive_data_categories=sensitive,
        has_automated_decisions=patterns.AUTOMATION.matches(text),
        discloses_automation=patterns.AUTOMATION_DISCLOSURE.matches(text),
        has_legal_basis_statement=patterns.LEGAL_BASIS_STATEMENT.matches(text),
    )


def additional_findings(checks):
    findings = []

    # Age verification depends on the audience, so this is advisory only.
    if not checks.has_age_verification:
        findings.append(Finding(
            type=FindingType.CONSENT_MANAGEMENT,
            severity=Severity.INFO,
            title="No Age Verification Detected (Article 8)",
            description=(
                "We did not detect age verification on your website. If your service is "
                "directed at children or collects data from children under 16 (or 13 in some "
                "countries), GDPR Article 8 requires age verification and parental consent."
            ),
            recommendation=(
                "If your service may be used by minors, verify age and obtain parental consent "
                "below the national age of digital consent (13-16 depending on the country)."
            ),
        ))

    if checks.processes_sensitive_data and not checks.has_explicit_consent:
        categories = ", ".join(checks.sensitive_data_categories) or "sensitive data"
        findings.append(Finding(
            type=FindingType.CONSENT_MANAGEMENT,
            severity=Severity.ERROR,
            title="Sensitive Data Without Explicit Consent (Article 9)",
            description=(
                f"Your website appears to process special categories of personal data "
                f"({categories}) without obtaining explicit consent. GDPR Article 9 prohibits "
                "processing of sensitive data unless explicit consent is obtained or another "
                "legal exception applies."
            ),
            recommendation=(
                "Obtain explicit consent for special category data, or document another valid "
                "condition under Article 9(2), and update your privacy policy accordingly."
            ),
        ))

    if checks.has_automated_decisions and not checks.discloses_automation:
        findings.append(Finding(
            type=FindingType.CONSENT_MANAGEMENT,
            severity=Severity.WARNING,
            title="Automated Decisions Not Disclosed (Article 22)",
            description=(
                "Your website appears to use automated decision-making or profiling but does "
                "not clearly disclose this to users. GDPR Article 22 gives users the right not "
                "to be subject to solely automated decisions with significant effects."
            ),
            recommendation=(
                "Disclose the automated decision-making, the logic involved, its consequences "
                "for users, and their right to human intervention."
            ),
        ))

    if not checks.has_legal_basis_statement:
        findings.append(Finding(
            type=FindingType.PRIVACY_POLICY,
            severity=Severity.WARNING,
            title="No Legal Basis Disclosed (Article 6)",
            description=(
                "Your website does not clearly state the legal basis for processing personal "
                "data. GDPR Article 6 requires organizations to identify whether they process "
                "data based on consent, contract, legal obligation, vital interests, public "
                "task, or legitimate interests."
            ),
            recommendation=(
                "State the legal basis for each type of processing, e.g. 'We process your email "
                "address based on contractual necessity (Article 6(1)(b)).'"
            ),
        ))
    return findings


class AdditionalComplianceDetector:
    name = "additional_compliance"

    async def detect(self, snapshot):
        try:
            page = await snapshot.evaluate(_PAGE_TEXT_JS)
        except Exception as e:
            logger.warning("Additional compliance checks failed on %s: %s", snapshot.url, e)
            page = None
        page = page or {}
        return run_checks(page.get("text") or "", page.get("inputs") or [])
