"""
policy_detector.py - Privacy policy link detection and content analysis.

PolicyLinkDetector reads the landing page's anchors and finds the privacy
policy (plus terms-of-service and cookie-policy links).  PolicyContentAnalyzer
opens the policy in its own tab and checks its text for the disclosures
GDPR Articles 13-14 require.
"""

import logging

import patterns
from browser import ScanError
from models import Finding, FindingType, PolicyContentAnalysis, PolicyLinkDetection, Severity

logger = logging.getLogger(__name__)

# ────────────────────────────────────────────────────────────────────
# CONFIGURATION
# ────────────────────────────────────────────────────────────────────

# Seconds allowed for loading the policy page (never more than the
# scan's own timeout).
POLICY_PAGE_TIMEOUT = 15

# Seconds to wait after the policy page's DOMContentLoaded.
POLICY_SETTLE_DELAY = 1.0

# (field name, pattern set, points, label used in findings)
# Critical disclosures are worth 10 points, the rest 5.
DISCLOSURE_CHECKS = (
    ("has_controller_identity", patterns.CONTROLLER_IDENTITY, 10, "Controller identity and contact"),
    ("has_processing_purposes", patterns.PROCESSING_PURPOSES, 10, "Processing purposes"),
    ("has_legal_basis", patterns.LEGAL_BASIS, 10, "Legal basis for processing"),
    ("has_data_categories", patterns.DATA_CATEGORIES, 10, "Data categories collected"),
    ("has_user_rights", patterns.USER_RIGHTS_DISCLOSURE, 10, "Data subject rights"),
    ("has_dpo_contact", patterns.DPO_CONTACT, 5, "DPO contact details"),
    ("has_retention_periods", patterns.RETENTION_PERIODS, 5, "Data retention periods"),
    ("has_data_recipients", patterns.DATA_RECIPIENTS, 5, "Data recipients/third parties"),
    ("has_international_transfers", patterns.INTERNATIONAL_TRANSFERS, 5, "International transfer information"),
    ("has_complaint_right", patterns.COMPLAINT_RIGHT, 5, "Right to lodge complaint"),
    ("has_data_source", patterns.DATA_SOURCE, 5, "Source of personal data"),
    ("has_automated_decisions", patterns.AUTOMATED_DECISIONS_DISCLOSURE, 5, "Automated decision-making"),
)

_COLLECT_LINKS_JS = """
() => {
    const read = (el) => ({
        href: el.href || '',
        text: (el.textContent || '').trim(),
        ariaLabel: el.getAttribute('aria-label') || '',
    });
    return {
        anchors: Array.from(document.querySelectorAll('a')).map(read),
        footer: Array.from(
            document.querySelectorAll("footer a, [class*='footer'] a, #footer a")
        ).map(read),
    };
}
"""

_MAIN_TEXT_JS = """
() => {
    const selectors = [
        'main', 'article', '[role="main"]', '.privacy-policy',
        '#privacy-policy', '.content', '.page-content',
    ];
    for (const selector of selectors) {
        const element = document.querySelector(selector);
        if (element) {
            return element.textContent || '';
        }
    }
    return document.body ? (document.body.textContent || '') : '';
}
"""

NO_POLICY_FINDING = Finding(
    type=FindingType.PRIVACY_POLICY,
    severity=Severity.ERROR,
    title="No Privacy Policy Found",
    description=(
        "We could not find a privacy policy link on your website. GDPR requires "
        "websites to have a clear and accessible privacy policy."
    ),
    recommendation=(
        "Add a privacy policy page and link to it prominently in your website "
        "footer and/or navigation menu."
    ),
)


def find_privacy_policy_link(anchors, footer_anchors=()):
    """
    Return the href of the first anchor that looks like a privacy policy.

    All anchors are checked first (text + aria-label, then href), then
    footer anchors by text alone.
    """
    for link in anchors:
        label = f"{link.get('text', '')} {link.get('ariaLabel', '')}"
        href = link.get("href", "")
        if patterns.PRIVACY_POLICY_TEXT.matches(label):
            return href
        if patterns.PRIVACY_POLICY_HREF.matches(href):
            return href

    for link in footer_anchors:
        if patterns.PRIVACY_POLICY_TEXT.matches(link.get("text", "")):
            return link.get("href", "")
    return None


def find_link(anchors, pattern_set):
    """First anchor whose text or href matches pattern_set."""
    for link in anchors:
        if pattern_set.matches(link.get("text", "")) or pattern_set.matches(link.get("href", "")):
            return link.get("href", "")
    return None


class PolicyLinkDetector:
    name = "privacy_policy"

    def classify(self, anchors, footer_anchors=()):
        url = find_privacy_policy_link(anchors, footer_anchors)
        terms_url = find_link(anchors, patterns.TERMS_OF_SERVICE)
        cookie_policy_url = find_link(anchors, patterns.COOKIE_POLICY)
        if url is None:
            return PolicyLinkDetection(
                found=False,
                finding=NO_POLICY_FINDING,
                terms_of_service_url=terms_url,
                cookie_policy_url=cookie_policy_url,
            )
        return PolicyLinkDetection(
            found=True,
            url=url,
            terms_of_service_url=terms_url,
            cookie_policy_url=cookie_policy_url,
        )

    async def detect(self, snapshot):
        try:
            links = await snapshot.evaluate(_COLLECT_LINKS_JS)
        except Exception as e:
            logger.warning("Privacy policy link detection failed on %s: %s", snapshot.url, e)
            links = None
        links = links or {}
        return self.classify(links.get("anchors") or [], links.get("footer") or [])


# ────────────────────────────────────────────────────────────────────
# CONTENT ANALYSIS
# ────────────────────────────────────────────────────────────────────

def analyze_policy_text(text, analyzed_url=None):
    """Check policy text against every disclosure group and score it."""
    flags = {}
    score = 0
    for field_name, pattern_set, points, _ in DISCLOSURE_CHECKS:
        present = pattern_set.matches(text or "")
        flags[field_name] = present
        if present:
            score += points
    return PolicyContentAnalysis(
        completeness_score=min(100, score),
        analyzed_url=analyzed_url,
        **flags,
    )


def missing_disclosures(analysis):
    return [label for field_name, _, _, label in DISCLOSURE_CHECKS
            if not getattr(analysis, field_name)]


def policy_content_findings(analysis):
    """Findings for an analysed policy: the completeness band plus Art. 6 / Art. 15-22 gaps."""
    findings = []
    missing = missing_disclosures(analysis)
    score = analysis.completeness_score

    if score < 50:
        listed = ", ".join(missing[:5])
        if len(missing) > 5:
            listed += f", and {len(missing) - 5} more"
        findings.append(Finding(
            type=FindingType.PRIVACY_POLICY,
            severity=Severity.ERROR,
            title="Incomplete Privacy Policy",
            description=(
                f"Your privacy policy is missing {len(missing)} elements required by GDPR "
                f"Articles 13-14. Completeness score: {score}/100. Missing: {listed}."
            ),
            recommendation=(
                "Update your privacy policy to include all required GDPR elements: controller "
                "identity, DPO contact, processing purposes, legal basis, data categories, "
                "retention periods, data recipients, international transfers, user rights, "
                "and complaint rights."
            ),
        ))
    elif score < 80:
        findings.append(Finding(
            type=FindingType.PRIVACY_POLICY,
            severity=Severity.WARNING,
            title="Privacy Policy Needs Improvement",
            description=(
                f"Your privacy policy is missing {len(missing)} elements required by GDPR "
                f"Articles 13-14. Completeness score: {score}/100. Missing: {', '.join(missing)}."
            ),
            recommendation="Review and enhance your privacy policy to include: " + ", ".join(missing) + ".",
        ))

    if not analysis.has_legal_basis:
        findings.append(Finding(
            type=FindingType.PRIVACY_POLICY,
            severity=Severity.ERROR,
            title="No Legal Basis Disclosed in Privacy Policy (Article 6)",
            description=(
                "Your privacy policy does not specify the legal basis for processing personal "
                "data. GDPR Article 6 requires you to identify whether you process data based on "
                "consent, contract, legal obligation, vital interests, public task, or "
                "legitimate interests."
            ),
            recommendation=(
                "Add a section to your privacy policy clearly stating the legal basis for each "
                "processing activity."
            ),
        ))

    if not analysis.has_user_rights:
        findings.append(Finding(
            type=FindingType.PRIVACY_POLICY,
            severity=Severity.ERROR,
            title="User Rights Not Disclosed (Articles 15-22)",
            description=(
                "Your privacy policy does not explain users' GDPR rights. You must inform users "
                "of their right to access, rectify, erase, restrict, object, and port their data."
            ),
            recommendation=(
                "Add a 'Your Rights' section explaining all GDPR data subject rights "
                "(Articles 15-22) and how users can exercise them."
            ),
        ))
    return findings


class PolicyContentAnalyzer:
    """
    Opens the privacy policy in a second tab and analyses its text.

    Same-page anchors ("#...") are not navigated; their text is read from
    the landing snapshot.  If the policy page fails to load, the landing
    snapshot's text is analysed instead.
    """

    name = "policy_content"

    def __init__(self, page_timeout=POLICY_PAGE_TIMEOUT, settle_delay=POLICY_SETTLE_DELAY):
        self.page_timeout = page_timeout
        self.settle_delay = settle_delay

    async def _policy_snapshot(self, session, landing, policy_url, timeout):
        if not policy_url or "#" in policy_url:
            return landing
        try:
            return await session.open(
                policy_url,
                timeout=min(self.page_timeout, timeout),
                wait_for_network_idle=False,
                settle_delay=self.settle_delay,
            )
        except ScanError as e:
            logger.warning("Could not open privacy policy %s, analysing landing page instead: %s",
                           policy_url, e)
            return landing

    async def analyze(self, session, landing, policy_url, timeout):
        snapshot = await self._policy_snapshot(session, landing, policy_url, timeout)
        try:
            text = await snapshot.evaluate(_MAIN_TEXT_JS)
        except Exception as e:
            logger.warning("Privacy policy text extraction failed on %s: %s", snapshot.url, e)
            text = ""
        return analyze_policy_text(text or "", analyzed_url=snapshot.url)
