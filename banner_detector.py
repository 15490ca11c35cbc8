"""
banner_detector.py - Cookie consent banner detection and quality analysis.

Detection cascades through three strategies and stops at the first hit:

  1. selector  - a visible element matching a known banner/CMP selector
  2. text      - "we use cookies"-style wording inside a visible
                 fixed/sticky/dialog element
  3. platform  - a consent-management platform named in the page HTML,
                 or an accept/reject-cookies button anywhere

The quality analyzer then finds the banner element again and grades it
against GDPR Article 7 (freely given, specific, unambiguous consent).
"""

import logging

import patterns
from models import BannerDetection, ConsentQualityAnalysis, Finding, FindingType, Severity

logger = logging.getLogger(__name__)

# ────────────────────────────────────────────────────────────────────
# KNOWN BANNER SELECTORS
#
# IDs, classes and attributes used by the common consent-management
# platforms and hand-rolled banners.  Checked in order; the first one
# that matches a visible element wins.
# ────────────────────────────────────────────────────────────────────

BANNER_SELECTORS = [
    # ID-based
    "#cookie-banner",
    "#cookie-consent",
    "#cookie-notice",
    "#cookie-popup",
    "#cookie-bar",
    "#cookie-law",
    "#gdpr-banner",
    "#gdpr-consent",
    "#consent-banner",
    "#consent-popup",
    "#privacy-banner",
    "#cc-banner",
    "#cookieConsent",
    "#CookieConsent",
    "#onetrust-banner-sdk",
    "#onetrust-consent-sdk",
    "#CybotCookiebotDialog",
    "#truste-consent-track",
    "#sp-cc",
    "#qc-cmp2-container",
    # Class-based
    ".cookie-banner",
    ".cookie-consent",
    ".cookie-notice",
    ".cookie-popup",
    ".cookie-bar",
    ".gdpr-banner",
    ".gdpr-consent",
    ".consent-banner",
    ".consent-popup",
    ".privacy-banner",
    ".cc-banner",
    ".cc-window",
    ".cky-consent-container",
    ".osano-cm-window",
    ".termly-consent-banner",
    ".truste-consent-track",
    ".truste_box_overlay",
    '[class*="cookie-banner"]',
    '[class*="consent-banner"]',
    '[class*="cookie-modal"]',
    '[class*="consent-modal"]',
    # Attribute-based
    "[data-cookie-consent]",
    "[data-gdpr]",
    "[data-consent]",
    "[aria-label*='cookie' i]",
    "[aria-label*='consent' i]",
    "[role='dialog'][aria-label*='cookie' i]",
    "[role='dialog'][aria-label*='privacy' i]",
]

# Consent-management platforms recognised by name in the page HTML.
CONSENT_PLATFORMS = [
    "OneTrust",
    "Cookiebot",
    "TrustArc",
    "Quantcast",
    "Osano",
    "Termly",
    "CookieYes",
    "Complianz",
    "GDPR Cookie Consent",
]

# Broader selectors used to find the banner element for quality grading.
# A match must be at least this big (px) to count as the banner.
QUALITY_BANNER_SELECTORS = [
    '[class*="cookie"]',
    '[id*="cookie"]',
    '[class*="consent"]',
    '[id*="consent"]',
    '[class*="gdpr"]',
    '[id*="gdpr"]',
    '[class*="banner"]',
    '[aria-label*="cookie"]',
    '[aria-label*="consent"]',
]
QUALITY_MIN_WIDTH = 200
QUALITY_MIN_HEIGHT = 50

# Button-text phrases that give a banner away on their own.
_STANDALONE_BUTTON_PHRASES = ("accept all", "reject all", "allow cookies", "deny cookies")

# Quality score weights, summing to 100.
QUALITY_WEIGHTS = {
    "has_reject_button": 25,
    "reject_as_prominent_as_accept": 20,
    "has_granular_consent": 20,
    "no_preticked_boxes": 15,
    "has_clear_language": 10,
    "has_withdraw_option": 10,
}

# Accept and reject count as equally prominent below these deltas (px).
MAX_FONT_SIZE_DELTA = 4
MAX_PADDING_DELTA = 10

_BANNER_SIGNALS_JS = """
([selectors, platforms]) => {
    const isVisible = (el) => {
        const style = window.getComputedStyle(el);
        if (style.display === 'none' || style.visibility === 'hidden' || style.opacity === '0') {
            return false;
        }
        const rect = el.getBoundingClientRect();
        return rect.width > 0 && rect.height > 0;
    };

    const visibleSelectors = [];
    for (const selector of selectors) {
        try {
            const el = document.querySelector(selector);
            if (el && isVisible(el)) {
                visibleSelectors.push(selector);
            }
        } catch (e) {
            // unsupported selector syntax
        }
    }

    let overlayText = '';
    document.querySelectorAll(
        "[style*='fixed'], [style*='sticky'], [role='dialog'], [role='alertdialog'], .modal, .popup, .overlay"
    ).forEach((el) => {
        if (el.offsetParent !== null || isVisible(el)) {
            overlayText += ' ' + (el.textContent || '');
        }
    });

    const html = document.body ? (document.body.innerHTML || '').toLowerCase() : '';
    const foundPlatforms = platforms.filter((name) => html.includes(name.toLowerCase()));

    const buttons = Array.from(
        document.querySelectorAll("button, [role='button'], .btn, .button")
    ).map((b) => (b.textContent || '').toLowerCase().trim());

    return { visibleSelectors, overlayText, platforms: foundPlatforms, buttons };
}
"""

_COMPLIANCE_SIGNALS_JS = """
() => ({
    buttons: Array.from(
        document.querySelectorAll("button, [role='button'], a.btn, a.button")
    ).map((b) => (b.textContent || '').toLowerCase().trim()),
    bodyText: document.body ? (document.body.innerText || '') : '',
    checkboxCount: document.querySelectorAll("input[type='checkbox']").length,
})
"""

_CONSENT_SIGNALS_JS = """
([selectors, minWidth, minHeight]) => {
    let banner = null;
    for (const selector of selectors) {
        for (const el of document.querySelectorAll(selector)) {
            const rect = el.getBoundingClientRect();
            if (rect.width > minWidth && rect.height > minHeight) {
                banner = el;
                break;
            }
        }
        if (banner) break;
    }
    if (!banner) {
        return { found: false };
    }

    const buttons = [];
    banner.querySelectorAll("button, a[role='button'], input[type='button']").forEach((btn) => {
        const text = (btn.textContent || btn.getAttribute('aria-label') || '').toLowerCase().trim();
        if (!text) return;
        const style = window.getComputedStyle(btn);
        buttons.push({
            text,
            fontSize: parseFloat(style.fontSize) || 0,
            paddingY: (parseFloat(style.paddingTop) || 0) + (parseFloat(style.paddingBottom) || 0),
        });
    });

    const checkboxes = [];
    banner.querySelectorAll("input[type='checkbox']").forEach((box) => {
        const label = (box.parentElement && box.parentElement.textContent)
            || (box.nextElementSibling && box.nextElementSibling.textContent)
            || box.getAttribute('aria-label')
            || '';
        checkboxes.push({ label: label.trim(), checked: !!box.checked });
    });

    return {
        found: true,
        buttons,
        checkboxes,
        bannerText: banner.textContent || '',
        linkTexts: Array.from(document.querySelectorAll('a')).map((a) => (a.textContent || '').toLowerCase()),
        bodyText: document.body ? (document.body.textContent || '') : '',
    };
}
"""

NO_BANNER_FINDING = Finding(
    type=FindingType.COOKIE_BANNER,
    severity=Severity.ERROR,
    title="No Cookie Consent Banner Found",
    description=(
        "We could not find a cookie consent banner on your website. GDPR requires websites "
        "to obtain consent before setting non-essential cookies."
    ),
    recommendation=(
        "Implement a cookie consent banner that allows users to accept or reject different "
        "categories of cookies before they are set."
    ),
)


def _is_consent_button(text):
    text = (text or "").lower()
    if "cookie" in text and ("accept" in text or "reject" in text):
        return True
    return any(phrase in text for phrase in _STANDALONE_BUTTON_PHRASES)


class BannerDetector:
    name = "cookie_banner"

    def __init__(self, selectors=None, platforms=None):
        self.selectors = list(selectors or BANNER_SELECTORS)
        self.platforms = list(platforms or CONSENT_PLATFORMS)

    def classify(self, signals):
        """Apply the three strategies, in order, to collected page signals."""
        visible = signals.get("visibleSelectors") or []
        if visible:
            return BannerDetection(found=True, strategy="selector", selector=visible[0])

        if patterns.BANNER_TEXT.matches(signals.get("overlayText") or ""):
            return BannerDetection(found=True, strategy="text")

        if signals.get("platforms"):
            return BannerDetection(found=True, strategy="platform")
        if any(_is_consent_button(text) for text in signals.get("buttons") or []):
            return BannerDetection(found=True, strategy="platform")

        return BannerDetection(found=False, finding=NO_BANNER_FINDING)

    async def detect(self, snapshot):
        try:
            signals = await snapshot.evaluate(_BANNER_SIGNALS_JS, [self.selectors, self.platforms])
        except Exception as e:
            logger.warning("Cookie banner detection failed on %s: %s", snapshot.url, e)
            signals = None
        return self.classify(signals or {})

    async def check_compliance(self, snapshot):
        """Reject-option and granular-control findings for a page that has a banner."""
        try:
            signals = await snapshot.evaluate(_COMPLIANCE_SIGNALS_JS)
        except Exception as e:
            logger.warning("Banner compliance check failed on %s: %s", snapshot.url, e)
            return []
        return banner_compliance_findings(signals or {})


def banner_compliance_findings(signals):
    findings = []
    buttons = signals.get("buttons") or []

    if not any(patterns.REJECT_OPTION.matches(text) for text in buttons):
        findings.append(Finding(
            type=FindingType.CONSENT_MANAGEMENT,
            severity=Severity.WARNING,
            title="No Clear Reject Option",
            description=(
                "Your cookie banner may not have a clear option to reject non-essential "
                "cookies. GDPR requires that rejecting cookies should be as easy as accepting them."
            ),
            recommendation='Add a visible "Reject All" or "Decline" button alongside your "Accept All" button.',
        ))

    has_granular = (
        patterns.GRANULAR_CONTROLS.matches(signals.get("bodyText") or "")
        or (signals.get("checkboxCount") or 0) > 0
    )
    if not has_granular:
        findings.append(Finding(
            type=FindingType.CONSENT_MANAGEMENT,
            severity=Severity.INFO,
            title="Consider Adding Granular Controls",
            description=(
                "Your cookie banner could benefit from granular consent controls that allow "
                "users to choose specific cookie categories."
            ),
            recommendation=(
                "Add options for users to enable/disable specific cookie categories "
                "(e.g., Analytics, Marketing, Functional)."
            ),
        ))
    return findings


# ────────────────────────────────────────────────────────────────────
# CONSENT QUALITY (GDPR Article 7)
# ────────────────────────────────────────────────────────────────────

def quality_score(flags):
    return sum(weight for name, weight in QUALITY_WEIGHTS.items() if flags.get(name))


def analyze_consent_signals(signals):
    """Grade a banner from the signals collected by _CONSENT_SIGNALS_JS."""
    if not signals.get("found"):
        flags = {"no_preticked_boxes": True}
        return ConsentQualityAnalysis(quality_score=quality_score(flags), **flags)

    buttons = signals.get("buttons") or []
    accept = [b for b in buttons if patterns.ACCEPT_BUTTON.matches(b.get("text", ""))]
    reject = [b for b in buttons if patterns.REJECT_BUTTON.matches(b.get("text", ""))]

    prominent = False
    if accept and reject:
        font_delta = abs((accept[0].get("fontSize") or 0) - (reject[0].get("fontSize") or 0))
        padding_delta = abs((accept[0].get("paddingY") or 0) - (reject[0].get("paddingY") or 0))
        prominent = font_delta < MAX_FONT_SIZE_DELTA and padding_delta < MAX_PADDING_DELTA

    checkboxes = signals.get("checkboxes") or []
    category_boxes = [c for c in checkboxes if patterns.CONSENT_CATEGORY.matches(c.get("label", ""))]
    preticked = [
        c for c in checkboxes
        if c.get("checked") and not patterns.ESSENTIAL_CATEGORY.matches(c.get("label", ""))
    ]

    withdraw = patterns.WITHDRAW_CONSENT.matches(signals.get("bodyText") or "") or any(
        patterns.WITHDRAW_CONSENT.matches(text) for text in signals.get("linkTexts") or []
    )

    flags = {
        "has_reject_button": bool(reject),
        "reject_as_prominent_as_accept": prominent,
        "has_granular_consent": len(category_boxes) >= 2,
        "no_preticked_boxes": not preticked,
        "has_clear_language": patterns.CONSENT_CLARITY.matches(signals.get("bannerText") or ""),
        "has_withdraw_option": withdraw,
    }
    return ConsentQualityAnalysis(quality_score=quality_score(flags), **flags)


def consent_quality_issues(analysis):
    issues = []
    if not analysis.has_reject_button:
        issues.append("No reject/decline button")
    if analysis.has_reject_button and not analysis.reject_as_prominent_as_accept:
        issues.append("Reject button is less prominent than accept button")
    if not analysis.has_granular_consent:
        issues.append("No granular consent by category")
    if not analysis.no_preticked_boxes:
        issues.append("Pre-ticked consent boxes detected")
    if not analysis.has_withdraw_option:
        issues.append("No clear way to withdraw consent")
    return issues


def consent_quality_findings(analysis):
    findings = []
    issues = consent_quality_issues(analysis)
    score = analysis.quality_score

    if score < 50:
        findings.append(Finding(
            type=FindingType.CONSENT_MANAGEMENT,
            severity=Severity.ERROR,
            title="Non-Compliant Cookie Consent Banner (Article 7)",
            description=(
                f"Your cookie consent banner fails {len(issues)} GDPR Article 7 requirements. "
                f"Quality score: {score}/100. Issues: {'; '.join(issues)}."
            ),
            recommendation=(
                "GDPR requires consent to be freely given, specific, informed, and unambiguous. "
                "Ensure your consent banner has: (1) A reject button as prominent as accept, "
                "(2) Granular consent by cookie category, (3) No pre-ticked boxes, "
                "(4) Clear language, and (5) Easy withdrawal option."
            ),
        ))
    elif score < 80:
        findings.append(Finding(
            type=FindingType.CONSENT_MANAGEMENT,
            severity=Severity.WARNING,
            title="Cookie Consent Banner Needs Improvement (Article 7)",
            description=(
                f"Your cookie consent banner has {len(issues)} compliance issues. "
                f"Quality score: {score}/100. Issues: {'; '.join(issues)}."
            ),
            recommendation="Improve your consent banner to address: " + ", ".join(issues) + ".",
        ))

    if not analysis.has_reject_button:
        findings.append(Finding(
            type=FindingType.CONSENT_MANAGEMENT,
            severity=Severity.ERROR,
            title="No Reject Button in Consent Banner (Article 7)",
            description=(
                "Your consent banner does not have a reject/decline button. GDPR Article 7 "
                "requires consent to be 'freely given', so users must be able to refuse "
                "consent as easily as they can accept it."
            ),
            recommendation=(
                "Add a reject/decline button to your consent banner that is as visually "
                "prominent as the accept button."
            ),
        ))

    if not analysis.no_preticked_boxes:
        findings.append(Finding(
            type=FindingType.CONSENT_MANAGEMENT,
            severity=Severity.ERROR,
            title="Pre-Ticked Consent Boxes (Article 7)",
            description=(
                "Your consent banner has pre-ticked checkboxes for non-essential cookies. "
                "Pre-ticked boxes do not constitute valid consent under GDPR Article 7."
            ),
            recommendation=(
                "Remove pre-ticked boxes from your consent banner. Only 'strictly necessary' "
                "cookies can be enabled by default."
            ),
        ))
    return findings


class ConsentQualityAnalyzer:
    name = "consent_quality"

    def __init__(self, selectors=None):
        self.selectors = list(selectors or QUALITY_BANNER_SELECTORS)

    async def analyze(self, snapshot):
        try:
            signals = await snapshot.evaluate(
                _CONSENT_SIGNALS_JS, [self.selectors, QUALITY_MIN_WIDTH, QUALITY_MIN_HEIGHT]
            )
        except Exception as e:
            logger.warning("Consent quality analysis failed on %s: %s", snapshot.url, e)
            signals = None
        return analyze_consent_signals(signals or {})
