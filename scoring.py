"""
scoring.py - Reduce a scan's detector outputs to a 0-100 compliance score.

Five buckets of up to 20 points each:

    privacy policy        found, scaled by policy completeness
    cookie banner         found, scaled by consent quality
    cookie categorization share of cookies with a known category
    tracking disclosure   trackers covered by a policy and/or a banner
    user rights           5 points per rights feature, account sites only

minus 5 points per error finding.  A site with no tracking cookies, no
tracking scripts and no errors never scores below 30.
"""

from models import (
    TRACKING_COOKIE_CATEGORIES,
    TRACKING_SCRIPT_CATEGORIES,
    ComplianceScoreBreakdown,
    CookieCategory,
    Severity,
)

BUCKET_MAX = 20
ERROR_PENALTY = 5
CLEAN_SITE_FLOOR = 30
RIGHTS_POINTS = 5

# Tracking-disclosure points by how many of (policy, banner) exist.
DISCLOSURE_POINTS = {2: 20, 1: 12, 0: 4}


def _scaled(found, quality):
    if not found:
        return 0
    if quality is None:
        return BUCKET_MAX
    return round(BUCKET_MAX * quality / 100)


def tracking_cookies(cookies):
    return [c for c in cookies if c.category in TRACKING_COOKIE_CATEGORIES]


def tracking_scripts(scripts):
    return [s for s in scripts if s.category in TRACKING_SCRIPT_CATEGORIES]


def error_findings(findings):
    return [f for f in findings if f.severity == Severity.ERROR]


def score_breakdown(
    has_privacy_policy,
    has_cookie_banner,
    cookies,
    scripts,
    findings,
    user_rights=None,
    privacy_policy_score=None,
    consent_quality_score=None,
):
    """Compute every bucket, the penalty and the clamped, floored total."""
    privacy_policy = _scaled(has_privacy_policy, privacy_policy_score)
    cookie_banner = _scaled(has_cookie_banner, consent_quality_score)

    if cookies:
        categorized = [c for c in cookies if c.category != CookieCategory.UNKNOWN]
        cookie_categorization = round(BUCKET_MAX * len(categorized) / len(cookies))
    else:
        cookie_categorization = BUCKET_MAX

    trackers = tracking_scripts(scripts)
    if not trackers:
        tracking_disclosure = BUCKET_MAX
    else:
        tracking_disclosure = DISCLOSURE_POINTS[int(has_privacy_policy) + int(has_cookie_banner)]

    if user_rights is not None and user_rights.has_account_features:
        rights = RIGHTS_POINTS * user_rights.rights_present
    else:
        rights = 0

    errors = error_findings(findings)
    penalty = ERROR_PENALTY * len(errors)

    raw_total = (
        privacy_policy + cookie_banner + cookie_categorization + tracking_disclosure + rights - penalty
    )
    floor_applies = not tracking_cookies(cookies) and not trackers and not errors
    total = max(CLEAN_SITE_FLOOR, raw_total) if floor_applies else raw_total
    total = max(0, min(100, total))

    return ComplianceScoreBreakdown(
        privacy_policy=privacy_policy,
        cookie_banner=cookie_banner,
        cookie_categorization=cookie_categorization,
        tracking_disclosure=tracking_disclosure,
        user_rights=rights,
        penalty=penalty,
        total=total,
        floor_applied=floor_applies and raw_total < CLEAN_SITE_FLOOR,
    )


def calculate_score(*args, **kwargs):
    """Just the final 0-100 number from score_breakdown()."""
    return score_breakdown(*args, **kwargs).total


def compliance_level(score):
    """Return (level, label) for a score."""
    if score >= 80:
        return "excellent", "Excellent"
    if score >= 60:
        return "good", "Good"
    if score >= 40:
        return "fair", "Fair"
    return "poor", "Needs Improvement"


def generate_recommendations(has_privacy_policy, has_cookie_banner, cookies, scripts):
    recommendations = []

    if not has_privacy_policy:
        recommendations.append(
            "Add a privacy policy page that explains how you collect and process user data."
        )
    if not has_cookie_banner:
        recommendations.append(
            "Implement a cookie consent banner to obtain user consent before setting "
            "non-essential cookies."
        )

    unknown = [c for c in cookies if c.category == CookieCategory.UNKNOWN]
    if unknown:
        recommendations.append(
            f"Review and categorize {len(unknown)} unidentified cookies on your website."
        )

    if tracking_scripts(scripts) and not has_cookie_banner:
        recommendations.append("Ensure tracking scripts are only loaded after obtaining user consent.")

    if tracking_cookies(cookies):
        recommendations.append(
            "Document all third-party cookies in your cookie policy with their purposes and "
            "retention periods."
        )
    return recommendations
