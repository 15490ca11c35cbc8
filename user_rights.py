"""
user_rights.py - Detect self-service data-subject rights features.

Looks at every link, button and form action on the landing page for
profile settings, data export, account deletion and DSAR mechanisms,
plus login/signup signals.  Missing rights are only reported as problems
when the site appears to have user accounts.
"""

import logging

import patterns
from models import Finding, FindingType, Severity, UserRightsDetection

logger = logging.getLogger(__name__)

# (flag, url field, pattern set, label)
RIGHTS_CHECKS = (
    ("has_profile_settings", "profile_settings_url", patterns.PROFILE_SETTINGS, "Profile/Account Settings"),
    ("has_data_export", "data_export_url", patterns.DATA_EXPORT, "Data Export"),
    ("has_account_deletion", "account_deletion_url", patterns.ACCOUNT_DELETION, "Account Deletion"),
    ("has_dsar_mechanism", "dsar_url", patterns.DSAR, "DSAR Request Form"),
)

_COLLECT_CONTROLS_JS = """
() => {
    const links = [];
    document.querySelectorAll('a').forEach((a) => {
        const text = (a.textContent || '').trim();
        const href = a.getAttribute('href') || '';
        if (text || href) {
            links.push({ text, href });
        }
    });
    const buttons = [];
    document.querySelectorAll("button, input[type='button'], input[type='submit']").forEach((b) => {
        const text = (b.textContent || '').trim() || b.getAttribute('value') || '';
        if (text) {
            buttons.push(text);
        }
    });
    const forms = [];
    document.querySelectorAll('form').forEach((f) => {
        const action = f.getAttribute('action') || '';
        if (action) {
            forms.push(action);
        }
    });
    return {
        links,
        buttons,
        forms,
        hasPasswordField: document.querySelector("input[type='password']") !== null,
    };
}
"""


def detect_rights(links, buttons=(), forms=(), has_password_field=False):
    """
    Classify collected page controls into a UserRightsDetection.

    Links are matched on "text href"; the last matching link's href is
    kept as the feature URL.  Buttons and form actions can set a flag
    but carry no URL.
    """
    flags = {flag: False for flag, _, _, _ in RIGHTS_CHECKS}
    urls = {url_field: None for _, url_field, _, _ in RIGHTS_CHECKS}
    has_auth = bool(has_password_field)

    for link in links:
        combined = f"{link.get('text', '')} {link.get('href', '')}"
        for flag, url_field, pattern_set, _ in RIGHTS_CHECKS:
            if pattern_set.matches(combined):
                flags[flag] = True
                urls[url_field] = link.get("href") or None
        if patterns.AUTHENTICATION.matches(combined):
            has_auth = True

    other_text = " ".join(list(buttons) + list(forms))
    for flag, _, pattern_set, _ in RIGHTS_CHECKS:
        if not flags[flag] and pattern_set.matches(other_text):
            flags[flag] = True
    if patterns.AUTHENTICATION.matches(other_text):
        has_auth = True

    return UserRightsDetection(has_authentication=has_auth, **flags, **urls)


def missing_rights(detection):
    return [label for flag, _, _, label in RIGHTS_CHECKS if not getattr(detection, flag)]


def user_rights_findings(detection):
    """
    Findings only apply to sites with account features.

    All four missing on a site with login → error; three or more missing
    → warning; one or two → info.  Sites with no account signals get a
    single informational note.
    """
    if not detection.has_account_features:
        return [Finding(
            type=FindingType.INFORMATIONAL,
            severity=Severity.INFO,
            title="No User Account Features Detected",
            description=(
                "We did not find login, signup or account management features on this page. "
                "If your service does let users create accounts, GDPR Articles 15-20 require "
                "ways for them to access, rectify, export and erase their data."
            ),
            recommendation=(
                "If users can register, provide profile settings, data export, account "
                "deletion and a data subject access request (DSAR) channel."
            ),
        )]

    missing = missing_rights(detection)
    if not missing:
        return []

    if detection.has_authentication and len(missing) == len(RIGHTS_CHECKS):
        severity = Severity.ERROR
    elif len(missing) >= 3:
        severity = Severity.WARNING
    else:
        severity = Severity.INFO

    return [Finding(
        type=FindingType.DATA_RECTIFICATION,
        severity=severity,
        title="Missing GDPR User Rights Features",
        description=(
            f"Your website appears to be missing {len(missing)} of {len(RIGHTS_CHECKS)} GDPR "
            f"user rights features: {', '.join(missing)}. GDPR gives users the right to access, "
            "rectify, port and erase their personal data (Articles 15, 16, 17, 20)."
        ),
        recommendation=(
            "Let users (1) view and update their profile (Article 16), (2) export their data in "
            "a machine-readable format (Article 20), (3) delete their account and data "
            "(Article 17), and (4) submit data subject access requests."
        ),
    )]


class UserRightsDetector:
    name = "user_rights"

    async def detect(self, snapshot):
        try:
            controls = await snapshot.evaluate(_COLLECT_CONTROLS_JS)
        except Exception as e:
            logger.warning("User rights detection failed on %s: %s", snapshot.url, e)
            return UserRightsDetection()
        controls = controls or {}
        return detect_rights(
            controls.get("links") or [],
            controls.get("buttons") or [],
            controls.get("forms") or [],
            controls.get("hasPasswordField", False),
        )
