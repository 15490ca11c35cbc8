"""
cookie_detector.py - Read the session's cookies and categorize them.
"""

import logging
from datetime import datetime, timezone

from knowledge_base import DEFAULT_KNOWLEDGE_BASE
from models import CookieCategory, DetectedCookie

logger = logging.getLogger(__name__)

# Used when nothing more specific is known about a cookie.
GENERIC_DESCRIPTIONS = {
    CookieCategory.NECESSARY: "Essential cookie required for the website to function",
    CookieCategory.ANALYTICS: "Cookie used to collect anonymous usage statistics",
    CookieCategory.MARKETING: "Cookie used for advertising or cross-site tracking",
    CookieCategory.FUNCTIONAL: "Cookie that remembers user preferences",
    CookieCategory.UNKNOWN: "Purpose of this cookie could not be determined",
}


def is_first_party(cookie_domain, site_host):
    """
    True if the cookie's domain is the site's host, a parent of it, or a
    subdomain of it.  A leading "." on the cookie domain is ignored.
    """
    domain = (cookie_domain or "").lower().lstrip(".")
    host = (site_host or "").lower()
    if not domain or not host:
        return False
    return (
        domain == host
        or host.endswith("." + domain)
        or domain.endswith("." + host)
    )


def _expiry(raw_expires):
    # Playwright reports session cookies as -1.
    if raw_expires is None or raw_expires <= 0:
        return None
    try:
        return datetime.fromtimestamp(raw_expires, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


class CookieDetector:
    """Categorizes cookies against a KnowledgeBase."""

    name = "cookies"

    def __init__(self, knowledge_base=None):
        self.knowledge_base = knowledge_base or DEFAULT_KNOWLEDGE_BASE

    def categorize(self, cookie_name):
        """
        Return (category, description) for a cookie name.

        Known-cookie table first (exact name, then the prefix before the
        first underscore), then the name pattern table, then substring
        heuristics.  Pure: the same name always gets the same answer.
        """
        info = self.knowledge_base.cookie_info(cookie_name)
        if info is not None:
            return info.category, info.description

        pattern = self.knowledge_base.match_cookie_pattern(cookie_name)
        if pattern is not None:
            return pattern.category, pattern.description

        heuristic = self.knowledge_base.cookie_heuristic(cookie_name)
        if heuristic is not None:
            return heuristic

        return CookieCategory.UNKNOWN, None

    def classify(self, raw_cookie, site_host):
        """Turn one Playwright cookie dict into a DetectedCookie."""
        name = raw_cookie.get("name", "")
        domain = raw_cookie.get("domain", "")
        third_party = not is_first_party(domain, site_host)

        category, description = self.categorize(name)
        if third_party and category == CookieCategory.UNKNOWN:
            category = CookieCategory.MARKETING
            description = f"Third-party marketing cookie from {domain}"
        if not description:
            description = GENERIC_DESCRIPTIONS[category]

        return DetectedCookie(
            name=name,
            domain=domain,
            path=raw_cookie.get("path") or "/",
            secure=bool(raw_cookie.get("secure", False)),
            http_only=bool(raw_cookie.get("httpOnly", False)),
            same_site=raw_cookie.get("sameSite"),
            expires=_expiry(raw_cookie.get("expires")),
            category=category,
            description=description,
            third_party=third_party,
        )

    async def detect(self, snapshot):
        """
        Categorize every cookie the session holds, in browser order.

        Duplicates are kept.  Returns [] if the cookie jar can't be read.
        """
        try:
            raw_cookies = await snapshot.cookies()
        except Exception as e:
            logger.warning("Cookie detection failed on %s: %s", snapshot.url, e)
            return []
        return [self.classify(raw, snapshot.target_host) for raw in raw_cookies]


def cookie_stats(cookies):
    """Counts per category plus first/third-party, secure and httpOnly totals."""
    stats = {
        "total": len(cookies),
        "first_party": 0,
        "third_party": 0,
        "secure": 0,
        "http_only": 0,
    }
    for category in CookieCategory:
        stats[category.value] = 0

    for cookie in cookies:
        stats[cookie.category.value] += 1
        if cookie.third_party:
            stats["third_party"] += 1
        else:
            stats["first_party"] += 1
        if cookie.secure:
            stats["secure"] += 1
        if cookie.http_only:
            stats["http_only"] += 1
    return stats
