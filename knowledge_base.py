"""
knowledge_base.py - Known cookies, trackers and inline SDK signatures.

Static lookup tables used by the cookie and script detectors.  They are
loaded once at import time and never mutated.  Detectors receive a
KnowledgeBase instance in their constructor, so tests can hand them a
small synthetic one instead of DEFAULT_KNOWLEDGE_BASE.
"""

import re
from dataclasses import dataclass

from models import CookieCategory, ScriptCategory


@dataclass(frozen=True)
class CookieInfo:
    """What we know about a well-known cookie name."""

    name: str
    provider: str
    category: CookieCategory
    purpose: str
    data_collected: tuple = ()
    duration: str = ""

    @property
    def description(self):
        return f"{self.purpose} ({self.provider})"


@dataclass(frozen=True)
class CookiePattern:
    """A name pattern with a category, for cookies not in KNOWN_COOKIES."""

    pattern: str
    category: CookieCategory
    description: str


@dataclass(frozen=True)
class TrackerPattern:
    """A URL substring that identifies a third-party script or pixel."""

    pattern: str
    name: str
    category: ScriptCategory


@dataclass(frozen=True)
class InlineSignature:
    """A regex over inline script text that fingerprints a known SDK."""

    name: str
    category: ScriptCategory
    regex: re.Pattern


# ────────────────────────────────────────────────────────────────────
# KNOWN COOKIES
#
# Exact cookie names → provider, purpose and category.  Sources are the
# public cookie databases (cookiedatabase.org and similar).
# ────────────────────────────────────────────────────────────────────

_C = CookieCategory

KNOWN_COOKIES = {info.name: info for info in [
    # Google Analytics
    CookieInfo("_ga", "Google Analytics", _C.ANALYTICS,
               "Used to distinguish unique users by assigning a randomly generated number as a client identifier",
               ("User ID", "Timestamp", "Page views", "Session duration"), "2 years"),
    CookieInfo("_gid", "Google Analytics", _C.ANALYTICS,
               "Used to distinguish users and store information about how visitors use a website",
               ("User ID", "Page views", "Events"), "24 hours"),
    CookieInfo("_gat", "Google Analytics", _C.ANALYTICS,
               "Used to throttle request rate to limit data collection on high traffic sites",
               ("Request rate",), "1 minute"),
    CookieInfo("__utma", "Google Analytics", _C.ANALYTICS,
               "Legacy Google Analytics visitor identifier", ("User ID", "Visit count"), "2 years"),
    CookieInfo("__utmz", "Google Analytics", _C.ANALYTICS,
               "Legacy Google Analytics traffic source", ("Referrer", "Campaign"), "6 months"),

    # Google Ads / DoubleClick
    CookieInfo("_gcl_au", "Google Ads", _C.MARKETING,
               "Used by Google AdSense to experiment with advertisement efficiency",
               ("Ad interactions", "Conversions"), "3 months"),
    CookieInfo("_gcl_aw", "Google Ads", _C.MARKETING,
               "Stores the click identifier of a Google Ads click",
               ("Ad click ID",), "3 months"),
    CookieInfo("IDE", "Google DoubleClick", _C.MARKETING,
               "Used by Google DoubleClick to register and report the website user's actions after viewing or clicking one of the advertiser's ads",
               ("User behavior", "Ad interactions", "Browsing history"), "1 year"),
    CookieInfo("test_cookie", "Google DoubleClick", _C.MARKETING,
               "Used to check if the user's browser supports cookies",
               ("Cookie support",), "15 minutes"),
    CookieInfo("NID", "Google", _C.MARKETING,
               "Stores Google preferences and advertising personalisation",
               ("Preferences", "Ad personalisation"), "6 months"),

    # Meta / Facebook
    CookieInfo("_fbp", "Facebook", _C.MARKETING,
               "Used by Facebook to deliver advertising products such as real time bidding from third party advertisers",
               ("User behavior", "Ad interactions", "Pixel ID"), "3 months"),
    CookieInfo("_fbc", "Facebook", _C.MARKETING,
               "Stores the last Facebook ad click identifier",
               ("Ad click ID",), "3 months"),
    CookieInfo("fr", "Facebook", _C.MARKETING,
               "Used by Facebook to deliver advertising and measure advertising effectiveness",
               ("User ID", "Browser info", "Ad interactions"), "3 months"),

    # TikTok
    CookieInfo("_ttp", "TikTok", _C.MARKETING,
               "Measures and improves the performance of TikTok advertising campaigns",
               ("User ID", "Ad interactions"), "13 months"),
    CookieInfo("_tt_enable_cookie", "TikTok", _C.MARKETING,
               "Checks whether the TikTok pixel may set cookies", ("Cookie support",), "13 months"),

    # Microsoft
    CookieInfo("_uetsid", "Microsoft Ads", _C.MARKETING,
               "Bing Ads session identifier for conversion tracking", ("Session ID",), "1 day"),
    CookieInfo("_uetvid", "Microsoft Ads", _C.MARKETING,
               "Bing Ads visitor identifier for conversion tracking", ("Visitor ID",), "13 months"),
    CookieInfo("MUID", "Microsoft", _C.MARKETING,
               "Identifies unique browsers across Microsoft sites for advertising",
               ("Browser ID",), "1 year"),
    CookieInfo("_clck", "Microsoft Clarity", _C.ANALYTICS,
               "Persists the Clarity user ID and preferences", ("User ID",), "1 year"),
    CookieInfo("_clsk", "Microsoft Clarity", _C.ANALYTICS,
               "Connects multiple page views into a single Clarity session recording",
               ("Session ID", "Page views"), "1 day"),

    # Other advertising / analytics platforms
    CookieInfo("_hjid", "Hotjar", _C.ANALYTICS,
               "Hotjar user identifier", ("User ID",), "1 year"),
    CookieInfo("hubspotutk", "HubSpot", _C.MARKETING,
               "Tracks a visitor's identity for HubSpot", ("Visitor ID",), "6 months"),
    CookieInfo("_pin_unauth", "Pinterest", _C.MARKETING,
               "Groups actions for users who cannot be identified by Pinterest", ("User ID",), "1 year"),
    CookieInfo("_scid", "Snapchat", _C.MARKETING,
               "Snap Pixel visitor identifier", ("User ID",), "13 months"),
    CookieInfo("_rdt_uuid", "Reddit", _C.MARKETING,
               "Reddit Pixel visitor identifier", ("User ID",), "3 months"),
    CookieInfo("_li_fat_id", "LinkedIn", _C.MARKETING,
               "LinkedIn Insight Tag member identifier", ("Member ID",), "30 days"),
    CookieInfo("personalization_id", "Twitter/X", _C.MARKETING,
               "Tracks activities on and off Twitter for personalised ads", ("User ID",), "2 years"),
    CookieInfo("__kla_id", "Klaviyo", _C.MARKETING,
               "Klaviyo visitor identifier for email marketing", ("Visitor ID",), "2 years"),

    # YouTube
    CookieInfo("VISITOR_INFO1_LIVE", "YouTube", _C.MARKETING,
               "Tries to estimate the users' bandwidth on pages with integrated YouTube videos",
               ("Bandwidth", "Video views"), "179 days"),
    CookieInfo("YSC", "YouTube", _C.MARKETING,
               "Registers a unique ID to keep statistics of what videos from YouTube the user has seen",
               ("Video views", "User preferences"), "Session"),

    # Session / framework cookies
    CookieInfo("PHPSESSID", "PHP", _C.NECESSARY,
               "Preserves user session state across page requests", ("Session ID",), "Session"),
    CookieInfo("JSESSIONID", "Java", _C.NECESSARY,
               "Used by sites written in JSP to maintain session state", ("Session ID",), "Session"),
    CookieInfo("ASP.NET_SessionId", "Microsoft ASP.NET", _C.NECESSARY,
               "Used to maintain an anonymous user session by the server", ("Session ID",), "Session"),
    CookieInfo("__cf_bm", "Cloudflare", _C.NECESSARY,
               "Distinguishes humans from bots for Cloudflare bot management", ("Bot score",), "30 minutes"),

    # Consent-management cookies
    CookieInfo("cookie_consent", "Website", _C.NECESSARY,
               "Stores the user's cookie consent preferences", ("Consent preferences",), "1 year"),
    CookieInfo("cookieyes-consent", "CookieYes", _C.NECESSARY,
               "Stores cookie consent preferences", ("Consent preferences",), "1 year"),
    CookieInfo("OptanonConsent", "OneTrust", _C.NECESSARY,
               "Stores the categories the visitor has consented to", ("Consent preferences",), "1 year"),
    CookieInfo("OptanonAlertBoxClosed", "OneTrust", _C.NECESSARY,
               "Records that the consent banner was dismissed", ("Consent state",), "1 year"),
    CookieInfo("CookieConsent", "Cookiebot", _C.NECESSARY,
               "Stores the user's cookie consent state for the current domain", ("Consent preferences",), "1 year"),
]}


# ────────────────────────────────────────────────────────────────────
# COOKIE NAME PATTERNS
#
# Matched case-insensitively, first by exact name and then by prefix.
# Only patterns that start or end with "_" take part in the prefix pass,
# otherwise "fr" would match "frontend_session".
# ────────────────────────────────────────────────────────────────────

COOKIE_PATTERNS = (
    # Necessary
    CookiePattern("session", _C.NECESSARY, "Session management"),
    CookiePattern("csrf", _C.NECESSARY, "Security token"),
    CookiePattern("xsrf", _C.NECESSARY, "Security token"),
    CookiePattern("auth", _C.NECESSARY, "Authentication"),
    CookiePattern("token", _C.NECESSARY, "Authentication token"),
    CookiePattern("login", _C.NECESSARY, "Login state"),
    CookiePattern("consent", _C.NECESSARY, "Cookie consent preferences"),
    CookiePattern("gdpr", _C.NECESSARY, "GDPR consent"),
    CookiePattern("cookieconsent", _C.NECESSARY, "Cookie consent preferences"),
    # Analytics
    CookiePattern("_ga", _C.ANALYTICS, "Google Analytics user identifier"),
    CookiePattern("_gid", _C.ANALYTICS, "Google Analytics session identifier"),
    CookiePattern("_gat", _C.ANALYTICS, "Google Analytics throttling"),
    CookiePattern("__utm", _C.ANALYTICS, "Google Analytics (legacy)"),
    CookiePattern("_hjSession", _C.ANALYTICS, "Hotjar session"),
    CookiePattern("_hj", _C.ANALYTICS, "Hotjar analytics"),
    CookiePattern("mp_", _C.ANALYTICS, "Mixpanel tracking"),
    CookiePattern("ajs_", _C.ANALYTICS, "Segment analytics"),
    CookiePattern("amp_", _C.ANALYTICS, "Amplitude analytics"),
    CookiePattern("_pk_", _C.ANALYTICS, "Matomo analytics"),
    # Marketing
    CookiePattern("_fbp", _C.MARKETING, "Facebook Pixel"),
    CookiePattern("_fbc", _C.MARKETING, "Facebook click identifier"),
    CookiePattern("fr", _C.MARKETING, "Facebook advertising"),
    CookiePattern("_gcl_", _C.MARKETING, "Google Ads conversion"),
    CookiePattern("_uet", _C.MARKETING, "Bing Ads"),
    CookiePattern("_tt_", _C.MARKETING, "TikTok advertising"),
    CookiePattern("_sc", _C.MARKETING, "Snapchat advertising"),
    CookiePattern("__hs", _C.MARKETING, "HubSpot tracking"),
    # Functional
    CookiePattern("lang", _C.FUNCTIONAL, "Language preference"),
    CookiePattern("locale", _C.FUNCTIONAL, "Locale preference"),
    CookiePattern("timezone", _C.FUNCTIONAL, "Timezone preference"),
    CookiePattern("theme", _C.FUNCTIONAL, "Theme preference"),
    CookiePattern("preferences", _C.FUNCTIONAL, "User preferences"),
)

# Substring heuristics for anything the tables above don't know.
# Checked in order; the first hit wins.
COOKIE_HEURISTICS = (
    (("session", "sess"), _C.NECESSARY, "Session cookie"),
    (("auth", "login", "user"), _C.NECESSARY, "Authentication cookie"),
    (("csrf", "xsrf", "token"), _C.NECESSARY, "Security cookie"),
    (("analytics", "track"), _C.ANALYTICS, "Analytics cookie"),
    (("ad", "marketing", "pixel"), _C.MARKETING, "Marketing cookie"),
    (("pref", "setting", "lang"), _C.FUNCTIONAL, "Preference cookie"),
)


# ────────────────────────────────────────────────────────────────────
# KNOWN TRACKER URLS
#
# If a script/pixel URL contains one of these substrings, it belongs to
# that tracker.  Order matters: more specific patterns come first
# (e.g. "connect.facebook.net" before "facebook.net").
# ────────────────────────────────────────────────────────────────────

_S = ScriptCategory

TRACKER_PATTERNS = (
    # Google
    TrackerPattern("google-analytics.com", "Google Analytics", _S.ANALYTICS),
    TrackerPattern("googletagmanager.com", "Google Tag Manager", _S.ANALYTICS),
    TrackerPattern("gtag", "Google Analytics (gtag)", _S.ANALYTICS),
    TrackerPattern("/ga.js", "Google Analytics (legacy)", _S.ANALYTICS),
    TrackerPattern("/analytics.js", "Google Analytics", _S.ANALYTICS),
    TrackerPattern("googlesyndication.com", "Google AdSense", _S.MARKETING),
    TrackerPattern("googleadservices.com", "Google Ads", _S.MARKETING),
    TrackerPattern("doubleclick.net", "DoubleClick", _S.MARKETING),
    # Meta / Facebook
    TrackerPattern("facebook.com/tr", "Facebook Pixel", _S.MARKETING),
    TrackerPattern("pixel.facebook.com", "Facebook Pixel", _S.MARKETING),
    TrackerPattern("fbevents.js", "Facebook Pixel", _S.MARKETING),
    TrackerPattern("connect.facebook.net", "Facebook Connect", _S.SOCIAL),
    TrackerPattern("facebook.net", "Facebook SDK", _S.SOCIAL),
    # Microsoft
    TrackerPattern("clarity.ms", "Microsoft Clarity", _S.ANALYTICS),
    TrackerPattern("bat.bing.com", "Bing Ads", _S.MARKETING),
    TrackerPattern("bing.com", "Bing Ads", _S.MARKETING),
    # Analytics & session recording
    TrackerPattern("hotjar.com", "Hotjar", _S.ANALYTICS),
    TrackerPattern("mixpanel.com", "Mixpanel", _S.ANALYTICS),
    TrackerPattern("segment.com", "Segment", _S.ANALYTICS),
    TrackerPattern("segment.io", "Segment", _S.ANALYTICS),
    TrackerPattern("amplitude.com", "Amplitude", _S.ANALYTICS),
    TrackerPattern("heap.io", "Heap Analytics", _S.ANALYTICS),
    TrackerPattern("heapanalytics.com", "Heap Analytics", _S.ANALYTICS),
    TrackerPattern("fullstory.com", "FullStory", _S.ANALYTICS),
    TrackerPattern("mouseflow.com", "Mouseflow", _S.ANALYTICS),
    TrackerPattern("crazyegg.com", "Crazy Egg", _S.ANALYTICS),
    TrackerPattern("plausible.io", "Plausible Analytics", _S.ANALYTICS),
    TrackerPattern("matomo", "Matomo", _S.ANALYTICS),
    TrackerPattern("analytics.tiktok.com", "TikTok Pixel", _S.MARKETING),
    TrackerPattern("business-api.tiktok.com", "TikTok Pixel", _S.MARKETING),
    # Marketing automation & chat
    TrackerPattern("hubspot.com", "HubSpot", _S.MARKETING),
    TrackerPattern("hs-scripts.com", "HubSpot", _S.MARKETING),
    TrackerPattern("marketo.com", "Marketo", _S.MARKETING),
    TrackerPattern("pardot.com", "Pardot", _S.MARKETING),
    TrackerPattern("mailchimp.com", "Mailchimp", _S.MARKETING),
    TrackerPattern("klaviyo.com", "Klaviyo", _S.MARKETING),
    TrackerPattern("attn.tv", "Attentive", _S.MARKETING),
    TrackerPattern("intercom.io", "Intercom", _S.MARKETING),
    TrackerPattern("drift.com", "Drift", _S.MARKETING),
    TrackerPattern("crisp.chat", "Crisp", _S.FUNCTIONAL),
    TrackerPattern("tawk.to", "Tawk.to", _S.FUNCTIONAL),
    TrackerPattern("zendesk.com", "Zendesk", _S.FUNCTIONAL),
    # Advertising networks
    TrackerPattern("px.ads.linkedin.com", "LinkedIn Insight Tag", _S.MARKETING),
    TrackerPattern("snap.licdn.com", "LinkedIn Insight Tag", _S.MARKETING),
    TrackerPattern("ct.pinterest.com", "Pinterest Tag", _S.MARKETING),
    TrackerPattern("sc-static.net", "Snap Pixel", _S.MARKETING),
    TrackerPattern("tr.snapchat.com", "Snap Pixel", _S.MARKETING),
    TrackerPattern("ads.reddit.com", "Reddit Pixel", _S.MARKETING),
    TrackerPattern("alb.reddit.com", "Reddit Pixel", _S.MARKETING),
    TrackerPattern("analytics.twitter.com", "Twitter Ads", _S.MARKETING),
    TrackerPattern("static.ads-twitter.com", "Twitter Ads", _S.MARKETING),
    TrackerPattern("adroll.com", "AdRoll", _S.MARKETING),
    TrackerPattern("criteo.com", "Criteo", _S.MARKETING),
    TrackerPattern("criteo.net", "Criteo", _S.MARKETING),
    TrackerPattern("taboola.com", "Taboola", _S.MARKETING),
    TrackerPattern("outbrain.com", "Outbrain", _S.MARKETING),
    # Social widgets
    TrackerPattern("twitter.com/widgets", "Twitter Widgets", _S.SOCIAL),
    TrackerPattern("platform.twitter.com", "Twitter Platform", _S.SOCIAL),
    TrackerPattern("linkedin.com", "LinkedIn", _S.SOCIAL),
    TrackerPattern("pinterest.com", "Pinterest", _S.SOCIAL),
)

# CDN-hosted files with these words in the path are treated as analytics
# even when the vendor is unknown.
_GENERIC_TRACKING_WORDS = ("analytics", "tracking", "pixel")


# ────────────────────────────────────────────────────────────────────
# INLINE SDK SIGNATURES
#
# Snippets that the well-known analytics / pixel / chat SDKs paste into
# the page.  An inline script that matches none of these is not reported.
# ────────────────────────────────────────────────────────────────────

INLINE_SIGNATURES = (
    InlineSignature("Google Analytics", _S.ANALYTICS,
                    re.compile(r"gtag\(|\bga\(|google-analytics|\bua-\d{4,}-\d+", re.I)),
    InlineSignature("Google Tag Manager", _S.ANALYTICS,
                    re.compile(r"gtm\.js|googletagmanager", re.I)),
    InlineSignature("Facebook Pixel", _S.MARKETING,
                    re.compile(r"fbq\(|(?=.*facebook)(?=.*pixel)", re.I | re.S)),
    InlineSignature("Hotjar", _S.ANALYTICS,
                    re.compile(r"hotjar|_hjsettings", re.I)),
    InlineSignature("Microsoft Clarity", _S.ANALYTICS,
                    re.compile(r"clarity\.ms|clarity\(", re.I)),
    InlineSignature("Mixpanel", _S.ANALYTICS,
                    re.compile(r"mixpanel", re.I)),
    InlineSignature("Segment", _S.ANALYTICS,
                    re.compile(r"(?=.*segment)(?=.*analytics)", re.I | re.S)),
    InlineSignature("TikTok Pixel", _S.MARKETING,
                    re.compile(r"ttq\.load|analytics\.tiktok\.com", re.I)),
    InlineSignature("LinkedIn Insight Tag", _S.MARKETING,
                    re.compile(r"_linkedin_partner_id", re.I)),
    InlineSignature("Intercom", _S.MARKETING,
                    re.compile(r"intercom", re.I)),
    InlineSignature("HubSpot", _S.MARKETING,
                    re.compile(r"hubspot|hs-scripts", re.I)),
)


# ────────────────────────────────────────────────────────────────────
# LOOKUPS
# ────────────────────────────────────────────────────────────────────

class KnowledgeBase:
    """Read-only lookups over the tables above (or a substitute set)."""

    def __init__(
        self,
        known_cookies=None,
        cookie_patterns=None,
        cookie_heuristics=None,
        tracker_patterns=None,
        inline_signatures=None,
    ):
        self.known_cookies = dict(KNOWN_COOKIES if known_cookies is None else known_cookies)
        self.cookie_patterns = tuple(COOKIE_PATTERNS if cookie_patterns is None else cookie_patterns)
        self.cookie_heuristics = tuple(COOKIE_HEURISTICS if cookie_heuristics is None else cookie_heuristics)
        self.tracker_patterns = tuple(TRACKER_PATTERNS if tracker_patterns is None else tracker_patterns)
        self.inline_signatures = tuple(INLINE_SIGNATURES if inline_signatures is None else inline_signatures)

    def cookie_info(self, cookie_name):
        """
        Look a cookie up by exact name, then by its prefix before the
        first underscore (for names with dynamic suffixes).

        Returns a CookieInfo or None.
        """
        info = self.known_cookies.get(cookie_name)
        if info is not None:
            return info
        base_name = cookie_name.split("_")[0]
        if base_name and base_name != cookie_name:
            return self.known_cookies.get(base_name)
        return None

    def match_cookie_pattern(self, cookie_name):
        """Return the CookiePattern for a name (exact, then prefix), or None."""
        lower = cookie_name.lower()
        for entry in self.cookie_patterns:
            if lower == entry.pattern.lower():
                return entry
        for entry in self.cookie_patterns:
            pattern = entry.pattern.lower()
            if not (pattern.startswith("_") or pattern.endswith("_")):
                continue
            if lower.startswith(pattern):
                return entry
        return None

    def cookie_heuristic(self, cookie_name):
        """Return (category, description) from substring rules, or None."""
        lower = cookie_name.lower()
        for needles, category, description in self.cookie_heuristics:
            if any(needle in lower for needle in needles):
                return category, description
        return None

    def match_tracker(self, url):
        """
        Identify a tracker from a script or pixel URL.

        Returns (name, category); name is None and category UNKNOWN when
        nothing matched.
        """
        lower = url.lower()
        for entry in self.tracker_patterns:
            if entry.pattern.lower() in lower:
                return entry.name, entry.category
        if "cdn" in lower and any(word in lower for word in _GENERIC_TRACKING_WORDS):
            return None, ScriptCategory.ANALYTICS
        return None, ScriptCategory.UNKNOWN

    def match_inline(self, content):
        """Identify a known SDK in an inline script body.  Same return shape as match_tracker."""
        for signature in self.inline_signatures:
            if signature.regex.search(content):
                return signature.name, signature.category
        return None, ScriptCategory.UNKNOWN


DEFAULT_KNOWLEDGE_BASE = KnowledgeBase()
