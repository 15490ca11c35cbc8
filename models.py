"""
models.py - Data records produced by a compliance scan.

Every record here is immutable. A scan builds its cookies, scripts and
findings once, freezes them into a ScanResult, and hands that result to
whoever persists it. Nothing is cached or shared between scans.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from urllib.parse import urlparse

# ────────────────────────────────────────────────────────────────────
# CONFIGURATION
# ────────────────────────────────────────────────────────────────────

# Navigation timeout (seconds) when the caller doesn't supply one.
DEFAULT_TIMEOUT = 60

# A realistic desktop Chrome user agent.  Some sites serve a different
# (often banner-less) page to headless or unknown agents.
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# Inline script bodies are truncated to this many characters.
INLINE_CONTENT_LIMIT = 1000


# ────────────────────────────────────────────────────────────────────
# ENUMERATIONS
# ────────────────────────────────────────────────────────────────────

class CookieCategory(str, Enum):
    NECESSARY = "necessary"
    ANALYTICS = "analytics"
    MARKETING = "marketing"
    FUNCTIONAL = "functional"
    UNKNOWN = "unknown"


class ScriptCategory(str, Enum):
    ANALYTICS = "analytics"
    MARKETING = "marketing"
    FUNCTIONAL = "functional"
    SOCIAL = "social"
    UNKNOWN = "unknown"


class ScriptType(str, Enum):
    INLINE = "inline"
    EXTERNAL = "external"


class FindingType(str, Enum):
    COOKIE_BANNER = "cookie_banner"
    PRIVACY_POLICY = "privacy_policy"
    TRACKING_SCRIPT = "tracking_script"
    THIRD_PARTY_COOKIE = "third_party_cookie"
    CONSENT_MANAGEMENT = "consent_management"
    DATA_RECTIFICATION = "data_rectification"
    ACCOUNT_DELETION = "account_deletion"
    USER_PROFILE_SETTINGS = "user_profile_settings"
    INFORMATIONAL = "informational"


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


# Cookie / script categories that count as tracking.
TRACKING_COOKIE_CATEGORIES = (CookieCategory.ANALYTICS, CookieCategory.MARKETING)
TRACKING_SCRIPT_CATEGORIES = (ScriptCategory.ANALYTICS, ScriptCategory.MARKETING)


def normalize_url(url):
    """Make sure the URL starts with http:// or https://."""
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        return "https://" + url
    return url


# ────────────────────────────────────────────────────────────────────
# SCAN INPUT
# ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScanRequest:
    """One scan of one page.  Timeout is in seconds."""

    url: str
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    wait_for_network_idle: bool = True

    @classmethod
    def create(cls, url, timeout=None, user_agent=None, wait_for_network_idle=True):
        """
        Build a validated request.

        Adds https:// to scheme-less URLs and fills in defaults for any
        option left as None.  Raises ValueError for a URL without a host
        or a non-positive timeout.
        """
        url = normalize_url(url)
        if not urlparse(url).hostname:
            raise ValueError(f"Not a scannable URL: {url!r}")
        if timeout is None:
            timeout = DEFAULT_TIMEOUT
        if timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {timeout}")
        return cls(
            url=url,
            timeout=float(timeout),
            user_agent=user_agent or DEFAULT_USER_AGENT,
            wait_for_network_idle=wait_for_network_idle,
        )

    @property
    def hostname(self):
        return (urlparse(self.url).hostname or "").lower()


# ────────────────────────────────────────────────────────────────────
# DETECTED ITEMS
# ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DetectedCookie:
    name: str
    domain: str
    path: str = "/"
    secure: bool = False
    http_only: bool = False
    same_site: Optional[str] = None
    expires: Optional[datetime] = None
    category: CookieCategory = CookieCategory.UNKNOWN
    description: Optional[str] = None
    third_party: bool = False


@dataclass(frozen=True)
class DetectedScript:
    """An external script/pixel URL or a truncated inline body, never both."""

    type: ScriptType
    url: Optional[str] = None
    content: Optional[str] = None
    category: ScriptCategory = ScriptCategory.UNKNOWN
    name: Optional[str] = None

    def __post_init__(self):
        if (self.url is None) == (self.content is None):
            raise ValueError("A script has either a url or inline content")


@dataclass(frozen=True)
class Finding:
    type: FindingType
    severity: Severity
    title: str
    description: str
    recommendation: Optional[str] = None


# ────────────────────────────────────────────────────────────────────
# DETECTOR OUTPUTS
#
# Absence is a value, not an exception: every detector returns one of
# these with found=False (or all-false flags) when it sees nothing.
# ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PolicyLinkDetection:
    found: bool
    url: Optional[str] = None
    finding: Optional[Finding] = None
    terms_of_service_url: Optional[str] = None
    cookie_policy_url: Optional[str] = None


@dataclass(frozen=True)
class PolicyContentAnalysis:
    has_controller_identity: bool = False
    has_dpo_contact: bool = False
    has_processing_purposes: bool = False
    has_legal_basis: bool = False
    has_data_categories: bool = False
    has_retention_periods: bool = False
    has_data_recipients: bool = False
    has_international_transfers: bool = False
    has_user_rights: bool = False
    has_complaint_right: bool = False
    has_data_source: bool = False
    has_automated_decisions: bool = False
    completeness_score: int = 0
    analyzed_url: Optional[str] = None


@dataclass(frozen=True)
class BannerDetection:
    found: bool
    strategy: Optional[str] = None
    selector: Optional[str] = None
    finding: Optional[Finding] = None


@dataclass(frozen=True)
class ConsentQualityAnalysis:
    has_reject_button: bool = False
    reject_as_prominent_as_accept: bool = False
    has_granular_consent: bool = False
    no_preticked_boxes: bool = True
    has_clear_language: bool = False
    has_withdraw_option: bool = False
    quality_score: int = 0


@dataclass(frozen=True)
class UserRightsDetection:
    has_profile_settings: bool = False
    has_data_export: bool = False
    has_account_deletion: bool = False
    has_dsar_mechanism: bool = False
    has_authentication: bool = False
    profile_settings_url: Optional[str] = None
    data_export_url: Optional[str] = None
    account_deletion_url: Optional[str] = None
    dsar_url: Optional[str] = None

    @property
    def rights_present(self):
        return sum([
            self.has_profile_settings,
            self.has_data_export,
            self.has_account_deletion,
            self.has_dsar_mechanism,
        ])

    @property
    def has_account_features(self):
        return self.rights_present > 0 or self.has_authentication


@dataclass(frozen=True)
class AdditionalComplianceChecks:
    has_age_verification: bool = False
    has_parental_consent: bool = False
    processes_sensitive_data: bool = False
    has_explicit_consent: bool = False
    sensitive_data_categories: tuple = ()
    has_automated_decisions: bool = False
    discloses_automation: bool = False
    has_legal_basis_statement: bool = False


# ────────────────────────────────────────────────────────────────────
# SCORE + RESULT
# ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ComplianceScoreBreakdown:
    """Five 0-20 buckets, the error penalty, and the floor-adjusted total."""

    privacy_policy: int
    cookie_banner: int
    cookie_categorization: int
    tracking_disclosure: int
    user_rights: int
    penalty: int
    total: int
    floor_applied: bool = False

    @property
    def raw_total(self):
        return (
            self.privacy_policy
            + self.cookie_banner
            + self.cookie_categorization
            + self.tracking_disclosure
            + self.user_rights
            - self.penalty
        )


def _utcnow():
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ScanResult:
    """
    The single artifact a scan hands to the record store.

    Either a full successful result or a failure record (success=False,
    score 0, empty lists, error populated).  duration is in seconds.
    """

    success: bool
    url: str
    cookies: tuple = ()
    scripts: tuple = ()
    findings: tuple = ()
    has_privacy_policy: bool = False
    has_cookie_banner: bool = False
    privacy_policy_score: Optional[int] = None
    consent_quality_score: Optional[int] = None
    score: int = 0
    error: Optional[str] = None
    scanned_at: datetime = field(default_factory=_utcnow)
    duration: float = 0.0
    privacy_policy_url: Optional[str] = None
    terms_of_service_url: Optional[str] = None
    cookie_policy_url: Optional[str] = None
    breakdown: Optional[ComplianceScoreBreakdown] = None
    user_rights: Optional[UserRightsDetection] = None
    policy_analysis: Optional[PolicyContentAnalysis] = None
    consent_analysis: Optional[ConsentQualityAnalysis] = None
    additional_checks: Optional[AdditionalComplianceChecks] = None
    recommendations: tuple = ()

    @classmethod
    def failed(cls, url, error, duration=0.0):
        return cls(success=False, url=url, score=0, error=str(error), duration=duration)

    def to_dict(self):
        """JSON-safe dict: enums become their values, datetimes ISO strings."""
        return _jsonable(asdict(self))


def _jsonable(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value
