"""
scanner.py - GDPR compliance scanner.

Loads a website once in headless Chromium, runs the detectors against the
page, and reduces what they find to a 0-100 compliance score:

    cookies          every cookie the page sets, categorized
    scripts          analytics / marketing / social trackers and pixels
    privacy policy   is there a link, and does the policy cover Art. 13-14
    cookie banner    is there one, and does it meet Art. 7
    user rights      profile / export / deletion / DSAR self-service
    additional       Art. 6, 8, 9 and 22 mentions on the page

Usage:
    python scanner.py https://example.com https://other.com
    python scanner.py --file urls.txt
    python scanner.py --json example.com
"""

import argparse
import asyncio
import json
import logging
import multiprocessing
import os
import sys
import time
from queue import Empty

from additional_compliance import AdditionalComplianceDetector, additional_findings
from banner_detector import BannerDetector, ConsentQualityAnalyzer, consent_quality_findings
from browser import BrowserSession
from cookie_detector import CookieDetector, cookie_stats
from models import (
    TRACKING_COOKIE_CATEGORIES,
    Finding,
    FindingType,
    ScanRequest,
    ScanResult,
    Severity,
)
from policy_detector import PolicyContentAnalyzer, PolicyLinkDetector, policy_content_findings
from script_detector import ScriptDetector, script_stats
from scoring import (
    compliance_level,
    generate_recommendations,
    score_breakdown,
    tracking_scripts,
)
from user_rights import UserRightsDetector, user_rights_findings

logger = logging.getLogger(__name__)

# ────────────────────────────────────────────────────────────────────
# CONFIGURATION
# ────────────────────────────────────────────────────────────────────

# Seconds to wait after the landing page loads, for late banners and
# deferred tracking scripts.
POST_LOAD_DELAY = 2.0

# Maximum time (seconds) for the ENTIRE scan of a single site, enforced
# by killing the scan process.
MAX_SCAN_TIME = int(os.environ.get("PRIVACY_SCANNER_MAX_SCAN_TIME", "180"))

TOTAL_STEPS = 8


def _third_party_cookie_finding(tracking_cookies):
    return Finding(
        type=FindingType.THIRD_PARTY_COOKIE,
        severity=Severity.ERROR,
        title="Third-Party Cookies Without Consent",
        description=(
            f"Your website sets {len(tracking_cookies)} third-party/tracking cookies without "
            "obtaining user consent first."
        ),
        recommendation=(
            "Implement a cookie consent mechanism that blocks these cookies until the user "
            "provides consent."
        ),
    )


def _tracking_scripts_finding(trackers):
    names = []
    for script in trackers:
        if script.name and script.name not in names:
            names.append(script.name)
    return Finding(
        type=FindingType.TRACKING_SCRIPT,
        severity=Severity.INFO,
        title=f"{len(trackers)} Tracking Scripts Detected",
        description=(
            f"Found tracking scripts: {', '.join(names) or 'Various trackers'}. These should be "
            "disclosed in your privacy policy."
        ),
        recommendation=(
            "Ensure all tracking scripts are listed in your privacy policy and loaded only after "
            "user consent."
        ),
    )


class Scanner:
    """
    Runs one compliance scan per call to scan().

    Every collaborator can be swapped through the constructor; tests pass
    a fake session_factory so no browser is needed.  session_factory is
    called with user_agent= and must return an async context manager
    whose value has open(url, timeout, wait_for_network_idle, settle_delay).
    """

    def __init__(
        self,
        session_factory=BrowserSession,
        cookie_detector=None,
        script_detector=None,
        policy_detector=None,
        banner_detector=None,
        user_rights_detector=None,
        policy_analyzer=None,
        consent_analyzer=None,
        additional_detector=None,
        post_load_delay=POST_LOAD_DELAY,
    ):
        self.session_factory = session_factory
        self.cookie_detector = cookie_detector or CookieDetector()
        self.script_detector = script_detector or ScriptDetector()
        self.policy_detector = policy_detector or PolicyLinkDetector()
        self.banner_detector = banner_detector or BannerDetector()
        self.user_rights_detector = user_rights_detector or UserRightsDetector()
        self.policy_analyzer = policy_analyzer or PolicyContentAnalyzer()
        self.consent_analyzer = consent_analyzer or ConsentQualityAnalyzer()
        self.additional_detector = additional_detector or AdditionalComplianceDetector()
        self.post_load_delay = post_load_delay

    async def _timed(self, name, coro):
        started = time.monotonic()
        try:
            return await coro
        finally:
            logger.debug("%s finished in %.2fs", name, time.monotonic() - started)

    async def scan(self, request, status_callback=None):
        """
        Scan request.url and return a ScanResult.

        Never raises: launch and navigation failures (or anything else
        that escapes the pipeline) come back as ScanResult.failed().

        status_callback, if given, is called as
        status_callback(message, step, total_steps, elapsed_seconds).
        """
        started = time.monotonic()

        def report_status(message, step):
            elapsed = time.monotonic() - started
            logger.debug("[%d/%d] %s", step, TOTAL_STEPS, message)
            if status_callback:
                try:
                    status_callback(message, step, TOTAL_STEPS, elapsed)
                except Exception as e:
                    logger.debug("Status callback raised: %s", e)

        logger.info("Starting scan of %s", request.url)
        try:
            report_status(f"Launching browser for {request.hostname}", 1)
            async with self.session_factory(user_agent=request.user_agent) as session:
                result = await self._run(session, request, report_status, started)
        except Exception as e:
            duration = time.monotonic() - started
            logger.error("Scan of %s failed after %.1fs: %s", request.url, duration, e)
            report_status(f"Scan failed: {e}", TOTAL_STEPS)
            return ScanResult.failed(request.url, e, duration=duration)

        logger.info("Finished scan of %s in %.1fs, score %d", request.url, result.duration, result.score)
        report_status(f"Scan complete, score {result.score}/100", TOTAL_STEPS)
        return result

    async def _run(self, session, request, report_status, started):
        report_status(f"Loading {request.url}", 2)
        landing = await session.open(
            request.url,
            timeout=request.timeout,
            wait_for_network_idle=request.wait_for_network_idle,
            settle_delay=self.post_load_delay,
        )

        # ── Read-only detectors, all against the landing page ───────
        report_status("Detecting cookies, scripts, policy link, banner and user rights", 3)
        cookies, scripts, policy, banner, rights = await asyncio.gather(
            self._timed("cookies", self.cookie_detector.detect(landing)),
            self._timed("scripts", self.script_detector.detect(landing)),
            self._timed("privacy_policy", self.policy_detector.detect(landing)),
            self._timed("cookie_banner", self.banner_detector.detect(landing)),
            self._timed("user_rights", self.user_rights_detector.detect(landing)),
        )

        findings = []
        if not policy.found and policy.finding:
            findings.append(policy.finding)
        if not banner.found and banner.finding:
            findings.append(banner.finding)
        if banner.found:
            findings.extend(await self.banner_detector.check_compliance(landing))

        tracking_cookies = [c for c in cookies if c.category in TRACKING_COOKIE_CATEGORIES]
        if tracking_cookies and not banner.found:
            findings.append(_third_party_cookie_finding(tracking_cookies))

        trackers = tracking_scripts(scripts)
        if trackers:
            findings.append(_tracking_scripts_finding(trackers))

        findings.extend(user_rights_findings(rights))

        # ── Privacy policy content, in its own tab ──────────────────
        policy_analysis = None
        if policy.found and policy.url:
            report_status("Analysing privacy policy content", 4)
            policy_analysis = await self._timed(
                "policy_content",
                self.policy_analyzer.analyze(session, landing, policy.url, request.timeout),
            )
            findings.extend(policy_content_findings(policy_analysis))

        # ── Consent quality, landing page ───────────────────────────
        consent_analysis = None
        if banner.found:
            report_status("Grading consent banner", 5)
            consent_analysis = await self._timed("consent_quality", self.consent_analyzer.analyze(landing))
            findings.extend(consent_quality_findings(consent_analysis))

        report_status("Checking additional GDPR requirements", 6)
        additional = await self._timed("additional_compliance", self.additional_detector.detect(landing))
        findings.extend(additional_findings(additional))

        report_status("Calculating compliance score", 7)
        policy_score = policy_analysis.completeness_score if policy_analysis else None
        consent_score = consent_analysis.quality_score if consent_analysis else None
        breakdown = score_breakdown(
            has_privacy_policy=policy.found,
            has_cookie_banner=banner.found,
            cookies=cookies,
            scripts=scripts,
            findings=findings,
            user_rights=rights,
            privacy_policy_score=policy_score,
            consent_quality_score=consent_score,
        )

        return ScanResult(
            success=True,
            url=request.url,
            cookies=tuple(cookies),
            scripts=tuple(scripts),
            findings=tuple(findings),
            has_privacy_policy=policy.found,
            has_cookie_banner=banner.found,
            privacy_policy_score=policy_score,
            consent_quality_score=consent_score,
            score=breakdown.total,
            duration=time.monotonic() - started,
            privacy_policy_url=policy.url,
            terms_of_service_url=policy.terms_of_service_url,
            cookie_policy_url=policy.cookie_policy_url,
            breakdown=breakdown,
            user_rights=rights,
            policy_analysis=policy_analysis,
            consent_analysis=consent_analysis,
            additional_checks=additional,
            recommendations=tuple(generate_recommendations(
                policy.found, banner.found, cookies, scripts,
            )),
        )


async def scan(request, status_callback=None):
    """Scan with the default detectors and a real browser."""
    return await Scanner().scan(request, status_callback=status_callback)


async def scan_website(url):
    """Quick scan of one URL with default settings."""
    return await scan(ScanRequest.create(url))


def result_payload(result):
    """ScanResult.to_dict() plus cookie/script statistics and the compliance level."""
    payload = result.to_dict()
    payload["cookie_stats"] = cookie_stats(result.cookies)
    payload["script_stats"] = script_stats(result.scripts)
    payload["compliance_level"] = compliance_level(result.score)[0] if result.success else None
    return payload


# ────────────────────────────────────────────────────────────────────
# OUTPUT
# ────────────────────────────────────────────────────────────────────

def print_summary(result):
    """Print a human-readable summary of one scan (a result_payload() dict)."""
    print(f"\n{'─' * 60}")
    print(f"  SUMMARY FOR: {result['url']}")
    print(f"{'─' * 60}")

    if not result["success"]:
        print(f"  Scan failed after {result['duration']:.1f}s: {result['error']}")
        print(f"{'─' * 60}\n")
        return

    label = compliance_level(result["score"])[1]
    print(f"  Compliance score     : {result['score']}/100 ({label})")
    print(f"  Privacy policy       : {'yes' if result['has_privacy_policy'] else 'NO'}"
          + (f"  ({result['privacy_policy_score']}/100 complete)"
             if result["privacy_policy_score"] is not None else ""))
    print(f"  Cookie banner        : {'yes' if result['has_cookie_banner'] else 'NO'}"
          + (f"  ({result['consent_quality_score']}/100 quality)"
             if result["consent_quality_score"] is not None else ""))

    stats = result["cookie_stats"]
    print(f"  Cookies              : {stats['total']} "
          f"(necessary {stats['necessary']}, analytics {stats['analytics']}, "
          f"marketing {stats['marketing']}, functional {stats['functional']}, "
          f"unknown {stats['unknown']}; third-party {stats['third_party']})")

    tracker_names = sorted({s["name"] for s in result["scripts"]
                            if s["name"] and s["category"] in ("analytics", "marketing")})
    print(f"  Trackers             : {len(tracker_names)} {tracker_names if tracker_names else ''}")

    findings = result["findings"]
    if findings:
        print(f"\n  FINDINGS:")
        for finding in findings:
            print(f"    [{finding['severity'].upper():7s}] {finding['title']}")

    if result["recommendations"]:
        print(f"\n  RECOMMENDATIONS:")
        for recommendation in result["recommendations"]:
            print(f"    - {recommendation}")
    print(f"  Scan took {result['duration']:.1f}s")
    print(f"{'─' * 60}\n")


# ────────────────────────────────────────────────────────────────────
# URL LOADING
# ────────────────────────────────────────────────────────────────────

def load_urls_from_file(filepath):
    """
    Read URLs from a text file (one URL per line).

    Blank lines and lines starting with # are ignored.
    """
    urls = []
    with open(filepath, "r") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                urls.append(line)
    return urls


# ────────────────────────────────────────────────────────────────────
# ENTRY POINT
# ────────────────────────────────────────────────────────────────────

def _scan_in_process(request, result_queue, status_queue=None):
    """Entry point for each scan subprocess.  Puts a ScanResult dict on result_queue."""

    def on_status(message, step, total_steps, elapsed):
        if status_queue is not None:
            status_queue.put({
                "message": message,
                "step": step,
                "total_steps": total_steps,
                "elapsed": round(elapsed, 1),
            })

    try:
        result = asyncio.run(scan(request, status_callback=on_status))
    except Exception as e:
        result = ScanResult.failed(request.url, e)
    result_queue.put(result_payload(result))


def run_isolated(request, max_scan_time=MAX_SCAN_TIME, status_queue=None):
    """
    Scan in a child process and kill it if it runs past max_scan_time.

    A killed scan comes back as a failed result.  Returns a
    result_payload() dict.
    """
    result_queue = multiprocessing.Queue()
    scan_process = multiprocessing.Process(
        target=_scan_in_process,
        args=(request, result_queue, status_queue),
    )
    scan_process.start()

    # Read the result before join(): a child that has put a large dict on
    # the queue won't exit until it has been consumed.
    try:
        result = result_queue.get(timeout=max_scan_time)
    except Empty:
        result = None
    scan_process.join(timeout=5)

    if scan_process.is_alive():
        logger.warning("Scan of %s exceeded %ss, killing scan process", request.url, max_scan_time)
        scan_process.kill()
        scan_process.join()

    if result is None:
        result = result_payload(ScanResult.failed(
            request.url,
            f"Scan timed out after {max_scan_time}s",
            duration=float(max_scan_time),
        ))
    return result


def main():
    # ── Parse command-line arguments ────────────────────────────────
    parser = argparse.ArgumentParser(
        description="GDPR Compliance Scanner - checks cookies, trackers, privacy policy, "
                    "consent banner and user rights on websites."
    )
    parser.add_argument(
        "urls",
        nargs="*",
        help="One or more URLs to scan.",
    )
    parser.add_argument(
        "--file", "-f",
        default=None,
        help="Path to a text file containing URLs (one per line).",
    )
    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=None,
        help="Page load timeout in seconds (default: 60).",
    )
    parser.add_argument(
        "--user-agent",
        default=None,
        help="Override the browser user agent.",
    )
    parser.add_argument(
        "--no-network-idle",
        action="store_true",
        help="Only wait for DOMContentLoaded instead of network idle.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON instead of a summary.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Build the list of URLs to scan.
    urls = list(args.urls)
    if args.file:
        urls += load_urls_from_file(args.file)

    if not urls:
        print("[!] No URLs to scan.")
        print("    Usage:  python scanner.py https://example.com")
        print("    Or:     python scanner.py --file urls.txt")
        sys.exit(1)

    requests = []
    for url in urls:
        try:
            requests.append(ScanRequest.create(
                url,
                timeout=args.timeout,
                user_agent=args.user_agent,
                wait_for_network_idle=not args.no_network_idle,
            ))
        except ValueError as e:
            print(f"[!] Skipping {url}: {e}")

    if not args.json:
        print(f"\n[*] GDPR Compliance Scanner")
        print(f"[*] Scanning {len(requests)} URL(s)...\n")

    # Each URL gets its own process with its own browser.  If a scan
    # hangs, process.kill() takes Playwright and Chromium down with it.
    all_results = []
    for i, request in enumerate(requests, start=1):
        if not args.json:
            print(f"[{i}/{len(requests)}] Scanning {request.url} ...")
        result = run_isolated(request)
        all_results.append(result)
        if not args.json:
            print_summary(result)

    if args.json:
        print(json.dumps(all_results, indent=2))
    else:
        # ── Final report ────────────────────────────────────────────
        print(f"\n{'=' * 60}")
        print(f"  SCAN COMPLETE - {len(all_results)} site(s) scanned")
        print(f"{'=' * 60}")
        for result in all_results:
            if result["success"]:
                _, label = compliance_level(result["score"])
                print(f"    {result['score']:>3}/100  {label:18s} {result['url']}")
            else:
                print(f"    FAILED   {result['url']}: {result['error']}")

    if any(not r["success"] for r in all_results):
        sys.exit(2)


if __name__ == "__main__":
    main()
