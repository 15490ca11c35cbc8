"""
script_detector.py - Find tracking scripts and pixels on a loaded page.

External <script src> URLs and tiny <img> pixels are matched against the
tracker URL table; inline <script> bodies against known SDK signatures.
Inline scripts and pixels that match nothing are not reported.
"""

import logging

from knowledge_base import DEFAULT_KNOWLEDGE_BASE
from models import INLINE_CONTENT_LIMIT, DetectedScript, ScriptCategory, ScriptType

logger = logging.getLogger(__name__)

# Images this small (in px, both sides) are treated as tracking pixels.
PIXEL_MAX_SIZE = 3

_COLLECT_SCRIPTS_JS = """
(limit) => Array.from(document.querySelectorAll('script')).map((el) => ({
    src: el.src || null,
    content: el.src ? null : (el.textContent || '').slice(0, limit),
}))
"""

_COLLECT_IMAGES_JS = """
() => Array.from(document.querySelectorAll('img')).map((el) => ({
    src: el.src || '',
    width: el.width,
    height: el.height,
}))
"""


class ScriptDetector:
    name = "scripts"

    def __init__(self, knowledge_base=None):
        self.knowledge_base = knowledge_base or DEFAULT_KNOWLEDGE_BASE

    def classify_external(self, url):
        name, category = self.knowledge_base.match_tracker(url)
        return DetectedScript(
            type=ScriptType.EXTERNAL,
            url=url,
            category=category,
            name=name,
        )

    def classify_inline(self, content):
        """DetectedScript for a recognised inline SDK, else None."""
        content = (content or "")[:INLINE_CONTENT_LIMIT]
        if not content.strip():
            return None
        name, category = self.knowledge_base.match_inline(content)
        if category == ScriptCategory.UNKNOWN:
            return None
        return DetectedScript(
            type=ScriptType.INLINE,
            content=content,
            category=category,
            name=name,
        )

    def classify_pixel(self, image):
        """DetectedScript for a recognised tracking pixel, else None."""
        src = image.get("src") or ""
        width = image.get("width") or 0
        height = image.get("height") or 0
        if width > PIXEL_MAX_SIZE or height > PIXEL_MAX_SIZE:
            return None
        if not src.startswith("http"):
            return None
        name, category = self.knowledge_base.match_tracker(src)
        if category == ScriptCategory.UNKNOWN:
            return None
        return DetectedScript(
            type=ScriptType.EXTERNAL,
            url=src,
            category=category,
            name=f"{name} (Pixel)" if name else "Tracking Pixel",
        )

    def classify(self, raw_scripts, raw_images):
        """Scripts first (document order), then pixels."""
        scripts = []
        for raw in raw_scripts:
            if raw.get("src"):
                scripts.append(self.classify_external(raw["src"]))
            else:
                inline = self.classify_inline(raw.get("content"))
                if inline is not None:
                    scripts.append(inline)

        for image in raw_images:
            pixel = self.classify_pixel(image)
            if pixel is not None:
                scripts.append(pixel)
        return scripts

    async def detect(self, snapshot):
        try:
            raw_scripts = await snapshot.evaluate(_COLLECT_SCRIPTS_JS, INLINE_CONTENT_LIMIT)
            raw_images = await snapshot.evaluate(_COLLECT_IMAGES_JS)
        except Exception as e:
            logger.warning("Script detection failed on %s: %s", snapshot.url, e)
            return []
        return self.classify(raw_scripts or [], raw_images or [])


def script_stats(scripts):
    """Counts per category plus inline/external totals."""
    stats = {"total": len(scripts), "external": 0, "inline": 0}
    for category in ScriptCategory:
        stats[category.value] = 0

    for script in scripts:
        stats[script.category.value] += 1
        stats[script.type.value] += 1
    return stats
