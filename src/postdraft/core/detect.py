"""Format detection for uploaded text: extension first, content sniffing second"""

import re
from pathlib import PurePath

from postdraft.core.models import DetectedFormat


EXTENSION_FORMATS: dict[str, DetectedFormat] = {
    '.md':       DetectedFormat.markdown,
    '.markdown': DetectedFormat.markdown,
    '.html':     DetectedFormat.html,
    '.htm':      DetectedFormat.html,
    '.txt':      DetectedFormat.text,
}

HTML_SNIFF_RE = re.compile(r'<!DOCTYPE|<html', re.IGNORECASE)
HEADING_SNIFF_RE = re.compile(r'^#{1,6}\s', re.MULTILINE)
FENCE_MARKER = '```'


def detect_format(filename: str, content: str) -> DetectedFormat:
    """Classify content as markdown, html or text. Pure; never raises.

    A known extension is explicit user intent and always wins, so a .txt file
    containing a stray '#' stays text. Unknown or missing extensions fall
    through to sniffing.
    """
    suffix = PurePath(filename or '').suffix.lower()
    if suffix in EXTENSION_FORMATS:
        return EXTENSION_FORMATS[suffix]

    if HTML_SNIFF_RE.search(content):
        return DetectedFormat.html
    if HEADING_SNIFF_RE.search(content) or FENCE_MARKER in content:
        return DetectedFormat.markdown
    return DetectedFormat.text
