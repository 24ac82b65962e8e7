"""Title extraction from imported content"""

import re
from typing import Optional

from postdraft.core.models import DetectedFormat
from postdraft.core.utils.text import collapse_whitespace, decode_entities, strip_tags


TITLE_MAX_LENGTH = 100

MD_TITLE_RE = re.compile(r'^#[ \t]+(.+)$', re.MULTILINE)
HTML_H1_RE = re.compile(r'<h1(?:\s[^>]*)?>(.+?)</h1>', re.IGNORECASE | re.DOTALL)
HTML_TITLE_RE = re.compile(r'<title(?:\s[^>]*)?>(.+?)</title>', re.IGNORECASE | re.DOTALL)


def _html_text(fragment: str) -> str:
    return collapse_whitespace(decode_entities(strip_tags(fragment, ' ')))


def extract_title(content: str, fmt: DetectedFormat, max_length: int = TITLE_MAX_LENGTH) -> Optional[str]:
    """Return a human-usable title, or None when the content offers none.

    markdown: first level-1 ATX heading. html: first <h1> with inner tags
    stripped, else <title>. text: the first non-empty line, only if shorter
    than max_length (a long first paragraph is not a title).
    """
    if fmt == DetectedFormat.markdown:
        m = MD_TITLE_RE.search(content)
        return (m.group(1).strip() or None) if m else None

    if fmt == DetectedFormat.html:
        for pattern in (HTML_H1_RE, HTML_TITLE_RE):
            m = pattern.search(content)
            if m and (title := _html_text(m.group(1))):
                return title
        return None

    first = next((line.strip() for line in content.splitlines() if line.strip()), None)
    if first is not None and len(first) < max_length:
        return first
    return None
