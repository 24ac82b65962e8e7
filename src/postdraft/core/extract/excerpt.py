"""Excerpt extraction: strip format noise, collapse whitespace, truncate at a word boundary"""

import re
from typing import Optional

from postdraft.core.models import DetectedFormat
from postdraft.core.utils.text import collapse_whitespace, decode_entities, strip_tags, truncate_at_word


EXCERPT_MAX_LENGTH = 160
ELLIPSIS = '...'

TITLE_LINE_RE = re.compile(r'^#[ \t]+.+$', re.MULTILINE)

# Applied in order; images must go before links or '![alt](src)' would leave '!alt'.
MARKDOWN_NOISE: list[tuple[re.Pattern, str]] = [
    (re.compile(r'```.*?```', re.DOTALL), ''),             # fenced code
    (re.compile(r'`[^`]+`'), ''),                          # inline code
    (re.compile(r'!\[[^\]]*\]\([^)]*\)'), ''),             # images
    (re.compile(r'\[([^\]]+)\]\([^)]+\)'), r'\1'),         # links -> text
    (re.compile(r'^#{1,6}[ \t]+', re.MULTILINE), ''),      # remaining heading markers
    (re.compile(r'[*_~]'), ''),                            # emphasis markers
]


def _strip_markdown(content: str) -> str:
    text = TITLE_LINE_RE.sub('', content, count=1)
    for pattern, repl in MARKDOWN_NOISE:
        text = pattern.sub(repl, text)
    return text


def _strip_html(content: str) -> str:
    return decode_entities(strip_tags(content, ' '))


def extract_excerpt(
    content: str,
    fmt: DetectedFormat = DetectedFormat.markdown,
    max_length: int = EXCERPT_MAX_LENGTH,
    ) -> Optional[str]:
    """Plain-text summary of content, at most max_length chars including the ellipsis.

    Returns None (not '') when nothing is left after stripping, so callers can
    tell "no excerpt available" apart from an excerpt.
    """
    if fmt == DetectedFormat.markdown:
        text = _strip_markdown(content)
    elif fmt == DetectedFormat.html:
        text = _strip_html(content)
    else:
        text = content

    text = collapse_whitespace(text)
    if not text:
        return None
    return truncate_at_word(text, max_length, ELLIPSIS)
