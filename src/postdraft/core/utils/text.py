"""Small text helpers shared by the normalizer and the extractors"""

import re


# Only the entities common authoring tools emit; anything else is left verbatim.
HTML_ENTITIES: tuple[tuple[str, str], ...] = (
    ('&nbsp;', ' '),
    ('&amp;', '&'),
    ('&lt;', '<'),
    ('&gt;', '>'),
    ('&quot;', '"'),
    ('&#39;', "'"),
)

TAG_RE = re.compile(r'<[^>]+>')
WHITESPACE_RE = re.compile(r'\s+')


def decode_entities(text: str) -> str:
    """Decode the named HTML entities listed in HTML_ENTITIES."""
    for entity, char in HTML_ENTITIES:
        text = text.replace(entity, char)
    return text


def strip_tags(text: str, replacement: str = '') -> str:
    return TAG_RE.sub(replacement, text)


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return WHITESPACE_RE.sub(' ', text).strip()


def truncate_at_word(text: str, max_length: int, ellipsis: str = '...') -> str:
    """Cut text so that text + ellipsis fits max_length, preferring the last space in range.

    Text already within max_length is returned unchanged. Without a usable
    space the cut is hard.
    """
    if len(text) <= max_length:
        return text
    limit = max(0, max_length - len(ellipsis))
    window = text[:limit + 1]
    cut = window.rfind(' ')
    head = text[:cut] if cut > 0 else text[:limit]
    return head.rstrip() + ellipsis
