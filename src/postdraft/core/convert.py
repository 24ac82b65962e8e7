"""HTML -> markdown normalization by ordered pattern substitution

Best-effort and non-validating: aimed at the output of common authoring tools,
not at round-tripping arbitrary HTML. Structural rules (headings, lists, code)
run before the blanket tag strip, otherwise their markup would be gone before
it could be translated.
"""

import re

from postdraft.core.utils.text import decode_entities, strip_tags


def _tag(name: str) -> str:
    """Opening-tag pattern for `name` that does not also match longer tag names (b vs br/body)."""
    return rf'<{name}(?:\s[^>]*)?>'


_I = re.IGNORECASE
_IS = re.IGNORECASE | re.DOTALL

NON_CONTENT_RE = re.compile(r'<(head|script|style)(?:\s[^>]*)?>.*?</\1>', _IS)
HEADING_RES = [
    (re.compile(rf'{_tag(f"h{level}")}(.*?)</h{level}>', _IS), '#' * level)
    for level in range(1, 7)
]
EMPHASIS_RES = [
    (re.compile(rf'{_tag("strong")}(.*?)</strong>', _IS), '**'),
    (re.compile(rf'{_tag("b")}(.*?)</b>', _IS), '**'),
    (re.compile(rf'{_tag("em")}(.*?)</em>', _IS), '*'),
    (re.compile(rf'{_tag("i")}(.*?)</i>', _IS), '*'),
]
LINK_RE = re.compile(r'<a\s[^>]*?href\s*=\s*["\']([^"\']*)["\'][^>]*>(.*?)</a>', _IS)
IMG_RE = re.compile(r'<img\s[^>]*>', _I)
ATTR_RE = re.compile(r'([a-zA-Z_:-]+)\s*=\s*(?:"([^"]*)"|\'([^\']*)\')')
UL_RE = re.compile(rf'{_tag("ul")}(.*?)</ul>', _IS)
OL_RE = re.compile(rf'{_tag("ol")}(.*?)</ol>', _IS)
LI_RE = re.compile(rf'{_tag("li")}(.*?)</li>', _IS)
PRE_CODE_RE = re.compile(rf'{_tag("pre")}\s*{_tag("code")}(.*?)</code>\s*</pre>', _IS)
CODE_RE = re.compile(rf'{_tag("code")}(.*?)</code>', _IS)
PARAGRAPH_RE = re.compile(rf'{_tag("p")}(.*?)</p>', _IS)
BR_RE = re.compile(r'<br\s*/?>', _I)
TRAILING_SPACE_RE = re.compile(r'[ \t]+\n')
BLANK_RUN_RE = re.compile(r'\n{3,}')


def _attrs(tag: str) -> dict[str, str]:
    return {m.group(1).lower(): m.group(2) if m.group(2) is not None else m.group(3) for m in ATTR_RE.finditer(tag)}


def _image(match: re.Match) -> str:
    attrs = _attrs(match.group(0))
    src = attrs.get('src')
    if src is None:
        return ''
    return f"![{attrs.get('alt', '')}]({src})"


def _bullets(match: re.Match) -> str:
    return LI_RE.sub(lambda li: f"- {li.group(1).strip()}\n", match.group(1))


def _numbered(match: re.Match) -> str:
    counter = 0

    def item(li: re.Match) -> str:
        nonlocal counter
        counter += 1
        return f"{counter}. {li.group(1).strip()}\n"

    return LI_RE.sub(item, match.group(1))


def _fence(match: re.Match) -> str:
    body = match.group(1).strip('\n')
    return f"```\n{body}\n```\n\n"


def html_to_markdown(html: str) -> str:
    """Convert an HTML fragment or document to markdown. Pure and deterministic."""
    md = NON_CONTENT_RE.sub('', html)

    for pattern, hashes in HEADING_RES:
        md = pattern.sub(lambda m, h=hashes: f"{h} {m.group(1).strip()}\n\n", md)

    for pattern, marker in EMPHASIS_RES:
        md = pattern.sub(lambda m, mk=marker: f"{mk}{m.group(1)}{mk}", md)

    md = LINK_RE.sub(lambda m: f"[{m.group(2)}]({m.group(1)})", md)
    md = IMG_RE.sub(_image, md)

    md = UL_RE.sub(_bullets, md)
    md = OL_RE.sub(_numbered, md)

    md = PRE_CODE_RE.sub(_fence, md)
    md = CODE_RE.sub(lambda m: f"`{m.group(1)}`", md)

    md = PARAGRAPH_RE.sub(lambda m: f"{m.group(1).strip()}\n\n", md)
    md = BR_RE.sub('\n', md)

    md = strip_tags(md)
    md = decode_entities(md)

    md = TRAILING_SPACE_RE.sub('\n', md)
    return BLANK_RUN_RE.sub('\n\n', md).strip()
