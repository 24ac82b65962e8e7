"""Shared markdown-it token utilities"""

import math
import re

from markdown_it import MarkdownIt


WORDS_PER_MINUTE = 200

_parser = MarkdownIt("commonmark")


def plain_text(markdown: str) -> str:
    """Text content of a markdown document: inline token text plus code bodies."""
    parts: list[str] = []
    for token in _parser.parse(markdown):
        if token.type == 'inline' and token.children:
            parts.extend(c.content for c in token.children if c.type in ('text', 'code_inline'))
        elif token.type in ('fence', 'code_block'):
            parts.append(token.content)
    return ' '.join(parts)


def word_count(markdown: str) -> int:
    return len(re.findall(r'\S+', plain_text(markdown)))


def read_time_minutes(markdown: str) -> int:
    """Estimated reading time at WORDS_PER_MINUTE, never below one minute."""
    return max(1, math.ceil(word_count(markdown) / WORDS_PER_MINUTE))
