"""Unit tests for core/utils/slug.py"""

import pytest

from postdraft.core.utils.slug import slugify


@pytest.mark.parametrize("text, expected", [
    ("Hello World", "hello-world"),
    ("  Leading and trailing  ", "leading-and-trailing"),
    ("Rock & Roll!", "rock-roll"),
    ("multiple   spaces\tand\nlines", "multiple-spaces-and-lines"),
    ("already-a-slug", "already-a-slug"),
    ("--dashes--everywhere--", "dashes-everywhere"),
    ("snake_case_stays", "snake_case_stays"),
    ("Café Crème", "caf-crme"),
    ("!!!", ""),
    ("", ""),
])
def test_slugify(text, expected):
    """Lowercase, drop non-word characters, hyphenate whitespace, collapse hyphens."""
    assert slugify(text) == expected


@pytest.mark.parametrize("text", [
    "Hello World", "  -- A  -  b --", "Ünïcödé & symbols ***", "a_b-c d", "x" * 50, "",
])
def test_slugify_idempotent(text):
    """slugify(slugify(x)) == slugify(x)."""
    once = slugify(text)
    assert slugify(once) == once
