"""Slug generation for post URLs"""

import re


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug. Idempotent."""
    text = text.lower().strip()
    text = re.sub(r'[^\w\s-]', '', text, flags=re.ASCII)
    text = re.sub(r'\s+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')
