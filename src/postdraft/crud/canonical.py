"""Server-side canonicalization applied by every repository on write"""

from datetime import datetime, timezone
from typing import Callable, Optional

from postdraft.core.extract.excerpt import extract_excerpt
from postdraft.core.models import DetectedFormat, DraftFields, PostRecord, PostStatus
from postdraft.core.utils.slug import slugify
from postdraft.core.utils.tokens import read_time_minutes


EXCERPT_FALLBACK_LENGTH = 300
DEFAULT_SLUG = "post"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def unique_slug(base: str, taken: Callable[[str], bool]) -> str:
    """Return base, or base-2, base-3, ... whichever is first not taken by another post."""
    base = base or DEFAULT_SLUG
    slug, n = base, 1
    while taken(slug):
        n += 1
        slug = f"{base}-{n}"
    return slug


def fallback_excerpt(fields: DraftFields) -> str:
    """The stored excerpt: the given one, else one computed from the content."""
    if fields.excerpt.strip():
        return fields.excerpt
    return extract_excerpt(fields.content, DetectedFormat.markdown, max_length=EXCERPT_FALLBACK_LENGTH) or ""


def published_at_for(status: PostStatus, previous: Optional[datetime], now: datetime) -> Optional[datetime]:
    """Keep the first publish time while published; no publish time otherwise."""
    if status != PostStatus.published:
        return None
    return previous or now


def build_record(
    post_id: str,
    fields: DraftFields,
    taken: Callable[[str], bool],
    existing: Optional[PostRecord] = None,
    now: datetime = None,
    ) -> PostRecord:
    """Merge submitted fields with server-computed ones into a canonical PostRecord.

    `taken(slug)` must report whether a *different* post already uses slug.
    """
    now = now or utcnow()
    base = slugify(fields.slug) or slugify(fields.title)
    values = fields.model_dump()
    values.update(
        slug=unique_slug(base, taken),
        excerpt=fallback_excerpt(fields),
    )
    return PostRecord(
        id=post_id,
        **values,
        read_time_minutes=read_time_minutes(fields.content),
        published_at=published_at_for(fields.status, existing.published_at if existing else None, now),
        view_count=existing.view_count if existing else 0,
        created_at=existing.created_at if existing else now,
        updated_at=now,
    )


def with_status(record: PostRecord, status: PostStatus, now: datetime = None) -> PostRecord:
    """Copy of record moved to status, with published_at stamped or cleared."""
    now = now or utcnow()
    return record.model_copy(update={
        "status": status,
        "published_at": published_at_for(status, record.published_at, now),
        "updated_at": now,
    })
