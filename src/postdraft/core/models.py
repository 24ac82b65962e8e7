"""Data models for imported content, draft fields and persisted post records"""

import mimetypes
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DetectedFormat(str, Enum):
    """Classification of an uploaded file's text"""
    markdown = "markdown"
    html = "html"
    text = "text"


class PostStatus(str, Enum):
    """Publication lifecycle of a post"""
    draft = "draft"
    published = "published"
    scheduled = "scheduled"
    archived = "archived"


@dataclass(frozen=True)
class RawImportFile:
    """An uploaded file as handed to the import flow; discarded after parsing."""
    name: str
    size: int
    media_type: str
    data: bytes

    @classmethod
    def from_path(cls, path: Path) -> "RawImportFile":
        data = path.read_bytes()
        media_type = mimetypes.guess_type(path.name)[0] or "text/plain"
        return cls(name=path.name, size=len(data), media_type=media_type, data=data)

    @classmethod
    def from_text(cls, name: str, text: str, media_type: str = "text/plain") -> "RawImportFile":
        data = text.encode("utf-8")
        return cls(name=name, size=len(data), media_type=media_type, data=data)


class ImportResult(BaseModel):
    """Terminal output of the import flow; merged once into a draft."""
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    content: str
    excerpt: Optional[str] = None
    format: DetectedFormat              # effective format; html input is reported as markdown
    metadata: dict[str, Any] = Field(default_factory=dict)


def _dedupe(values: list[str]) -> list[str]:
    return list(dict.fromkeys(v for v in values if v))


class SeoMetadata(BaseModel):
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    keywords: list[str] = Field(default_factory=list)
    canonical_url: Optional[str] = None
    robots: str = "index,follow"


class DraftFields(BaseModel):
    """The editable fields of a post; mirrors the create/update input of the persistence layer."""
    model_config = ConfigDict(validate_assignment=True)

    title: str = ""
    slug: str = ""
    content: str = ""                   # markdown
    excerpt: str = ""
    status: PostStatus = PostStatus.draft
    featured_image: Optional[str] = None
    category_ids: list[str] = Field(default_factory=list)
    tag_ids: list[str] = Field(default_factory=list)
    scheduled_for: Optional[datetime] = None
    comments_enabled: bool = True
    is_featured: bool = False
    seo: SeoMetadata = Field(default_factory=SeoMetadata)

    @field_validator("category_ids", "tag_ids")
    @classmethod
    def _unique_ids(cls, value: list[str]) -> list[str]:
        return _dedupe(value)


class PostRecord(DraftFields):
    """A post as returned by the persistence layer, including server-computed fields."""
    id: str
    read_time_minutes: Optional[int] = None
    published_at: Optional[datetime] = None
    view_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_fields(self) -> DraftFields:
        return DraftFields.model_validate(self.model_dump(include=set(DraftFields.model_fields)))
