"""Database table definition for posts"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

from sqlalchemy import Column, DateTime, JSON, String, Text
from sqlmodel import Field, SQLModel


class Post(SQLModel, table=True):
    """A blog post and its server-computed fields"""
    __tablename__ = "posts"
    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    slug: str = Field(..., sa_column=Column(String(255), nullable=False, unique=True, index=True))
    content: str = Field(..., sa_column=Column(Text, nullable=False))
    excerpt: str = Field(default="", sa_column=Column(Text, nullable=False))
    status: str = Field(default="draft", index=True, nullable=False)
    featured_image: Optional[str] = Field(default=None, nullable=True)
    category_ids: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    tag_ids: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    scheduled_for: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    comments_enabled: bool = Field(default=True, nullable=False)
    is_featured: bool = Field(default=False, nullable=False)
    seo: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    read_time_minutes: Optional[int] = Field(default=None, nullable=True)
    published_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    view_count: int = Field(default=0, nullable=False)
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=True), nullable=False))
