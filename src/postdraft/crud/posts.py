"""Post persistence on SQLModel: lookups and the SQL-backed PostRepository"""

from typing import Optional
from uuid import uuid4

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from postdraft.core.models import DraftFields, PostRecord, PostStatus
from postdraft.crud.canonical import build_record, with_status
from postdraft.crud.models import Post
from postdraft.crud.repo import PostNotFoundError, PostRepository


def get_by_id(session: Session, post_id: str) -> Optional[Post]:
    """Return the Post with the given id, or None if not found."""
    return session.get(Post, post_id)


def slug_taken(session: Session, slug: str, exclude_id: str) -> bool:
    """True if a post other than exclude_id already uses slug."""
    query = select(Post.id).where(Post.slug == slug, Post.id != exclude_id)
    return session.exec(query).first() is not None


def to_record(post: Post) -> PostRecord:
    return PostRecord.model_validate(post.model_dump())


def _apply(post: Post, record: PostRecord) -> Post:
    data = record.model_dump(mode="json", exclude={"id", "scheduled_for", "published_at", "created_at", "updated_at"})
    for key, value in data.items():
        setattr(post, key, value)
    post.scheduled_for = record.scheduled_for
    post.published_at = record.published_at
    post.created_at = record.created_at
    post.updated_at = record.updated_at
    return post


class SQLPostRepository(PostRepository):
    """PostRepository on a SQLAlchemy engine; one short-lived Session per call."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def _require(self, session: Session, post_id: str) -> Post:
        post = get_by_id(session, post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    def _save(self, session: Session, post: Post) -> PostRecord:
        session.add(post)
        session.commit()
        session.refresh(post)
        return to_record(post)

    async def get_post_by_id(self, post_id: str) -> PostRecord:
        with Session(self.engine) as session:
            return to_record(self._require(session, post_id))

    async def create_post(self, fields: DraftFields) -> PostRecord:
        post_id = uuid4().hex
        with Session(self.engine) as session:
            record = build_record(post_id, fields, lambda slug: slug_taken(session, slug, post_id))
            return self._save(session, _apply(Post(id=post_id, title=record.title, slug=record.slug, content=record.content), record))

    async def update_post(self, post_id: str, fields: DraftFields) -> PostRecord:
        with Session(self.engine) as session:
            post = self._require(session, post_id)
            record = build_record(post_id, fields, lambda slug: slug_taken(session, slug, post_id), existing=to_record(post))
            return self._save(session, _apply(post, record))

    async def publish_post(self, post_id: str) -> None:
        await self._set_status(post_id, PostStatus.published)

    async def unpublish_post(self, post_id: str) -> None:
        await self._set_status(post_id, PostStatus.draft)

    async def _set_status(self, post_id: str, status: PostStatus) -> None:
        with Session(self.engine) as session:
            post = self._require(session, post_id)
            self._save(session, _apply(post, with_status(to_record(post), status)))
