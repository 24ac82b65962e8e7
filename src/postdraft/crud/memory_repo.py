from dataclasses import dataclass, field
from uuid import uuid4

from postdraft.core.models import DraftFields, PostRecord, PostStatus
from postdraft.crud.canonical import build_record, with_status
from postdraft.crud.repo import PostNotFoundError, PostRepository


@dataclass
class MemoryPostRepository(PostRepository):
    _posts: dict[str, PostRecord] = field(default_factory=dict)

    def _taken_by_other(self, post_id: str):
        return lambda slug: any(p.slug == slug and p.id != post_id for p in self._posts.values())

    def _get(self, post_id: str) -> PostRecord:
        post = self._posts.get(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    @property
    def posts(self) -> list[PostRecord]:
        return list(self._posts.values())

    async def get_post_by_id(self, post_id: str) -> PostRecord:
        return self._get(post_id).model_copy(deep=True)

    async def create_post(self, fields: DraftFields) -> PostRecord:
        post_id = uuid4().hex
        record = build_record(post_id, fields, self._taken_by_other(post_id))
        self._posts[post_id] = record
        return record.model_copy(deep=True)

    async def update_post(self, post_id: str, fields: DraftFields) -> PostRecord:
        existing = self._get(post_id)
        record = build_record(post_id, fields, self._taken_by_other(post_id), existing=existing)
        self._posts[post_id] = record
        return record.model_copy(deep=True)

    async def publish_post(self, post_id: str) -> None:
        self._posts[post_id] = with_status(self._get(post_id), PostStatus.published)

    async def unpublish_post(self, post_id: str) -> None:
        self._posts[post_id] = with_status(self._get(post_id), PostStatus.draft)
