"""Persistence collaborator interface used by the draft session"""

from abc import ABC, abstractmethod

from postdraft.core.models import DraftFields, PostRecord


class PostNotFoundError(ValueError):
    """No post is stored under the requested id."""

    def __init__(self, post_id: str):
        self.post_id = post_id
        super().__init__(f"Post not found: {post_id}")


class PostRepository(ABC):
    @abstractmethod
    async def get_post_by_id(self, post_id: str) -> PostRecord:
        """Return the canonical record. Raises PostNotFoundError."""
        raise NotImplementedError

    @abstractmethod
    async def create_post(self, fields: DraftFields) -> PostRecord:
        raise NotImplementedError

    @abstractmethod
    async def update_post(self, post_id: str, fields: DraftFields) -> PostRecord:
        raise NotImplementedError

    @abstractmethod
    async def publish_post(self, post_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def unpublish_post(self, post_id: str) -> None:
        raise NotImplementedError
