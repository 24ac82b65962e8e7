"""Shared fixtures for draft session unit tests"""

import asyncio
from dataclasses import dataclass, field
from typing import Optional

import pytest

from postdraft.config import Settings
from postdraft.core.models import DraftFields, PostRecord
from postdraft.crud.memory_repo import MemoryPostRepository


@dataclass
class RecordingRepository(MemoryPostRepository):
    """MemoryPostRepository that records calls and can fail or hold them open."""
    calls: list[str] = field(default_factory=list)
    fail_with: Optional[Exception] = None
    gate: Optional[asyncio.Event] = None

    def count(self, name: str) -> int:
        return self.calls.count(name)

    async def _enter(self, name: str) -> None:
        self.calls.append(name)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with

    async def get_post_by_id(self, post_id: str) -> PostRecord:
        await self._enter("get_post_by_id")
        return await super().get_post_by_id(post_id)

    async def create_post(self, fields: DraftFields) -> PostRecord:
        await self._enter("create_post")
        return await super().create_post(fields)

    async def update_post(self, post_id: str, fields: DraftFields) -> PostRecord:
        await self._enter("update_post")
        return await super().update_post(post_id, fields)

    async def publish_post(self, post_id: str) -> None:
        await self._enter("publish_post")
        await super().publish_post(post_id)

    async def unpublish_post(self, post_id: str) -> None:
        await self._enter("unpublish_post")
        await super().unpublish_post(post_id)


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    """Millisecond debounces and autosave disabled; autosave tests opt back in."""
    return Settings(
        title_debounce_ms=20,
        content_debounce_ms=20,
        form_debounce_ms=20,
        autosave_enabled=False,
        autosave_interval_ms=60,
    )


@pytest.fixture(name="repo")
def repo_fixture() -> RecordingRepository:
    return RecordingRepository()


@pytest.fixture(name="valid_fields")
def valid_fields_fixture() -> DraftFields:
    return DraftFields(title="Hello World", content="# Hello World\n\nSome body text.")
