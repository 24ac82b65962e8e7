"""Unit tests for session/derive.py"""

import asyncio

from postdraft.core.models import PostRecord
from postdraft.session.derive import AutoDerivation
from postdraft.session.store import DraftStore


SETTLE = 0.15


def _engine(store: DraftStore, excerpt_max_length: int = 160) -> AutoDerivation:
    return AutoDerivation(store, title_delay=0.02, content_delay=0.02, excerpt_max_length=excerpt_max_length)


def test_title_derives_slug_after_quiet_period():
    """The slug follows the debounced title, not each keystroke."""
    store = DraftStore()
    derived = []
    store.subscribe(lambda e: derived.append(store.fields.slug) if e.kind == "derived" else None)

    async def scenario():
        engine = _engine(store)
        for partial in ["H", "He", "Hello", "Hello World"]:
            store.update_field("title", partial)
        assert store.fields.slug == ""
        await asyncio.sleep(SETTLE)
        engine.close()

    asyncio.run(scenario())
    assert store.fields.slug == "hello-world"
    assert derived == ["hello-world"]


def test_content_derives_excerpt():
    store = DraftStore()

    async def scenario():
        engine = _engine(store, excerpt_max_length=20)
        store.update_field("content", "# Title\n\nA body that is longer than twenty characters.")
        await asyncio.sleep(SETTLE)
        engine.close()

    asyncio.run(scenario())
    assert store.fields.excerpt == "A body that is..."
    assert not store.overrides.excerpt_user_edited


def test_empty_content_clears_derived_excerpt():
    store = DraftStore()

    async def scenario():
        engine = _engine(store)
        store.update_field("content", "Some text")
        await asyncio.sleep(SETTLE)
        store.update_field("content", "")
        await asyncio.sleep(SETTLE)
        engine.close()

    asyncio.run(scenario())
    assert store.fields.excerpt == ""


def test_user_slug_is_never_overwritten():
    """After the user edits the slug, title changes leave it alone."""
    store = DraftStore()

    async def scenario():
        engine = _engine(store)
        store.update_field("slug", "my-own-slug")
        for title in ["First", "Second", "Third title"]:
            store.update_field("title", title)
            await asyncio.sleep(SETTLE)
        engine.close()

    asyncio.run(scenario())
    assert store.fields.slug == "my-own-slug"


def test_user_excerpt_is_never_overwritten():
    store = DraftStore()

    async def scenario():
        engine = _engine(store)
        store.update_field("excerpt", "Hand written")
        store.update_field("content", "Generated text")
        await asyncio.sleep(SETTLE)
        engine.close()

    asyncio.run(scenario())
    assert store.fields.excerpt == "Hand written"


def test_load_clears_override_and_does_not_derive_from_baseline():
    """A loaded record is taken as-is; later title edits derive again."""
    store = DraftStore()
    record = PostRecord(id="p1", title="Loaded Title", slug="custom-slug", content="Body")

    async def scenario():
        engine = _engine(store)
        store.update_field("slug", "typed")
        store.load_record(record)
        await asyncio.sleep(SETTLE)
        assert store.fields.slug == "custom-slug"
        store.update_field("title", "Renamed")
        await asyncio.sleep(SETTLE)
        engine.close()

    asyncio.run(scenario())
    assert store.fields.slug == "renamed"


def test_pending_title_is_dropped_by_load():
    """A load cancels a title derivation that was still waiting."""
    store = DraftStore()

    async def scenario():
        engine = _engine(store)
        store.update_field("title", "Unsaved")
        assert engine.pending
        store.load_record(PostRecord(id="p1", title="Loaded", slug="kept"))
        await asyncio.sleep(SETTLE)
        engine.close()

    asyncio.run(scenario())
    assert store.fields.slug == "kept"


def test_flush_applies_pending_derivations():
    store = DraftStore()

    async def scenario():
        engine = AutoDerivation(store, title_delay=10, content_delay=10)
        store.update_field("title", "Flushed Title")
        store.update_field("content", "Flushed body")
        engine.flush()
        assert not engine.pending
        engine.close()

    asyncio.run(scenario())
    assert store.fields.slug == "flushed-title"
    assert store.fields.excerpt == "Flushed body"


def test_close_cancels_pending_derivation():
    store = DraftStore()

    async def scenario():
        engine = _engine(store)
        store.update_field("title", "Never Derived")
        engine.close()
        await asyncio.sleep(SETTLE)

    asyncio.run(scenario())
    assert store.fields.slug == ""
