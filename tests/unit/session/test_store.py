"""Unit tests for session/store.py"""

from datetime import datetime, timezone

import pydantic
import pytest

from postdraft.core.models import DraftFields, ImportResult, DetectedFormat, PostRecord, PostStatus
from postdraft.session.store import DraftStore


@pytest.fixture(name="record")
def record_fixture() -> PostRecord:
    return PostRecord(id="p1", title="Stored", slug="stored", content="Body", excerpt="Body", read_time_minutes=1)


def test_new_store_is_clean():
    store = DraftStore()
    assert not store.state.is_dirty
    assert store.fields == DraftFields()


def test_update_field_tracks_dirty_against_baseline():
    """Dirty means 'differs from the baseline'; reverting an edit makes the draft clean again."""
    store = DraftStore(DraftFields(title="A"))
    store.update_field("title", "B")
    assert store.state.is_dirty
    store.update_field("title", "A")
    assert not store.state.is_dirty


@pytest.mark.parametrize("name, flag", [
    ("slug", "slug_user_edited"),
    ("excerpt", "excerpt_user_edited"),
])
def test_override_flag_set_before_listeners_run(name, flag):
    """Listeners already see the override flag when the edit is announced."""
    store = DraftStore()
    seen = []
    store.subscribe(lambda event: seen.append((event.kind, event.field, getattr(store.overrides, flag))))
    store.update_field(name, "typed")
    assert seen == [("field", name, True)]


def test_apply_derived_leaves_overrides_alone():
    store = DraftStore()
    seen = []
    store.subscribe(lambda event: seen.append(event.kind))
    store.apply_derived("slug", "derived")
    assert store.fields.slug == "derived"
    assert not store.overrides.slug_user_edited
    assert seen == ["derived"]


def test_other_fields_do_not_set_overrides():
    store = DraftStore()
    store.update_field("title", "T")
    store.update_field("content", "C")
    assert store.overrides.model_dump() == {"slug_user_edited": False, "excerpt_user_edited": False}


def test_unknown_field_raises_key_error():
    with pytest.raises(KeyError):
        DraftStore().update_field("author", "x")


def test_values_are_validated():
    """Assignments go through the pydantic model."""
    store = DraftStore()
    with pytest.raises(pydantic.ValidationError):
        store.update_field("status", "bogus")
    store.update_field("status", "scheduled")
    assert store.fields.status == PostStatus.scheduled


@pytest.mark.parametrize("name, flag", [
    ("slug", "slug_user_edited"),
    ("excerpt", "excerpt_user_edited"),
])
def test_rejected_edit_leaves_override_flag_unset(name, flag):
    """A value that fails validation neither changes the field nor claims it for the user."""
    store = DraftStore(DraftFields(slug="kept", excerpt="kept"))
    seen = []
    store.subscribe(seen.append)
    with pytest.raises(pydantic.ValidationError):
        store.update_field(name, None)
    assert getattr(store.fields, name) == "kept"
    assert getattr(store.overrides, flag) is False
    assert not store.state.is_dirty
    assert seen == []


def test_unsubscribe():
    store = DraftStore()
    seen = []
    unsubscribe = store.subscribe(seen.append)
    unsubscribe()
    store.update_field("title", "x")
    assert seen == []


def test_load_record_replaces_everything(record):
    """A freshly loaded post is not dirty and has no overrides."""
    store = DraftStore()
    store.update_field("slug", "mine")
    store.set_field_errors({"title": "Title is required"})
    store.load_record(record)
    state = store.state
    assert state.post_id == "p1"
    assert state.fields == record.to_fields()
    assert not state.is_dirty
    assert not state.overrides.slug_user_edited
    assert state.field_errors == {}


def test_reset_restores_baseline(record):
    """reset returns to the last loaded fields and clears errors and overrides."""
    store = DraftStore()
    store.load_record(record)
    store.update_field("excerpt", "edited")
    store.surface_error("Failed to save draft: boom")
    store.reset()
    assert store.fields.excerpt == "Body"
    assert not store.state.is_dirty
    assert store.state.error is None
    assert not store.overrides.excerpt_user_edited


def test_merge_import_fills_only_empty_fields():
    """Existing title is kept; empty content and excerpt are filled."""
    store = DraftStore(DraftFields(title="Mine"))
    result = ImportResult(title="Theirs", content="# Theirs\n\nBody", excerpt="Body", format=DetectedFormat.markdown)
    merged = store.merge_import(result)
    assert merged == ["content", "excerpt"]
    assert store.fields.title == "Mine"
    assert store.fields.content == "# Theirs\n\nBody"
    assert store.fields.excerpt == "Body"
    assert not store.overrides.excerpt_user_edited


def test_merge_import_skips_missing_values():
    store = DraftStore()
    assert store.merge_import(ImportResult(content="", format=DetectedFormat.text)) == []
    assert not store.state.is_dirty


def test_commit_saved_keeps_edits_made_in_flight(record):
    """Fields changed after submission survive the reload; the rest take canonical values."""
    store = DraftStore()
    store.update_field("title", "Stored")
    store.update_field("slug", "stored")
    submitted = store.fields.model_copy(deep=True)
    store.update_field("content", "Typed while saving")

    saved_at = datetime.now(timezone.utc)
    store.commit_saved(record, submitted=submitted, saved_at=saved_at)
    state = store.state
    assert state.fields.content == "Typed while saving"
    assert state.fields.excerpt == "Body"
    assert state.is_dirty
    assert state.last_saved_at == saved_at
    assert not state.overrides.slug_user_edited


def test_commit_saved_keeps_override_of_field_edited_in_flight(record):
    store = DraftStore()
    submitted = store.fields.model_copy(deep=True)
    store.update_field("slug", "typed-during-save")
    store.commit_saved(record, submitted=submitted, saved_at=datetime.now(timezone.utc))
    assert store.fields.slug == "typed-during-save"
    assert store.overrides.slug_user_edited


def test_mark_unpublished():
    """Unpublish forces draft status and a clean baseline."""
    store = DraftStore(DraftFields(title="T", status=PostStatus.published))
    store.update_field("slug", "x")
    store.mark_unpublished(saved_at=datetime.now(timezone.utc))
    assert store.fields.status == PostStatus.draft
    assert not store.state.is_dirty
    assert not store.overrides.slug_user_edited


def test_surface_error_once():
    store = DraftStore()
    assert store.surface_error("Failed to save draft: offline")
    assert not store.surface_error("Failed to save draft: offline")
    assert store.state.error == "Failed to save draft: offline"


def test_snapshot_is_a_copy():
    store = DraftStore()
    snap = store.snapshot()
    snap.fields.title = "changed"
    assert store.fields.title == ""
