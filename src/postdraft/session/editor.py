"""DraftSession: one editing session wiring store, derivation, autosave and workflow"""

import logging
from typing import Any

from postdraft.config import Settings
from postdraft.core.models import DraftFields, ImportResult, PostRecord
from postdraft.core.parse import ImportSource, parse_file
from postdraft.core.utils.slug import slugify
from postdraft.crud.repo import PostRepository
from postdraft.session.autosave import AutosaveScheduler
from postdraft.session.derive import AutoDerivation
from postdraft.session.state import DraftSessionState
from postdraft.session.store import DraftStore
from postdraft.session.workflow import SaveOutcome, SaveWorkflow


LOGGER = logging.getLogger("postdraft.session")


class DraftSession:
    """The surface a UI layer drives while a post is being edited.

    Must be created and used on a running event loop once edits start, since
    the debounce and autosave timers are scheduled with loop.call_later.
    Call close() (or use `async with`) when the editor goes away.
    """

    def __init__(
        self,
        repository: PostRepository,
        settings: Settings = None,
        fields: DraftFields = None,
        ):
        self.settings = settings or Settings()
        self._closed = False
        self._store = DraftStore(fields)
        self._workflow = SaveWorkflow(self._store, repository, is_closed=lambda: self._closed)
        self._derive = AutoDerivation(
            self._store,
            title_delay=self.settings.title_debounce,
            content_delay=self.settings.content_debounce,
            excerpt_max_length=self.settings.excerpt_max_length,
        )
        self._autosave = AutosaveScheduler(
            self._store,
            self._workflow.save_draft,
            form_delay=self.settings.form_debounce,
            interval=self.settings.autosave_interval,
            enabled=self.settings.autosave_enabled,
        )

    @property
    def state(self) -> DraftSessionState:
        """Copy of the full session state for rendering."""
        return self._store.snapshot()

    @property
    def store(self) -> DraftStore:
        return self._store

    @property
    def autosave(self) -> AutosaveScheduler:
        return self._autosave

    @property
    def closed(self) -> bool:
        return self._closed

    def update_field(self, name: str, value: Any) -> None:
        self._store.update_field(name, value)

    def reset(self) -> None:
        self._store.reset()

    @staticmethod
    def generate_slug(title: str) -> str:
        return slugify(title)

    def validate(self) -> bool:
        """True when every required field is present; per-field errors land in state.field_errors."""
        return not self._workflow.validate()

    async def load_post(self, post_id: str) -> PostRecord:
        return await self._workflow.load(post_id)

    async def save_draft(self) -> SaveOutcome:
        return await self._workflow.save_draft()

    async def publish(self) -> SaveOutcome:
        return await self._workflow.publish()

    async def unpublish(self) -> SaveOutcome:
        return await self._workflow.unpublish()

    async def import_file(self, source: ImportSource) -> ImportResult:
        """Parse a file and merge it into the empty fields of the draft.

        ReadError/ParseError propagate unchanged and leave the draft untouched.
        """
        result = await parse_file(
            source,
            max_bytes=self.settings.max_import_bytes,
            excerpt_max_length=self.settings.excerpt_max_length,
            title_max_length=self.settings.title_max_length,
        )
        merged = self._store.merge_import(result)
        LOGGER.info("merged import into draft fields=%s", ",".join(merged) or "-")
        return result

    def flush_derived(self) -> None:
        """Run pending slug/excerpt derivations now instead of waiting out the debounce."""
        self._derive.flush()

    def close(self) -> None:
        """Cancel pending timers; later completions of in-flight calls are dropped."""
        if self._closed:
            return
        self._closed = True
        self._derive.close()
        self._autosave.close()

    async def __aenter__(self) -> "DraftSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()
