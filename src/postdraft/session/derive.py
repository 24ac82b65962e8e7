"""Auto-derivation of slug (from title) and excerpt (from content)"""

import logging

from postdraft.core.extract.excerpt import EXCERPT_MAX_LENGTH, extract_excerpt
from postdraft.core.models import DetectedFormat
from postdraft.core.utils.slug import slugify
from postdraft.session.debounce import Debouncer
from postdraft.session.state import StoreEvent
from postdraft.session.store import DraftStore


LOGGER = logging.getLogger("postdraft.derive")


class AutoDerivation:
    """Rewrite slug/excerpt from debounced title/content unless the user owns that field.

    Reacts only to the debounced values, never to each keystroke. Writes go
    through DraftStore.apply_derived, so they never set an override flag.
    """

    def __init__(
        self,
        store: DraftStore,
        title_delay: float = 0.3,
        content_delay: float = 0.5,
        excerpt_max_length: int = EXCERPT_MAX_LENGTH,
        ):
        self._store = store
        self._excerpt_max_length = excerpt_max_length
        self._title = Debouncer(title_delay, self._derive_slug, initial=store.fields.title)
        self._content = Debouncer(content_delay, self._derive_excerpt, initial=store.fields.content)
        self._unsubscribe = store.subscribe(self._on_event)

    @property
    def pending(self) -> bool:
        return self._title.pending or self._content.pending

    def _on_event(self, event: StoreEvent) -> None:
        fields = self._store.fields
        if event.kind == "field":
            if event.field == "title":
                self._title.push(fields.title)
            elif event.field == "content":
                self._content.push(fields.content)
        elif event.kind == "baseline":
            # A value kept from an in-flight edit differs from the baseline; let its timer run.
            baseline = self._store.baseline
            if fields.title == baseline.title:
                self._title.rebase(fields.title)
            if fields.content == baseline.content:
                self._content.rebase(fields.content)

    def _derive_slug(self, title: str) -> None:
        if self._store.overrides.slug_user_edited:
            LOGGER.debug("slug derivation skipped: slug edited by user")
            return
        slug = slugify(title)
        if slug != self._store.fields.slug:
            self._store.apply_derived("slug", slug)

    def _derive_excerpt(self, content: str) -> None:
        if self._store.overrides.excerpt_user_edited:
            LOGGER.debug("excerpt derivation skipped: excerpt edited by user")
            return
        excerpt = extract_excerpt(content, DetectedFormat.markdown, max_length=self._excerpt_max_length) or ""
        if excerpt != self._store.fields.excerpt:
            self._store.apply_derived("excerpt", excerpt)

    def flush(self) -> None:
        """Apply any pending derivation immediately."""
        self._title.flush()
        self._content.flush()

    def close(self) -> None:
        self._title.cancel()
        self._content.cancel()
        self._unsubscribe()
