"""Draft state store: editable fields, dirty tracking, override flags and subscribers"""

from datetime import datetime
from typing import Any, Callable, Optional

from postdraft.core.models import DraftFields, ImportResult, PostRecord, PostStatus
from postdraft.session.state import (
    OVERRIDE_FLAGS,
    DraftSessionState,
    EditOverrides,
    StoreEvent,
    WorkflowState,
)


Listener = Callable[[StoreEvent], None]


class DraftStore:
    """Single owner of one editing session's DraftSessionState.

    Dirtiness is not a sticky flag: it is recomputed after every write as
    "fields differ from the baseline", where the baseline is the record
    captured at the last load or successful save.
    """

    def __init__(self, fields: DraftFields = None):
        fields = fields.model_copy(deep=True) if fields is not None else DraftFields()
        self._state = DraftSessionState(fields=fields)
        self._baseline = fields.model_copy(deep=True)
        self._listeners: list[Listener] = []

    # --- read ---

    @property
    def state(self) -> DraftSessionState:
        """Live state object; treat as read-only. Use snapshot() to hand state out."""
        return self._state

    @property
    def fields(self) -> DraftFields:
        return self._state.fields

    @property
    def baseline(self) -> DraftFields:
        return self._baseline

    @property
    def overrides(self) -> EditOverrides:
        return self._state.overrides

    def snapshot(self) -> DraftSessionState:
        return self._state.model_copy(deep=True)

    # --- subscribers ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    def _emit(self, kind: str, field: str = None) -> None:
        event = StoreEvent(kind=kind, field=field)
        for listener in list(self._listeners):
            listener(event)

    # --- field writes ---

    @staticmethod
    def _check_field(name: str) -> None:
        if name not in DraftFields.model_fields:
            raise KeyError(f"Unknown draft field: {name}")

    def _assign(self, name: str, value: Any) -> None:
        setattr(self._state.fields, name, value)
        self._state.is_dirty = self._state.fields != self._baseline

    def update_field(self, name: str, value: Any) -> None:
        """Apply a direct user edit. Editing slug/excerpt sets its override flag first."""
        self._check_field(name)
        flag = OVERRIDE_FLAGS.get(name)
        if flag is None:
            self._assign(name, value)
        else:
            previous = getattr(self._state.overrides, flag)
            setattr(self._state.overrides, flag, True)
            try:
                self._assign(name, value)
            except Exception:
                # A rejected value is not an edit.
                setattr(self._state.overrides, flag, previous)
                raise
        self._emit("field", name)

    def apply_derived(self, name: str, value: Any) -> None:
        """Write a derived value without touching override flags."""
        self._check_field(name)
        self._assign(name, value)
        self._emit("derived", name)

    def merge_import(self, result: ImportResult) -> list[str]:
        """Fill empty title/content/excerpt from an import. Returns the merged field names."""
        merged = []
        if result.title and not self.fields.title.strip():
            self.update_field("title", result.title)
            merged.append("title")
        if result.content and not self.fields.content.strip():
            self.update_field("content", result.content)
            merged.append("content")
        if result.excerpt and not self.fields.excerpt.strip():
            self.apply_derived("excerpt", result.excerpt)
            merged.append("excerpt")
        return merged

    # --- baseline replacement ---

    def _rebase(self, canonical: DraftFields, submitted: Optional[DraftFields]) -> None:
        """Make `canonical` the new baseline.

        When `submitted` (the fields sent to the server) is given, any field the
        user changed after submission keeps its newer local value, and so does
        its override flag; everything else takes the canonical value.
        """
        current = self._state.fields
        previous = self._state.overrides
        values = canonical.model_dump()
        overrides = EditOverrides()
        if submitted is not None:
            for name in DraftFields.model_fields:
                if getattr(current, name) != getattr(submitted, name):
                    values[name] = getattr(current, name)
                    flag = OVERRIDE_FLAGS.get(name)
                    if flag is not None:
                        setattr(overrides, flag, getattr(previous, flag))

        self._baseline = canonical.model_copy(deep=True)
        self._state.fields = DraftFields.model_validate(values)
        self._state.overrides = overrides
        self._state.is_dirty = self._state.fields != self._baseline
        self._state.field_errors = {}
        self._state.error = None

    def load_record(self, record: PostRecord) -> None:
        """Replace all fields with a freshly loaded post: not dirty, no overrides."""
        self._state.post_id = record.id
        self._state.is_loading = False
        self._rebase(record.to_fields(), submitted=None)
        self._emit("baseline")

    def commit_saved(self, record: PostRecord, submitted: DraftFields, saved_at: datetime) -> None:
        """Adopt the canonical record returned after a successful save."""
        self._state.post_id = record.id
        self._state.last_saved_at = saved_at
        self._state.is_saving = False
        self._rebase(record.to_fields(), submitted=submitted)
        self._emit("baseline")

    def mark_unpublished(self, saved_at: datetime) -> None:
        """After a successful unpublish: status draft, treated as freshly loaded."""
        fields = self._state.fields.model_copy(update={"status": PostStatus.draft}, deep=True)
        self._state.last_saved_at = saved_at
        self._state.is_saving = False
        self._rebase(fields, submitted=None)
        self._emit("baseline")

    def reset(self) -> None:
        """Restore the last-known-good baseline and clear errors and overrides."""
        self._rebase(self._baseline, submitted=None)
        self._emit("baseline")

    # --- status flags ---

    def capture_id(self, post_id: str) -> None:
        self._state.post_id = post_id

    def set_saving(self, saving: bool) -> None:
        self._state.is_saving = saving
        self._emit("status")

    def set_loading(self, loading: bool) -> None:
        self._state.is_loading = loading
        self._emit("status")

    def set_workflow(self, workflow: WorkflowState) -> None:
        self._state.workflow = workflow
        self._emit("status")

    def set_field_errors(self, errors: dict[str, str]) -> None:
        self._state.field_errors = dict(errors)
        self._emit("status")

    def surface_error(self, message: str) -> bool:
        """Record a user-visible error. Returns False if the same message is already shown."""
        if self._state.error == message:
            return False
        self._state.error = message
        self._emit("status")
        return True
