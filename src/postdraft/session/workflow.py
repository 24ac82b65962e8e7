"""Save/publish workflow: validate -> persist -> reload, against a PostRepository"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from postdraft.core.errors import DraftPipelineError, PersistenceError, ValidationError
from postdraft.core.models import DraftFields, PostRecord, PostStatus
from postdraft.crud.repo import PostRepository
from postdraft.session.state import WorkflowState
from postdraft.session.store import DraftStore


LOGGER = logging.getLogger("postdraft.workflow")


@dataclass(frozen=True)
class SaveOutcome:
    """Result of one save/publish/unpublish trigger."""
    state: WorkflowState
    error: Optional[DraftPipelineError] = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.state == WorkflowState.done and self.error is None


def validate_fields(fields: DraftFields) -> dict[str, str]:
    """Collect every required-field violation, keyed by field name."""
    errors = {}
    if not fields.title.strip():
        errors["title"] = "Title is required"
    if not fields.content.strip():
        errors["content"] = "Content is required"
    if fields.status == PostStatus.scheduled and fields.scheduled_for is None:
        errors["scheduled_for"] = "Scheduled posts need a publish date"
    return errors


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SaveWorkflow:
    """Runs the persistence side of a draft session.

    Only one save runs at a time: a trigger arriving while is_saving is set
    returns a skipped outcome without contacting the repository. Once
    `is_closed()` reports True, completions are dropped instead of applied.
    """

    def __init__(
        self,
        store: DraftStore,
        repository: PostRepository,
        is_closed: Callable[[], bool] = lambda: False,
        ):
        self._store = store
        self._repo = repository
        self._is_closed = is_closed

    # --- helpers ---

    def _transition(self, state: WorkflowState) -> None:
        LOGGER.debug("workflow %s -> %s", self._store.state.workflow.value, state.value)
        self._store.set_workflow(state)

    def _surface(self, error: DraftPipelineError) -> None:
        if self._store.surface_error(str(error)):
            LOGGER.warning("%s", error)
        else:
            LOGGER.debug("repeated failure: %s", error)

    def _fail(self, error: DraftPipelineError) -> SaveOutcome:
        self._store.set_saving(False)
        self._surface(error)
        self._transition(WorkflowState.failed)
        return SaveOutcome(WorkflowState.failed, error)

    def _dropped(self, operation: str) -> SaveOutcome:
        LOGGER.debug("session closed; dropping %s completion", operation)
        return SaveOutcome(self._store.state.workflow, skipped=True)

    def _busy(self, operation: str) -> Optional[SaveOutcome]:
        if self._store.state.is_saving:
            LOGGER.debug("%s skipped: a save is already in flight", operation)
            return SaveOutcome(self._store.state.workflow, skipped=True)
        return None

    # --- triggers ---

    def validate(self) -> dict[str, str]:
        """Validate the current fields and record the per-field errors."""
        errors = validate_fields(self._store.fields)
        self._store.set_field_errors(errors)
        return errors

    async def load(self, post_id: str) -> Optional[PostRecord]:
        """Replace the session with a stored post. Raises PersistenceError on failure."""
        self._store.set_loading(True)
        try:
            record = await self._repo.get_post_by_id(post_id)
        except Exception as e:
            if self._is_closed():
                return None
            error = PersistenceError("load post", e)
            self._store.set_loading(False)
            self._surface(error)
            raise error from e

        if self._is_closed():
            self._dropped("load")
            return None
        self._store.load_record(record)
        LOGGER.info("loaded post id=%s", record.id)
        return record

    async def save_draft(self) -> SaveOutcome:
        return await self._save(publish=False)

    async def publish(self) -> SaveOutcome:
        return await self._save(publish=True)

    async def _save(self, publish: bool) -> SaveOutcome:
        operation = "publish post" if publish else "save draft"
        if (busy := self._busy(operation)) is not None:
            return busy

        self._transition(WorkflowState.validating)
        errors = self.validate()
        if errors:
            error = ValidationError(errors)
            self._surface(error)
            self._transition(WorkflowState.failed)
            return SaveOutcome(WorkflowState.failed, error)

        submitted = self._store.fields.model_copy(deep=True)
        payload = submitted
        if publish and submitted.status != PostStatus.scheduled:
            payload = submitted.model_copy(update={"status": PostStatus.published})

        self._store.set_saving(True)
        self._transition(WorkflowState.saving)
        try:
            post_id = self._store.state.post_id
            if post_id is None:
                created = await self._repo.create_post(payload)
                post_id = created.id
                self._store.capture_id(post_id)
                LOGGER.info("created post id=%s", post_id)
            else:
                await self._repo.update_post(post_id, payload)
            if publish and payload.status == PostStatus.published:
                await self._repo.publish_post(post_id)

            if self._is_closed():
                return self._dropped(operation)
            self._transition(WorkflowState.reloading)
            record = await self._repo.get_post_by_id(post_id)
        except Exception as e:
            if self._is_closed():
                return self._dropped(operation)
            return self._fail(PersistenceError(operation, e))

        if self._is_closed():
            return self._dropped(operation)
        self._store.commit_saved(record, submitted=submitted, saved_at=_now())
        self._transition(WorkflowState.done)
        LOGGER.info("%s done id=%s slug=%s", operation, record.id, record.slug)
        return SaveOutcome(WorkflowState.done)

    async def unpublish(self) -> SaveOutcome:
        post_id = self._store.state.post_id
        if post_id is None:
            LOGGER.debug("unpublish skipped: post was never saved")
            return SaveOutcome(self._store.state.workflow, skipped=True)
        if (busy := self._busy("unpublish post")) is not None:
            return busy

        self._store.set_saving(True)
        self._transition(WorkflowState.saving)
        try:
            await self._repo.unpublish_post(post_id)
        except Exception as e:
            if self._is_closed():
                return self._dropped("unpublish post")
            return self._fail(PersistenceError("unpublish post", e))

        if self._is_closed():
            return self._dropped("unpublish post")
        self._store.mark_unpublished(saved_at=_now())
        self._transition(WorkflowState.done)
        LOGGER.info("unpublished post id=%s", post_id)
        return SaveOutcome(WorkflowState.done)
