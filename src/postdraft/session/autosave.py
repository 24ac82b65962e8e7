"""Autosave: one save per quiet period after the form settles while dirty"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from postdraft.session.debounce import Debouncer
from postdraft.session.state import StoreEvent
from postdraft.session.store import DraftStore


LOGGER = logging.getLogger("postdraft.autosave")


class AutosaveScheduler:
    """Arm a save timer whenever (debounced form snapshot, is_dirty, is_saving) changes.

    Every change of the watched tuple cancels the pending timer; it is re-armed
    only when the draft is dirty and no save is in flight. A burst of edits
    therefore produces a single save. A failed save leaves the tuple as
    (snapshot, dirty, not saving), which re-arms exactly one more window.
    """

    def __init__(
        self,
        store: DraftStore,
        trigger: Callable[[], Awaitable[Any]],
        form_delay: float = 1.0,
        interval: float = 30.0,
        enabled: bool = True,
        ):
        self._store = store
        self._trigger = trigger
        self.enabled = enabled
        self._form = Debouncer(form_delay, self._on_snapshot, initial=store.fields.model_copy(deep=True))
        self._timer = Debouncer(interval, self._fire, distinct=False)
        self._watched: Optional[tuple] = None
        self._task: Optional[asyncio.Task] = None
        self._unsubscribe = store.subscribe(self._on_event)

    @property
    def armed(self) -> bool:
        return self._timer.pending

    @property
    def task(self) -> Optional[asyncio.Task]:
        """The most recently started autosave, if any."""
        return self._task

    def _on_event(self, event: StoreEvent) -> None:
        if not self.enabled:
            return
        if event.kind in ("field", "derived"):
            self._form.push(self._store.fields.model_copy(deep=True))
        elif event.kind == "baseline":
            self._form.rebase(self._store.fields.model_copy(deep=True))
        self._reconcile()

    def _on_snapshot(self, _snapshot) -> None:
        self._reconcile()

    def _reconcile(self) -> None:
        state = self._store.state
        watched = (self._form.value, state.is_dirty, state.is_saving)
        if watched == self._watched:
            return
        self._watched = watched
        self._timer.cancel()
        if state.is_dirty and not state.is_saving:
            self._timer.push(watched)

    def _fire(self, _watched) -> None:
        LOGGER.debug("autosave window elapsed; saving draft")
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        try:
            outcome = await self._trigger()
        except Exception:
            LOGGER.exception("autosave failed unexpectedly")
            return
        if getattr(outcome, "error", None) is not None:
            LOGGER.debug("autosave did not complete: %s", outcome.error)

    def close(self) -> None:
        self._form.cancel()
        self._timer.cancel()
        self._unsubscribe()
