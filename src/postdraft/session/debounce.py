"""Trailing-edge value debouncing on the running asyncio loop"""

import asyncio
from typing import Callable, Generic, Optional, TypeVar


T = TypeVar("T")

_UNSET = object()


class Debouncer(Generic[T]):
    """Propagate a rapidly changing value only once it has been stable for `delay` seconds.

    Each push cancels the pending timer and re-arms it, so only the last value
    of a burst reaches the callback; intermediate values are dropped, never
    queued. With distinct=True a value equal to the last propagated one is
    not propagated again. At most one timer handle is outstanding.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[T], None],
        initial: T = _UNSET,
        distinct: bool = True,
        ):
        self.delay = max(0.0, delay)
        self._callback = callback
        self._distinct = distinct
        self._last = initial
        self._pending = _UNSET
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def value(self) -> Optional[T]:
        """Last propagated value (or the rebased/initial one), None if there is none yet."""
        return None if self._last is _UNSET else self._last

    def push(self, value: T) -> None:
        self.cancel()
        self._pending = value
        self._handle = asyncio.get_running_loop().call_later(self.delay, self._fire)

    def rebase(self, value: T) -> None:
        """Drop any pending value and treat `value` as already propagated."""
        self.cancel()
        self._last = value

    def flush(self) -> None:
        """Propagate the pending value now, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._fire()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._pending = _UNSET

    def _fire(self) -> None:
        self._handle = None
        value, self._pending = self._pending, _UNSET
        if value is _UNSET:
            return
        if self._distinct and self._last is not _UNSET and value == self._last:
            return
        self._last = value
        self._callback(value)
