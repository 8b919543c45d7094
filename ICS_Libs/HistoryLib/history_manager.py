"""
Bounded linear undo/redo history.

The host application routes every mutation of the editable document through
a HistoryManager. History is linear: committing a new value after an undo
discards the redo branch.

Classes:
    HistoryState: Immutable past/present/future snapshot
    HistorySnapshot: Value returned by every history operation
    HistoryManager: Thread-safe owner of a HistoryState

Example:
    >>> history = HistoryManager(create_initial_card())
    >>> history.push(replace(history.present, name="Ada"))
    >>> history.undo().can_redo
    True
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Generic, Tuple, TypeVar

import numpy as np

from ICS_Libs.constants import MAX_HISTORY

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class HistoryState(Generic[T]):
    """Past entries (oldest first), the present value, and the redo stack (next first)."""
    present: T
    past: Tuple[T, ...] = field(default_factory=tuple)
    future: Tuple[T, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class HistorySnapshot(Generic[T]):
    present: T
    can_undo: bool
    can_redo: bool


class HistoryManager(Generic[T]):
    """
    Owner of the document history for one editing session.

    Values must compare by value (dataclasses, tuples, dicts, numpy arrays):
    pushing a value equal to the present is a no-op. Values whose equality
    cannot be decided as a single truth value are always treated as changes.
    Operations never raise; undo and redo on an empty stack do nothing.

    Each operation runs under a lock, so concurrent callers are serialized.
    """

    def __init__(self, initial: T, max_history: int = MAX_HISTORY):
        if max_history < 1:
            raise ValueError(f"max_history must be >= 1, got {max_history}")
        self.max_history = int(max_history)
        self._state: HistoryState[T] = HistoryState(present=initial)
        self._lock = threading.RLock()

    @property
    def state(self) -> HistoryState[T]:
        return self._state

    @property
    def present(self) -> T:
        return self._state.present

    @property
    def can_undo(self) -> bool:
        return bool(self._state.past)

    @property
    def can_redo(self) -> bool:
        return bool(self._state.future)

    def snapshot(self) -> HistorySnapshot[T]:
        state = self._state
        return HistorySnapshot(
            present=state.present,
            can_undo=bool(state.past),
            can_redo=bool(state.future),
        )

    @staticmethod
    def _same(a: T, b: T) -> bool:
        # Arrays compare elementwise; anything whose == is not a plain truth
        # value counts as a change
        if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
            return (
                isinstance(a, np.ndarray)
                and isinstance(b, np.ndarray)
                and bool(np.array_equal(a, b))
            )
        try:
            return bool(a == b)
        except (TypeError, ValueError):
            return False

    def _trim(self, past: Tuple[T, ...]) -> Tuple[T, ...]:
        if len(past) > self.max_history:
            dropped = len(past) - self.max_history
            logger.debug(f"History full, evicting {dropped} oldest entr{'ies' if dropped != 1 else 'y'}")
            return past[dropped:]
        return past

    def push(self, value: T) -> HistorySnapshot[T]:
        """
        Commit a new present value.

        A value equal to the current present leaves the history untouched.
        Otherwise the old present moves onto the past (evicting the oldest
        entry beyond max_history) and the redo stack is cleared.
        """
        with self._lock:
            state = self._state
            if self._same(value, state.present):
                return self.snapshot()

            self._state = HistoryState(
                present=value,
                past=self._trim(state.past + (state.present,)),
                future=(),
            )
            logger.debug(f"History push: {len(self._state.past)} undo step(s) available")
            return self.snapshot()

    def apply(self, updater: Callable[[T], T]) -> HistorySnapshot[T]:
        """Push the result of updater(present)."""
        with self._lock:
            return self.push(updater(self._state.present))

    def undo(self) -> HistorySnapshot[T]:
        """Step back one entry; no-op when there is nothing to undo."""
        with self._lock:
            state = self._state
            if not state.past:
                return self.snapshot()

            self._state = HistoryState(
                present=state.past[-1],
                past=state.past[:-1],
                future=(state.present,) + state.future,
            )
            return self.snapshot()

    def redo(self) -> HistorySnapshot[T]:
        """Step forward one entry; no-op when there is nothing to redo."""
        with self._lock:
            state = self._state
            if not state.future:
                return self.snapshot()

            self._state = HistoryState(
                present=state.future[0],
                past=self._trim(state.past + (state.present,)),
                future=state.future[1:],
            )
            return self.snapshot()

    def reset(self, value: T) -> HistorySnapshot[T]:
        """Start a fresh history with `value` as the present."""
        with self._lock:
            self._state = HistoryState(present=value)
            logger.debug("History reset")
            return self.snapshot()
