# src/taskboard/core/store.py

from __future__ import annotations

import logging
from collections.abc import Callable

from .actions import Action
from .models import AppState, initial_state
from .reducer import transition

logger = logging.getLogger(__name__)

Listener = Callable[[AppState], None]


class Store:
    """
    State-plus-dispatch handle.

    Actions in, immutable AppState snapshots out. Constructed by the composition root
    and passed explicitly to whoever needs it; there is no module-level instance.

    dispatch() is synchronous: a transition is never observed half-applied.
    """

    def __init__(self, state: AppState | None = None) -> None:
        self._state = state if state is not None else initial_state()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, action: Action) -> AppState:
        prev = self._state
        nxt = transition(prev, action)
        if nxt is prev:
            logger.debug("dispatch %s -> no change", type(action).__name__)
            return prev

        self._state = nxt
        logger.debug("dispatch %s -> status=%s selected=%s", type(action).__name__, nxt.status, nxt.selected_board_id)

        for listener in list(self._listeners):
            try:
                listener(nxt)
            except Exception:
                logger.exception("Store listener failed after %s", type(action).__name__)
        return nxt

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
