"""Dispatch loop around the session reducer.

RefactorStore owns the current session state and applies actions one at a
time. The orchestration layer dispatches actions and subscribes to state
changes; renderers subscribe to redraw.

Usage:
    store = RefactorStore()
    unsubscribe = store.subscribe(lambda state, action: render(state))
    store.dispatch(open_session("generic"))
"""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable
from typing import Any

from refactorizer.config.schema import Config, StoreConfig
from refactorizer.errors import RefactorInvariantError
from refactorizer.logging import TRACE, VERBOSE, get_logger
from refactorizer.reducer import reduce
from refactorizer.snapshot import state_to_dict
from refactorizer.state import ClosedState, RefactorState, describe_state

log = get_logger("store")

Subscriber = Callable[[RefactorState, Any], None]


class RefactorStore:
    """Serializes actions through ``reduce`` and notifies subscribers.

    Dispatches from several threads are applied one after another. A
    dispatch made from inside a subscriber callback is queued and applied
    once the current action has finished notifying, so subscribers always
    observe states in the order they were produced.

    Attributes:
        state: Current session state
    """

    def __init__(
        self,
        state: RefactorState | None = None,
        config: Config | None = None,
    ) -> None:
        store_config = config.store if config else StoreConfig()
        self._state: RefactorState = state if state is not None else ClosedState()
        self._log_transitions = store_config.log_transitions
        self._history: deque[tuple[Any, RefactorState]] | None = (
            deque(maxlen=store_config.history_limit) if store_config.history_limit else None
        )
        self._subscribers: list[Subscriber] = []
        self._pending: deque[Any] = deque()
        self._dispatching = False
        self._lock = threading.RLock()

    @property
    def state(self) -> RefactorState:
        return self._state

    @property
    def history(self) -> list[tuple[Any, RefactorState]]:
        """Recent ``(action, resulting state)`` pairs, oldest first."""
        with self._lock:
            return list(self._history) if self._history is not None else []

    def dispatch(self, action: Any) -> RefactorState:
        """Apply an action and return the state after it.

        When called from a subscriber during another dispatch, the action is
        queued and the current state is returned immediately.

        Raises:
            RefactorInvariantError: If the action is invalid for the current
                state. The state is left unchanged and queued actions are
                dropped.
        """
        with self._lock:
            self._pending.append(action)
            if self._dispatching:
                return self._state

            self._dispatching = True
            try:
                while self._pending:
                    self._apply(self._pending.popleft())
            finally:
                self._dispatching = False
                self._pending.clear()
            return self._state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback(state, action)`` for every state change.

        Returns:
            A function that unregisters the callback.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def reset(self) -> None:
        """Return to a closed session and forget history. Subscribers are kept."""
        with self._lock:
            self._state = ClosedState()
            self._pending.clear()
            if self._history is not None:
                self._history.clear()

    def _apply(self, action: Any) -> None:
        previous = self._state
        action_type = getattr(action, "type", None)

        if getattr(action, "error", False):
            log.warning(
                "Ignoring failed %s action: %s", action_type, getattr(action, "message", "")
            )
            return

        try:
            current = reduce(previous, action)
        except RefactorInvariantError as e:
            log.error("Rejected %s in state %s: %s", action_type, describe_state(previous), e)
            raise

        if current is previous:
            return

        self._state = current
        if self._history is not None:
            self._history.append((action, current))

        if self._log_transitions:
            log.log(
                VERBOSE, "%s: %s -> %s", action_type, describe_state(previous),
                describe_state(current),
            )
            if log.isEnabledFor(TRACE):
                log.log(TRACE, "state: %s", state_to_dict(current))

        for callback in list(self._subscribers):
            try:
                callback(current, action)
            except Exception:
                log.exception("Subscriber %r failed on %s", callback, action_type)
