"""
Observer tokens: the listeners registered by read-and-subscribe access.

An Observer stands for one consumer (a view, a widget, a reactive job) for its
whole lifetime. It wraps a zero-argument callback; the host decides what the
callback does (schedule a redraw, push to a queue, set a flag).

Lifecycle mirrors a mounted component:

    observer = store.observer(request_redraw)   # mount
    with observer:                              # one render pass
        price, set_price, _ = store.read_and_subscribe.cart.price()
    ...
    observer.close()                            # unmount

Within `with observer:` the observer is the *active* observer for its store.
read-and-subscribe access picks it up from a contextvars stack, so the code
doing the reads never passes it around explicitly.
"""

import contextvars
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, Generator, List, Optional, Tuple
import logging

if TYPE_CHECKING:
    from pathstore.store import PathStore

logger = logging.getLogger(__name__)

# Observers activated in the current context, outermost first
_active_observers: contextvars.ContextVar[Tuple['Observer', ...]] = contextvars.ContextVar(
    'pathstore_active_observers', default=()
)


class Observer:
    """Stable per-consumer listener token.

    Each path is subscribed at most once per observer, and close() releases
    every subscription exactly once. Equality is identity, so two observers
    sharing one callback are still two listeners.
    """

    def __init__(self, store: 'PathStore', callback: Callable[[], None]):
        self._store = store
        self._callback = callback
        self._paths: List[str] = []
        self._closed = False
        self._tokens: List[contextvars.Token] = []

    @property
    def store(self) -> 'PathStore':
        return self._store

    @property
    def paths(self) -> Tuple[str, ...]:
        """Notification paths this observer is subscribed to."""
        return tuple(self._paths)

    @property
    def closed(self) -> bool:
        return self._closed

    def __call__(self) -> None:
        if not self._closed:
            self._callback()

    def watch(self, path: str) -> bool:
        """Subscribe to a notification path for the rest of this observer's life.

        Returns:
            True if newly subscribed, False if already watching or closed
        """
        if self._closed:
            logger.debug(f"Ignoring watch({path!r}) on closed observer")
            return False
        if path in self._paths:
            return False
        self._store.subscriptions.subscribe(path, self)
        self._paths.append(path)
        return True

    def close(self) -> None:
        """Unsubscribe from every watched path. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        for path in self._paths:
            self._store.subscriptions.unsubscribe(path, self)
        logger.debug(f"Closed observer after watching {len(self._paths)} path(s)")
        self._paths.clear()

    # ========== ACTIVATION ==========

    def __enter__(self) -> 'Observer':
        self._tokens.append(_active_observers.set(_active_observers.get() + (self,)))
        return self

    def __exit__(self, *exc_info: Any) -> None:
        _active_observers.reset(self._tokens.pop())


def active_observer(store: 'PathStore') -> Optional[Observer]:
    """Innermost active observer bound to store, or None."""
    for observer in reversed(_active_observers.get()):
        if observer.store is store and not observer.closed:
            return observer
    return None


@contextmanager
def observing(store: 'PathStore', callback: Callable[[], None]) -> Generator[Observer, None, None]:
    """Create an observer, keep it active for the block, close it on exit."""
    observer = Observer(store, callback)
    try:
        with observer:
            yield observer
    finally:
        observer.close()
